"""Exporters that turn scanned WGS containers into ordinary save files.

Submodules:
    base: ExportResults and the Exporter base class
    generic: GenericExporter, mirrors containers as folders
    hollow_knight: HollowKnightExporter, rebuilds the Steam save layout

Add new game exporters to PACKAGE_EXPORTER_MAP, keyed by package family name.
"""

from .base import Exporter, ExportResults
from .generic import GenericExporter
from .hollow_knight import HollowKnightExporter

GENERIC_EXPORTER = GenericExporter()
HOLLOW_KNIGHT_EXPORTER = HollowKnightExporter()

PACKAGE_EXPORTER_MAP: dict[str, Exporter] = {
    "TeamCherry.HollowKnightSilksong_y4jvztpgccj42": HOLLOW_KNIGHT_EXPORTER,  # Hollow Knight: Silksong
    "TeamCherry.15373CD61C66B_y4jvztpgccj42": HOLLOW_KNIGHT_EXPORTER,  # Hollow Knight
}


def get_exporter(package_name: str) -> Exporter:
    """Get the exporter for a package.

    Args:
        package_name: Package family name

    Returns:
        The package's exporter, or the generic exporter if none is registered
    """
    return PACKAGE_EXPORTER_MAP.get(package_name, GENERIC_EXPORTER)


def has_exporter(package_name: str) -> bool:
    """Check whether a game-specific exporter is registered for a package."""
    return package_name in PACKAGE_EXPORTER_MAP


__all__ = [
    "Exporter",
    "ExportResults",
    "GenericExporter",
    "HollowKnightExporter",
    "GENERIC_EXPORTER",
    "HOLLOW_KNIGHT_EXPORTER",
    "PACKAGE_EXPORTER_MAP",
    "get_exporter",
    "has_exporter",
]

"""Generic exporter: mirrors the container structure on disk.

Each container becomes a folder named after its display name, and each
file is written under its stored filename.
"""

from pathlib import Path
from typing import Optional

from ..config.path_validator import sanitize_filename
from ..core.package_scanner import PackageScan
from ..logging_config import get_logger
from .base import Exporter, ExportResults

logger = get_logger("exporters.generic")


class GenericExporter(Exporter):
    """Export files as they are found in the container structure."""

    name = "Generic"
    color = "#ffc107"

    def export(self, scan: PackageScan, destination: Path,
               results: Optional[ExportResults] = None) -> ExportResults:
        results = results or ExportResults()
        destination = Path(destination)

        for container in scan.containers:
            container_name = container.display_name

            if not container.has_files:
                results.add_skipped(container_name, "No file data")
                continue

            container_dest = destination / sanitize_filename(container_name)

            for scanned_file in container.files:
                filename = scanned_file.filename
                if not filename:
                    results.add_skipped(container_name, "Missing filename", file="(no name)")
                    continue

                if not scanned_file.exists:
                    results.add_error(filename, "File not found in source")
                    continue

                dest_path = container_dest / sanitize_filename(filename)
                try:
                    self.copy_file(scanned_file.path, dest_path, destination)
                except OSError as e:
                    logger.warning("Failed to export %s: %s", filename, e)
                    results.add_error(filename, str(e))
                    continue

                results.add_exported(container_name, filename, dest_path, destination)

        logger.info("Generic export to %s finished. %s", destination, results.summary())
        return results

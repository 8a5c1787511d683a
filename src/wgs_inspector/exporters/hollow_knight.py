"""Hollow Knight / Hollow Knight: Silksong exporter.

Rebuilds the Steam save folder layout from the Game Pass containers:

    shareddata          -> shared.dat (wrapped with the save codec)
    restoreN / user*    -> <dest>/user*
    restoreN / other    -> <dest>/Restore_PointsN/<file>
    save*               -> <dest>/<file>

Any other container is skipped.
"""

from pathlib import Path
from typing import Optional

from ..config.path_validator import sanitize_filename
from ..core.package_scanner import PackageScan, ScannedFile
from ..core.save_codec import SaveCodecError, encode_save, is_encoded
from ..logging_config import get_logger
from .base import Exporter, ExportResults

logger = get_logger("exporters.hollow_knight")

SHARED_DATA_CONTAINER = "shareddata"
SHARED_DATA_FILENAME = "shared.dat"
RESTORE_PREFIX = "restore"
SAVE_PREFIX = "save"
USER_FILE_PREFIX = "user"
RESTORE_POINTS_DIR = "Restore_Points"


class HollowKnightExporter(Exporter):
    """Export Game Pass Hollow Knight saves into the Steam file layout."""

    name = "Hollow Knight / Hollow Knight: Silksong (Steam)"
    color = "#c678dd"

    def export(self, scan: PackageScan, destination: Path,
               results: Optional[ExportResults] = None) -> ExportResults:
        results = results or ExportResults()
        destination = Path(destination)

        if not scan.containers:
            results.add_error("N/A", "No containers found in scan data")
            return results

        for container in scan.containers:
            container_name = container.display_name.lower()

            if not container.has_files:
                results.add_skipped(container_name, "No file data")
                continue

            for scanned_file in container.files:
                filename = scanned_file.filename
                if not filename:
                    continue

                if not scanned_file.exists:
                    results.add_error(filename, "File not found")
                    continue

                if container_name == SHARED_DATA_CONTAINER:
                    self._export_shared_data(container_name, scanned_file, destination, results)
                    continue

                dest_path = self._destination_for(container_name, filename, destination)
                if dest_path is None:
                    results.add_skipped(container_name, "Unknown container type", file=filename)
                    continue

                try:
                    self.copy_file(scanned_file.path, dest_path, destination)
                except OSError as e:
                    logger.warning("Failed to export %s: %s", filename, e)
                    results.add_error(filename, str(e))
                    continue

                results.add_exported(container_name, filename, dest_path, destination)

        logger.info("Hollow Knight export to %s finished. %s", destination, results.summary())
        return results

    @staticmethod
    def _destination_for(container_name: str, filename: str, destination: Path) -> Optional[Path]:
        """Work out where a file from a restore or save container belongs."""
        safe_name = sanitize_filename(filename)

        if container_name.startswith(RESTORE_PREFIX):
            if filename.startswith(USER_FILE_PREFIX):
                return destination / safe_name
            restore_number = container_name[len(RESTORE_PREFIX):]
            restore_dir = RESTORE_POINTS_DIR + (sanitize_filename(restore_number) if restore_number else "")
            return destination / restore_dir / safe_name

        if container_name.startswith(SAVE_PREFIX):
            return destination / safe_name

        return None

    def _export_shared_data(self, container_name: str, scanned_file: ScannedFile,
                            destination: Path, results: ExportResults) -> None:
        """Write shared.dat, wrapping raw JSON in the game's save envelope."""
        dest_path = destination / SHARED_DATA_FILENAME

        try:
            content = scanned_file.path.read_bytes()
            if is_encoded(content):
                self.copy_file(scanned_file.path, dest_path, destination)
            else:
                payload = encode_save(content.decode("utf-8"))
                self.write_file(payload, dest_path, destination)
        except (OSError, UnicodeDecodeError, SaveCodecError) as e:
            logger.warning("Failed to export shared data %s: %s", scanned_file.filename, e)
            results.add_error(scanned_file.filename, str(e))
            return

        results.add_exported(container_name, SHARED_DATA_FILENAME, dest_path, destination)

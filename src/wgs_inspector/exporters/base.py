"""Shared result types and base class for exporters"""

import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from ..config.path_validator import is_path_under_root
from ..core.package_scanner import PackageScan


@dataclass
class ExportedFile:
    container: str
    file: str
    path: Path
    relative_path: str


@dataclass
class SkippedItem:
    container: str
    reason: str
    file: Optional[str] = None


@dataclass
class ExportError:
    file: str
    reason: str


@dataclass
class ExportResults:
    """Outcome of an export run, filled in by an exporter."""
    exported: list[ExportedFile] = field(default_factory=list)
    skipped: list[SkippedItem] = field(default_factory=list)
    errors: list[ExportError] = field(default_factory=list)

    def add_exported(self, container: str, file: str, path: Path, destination: Path) -> None:
        try:
            relative = str(path.relative_to(destination))
        except ValueError:
            relative = str(path)
        self.exported.append(ExportedFile(container=container, file=file, path=path, relative_path=relative))

    def add_skipped(self, container: str, reason: str, file: Optional[str] = None) -> None:
        self.skipped.append(SkippedItem(container=container, reason=reason, file=file))

    def add_error(self, file: str, reason: str) -> None:
        self.errors.append(ExportError(file=file, reason=reason))

    def summary(self) -> str:
        return (
            f"Exported: {len(self.exported)}, "
            f"Skipped: {len(self.skipped)}, "
            f"Errors: {len(self.errors)}"
        )


class Exporter:
    """Base class for package exporters.

    Subclasses implement :meth:`export`, which copies (and where needed
    converts) the scanned files into a destination directory.
    """

    name = "Exporter"
    color = "#1f538d"

    def export(self, scan: PackageScan, destination: Path,
               results: Optional[ExportResults] = None) -> ExportResults:
        raise NotImplementedError

    @staticmethod
    def _check_target(destination: Path, root: Optional[Path]) -> None:
        if root is not None and not is_path_under_root(destination, root):
            raise PermissionError(f"Refusing to write outside export folder: {destination}")

    def copy_file(self, source: Path, destination: Path, root: Optional[Path] = None) -> None:
        """Copy a payload file, creating parent folders.

        Args:
            source: File to copy
            destination: Target file path
            root: If given, destination must resolve inside this folder

        Raises:
            PermissionError: If destination escapes root
        """
        self._check_target(destination, root)
        destination.parent.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(source, destination)

    def write_file(self, data: bytes, destination: Path, root: Optional[Path] = None) -> None:
        self._check_target(destination, root)
        destination.parent.mkdir(parents=True, exist_ok=True)
        destination.write_bytes(data)

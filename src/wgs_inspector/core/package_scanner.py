"""Discovery of WGS packages and their container directories on disk.

Directory layout for a package::

    %LOCALAPPDATA%/Packages/<PackageFamilyName>/SystemAppData/wgs/
        t/                              (ignored)
        <user folder>/
            containers.index
            <CONTAINER GUID>/           (hyphens removed, uppercase)
                container.<N>           (file table)
                <FILE GUID>             (payload, one per file)
"""

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Optional

from ..config.paths import WgsPaths
from ..config.schema import ScanLimits
from ..logging_config import get_logger
from .binary_reader import guid_to_folder_name
from .container_parser import ContainerFileRecord, ContainerFileTable, parse_container_file
from .index_parser import ContainerRecord, IndexHeader, parse_container_index

logger = get_logger("package_scanner")

CONTAINER_FILE_PREFIX = "container."


@dataclass
class WgsPackage:
    """A package directory that holds a containers.index file."""
    package_name: str  # Package family name (directory name)
    display_name: str
    index_path: Path
    wgs_folder: str
    container_count: int = 0
    timestamp: Optional[datetime] = None
    error: Optional[str] = None


@dataclass
class ScannedFile:
    """A file table entry resolved against the container directory."""
    record: ContainerFileRecord
    disk_name: Optional[str]
    path: Optional[Path]
    size: int = 0

    @property
    def filename(self) -> Optional[str]:
        return self.record.filename

    @property
    def exists(self) -> bool:
        return self.path is not None and self.path.is_file()


@dataclass
class ScannedContainer:
    """A container record with its on-disk directory and file table."""
    record: ContainerRecord
    folder_name: str
    directory: Path
    container_file: Optional[Path] = None
    file_table: Optional[ContainerFileTable] = None
    files: list[ScannedFile] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def display_name(self) -> str:
        return self.record.display_name

    @property
    def has_files(self) -> bool:
        return self.file_table is not None and self.file_table.files is not None

    @property
    def file_count(self) -> int:
        return self.file_table.file_count if self.file_table else 0


@dataclass
class PackageScan:
    """Full scan of one package's containers."""
    index_path: Path
    base_path: Path
    header: Optional[IndexHeader]
    containers: list[ScannedContainer] = field(default_factory=list)

    @property
    def package_name(self) -> Optional[str]:
        return self.header.package_name if self.header else None


def find_wgs_folder(package_dir: Path) -> Optional[Path]:
    """Find the WGS user folder of a package (the first one not named 't').

    Args:
        package_dir: Path to a package directory

    Returns:
        Path to the folder containing containers.index, or None
    """
    wgs_path = WgsPaths.wgs_root(package_dir)
    if not wgs_path.is_dir():
        return None

    try:
        candidates = sorted(p for p in wgs_path.iterdir() if p.is_dir())
    except OSError as e:
        logger.warning("Could not list WGS folder %s: %s", wgs_path, e)
        return None

    for folder in candidates:
        if folder.name != WgsPaths.IGNORED_WGS_FOLDER:
            return folder
    return None


def find_wgs_packages(packages_root: Optional[Path] = None,
                      limits: Optional[ScanLimits] = None) -> list[WgsPackage]:
    """Find every package under the packages root that has WGS save data.

    Args:
        packages_root: Directory holding package folders, defaults to WgsPaths.PACKAGES_DIR
        limits: Optional scan limits for index parsing

    Returns:
        List of WgsPackage sorted by package name

    Raises:
        FileNotFoundError: If the packages root does not exist
    """
    packages_root = packages_root or WgsPaths.PACKAGES_DIR
    if not packages_root.is_dir():
        raise FileNotFoundError(f"Packages directory not found: {packages_root}")

    packages = []
    for package_dir in sorted(packages_root.iterdir()):
        if not package_dir.is_dir():
            continue

        wgs_folder = find_wgs_folder(package_dir)
        if wgs_folder is None:
            continue

        index_path = wgs_folder / WgsPaths.INDEX_FILENAME
        if not index_path.is_file():
            continue

        try:
            index = parse_container_index(index_path.read_bytes(), limits)
        except OSError as e:
            logger.warning("Could not read %s: %s", index_path, e)
            packages.append(WgsPackage(
                package_name=package_dir.name,
                display_name=package_dir.name,
                index_path=index_path,
                wgs_folder=wgs_folder.name,
                error=f"Parse error: {e}",
            ))
            continue

        header = index.header
        packages.append(WgsPackage(
            package_name=package_dir.name,
            display_name=header.package_name if header else package_dir.name,
            index_path=index_path,
            wgs_folder=wgs_folder.name,
            container_count=header.container_count if header else 0,
            timestamp=header.timestamp if header else None,
        ))

    logger.info("Found %d package(s) with WGS data in %s", len(packages), packages_root)
    return packages


def find_container_file(container_dir: Path) -> Optional[Path]:
    """Find the container.N file table inside a container directory."""
    for entry in sorted(container_dir.iterdir()):
        if entry.is_file() and entry.name.startswith(CONTAINER_FILE_PREFIX):
            return entry
    return None


def resolve_files(table: ContainerFileTable, container_dir: Path) -> list[ScannedFile]:
    """Attach on-disk names, paths and sizes to file table records."""
    resolved = []
    for record in table.files or []:
        disk_name = record.disk_name
        path = container_dir / disk_name if disk_name else None
        size = 0
        if path is not None and path.is_file():
            try:
                size = path.stat().st_size
            except OSError as e:
                logger.debug("Could not stat %s: %s", path, e)
        resolved.append(ScannedFile(record=record, disk_name=disk_name, path=path, size=size))
    return resolved


def scan_container(record: ContainerRecord, base_path: Path,
                   limits: Optional[ScanLimits] = None) -> ScannedContainer:
    """Locate and parse the file table of a single container.

    Missing directories or files are reported on the result rather than
    raised, so one broken container doesn't stop the rest of the scan.
    """
    folder_name = guid_to_folder_name(record.guid)
    container_dir = base_path / folder_name
    scanned = ScannedContainer(record=record, folder_name=folder_name, directory=container_dir)

    if not container_dir.is_dir():
        scanned.error = f"Folder not found: {folder_name}"
        return scanned

    try:
        container_file = find_container_file(container_dir)
        if container_file is None:
            scanned.error = "No container file found in directory"
            return scanned

        scanned.container_file = container_file
        table = parse_container_file(container_file.read_bytes(), limits)
    except OSError as e:
        logger.warning("Failed to read container %s: %s", folder_name, e)
        scanned.error = f"Failed to parse: {e}"
        return scanned

    scanned.file_table = table
    if table.error:
        scanned.error = table.error
    else:
        scanned.files = resolve_files(table, container_dir)

    return scanned


def scan_package(index_path: Path, limits: Optional[ScanLimits] = None) -> PackageScan:
    """Parse a containers.index and every container it lists.

    Args:
        index_path: Path to containers.index
        limits: Optional scan limits

    Returns:
        PackageScan with one ScannedContainer per recovered record

    Raises:
        OSError: If the index file cannot be read
    """
    index_path = Path(index_path)
    index = parse_container_index(index_path.read_bytes(), limits)
    base_path = index_path.resolve().parent

    containers = [scan_container(record, base_path, limits) for record in index.entries]
    failed = sum(1 for c in containers if c.error)
    logger.info(
        "Scanned %d container(s) in %s (%d with errors)",
        len(containers), index_path, failed,
    )

    return PackageScan(
        index_path=index_path,
        base_path=base_path,
        header=index.header,
        containers=containers,
    )


def format_size(num_bytes: int) -> str:
    """Format a byte count for display (e.g. '1.5 KB').

    Args:
        num_bytes: Size in bytes

    Returns:
        Human-readable size string
    """
    if num_bytes <= 0:
        return "0 B"
    size = float(num_bytes)
    for unit in ("B", "KB", "MB"):
        if size < 1024:
            return f"{round(size, 2):g} {unit}"
        size /= 1024
    return f"{round(size, 2):g} GB"

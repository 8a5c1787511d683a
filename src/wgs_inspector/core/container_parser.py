"""Parser for per-container ``container.N`` file tables.

Layout::

    u32     version
    u32     file count
    repeated file count times:
        128 bytes   filename, UTF-16LE, NUL-terminated
        GUID        file GUID (name of the payload file on disk)
        GUID        duplicate GUID

The declared file count is not checked against the buffer length.
"""

from dataclasses import dataclass
from typing import Optional

from ..config.schema import ScanLimits
from ..logging_config import get_logger
from .binary_reader import GUID_SIZE, ByteReader, guid_to_folder_name

logger = get_logger("container_parser")

HEADER_SIZE = 8


@dataclass(frozen=True)
class ContainerFileRecord:
    """One file listed in a container file table."""
    filename: Optional[str]
    guid: Optional[str]
    guid_duplicate: Optional[str]

    @property
    def disk_name(self) -> Optional[str]:
        """Name of the payload file inside the container directory."""
        return guid_to_folder_name(self.guid) if self.guid else None


@dataclass(frozen=True)
class ContainerFileTable:
    """Result of parsing a container file table.

    ``files`` is None when ``error`` is set; a corrupt table yields no
    records at all.
    """
    version: Optional[int]
    file_count: int
    total_size: int
    files: Optional[list[ContainerFileRecord]] = None
    error: Optional[str] = None

    @property
    def is_valid(self) -> bool:
        return self.error is None and self.files is not None


def parse_container_file(data: bytes, limits: Optional[ScanLimits] = None) -> ContainerFileTable:
    """Decode a container file table.

    Each filename occupies a fixed slot. The name is read up to the first
    NUL code unit; if no NUL appears within the slot the terminator search
    carries on past it, and a run longer than ``max_filename_chars`` marks
    the whole table as corrupt.

    Args:
        data: Raw contents of a container.N file
        limits: Optional scan limits, defaults to ScanLimits()

    Returns:
        ContainerFileTable with either ``files`` or ``error`` populated
    """
    limits = limits or ScanLimits()
    reader = ByteReader(data)

    if len(reader) < HEADER_SIZE:
        return ContainerFileTable(
            version=None,
            file_count=0,
            total_size=len(reader),
            error="File too small",
        )

    version, offset = reader.try_read_u32(0)
    file_count, offset = reader.try_read_u32(offset)

    slot_units = limits.filename_slot_bytes // 2
    files = []

    for index in range(file_count):
        entry_start = offset
        if entry_start >= len(reader):
            logger.warning(
                "Container file table declares %d files but data ends after %d",
                file_count, index,
            )
            break

        chars = []
        position = entry_start
        while True:
            code_unit, position = reader.try_read_u16(position)
            if code_unit is None or code_unit == 0:
                break
            chars.append(chr(code_unit))
            if len(chars) > limits.max_filename_chars:
                logger.warning(
                    "Container file table corrupt: filename %d exceeds %d characters",
                    index + 1, limits.max_filename_chars,
                )
                return ContainerFileTable(
                    version=version,
                    file_count=file_count,
                    total_size=len(reader),
                    error=f"Filename {index + 1} too long - possibly corrupt data",
                )

        filename = "".join(chars[:slot_units])
        offset = entry_start + limits.filename_slot_bytes

        guid = None
        guid_duplicate = None
        if reader.has_bytes(offset, GUID_SIZE * 2):
            guid, offset = reader.try_read_guid(offset)
            guid_duplicate, offset = reader.try_read_guid(offset)

        files.append(ContainerFileRecord(
            filename=filename or None,
            guid=guid,
            guid_duplicate=guid_duplicate,
        ))

    return ContainerFileTable(
        version=version,
        file_count=file_count,
        total_size=len(reader),
        files=files,
    )

"""Parser for WGS ``containers.index`` files.

The index starts with a fixed header::

    u32     version
    u32     container count
    u32     unknown
    str16   package name (u32 length prefix, UTF-16LE)
    u64     last-modified FILETIME
    u32     secondary count
    str16   container id (optional)

It is followed by one record per container. The record layout differs
between producers and the section is not self-delimiting, so records are
recovered by trying the record grammar at every byte offset:

    str16   display name
    <variant-specific fields ending in an identifier string starting "0x">
    u8      sequence number
    4 bytes reserved
    GUID    container GUID

Two variants are known. Silksong repeats the display name before the
identifier; Hollow Knight pads with four zero bytes instead.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional

from ..config.schema import ScanLimits
from ..logging_config import get_logger
from .binary_reader import ByteReader, filetime_to_datetime

logger = get_logger("index_parser")

IDENTIFIER_PREFIXES = ("0x", '"0x')


class RecordVariant(Enum):
    """Known container record layouts, in the order they must be tried."""
    WITH_DUPLICATE_NAME = "duplicate_name"
    WITH_PADDING = "padding"


@dataclass(frozen=True)
class IndexHeader:
    """Fixed fields at the start of a containers.index file."""
    version: int
    container_count: int
    unknown_field: int
    package_name: str
    raw_timestamp: int  # FILETIME as stored
    timestamp: Optional[datetime]  # None if outside the datetime range
    second_count: int
    container_id: Optional[str] = None


@dataclass(frozen=True)
class ContainerRecord:
    """A container entry recovered from the index."""
    offset: int  # Where the record was found (diagnostic only)
    display_name: str
    identifier: str  # Always starts with "0x"
    sequence_number: int
    guid: str
    variant: RecordVariant = RecordVariant.WITH_DUPLICATE_NAME


@dataclass(frozen=True)
class ContainerIndex:
    """Everything recovered from one index buffer."""
    header: Optional[IndexHeader]
    entries: list[ContainerRecord] = field(default_factory=list)


class ContainerIndexParser:
    """Decodes the header and scans container records from an index buffer."""

    def __init__(self, data: bytes, limits: Optional[ScanLimits] = None):
        self.reader = ByteReader(data)
        self.limits = limits or ScanLimits()

    def parse(self) -> ContainerIndex:
        """Parse the header and recover all container records."""
        header = self.parse_header()
        if header is None:
            logger.debug("No valid header in %d byte index", len(self.reader))

        entries = self.scan_entries()
        logger.debug("Recovered %d container record(s)", len(entries))
        return ContainerIndex(header=header, entries=entries)

    def parse_header(self) -> Optional[IndexHeader]:
        """Decode the fixed header fields.

        Returns:
            IndexHeader, or None if any required field is unreadable. A
            missing trailing container id is tolerated.
        """
        reader = self.reader
        offset = 0

        version, offset = reader.try_read_u32(offset)
        if version is None:
            return None

        container_count, offset = reader.try_read_u32(offset)
        if container_count is None:
            return None

        unknown, offset = reader.try_read_u32(offset)
        if unknown is None:
            return None

        package_name, offset = reader.try_read_utf16(offset, self.limits.package_name_units)
        if package_name is None:
            return None

        raw_timestamp, offset = reader.try_read_u64(offset)
        if raw_timestamp is None:
            return None
        timestamp = filetime_to_datetime(raw_timestamp)
        if timestamp is None:
            logger.debug("Index timestamp 0x%x is out of range", raw_timestamp)

        second_count, offset = reader.try_read_u32(offset)
        if second_count is None:
            return None

        container_id, _ = reader.try_read_utf16(offset, self.limits.container_id_units)

        return IndexHeader(
            version=version,
            container_count=container_count,
            unknown_field=unknown,
            package_name=package_name,
            raw_timestamp=raw_timestamp,
            timestamp=timestamp,
            second_count=second_count,
            container_id=container_id,
        )

    def scan_entries(self) -> list[ContainerRecord]:
        """Try the record grammar at every offset and keep what parses.

        A brute-force sweep can rediscover a record inside the tail bytes of
        another, so results are deduplicated by GUID (lowest offset wins)
        and returned in offset order.
        """
        found = []
        last_candidate = len(self.reader) - self.limits.min_entry_tail
        for offset in range(0, last_candidate):
            record = self.parse_entry(offset)
            if record is not None:
                found.append(record)

        seen_guids = set()
        unique = []
        for record in sorted(found, key=lambda r: r.offset):
            if record.guid in seen_guids:
                logger.debug("Dropping duplicate of %s at offset 0x%x", record.guid, record.offset)
                continue
            seen_guids.add(record.guid)
            unique.append(record)

        return unique

    def parse_entry(self, offset: int) -> Optional[ContainerRecord]:
        """Attempt to parse one container record starting at ``offset``."""
        reader = self.reader

        display_name, position = reader.try_read_utf16(offset, self.limits.display_name_units)
        if not display_name:
            return None

        identifier = None
        variant = None
        for candidate in RecordVariant:
            identifier, after_identifier = self._try_variant(candidate, position)
            if identifier is not None:
                variant = candidate
                position = after_identifier
                break

        if identifier is None:
            return None

        sequence_number, _ = reader.try_read_u8(position)
        if sequence_number is None or not reader.has_bytes(position, 5):
            return None
        position += 5  # Sequence byte + 4 reserved bytes

        guid, _ = reader.try_read_guid(position)
        if guid is None:
            return None

        return ContainerRecord(
            offset=offset,
            display_name=display_name,
            identifier=identifier.replace('"', ""),
            sequence_number=sequence_number,
            guid=guid,
            variant=variant,
        )

    def _try_variant(self, variant: RecordVariant, offset: int) -> tuple[Optional[str], int]:
        if variant is RecordVariant.WITH_DUPLICATE_NAME:
            return self._try_duplicate_name_layout(offset)
        return self._try_padding_layout(offset)

    def _try_duplicate_name_layout(self, offset: int) -> tuple[Optional[str], int]:
        """display name, display name again, identifier (Silksong)."""
        duplicate, position = self.reader.try_read_utf16(offset, self.limits.display_name_units)
        if duplicate is None:
            return None, offset
        return self._try_identifier(position)

    def _try_padding_layout(self, offset: int) -> tuple[Optional[str], int]:
        """display name, optional 4 zero bytes, identifier (Hollow Knight)."""
        position = offset
        padding, after_padding = self.reader.try_read_u32(position)
        if padding == 0:
            position = after_padding
        return self._try_identifier(position)

    def _try_identifier(self, offset: int) -> tuple[Optional[str], int]:
        identifier, position = self.reader.try_read_utf16(offset, self.limits.display_name_units)
        if identifier is None or not identifier.startswith(IDENTIFIER_PREFIXES):
            return None, offset
        return identifier, position


def parse_container_index(data: bytes, limits: Optional[ScanLimits] = None) -> ContainerIndex:
    """Parse a containers.index buffer.

    Args:
        data: Raw index file contents
        limits: Optional scan limits, defaults to ScanLimits()

    Returns:
        ContainerIndex with the header (or None) and recovered records
    """
    return ContainerIndexParser(data, limits).parse()

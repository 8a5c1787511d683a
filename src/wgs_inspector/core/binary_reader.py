"""Bounds-checked primitive reads over WGS metadata buffers.

Every ``try_read_*`` method returns a ``(value, new_offset)`` pair. When the
read cannot be satisfied the value is ``None`` and the offset is returned
unchanged, so a caller sweeping the buffer can simply retry elsewhere.

GUIDs are stored in the Windows in-memory layout: the first three fields
(4, 2 and 2 bytes) are little-endian, the final 8 bytes are raw. This is the
same layout ``uuid.UUID(bytes_le=...)`` understands.
"""

import struct
import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional

# 100ns intervals between 1601-01-01 and 1970-01-01
FILETIME_EPOCH_DIFF = 116444736000000000
FILETIME_TICKS_PER_MS = 10000

GUID_SIZE = 16

_UNIX_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


class ByteReader:
    """Read-only cursorless view over a byte buffer.

    The reader holds no position of its own; offsets are passed in and
    returned by each call.
    """

    def __init__(self, data: bytes):
        self.data = bytes(data)

    def __len__(self) -> int:
        return len(self.data)

    def has_bytes(self, offset: int, count: int) -> bool:
        """Check whether ``count`` bytes are available at ``offset``."""
        return offset >= 0 and offset + count <= len(self.data)

    def try_read_u8(self, offset: int) -> tuple[Optional[int], int]:
        if not self.has_bytes(offset, 1):
            return None, offset
        return self.data[offset], offset + 1

    def try_read_u16(self, offset: int) -> tuple[Optional[int], int]:
        if not self.has_bytes(offset, 2):
            return None, offset
        return struct.unpack_from("<H", self.data, offset)[0], offset + 2

    def try_read_u32(self, offset: int) -> tuple[Optional[int], int]:
        if not self.has_bytes(offset, 4):
            return None, offset
        return struct.unpack_from("<I", self.data, offset)[0], offset + 4

    def try_read_u64(self, offset: int) -> tuple[Optional[int], int]:
        if not self.has_bytes(offset, 8):
            return None, offset
        return struct.unpack_from("<Q", self.data, offset)[0], offset + 8

    def try_read_utf16(self, offset: int, max_units: int = 512) -> tuple[Optional[str], int]:
        """Read a u32 length-prefixed UTF-16LE string.

        The prefix counts UTF-16 code units, not bytes. Embedded NUL code
        points are stripped from the result.

        Args:
            offset: Position of the length prefix
            max_units: Largest accepted length prefix

        Returns:
            Tuple of (string, offset past the string) or (None, offset)
        """
        length, after_length = self.try_read_u32(offset)
        if length is None or length <= 0 or length > max_units:
            return None, offset

        string_end = after_length + length * 2
        if string_end > len(self.data):
            return None, offset

        raw = self.data[after_length:string_end]
        text = raw.decode("utf-16-le", errors="replace").replace("\0", "")
        return text, string_end

    def try_read_guid(self, offset: int) -> tuple[Optional[str], int]:
        """Read a 16-byte GUID and render it in canonical uppercase form."""
        if not self.has_bytes(offset, GUID_SIZE):
            return None, offset
        return guid_from_bytes(self.data[offset:offset + GUID_SIZE]), offset + GUID_SIZE


def guid_from_bytes(raw: bytes) -> str:
    """Render 16 little-endian GUID bytes as ``XXXXXXXX-XXXX-XXXX-XXXX-XXXXXXXXXXXX``."""
    return str(uuid.UUID(bytes_le=bytes(raw))).upper()


def guid_to_bytes(guid: str) -> bytes:
    """Inverse of :func:`guid_from_bytes`."""
    return uuid.UUID(guid).bytes_le


def guid_to_folder_name(guid: str) -> str:
    """On-disk directory or file name for a GUID (hyphens removed, uppercase).

    Example:
        >>> guid_to_folder_name("0a1b2c3d-4e5f-6071-8293-a4b5c6d7e8f9")
        '0A1B2C3D4E5F60718293A4B5C6D7E8F9'
    """
    return guid.replace("-", "").upper()


def filetime_to_datetime(filetime: int) -> Optional[datetime]:
    """Convert a Windows FILETIME to an aware UTC datetime.

    The conversion works in whole milliseconds, truncating toward zero.

    Args:
        filetime: 100ns ticks since 1601-01-01

    Returns:
        The corresponding instant, or None if it cannot be represented
    """
    ticks = filetime - FILETIME_EPOCH_DIFF
    if ticks < 0:
        milliseconds = -(-ticks // FILETIME_TICKS_PER_MS)
    else:
        milliseconds = ticks // FILETIME_TICKS_PER_MS

    try:
        return _UNIX_EPOCH + timedelta(milliseconds=milliseconds)
    except OverflowError:
        return None

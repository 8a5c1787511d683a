"""Tests for the bounds-checked primitive reader"""

from datetime import datetime, timezone

import pytest

from builders import FIXED_FILETIME, GUID_A, u32, u64, utf16
from wgs_inspector.core.binary_reader import (
    ByteReader,
    filetime_to_datetime,
    guid_from_bytes,
    guid_to_bytes,
    guid_to_folder_name,
)


class TestIntegerReads:
    def test_u32_reads_little_endian(self):
        reader = ByteReader(u32(0x12345678))
        assert reader.try_read_u32(0) == (0x12345678, 4)

    def test_u32_needs_four_bytes(self):
        reader = ByteReader(b"\x01\x02\x03")
        assert reader.try_read_u32(0) == (None, 0)

    def test_failed_read_keeps_offset(self):
        reader = ByteReader(bytes(10))
        assert reader.try_read_u64(5) == (None, 5)

    def test_u64_and_u8(self):
        reader = ByteReader(b"\x07" + u64(2 ** 40))
        assert reader.try_read_u8(0) == (7, 1)
        assert reader.try_read_u64(1) == (2 ** 40, 9)

    def test_negative_offset_is_out_of_bounds(self):
        assert ByteReader(bytes(8)).try_read_u32(-1) == (None, -1)


class TestStringReads:
    def test_reads_prefixed_string(self):
        data = utf16("Save1")
        assert ByteReader(data).try_read_utf16(0) == ("Save1", len(data))

    def test_zero_length_fails(self):
        assert ByteReader(u32(0) + bytes(8)).try_read_utf16(0) == (None, 0)

    def test_length_over_limit_fails(self):
        data = utf16("abcdef")
        assert ByteReader(data).try_read_utf16(0, max_units=5) == (None, 0)
        assert ByteReader(data).try_read_utf16(0, max_units=6)[0] == "abcdef"

    def test_truncated_string_fails(self):
        data = utf16("abcdef")[:-1]
        assert ByteReader(data).try_read_utf16(0) == (None, 0)

    def test_embedded_nuls_are_stripped(self):
        data = u32(4) + "a\0b\0".encode("utf-16-le")
        text, offset = ByteReader(data).try_read_utf16(0)
        assert text == "ab"
        assert offset == 12

    def test_lone_surrogate_does_not_raise(self):
        data = u32(1) + b"\x00\xd8"
        text, _ = ByteReader(data).try_read_utf16(0)
        assert text == "\ufffd"


class TestGuids:
    def test_renders_windows_byte_order(self):
        assert guid_from_bytes(bytes(range(16))) == GUID_A

    def test_round_trip(self):
        raw = bytes.fromhex("78563412cdab01ef0123456789abcdef")
        text = guid_from_bytes(raw)
        assert text == "12345678-ABCD-EF01-0123-456789ABCDEF"
        assert guid_to_bytes(text) == raw

    def test_read_guid_bounds(self):
        reader = ByteReader(bytes(range(16)))
        assert reader.try_read_guid(0) == (GUID_A, 16)
        assert reader.try_read_guid(1) == (None, 1)

    def test_folder_name(self):
        assert guid_to_folder_name(GUID_A) == "030201000504070608090A0B0C0D0E0F"
        assert guid_to_folder_name("0a1b2c3d-4e5f-6071-8293-a4b5c6d7e8f9") == "0A1B2C3D4E5F60718293A4B5C6D7E8F9"


class TestFiletime:
    def test_converts_known_instant(self):
        assert filetime_to_datetime(FIXED_FILETIME) == datetime(2023, 1, 1, tzinfo=timezone.utc)

    def test_unix_epoch(self):
        assert filetime_to_datetime(116444736000000000) == datetime(1970, 1, 1, tzinfo=timezone.utc)

    def test_sub_millisecond_ticks_truncate(self):
        result = filetime_to_datetime(116444736000000000 + 19999)
        assert result == datetime(1970, 1, 1, 0, 0, 0, 1000, tzinfo=timezone.utc)

    def test_before_unix_epoch_truncates_toward_zero(self):
        result = filetime_to_datetime(116444736000000000 - 19999)
        assert result == datetime(1969, 12, 31, 23, 59, 59, 999000, tzinfo=timezone.utc)

    @pytest.mark.parametrize("value", [2 ** 64 - 1, 2 ** 63])
    def test_unrepresentable_returns_none(self, value):
        assert filetime_to_datetime(value) is None

    def test_filetime_zero_is_1601(self):
        assert filetime_to_datetime(0) == datetime(1601, 1, 1, tzinfo=timezone.utc)

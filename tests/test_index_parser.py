"""Tests for containers.index header parsing and record scanning"""

import logging
from datetime import datetime, timezone

import pytest

from builders import (
    FIXED_FILETIME, GUID_A, GUID_B, GUID_C,
    duplicate_name_record, index_header, padding_record, record_tail, u32, utf16,
)
from wgs_inspector.config.schema import ScanLimits
from wgs_inspector.core.index_parser import (
    ContainerIndexParser,
    RecordVariant,
    parse_container_index,
)


class TestHeader:
    def test_reads_all_fields(self):
        index = parse_container_index(index_header(version=14, count=3, unknown=7, second_count=2))
        header = index.header

        assert header.version == 14
        assert header.container_count == 3
        assert header.unknown_field == 7
        assert header.package_name == "Pkg"
        assert header.timestamp == datetime(2023, 1, 1, tzinfo=timezone.utc)
        assert header.raw_timestamp == FIXED_FILETIME
        assert header.second_count == 2
        assert header.container_id == "ID"

    def test_missing_container_id_is_tolerated(self):
        header = parse_container_index(index_header(container_id=None)).header
        assert header is not None
        assert header.container_id is None

    def test_truncated_inside_package_name_has_no_header(self):
        data = index_header()
        # u32 x3, then the package name prefix and one of its three code units
        truncated = data[:12 + 4 + 2]
        assert parse_container_index(truncated).header is None

    def test_truncated_inside_timestamp_has_no_header(self):
        data = index_header(package_name="Pkg")
        truncated = data[:12 + 10 + 5]
        assert parse_container_index(truncated).header is None

    def test_truncated_before_second_count_has_no_header(self):
        data = index_header(package_name="Pkg")
        truncated = data[:12 + 10 + 8 + 2]
        assert parse_container_index(truncated).header is None

    def test_package_name_limit(self):
        data = index_header(package_name="x" * 257)
        assert parse_container_index(data).header is None

    @pytest.mark.parametrize("raw", [2 ** 64 - 1, 0x7FFFFFFFFFFFFFFF, 3 * 10 ** 18])
    def test_unrepresentable_timestamp_keeps_header(self, raw):
        header = parse_container_index(index_header(count=4, timestamp=raw)).header

        assert header is not None
        assert header.raw_timestamp == raw
        assert header.timestamp is None
        assert header.container_count == 4
        assert header.second_count == 0
        assert header.container_id == "ID"

    def test_out_of_range_timestamp_is_logged(self, caplog):
        caplog.set_level(logging.DEBUG, logger="wgs_inspector")
        parse_container_index(index_header(timestamp=2 ** 64 - 1))
        assert "Index timestamp 0xffffffffffffffff is out of range" in caplog.text

    def test_empty_buffer(self):
        index = parse_container_index(b"")
        assert index.header is None
        assert index.entries == []


class TestScanner:
    def test_single_duplicate_name_record(self):
        data = index_header() + duplicate_name_record("Save1", "0x1", GUID_A, seq=0)
        index = parse_container_index(data)

        assert len(index.entries) == 1
        record = index.entries[0]
        assert record.display_name == "Save1"
        assert record.identifier == "0x1"
        assert record.sequence_number == 0
        assert record.guid == GUID_A
        assert record.variant is RecordVariant.WITH_DUPLICATE_NAME
        assert record.offset == len(index_header())

    def test_padding_record_with_quoted_identifier(self):
        data = index_header() + padding_record("restore2", '"0x2A"', GUID_B, seq=3)
        entries = parse_container_index(data).entries

        assert len(entries) == 1
        assert entries[0].display_name == "restore2"
        assert entries[0].identifier == "0x2A"
        assert entries[0].sequence_number == 3
        assert entries[0].variant is RecordVariant.WITH_PADDING

    def test_records_in_offset_order(self):
        data = (
            index_header(count=3)
            + duplicate_name_record("shareddata", "0x1", GUID_A)
            + padding_record("restore1", "0x2", GUID_B)
            + duplicate_name_record("save1", "0x3", GUID_C)
        )
        entries = parse_container_index(data).entries

        assert [e.display_name for e in entries] == ["shareddata", "restore1", "save1"]
        assert [e.guid for e in entries] == [GUID_A, GUID_B, GUID_C]
        assert entries == sorted(entries, key=lambda e: e.offset)

    def test_duplicate_name_layout_is_tried_first(self):
        # The repeated name also starts with "0x", so the padding layout
        # would read it as the identifier
        header = index_header(container_id=None)
        data = header + duplicate_name_record("0xA", "0x1", GUID_A, seq=2, dup="0xA")
        record = parse_container_index(data).entries[0]

        assert record.offset == len(header)
        assert record.display_name == "0xA"
        assert record.identifier == "0x1"
        assert record.sequence_number == 2
        assert record.guid == GUID_A
        assert record.variant is RecordVariant.WITH_DUPLICATE_NAME

    def test_duplicate_guid_keeps_lowest_offset(self):
        data = (
            index_header(count=2)
            + duplicate_name_record("first", "0x1", GUID_A)
            + duplicate_name_record("second", "0x2", GUID_A)
        )
        entries = parse_container_index(data).entries

        assert len(entries) == 1
        assert entries[0].display_name == "first"

    def test_nul_only_duplicate_name_is_accepted(self):
        data = index_header() + duplicate_name_record("Save1", "0x1", GUID_A, dup="\0\0")
        entries = parse_container_index(data).entries
        assert [e.display_name for e in entries] == ["Save1"]

    def test_identifier_must_start_with_0x(self):
        data = index_header() + duplicate_name_record("Save1", "1x1", GUID_A)
        assert parse_container_index(data).entries == []

    def test_short_buffer_has_no_entries(self):
        # A complete record without the trailing fields is only 59 bytes
        record = duplicate_name_record("Save1", "0x1", GUID_A)[:-len(record_tail())]
        assert len(record) < 64
        assert parse_container_index(record).entries == []

    def test_record_needs_guid(self):
        # Long names keep the record start inside the scan window
        name = "n" * 60
        data = index_header() + utf16(name) + utf16(name) + utf16("0x1") + bytes(5) + bytes(10)
        assert len(index_header()) < len(data) - 64
        assert parse_container_index(data).entries == []

    def test_headerless_buffer_still_scans(self):
        data = u32(0xFFFFFFFF) + duplicate_name_record("Save1", "0x1", GUID_A)
        index = parse_container_index(data)
        assert index.header is None
        assert [e.guid for e in index.entries] == [GUID_A]

    def test_display_name_limit_is_configurable(self):
        data = index_header() + duplicate_name_record("LongName", "0x1", GUID_A)
        limits = ScanLimits(display_name_units=4)
        assert ContainerIndexParser(data, limits).scan_entries() == []

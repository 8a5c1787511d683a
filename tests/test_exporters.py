"""Tests for the generic and Hollow Knight exporters"""

from pathlib import Path

import pytest

from builders import (
    GUID_A, GUID_B, GUID_C, HOLLOW_KNIGHT_PACKAGE, SAVE_FILE_GUID, SHARED_FILE_GUID,
    USER_FILE_GUID, duplicate_name_record, folder_name, index_header, write_container,
)
from wgs_inspector.core.package_scanner import PackageScan, scan_package
from wgs_inspector.core.save_codec import decode_save, encode_save, is_encoded
from wgs_inspector.exporters import (
    GENERIC_EXPORTER,
    HOLLOW_KNIGHT_EXPORTER,
    ExportResults,
    get_exporter,
    has_exporter,
)


def _scan_custom(tmp_path: Path, containers: list[tuple[str, str, dict]]) -> PackageScan:
    """Write an index plus containers and scan it.

    Args:
        containers: (display name, container GUID, files) triples
    """
    base = tmp_path / "wgs"
    base.mkdir()
    index = index_header(count=len(containers))
    for i, (name, guid, files) in enumerate(containers, start=1):
        index += duplicate_name_record(name, f"0x{i}", guid)
        write_container(base, guid, files)
    (base / "containers.index").write_bytes(index)
    return scan_package(base / "containers.index")


class TestRegistry:
    @pytest.mark.parametrize("package", [
        "TeamCherry.HollowKnightSilksong_y4jvztpgccj42",
        "TeamCherry.15373CD61C66B_y4jvztpgccj42",
    ])
    def test_hollow_knight_packages(self, package):
        assert has_exporter(package)
        assert get_exporter(package) is HOLLOW_KNIGHT_EXPORTER

    def test_unknown_package_uses_generic(self):
        assert not has_exporter("Some.Other_game")
        assert get_exporter("Some.Other_game") is GENERIC_EXPORTER


class TestHollowKnightExporter:
    def test_exports_steam_layout(self, index_path, tmp_path):
        destination = tmp_path / "out"
        results = HOLLOW_KNIGHT_EXPORTER.export(scan_package(index_path), destination)

        assert results.errors == []
        assert results.skipped == []
        assert sorted(item.relative_path for item in results.exported) == sorted([
            "shared.dat",
            str(Path("Restore_Points1") / "restore_point.dat"),
            "user1.dat",
        ])

        shared = (destination / "shared.dat").read_bytes()
        assert is_encoded(shared)
        assert decode_save(shared) == '{"x":1}'
        assert (destination / "Restore_Points1" / "restore_point.dat").read_bytes() == b"restore-payload"
        assert (destination / "user1.dat").read_bytes() == b"save-payload"

    def test_already_encoded_shared_data_is_copied(self, index_path, tmp_path):
        encoded = encode_save('{"y":2}')
        (index_path.parent / folder_name(GUID_A) / folder_name(SHARED_FILE_GUID)).write_bytes(encoded)

        destination = tmp_path / "out"
        HOLLOW_KNIGHT_EXPORTER.export(scan_package(index_path), destination)
        assert (destination / "shared.dat").read_bytes() == encoded

    def test_invalid_shared_data_is_an_error(self, index_path, tmp_path):
        (index_path.parent / folder_name(GUID_A) / folder_name(SHARED_FILE_GUID)).write_bytes(b"\xff\xfe\xfd")

        destination = tmp_path / "out"
        results = HOLLOW_KNIGHT_EXPORTER.export(scan_package(index_path), destination)

        assert [e.file for e in results.errors] == ["shared"]
        assert not (destination / "shared.dat").exists()
        assert len(results.exported) == 2

    def test_missing_payload_is_an_error(self, index_path, tmp_path):
        (index_path.parent / folder_name(GUID_C) / folder_name(SAVE_FILE_GUID)).unlink()
        results = HOLLOW_KNIGHT_EXPORTER.export(scan_package(index_path), tmp_path / "out")

        assert [(e.file, e.reason) for e in results.errors] == [("user1.dat", "File not found")]

    def test_restore_user_files_go_to_root(self, tmp_path):
        scan = _scan_custom(tmp_path, [
            ("Restore3", GUID_A, {"user3.dat": (USER_FILE_GUID, b"u3")}),
        ])
        destination = tmp_path / "out"
        results = HOLLOW_KNIGHT_EXPORTER.export(scan, destination)

        assert results.exported[0].container == "restore3"
        assert (destination / "user3.dat").read_bytes() == b"u3"

    def test_unknown_container_is_skipped(self, tmp_path):
        scan = _scan_custom(tmp_path, [
            ("options", GUID_B, {"options.dat": (USER_FILE_GUID, b"opts")}),
        ])
        results = HOLLOW_KNIGHT_EXPORTER.export(scan, tmp_path / "out")

        assert len(results.skipped) == 1
        skipped = results.skipped[0]
        assert (skipped.container, skipped.file, skipped.reason) == ("options", "options.dat", "Unknown container type")
        assert results.exported == []

    def test_container_without_files_is_skipped(self, index_path, tmp_path):
        (index_path.parent / folder_name(GUID_B) / "container.1").unlink()
        results = HOLLOW_KNIGHT_EXPORTER.export(scan_package(index_path), tmp_path / "out")

        assert [(s.container, s.reason) for s in results.skipped] == [("restore1", "No file data")]

    def test_empty_scan(self, tmp_path):
        scan = PackageScan(index_path=tmp_path / "containers.index", base_path=tmp_path, header=None)
        results = HOLLOW_KNIGHT_EXPORTER.export(scan, tmp_path / "out")

        assert [(e.file, e.reason) for e in results.errors] == [("N/A", "No containers found in scan data")]


class TestGenericExporter:
    def test_mirrors_containers(self, index_path, tmp_path):
        destination = tmp_path / "out"
        results = GENERIC_EXPORTER.export(scan_package(index_path), destination)

        assert results.summary() == "Exported: 3, Skipped: 0, Errors: 0"
        assert (destination / "shareddata" / "shared").read_bytes() == b'{"x":1}'
        assert (destination / "restore1" / "restore_point.dat").read_bytes() == b"restore-payload"
        assert (destination / "save1" / "user1.dat").read_bytes() == b"save-payload"

    def test_missing_payload_is_an_error(self, index_path, tmp_path):
        (index_path.parent / folder_name(GUID_B) / folder_name(USER_FILE_GUID)).unlink()
        results = GENERIC_EXPORTER.export(scan_package(index_path), tmp_path / "out")

        assert [(e.file, e.reason) for e in results.errors] == [("restore_point.dat", "File not found in source")]

    def test_nameless_file_is_skipped(self, tmp_path):
        scan = _scan_custom(tmp_path, [
            ("slot", GUID_C, {"": (SAVE_FILE_GUID, b"data")}),
        ])
        results = GENERIC_EXPORTER.export(scan, tmp_path / "out")

        assert [(s.container, s.file, s.reason) for s in results.skipped] == [("slot", "(no name)", "Missing filename")]

    def test_unsafe_names_are_sanitized(self, tmp_path):
        scan = _scan_custom(tmp_path, [
            ("a/b", GUID_A, {"c:d.sav": (SAVE_FILE_GUID, b"data")}),
        ])
        destination = tmp_path / "out"
        GENERIC_EXPORTER.export(scan, destination)

        assert (destination / "a_b" / "c_d.sav").read_bytes() == b"data"

    def test_results_accumulate(self, index_path, tmp_path):
        results = ExportResults()
        results.add_error("x", "earlier failure")
        GENERIC_EXPORTER.export(scan_package(index_path), tmp_path / "out", results)

        assert len(results.exported) == 3
        assert len(results.errors) == 1


def test_hollow_knight_package_fixture_name():
    assert has_exporter(HOLLOW_KNIGHT_PACKAGE)


class TestWriteContainment:
    def test_copy_outside_root_is_refused(self, tmp_path):
        source = tmp_path / "src.bin"
        source.write_bytes(b"data")
        root = tmp_path / "out"

        with pytest.raises(PermissionError):
            GENERIC_EXPORTER.copy_file(source, tmp_path / "elsewhere" / "src.bin", root)
        assert not (tmp_path / "elsewhere").exists()

    def test_write_inside_root(self, tmp_path):
        root = tmp_path / "out"
        GENERIC_EXPORTER.write_file(b"data", root / "a" / "b.bin", root)
        assert (root / "a" / "b.bin").read_bytes() == b"data"

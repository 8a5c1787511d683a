"""Tests for export path validation and filename sanitizing"""

import pytest

from wgs_inspector.config.path_validator import (
    MAX_FILENAME_LENGTH,
    is_path_under_root,
    sanitize_filename,
    validate_export_path,
)


class TestValidateExportPath:
    def test_accepts_new_directory(self, tmp_path):
        assert validate_export_path(tmp_path / "exports") == (True, "")

    def test_rejects_empty(self):
        assert validate_export_path(None) == (False, "Export path is empty")

    def test_rejects_traversal(self, tmp_path):
        valid, message = validate_export_path(tmp_path / ".." / "elsewhere")
        assert not valid
        assert message == "Path contains directory traversal"

    def test_rejects_existing_file(self, tmp_path):
        target = tmp_path / "file.txt"
        target.write_text("x")
        assert validate_export_path(target) == (False, "Export path is not a directory")

    def test_rejects_protected_directory(self, monkeypatch, tmp_path):
        protected = tmp_path / "Windows"
        protected.mkdir()
        monkeypatch.setenv("WINDIR", str(protected))

        valid, message = validate_export_path(protected / "exports")
        assert not valid
        assert message == "Path is in a protected system directory"

    def test_rejects_packages_folder(self, tmp_path):
        packages = tmp_path / "Packages"
        valid, message = validate_export_path(packages / "Some.Game_abc" / "out", packages)
        assert not valid
        assert message == "Path is inside the packages folder"

    def test_sibling_of_packages_folder(self, tmp_path):
        assert validate_export_path(tmp_path / "exports", tmp_path / "Packages") == (True, "")


def test_path_under_root(tmp_path):
    assert is_path_under_root(tmp_path / "a" / "b", tmp_path)
    assert is_path_under_root(tmp_path, tmp_path)
    assert not is_path_under_root(tmp_path.parent, tmp_path)


@pytest.mark.parametrize("name, expected", [
    ("user1.dat", "user1.dat"),
    ("a/b\\c", "a_b_c"),
    ('x:y*z?"<>|', "x_y_z_____"),
    ("  .hidden. ", "hidden"),
    ("...", "unnamed"),
    ("", "unnamed"),
    ("con", "_con"),
    ("NUL.dat", "_NUL.dat"),
    ("tab\tname", "tab_name"),
])
def test_sanitize_filename(name, expected):
    assert sanitize_filename(name) == expected


def test_sanitize_truncates():
    assert len(sanitize_filename("n" * 500)) == MAX_FILENAME_LENGTH

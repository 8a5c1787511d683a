"""Shared fixtures: a synthetic Packages folder with WGS save data."""

from pathlib import Path

import pytest

from builders import (
    GUID_A, GUID_B, GUID_C, HOLLOW_KNIGHT_PACKAGE, SAVE_FILE_GUID, SHARED_FILE_GUID,
    USER_FILE_GUID, WGS_USER_FOLDER,
    duplicate_name_record, index_header, write_container,
)


@pytest.fixture
def packages_root(tmp_path) -> Path:
    """Packages folder holding one Hollow Knight package and one unrelated app.

    Containers: shareddata (raw JSON), restore1 (restore_point.dat), save1 (user1.dat).
    """
    root = tmp_path / "Packages"
    wgs = root / HOLLOW_KNIGHT_PACKAGE / "SystemAppData" / "wgs"
    user_folder = wgs / WGS_USER_FOLDER
    user_folder.mkdir(parents=True)
    (wgs / "t").mkdir()

    index = (
        index_header(count=3, package_name="Hollow Knight")
        + duplicate_name_record("shareddata", "0x1", GUID_A)
        + duplicate_name_record("restore1", "0x2", GUID_B)
        + duplicate_name_record("save1", "0x3", GUID_C)
    )
    (user_folder / "containers.index").write_bytes(index)

    write_container(user_folder, GUID_A, {"shared": (SHARED_FILE_GUID, b'{"x":1}')})
    write_container(user_folder, GUID_B, {"restore_point.dat": (USER_FILE_GUID, b"restore-payload")})
    write_container(user_folder, GUID_C, {"user1.dat": (SAVE_FILE_GUID, b"save-payload")})

    # A package without WGS data is ignored
    (root / "Microsoft.WindowsCalculator_8wekyb3d8bbwe" / "LocalState").mkdir(parents=True)

    return root


@pytest.fixture
def index_path(packages_root) -> Path:
    return (
        packages_root / HOLLOW_KNIGHT_PACKAGE / "SystemAppData" / "wgs"
        / WGS_USER_FOLDER / "containers.index"
    )

"""Tests for icon drawing and asset lookup"""

import pytest

from wgs_inspector.assets import get_asset_path, load_icon_image
from wgs_inspector.assets.icon_generator import create_app_icon, generate_all_icons


@pytest.mark.parametrize("name", ["icons/gear.png", "icons/refresh.png", "icons/export.png"])
def test_missing_toolbar_icons_are_drawn(name):
    image = load_icon_image(name, size=24)
    assert image.mode == "RGBA"
    if not get_asset_path(name).exists():
        assert image.size == (24, 24)


def test_unknown_icon():
    assert load_icon_image("icons/does_not_exist.png") is None


def test_app_icon_is_not_blank():
    image = create_app_icon(64)
    assert image.size == (64, 64)
    assert image.getbbox() is not None


def test_generate_all_icons(tmp_path):
    written = generate_all_icons(tmp_path)
    assert sorted(p.name for p in written) == [
        "app_icon.ico", "app_icon.png", "export.png", "gear.png", "refresh.png",
    ]
    assert all(p.stat().st_size > 0 for p in written)

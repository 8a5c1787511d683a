"""Asset loading utilities for icons and images.

This module handles loading assets in both development and packaged (PyInstaller) modes.

Submodules:
    loader: get_asset_path() function for resolving asset paths
    icon_generator: Draws the application icons with Pillow (run with python -m
                    to write them to disk)

Asset Directory Structure:
    assets/
        icons/
            gear.png      - Settings button icon
            refresh.png   - Rescan packages icon
            export.png    - Export action icon
            app_icon.png  - Application icon (256x256)
            app_icon.ico  - Windows application icon (multi-size)

Icons missing on disk are drawn in memory by icon_generator instead.
"""

from .loader import get_asset_path, load_icon_image

__all__ = [
    "get_asset_path",
    "load_icon_image",
]

"""Asset loading utilities for both development and packaged modes"""

import sys
from pathlib import Path
from typing import Callable, Optional

from PIL import Image

from ..logging_config import get_logger
from . import icon_generator

logger = get_logger("assets")

# Icon file name -> function that draws it when the file is missing
_GENERATED_ICONS: dict[str, Callable[[int], Image.Image]] = {
    **{f"icons/{name}": draw for name, draw in icon_generator.ICON_FILES.items()},
    "icons/app_icon.png": icon_generator.create_app_icon,
}


def get_asset_path(relative_path: str) -> Path:
    """Get the correct path for assets, works in both dev and packaged modes.

    Args:
        relative_path: Path relative to the assets directory (e.g., "icons/gear.png")

    Returns:
        Absolute path to the asset file
    """
    if getattr(sys, 'frozen', False):
        # Running as compiled executable (PyInstaller)
        base_path = Path(sys._MEIPASS) / "assets"
    else:
        # Running in development
        base_path = Path(__file__).parent

    return base_path / relative_path


def load_icon_image(relative_path: str, size: int = 32) -> Optional[Image.Image]:
    """Load an icon from disk, drawing it with Pillow if the file is absent.

    Args:
        relative_path: Path relative to the assets directory
        size: Pixel size used when the icon has to be drawn

    Returns:
        RGBA image, or None if the icon is unknown and not on disk
    """
    icon_path = get_asset_path(relative_path)
    if icon_path.exists():
        try:
            with Image.open(icon_path) as image:
                return image.convert("RGBA")
        except (OSError, ValueError) as e:
            logger.debug("Could not read icon %s: %s", icon_path, e)

    draw = _GENERATED_ICONS.get(relative_path)
    return draw(size) if draw else None

"""Pillow drawings for the toolbar and window icons.

The PNG/ICO files under ``assets/icons`` are optional; the loader draws
any icon that is missing. To write them out for a frozen build::

    python -m wgs_inspector.assets.icon_generator
"""

import math
from pathlib import Path

from PIL import Image, ImageDraw

# Icons are drawn this many times larger, then downsampled for smooth edges
SUPERSAMPLE = 4

GRAY = (110, 110, 110, 255)
GREEN = (70, 170, 90, 255)
BLUE = (70, 130, 180, 255)
NAVY = (40, 80, 130, 255)
WHITE = (245, 245, 245, 255)
LIGHT = (190, 205, 220, 255)


def _canvas(size: int) -> tuple[Image.Image, ImageDraw.ImageDraw, int]:
    scaled = size * SUPERSAMPLE
    image = Image.new("RGBA", (scaled, scaled), (0, 0, 0, 0))
    return image, ImageDraw.Draw(image), scaled


def _finish(image: Image.Image, size: int) -> Image.Image:
    return image.resize((size, size), Image.Resampling.LANCZOS)


def create_gear_icon(size: int = 32, teeth: int = 8) -> Image.Image:
    """Settings gear: a toothed ring with a transparent hub."""
    image, draw, s = _canvas(size)
    c = s / 2
    outer, root, hub = s * 0.46, s * 0.34, s * 0.15

    points = []
    for i in range(teeth * 4):
        # Each tooth is four corners: root, tip, tip, root
        angle = 2 * math.pi * i / (teeth * 4)
        radius = outer if i % 4 in (1, 2) else root
        points.append((c + radius * math.cos(angle), c + radius * math.sin(angle)))
    draw.polygon(points, fill=GRAY)
    draw.ellipse([c - hub, c - hub, c + hub, c + hub], fill=(0, 0, 0, 0))

    return _finish(image, size)


def create_refresh_icon(size: int = 32) -> Image.Image:
    """Rescan: a three-quarter ring ending in an arrowhead."""
    image, draw, s = _canvas(size)
    c = s / 2
    radius = s * 0.36
    width = max(int(s * 0.1), 1)

    draw.arc([c - radius, c - radius, c + radius, c + radius], start=-60, end=230, fill=GREEN, width=width)

    # Arrowhead at the open end of the ring (angle -60 degrees)
    tip_angle = math.radians(-60)
    ex, ey = c + radius * math.cos(tip_angle), c + radius * math.sin(tip_angle)
    head = s * 0.14
    draw.polygon([(ex - head, ey - head * 0.2), (ex + head * 0.9, ey - head * 0.6), (ex + head * 0.3, ey + head)], fill=GREEN)

    return _finish(image, size)


def create_export_icon(size: int = 32) -> Image.Image:
    """Export: an open tray with an arrow leaving it."""
    image, draw, s = _canvas(size)
    m = s * 0.14
    width = max(int(s * 0.08), 1)
    mid = s / 2

    draw.line([(m, mid), (m, s - m), (s - m, s - m), (s - m, mid)], fill=BLUE, width=width, joint="curve")
    draw.line([(mid, s - m * 2.4), (mid, m * 2)], fill=BLUE, width=width)
    draw.polygon([(mid, m * 0.6), (mid - m * 1.3, m * 2.3), (mid + m * 1.3, m * 2.3)], fill=BLUE)

    return _finish(image, size)


def create_app_icon(size: int = 256) -> Image.Image:
    """Application icon: three stacked save containers on a rounded tile."""
    image, draw, s = _canvas(size)
    draw.rounded_rectangle([s * 0.04, s * 0.04, s * 0.96, s * 0.96], radius=s * 0.18, fill=NAVY)

    left, right = s * 0.22, s * 0.78
    slab, gap = s * 0.15, s * 0.045
    top = (s - (slab * 3 + gap * 2)) / 2
    for i in range(3):
        y = top + i * (slab + gap)
        draw.rounded_rectangle([left, y, right, y + slab], radius=s * 0.03, fill=WHITE)
        # Label strip and status light
        draw.rectangle([left + s * 0.06, y + slab * 0.4, left + s * 0.3, y + slab * 0.6], fill=LIGHT)
        light = slab * 0.18
        lx, ly = right - s * 0.08, y + slab / 2
        draw.ellipse([lx - light, ly - light, lx + light, ly + light], fill=GREEN)

    return _finish(image, size)


ICON_FILES = {
    "gear.png": create_gear_icon,
    "refresh.png": create_refresh_icon,
    "export.png": create_export_icon,
}

ICO_SIZES = [(16, 16), (32, 32), (48, 48), (256, 256)]


def generate_all_icons(output_dir: Path | None = None) -> list[Path]:
    """Write every icon to ``output_dir`` (default: ``assets/icons``)."""
    output_dir = output_dir or Path(__file__).parent / "icons"
    output_dir.mkdir(parents=True, exist_ok=True)

    written = []
    for name, draw_icon in ICON_FILES.items():
        draw_icon(32).save(output_dir / name)
        written.append(output_dir / name)

    app_icon = create_app_icon(256)
    app_icon.save(output_dir / "app_icon.png")
    app_icon.save(output_dir / "app_icon.ico", format="ICO", sizes=ICO_SIZES)
    written += [output_dir / "app_icon.png", output_dir / "app_icon.ico"]
    return written


if __name__ == "__main__":
    for path in generate_all_icons():
        print(f"wrote {path}")

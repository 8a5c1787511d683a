"""Theme constants shared by the main window and dialogs.

Colors map to what the inspector shows: green for healthy containers and
exported files, red for scan errors and missing payloads, yellow for
skipped items, gray for on-disk GUID names.
"""

UI_FAMILY = "Segoe UI"
MONO_FAMILY = "Consolas"

COLORS = {
    "primary": "#1f538d",
    "primary_hover": "#14375e",
    "success": "#2d8a4e",
    "success_hover": "#1e5c34",
    "danger": "#dc3545",
    "danger_hover": "#a71d2a",
    "warning": "#ffc107",
    "muted": "#6c757d",
}

# (family, size[, weight])
FONTS = {
    "title": (UI_FAMILY, 18, "bold"),
    "heading": (UI_FAMILY, 14, "bold"),
    "body": (UI_FAMILY, 12),
    "small": (UI_FAMILY, 10),
    "mono": (MONO_FAMILY, 10),  # GUID folder names and file table columns
}

PADDING = {
    "small": 10,
    "medium": 18,
    "large": 30,
}

# (width, height)
WINDOW_SIZES = {
    "main": (1100, 650),
    "min_main": (800, 500),
    "config_dialog": (700, 380),
    "export_dialog": (650, 360),
}

# Package and container list backgrounds, (light, dark)
PANE_COLOR = ("#3d3d3d", "#1a1a1a")

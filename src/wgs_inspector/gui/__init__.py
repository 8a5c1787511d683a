"""GUI module using CustomTkinter for a modern interface.

This module provides all user interface components for the application.

Components:
    MainWindow: Package list on the left; containers of the selected package,
                with their files, on the right

    ExportDialog: Pick an exporter and destination, run the export, show results

    ConfigDialog: Settings dialog for the packages folder and export location

Submodules:
    styles: Theme constants (colors, fonts, padding, window sizes)
    widgets: Reusable widget components (PathSelector)
"""

from .main_window import MainWindow
from .config_dialog import ConfigDialog
from .export_dialog import ExportDialog

__all__ = [
    "MainWindow",
    "ConfigDialog",
    "ExportDialog",
]

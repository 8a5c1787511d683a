"""Application entry point"""

import sys
import tkinter as tk
from tkinter import messagebox

import customtkinter as ctk

from . import __version__
from .config.manager import ConfigurationManager
from .config.paths import WgsPaths
from .gui.main_window import MainWindow
from .logging_config import get_logger, setup_logging

logger = get_logger("app")


class WgsInspectorApp:
    """Loads configuration and runs the main window."""

    def __init__(self, config_manager: ConfigurationManager | None = None):
        self.config_manager = config_manager or ConfigurationManager()
        self.main_window: MainWindow | None = None

    def prepare_configuration(self):
        """Load the saved configuration, writing defaults on first run."""
        if not self.config_manager.is_first_run():
            # is_first_run() has already loaded it
            return

        logger.info("First run, creating default configuration at %s", self.config_manager.config_path)
        config = self.config_manager.create_default()
        if not WgsPaths.PACKAGES_DIR.is_dir():
            logger.warning("Default packages folder %s does not exist", WgsPaths.PACKAGES_DIR)
        config.settings.first_run_complete = True
        try:
            self.config_manager.save()
        except OSError as e:
            # In-memory defaults still work for this session
            logger.warning("Could not save default configuration: %s", e)

    def run(self):
        ctk.set_appearance_mode("system")
        ctk.set_default_color_theme("blue")

        self.prepare_configuration()
        self.main_window = MainWindow(self.config_manager)
        self.main_window.mainloop()


def _show_startup_error(error: Exception):
    root = tk.Tk()
    root.withdraw()
    messagebox.showerror("Startup Error", f"WGS Inspector could not start:\n\n{error}")
    root.destroy()


def main():
    """Console/GUI script entry point. Pass ``--debug`` to log to stdout."""
    logger = setup_logging(debug="--debug" in sys.argv)
    logger.info("Starting WGS Inspector v%s", __version__)

    try:
        WgsInspectorApp().run()
    except Exception as e:
        logger.exception("Fatal error during startup")
        _show_startup_error(e)
        sys.exit(1)
    finally:
        logger.info("WGS Inspector shutting down")


if __name__ == "__main__":
    main()

"""Settings dialog: packages folder and default export folder"""

import customtkinter as ctk

from ..config.manager import ConfigurationManager
from ..config.paths import WgsPaths
from ..config.path_validator import validate_export_path
from ..logging_config import get_logger
from .styles import COLORS, FONTS, PADDING, WINDOW_SIZES
from .widgets.path_selector import PathSelector

logger = get_logger("config_dialog")


class ConfigDialog(ctk.CTkToplevel):
    """Modal settings window opened from the gear button.

    After it closes, ``config_changed`` tells the main window whether to
    rescan packages.
    """

    def __init__(self, parent, config_manager: ConfigurationManager):
        super().__init__(parent)

        self.config_manager = config_manager
        self.config_changed = False

        self.title("Settings")
        width, height = WINDOW_SIZES["config_dialog"]
        self.geometry(f"{width}x{height}")
        self.resizable(False, False)
        self.transient(parent)
        self.grab_set()

        self._build(self.config_manager.config.settings)
        self.focus_force()

    def _build(self, settings):
        body = ctk.CTkFrame(self)
        body.pack(fill="both", expand=True, padx=PADDING["large"], pady=PADDING["large"])

        ctk.CTkLabel(body, text="Settings", font=FONTS["title"]).pack(anchor="w")
        ctk.CTkLabel(
            body,
            text="Where Game Pass packages are read from and where exports are written",
            font=FONTS["body"],
            text_color="gray",
        ).pack(anchor="w", pady=(5, PADDING["medium"]))

        self.packages_selector = PathSelector(
            body,
            label="Packages Folder:",
            initial_path=settings.packages_root or WgsPaths.PACKAGES_DIR,
            dialog_title="Select Packages Folder",
            must_exist=True,
        )
        self.packages_selector.pack(fill="x", pady=PADDING["small"])

        self.export_selector = PathSelector(
            body,
            label="Export Folder:",
            initial_path=settings.export_location or WgsPaths.EXPORT_DEFAULT,
            dialog_title="Select Export Folder",
            validator=self._check_destination,
        )
        self.export_selector.pack(fill="x", pady=PADDING["small"])

        limits = self.config_manager.config.limits
        ctk.CTkLabel(
            body,
            text=(f"Scan limits: names {limits.display_name_units} units, "
                  f"filenames {limits.max_filename_chars} chars (edit configuration.xml to change)"),
            font=FONTS["small"],
            text_color=COLORS["muted"],
        ).pack(anchor="w", pady=(PADDING["small"], 0))

        self.error_label = ctk.CTkLabel(body, text="", font=FONTS["small"], text_color=COLORS["danger"])
        self.error_label.pack(anchor="w")

        buttons = ctk.CTkFrame(body, fg_color="transparent")
        buttons.pack(fill="x", side="bottom", pady=(PADDING["medium"], 0))

        ctk.CTkButton(
            buttons, text="Cancel", width=100, fg_color="transparent", border_width=1,
            text_color=("gray10", "gray90"), command=self.destroy,
        ).pack(side="left")
        ctk.CTkButton(
            buttons, text="Defaults", width=100, fg_color="transparent", border_width=1,
            text_color=("gray10", "gray90"), command=self._restore_defaults,
        ).pack(side="left", padx=(PADDING["small"], 0))
        ctk.CTkButton(buttons, text="Save", width=120, command=self._save_and_close).pack(side="right")

    def _check_destination(self, path):
        # Exports may not go into the packages folder chosen above
        return validate_export_path(path, self.packages_selector.get_path())

    def _restore_defaults(self):
        self.packages_selector.set_path(WgsPaths.PACKAGES_DIR)
        self.export_selector.set_path(WgsPaths.EXPORT_DEFAULT)
        self.error_label.configure(text="")

    def _save_and_close(self):
        if not self.packages_selector.validate():
            self.error_label.configure(text="Choose an existing packages folder")
            return
        export_location = self.export_selector.get_path()
        if export_location and not self.export_selector.validate():
            self.error_label.configure(text="Choose a valid export folder")
            return

        settings = self.config_manager.config.settings
        settings.packages_root = self.packages_selector.get_path()
        settings.export_location = export_location

        try:
            self.config_manager.save()
        except OSError as e:
            logger.error("Failed to save configuration: %s", e)
            self.error_label.configure(text=f"Could not save settings: {e}")
            return

        logger.info("Settings saved: packages %s, exports %s", settings.packages_root, export_location)
        self.config_changed = True
        self.destroy()

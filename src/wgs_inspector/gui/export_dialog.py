"""Export dialog: choose an exporter and destination, then run the export"""

from pathlib import Path

import customtkinter as ctk

from ..config.manager import ConfigurationManager
from ..config.paths import WgsPaths
from ..config.path_validator import validate_export_path
from ..core.package_scanner import PackageScan
from ..exporters import GENERIC_EXPORTER, get_exporter, has_exporter
from ..exporters.base import ExportResults
from ..logging_config import get_logger
from .styles import COLORS, FONTS, PADDING, WINDOW_SIZES
from .widgets.path_selector import PathSelector

logger = get_logger("export_dialog")

# Results lines shown before the list is cut off
MAX_RESULT_LINES = 12


class ExportDialog(ctk.CTkToplevel):
    """Modal dialog that exports one scanned package.

    The package's registered exporter is offered first when one exists;
    the generic exporter is always available.
    """

    def __init__(self, parent, scan: PackageScan, package_name: str,
                 config_manager: ConfigurationManager):
        super().__init__(parent)

        self.scan = scan
        self.package_name = package_name
        self.config_manager = config_manager
        self.results: ExportResults | None = None

        self.exporters = {GENERIC_EXPORTER.name: GENERIC_EXPORTER}
        if has_exporter(package_name):
            game_exporter = get_exporter(package_name)
            self.exporters = {game_exporter.name: game_exporter, **self.exporters}

        self.title("Export Saves")
        width, height = WINDOW_SIZES["export_dialog"]
        self.geometry(f"{width}x{height}")
        self.resizable(False, False)
        self.transient(parent)
        self.grab_set()

        self._create_ui()
        self.focus_force()

    def _create_ui(self):
        container = ctk.CTkFrame(self)
        container.pack(fill="both", expand=True, padx=PADDING["medium"], pady=PADDING["medium"])

        title = ctk.CTkLabel(container, text="Export Saves", font=FONTS["title"])
        title.pack(anchor="w", pady=(0, 5))

        subtitle = ctk.CTkLabel(
            container,
            text=f"{self.package_name} - {len(self.scan.containers)} container(s)",
            font=FONTS["small"],
            text_color="gray",
        )
        subtitle.pack(anchor="w", pady=(0, PADDING["small"]))

        exporter_row = ctk.CTkFrame(container, fg_color="transparent")
        exporter_row.pack(fill="x", pady=PADDING["small"])
        ctk.CTkLabel(exporter_row, text="Format:").pack(side="left", padx=(0, 10))
        names = list(self.exporters)
        self.exporter_var = ctk.StringVar(value=names[0])
        ctk.CTkOptionMenu(exporter_row, values=names, variable=self.exporter_var, width=320).pack(side="left")

        settings = self.config_manager.config.settings if self.config_manager.config else None
        initial = (settings.export_location if settings else None) or WgsPaths.EXPORT_DEFAULT
        self.destination_selector = PathSelector(
            container,
            label="Destination:",
            initial_path=Path(initial) / self.package_name,
            dialog_title="Select Export Folder",
            validator=self._check_destination,
        )
        self.destination_selector.pack(fill="x", pady=PADDING["small"])

        self.results_box = ctk.CTkTextbox(container, height=120, font=FONTS["mono"])
        self.results_box.pack(fill="both", expand=True, pady=PADDING["small"])
        self.results_box.configure(state="disabled")

        button_frame = ctk.CTkFrame(container, fg_color="transparent")
        button_frame.pack(fill="x", pady=(PADDING["small"], 0))

        self.close_btn = ctk.CTkButton(
            button_frame,
            text="Close",
            width=100,
            fg_color="transparent",
            border_width=1,
            text_color=("gray10", "gray90"),
            command=self.destroy,
        )
        self.close_btn.pack(side="left")

        self.export_btn = ctk.CTkButton(
            button_frame,
            text="Export",
            width=120,
            fg_color=COLORS["success"],
            hover_color=COLORS["success_hover"],
            command=self._on_export,
        )
        self.export_btn.pack(side="right")

    def _check_destination(self, path: Path) -> tuple[bool, str]:
        settings = self.config_manager.config.settings if self.config_manager.config else None
        packages_root = (settings.packages_root if settings else None) or WgsPaths.PACKAGES_DIR
        return validate_export_path(path, packages_root)

    def _show_text(self, text: str):
        self.results_box.configure(state="normal")
        self.results_box.delete("1.0", "end")
        self.results_box.insert("1.0", text)
        self.results_box.configure(state="disabled")

    def _on_export(self):
        """Validate the destination and run the selected exporter."""
        if not self.destination_selector.validate():
            self._show_text("Cannot export: choose a valid destination folder")
            return
        destination = self.destination_selector.get_path()

        exporter = self.exporters[self.exporter_var.get()]
        logger.info("Exporting %s with %s to %s", self.package_name, exporter.name, destination)

        self.destination_selector.set_enabled(False)
        self.export_btn.configure(state="disabled")
        try:
            self.results = exporter.export(self.scan, WgsPaths.ensure_export_dir(destination))
        except OSError as e:
            logger.error("Export failed: %s", e)
            self._show_text(f"Export failed: {e}")
            return
        finally:
            self.destination_selector.set_enabled(True)
            self.export_btn.configure(state="normal")

        self._show_text(self._format_results(self.results))

    @staticmethod
    def _format_results(results: ExportResults) -> str:
        """Render export results as a short report."""
        lines = [results.summary(), ""]
        for item in results.exported:
            lines.append(f"OK    {item.relative_path}")
        for item in results.skipped:
            target = f"{item.container}/{item.file}" if item.file else item.container
            lines.append(f"SKIP  {target}: {item.reason}")
        for item in results.errors:
            lines.append(f"ERROR {item.file}: {item.reason}")

        if len(lines) > MAX_RESULT_LINES + 2:
            hidden = len(lines) - MAX_RESULT_LINES - 2
            lines = lines[:MAX_RESULT_LINES + 2] + [f"... and {hidden} more"]
        return "\n".join(lines)

"""Main application window: package list on the left, container contents on the right."""

from typing import Optional
import tkinter as tk

import customtkinter as ctk
from PIL import ImageTk

from .. import __app_name__, __version__
from ..assets.icon_generator import create_app_icon
from ..assets.loader import load_icon_image
from ..config.manager import ConfigurationManager
from ..config.paths import WgsPaths
from ..config.schema import ScanLimits
from ..core.package_scanner import (
    PackageScan, ScannedContainer, ScannedFile, WgsPackage,
    find_wgs_packages, format_size, scan_package,
)
from ..exporters import get_exporter, has_exporter
from ..logging_config import get_logger
from .config_dialog import ConfigDialog
from .export_dialog import ExportDialog
from .styles import COLORS, FONTS, PADDING, PANE_COLOR, WINDOW_SIZES
from .widgets.tooltip import Tooltip

logger = get_logger("main_window")

SELECTED_ROW_COLOR = ("gray85", "gray25")
ROW_COLOR = ("gray95", "gray17")


class MainWindow(ctk.CTk):
    """Main application window.

    Layout:
    - Toolbar: title, version, Refresh, Export, Settings, About
    - Left pane: WGS packages found under the packages folder
    - Right pane: containers of the selected package, each followed by its files
    - Status bar
    """

    def __init__(self, config_manager: ConfigurationManager):
        super().__init__()

        self.config_manager = config_manager

        self.packages: list[WgsPackage] = []
        self.selected_package: Optional[WgsPackage] = None
        self.current_scan: Optional[PackageScan] = None
        self.package_rows: dict[str, ctk.CTkFrame] = {}

        # Window setup
        self.title(f"{__app_name__} v{__version__}")
        width, height = WINDOW_SIZES["main"]
        min_width, min_height = WINDOW_SIZES["min_main"]
        self.geometry(f"{width}x{height}")
        self.minsize(min_width, min_height)

        self._set_app_icon()
        self._create_ui()
        self._refresh_packages()

        self.protocol("WM_DELETE_WINDOW", self._on_close)

    @property
    def limits(self) -> ScanLimits:
        config = self.config_manager.config
        return config.limits if config else ScanLimits()

    def _set_app_icon(self):
        try:
            # Keep a reference, Tk does not hold one
            self._icon_photo = ImageTk.PhotoImage(create_app_icon(64))
            self.iconphoto(True, self._icon_photo)
        except (OSError, tk.TclError) as e:
            logger.debug("Could not set app icon: %s", e)

    def _load_icon(self, relative_path: str, size: tuple[int, int] = (24, 24)) -> Optional[ctk.CTkImage]:
        try:
            image = load_icon_image(relative_path, size=max(size))
            if image is not None:
                return ctk.CTkImage(light_image=image, dark_image=image, size=size)
        except (OSError, ValueError) as e:
            logger.debug("Could not load icon %s: %s", relative_path, e)
        return None

    # ------------------------------------------------------------------
    # Layout
    # ------------------------------------------------------------------

    def _create_ui(self):
        """Create the main UI layout."""
        self._create_toolbar()

        self.main_container = ctk.CTkFrame(self, fg_color="transparent")
        self.main_container.pack(fill="both", expand=True, padx=PADDING["medium"], pady=(0, PADDING["medium"]))

        self.main_container.grid_columnconfigure(0, weight=0, minsize=300)
        self.main_container.grid_columnconfigure(1, weight=1)
        self.main_container.grid_rowconfigure(0, weight=1)

        self._create_package_pane()
        self._create_container_pane()
        self._create_status_bar()

    def _toolbar_button(self, parent, icon: str, fallback: str, tooltip: str, command) -> ctk.CTkButton:
        """Create an icon button, falling back to a text button if the icon can't be loaded."""
        image = self._load_icon(icon, size=(24, 24))
        if image:
            button = ctk.CTkButton(
                parent, image=image, text="", width=40, height=40,
                fg_color="transparent", hover_color=("gray80", "gray30"),
                command=command,
            )
        else:
            button = ctk.CTkButton(parent, text=fallback, width=80, height=32, command=command)
        Tooltip(button, tooltip)
        return button

    def _create_toolbar(self):
        """Create the top toolbar."""
        toolbar = ctk.CTkFrame(self, height=50, fg_color=PANE_COLOR)
        toolbar.pack(fill="x", padx=PADDING["medium"], pady=PADDING["medium"])
        toolbar.pack_propagate(False)

        logo_image = self._load_icon("icons/app_icon.png", size=(32, 32))
        if logo_image:
            logo_label = ctk.CTkLabel(toolbar, image=logo_image, text="")
            logo_label.pack(side="left", padx=(PADDING["medium"], 5), pady=PADDING["small"])

        title = ctk.CTkLabel(toolbar, text=__app_name__, font=FONTS["title"])
        title.pack(side="left", padx=(0 if logo_image else PADDING["medium"], PADDING["medium"]), pady=PADDING["small"])

        version = ctk.CTkLabel(toolbar, text=f"v{__version__}", font=FONTS["small"], text_color="gray")
        version.pack(side="left", pady=PADDING["small"])

        buttons = ctk.CTkFrame(toolbar, fg_color="transparent")
        buttons.pack(side="left", padx=PADDING["large"])

        self.refresh_btn = self._toolbar_button(
            buttons, "icons/refresh.png", "Refresh", "Rescan packages", self._refresh_packages)
        self.refresh_btn.pack(side="left", padx=2)

        self.export_btn = self._toolbar_button(
            buttons, "icons/export.png", "Export", "Export selected package", self._open_export_dialog)
        self.export_btn.pack(side="left", padx=2)
        self.export_btn.configure(state="disabled")

        about_btn = ctk.CTkButton(
            toolbar, text="?", width=32, height=32, font=FONTS["heading"],
            fg_color="transparent", hover_color=("gray80", "gray30"),
            command=self._show_about_dialog,
        )
        about_btn.pack(side="right", padx=(0, PADDING["medium"]))
        Tooltip(about_btn, "About")

        settings_btn = self._toolbar_button(
            toolbar, "icons/gear.png", "Settings", "Settings", self._open_settings)
        settings_btn.pack(side="right", padx=5)

    def _create_package_pane(self):
        """Create the left pane listing WGS packages."""
        pane = ctk.CTkFrame(self.main_container, fg_color=PANE_COLOR)
        pane.grid(row=0, column=0, sticky="nsew", padx=(0, PADDING["medium"]))

        header_frame = ctk.CTkFrame(pane, fg_color="transparent")
        header_frame.pack(fill="x", padx=PADDING["small"], pady=PADDING["small"])

        ctk.CTkLabel(header_frame, text="Packages", font=FONTS["heading"]).pack(side="left")
        self.package_count_label = ctk.CTkLabel(header_frame, text="(0)", font=FONTS["small"], text_color="gray")
        self.package_count_label.pack(side="left", padx=(5, 0))

        self.package_list_frame = ctk.CTkScrollableFrame(pane, fg_color=PANE_COLOR)
        self.package_list_frame.pack(fill="both", expand=True, padx=PADDING["small"], pady=(0, PADDING["small"]))

    def _create_container_pane(self):
        """Create the right pane showing containers and their files."""
        pane = ctk.CTkFrame(self.main_container, fg_color=PANE_COLOR)
        pane.grid(row=0, column=1, sticky="nsew")

        header_frame = ctk.CTkFrame(pane, fg_color="transparent")
        header_frame.pack(fill="x", padx=PADDING["small"], pady=PADDING["small"])

        self.container_header = ctk.CTkLabel(header_frame, text="Containers", font=FONTS["heading"])
        self.container_header.pack(side="left")
        self.container_count_label = ctk.CTkLabel(header_frame, text="(0)", font=FONTS["small"], text_color="gray")
        self.container_count_label.pack(side="left", padx=(5, 0))

        self.index_info_label = ctk.CTkLabel(header_frame, text="", font=FONTS["small"], text_color="gray")
        self.index_info_label.pack(side="right")

        self.container_list_frame = ctk.CTkScrollableFrame(pane, fg_color=PANE_COLOR)
        self.container_list_frame.pack(fill="both", expand=True, padx=PADDING["small"], pady=(0, PADDING["small"]))

        self._show_placeholder(self.container_list_frame, "Select a package\nfrom the left")

    def _create_status_bar(self):
        """Create the bottom status bar."""
        self.status_bar = ctk.CTkFrame(self, height=30, fg_color=PANE_COLOR)
        self.status_bar.pack(fill="x", side="bottom")
        self.status_bar.pack_propagate(False)

        self.status_label = ctk.CTkLabel(self.status_bar, text="Ready", font=FONTS["small"], anchor="w")
        self.status_label.pack(side="left", fill="x", expand=True, padx=PADDING["small"])

    @staticmethod
    def _clear(frame: ctk.CTkScrollableFrame):
        for widget in frame.winfo_children():
            widget.destroy()

    @staticmethod
    def _show_placeholder(frame: ctk.CTkScrollableFrame, text: str):
        placeholder = ctk.CTkLabel(frame, text=text, font=FONTS["body"], text_color="gray", justify="center")
        placeholder.pack(pady=PADDING["large"])

    def _set_status(self, message: str):
        """Update the status bar message."""
        self.status_label.configure(text=message)

    # ------------------------------------------------------------------
    # Packages
    # ------------------------------------------------------------------

    def _refresh_packages(self):
        """Rescan the packages folder and rebuild the package list."""
        settings = self.config_manager.config.settings if self.config_manager.config else None
        packages_root = settings.packages_root if settings else None

        self._clear(self.package_list_frame)
        self.package_rows.clear()
        self.selected_package = None
        self.current_scan = None
        self.export_btn.configure(state="disabled")

        try:
            self.packages = find_wgs_packages(packages_root, self.limits)
        except (FileNotFoundError, NotADirectoryError) as e:
            logger.warning("Packages folder unavailable: %s", e)
            self.packages = []
            self._show_placeholder(self.package_list_frame, "Packages folder not found.\nCheck Settings.")
            self._set_status(str(e))
            self._show_containers()
            return

        self.package_count_label.configure(text=f"({len(self.packages)})")

        if not self.packages:
            self._show_placeholder(self.package_list_frame, "No packages with\nWGS save data found")
            self._set_status("No WGS packages found")
            self._show_containers()
            return

        for package in self.packages:
            self._create_package_row(package)

        self._set_status(f"Found {len(self.packages)} package(s)")

        last_package = settings.last_package if settings else ""
        remembered = next((p for p in self.packages if p.package_name == last_package), None)
        if remembered:
            self._on_package_selected(remembered, remember=False)
        else:
            self._show_containers()

    def _create_package_row(self, package: WgsPackage):
        """Create a clickable row for a package."""
        if package.error:
            row = ctk.CTkFrame(self.package_list_frame, cursor="hand2",
                               border_width=2, border_color=COLORS["danger"])
            Tooltip(row, package.error)
        elif has_exporter(package.package_name):
            row = ctk.CTkFrame(self.package_list_frame, cursor="hand2",
                               border_width=2, border_color=get_exporter(package.package_name).color)
        else:
            row = ctk.CTkFrame(self.package_list_frame, cursor="hand2")
        row.pack(fill="x", pady=2)
        self.package_rows[package.package_name] = row

        select = lambda e, p=package: self._on_package_selected(p)
        row.bind("<Button-1>", select)

        name_label = ctk.CTkLabel(row, text=package.display_name, font=FONTS["body"], anchor="w")
        name_label.pack(fill="x", padx=PADDING["small"], pady=(PADDING["small"], 0))
        name_label.bind("<Button-1>", select)

        details = package.package_name
        if package.timestamp:
            details += f"\n{package.timestamp:%Y-%m-%d %H:%M:%S} UTC"
        detail_label = ctk.CTkLabel(
            row, text=details, font=FONTS["small"], text_color="gray", anchor="w", justify="left"
        )
        detail_label.pack(fill="x", padx=PADDING["small"], pady=(0, PADDING["small"]))
        detail_label.bind("<Button-1>", select)

        badge = ctk.CTkLabel(
            row, text=f"{package.container_count} containers",
            font=FONTS["small"], text_color="gray"
        )
        badge.place(relx=1.0, y=PADDING["small"], anchor="ne", x=-PADDING["small"])
        badge.bind("<Button-1>", select)

    def _on_package_selected(self, package: WgsPackage, remember: bool = True):
        """Scan the selected package and show its containers."""
        self.selected_package = package

        for name, row in self.package_rows.items():
            row.configure(fg_color=SELECTED_ROW_COLOR if name == package.package_name else ROW_COLOR)

        try:
            self.current_scan = scan_package(package.index_path, self.limits)
        except OSError as e:
            logger.error("Failed to scan %s: %s", package.index_path, e)
            self.current_scan = None
            self._set_status(f"Failed to read {package.index_path}: {e}")
            self._show_containers()
            return

        self._show_containers()
        self.export_btn.configure(state="normal" if self.current_scan.containers else "disabled")
        self._set_status(f"Selected: {package.display_name}")

        if remember:
            try:
                self.config_manager.set_last_package(package.package_name)
            except (OSError, ValueError) as e:
                logger.debug("Could not remember last package: %s", e)

    # ------------------------------------------------------------------
    # Containers
    # ------------------------------------------------------------------

    def _show_containers(self):
        """Rebuild the right pane from the current scan."""
        self._clear(self.container_list_frame)
        scan = self.current_scan

        if scan is None:
            self.container_header.configure(text="Containers")
            self.container_count_label.configure(text="(0)")
            self.index_info_label.configure(text="")
            self._show_placeholder(self.container_list_frame, "Select a package\nfrom the left")
            return

        header = scan.header
        if header:
            self.index_info_label.configure(
                text=f"index v{header.version}, {header.container_count} declared"
            )
        else:
            self.index_info_label.configure(text="index header unreadable")

        self.container_count_label.configure(text=f"({len(scan.containers)})")

        if not scan.containers:
            self._show_placeholder(self.container_list_frame, "No containers found in the index")
            return

        for container in scan.containers:
            self._create_container_row(container)
            for scanned_file in container.files:
                self._create_file_row(scanned_file)

    def _create_container_row(self, container: ScannedContainer):
        """Create the summary row for one container."""
        row = ctk.CTkFrame(
            self.container_list_frame,
            border_width=2 if container.error else 0,
            border_color=COLORS["danger"],
        )
        row.pack(fill="x", pady=(PADDING["small"], 2))

        name_label = ctk.CTkLabel(row, text=container.display_name, font=FONTS["heading"], anchor="w")
        name_label.pack(fill="x", padx=PADDING["small"], pady=(5, 0))

        folder_label = ctk.CTkLabel(
            row, text=container.folder_name, font=FONTS["mono"], text_color=COLORS["muted"], anchor="w"
        )
        folder_label.pack(fill="x", padx=PADDING["small"])

        if container.error:
            error_label = ctk.CTkLabel(
                row, text=container.error, font=FONTS["small"], text_color=COLORS["danger"], anchor="w"
            )
            error_label.pack(fill="x", padx=PADDING["small"], pady=(0, 5))
        else:
            # Spacer so the badge doesn't overlap the folder name
            ctk.CTkFrame(row, height=5, fg_color="transparent").pack()

        badge = ctk.CTkLabel(
            row, text=f"{container.file_count} files",
            font=FONTS["small"], text_color="gray"
        )
        badge.place(relx=1.0, y=5, anchor="ne", x=-PADDING["small"])

    def _create_file_row(self, scanned_file: ScannedFile):
        """Create an indented row for one file of a container."""
        row = ctk.CTkFrame(self.container_list_frame, fg_color="transparent")
        row.pack(fill="x", padx=(PADDING["large"], 0))
        row.grid_columnconfigure(1, weight=1)

        name_label = ctk.CTkLabel(
            row, text=scanned_file.filename or "(no name)", font=FONTS["body"], anchor="w", width=200
        )
        name_label.grid(row=0, column=0, sticky="w")

        disk_label = ctk.CTkLabel(
            row, text=scanned_file.disk_name or "-", font=FONTS["mono"], text_color=COLORS["muted"], anchor="w"
        )
        disk_label.grid(row=0, column=1, sticky="w", padx=PADDING["small"])

        if scanned_file.exists:
            size_text, size_color = format_size(scanned_file.size), "gray"
        else:
            size_text, size_color = "missing", COLORS["danger"]
        size_label = ctk.CTkLabel(row, text=size_text, font=FONTS["small"], text_color=size_color)
        size_label.grid(row=0, column=2, sticky="e", padx=PADDING["small"])

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    def _open_export_dialog(self):
        """Open the export dialog for the selected package."""
        if not self.selected_package or not self.current_scan:
            self._set_status("Select a package to export first")
            return

        dialog = ExportDialog(self, self.current_scan, self.selected_package.package_name, self.config_manager)
        self.wait_window(dialog)

        if dialog.results is not None:
            self._set_status(f"Export finished. {dialog.results.summary()}")

    def _open_settings(self):
        """Open the settings dialog."""
        dialog = ConfigDialog(self, self.config_manager)
        self.wait_window(dialog)

        if dialog.config_changed:
            self._refresh_packages()
            self._set_status("Configuration updated")

    def _show_about_dialog(self):
        """About box: version plus where settings and logs live."""
        width, height = 460, 250
        dialog = ctk.CTkToplevel(self)
        dialog.title("About")
        dialog.resizable(False, False)
        dialog.transient(self)
        dialog.grab_set()
        # Centered over the main window
        x = self.winfo_rootx() + (self.winfo_width() - width) // 2
        y = self.winfo_rooty() + (self.winfo_height() - height) // 2
        dialog.geometry(f"{width}x{height}+{max(x, 0)}+{max(y, 0)}")

        body = ctk.CTkFrame(dialog)
        body.pack(fill="both", expand=True, padx=PADDING["medium"], pady=PADDING["medium"])

        ctk.CTkLabel(body, text=__app_name__, font=FONTS["title"], text_color=COLORS["primary"]).pack(
            pady=(PADDING["small"], 0))
        ctk.CTkLabel(body, text=f"Version {__version__}", font=FONTS["body"]).pack()
        ctk.CTkLabel(
            body,
            text="Browse and export Xbox / Game Pass (WGS) save containers",
            font=FONTS["small"],
            text_color="gray",
        ).pack(pady=PADDING["small"])
        for caption, path in (("Settings", self.config_manager.config_path), ("Log", WgsPaths.LOG_FILE)):
            ctk.CTkLabel(body, text=f"{caption}: {path}", font=FONTS["mono"], text_color=COLORS["muted"],
                         wraplength=width - 60).pack(anchor="w")

        ctk.CTkButton(body, text="OK", width=100, command=dialog.destroy).pack(side="bottom", pady=(PADDING["small"], 0))
        dialog.wait_window()

    def _on_close(self):
        logger.info("Main window closed")
        self.destroy()

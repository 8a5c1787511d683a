"""Directory entry with browse button and inline validation"""

from pathlib import Path
from tkinter import filedialog
from typing import Callable, Optional

import customtkinter as ctk

from ..styles import COLORS, FONTS

# (is_valid, message) for a candidate path
PathCheck = Callable[[Path], tuple[bool, str]]


class PathSelector(ctk.CTkFrame):
    """Label, entry and Browse button for choosing a directory.

    Two kinds of directory are chosen in this application. The packages
    folder must already exist (``must_exist=True``). An export destination
    may be created on export, so a missing path is shown as "new" and only
    ``validator`` can reject it. Validation messages appear under the entry.
    """

    def __init__(
        self,
        master,
        label: str = "Path:",
        initial_path: Optional[Path] = None,
        dialog_title: str = "Select Folder",
        must_exist: bool = False,
        validator: Optional[PathCheck] = None,
        **kwargs
    ):
        super().__init__(master, fg_color="transparent", **kwargs)

        self.dialog_title = dialog_title
        self.must_exist = must_exist
        self.validator = validator

        self.grid_columnconfigure(1, weight=1)

        ctk.CTkLabel(self, text=label, width=120, anchor="w").grid(row=0, column=0, sticky="w")

        self.path_var = ctk.StringVar(value=str(initial_path) if initial_path else "")
        self.entry = ctk.CTkEntry(self, textvariable=self.path_var, width=350)
        self.entry.grid(row=0, column=1, padx=(0, 10), sticky="ew")
        self.path_var.trace_add("write", lambda *_: self.validate())

        self.browse_btn = ctk.CTkButton(self, text="Browse", width=80, command=self._browse)
        self.browse_btn.grid(row=0, column=2, sticky="e")

        self.status_label = ctk.CTkLabel(self, text="", width=40)
        self.status_label.grid(row=0, column=3, padx=(5, 0))

        self.message_label = ctk.CTkLabel(self, text="", font=FONTS["small"], anchor="w")
        self.message_label.grid(row=1, column=1, columnspan=3, sticky="w")

        self.validate()

    def _browse(self):
        current = self.get_path()
        # Start from the nearest existing ancestor
        while current is not None and not current.exists() and current.parent != current:
            current = current.parent
        initial_dir = str(current) if current is not None and current.exists() else None

        selected = filedialog.askdirectory(initialdir=initial_dir, title=self.dialog_title)
        if selected:
            self.set_path(Path(selected))

    def _show(self, status: str, color: str, message: str = ""):
        self.status_label.configure(text=status, text_color=color)
        self.message_label.configure(text=message, text_color=color)

    def validate(self) -> bool:
        """Check the current path and update the indicator.

        Returns:
            True if the path is usable
        """
        path = self.get_path()
        if path is None:
            self._show("", "gray")
            return False

        if self.validator is not None:
            valid, message = self.validator(path)
            if not valid:
                self._show("!", COLORS["danger"], message)
                return False

        if path.is_dir():
            self._show("OK", COLORS["success"])
            return True
        if self.must_exist:
            self._show("!", COLORS["danger"], "Folder does not exist")
            return False
        self._show("new", COLORS["warning"], "Will be created on export")
        return True

    def get_path(self) -> Optional[Path]:
        """Current path, or None if the entry is empty."""
        value = self.path_var.get().strip()
        return Path(value) if value else None

    def set_path(self, path: Optional[Path]):
        self.path_var.set(str(path) if path else "")

    def set_enabled(self, enabled: bool):
        state = "normal" if enabled else "disabled"
        self.entry.configure(state=state)
        self.browse_btn.configure(state=state)

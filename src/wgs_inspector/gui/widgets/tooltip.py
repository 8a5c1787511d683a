"""Delayed hover tooltip"""

import tkinter as tk
from typing import Optional

import customtkinter as ctk

from ..styles import FONTS


class Tooltip:
    """Shows ``text`` just above ``widget`` after the pointer rests on it.

    Used for toolbar buttons and for the scan error of a package row.
    """

    def __init__(self, widget, text: str, delay_ms: int = 250, timeout_ms: int = 4000):
        self.widget = widget
        self.text = text
        self.delay_ms = delay_ms
        self.timeout_ms = timeout_ms
        self._window: Optional[ctk.CTkToplevel] = None
        self._pending: Optional[str] = None

        for sequence in ("<Leave>", "<Button-1>", "<Destroy>"):
            widget.bind(sequence, self.hide, add="+")
        widget.bind("<Enter>", self._schedule, add="+")

    def _schedule(self, _event=None):
        self.hide()
        self._pending = self.widget.after(self.delay_ms, self.show)

    def show(self):
        self._pending = None
        try:
            if not self.widget.winfo_exists():
                return
            window = ctk.CTkToplevel(self.widget)
            window.wm_overrideredirect(True)
            window.wm_attributes("-topmost", True)
            window.wm_geometry(f"+{self.widget.winfo_rootx()}+{self.widget.winfo_rooty() - 30}")
            ctk.CTkLabel(
                window, text=self.text, font=FONTS["small"], wraplength=420, justify="left",
                fg_color=("gray90", "gray20"), corner_radius=4, padx=8, pady=4,
            ).pack()
            window.after(self.timeout_ms, self.hide)
            self._window = window
        except (tk.TclError, RuntimeError):
            # Widget went away between scheduling and showing
            self._window = None

    def hide(self, _event=None):
        if self._pending is not None:
            try:
                self.widget.after_cancel(self._pending)
            except (tk.TclError, RuntimeError):
                pass
            self._pending = None
        if self._window is not None:
            try:
                self._window.destroy()
            except (tk.TclError, RuntimeError):
                pass
            self._window = None

"""Reusable GUI widgets for the application.

Widgets:
    PathSelector: Label, entry and Browse button for a directory, with an
                  optional validator whose message is shown under the entry
    Tooltip: Hover text shown after a short delay
"""

from .path_selector import PathSelector
from .tooltip import Tooltip

__all__ = [
    "PathSelector",
    "Tooltip",
]

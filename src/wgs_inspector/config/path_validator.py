"""Checks applied before exported saves are written to disk.

Container display names and stored filenames come straight out of WGS
metadata, which may be corrupt or hostile, so they never become path parts
without :func:`sanitize_filename`. Export destinations are checked with
:func:`validate_export_path`, and every write is kept inside the chosen
destination with :func:`is_path_under_root`.
"""

import os
import re
from pathlib import Path
from typing import Iterator, Optional

from ..logging_config import get_logger

logger = get_logger("path_validator")

# System folders an export must never land in
PROTECTED_DIRECTORIES = (
    r"C:\Windows",
    r"C:\Program Files",
    r"C:\Program Files (x86)",
    r"C:\ProgramData",
    r"C:\$Recycle.Bin",
    r"C:\System Volume Information",
)

# Environment variables naming more of the same
PROTECTED_ENV_VARS = ("WINDIR", "SYSTEMROOT", "PROGRAMFILES", "PROGRAMFILES(X86)", "PROGRAMDATA")

# Characters Windows rejects in a name, plus control characters
_UNSAFE_CHARS = re.compile(r'[<>:"/\\|?*\x00-\x1f]')

# Device names Windows reserves regardless of extension
_RESERVED_NAMES = {"CON", "PRN", "AUX", "NUL"} | {f"COM{i}" for i in range(1, 10)} | {f"LPT{i}" for i in range(1, 10)}

MAX_FILENAME_LENGTH = 200


def _resolve(path: Path) -> Optional[Path]:
    try:
        return path.resolve()
    except (OSError, ValueError) as e:
        logger.warning("Cannot resolve %s: %s", path, e)
        return None


def _protected_paths() -> Iterator[Path]:
    candidates = list(PROTECTED_DIRECTORIES)
    candidates.extend(os.environ[var] for var in PROTECTED_ENV_VARS if os.environ.get(var))
    for candidate in candidates:
        resolved = _resolve(Path(candidate))
        if resolved is not None:
            yield resolved


def _contains(root: Path, path: Path) -> bool:
    return path == root or root in path.parents


def is_safe_path(path: Path) -> bool:
    """True unless ``path`` is inside a protected system directory."""
    resolved = _resolve(path)
    if resolved is None:
        return False

    for protected in _protected_paths():
        if _contains(protected, resolved):
            logger.warning("Refusing protected location %s (under %s)", path, protected)
            return False
    return True


def is_path_under_root(path: Path, root: Path) -> bool:
    """Check that ``path`` resolves to ``root`` or somewhere below it.

    Args:
        path: Candidate write target
        root: Export destination chosen by the user

    Returns:
        True if the target stays inside root
    """
    resolved, resolved_root = _resolve(path), _resolve(root)
    if resolved is None or resolved_root is None:
        return False
    return _contains(resolved_root, resolved)


def validate_export_path(export_path: Optional[Path],
                         source_root: Optional[Path] = None) -> tuple[bool, str]:
    """Decide whether a folder may receive exported saves.

    The folder does not need to exist yet; exporters create it.

    Args:
        export_path: Destination folder
        source_root: Packages folder being read from. Exports may not be
            written back into it.

    Returns:
        Tuple of (is_valid, error_message)
    """
    if export_path is None or not str(export_path).strip():
        return False, "Export path is empty"

    if ".." in export_path.parts:
        return False, "Path contains directory traversal"

    resolved = _resolve(export_path)
    if resolved is None:
        return False, "Invalid path"

    if resolved.exists() and not resolved.is_dir():
        return False, "Export path is not a directory"

    if not is_safe_path(resolved):
        return False, "Path is in a protected system directory"

    if source_root is not None and is_path_under_root(resolved, source_root):
        return False, "Path is inside the packages folder"

    return True, ""


def sanitize_filename(filename: str) -> str:
    """Turn a WGS display name or stored filename into one safe path part.

    Unsafe characters become ``_``, leading and trailing dots and spaces
    are dropped, reserved device names get a ``_`` prefix, and the result
    is capped at :data:`MAX_FILENAME_LENGTH`. An empty result becomes
    ``"unnamed"``.
    """
    result = _UNSAFE_CHARS.sub("_", filename).strip(". ")[:MAX_FILENAME_LENGTH]
    if not result:
        return "unnamed"
    if result.split(".")[0].upper() in _RESERVED_NAMES:
        result = "_" + result[:MAX_FILENAME_LENGTH - 1]
    return result

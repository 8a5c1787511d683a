"""Well-known locations: Game Pass package data, exports and app settings"""

import os
from pathlib import Path


def _from_env(template: str) -> Path:
    # Unset %VARS% are left in place, which keeps the path visibly wrong
    return Path(os.path.expandvars(template))


class WgsPaths:
    """Default locations used by the inspector.

    A package directory is laid out as::

        <PACKAGES_DIR>/<package family name>/SystemAppData/wgs/<user folder>/containers.index

    with a sibling ``t`` folder next to the user folder that never holds
    containers.
    """

    PACKAGES_DIR = _from_env(r"%LOCALAPPDATA%\Packages")
    EXPORT_DEFAULT = _from_env(r"%USERPROFILE%\exported_save_files")

    CONFIG_DIR = _from_env(r"%APPDATA%\WgsInspector")
    CONFIG_FILE = CONFIG_DIR / "configuration.xml"
    LOG_FILE = CONFIG_DIR / "wgs_inspector.log"

    WGS_RELATIVE = Path("SystemAppData") / "wgs"
    INDEX_FILENAME = "containers.index"
    IGNORED_WGS_FOLDER = "t"

    @classmethod
    def expand_path(cls, path_str: str) -> Path:
        """Expand ``%VAR%`` references and ``~`` in a stored path."""
        return Path(os.path.expanduser(os.path.expandvars(path_str)))

    @classmethod
    def wgs_root(cls, package_dir: Path) -> Path:
        """The ``SystemAppData/wgs`` folder of a package directory."""
        return package_dir / cls.WGS_RELATIVE

    @classmethod
    def ensure_export_dir(cls, export_path: Path | None = None) -> Path:
        """Create the export folder (default ``EXPORT_DEFAULT``) and return it."""
        path = export_path or cls.EXPORT_DEFAULT
        path.mkdir(parents=True, exist_ok=True)
        return path

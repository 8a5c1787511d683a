"""Load and save configuration.xml"""

import xml.etree.ElementTree as ET
from dataclasses import fields
from pathlib import Path
from typing import Optional
from xml.dom import minidom

from .paths import WgsPaths
from .schema import AppConfiguration, ScanLimits, Settings
from ..logging_config import get_logger

logger = get_logger("config_manager")

ROOT_TAG = "WgsInspector"
CONFIG_VERSION = "1.0"

# ScanLimits field -> XML element under <ScanLimits>
_LIMIT_TAGS = {
    "display_name_units": "DisplayNameUnits",
    "package_name_units": "PackageNameUnits",
    "container_id_units": "ContainerIdUnits",
    "max_filename_chars": "MaxFilenameChars",
    "filename_slot_bytes": "FilenameSlotBytes",
    "min_entry_tail": "MinEntryTail",
}


def _text(parent: Optional[ET.Element], tag: str) -> str:
    if parent is None:
        return ""
    elem = parent.find(tag)
    return elem.text.strip() if elem is not None and elem.text else ""


def _read_settings(elem: Optional[ET.Element]) -> Settings:
    packages_root = _text(elem, "PackagesRoot")
    export_location = _text(elem, "ExportLocation")
    return Settings(
        first_run_complete=_text(elem, "FirstRunComplete").lower() == "true",
        packages_root=WgsPaths.expand_path(packages_root) if packages_root else None,
        export_location=WgsPaths.expand_path(export_location) if export_location else None,
        last_package=_text(elem, "LastPackage"),
    )


def _read_limits(elem: Optional[ET.Element]) -> ScanLimits:
    """Parse scan limit overrides; absent elements keep their defaults.

    Raises:
        ValueError: If an override is not a positive integer
    """
    overrides = {}
    for name, tag in _LIMIT_TAGS.items():
        text = _text(elem, tag)
        if not text:
            continue
        value = int(text)
        if value <= 0:
            raise ValueError(f"Scan limit {tag} must be positive, got {value}")
        overrides[name] = value
    return ScanLimits(**overrides)


def _pretty_xml(root: ET.Element) -> str:
    xml_str = minidom.parseString(ET.tostring(root, encoding="unicode")).toprettyxml(indent="  ")
    # minidom leaves whitespace-only lines behind
    return "\n".join(line for line in xml_str.splitlines() if line.strip())


class ConfigurationManager:
    """Owns the application configuration and its XML file.

    ``config`` stays None until :meth:`load` or :meth:`create_default`
    has been called.
    """

    def __init__(self, config_path: Optional[Path] = None):
        self.config_path = config_path or WgsPaths.CONFIG_FILE
        self.config: Optional[AppConfiguration] = None

    def is_first_run(self) -> bool:
        """True if there is no usable configuration yet.

        A missing file, an unreadable one, or one whose FirstRunComplete
        flag is not set all count as a first run. Otherwise the
        configuration is left loaded.
        """
        if not self.config_path.exists():
            return True

        try:
            config = self.load()
        except (ET.ParseError, OSError, ValueError) as e:
            logger.warning("Could not load config, treating as first run: %s", e)
            return True
        return not config.settings.first_run_complete

    def load(self) -> AppConfiguration:
        """Read the configuration file.

        Raises:
            OSError: If the file cannot be read
            ET.ParseError: If the XML is malformed
            ValueError: If a scan limit is not a positive integer
        """
        logger.debug("Loading configuration from %s", self.config_path)
        root = ET.parse(self.config_path).getroot()

        self.config = AppConfiguration(
            settings=_read_settings(root.find("Settings")),
            limits=_read_limits(root.find("ScanLimits")),
        )
        logger.debug("Configuration loaded: packages root %s", self.config.settings.packages_root)
        return self.config

    def save(self) -> None:
        """Write the configuration, creating its folder if needed.

        Raises:
            ValueError: If nothing has been loaded or created
            OSError: If the file cannot be written
        """
        if self.config is None:
            raise ValueError("No configuration to save")

        logger.debug("Saving configuration to %s", self.config_path)
        root = ET.Element(ROOT_TAG, version=CONFIG_VERSION)

        settings = self.config.settings
        settings_elem = ET.SubElement(root, "Settings")
        values = {
            "FirstRunComplete": str(settings.first_run_complete).lower(),
            "PackagesRoot": str(settings.packages_root or WgsPaths.PACKAGES_DIR),
            "ExportLocation": str(settings.export_location or WgsPaths.EXPORT_DEFAULT),
            "LastPackage": settings.last_package or "",
        }
        for tag, text in values.items():
            ET.SubElement(settings_elem, tag).text = text

        limits_elem = ET.SubElement(root, "ScanLimits")
        for limit in fields(ScanLimits):
            ET.SubElement(limits_elem, _LIMIT_TAGS[limit.name]).text = str(getattr(self.config.limits, limit.name))

        self.config_path.parent.mkdir(parents=True, exist_ok=True)
        self.config_path.write_text(_pretty_xml(root), encoding="utf-8")

    def create_default(self) -> AppConfiguration:
        """Replace the in-memory configuration with defaults (not saved)."""
        self.config = AppConfiguration(
            settings=Settings(
                packages_root=WgsPaths.PACKAGES_DIR,
                export_location=WgsPaths.EXPORT_DEFAULT,
            ),
        )
        return self.config

    def set_last_package(self, package_name: str) -> None:
        """Remember the selected package so it is reselected next launch."""
        if self.config is None:
            raise ValueError("No configuration loaded")
        self.config.settings.last_package = package_name
        self.save()

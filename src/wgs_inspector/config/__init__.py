"""Configuration management module.

This module provides configuration storage, loading, and data models for the application.

Submodules:
    manager: ConfigurationManager for loading/saving XML configuration
    schema: Data classes defining configuration structure (Settings, ScanLimits, etc.)
    paths: WgsPaths with default package, export and config locations
    path_validator: Path validation utilities to prevent dangerous export writes

The configuration is stored as XML in %APPDATA%/WgsInspector/configuration.xml.
ConfigurationManager is imported from its submodule directly, since it
depends on logging_config which in turn depends on this package.
"""

from .schema import AppConfiguration, ScanLimits, Settings
from .paths import WgsPaths

__all__ = [
    "AppConfiguration",
    "ScanLimits",
    "Settings",
    "WgsPaths",
]

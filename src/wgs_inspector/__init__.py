"""WGS Inspector - Save file inspector and exporter for Windows Gaming Services.

Game Pass / Microsoft Store titles keep their cloud-synced saves in opaque
WGS containers. This application provides:
    - Discovery of every package with WGS save data
    - Decoding of containers.index and per-container file tables
    - Export of container files to ordinary save folders
    - Game-specific export rules (Hollow Knight / Silksong save encryption)

The application uses CustomTkinter for its GUI and stores configuration
in %APPDATA%/WgsInspector.

Package Structure:
    app: Main application entry point and orchestrator
    config: Configuration management, paths, schemas, and path validation
    core: Binary readers, index/container parsers, save codec, package scanner
    exporters: Generic and game-specific exporters
    gui: User interface components (main window, dialogs, widgets)
    assets: Icon generation and asset loading utilities

Quick Start:
    Run from command line::

        wgs-inspector

    Or programmatically::

        from wgs_inspector.core import parse_container_index
        index = parse_container_index(Path("containers.index").read_bytes())

Configuration:
    - Config file: %APPDATA%/WgsInspector/configuration.xml
    - Log file: %APPDATA%/WgsInspector/wgs_inspector.log
"""

__version__ = "1.0.0"
__app_name__ = "WGS Inspector"

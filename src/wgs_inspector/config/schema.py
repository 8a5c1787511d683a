"""Configuration data models"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional


@dataclass(frozen=True)
class ScanLimits:
    """Sanity ceilings used while decoding WGS metadata.

    None of these are declared by the format itself. They keep the
    brute-force index scan and the file-table parser from running away on
    corrupt input.
    """
    display_name_units: int = 512       # Container display names and identifiers
    package_name_units: int = 256       # Index header package name
    container_id_units: int = 128       # Optional trailing header identifier
    max_filename_chars: int = 200       # Unterminated filename run = corruption
    filename_slot_bytes: int = 128      # Fixed stride of a file-table name slot
    min_entry_tail: int = 64            # Bytes a container record needs after its start


@dataclass
class Settings:
    """Application settings"""
    first_run_complete: bool = False
    packages_root: Optional[Path] = None
    export_location: Optional[Path] = None
    last_package: str = ""


@dataclass
class AppConfiguration:
    """Complete application configuration"""
    settings: Settings = field(default_factory=Settings)
    limits: ScanLimits = field(default_factory=ScanLimits)

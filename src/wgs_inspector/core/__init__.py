"""Core decoding logic for WGS save containers.

This module contains the binary readers, parsers and codec, plus the
package scanner that ties them to the filesystem.

Submodules:
    binary_reader: ByteReader with bounds-checked integer, UTF-16 and GUID reads
    index_parser: containers.index header and container record scanner
    container_parser: container.N file table parser
    save_codec: Hollow Knight save envelope encode/decode (AES-256-ECB)
    package_scanner: Discovery of WGS packages and container directories

All parsing is pure: functions take bytes and return fresh, immutable records.
"""

from .container_parser import ContainerFileRecord, ContainerFileTable, parse_container_file
from .index_parser import ContainerIndex, ContainerRecord, IndexHeader, parse_container_index
from .save_codec import SaveCodecError, decode_save, encode_save, is_encoded

__all__ = [
    "ContainerFileRecord",
    "ContainerFileTable",
    "ContainerIndex",
    "ContainerRecord",
    "IndexHeader",
    "SaveCodecError",
    "decode_save",
    "encode_save",
    "is_encoded",
    "parse_container_file",
    "parse_container_index",
]

"""Core functionality for pkgarc_tools.

This module provides the archive engine and its supporting pieces:
- Archive engine and read-only reader
- Range reads and gzip stream transforms
- Entry name normalization
- Configuration management
- Error taxonomy
"""

from pkgarc_tools.core.errors import (
    ArchiveClosedError,
    ArchiveError,
    CatalogCorruptError,
    CorruptEntryError,
    EntryNotFoundError,
    FormatError,
    InvalidNameError,
    ReadOnlyArchiveError,
    ShortWriteError,
    TruncatedArchiveError,
)
from pkgarc_tools.core.names import denormalize_name, normalize_name
from pkgarc_tools.core.package import Package
from pkgarc_tools.core.partial import RangeReader
from pkgarc_tools.core.reader import PackageReader
from pkgarc_tools.core.utils import chunked_read, format_size
from pkgarc_tools.core.walker import walk_files

__all__ = [
    # Engine
    "Package",
    "PackageReader",
    "RangeReader",
    # Names
    "normalize_name",
    "denormalize_name",
    # Utils
    "chunked_read",
    "format_size",
    "walk_files",
    # Errors
    "ArchiveError",
    "ArchiveClosedError",
    "CatalogCorruptError",
    "CorruptEntryError",
    "EntryNotFoundError",
    "FormatError",
    "InvalidNameError",
    "ReadOnlyArchiveError",
    "ShortWriteError",
    "TruncatedArchiveError",
]

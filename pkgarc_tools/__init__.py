"""pkgarc tools - single-file archives of gzip-compressed entries.

A package archive bundles many named byte streams into one file. Every entry
is compressed on its own, a JSON catalog of entry offsets is stored as the
last block and a fixed 24-byte header at offset 0 points at that catalog.

Key modules:
- core: Archive engine, reader, range reads, name normalization, config
- formats: Header and catalog parsers and builders
- commands: CLI command implementations
"""

__version__ = "0.1.0"
__author__ = "pkgarc Team"

# Re-export commonly used types and functions
from pkgarc_tools.core.errors import ArchiveError
from pkgarc_tools.core.package import Package
from pkgarc_tools.core.reader import PackageReader

__all__ = [
    "__version__",
    "__author__",
    "ArchiveError",
    "Package",
    "PackageReader",
]

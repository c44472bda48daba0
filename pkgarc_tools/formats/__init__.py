"""Format parsers and builders for package archives.

This module provides parsers and builders for the two structured parts of
a package file:
- Header: Fixed 24-byte record pointing at the catalog
- Catalog: JSON mapping of entry names to compressed block locations
"""

from pkgarc_tools.formats.base import FormatParser
from pkgarc_tools.formats.catalog import (
    Catalog,
    CatalogEntry,
    CatalogParser,
    create_catalog,
)
from pkgarc_tools.formats.header import (
    HEADER_SIZE,
    SIGNATURE,
    VERSION,
    ArchiveHeader,
    HeaderParser,
    decode_header,
    encode_header,
    is_package,
)

__all__ = [
    # Base
    "FormatParser",
    # Catalog
    "Catalog",
    "CatalogEntry",
    "CatalogParser",
    "create_catalog",
    # Header
    "HEADER_SIZE",
    "SIGNATURE",
    "VERSION",
    "ArchiveHeader",
    "HeaderParser",
    "decode_header",
    "encode_header",
    "is_package",
]

"""Package file header format.

The header is a fixed 24-byte record at offset 0 (all integers big-endian):

- 4 bytes: Signature (``%pkg``)
- 4 bytes: Format version
- 8 bytes: Catalog start offset
- 8 bytes: Catalog compressed length

A header with a zero catalog start and length marks an archive that has
never been closed with entries.
"""

from __future__ import annotations

import struct
from typing import BinaryIO

import structlog
from pydantic import BaseModel, Field

from pkgarc_tools.core.errors import FormatError, TruncatedArchiveError
from pkgarc_tools.formats.base import FormatParser

logger = structlog.get_logger()

SIGNATURE = b"%pkg"
VERSION = 1
HEADER_FORMAT = ">4sIQQ"
HEADER_SIZE = struct.calcsize(HEADER_FORMAT)  # 24 bytes
MAX_OFFSET = 0xFFFFFFFFFFFFFFFF


class ArchiveHeader(BaseModel):
    """Package file header."""

    signature: bytes = Field(default=SIGNATURE, description="Magic bytes (%pkg)")
    version: int = Field(default=VERSION, ge=0, description="Format version")
    catalog_start: int = Field(default=0, ge=0, le=MAX_OFFSET, description="Catalog offset")
    catalog_length: int = Field(default=0, ge=0, le=MAX_OFFSET, description="Catalog compressed size")

    @property
    def has_catalog(self) -> bool:
        """Check whether the header points at a catalog block."""
        return self.catalog_length > 0

    @property
    def catalog_end(self) -> int:
        """Offset just past the catalog block."""
        return self.catalog_start + self.catalog_length


class HeaderParser(FormatParser[ArchiveHeader]):
    """Parser for the package file header."""

    def parse(self, data: bytes | BinaryIO) -> ArchiveHeader:
        """Parse and validate a package header.

        Args:
            data: Header bytes or a stream positioned anywhere (the header is
                always read from offset 0)

        Returns:
            Parsed header

        Raises:
            TruncatedArchiveError: If fewer than 24 bytes are available
            FormatError: If signature or version do not match
        """
        if isinstance(data, (bytes, bytearray, memoryview)):
            raw = bytes(data[:HEADER_SIZE])
        else:
            data.seek(0)
            raw = data.read(HEADER_SIZE)

        if len(raw) < HEADER_SIZE:
            raise TruncatedArchiveError(
                f"Data too short for header: {len(raw)} < {HEADER_SIZE}",
                expected=HEADER_SIZE,
                actual=len(raw),
            )

        signature, version, start, length = struct.unpack(HEADER_FORMAT, raw)

        if signature != SIGNATURE:
            raise FormatError(
                f"Invalid package signature: {signature!r}",
                expected=SIGNATURE.hex(),
                actual=signature.hex(),
            )
        if version != VERSION:
            raise FormatError(
                f"Unsupported package version: {version}",
                expected=VERSION,
                actual=version,
            )

        return ArchiveHeader(
            signature=signature,
            version=version,
            catalog_start=start,
            catalog_length=length,
        )

    def build(self, obj: ArchiveHeader) -> bytes:
        """Build header bytes.

        Args:
            obj: Header structure

        Returns:
            24 bytes of header data
        """
        return struct.pack(
            HEADER_FORMAT,
            obj.signature,
            obj.version,
            obj.catalog_start,
            obj.catalog_length,
        )


def encode_header(start: int, length: int) -> bytes:
    """Encode a header pointing at a catalog block.

    Args:
        start: Catalog start offset
        length: Catalog compressed length

    Returns:
        24 bytes of header data

    Raises:
        pydantic.ValidationError: If start or length are negative or too large
    """
    return HeaderParser().build(ArchiveHeader(catalog_start=start, catalog_length=length))


def decode_header(data: bytes | BinaryIO) -> tuple[int, int]:
    """Decode a header into ``(catalog_start, catalog_length)``."""
    header = HeaderParser().parse(data)
    return header.catalog_start, header.catalog_length


def is_package(data: bytes) -> bool:
    """Check if data starts with a supported package header.

    Args:
        data: Data to check

    Returns:
        True if data appears to be a package archive
    """
    if len(data) < HEADER_SIZE:
        return False
    try:
        HeaderParser().parse(data)
        return True
    except (FormatError, TruncatedArchiveError):
        return False

"""Package catalog format.

The catalog maps normalized entry keys to the location of their compressed
bytes. It is stored as compact UTF-8 JSON::

    {"name": "demo", "entries": {"archive://demo/a.txt": {"start": 24, "length": 25}}}

and written gzip-compressed as the last block of the archive.
"""

from __future__ import annotations

import json
from typing import Any, BinaryIO

import structlog
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from pkgarc_tools.core.errors import CatalogCorruptError, EntryNotFoundError
from pkgarc_tools.formats.base import FormatParser

logger = structlog.get_logger()


class CatalogEntry(BaseModel):
    """Location of one entry's compressed bytes."""

    start: int = Field(ge=0, description="Absolute offset in the archive file")
    length: int = Field(ge=0, description="Compressed size")

    model_config = ConfigDict(frozen=True)

    @property
    def end(self) -> int:
        """Offset just past the entry."""
        return self.start + self.length


def _entry_map() -> dict[str, CatalogEntry]:
    """Factory function for creating typed empty entry mapping."""
    return {}


class Catalog(BaseModel):
    """Archive catalog."""

    archive_name: str = Field(alias="name", description="Archive name")
    entries: dict[str, CatalogEntry] = Field(
        default_factory=_entry_map,
        description="Normalized entry key to location"
    )

    model_config = ConfigDict(populate_by_name=True)

    def lookup(self, key: str) -> CatalogEntry:
        """Find the location of an entry.

        Args:
            key: Normalized entry key

        Returns:
            Entry location

        Raises:
            EntryNotFoundError: If the key is not in the catalog
        """
        try:
            return self.entries[key]
        except KeyError:
            raise EntryNotFoundError(f"Entry not found: {key}", name=key) from None

    def insert(self, key: str, start: int, length: int) -> CatalogEntry:
        """Record an entry location, replacing any previous one."""
        entry = CatalogEntry(start=start, length=length)
        self.entries[key] = entry
        return entry

    def __contains__(self, key: object) -> bool:
        return key in self.entries

    def __len__(self) -> int:
        return len(self.entries)


class CatalogParser(FormatParser[Catalog]):
    """Parser for the catalog JSON document."""

    def parse(self, data: bytes | BinaryIO) -> Catalog:
        """Parse catalog JSON.

        Args:
            data: Uncompressed catalog bytes or stream

        Returns:
            Parsed catalog

        Raises:
            CatalogCorruptError: If the text is not a valid catalog
        """
        if isinstance(data, (bytes, bytearray, memoryview)):
            raw = bytes(data)
        else:
            raw = data.read()

        try:
            return Catalog.model_validate_json(raw)
        except ValidationError as e:
            logger.debug("Catalog validation failed", errors=e.error_count())
            raise CatalogCorruptError(f"Invalid catalog: {e}") from e

    def build(self, obj: Catalog) -> bytes:
        """Build compact catalog JSON.

        Args:
            obj: Catalog structure

        Returns:
            UTF-8 encoded JSON
        """
        document: dict[str, Any] = obj.model_dump(by_alias=True)
        return json.dumps(document, separators=(",", ":"), ensure_ascii=False).encode("utf-8")


def create_catalog(name: str) -> Catalog:
    """Create an empty catalog for a new archive."""
    return Catalog(archive_name=name)

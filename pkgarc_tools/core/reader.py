"""Read-only access to package archives without keeping the file open."""

from __future__ import annotations

import json
from collections.abc import Iterator
from pathlib import Path
from typing import Any

import structlog

from pkgarc_tools.core.config import ArchiveConfig
from pkgarc_tools.core.errors import TruncatedArchiveError
from pkgarc_tools.core.gzip_stream import decompress_stream
from pkgarc_tools.core.names import denormalize_name, normalize_name
from pkgarc_tools.core.package import load_catalog
from pkgarc_tools.formats.catalog import Catalog, create_catalog

logger = structlog.get_logger()


class PackageReader:
    """Random access reader for a package archive.

    The catalog is loaded once. Each read opens the file, reads the entry's
    compressed bytes in one call and closes it again, so a reader can be
    shared freely and never holds a file handle between calls.
    """

    def __init__(self, path: str | Path, config: ArchiveConfig | None = None):
        self.path = Path(path)
        self.config = config or ArchiveConfig()
        self._catalog = self._load()

    def _load(self) -> Catalog:
        with open(self.path, "rb") as f:
            catalog, _, _ = load_catalog(f, self.config.chunk_size)
        if catalog is None:
            catalog = create_catalog(self.path.stem)
        logger.debug("Loaded catalog", path=str(self.path), entries=len(catalog))
        return catalog

    @property
    def name(self) -> str:
        return self._catalog.archive_name

    @property
    def catalog(self) -> Catalog:
        return self._catalog

    @property
    def entries(self) -> list[str]:
        """Entry names in sorted order."""
        names = (denormalize_name(key, self.name) for key in self._catalog.entries)
        return sorted(name for name in names if name)

    def buffer(self, name: str) -> bytes:
        """Read and decompress one entry.

        Args:
            name: Entry name

        Returns:
            Uncompressed entry content

        Raises:
            EntryNotFoundError: If no such entry exists
            TruncatedArchiveError: If the file ends inside the entry
        """
        entry = self._catalog.lookup(normalize_name(name, self.name))
        with open(self.path, "rb") as f:
            f.seek(entry.start)
            data = f.read(entry.length)
        if len(data) != entry.length:
            raise TruncatedArchiveError(
                f"Only read {len(data)} bytes rather than {entry.length}",
                path=str(self.path),
                name=name,
                expected=entry.length,
                actual=len(data),
            )
        return b"".join(decompress_stream([data]))

    def text(self, name: str) -> str:
        return self.buffer(name).decode("utf-8")

    def json(self, name: str) -> Any:
        return json.loads(self.text(name))

    def __iter__(self) -> Iterator[tuple[str, bytes]]:
        for name in self.entries:
            yield name, self.buffer(name)

    def __len__(self) -> int:
        return len(self.entries)

"""Package archive engine.

A package is a single file holding many gzip-compressed entries::

    0x00: Header (24 bytes) pointing at the catalog
    0x18: Entry blocks, each one gzip member, back to back
    ....: Catalog block (gzip-compressed JSON), always the last block

Entries are appended at a write cursor. The catalog lives in memory while
the package is open and is written back as one more block by ``close``,
after which the header is rewritten to point at it. Opening an existing
package places the write cursor at the old catalog block so that new entries
reuse its space; the old catalog has been read into memory by then.
"""

from __future__ import annotations

import json
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from pathlib import Path
from types import TracebackType
from typing import Any, BinaryIO

import structlog

from pkgarc_tools.core.config import ArchiveConfig
from pkgarc_tools.core.errors import (
    ArchiveClosedError,
    CatalogCorruptError,
    CorruptEntryError,
    ReadOnlyArchiveError,
    ShortWriteError,
)
from pkgarc_tools.core.gzip_stream import compress_stream, decompress_stream
from pkgarc_tools.core.names import CATALOG_KEY, denormalize_name, normalize_name
from pkgarc_tools.core.partial import RangeReader
from pkgarc_tools.core.utils import iter_source
from pkgarc_tools.formats.catalog import Catalog, CatalogEntry, CatalogParser, create_catalog
from pkgarc_tools.formats.header import HEADER_SIZE, HeaderParser, encode_header

logger = structlog.get_logger()

EntrySource = bytes | bytearray | memoryview | str | BinaryIO | Iterable[bytes]


@dataclass
class _OpenState:
    """Runtime state of an open package."""

    handle: BinaryIO
    catalog: Catalog
    position: int
    position_at_open: int
    readonly: bool


def load_catalog(handle: BinaryIO, chunk_size: int) -> tuple[Catalog | None, int, int]:
    """Read the catalog referenced by the header of an open archive.

    Args:
        handle: Open binary file handle
        chunk_size: Range read buffer size

    Returns:
        Tuple of (catalog or None when the archive has no catalog yet,
        catalog start, catalog length)

    Raises:
        FormatError: If the header is not a package header
        TruncatedArchiveError: If the file ends inside the header or catalog
        CatalogCorruptError: If the catalog cannot be inflated or parsed
    """
    header = HeaderParser().parse(handle)
    if not header.has_catalog:
        return None, header.catalog_start, header.catalog_length

    chunks = RangeReader(handle, header.catalog_start, header.catalog_length, chunk_size)
    try:
        catalog = CatalogParser().parse_chunks(decompress_stream(chunks))
    except CorruptEntryError as e:
        raise CatalogCorruptError(f"Cannot inflate catalog: {e}") from e

    return catalog, header.catalog_start, header.catalog_length


class Package:
    """Read and append entries of a package archive."""

    def __init__(
        self,
        handle: BinaryIO,
        catalog: Catalog,
        position: int,
        *,
        path: Path | None = None,
        readonly: bool = False,
        config: ArchiveConfig | None = None,
    ):
        """Initialize package around an already positioned handle.

        Use ``Package.open`` or ``Package.create`` instead of calling this
        directly.
        """
        self._state: _OpenState | None = _OpenState(
            handle=handle,
            catalog=catalog,
            position=position,
            position_at_open=position,
            readonly=readonly,
        )
        self._path = path
        self._name = catalog.archive_name
        self.config = config or ArchiveConfig()

    # Lifecycle

    @classmethod
    def open(
        cls,
        path: str | Path,
        *,
        readonly: bool = False,
        name: str | None = None,
        config: ArchiveConfig | None = None,
    ) -> Package:
        """Open an existing package or create a new one.

        Args:
            path: Archive file path
            readonly: Open without write access; a missing file is an error
            name: Archive name used when a new package is created
            config: Engine configuration

        Returns:
            Open package

        Raises:
            FileNotFoundError: If the file is missing and readonly is set
        """
        path = Path(path)
        config = config or ArchiveConfig()

        if not path.is_file():
            if readonly:
                raise FileNotFoundError(f"Could not open package {path}")
            return cls.create(path, name=name, config=config)

        handle: BinaryIO = open(path, "rb" if readonly else "r+b", buffering=0)  # noqa: SIM115
        try:
            catalog, start, length = load_catalog(handle, config.chunk_size)
        except BaseException:
            handle.close()
            raise

        if catalog is None:
            catalog = create_catalog(name or path.stem)
            position = HEADER_SIZE
        elif config.reuse_catalog_space:
            position = start
        else:
            position = start + length

        logger.debug(
            "Opened package",
            path=str(path),
            name=catalog.archive_name,
            entries=len(catalog),
            position=position,
            readonly=readonly,
        )
        return cls(handle, catalog, position, path=path, readonly=readonly, config=config)

    @classmethod
    def create(
        cls,
        path: str | Path,
        *,
        name: str | None = None,
        config: ArchiveConfig | None = None,
    ) -> Package:
        """Create a new, empty package, replacing any existing file.

        Args:
            path: Archive file path
            name: Archive name, defaults to the file name without extension
            config: Engine configuration

        Returns:
            Open package
        """
        path = Path(path)
        handle: BinaryIO = open(path, "w+b", buffering=0)  # noqa: SIM115
        try:
            _write_header(handle, 0, 0)
        except BaseException:
            handle.close()
            raise

        catalog = create_catalog(name or path.stem)
        logger.debug("Created package", path=str(path), name=catalog.archive_name)
        return cls(handle, catalog, HEADER_SIZE, path=path, config=config)

    def close(self) -> None:
        """Write the catalog if entries were added and release the file.

        Raises:
            ArchiveClosedError: If the package is already closed
            ShortWriteError: If the catalog or header could not be written
        """
        state = self._require_open()
        self._state = None
        try:
            if state.position != state.position_at_open:
                self._write_catalog(state)
        finally:
            state.handle.close()

    def _write_catalog(self, state: _OpenState) -> None:
        document = CatalogParser().build(state.catalog)
        entry = self._append(state, CATALOG_KEY, [document])
        state.catalog.insert(CATALOG_KEY, entry.start, entry.length)

        _write_header(state.handle, entry.start, entry.length)
        state.handle.truncate(state.position)
        state.handle.flush()

        logger.info(
            "Wrote catalog",
            path=str(self._path),
            entries=len(state.catalog) - 1,
            start=entry.start,
            length=entry.length,
        )

    def __enter__(self) -> Package:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        if self._state is not None:
            self.close()

    # Properties

    @property
    def name(self) -> str:
        """Archive name stored in the catalog."""
        return self._name

    @property
    def path(self) -> Path | None:
        """Archive file path."""
        return self._path

    @property
    def closed(self) -> bool:
        """True once ``close`` has been called."""
        return self._state is None

    @property
    def readonly(self) -> bool:
        return self._require_open().readonly

    @property
    def entries(self) -> set[str]:
        """Names of all entries, as relative paths."""
        state = self._require_open()
        names = (denormalize_name(key, state.catalog.archive_name) for key in state.catalog.entries)
        return {name for name in names if name}

    @property
    def position(self) -> int:
        """Current write cursor."""
        return self._require_open().position

    # Entry access

    def add(self, name: str, data: EntrySource) -> CatalogEntry:
        """Compress and append an entry.

        The catalog is only updated once the whole stream has been written, so
        a failed add leaves at most an unreferenced block behind.

        Args:
            name: Entry name (relative path)
            data: Bytes, text, binary file object or iterable of byte chunks

        Returns:
            Location of the written entry

        Raises:
            InvalidNameError: If the name normalizes to the archive root
            ReadOnlyArchiveError: If the package was opened read-only
            ShortWriteError: If the file accepted fewer bytes than written
        """
        state = self._require_open()
        if state.readonly:
            raise ReadOnlyArchiveError(
                "Package opened read-only", path=str(self._path), name=name
            )

        key = normalize_name(name, state.catalog.archive_name)
        chunks = iter_source(data, self.config.chunk_size)
        located = self._append(state, key, chunks)
        entry = state.catalog.insert(key, located.start, located.length)

        logger.debug("Added entry", name=name, start=entry.start, length=entry.length)
        return entry

    def _append(self, state: _OpenState, key: str, chunks: Iterable[bytes]) -> CatalogEntry:
        start = state.position
        for block in compress_stream(chunks, self.config.compression_level):
            written = _write_at(state.handle, state.position, block)
            state.position += written
            _check_written(written, block, key)
        return CatalogEntry(start=start, length=state.position - start)

    def locate(self, name: str) -> CatalogEntry:
        """Return the catalog location of an entry.

        Raises:
            EntryNotFoundError: If no such entry exists
        """
        state = self._require_open()
        return state.catalog.lookup(normalize_name(name, state.catalog.archive_name))

    def get(self, name: str) -> Iterator[bytes]:
        """Stream the uncompressed content of an entry.

        The lookup happens immediately; the returned iterator reads lazily
        with positional reads at its own cursor and can only be consumed once.
        Iterators for any entries may be consumed concurrently from several
        threads; adds must still be sequenced by the caller.

        Raises:
            EntryNotFoundError: If no such entry exists
        """
        state = self._require_open()
        entry = self.locate(name)
        chunks = RangeReader(state.handle, entry.start, entry.length, self.config.chunk_size)
        return decompress_stream(chunks)

    def content(self, name: str) -> bytes:
        """Read the whole content of an entry."""
        return b"".join(self.get(name))

    def text(self, name: str) -> str:
        """Read an entry as UTF-8 text."""
        return self.content(name).decode("utf-8")

    def structured(self, name: str) -> Any:
        """Read an entry as JSON."""
        return json.loads(self.text(name))

    def _require_open(self) -> _OpenState:
        if self._state is None:
            raise ArchiveClosedError("Package closed", path=str(self._path))
        return self._state

    def __repr__(self) -> str:
        status = "closed" if self._state is None else f"{len(self.entries)} entries"
        return f"{self.__class__.__name__}({self._name!r}, {status})"


def _write_at(handle: BinaryIO, position: int, block: bytes) -> int:
    """Write a block at an absolute position and return the bytes written."""
    handle.seek(position)
    return handle.write(block) or 0


def _check_written(written: int, block: bytes, name: str) -> None:
    if written != len(block):
        raise ShortWriteError(
            f"Failed to write {name or 'catalog'} ({written} != {len(block)})",
            name=name,
            expected=len(block),
            actual=written,
        )


def _write_header(handle: BinaryIO, start: int, length: int) -> None:
    block = encode_header(start, length)
    _check_written(_write_at(handle, 0, block), block, "header")

"""Bounded range reads over an open archive file."""

from __future__ import annotations

import os
from collections.abc import Iterator
from typing import BinaryIO

from pkgarc_tools.core.errors import ArchiveClosedError, TruncatedArchiveError

DEFAULT_CHUNK_SIZE = 64 * 1024


class RangeReader(Iterator[bytes]):
    """Iterate over the bytes ``[start, start + length)`` of a file.

    Reads are positional (``pread``) at the reader's own cursor and never move
    the handle's file offset, so any number of readers may share one handle,
    from any number of threads. The handle must be backed by a real file
    descriptor. The reader is exhausted after one pass.
    """

    def __init__(
        self,
        handle: BinaryIO,
        start: int,
        length: int,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
    ):
        """Initialize range reader.

        Args:
            handle: Open binary file handle with a file descriptor
            start: Absolute offset of the first byte
            length: Number of bytes to produce
            chunk_size: Maximum bytes returned per step
        """
        if start < 0 or length < 0:
            raise ValueError(f"Invalid range: start={start}, length={length}")
        if chunk_size <= 0:
            raise ValueError("chunk_size must be positive")

        self._handle = handle
        self._position = start
        self._remaining = length
        self._chunk_size = chunk_size
        self._start = start
        self._length = length

    @property
    def remaining(self) -> int:
        """Bytes not yet produced."""
        return self._remaining

    def __iter__(self) -> RangeReader:
        return self

    def __next__(self) -> bytes:
        if self._remaining <= 0:
            raise StopIteration

        if self._handle.closed:
            raise ArchiveClosedError("Package closed while reading")

        chunk = os.pread(
            self._handle.fileno(),
            min(self._chunk_size, self._remaining),
            self._position,
        )
        if not chunk:
            produced = self._length - self._remaining
            self._remaining = 0
            raise TruncatedArchiveError(
                f"Unexpected end of file at offset {self._position}: "
                f"read {produced} of {self._length} bytes starting at {self._start}",
                expected=self._length,
                actual=produced,
            )

        self._position += len(chunk)
        self._remaining -= len(chunk)
        return chunk

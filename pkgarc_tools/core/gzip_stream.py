"""Streaming gzip transforms used for entry payloads."""

from __future__ import annotations

import zlib
from collections.abc import Iterable, Iterator

from pkgarc_tools.core.errors import CorruptEntryError, TruncatedArchiveError

# zlib window bits selecting the gzip container
GZIP_WBITS = 16 + zlib.MAX_WBITS


def compress_stream(chunks: Iterable[bytes], level: int = -1) -> Iterator[bytes]:
    """Gzip-compress a stream of chunks.

    Args:
        chunks: Uncompressed data chunks
        level: zlib compression level (-1 for default)

    Yields:
        Non-empty compressed blocks forming a single gzip member
    """
    compressor = zlib.compressobj(level, zlib.DEFLATED, GZIP_WBITS)
    for chunk in chunks:
        block = compressor.compress(chunk)
        if block:
            yield block
    tail = compressor.flush()
    if tail:
        yield tail


def decompress_stream(chunks: Iterable[bytes]) -> Iterator[bytes]:
    """Inflate a single gzip member delivered as a stream of chunks.

    Args:
        chunks: Compressed data chunks

    Yields:
        Non-empty decompressed blocks

    Raises:
        CorruptEntryError: If the data is not valid gzip or has trailing bytes
        TruncatedArchiveError: If the stream ends before the gzip trailer
    """
    decompressor = zlib.decompressobj(GZIP_WBITS)
    try:
        for chunk in chunks:
            if decompressor.eof:
                raise CorruptEntryError(
                    "Unexpected data after end of gzip stream",
                    actual=len(chunk),
                )
            block = decompressor.decompress(chunk)
            if block:
                yield block
        tail = decompressor.flush()
    except zlib.error as e:
        raise CorruptEntryError(f"gzip decompression failed: {e}") from e

    if tail:
        yield tail
    if not decompressor.eof:
        raise TruncatedArchiveError("gzip stream ended before its trailer")
    if decompressor.unused_data:
        raise CorruptEntryError(
            "Unexpected data after end of gzip stream",
            actual=len(decompressor.unused_data),
        )

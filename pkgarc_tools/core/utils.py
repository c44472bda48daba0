"""Shared utilities for pkgarc-tools."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from typing import BinaryIO


def chunked_read(
    stream: BinaryIO,
    chunk_size: int = 8192
) -> Iterator[bytes]:
    """Read stream in chunks.

    Args:
        stream: Binary stream to read from
        chunk_size: Size of each chunk in bytes

    Yields:
        Data chunks as bytes

    Raises:
        ValueError: If chunk_size is not positive

    Example:
        >>> import io
        >>> stream = io.BytesIO(b"hello world")
        >>> chunks = list(chunked_read(stream, chunk_size=5))
        >>> chunks
        [b'hello', b' worl', b'd']
    """
    if chunk_size <= 0:
        raise ValueError("chunk_size must be positive")

    while True:
        chunk = stream.read(chunk_size)
        if not chunk:
            break
        yield chunk


def iter_source(
    data: bytes | bytearray | memoryview | str | BinaryIO | Iterable[bytes],
    chunk_size: int = 8192
) -> Iterator[bytes]:
    """Turn any supported entry source into a stream of byte chunks.

    Args:
        data: Bytes, text (encoded as UTF-8), a binary file object or an
            iterable of byte chunks
        chunk_size: Read size used for file objects

    Yields:
        Data chunks as bytes

    Raises:
        TypeError: If data is not a supported source
    """
    if isinstance(data, str):
        yield data.encode("utf-8")
    elif isinstance(data, (bytes, bytearray, memoryview)):
        yield bytes(data)
    elif hasattr(data, "read"):
        yield from chunked_read(data, chunk_size)  # type: ignore[arg-type]
    elif isinstance(data, Iterable):
        for chunk in data:
            if isinstance(chunk, str):
                raise TypeError("Iterable sources must yield bytes, not str")
            yield bytes(chunk)
    else:
        raise TypeError(f"Unsupported entry source: {type(data).__name__}")


def format_size(size: int) -> str:
    """Format byte size as human-readable string.

    Args:
        size: Size in bytes

    Returns:
        Formatted string with appropriate unit (e.g., "1.5 MB")

    Example:
        >>> format_size(1024)
        '1.0 KB'
        >>> format_size(1536)
        '1.5 KB'
        >>> format_size(1048576)
        '1.0 MB'
    """
    if size < 0:
        return "0 B"

    size_float = float(size)
    for unit in ["B", "KB", "MB", "GB", "TB"]:
        if size_float < 1024.0:
            if unit == "B":
                return f"{int(size_float)} {unit}"
            return f"{size_float:.1f} {unit}"
        size_float /= 1024.0
    return f"{size_float:.1f} PB"

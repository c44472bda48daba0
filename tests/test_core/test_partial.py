"""Tests for bounded range reads."""

from collections.abc import Callable, Generator
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import BinaryIO

import pytest

from pkgarc_tools.core.errors import ArchiveClosedError, TruncatedArchiveError
from pkgarc_tools.core.partial import RangeReader


@pytest.fixture
def open_file(temp_dir: Path) -> Generator[Callable[[bytes], BinaryIO], None, None]:
    """Factory writing bytes to a temp file and opening it for reading."""
    handles: list[BinaryIO] = []

    def factory(data: bytes) -> BinaryIO:
        path = temp_dir / f"range{len(handles)}.bin"
        path.write_bytes(data)
        handle = open(path, "rb", buffering=0)  # noqa: SIM115
        handles.append(handle)
        return handle

    yield factory

    for handle in handles:
        handle.close()


class TestRangeReader:
    """Test RangeReader class."""

    def test_reads_exact_range(self, open_file):
        """Only the requested window is produced."""
        handle = open_file(b"0123456789")

        assert b"".join(RangeReader(handle, 2, 5)) == b"23456"

    def test_chunking(self, open_file):
        """Chunks never exceed chunk_size."""
        handle = open_file(b"abcdefghij")

        chunks = list(RangeReader(handle, 1, 8, chunk_size=3))

        assert chunks == [b"bcd", b"efg", b"hi"]

    def test_zero_length(self, open_file):
        """Empty range produces nothing."""
        assert list(RangeReader(open_file(b"abc"), 1, 0)) == []

    def test_remaining(self, open_file):
        """remaining counts down as chunks are produced."""
        reader = RangeReader(open_file(b"abcdef"), 0, 6, chunk_size=4)

        assert reader.remaining == 6
        next(reader)
        assert reader.remaining == 2
        next(reader)
        assert reader.remaining == 0
        with pytest.raises(StopIteration):
            next(reader)

    def test_independent_cursors(self, open_file):
        """Interleaved readers on one handle do not disturb each other."""
        handle = open_file(b"AAAABBBB")
        first = RangeReader(handle, 0, 4, chunk_size=1)
        second = RangeReader(handle, 4, 4, chunk_size=1)

        result = []
        for a, b in zip(first, second):
            result.append(a + b)

        assert result == [b"AB"] * 4

    def test_handle_offset_untouched(self, open_file):
        """Reads neither depend on nor move the handle's file offset."""
        handle = open_file(b"0123456789")
        reader = RangeReader(handle, 3, 4, chunk_size=2)

        handle.seek(7)
        assert next(reader) == b"34"
        assert handle.tell() == 7
        handle.seek(0)
        assert next(reader) == b"56"
        assert handle.tell() == 0

    def test_readers_across_threads(self, open_file):
        """Readers sharing one handle from many threads get their own bytes."""
        blocks = [bytes([i]) * 4096 for i in range(16)]
        handle = open_file(b"".join(blocks))

        def read_block(index: int) -> bytes:
            return b"".join(RangeReader(handle, index * 4096, 4096, chunk_size=7))

        with ThreadPoolExecutor(max_workers=8) as executor:
            results = list(executor.map(read_block, list(range(16)) * 4))

        assert results == blocks * 4

    def test_truncated(self, open_file):
        """Range past end of file raises TruncatedArchiveError."""
        reader = RangeReader(open_file(b"0123"), 2, 10)

        assert next(reader) == b"23"
        with pytest.raises(TruncatedArchiveError) as exc_info:
            next(reader)

        assert exc_info.value.expected == 10
        assert exc_info.value.actual == 2

    def test_closed_handle(self, open_file):
        """Reading from a closed handle raises ArchiveClosedError."""
        handle = open_file(b"0123")
        reader = RangeReader(handle, 0, 4)
        handle.close()

        with pytest.raises(ArchiveClosedError):
            next(reader)

    def test_invalid_arguments(self, open_file):
        """Negative ranges and chunk sizes are rejected."""
        handle = open_file(b"")

        with pytest.raises(ValueError):
            RangeReader(handle, -1, 1)
        with pytest.raises(ValueError):
            RangeReader(handle, 0, -1)
        with pytest.raises(ValueError):
            RangeReader(handle, 0, 1, chunk_size=0)

"""Tests for streaming gzip transforms."""

import gzip
import os

import pytest

from pkgarc_tools.core.errors import CorruptEntryError, TruncatedArchiveError
from pkgarc_tools.core.gzip_stream import compress_stream, decompress_stream


def _split(data: bytes, size: int) -> list[bytes]:
    return [data[i:i + size] for i in range(0, len(data), size)]


class TestCompressStream:
    """Test compress_stream function."""

    def test_output_is_gzip(self):
        """Output is one standard gzip member."""
        data = b"hello world " * 100

        compressed = b"".join(compress_stream([data]))

        assert compressed[:2] == b"\x1f\x8b"
        assert gzip.decompress(compressed) == data

    def test_chunked_input(self):
        """Input may arrive in any number of chunks."""
        data = os.urandom(5000)

        compressed = b"".join(compress_stream(_split(data, 7)))

        assert gzip.decompress(compressed) == data

    def test_empty_input(self):
        """Empty input still yields a valid gzip member."""
        compressed = b"".join(compress_stream([]))

        assert len(compressed) > 0
        assert gzip.decompress(compressed) == b""

    def test_levels(self):
        """Stored level 0 is larger than level 9 on redundant data."""
        data = b"a" * 10000

        stored = b"".join(compress_stream([data], level=0))
        packed = b"".join(compress_stream([data], level=9))

        assert len(packed) < len(stored)
        assert gzip.decompress(stored) == gzip.decompress(packed) == data


class TestDecompressStream:
    """Test decompress_stream function."""

    def test_round_trip(self):
        """Decompression restores the original bytes."""
        data = b"The quick brown fox " * 50
        compressed = gzip.compress(data)

        assert b"".join(decompress_stream(_split(compressed, 16))) == data

    def test_empty_member(self):
        """A gzip member of empty content inflates to nothing."""
        assert b"".join(decompress_stream([gzip.compress(b"")])) == b""

    def test_not_gzip(self):
        """Random bytes raise CorruptEntryError."""
        with pytest.raises(CorruptEntryError):
            list(decompress_stream([b"definitely not gzip data"]))

    def test_truncated(self):
        """Stream ending before the trailer raises TruncatedArchiveError."""
        compressed = gzip.compress(b"some payload data" * 10)

        with pytest.raises(TruncatedArchiveError):
            list(decompress_stream([compressed[:-4]]))

    def test_no_input(self):
        """No chunks at all is a truncated stream."""
        with pytest.raises(TruncatedArchiveError):
            list(decompress_stream([]))

    def test_trailing_data_same_chunk(self):
        """Bytes after the member in the same chunk are rejected."""
        compressed = gzip.compress(b"payload") + b"junk"

        with pytest.raises(CorruptEntryError, match="after end"):
            list(decompress_stream([compressed]))

    def test_trailing_data_next_chunk(self):
        """Bytes after the member in a later chunk are rejected."""
        compressed = gzip.compress(b"payload")

        with pytest.raises(CorruptEntryError, match="after end"):
            list(decompress_stream([compressed, b"junk"]))

    def test_corrupt_checksum(self):
        """A damaged CRC raises CorruptEntryError."""
        compressed = bytearray(gzip.compress(b"checksummed payload"))
        compressed[-8] ^= 0xFF

        with pytest.raises(CorruptEntryError):
            list(decompress_stream([bytes(compressed)]))

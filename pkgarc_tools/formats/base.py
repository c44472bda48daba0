"""Base classes for the structured blocks of a package file."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable
from pathlib import Path
from typing import BinaryIO, Generic, TypeVar

import structlog
from pydantic import BaseModel

from pkgarc_tools.core.errors import ArchiveError

logger = structlog.get_logger()

T = TypeVar("T", bound=BaseModel)


class FormatParser(ABC, Generic[T]):
    """Parser and builder for one kind of package block.

    Subclasses turn raw block bytes into a pydantic model and back. Blocks
    read out of an archive arrive as chunk streams, so ``parse_chunks`` is
    the usual entry point for engine code.
    """

    @abstractmethod
    def parse(self, data: bytes | BinaryIO) -> T:
        """Parse block data.

        Args:
            data: Block bytes or a binary stream

        Returns:
            Parsed block
        """
        ...

    @abstractmethod
    def build(self, obj: T) -> bytes:
        """Serialize a block.

        Args:
            obj: Block model

        Returns:
            Block bytes
        """
        ...

    def parse_chunks(self, chunks: Iterable[bytes]) -> T:
        """Parse a block delivered as a sequence of chunks."""
        return self.parse(b"".join(chunks))

    def parse_file(self, path: str | Path) -> T:
        """Parse a block from the start of a file.

        Raises:
            ValueError: If the file cannot be read
        """
        try:
            with open(path, "rb") as f:
                return self.parse(f)
        except OSError as e:
            logger.error("Failed to read file", path=str(path), error=str(e))
            raise ValueError(f"Cannot read file {path}: {e}") from e

    def validate(self, data: bytes) -> tuple[bool, str]:
        """Check that data parses and rebuilds to the same bytes.

        Returns:
            Tuple of (is_valid, error_message)
        """
        try:
            rebuilt = self.build(self.parse(data))
        except (ArchiveError, ValueError) as e:
            return False, str(e)
        if rebuilt != data:
            return False, "Round-trip validation failed"
        return True, "Valid"

"""Error taxonomy for package archives.

Every failure raised by the archive engine derives from ``ArchiveError`` so
callers can abort a whole pack or spill operation with a single handler.
Errors that describe bad input also derive from the matching builtin
(``ValueError``, ``LookupError``) so generic handlers keep working.
"""

from __future__ import annotations


class ArchiveError(Exception):
    """Base class for package archive errors.

    Attributes:
        path: Archive file involved, when known
        name: Entry name involved, when known
        expected: Expected value (size, offset, magic) when relevant
        actual: Actual value observed when relevant
    """

    def __init__(
        self,
        message: str,
        *,
        path: str | None = None,
        name: str | None = None,
        expected: str | int | None = None,
        actual: str | int | None = None,
    ):
        self.path = path
        self.name = name
        self.expected = expected
        self.actual = actual
        super().__init__(message)


class FormatError(ArchiveError, ValueError):
    """Header signature or version does not match."""


class TruncatedArchiveError(ArchiveError):
    """File is shorter than its header, catalog or an entry claims."""


class CatalogCorruptError(ArchiveError, ValueError):
    """Catalog block cannot be inflated or parsed."""


class CorruptEntryError(ArchiveError, ValueError):
    """Entry bytes are not a valid gzip stream."""


class EntryNotFoundError(ArchiveError, LookupError):
    """No catalog entry for the requested name."""


class InvalidNameError(ArchiveError, ValueError):
    """Entry name normalizes to the reserved catalog key."""


class ShortWriteError(ArchiveError):
    """Underlying write accepted fewer bytes than requested."""


class ArchiveClosedError(ArchiveError, ValueError):
    """Operation attempted on a closed package."""


class ReadOnlyArchiveError(ArchiveError):
    """Write attempted on a package opened read-only."""

"""Entry name normalization.

Entry names are resolved against a synthetic ``archive://<archive name>/``
base, much like a relative URL against a base URL, so that different
spellings of the same logical path share one catalog key::

    >>> normalize_name("docs/./a//b.txt", "demo")
    'archive://demo/docs/a/b.txt'
    >>> normalize_name("/docs/x/../a/b.txt", "demo")
    'archive://demo/docs/a/b.txt'

The empty key is reserved for the catalog block itself.
"""

from __future__ import annotations

from pkgarc_tools.core.errors import InvalidNameError

SCHEME = "archive"
CATALOG_KEY = ""
SCHEME_PREFIX = f"{SCHEME}://"


def archive_base(archive_name: str) -> str:
    """Return the synthetic base URL for an archive name."""
    return f"{SCHEME_PREFIX}{archive_name}/"


def _split_key(key: str) -> tuple[str, str]:
    """Split an absolute key into archive name and path.

    Everything after the archive name is path, including ``#`` and ``?``.
    """
    netloc, _, path = key[len(SCHEME_PREFIX):].partition("/")
    return netloc, path


def _resolve_segments(path: str) -> list[str]:
    segments: list[str] = []
    for part in path.split("/"):
        if part in ("", "."):
            continue
        if part == "..":
            # Clamp at the archive root
            if segments:
                segments.pop()
            continue
        segments.append(part)
    return segments


def normalize_name(name: str, archive_name: str) -> str:
    """Canonicalize a user supplied entry name into a catalog key.

    Args:
        name: Relative or absolute entry path, or an ``archive://`` key
        archive_name: Name of the archive the entry belongs to

    Returns:
        Catalog key

    Raises:
        InvalidNameError: If the name resolves to the archive root or
            points into a different archive
    """
    path = name
    if name.startswith(SCHEME_PREFIX):
        netloc, path = _split_key(name)
        if netloc != archive_name:
            raise InvalidNameError(
                f"Entry {name!r} does not belong to archive {archive_name!r}",
                name=name,
            )

    segments = _resolve_segments(path)
    if not segments:
        raise InvalidNameError(f"Invalid entry name: {name!r}", name=name)

    return archive_base(archive_name) + "/".join(segments)


def denormalize_name(key: str, archive_name: str) -> str:
    """Turn a catalog key back into a user-facing relative path.

    Args:
        key: Catalog key
        archive_name: Name of the archive

    Returns:
        Relative entry path, or an empty string for the catalog key
    """
    if key == CATALOG_KEY:
        return ""

    base = archive_base(archive_name)
    if key.startswith(base):
        return key[len(base):]

    if key.startswith(SCHEME_PREFIX):
        return _split_key(key)[1].lstrip("/")
    return key.lstrip("/")

"""Directory traversal for packing."""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path


def walk_files(root: Path) -> Iterator[Path]:
    """Walk a directory tree depth-first.

    Entries of each directory are visited in sorted order; files are yielded
    as they are met and subdirectories are descended into in place.

    Args:
        root: Directory to walk, or a single file

    Yields:
        File paths relative to root. A file root yields itself unchanged.
    """
    root = Path(root)
    if root.is_file():
        yield root
        return
    if not root.is_dir():
        return

    for child in sorted(root.iterdir(), key=lambda p: p.name):
        if child.is_file():
            yield Path(child.name)
        elif child.is_dir():
            for sub in walk_files(child):
                yield Path(child.name) / sub

"""Pytest configuration and shared fixtures for pkgarc_tools tests."""

import tempfile
from collections.abc import Generator
from pathlib import Path

import pytest
from click.testing import CliRunner

from pkgarc_tools.core.package import Package


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmp_dir:
        yield Path(tmp_dir)


@pytest.fixture
def archive_path(temp_dir: Path) -> Path:
    """Path for a package that does not exist yet."""
    return temp_dir / "a.pkg"


@pytest.fixture
def sample_archive(archive_path: Path) -> Path:
    """Package holding a few small entries, already closed."""
    with Package.open(archive_path) as pkg:
        pkg.add("notes.txt", "hello")
        pkg.add("docs/readme.md", b"# Readme\n")
        pkg.add("data/config.json", '{"enabled": true, "items": [1, 2, 3]}')
        pkg.add("empty.bin", b"")
    return archive_path


@pytest.fixture
def sample_tree(temp_dir: Path) -> Path:
    """Directory tree ``src/a`` holding ``b.txt`` and ``c/d.txt``."""
    root = temp_dir / "src" / "a"
    (root / "c").mkdir(parents=True)
    (root / "b.txt").write_text("bee")
    (root / "c" / "d.txt").write_text("dee")
    return root


@pytest.fixture
def runner() -> CliRunner:
    """Create CLI test runner."""
    return CliRunner()


# Pytest configuration
def pytest_configure(config: pytest.Config) -> None:
    """Configure pytest settings."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )


def pytest_collection_modifyitems(config: pytest.Config, items: list) -> None:
    """Modify test collection to add markers automatically."""
    for item in items:
        # Add unit marker to all tests by default
        if not any(marker.name in ['integration', 'slow'] for marker in item.iter_markers()):
            item.add_marker(pytest.mark.unit)

"""Tests for pack and spill commands."""

from pathlib import Path

from click.testing import CliRunner

from pkgarc_tools.__main__ import main
from pkgarc_tools.core.package import Package


class TestPackCommand:
    """Test pack command."""

    def test_pack_directory(self, runner: CliRunner, sample_tree: Path, temp_dir: Path) -> None:
        """Directory files are stored relative to the directory's parent."""
        archive = temp_dir / "out.pkg"

        result = runner.invoke(main, ["pack", str(archive), str(sample_tree)])

        assert result.exit_code == 0, result.output
        assert "Packing: a/b.txt" in result.output
        assert "Packing: a/c/d.txt" in result.output
        with Package.open(archive, readonly=True) as pkg:
            assert pkg.entries == {"a/b.txt", "a/c/d.txt"}
            assert pkg.text("a/c/d.txt") == "dee"

    def test_pack_file(self, runner: CliRunner, sample_tree: Path, temp_dir: Path) -> None:
        """Single files are stored under their base name."""
        archive = temp_dir / "out.pkg"

        result = runner.invoke(main, ["pack", str(archive), str(sample_tree / "c" / "d.txt")])

        assert result.exit_code == 0, result.output
        with Package.open(archive, readonly=True) as pkg:
            assert pkg.entries == {"d.txt"}

    def test_pack_appends(self, runner: CliRunner, sample_archive: Path, sample_tree: Path) -> None:
        """Packing into an existing archive keeps its entries."""
        result = runner.invoke(main, ["pack", str(sample_archive), str(sample_tree / "b.txt")])

        assert result.exit_code == 0, result.output
        with Package.open(sample_archive, readonly=True) as pkg:
            assert "notes.txt" in pkg.entries
            assert pkg.text("b.txt") == "bee"

    def test_pack_name(self, runner: CliRunner, sample_tree: Path, temp_dir: Path) -> None:
        """--name sets the archive name of a new package."""
        archive = temp_dir / "out.pkg"

        result = runner.invoke(main, ["pack", "--name", "demo", str(archive), str(sample_tree)])

        assert result.exit_code == 0, result.output
        with Package.open(archive, readonly=True) as pkg:
            assert pkg.name == "demo"

    def test_pack_skips_own_archive(self, runner: CliRunner, sample_tree: Path) -> None:
        """An archive inside the packed directory is not added to itself."""
        archive = sample_tree / "self.pkg"

        result = runner.invoke(main, ["pack", str(archive), str(sample_tree)])

        assert result.exit_code == 0, result.output
        with Package.open(archive, readonly=True) as pkg:
            assert pkg.entries == {"a/b.txt", "a/c/d.txt"}

    def test_pack_skips_own_archive_file(self, runner: CliRunner, sample_archive: Path) -> None:
        """Naming the archive itself as a source adds nothing."""
        before = sample_archive.read_bytes()

        result = runner.invoke(main, ["pack", str(sample_archive), str(sample_archive)])

        assert result.exit_code == 0, result.output
        assert "Packing:" not in result.output
        assert sample_archive.read_bytes() == before

    def test_pack_not_a_package(self, runner: CliRunner, temp_dir: Path, sample_tree: Path) -> None:
        """Packing into a foreign file fails cleanly."""
        archive = temp_dir / "foreign.bin"
        archive.write_bytes(b"\x00" * 64)

        result = runner.invoke(main, ["pack", str(archive), str(sample_tree)])

        assert result.exit_code != 0
        assert "Cannot open" in result.output

    def test_pack_missing_source(self, runner: CliRunner, temp_dir: Path) -> None:
        """Missing sources are rejected by argument validation."""
        result = runner.invoke(main, ["pack", str(temp_dir / "out.pkg"), str(temp_dir / "nope")])

        assert result.exit_code == 2


class TestSpillCommand:
    """Test spill command."""

    def test_spill(self, runner: CliRunner, sample_archive: Path, temp_dir: Path) -> None:
        """Every entry is written below the output directory."""
        out = temp_dir / "out"

        result = runner.invoke(main, ["spill", str(sample_archive), str(out)])

        assert result.exit_code == 0, result.output
        assert (out / "notes.txt").read_text() == "hello"
        assert (out / "docs" / "readme.md").read_text() == "# Readme\n"
        assert (out / "empty.bin").read_bytes() == b""

    def test_extract_alias(self, runner: CliRunner, sample_archive: Path, temp_dir: Path) -> None:
        """extract is an alias of spill."""
        out = temp_dir / "out"

        result = runner.invoke(main, ["--verbose", "extract", str(sample_archive), str(out)])

        assert result.exit_code == 0, result.output
        assert "Extracted: notes.txt" in result.output
        assert (out / "data" / "config.json").exists()

    def test_pack_spill_round_trip(self, runner: CliRunner, sample_tree: Path, temp_dir: Path) -> None:
        """Spilling a packed directory recreates its files."""
        archive = temp_dir / "tree.pkg"
        out = temp_dir / "restored"

        assert runner.invoke(main, ["pack", str(archive), str(sample_tree)]).exit_code == 0
        result = runner.invoke(main, ["spill", str(archive), str(out)])

        assert result.exit_code == 0, result.output
        assert (out / "a" / "b.txt").read_text() == "bee"
        assert (out / "a" / "c" / "d.txt").read_text() == "dee"

    def test_spill_missing_archive(self, runner: CliRunner, temp_dir: Path) -> None:
        """Missing archives are rejected by argument validation."""
        result = runner.invoke(main, ["spill", str(temp_dir / "nope.pkg")])

        assert result.exit_code == 2

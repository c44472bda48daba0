"""Commands for building and unpacking package archives."""

from __future__ import annotations

from pathlib import Path

import click
import structlog

from pkgarc_tools.commands.common import get_context_objects, open_package
from pkgarc_tools.core.errors import ArchiveError
from pkgarc_tools.core.package import Package
from pkgarc_tools.core.walker import walk_files

logger = structlog.get_logger()


def _add_file(pkg: Package, file: Path, name: str) -> None:
    click.echo(f"Packing: {name}", err=True)
    with open(file, "rb") as f:
        pkg.add(name, f)


@click.command()
@click.argument("archive_file", type=click.Path(dir_okay=False, path_type=Path))
@click.argument("paths", nargs=-1, type=click.Path(exists=True, path_type=Path))
@click.option("--name", "-n", help="Archive name when creating a new package")
@click.pass_context
def pack(ctx: click.Context, archive_file: Path, paths: tuple[Path, ...], name: str | None) -> None:
    """Pack files and directories into a package.

    Files are stored under their base name. Directories are walked and each
    file is stored relative to the directory's parent, so packing ``a`` stores
    ``a/b.txt``. The package is created if it does not exist.
    """
    config, console, verbose, debug = get_context_objects(ctx)
    archive_path = archive_file.resolve()
    count = 0

    with open_package(archive_file, config, name=name) as pkg:
        try:
            for item in paths:
                item = item.resolve()
                if item == archive_path:
                    continue
                if item.is_file():
                    _add_file(pkg, item, item.name)
                    count += 1
                elif item.is_dir():
                    for relative in walk_files(item):
                        file = item / relative
                        if file == archive_path:
                            continue
                        _add_file(pkg, file, file.relative_to(item.parent).as_posix())
                        count += 1
        except (ArchiveError, OSError) as e:
            raise click.ClickException(f"Packing failed: {e}") from e

    logger.info("Packed files", archive=str(archive_file), count=count)
    if verbose:
        click.echo(f"Packed {count} files into {archive_file}", err=True)


@click.command()
@click.argument("archive_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("directory", required=False, default=".", type=click.Path(file_okay=False, path_type=Path))
@click.pass_context
def spill(ctx: click.Context, archive_file: Path, directory: Path) -> None:
    """Extract every entry of a package into a directory."""
    config, console, verbose, debug = get_context_objects(ctx)
    directory = directory.resolve()

    with open_package(archive_file, config, readonly=True) as pkg:
        for name in sorted(pkg.entries):
            target = (directory / name).resolve()
            if not target.is_relative_to(directory):
                raise click.ClickException(f"Entry escapes output directory: {name}")

            target.parent.mkdir(parents=True, exist_ok=True)
            try:
                with open(target, "wb") as out:
                    for chunk in pkg.get(name):
                        out.write(chunk)
            except (ArchiveError, OSError) as e:
                raise click.ClickException(f"Cannot extract {name}: {e}") from e

            if verbose:
                click.echo(f"Extracted: {name}", err=True)

"""Commands for inspecting package archives."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import click
import structlog
from rich.table import Table

from pkgarc_tools.commands.common import get_context_objects, open_package
from pkgarc_tools.core.errors import ArchiveError
from pkgarc_tools.core.reader import PackageReader
from pkgarc_tools.core.utils import format_size
from pkgarc_tools.formats.header import HEADER_SIZE, HeaderParser

logger = structlog.get_logger()


@click.command(name="list")
@click.argument("archive_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--long", "-l", "long_format", is_flag=True, help="Show offsets and compressed sizes")
@click.pass_context
def list_entries(ctx: click.Context, archive_file: Path, long_format: bool) -> None:
    """List the entries of a package."""
    config, console, verbose, debug = get_context_objects(ctx)

    with open_package(archive_file, config, readonly=True) as pkg:
        names = sorted(pkg.entries)
        locations = {name: pkg.locate(name) for name in names}

    if config.output_format == "json":
        if long_format:
            data: Any = [
                {"name": name, "start": loc.start, "length": loc.length}
                for name, loc in locations.items()
            ]
        else:
            data = names
        # Use regular print for JSON to avoid Rich formatting
        print(json.dumps(data, indent=2))
        return

    if long_format and config.output_format == "rich":
        table = Table(title=f"Entries in {archive_file.name}")
        table.add_column("Name", style="cyan")
        table.add_column("Offset", justify="right")
        table.add_column("Compressed", justify="right")
        for name, loc in locations.items():
            table.add_row(name, f"0x{loc.start:08x}", format_size(loc.length))
        console.print(table)
        return

    for name in names:
        if long_format:
            click.echo(f"{name}\t{locations[name].start}\t{locations[name].length}")
        else:
            click.echo(name)


@click.command()
@click.argument("archive_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("names", nargs=-1, required=True)
@click.pass_context
def show(ctx: click.Context, archive_file: Path, names: tuple[str, ...]) -> None:
    """Write the content of entries to standard output."""
    config, console, verbose, debug = get_context_objects(ctx)
    stdout = click.get_binary_stream("stdout")

    with open_package(archive_file, config, readonly=True) as pkg:
        for name in names:
            try:
                for chunk in pkg.get(name):
                    stdout.write(chunk)
            except ArchiveError as e:
                raise click.ClickException(f"Cannot show {name}: {e}") from e
    stdout.flush()


@click.command()
@click.argument("archive_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.pass_context
def info(ctx: click.Context, archive_file: Path) -> None:
    """Show header and catalog information for a package."""
    config, console, verbose, debug = get_context_objects(ctx)

    try:
        header = HeaderParser().parse_file(str(archive_file))
        reader = PackageReader(archive_file, config.archive_config())
    except ArchiveError as e:
        raise click.ClickException(f"Cannot read {archive_file}: {e}") from e

    locations = [
        entry for key, entry in reader.catalog.entries.items() if key
    ]
    compressed = sum(entry.length for entry in locations)
    file_size = archive_file.stat().st_size

    stats: dict[str, Any] = {
        "file": str(archive_file),
        "name": reader.name,
        "version": header.version,
        "header_size": HEADER_SIZE,
        "catalog_start": header.catalog_start,
        "catalog_length": header.catalog_length,
        "entries": len(locations),
        "compressed_size": compressed,
        "file_size": file_size,
    }
    logger.debug("Package info", **stats)

    if config.output_format == "json":
        print(json.dumps(stats, indent=2))
        return

    if config.output_format == "plain":
        for key, value in stats.items():
            click.echo(f"{key}: {value}")
        return

    table = Table(title=f"Package {reader.name}")
    table.add_column("Property", style="cyan")
    table.add_column("Value", style="white")
    table.add_row("File", archive_file.name)
    table.add_row("Version", str(header.version))
    table.add_row("Catalog offset", f"0x{header.catalog_start:08x}")
    table.add_row("Catalog size", format_size(header.catalog_length))
    table.add_row("Entries", f"{len(locations):,}")
    table.add_row("Compressed data", format_size(compressed))
    table.add_row("File size", format_size(file_size))
    console.print(table)

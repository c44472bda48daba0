"""Helpers shared by CLI commands."""

from __future__ import annotations

from pathlib import Path

import click
from rich.console import Console

from pkgarc_tools.core.config import AppConfig
from pkgarc_tools.core.errors import ArchiveError
from pkgarc_tools.core.package import Package


def get_context_objects(ctx: click.Context) -> tuple[AppConfig, Console, bool, bool]:
    """Extract common context objects."""
    config: AppConfig = ctx.obj["config"]
    console: Console = ctx.obj["console"]
    verbose: bool = ctx.obj["verbose"]
    debug: bool = ctx.obj["debug"]
    return config, console, verbose, debug


def open_package(path: Path, config: AppConfig, *, readonly: bool = False, name: str | None = None) -> Package:
    """Open a package for a command, turning failures into click errors.

    Args:
        path: Archive file path
        config: Application configuration
        readonly: Open without write access
        name: Archive name used when a new package is created

    Returns:
        Open package

    Raises:
        click.ClickException: If the archive cannot be opened
    """
    try:
        return Package.open(path, readonly=readonly, name=name, config=config.archive_config())
    except (ArchiveError, OSError) as e:
        raise click.ClickException(f"Cannot open {path}: {e}") from e

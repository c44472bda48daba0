"""Command-line entry point for pkgarc-tools."""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import Any

import click
import structlog
from rich.console import Console

from pkgarc_tools import __version__
from pkgarc_tools.commands.inspect import info, list_entries, show
from pkgarc_tools.commands.pack import pack, spill
from pkgarc_tools.core.config import AppConfig

OUTPUT_FORMATS = ["rich", "json", "plain"]

# Configure structured logging
structlog.configure(
    processors=[
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.dev.ConsoleRenderer(),
    ],
    logger_factory=structlog.stdlib.LoggerFactory(),
    wrapper_class=structlog.stdlib.BoundLogger,
    cache_logger_on_first_use=True,
)

logger = structlog.get_logger()


@click.group()
@click.version_option(version=__version__, prog_name="pkgarc-tools")
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Configuration file path",
)
@click.option("--verbose", "-v", is_flag=True, help="Report each processed entry")
@click.option("--debug", "-d", is_flag=True, help="Enable debug logging")
@click.option(
    "--output",
    "-o",
    type=click.Choice(OUTPUT_FORMATS, case_sensitive=False),
    default="rich",
    help="Output format",
)
@click.pass_context
def main(
    ctx: click.Context,
    config: Path | None,
    verbose: bool,
    debug: bool,
    output: str,
) -> None:
    """Pack, list and extract gzip package archives."""
    ctx.ensure_object(dict)

    try:
        app_config = AppConfig.load(config)
    except (OSError, ValueError) as e:
        logger.error("Failed to load configuration", path=str(config), error=str(e))
        sys.exit(1)

    if debug:
        app_config.log_level = "DEBUG"
    elif verbose:
        app_config.log_level = "INFO"
    app_config.output_format = output.lower()

    # Configure logging level
    if debug:
        structlog.configure(
            processors=[
                structlog.contextvars.merge_contextvars,
                structlog.stdlib.filter_by_level,
                structlog.processors.add_log_level,
                structlog.processors.StackInfoRenderer(),
                structlog.dev.set_exc_info,
                structlog.processors.TimeStamper(fmt="iso"),
                structlog.dev.ConsoleRenderer(colors=True),
            ],
            logger_factory=structlog.stdlib.LoggerFactory(),
            wrapper_class=structlog.stdlib.BoundLogger,
            cache_logger_on_first_use=True,
        )

    package_logger = logging.getLogger("pkgarc_tools")
    handler = logging.StreamHandler(sys.stderr)
    previous_level = package_logger.level
    package_logger.addHandler(handler)
    package_logger.setLevel(app_config.log_level)

    def restore_logging() -> None:
        package_logger.removeHandler(handler)
        package_logger.setLevel(previous_level)

    ctx.call_on_close(restore_logging)

    rich_output = app_config.output_format == "rich"
    ctx.obj["config"] = app_config
    ctx.obj["console"] = Console(
        force_terminal=rich_output,
        no_color=not rich_output,
        width=None if rich_output else 120,
    )
    ctx.obj["verbose"] = verbose or debug
    ctx.obj["debug"] = debug

    logger.debug("CLI initialized", config=app_config.model_dump(mode="json"))


@main.command()
@click.pass_context
def version(ctx: click.Context) -> None:
    """Show version information."""
    console: Console = ctx.obj["console"]
    config: AppConfig = ctx.obj["config"]
    details = {
        "name": "pkgarc-tools",
        "version": __version__,
        "python_version": sys.version.replace("\n", " "),
        "platform": sys.platform,
    }

    if config.output_format == "json":
        # Plain print keeps Rich markup out of JSON
        print(json.dumps(details, indent=2))
        return

    console.print(f"{details['name']} {details['version']}")
    if ctx.obj["verbose"]:
        console.print(f"Python {details['python_version']}")
        console.print(f"Platform: {details['platform']}")


main.add_command(list_entries)
main.add_command(show)
main.add_command(info)
main.add_command(pack)
main.add_command(spill)
main.add_command(spill, name="extract")


def handle_exception(exc_type: type[BaseException], exc_value: BaseException, exc_traceback: Any) -> None:
    """Log uncaught exceptions and exit with status 1."""
    if issubclass(exc_type, KeyboardInterrupt):
        logger.info("Operation cancelled by user")
    else:
        logger.error("Uncaught exception", exc_info=(exc_type, exc_value, exc_traceback))
    sys.exit(1)


if __name__ == "__main__":
    sys.excepthook = handle_exception
    main()

"""Main CLI application entry point.

Defines the Typer application and global options.
"""

import logging
from typing import Annotated

import typer
from rich.logging import RichHandler

from dirscope import __version__
from dirscope.cli.commands import config, fs, info, scan, stats
from dirscope.utils.formatting import err_console

# Create main Typer app
app = typer.Typer(
    name="dirscope",
    help="Inspect directory trees, summarise their contents and manage files.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"dirscope version {__version__}")
        raise typer.Exit()


def configure_logging(verbose: bool, quiet: bool) -> None:
    """Route log records to stderr through Rich.

    Args:
        verbose: Log everything down to DEBUG.
        quiet: Only log errors.
    """
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.ERROR
    else:
        level = logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


@app.callback()
def main(
    ctx: typer.Context,
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable verbose output.",
        ),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option(
            "--quiet",
            "-q",
            help="Suppress non-essential output.",
        ),
    ] = False,
) -> None:
    """dirscope - Inspect directory trees and manage files.

    Build a tree of a directory, look at statistics and properties for
    any entry, and create, rename or delete files.
    """
    configure_logging(verbose, quiet)
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet


# Register commands
app.command(name="scan")(scan.scan_tree)
app.command(name="stats")(stats.show_stats)
app.command(name="info")(info.show_info)
app.add_typer(fs.app, name="fs")
app.add_typer(config.app, name="config")


if __name__ == "__main__":
    app()

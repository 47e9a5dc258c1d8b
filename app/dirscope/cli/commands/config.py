"""Configuration commands.

Shows the effective settings and writes a config file with defaults.
"""

from typing import Annotated

import typer
from rich.table import Table

from dirscope.cli.types import load_settings
from dirscope.core.config import ConfigError, DirscopeConfig, save_config
from dirscope.core.paths import get_config_path
from dirscope.utils.formatting import console, print_error, print_info, print_success

app = typer.Typer(
    help="Show and initialise settings.",
    invoke_without_command=True,
    no_args_is_help=True,
)


@app.command()
def show() -> None:
    """Show the effective settings."""
    settings = load_settings()
    path = get_config_path()

    table = Table(
        title="Settings",
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Key", no_wrap=True)
    table.add_column("Value")
    for key, value in settings.model_dump().items():
        table.add_row(key, str(value))
    console.print(table)

    if path.exists():
        console.print(f"[dim]Loaded from {path}[/dim]")
    else:
        console.print(f"[dim]No config file at {path}, showing defaults[/dim]")


@app.command()
def init(
    force: Annotated[
        bool,
        typer.Option("--force", help="Overwrite an existing config file."),
    ] = False,
) -> None:
    """Write a config file with default settings."""
    path = get_config_path()
    if path.exists() and not force:
        print_info(f"Config already exists: {path} (use --force to overwrite)")
        return

    try:
        saved = save_config(DirscopeConfig(), path, include_defaults=True)
    except ConfigError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    print_success(f"Config written to {saved}")

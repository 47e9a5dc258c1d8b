"""Info command implementation.

Shows the properties of a single file or directory.
"""

from pathlib import Path
from typing import Annotated

import typer
from rich.markup import escape
from rich.table import Table

from dirscope.cli.types import load_settings
from dirscope.filesystem.metadata import read_properties
from dirscope.filesystem.models import FileProperties
from dirscope.filesystem.stats import compute_stats
from dirscope.utils.formatting import console, format_date, format_size, print_error


def show_info(
    path: Annotated[
        Path,
        typer.Argument(help="File or directory to describe."),
    ],
) -> None:
    """Show properties and statistics for PATH."""
    settings = load_settings()
    target = path.expanduser()

    try:
        props = read_properties(target, block_size=settings.block_size)
    except OSError as e:
        print_error(f"Cannot read {target}: {e}")
        raise typer.Exit(code=1) from e

    console.print(build_properties_table(props))


def _yes_no(value: bool) -> str:
    return "[success]Yes[/]" if value else "[muted]No[/]"


def _element_label(count: int | None) -> str:
    if count is None:
        return "[muted](cannot list)[/]"
    return f"{count} elements"


def build_properties_table(props: FileProperties) -> Table:
    """Build a two-column Rich table describing ``props``.

    Folders show their element count as size and a statistics row
    computed by walking the subtree.
    """
    table = Table(
        title=escape(props.name),
        show_header=False,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Property", style="muted")
    table.add_column("Value")

    table.add_row("Path", escape(props.path))
    table.add_row("Parent folder", escape(props.parent) if props.parent else "(none)")
    table.add_row("Type", "Folder" if props.is_directory else "File")
    if props.is_directory:
        table.add_row("Size", _element_label(props.element_count))
    else:
        table.add_row("Size", f"[size]{format_size(props.size_bytes)}[/]")
        table.add_row("Disk size", f"[size]{format_size(props.disk_size_bytes)}[/]")
    table.add_row("Created", format_date(props.created))
    table.add_row("Modified", format_date(props.modified))
    table.add_row("Owner", escape(props.owner))
    table.add_row("Readable", _yes_no(props.readable))
    table.add_row("Writable", _yes_no(props.writable))
    table.add_row("Executable", _yes_no(props.executable))
    table.add_row("Hidden", _yes_no(props.hidden))
    table.add_row("Canonical path", escape(props.canonical_path or "(error)"))

    if props.is_directory:
        snapshot = compute_stats(props.path)
        table.add_row(
            "Statistics",
            f"{snapshot.file_count} files, {snapshot.directory_count} folders, "
            f"{format_size(snapshot.total_bytes)}",
        )
    else:
        table.add_row("Statistics", "single file")

    return table

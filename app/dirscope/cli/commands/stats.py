"""Stats command implementation.

Summarises file counts and sizes for a directory, with optional
extension, size-threshold and largest-file views.
"""

import json
from pathlib import Path
from typing import Annotated

import typer
from rich.markup import escape
from rich.table import Table

from dirscope.cli.types import OutputFormat
from dirscope.filesystem import stats as aggregator
from dirscope.filesystem.models import ExtensionSummary, StatsSnapshot
from dirscope.utils.formatting import console, format_size, print_error, print_info


def show_stats(
    path: Annotated[
        Path,
        typer.Argument(help="Directory to summarise."),
    ],
    extension: Annotated[
        str | None,
        typer.Option(
            "--ext",
            "-e",
            help="Restrict file count and size to this extension (e.g. txt).",
        ),
    ] = None,
    by_extension: Annotated[
        bool,
        typer.Option("--by-extension", "-x", help="Show size per extension."),
    ] = False,
    min_size: Annotated[
        int | None,
        typer.Option("--min-size", min=0, help="List files of at least this many bytes."),
    ] = None,
    top: Annotated[
        int | None,
        typer.Option("--top", "-t", min=1, help="List the N largest files."),
    ] = None,
    output_format: Annotated[
        OutputFormat,
        typer.Option(
            "--format",
            "-f",
            help="Output format.",
            case_sensitive=False,
        ),
    ] = OutputFormat.TABLE,
) -> None:
    """Show file and directory statistics for PATH."""
    target = path.expanduser().resolve()
    if not target.is_dir():
        print_error(f"Path is not a directory: {target}")
        raise typer.Exit(code=1)

    snapshot = aggregator.compute_stats(target, extension)
    breakdown = aggregator.extension_breakdown(target) if by_extension else []
    large = aggregator.filter_by_min_size(target, min_size) if min_size is not None else []
    largest = aggregator.files_sorted_by_size(target)[:top] if top else []

    if output_format == OutputFormat.JSON:
        data: dict[str, object] = {
            "path": snapshot.path,
            "extension": snapshot.extension,
            "files": snapshot.file_count,
            "directories": snapshot.directory_count,
            "total_bytes": snapshot.total_bytes,
        }
        if by_extension:
            data["by_extension"] = [
                {"extension": s.extension, "files": s.file_count, "total_bytes": s.total_bytes}
                for s in breakdown
            ]
        if min_size is not None:
            data["min_size_matches"] = [str(p) for p in large]
        if top:
            data["largest"] = [str(p) for p in largest]
        console.print_json(json.dumps(data))
        return

    _print_summary(snapshot)
    if by_extension:
        _print_breakdown(breakdown)
    if min_size is not None:
        _print_files(f"Files of at least {format_size(min_size)}", large)
    if top:
        _print_files(f"Largest {top} files", largest)


def _print_summary(snapshot: StatsSnapshot) -> None:
    scope = f" (*.{snapshot.extension})" if snapshot.extension else ""
    console.print(
        f"[bold_header]{escape(snapshot.path)}[/]{scope}: "
        f"{snapshot.file_count} files, {snapshot.directory_count} folders, "
        f"[size]{format_size(snapshot.total_bytes)}[/]"
    )


def _print_breakdown(breakdown: list[ExtensionSummary]) -> None:
    if not breakdown:
        print_info("No files found.")
        return
    table = Table(
        title="Size by Extension",
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Extension")
    table.add_column("Files", justify="right")
    table.add_column("Size", style="size", justify="right")
    for summary in breakdown:
        label = f".{summary.extension}" if summary.extension else "(none)"
        table.add_row(label, str(summary.file_count), format_size(summary.total_bytes))
    console.print(table)


def _print_files(title: str, files: list[Path]) -> None:
    if not files:
        print_info(f"{title}: none")
        return
    table = Table(
        title=title,
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Path", no_wrap=True)
    table.add_column("Size", style="size", justify="right")
    for file in files:
        try:
            size = format_size(file.stat().st_size)
        except OSError:
            size = "-"
        table.add_row(escape(str(file)), size)
    console.print(table)

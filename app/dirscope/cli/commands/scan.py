"""Scan command implementation.

Builds the tree for a directory and renders it as a Rich tree or JSON.
"""

import json
from pathlib import Path
from typing import Annotated

import typer
from rich.markup import escape
from rich.tree import Tree

from dirscope.cli.types import OutputFormat, load_settings
from dirscope.core.config import DirscopeConfig
from dirscope.filesystem.builder import DEPTH_CEILING, TreeBuilder
from dirscope.filesystem.errors import DirscopeError
from dirscope.filesystem.models import Node, ScanResult
from dirscope.utils.formatting import console, format_size, print_error, print_warning


def scan_tree(
    path: Annotated[
        Path,
        typer.Argument(help="Directory to scan."),
    ],
    depth: Annotated[
        int | None,
        typer.Option(
            "--depth",
            "-d",
            min=0,
            max=DEPTH_CEILING,
            help=f"Maximum depth, 0-{DEPTH_CEILING} (default from config, 100).",
        ),
    ] = None,
    output_format: Annotated[
        OutputFormat,
        typer.Option(
            "--format",
            "-f",
            help="Output format: table renders a tree.",
            case_sensitive=False,
        ),
    ] = OutputFormat.TABLE,
    show_skipped: Annotated[
        bool,
        typer.Option("--show-skipped", help="List entries that could not be read."),
    ] = False,
) -> None:
    """Build and display the directory tree for PATH."""
    settings = load_settings()
    builder = TreeBuilder(
        max_depth=depth if depth is not None else settings.max_depth,
        follow_symlinks=settings.follow_symlinks,
    )

    try:
        result = builder.build(path.expanduser())
    except DirscopeError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    if output_format == OutputFormat.JSON:
        _print_json(result)
        return

    console.print(render_tree(result.root, settings))

    entries = sum(1 for _ in result.root.iter_nodes()) - 1
    console.print(
        f"\n[dim]{entries} entries under {escape(result.root.path)} "
        f"({result.elapsed_seconds:.2f}s)[/dim]"
    )

    if result.skipped:
        print_warning(f"{len(result.skipped)} entries could not be fully read")
        if show_skipped:
            _print_skipped(result)


def render_tree(root: Node, settings: DirscopeConfig) -> Tree:
    """Build a Rich tree for ``root``.

    Args:
        root: Root node to render.
        settings: Display settings (sorting, hidden files).

    Returns:
        Rich Tree ready to print.
    """
    tree = Tree(_label(root), guide_style="border")
    stack: list[tuple[Node, Tree]] = [(root, tree)]
    while stack:
        node, branch = stack.pop()
        for child in _visible_children(node, settings):
            sub = branch.add(_label(child))
            if child.children:
                stack.append((child, sub))
    return tree


def _visible_children(node: Node, settings: DirscopeConfig) -> list[Node]:
    children = list(node.children)
    if not settings.show_hidden:
        children = [c for c in children if not c.name.startswith(".")]
    if settings.sort_display:
        children.sort(key=lambda c: (not c.is_directory, c.name.lower()))
    return children


def _label(node: Node) -> str:
    if node.is_directory:
        return f"[directory]{escape(node.name)}/[/]"
    return f"[file]{escape(node.name)}[/] [size]({format_size(node.size_bytes)})[/]"


def _print_json(result: ScanResult) -> None:
    data = {
        "root": result.root.to_dict(),
        "max_depth": result.max_depth,
        "skipped": [
            {"path": s.path, "reason": s.reason.value, "error": s.error} for s in result.skipped
        ],
    }
    console.print_json(json.dumps(data))


def _print_skipped(result: ScanResult) -> None:
    for entry in result.skipped:
        detail = f": {entry.error}" if entry.error else ""
        console.print(f"  [skipped]{entry.reason.value}[/] {escape(entry.path)}{escape(detail)}")

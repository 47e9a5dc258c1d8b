"""File operation commands.

Provides commands to create, rename and delete entries. Each successful
operation is followed by a fresh scan of the affected tree.
"""

from pathlib import Path
from typing import Annotated

import typer
from rich.markup import escape

from dirscope.cli.types import load_settings
from dirscope.core.session import BrowseSession
from dirscope.filesystem.errors import DeletionError, DirscopeError
from dirscope.filesystem.mutator import MutationResult
from dirscope.utils.formatting import (
    console,
    print_error,
    print_info,
    print_success,
    print_warning,
)

app = typer.Typer(
    help="Create, rename and delete files.",
    invoke_without_command=True,
    no_args_is_help=True,
)

RootOption = Annotated[
    Path | None,
    typer.Option(
        "--root",
        "-r",
        help="Tree to rescan after the change (default: the affected folder).",
    ),
]


def _session(root: Path, dry_run: bool = False) -> BrowseSession:
    return BrowseSession(root.expanduser(), config=load_settings(), dry_run=dry_run)


def _report_refresh(session: BrowseSession) -> None:
    """Print a one-line summary of the rebuilt tree."""
    tree = session.tree
    if session.stale:
        print_warning(f"Could not rescan {escape(str(session.root))}; the change was applied.")
        return
    if tree is None:
        return
    entries = sum(1 for _ in tree.iter_nodes()) - 1
    console.print(f"[dim]Rescanned {escape(tree.path)}: {entries} entries[/dim]")


@app.command()
def create(
    parent: Annotated[Path, typer.Argument(help="Folder to create the file in.")],
    name: Annotated[str, typer.Argument(help="Name of the new file.")],
    root: RootOption = None,
) -> None:
    """Create an empty file NAME in PARENT."""
    session = _session(root or parent)
    try:
        result = session.create_file(parent.expanduser(), name)
    except DirscopeError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    print_success(f"File created: {result.path}")
    _report_refresh(session)


@app.command()
def rename(
    path: Annotated[Path, typer.Argument(help="File to rename.")],
    new_name: Annotated[str, typer.Argument(help="New file name.")],
    root: RootOption = None,
) -> None:
    """Rename the file at PATH to NEW_NAME (files only)."""
    source = path.expanduser()
    session = _session(root or source.parent)
    try:
        result = session.rename(source, new_name)
    except DirscopeError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    print_success(f"File renamed: {result.path} -> {result.new_path}")
    _report_refresh(session)


@app.command()
def delete(
    path: Annotated[Path, typer.Argument(help="File or folder to delete.")],
    dry_run: Annotated[
        bool,
        typer.Option("--dry-run", help="Show what would be deleted."),
    ] = False,
    yes: Annotated[
        bool,
        typer.Option("--yes", "-y", help="Skip confirmation prompt."),
    ] = False,
    root: RootOption = None,
) -> None:
    """Delete PATH. Folders are removed recursively."""
    target = path.expanduser()
    session = _session(root or target.parent, dry_run=dry_run)

    if not dry_run and not yes:
        confirmed = typer.confirm(
            f'Delete "{target.name}"? This action cannot be undone.',
            default=False,
        )
        if not confirmed:
            print_info("Aborted.")
            raise typer.Exit(code=0)

    try:
        result = session.delete(target)
    except DeletionError as e:
        print_error(str(e))
        if e.deleted:
            print_info(f"{len(e.deleted)} entries were removed before the failure.")
        raise typer.Exit(code=1) from e
    except DirscopeError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    _print_deletion(result)
    _report_refresh(session)


def _print_deletion(result: MutationResult) -> None:
    if result.dry_run:
        print_info(f"Dry-run: {len(result.removed)} entries would be deleted.")
        for entry in result.removed:
            console.print(f"  [muted]{escape(entry)}[/]")
        return
    print_success(f"Deleted {result.path} ({len(result.removed)} entries)")

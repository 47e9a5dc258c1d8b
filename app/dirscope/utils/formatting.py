"""Formatting utilities for sizes, dates and Rich console output.

``format_size`` and ``format_date`` are pure functions with no I/O. The
console helpers provide consistent CLI output using Rich.
"""

import sys
from datetime import datetime

from rich.console import Console

from dirscope.core.theme import get_theme

SIZE_UNITS: tuple[str, ...] = ("B", "KB", "MB", "GB", "TB")
DATE_FORMAT = "%d.%m.%Y %H:%M:%S"
DATE_PLACEHOLDER = "—"


def format_size(size_bytes: int) -> str:
    """Format a byte count using base-1024 units.

    Picks the largest unit (up to TB) for which the scaled value is at
    least 1 and renders it with two decimals. Zero and negative input
    render as "0 B".

    >>> format_size(1024)
    '1.00 KB'
    """
    if size_bytes <= 0:
        return "0 B"
    unit = 0
    while unit < len(SIZE_UNITS) - 1 and size_bytes >= 1024 ** (unit + 1):
        unit += 1
    return f"{size_bytes / 1024**unit:.2f} {SIZE_UNITS[unit]}"


def format_date(value: object) -> str:
    """Format a timestamp as ``dd.MM.yyyy HH:mm:ss`` in local time.

    Accepts a ``datetime``, a float of seconds since the epoch (as found
    on ``os.stat_result``), or an int of epoch milliseconds. Any other
    input yields an em-dash placeholder.
    """
    try:
        if isinstance(value, datetime):
            moment = value.astimezone() if value.tzinfo else value
        elif isinstance(value, bool):
            return DATE_PLACEHOLDER
        elif isinstance(value, int):
            moment = datetime.fromtimestamp(value / 1000)
        elif isinstance(value, float):
            moment = datetime.fromtimestamp(value)
        else:
            return DATE_PLACEHOLDER
    except (OverflowError, OSError, ValueError):
        return DATE_PLACEHOLDER
    return moment.strftime(DATE_FORMAT)


def _detect_color_system() -> str | None:
    """Detect the best color system for the current terminal.

    Returns "truecolor" for interactive terminals to enable full hex color support,
    None otherwise to let Rich auto-detect.
    """
    if sys.stdout.isatty():
        return "truecolor"
    return None


# Shared console instances (theme loaded once at import)
console = Console(theme=get_theme(), color_system=_detect_color_system())
err_console = Console(theme=get_theme(), stderr=True, color_system=_detect_color_system())


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[info]{message}[/]")


def print_warning(message: str) -> None:
    """Print a warning message."""
    err_console.print(f"[warning]Warning:[/] {message}")


def print_error(message: str) -> None:
    """Print an error message."""
    err_console.print(f"[error]Error:[/] {message}")


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[success]{message}[/]")

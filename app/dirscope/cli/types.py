"""Shared types and utilities for CLI commands.

This module provides common enums and helper functions used across
multiple CLI command modules to avoid code duplication.
"""

from enum import Enum

import typer

from dirscope.core.config import ConfigError, DirscopeConfig, load_or_default
from dirscope.utils.formatting import print_error


class OutputFormat(str, Enum):
    """Output format options."""

    TABLE = "table"
    JSON = "json"


def load_settings() -> DirscopeConfig:
    """Load user settings, exiting with an error message if they are invalid.

    Returns:
        The loaded settings, or defaults when no config file exists.
    """
    try:
        return load_or_default()
    except ConfigError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

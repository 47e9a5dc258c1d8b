"""CLI commands for dirscope.

This package contains all subcommand implementations.
"""

from dirscope.cli.commands import config, fs, info, scan, stats

__all__ = ["config", "fs", "info", "scan", "stats"]

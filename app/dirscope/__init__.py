"""dirscope - Directory tree inspection, statistics and file operations."""

__version__ = "0.1.0"

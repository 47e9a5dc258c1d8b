"""Exception hierarchy for tree building, statistics and mutations.

Structural errors on a scan root and every mutation error propagate to
the caller. Per-entry traversal failures never surface as exceptions;
they are recorded as skipped entries instead.
"""

from pathlib import Path


class DirscopeError(Exception):
    """Base exception for all dirscope errors."""


class InvalidPathError(DirscopeError):
    """Raised when a scan root does not exist."""

    def __init__(self, path: str | Path) -> None:
        self.path = str(path)
        super().__init__(f"Path does not exist: {self.path}")


class RootNotADirectoryError(DirscopeError):
    """Raised when a path that must be a directory is something else."""

    def __init__(self, path: str | Path) -> None:
        self.path = str(path)
        super().__init__(f"Path is not a directory: {self.path}")


class NotFoundError(DirscopeError):
    """Raised when the target of a mutation does not exist."""

    def __init__(self, path: str | Path) -> None:
        self.path = str(path)
        super().__init__(f"Path not found: {self.path}")


class AlreadyExistsError(DirscopeError):
    """Raised when a create or rename would overwrite an existing entry."""

    def __init__(self, path: str | Path) -> None:
        self.path = str(path)
        super().__init__(f"Already exists: {self.path}")


class UnsupportedOperationError(DirscopeError):
    """Raised when an operation is not allowed for the given entry type."""


class InvalidNameError(DirscopeError):
    """Raised when a file name is empty or contains a path separator."""


class PermissionOrIOError(DirscopeError):
    """Raised when the operating system rejects a read or write."""

    def __init__(self, path: str | Path, message: str) -> None:
        self.path = str(path)
        super().__init__(message)


class DeletionError(PermissionOrIOError):
    """Raised when a recursive delete stops part way through.

    Attributes:
        path: The entry that could not be removed.
        deleted: Entries removed before the failure. They are not restored.
    """

    def __init__(self, path: str | Path, message: str, deleted: tuple[str, ...]) -> None:
        super().__init__(path, message)
        self.deleted = deleted

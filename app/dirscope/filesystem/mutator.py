"""Filesystem mutator for create, rename and delete.

Each operation is independent and best-effort: it validates its target,
performs the smallest set of filesystem calls needed, and raises on any
failure. There is no cross-operation transaction and a failed recursive
delete does not restore what it already removed.
"""

import logging
import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from dirscope.filesystem.errors import (
    AlreadyExistsError,
    DeletionError,
    InvalidNameError,
    NotFoundError,
    PermissionOrIOError,
    RootNotADirectoryError,
    UnsupportedOperationError,
)
from dirscope.filesystem.events import EventSink, LoggingEventSink

logger = logging.getLogger(__name__)


class MutationKind(str, Enum):
    """Kind of filesystem mutation."""

    CREATE = "create"
    RENAME = "rename"
    DELETE = "delete"


@dataclass(frozen=True, slots=True)
class MutationResult:
    """Result of a successful mutation.

    Attributes:
        kind: Operation that was performed.
        path: Entry the operation targeted.
        new_path: Destination of a rename, None otherwise.
        removed: Paths removed by a delete, in removal order.
        dry_run: Whether this was a dry-run (nothing touched).
    """

    kind: MutationKind
    path: str
    new_path: str | None = None
    removed: tuple[str, ...] = ()
    dry_run: bool = False


def validate_name(name: str) -> str:
    """Check that ``name`` is a single, non-empty path segment.

    Returns:
        The name stripped of surrounding whitespace.

    Raises:
        InvalidNameError: If the name is empty, "." / "..", or contains
            a path separator.
    """
    stripped = name.strip()
    if not stripped:
        msg = "File name cannot be empty"
        raise InvalidNameError(msg)
    if stripped in (".", ".."):
        msg = f"Invalid file name: {stripped}"
        raise InvalidNameError(msg)
    separators = {os.sep, os.altsep} - {None}
    if any(sep in stripped for sep in separators):
        msg = f"File name cannot contain a path separator: {stripped}"
        raise InvalidNameError(msg)
    return stripped


def _exists(path: Path) -> bool:
    return path.exists() or path.is_symlink()


def _is_real_dir(path: str | Path) -> bool:
    return os.path.isdir(path) and not os.path.islink(path)


def deletion_order(root: Path) -> list[str]:
    """List ``root`` and all its descendants, deepest first.

    Paths are ordered by number of components, descending, so a child is
    always removed before its parent. ``root`` itself comes last.

    Raises:
        PermissionOrIOError: If any directory in the subtree cannot be listed.
    """
    if not _is_real_dir(root):
        return [str(root)]

    def _raise(error: OSError) -> None:
        raise error

    descendants: list[str] = []
    try:
        for dirpath, dirnames, filenames in os.walk(root, onerror=_raise):
            descendants.extend(os.path.join(dirpath, name) for name in dirnames)
            descendants.extend(os.path.join(dirpath, name) for name in filenames)
    except OSError as e:
        raise PermissionOrIOError(root, f"Cannot list {e.filename or root}: {e.strerror or e}") from e

    descendants.sort(key=lambda p: (len(Path(p).parts), p), reverse=True)
    descendants.append(str(root))
    return descendants


class FilesystemMutator:
    """Performs create, rename and delete against the live filesystem.

    Holds no cached state; callers rebuild their tree after each
    successful call.

    Args:
        sink: Receiver for mutation events. Defaults to LoggingEventSink.
        dry_run: If True, validate and report without modifying anything.
    """

    def __init__(self, *, sink: EventSink | None = None, dry_run: bool = False) -> None:
        self._sink: EventSink = sink if sink is not None else LoggingEventSink()
        self._dry_run = dry_run

    @property
    def dry_run(self) -> bool:
        """Whether mutations are simulated."""
        return self._dry_run

    def create_file(self, parent: str | Path, name: str) -> MutationResult:
        """Create an empty regular file ``name`` inside ``parent``.

        Args:
            parent: Existing directory to create the file in.
            name: File name (single path segment).

        Returns:
            MutationResult for the new file.

        Raises:
            InvalidNameError: If ``name`` is not a valid file name.
            NotFoundError: If ``parent`` does not exist.
            RootNotADirectoryError: If ``parent`` is not a directory.
            AlreadyExistsError: If the file already exists. It is left untouched.
            PermissionOrIOError: If the file cannot be created.
        """
        name = validate_name(name)
        parent_path = Path(os.path.abspath(parent))
        if not parent_path.exists():
            raise NotFoundError(parent_path)
        if not parent_path.is_dir():
            raise RootNotADirectoryError(parent_path)

        target = parent_path / name
        if _exists(target):
            raise AlreadyExistsError(target)

        if self._dry_run:
            logger.info("Dry-run: would create %s", target)
            return MutationResult(kind=MutationKind.CREATE, path=str(target), dry_run=True)

        try:
            # "x" mode fails instead of truncating if the file appeared meanwhile
            with open(target, "x"):
                pass
        except FileExistsError as e:
            raise AlreadyExistsError(target) from e
        except OSError as e:
            raise PermissionOrIOError(target, f"Cannot create {target}: {e}") from e

        self._sink.mutation_performed(MutationKind.CREATE.value, str(target))
        return MutationResult(kind=MutationKind.CREATE, path=str(target))

    def rename(self, path: str | Path, new_name: str) -> MutationResult:
        """Rename a regular file within its directory.

        Directories cannot be renamed through this operation.

        Args:
            path: File to rename.
            new_name: New file name (single path segment).

        Returns:
            MutationResult with ``new_path`` set.

        Raises:
            InvalidNameError: If ``new_name`` is not a valid file name.
            NotFoundError: If ``path`` does not exist.
            UnsupportedOperationError: If ``path`` is a directory.
            AlreadyExistsError: If the destination exists, even if it appeared after
                the check. Both entries are left untouched.
            PermissionOrIOError: If the rename itself fails.
        """
        new_name = validate_name(new_name)
        source = Path(os.path.abspath(path))
        if not _exists(source):
            raise NotFoundError(source)
        if source.is_dir():
            msg = f"Only files can be renamed, not directories: {source}"
            raise UnsupportedOperationError(msg)

        destination = source.with_name(new_name)
        if _exists(destination):
            raise AlreadyExistsError(destination)

        if self._dry_run:
            logger.info("Dry-run: would rename %s to %s", source, destination)
            return MutationResult(
                kind=MutationKind.RENAME,
                path=str(source),
                new_path=str(destination),
                dry_run=True,
            )

        # link() fails if the destination exists
        try:
            os.link(source, destination, follow_symlinks=False)
        except FileExistsError as e:
            raise AlreadyExistsError(destination) from e
        except OSError as e:
            raise PermissionOrIOError(source, f"Cannot rename {source}: {e}") from e
        try:
            os.unlink(source)
        except OSError as e:
            self._discard_link(destination)
            raise PermissionOrIOError(source, f"Cannot rename {source}: {e}") from e

        self._sink.mutation_performed(MutationKind.RENAME.value, str(source), str(destination))
        return MutationResult(kind=MutationKind.RENAME, path=str(source), new_path=str(destination))

    def _discard_link(self, destination: Path) -> None:
        try:
            os.unlink(destination)
        except OSError as e:
            logger.warning("Could not remove %s after a failed rename: %s", destination, e)

    def delete(self, path: str | Path) -> MutationResult:
        """Delete a file, symlink or directory tree.

        Directory contents are removed deepest first and the directory
        itself last. The first failure stops the delete; entries already
        removed stay removed.

        Args:
            path: Entry to delete.

        Returns:
            MutationResult listing every removed path.

        Raises:
            NotFoundError: If ``path`` does not exist.
            PermissionOrIOError: If the subtree cannot be listed.
            DeletionError: If removing an entry fails part way through.
        """
        target = Path(os.path.abspath(path))
        if not _exists(target):
            raise NotFoundError(target)

        order = deletion_order(target)

        if self._dry_run:
            logger.info("Dry-run: would delete %s (%d entries)", target, len(order))
            return MutationResult(
                kind=MutationKind.DELETE,
                path=str(target),
                removed=tuple(order),
                dry_run=True,
            )

        removed: list[str] = []
        for entry in order:
            try:
                if _is_real_dir(entry):
                    os.rmdir(entry)
                else:
                    os.unlink(entry)
            except OSError as e:
                msg = f"Failed to delete {entry}: {e.strerror or e}"
                raise DeletionError(entry, msg, tuple(removed)) from e
            logger.debug("Removed %s", entry)
            removed.append(entry)

        self._sink.mutation_performed(MutationKind.DELETE.value, str(target))
        return MutationResult(kind=MutationKind.DELETE, path=str(target), removed=tuple(removed))

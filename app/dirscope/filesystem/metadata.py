"""Metadata reader for single filesystem entries.

Extracts the immutable descriptive attributes the tree builder stores on
each node, plus the richer property set shown for a selected entry.
Owner lookups and timestamp reads degrade to placeholder values instead
of failing.
"""

import logging
import os
import stat
from datetime import datetime
from pathlib import Path

from dirscope.filesystem.models import UNKNOWN_OWNER, FileProperties, Node

logger = logging.getLogger(__name__)

DEFAULT_BLOCK_SIZE = 4096


def stat_entry(path: Path) -> os.stat_result:
    """Stat a path following symlinks, falling back to the link itself.

    A dangling symlink has no target to stat, so its own lstat result is
    returned and it is treated as a zero-size leaf.

    Raises:
        OSError: If neither the target nor the link can be read.
    """
    try:
        return path.stat()
    except FileNotFoundError:
        if path.is_symlink():
            return path.lstat()
        raise


def resolve_owner(path: Path) -> str:
    """Return the user name owning ``path`` or "unknown"."""
    try:
        return path.owner()
    except (KeyError, NotImplementedError, OSError) as e:
        logger.debug("Cannot resolve owner of %s: %s", path, e)
        return UNKNOWN_OWNER


def read_node(path: Path, children: tuple[Node, ...] = ()) -> Node:
    """Build a Node for ``path`` from its current metadata.

    Args:
        path: Entry to describe. Made absolute without resolving symlinks.
        children: Child nodes to attach (directories only).

    Returns:
        Node with name, size, owner and directory flag filled in.

    Raises:
        OSError: If the entry cannot be stat'ed (e.g. it vanished).
    """
    path = Path(os.path.abspath(path))
    st = stat_entry(path)
    is_dir = stat.S_ISDIR(st.st_mode)
    return Node(
        name=path.name or str(path),
        path=str(path),
        is_directory=is_dir,
        size_bytes=0 if is_dir else st.st_size,
        owner=resolve_owner(path),
        children=children,
    )


def disk_size(size_bytes: int, block_size: int = DEFAULT_BLOCK_SIZE) -> int:
    """Round a logical size up to a whole number of blocks."""
    if size_bytes <= 0:
        return 0
    return ((size_bytes + block_size - 1) // block_size) * block_size


def _timestamp(st: os.stat_result, attr: str) -> datetime | None:
    value = getattr(st, attr, None)
    if value is None:
        return None
    try:
        return datetime.fromtimestamp(value)
    except (OverflowError, OSError, ValueError):
        return None


def _count_entries(directory: Path) -> int | None:
    try:
        with os.scandir(directory) as it:
            return sum(1 for _ in it)
    except OSError as e:
        logger.debug("Cannot list %s: %s", directory, e)
        return None


def read_properties(path: str | Path, block_size: int = DEFAULT_BLOCK_SIZE) -> FileProperties:
    """Collect display properties for a single entry.

    Timestamps and the canonical path are best-effort and come back as
    None when they cannot be read. ``created`` uses the birth time where
    the platform records one and the metadata change time otherwise.

    Args:
        path: Entry to describe.
        block_size: Allocation unit used to estimate on-disk size.

    Returns:
        FileProperties for the entry.

    Raises:
        OSError: If the entry cannot be stat'ed at all.
    """
    target = Path(os.path.abspath(path))
    st = stat_entry(target)
    is_dir = stat.S_ISDIR(st.st_mode)
    size = st.st_size

    created = _timestamp(st, "st_birthtime") or _timestamp(st, "st_ctime")
    modified = _timestamp(st, "st_mtime")

    try:
        canonical: str | None = str(target.resolve(strict=True))
    except (OSError, RuntimeError) as e:
        logger.debug("Cannot resolve canonical path of %s: %s", target, e)
        canonical = None

    element_count = _count_entries(target) if is_dir else None

    parent = target.parent
    return FileProperties(
        name=target.name or str(target),
        path=str(target),
        parent=str(parent) if parent != target else None,
        is_directory=is_dir,
        size_bytes=size,
        disk_size_bytes=disk_size(size, block_size),
        created=created,
        modified=modified,
        owner=resolve_owner(target),
        readable=os.access(target, os.R_OK),
        writable=os.access(target, os.W_OK),
        executable=os.access(target, os.X_OK),
        hidden=target.name.startswith("."),
        canonical_path=canonical,
        element_count=element_count,
    )

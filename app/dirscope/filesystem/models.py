"""Filesystem domain models for tree scanning and statistics.

This module defines the immutable data structures produced by the tree
builder, the statistics aggregator and the metadata reader.
"""

from collections.abc import Iterator
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

UNKNOWN_OWNER = "unknown"


class SkipReason(str, Enum):
    """Why an entry was left out of (or truncated in) a scan.

    Attributes:
        UNREADABLE_DIRECTORY: Directory listing failed; kept with no children.
        ENTRY_VANISHED: Entry disappeared between listing and stat.
        ENTRY_ERROR: Entry metadata could not be read.
        DEPTH_LIMIT: Directory sits at the depth cap; children not listed.
    """

    UNREADABLE_DIRECTORY = "unreadable_directory"
    ENTRY_VANISHED = "entry_vanished"
    ENTRY_ERROR = "entry_error"
    DEPTH_LIMIT = "depth_limit"


@dataclass(frozen=True, slots=True)
class Node:
    """One filesystem entry and the children discovered under it.

    ``size_bytes`` is the raw size of a file and always 0 for a
    directory. Recursive totals are computed on demand by the
    statistics functions and never stored on the node.

    Attributes:
        name: Last path segment.
        path: Absolute filesystem path.
        is_directory: True for directories.
        size_bytes: File size in bytes (0 for directories).
        owner: Owning user name, or "unknown" when unresolvable.
        children: Child nodes in directory listing order (empty for files).
    """

    name: str
    path: str
    is_directory: bool
    size_bytes: int = 0
    owner: str = UNKNOWN_OWNER
    children: tuple["Node", ...] = ()

    def __post_init__(self) -> None:
        """Validate node data after initialization."""
        if not self.path:
            msg = "Path cannot be empty"
            raise ValueError(msg)
        if self.children and not self.is_directory:
            msg = f"Only directories can have children: {self.path}"
            raise ValueError(msg)

    @property
    def child_count(self) -> int:
        """Number of direct children."""
        return len(self.children)

    def iter_nodes(self) -> Iterator["Node"]:
        """Yield this node and every descendant in pre-order."""
        stack: list[Node] = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def to_dict(self) -> dict[str, object]:
        """Convert the subtree to plain dicts for JSON output."""
        data: dict[str, object] = {
            "name": self.name,
            "path": self.path,
            "is_directory": self.is_directory,
            "size_bytes": self.size_bytes,
            "owner": self.owner,
        }
        if self.is_directory:
            data["children"] = [child.to_dict() for child in self.children]
        return data

    def find(self, path: str) -> "Node | None":
        """Return the node with the given absolute path, if present."""
        for node in self.iter_nodes():
            if node.path == path:
                return node
        return None


@dataclass(frozen=True, slots=True)
class SkippedEntry:
    """An entry the tree builder could not fully read.

    Attributes:
        path: Absolute path of the entry.
        reason: Classification of the failure.
        error: Underlying error message, if any.
    """

    path: str
    reason: SkipReason
    error: str | None = None


@dataclass(frozen=True, slots=True)
class ScanResult:
    """Outcome of a completed tree build.

    Attributes:
        root: Root node of the built tree.
        skipped: Entries skipped or truncated during traversal.
        max_depth: Depth cap the scan ran with.
        elapsed_seconds: Wall-clock duration of the scan.
    """

    root: Node
    skipped: tuple[SkippedEntry, ...] = ()
    max_depth: int = 100
    elapsed_seconds: float = 0.0

    @property
    def is_partial(self) -> bool:
        """True if any entry was skipped or truncated."""
        return bool(self.skipped)


@dataclass(frozen=True, slots=True)
class StatsSnapshot:
    """Aggregate statistics for a directory computed at query time.

    Attributes:
        path: Directory the statistics describe.
        file_count: Number of regular files.
        directory_count: Number of subdirectories (root excluded).
        total_bytes: Sum of regular file sizes.
        extension: Extension filter applied to the file figures, if any.
    """

    path: str
    file_count: int
    directory_count: int
    total_bytes: int
    extension: str | None = None


@dataclass(frozen=True, slots=True)
class ExtensionSummary:
    """File count and total size for one extension."""

    extension: str
    file_count: int
    total_bytes: int


@dataclass(frozen=True, slots=True)
class FileProperties:
    """Descriptive attributes of a single entry for display.

    Attributes:
        name: Last path segment.
        path: Absolute path.
        parent: Absolute path of the parent directory, None at the filesystem root.
        is_directory: True for directories.
        size_bytes: Logical size in bytes.
        disk_size_bytes: Logical size rounded up to whole blocks.
        created: Creation (or metadata change) time, None if unavailable.
        modified: Last modification time, None if unavailable.
        owner: Owning user name, or "unknown".
        readable: Current user may read the entry.
        writable: Current user may write the entry.
        executable: Current user may execute (or traverse) the entry.
        hidden: Name starts with a dot.
        canonical_path: Fully resolved path, None if resolution failed.
        element_count: Direct children of a directory, None for files or when
            the directory cannot be listed.
    """

    name: str
    path: str
    parent: str | None
    is_directory: bool
    size_bytes: int
    disk_size_bytes: int
    created: datetime | None
    modified: datetime | None
    owner: str
    readable: bool
    writable: bool
    executable: bool
    hidden: bool
    canonical_path: str | None = field(default=None)
    element_count: int | None = None

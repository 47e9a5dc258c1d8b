"""Tree builder for directory subtrees.

Recursively lists a root directory into an immutable Node tree. The
traversal is bounded by a depth cap and tolerates unreadable
directories and entries that vanish mid-scan: such entries are
recorded as skipped and the scan carries on with their siblings.
"""

import dataclasses
import os
import time
from pathlib import Path

from dirscope.filesystem.errors import InvalidPathError, PermissionOrIOError, RootNotADirectoryError
from dirscope.filesystem.events import EventSink, LoggingEventSink
from dirscope.filesystem.metadata import read_node
from dirscope.filesystem.models import Node, ScanResult, SkippedEntry, SkipReason

MAX_DEPTH = 100
# One stack frame per level
DEPTH_CEILING = 500


class TreeBuilder:
    """Builds a Node tree from a root directory.

    The root sits at depth 0. A directory at depth ``d`` has its
    children listed only while ``d < max_depth``, so entries nested
    exactly ``max_depth`` levels below the root are present and deeper
    ones are not. Symlinked directories are followed by default; the
    depth cap is what stops a link cycle.

    Args:
        max_depth: Depth cap for recursion. At most DEPTH_CEILING.
        follow_symlinks: Descend into symlinks that point at directories.
        sink: Receiver for scan events. Defaults to LoggingEventSink.
    """

    def __init__(
        self,
        *,
        max_depth: int = MAX_DEPTH,
        follow_symlinks: bool = True,
        sink: EventSink | None = None,
    ) -> None:
        if not 0 <= max_depth <= DEPTH_CEILING:
            msg = f"max_depth must be between 0 and {DEPTH_CEILING}, got {max_depth}"
            raise ValueError(msg)
        self._max_depth = max_depth
        self._follow_symlinks = follow_symlinks
        self._sink: EventSink = sink if sink is not None else LoggingEventSink()

    @property
    def max_depth(self) -> int:
        """Depth cap this builder runs with."""
        return self._max_depth

    def build(self, root_path: str | Path) -> ScanResult:
        """Scan ``root_path`` and return the tree plus skipped entries.

        Args:
            root_path: Directory to scan.

        Returns:
            ScanResult holding the root node.

        Raises:
            InvalidPathError: If the root does not exist.
            RootNotADirectoryError: If the root is not a directory.
            PermissionOrIOError: If the root's own metadata cannot be read.
        """
        root = Path(os.path.abspath(root_path))
        if not root.exists():
            raise InvalidPathError(root)
        if not root.is_dir():
            raise RootNotADirectoryError(root)

        self._sink.scan_started(str(root), self._max_depth)
        started = time.monotonic()
        skipped: list[SkippedEntry] = []

        try:
            node = self._build_node(root, 0, skipped)
        except OSError as e:
            raise PermissionOrIOError(root, f"Cannot read {root}: {e}") from e

        result = ScanResult(
            root=node,
            skipped=tuple(skipped),
            max_depth=self._max_depth,
            elapsed_seconds=time.monotonic() - started,
        )
        self._sink.scan_finished(result)
        return result

    def _build_node(self, path: Path, depth: int, skipped: list[SkippedEntry]) -> Node:
        """Build the node for ``path`` and, for directories, its subtree.

        Raises:
            OSError: If ``path`` itself cannot be stat'ed. Failures below
                it are recorded in ``skipped`` instead.
        """
        node = read_node(path)
        if not node.is_directory:
            return node

        if path.is_symlink() and not self._follow_symlinks and depth > 0:
            return node

        if depth >= self._max_depth:
            self._skip(skipped, SkippedEntry(path=node.path, reason=SkipReason.DEPTH_LIMIT))
            return node

        # Listing handle is released before descending
        try:
            with os.scandir(path) as it:
                entries = [Path(entry.path) for entry in it]
        except OSError as e:
            self._skip(
                skipped,
                SkippedEntry(path=node.path, reason=SkipReason.UNREADABLE_DIRECTORY, error=str(e)),
            )
            return node

        children: list[Node] = []
        for entry in entries:
            try:
                children.append(self._build_node(entry, depth + 1, skipped))
            except FileNotFoundError as e:
                self._skip(
                    skipped,
                    SkippedEntry(path=str(entry), reason=SkipReason.ENTRY_VANISHED, error=str(e)),
                )
            except (OSError, ValueError) as e:
                self._skip(
                    skipped,
                    SkippedEntry(path=str(entry), reason=SkipReason.ENTRY_ERROR, error=str(e)),
                )

        return dataclasses.replace(node, children=tuple(children))

    def _skip(self, skipped: list[SkippedEntry], entry: SkippedEntry) -> None:
        skipped.append(entry)
        self._sink.entry_skipped(entry)


def build_tree(root_path: str | Path, *, max_depth: int = MAX_DEPTH) -> Node:
    """Build a Node tree for ``root_path`` and return its root.

    Convenience wrapper around ``TreeBuilder(...).build(...)`` for callers
    that do not need the skipped-entry records.

    Raises:
        InvalidPathError: If the root does not exist.
        RootNotADirectoryError: If the root is not a directory.
    """
    return TreeBuilder(max_depth=max_depth).build(root_path).root

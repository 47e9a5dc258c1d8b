"""Browse session tying the tree builder to the mutator.

A session owns the tree for one root directory. Mutations go through
the session so that every successful change is followed by a full
rebuild from the session root; a failed mutation raises and leaves the
current tree as it was. If the rebuild after a successful mutation
fails, the change stands, the failure is logged and the old tree is
kept and marked stale. The tree is never patched in place.
"""

import logging
from pathlib import Path

from dirscope.core.config import DirscopeConfig
from dirscope.filesystem.builder import TreeBuilder
from dirscope.filesystem.errors import DirscopeError, InvalidPathError
from dirscope.filesystem.events import EventSink
from dirscope.filesystem.metadata import read_properties
from dirscope.filesystem.models import FileProperties, Node, ScanResult, StatsSnapshot
from dirscope.filesystem.mutator import FilesystemMutator, MutationResult
from dirscope.filesystem.stats import compute_stats

logger = logging.getLogger(__name__)


class BrowseSession:
    """Interactive view of one directory tree.

    Not safe for concurrent use: callers must not start a second refresh
    or mutation while one is running.

    Args:
        root: Directory the session browses.
        config: Settings for the builder. Defaults to DirscopeConfig().
        sink: Event sink shared by the builder and mutator.
        dry_run: Simulate mutations instead of performing them.
    """

    def __init__(
        self,
        root: str | Path,
        *,
        config: DirscopeConfig | None = None,
        sink: EventSink | None = None,
        dry_run: bool = False,
    ) -> None:
        self._root = Path(root).expanduser()
        self._config = config or DirscopeConfig()
        self._builder = TreeBuilder(
            max_depth=self._config.max_depth,
            follow_symlinks=self._config.follow_symlinks,
            sink=sink,
        )
        self._mutator = FilesystemMutator(sink=sink, dry_run=dry_run)
        self._result: ScanResult | None = None
        self._stale = False

    @property
    def root(self) -> Path:
        """Root directory of the session."""
        return self._root

    @property
    def result(self) -> ScanResult | None:
        """Most recent successful scan, None before the first refresh."""
        return self._result

    @property
    def tree(self) -> Node | None:
        """Root node of the most recent successful scan."""
        return self._result.root if self._result is not None else None

    @property
    def stale(self) -> bool:
        """True if the last rebuild after a mutation failed."""
        return self._stale

    def refresh(self) -> ScanResult:
        """Rebuild the tree from the session root.

        On failure the error propagates and the previous tree is kept.

        Raises:
            InvalidPathError: If the root no longer exists.
            RootNotADirectoryError: If the root is no longer a directory.
        """
        result = self._builder.build(self._root)
        self._result = result
        self._stale = False
        return result

    def create_file(self, parent: str | Path, name: str) -> MutationResult:
        """Create an empty file and rebuild the tree."""
        return self._after(self._mutator.create_file(parent, name))

    def rename(self, path: str | Path, new_name: str) -> MutationResult:
        """Rename a file and rebuild the tree."""
        return self._after(self._mutator.rename(path, new_name))

    def delete(self, path: str | Path) -> MutationResult:
        """Delete an entry and rebuild the tree."""
        return self._after(self._mutator.delete(path))

    def stats(self, path: str | Path | None = None, extension: str | None = None) -> StatsSnapshot:
        """Compute statistics for ``path`` (default: the root) on demand."""
        return compute_stats(path if path is not None else self._root, extension)

    def properties(self, path: str | Path | None = None) -> FileProperties:
        """Read display properties for ``path`` (default: the root)."""
        target = path if path is not None else self._root
        return read_properties(target, block_size=self._config.block_size)

    def _after(self, result: MutationResult) -> MutationResult:
        if result.dry_run:
            return result
        logger.debug("Rebuilding %s after %s", self._root, result.kind.value)
        try:
            self.refresh()
        except InvalidPathError:
            # The root itself was deleted
            logger.info("Session root %s no longer exists", self._root)
            self._result = None
        except DirscopeError as e:
            logger.warning("Rebuild after %s failed, tree is stale: %s", result.kind.value, e)
            self._stale = True
        return result

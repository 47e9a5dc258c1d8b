"""Statistics aggregator over live directory subtrees.

Every query walks the filesystem from scratch; nothing is cached and no
previously built Node tree is reused. Per-entry errors (permission
denied, vanished files) are swallowed and the entry left out, and a walk
that cannot start at all produces the zero value for the query. The two
cases cannot be told apart by the caller.

Symlinks are classified by their target (a link to a file counts as a
file) but never descended into.
"""

import logging
import os
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path

from dirscope.filesystem.models import ExtensionSummary, StatsSnapshot

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class WalkEntry:
    """A single descendant seen during a statistics walk.

    Attributes:
        path: Absolute path of the entry.
        name: Last path segment.
        is_file: Regular file (or a symlink to one).
        is_dir: Directory (or a symlink to one).
        size_bytes: File size in bytes, 0 for anything that is not a file.
    """

    path: str
    name: str
    is_file: bool
    is_dir: bool
    size_bytes: int


def walk(root: str | Path) -> Iterator[WalkEntry]:
    """Yield every descendant of ``root``, excluding ``root`` itself.

    Directories are visited depth-first with an explicit stack, so there
    is no recursion limit. Each listing handle is closed before its
    subdirectories are visited.
    """
    start = os.path.abspath(root)
    if not os.path.isdir(start):
        logger.debug("Statistics walk cannot start at %s", start)
        return

    pending = [start]
    while pending:
        current = pending.pop()
        try:
            with os.scandir(current) as it:
                entries = list(it)
        except OSError as e:
            logger.debug("Cannot list %s: %s", current, e)
            continue

        for entry in entries:
            try:
                is_file = entry.is_file()
                is_dir = entry.is_dir()
                size = entry.stat().st_size if is_file else 0
                descend = entry.is_dir(follow_symlinks=False)
            except OSError as e:
                logger.debug("Cannot stat %s: %s", entry.path, e)
                continue

            yield WalkEntry(
                path=entry.path,
                name=entry.name,
                is_file=is_file,
                is_dir=is_dir,
                size_bytes=size,
            )
            if descend:
                pending.append(entry.path)


def _iter_files(root: str | Path) -> Iterator[WalkEntry]:
    return (entry for entry in walk(root) if entry.is_file)


def _suffix(extension: str) -> str:
    return "." + extension.lstrip(".").lower()


def matches_extension(name: str, extension: str) -> bool:
    """Case-insensitive check that ``name`` ends with ``.extension``.

    >>> matches_extension("photo.JPG", "jpg")
    True
    """
    return name.lower().endswith(_suffix(extension))


def count_files(root: str | Path) -> int:
    """Count regular files anywhere below ``root``."""
    return sum(1 for _ in _iter_files(root))


def count_directories(root: str | Path) -> int:
    """Count directories below ``root``, not counting ``root`` itself."""
    return sum(1 for entry in walk(root) if entry.is_dir)


def total_size(root: str | Path) -> int:
    """Sum the sizes of all regular files below ``root``."""
    return sum(entry.size_bytes for entry in _iter_files(root))


def filter_by_extension(root: str | Path, extension: str) -> list[Path]:
    """List files below ``root`` whose name ends with ``.extension``."""
    return [Path(entry.path) for entry in _iter_files(root) if matches_extension(entry.name, extension)]


def count_by_extension(root: str | Path, extension: str) -> int:
    """Count files below ``root`` with the given extension."""
    return sum(1 for entry in _iter_files(root) if matches_extension(entry.name, extension))


def size_by_extension(root: str | Path, extension: str) -> int:
    """Sum the sizes of files below ``root`` with the given extension."""
    return sum(
        entry.size_bytes for entry in _iter_files(root) if matches_extension(entry.name, extension)
    )


def filter_by_min_size(root: str | Path, min_size: int) -> list[Path]:
    """List files below ``root`` that are at least ``min_size`` bytes."""
    return [Path(entry.path) for entry in _iter_files(root) if entry.size_bytes >= min_size]


def files_sorted_by_size(root: str | Path) -> list[Path]:
    """List every file below ``root``, largest first."""
    files = sorted(_iter_files(root), key=lambda entry: entry.size_bytes, reverse=True)
    return [Path(entry.path) for entry in files]


def extension_breakdown(root: str | Path) -> list[ExtensionSummary]:
    """Group files below ``root`` by lower-cased extension.

    Files without an extension (including dot-files such as ``.bashrc``)
    are grouped under the empty string.

    Returns:
        One summary per extension, largest total size first.
    """
    counts: dict[str, list[int]] = {}
    for entry in _iter_files(root):
        ext = os.path.splitext(entry.name)[1].lstrip(".").lower()
        bucket = counts.setdefault(ext, [0, 0])
        bucket[0] += 1
        bucket[1] += entry.size_bytes

    summaries = [
        ExtensionSummary(extension=ext, file_count=count, total_bytes=size)
        for ext, (count, size) in counts.items()
    ]
    summaries.sort(key=lambda s: (-s.total_bytes, s.extension))
    return summaries


def compute_stats(root: str | Path, extension: str | None = None) -> StatsSnapshot:
    """Compute file count, directory count and total size for ``root``.

    Each figure comes from its own walk, so a subtree changing while the
    snapshot is computed can yield numbers that never coexisted.

    Args:
        root: Directory to summarise.
        extension: Restrict the file count and total size to this extension.

    Returns:
        StatsSnapshot for ``root``.
    """
    path = os.path.abspath(root)
    if extension:
        files = count_by_extension(path, extension)
        size = size_by_extension(path, extension)
    else:
        files = count_files(path)
        size = total_size(path)

    return StatsSnapshot(
        path=path,
        file_count=files,
        directory_count=count_directories(path),
        total_bytes=size,
        extension=extension.lstrip(".").lower() if extension else None,
    )

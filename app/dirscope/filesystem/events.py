"""Event sink interface for scan and mutation notifications.

The tree builder and mutator report progress through an ``EventSink``
instead of logging directly. ``LoggingEventSink`` is the default and
forwards every event to the standard logging module; tests and richer
front ends can pass their own implementation.
"""

import logging
from dataclasses import dataclass, field
from typing import Protocol

from dirscope.filesystem.models import ScanResult, SkippedEntry

logger = logging.getLogger(__name__)


class EventSink(Protocol):
    """Receiver for builder and mutator events."""

    def scan_started(self, root: str, max_depth: int) -> None:
        """Called before the first directory is listed."""
        ...

    def entry_skipped(self, entry: SkippedEntry) -> None:
        """Called each time an entry is skipped or truncated."""
        ...

    def scan_finished(self, result: ScanResult) -> None:
        """Called once the tree has been built."""
        ...

    def mutation_performed(self, operation: str, path: str, detail: str | None = None) -> None:
        """Called after a create, rename or delete succeeds."""
        ...


class LoggingEventSink:
    """EventSink that writes events to the module logger."""

    def scan_started(self, root: str, max_depth: int) -> None:
        logger.info("Scan started: %s (max depth %d)", root, max_depth)

    def entry_skipped(self, entry: SkippedEntry) -> None:
        if entry.error:
            logger.warning("Skipped %s (%s): %s", entry.path, entry.reason.value, entry.error)
        else:
            logger.debug("Skipped %s (%s)", entry.path, entry.reason.value)

    def scan_finished(self, result: ScanResult) -> None:
        logger.info(
            "Scan finished: %s (%d skipped, %.2fs)",
            result.root.path,
            len(result.skipped),
            result.elapsed_seconds,
        )

    def mutation_performed(self, operation: str, path: str, detail: str | None = None) -> None:
        if detail:
            logger.info("%s: %s -> %s", operation, path, detail)
        else:
            logger.info("%s: %s", operation, path)


@dataclass
class RecordingEventSink:
    """EventSink that keeps every event in memory.

    Useful for front ends that surface partial failures and for tests.
    """

    events: list[tuple[str, str]] = field(default_factory=list)
    skipped: list[SkippedEntry] = field(default_factory=list)

    def scan_started(self, root: str, max_depth: int) -> None:
        self.events.append(("scan_started", root))

    def entry_skipped(self, entry: SkippedEntry) -> None:
        self.skipped.append(entry)
        self.events.append(("entry_skipped", entry.path))

    def scan_finished(self, result: ScanResult) -> None:
        self.events.append(("scan_finished", result.root.path))

    def mutation_performed(self, operation: str, path: str, detail: str | None = None) -> None:
        self.events.append((operation, path))

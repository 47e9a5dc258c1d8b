"""Filesystem tree building, statistics and mutation.

This module provides the traversal engine (tree builder), the on-demand
statistics aggregator, the metadata reader and the mutator for the
filesystem domain.
"""

from dirscope.filesystem.builder import MAX_DEPTH, TreeBuilder, build_tree
from dirscope.filesystem.errors import (
    AlreadyExistsError,
    DeletionError,
    DirscopeError,
    InvalidNameError,
    InvalidPathError,
    NotFoundError,
    PermissionOrIOError,
    RootNotADirectoryError,
    UnsupportedOperationError,
)
from dirscope.filesystem.events import EventSink, LoggingEventSink, RecordingEventSink
from dirscope.filesystem.metadata import read_node, read_properties
from dirscope.filesystem.models import (
    ExtensionSummary,
    FileProperties,
    Node,
    ScanResult,
    SkippedEntry,
    SkipReason,
    StatsSnapshot,
)
from dirscope.filesystem.mutator import FilesystemMutator, MutationKind, MutationResult

__all__ = [
    "MAX_DEPTH",
    "AlreadyExistsError",
    "DeletionError",
    "DirscopeError",
    "EventSink",
    "ExtensionSummary",
    "FileProperties",
    "FilesystemMutator",
    "InvalidNameError",
    "InvalidPathError",
    "LoggingEventSink",
    "MutationKind",
    "MutationResult",
    "Node",
    "NotFoundError",
    "PermissionOrIOError",
    "RecordingEventSink",
    "RootNotADirectoryError",
    "ScanResult",
    "SkipReason",
    "SkippedEntry",
    "StatsSnapshot",
    "TreeBuilder",
    "UnsupportedOperationError",
    "build_tree",
    "read_node",
    "read_properties",
]

"""Tests for filesystem domain models."""

import dataclasses

import pytest
from dirscope.filesystem.models import (
    UNKNOWN_OWNER,
    Node,
    ScanResult,
    SkippedEntry,
    SkipReason,
)


def _file(name: str, size: int = 1) -> Node:
    return Node(name=name, path=f"/r/{name}", is_directory=False, size_bytes=size)


class TestSkipReason:
    """Tests for SkipReason enum."""

    def test_skip_reason_values(self) -> None:
        """All skip reasons exist with their string values."""
        assert SkipReason.UNREADABLE_DIRECTORY == "unreadable_directory"
        assert SkipReason.ENTRY_VANISHED == "entry_vanished"
        assert SkipReason.ENTRY_ERROR == "entry_error"
        assert SkipReason.DEPTH_LIMIT == "depth_limit"
        assert len(SkipReason) == 4


class TestNode:
    """Tests for Node frozen dataclass."""

    def test_defaults(self) -> None:
        """Owner defaults to unknown and children to empty."""
        node = Node(name="a", path="/a", is_directory=True)
        assert node.owner == UNKNOWN_OWNER
        assert node.children == ()
        assert node.size_bytes == 0
        assert node.child_count == 0

    def test_is_frozen(self) -> None:
        """Nodes cannot be modified after construction."""
        node = _file("a.txt")
        with pytest.raises(dataclasses.FrozenInstanceError):
            node.name = "b.txt"  # type: ignore[misc]

    def test_empty_path_rejected(self) -> None:
        """An empty path raises ValueError."""
        with pytest.raises(ValueError, match="Path cannot be empty"):
            Node(name="x", path="", is_directory=False)

    def test_file_with_children_rejected(self) -> None:
        """Only directories may carry children."""
        with pytest.raises(ValueError, match="Only directories"):
            Node(name="f", path="/f", is_directory=False, children=(_file("x"),))

    def test_iter_nodes_pre_order(self) -> None:
        """iter_nodes yields parents before children in listing order."""
        sub = Node(name="sub", path="/r/sub", is_directory=True, children=(_file("c"),))
        root = Node(name="r", path="/r", is_directory=True, children=(_file("a"), sub, _file("b")))

        names = [n.name for n in root.iter_nodes()]

        assert names == ["r", "a", "sub", "c", "b"]

    def test_find(self) -> None:
        """find returns the node with a matching path or None."""
        root = Node(name="r", path="/r", is_directory=True, children=(_file("a"),))
        found = root.find("/r/a")
        assert found is not None
        assert found.name == "a"
        assert root.find("/r/missing") is None

    def test_to_dict(self) -> None:
        """to_dict nests children for directories only."""
        root = Node(name="r", path="/r", is_directory=True, children=(_file("a", 7),))

        data = root.to_dict()

        assert data["name"] == "r"
        assert data["is_directory"] is True
        children = data["children"]
        assert isinstance(children, list)
        assert children[0]["size_bytes"] == 7
        assert "children" not in children[0]


class TestScanResult:
    """Tests for ScanResult."""

    def test_is_partial(self) -> None:
        """is_partial reflects whether anything was skipped."""
        root = Node(name="r", path="/r", is_directory=True)
        assert ScanResult(root=root).is_partial is False

        skipped = (SkippedEntry(path="/r/x", reason=SkipReason.ENTRY_ERROR, error="boom"),)
        assert ScanResult(root=root, skipped=skipped).is_partial is True

"""Unit tests for FilesystemMutator.

Tests file creation, renaming and recursive deletion, including
collision checks, deletion ordering, partial failures and dry-run mode.
"""

import os
from pathlib import Path

import pytest
from dirscope.filesystem import mutator as mutator_module
from dirscope.filesystem.errors import (
    AlreadyExistsError,
    DeletionError,
    InvalidNameError,
    NotFoundError,
    PermissionOrIOError,
    RootNotADirectoryError,
    UnsupportedOperationError,
)
from dirscope.filesystem.events import RecordingEventSink
from dirscope.filesystem.mutator import (
    FilesystemMutator,
    MutationKind,
    deletion_order,
    validate_name,
)


class TestValidateName:
    """Tests for validate_name."""

    def test_valid_name_stripped(self) -> None:
        """Surrounding whitespace is removed."""
        assert validate_name("  report.txt ") == "report.txt"

    @pytest.mark.parametrize("name", ["", "   ", ".", ".."])
    def test_empty_or_dot_rejected(self, name: str) -> None:
        """Empty and dot names are rejected."""
        with pytest.raises(InvalidNameError):
            validate_name(name)

    def test_separator_rejected(self) -> None:
        """Names cannot contain a path separator."""
        with pytest.raises(InvalidNameError, match="separator"):
            validate_name("sub/file.txt")


class TestCreateFile:
    """Tests for create_file."""

    def test_create(self, tmp_path: Path) -> None:
        """An empty regular file is created."""
        sink = RecordingEventSink()

        result = FilesystemMutator(sink=sink).create_file(tmp_path, "x.txt")

        target = tmp_path / "x.txt"
        assert result.kind == MutationKind.CREATE
        assert result.path == str(target)
        assert result.dry_run is False
        assert target.is_file()
        assert target.stat().st_size == 0
        assert sink.events == [("create", str(target))]

    def test_existing_file_not_truncated(self, tmp_path: Path) -> None:
        """Creating over an existing file fails and keeps its content."""
        target = tmp_path / "x.txt"
        target.write_text("keep me")

        with pytest.raises(AlreadyExistsError):
            FilesystemMutator().create_file(tmp_path, "x.txt")

        assert target.read_text() == "keep me"

    def test_existing_directory_collision(self, tmp_path: Path) -> None:
        """A directory with the same name is also a collision."""
        (tmp_path / "x").mkdir()
        with pytest.raises(AlreadyExistsError):
            FilesystemMutator().create_file(tmp_path, "x")

    def test_missing_parent(self, tmp_path: Path) -> None:
        """Parents are never created automatically."""
        missing = tmp_path / "missing"
        with pytest.raises(NotFoundError):
            FilesystemMutator().create_file(missing, "x.txt")
        assert not missing.exists()

    def test_parent_is_file(self, tmp_path: Path) -> None:
        """The parent must be a directory."""
        parent = tmp_path / "file"
        parent.write_text("f")
        with pytest.raises(RootNotADirectoryError):
            FilesystemMutator().create_file(parent, "x.txt")

    def test_race_with_existing_file(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """A file appearing after the check still raises AlreadyExistsError."""
        target = tmp_path / "x.txt"
        monkeypatch.setattr(mutator_module, "_exists", lambda _path: False)
        target.write_text("late")

        with pytest.raises(AlreadyExistsError):
            FilesystemMutator().create_file(tmp_path, "x.txt")

        assert target.read_text() == "late"

    def test_dry_run(self, tmp_path: Path) -> None:
        """Dry-run reports without creating."""
        result = FilesystemMutator(dry_run=True).create_file(tmp_path, "x.txt")
        assert result.dry_run is True
        assert not (tmp_path / "x.txt").exists()


class TestRename:
    """Tests for rename."""

    def test_rename(self, tmp_path: Path) -> None:
        """A file is renamed within its directory."""
        source = tmp_path / "a.txt"
        source.write_text("content")
        sink = RecordingEventSink()

        result = FilesystemMutator(sink=sink).rename(source, "a.md")

        assert result.kind == MutationKind.RENAME
        assert result.new_path == str(tmp_path / "a.md")
        assert not source.exists()
        assert (tmp_path / "a.md").read_text() == "content"
        assert sink.events == [("rename", str(source))]

    def test_collision_leaves_both_files(self, tmp_path: Path) -> None:
        """Renaming onto an existing name fails and touches neither file."""
        source = tmp_path / "a.txt"
        source.write_text("source")
        existing = tmp_path / "a.md"
        existing.write_text("existing")

        with pytest.raises(AlreadyExistsError):
            FilesystemMutator().rename(source, "a.md")

        assert source.read_text() == "source"
        assert existing.read_text() == "existing"

    def test_directory_rejected(self, tmp_path: Path) -> None:
        """Directories cannot be renamed."""
        folder = tmp_path / "folder"
        folder.mkdir()

        with pytest.raises(UnsupportedOperationError, match="not directories"):
            FilesystemMutator().rename(folder, "other")

        assert folder.is_dir()

    def test_missing_source(self, tmp_path: Path) -> None:
        """A missing source raises NotFoundError."""
        with pytest.raises(NotFoundError):
            FilesystemMutator().rename(tmp_path / "nope.txt", "b.txt")

    def test_os_error_wrapped(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """OS failures surface as PermissionOrIOError."""
        source = tmp_path / "a.txt"
        source.write_text("a")

        def fail(*_args: object, **_kwargs: object) -> None:
            raise PermissionError(13, "Permission denied")

        monkeypatch.setattr(mutator_module.os, "link", fail)

        with pytest.raises(PermissionOrIOError, match="Permission denied"):
            FilesystemMutator().rename(source, "b.txt")

        assert source.exists()

    def test_destination_appearing_after_check(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """A destination created after the check is not overwritten."""
        source = tmp_path / "a.txt"
        source.write_text("source")
        late = tmp_path / "b.txt"
        late.write_text("late")
        monkeypatch.setattr(mutator_module, "_exists", lambda path: path == source)

        with pytest.raises(AlreadyExistsError):
            FilesystemMutator().rename(source, "b.txt")

        assert source.read_text() == "source"
        assert late.read_text() == "late"

    def test_failed_unlink_keeps_source_only(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """If the old name cannot be removed, the new link is dropped again."""
        source = tmp_path / "a.txt"
        source.write_text("a")
        real_unlink = os.unlink

        def unlink(path: str | Path) -> None:
            if Path(path) == source:
                raise PermissionError(13, "Permission denied")
            real_unlink(path)

        monkeypatch.setattr(mutator_module.os, "unlink", unlink)

        with pytest.raises(PermissionOrIOError):
            FilesystemMutator().rename(source, "b.txt")

        assert source.read_text() == "a"
        assert not (tmp_path / "b.txt").exists()

    def test_dry_run(self, tmp_path: Path) -> None:
        """Dry-run reports the destination without renaming."""
        source = tmp_path / "a.txt"
        source.write_text("a")

        result = FilesystemMutator(dry_run=True).rename(source, "b.txt")

        assert result.dry_run is True
        assert result.new_path == str(tmp_path / "b.txt")
        assert source.exists()


class TestDeletionOrder:
    """Tests for deletion_order."""

    def test_deepest_first_root_last(self, tmp_path: Path) -> None:
        """Every child precedes its parent and the root is last."""
        top = tmp_path / "top"
        (top / "sub" / "inner").mkdir(parents=True)
        (top / "sub" / "inner" / "f.txt").write_text("f")
        (top / "g.txt").write_text("g")

        order = deletion_order(top)

        assert order[-1] == str(top)
        position = {path: index for index, path in enumerate(order)}
        for path in order[:-1]:
            assert position[path] < position[os.path.dirname(path)]

    def test_file_is_single_entry(self, tmp_path: Path) -> None:
        """A file yields just itself."""
        target = tmp_path / "f.txt"
        target.write_text("f")
        assert deletion_order(target) == [str(target)]

    def test_unlistable_subtree(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """A listing failure raises before anything is deleted."""
        top = tmp_path / "top"
        (top / "sub").mkdir(parents=True)

        def failing_walk(root: object, onerror: object = None, **_kwargs: object) -> object:
            error = PermissionError(13, "Permission denied", str(top / "sub"))
            onerror(error)  # type: ignore[operator]
            return iter(())

        monkeypatch.setattr(mutator_module.os, "walk", failing_walk)

        with pytest.raises(PermissionOrIOError, match="Cannot list"):
            deletion_order(top)


class TestDelete:
    """Tests for delete."""

    def test_delete_file(self, tmp_path: Path) -> None:
        """A single file is removed."""
        target = tmp_path / "f.txt"
        target.write_text("f")

        result = FilesystemMutator().delete(target)

        assert result.kind == MutationKind.DELETE
        assert result.removed == (str(target),)
        assert not target.exists()

    def test_delete_symlink_keeps_target(self, tmp_path: Path) -> None:
        """Deleting a link to a directory leaves the directory alone."""
        real = tmp_path / "real"
        real.mkdir()
        (real / "keep.txt").write_text("k")
        link = tmp_path / "link"
        link.symlink_to(real)

        FilesystemMutator().delete(link)

        assert not link.is_symlink()
        assert (real / "keep.txt").exists()

    def test_delete_dead_symlink(self, tmp_path: Path) -> None:
        """A dangling link can be deleted."""
        link = tmp_path / "dead"
        link.symlink_to(tmp_path / "nowhere")

        FilesystemMutator().delete(link)

        assert not link.is_symlink()

    def test_missing_path(self, tmp_path: Path) -> None:
        """Deleting a missing path raises NotFoundError."""
        with pytest.raises(NotFoundError):
            FilesystemMutator().delete(tmp_path / "missing")

    def test_children_removed_before_parents(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """file, then subdirectory, then top directory."""
        top = tmp_path / "top"
        sub = top / "sub"
        sub.mkdir(parents=True)
        leaf = sub / "file.txt"
        leaf.write_text("x")

        removed: list[str] = []
        real_rmdir = os.rmdir
        real_unlink = os.unlink

        def recording_rmdir(path: str) -> None:
            # rmdir itself rejects non-empty directories
            real_rmdir(path)
            removed.append(path)

        def recording_unlink(path: str) -> None:
            real_unlink(path)
            removed.append(path)

        monkeypatch.setattr(mutator_module.os, "rmdir", recording_rmdir)
        monkeypatch.setattr(mutator_module.os, "unlink", recording_unlink)

        sink = RecordingEventSink()
        result = FilesystemMutator(sink=sink).delete(top)

        assert removed == [str(leaf), str(sub), str(top)]
        assert result.removed == (str(leaf), str(sub), str(top))
        assert not top.exists()
        assert sink.events == [("delete", str(top))]

    def test_partial_failure_not_restored(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """The first failure stops the delete; removed entries stay removed."""
        top = tmp_path / "top"
        (top / "sub").mkdir(parents=True)
        deep = top / "sub" / "deep.txt"
        deep.write_text("d")
        stuck = top / "stuck.txt"
        stuck.write_text("s")

        real_unlink = os.unlink

        def unlink(path: str) -> None:
            if path == str(stuck):
                raise PermissionError(13, "Permission denied", path)
            real_unlink(path)

        monkeypatch.setattr(mutator_module.os, "unlink", unlink)
        sink = RecordingEventSink()

        with pytest.raises(DeletionError) as exc_info:
            FilesystemMutator(sink=sink).delete(top)

        error = exc_info.value
        assert error.path == str(stuck)
        assert str(deep) in error.deleted
        assert not deep.exists()
        assert stuck.exists()
        assert top.exists()
        assert sink.events == []

    def test_dry_run(self, sample_tree: Path) -> None:
        """Dry-run lists what would go and removes nothing."""
        result = FilesystemMutator(dry_run=True).delete(sample_tree)

        assert result.dry_run is True
        assert len(result.removed) == 4
        assert result.removed[-1] == str(sample_tree)
        assert (sample_tree / "b" / "c.txt").exists()

"""Pytest configuration and shared fixtures.

This module contains fixtures used across all test modules.
"""

from pathlib import Path

import pytest


@pytest.fixture(autouse=True)
def isolated_config(
    tmp_path_factory: pytest.TempPathFactory,
    monkeypatch: pytest.MonkeyPatch,
) -> Path:
    """Point XDG_CONFIG_HOME at an empty directory for every test."""
    config_home = tmp_path_factory.mktemp("xdg-config")
    monkeypatch.setenv("XDG_CONFIG_HOME", str(config_home))
    # Wide console so Rich does not wrap long tmp paths
    monkeypatch.setenv("COLUMNS", "250")
    return config_home


@pytest.fixture
def sample_tree(tmp_path: Path) -> Path:
    """Directory with a.txt (10 bytes) and b/c.txt (20 bytes)."""
    root = tmp_path / "t"
    root.mkdir()
    (root / "a.txt").write_bytes(b"x" * 10)
    (root / "b").mkdir()
    (root / "b" / "c.txt").write_bytes(b"y" * 20)
    return root


@pytest.fixture
def mixed_tree(tmp_path: Path) -> Path:
    """Directory with files of several extensions and sizes.

    Layout::

        mixed/
            photo.JPG        (300 bytes)
            notes.txt        (50 bytes)
            .hidden          (5 bytes)
            docs/
                readme.TXT   (120 bytes)
                archive.tar.gz (1000 bytes)
                empty/
    """
    root = tmp_path / "mixed"
    root.mkdir()
    (root / "photo.JPG").write_bytes(b"p" * 300)
    (root / "notes.txt").write_bytes(b"n" * 50)
    (root / ".hidden").write_bytes(b"h" * 5)
    docs = root / "docs"
    docs.mkdir()
    (docs / "readme.TXT").write_bytes(b"r" * 120)
    (docs / "archive.tar.gz").write_bytes(b"a" * 1000)
    (docs / "empty").mkdir()
    return root

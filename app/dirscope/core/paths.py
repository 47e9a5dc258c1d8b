"""Locations of dirscope's user files.

Settings and the theme override live side by side in
``$XDG_CONFIG_HOME/dirscope/``, falling back to ``~/.config/dirscope/``
when the variable is unset or empty.
"""

import os
from pathlib import Path

APP_NAME = "dirscope"


def get_config_dir() -> Path:
    """Directory holding config.toml and theme.toml."""
    base = os.environ.get("XDG_CONFIG_HOME")
    root = Path(base) if base else Path.home() / ".config"
    return root / APP_NAME


def get_config_path() -> Path:
    """Settings file read by ``load_config``."""
    return get_config_dir() / "config.toml"


def get_user_theme_path() -> Path:
    """Optional colour overrides merged over the bundled theme."""
    return get_config_dir() / "theme.toml"

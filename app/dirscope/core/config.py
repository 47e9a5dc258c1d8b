"""dirscope settings.

This module provides the configuration model and I/O functions for the
tree builder and the CLI. Settings are stored in
~/.config/dirscope/config.toml; a missing file means all defaults.
"""

import logging
import os
import tomllib
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Annotated

import tomli_w
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from dirscope.core.paths import get_config_path
from dirscope.filesystem.builder import DEPTH_CEILING, MAX_DEPTH
from dirscope.filesystem.metadata import DEFAULT_BLOCK_SIZE

logger = logging.getLogger(__name__)


class DirscopeConfig(BaseModel):
    """Settings for scanning and display.

    Attributes:
        max_depth: Depth cap for tree building.
        follow_symlinks: Descend into symlinked directories while building.
        block_size: Allocation unit used to estimate on-disk size.
        sort_display: Sort children by name when rendering a tree.
        show_hidden: Render dot-files in the tree display.
    """

    model_config = ConfigDict(extra="forbid")

    max_depth: Annotated[
        int,
        Field(ge=0, le=DEPTH_CEILING, description="Depth cap for tree building"),
    ] = MAX_DEPTH
    follow_symlinks: Annotated[
        bool,
        Field(description="Descend into symlinked directories"),
    ] = True
    block_size: Annotated[
        int,
        Field(ge=512, description="Allocation unit in bytes for disk size estimates"),
    ] = DEFAULT_BLOCK_SIZE
    sort_display: Annotated[
        bool,
        Field(description="Sort children by name in the tree display"),
    ] = False
    show_hidden: Annotated[
        bool,
        Field(description="Show dot-files in the tree display"),
    ] = True


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigNotFoundError(ConfigError):
    """Raised when the config file is not found."""


class ConfigParseError(ConfigError):
    """Raised when the config file cannot be parsed."""


def load_config(path: Path | None = None) -> DirscopeConfig:
    """Load settings from a TOML file.

    Args:
        path: Path to the config file. If None, uses the default config path.

    Returns:
        Validated DirscopeConfig object.

    Raises:
        ConfigNotFoundError: If the config file doesn't exist.
        ConfigParseError: If the TOML syntax is invalid.
        ConfigError: If the content doesn't match the schema.
    """
    config_path = path or get_config_path()

    if not config_path.exists():
        raise ConfigNotFoundError(f"Config not found: {config_path}")

    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigParseError(f"Invalid TOML syntax: {e}") from e
    except OSError as e:
        raise ConfigError(f"Failed to read config: {e}") from e

    try:
        return DirscopeConfig.model_validate(data)
    except (ValueError, ValidationError) as e:
        raise ConfigError(f"Invalid config content: {e}") from e


def load_or_default(path: Path | None = None) -> DirscopeConfig:
    """Load settings, falling back to defaults when no file exists.

    Raises:
        ConfigParseError: If the file exists but is not valid TOML.
        ConfigError: If the file exists but does not match the schema.
    """
    try:
        return load_config(path)
    except ConfigNotFoundError:
        logger.debug("No config file, using defaults")
        return DirscopeConfig()


def save_config(
    config: DirscopeConfig,
    path: Path | None = None,
    *,
    include_defaults: bool = False,
) -> Path:
    """Save settings to a TOML file.

    The file is written atomically by first writing to a temporary file
    and then using os.replace() for atomic rename. Only values that
    differ from the defaults are written unless include_defaults is set.

    Args:
        config: The DirscopeConfig object to save.
        path: Path to save the config. If None, uses the default config path.
        include_defaults: Write every setting, not just the changed ones.

    Returns:
        Path where the config was saved.

    Raises:
        ConfigError: If the file cannot be written.
    """
    config_path = path or get_config_path()
    config_path.parent.mkdir(parents=True, exist_ok=True)

    data = config.model_dump(exclude_defaults=not include_defaults)

    tmp_path: Path | None = None
    try:
        with NamedTemporaryFile(
            mode="wb",
            dir=config_path.parent,
            delete=False,
            suffix=".tmp",
        ) as f:
            tmp_path = Path(f.name)
            tomli_w.dump(data, f)
        os.replace(str(tmp_path), str(config_path))
    except OSError as e:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()
        raise ConfigError(f"Failed to write config: {e}") from e

    return config_path

"""Colour theme for dirscope output.

The palette ships as ``data/theme.toml``. A ``theme.toml`` in the user's
config directory may override any subset of its ``[colors]`` keys; an
unreadable or invalid override is ignored with a warning.
"""

import functools
import logging
import tomllib
from importlib import resources
from importlib.resources.abc import Traversable
from pathlib import Path
from typing import Annotated

from pydantic import BaseModel, ConfigDict, StringConstraints, ValidationError
from rich.theme import Theme

from dirscope.core.paths import get_user_theme_path

logger = logging.getLogger(__name__)

HexColor = Annotated[
    str,
    StringConstraints(strip_whitespace=True, pattern=r"^#(?:[0-9a-fA-F]{3}){1,2}$"),
]


class ThemeColors(BaseModel):
    """Hex colours for every style the CLI prints with."""

    model_config = ConfigDict(extra="forbid")

    directory: HexColor = "#0e8ac8"
    file: HexColor = "#ffffff"
    size: HexColor = "#0ec1c8"
    skipped: HexColor = "#d44ebc"
    header: HexColor = "#69B9A1"
    muted: HexColor = "#b2bec3"
    border: HexColor = "#29526d"
    success: HexColor = "#03b971"
    warning: HexColor = "#f5b332"
    error: HexColor = "#f53263"
    info: HexColor = "#0ec1c8"

    def styles(self) -> dict[str, str]:
        """Map Rich style names to style definitions."""
        return {
            "directory": f"bold {self.directory}",
            "file": self.file,
            "size": self.size,
            "skipped": self.skipped,
            "bold_header": f"bold {self.header}",
            "muted": self.muted,
            "dim": self.muted,
            "border": self.border,
            "success": self.success,
            "warning": self.warning,
            "error": f"bold {self.error}",
            "info": self.info,
        }


def _read_colors(source: Traversable | Path) -> dict[str, object]:
    try:
        data = tomllib.loads(source.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return {}
    except (OSError, tomllib.TOMLDecodeError) as e:
        logger.warning("Ignoring theme file %s: %s", source, e)
        return {}

    colors = data.get("colors", {})
    if not isinstance(colors, dict):
        logger.warning("Ignoring theme file %s: [colors] is not a table", source)
        return {}
    return colors


def load_colors(user_path: Path | None = None) -> ThemeColors:
    """Merge the bundled palette with the user's overrides.

    Args:
        user_path: Override file. Defaults to the config directory's theme.toml.

    Returns:
        Validated colours; the built-in defaults if the merge is invalid.
    """
    bundled = resources.files("dirscope.data").joinpath("theme.toml")
    merged = {**_read_colors(bundled), **_read_colors(user_path or get_user_theme_path())}
    try:
        return ThemeColors.model_validate(merged)
    except ValidationError as e:
        logger.warning("Invalid theme colours, using defaults: %s", e)
        return ThemeColors()


@functools.cache
def get_theme() -> Theme:
    """Rich theme for the shared consoles, loaded once per process."""
    return Theme(load_colors().styles())

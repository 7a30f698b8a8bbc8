"""Theme management for reaper CLI.

Colors default to the values on ``ThemeColors`` and can be partially
overridden from ``~/.config/reaper/theme.toml``::

    [colors]
    removed = "#ff5555"
"""

import functools
import logging
import tomllib
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator
from rich.theme import Theme

from reaper.core.paths import get_theme_path

logger = logging.getLogger(__name__)


class ThemeColors(BaseModel):
    """Color configuration for reaper CLI.

    All colors must be valid hex codes (#RRGGBB or #RGB).
    """

    model_config = ConfigDict(extra="forbid")

    # Base colors
    text: str = "#ffffff"
    muted: str = "#b2bec3"
    header: str = "#69B9A1"
    border: str = "#29526d"

    # Semantic colors
    success: str = "#03b971"
    warning: str = "#f5b332"
    error: str = "#f53263"
    info: str = "#0ec1c8"

    # Candidate rendering
    removed: str = "#f53263"
    directory: str = "#0e8ac8"

    @field_validator("*", mode="before")
    @classmethod
    def validate_hex_color(cls, v: object, info: Any) -> str:
        """Validate that all color values are valid hex codes."""
        if not isinstance(v, str):
            msg = f"{info.field_name}: color must be a string"
            raise ValueError(msg)
        color = v.strip()
        if not color.startswith("#"):
            msg = f"{info.field_name}: color must start with '#'"
            raise ValueError(msg)
        color_part = color[1:]
        if len(color_part) not in (3, 6):
            msg = f"{info.field_name}: color must be #RGB or #RRGGBB format"
            raise ValueError(msg)
        try:
            int(color_part, 16)
        except ValueError:
            msg = f"{info.field_name}: invalid hex color '{color}'"
            raise ValueError(msg) from None
        return color


def _load_toml_colors(path: Path) -> dict[str, str] | None:
    """Read the ``[colors]`` table of a theme file.

    Non-string values are dropped. Problems are logged, never raised: a
    broken theme must not stop a scan.

    Returns:
        Color overrides, or None if the file is missing or unusable.
    """
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except FileNotFoundError:
        return None
    except (tomllib.TOMLDecodeError, OSError) as e:
        logger.warning("Ignoring theme file %s: %s", path, e)
        return None

    section = data.get("colors", {})
    if not isinstance(section, dict):
        logger.warning("Ignoring theme file %s: 'colors' is not a table", path)
        return None
    return {key: value for key, value in section.items() if isinstance(value, str)}


def load_theme(path: Path | None = None) -> ThemeColors:
    """Load theme colors, applying user overrides when present.

    Args:
        path: Theme file to read. Defaults to ~/.config/reaper/theme.toml.

    Returns:
        ThemeColors instance. Invalid overrides fall back to the defaults.
    """
    theme_path = path or get_theme_path()
    overrides = _load_toml_colors(theme_path)
    if not overrides:
        return ThemeColors()

    try:
        colors = ThemeColors.model_validate(overrides)
    except ValidationError as e:
        logger.warning("Invalid colors in %s, using defaults: %s", theme_path, e)
        return ThemeColors()
    logger.debug("Applied %d color override(s) from %s", len(overrides), theme_path)
    return colors


def get_rich_theme(colors: ThemeColors | None = None) -> Theme:
    """Map theme colors onto the style names used by the CLI.

    Directories and errors are rendered bold; ``bold_header`` and ``dim``
    are derived from the header and muted colors.
    """
    colors = colors or load_theme()
    styles = colors.model_dump()
    styles["error"] = f"bold {colors.error}"
    styles["directory"] = f"bold {colors.directory}"
    styles["bold_header"] = f"bold {colors.header}"
    styles["dim"] = colors.muted
    return Theme(styles)


@functools.cache
def get_theme() -> Theme:
    """Rich theme for the shared consoles, loaded once per process."""
    return get_rich_theme()

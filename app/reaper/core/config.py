"""Settings file support.

Defaults for the command line live in ``~/.config/reaper/config.toml``::

    expiry = "30d"
    protect = ["*.keep", ".git"]
    irregular = false
    force = false

Command line flags override the file. The file is optional.
"""

import logging
import tomllib
from datetime import timedelta
from pathlib import Path
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from reaper.core.errors import ConfigError, ConfigParseError
from reaper.core.paths import get_settings_path
from reaper.core.predicates import validate_pattern
from reaper.models.options import ReaperOptions
from reaper.utils.duration import parse_duration

logger = logging.getLogger(__name__)


class ReaperSettings(BaseModel):
    """Persistent defaults for scans.

    Attributes:
        expiry: Default expiry as a duration string (e.g. "72h").
        protect: Protection glob patterns applied to every scan.
        irregular: Consider irregular entries by default.
        force: Ignore permissions by default.
    """

    model_config = ConfigDict(extra="forbid")

    expiry: Annotated[str | None, Field(description="Default expiry duration")] = None
    protect: Annotated[
        list[str],
        Field(default_factory=list, description="Protection glob patterns"),
    ]
    irregular: Annotated[bool, Field(description="Consider irregular entries")] = False
    force: Annotated[bool, Field(description="Ignore candidate permissions")] = False

    @field_validator("expiry")
    @classmethod
    def validate_expiry(cls, v: str | None) -> str | None:
        """Check that the expiry parses as a duration."""
        if v is not None:
            parse_duration(v)
        return v

    @field_validator("protect")
    @classmethod
    def validate_protect(cls, v: list[str]) -> list[str]:
        """Validate every protection pattern up front."""
        for glob in v:
            validate_pattern(glob)
        return v

    def to_options(
        self,
        *,
        expiry: timedelta | None = None,
        protect: list[str] | None = None,
        irregular: bool = False,
        force: bool = False,
    ) -> ReaperOptions:
        """Merge command line overrides into scan options.

        The expiry override replaces the configured one, protection patterns
        are appended to the configured ones and boolean flags are OR-ed.

        Args:
            expiry: Expiry override.
            protect: Additional protection patterns.
            irregular: Irregular override.
            force: Force override.

        Returns:
            Validated ReaperOptions.

        Raises:
            ConfigError: If no expiry is configured anywhere.
            ValidationError: If the merged options are invalid.
        """
        effective = expiry
        if effective is None and self.expiry is not None:
            effective = parse_duration(self.expiry)
        if effective is None:
            raise ConfigError("No expiry given (use --expiry or set 'expiry' in config.toml)")

        return ReaperOptions(
            expiry=effective,
            protect=(*self.protect, *(protect or [])),
            irregular=self.irregular or irregular,
            force=self.force or force,
        )


def load_settings(path: Path | None = None) -> ReaperSettings:
    """Load settings from a TOML file.

    Args:
        path: Path to the settings file. If None, uses the default path.

    Returns:
        Validated settings, or defaults if the file does not exist.

    Raises:
        ConfigParseError: If the TOML syntax is invalid.
        ConfigError: If the file cannot be read or its content is invalid.
    """
    settings_path = path or get_settings_path()

    if not settings_path.exists():
        logger.debug("No settings file at %s, using defaults", settings_path)
        return ReaperSettings()

    try:
        with open(settings_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigParseError(f"Invalid TOML syntax in {settings_path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Failed to read settings: {e}") from e

    try:
        return ReaperSettings.model_validate(data)
    except (ValueError, ValidationError) as e:
        raise ConfigError(f"Invalid settings content in {settings_path}: {e}") from e

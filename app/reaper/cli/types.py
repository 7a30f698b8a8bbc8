"""Shared option types and helpers for CLI commands.

Both ``scan`` and ``clean`` accept the same filter flags; the annotated
aliases below keep their declarations in one place.
"""

import os
from datetime import timedelta
from pathlib import Path
from typing import Annotated

import typer
from pydantic import ValidationError

from reaper.core.config import load_settings
from reaper.core.errors import ConfigError
from reaper.models.options import ReaperOptions
from reaper.utils.duration import parse_duration
from reaper.utils.formatting import print_error

RootsArgument = Annotated[
    list[str],
    typer.Argument(help="Directories to scan.", show_default=False),
]

ExpiryOption = Annotated[
    str | None,
    typer.Option(
        "--expiry",
        "-e",
        help="Entries not accessed for longer than this are expired (e.g. 90s, 72h, 7d).",
    ),
]

ProtectOption = Annotated[
    list[str] | None,
    typer.Option(
        "--protect",
        "-p",
        help=f"'{os.pathsep}'-separated globs for data to protect. Repeatable.",
    ),
]

IrregularOption = Annotated[
    bool,
    typer.Option(
        "--irregular",
        help="Also consider irregular files (FIFOs, sockets, devices, symlinks).",
    ),
]

ForceOption = Annotated[
    bool,
    typer.Option("--force", help="Ignore candidate permissions."),
]

ConfigOption = Annotated[
    Path | None,
    typer.Option(
        "--config",
        "-c",
        help="Settings file (default: ~/.config/reaper/config.toml).",
        dir_okay=False,
    ),
]


def split_patterns(values: list[str] | None) -> list[str]:
    """Split ``os.pathsep``-separated pattern lists, dropping empty items."""
    patterns: list[str] = []
    for value in values or []:
        patterns.extend(part for part in value.split(os.pathsep) if part)
    return patterns


def resolve_options(
    *,
    expiry: str | None,
    protect: list[str] | None,
    irregular: bool,
    force: bool,
    config: Path | None,
) -> ReaperOptions:
    """Merge the settings file and command line flags into scan options.

    Prints an error and exits with code 1 when the result is unusable.

    Returns:
        Validated ReaperOptions.

    Raises:
        typer.Exit: On invalid settings, durations or patterns.
    """
    try:
        settings = load_settings(config)
        expiry_override: timedelta | None = parse_duration(expiry) if expiry else None
        options = settings.to_options(
            expiry=expiry_override,
            protect=split_patterns(protect),
            irregular=irregular,
            force=force,
        )
    except ConfigError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e
    except ValidationError as e:
        details = "; ".join(err["msg"] for err in e.errors())
        print_error(f"Invalid options: {details}")
        raise typer.Exit(code=1) from e
    except ValueError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    return options

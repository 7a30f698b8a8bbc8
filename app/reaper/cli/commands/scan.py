"""Scan command implementation.

Lists expired entries under one or more roots without touching them.
"""

import json
from datetime import UTC, datetime
from enum import Enum
from typing import Annotated

import typer

from reaper.cli.display import create_candidates_table, entry_to_dict
from reaper.cli.types import (
    ConfigOption,
    ExpiryOption,
    ForceOption,
    IrregularOption,
    ProtectOption,
    RootsArgument,
    resolve_options,
)
from reaper.core.errors import ConstructionError
from reaper.core.session import Reaper
from reaper.models.entry import Entry
from reaper.utils.formatting import console, format_size, print_error, print_success, print_warning


class OutputFormat(str, Enum):
    """Output format options."""

    TABLE = "table"
    JSON = "json"


def scan(
    roots: RootsArgument,
    expiry: ExpiryOption = None,
    protect: ProtectOption = None,
    irregular: IrregularOption = False,
    force: ForceOption = False,
    config: ConfigOption = None,
    output_format: Annotated[
        OutputFormat,
        typer.Option(
            "--format",
            "-f",
            help="Output format: table or json.",
            case_sensitive=False,
        ),
    ] = OutputFormat.TABLE,
    limit: Annotated[
        int | None,
        typer.Option(
            "--limit",
            "-l",
            min=1,
            help="Stop after this many candidates.",
        ),
    ] = None,
) -> None:
    """List files and empty directories not accessed within the expiry.

    Nothing is deleted. Directories are listed only when empty.

    Examples:
        reaper scan /var/tmp --expiry 7d
        reaper scan /srv/cache -e 72h --protect '*.lock:keep/*'
        reaper scan /tmp -e 1h --format json --limit 20
    """
    options = resolve_options(
        expiry=expiry,
        protect=protect,
        irregular=irregular,
        force=force,
        config=config,
    )

    candidates: list[Entry] = []
    failed = False

    for root in roots:
        if limit is not None and len(candidates) >= limit:
            break
        try:
            reaper = Reaper(root, options)
        except ConstructionError as e:
            print_error(f"Walk on {root} failed: {e}")
            failed = True
            continue

        with reaper:
            for entry in reaper:
                candidates.append(entry)
                if limit is not None and len(candidates) >= limit:
                    break

        for error in reaper.errors:
            print_warning(f"Walk on {root} failed: {error}")
            failed = True

    if output_format == OutputFormat.JSON:
        console.print_json(json.dumps([entry_to_dict(e) for e in candidates]))
    elif not candidates:
        print_success("Nothing expired. No candidates found.")
    else:
        now = datetime.now(tz=UTC)
        console.print(create_candidates_table(candidates, now, title="Expired Entries"))
        total_size = sum(e.size_bytes for e in candidates if not e.is_dir)
        console.print(
            f"\n[dim]Found {len(candidates)} expired entries ({format_size(total_size)} total)[/dim]"
        )

    if failed:
        raise typer.Exit(code=1)

"""Clean command implementation.

Streams expired entries and removes each one as it arrives. Dry-run is
the default; pass ``--no-dry-run`` to actually delete.
"""

from typing import Annotated

import typer

from reaper.cli.display import print_command, print_removal_summary
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
from reaper.core.remover import EntryRemover, RemovalResult
from reaper.core.session import Reaper
from reaper.utils.duration import format_duration
from reaper.utils.formatting import print_error, print_info, print_warning


def clean(
    roots: RootsArgument,
    expiry: ExpiryOption = None,
    protect: ProtectOption = None,
    irregular: IrregularOption = False,
    force: ForceOption = False,
    config: ConfigOption = None,
    dry_run: Annotated[
        bool,
        typer.Option(
            "--dry-run/--no-dry-run",
            help="Only report what would be removed.",
        ),
    ] = True,
    show_command: Annotated[
        bool,
        typer.Option(
            "--show-command/--no-show-command",
            help="Print the equivalent rm/rmdir command for each candidate.",
        ),
    ] = True,
    yes: Annotated[
        bool,
        typer.Option("--yes", "-y", help="Skip confirmation prompt."),
    ] = False,
) -> None:
    """Remove files and empty directories not accessed within the expiry.

    Each candidate is removed right after it is found: files with rm,
    empty directories with rmdir. Non-empty directories are never removed.

    Examples:
        reaper clean /var/tmp --expiry 7d                   # dry-run
        reaper clean /var/tmp --expiry 7d --no-dry-run -y   # delete
    """
    options = resolve_options(
        expiry=expiry,
        protect=protect,
        irregular=irregular,
        force=force,
        config=config,
    )

    if not dry_run and not yes:
        age = format_duration(options.expiry)
        confirmed = typer.confirm(
            f"Remove entries not accessed for {age} under {', '.join(roots)}?",
            default=False,
        )
        if not confirmed:
            print_info("Aborted.")
            raise typer.Exit(code=0)

    remover = EntryRemover(dry_run=dry_run)
    results: list[RemovalResult] = []
    failed = False

    for root in roots:
        try:
            reaper = Reaper(root, options)
        except ConstructionError as e:
            print_error(f"Walk on {root} failed: {e}")
            failed = True
            continue

        with reaper:
            for entry in reaper:
                if show_command:
                    print_command(entry)
                result = remover.remove(entry)
                results.append(result)
                if not result.success:
                    print_warning(f"Deletion of {entry.path} failed: {result.error}")
                    failed = True

        for error in reaper.errors:
            print_warning(f"Walk on {root} failed: {error}")
            failed = True

    print_removal_summary(results)

    if failed:
        raise typer.Exit(code=1)

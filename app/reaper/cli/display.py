"""Shared Rich display functions for candidates and removal results."""

import json
from collections.abc import Iterable
from datetime import datetime

from rich.markup import escape
from rich.table import Table

from reaper.core.remover import RemovalResult
from reaper.models.entry import Entry
from reaper.utils.formatting import console, format_age, format_size, print_info, print_success


def format_command(entry: Entry) -> str:
    """Render the shell command equivalent to removing an entry.

    Directories map to ``rmdir``, everything else to ``rm``. The path is
    double-quoted with JSON escaping.
    """
    verb = "rmdir" if entry.is_dir else "rm"
    return f"{verb} {json.dumps(entry.path, ensure_ascii=False)}"


def print_command(entry: Entry) -> None:
    """Print the removal command for an entry on its own line."""
    style = "directory" if entry.is_dir else "removed"
    console.print(f"[{style}]{escape(format_command(entry))}[/]", soft_wrap=True, highlight=False)


def create_candidates_table(entries: Iterable[Entry], now: datetime, title: str) -> Table:
    """Create a Rich table listing deletion candidates.

    Args:
        entries: Candidates to display, in scan order.
        now: Reference time for the age column.
        title: Table title.

    Returns:
        Rich Table configured for candidate display.
    """
    table = Table(
        title=title,
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Path", no_wrap=True)
    table.add_column("Type", width=9)
    table.add_column("Size", style="info", justify="right", width=9)
    table.add_column("Last Access", style="muted", justify="right")

    for entry in entries:
        path_style = "directory" if entry.is_dir else "text"
        table.add_row(
            f"[{path_style}]{escape(entry.path)}[/]",
            entry.entry_type.value,
            format_size(entry.size_bytes) if not entry.is_dir else "-",
            f"{format_age(entry.access_time, now)} ago",
        )

    return table


def entry_to_dict(entry: Entry) -> dict[str, object]:
    """Serialize an entry for JSON output."""
    meta = entry.metadata
    return {
        "path": entry.path,
        "type": entry.entry_type.value,
        "size_bytes": entry.size_bytes,
        "access_time": entry.access_time.isoformat(),
        "mode": f"{meta.permissions:04o}",
        "owner_id": meta.owner_id,
        "group_id": meta.group_id,
        "device_id": meta.device_id,
    }


def print_removal_summary(results: list[RemovalResult]) -> None:
    """Print a summary of removal results.

    Args:
        results: Results collected during a clean run.
    """
    success_count = sum(1 for r in results if r.success and not r.dry_run)
    fail_count = sum(1 for r in results if not r.success)
    dry_count = sum(1 for r in results if r.dry_run)

    if not results:
        print_success("Nothing to remove. No expired entries found.")
    elif dry_count:
        print_info(f"Dry-run: {dry_count} path(s) would be removed.")
    elif fail_count == 0:
        print_success(f"All {success_count} path(s) removed successfully.")
    else:
        console.print(
            f"\n[success]{success_count} removed[/success], [error]{fail_count} failed[/error]"
        )

"""CLI commands for reaper.

This package contains all subcommand implementations.
"""

from reaper.cli.commands import clean, scan

__all__ = ["clean", "scan"]

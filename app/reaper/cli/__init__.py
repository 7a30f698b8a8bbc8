"""CLI package for reaper.

This package contains the Typer application and all subcommands.
"""

from reaper.cli.main import app

__all__ = ["app"]

"""Utility modules for reaper.

This module exports commonly used utility functions.
"""

from reaper.utils.duration import format_duration, parse_duration
from reaper.utils.formatting import (
    console,
    err_console,
    format_age,
    format_size,
    print_error,
    print_info,
    print_success,
    print_warning,
)

__all__ = [
    "console",
    "err_console",
    "format_age",
    "format_duration",
    "format_size",
    "parse_duration",
    "print_error",
    "print_info",
    "print_success",
    "print_warning",
]

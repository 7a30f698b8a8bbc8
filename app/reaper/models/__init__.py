"""Data models for reaper.

This module exports the candidate entry and the scan options.
"""

from reaper.models.entry import Entry
from reaper.models.options import ReaperOptions

__all__ = [
    "Entry",
    "ReaperOptions",
]

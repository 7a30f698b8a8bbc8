"""reaper - find files and directories nobody has touched in a while.

The package walks a directory tree and streams entries whose access time
lies beyond an expiry window, skipping protected, cross-device and
non-writable paths. Deletion is left to the caller.
"""

from reaper.core.errors import ConstructionError, PatternError, ReaperError
from reaper.core.session import Reaper
from reaper.models.entry import Entry
from reaper.models.options import ReaperOptions

__version__ = "0.1.0"

__all__ = [
    "ConstructionError",
    "Entry",
    "PatternError",
    "Reaper",
    "ReaperError",
    "ReaperOptions",
    "__version__",
]

"""Exception hierarchy for reaper.

Construction errors are fatal to a single session. Pattern errors are
configuration mistakes caught while options are built. Per-entry traversal
failures are plain ``OSError`` instances recorded on the session.
"""


class ReaperError(Exception):
    """Base exception for reaper errors."""


class ConstructionError(ReaperError):
    """Raised when a session cannot be created for a scan root."""


class UnsupportedPlatformError(ConstructionError):
    """Raised when the platform does not expose POSIX owner/device metadata."""


class PatternError(ReaperError, ValueError):
    """Raised when a protection glob pattern is malformed."""


class ConfigError(ReaperError):
    """Base exception for settings file errors."""


class ConfigParseError(ConfigError):
    """Raised when the settings file cannot be parsed."""

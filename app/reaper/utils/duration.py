"""Duration string parsing.

Accepts the compact notation used by the original command line tool,
e.g. ``90s``, ``1h30m``, ``1.5h`` or ``300ms``, extended with ``d`` (days)
and ``w`` (weeks). A bare number is read as seconds.
"""

import re
from datetime import timedelta

_UNIT_SECONDS: dict[str, float] = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
    "d": 86400.0,
    "w": 604800.0,
}

_NUMBER = r"(?:\d+(?:\.\d*)?|\.\d+)"
_COMPONENT = re.compile(rf"({_NUMBER})(ns|us|µs|ms|s|m|h|d|w)")
_DURATION = re.compile(rf"[+-]?(?:{_NUMBER}(?:ns|us|µs|ms|s|m|h|d|w))+")
_BARE = re.compile(rf"[+-]?{_NUMBER}")


def parse_duration(text: str) -> timedelta:
    """Parse a duration string into a timedelta.

    Args:
        text: Duration such as ``"72h"``, ``"1h30m"`` or ``"3600"``.

    Returns:
        Parsed duration (may be zero or negative; callers validate).

    Raises:
        ValueError: If the string is not a valid duration or is too large
            for a timedelta.
    """
    value = text.strip()
    if not value:
        raise ValueError("Duration cannot be empty")

    if _BARE.fullmatch(value):
        return _to_timedelta(float(value), text)

    if not _DURATION.fullmatch(value):
        msg = f"Invalid duration {text!r} (expected e.g. '90s', '1h30m', '7d')"
        raise ValueError(msg)

    sign = -1 if value.startswith("-") else 1
    seconds = sum(
        float(number) * _UNIT_SECONDS[unit] for number, unit in _COMPONENT.findall(value)
    )
    return _to_timedelta(sign * seconds, text)


def _to_timedelta(seconds: float, text: str) -> timedelta:
    try:
        return timedelta(seconds=seconds)
    except OverflowError as e:
        raise ValueError(f"Duration {text!r} is out of range") from e


def format_duration(delta: timedelta) -> str:
    """Format a timedelta compactly, e.g. ``1d2h3m4s``."""
    seconds = int(delta.total_seconds())
    if seconds == 0:
        return "0s"

    sign = "-" if seconds < 0 else ""
    seconds = abs(seconds)
    parts: list[str] = []
    for unit, size in (("d", 86400), ("h", 3600), ("m", 60), ("s", 1)):
        count, seconds = divmod(seconds, size)
        if count:
            parts.append(f"{count}{unit}")
    return sign + "".join(parts)

"""Exclusion predicates applied to every visited entry.

All predicates are pure functions over a metadata snapshot and a few
scalar inputs, so they can be evaluated without privileges and tested
without touching the filesystem (``is_empty`` aside).
"""

import functools
import os
import re
import stat
from collections.abc import Callable, Collection, Iterable
from datetime import UTC, datetime, timedelta

from reaper.core.errors import PatternError
from reaper.core.identity import SUPERUSER_ID
from reaper.core.metadata import FileMetadata, access_time, group_id, owner_id, same_device

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    """Default clock: wall-clock time in UTC."""
    return datetime.now(tz=UTC)


def _class_char(glob: str, i: int) -> tuple[str, int]:
    """Read one (possibly escaped) character inside a character class."""
    if glob[i] == "\\":
        if i + 1 >= len(glob):
            msg = f"Unterminated character class in protection pattern {glob!r}"
            raise PatternError(msg)
        return glob[i + 1], i + 2
    return glob[i], i + 1


def _translate_class(glob: str, i: int) -> tuple[str, int]:
    """Translate the class starting after ``[`` at index ``i``.

    Returns:
        Regex fragment and the index just past the closing ``]``.
    """
    n = len(glob)
    negate = i < n and glob[i] in "^!"
    if negate:
        i += 1

    items: list[str] = []
    while True:
        if i >= n:
            msg = f"Unterminated character class in protection pattern {glob!r}"
            raise PatternError(msg)
        if glob[i] == "]":
            if not items:
                msg = f"Empty character class in protection pattern {glob!r}"
                raise PatternError(msg)
            return f"[{'^' if negate else ''}{''.join(items)}]", i + 1

        lo, i = _class_char(glob, i)
        if i + 1 < n and glob[i] == "-" and glob[i + 1] != "]":
            hi, i = _class_char(glob, i + 1)
            if lo > hi:
                msg = f"Invalid range {lo}-{hi} in protection pattern {glob!r}"
                raise PatternError(msg)
            items.append(f"{re.escape(lo)}-{re.escape(hi)}")
        else:
            items.append(re.escape(lo))


@functools.lru_cache(maxsize=256)
def _compile(glob: str) -> re.Pattern[str]:
    """Translate a protection glob into an anchored regex.

    ``*`` and ``?`` stay within one path segment, ``[^...]`` and ``[!...]``
    negate a class and ``\\`` escapes the next character.
    """
    if not glob:
        raise PatternError("Protection pattern cannot be empty")

    parts: list[str] = []
    i, n = 0, len(glob)
    while i < n:
        c = glob[i]
        i += 1
        if c == "*":
            parts.append("[^/]*")
        elif c == "?":
            parts.append("[^/]")
        elif c == "\\":
            if i >= n:
                msg = f"Trailing backslash in protection pattern {glob!r}"
                raise PatternError(msg)
            parts.append(re.escape(glob[i]))
            i += 1
        elif c == "[":
            fragment, i = _translate_class(glob, i)
            parts.append(fragment)
        else:
            parts.append(re.escape(c))
    return re.compile("".join(parts))


def validate_pattern(glob: str) -> str:
    """Check that a protection glob is well formed.

    A typo such as an unterminated ``[`` would otherwise produce a pattern
    that never protects anything, so malformed patterns are rejected.

    Args:
        glob: Shell-style glob pattern.

    Returns:
        The pattern, unchanged.

    Raises:
        PatternError: If the pattern is empty, ends in a lone backslash or
            has an empty, unterminated or reversed character class.
    """
    _compile(glob)
    return glob


def is_protected(path: str, globs: Iterable[str]) -> bool:
    """Check if a path matches any protection pattern.

    Matching is segment-aware: ``*`` and ``?`` never match ``/``, so
    ``*.log`` protects ``app.log`` but not ``sub/app.log``.

    Args:
        path: Path to test, exactly as produced by the walk or relative
            to the scan root.
        globs: Shell-style patterns (``*``, ``?``, ``[...]``, ``\\``).

    Returns:
        True if at least one pattern matches the whole path.

    Raises:
        PatternError: If a pattern is malformed.
    """
    return any(_compile(glob).fullmatch(path) for glob in globs)


def on_same_device(root: FileMetadata, metadata: FileMetadata) -> bool:
    """Check whether an entry lives on the scan root's device."""
    return same_device(root, metadata)


def is_writable(
    metadata: FileMetadata,
    euid: int,
    egid: int,
    groups: Collection[int],
    perm: int,
) -> bool:
    """Evaluate write permission the way the kernel would, in user space.

    Precedence: superuser, then the other bit, then the owner bit for the
    owning user, then the group bit for the owning or a supplementary group.

    Args:
        metadata: Snapshot providing the owner and group ids.
        euid: Effective user id of the caller.
        egid: Effective group id of the caller.
        groups: Supplementary group ids of the caller.
        perm: Permission bits to evaluate.

    Returns:
        True if the caller may write to the entry.
    """
    if euid == SUPERUSER_ID:
        return True
    if perm & stat.S_IWOTH:
        return True
    if perm & stat.S_IWUSR and owner_id(metadata) == euid:
        return True
    if perm & stat.S_IWGRP:
        gid = group_id(metadata)
        if gid == egid:
            return True
        if gid in groups:
            return True
    return False


def is_empty(path: str) -> bool:
    """Check if a directory has no children.

    A directory that cannot be opened counts as non-empty, so it is never
    reported for deletion.
    """
    try:
        with os.scandir(path) as it:
            return next(it, None) is None
    except OSError:
        return False


def has_expired(metadata: FileMetadata, ttl: timedelta, clock: Clock | None = None) -> bool:
    """Check if an entry was last accessed more than ``ttl`` ago.

    Args:
        metadata: Snapshot providing the access time.
        ttl: Expiry window.
        clock: Callable returning the current aware datetime. Defaults to
            wall-clock UTC.

    Returns:
        True if ``now - atime > ttl``.
    """
    now = (clock or utc_now)()
    return now - access_time(metadata) > ttl

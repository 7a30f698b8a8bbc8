"""Pytest configuration and shared fixtures.

This module contains fixtures used across all test modules.
"""

import os
import time
from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from pathlib import Path

import pytest
from reaper.core.identity import Credentials
from reaper.core.metadata import EntryType, FileMetadata

# Fixed reference time for expiry checks
NOW = datetime(2024, 5, 28, 17, 13, 0, tzinfo=UTC)


@pytest.fixture
def now() -> datetime:
    """Reference 'now' used by the injected clock."""
    return NOW


@pytest.fixture
def clock(now: datetime) -> Callable[[], datetime]:
    """Deterministic clock returning the reference time."""
    return lambda: now


@pytest.fixture
def set_age(now: datetime) -> Callable[[Path, float], None]:
    """Set a path's access (and modification) time to ``seconds`` before now."""

    def _set_age(path: Path, seconds: float) -> None:
        ts = (now - timedelta(seconds=seconds)).timestamp()
        os.utime(path, (ts, ts), follow_symlinks=False)

    return _set_age


@pytest.fixture
def make_metadata() -> Callable[..., FileMetadata]:
    """Factory for FileMetadata snapshots with sensible defaults."""

    def _make(
        *,
        entry_type: EntryType = EntryType.FILE,
        mode: int = 0o100644,
        owner_id: int = 1000,
        group_id: int = 1000,
        device_id: int = 42,
        atime: datetime = NOW,
        size_bytes: int = 0,
    ) -> FileMetadata:
        return FileMetadata(
            entry_type=entry_type,
            mode=mode,
            owner_id=owner_id,
            group_id=group_id,
            device_id=device_id,
            atime_ns=int(atime.timestamp()) * 1_000_000_000,
            size_bytes=size_bytes,
        )

    return _make


@pytest.fixture
def credentials() -> Credentials:
    """Credentials of the user running the tests."""
    return Credentials(euid=os.geteuid(), egid=os.getegid(), groups=frozenset(os.getgroups()))


@pytest.fixture
def aged_tree(tmp_path: Path, set_age: Callable[[Path, float], None]) -> Path:
    """Build a small tree with known access times.

    Layout (ages in seconds before now)::

        root/
            new_empty/                      0
            old_empty/                      10
            old_with_young_content/         10
                new_content                 0
                old_content                 10
    """
    root = tmp_path / "root"
    root.mkdir()

    old_empty = root / "old_empty"
    old_empty.mkdir()
    new_empty = root / "new_empty"
    new_empty.mkdir()
    mixed = root / "old_with_young_content"
    mixed.mkdir()
    (mixed / "old_content").write_bytes(b"\x00\x01\x02\x03\x04")
    (mixed / "new_content").write_bytes(b"\x00\x01\x02\x03\x04")

    set_age(mixed / "old_content", 10)
    set_age(mixed / "new_content", 0)
    set_age(old_empty, 10)
    set_age(new_empty, 0)
    set_age(mixed, 10)
    return root


@pytest.fixture
def live_tree(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Same layout as ``aged_tree`` but aged against the wall clock.

    The command line has no clock injection, so ages are relative to the
    real time: "old" entries were last accessed an hour ago. The working
    directory is ``tmp_path`` so the tree can be addressed as ``data``.
    """
    root = tmp_path / "data"
    root.mkdir()
    (root / "old_empty").mkdir()
    (root / "new_empty").mkdir()
    mixed = root / "old_with_young_content"
    mixed.mkdir()
    (mixed / "old_content").write_bytes(b"\x00\x01\x02\x03\x04")
    (mixed / "new_content").write_bytes(b"\x00\x01\x02\x03\x04")

    hour_ago = time.time() - 3600
    for path in (mixed / "old_content", root / "old_empty", mixed):
        os.utime(path, (hour_ago, hour_ago), follow_symlinks=False)

    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    return root

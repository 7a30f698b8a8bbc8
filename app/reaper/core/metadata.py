"""Filesystem metadata snapshots.

This module wraps ``os.lstat`` into an immutable snapshot carrying the
fields the predicates need: owner, group, device, permission bits, access
time, size and entry type. Symlinks are never followed.
"""

import os
import stat
from dataclasses import dataclass
from datetime import UTC, datetime
from enum import Enum


class EntryType(str, Enum):
    """Type of filesystem entry.

    Attributes:
        FILE: Regular file.
        DIRECTORY: Directory.
        SYMLINK: Symbolic link (detected, never followed).
        IRREGULAR: Anything else: FIFO, socket, block or character device.
    """

    FILE = "file"
    DIRECTORY = "directory"
    SYMLINK = "symlink"
    IRREGULAR = "irregular"


@dataclass(frozen=True, slots=True)
class FileMetadata:
    """Point-in-time metadata of a filesystem entry.

    Attributes:
        entry_type: Classification of the entry.
        mode: Full ``st_mode`` value.
        owner_id: Owning user id.
        group_id: Owning group id.
        device_id: Id of the device holding the entry.
        atime_ns: Last access time in nanoseconds since the epoch.
        size_bytes: Size as reported by ``lstat``.
    """

    entry_type: EntryType
    mode: int
    owner_id: int
    group_id: int
    device_id: int
    atime_ns: int
    size_bytes: int

    @property
    def permissions(self) -> int:
        """Permission bits (the ``0o7777`` part of the mode)."""
        return stat.S_IMODE(self.mode)

    @property
    def is_dir(self) -> bool:
        return self.entry_type == EntryType.DIRECTORY

    @property
    def is_regular(self) -> bool:
        return self.entry_type == EntryType.FILE

    @classmethod
    def from_stat(cls, st: os.stat_result) -> "FileMetadata":
        """Build a snapshot from an ``os.stat_result``."""
        return cls(
            entry_type=entry_type_of(st.st_mode),
            mode=st.st_mode,
            owner_id=st.st_uid,
            group_id=st.st_gid,
            device_id=st.st_dev,
            atime_ns=st.st_atime_ns,
            size_bytes=st.st_size,
        )


def entry_type_of(mode: int) -> EntryType:
    """Classify an ``st_mode`` value."""
    if stat.S_ISLNK(mode):
        return EntryType.SYMLINK
    if stat.S_ISDIR(mode):
        return EntryType.DIRECTORY
    if stat.S_ISREG(mode):
        return EntryType.FILE
    return EntryType.IRREGULAR


def read_metadata(path: str) -> FileMetadata:
    """Read metadata for a path without following symlinks.

    Args:
        path: Filesystem path to inspect.

    Returns:
        FileMetadata snapshot.

    Raises:
        OSError: If the path cannot be stat'ed.
    """
    return FileMetadata.from_stat(os.lstat(path))


def owner_id(metadata: FileMetadata) -> int:
    return metadata.owner_id


def group_id(metadata: FileMetadata) -> int:
    return metadata.group_id


def device_id(metadata: FileMetadata) -> int:
    return metadata.device_id


def is_symlink(metadata: FileMetadata) -> bool:
    return metadata.entry_type == EntryType.SYMLINK


def same_device(a: FileMetadata, b: FileMetadata) -> bool:
    """Check whether two entries live on the same device."""
    return device_id(a) == device_id(b)


def access_time(metadata: FileMetadata) -> datetime:
    """Return the last access time as a timezone-aware UTC datetime."""
    seconds, nanos = divmod(metadata.atime_ns, 1_000_000_000)
    return datetime.fromtimestamp(seconds, tz=UTC).replace(microsecond=nanos // 1000)

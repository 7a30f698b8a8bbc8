"""Candidate entries produced by a scan."""

from dataclasses import dataclass
from datetime import datetime

from reaper.core.metadata import EntryType, FileMetadata, access_time


@dataclass(frozen=True, slots=True)
class Entry:
    """A filesystem entry that survived every exclusion predicate.

    The entry is handed to the consumer as-is and never touched by the
    producer again.

    Attributes:
        path: Scan root joined with the root-relative path.
        metadata: Metadata snapshot taken when the entry was visited.
    """

    path: str
    metadata: FileMetadata

    def __post_init__(self) -> None:
        """Validate entry data after initialization."""
        if not self.path:
            msg = "Path cannot be empty"
            raise ValueError(msg)

    @property
    def entry_type(self) -> EntryType:
        return self.metadata.entry_type

    @property
    def is_dir(self) -> bool:
        return self.metadata.is_dir

    @property
    def size_bytes(self) -> int:
        return self.metadata.size_bytes

    @property
    def access_time(self) -> datetime:
        """Last access time as an aware UTC datetime."""
        return access_time(self.metadata)

"""Removal of candidates produced by a scan.

The scan engine only decides; this module acts. Each entry is removed with
a single call: ``os.rmdir`` for directories (never recursive, a directory
that gained children since the scan is left alone) and ``os.remove`` for
everything else. Nothing re-checks the entry between scan and removal.
"""

import logging
import os
from dataclasses import dataclass

from reaper.models.entry import Entry

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class RemovalResult:
    """Result of removing a single entry.

    Attributes:
        path: Path that was operated on.
        success: Whether the operation completed successfully.
        error: Error message if the operation failed, None otherwise.
        dry_run: Whether this was a dry-run (no actual removal).
    """

    path: str
    success: bool
    error: str | None = None
    dry_run: bool = False


class EntryRemover:
    """Removes scan candidates one at a time.

    Attributes:
        _dry_run: If True, report what would be removed without removing.
    """

    def __init__(self, dry_run: bool = False) -> None:
        self._dry_run = dry_run

    @property
    def dry_run(self) -> bool:
        return self._dry_run

    def remove(self, entry: Entry) -> RemovalResult:
        """Remove a single entry.

        Args:
            entry: Candidate yielded by a scan.

        Returns:
            RemovalResult describing the outcome. OS errors are reported in
            the result, never raised.
        """
        if self._dry_run:
            logger.info("Dry-run: would remove %s", entry.path)
            return RemovalResult(path=entry.path, success=True, dry_run=True)

        try:
            if entry.is_dir:
                os.rmdir(entry.path)
            else:
                os.remove(entry.path)
        except OSError as e:
            logger.warning("Removal of %s failed: %s", entry.path, e)
            return RemovalResult(path=entry.path, success=False, error=str(e))

        logger.debug("Removed %s", entry.path)
        return RemovalResult(path=entry.path, success=True)

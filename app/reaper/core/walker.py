"""Depth-first tree walk applying the exclusion predicates.

The walker visits the scan root and everything below it in pre-order,
parents before children, with the children of each directory taken in
lexical name order. Every visited path runs through the predicate chain
and survivors are yielded as ``Entry`` objects.
"""

import logging
import os
from collections.abc import Callable, Iterator
from enum import Enum

from reaper.core.identity import Credentials
from reaper.core.metadata import FileMetadata, read_metadata
from reaper.core.predicates import (
    Clock,
    has_expired,
    is_empty,
    is_protected,
    is_writable,
    on_same_device,
)
from reaper.models.entry import Entry
from reaper.models.options import ReaperOptions

logger = logging.getLogger(__name__)


class WalkState(str, Enum):
    """Traversal state of a walker.

    Attributes:
        IDLE: Walk not started yet.
        VISITING_DIRECTORY: Evaluating a directory.
        VISITING_FILE: Evaluating a file or irregular entry.
        SKIPPING_SUBTREE: Last directory was pruned with its subtree.
        STOPPED: Aborted because cancellation fired.
        DONE: The whole tree under the root was visited.
    """

    IDLE = "idle"
    VISITING_DIRECTORY = "visiting_directory"
    VISITING_FILE = "visiting_file"
    SKIPPING_SUBTREE = "skipping_subtree"
    STOPPED = "stopped"
    DONE = "done"


class _Stopped(Exception):
    """Unwinds the recursion once cancellation is observed."""


class Walker:
    """Walks a tree and yields entries eligible for deletion.

    Traversal errors (unreadable directories, entries vanishing between
    listing and ``lstat``) are logged and collected in ``errors``; the walk
    carries on with the remaining siblings.

    Args:
        root: Scan root as given by the caller.
        options: Scan options.
        credentials: Identity used for the writability check.
        root_metadata: Snapshot of the root, the reference for device checks.
        clock: Clock used for expiry. Defaults to wall-clock UTC.
        should_stop: Polled before each path; returning True stops the walk.
        on_error: Called with every traversal error as it happens.
    """

    def __init__(
        self,
        root: str,
        options: ReaperOptions,
        credentials: Credentials,
        root_metadata: FileMetadata,
        *,
        clock: Clock | None = None,
        should_stop: Callable[[], bool] | None = None,
        on_error: Callable[[OSError], None] | None = None,
    ) -> None:
        self._root = root
        self._options = options
        self._credentials = credentials
        self._root_metadata = root_metadata
        self._clock = clock
        self._should_stop = should_stop or (lambda: False)
        self._on_error = on_error
        self._state = WalkState.IDLE
        self._errors: list[OSError] = []

    @property
    def state(self) -> WalkState:
        return self._state

    @property
    def errors(self) -> list[OSError]:
        """Traversal errors collected so far, in the order they occurred."""
        return list(self._errors)

    def walk(self) -> Iterator[Entry]:
        """Traverse the tree and yield surviving entries.

        Yields:
            Entry for every file or empty directory that passes all checks.
        """
        try:
            yield from self._visit(self._root, None, self._root_metadata)
        except _Stopped:
            self._state = WalkState.STOPPED
            logger.debug("Walk of %s stopped", self._root)
            return
        self._state = WalkState.DONE

    def _visit(
        self, path: str, rel: str | None, metadata: FileMetadata | None = None
    ) -> Iterator[Entry]:
        if self._should_stop():
            raise _Stopped

        if metadata is None:
            try:
                metadata = read_metadata(path)
            except OSError as e:
                self._report(e)
                return

        if metadata.is_dir:
            yield from self._visit_dir(path, rel, metadata)
        else:
            yield from self._visit_file(path, rel, metadata)

    def _visit_dir(self, path: str, rel: str | None, metadata: FileMetadata) -> Iterator[Entry]:
        self._state = WalkState.VISITING_DIRECTORY

        if self._is_protected(path, rel):
            logger.debug("Skipping protected directory: %s", path)
            self._state = WalkState.SKIPPING_SUBTREE
            return
        if not on_same_device(self._root_metadata, metadata):
            logger.debug("Skipping directory on another device: %s", path)
            self._state = WalkState.SKIPPING_SUBTREE
            return

        if self._may_write(metadata) and is_empty(path):
            # Empty: there is nothing below it to visit either way
            if has_expired(metadata, self._options.expiry, self._clock):
                yield self._accept(path, metadata)
            return

        yield from self._visit_children(path, rel)

    def _visit_children(self, path: str, rel: str | None) -> Iterator[Entry]:
        try:
            with os.scandir(path) as it:
                names = sorted(entry.name for entry in it)
        except OSError as e:
            self._report(e)
            return

        for name in names:
            child_rel = name if rel is None else os.path.join(rel, name)
            yield from self._visit(os.path.join(path, name), child_rel)

    def _visit_file(self, path: str, rel: str | None, metadata: FileMetadata) -> Iterator[Entry]:
        self._state = WalkState.VISITING_FILE

        if self._is_protected(path, rel):
            return
        if not on_same_device(self._root_metadata, metadata):
            return
        if not (metadata.is_regular or self._options.irregular):
            return
        if not self._may_write(metadata):
            return
        if has_expired(metadata, self._options.expiry, self._clock):
            yield self._accept(path, metadata)

    def _is_protected(self, path: str, rel: str | None) -> bool:
        globs = self._options.protect
        if not globs:
            return False
        if is_protected(path, globs):
            return True
        # The root has no relative path; only its real path is matched
        return rel is not None and is_protected(rel, globs)

    def _may_write(self, metadata: FileMetadata) -> bool:
        if self._options.force:
            return True
        creds = self._credentials
        return is_writable(metadata, creds.euid, creds.egid, creds.groups, metadata.permissions)

    def _accept(self, path: str, metadata: FileMetadata) -> Entry:
        logger.debug("Candidate: %s", path)
        return Entry(path=path, metadata=metadata)

    def _report(self, error: OSError) -> None:
        logger.warning("Walk error under %s: %s", self._root, error)
        self._errors.append(error)
        if self._on_error is not None:
            self._on_error(error)

"""Streaming scan session.

A ``Reaper`` runs a ``Walker`` on a background thread and hands each
surviving entry to the caller through a zero-capacity rendezvous: the walk
never runs ahead of consumption by more than the entry being offered.
Either side can observe cancellation, which makes early exit safe.

Typical use::

    options = ReaperOptions(expiry=timedelta(days=7))
    with Reaper("/var/tmp", options) as reaper:
        for entry in reaper:
            os.remove(entry.path)
    if reaper.error is not None:
        ...
"""

import logging
import threading
from collections.abc import Iterator
from types import TracebackType

from reaper.core.errors import ConstructionError
from reaper.core.identity import current_credentials
from reaper.core.metadata import read_metadata
from reaper.core.predicates import Clock
from reaper.core.walker import Walker, WalkState
from reaper.models.entry import Entry
from reaper.models.options import ReaperOptions

logger = logging.getLogger(__name__)


class _Handoff:
    """Single-producer, single-consumer rendezvous with cancellation."""

    def __init__(self, cancelled: threading.Event) -> None:
        self._cond = threading.Condition()
        self._cancelled = cancelled
        self._item: Entry | None = None
        self._closed = False

    def put(self, item: Entry) -> bool:
        """Offer an item and block until it is taken.

        Returns:
            True if the consumer took the item, False if cancelled first.
        """
        with self._cond:
            self._item = item
            self._cond.notify_all()
            self._cond.wait_for(lambda: self._item is None or self._cancelled.is_set())
            if self._item is not None:
                # Cancelled before the consumer took it
                self._item = None
                return False
            return True

    def take(self) -> Entry | None:
        """Block until an item is offered, the producer closes, or cancel.

        Returns:
            The item, or None when no further items will be delivered.
        """
        with self._cond:
            self._cond.wait_for(
                lambda: self._item is not None or self._closed or self._cancelled.is_set()
            )
            if self._cancelled.is_set() or self._item is None:
                return None
            item, self._item = self._item, None
            self._cond.notify_all()
            return item

    def close(self) -> None:
        with self._cond:
            self._closed = True
            self._cond.notify_all()

    def wake(self) -> None:
        """Wake both sides so they re-check the cancellation flag."""
        with self._cond:
            self._cond.notify_all()


class Reaper:
    """Scan session streaming deletion candidates under a root.

    Construction validates the root, snapshots the caller's credentials and
    starts the walk on a daemon thread. Entries are pulled with
    :meth:`advance` and read from :attr:`current`.

    Args:
        root: Directory (or single path) to scan. Must exist.
        options: Scan options.
        clock: Clock used for expiry checks. Defaults to wall-clock UTC.

    Raises:
        ConstructionError: If the root cannot be stat'ed or the supplementary
            groups cannot be enumerated.
    """

    def __init__(self, root: str, options: ReaperOptions, *, clock: Clock | None = None) -> None:
        credentials = current_credentials()
        try:
            root_metadata = read_metadata(root)
        except OSError as e:
            raise ConstructionError(f"Cannot stat scan root {root}: {e}") from e

        self._root = root
        self._options = options
        self._cancelled = threading.Event()
        self._handoff = _Handoff(self._cancelled)
        self._current: Entry | None = None
        self._errors: list[BaseException] = []
        self._walker = Walker(
            root,
            options,
            credentials,
            root_metadata,
            clock=clock,
            should_stop=self._cancelled.is_set,
            on_error=self._errors.append,
        )
        self._thread = threading.Thread(
            target=self._produce,
            name=f"reaper-walk:{root}",
            daemon=True,
        )
        self._thread.start()
        logger.debug("Started scan of %s (expiry=%s)", root, options.expiry)

    @property
    def root(self) -> str:
        return self._root

    @property
    def options(self) -> ReaperOptions:
        return self._options

    @property
    def state(self) -> WalkState:
        """Current traversal state of the underlying walker."""
        return self._walker.state

    @property
    def current(self) -> Entry | None:
        """Entry retrieved by the last successful :meth:`advance`."""
        return self._current

    @property
    def error(self) -> BaseException | None:
        """First traversal error, or None.

        Only meaningful once :meth:`advance` has returned False.
        """
        return self._errors[0] if self._errors else None

    @property
    def errors(self) -> list[BaseException]:
        """Every traversal error recorded during the walk."""
        return list(self._errors)

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def advance(self) -> bool:
        """Wait for the next entry.

        Returns:
            True if an entry is available in :attr:`current`, False once the
            walk is exhausted or the session was cancelled.
        """
        item = self._handoff.take()
        if item is None:
            return False
        self._current = item
        return True

    def cancel(self) -> None:
        """Ask the walk to stop. Idempotent, safe after the walk finished."""
        if self._cancelled.is_set():
            return
        self._cancelled.set()
        self._handoff.wake()
        logger.debug("Cancelled scan of %s", self._root)

    def wait(self, timeout: float | None = None) -> bool:
        """Wait for the producer thread to finish.

        Args:
            timeout: Seconds to wait, None to wait indefinitely.

        Returns:
            True if the producer thread has finished.
        """
        self._thread.join(timeout)
        return not self._thread.is_alive()

    def __iter__(self) -> Iterator[Entry]:
        try:
            while self.advance():
                if self._current is not None:
                    yield self._current
        finally:
            if self._thread.is_alive():
                self.cancel()

    def __enter__(self) -> "Reaper":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.cancel()

    def _produce(self) -> None:
        try:
            for entry in self._walker.walk():
                # A refused hand-off means cancellation; the walker stops at
                # its next checkpoint.
                self._handoff.put(entry)
        except Exception as e:
            logger.exception("Unexpected failure while walking %s", self._root)
            self._errors.append(e)
        finally:
            self._handoff.close()

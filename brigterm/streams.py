"""Closable message sources and a cancellable wait over several of them.

A :class:`Source` is a FIFO channel with a producer side (``put``/``close``)
and a consumer side (``get_nowait``). Closing enqueues the :data:`CLOSED`
marker after any buffered items, so a consumer always drains what was sent
before it observes the close.

:func:`wait_any` is the only blocking primitive the log tailer uses. The
cancellation token is one of the things it waits on, and sources the caller
has already seen close are skipped entirely.
"""

from __future__ import annotations

import queue
import threading
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Generic
from typing import TypeVar

from brigterm.constants import SOURCE_POLL_INTERVAL
from brigterm.models import LogEntry

T = TypeVar("T")


class _Closed:
    """Marker delivered once by a source after its last item."""

    def __repr__(self) -> str:
        return "CLOSED"


CLOSED = _Closed()


class Source(Generic[T]):
    """
    A thread-safe FIFO channel that can be closed once.

    Attributes:
        name: Label used in log messages.
    """

    def __init__(self, name: str = "source") -> None:
        self.name = name
        self._queue: queue.Queue[T | _Closed] = queue.Queue()
        self._lock = threading.Lock()
        self._closed = False

    @property
    def closed(self) -> bool:
        """True once the producer has closed the source."""
        return self._closed

    def put(self, item: T) -> bool:
        """
        Send an item.

        Returns:
            False if the source was already closed and the item was dropped.
        """
        with self._lock:
            if self._closed:
                return False
            self._queue.put(item)
            return True

    def close(self) -> None:
        """Close the source. Closing twice is a no-op."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
            self._queue.put(CLOSED)

    def get_nowait(self) -> T | _Closed:
        """Return the next item or :data:`CLOSED`; raise ``queue.Empty`` if none is ready."""
        return self._queue.get_nowait()


@dataclass
class LogStream:
    """The two independently closable halves of a log stream."""

    entries: Source[LogEntry]
    errors: Source[Exception]


def wait_any(
    sources: Sequence[Source],
    cancel: threading.Event,
    skip: Sequence[bool] | None = None,
    poll_interval: float = SOURCE_POLL_INTERVAL,
    start: int = 0,
) -> tuple[int, object] | None:
    """
    Wait until one of ``sources`` yields an item or ``cancel`` is set.

    Args:
        sources: The sources to wait on.
        cancel: Cancellation token; checked before every poll.
        skip: Per-source flags; a True entry means the source is not polled.
        poll_interval: Seconds to wait on ``cancel`` between polling rounds.
        start: Index of the source polled first in each round.

    Returns:
        ``(index, item)`` for the first ready source, where ``item`` may be
        :data:`CLOSED`; or None if ``cancel`` was set.

    Raises:
        ValueError: If every source is skipped, since nothing could ever arrive.
    """
    flags = list(skip) if skip is not None else [False] * len(sources)
    if len(flags) != len(sources):
        raise ValueError("skip must have one flag per source")
    if all(flags):
        raise ValueError("wait_any needs at least one source that is not skipped")

    count = len(sources)
    while not cancel.is_set():
        for offset in range(count):
            index = (start + offset) % count
            if flags[index]:
                continue
            try:
                item = sources[index].get_nowait()
            except queue.Empty:
                continue
            return index, item
        cancel.wait(poll_interval)
    return None

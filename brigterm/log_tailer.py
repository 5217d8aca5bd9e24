"""Merge a log stream's entry and error sources into one text feed.

Each call to :meth:`LogTailer.start` creates a new activation with its own
buffer, cancellation token and worker thread. The previous activation is
cancelled first, and because every append checks that activation's token
under its lock, a cancelled activation never writes again.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from enum import Enum
from typing import TYPE_CHECKING

from brigterm.exceptions import BrigtermError
from brigterm.models import LogEntry
from brigterm.streams import CLOSED
from brigterm.streams import LogStream
from brigterm.streams import wait_any

if TYPE_CHECKING:
    from brigterm.client import APIClient

logger = logging.getLogger(__name__)

ENTRIES = 0
ERRORS = 1


class LogTailState(Enum):
    """Lifecycle of a log tail activation."""

    IDLE = "idle"
    STREAMING = "streaming"
    HALF_CLOSED = "half-closed"
    CLOSED = "closed"


class _Activation:
    """State owned by one run of the tailer."""

    def __init__(self, event_id: str, job_name: str | None) -> None:
        self.event_id = event_id
        self.job_name = job_name
        self.cancel = threading.Event()
        self.lock = threading.Lock()
        self.state = LogTailState.STREAMING
        self.data_closed = False
        self.err_closed = False
        self.chunks: list[str] = []
        self.errors: list[str] = []
        self.thread: threading.Thread | None = None

    def append(self, message: str) -> bool:
        with self.lock:
            if self.cancel.is_set():
                return False
            self.chunks.append(message + "\n")
            return True

    def record_error(self, error: Exception) -> bool:
        with self.lock:
            if self.cancel.is_set():
                return False
            self.errors.append(str(error))
            return True

    def mark_closed(self, index: int) -> None:
        with self.lock:
            if index == ENTRIES:
                self.data_closed = True
            else:
                self.err_closed = True
            if self.data_closed and self.err_closed:
                self.state = LogTailState.CLOSED
            elif self.state is LogTailState.STREAMING:
                self.state = LogTailState.HALF_CLOSED

    def finish(self) -> None:
        with self.lock:
            self.state = LogTailState.CLOSED


class LogTailer:
    """
    Follows the logs of an event's worker or of one of its jobs.

    Args:
        client: Source of log streams.
        on_change: Called (from the worker thread) after the text or state changes.
        on_error: Called (from the worker thread) with each stream error.
    """

    def __init__(
        self,
        client: APIClient,
        on_change: Callable[[], None] | None = None,
        on_error: Callable[[Exception], None] | None = None,
    ) -> None:
        self.client = client
        self.on_change = on_change
        self.on_error = on_error
        self._lock = threading.Lock()
        self._activation: _Activation | None = None

    def start(self, event_id: str, job_name: str | None = None) -> None:
        """Cancel any running activation, clear the buffer and start following."""
        activation = _Activation(event_id, job_name)
        with self._lock:
            previous = self._activation
            if previous is not None:
                previous.cancel.set()
            self._activation = activation
            thread = threading.Thread(
                target=self._run,
                args=(activation,),
                name=f"log-tail-{event_id}",
                daemon=True,
            )
            activation.thread = thread
            thread.start()
        self._changed()

    def stop(self) -> None:
        """Cancel the running activation; its buffered text is kept."""
        with self._lock:
            activation = self._activation
        if activation is None:
            return
        activation.cancel.set()
        activation.finish()
        self._changed()

    def join(self, timeout: float | None = None) -> None:
        """Wait for the current activation's worker thread to exit."""
        with self._lock:
            activation = self._activation
        if activation is not None and activation.thread is not None:
            activation.thread.join(timeout)

    def _current(self) -> _Activation | None:
        with self._lock:
            return self._activation

    @property
    def scope(self) -> tuple[str, str | None] | None:
        """``(event_id, job_name)`` of the current activation."""
        activation = self._current()
        return None if activation is None else (activation.event_id, activation.job_name)

    @property
    def state(self) -> LogTailState:
        activation = self._current()
        if activation is None:
            return LogTailState.IDLE
        with activation.lock:
            return activation.state

    @property
    def data_closed(self) -> bool:
        activation = self._current()
        if activation is None:
            return False
        with activation.lock:
            return activation.data_closed

    @property
    def err_closed(self) -> bool:
        activation = self._current()
        if activation is None:
            return False
        with activation.lock:
            return activation.err_closed

    @property
    def is_active(self) -> bool:
        return self.state in (LogTailState.STREAMING, LogTailState.HALF_CLOSED)

    @property
    def text(self) -> str:
        """Everything appended so far by the current activation."""
        activation = self._current()
        if activation is None:
            return ""
        with activation.lock:
            return "".join(activation.chunks)

    @property
    def lines(self) -> list[str]:
        """The buffered text split into lines, without trailing newlines."""
        return self.text.splitlines()

    @property
    def errors(self) -> list[str]:
        """Stream errors reported to the current activation."""
        activation = self._current()
        if activation is None:
            return []
        with activation.lock:
            return list(activation.errors)

    def _changed(self) -> None:
        if self.on_change is not None:
            self.on_change()

    def _report(self, activation: _Activation, error: Exception) -> None:
        if not activation.record_error(error):
            return
        logger.warning("Log stream for %s failed: %s", activation.event_id, error)
        if self.on_error is not None:
            self.on_error(error)

    def _run(self, activation: _Activation) -> None:
        try:
            stream = self.client.stream_logs(
                activation.event_id, activation.job_name, activation.cancel
            )
        except BrigtermError as e:
            self._report(activation, e)
            activation.finish()
            self._changed()
            return
        logger.debug("Following logs of %s (job=%s)", activation.event_id, activation.job_name)
        self._drain(activation, stream)
        self._changed()

    def _drain(self, activation: _Activation, stream: LogStream) -> None:
        sources = [stream.entries, stream.errors]
        start = ENTRIES
        while True:
            with activation.lock:
                skip = [activation.data_closed, activation.err_closed]
            if all(skip):
                return
            result = wait_any(sources, activation.cancel, skip=skip, start=start)
            if result is None:
                activation.finish()
                return
            index, item = result
            # Alternate which source is polled first so neither starves the other
            start = 1 - index
            if item is CLOSED:
                activation.mark_closed(index)
                self._changed()
            elif index == ENTRIES:
                message = item.message if isinstance(item, LogEntry) else str(item)
                if activation.append(message):
                    self._changed()
            else:
                error = item if isinstance(item, Exception) else BrigtermError(str(item))
                self._report(activation, error)
                self._changed()

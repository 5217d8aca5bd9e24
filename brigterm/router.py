"""Navigation between pages and the single-flight auto-refresh loop."""

from __future__ import annotations

import logging
import threading
import weakref
from collections.abc import Callable

from brigterm.constants import DEFAULT_REFRESH_INTERVAL
from brigterm.pages.base import PageId
from brigterm.pages.base import PageSet

logger = logging.getLogger(__name__)


class RefreshSession:
    """
    A periodic task re-running one page refresh until cancelled.

    Cancelling only signals the worker thread and never waits for it. A
    cancelled tick that has not started is dropped without touching the
    page. A tick already past its guard finishes, and since it holds the
    page's refresh lock, a navigation to the same page waits for it. That
    wait is bounded by the client's request timeout.

    Attributes:
        page_id: The page this session refreshes.
        interval: Seconds between ticks.
        ticks: Number of ticks run so far, failed ones included.
    """

    def __init__(self, page_id: PageId, refresh: Callable[[], None], interval: float) -> None:
        self.page_id = page_id
        self.interval = interval
        self.ticks = 0
        self._refresh = refresh
        self._cancel = threading.Event()
        self._thread = threading.Thread(
            target=self._run, name=f"refresh-{page_id.value}", daemon=True
        )

    def start(self) -> None:
        self._thread.start()

    def cancel(self) -> None:
        self._cancel.set()

    @property
    def active(self) -> bool:
        """True until the session is cancelled."""
        return not self._cancel.is_set()

    @property
    def alive(self) -> bool:
        """True while the worker thread is still running."""
        return self._thread.is_alive()

    def join(self, timeout: float | None = None) -> None:
        self._thread.join(timeout)

    def _run(self) -> None:
        while not self._cancel.wait(self.interval):
            self.ticks += 1
            try:
                self._refresh()
            except Exception:
                logger.exception("Refresh tick for %s page failed", self.page_id.value)


class Router:
    """
    Switches the visible page and owns the one live refresh session.

    Every :meth:`navigate` call cancels the previous session, shows the
    target page, refreshes it once on the caller's thread and then starts a
    new session that keeps refreshing it. Calls are serialized, so
    concurrent navigations are applied one after another and the last wins.

    Args:
        pages: Registry of the dashboard's pages.
        refresh_interval: Seconds between auto-refresh ticks.
        on_exit: Called by :meth:`exit`.
    """

    def __init__(
        self,
        pages: PageSet,
        refresh_interval: float = DEFAULT_REFRESH_INTERVAL,
        on_exit: Callable[[], None] | None = None,
    ) -> None:
        self.pages = pages
        self.refresh_interval = refresh_interval
        self.on_exit = on_exit
        self._lock = threading.RLock()
        self._session: RefreshSession | None = None
        self._current: tuple[PageId, tuple[str | None, ...]] | None = None
        self._sessions: weakref.WeakSet[RefreshSession] = weakref.WeakSet()
        self.exited = False

    @property
    def session(self) -> RefreshSession | None:
        with self._lock:
            return self._session

    @property
    def current(self) -> tuple[PageId, tuple[str | None, ...]] | None:
        """``(page_id, params)`` of the last navigation."""
        with self._lock:
            return self._current

    def live_session_count(self) -> int:
        """Number of sessions created by this router that are not cancelled."""
        with self._lock:
            return sum(1 for session in self._sessions if session.active)

    def navigate(self, page_id: PageId, *params: str | None) -> None:
        """
        Show ``page_id`` with ``params`` and keep it refreshed.

        Raises:
            ConfigurationError: If no page is registered for ``page_id``.
        """
        with self._lock:
            page = self.pages.get(page_id)
            if self._session is not None:
                self._session.cancel()
                self._session = None

            previous = self.pages.visible_page
            if previous is not None and previous is not page:
                previous.on_hide()
            self.pages.show(page_id)
            self._current = (page_id, params)
            logger.debug("Navigating to %s %s", page_id.value, params)

            def refresh() -> None:
                # A tick that loses the race with a later navigation is dropped
                page.refresh(*params, guard=lambda: session.active)

            session = RefreshSession(page_id, refresh, self.refresh_interval)
            self._session = session
            try:
                refresh()
            except Exception:
                logger.exception("Initial refresh of %s page failed", page_id.value)

            self._sessions.add(session)
            session.start()

    def exit(self) -> None:
        """Stop refreshing and ask the dashboard to shut down."""
        with self._lock:
            if self._session is not None:
                self._session.cancel()
                self._session = None
            page = self.pages.visible_page
            self.exited = True
        if page is not None:
            page.on_hide()
        logger.info("Exit requested")
        if self.on_exit is not None:
            self.on_exit()

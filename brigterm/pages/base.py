"""Page abstraction and the registry of pages."""

from __future__ import annotations

import logging
import threading
from abc import ABC
from abc import abstractmethod
from collections.abc import Callable
from enum import Enum
from typing import TYPE_CHECKING
from typing import Any
from typing import Protocol

from rich.console import RenderableType

from brigterm import keys
from brigterm.exceptions import BrigtermError
from brigterm.exceptions import ConfigurationError
from brigterm.widgets import Redrawer
from brigterm.widgets import TablePane

if TYPE_CHECKING:
    from brigterm.client import APIClient

logger = logging.getLogger(__name__)

#: Usage hints shared by the detail pages
NAV_USAGE = (
    "[yellow](F5/R)[/yellow] Reload    "
    "[yellow](<-/Del)[/yellow] Back    "
    "[yellow](ESC)[/yellow] Home"
)
QUIT_USAGE = "[yellow](Q)[/yellow] Quit"


class PageId(Enum):
    """Identifiers of the dashboard's pages."""

    PROJECTS = "projects"
    PROJECT = "project"
    EVENT = "event"
    JOB = "job"
    LOG = "log"


class Navigator(Protocol):
    """What pages may ask of the router."""

    def navigate(self, page_id: PageId, *params: str | None) -> None: ...

    def exit(self) -> None: ...


class Page(ABC):
    """
    One screen of the dashboard.

    A page is created once at startup and mutated in place by every call to
    :meth:`refresh`. Refreshes run both on the caller's thread (the first,
    synchronous one) and on the router's refresh thread, so page state is
    serialized by ``_refresh_lock``. Widgets carry their own locks, so
    rendering never waits on a slow refresh.

    Attributes:
        page_id: The page's identifier.
        visible: Whether the page is the one currently shown.
        error: Error indicator from the last refresh, or None if it succeeded.
    """

    page_id: PageId
    title: str = ""

    def __init__(self, client: APIClient, router: Navigator, redrawer: Redrawer) -> None:
        self.client = client
        self.router = router
        self.redrawer = redrawer
        self.visible = False
        self.error: str | None = None
        self._params: tuple[str | None, ...] = ()
        self._state_lock = threading.Lock()
        self._refresh_lock = threading.Lock()

    @property
    def params(self) -> tuple[str | None, ...]:
        """Parameters of the most recent refresh."""
        with self._state_lock:
            return self._params

    def refresh(self, *params: str | None, guard: Callable[[], bool] | None = None) -> None:
        """
        Fetch fresh data and replace the page's content.

        API failures are caught here and shown as an error indicator, so a
        failed refresh never propagates to the caller.

        Args:
            params: Page parameters, e.g. a project ID.
            guard: Checked before and again once the refresh lock is held;
                the refresh is skipped if it returns False.
        """
        if guard is not None and not guard():
            return
        with self._refresh_lock:
            if guard is not None and not guard():
                return
            with self._state_lock:
                self._params = params
            try:
                self._refresh(*params)
            except BrigtermError as e:
                logger.warning("Refreshing %s page failed: %s", self.page_id.value, e)
                self.error = str(e)
                self._show_error(str(e))
            else:
                self.error = None
        self.redrawer.request_redraw()

    @abstractmethod
    def _refresh(self, *params: Any) -> None:
        """Fetch and fill; may raise BrigtermError."""

    def _show_error(self, message: str) -> None:
        """Replace the page's data with an error indicator."""

    def on_hide(self) -> None:
        """Called when the router switches away from this page."""

    def handle_key(self, key: str) -> bool:
        """
        Handle a key press.

        Args:
            key: Key name from :mod:`brigterm.keys` or a printable character.

        Returns:
            True if the key was handled.
        """
        if key in keys.QUIT_KEYS:
            self.router.exit()
            return True
        if key in keys.RELOAD_KEYS:
            self.router.navigate(self.page_id, *self.params)
            return True
        return self._handle_key(key)

    def _handle_key(self, key: str) -> bool:
        return False

    def _move_cursor(self, table: TablePane, key: str) -> bool:
        """Move ``table``'s cursor for up/down keys. Returns True if handled."""
        delta = {keys.UP: -1, keys.DOWN: 1, keys.PAGE_UP: -10, keys.PAGE_DOWN: 10}.get(key)
        if delta is None:
            return False
        table.move(delta)
        self.redrawer.request_redraw()
        return True

    @abstractmethod
    def render(self, height: int) -> RenderableType:
        """Build the page's renderable for a body ``height`` lines tall."""

    def usage(self) -> str:
        """Markup shown in the footer while the page is visible."""
        return f"{NAV_USAGE}    {QUIT_USAGE}"


class PageSet:
    """Registry mapping page identifiers to pages, exactly one of which is visible."""

    def __init__(self) -> None:
        self._pages: dict[PageId, Page] = {}
        self._visible: PageId | None = None
        self._lock = threading.Lock()

    def register(self, page_id: PageId, page: Page) -> None:
        """
        Add a page.

        Raises:
            ConfigurationError: If ``page_id`` is already registered.
        """
        with self._lock:
            if page_id in self._pages:
                raise ConfigurationError(
                    page_id.value, f"Page '{page_id.value}' is already registered"
                )
            page.visible = False
            self._pages[page_id] = page

    def get(self, page_id: PageId) -> Page:
        """
        Look up a page.

        Raises:
            ConfigurationError: If ``page_id`` was never registered.
        """
        with self._lock:
            try:
                return self._pages[page_id]
            except KeyError:
                raise ConfigurationError(
                    page_id.value, f"No page registered for '{page_id.value}'"
                ) from None

    def show(self, page_id: PageId) -> None:
        """Make ``page_id`` the only visible page."""
        page = self.get(page_id)
        with self._lock:
            for other in self._pages.values():
                other.visible = False
            page.visible = True
            self._visible = page_id

    @property
    def visible(self) -> PageId | None:
        with self._lock:
            return self._visible

    @property
    def visible_page(self) -> Page | None:
        with self._lock:
            return self._pages.get(self._visible) if self._visible is not None else None

    def visible_ids(self) -> list[PageId]:
        """Identifiers of every page currently flagged visible."""
        with self._lock:
            return [page_id for page_id, page in self._pages.items() if page.visible]

    def __contains__(self, page_id: object) -> bool:
        return page_id in self._pages

    def __len__(self) -> int:
        return len(self._pages)

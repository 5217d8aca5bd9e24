"""Page following the live logs of a worker or a job."""

from __future__ import annotations

import threading
from typing import TYPE_CHECKING

from rich.console import Group
from rich.console import RenderableType
from rich.panel import Panel
from rich.text import Text

from brigterm import keys
from brigterm.log_tailer import LogTailer
from brigterm.log_tailer import LogTailState
from brigterm.pages.base import NAV_USAGE
from brigterm.pages.base import QUIT_USAGE
from brigterm.pages.base import Navigator
from brigterm.pages.base import Page
from brigterm.pages.base import PageId
from brigterm.widgets import Redrawer

if TYPE_CHECKING:
    from brigterm.client import APIClient

STATE_STYLES = {
    LogTailState.IDLE: "grey50",
    LogTailState.STREAMING: "green",
    LogTailState.HALF_CLOSED: "yellow",
    LogTailState.CLOSED: "grey50",
}

# Panel border plus the status line
CHROME_LINES = 3


class LogPage(Page):
    """
    Live log view backed by a :class:`LogTailer`.

    Refreshing makes no API calls. The tailer is restarted only when the
    ``(event_id, job_name)`` scope changes, after the page was hidden, or on
    an explicit reload, so refresh ticks leave a running stream alone.

    Attributes:
        tailer: The log tailer owned by this page.
    """

    page_id = PageId.LOG
    title = "Logs"

    def __init__(self, client: APIClient, router: Navigator, redrawer: Redrawer) -> None:
        super().__init__(client, router, redrawer)
        self.tailer = LogTailer(client, on_change=redrawer.request_redraw)
        self._restart = threading.Event()
        self._scroll = 0

    def _refresh(self, event_id: str, job_name: str | None = None) -> None:
        scope = (event_id, job_name or None)
        if self.tailer.scope == scope and not self._restart.is_set():
            return
        self._restart.clear()
        with self._state_lock:
            self._scroll = 0
        self.tailer.start(event_id, job_name or None)

    def on_hide(self) -> None:
        self.tailer.stop()
        self._restart.set()

    def handle_key(self, key: str) -> bool:
        if key in keys.RELOAD_KEYS:
            self._restart.set()
        return super().handle_key(key)

    def _handle_key(self, key: str) -> bool:
        if not self.params:
            return False
        event_id = self.params[0]
        job_name = self.params[1] if len(self.params) > 1 else None
        if key in keys.BACK_KEYS:
            if job_name:
                self.router.navigate(PageId.JOB, event_id, job_name)
            else:
                self.router.navigate(PageId.EVENT, event_id)
            return True
        if key == keys.ESCAPE:
            self.router.navigate(PageId.PROJECTS)
            return True
        return self._scroll_key(key)

    def _scroll_key(self, key: str) -> bool:
        delta = {keys.UP: 1, keys.DOWN: -1, keys.PAGE_UP: 10, keys.PAGE_DOWN: -10}.get(key)
        total = len(self.tailer.lines)
        with self._state_lock:
            if delta is not None:
                self._scroll = max(0, min(total, self._scroll + delta))
            elif key == "g":
                self._scroll = total
            elif key == "G":
                self._scroll = 0
            else:
                return False
        self.redrawer.request_redraw()
        return True

    def _status(self, scroll: int) -> Text:
        state = self.tailer.state
        status = Text(f" {state.value}", style=STATE_STYLES[state])
        errors = self.tailer.errors
        if errors:
            status.append(f"  last error: {errors[-1]}", style="red")
        if scroll:
            status.append(f"  ({scroll} lines above the tail)", style="dim")
        return status

    def render(self, height: int) -> RenderableType:
        lines = self.tailer.lines
        visible = max(1, height - CHROME_LINES)
        with self._state_lock:
            scroll = min(self._scroll, max(0, len(lines) - visible))
        end = len(lines) - scroll
        window = lines[max(0, end - visible) : end]

        params = self.params
        title = (params[0] or "") if params else ""
        if len(params) > 1 and params[1]:
            title = f"{title}: {params[1]}"
        else:
            title = f"{title}: worker"
        body = Text("\n".join(window)) if window else Text("Waiting for logs...", style="dim")
        panel = Panel(
            body,
            title=f" Logs {title} ",
            border_style=STATE_STYLES[self.tailer.state],
        )
        return Group(panel, self._status(scroll))

    def usage(self) -> str:
        return (
            "[yellow](Up/Down/PgUp/PgDn)[/yellow] Scroll    "
            "[yellow](G)[/yellow] Follow    "
            f"{NAV_USAGE}    {QUIT_USAGE}"
        )

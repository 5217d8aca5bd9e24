"""Rich TUI for browsing Brigade projects, events, jobs and logs."""

from __future__ import annotations

import logging
import sys
import time
from datetime import datetime
from typing import IO

from rich.console import Console
from rich.layout import Layout
from rich.live import Live
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from brigterm.client import APIClient
from brigterm.constants import DEFAULT_REFRESH_INTERVAL
from brigterm.keys import decode_key
from brigterm.pages import EventPage
from brigterm.pages import JobPage
from brigterm.pages import LogPage
from brigterm.pages import PageId
from brigterm.pages import PageSet
from brigterm.pages import ProjectPage
from brigterm.pages import ProjectsPage
from brigterm.router import Router
from brigterm.widgets import Redrawer

logger = logging.getLogger(__name__)

BRAND_COLOR = "#26a8e0"

# Header and footer panels are three lines each
CHROME_HEIGHT = 6

#: Seconds between clock-only repaints when nothing else changed
IDLE_REDRAW_INTERVAL = 1.0

#: Longest escape sequence read after ESC (e.g. "[15~" for F5)
MAX_ESCAPE_SEQUENCE = 4


class Dashboard:
    """
    Full-screen terminal dashboard.

    Owns the pages, the router and the rich ``Live`` display. Background
    refreshes only mutate page state and raise the redraw flag; every repaint
    happens on the thread running :meth:`run`.

    Keyboard Controls:
        Enter: Open the selected row
        Up/Down/PgUp/PgDn: Move the selection
        r, F5: Reload the current page
        Left, Backspace, Delete: Back one level
        Esc: Back to the project list
        n / p: Next/previous page of events
        l: Open logs (event and job pages)
        ?: Toggle help
        q: Quit

    Attributes:
        server: API address shown in the header.
        pages: The registered pages.
        router: Navigation and auto-refresh.
    """

    def __init__(
        self,
        client: APIClient,
        server: str = "",
        refresh_interval: float = DEFAULT_REFRESH_INTERVAL,
        console: Console | None = None,
    ) -> None:
        self.client = client
        self.server = server
        self.console = console or Console()
        self.redrawer = Redrawer()
        self.pages = PageSet()
        self.router = Router(self.pages, refresh_interval=refresh_interval, on_exit=self._stop)
        self._running = False
        self._show_help = False
        self._register_pages()

    def _register_pages(self) -> None:
        for page in (
            ProjectsPage(self.client, self.router, self.redrawer),
            ProjectPage(self.client, self.router, self.redrawer),
            EventPage(self.client, self.router, self.redrawer),
            JobPage(self.client, self.router, self.redrawer),
            LogPage(self.client, self.router, self.redrawer),
        ):
            self.pages.register(page.page_id, page)

    def _stop(self) -> None:
        self._running = False

    def handle_key(self, key: str) -> None:
        """Dispatch a decoded key to the help overlay or the visible page."""
        if self._show_help:
            self._show_help = False
            self.redrawer.request_redraw()
            return
        if key == "?":
            self._show_help = True
            self.redrawer.request_redraw()
            return
        page = self.pages.visible_page
        if page is not None and not page.handle_key(key):
            logger.debug("Unhandled key %r on %s page", key, page.page_id.value)
        self.redrawer.request_redraw()

    def _make_header(self) -> Panel:
        header = Text()
        header.append("BRIGADE", style=f"bold {BRAND_COLOR}")
        header.append(" │ ", style="dim")
        header.append("Dashboard", style="bold white")
        if self.server:
            header.append("  │  ", style="dim")
            header.append(self.server, style="dim")
        page = self.pages.visible_page
        if page is not None:
            header.append("  │  ")
            header.append(page.title, style="bold")
            if page.error:
                header.append("  │  ")
                header.append("ERROR", style="bold red")
        return Panel(header, style="white on grey23", border_style=BRAND_COLOR, height=3)

    def _make_footer(self) -> Panel:
        footer = Text()
        footer.append(f"Updated: {datetime.now().strftime('%H:%M:%S')}", style="dim")
        footer.append("  │  ", style="dim")
        footer.append(f"Refresh: {self.router.refresh_interval}s", style="dim")
        page = self.pages.visible_page
        if page is not None:
            footer.append("  │  ", style="dim")
            footer.append_text(Text.from_markup(page.usage()))
        footer.append("  │  ")
        footer.append("?", style="bold")
        footer.append("=help", style="dim")
        return Panel(footer, border_style=BRAND_COLOR, padding=(0, 1))

    def _make_help_panel(self) -> Panel:
        """Create the help overlay panel."""
        help_text = Table(show_header=False, box=None, padding=(0, 2))
        help_text.add_column("Key", style="bold cyan")
        help_text.add_column("Action")

        help_text.add_row("", "[bold]General[/bold]")
        help_text.add_row("q", "Quit")
        help_text.add_row("?", "Toggle this help")
        help_text.add_row("r / F5", "Reload the current page")
        help_text.add_row("", "")
        help_text.add_row("", "[bold]Navigation[/bold]")
        help_text.add_row("Up / Down", "Move the selection")
        help_text.add_row("PgUp / PgDn", "Move the selection by 10 rows")
        help_text.add_row("Enter", "Open the selected row")
        help_text.add_row("Left / Backspace / Del", "Back one level")
        help_text.add_row("Esc", "Back to the project list")
        help_text.add_row("", "")
        help_text.add_row("", "[bold]Project Page[/bold]")
        help_text.add_row("n / p", "Next/previous page of events")
        help_text.add_row("", "")
        help_text.add_row("", "[bold]Event and Job Pages[/bold]")
        help_text.add_row("l", "Follow worker or job logs")
        help_text.add_row("", "")
        help_text.add_row("", "[bold]Log Page[/bold]")
        help_text.add_row("Up / Down / PgUp / PgDn", "Scroll")
        help_text.add_row("g / G", "Jump to top / follow the tail")
        help_text.add_row("r", "Restart the stream")

        return Panel(
            help_text,
            title="[bold]Keyboard Shortcuts[/bold]",
            subtitle="Press any key to close",
            border_style="cyan",
        )

    def _make_layout(self) -> Layout:
        """Create the complete TUI layout."""
        layout = Layout()
        layout.split_column(
            Layout(name="header", size=3),
            Layout(name="body"),
            Layout(name="footer", size=3),
        )
        layout["header"].update(self._make_header())
        layout["footer"].update(self._make_footer())
        if self._show_help:
            layout["body"].update(self._make_help_panel())
            return layout
        page = self.pages.visible_page
        if page is not None:
            body_height = max(1, self.console.size.height - CHROME_HEIGHT)
            layout["body"].update(page.render(body_height))
        return layout

    def run(self) -> None:
        """
        Run the TUI main loop until the user quits.

        Opens the project list, then repaints whenever a page asks for it and
        at least once a second so the clock keeps moving.
        """
        if not self.console.is_terminal:
            self.console.print(
                "[yellow]Warning:[/yellow] Not running in an interactive terminal. "
                "brigterm needs a TTY for its dashboard."
            )
            return

        try:
            import select
            import termios
            import tty
        except ImportError:
            self.console.print("[red]Keyboard input is not supported on this platform.[/red]")
            return

        fd = sys.stdin.fileno()
        old_settings = termios.tcgetattr(fd)
        self._running = True
        try:
            tty.setcbreak(fd)
            self.router.navigate(PageId.PROJECTS)

            with Live(
                self._make_layout(),
                console=self.console,
                auto_refresh=False,
                screen=True,
            ) as live:
                last_update = time.monotonic()
                while self._running:
                    if sys.stdin in select.select([sys.stdin], [], [], 0.1)[0]:
                        self.handle_key(decode_key(_read_key(sys.stdin, select.select)))

                    now = time.monotonic()
                    if self.redrawer.consume() or now - last_update >= IDLE_REDRAW_INTERVAL:
                        live.update(self._make_layout(), refresh=True)
                        last_update = now
        except KeyboardInterrupt:
            logger.info("Interrupted")
        finally:
            session = self.router.session
            if session is not None:
                session.cancel()
            termios.tcsetattr(fd, termios.TCSADRAIN, old_settings)


def _read_key(stream: IO[str], select_fn) -> str:
    """Read one key press, including the tail of an escape sequence if one follows."""
    key = stream.read(1)
    if key != "\x1b":
        return key
    seq = ""
    while len(seq) < MAX_ESCAPE_SEQUENCE and stream in select_fn([stream], [], [], 0.05)[0]:
        char = stream.read(1)
        if not char:
            break
        seq += char
        # Sequences end with a letter or a tilde
        if len(seq) > 1 and (seq[-1].isalpha() or seq[-1] == "~"):
            break
    return key + seq

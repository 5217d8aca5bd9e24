"""Page showing one project and a paged list of its events."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.console import Group
from rich.console import RenderableType

from brigterm import keys
from brigterm.constants import EVENTS_PAGE_SIZE
from brigterm.models import Event
from brigterm.models import Project
from brigterm.pages.base import NAV_USAGE
from brigterm.pages.base import QUIT_USAGE
from brigterm.pages.base import Navigator
from brigterm.pages.base import Page
from brigterm.pages.base import PageId
from brigterm.pagination import PaginationCursorStack
from brigterm.phases import format_span
from brigterm.phases import format_timestamp
from brigterm.phases import phase_icon
from brigterm.phases import phase_style
from brigterm.phases import short_human_duration
from brigterm.state.clock import seconds_since
from brigterm.widgets import Cell
from brigterm.widgets import Redrawer
from brigterm.widgets import TablePane
from brigterm.widgets import TextPane

if TYPE_CHECKING:
    from brigterm.client import APIClient

ID_COLUMN = 1


class ProjectPage(Page):
    """
    Project details plus one page of the project's events.

    Paging state lives in :attr:`cursors`. It survives refresh ticks and
    repeated visits to the same project, and resets when a different project
    is shown.
    """

    page_id = PageId.PROJECT
    title = "Project"

    def __init__(
        self,
        client: APIClient,
        router: Navigator,
        redrawer: Redrawer,
        page_size: int = EVENTS_PAGE_SIZE,
    ) -> None:
        super().__init__(client, router, redrawer)
        self.page_size = page_size
        self.cursors = PaginationCursorStack()
        self.info = TextPane(border_style="white")
        self.table = TablePane(
            ["", "ID", "Source", "Type", "Age", "Started", "Ended", "Duration"],
            title="Events",
        )
        self._next_token = ""
        self._usage = self._build_usage()

    @property
    def project_id(self) -> str | None:
        return self.cursors.parent_id

    @property
    def next_token(self) -> str:
        """Continuation token returned with the page currently shown."""
        with self._state_lock:
            return self._next_token

    def _refresh(self, project_id: str) -> None:
        if self.cursors.track(project_id):
            self.table.reset_cursor()
        project = self.client.get_project(project_id)
        events = self.client.list_events(project_id, self.cursors.current, self.page_size)
        with self._state_lock:
            self._next_token = events.continue_token
        self._fill_info(project)
        self._fill_table(events.items)
        self._usage = self._build_usage()

    def _fill_info(self, project: Project) -> None:
        self.info.title = f" {project.id} "
        lines = [f"[grey50]Description:[/grey50] {project.description}"]
        if project.git_clone_url:
            lines.append("[grey50]Git:[/grey50]")
            lines.append(f"  [grey50]Clone URL:[/grey50] {project.git_clone_url}")
        lines.append(f"[grey50]Created:[/grey50] {format_timestamp(project.created)}")
        self.info.set_text("\n".join(lines))

    def _fill_table(self, events: list[Event]) -> None:
        rows: list[list[Cell]] = []
        for event in events:
            status = event.worker.status
            style = phase_style(status.phase)
            age = short_human_duration(seconds_since(event.created)) if event.created else ""
            started = short_human_duration(seconds_since(status.started)) if status.started else ""
            ended = short_human_duration(seconds_since(status.ended)) if status.ended else ""
            rows.append(
                [
                    Cell(phase_icon(status.phase), style),
                    Cell(event.id, style),
                    Cell(event.source, style),
                    Cell(event.type, style),
                    Cell(age, style),
                    Cell(started, style),
                    Cell(ended, style),
                    Cell(format_span(status.started, status.ended), style),
                ]
            )
        self.table.set_cells(rows, placeholder="[dim]No events[/dim]")

    def _build_usage(self) -> str:
        usage = NAV_USAGE
        if self.cursors.has_previous:
            usage += "    [yellow](P)[/yellow] Previous Page"
        if self.next_token:
            usage += "    [yellow](N)[/yellow] Next Page"
        return f"{usage}    {QUIT_USAGE}"

    def _show_error(self, message: str) -> None:
        self.info.set_text(f"[red]Error loading project: {message}[/red]")
        self.table.set_cells([], placeholder="[red]Events unavailable[/red]")
        with self._state_lock:
            self._next_token = ""
        self._usage = self._build_usage()

    def next_page(self) -> bool:
        """Advance to the next page of events, if the server reported one."""
        if not self.cursors.push(self.next_token):
            return False
        self.table.reset_cursor()
        return True

    def previous_page(self) -> bool:
        """Go back one page of events; never pops the first page."""
        if not self.cursors.pop():
            return False
        self.table.reset_cursor()
        return True

    def _handle_key(self, key: str) -> bool:
        if self._move_cursor(self.table, key):
            return True
        project_id = self.project_id
        if key == keys.ENTER:
            event_id = self.table.selected_text(ID_COLUMN)
            if event_id:
                self.router.navigate(PageId.EVENT, event_id)
            return True
        if key in keys.BACK_KEYS or key == keys.ESCAPE:
            self.router.navigate(PageId.PROJECTS)
            return True
        if key in ("p", "P"):
            if project_id is not None and self.previous_page():
                self.router.navigate(PageId.PROJECT, project_id)
            return True
        if key in ("n", "N"):
            if project_id is not None and self.next_page():
                self.router.navigate(PageId.PROJECT, project_id)
            return True
        return False

    def render(self, height: int) -> RenderableType:
        return Group(self.info.render(), self.table.render())

    def usage(self) -> str:
        return self._usage

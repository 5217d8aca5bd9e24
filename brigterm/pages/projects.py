"""Page listing every project with the status of its most recent event."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from rich.console import RenderableType

from brigterm import keys
from brigterm.exceptions import BrigtermError
from brigterm.models import Event
from brigterm.models import ProjectList
from brigterm.pages.base import QUIT_USAGE
from brigterm.pages.base import Navigator
from brigterm.pages.base import Page
from brigterm.pages.base import PageId
from brigterm.phases import UNKNOWN_ICON
from brigterm.phases import UNKNOWN_STYLE
from brigterm.phases import phase_icon
from brigterm.phases import phase_style
from brigterm.phases import short_human_duration
from brigterm.state.clock import seconds_since
from brigterm.widgets import Cell
from brigterm.widgets import Redrawer
from brigterm.widgets import TablePane

if TYPE_CHECKING:
    from brigterm.client import APIClient

logger = logging.getLogger(__name__)

ID_COLUMN = 1


class ProjectsPage(Page):
    """Lists all projects; selecting one opens its project page."""

    page_id = PageId.PROJECTS
    title = "Projects"

    def __init__(self, client: APIClient, router: Navigator, redrawer: Redrawer) -> None:
        super().__init__(client, router, redrawer)
        self.table = TablePane(["", "ID", "Description", "Last Event"], title="Projects")

    def _refresh(self) -> None:
        projects = self.client.list_projects()
        latest: dict[str, Event] = {}
        for project in projects.items:
            try:
                events = self.client.list_events(project.id, limit=1)
            except BrigtermError as e:
                # One bad project should not blank the whole listing
                logger.warning("Could not fetch latest event for project %s: %s", project.id, e)
                continue
            if events.items:
                latest[project.id] = events.items[0]
        self._fill_table(projects, latest)

    def _fill_table(self, projects: ProjectList, latest: dict[str, Event]) -> None:
        rows: list[list[Cell]] = []
        for project in projects.items:
            style = UNKNOWN_STYLE
            icon = UNKNOWN_ICON
            since = ""
            event = latest.get(project.id)
            if event is not None:
                phase = event.worker.status.phase
                style = phase_style(phase)
                icon = phase_icon(phase)
                moment = event.worker.status.started or event.created
                if moment is not None:
                    since = short_human_duration(seconds_since(moment))
            rows.append(
                [
                    Cell(icon, style),
                    Cell(project.id, style),
                    Cell(project.description, style),
                    Cell(since, style),
                ]
            )
        self.table.set_cells(rows, placeholder="[dim]No projects[/dim]")

    def _show_error(self, message: str) -> None:
        self.table.set_cells([], placeholder=f"[red]Error loading projects: {message}[/red]")

    def _handle_key(self, key: str) -> bool:
        if self._move_cursor(self.table, key):
            return True
        if key == keys.ENTER:
            project_id = self.table.selected_text(ID_COLUMN)
            if project_id:
                self.router.navigate(PageId.PROJECT, project_id)
            return True
        return False

    def render(self, height: int) -> RenderableType:
        return self.table.render()

    def usage(self) -> str:
        return f"[yellow](Enter)[/yellow] Open    [yellow](F5/R)[/yellow] Reload    {QUIT_USAGE}"

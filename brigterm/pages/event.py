"""Page showing one event, its worker, and the worker's jobs."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.columns import Columns
from rich.console import Group
from rich.console import RenderableType

from brigterm import keys
from brigterm.models import Event
from brigterm.pages.base import NAV_USAGE
from brigterm.pages.base import QUIT_USAGE
from brigterm.pages.base import Navigator
from brigterm.pages.base import Page
from brigterm.pages.base import PageId
from brigterm.phases import UNKNOWN_STYLE
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

NAME_COLUMN = 1


class EventPage(Page):
    """Event and worker details with a selectable list of jobs."""

    page_id = PageId.EVENT
    title = "Event"

    def __init__(self, client: APIClient, router: Navigator, redrawer: Redrawer) -> None:
        super().__init__(client, router, redrawer)
        self.event_info = TextPane(border_style="yellow")
        self.worker_info = TextPane(title="Worker", border_style="yellow")
        self.table = TablePane(
            ["", "Name", "Image", "Started", "Ended", "Duration"],
            title="Jobs",
            border_style="yellow",
        )
        self._project_id: str | None = None

    def _refresh(self, event_id: str) -> None:
        event = self.client.get_event(event_id)
        with self._state_lock:
            self._project_id = event.project_id or None
        self._fill_event_info(event)
        self._fill_jobs_table(event)
        # Borders follow the worker's phase
        style = phase_style(event.worker.status.phase)
        self.event_info.border_style = style
        self.worker_info.border_style = style
        self.table.border_style = style

    def _fill_event_info(self, event: Event) -> None:
        self.event_info.title = f"Event: {event.id}"
        lines = [
            f"[yellow]Project:[/yellow] {event.project_id}",
            f"[yellow]Source:[/yellow] {event.source}",
            f"[yellow]Type:[/yellow] {event.type}",
            f"[yellow]Time Created:[/yellow] {format_timestamp(event.created)}",
        ]
        for key, value in sorted(event.qualifiers.items()):
            lines.append(f"[yellow]{key}:[/yellow] {value}")
        for key, value in sorted(event.labels.items()):
            lines.append(f"[yellow]{key}:[/yellow] {value}")
        self.event_info.set_text("\n".join(lines))

        status = event.worker.status
        self.worker_info.set_text(
            f"[yellow]Worker Phase:[/yellow] {status.phase.value}\n"
            f"[yellow]Worker Started:[/yellow] {format_timestamp(status.started)}\n"
            f"[yellow]Worker Ended:[/yellow] {format_timestamp(status.ended)}\n"
            f"[yellow]Duration:[/yellow] {format_span(status.started, status.ended)}"
        )

    def _fill_jobs_table(self, event: Event) -> None:
        rows: list[list[Cell]] = []
        for job in event.worker.jobs:
            status = job.status
            style = phase_style(status.phase)
            started = short_human_duration(seconds_since(status.started)) if status.started else ""
            ended = short_human_duration(seconds_since(status.ended)) if status.ended else ""
            rows.append(
                [
                    Cell(phase_icon(status.phase), style),
                    Cell(job.name, style),
                    Cell(job.image, style),
                    Cell(started, style),
                    Cell(ended, style),
                    Cell(format_span(status.started, status.ended), style),
                ]
            )
        self.table.set_cells(rows, placeholder="[dim]No jobs[/dim]")

    def _show_error(self, message: str) -> None:
        self.event_info.title = "Event"
        self.event_info.set_text(f"[red]Error loading event: {message}[/red]")
        self.worker_info.set_text("")
        self.table.set_cells([], placeholder="[red]Jobs unavailable[/red]")
        for pane in (self.event_info, self.worker_info, self.table):
            pane.border_style = UNKNOWN_STYLE

    def _handle_key(self, key: str) -> bool:
        if self._move_cursor(self.table, key):
            return True
        event_id = self.params[0] if self.params else None
        if event_id is None:
            return False
        if key == keys.ENTER:
            job_name = self.table.selected_text(NAME_COLUMN)
            if job_name:
                self.router.navigate(PageId.JOB, event_id, job_name)
            return True
        if key in ("l", "L"):
            self.router.navigate(PageId.LOG, event_id, None)
            return True
        if key in keys.BACK_KEYS:
            with self._state_lock:
                project_id = self._project_id
            if project_id:
                self.router.navigate(PageId.PROJECT, project_id)
            else:
                self.router.navigate(PageId.PROJECTS)
            return True
        if key == keys.ESCAPE:
            self.router.navigate(PageId.PROJECTS)
            return True
        return False

    def render(self, height: int) -> RenderableType:
        return Group(
            Columns([self.event_info.render(), self.worker_info.render()], expand=True, equal=True),
            self.table.render(),
        )

    def usage(self) -> str:
        return f"[yellow](L)[/yellow] Worker Logs    {NAV_USAGE}    {QUIT_USAGE}"

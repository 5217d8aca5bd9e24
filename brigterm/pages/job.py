"""Page showing the details of a single job."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.console import RenderableType

from brigterm import keys
from brigterm.exceptions import NotFoundError
from brigterm.models import Job
from brigterm.pages.base import NAV_USAGE
from brigterm.pages.base import QUIT_USAGE
from brigterm.pages.base import Navigator
from brigterm.pages.base import Page
from brigterm.pages.base import PageId
from brigterm.phases import UNKNOWN_STYLE
from brigterm.phases import format_span
from brigterm.phases import format_timestamp
from brigterm.phases import phase_style
from brigterm.widgets import Redrawer
from brigterm.widgets import TextPane

if TYPE_CHECKING:
    from brigterm.client import APIClient


class JobPage(Page):
    """Details of one job, looked up by name within its parent event."""

    page_id = PageId.JOB
    title = "Job"

    def __init__(self, client: APIClient, router: Navigator, redrawer: Redrawer) -> None:
        super().__init__(client, router, redrawer)
        self.info = TextPane(border_style="yellow")

    def _refresh(self, event_id: str, job_name: str) -> None:
        self.info.title = f" {event_id}: {job_name} "
        event = self.client.get_event(event_id)
        job = event.worker.job(job_name)
        if job is None:
            raise NotFoundError("job", job_name, f"Job '{job_name}' not found in event '{event_id}'")
        self._fill_info(job)

    def _fill_info(self, job: Job) -> None:
        status = job.status
        self.info.border_style = phase_style(status.phase)
        lines = [
            f"[grey50]Phase:[/grey50] {status.phase.value}",
            f"[grey50]Primary Image:[/grey50] {job.image}",
            f"[grey50]Started:[/grey50] {format_timestamp(status.started)}",
            f"[grey50]Ended:[/grey50] {format_timestamp(status.ended)}",
        ]
        duration = format_span(status.started, status.ended)
        if duration:
            lines.append(f"[grey50]Duration:[/grey50] {duration}")
        self.info.set_text("\n".join(lines))

    def _show_error(self, message: str) -> None:
        self.info.border_style = UNKNOWN_STYLE
        self.info.set_text(f"[red]{message}[/red]")

    def _handle_key(self, key: str) -> bool:
        if len(self.params) < 2:
            return False
        event_id, job_name = self.params[0], self.params[1]
        if key in ("l", "L"):
            self.router.navigate(PageId.LOG, event_id, job_name)
            return True
        if key in keys.BACK_KEYS:
            self.router.navigate(PageId.EVENT, event_id)
            return True
        if key == keys.ESCAPE:
            self.router.navigate(PageId.PROJECTS)
            return True
        return False

    def render(self, height: int) -> RenderableType:
        return self.info.render()

    def usage(self) -> str:
        return f"[yellow](L)[/yellow] Logs    {NAV_USAGE}    {QUIT_USAGE}"

"""Shared test fixtures for brigterm tests."""

import threading
import time
from collections.abc import Callable
from collections.abc import Generator
from datetime import datetime
from datetime import timedelta
from datetime import timezone
from unittest.mock import MagicMock

import pytest

from brigterm.exceptions import APIError
from brigterm.exceptions import NotFoundError
from brigterm.models import Event
from brigterm.models import EventList
from brigterm.models import Job
from brigterm.models import JobPhase
from brigterm.models import JobStatus
from brigterm.models import Project
from brigterm.models import ProjectList
from brigterm.models import Worker
from brigterm.models import WorkerPhase
from brigterm.models import WorkerStatus
from brigterm.state.clock import FrozenClock
from brigterm.state.clock import reset_clock
from brigterm.state.clock import set_clock
from brigterm.streams import LogStream
from brigterm.streams import Source
from brigterm.widgets import Redrawer

#: Fixed "now" used by the frozen clock fixture
NOW = datetime(2024, 1, 15, 12, 0, 0, tzinfo=timezone.utc)


def make_project(project_id: str = "demo", description: str = "Demo project") -> Project:
    """Create a Project with sensible defaults."""
    return Project(
        id=project_id,
        description=description,
        created=NOW - timedelta(days=30),
        git_clone_url="https://github.com/example/demo.git",
    )


def make_job(
    name: str = "build",
    phase: JobPhase = JobPhase.SUCCEEDED,
    image: str = "debian:latest",
    started_ago: float | None = 120.0,
    duration: float | None = 60.0,
) -> Job:
    """Create a Job that started ``started_ago`` seconds before NOW."""
    started = NOW - timedelta(seconds=started_ago) if started_ago is not None else None
    ended = started + timedelta(seconds=duration) if started and duration is not None else None
    return Job(name=name, image=image, status=JobStatus(phase=phase, started=started, ended=ended))


def make_event(
    event_id: str = "evt-1",
    project_id: str = "demo",
    phase: WorkerPhase = WorkerPhase.SUCCEEDED,
    jobs: list[Job] | None = None,
    created_ago: float = 300.0,
) -> Event:
    """Create an Event whose worker started shortly after it was created."""
    created = NOW - timedelta(seconds=created_ago)
    started = created + timedelta(seconds=10)
    ended = started + timedelta(seconds=90) if phase is WorkerPhase.SUCCEEDED else None
    return Event(
        id=event_id,
        project_id=project_id,
        source="brigade.sh/cli",
        type="exec",
        created=created,
        qualifiers={"repo": "example/demo"},
        labels={"team": "core"},
        worker=Worker(
            status=WorkerStatus(phase=phase, started=started, ended=ended),
            jobs=jobs if jobs is not None else [make_job()],
        ),
    )


class FakeClient:
    """
    In-memory APIClient.

    Attributes:
        projects: Projects by ID, in insertion order.
        events: Events by ID, newest first.
        failing: Method names that raise APIError when called.
        calls: ``(method, args)`` of every call, in order.
        streams: LogStreams handed out by ``stream_logs``, in order.
        stream_error: Raised by ``stream_logs`` when set.
    """

    def __init__(self) -> None:
        self.projects: dict[str, Project] = {}
        self.events: dict[str, Event] = {}
        self.failing: set[str] = set()
        self.calls: list[tuple[str, tuple]] = []
        self.streams: list[LogStream] = []
        self.stream_error: Exception | None = None
        self._lock = threading.Lock()

    def add_project(self, project: Project) -> Project:
        self.projects[project.id] = project
        return project

    def add_event(self, event: Event) -> Event:
        self.events[event.id] = event
        return event

    def _record(self, method: str, *args: object) -> None:
        with self._lock:
            self.calls.append((method, args))
        if method in self.failing:
            raise APIError(f"{method} failed", status_code=500)

    def calls_to(self, method: str) -> list[tuple]:
        with self._lock:
            return [args for name, args in self.calls if name == method]

    def list_projects(self) -> ProjectList:
        self._record("list_projects")
        return ProjectList(items=list(self.projects.values()))

    def get_project(self, project_id: str) -> Project:
        self._record("get_project", project_id)
        try:
            return self.projects[project_id]
        except KeyError:
            raise NotFoundError("project", project_id) from None

    def list_events(
        self,
        project_id: str | None = None,
        continue_token: str = "",
        limit: int = 20,
    ) -> EventList:
        self._record("list_events", project_id, continue_token, limit)
        matching = [
            event
            for event in self.events.values()
            if project_id is None or event.project_id == project_id
        ]
        offset = int(continue_token) if continue_token else 0
        page = matching[offset : offset + limit]
        next_offset = offset + limit
        token = str(next_offset) if next_offset < len(matching) else ""
        return EventList(items=page, continue_token=token)

    def get_event(self, event_id: str) -> Event:
        self._record("get_event", event_id)
        try:
            return self.events[event_id]
        except KeyError:
            raise NotFoundError("event", event_id) from None

    def stream_logs(self, event_id: str, job_name: str | None, cancel: threading.Event) -> LogStream:
        self._record("stream_logs", event_id, job_name)
        if self.stream_error is not None:
            raise self.stream_error
        stream = LogStream(entries=Source("entries"), errors=Source("errors"))
        with self._lock:
            self.streams.append(stream)
        return stream


def wait_for(condition: Callable[[], bool], timeout: float = 2.0, interval: float = 0.01) -> bool:
    """Poll ``condition`` until it holds or ``timeout`` elapses."""
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if condition():
            return True
        time.sleep(interval)
    return condition()


@pytest.fixture
def fake_client() -> FakeClient:
    """A FakeClient holding one project with one event."""
    client = FakeClient()
    client.add_project(make_project("demo"))
    client.add_event(make_event("evt-1", "demo", jobs=[make_job("build"), make_job("test")]))
    return client


@pytest.fixture
def router() -> MagicMock:
    """A mock Navigator."""
    return MagicMock()


@pytest.fixture
def redrawer() -> Redrawer:
    return Redrawer()


@pytest.fixture
def frozen_clock() -> Generator[FrozenClock, None, None]:
    """Pin the clock to NOW for the duration of a test."""
    clock = FrozenClock(NOW.timestamp())
    set_clock(clock)
    yield clock
    reset_clock()

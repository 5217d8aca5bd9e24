"""Data models for Brigade projects, events, jobs, and logs.

Objects are decoded from the API's JSON responses by the ``from_dict``
constructors, which tolerate missing fields so a partially populated
response still renders.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from dataclasses import field
from datetime import datetime
from datetime import timezone
from enum import Enum
from typing import Any


class WorkerPhase(str, Enum):
    """Lifecycle phase of an event's worker."""

    ABORTED = "ABORTED"
    CANCELED = "CANCELED"
    FAILED = "FAILED"
    PENDING = "PENDING"
    RUNNING = "RUNNING"
    SCHEDULING_FAILED = "SCHEDULING_FAILED"
    STARTING = "STARTING"
    SUCCEEDED = "SUCCEEDED"
    TIMED_OUT = "TIMED_OUT"
    UNKNOWN = "UNKNOWN"

    @classmethod
    def parse(cls, value: str | None) -> WorkerPhase:
        """Parse a phase string, mapping anything unrecognized to UNKNOWN."""
        try:
            return cls(value or "UNKNOWN")
        except ValueError:
            return cls.UNKNOWN


class JobPhase(str, Enum):
    """Lifecycle phase of a single job."""

    ABORTED = "ABORTED"
    CANCELED = "CANCELED"
    FAILED = "FAILED"
    PENDING = "PENDING"
    RUNNING = "RUNNING"
    SCHEDULING_FAILED = "SCHEDULING_FAILED"
    STARTING = "STARTING"
    SUCCEEDED = "SUCCEEDED"
    TIMED_OUT = "TIMED_OUT"
    UNKNOWN = "UNKNOWN"

    @classmethod
    def parse(cls, value: str | None) -> JobPhase:
        """Parse a phase string, mapping anything unrecognized to UNKNOWN."""
        try:
            return cls(value or "UNKNOWN")
        except ValueError:
            return cls.UNKNOWN


_FRACTION_RE = re.compile(r"\.(\d+)")


def parse_timestamp(value: str | None) -> datetime | None:
    """
    Parse an RFC 3339 timestamp as returned by the API.

    Fractional seconds of any precision are accepted; they are padded or
    truncated to microseconds first.

    Args:
        value: Timestamp string such as ``2021-03-01T12:00:00Z``.

    Returns:
        A timezone-aware datetime, or None if the value is empty or malformed.
    """
    if not value:
        return None
    try:
        normalized = _FRACTION_RE.sub(
            lambda m: "." + m.group(1)[:6].ljust(6, "0"), value.replace("Z", "+00:00"), count=1
        )
        parsed = datetime.fromisoformat(normalized)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def format_duration(seconds: float) -> str:
    """
    Format a duration in seconds as a compact human-readable string.

    Args:
        seconds: Duration in seconds.

    Returns:
        A string such as ``"1h 1m"``, ``"1m 30s"`` or ``"5s"``.
    """
    if seconds == float("inf"):
        return "unknown"
    total = max(0, int(seconds))
    hours, remainder = divmod(total, 3600)
    minutes, secs = divmod(remainder, 60)
    if hours:
        return f"{hours}h {minutes}m" if minutes else f"{hours}h"
    if minutes:
        return f"{minutes}m {secs}s" if secs else f"{minutes}m"
    return f"{secs}s"


@dataclass
class Project:
    """
    A Brigade project.

    Attributes:
        id: Unique project identifier.
        description: Free-text description.
        created: When the project was created.
        git_clone_url: Clone URL of the worker's git repository, if any.
    """

    id: str
    description: str = ""
    created: datetime | None = None
    git_clone_url: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Project:
        metadata = data.get("metadata") or {}
        spec = data.get("spec") or {}
        git = (spec.get("workerTemplate") or {}).get("git") or {}
        return cls(
            id=metadata.get("id", ""),
            description=data.get("description", ""),
            created=parse_timestamp(metadata.get("created")),
            git_clone_url=git.get("cloneURL") or None,
        )


@dataclass
class ProjectList:
    """A list of projects."""

    items: list[Project] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ProjectList:
        return cls(items=[Project.from_dict(item) for item in data.get("items") or []])


@dataclass
class JobStatus:
    """Observed status of a job."""

    phase: JobPhase = JobPhase.UNKNOWN
    started: datetime | None = None
    ended: datetime | None = None


@dataclass
class Job:
    """
    A job spawned by an event's worker.

    Attributes:
        name: Job name, unique within its event.
        image: Image of the job's primary container.
        status: Current job status.
    """

    name: str
    image: str = ""
    status: JobStatus = field(default_factory=JobStatus)

    @property
    def duration(self) -> float | None:
        """Seconds between start and end, or None if either is unknown."""
        if self.status.started is None or self.status.ended is None:
            return None
        return (self.status.ended - self.status.started).total_seconds()

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Job:
        spec = data.get("spec") or {}
        container = spec.get("primaryContainer") or {}
        status = data.get("status") or {}
        return cls(
            name=data.get("name", ""),
            image=container.get("image", ""),
            status=JobStatus(
                phase=JobPhase.parse(status.get("phase")),
                started=parse_timestamp(status.get("started")),
                ended=parse_timestamp(status.get("ended")),
            ),
        )


@dataclass
class WorkerStatus:
    """Observed status of an event's worker."""

    phase: WorkerPhase = WorkerPhase.UNKNOWN
    started: datetime | None = None
    ended: datetime | None = None


@dataclass
class Worker:
    """The worker handling an event, with the jobs it spawned."""

    status: WorkerStatus = field(default_factory=WorkerStatus)
    jobs: list[Job] = field(default_factory=list)

    def job(self, name: str) -> Job | None:
        """Return the job with the given name, or None if absent."""
        for job in self.jobs:
            if job.name == name:
                return job
        return None


@dataclass
class Event:
    """
    An event delivered to a project.

    Attributes:
        id: Unique event identifier.
        project_id: The project the event belongs to.
        source: The gateway or system that emitted the event.
        type: The event type within its source.
        created: When the event was created.
        qualifiers: Qualifier key/value pairs.
        labels: Label key/value pairs.
        worker: The worker handling the event.
    """

    id: str
    project_id: str = ""
    source: str = ""
    type: str = ""
    created: datetime | None = None
    qualifiers: dict[str, str] = field(default_factory=dict)
    labels: dict[str, str] = field(default_factory=dict)
    worker: Worker = field(default_factory=Worker)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Event:
        metadata = data.get("metadata") or {}
        worker = data.get("worker") or {}
        status = worker.get("status") or {}
        jobs = worker.get("jobs") or []
        # Older API versions return jobs keyed by name rather than as a list
        if isinstance(jobs, dict):
            jobs = [{"name": name, **(job or {})} for name, job in jobs.items()]
        return cls(
            id=metadata.get("id", ""),
            project_id=data.get("projectID", ""),
            source=data.get("source", ""),
            type=data.get("type", ""),
            created=parse_timestamp(metadata.get("created")),
            qualifiers=dict(data.get("qualifiers") or {}),
            labels=dict(data.get("labels") or {}),
            worker=Worker(
                status=WorkerStatus(
                    phase=WorkerPhase.parse(status.get("phase")),
                    started=parse_timestamp(status.get("started")),
                    ended=parse_timestamp(status.get("ended")),
                ),
                jobs=[Job.from_dict(job) for job in jobs],
            ),
        )


@dataclass
class EventList:
    """
    One page of events.

    Attributes:
        items: The events on this page.
        continue_token: Token for the next page; empty when there are no more.
    """

    items: list[Event] = field(default_factory=list)
    continue_token: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> EventList:
        metadata = data.get("metadata") or {}
        return cls(
            items=[Event.from_dict(item) for item in data.get("items") or []],
            continue_token=metadata.get("continue") or "",
        )


@dataclass(frozen=True)
class LogEntry:
    """A single line of log output."""

    message: str

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> LogEntry:
        return cls(message=str(data.get("message", "")))

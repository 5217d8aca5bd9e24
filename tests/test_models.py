"""Tests for data models."""

from datetime import datetime
from datetime import timezone

import pytest

from brigterm.models import Event
from brigterm.models import EventList
from brigterm.models import Job
from brigterm.models import JobPhase
from brigterm.models import LogEntry
from brigterm.models import Project
from brigterm.models import ProjectList
from brigterm.models import WorkerPhase
from brigterm.models import format_duration
from brigterm.models import parse_timestamp

EVENT_JSON = {
    "metadata": {"id": "evt-1", "created": "2024-01-15T11:55:00Z"},
    "projectID": "demo",
    "source": "brigade.sh/github",
    "type": "push",
    "qualifiers": {"repo": "example/demo"},
    "labels": {"branch": "main"},
    "worker": {
        "status": {
            "phase": "RUNNING",
            "started": "2024-01-15T11:55:10Z",
        },
        "jobs": [
            {
                "name": "build",
                "spec": {"primaryContainer": {"image": "golang:1.21"}},
                "status": {
                    "phase": "SUCCEEDED",
                    "started": "2024-01-15T11:55:20Z",
                    "ended": "2024-01-15T11:56:50Z",
                },
            },
            {"name": "test", "status": {"phase": "PENDING"}},
        ],
    },
}


class TestPhases:
    """Tests for phase parsing."""

    def test_known_phase(self) -> None:
        assert WorkerPhase.parse("RUNNING") is WorkerPhase.RUNNING
        assert JobPhase.parse("TIMED_OUT") is JobPhase.TIMED_OUT

    @pytest.mark.parametrize("value", [None, "", "EXPLODED"])
    def test_unknown_phase(self, value: str | None) -> None:
        assert WorkerPhase.parse(value) is WorkerPhase.UNKNOWN
        assert JobPhase.parse(value) is JobPhase.UNKNOWN


class TestParseTimestamp:
    """Tests for parse_timestamp."""

    def test_zulu_timestamp(self) -> None:
        assert parse_timestamp("2024-01-15T12:00:00Z") == datetime(
            2024, 1, 15, 12, 0, 0, tzinfo=timezone.utc
        )

    def test_naive_timestamp_is_utc(self) -> None:
        parsed = parse_timestamp("2024-01-15T12:00:00")
        assert parsed is not None
        assert parsed.tzinfo is timezone.utc

    @pytest.mark.parametrize(
        ("value", "microsecond"),
        [
            ("2021-03-01T12:00:00.1Z", 100000),
            ("2021-03-01T12:00:00.12345Z", 123450),
            ("2021-03-01T12:00:00.123456Z", 123456),
            ("2021-03-01T12:00:00.123456789Z", 123456),
            ("2021-03-01T12:00:00.123456789+00:00", 123456),
        ],
    )
    def test_fractional_seconds(self, value: str, microsecond: int) -> None:
        assert parse_timestamp(value) == datetime(
            2021, 3, 1, 12, 0, 0, microsecond, tzinfo=timezone.utc
        )

    @pytest.mark.parametrize("value", [None, "", "yesterday"])
    def test_missing_or_malformed(self, value: str | None) -> None:
        assert parse_timestamp(value) is None


class TestFormatDuration:
    """Tests for format_duration."""

    @pytest.mark.parametrize(
        ("seconds", "expected"),
        [
            (5, "5s"),
            (60, "1m"),
            (90, "1m 30s"),
            (3600, "1h"),
            (3660, "1h 1m"),
            (-3, "0s"),
            (float("inf"), "unknown"),
        ],
    )
    def test_format(self, seconds: float, expected: str) -> None:
        assert format_duration(seconds) == expected


class TestProject:
    """Tests for Project decoding."""

    def test_from_dict(self) -> None:
        project = Project.from_dict(
            {
                "metadata": {"id": "demo", "created": "2024-01-01T00:00:00Z"},
                "description": "Demo",
                "spec": {"workerTemplate": {"git": {"cloneURL": "https://example.com/demo.git"}}},
            }
        )
        assert project.id == "demo"
        assert project.description == "Demo"
        assert project.git_clone_url == "https://example.com/demo.git"
        assert project.created is not None

    def test_from_sparse_dict(self) -> None:
        project = Project.from_dict({"metadata": {"id": "bare"}})
        assert project.description == ""
        assert project.git_clone_url is None
        assert project.created is None

    def test_project_list(self) -> None:
        projects = ProjectList.from_dict({"items": [{"metadata": {"id": "a"}}, {"metadata": {"id": "b"}}]})
        assert [p.id for p in projects.items] == ["a", "b"]
        assert ProjectList.from_dict({"items": None}).items == []


class TestEvent:
    """Tests for Event decoding."""

    def test_from_dict(self) -> None:
        event = Event.from_dict(EVENT_JSON)
        assert event.id == "evt-1"
        assert event.project_id == "demo"
        assert event.source == "brigade.sh/github"
        assert event.qualifiers == {"repo": "example/demo"}
        assert event.labels == {"branch": "main"}
        assert event.worker.status.phase is WorkerPhase.RUNNING
        assert event.worker.status.ended is None
        assert [job.name for job in event.worker.jobs] == ["build", "test"]

    def test_jobs_keyed_by_name(self) -> None:
        data = {
            "metadata": {"id": "evt-2"},
            "worker": {"jobs": {"lint": {"status": {"phase": "FAILED"}}}},
        }
        event = Event.from_dict(data)
        assert event.worker.jobs[0].name == "lint"
        assert event.worker.jobs[0].status.phase is JobPhase.FAILED

    def test_job_lookup(self) -> None:
        event = Event.from_dict(EVENT_JSON)
        build = event.worker.job("build")
        assert build is not None
        assert build.image == "golang:1.21"
        assert event.worker.job("deploy") is None

    def test_job_duration(self) -> None:
        event = Event.from_dict(EVENT_JSON)
        assert event.worker.job("build").duration == 90.0
        assert event.worker.job("test").duration is None

    def test_event_list_continue_token(self) -> None:
        events = EventList.from_dict({"items": [EVENT_JSON], "metadata": {"continue": "abc"}})
        assert len(events.items) == 1
        assert events.continue_token == "abc"
        assert EventList.from_dict({"items": []}).continue_token == ""


class TestJob:
    """Tests for Job decoding."""

    def test_missing_fields(self) -> None:
        job = Job.from_dict({})
        assert job.name == ""
        assert job.image == ""
        assert job.status.phase is JobPhase.UNKNOWN


class TestLogEntry:
    """Tests for LogEntry."""

    def test_from_dict(self) -> None:
        assert LogEntry.from_dict({"message": "hello"}) == LogEntry("hello")
        assert LogEntry.from_dict({}) == LogEntry("")

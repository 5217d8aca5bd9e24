"""Client for the Brigade REST API.

:class:`APIClient` is the capability the dashboard's pages consume.
:class:`BrigadeClient` implements it over ``requests``; tests substitute an
in-memory implementation.
"""

from __future__ import annotations

import json
import logging
import threading
from typing import Any
from typing import Protocol

import requests

from brigterm.constants import EVENTS_PAGE_SIZE
from brigterm.constants import REQUEST_TIMEOUT
from brigterm.exceptions import APIError
from brigterm.exceptions import NotFoundError
from brigterm.exceptions import StreamError
from brigterm.models import Event
from brigterm.models import EventList
from brigterm.models import LogEntry
from brigterm.models import Project
from brigterm.models import ProjectList
from brigterm.streams import LogStream
from brigterm.streams import Source

logger = logging.getLogger(__name__)


class APIClient(Protocol):
    """Operations the dashboard needs from the job-execution service."""

    def list_projects(self) -> ProjectList: ...

    def get_project(self, project_id: str) -> Project: ...

    def list_events(
        self,
        project_id: str | None = None,
        continue_token: str = "",
        limit: int = EVENTS_PAGE_SIZE,
    ) -> EventList: ...

    def get_event(self, event_id: str) -> Event: ...

    def stream_logs(
        self,
        event_id: str,
        job_name: str | None,
        cancel: threading.Event,
    ) -> LogStream: ...


class BrigadeClient:
    """
    ``requests``-based implementation of :class:`APIClient`.

    Attributes:
        address: Base URL of the API server.
        timeout: Timeout in seconds for non-streaming requests.
    """

    def __init__(
        self,
        address: str,
        token: str | None = None,
        ignore_cert_errors: bool = False,
        session: requests.Session | None = None,
        timeout: float = REQUEST_TIMEOUT,
    ) -> None:
        self.address = address.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.verify = not ignore_cert_errors
        self.session.headers["Accept"] = "application/json"
        if token:
            self.session.headers["Authorization"] = f"Bearer {token}"

    def _url(self, path: str) -> str:
        return f"{self.address}/v2/{path.lstrip('/')}"

    def _get_json(
        self,
        path: str,
        kind: str,
        name: str = "",
        params: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        url = self._url(path)
        logger.debug("GET %s params=%s", url, params)
        try:
            response = self.session.get(url, params=params, timeout=self.timeout)
        except requests.RequestException as e:
            raise APIError(f"Request to {url} failed", cause=e) from e
        if response.status_code == 404:
            raise NotFoundError(kind, name)
        if response.status_code >= 400:
            raise APIError(
                f"GET {url} returned {response.status_code}: {response.text.strip()}",
                status_code=response.status_code,
            )
        try:
            payload = response.json()
        except ValueError as e:
            raise APIError(f"Malformed response from {url}", cause=e) from e
        if not isinstance(payload, dict):
            raise APIError(f"Malformed response from {url}: expected a JSON object")
        return payload

    def list_projects(self) -> ProjectList:
        return ProjectList.from_dict(self._get_json("projects", "projects"))

    def get_project(self, project_id: str) -> Project:
        return Project.from_dict(self._get_json(f"projects/{project_id}", "project", project_id))

    def list_events(
        self,
        project_id: str | None = None,
        continue_token: str = "",
        limit: int = EVENTS_PAGE_SIZE,
    ) -> EventList:
        params: dict[str, Any] = {"limit": limit}
        if project_id:
            params["projectID"] = project_id
        if continue_token:
            params["continue"] = continue_token
        return EventList.from_dict(self._get_json("events", "events", params=params))

    def get_event(self, event_id: str) -> Event:
        return Event.from_dict(self._get_json(f"events/{event_id}", "event", event_id))

    def stream_logs(
        self,
        event_id: str,
        job_name: str | None,
        cancel: threading.Event,
    ) -> LogStream:
        """
        Follow the logs of an event's worker, or of one of its jobs.

        Opens the streaming request synchronously and then pumps lines into
        the returned sources from a background thread. Both sources are closed
        when the response ends, when reading fails, or when ``cancel`` is set.

        Args:
            event_id: The event whose logs to follow.
            job_name: A job name, or None for the worker's own logs.
            cancel: Setting this stops the stream.

        Raises:
            NotFoundError: If the event or job does not exist.
            StreamError: If the stream could not be opened.
        """
        url = self._url(f"events/{event_id}/logs")
        params: dict[str, Any] = {"follow": "true"}
        if job_name:
            params["job"] = job_name
        logger.debug("GET %s params=%s (stream)", url, params)
        try:
            response = self.session.get(url, params=params, stream=True, timeout=(self.timeout, None))
        except requests.RequestException as e:
            raise StreamError(event_id, cause=e) from e
        if response.status_code == 404:
            response.close()
            raise NotFoundError("job" if job_name else "event", job_name or event_id)
        if response.status_code >= 400:
            response.close()
            raise StreamError(event_id, f"Log stream for event '{event_id}' returned {response.status_code}")

        stream = LogStream(entries=Source("entries"), errors=Source("errors"))
        done = threading.Event()
        threading.Thread(
            target=_pump_log_lines,
            args=(response, stream, event_id, cancel, done),
            name=f"log-stream-{event_id}",
            daemon=True,
        ).start()
        # Closing the response unblocks a pump thread stuck waiting on the socket
        threading.Thread(
            target=_close_on_cancel,
            args=(response, cancel, done),
            name=f"log-stream-cancel-{event_id}",
            daemon=True,
        ).start()
        return stream


def parse_log_line(line: str) -> LogEntry | None:
    """
    Decode one line of the log stream.

    Lines are JSON objects with a ``message`` field, optionally framed as
    server-sent events (``data: {...}``). Blank lines and SSE comments yield
    None; non-JSON payloads are passed through as the message itself.
    """
    text = line.strip()
    if not text or text.startswith(":"):
        return None
    if text.startswith("data:"):
        text = text[len("data:") :].strip()
    try:
        payload = json.loads(text)
    except json.JSONDecodeError:
        return LogEntry(message=text)
    if isinstance(payload, dict):
        return LogEntry.from_dict(payload)
    return LogEntry(message=str(payload))


def _pump_log_lines(
    response: requests.Response,
    stream: LogStream,
    event_id: str,
    cancel: threading.Event,
    done: threading.Event,
) -> None:
    try:
        for raw in response.iter_lines(decode_unicode=True):
            if cancel.is_set():
                break
            if not raw:
                continue
            line = raw if isinstance(raw, str) else raw.decode("utf-8", "replace")
            entry = parse_log_line(line)
            if entry is not None:
                stream.entries.put(entry)
    except (requests.RequestException, AttributeError, ValueError) as e:
        # AttributeError/ValueError surface when the response is closed mid-read
        if not cancel.is_set():
            stream.errors.put(StreamError(event_id, cause=e))
    finally:
        done.set()
        response.close()
        stream.entries.close()
        stream.errors.close()


def _close_on_cancel(
    response: requests.Response,
    cancel: threading.Event,
    done: threading.Event,
    poll_interval: float = 0.25,
) -> None:
    while not done.is_set():
        if cancel.wait(poll_interval):
            response.close()
            return

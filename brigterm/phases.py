"""Colors, icons, and time formatting for worker and job phases."""

from datetime import datetime
from datetime import timezone

from brigterm.models import JobPhase
from brigterm.models import WorkerPhase
from brigterm.models import format_duration

UNKNOWN_STYLE = "grey50"
UNKNOWN_ICON = "?"

_STYLES_BY_PHASE: dict[str, str] = {
    "ABORTED": "grey50",
    "CANCELED": "grey50",
    "FAILED": "red",
    "PENDING": "white",
    "RUNNING": "yellow",
    "SCHEDULING_FAILED": "red",
    "STARTING": "yellow",
    "SUCCEEDED": "green",
    "TIMED_OUT": "red",
    "UNKNOWN": "grey50",
}

_ICONS_BY_PHASE: dict[str, str] = {
    "ABORTED": "✖",
    "CANCELED": "✖",
    "FAILED": "✖",
    "PENDING": "⟳",
    "RUNNING": "▶",
    "SCHEDULING_FAILED": "✖",
    "STARTING": "▶",
    "SUCCEEDED": "✔",
    "TIMED_OUT": "✖",
    "UNKNOWN": "?",
}


def phase_style(phase: WorkerPhase | JobPhase | None) -> str:
    """Rich style for a worker or job phase (grey if unknown)."""
    if phase is None:
        return UNKNOWN_STYLE
    return _STYLES_BY_PHASE.get(phase.value, UNKNOWN_STYLE)


def phase_icon(phase: WorkerPhase | JobPhase | None) -> str:
    """Status icon for a worker or job phase (``?`` if unknown)."""
    if phase is None:
        return UNKNOWN_ICON
    return _ICONS_BY_PHASE.get(phase.value, UNKNOWN_ICON)


def short_human_duration(seconds: float) -> str:
    """
    Format an age the way kubectl does: a single unit, truncated.

    Args:
        seconds: Elapsed seconds.

    Returns:
        Strings such as ``"0s"``, ``"42s"``, ``"5m"``, ``"3h"``, ``"12d"`` or ``"2y"``.
    """
    if seconds < 0:
        return "0s"
    whole = int(seconds)
    if whole < 60:
        return f"{whole}s"
    minutes = whole // 60
    if minutes < 60:
        return f"{minutes}m"
    hours = minutes // 60
    if hours < 24:
        return f"{hours}h"
    if hours < 24 * 365:
        return f"{hours // 24}d"
    return f"{hours // (24 * 365)}y"


def format_timestamp(moment: datetime | None) -> str:
    """Format a datetime as ``YYYY-MM-DD HH:MM:SS`` in UTC, or ``""`` if None."""
    if moment is None:
        return ""
    return moment.astimezone(timezone.utc).strftime("%Y-%m-%d %H:%M:%S")


def format_span(started: datetime | None, ended: datetime | None) -> str:
    """Format ``ended - started``, or ``""`` when either bound is missing."""
    if started is None or ended is None:
        return ""
    return format_duration((ended - started).total_seconds())

"""Injectable clock for ages and durations shown in the dashboard.

Tables show how long ago an event was created or a worker started. Routing
those calculations through a clock lets tests pin "now" and assert exact
strings.

Example usage:
    from brigterm.state.clock import FrozenClock, set_clock, seconds_since

    set_clock(FrozenClock(1700000060.0))
    assert seconds_since(datetime.fromtimestamp(1700000000.0, tz=timezone.utc)) == 60.0
"""

import time as _time
from datetime import datetime
from typing import Protocol


class Clock(Protocol):
    """Protocol for injectable time sources."""

    def now(self) -> float:
        """Return current time as Unix timestamp (seconds since epoch)."""
        ...

    def monotonic(self) -> float:
        """Return monotonic clock value for measuring durations."""
        ...


class SystemClock:
    """Default clock implementation using system time."""

    def now(self) -> float:
        return _time.time()

    def monotonic(self) -> float:
        return _time.monotonic()


class FrozenClock:
    """Clock frozen at a specific time for testing.

    Example:
        clock = FrozenClock(1700000000.0)
        clock.advance(60.0)
        assert clock.now() == 1700000060.0
    """

    def __init__(
        self,
        frozen_time: float | None = None,
        frozen_monotonic: float | None = None,
    ) -> None:
        """Initialize with specific frozen times.

        Args:
            frozen_time: Unix timestamp to freeze at. Defaults to current time.
            frozen_monotonic: Monotonic value to freeze at. Defaults to 0.0.
        """
        self._time = frozen_time if frozen_time is not None else _time.time()
        self._monotonic = frozen_monotonic if frozen_monotonic is not None else 0.0

    def now(self) -> float:
        return self._time

    def monotonic(self) -> float:
        return self._monotonic

    def advance(self, seconds: float) -> None:
        """Advance both the wall-clock and monotonic values."""
        self._time += seconds
        self._monotonic += seconds


_default_clock: Clock = SystemClock()


def get_clock() -> Clock:
    """Get the current default clock."""
    return _default_clock


def set_clock(clock: Clock) -> None:
    """Set the default clock (primarily for testing)."""
    global _default_clock
    _default_clock = clock


def reset_clock() -> None:
    """Reset the default clock to SystemClock."""
    global _default_clock
    _default_clock = SystemClock()


def seconds_since(moment: datetime) -> float:
    """
    Seconds elapsed between ``moment`` and the current clock time.

    Args:
        moment: A timezone-aware datetime.

    Returns:
        Elapsed seconds, never negative.
    """
    return max(0.0, get_clock().now() - moment.timestamp())

"""Process-wide state helpers for brigterm."""

from brigterm.state.clock import Clock
from brigterm.state.clock import FrozenClock
from brigterm.state.clock import SystemClock
from brigterm.state.clock import get_clock
from brigterm.state.clock import reset_clock
from brigterm.state.clock import seconds_since
from brigterm.state.clock import set_clock

__all__ = [
    "Clock",
    "FrozenClock",
    "SystemClock",
    "get_clock",
    "reset_clock",
    "seconds_since",
    "set_clock",
]

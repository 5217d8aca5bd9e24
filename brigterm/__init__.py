"""Brigterm: a terminal dashboard for Brigade projects, events, jobs and logs."""

from importlib.metadata import version

from brigterm.client import APIClient
from brigterm.client import BrigadeClient
from brigterm.config import Settings
from brigterm.config import load_settings
from brigterm.log_tailer import LogTailer
from brigterm.log_tailer import LogTailState
from brigterm.pagination import PaginationCursorStack
from brigterm.router import RefreshSession
from brigterm.router import Router

__version__ = version("brigterm")

__all__ = [
    "APIClient",
    "BrigadeClient",
    "LogTailState",
    "LogTailer",
    "PaginationCursorStack",
    "RefreshSession",
    "Router",
    "Settings",
    "load_settings",
]

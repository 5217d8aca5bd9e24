"""Centralized constants for brigterm.

This module consolidates configuration constants and magic numbers
used across multiple modules to ensure consistency and make tuning easier.
"""

from pathlib import Path

# =============================================================================
# Refresh Configuration
# =============================================================================

#: Minimum refresh interval in seconds (fastest)
MIN_REFRESH_INTERVAL: float = 0.5

#: Maximum refresh interval in seconds (slowest)
MAX_REFRESH_INTERVAL: float = 60.0

#: Default interval between auto-refresh ticks of the visible page
DEFAULT_REFRESH_INTERVAL: float = 2.0

# =============================================================================
# Listing and Streaming
# =============================================================================

#: Number of events fetched per page on the project page
EVENTS_PAGE_SIZE: int = 20

#: Seconds to wait on the cancellation token between polls of open log sources
SOURCE_POLL_INTERVAL: float = 0.05

#: Timeout in seconds for non-streaming API requests
REQUEST_TIMEOUT: float = 30.0

# =============================================================================
# Configuration Sources
# =============================================================================

#: Config file written by `brig login`
CONFIG_PATH: Path = Path.home() / ".brigade" / "config"

#: Environment variable overriding the API address
ENV_SERVER: str = "BRIGADE_SERVER"

#: Environment variable overriding the API token
ENV_TOKEN: str = "BRIGADE_API_TOKEN"

#: Environment variable disabling TLS certificate verification when truthy
ENV_INSECURE: str = "BRIGADE_INSECURE"

#: Default log file (the TUI owns the terminal, so logs never go to stderr)
DEFAULT_LOG_FILE: Path = Path.home() / ".brigterm" / "brigterm.log"

"""File logging for the dashboard.

The TUI owns the terminal, so diagnostics go to a file instead of stderr.
"""

import logging
from pathlib import Path

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(message)s"


def setup_logging(log_file: Path, level: str = "INFO") -> logging.FileHandler:
    """
    Send the ``brigterm`` logger's records to ``log_file``.

    Args:
        log_file: File to append to; parent directories are created.
        level: Logging level name.

    Returns:
        The installed handler.

    Raises:
        ValueError: If ``level`` is not a logging level name.
    """
    numeric = logging.getLevelName(level.upper())
    if not isinstance(numeric, int):
        raise ValueError(f"Unknown log level: {level}")

    log_file.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(log_file, mode="a")
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    logger = logging.getLogger("brigterm")
    logger.addHandler(handler)
    logger.setLevel(numeric)
    logger.propagate = False
    return handler

"""Command-line entry point for brigterm."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from rich.console import Console

from brigterm import __version__
from brigterm.client import BrigadeClient
from brigterm.config import load_settings
from brigterm.exceptions import ConfigurationError
from brigterm.log import setup_logging
from brigterm.tui import Dashboard

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="brigterm",
        description="Terminal dashboard for Brigade projects, events, jobs and logs.",
    )
    parser.add_argument("--server", "-s", help="Address of the Brigade API server")
    parser.add_argument("--token", help="API token (defaults to the one saved by `brig login`)")
    parser.add_argument(
        "--insecure",
        "-k",
        action="store_true",
        default=None,
        help="Ignore TLS certificate errors",
    )
    parser.add_argument(
        "--refresh-interval",
        type=float,
        help="Seconds between automatic refreshes of the current page",
    )
    parser.add_argument("--log-file", type=Path, help="File to write diagnostic logs to")
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        type=str.upper,
        help="Diagnostic log level",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def main(argv: list[str] | None = None) -> int:
    """Parse arguments, load settings and run the dashboard. Returns the exit status."""
    args = build_parser().parse_args(argv)
    console = Console()
    overrides = {
        "api_address": args.server,
        "api_token": args.token,
        "ignore_cert_errors": args.insecure,
        "refresh_interval": args.refresh_interval,
        "log_file": args.log_file,
        "log_level": args.log_level,
    }
    try:
        settings = load_settings(overrides)
    except ConfigurationError as e:
        console.print(f"[red]Error:[/red] {e}")
        return 1

    setup_logging(settings.log_file, settings.log_level)
    logger.info("Starting brigterm %s against %s", __version__, settings.api_address)

    client = BrigadeClient(
        settings.api_address,
        token=settings.api_token,
        ignore_cert_errors=settings.ignore_cert_errors,
    )
    Dashboard(
        client,
        server=settings.api_address,
        refresh_interval=settings.refresh_interval,
        console=console,
    ).run()
    return 0


if __name__ == "__main__":
    sys.exit(main())

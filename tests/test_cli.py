"""Tests for the command-line entry point and logging setup."""

import logging
from collections.abc import Generator
from pathlib import Path
from unittest.mock import patch

import pytest

from brigterm.cli import build_parser
from brigterm.cli import main
from brigterm.config import Settings
from brigterm.exceptions import ConfigurationError
from brigterm.log import setup_logging


class TestBuildParser:
    """Tests for argument parsing."""

    def test_defaults_are_none(self) -> None:
        args = build_parser().parse_args([])
        assert args.server is None
        assert args.insecure is None
        assert args.refresh_interval is None

    def test_all_flags(self, tmp_path: Path) -> None:
        args = build_parser().parse_args(
            [
                "--server",
                "https://brigade.example.com",
                "--token",
                "t",
                "--insecure",
                "--refresh-interval",
                "5",
                "--log-file",
                str(tmp_path / "b.log"),
                "--log-level",
                "debug",
            ]
        )
        assert args.server == "https://brigade.example.com"
        assert args.insecure is True
        assert args.refresh_interval == 5.0
        assert args.log_file == tmp_path / "b.log"
        assert args.log_level == "DEBUG"

    def test_version(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as exc_info:
            build_parser().parse_args(["--version"])
        assert exc_info.value.code == 0
        assert "brigterm" in capsys.readouterr().out


class TestMain:
    """Tests for main()."""

    def test_configuration_error_exits_1(self) -> None:
        with patch("brigterm.cli.load_settings", side_effect=ConfigurationError("api_address", "no address")):
            assert main([]) == 1

    def test_runs_dashboard(self, tmp_path: Path) -> None:
        settings = Settings(
            api_address="https://brigade.example.com",
            api_token="t",
            refresh_interval=3.0,
            log_file=tmp_path / "b.log",
        )
        with (
            patch("brigterm.cli.load_settings", return_value=settings) as load,
            patch("brigterm.cli.setup_logging") as logging_setup,
            patch("brigterm.cli.BrigadeClient") as client_cls,
            patch("brigterm.cli.Dashboard") as dashboard_cls,
        ):
            assert main(["--server", "https://brigade.example.com"]) == 0

        assert load.call_args.args[0]["api_address"] == "https://brigade.example.com"
        logging_setup.assert_called_once_with(tmp_path / "b.log", "INFO")
        client_cls.assert_called_once_with(
            "https://brigade.example.com", token="t", ignore_cert_errors=False
        )
        dashboard_cls.return_value.run.assert_called_once()
        assert dashboard_cls.call_args.kwargs["refresh_interval"] == 3.0


@pytest.fixture
def restore_brigterm_logger() -> Generator[logging.Logger, None, None]:
    logger = logging.getLogger("brigterm")
    handlers = list(logger.handlers)
    level = logger.level
    yield logger
    for handler in list(logger.handlers):
        if handler not in handlers:
            handler.close()
            logger.removeHandler(handler)
    logger.setLevel(level)
    logger.propagate = True


class TestSetupLogging:
    """Tests for setup_logging."""

    def test_writes_to_file(self, tmp_path: Path, restore_brigterm_logger: logging.Logger) -> None:
        log_file = tmp_path / "nested" / "brigterm.log"
        handler = setup_logging(log_file, "debug")
        logging.getLogger("brigterm.pages").warning("page %s failed", "demo")
        handler.flush()

        content = log_file.read_text()
        assert "| WARNING | page demo failed" in content
        assert restore_brigterm_logger.level == logging.DEBUG

    def test_unknown_level(self, tmp_path: Path, restore_brigterm_logger: logging.Logger) -> None:
        with pytest.raises(ValueError):
            setup_logging(tmp_path / "b.log", "LOUD")

    def test_handler_type(self, tmp_path: Path, restore_brigterm_logger: logging.Logger) -> None:
        handler = setup_logging(tmp_path / "b.log")
        assert isinstance(handler, logging.FileHandler)
        assert handler in restore_brigterm_logger.handlers


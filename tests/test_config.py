"""Tests for settings loading."""

import json
from pathlib import Path

import pytest

from brigterm.config import clamp_refresh_interval
from brigterm.config import load_settings
from brigterm.config import read_config_file
from brigterm.constants import MAX_REFRESH_INTERVAL
from brigterm.constants import MIN_REFRESH_INTERVAL
from brigterm.exceptions import ConfigurationError
from brigterm.exceptions import InvalidConfigError


@pytest.fixture
def config_path(tmp_path: Path) -> Path:
    path = tmp_path / "config"
    path.write_text(
        json.dumps(
            {
                "apiAddress": "https://from-file.example.com",
                "apiToken": "file-token",
                "ignoreCertErrors": True,
            }
        )
    )
    return path


class TestReadConfigFile:
    """Tests for read_config_file."""

    def test_missing_file(self, tmp_path: Path) -> None:
        assert read_config_file(tmp_path / "absent") == {}

    def test_malformed_file(self, tmp_path: Path) -> None:
        path = tmp_path / "config"
        path.write_text("{not json")
        with pytest.raises(InvalidConfigError) as exc_info:
            read_config_file(path)
        assert exc_info.value.path == path

    def test_non_object(self, tmp_path: Path) -> None:
        path = tmp_path / "config"
        path.write_text("[1, 2]")
        with pytest.raises(InvalidConfigError):
            read_config_file(path)


class TestLoadSettings:
    """Tests for load_settings."""

    def test_from_file(self, config_path: Path) -> None:
        settings = load_settings(config_path=config_path, environ={})
        assert settings.api_address == "https://from-file.example.com"
        assert settings.api_token == "file-token"
        assert settings.ignore_cert_errors is True

    def test_environment_overrides_file(self, config_path: Path) -> None:
        env = {
            "BRIGADE_SERVER": "https://from-env.example.com",
            "BRIGADE_API_TOKEN": "env-token",
            "BRIGADE_INSECURE": "false",
        }
        settings = load_settings(config_path=config_path, environ=env)
        assert settings.api_address == "https://from-env.example.com"
        assert settings.api_token == "env-token"
        assert settings.ignore_cert_errors is False

    def test_overrides_win(self, config_path: Path) -> None:
        env = {"BRIGADE_SERVER": "https://from-env.example.com"}
        settings = load_settings(
            {"api_address": "https://from-flag.example.com", "api_token": None},
            config_path=config_path,
            environ=env,
        )
        assert settings.api_address == "https://from-flag.example.com"
        assert settings.api_token == "file-token"

    def test_missing_address(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigurationError) as exc_info:
            load_settings(config_path=tmp_path / "absent", environ={})
        assert exc_info.value.parameter == "api_address"

    def test_refresh_interval_clamped(self, tmp_path: Path) -> None:
        settings = load_settings(
            {"api_address": "https://x", "refresh_interval": 0.01},
            config_path=tmp_path / "absent",
            environ={},
        )
        assert settings.refresh_interval == MIN_REFRESH_INTERVAL

    def test_log_file_is_path(self, tmp_path: Path) -> None:
        settings = load_settings(
            {"api_address": "https://x", "log_file": str(tmp_path / "out.log")},
            config_path=tmp_path / "absent",
            environ={},
        )
        assert settings.log_file == tmp_path / "out.log"


class TestClampRefreshInterval:
    """Tests for clamp_refresh_interval."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [(0.0, MIN_REFRESH_INTERVAL), (2.0, 2.0), (600.0, MAX_REFRESH_INTERVAL)],
    )
    def test_clamp(self, value: float, expected: float) -> None:
        assert clamp_refresh_interval(value) == expected

"""Runtime settings assembled from the Brigade CLI config, the environment and flags."""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from brigterm.constants import CONFIG_PATH
from brigterm.constants import DEFAULT_LOG_FILE
from brigterm.constants import DEFAULT_REFRESH_INTERVAL
from brigterm.constants import ENV_INSECURE
from brigterm.constants import ENV_SERVER
from brigterm.constants import ENV_TOKEN
from brigterm.constants import MAX_REFRESH_INTERVAL
from brigterm.constants import MIN_REFRESH_INTERVAL
from brigterm.exceptions import ConfigurationError
from brigterm.exceptions import InvalidConfigError

logger = logging.getLogger(__name__)

_TRUTHY = frozenset({"1", "true", "yes", "on"})


@dataclass
class Settings:
    """
    Everything the dashboard needs to start.

    Attributes:
        api_address: Base URL of the Brigade API server.
        api_token: Bearer token, or None for anonymous access.
        ignore_cert_errors: Skip TLS certificate verification.
        refresh_interval: Seconds between auto-refresh ticks.
        log_file: Where diagnostic logs are written.
        log_level: Name of the logging level.
    """

    api_address: str
    api_token: str | None = None
    ignore_cert_errors: bool = False
    refresh_interval: float = DEFAULT_REFRESH_INTERVAL
    log_file: Path = DEFAULT_LOG_FILE
    log_level: str = "INFO"


def clamp_refresh_interval(value: float) -> float:
    """Keep a refresh interval within the supported bounds."""
    return max(MIN_REFRESH_INTERVAL, min(MAX_REFRESH_INTERVAL, value))


def _parse_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in _TRUTHY


def read_config_file(path: Path) -> dict[str, Any]:
    """
    Read the JSON config file written by ``brig login``.

    A missing file yields an empty mapping.

    Raises:
        InvalidConfigError: If the file exists but is not a JSON object.
    """
    if not path.exists():
        return {}
    try:
        data = json.loads(path.read_text())
    except (OSError, json.JSONDecodeError) as e:
        raise InvalidConfigError(path, cause=e) from e
    if not isinstance(data, dict):
        raise InvalidConfigError(path, "Expected a JSON object")
    return data


def load_settings(
    overrides: Mapping[str, Any] | None = None,
    config_path: Path = CONFIG_PATH,
    environ: Mapping[str, str] | None = None,
) -> Settings:
    """
    Build settings from the config file, the environment and explicit overrides.

    Later sources win: the config file is read first, then ``BRIGADE_*``
    environment variables, then ``overrides`` (typically command-line flags).
    Override values of None are ignored.

    Args:
        overrides: Settings field names mapped to values.
        config_path: Brigade CLI config file.
        environ: Environment to read; defaults to ``os.environ``.

    Returns:
        The merged settings.

    Raises:
        ConfigurationError: If no API address is configured.
        InvalidConfigError: If the config file is malformed.
    """
    env = os.environ if environ is None else environ
    values: dict[str, Any] = {}

    file_values = read_config_file(config_path)
    if file_values:
        logger.debug("Loaded settings from %s", config_path)
    if file_values.get("apiAddress"):
        values["api_address"] = file_values["apiAddress"]
    if file_values.get("apiToken"):
        values["api_token"] = file_values["apiToken"]
    if "ignoreCertErrors" in file_values:
        values["ignore_cert_errors"] = _parse_bool(file_values["ignoreCertErrors"])

    if env.get(ENV_SERVER):
        values["api_address"] = env[ENV_SERVER]
    if env.get(ENV_TOKEN):
        values["api_token"] = env[ENV_TOKEN]
    if env.get(ENV_INSECURE):
        values["ignore_cert_errors"] = _parse_bool(env[ENV_INSECURE])

    for key, value in (overrides or {}).items():
        if value is not None:
            values[key] = value

    if not values.get("api_address"):
        raise ConfigurationError(
            "api_address",
            f"No API address configured; run `brig login`, set {ENV_SERVER}, or pass --server",
        )

    settings = Settings(**values)
    clamped = clamp_refresh_interval(float(settings.refresh_interval))
    if clamped != settings.refresh_interval:
        logger.warning("Refresh interval %s clamped to %s", settings.refresh_interval, clamped)
    settings.refresh_interval = clamped
    settings.log_file = Path(settings.log_file)
    return settings

"""Centralize defaults and environment lookups for the weather lookup runtime."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Dict, Mapping

from dotenv import load_dotenv

load_dotenv()

# ---------------------------------------------------------------------------
# Default configuration values
# ---------------------------------------------------------------------------
_DEFAULT_GEOCODING_URL = "https://geocoding-api.open-meteo.com/v1/search"
_DEFAULT_FORECAST_URL = "https://api.open-meteo.com/v1/forecast"
_DEFAULT_HTTP_TIMEOUT: float = 8.0
_DEFAULT_MATCH_POLICY = "loose"
_MATCH_POLICIES = {"strict", "loose"}
_DEFAULT_USER_AGENT = "meteo-lookup/1.0"
_DEFAULT_LOGGING_ENABLED: bool = True
_DEFAULT_LOG_DIR = "logs"
_LOOKUP_LOG_FILENAME = "lookups.jsonl"
_DEFAULT_LOG_MAX_BYTES = 1_000_000
_DEFAULT_LOG_BACKUP_COUNT = 5
_DEFAULT_WEB_UI_HOST = "127.0.0.1"
_DEFAULT_WEB_UI_PORT = 9000


def _source(env: Dict[str, str] | None) -> Mapping[str, str]:
    return env if env is not None else os.environ


# ---------------------------------------------------------------------------
# Upstream services
# ---------------------------------------------------------------------------
def get_geocoding_url(env: Dict[str, str] | None = None) -> str:
    """Return the Open-Meteo geocoding search endpoint."""

    override = (_source(env).get("WEATHER_GEOCODING_URL") or "").strip()
    return override or _DEFAULT_GEOCODING_URL


def get_forecast_url(env: Dict[str, str] | None = None) -> str:
    """Return the Open-Meteo forecast endpoint."""

    override = (_source(env).get("WEATHER_FORECAST_URL") or "").strip()
    return override or _DEFAULT_FORECAST_URL


def get_http_timeout(env: Dict[str, str] | None = None) -> float:
    """Return the per-request timeout in seconds.

    Args:
        env: Optional mapping used instead of ``os.environ`` to simplify testing.

    Returns:
        The configured timeout, or the default when unset, unparsable, or not
        strictly positive.
    """

    raw = _source(env).get("WEATHER_HTTP_TIMEOUT")
    if not raw:
        return _DEFAULT_HTTP_TIMEOUT
    try:
        value = float(raw)
    except ValueError:
        return _DEFAULT_HTTP_TIMEOUT
    return value if value > 0 else _DEFAULT_HTTP_TIMEOUT


def get_match_policy(env: Dict[str, str] | None = None) -> str:
    """Return ``"strict"`` or ``"loose"`` for geocoding candidate matching."""

    raw = (_source(env).get("WEATHER_MATCH_POLICY") or "").strip().lower()
    return raw if raw in _MATCH_POLICIES else _DEFAULT_MATCH_POLICY


def get_user_agent(env: Dict[str, str] | None = None) -> str:
    return (_source(env).get("WEATHER_USER_AGENT") or "").strip() or _DEFAULT_USER_AGENT


# ---------------------------------------------------------------------------
# Lookup log settings
# ---------------------------------------------------------------------------
def is_logging_enabled(env: Dict[str, str] | None = None) -> bool:
    """Determine whether per-lookup JSONL logging is active."""

    raw = _source(env).get("LOGGING_ENABLED")
    if raw is None:
        return _DEFAULT_LOGGING_ENABLED

    normalized = raw.strip().lower()
    if normalized in {"0", "false", "no", "off"}:
        return False
    if normalized in {"1", "true", "yes", "on"}:
        return True
    return _DEFAULT_LOGGING_ENABLED


def get_log_dir(env: Dict[str, str] | None = None) -> Path:
    """Return the base directory for lookup logs."""

    override = _source(env).get("LOG_DIR")
    return Path(override) if override else Path(_DEFAULT_LOG_DIR)


def get_lookup_log_path(env: Dict[str, str] | None = None) -> Path:
    """Return the full path for the lookup log JSONL file."""

    return get_log_dir(env) / _LOOKUP_LOG_FILENAME


def get_log_max_bytes(env: Dict[str, str] | None = None) -> int:
    """Return the rotation threshold for the lookup log (0 disables rotation)."""

    raw = _source(env).get("LOG_MAX_BYTES")
    if not raw:
        return _DEFAULT_LOG_MAX_BYTES
    try:
        value = int(raw)
    except ValueError:
        return _DEFAULT_LOG_MAX_BYTES
    return max(0, value)


def get_log_backup_count(env: Dict[str, str] | None = None) -> int:
    """Return how many rotated lookup log files to keep."""

    raw = _source(env).get("LOG_BACKUP_COUNT")
    if not raw:
        return _DEFAULT_LOG_BACKUP_COUNT
    try:
        value = int(raw)
    except ValueError:
        return _DEFAULT_LOG_BACKUP_COUNT
    return max(0, value)


# ---------------------------------------------------------------------------
# Web UI
# ---------------------------------------------------------------------------
def get_web_ui_host(env: Dict[str, str] | None = None) -> str:
    return _source(env).get("WEB_UI_HOST") or _DEFAULT_WEB_UI_HOST


def get_web_ui_port(env: Dict[str, str] | None = None) -> int:
    raw = _source(env).get("WEB_UI_PORT")
    if not raw:
        return _DEFAULT_WEB_UI_PORT
    try:
        return int(raw)
    except ValueError:
        return _DEFAULT_WEB_UI_PORT

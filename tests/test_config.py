from pathlib import Path

from app import config


def test_defaults_when_environment_is_empty():
    env: dict[str, str] = {}

    assert config.get_geocoding_url(env) == "https://geocoding-api.open-meteo.com/v1/search"
    assert config.get_forecast_url(env) == "https://api.open-meteo.com/v1/forecast"
    assert config.get_http_timeout(env) == 8.0
    assert config.get_match_policy(env) == "loose"
    assert config.is_logging_enabled(env) is True
    assert config.get_lookup_log_path(env) == Path("logs") / "lookups.jsonl"
    assert config.get_web_ui_port(env) == 9000


def test_overrides_are_respected():
    env = {
        "WEATHER_GEOCODING_URL": "http://localhost:8080/search",
        "WEATHER_HTTP_TIMEOUT": "2.5",
        "WEATHER_MATCH_POLICY": " STRICT ",
        "LOGGING_ENABLED": "off",
        "LOG_DIR": "/tmp/weather",
        "LOG_MAX_BYTES": "2048",
        "LOG_BACKUP_COUNT": "1",
    }

    assert config.get_geocoding_url(env) == "http://localhost:8080/search"
    assert config.get_http_timeout(env) == 2.5
    assert config.get_match_policy(env) == "strict"
    assert config.is_logging_enabled(env) is False
    assert config.get_lookup_log_path(env) == Path("/tmp/weather/lookups.jsonl")
    assert config.get_log_max_bytes(env) == 2048
    assert config.get_log_backup_count(env) == 1


def test_invalid_values_fall_back_to_defaults():
    env = {
        "WEATHER_HTTP_TIMEOUT": "-1",
        "WEATHER_MATCH_POLICY": "fuzzy",
        "LOGGING_ENABLED": "maybe",
        "LOG_MAX_BYTES": "lots",
        "WEB_UI_PORT": "http",
    }

    assert config.get_http_timeout(env) == 8.0
    assert config.get_match_policy(env) == "loose"
    assert config.is_logging_enabled(env) is True
    assert config.get_log_max_bytes(env) == 1_000_000
    assert config.get_web_ui_port(env) == 9000

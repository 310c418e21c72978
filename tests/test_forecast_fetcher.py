import pytest
import requests

import core.forecast_fetcher as fetcher
from core.errors import ForecastTransportError, IncompleteForecastError, NoCurrentDataError
from core.forecast_fetcher import ForecastDay
from core.location_resolver import Coordinate

KRAKOW = Coordinate(latitude=50.0614, longitude=19.9366, name="Kraków")

SEVEN_DAYS = {
    "daily": {
        "time": [f"2024-06-0{day}" for day in range(1, 8)],
        "temperature_2m_max": [21.5, 22.0, 23.1, 19.8, 18.0, 25.4, 26.0],
        "temperature_2m_min": [11.0, 12.3, 13.0, 10.1, 9.5, 14.2, 15.0],
        "weathercode": [0, 61, 3, 95, 2, 1, 45],
    }
}


class FakeResponse:
    def __init__(self, payload=None, status_code: int = 200) -> None:
        self._payload = payload
        self.status_code = status_code

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 400

    def json(self):
        return self._payload


def _install(monkeypatch, response):
    calls = []

    def fake_get(url, **kwargs):
        calls.append((url, kwargs))
        if isinstance(response, Exception):
            raise response
        return response

    monkeypatch.setattr(fetcher, "http_get", fake_get)
    return calls


def test_fetch_current_returns_temperature_unmodified(monkeypatch):
    calls = _install(monkeypatch, FakeResponse({"current_weather": {"temperature": 25, "weathercode": 0}}))

    assert fetcher.fetch_current(KRAKOW) == 25
    assert len(calls) == 1
    url, kwargs = calls[0]
    assert url == "https://api.open-meteo.com/v1/forecast"
    assert kwargs["params"] == {"latitude": 50.0614, "longitude": 19.9366, "current_weather": "true"}


def test_fetch_current_without_block_fails(monkeypatch):
    _install(monkeypatch, FakeResponse({"latitude": 50.06}))

    with pytest.raises(NoCurrentDataError) as excinfo:
        fetcher.fetch_current(KRAKOW)

    assert excinfo.value.user_message == "Weather data not found for this location"


def test_fetch_current_without_temperature_fails(monkeypatch):
    _install(monkeypatch, FakeResponse({"current_weather": {"windspeed": 3.2}}))

    with pytest.raises(NoCurrentDataError):
        fetcher.fetch_current(KRAKOW)


def test_fetch_current_http_error(monkeypatch):
    _install(monkeypatch, FakeResponse(status_code=500))

    with pytest.raises(ForecastTransportError) as excinfo:
        fetcher.fetch_current(KRAKOW)

    assert excinfo.value.user_message == "Failed to fetch weather data"


def test_fetch_five_day_truncates_to_first_five(monkeypatch):
    calls = _install(monkeypatch, FakeResponse(SEVEN_DAYS))

    days = fetcher.fetch_five_day(KRAKOW)

    assert len(days) == 5
    assert [day.date for day in days] == ["2024-06-01", "2024-06-02", "2024-06-03", "2024-06-04", "2024-06-05"]
    assert days[1] == ForecastDay(date="2024-06-02", temperature_min=12.3, temperature_max=22.0, weather_code=61)
    assert days[1].description == "Slight rain"
    params = calls[0][1]["params"]
    assert params["daily"] == "temperature_2m_max,temperature_2m_min,weathercode"
    assert params["timezone"] == "auto"


def test_fetch_five_day_missing_weathercode(monkeypatch):
    payload = {"daily": {key: value for key, value in SEVEN_DAYS["daily"].items() if key != "weathercode"}}
    _install(monkeypatch, FakeResponse(payload))

    with pytest.raises(IncompleteForecastError) as excinfo:
        fetcher.fetch_five_day(KRAKOW)

    assert excinfo.value.user_message == "Incomplete weather data received"


def test_fetch_five_day_missing_daily_block(monkeypatch):
    _install(monkeypatch, FakeResponse({"latitude": 50.06}))

    with pytest.raises(IncompleteForecastError):
        fetcher.fetch_five_day(KRAKOW)


def test_fetch_five_day_short_series_is_incomplete(monkeypatch):
    payload = {"daily": {key: value[:3] for key, value in SEVEN_DAYS["daily"].items()}}
    _install(monkeypatch, FakeResponse(payload))

    with pytest.raises(IncompleteForecastError):
        fetcher.fetch_five_day(KRAKOW)


def test_fetch_five_day_transport_failure(monkeypatch):
    _install(monkeypatch, requests.Timeout("slow"))

    with pytest.raises(ForecastTransportError) as excinfo:
        fetcher.fetch_five_day(KRAKOW)

    assert excinfo.value.user_message == "Failed to fetch weather forecast"

"""Fetch current conditions or a five-day daily summary from Open-Meteo."""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from numbers import Real
from typing import Any, Dict, List, Optional, Tuple

import requests

from app.config import get_forecast_url
from core.errors import ForecastTransportError, IncompleteForecastError, NoCurrentDataError
from core.http_client import http_get
from core.location_resolver import Coordinate
from core.weather_codes import describe_weather_code

logger = logging.getLogger(__name__)

FORECAST_DAYS = 5
_DAILY_FIELDS = ("time", "temperature_2m_max", "temperature_2m_min", "weathercode")


@dataclass(frozen=True)
class ForecastDay:
    """One row of the five-day table, values as returned upstream."""

    date: str
    temperature_min: Any
    temperature_max: Any
    weather_code: Any

    @property
    def description(self) -> str:
        return describe_weather_code(self.weather_code)

    def to_dict(self) -> Dict[str, Any]:
        payload = asdict(self)
        payload["description"] = self.description
        return payload


def fetch_current(coord: Coordinate, *, timeout: Optional[float] = None) -> float:
    """Return ``current_weather.temperature`` for ``coord`` without conversion."""

    params: Dict[str, Any] = {**coord.as_params(), "current_weather": "true"}
    data = _get_json(params, timeout=timeout, failure_message="Failed to fetch weather data")

    current = data.get("current_weather") if isinstance(data, dict) else None
    if not isinstance(current, dict):
        raise NoCurrentDataError()
    temperature = current.get("temperature")
    if not isinstance(temperature, Real) or isinstance(temperature, bool):
        raise NoCurrentDataError()
    return temperature


def fetch_five_day(coord: Coordinate, *, timeout: Optional[float] = None) -> Tuple[ForecastDay, ...]:
    """Return exactly ``FORECAST_DAYS`` daily records, in upstream order.

    Open-Meteo returns seven days by default; only the first five entries of
    the ``time`` axis are kept. Shorter series raise ``IncompleteForecastError``
    rather than producing a partial table.
    """
    params: Dict[str, Any] = {
        **coord.as_params(),
        "daily": ",".join(_DAILY_FIELDS[1:]),
        "timezone": "auto",
    }
    data = _get_json(params, timeout=timeout, failure_message="Failed to fetch weather forecast")

    daily = data.get("daily") if isinstance(data, dict) else None
    if not isinstance(daily, dict):
        raise IncompleteForecastError()

    series: List[List[Any]] = []
    for field_name in _DAILY_FIELDS:
        values = daily.get(field_name)
        if not isinstance(values, list):
            raise IncompleteForecastError()
        if len(values) < FORECAST_DAYS:
            logger.warning("Daily series %r has %d entries, need %d", field_name, len(values), FORECAST_DAYS)
            raise IncompleteForecastError()
        series.append(values)

    times, maxima, minima, codes = series
    return tuple(
        ForecastDay(
            date=times[index],
            temperature_min=minima[index],
            temperature_max=maxima[index],
            weather_code=codes[index],
        )
        for index in range(FORECAST_DAYS)
    )


def _get_json(params: Dict[str, Any], *, timeout: Optional[float], failure_message: str) -> Any:
    try:
        response = http_get(get_forecast_url(), params=params, timeout=timeout)
    except requests.RequestException as exc:
        logger.warning("Forecast request failed: %s", exc)
        raise ForecastTransportError(failure_message) from exc

    if not response.ok:
        logger.warning("Forecast returned HTTP %s", response.status_code)
        raise ForecastTransportError(failure_message)

    try:
        return response.json()
    except ValueError as exc:
        raise ForecastTransportError(failure_message) from exc

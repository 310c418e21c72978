"""Weather tool entry points for current conditions and five-day forecasts.

The module separates the pipeline calls (resolve, then fetch) from the
formatting helpers that turn structured results into display text. Every
failure is converted here into a single ``{"error", "message"}`` result so
callers never see partial data or raw exception detail.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List

from core import forecast_fetcher, location_resolver
from core.errors import GENERIC_ERROR_MESSAGE, WeatherLookupError

logger = logging.getLogger(__name__)

CURRENT_TOOL = "current_weather"
FORECAST_TOOL = "five_day_forecast"


# --- Orchestrator-facing tool functions ------------------------------------
def run_current(payload: Dict[str, Any]) -> Dict[str, Any]:
    """Resolve ``payload["city"]`` and return its current temperature."""

    def _lookup(city: str, coord: location_resolver.Coordinate) -> Dict[str, Any]:
        temperature = forecast_fetcher.fetch_current(coord)
        return {
            "type": "weather",
            "mode": "current",
            "city": city,
            "resolved_name": coord.name,
            "latitude": coord.latitude,
            "longitude": coord.longitude,
            "temperature": temperature,
        }

    return _run_pipeline(payload, _lookup)


def run_forecast(payload: Dict[str, Any]) -> Dict[str, Any]:
    """Resolve ``payload["city"]`` and return a five-day daily forecast."""

    def _lookup(city: str, coord: location_resolver.Coordinate) -> Dict[str, Any]:
        days = forecast_fetcher.fetch_five_day(coord)
        return {
            "type": "weather",
            "mode": "forecast",
            "city": city,
            "resolved_name": coord.name,
            "latitude": coord.latitude,
            "longitude": coord.longitude,
            "days": [day.to_dict() for day in days],
        }

    return _run_pipeline(payload, _lookup)


def _run_pipeline(
    payload: Dict[str, Any],
    lookup: Callable[[str, location_resolver.Coordinate], Dict[str, Any]],
) -> Dict[str, Any]:
    city = str(payload.get("city") or payload.get("location") or "")
    try:
        coord = location_resolver.resolve(city, policy=payload.get("policy"))
        return lookup(city.strip(), coord)
    except WeatherLookupError as exc:
        return exc.to_result()
    except Exception:
        logger.exception("Unexpected failure while looking up weather for %r", city)
        return {"error": "unexpected", "message": GENERIC_ERROR_MESSAGE}


# --- Formatting helpers ----------------------------------------------------
def format_current_response(result: Dict[str, Any]) -> str:
    """Create a one-line current temperature summary."""
    if "error" in result:
        return result.get("message") or GENERIC_ERROR_MESSAGE

    city = result.get("city") or "the specified city"
    return f"Current temperature in {city}: {result.get('temperature')}°C"


def format_forecast_response(result: Dict[str, Any]) -> str:
    """Render the five-day forecast as a plain-text table."""
    if "error" in result:
        return result.get("message") or GENERIC_ERROR_MESSAGE

    headers = ("Date", "Min (°C)", "Max (°C)", "Weather")
    rows: List[tuple] = [headers]
    for day in result.get("days") or []:
        rows.append((
            str(day.get("date")),
            str(day.get("temperature_min")),
            str(day.get("temperature_max")),
            str(day.get("description")),
        ))

    widths = [max(len(row[col]) for row in rows) for col in range(len(headers))]
    lines = [f"5-day forecast for {result.get('city')}"]
    for position, row in enumerate(rows):
        lines.append("  ".join(cell.ljust(widths[col]) for col, cell in enumerate(row)).rstrip())
        if position == 0:
            lines.append("  ".join("-" * width for width in widths))
    return "\n".join(lines)

"""Error taxonomy for the location lookup and forecast pipelines.

Every failure raised by the resolver or the fetcher is a subclass of
``WeatherLookupError`` so the tool layer can convert it into exactly one
user-facing message. ``kind`` is the short identifier surfaced in structured
results and lookup logs.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

GENERIC_ERROR_MESSAGE = "An unexpected error occurred."


class WeatherLookupError(RuntimeError):
    """Base class for every terminal lookup failure."""

    kind = "lookup_error"
    default_message = GENERIC_ERROR_MESSAGE

    def __init__(self, message: Optional[str] = None) -> None:
        detail = message or self.default_message
        super().__init__(detail)
        self.user_message = detail

    def to_result(self) -> Dict[str, Any]:
        return {"error": self.kind, "message": self.user_message}


class EmptyInputError(WeatherLookupError):
    """Raised when the submitted location text is blank."""

    kind = "missing_city"
    default_message = "Please enter a city name."


class ResolutionTransportError(WeatherLookupError):
    """Raised when the geocoding request fails or returns a non-success status."""

    kind = "geocoding_failed"
    default_message = "Failed to fetch coordinates"


class LocationNotFoundError(WeatherLookupError):
    """Raised when geocoding succeeds but yields no acceptable candidate."""

    kind = "not_found"
    default_message = "City not found. Please check the spelling."


class ForecastTransportError(WeatherLookupError):
    """Raised when the weather request fails or returns a non-success status."""

    kind = "weather_failed"
    default_message = "Failed to fetch weather data"


class NoCurrentDataError(WeatherLookupError):
    """Raised when the weather response lacks a usable ``current_weather`` block."""

    kind = "no_current_data"
    default_message = "Weather data not found for this location"


class IncompleteForecastError(WeatherLookupError):
    """Raised when the daily arrays are missing, malformed, or too short."""

    kind = "incomplete_forecast"
    default_message = "Incomplete weather data received"


class InvalidPolicyError(WeatherLookupError, ValueError):
    """Raised when a caller asks for a match policy that does not exist."""

    kind = "invalid_policy"
    default_message = "Unknown match policy."

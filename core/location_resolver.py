"""Resolve free-text place names into coordinates via Open-Meteo geocoding.

The resolver issues exactly one geocoding request per call, asking for a
single candidate. Whether that candidate is accepted depends on the
``MatchPolicy``: ``LOOSE`` takes the top candidate as-is, ``STRICT`` also
requires its name to equal the query case-insensitively.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from numbers import Real
from typing import Any, Dict, Optional

import requests

from app.config import get_geocoding_url, get_match_policy
from core.errors import (
    EmptyInputError,
    InvalidPolicyError,
    LocationNotFoundError,
    ResolutionTransportError,
)
from core.http_client import http_get

logger = logging.getLogger(__name__)


class MatchPolicy(str, enum.Enum):
    STRICT = "strict"
    LOOSE = "loose"

    @classmethod
    def parse(cls, value: Any) -> "MatchPolicy":
        """Coerce ``value`` (policy, string, or ``None``) into a ``MatchPolicy``.

        ``None`` and blank strings fall back to the configured default.
        """
        if isinstance(value, MatchPolicy):
            return value
        text = str(value or "").strip().lower()
        if not text:
            return cls(get_match_policy())
        try:
            return cls(text)
        except ValueError as exc:
            raise InvalidPolicyError(f"Unknown match policy '{value}'.") from exc


@dataclass(frozen=True)
class Coordinate:
    """Geographic point produced by ``resolve`` for a single lookup."""

    latitude: float
    longitude: float
    name: Optional[str] = None

    def as_params(self) -> Dict[str, float]:
        return {"latitude": self.latitude, "longitude": self.longitude}


def resolve(
    query: str,
    *,
    policy: MatchPolicy | str | None = None,
    timeout: Optional[float] = None,
) -> Coordinate:
    """Return the coordinate of the best geocoding match for ``query``.

    Raises:
        EmptyInputError: ``query`` is blank after trimming; no request is made.
        ResolutionTransportError: the request failed or returned a non-success status.
        LocationNotFoundError: no candidate, malformed coordinates, or a strict name mismatch.
        InvalidPolicyError: ``policy`` names no known match policy.
    """
    name = (query or "").strip()
    if not name:
        raise EmptyInputError()
    match_policy = MatchPolicy.parse(policy)

    data = _fetch_candidates(name, timeout=timeout)
    results = data.get("results") if isinstance(data, dict) else None
    if not results or not isinstance(results, list):
        raise LocationNotFoundError()

    candidate = results[0]
    if not isinstance(candidate, dict):
        raise LocationNotFoundError()

    latitude = candidate.get("latitude")
    longitude = candidate.get("longitude")
    if not _is_number(latitude) or not _is_number(longitude):
        raise LocationNotFoundError()

    candidate_name = candidate.get("name")
    if match_policy is MatchPolicy.STRICT and not _names_match(candidate_name, name):
        logger.info("Rejected geocoding candidate %r for query %r", candidate_name, name)
        raise LocationNotFoundError()

    return Coordinate(
        latitude=float(latitude),
        longitude=float(longitude),
        name=candidate_name if isinstance(candidate_name, str) else None,
    )


def _fetch_candidates(name: str, *, timeout: Optional[float]) -> Any:
    try:
        response = http_get(
            get_geocoding_url(),
            params={"name": name, "count": 1},
            timeout=timeout,
        )
    except requests.RequestException as exc:
        logger.warning("Geocoding request failed for %r: %s", name, exc)
        raise ResolutionTransportError() from exc

    if not response.ok:
        logger.warning("Geocoding returned HTTP %s for %r", response.status_code, name)
        raise ResolutionTransportError()

    try:
        return response.json()
    except ValueError as exc:
        raise ResolutionTransportError() from exc


def _names_match(candidate: Any, query: str) -> bool:
    if not isinstance(candidate, str) or not candidate:
        return False
    return candidate.strip().casefold() == query.casefold()


def _is_number(value: Any) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool)

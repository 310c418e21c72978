import pytest
import requests

import core.location_resolver as resolver
from core.errors import EmptyInputError, LocationNotFoundError, ResolutionTransportError
from core.location_resolver import Coordinate, MatchPolicy


class FakeResponse:
    def __init__(self, payload=None, status_code: int = 200, invalid_json: bool = False) -> None:
        self._payload = payload
        self.status_code = status_code
        self._invalid_json = invalid_json

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 400

    def json(self):
        if self._invalid_json:
            raise ValueError("not json")
        return self._payload


def _install(monkeypatch, response):
    calls = []

    def fake_get(url, **kwargs):
        calls.append((url, kwargs))
        if isinstance(response, Exception):
            raise response
        return response

    monkeypatch.setattr(resolver, "http_get", fake_get)
    return calls


def _krakow(name: str = "Kraków"):
    return FakeResponse({"results": [{"name": name, "latitude": 50.0614, "longitude": 19.9366}]})


@pytest.mark.parametrize("query", ["", "   ", "\t\n"])
def test_blank_query_fails_without_network(monkeypatch, query):
    calls = _install(monkeypatch, _krakow())

    with pytest.raises(EmptyInputError):
        resolver.resolve(query)

    assert calls == []


def test_resolve_issues_single_request_with_count_one(monkeypatch):
    calls = _install(monkeypatch, _krakow())

    coord = resolver.resolve("  Kraków  ", policy="loose")

    assert coord == Coordinate(latitude=50.0614, longitude=19.9366, name="Kraków")
    assert len(calls) == 1
    url, kwargs = calls[0]
    assert url == "https://geocoding-api.open-meteo.com/v1/search"
    assert kwargs["params"] == {"name": "Kraków", "count": 1}


def test_zero_candidates_is_not_found(monkeypatch):
    _install(monkeypatch, FakeResponse({"results": []}))

    with pytest.raises(LocationNotFoundError) as excinfo:
        resolver.resolve("Atlantis")

    assert excinfo.value.user_message == "City not found. Please check the spelling."


def test_missing_results_key_is_not_found(monkeypatch):
    _install(monkeypatch, FakeResponse({"generationtime_ms": 0.3}))

    with pytest.raises(LocationNotFoundError):
        resolver.resolve("Atlantis")


def test_candidate_without_coordinates_is_not_found(monkeypatch):
    _install(monkeypatch, FakeResponse({"results": [{"name": "Kraków", "latitude": None}]}))

    with pytest.raises(LocationNotFoundError):
        resolver.resolve("Kraków")


@pytest.mark.parametrize("policy", [MatchPolicy.STRICT, MatchPolicy.LOOSE])
def test_case_only_difference_is_accepted_by_both_policies(monkeypatch, policy):
    _install(monkeypatch, _krakow("KRAKÓW"))

    coord = resolver.resolve("Kraków", policy=policy)

    assert (coord.latitude, coord.longitude) == (50.0614, 19.9366)


def test_strict_policy_rejects_different_name(monkeypatch):
    _install(monkeypatch, _krakow("Warszawa"))

    with pytest.raises(LocationNotFoundError):
        resolver.resolve("Kraków", policy="strict")


def test_loose_policy_accepts_top_candidate(monkeypatch):
    _install(monkeypatch, _krakow("Warszawa"))

    coord = resolver.resolve("Kraków", policy="loose")

    assert coord.name == "Warszawa"


def test_default_policy_comes_from_config(monkeypatch):
    monkeypatch.setenv("WEATHER_MATCH_POLICY", "strict")
    _install(monkeypatch, _krakow("Warszawa"))

    with pytest.raises(LocationNotFoundError):
        resolver.resolve("Kraków")


def test_unknown_policy_is_rejected():
    with pytest.raises(ValueError):
        MatchPolicy.parse("fuzzy")


def test_non_success_status_is_transport_error(monkeypatch):
    _install(monkeypatch, FakeResponse(status_code=503))

    with pytest.raises(ResolutionTransportError) as excinfo:
        resolver.resolve("Kraków")

    assert excinfo.value.user_message == "Failed to fetch coordinates"


def test_connection_error_is_transport_error(monkeypatch):
    _install(monkeypatch, requests.ConnectionError("boom"))

    with pytest.raises(ResolutionTransportError) as excinfo:
        resolver.resolve("Kraków")

    assert isinstance(excinfo.value.__cause__, requests.ConnectionError)


def test_invalid_json_is_transport_error(monkeypatch):
    _install(monkeypatch, FakeResponse(invalid_json=True))

    with pytest.raises(ResolutionTransportError):
        resolver.resolve("Kraków")

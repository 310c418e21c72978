"""FastAPI application serving the weather lookup page and JSON endpoints."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Union

from fastapi import FastAPI, HTTPException, Query
from fastapi.responses import HTMLResponse
from pydantic import BaseModel

from app.main import build_orchestrator
from core.errors import EmptyInputError
from core.lookup_state import LookupSession, LookupSnapshot, LookupStatus
from core.orchestrator import LookupOrchestrator, LookupResponse

logger = logging.getLogger(__name__)

_POLICIES = {"strict", "loose"}

_INDEX_HTML = """<!doctype html>
<html lang="en">
<head>
  <meta charset="utf-8">
  <title>Weather Checker (Open-Meteo)</title>
</head>
<body>
  <h2>Weather Checker (Open-Meteo)</h2>
  <form id="lookup">
    <input id="city" type="text" placeholder="Enter city name">
    <button type="submit" data-mode="current">Get weather</button>
    <button type="submit" data-mode="forecast">Get forecast</button>
  </form>
  <p id="status"></p>
  <pre id="output"></pre>
  <script>
    const form = document.getElementById("lookup");
    const status = document.getElementById("status");
    const output = document.getElementById("output");
    form.addEventListener("submit", async (event) => {
      event.preventDefault();
      const mode = event.submitter ? event.submitter.dataset.mode : "current";
      const city = document.getElementById("city").value;
      output.textContent = "";
      status.textContent = "Loading...";
      const response = await fetch(`/api/weather/${mode}?city=${encodeURIComponent(city)}`);
      const body = await response.json();
      status.textContent = "";
      output.textContent = body.text || body.detail || "An unexpected error occurred.";
    });
  </script>
</body>
</html>
"""


Number = Union[int, float]


class ForecastDayPayload(BaseModel):
    date: str
    temperature_min: Optional[Number] = None
    temperature_max: Optional[Number] = None
    weather_code: Optional[int] = None
    description: str


class LookupPayload(BaseModel):
    success: bool
    status: str
    text: str
    city: str
    mode: str
    error: Optional[str] = None
    temperature: Optional[Number] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    days: List[ForecastDayPayload] = []
    latency_ms: int


def _format_response(snapshot: LookupSnapshot, response: LookupResponse, mode: str) -> LookupPayload:
    """Reshape a settled session into the JSON contract used by the page.

    ``status`` and ``text`` come from the session snapshot; structured fields
    come from the tool result carried by ``response``.
    """
    result: Dict[str, Any] = response.result
    if snapshot.status is LookupStatus.SUCCEEDED:
        text = snapshot.result.text
    else:
        text = snapshot.error_message or response.text
    return LookupPayload(
        success=snapshot.status is LookupStatus.SUCCEEDED,
        status=snapshot.status.value,
        text=text,
        city=response.city,
        mode=mode,
        error=result.get("error"),
        temperature=result.get("temperature"),
        latitude=result.get("latitude"),
        longitude=result.get("longitude"),
        days=[ForecastDayPayload(**day) for day in result.get("days") or []],
        latency_ms=response.latency_ms,
    )


def _validate_request(city: str, policy: Optional[str]) -> Optional[str]:
    if not (city or "").strip():
        raise HTTPException(status_code=400, detail=EmptyInputError().user_message)
    if policy is None:
        return None
    normalized = policy.strip().lower()
    if normalized not in _POLICIES:
        raise HTTPException(status_code=400, detail=f"Unknown match policy '{policy}'.")
    return normalized


def create_app(orchestrator: Optional[LookupOrchestrator] = None) -> FastAPI:
    """Instantiate FastAPI with the same orchestrator wiring the CLI uses.

    Tests pass a prebuilt ``orchestrator`` with stubbed tools.
    """
    orch = orchestrator or build_orchestrator()

    app = FastAPI(title="Weather Lookup API", version="1.0.0")
    app.state.orchestrator = orch

    @app.get("/", response_class=HTMLResponse)
    def root() -> str:
        return _INDEX_HTML

    @app.get("/api/health")
    def health_check() -> Dict[str, Any]:
        return {
            "status": "ok",
            "timestamp": datetime.now(tz=timezone.utc).isoformat(),
        }

    @app.get("/api/weather/current", response_model=LookupPayload)
    def current_weather(city: str = Query(""), policy: Optional[str] = Query(None)) -> LookupPayload:
        """Resolve ``city`` and return its current temperature (or a failure message)."""
        match_policy = _validate_request(city, policy)
        session = LookupSession()
        response = app.state.orchestrator.current(city, policy=match_policy, session=session)
        return _format_response(session.snapshot, response, "current")

    @app.get("/api/weather/forecast", response_model=LookupPayload)
    def five_day_forecast(city: str = Query(""), policy: Optional[str] = Query(None)) -> LookupPayload:
        """Resolve ``city`` and return exactly five forecast days (or a failure message)."""
        match_policy = _validate_request(city, policy)
        session = LookupSession()
        response = app.state.orchestrator.forecast(city, policy=match_policy, session=session)
        return _format_response(session.snapshot, response, "forecast")

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    from app.config import get_web_ui_host, get_web_ui_port

    uvicorn.run(
        "app.web_api:app",
        host=get_web_ui_host(),
        port=get_web_ui_port(),
        reload=False,
    )

"""Coordinate weather lookups between the tool registry, session, and log.

The orchestrator is the single invocation boundary for every surface (CLI and
web): it runs a registered tool, renders its result with the tool's formatter,
moves a ``LookupSession`` through its lifecycle, and records one
``LookupRecord`` per request. Surfaces read what to display from the session.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from time import perf_counter
from typing import Any, Dict, Optional

from core.errors import GENERIC_ERROR_MESSAGE, WeatherLookupError
from core.location_resolver import MatchPolicy
from core.lookup_logger import LookupLogger, LookupRecord
from core.lookup_state import LookupSession
from core.tool_registry import ToolRegistry
from tools.weather_tool import CURRENT_TOOL, FORECAST_TOOL

logger = logging.getLogger(__name__)


@dataclass
class LookupResponse:
    """Structured result for a single lookup."""

    text: str
    city: str
    tool_name: str
    result: Dict[str, Any]
    success: bool
    latency_ms: int

    @property
    def error_message(self) -> Optional[str]:
        if self.success:
            return None
        return self.result.get("message") or GENERIC_ERROR_MESSAGE


class LookupOrchestrator:
    """Runs weather tools and keeps the session + lookup log in sync."""

    def __init__(
        self,
        registry: ToolRegistry,
        *,
        logger: Optional[LookupLogger] = None,
        session: Optional[LookupSession] = None,
    ) -> None:
        self._registry = registry
        self._logger = logger
        self._session = session or LookupSession()

    @property
    def session(self) -> LookupSession:
        """Default session, used when a caller does not bring its own."""
        return self._session

    def lookup(
        self,
        tool_name: str,
        city: str,
        *,
        policy: Optional[str] = None,
        session: Optional[LookupSession] = None,
    ) -> LookupResponse:
        """Run ``tool_name`` for ``city`` and return text plus structured data.

        WHAT: one full resolve-and-fetch cycle for a submitted query.
        HOW: open a ticket on ``session`` (or the default one), reject unknown
        match policies before any tool runs, invoke the registered tool, treat
        an ``error`` key as failure, then settle the ticket and log the record.
        On success the session result is the ``LookupResponse`` itself.
        Unknown tool names raise ``KeyError`` before the session changes.
        """
        tool = self._registry.get(tool_name)
        active = session or self._session

        ticket = active.begin(city)
        started = perf_counter()
        try:
            result = self._run(tool.run, city, policy)
        except Exception:
            logger.exception("Tool '%s' raised for query %r", tool_name, city)
            result = {"error": "unexpected", "message": GENERIC_ERROR_MESSAGE}
        latency_ms = int((perf_counter() - started) * 1000)

        success = "error" not in result
        response = LookupResponse(
            text=tool.render(result),
            city=city,
            tool_name=tool_name,
            result=result,
            success=success,
            latency_ms=latency_ms,
        )
        if success:
            active.succeed(ticket, response)
        else:
            active.fail(ticket, response.text)

        self._log_lookup(response, policy=policy)
        return response

    def current(self, city: str, *, policy: Optional[str] = None, session: Optional[LookupSession] = None) -> LookupResponse:
        return self.lookup(CURRENT_TOOL, city, policy=policy, session=session)

    def forecast(self, city: str, *, policy: Optional[str] = None, session: Optional[LookupSession] = None) -> LookupResponse:
        return self.lookup(FORECAST_TOOL, city, policy=policy, session=session)

    @staticmethod
    def _run(run_tool, city: str, policy: Optional[str]) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"city": city}
        if policy:
            try:
                payload["policy"] = MatchPolicy.parse(policy).value
            except WeatherLookupError as exc:
                return exc.to_result()
        return run_tool(payload)

    def _log_lookup(self, response: LookupResponse, *, policy: Optional[str]) -> None:
        if not self._logger:
            return
        result = response.result
        record = LookupRecord.new(
            query=response.city,
            tool_name=response.tool_name,
            success=response.success,
            latency_ms=response.latency_ms,
            policy=policy,
            error=result.get("error"),
            message=result.get("message"),
            latitude=result.get("latitude"),
            longitude=result.get("longitude"),
        )
        try:
            self._logger.log_lookup(record)
        except OSError:
            logger.warning("Could not write lookup record to %s", self._logger.log_path, exc_info=True)

"""Assemble the lookup orchestrator and run the interactive CLI."""

from __future__ import annotations

import argparse
import logging
from typing import List, Optional, Tuple

from app.config import (
    get_log_backup_count,
    get_log_max_bytes,
    get_lookup_log_path,
    is_logging_enabled,
)
from core.lookup_logger import LookupLogger
from core.lookup_state import LookupSession, LookupSnapshot, LookupStatus
from core.orchestrator import LookupOrchestrator
from core.tool_registry import ToolRegistry
from tools import load_all_core_tools

_FORECAST_COMMAND = "forecast"


# -- Orchestrator construction -------------------------------------------------
def build_orchestrator() -> LookupOrchestrator:
    """Wire up the registry and lookup log for CLI and the web API.

    WHAT: instantiate the tool registry, the JSONL lookup logger, and the
    orchestrator that ties them together.
    HOW: pull runtime configuration from ``app.config`` helpers.
    """
    registry = ToolRegistry()
    load_all_core_tools(registry)

    lookup_logger = LookupLogger(
        log_path=get_lookup_log_path(),
        enabled=is_logging_enabled(),
        max_bytes=get_log_max_bytes(),
        backup_count=get_log_backup_count(),
    )
    return LookupOrchestrator(registry, logger=lookup_logger)


# -- Rendering -----------------------------------------------------------------
def render_snapshot(snapshot: LookupSnapshot) -> str:
    """Map a session state onto the text shown to the user."""
    if snapshot.status is LookupStatus.PENDING:
        return "Loading..."
    if snapshot.status is LookupStatus.FAILED:
        return snapshot.error_message or ""
    if snapshot.status is LookupStatus.SUCCEEDED:
        return snapshot.result.text
    return ""


def _print_snapshot(snapshot: LookupSnapshot) -> None:
    text = render_snapshot(snapshot)
    if not text:
        return
    if snapshot.status is LookupStatus.PENDING:
        print(text)
    else:
        print()
        print(text)
        print()


def parse_command(message: str) -> Tuple[str, str]:
    """Split interactive input into ``(mode, city)``.

    ``forecast`` followed by anything selects the five-day table; a bare
    ``forecast`` yields an empty city. Any other text is a current lookup.
    """
    parts = message.split(maxsplit=1)
    if parts and parts[0].lower() == _FORECAST_COMMAND:
        return _FORECAST_COMMAND, parts[1] if len(parts) > 1 else ""
    return "current", message


# -- Interactive CLI loop ------------------------------------------------------
def run_interactive(orchestrator: LookupOrchestrator, *, policy: Optional[str] = None) -> None:
    """Read city names from stdin and print each session transition.

    A bare city name shows the current temperature; ``forecast <city>`` shows
    the five-day table. Exits on EOF/KeyboardInterrupt or "quit"/"exit".
    """
    session = LookupSession(listener=_print_snapshot)
    print("Weather lookup ready. Enter a city, or 'forecast <city>'. Type 'quit' to stop.")

    while True:
        try:
            message = input("City: ")
        except (EOFError, KeyboardInterrupt):
            print("\nExiting.")
            break

        if message.strip().lower() in {"quit", "exit"}:
            print("Goodbye!")
            break

        mode, city = parse_command(message)
        if mode == _FORECAST_COMMAND:
            orchestrator.forecast(city, policy=policy, session=session)
        else:
            orchestrator.current(city, policy=policy, session=session)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Look up current weather or a 5-day forecast by city name.")
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Only accept a geocoding match whose name equals the query (case-insensitive).",
    )
    parser.add_argument("--verbose", action="store_true", help="Log outbound requests to stderr.")
    sub = parser.add_subparsers(dest="command")

    current_parser = sub.add_parser("current", help="Print the current temperature for a city.")
    current_parser.add_argument("city", nargs="+")

    forecast_parser = sub.add_parser("forecast", help="Print the 5-day forecast for a city.")
    forecast_parser.add_argument("city", nargs="+")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """CLI driver: one-shot ``current``/``forecast`` commands or an interactive loop."""
    args = _build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    policy = "strict" if args.strict else None
    orchestrator = build_orchestrator()

    if args.command is None:
        run_interactive(orchestrator, policy=policy)
        return 0

    session = LookupSession()
    city = " ".join(args.city)
    if args.command == "current":
        orchestrator.current(city, policy=policy, session=session)
    else:
        orchestrator.forecast(city, policy=policy, session=session)
    snapshot = session.snapshot
    print(render_snapshot(snapshot))
    return 0 if snapshot.status is LookupStatus.SUCCEEDED else 1


if __name__ == "__main__":
    raise SystemExit(main())

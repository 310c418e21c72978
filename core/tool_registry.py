"""Lookup tools keyed by name, each paired with its display formatter.

A registered tool bundles the callable that performs the lookup and the
formatter that turns its structured result into text, so surfaces only ever
dispatch by name.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, Tuple

from core.errors import GENERIC_ERROR_MESSAGE

LookupFn = Callable[[Dict[str, Any]], Dict[str, Any]]
FormatterFn = Callable[[Dict[str, Any]], str]


def _default_formatter(result: Dict[str, Any]) -> str:
    if "error" in result:
        return result.get("message") or GENERIC_ERROR_MESSAGE
    return str(result)


@dataclass(frozen=True)
class RegisteredTool:
    name: str
    run: LookupFn
    formatter: FormatterFn = _default_formatter

    def render(self, result: Dict[str, Any]) -> str:
        return self.formatter(result)


class ToolRegistry:
    """Name → ``RegisteredTool`` lookup table."""

    def __init__(self) -> None:
        self._entries: Dict[str, RegisteredTool] = {}

    def register(self, name: str, run: LookupFn, *, formatter: FormatterFn | None = None) -> RegisteredTool:
        """Add ``run`` under ``name``; names are unique for the registry's lifetime."""
        if name in self._entries:
            raise ValueError(f"Tool '{name}' is already registered")
        entry = RegisteredTool(name=name, run=run, formatter=formatter or _default_formatter)
        self._entries[name] = entry
        return entry

    def get(self, name: str) -> RegisteredTool:
        entry = self._entries.get(name)
        if entry is None:
            raise KeyError(f"Tool '{name}' is not registered")
        return entry

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    def names(self) -> Tuple[str, ...]:
        return tuple(sorted(self._entries))

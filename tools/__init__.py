"""Register the built-in weather tools with the shared registry.

This module centralises their registration so the orchestrator, CLI, and web
API share a single source of truth.
"""

from __future__ import annotations

from core.tool_registry import ToolRegistry
from tools import weather_tool


def load_all_core_tools(registry: ToolRegistry) -> None:
    # Register every core tool, with its formatter, on ``registry``
    registry.register(
        weather_tool.CURRENT_TOOL,
        weather_tool.run_current,
        formatter=weather_tool.format_current_response,
    )
    registry.register(
        weather_tool.FORECAST_TOOL,
        weather_tool.run_forecast,
        formatter=weather_tool.format_forecast_response,
    )

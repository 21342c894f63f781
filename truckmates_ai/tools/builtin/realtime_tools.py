"""Built-in real-time data functions the model may call (web search, fuel, weather, ...)."""
from __future__ import annotations

import logging
from typing import Any, Awaitable, Dict, List

from truckmates_ai.core.exceptions import RetrievalError, ValidationError
from truckmates_ai.orchestrator.context.sources import BaseRealtimeDataProvider
from truckmates_ai.orchestrator.dispatch.registry import RegisteredFunction
from truckmates_ai.orchestrator.types import FunctionDefinition, RealtimeResult

logger = logging.getLogger(__name__)


def _require(arguments: Dict[str, Any], key: str) -> str:
    value = arguments.get(key)
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"Missing required argument '{key}'")
    return value.strip()


def _int_arg(arguments: Dict[str, Any], key: str, default: int) -> int:
    try:
        return max(1, int(arguments.get(key, default)))
    except (TypeError, ValueError):
        return default


async def _unwrap(name: str, pending: Awaitable[RealtimeResult]) -> Any:
    result = await pending
    if result.error:
        logger.info("%s: %s", name, result.error)
        raise RetrievalError(result.error)
    return result.data


def _string_param(description: str) -> Dict[str, Any]:
    return {"type": "string", "description": description}


_ROUTE_PARAMS = {
    "type": "object",
    "properties": {
        "origin": _string_param("Origin city, e.g. 'Chicago, IL'."),
        "destination": _string_param("Destination city, e.g. 'Dallas, TX'."),
    },
    "required": ["origin", "destination"],
}


def build_realtime_functions(provider: BaseRealtimeDataProvider) -> List[RegisteredFunction]:
    """Build the real-time functions bound to ``provider``.

    A provider error surfaces as a failed action (``RetrievalError``), not as
    a result payload.
    """

    async def search_web(arguments: Dict[str, Any]) -> Any:
        return await _unwrap(
            "search_web",
            provider.search_web(
                _require(arguments, "query"), _int_arg(arguments, "max_results", 5)
            ),
        )

    async def get_fuel_prices(arguments: Dict[str, Any]) -> Any:
        return await _unwrap(
            "get_fuel_prices", provider.get_fuel_prices(_require(arguments, "location"))
        )

    async def get_weather(arguments: Dict[str, Any]) -> Any:
        return await _unwrap("get_weather", provider.get_weather(_require(arguments, "location")))

    async def get_traffic_conditions(arguments: Dict[str, Any]) -> Any:
        return await _unwrap(
            "get_traffic_conditions",
            provider.get_traffic_conditions(
                _require(arguments, "origin"), _require(arguments, "destination")
            ),
        )

    async def get_market_rates_web(arguments: Dict[str, Any]) -> Any:
        return await _unwrap(
            "get_market_rates_web",
            provider.get_market_rate(
                _require(arguments, "origin"), _require(arguments, "destination")
            ),
        )

    async def get_logistics_news(arguments: Dict[str, Any]) -> Any:
        category = arguments.get("category")
        return await _unwrap(
            "get_logistics_news",
            provider.get_logistics_news(
                category if isinstance(category, str) and category.strip() else None,
                _int_arg(arguments, "limit", 3),
            ),
        )

    return [
        RegisteredFunction(
            FunctionDefinition(
                name="search_web",
                description=(
                    "Search the internet for current information. Use when the answer "
                    "depends on recent events or data not available in the platform."
                ),
                parameters={
                    "type": "object",
                    "properties": {
                        "query": _string_param("The search query."),
                        "max_results": {
                            "type": "integer",
                            "description": "Number of results to return (default 5).",
                            "default": 5,
                        },
                    },
                    "required": ["query"],
                },
            ),
            search_web,
        ),
        RegisteredFunction(
            FunctionDefinition(
                name="get_fuel_prices",
                description="Get current diesel fuel prices for a location.",
                parameters={
                    "type": "object",
                    "properties": {"location": _string_param("City and state, e.g. 'Chicago, IL'.")},
                    "required": ["location"],
                },
            ),
            get_fuel_prices,
        ),
        RegisteredFunction(
            FunctionDefinition(
                name="get_weather",
                description="Get current weather conditions for a location.",
                parameters={
                    "type": "object",
                    "properties": {"location": _string_param("City and state, e.g. 'Denver, CO'.")},
                    "required": ["location"],
                },
            ),
            get_weather,
        ),
        RegisteredFunction(
            FunctionDefinition(
                name="get_traffic_conditions",
                description="Get current traffic conditions between two cities.",
                parameters=_ROUTE_PARAMS,
            ),
            get_traffic_conditions,
        ),
        RegisteredFunction(
            FunctionDefinition(
                name="get_market_rates_web",
                description="Look up current spot market freight rates for a lane.",
                parameters=_ROUTE_PARAMS,
            ),
            get_market_rates_web,
        ),
        RegisteredFunction(
            FunctionDefinition(
                name="get_logistics_news",
                description="Get recent trucking and logistics industry news.",
                parameters={
                    "type": "object",
                    "properties": {
                        "category": _string_param("Optional topic, e.g. 'regulations'."),
                        "limit": {
                            "type": "integer",
                            "description": "Number of articles (default 3).",
                            "default": 3,
                        },
                    },
                    "required": [],
                },
            ),
            get_logistics_news,
        ),
    ]

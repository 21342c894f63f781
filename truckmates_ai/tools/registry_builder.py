"""Build the FunctionRegistry from the built-in functions and caller-supplied extras."""
from __future__ import annotations

import logging
from typing import Iterable, Optional

from truckmates_ai.orchestrator.context.sources import BaseRealtimeDataProvider
from truckmates_ai.orchestrator.dispatch.registry import FunctionRegistry, RegisteredFunction

logger = logging.getLogger(__name__)


def build_function_registry(
    realtime_provider: Optional[BaseRealtimeDataProvider] = None,
    extra_functions: Iterable[RegisteredFunction] = (),
) -> FunctionRegistry:
    """Build and return a populated FunctionRegistry.

    Conditionally registers:
      - search_web, get_fuel_prices, get_weather, get_traffic_conditions,
        get_market_rates_web, get_logistics_news  (if realtime_provider is given)

    ``extra_functions`` (platform operations such as load or driver lookups)
    are registered last and replace a built-in of the same name.
    """
    registry = FunctionRegistry()

    if realtime_provider is not None:
        from truckmates_ai.tools.builtin.realtime_tools import build_realtime_functions
        for function in build_realtime_functions(realtime_provider):
            registry.register(function)

    for function in extra_functions:
        registry.register(function)

    logger.info(
        "registry_builder: built registry with %d functions: %s",
        len(registry.names),
        registry.names,
    )
    return registry

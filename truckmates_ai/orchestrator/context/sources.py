"""Real-time data sources and the sub-intent routing table.

Each ``RealtimeSource`` declares which words trigger it, which key its data
lands under in ``internet_data``, and how to call the provider given the
entities found in the message. ``fetch`` returns ``None`` when a required
entity is missing, which skips the branch. Adding a data source means adding
a provider method and one table entry.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Awaitable, Callable, List, Optional, Sequence, Tuple

from truckmates_ai.orchestrator.classifiers.location_extractor import (
    Route,
    extract_locations,
    extract_route,
)
from truckmates_ai.orchestrator.types import RealtimeResult


class BaseRealtimeDataProvider(ABC):
    """External real-time data collaborator. Every call returns a RealtimeResult."""

    @abstractmethod
    async def get_fuel_prices(self, location: str) -> RealtimeResult:
        ...

    @abstractmethod
    async def get_weather(self, location: str) -> RealtimeResult:
        ...

    @abstractmethod
    async def get_traffic_conditions(self, origin: str, destination: str) -> RealtimeResult:
        ...

    @abstractmethod
    async def get_logistics_news(
        self,
        category: Optional[str] = None,
        limit: int = 3,
    ) -> RealtimeResult:
        ...

    @abstractmethod
    async def get_market_rate(self, origin: str, destination: str) -> RealtimeResult:
        ...

    async def search_web(self, query: str, max_results: int = 5) -> RealtimeResult:
        return RealtimeResult(error="Web search is not supported by this provider")


class SubIntent(str, Enum):
    FUEL = "fuel"
    WEATHER = "weather"
    TRAFFIC = "traffic"
    NEWS = "news"
    MARKET_RATE = "market_rate"


@dataclass(frozen=True)
class FetchInputs:
    """Entities extracted once per message and shared by every source."""

    locations: List[str] = field(default_factory=list)
    route: Route = field(default_factory=Route)
    news_limit: int = 3

    @classmethod
    def from_message(cls, message: str, *, news_limit: int = 3) -> "FetchInputs":
        return cls(
            locations=extract_locations(message),
            route=extract_route(message),
            news_limit=news_limit,
        )

    @property
    def first_location(self) -> Optional[str]:
        return self.locations[0] if self.locations else None


FetchFn = Callable[[BaseRealtimeDataProvider, FetchInputs], Optional[Awaitable[RealtimeResult]]]


@dataclass(frozen=True)
class RealtimeSource:
    tag: SubIntent
    triggers: Tuple[str, ...]
    result_key: str
    fetch: FetchFn

    def matches(self, message: str) -> bool:
        lowered = message.lower()
        return any(t in lowered for t in self.triggers)


def _fetch_fuel(provider: BaseRealtimeDataProvider, inputs: FetchInputs):
    if inputs.first_location is None:
        return None
    return provider.get_fuel_prices(inputs.first_location)


def _fetch_weather(provider: BaseRealtimeDataProvider, inputs: FetchInputs):
    if inputs.first_location is None:
        return None
    return provider.get_weather(inputs.first_location)


def _fetch_traffic(provider: BaseRealtimeDataProvider, inputs: FetchInputs):
    if not inputs.route.is_complete:
        return None
    return provider.get_traffic_conditions(inputs.route.origin, inputs.route.destination)


def _fetch_news(provider: BaseRealtimeDataProvider, inputs: FetchInputs):
    return provider.get_logistics_news(None, inputs.news_limit)


def _fetch_market_rate(provider: BaseRealtimeDataProvider, inputs: FetchInputs):
    if not inputs.route.is_complete:
        return None
    return provider.get_market_rate(inputs.route.origin, inputs.route.destination)


REALTIME_SOURCES: Tuple[RealtimeSource, ...] = (
    RealtimeSource(SubIntent.FUEL, ("fuel", "diesel"), "fuel_prices", _fetch_fuel),
    RealtimeSource(SubIntent.WEATHER, ("weather",), "weather", _fetch_weather),
    RealtimeSource(SubIntent.TRAFFIC, ("traffic", "route"), "traffic", _fetch_traffic),
    RealtimeSource(SubIntent.NEWS, ("news", "update"), "news", _fetch_news),
    RealtimeSource(SubIntent.MARKET_RATE, ("rate", "market"), "market_rates", _fetch_market_rate),
)


def detect_sub_intents(
    message: str,
    sources: Sequence[RealtimeSource] = REALTIME_SOURCES,
) -> List[SubIntent]:
    """Tags whose triggers appear in ``message``, in table order. Several may match."""
    return [s.tag for s in sources if s.matches(message or "")]

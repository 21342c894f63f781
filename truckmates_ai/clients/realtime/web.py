"""Real-time data over public web APIs: Tavily/Serper search and OpenWeatherMap.

Every public method returns a ``RealtimeResult``; HTTP failures, unusable
payloads and missing API keys become ``RealtimeResult(error=...)`` so the
aggregator and the function dispatcher never see an exception from here.
Numeric fields that only the search snippets carry (fuel price, lane rate)
are left ``None`` for the model to read out of ``search_results``.
"""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence

import httpx

from truckmates_ai.config.realtime import RealtimeConfig
from truckmates_ai.core.exceptions import RetrievalError
from truckmates_ai.orchestrator.context.sources import BaseRealtimeDataProvider
from truckmates_ai.orchestrator.types import RealtimeResult

logger = logging.getLogger(__name__)

TAVILY_SEARCH_URL = "https://api.tavily.com/search"
SERPER_SEARCH_URL = "https://google.serper.dev/search"
OPENWEATHER_URL = "https://api.openweathermap.org/data/2.5/weather"

NEWS_DOMAINS = ("truckinginfo.com", "fleetowner.com", "ccjdigital.com", "transportation.gov")

_MISSING_SEARCH_KEY = (
    "Web search requires an API key. Set TAVILY_API_KEY or SERPER_API_KEY."
)


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class WebRealtimeDataProvider(BaseRealtimeDataProvider):
    def __init__(
        self,
        config: Optional[RealtimeConfig] = None,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._config = config or RealtimeConfig()
        self._transport = transport

    @property
    def config(self) -> RealtimeConfig:
        return self._config

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self._config.timeout_seconds, transport=self._transport)

    # ── Web search ─────────────────────────────────────────────────────────

    async def search_web(
        self,
        query: str,
        max_results: int = 5,
        *,
        include_domains: Optional[Sequence[str]] = None,
    ) -> RealtimeResult:
        if not self._config.search_enabled:
            return RealtimeResult(error=_MISSING_SEARCH_KEY)
        try:
            if self._config.search_provider == "serper":
                results = await self._search_serper(query, max_results)
            else:
                results = await self._search_tavily(query, max_results, include_domains)
        except RetrievalError as exc:
            logger.warning("WebRealtimeDataProvider: search failed for %r: %s", query, exc)
            return RealtimeResult(error=str(exc))
        except httpx.HTTPError as exc:
            logger.warning("WebRealtimeDataProvider: search transport error for %r: %s", query, exc)
            return RealtimeResult(error=str(exc) or "Web search failed")
        return RealtimeResult(data={"query": query, "results": results})

    async def _search_tavily(
        self,
        query: str,
        max_results: int,
        include_domains: Optional[Sequence[str]],
    ) -> List[Dict[str, Any]]:
        payload: Dict[str, Any] = {
            "api_key": self._config.search_api_key,
            "query": query,
            "search_depth": "advanced",
            "max_results": max_results,
            "include_answer": True,
            "include_raw_content": False,
        }
        if include_domains:
            payload["include_domains"] = list(include_domains)
        async with self._client() as client:
            response = await client.post(TAVILY_SEARCH_URL, json=payload)
        data = self._json_or_raise(response, "Tavily")
        return [
            {
                "title": r.get("title", ""),
                "url": r.get("url", ""),
                "snippet": r.get("content") or r.get("snippet") or "",
                "relevance_score": r.get("score") or 0.8,
            }
            for r in data.get("results") or []
            if isinstance(r, dict)
        ]

    async def _search_serper(self, query: str, max_results: int) -> List[Dict[str, Any]]:
        async with self._client() as client:
            response = await client.post(
                SERPER_SEARCH_URL,
                json={"q": query, "num": max_results},
                headers={"X-API-KEY": self._config.search_api_key or ""},
            )
        data = self._json_or_raise(response, "Serper")
        return [
            {
                "title": r.get("title", ""),
                "url": r.get("link", ""),
                "snippet": r.get("snippet", ""),
                "relevance_score": 0.8,
            }
            for r in data.get("organic") or []
            if isinstance(r, dict)
        ]

    @staticmethod
    def _json_or_raise(response: httpx.Response, service: str) -> Dict[str, Any]:
        if response.status_code >= 400:
            raise RetrievalError(
                f"{service} API error: {response.status_code} {response.reason_phrase}",
                details={"body": response.text[:500]},
            )
        try:
            data = response.json()
        except ValueError as exc:
            raise RetrievalError(f"{service} returned a non-JSON body", cause=exc) from exc
        if not isinstance(data, dict):
            raise RetrievalError(f"{service} returned an unexpected payload")
        return data

    async def _search_results(self, query: str, max_results: int, **kwargs: Any) -> RealtimeResult:
        """Search and unwrap to the bare result list; an empty list counts as an error."""
        found = await self.search_web(query, max_results, **kwargs)
        if found.error:
            return found
        results = found.data["results"]
        if not results:
            return RealtimeResult(error=f"No web results for {query!r}")
        return RealtimeResult(data=results)

    # ── Domain lookups ─────────────────────────────────────────────────────

    async def get_fuel_prices(self, location: str) -> RealtimeResult:
        found = await self._search_results(f"current diesel fuel price {location}", 3)
        if found.error:
            return RealtimeResult(error="Unable to fetch fuel prices")
        return RealtimeResult(
            data={
                "location": location,
                "price_per_gallon": None,
                "last_updated": _now_iso(),
                "search_results": found.data,
            }
        )

    async def get_weather(self, location: str) -> RealtimeResult:
        if self._config.openweather_api_key:
            try:
                return RealtimeResult(data=await self._openweather(location))
            except (RetrievalError, httpx.HTTPError) as exc:
                logger.warning(
                    "WebRealtimeDataProvider: OpenWeather failed for %s, falling back to search: %s",
                    location, exc,
                )

        found = await self._search_results(f"current weather {location}", 2)
        if found.error:
            return RealtimeResult(error=found.error)
        return RealtimeResult(
            data={
                "location": location,
                "conditions": "See search results",
                "temperature": None,
                "forecast": {"search_results": found.data},
            }
        )

    async def _openweather(self, location: str) -> Dict[str, Any]:
        params = {"q": location, "appid": self._config.openweather_api_key, "units": "imperial"}
        async with self._client() as client:
            response = await client.get(OPENWEATHER_URL, params=params)
        data = self._json_or_raise(response, "OpenWeather")
        try:
            main = data["main"]
            return {
                "location": location,
                "conditions": data["weather"][0]["description"],
                "temperature": main["temp"],
                "forecast": {
                    "humidity": main.get("humidity"),
                    "wind_speed": (data.get("wind") or {}).get("speed", 0),
                    "visibility": data.get("visibility", 0),
                },
            }
        except (KeyError, IndexError, TypeError) as exc:
            raise RetrievalError("OpenWeather payload is missing fields", cause=exc) from exc

    async def get_traffic_conditions(self, origin: str, destination: str) -> RealtimeResult:
        found = await self._search_results(
            f"current traffic conditions truck route {origin} to {destination}", 3
        )
        if found.error:
            return RealtimeResult(error=found.error)
        return RealtimeResult(
            data={
                "route": f"{origin} to {destination}",
                "current_delay": None,
                "search_results": found.data,
            }
        )

    async def get_market_rate(
        self,
        origin: str,
        destination: str,
        equipment_type: str = "dry_van",
    ) -> RealtimeResult:
        found = await self._search_results(
            f"freight rate {origin} to {destination} {equipment_type} current market rate", 3
        )
        if found.error:
            return RealtimeResult(error=found.error)
        return RealtimeResult(
            data={
                "lane": f"{origin} to {destination}",
                "equipment_type": equipment_type,
                "rate": None,
                "trend": "unknown",
                "search_results": found.data,
            }
        )

    async def get_logistics_news(
        self,
        category: Optional[str] = None,
        limit: int = 3,
    ) -> RealtimeResult:
        query = (
            f"trucking logistics news {category}" if category
            else "trucking logistics industry news"
        )
        found = await self.search_web(query, limit, include_domains=NEWS_DOMAINS)
        if found.error:
            return found
        published_at = _now_iso()
        return RealtimeResult(
            data=[
                {
                    "title": r["title"],
                    "source": httpx.URL(r["url"]).host if r["url"] else "",
                    "url": r["url"],
                    "published_at": published_at,
                }
                for r in found.data["results"][:limit]
            ]
        )

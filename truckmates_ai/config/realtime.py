"""
truckmates_ai.config.realtime – web search and weather API config.

Env vars: SEARCH_PROVIDER, TAVILY_API_KEY, SERPER_API_KEY, OPENWEATHER_API_KEY,
         REALTIME_TIMEOUT_SECONDS.
"""
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from truckmates_ai.core.exceptions import ConfigurationError

_VALID_SEARCH_PROVIDERS = frozenset({"tavily", "serper"})


@dataclass(frozen=True)
class RealtimeConfig:
    search_provider: str = "tavily"
    search_api_key: Optional[str] = None
    openweather_api_key: Optional[str] = None
    timeout_seconds: float = 10.0

    def __post_init__(self) -> None:
        if self.search_provider not in _VALID_SEARCH_PROVIDERS:
            raise ConfigurationError(
                f"search_provider must be one of {sorted(_VALID_SEARCH_PROVIDERS)}, "
                f"got {self.search_provider!r}"
            )
        if self.timeout_seconds <= 0:
            raise ConfigurationError(
                f"timeout_seconds must be positive, got {self.timeout_seconds!r}"
            )

    @property
    def search_enabled(self) -> bool:
        return bool(self.search_api_key)

    @classmethod
    def from_env(cls) -> RealtimeConfig:
        provider = os.environ.get("SEARCH_PROVIDER", "tavily").strip().lower()
        if provider == "serper":
            key = os.environ.get("SERPER_API_KEY") or os.environ.get("TAVILY_API_KEY")
        else:
            key = os.environ.get("TAVILY_API_KEY") or os.environ.get("SERPER_API_KEY")
        return cls(
            search_provider=provider,
            search_api_key=(key or "").strip() or None,
            openweather_api_key=(os.environ.get("OPENWEATHER_API_KEY") or "").strip() or None,
            timeout_seconds=float(os.environ.get("REALTIME_TIMEOUT_SECONDS", "10")),
        )


def load_realtime_config() -> RealtimeConfig:
    return RealtimeConfig.from_env()

"""ContextAggregator: concurrent fan-out to retrieval and real-time data sources."""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional, Sequence

from truckmates_ai.orchestrator.context.retrieval import BaseRetrievalService
from truckmates_ai.orchestrator.context.sources import (
    REALTIME_SOURCES,
    BaseRealtimeDataProvider,
    FetchInputs,
    RealtimeSource,
)
from truckmates_ai.orchestrator.types import (
    CallerIdentity,
    OrchestratorConfig,
    RealtimeResult,
    RetrievalContext,
)

logger = logging.getLogger(__name__)


@dataclass
class AggregatedContext:
    retrieval: RetrievalContext
    internet_data: Optional[Dict[str, Any]] = None
    """None when external data was not requested; otherwise a dict, possibly empty."""


class ContextAggregator:
    """Gather internal and external context for one turn.

    Retrieval and external gathering run concurrently and are both awaited
    before returning. Every collaborator call is bounded by a timeout; any
    failure degrades to a missing value rather than an exception.
    """

    def __init__(
        self,
        retrieval_service: BaseRetrievalService,
        realtime_provider: Optional[BaseRealtimeDataProvider] = None,
        *,
        config: Optional[OrchestratorConfig] = None,
        sources: Sequence[RealtimeSource] = REALTIME_SOURCES,
    ) -> None:
        self._retrieval = retrieval_service
        self._realtime = realtime_provider
        self._config = config or OrchestratorConfig()
        self._sources = tuple(sources)

    async def gather(
        self,
        message: str,
        identity: CallerIdentity,
        *,
        needs_external: bool,
    ) -> AggregatedContext:
        if needs_external:
            retrieval, internet_data = await asyncio.gather(
                self.retrieve(message, identity),
                self.fetch_external(message),
            )
        else:
            retrieval, internet_data = await self.retrieve(message, identity), None
        return AggregatedContext(retrieval=retrieval, internet_data=internet_data)

    async def retrieve(self, message: str, identity: CallerIdentity) -> RetrievalContext:
        timeout = self._config.retrieval_timeout_seconds
        try:
            coro = self._retrieval.retrieve_context(
                message, identity.user_id, identity.company_id or ""
            )
            if timeout is not None and timeout > 0:
                coro = asyncio.wait_for(coro, timeout=timeout)
            result = await coro
            return result if result is not None else RetrievalContext()
        except asyncio.TimeoutError:
            logger.warning("ContextAggregator: retrieval timed out (%.1fs), continuing without it", timeout)
        except Exception as exc:
            logger.warning("ContextAggregator: retrieval failed, continuing without it: %s", exc)
        return RetrievalContext()

    async def fetch_external(self, message: str) -> Dict[str, Any]:
        """Run every matching source whose required entities are present."""
        if self._realtime is None:
            logger.debug("ContextAggregator: no real-time provider configured")
            return {}

        inputs = FetchInputs.from_message(message, news_limit=self._config.news_limit)
        planned = [source for source in self._sources if source.matches(message)]
        if not planned:
            return {}

        values = await asyncio.gather(*(self._run_source(s, inputs) for s in planned))
        return {
            source.result_key: value
            for source, value in zip(planned, values)
            if value is not None
        }

    async def _run_source(self, source: RealtimeSource, inputs: FetchInputs) -> Any:
        timeout = self._config.external_timeout_seconds
        try:
            call = source.fetch(self._realtime, inputs)
            if call is None:
                logger.debug("ContextAggregator: %s skipped, required entity missing", source.tag.value)
                return None
            if timeout is not None and timeout > 0:
                result = await asyncio.wait_for(call, timeout=timeout)
            else:
                result = await call
        except asyncio.TimeoutError:
            logger.warning("ContextAggregator: %s timed out (%.1fs)", source.tag.value, timeout)
            return None
        except Exception as exc:
            logger.warning("ContextAggregator: %s failed: %s", source.tag.value, exc)
            return None

        if result is None or result.data is None:
            logger.info(
                "ContextAggregator: %s returned no data (%s)",
                source.tag.value,
                getattr(result, "error", None) or "empty",
            )
            return None
        return result.data

"""Orchestrator: turns one user message into one AIResponse.

Single pass per turn, no state carried between turns:

  AUTHENTICATE  resolve caller and tenant; failure ends the turn immediately
  CLASSIFY      keyword check: does this turn need real-time data?
  GATHER        retrieval and real-time fetches, concurrently
  COMPOSE       merge records, knowledge, real-time data, history, function catalog
  GENERATE      LLMEngine (never raises; degrades to a fallback answer)
  ACT           dispatch requested function calls in order
  RESPOND       wrap into AIResponse

``process_request`` never raises: any unexpected error in CLASSIFY..ACT is
converted into the error envelope ``{response: "", confidence: 0, error}``.
"""
from __future__ import annotations

import asyncio
import logging
import time
from typing import List, Optional, Protocol

from truckmates_ai.core.exceptions import AuthenticationError, ValidationError
from truckmates_ai.engine.llm_engine import LLMEngine
from truckmates_ai.orchestrator.auth import BaseAuthResolver
from truckmates_ai.orchestrator.classifiers.intent_classifier import InternetIntentClassifier
from truckmates_ai.orchestrator.context.aggregator import AggregatedContext, ContextAggregator
from truckmates_ai.orchestrator.context.retrieval import BaseRetrievalService, NullRetrievalService
from truckmates_ai.orchestrator.context.sources import BaseRealtimeDataProvider
from truckmates_ai.orchestrator.dispatch.dispatcher import FunctionDispatcher
from truckmates_ai.orchestrator.dispatch.registry import FunctionRegistry
from truckmates_ai.orchestrator.types import (
    ActionResult,
    AIRequest,
    AIResponse,
    CallerIdentity,
    ConversationTurn,
    LLMContext,
    OrchestratorConfig,
)

logger = logging.getLogger(__name__)

NOT_AUTHENTICATED = "Not authenticated"
NO_COMPANY = "No company found"
GENERIC_FAILURE = "AI processing failed"


class ExternalDataClassifier(Protocol):
    def needs_external_data(self, message: str) -> bool:
        ...


class Orchestrator:
    """Central entry-point for AI chat turns.

    All collaborators are injected; the orchestrator holds no per-turn state,
    so one instance can serve concurrent requests.
    """

    def __init__(
        self,
        engine: LLMEngine,
        *,
        auth_resolver: BaseAuthResolver,
        retrieval_service: Optional[BaseRetrievalService] = None,
        realtime_provider: Optional[BaseRealtimeDataProvider] = None,
        function_registry: Optional[FunctionRegistry] = None,
        config: Optional[OrchestratorConfig] = None,
        classifier: Optional[ExternalDataClassifier] = None,
    ) -> None:
        self._engine = engine
        self._auth = auth_resolver
        self._config = config or OrchestratorConfig()
        self._classifier = classifier or InternetIntentClassifier()
        self._registry = function_registry or FunctionRegistry()
        self._aggregator = ContextAggregator(
            retrieval_service or NullRetrievalService(),
            realtime_provider,
            config=self._config,
        )
        self._dispatcher = FunctionDispatcher(
            self._registry,
            timeout_seconds=self._config.function_timeout_seconds,
        )

    @property
    def engine(self) -> LLMEngine:
        return self._engine

    @property
    def function_registry(self) -> FunctionRegistry:
        return self._registry

    async def process_request(
        self,
        request: AIRequest,
        *,
        caller_token: Optional[str] = None,
    ) -> AIResponse:
        t_start = time.monotonic()

        # ── AUTHENTICATE ──
        identity = await self._authenticate(caller_token)
        if identity is None:
            return AIResponse.failure(NOT_AUTHENTICATED)
        if not identity.company_id:
            logger.warning("Orchestrator: user %s has no company", identity.user_id)
            return AIResponse.failure(NO_COMPANY)

        try:
            response = await self._run_turn(request, identity)
        except Exception as exc:
            logger.error(
                "Orchestrator: turn failed for user %s: %s",
                identity.user_id, exc, exc_info=True,
            )
            return AIResponse.failure(str(exc) or GENERIC_FAILURE)

        logger.info(
            "Orchestrator: turn done in %.0f ms (company=%s, actions=%d, confidence=%.2f)",
            (time.monotonic() - t_start) * 1000,
            identity.company_id,
            len(response.actions or []),
            response.confidence,
        )
        return response

    async def _authenticate(self, caller_token: Optional[str]) -> Optional[CallerIdentity]:
        timeout = self._config.auth_timeout_seconds
        try:
            coro = self._auth.resolve(caller_token)
            if timeout is not None and timeout > 0:
                coro = asyncio.wait_for(coro, timeout=timeout)
            return await coro
        except AuthenticationError as exc:
            logger.info("Orchestrator: authentication rejected: %s", exc)
        except asyncio.TimeoutError:
            logger.warning("Orchestrator: auth resolver timed out (%.1fs)", timeout)
        except Exception as exc:
            logger.error("Orchestrator: auth resolver failed: %s", exc)
        return None

    async def _run_turn(self, request: AIRequest, identity: CallerIdentity) -> AIResponse:
        message = (request.message or "").strip()
        if not message:
            raise ValidationError("Message is required")

        # ── CLASSIFY ──
        needs_external = self._classifier.needs_external_data(message)

        # ── GATHER ──
        gathered = await self._aggregator.gather(message, identity, needs_external=needs_external)

        # ── COMPOSE ──
        context = self._compose(request, gathered)

        # ── GENERATE ──
        generation = await self._engine.generate(message, context)

        # ── ACT ──
        actions: List[ActionResult] = []
        if generation.function_calls:
            actions = await self._dispatcher.dispatch(generation.function_calls)

        # ── RESPOND ──
        return AIResponse(
            response=generation.response,
            confidence=generation.confidence,
            actions=actions or None,
            internet_data=gathered.internet_data or None,
            error=None,
        )

    def _compose(self, request: AIRequest, gathered: AggregatedContext) -> LLMContext:
        return LLMContext(
            conversation_history=self._trim_history(request.conversation_history),
            retrieved_data=gathered.retrieval.records,
            logistics_knowledge=list(gathered.retrieval.knowledge_base),
            internet_data=gathered.internet_data,
            available_functions=self._registry.list_definitions(),
        )

    def _trim_history(
        self,
        history: Optional[List[ConversationTurn]],
    ) -> Optional[List[ConversationTurn]]:
        limit = self._config.max_history_turns
        if not history or limit is None:
            return history
        return history[-limit:] if limit > 0 else []

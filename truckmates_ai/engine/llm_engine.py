"""LLMEngine: prompt assembly, one completion call, and post-processing.

``generate`` never raises. Any backend failure (transport error, non-2xx,
malformed payload, timeout) becomes a fixed fallback answer with confidence 0.
"""
from __future__ import annotations

import asyncio
import logging
from typing import List, Optional

from truckmates_ai.clients.llm.base import BaseLLMClient
from truckmates_ai.clients.llm.registry import LLMRegistry, default_registry
from truckmates_ai.config.inference import InferenceConfig
from truckmates_ai.core.exceptions import GenerationError
from truckmates_ai.engine.confidence import ConfidenceScorer
from truckmates_ai.engine.prompts import build_expert_prompt
from truckmates_ai.engine.response_cleaner import clean_response
from truckmates_ai.engine.tool_call_parser import JsonScanToolCallParser, ToolCallParser
from truckmates_ai.orchestrator.types import LLMContext, LLMResponse

logger = logging.getLogger(__name__)

UNAVAILABLE_RESPONSE = (
    "I'm currently unavailable. Please ensure Ollama is running and the model is installed."
)


class LLMEngine:
    """Generation front-end bound to one explicit inference configuration.

    Several engines with different configs (e.g. per-tenant models) can live
    side by side; nothing is read from the environment here.
    """

    def __init__(
        self,
        config: InferenceConfig,
        *,
        client: Optional[BaseLLMClient] = None,
        tool_call_parser: Optional[ToolCallParser] = None,
        confidence_scorer: Optional[ConfidenceScorer] = None,
        registry: LLMRegistry = default_registry,
    ) -> None:
        self._config = config
        self._client = client or registry.build(config)
        self._parser = tool_call_parser or JsonScanToolCallParser()
        self._scorer = confidence_scorer or ConfidenceScorer()

    @property
    def config(self) -> InferenceConfig:
        return self._config

    @property
    def client(self) -> BaseLLMClient:
        return self._client

    async def generate(
        self,
        user_message: str,
        context: Optional[LLMContext] = None,
    ) -> LLMResponse:
        prompt = build_expert_prompt(user_message, context)
        try:
            raw = await asyncio.wait_for(
                self._client.complete(prompt, options=self._config.decoding),
                timeout=self._config.timeout_seconds,
            )
            if not isinstance(raw, str):
                raise GenerationError(
                    f"{self._client.provider} returned {type(raw).__name__}, expected text"
                )
        except asyncio.TimeoutError:
            logger.warning(
                "LLMEngine: %s/%s timed out after %.1fs",
                self._client.provider, self._config.model, self._config.timeout_seconds,
            )
            return self._unavailable()
        except Exception as exc:
            logger.error("LLMEngine: %s generation failed: %s", self._client.provider, exc)
            return self._unavailable()

        function_calls = self._parser.parse(raw)
        cleaned = clean_response(raw)
        confidence = self._scorer.score(cleaned, context)
        logger.info(
            "LLMEngine: generated %d chars, %d function call(s), confidence %.2f",
            len(cleaned), len(function_calls), confidence,
        )
        return LLMResponse(response=cleaned, function_calls=function_calls, confidence=confidence)

    async def check_availability(self) -> bool:
        try:
            return await asyncio.wait_for(
                self._client.test_connection(), timeout=self._config.timeout_seconds
            )
        except Exception as exc:
            logger.warning("LLMEngine: availability check failed: %s", exc)
            return False

    async def list_models(self) -> List[str]:
        try:
            return await asyncio.wait_for(
                self._client.list_models(), timeout=self._config.timeout_seconds
            )
        except Exception as exc:
            logger.warning("LLMEngine: could not list models: %s", exc)
            return []

    @staticmethod
    def _unavailable() -> LLMResponse:
        return LLMResponse(response=UNAVAILABLE_RESPONSE, function_calls=[], confidence=0.0)

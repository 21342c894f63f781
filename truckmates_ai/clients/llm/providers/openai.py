"""OpenAI-compatible LLM provider: BaseLLMClient implementation + registry builder."""
from __future__ import annotations

import logging
import os
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from openai import AsyncOpenAI

from truckmates_ai.clients.llm.base import BaseLLMClient
from truckmates_ai.clients.llm.config import DecodingOptions
from truckmates_ai.core.exceptions import GenerationError

if TYPE_CHECKING:
    from truckmates_ai.config.inference import InferenceConfig

logger = logging.getLogger(__name__)


class OpenAILLMClient(BaseLLMClient):
    """Hosted GPT models, or any server speaking the OpenAI chat API (vLLM, LM Studio)."""

    def __init__(
        self,
        model: str = "gpt-4o-mini",
        *,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout_seconds: float = 60.0,
    ) -> None:
        self._model = model
        self._client = AsyncOpenAI(
            api_key=api_key or os.environ.get("OPENAI_API_KEY"),
            base_url=base_url,
            timeout=timeout_seconds,
            max_retries=0,
        )

    @property
    def provider(self) -> str:
        return "openai"

    @property
    def model(self) -> str:
        return self._model

    async def complete(
        self,
        prompt: str,
        *,
        options: Optional[DecodingOptions] = None,
    ) -> str:
        opts = options or DecodingOptions()
        # top_k, repeat_penalty and thread hints have no OpenAI equivalent
        kwargs: Dict[str, Any] = {
            "model": self._model,
            "messages": [{"role": "user", "content": prompt}],
            "temperature": opts.temperature,
            "top_p": opts.top_p,
            "max_tokens": opts.max_new_tokens,
        }
        response = await self._client.chat.completions.create(**kwargs)
        if not response.choices:
            raise GenerationError("OpenAI returned no choices", details={"model": self._model})
        return response.choices[0].message.content or ""

    async def list_models(self) -> List[str]:
        page = await self._client.models.list()
        return [m.id for m in page.data]

    async def test_connection(self) -> bool:
        try:
            await self._client.models.list()
            return True
        except Exception as exc:
            logger.warning("OpenAILLMClient: connection test failed: %s", exc)
            return False


def openai_builder(config: "InferenceConfig") -> OpenAILLMClient:
    return OpenAILLMClient(
        model=config.model,
        api_key=config.api_key,
        base_url=config.base_url,
        timeout_seconds=config.timeout_seconds,
    )

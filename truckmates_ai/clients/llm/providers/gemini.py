"""Google Gemini LLM provider: BaseLLMClient implementation + registry builder."""
from __future__ import annotations

import logging
import os
from typing import TYPE_CHECKING, List, Optional

from google import genai
from google.genai import types as genai_types

from truckmates_ai.clients.llm.base import BaseLLMClient
from truckmates_ai.clients.llm.config import DecodingOptions

if TYPE_CHECKING:
    from truckmates_ai.config.inference import InferenceConfig

logger = logging.getLogger(__name__)


class GeminiLLMClient(BaseLLMClient):
    """Google Gemini LLM client (gemini-2.0-flash, gemini-1.5-pro, etc.)."""

    def __init__(
        self,
        model: str = "gemini-2.0-flash",
        *,
        api_key: Optional[str] = None,
    ) -> None:
        self._model = model
        resolved_key = api_key or os.environ.get("GEMINI_API_KEY") or os.environ.get("GOOGLE_API_KEY")
        self._client = genai.Client(api_key=resolved_key)

    @property
    def provider(self) -> str:
        return "gemini"

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
        response = await self._client.aio.models.generate_content(
            model=self._model,
            contents=prompt,
            config=genai_types.GenerateContentConfig(
                temperature=opts.temperature,
                top_p=opts.top_p,
                top_k=opts.top_k,
                max_output_tokens=opts.max_new_tokens,
            ),
        )
        return response.text or ""

    async def list_models(self) -> List[str]:
        names: List[str] = []
        async for m in await self._client.aio.models.list():
            if m.name:
                names.append(m.name)
        return names

    async def test_connection(self) -> bool:
        try:
            await self.complete("Say OK", options=DecodingOptions(max_new_tokens=5))
            return True
        except Exception as exc:
            logger.warning("GeminiLLMClient: connection test failed: %s", exc)
            return False


def gemini_builder(config: "InferenceConfig") -> GeminiLLMClient:
    return GeminiLLMClient(model=config.model, api_key=config.api_key)

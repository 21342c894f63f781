"""No-op LLM client when no backend is configured. Returns a friendly message."""
from __future__ import annotations

from typing import List, Optional

from truckmates_ai.clients.llm.base import BaseLLMClient
from truckmates_ai.clients.llm.config import DecodingOptions

_NOOP_MESSAGE = (
    "The TruckMates AI language model is not configured yet. Set LLM_PROVIDER "
    "and the matching model settings, or contact your administrator."
)


class NoOpLLMClient(BaseLLMClient):
    """Placeholder client when no inference backend is configured."""

    @property
    def provider(self) -> str:
        return "noop"

    @property
    def model(self) -> str:
        return "none"

    async def complete(self, prompt: str, *, options: Optional[DecodingOptions] = None) -> str:
        return _NOOP_MESSAGE

    async def list_models(self) -> List[str]:
        return []

    async def test_connection(self) -> bool:
        return False

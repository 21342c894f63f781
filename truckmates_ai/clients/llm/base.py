from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List, Optional

from truckmates_ai.clients.llm.config import DecodingOptions


class BaseLLMClient(ABC):
    """Opaque text-completion backend: one prompt in, one completion out."""

    @property
    @abstractmethod
    def provider(self) -> str:
        ...

    @property
    @abstractmethod
    def model(self) -> str:
        ...

    @abstractmethod
    async def complete(
        self,
        prompt: str,
        *,
        options: Optional[DecodingOptions] = None,
    ) -> str:
        """Return the completion text for a single non-streamed request.

        Raises ``GenerationError`` when the backend answers with an error or
        an unusable payload; transport errors propagate unchanged.
        """

    @abstractmethod
    async def test_connection(self) -> bool:
        ...

    async def list_models(self) -> List[str]:
        """Models the backend can serve. Default: only the configured one."""
        return [self.model]

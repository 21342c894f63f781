"""Ollama LLM provider (self-hosted Llama 3.1 / Mistral): BaseLLMClient + registry builder."""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Dict, List, Optional

import httpx

from truckmates_ai.clients.llm.base import BaseLLMClient
from truckmates_ai.clients.llm.config import DecodingOptions
from truckmates_ai.core.exceptions import GenerationError

if TYPE_CHECKING:
    from truckmates_ai.config.inference import InferenceConfig

logger = logging.getLogger(__name__)


class OllamaLLMClient(BaseLLMClient):
    """Talks to an Ollama server over its HTTP API."""

    def __init__(
        self,
        model: str = "llama3.1:8b",
        *,
        base_url: str = "http://localhost:11434",
        timeout_seconds: float = 60.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._model = model
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout_seconds
        self._transport = transport

    @property
    def provider(self) -> str:
        return "ollama"

    @property
    def model(self) -> str:
        return self._model

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self._base_url,
            timeout=self._timeout,
            transport=self._transport,
        )

    async def complete(
        self,
        prompt: str,
        *,
        options: Optional[DecodingOptions] = None,
    ) -> str:
        payload: Dict[str, Any] = {
            "model": self._model,
            "prompt": prompt,
            "stream": False,
            "options": (options or DecodingOptions()).to_ollama_options(),
        }
        async with self._client() as client:
            response = await client.post("/api/generate", json=payload)

        if response.status_code >= 400:
            raise GenerationError(
                f"Ollama API error: {response.status_code} {response.reason_phrase}",
                details={"model": self._model, "body": response.text[:500]},
            )
        try:
            data = response.json()
        except ValueError as exc:
            raise GenerationError("Ollama returned a non-JSON body", cause=exc) from exc

        text = data.get("response") if isinstance(data, dict) else None
        if not isinstance(text, str):
            raise GenerationError(
                "Ollama response has no 'response' text",
                details={"keys": sorted(data) if isinstance(data, dict) else None},
            )
        return text

    async def list_models(self) -> List[str]:
        async with self._client() as client:
            response = await client.get("/api/tags")
        response.raise_for_status()
        return [m.get("name", "") for m in response.json().get("models") or [] if m.get("name")]

    async def test_connection(self) -> bool:
        try:
            async with self._client() as client:
                response = await client.get("/api/tags")
            return response.is_success
        except httpx.HTTPError as exc:
            logger.warning("OllamaLLMClient: %s unreachable: %s", self._base_url, exc)
            return False


def ollama_builder(config: "InferenceConfig") -> OllamaLLMClient:
    return OllamaLLMClient(
        model=config.model,
        base_url=config.base_url or "http://localhost:11434",
        timeout_seconds=config.timeout_seconds,
    )

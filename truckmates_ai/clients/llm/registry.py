"""
LLM provider registry: map provider name -> build client from an InferenceConfig.

Builders import their provider module lazily so a deployment that only talks
to Ollama never imports the OpenAI or Gemini SDKs.
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Callable, Dict

from truckmates_ai.clients.llm.base import BaseLLMClient
from truckmates_ai.core.exceptions import ConfigurationError

if TYPE_CHECKING:
    from truckmates_ai.config.inference import InferenceConfig

Builder = Callable[["InferenceConfig"], BaseLLMClient]


class LLMRegistry:
    """Maps provider id to a builder that takes an InferenceConfig and returns a client."""

    def __init__(self) -> None:
        self._builders: Dict[str, Builder] = {}

    def register(self, provider: str, builder: Builder) -> None:
        self._builders[provider] = builder

    def get(self, provider: str) -> Builder | None:
        return self._builders.get(provider)

    @property
    def providers(self) -> list[str]:
        return list(self._builders)

    def build(self, config: "InferenceConfig") -> BaseLLMClient:
        """Build a client for ``config.provider``. Raises ConfigurationError if unknown."""
        builder = self._builders.get(config.provider)
        if builder is None:
            raise ConfigurationError(
                f"Unknown LLM provider: {config.provider!r}. Registered: {self.providers}"
            )
        return builder(config)


def _ollama(config: "InferenceConfig") -> BaseLLMClient:
    from truckmates_ai.clients.llm.providers.ollama import ollama_builder
    return ollama_builder(config)


def _openai(config: "InferenceConfig") -> BaseLLMClient:
    from truckmates_ai.clients.llm.providers.openai import openai_builder
    return openai_builder(config)


def _gemini(config: "InferenceConfig") -> BaseLLMClient:
    from truckmates_ai.clients.llm.providers.gemini import gemini_builder
    return gemini_builder(config)


def _noop(config: "InferenceConfig") -> BaseLLMClient:
    from truckmates_ai.clients.llm.providers.noop import NoOpLLMClient
    return NoOpLLMClient()


default_registry = LLMRegistry()
default_registry.register("ollama", _ollama)
default_registry.register("openai", _openai)
default_registry.register("gemini", _gemini)
default_registry.register("noop", _noop)

"""
LLM clients: base, decoding options, provider registry.

Build a client with default_registry.build(InferenceConfig.from_env()).
"""
from truckmates_ai.clients.llm.base import BaseLLMClient
from truckmates_ai.clients.llm.config import DecodingOptions
from truckmates_ai.clients.llm.registry import LLMRegistry, default_registry

__all__ = [
    "BaseLLMClient",
    "DecodingOptions",
    "LLMRegistry",
    "default_registry",
]

"""
truckmates_ai.config.inference – inference backend config.

Env vars: LLM_PROVIDER, OLLAMA_BASE_URL, OLLAMA_MODEL, LLM_MODEL, LLM_API_KEY,
         OPENAI_API_KEY, GEMINI_API_KEY, LLM_TIMEOUT_SECONDS.
"""
from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Optional

from truckmates_ai.clients.llm.config import DecodingOptions
from truckmates_ai.core.exceptions import ConfigurationError

_VALID_PROVIDERS = frozenset({"ollama", "openai", "gemini", "noop"})

_DEFAULT_MODELS = {
    "ollama": "llama3.1:8b",
    "openai": "gpt-4o-mini",
    "gemini": "gemini-2.0-flash",
    "noop": "none",
}


@dataclass(frozen=True)
class InferenceConfig:
    provider: str = "ollama"
    model: str = "llama3.1:8b"
    base_url: Optional[str] = "http://localhost:11434"
    api_key: Optional[str] = None
    timeout_seconds: float = 60.0
    decoding: DecodingOptions = field(default_factory=DecodingOptions)

    def __post_init__(self) -> None:
        if self.provider not in _VALID_PROVIDERS:
            raise ConfigurationError(
                f"provider must be one of {sorted(_VALID_PROVIDERS)}, got {self.provider!r}"
            )
        if not self.model or not self.model.strip():
            raise ConfigurationError("model must be a non-empty string")
        if self.base_url and not self.base_url.startswith(("http://", "https://")):
            raise ConfigurationError("base_url must start with http:// or https://")
        if self.timeout_seconds <= 0:
            raise ConfigurationError(
                f"timeout_seconds must be positive, got {self.timeout_seconds!r}"
            )

    @classmethod
    def from_env(cls, **overrides: object) -> InferenceConfig:
        provider = str(overrides.get("provider") or os.environ.get("LLM_PROVIDER", "ollama")).strip().lower()
        default_model = _DEFAULT_MODELS.get(provider, "llama3.1:8b")
        if provider == "ollama":
            model = overrides.get("model") or os.environ.get("OLLAMA_MODEL") or default_model
            base_url: Optional[str] = str(
                overrides.get("base_url") or os.environ.get("OLLAMA_BASE_URL", "http://localhost:11434")
            ).strip().rstrip("/")
        else:
            model = overrides.get("model") or os.environ.get("LLM_MODEL") or default_model
            raw_url = overrides.get("base_url") or os.environ.get("LLM_BASE_URL")
            base_url = str(raw_url).strip().rstrip("/") if raw_url else None
        key_env = {"openai": "OPENAI_API_KEY", "gemini": "GEMINI_API_KEY"}.get(provider)
        raw_key = overrides.get("api_key") or os.environ.get("LLM_API_KEY") or (
            os.environ.get(key_env) if key_env else None
        )
        api_key = str(raw_key).strip() if raw_key else None
        timeout = float(overrides.get("timeout_seconds") or os.environ.get("LLM_TIMEOUT_SECONDS", "60"))
        decoding = overrides.get("decoding")
        return cls(
            provider=provider,
            model=str(model).strip(),
            base_url=base_url,
            api_key=api_key or None,
            timeout_seconds=timeout,
            decoding=decoding if isinstance(decoding, DecodingOptions) else DecodingOptions(),
        )


def load_inference_config(**overrides: object) -> InferenceConfig:
    return InferenceConfig.from_env(**overrides)

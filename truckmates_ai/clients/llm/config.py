from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict


@dataclass(frozen=True)
class DecodingOptions:
    """Sampling parameters sent with every completion request.

    Defaults are tuned for focused, professional answers from a local
    8B model; they are fixed per engine rather than chosen per request.
    """

    temperature: float = 0.5
    top_p: float = 0.85
    top_k: int = 30
    max_new_tokens: int = 1200
    repeat_penalty: float = 1.15
    context_window: int = 4096
    num_threads: int = 4

    def to_ollama_options(self) -> Dict[str, Any]:
        """Map onto the ``options`` object of Ollama's ``/api/generate``."""
        return {
            "temperature": self.temperature,
            "top_p": self.top_p,
            "top_k": self.top_k,
            "num_predict": self.max_new_tokens,
            "repeat_penalty": self.repeat_penalty,
            "num_ctx": self.context_window,
            "num_thread": self.num_threads,
        }

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any] | None = None) -> "DecodingOptions":
        """Load from a dict; unknown keys are ignored, missing keys use defaults."""
        if not data:
            return cls()
        known = {k: v for k, v in data.items() if k in cls.__dataclass_fields__}
        return cls(**known)

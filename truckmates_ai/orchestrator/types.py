"""Core data structures for the orchestrator layer.

Every object here lives for exactly one user turn; nothing is persisted.
"""
from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, List, Optional

ConversationTurn = Dict[str, str]
"""A single turn: {"role": "user" | "assistant", "content": "..."}."""

FunctionHandler = Callable[[Dict[str, Any]], Awaitable[Any]]
"""Tool implementation: receives the parsed arguments dict, returns any JSON-able value."""


def clamp_confidence(value: float) -> float:
    return min(1.0, max(0.0, float(value)))


# ── Request / response ─────────────────────────────────────────────────────


@dataclass(frozen=True)
class RequestContext:
    current_page: Optional[str] = None
    user_id: Optional[str] = None
    company_id: Optional[str] = None


@dataclass(frozen=True)
class AIRequest:
    """One user turn as received from the chat surface."""

    message: str
    conversation_history: Optional[List[ConversationTurn]] = None
    context: Optional[RequestContext] = None


@dataclass
class ActionResult:
    """Outcome of one requested function call; exactly one of result/error is meaningful."""

    function: str
    result: Any = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"function": self.function, "result": self.result}
        if self.error is not None:
            out["error"] = self.error
        return out


@dataclass
class AIResponse:
    """The sole public output of the orchestrator.

    ``error`` set implies ``response == ""`` and ``confidence == 0``; use
    :meth:`failure` to build that envelope.
    """

    response: str
    confidence: float
    actions: Optional[List[ActionResult]] = None
    internet_data: Optional[Dict[str, Any]] = None
    error: Optional[str] = None

    def __post_init__(self) -> None:
        self.confidence = clamp_confidence(self.confidence)

    @classmethod
    def failure(cls, message: str) -> "AIResponse":
        return cls(response="", confidence=0.0, error=message)

    def to_dict(self) -> Dict[str, Any]:
        """Wire shape used by the chat API (camelCase, optional keys omitted)."""
        out: Dict[str, Any] = {
            "response": self.response,
            "confidence": self.confidence,
            "error": self.error,
        }
        if self.actions:
            out["actions"] = [a.to_dict() for a in self.actions]
        if self.internet_data is not None:
            out["internetData"] = self.internet_data
        return out


# ── Functions / tool calls ─────────────────────────────────────────────────


@dataclass(frozen=True)
class FunctionDefinition:
    """Capability the model may invoke; ``parameters`` is a JSON-schema object."""

    name: str
    description: str
    parameters: Dict[str, Any] = field(
        default_factory=lambda: {"type": "object", "properties": {}, "required": []}
    )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "parameters": self.parameters,
        }


@dataclass(frozen=True)
class FunctionCall:
    name: str
    arguments: Dict[str, Any] = field(default_factory=dict)


# ── Generation ─────────────────────────────────────────────────────────────


@dataclass
class LLMContext:
    """Everything the prompt builder may embed for a single generation."""

    conversation_history: Optional[List[ConversationTurn]] = None
    retrieved_data: List[Any] = field(default_factory=list)
    available_functions: List[FunctionDefinition] = field(default_factory=list)
    internet_data: Optional[Dict[str, Any]] = None
    logistics_knowledge: List[Any] = field(default_factory=list)


@dataclass
class LLMResponse:
    response: str
    function_calls: List[FunctionCall] = field(default_factory=list)
    confidence: float = 0.0

    def __post_init__(self) -> None:
        self.confidence = clamp_confidence(self.confidence)


# ── Collaborator payloads ──────────────────────────────────────────────────


@dataclass(frozen=True)
class CallerIdentity:
    user_id: str
    company_id: Optional[str] = None


@dataclass
class RetrievalContext:
    """Platform records plus the knowledge-base slice, from a single retrieval call."""

    loads: List[Any] = field(default_factory=list)
    drivers: List[Any] = field(default_factory=list)
    trucks: List[Any] = field(default_factory=list)
    routes: List[Any] = field(default_factory=list)
    knowledge_base: List[Any] = field(default_factory=list)

    def __post_init__(self) -> None:
        # Backends may hand back None for an empty bucket
        for name in ("loads", "drivers", "trucks", "routes", "knowledge_base"):
            value = getattr(self, name)
            setattr(self, name, [] if value is None else list(value))

    @property
    def records(self) -> List[Any]:
        return [*self.loads, *self.drivers, *self.trucks, *self.routes]


@dataclass
class RealtimeResult:
    """Return shape of every real-time data call: data, or None plus an error."""

    data: Any = None
    error: Optional[str] = None


# ── Configuration ──────────────────────────────────────────────────────────


@dataclass
class OrchestratorConfig:
    """Per-deployment orchestrator behaviour.

    Every collaborator call is bounded by one of the timeouts below; a timeout
    degrades that branch instead of failing the turn. ``None`` disables a
    bound (not recommended outside tests).
    """

    auth_timeout_seconds: Optional[float] = 10.0
    retrieval_timeout_seconds: Optional[float] = 15.0
    external_timeout_seconds: Optional[float] = 10.0
    """Applies to each real-time sub-fetch independently."""

    function_timeout_seconds: Optional[float] = 30.0
    """Applies to each dispatched function call independently."""

    news_limit: int = 3
    max_history_turns: Optional[int] = None
    """Most recent history entries embedded in the prompt. None = all of them."""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "auth_timeout_seconds": self.auth_timeout_seconds,
            "retrieval_timeout_seconds": self.retrieval_timeout_seconds,
            "external_timeout_seconds": self.external_timeout_seconds,
            "function_timeout_seconds": self.function_timeout_seconds,
            "news_limit": self.news_limit,
            "max_history_turns": self.max_history_turns,
        }

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]] = None) -> "OrchestratorConfig":
        """Load from a dict (e.g. JSON file). Missing or malformed keys use defaults."""
        if not data:
            return cls()
        defaults = cls()

        def _timeout(key: str) -> Optional[float]:
            if key not in data:
                return getattr(defaults, key)
            raw = data[key]
            if raw is None:
                return None
            try:
                value = float(raw)
            except (TypeError, ValueError):
                return getattr(defaults, key)
            return value if value > 0 else getattr(defaults, key)

        try:
            news_limit = max(1, int(data.get("news_limit", defaults.news_limit)))
        except (TypeError, ValueError):
            news_limit = defaults.news_limit
        raw_turns = data.get("max_history_turns")
        try:
            max_turns = int(raw_turns) if raw_turns is not None else None
        except (TypeError, ValueError):
            max_turns = None
        return cls(
            auth_timeout_seconds=_timeout("auth_timeout_seconds"),
            retrieval_timeout_seconds=_timeout("retrieval_timeout_seconds"),
            external_timeout_seconds=_timeout("external_timeout_seconds"),
            function_timeout_seconds=_timeout("function_timeout_seconds"),
            news_limit=news_limit,
            max_history_turns=max_turns,
        )

    @classmethod
    def from_env(cls) -> "OrchestratorConfig":
        """Read ORCH_AUTH_TIMEOUT, ORCH_RETRIEVAL_TIMEOUT, ORCH_EXTERNAL_TIMEOUT,
        ORCH_FUNCTION_TIMEOUT, ORCH_NEWS_LIMIT and ORCH_MAX_HISTORY_TURNS."""
        env_map = {
            "auth_timeout_seconds": "ORCH_AUTH_TIMEOUT",
            "retrieval_timeout_seconds": "ORCH_RETRIEVAL_TIMEOUT",
            "external_timeout_seconds": "ORCH_EXTERNAL_TIMEOUT",
            "function_timeout_seconds": "ORCH_FUNCTION_TIMEOUT",
            "news_limit": "ORCH_NEWS_LIMIT",
            "max_history_turns": "ORCH_MAX_HISTORY_TURNS",
        }
        return cls.from_dict(
            {key: os.environ[var] for key, var in env_map.items() if os.environ.get(var)}
        )

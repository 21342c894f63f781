from truckmates_ai.engine.confidence import ConfidenceScorer
from truckmates_ai.engine.llm_engine import UNAVAILABLE_RESPONSE, LLMEngine
from truckmates_ai.engine.prompts import build_expert_prompt
from truckmates_ai.engine.response_cleaner import EMPTY_RESPONSE_FALLBACK, clean_response
from truckmates_ai.engine.tool_call_parser import (
    JsonScanToolCallParser,
    RegexToolCallParser,
    ToolCallParser,
)

__all__ = [
    "ConfidenceScorer",
    "LLMEngine",
    "UNAVAILABLE_RESPONSE",
    "build_expert_prompt",
    "clean_response",
    "EMPTY_RESPONSE_FALLBACK",
    "ToolCallParser",
    "RegexToolCallParser",
    "JsonScanToolCallParser",
]

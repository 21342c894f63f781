"""Recover function calls embedded in free-text completions.

The model is asked to emit ``{"function": "<name>", "arguments": {...}}``
inline, so calls have to be scraped back out of prose. This is inherently
fragile compared to a backend with native structured tool calls; strategies
sit behind ``ToolCallParser`` so a grammar-constrained or native strategy can
replace them without touching the dispatcher. Every strategy returns at most
one call.
"""
from __future__ import annotations

import json
import logging
import re
from abc import ABC, abstractmethod
from typing import Any, Iterator, List, Optional, Tuple

from truckmates_ai.orchestrator.types import FunctionCall

logger = logging.getLogger(__name__)

_PAYLOAD = re.compile(r'\{[\s\S]*?"function"[\s\S]*?\}')
_LOOSE = re.compile(r"function[:\s]+(\w+)[\s\S]*?arguments[:\s]+(\{[\s\S]*?\})", re.IGNORECASE)

_decoder = json.JSONDecoder()


def iter_json_objects(text: str) -> Iterator[Tuple[int, int, Any]]:
    """Yield ``(start, end, value)`` for every decodable JSON value starting at a '{'.

    Scanning resumes one character after each start, so objects nested inside
    a decoded object are yielded too.
    """
    start = text.find("{")
    while start != -1:
        try:
            value, end = _decoder.raw_decode(text, start)
        except ValueError:
            pass
        else:
            yield start, end, value
        start = text.find("{", start + 1)


def _to_call(payload: Any) -> Optional[FunctionCall]:
    if not isinstance(payload, dict):
        return None
    name = payload.get("function")
    if not isinstance(name, str) or not name.strip():
        return None
    arguments = payload.get("arguments")
    return FunctionCall(
        name=name.strip(),
        arguments=arguments if isinstance(arguments, dict) else {},
    )


def _loose_match(text: str, *, balanced: bool) -> Optional[FunctionCall]:
    """``function: <name> ... arguments: {...}`` written as prose."""
    match = _LOOSE.search(text)
    if not match:
        return None
    try:
        if balanced:
            arguments, _ = _decoder.raw_decode(text, match.start(2))
        else:
            arguments = json.loads(match.group(2))
    except ValueError:
        logger.debug("ToolCallParser: loose match for '%s' has unparseable arguments", match.group(1))
        return None
    if not isinstance(arguments, dict):
        return None
    return FunctionCall(name=match.group(1), arguments=arguments)


class ToolCallParser(ABC):
    @abstractmethod
    def parse(self, text: str) -> List[FunctionCall]:
        """Return zero or one FunctionCall found in ``text``."""


class RegexToolCallParser(ToolCallParser):
    """Original heuristic: the first ``{...}`` span mentioning ``"function"``,
    cut at the first closing brace.

    Because the span stops at the first ``}``, a payload with a non-empty
    ``arguments`` object never parses as JSON and falls through to the loose
    prose pattern. Kept for comparison and for backends that only emit flat
    payloads.
    """

    def parse(self, text: str) -> List[FunctionCall]:
        match = _PAYLOAD.search(text or "")
        if not match:
            return []
        try:
            payload = json.loads(match.group(0))
        except ValueError:
            call = _loose_match(text, balanced=False)
            return [call] if call else []
        call = _to_call(payload)
        return [call] if call else []


class JsonScanToolCallParser(ToolCallParser):
    """Decode balanced JSON objects left to right; the first with a ``function``
    key wins. Falls back to the loose prose pattern with balanced arguments."""

    def parse(self, text: str) -> List[FunctionCall]:
        text = text or ""
        if '"function"' in text:
            for _, _, value in iter_json_objects(text):
                call = _to_call(value)
                if call is not None:
                    return [call]
        call = _loose_match(text, balanced=True)
        return [call] if call else []

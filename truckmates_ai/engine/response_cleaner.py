"""Strip machine-oriented residue from a completion before a user sees it."""
from __future__ import annotations

import re
from typing import List

from truckmates_ai.engine.tool_call_parser import iter_json_objects

EMPTY_RESPONSE_FALLBACK = "I've processed your request. How can I help you further?"

_FENCED = re.compile(r"```[\s\S]*?```")
# Payloads too malformed to decode, e.g. a truncated {"function": ...
_FUNCTION_PAYLOAD = re.compile(r'\{[^{}]*"function"[^{}]*\}?')
_LABELS = (
    re.compile(r"Function:\s*\w+", re.IGNORECASE),
    re.compile(r"Parameters?:[\s\S]*?(?=\n\n|\n[A-Z]|$)", re.IGNORECASE),
    re.compile(r"Description:[\s\S]*?(?=\n\n|\n[A-Z]|$)", re.IGNORECASE),
    re.compile(r"AVAILABLE FUNCTIONS:[\s\S]*?(?=\n\n|$)", re.IGNORECASE),
    re.compile(r"Functions:[\s\S]*?(?=\n\n|$)", re.IGNORECASE),
)
_BLANK_RUNS = re.compile(r"\n{3,}")


def strip_json_objects(text: str) -> str:
    """Remove every top-level span that decodes as a JSON object."""
    pieces: List[str] = []
    cursor = 0
    for start, end, value in iter_json_objects(text):
        if start < cursor or not isinstance(value, dict):
            continue
        pieces.append(text[cursor:start])
        cursor = end
    pieces.append(text[cursor:])
    return "".join(pieces)


def clean_response(raw_text: str) -> str:
    cleaned = _FENCED.sub("", raw_text or "")
    cleaned = strip_json_objects(cleaned)
    cleaned = _FUNCTION_PAYLOAD.sub("", cleaned)
    for pattern in _LABELS:
        cleaned = pattern.sub("", cleaned)
    cleaned = _BLANK_RUNS.sub("\n\n", cleaned).strip()
    return cleaned or EMPTY_RESPONSE_FALLBACK

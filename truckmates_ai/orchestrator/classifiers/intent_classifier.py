"""Keyword classifier deciding whether a turn needs real-time external data; no LLM, <1 ms.

Matching is plain case-insensitive substring containment. Two limitations are
accepted and intentionally left as-is:

* false negatives: a time-sensitive question phrased without any listed word
  ("is I-80 open through Wyoming?") gets no external data;
* incidental hits: short words match inside longer ones ("now" in "know"),
  which only costs an extra, harmless external fetch.

Broadening the list changes which turns pay for external calls, so any change
belongs in ``INTERNET_KEYWORDS`` with a test, not in ad-hoc matching.
"""
from __future__ import annotations

import logging
from typing import Iterable, Optional, Tuple

logger = logging.getLogger(__name__)

INTERNET_KEYWORDS: Tuple[str, ...] = (
    # temporal
    "current", "latest", "today", "now", "real-time", "real time",
    # domain
    "weather", "fuel price", "traffic", "news", "market rate",
    # interrogative / search
    "what is", "how much", "search", "find", "look up",
    # weather-adjacent
    "forecast", "conditions", "temperature",
)


class InternetIntentClassifier:
    """Fast deterministic classifier over a fixed keyword set."""

    def __init__(self, keywords: Optional[Iterable[str]] = None) -> None:
        source = INTERNET_KEYWORDS if keywords is None else keywords
        self._keywords = tuple(k.lower() for k in source)

    @property
    def keywords(self) -> Tuple[str, ...]:
        return self._keywords

    def needs_external_data(self, message: str) -> bool:
        lowered = (message or "").lower()
        for keyword in self._keywords:
            if keyword in lowered:
                logger.debug("InternetIntentClassifier: matched '%s'", keyword)
                return True
        return False


_default = InternetIntentClassifier()


def needs_external_data(message: str) -> bool:
    """Module-level shortcut using the default keyword set."""
    return _default.needs_external_data(message)

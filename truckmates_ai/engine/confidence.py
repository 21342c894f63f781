"""Heuristic answer confidence.

This is a rough signal for the UI, not a calibrated probability: it rewards
grounding (knowledge and platform records were available) and length, and
penalises hedging. Swap in another scorer by passing it to ``LLMEngine``.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from truckmates_ai.orchestrator.types import LLMContext, clamp_confidence


@dataclass(frozen=True)
class ConfidenceScorer:
    base: float = 0.7
    knowledge_bonus: float = 0.1
    records_bonus: float = 0.1
    detail_bonus: float = 0.05
    detail_threshold: int = 200
    hedging_penalty: float = 0.2
    hedging_phrases: Tuple[str, ...] = ("not sure", "don't know", "uncertain")

    def score(self, cleaned_text: str, context: Optional[LLMContext] = None) -> float:
        confidence = self.base
        if context is not None and context.logistics_knowledge:
            confidence += self.knowledge_bonus
        if context is not None and context.retrieved_data:
            confidence += self.records_bonus
        if len(cleaned_text) > self.detail_threshold:
            confidence += self.detail_bonus
        lowered = cleaned_text.lower()
        if any(phrase in lowered for phrase in self.hedging_phrases):
            confidence -= self.hedging_penalty
        return clamp_confidence(confidence)

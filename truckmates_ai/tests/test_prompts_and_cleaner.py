"""Unit tests for prompt assembly, response cleaning and confidence scoring."""
from __future__ import annotations

import unittest

from truckmates_ai.engine.confidence import ConfidenceScorer
from truckmates_ai.engine.prompts import build_expert_prompt, format_knowledge
from truckmates_ai.engine.response_cleaner import EMPTY_RESPONSE_FALLBACK, clean_response
from truckmates_ai.orchestrator.types import FunctionDefinition, LLMContext


class TestBuildExpertPrompt(unittest.TestCase):
    def test_empty_context_renders_placeholders(self) -> None:
        prompt = build_expert_prompt("What is deadhead?")
        self.assertIn("No specific knowledge retrieved for this query.", prompt)
        self.assertIn("No platform data available.", prompt)
        self.assertIn("No internet data available.", prompt)
        self.assertIn("No functions available.", prompt)
        self.assertIn("No previous conversation.", prompt)
        self.assertIn("**USER REQUEST:** What is deadhead?", prompt)
        self.assertTrue(prompt.endswith("**RESPONSE:**"))

    def test_sections_keep_fixed_order(self) -> None:
        prompt = build_expert_prompt("hi")
        headers = [
            "**RELEVANT LOGISTICS KNOWLEDGE:**",
            "**PLATFORM DATA:**",
            "**REAL-TIME INTERNET DATA:**",
            "**AVAILABLE FUNCTIONS:**",
            "**CONVERSATION HISTORY:**",
            "**USER REQUEST:**",
            "**CRITICAL INSTRUCTIONS:**",
        ]
        positions = [prompt.index(h) for h in headers]
        self.assertEqual(positions, sorted(positions))

    def test_context_is_embedded(self) -> None:
        context = LLMContext(
            conversation_history=[
                {"role": "user", "content": "hello"},
                {"role": "assistant", "content": "hi there"},
            ],
            retrieved_data=[{"load_number": "L-4521"}],
            internet_data={"fuel_prices": {"location": "Chicago, IL"}},
            available_functions=[
                FunctionDefinition(name="get_load", description="Fetch a load by id")
            ],
            logistics_knowledge=[{"term": "Deadhead", "definition": "Empty miles"}],
        )
        prompt = build_expert_prompt("status?", context)
        self.assertIn("- Deadhead: Empty miles", prompt)
        self.assertIn('"load_number": "L-4521"', prompt)
        self.assertIn('"location": "Chicago, IL"', prompt)
        self.assertIn("Function: get_load", prompt)
        self.assertIn('{"function": "<name>", "arguments": {...}}', prompt)
        self.assertIn("user: hello\nassistant: hi there", prompt)
        self.assertNotIn("No platform data available.", prompt)

    def test_format_knowledge_prefers_title_then_content(self) -> None:
        self.assertEqual(
            format_knowledge([{"title": "IFTA", "content": "Fuel tax agreement", "term": "x"}]),
            "- IFTA: Fuel tax agreement",
        )


class TestCleanResponse(unittest.TestCase):
    def test_strips_function_payload(self) -> None:
        raw = 'Here is your load. {"function": "get_load", "arguments": {"id": "4521"}}'
        self.assertEqual(clean_response(raw), "Here is your load.")

    def test_strips_code_fences(self) -> None:
        raw = "Summary first.\n```json\n{\"a\": 1}\n```\nDone."
        self.assertNotIn("```", clean_response(raw))
        self.assertIn("Summary first.", clean_response(raw))

    def test_strips_truncated_payload(self) -> None:
        self.assertEqual(clean_response('Working on it {"function": "get_load"'), "Working on it")

    def test_strips_function_labels(self) -> None:
        raw = "Sure.\n\nFunction: get_load\n\nAll set."
        cleaned = clean_response(raw)
        self.assertNotIn("Function:", cleaned)
        self.assertIn("All set.", cleaned)

    def test_collapses_blank_runs(self) -> None:
        self.assertEqual(clean_response("a\n\n\n\n\nb"), "a\n\nb")

    def test_empty_result_falls_back(self) -> None:
        self.assertEqual(clean_response('{"function": "list_drivers"}'), EMPTY_RESPONSE_FALLBACK)
        self.assertEqual(clean_response("   "), EMPTY_RESPONSE_FALLBACK)

    def test_plain_text_is_untouched(self) -> None:
        text = "Deadhead miles are miles driven empty."
        self.assertEqual(clean_response(text), text)


class TestConfidenceScorer(unittest.TestCase):
    def setUp(self) -> None:
        self.scorer = ConfidenceScorer()

    def test_base_without_context(self) -> None:
        self.assertAlmostEqual(self.scorer.score("Short answer."), 0.7)

    def test_grounding_and_detail_bonuses(self) -> None:
        context = LLMContext(retrieved_data=[{"id": 1}], logistics_knowledge=[{"term": "x"}])
        self.assertAlmostEqual(self.scorer.score("x" * 201, context), 0.95)

    def test_detail_threshold_is_strict(self) -> None:
        self.assertAlmostEqual(self.scorer.score("x" * 200), 0.7)

    def test_hedging_penalty(self) -> None:
        self.assertAlmostEqual(self.scorer.score("I'm not sure about that lane."), 0.5)

    def test_clamped_to_unit_interval(self) -> None:
        scorer = ConfidenceScorer(base=0.95)
        context = LLMContext(retrieved_data=[1], logistics_knowledge=[1])
        self.assertEqual(scorer.score("x" * 300, context), 1.0)
        self.assertEqual(ConfidenceScorer(base=0.1).score("I don't know"), 0.0)


if __name__ == "__main__":
    unittest.main()

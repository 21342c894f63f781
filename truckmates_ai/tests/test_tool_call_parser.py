"""Unit tests for function-call recovery from free-text completions."""
from __future__ import annotations

import unittest

from truckmates_ai.engine.tool_call_parser import (
    JsonScanToolCallParser,
    RegexToolCallParser,
    iter_json_objects,
)
from truckmates_ai.orchestrator.types import FunctionCall


class TestJsonScanToolCallParser(unittest.TestCase):
    def setUp(self) -> None:
        self.parser = JsonScanToolCallParser()

    def test_payload_with_arguments(self) -> None:
        text = 'I\'ll pull that up. {"function": "get_load", "arguments": {"id": "4521"}}'
        self.assertEqual(
            self.parser.parse(text),
            [FunctionCall(name="get_load", arguments={"id": "4521"})],
        )

    def test_nested_arguments(self) -> None:
        text = '{"function": "create_load", "arguments": {"stops": [{"city": "Miami"}], "meta": {"a": 1}}}'
        calls = self.parser.parse(text)
        self.assertEqual(len(calls), 1)
        self.assertEqual(calls[0].arguments["stops"], [{"city": "Miami"}])

    def test_first_call_wins(self) -> None:
        text = (
            '{"function": "first", "arguments": {}} and then '
            '{"function": "second", "arguments": {}}'
        )
        self.assertEqual([c.name for c in self.parser.parse(text)], ["first"])

    def test_missing_arguments_defaults_to_empty(self) -> None:
        self.assertEqual(
            self.parser.parse('{"function": "list_drivers"}'),
            [FunctionCall(name="list_drivers", arguments={})],
        )

    def test_non_call_json_is_ignored(self) -> None:
        self.assertEqual(self.parser.parse('Totals: {"loads": 4, "miles": 1200}'), [])

    def test_loose_prose_pattern(self) -> None:
        text = 'Function: get_weather with arguments: {"location": "Denver, CO"}'
        self.assertEqual(
            self.parser.parse(text),
            [FunctionCall(name="get_weather", arguments={"location": "Denver, CO"})],
        )

    def test_plain_text_has_no_calls(self) -> None:
        self.assertEqual(self.parser.parse("Deadhead is empty miles."), [])
        self.assertEqual(self.parser.parse(""), [])


class TestRegexToolCallParser(unittest.TestCase):
    def setUp(self) -> None:
        self.parser = RegexToolCallParser()

    def test_flat_payload(self) -> None:
        self.assertEqual(
            self.parser.parse('{"function": "list_drivers"}'),
            [FunctionCall(name="list_drivers", arguments={})],
        )

    def test_payload_with_arguments_is_missed(self) -> None:
        # The span stops at the first closing brace, so this never decodes
        text = '{"function": "get_load", "arguments": {"id": "4521"}}'
        self.assertEqual(self.parser.parse(text), [])


class TestIterJsonObjects(unittest.TestCase):
    def test_yields_outer_and_nested_objects(self) -> None:
        values = [v for _, _, v in iter_json_objects('x {"a": {"b": 1}} y')]
        self.assertEqual(values, [{"a": {"b": 1}}, {"b": 1}])

    def test_skips_undecodable_braces(self) -> None:
        self.assertEqual(list(iter_json_objects("{ not json }")), [])


if __name__ == "__main__":
    unittest.main()

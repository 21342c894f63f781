"""Unit tests for Orchestrator.process_request: auth short-circuit, full turn, error envelope."""
from __future__ import annotations

import asyncio
import unittest
from typing import Any, Dict, List, Optional

from truckmates_ai.clients.llm.base import BaseLLMClient
from truckmates_ai.config.inference import InferenceConfig
from truckmates_ai.core.exceptions import AuthenticationError
from truckmates_ai.engine.llm_engine import UNAVAILABLE_RESPONSE, LLMEngine
from truckmates_ai.orchestrator.auth import BaseAuthResolver, StaticTokenAuthResolver
from truckmates_ai.orchestrator.context.retrieval import BaseRetrievalService
from truckmates_ai.orchestrator.context.sources import BaseRealtimeDataProvider
from truckmates_ai.orchestrator.dispatch.registry import FunctionRegistry, RegisteredFunction
from truckmates_ai.orchestrator.orchestrator import (
    NO_COMPANY,
    NOT_AUTHENTICATED,
    Orchestrator,
)
from truckmates_ai.orchestrator.types import (
    AIRequest,
    CallerIdentity,
    FunctionDefinition,
    OrchestratorConfig,
    RealtimeResult,
    RetrievalContext,
)

TOKEN = "tok-1"


class ScriptedLLM(BaseLLMClient):
    def __init__(self, reply: str = "", *, error: Optional[Exception] = None):
        self.reply = reply
        self.error = error
        self.prompts: List[str] = []

    @property
    def provider(self) -> str:
        return "scripted"

    @property
    def model(self) -> str:
        return "scripted-1"

    async def complete(self, prompt: str, *, options=None) -> str:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.reply

    async def test_connection(self) -> bool:
        return True


class RecordingRetrieval(BaseRetrievalService):
    def __init__(self, context: Optional[RetrievalContext] = None):
        self.context = context or RetrievalContext()
        self.calls = 0

    async def retrieve_context(self, query: str, user_id: str, company_id: str) -> RetrievalContext:
        self.calls += 1
        return self.context


class RecordingProvider(BaseRealtimeDataProvider):
    def __init__(self):
        self.calls = 0

    async def _hit(self, **data: Any) -> RealtimeResult:
        self.calls += 1
        return RealtimeResult(data=data)

    async def get_fuel_prices(self, location: str) -> RealtimeResult:
        return await self._hit(location=location, price_per_gallon=3.89)

    async def get_weather(self, location: str) -> RealtimeResult:
        return await self._hit(location=location)

    async def get_traffic_conditions(self, origin: str, destination: str) -> RealtimeResult:
        return await self._hit(route=f"{origin} to {destination}")

    async def get_logistics_news(self, category=None, limit: int = 3) -> RealtimeResult:
        return await self._hit(limit=limit)

    async def get_market_rate(self, origin: str, destination: str) -> RealtimeResult:
        return await self._hit(lane=f"{origin} to {destination}")


class FixedClassifier:
    def __init__(self, answer: bool):
        self.answer = answer
        self.calls = 0

    def needs_external_data(self, message: str) -> bool:
        self.calls += 1
        return self.answer


class ExplodingClassifier:
    def needs_external_data(self, message: str) -> bool:
        raise RuntimeError("classifier blew up")


class SlowAuth(BaseAuthResolver):
    async def resolve(self, caller_token: Optional[str]) -> CallerIdentity:
        await asyncio.sleep(1)
        return CallerIdentity("u1", "c1")


class TestOrchestratorBase(unittest.TestCase):
    def setUp(self) -> None:
        self.llm = ScriptedLLM("Deadhead is the distance a truck travels empty.")
        self.retrieval = RecordingRetrieval()
        self.provider = RecordingProvider()
        self.registry = FunctionRegistry()
        self.auth = StaticTokenAuthResolver(
            {
                TOKEN: CallerIdentity("u1", "c1"),
                "no-company": CallerIdentity("u2"),
            }
        )

    def build(self, **overrides) -> Orchestrator:
        kwargs: Dict[str, Any] = dict(
            auth_resolver=self.auth,
            retrieval_service=self.retrieval,
            realtime_provider=self.provider,
            function_registry=self.registry,
        )
        kwargs.update(overrides)
        return Orchestrator(LLMEngine(InferenceConfig(), client=self.llm), **kwargs)

    def run_turn(self, orch: Orchestrator, message: str, token: Optional[str] = TOKEN, **request):
        return asyncio.run(
            orch.process_request(AIRequest(message=message, **request), caller_token=token)
        )


class TestAuthentication(TestOrchestratorBase):
    def test_unknown_caller_short_circuits(self) -> None:
        classifier = FixedClassifier(True)
        result = self.run_turn(self.build(classifier=classifier), "fuel in Chicago, IL", token="bad")

        self.assertEqual(result.error, NOT_AUTHENTICATED)
        self.assertEqual(result.response, "")
        self.assertEqual(result.confidence, 0.0)
        self.assertEqual(classifier.calls, 0)
        self.assertEqual(self.retrieval.calls, 0)
        self.assertEqual(self.provider.calls, 0)
        self.assertEqual(self.llm.prompts, [])

    def test_missing_token(self) -> None:
        result = self.run_turn(self.build(), "hi", token=None)
        self.assertEqual(result.error, NOT_AUTHENTICATED)

    def test_bearer_prefix_accepted(self) -> None:
        result = self.run_turn(self.build(), "hi", token=f"Bearer {TOKEN}")
        self.assertIsNone(result.error)

    def test_caller_without_company(self) -> None:
        result = self.run_turn(self.build(), "hi", token="no-company")

        self.assertEqual(result.error, NO_COMPANY)
        self.assertEqual(self.retrieval.calls, 0)

    def test_auth_timeout_is_not_authenticated(self) -> None:
        orch = self.build(
            auth_resolver=SlowAuth(),
            config=OrchestratorConfig(auth_timeout_seconds=0.05),
        )
        result = self.run_turn(orch, "hi")

        self.assertEqual(result.error, NOT_AUTHENTICATED)
        self.assertEqual(self.llm.prompts, [])


class TestProcessRequest(TestOrchestratorBase):
    def test_knowledge_question_end_to_end(self) -> None:
        result = self.run_turn(self.build(classifier=FixedClassifier(False)), "What is deadhead?")

        self.assertEqual(result.response, "Deadhead is the distance a truck travels empty.")
        self.assertEqual(result.confidence, 0.7)
        self.assertIsNone(result.actions)
        self.assertIsNone(result.internet_data)
        self.assertIsNone(result.error)
        self.assertEqual(self.provider.calls, 0)
        self.assertEqual(self.retrieval.calls, 1)

    def test_fuel_question_carries_internet_data(self) -> None:
        result = self.run_turn(self.build(), "What's the current diesel price in Chicago, IL?")

        self.assertEqual(
            result.internet_data,
            {"fuel_prices": {"location": "Chicago, IL", "price_per_gallon": 3.89}},
        )
        self.assertIn('"price_per_gallon": 3.89', self.llm.prompts[0])

    def test_external_intent_with_nothing_fetched_has_no_internet_data(self) -> None:
        result = self.run_turn(self.build(), "Weather on I-80?")

        self.assertIsNone(result.internet_data)
        self.assertIsNone(result.error)

    def test_requested_function_is_dispatched(self) -> None:
        async def get_load(arguments: Dict[str, Any]) -> Dict[str, Any]:
            return {"id": arguments["id"], "status": "delivered"}

        self.registry.register(
            RegisteredFunction(FunctionDefinition("get_load", "Fetch a load"), get_load)
        )
        self.llm.reply = 'Checking now. {"function": "get_load", "arguments": {"id": "4521"}}'

        result = self.run_turn(self.build(classifier=FixedClassifier(False)), "Show me load 4521")

        self.assertEqual(result.response, "Checking now.")
        self.assertEqual(len(result.actions), 1)
        self.assertEqual(result.actions[0].function, "get_load")
        self.assertEqual(result.actions[0].result, {"id": "4521", "status": "delivered"})
        self.assertIn("Function: get_load", self.llm.prompts[0])

    def test_unknown_function_becomes_failed_action(self) -> None:
        self.llm.reply = 'Sure. {"function": "delete_fleet", "arguments": {}}'

        result = self.run_turn(self.build(classifier=FixedClassifier(False)), "do it")

        self.assertIsNone(result.error)
        self.assertEqual(result.actions[0].error, "Function delete_fleet not found")

    def test_backend_down_gives_fallback_not_error(self) -> None:
        self.llm.error = ConnectionError("ollama unreachable")

        result = self.run_turn(self.build(classifier=FixedClassifier(False)), "hi")

        self.assertEqual(result.response, UNAVAILABLE_RESPONSE)
        self.assertEqual(result.confidence, 0.0)
        self.assertIsNone(result.error)

    def test_unexpected_error_becomes_error_envelope(self) -> None:
        result = self.run_turn(self.build(classifier=ExplodingClassifier()), "hi")

        self.assertEqual(result.error, "classifier blew up")
        self.assertEqual(result.response, "")
        self.assertEqual(result.confidence, 0.0)

    def test_blank_message_is_rejected(self) -> None:
        result = self.run_turn(self.build(), "   ")

        self.assertEqual(result.error, "Message is required")
        self.assertEqual(self.llm.prompts, [])

    def test_history_is_trimmed(self) -> None:
        history = [
            {"role": "user", "content": "first question"},
            {"role": "assistant", "content": "first answer"},
            {"role": "user", "content": "second question"},
        ]
        orch = self.build(
            classifier=FixedClassifier(False),
            config=OrchestratorConfig(max_history_turns=1),
        )
        self.run_turn(orch, "and then?", conversation_history=history)

        self.assertIn("user: second question", self.llm.prompts[0])
        self.assertNotIn("first question", self.llm.prompts[0])

    def test_retrieved_records_raise_confidence(self) -> None:
        self.retrieval.context = RetrievalContext(
            loads=[{"load_number": "L-4521"}],
            knowledge_base=[{"term": "Detention", "definition": "Wait time at a facility"}],
        )

        result = self.run_turn(self.build(classifier=FixedClassifier(False)), "status of L-4521")

        self.assertAlmostEqual(result.confidence, 0.9)
        self.assertIn("- Detention: Wait time at a facility", self.llm.prompts[0])

    def test_retrieval_with_none_buckets_still_answers(self) -> None:
        self.retrieval.context = RetrievalContext(loads=None, knowledge_base=None)

        result = self.run_turn(self.build(classifier=FixedClassifier(False)), "Show me my loads")

        self.assertIsNone(result.error)
        self.assertEqual(result.response, "Deadhead is the distance a truck travels empty.")
        self.assertEqual(result.confidence, 0.7)

    def test_to_dict_wire_shape(self) -> None:
        result = self.run_turn(self.build(classifier=FixedClassifier(False)), "What is deadhead?")

        self.assertEqual(
            result.to_dict(),
            {
                "response": "Deadhead is the distance a truck travels empty.",
                "confidence": 0.7,
                "error": None,
            },
        )


class TestStaticTokenAuthResolver(unittest.TestCase):
    def test_from_string(self) -> None:
        resolver = StaticTokenAuthResolver.from_string("a=u1:c1, b=u2")

        self.assertEqual(asyncio.run(resolver.resolve("a")), CallerIdentity("u1", "c1"))
        self.assertEqual(asyncio.run(resolver.resolve("Bearer b")), CallerIdentity("u2", None))
        with self.assertRaises(AuthenticationError):
            asyncio.run(resolver.resolve("c"))


if __name__ == "__main__":
    unittest.main()

"""Tests for the chat router: status mapping, response shape and SSE streaming."""
from __future__ import annotations

import json
import unittest
from types import SimpleNamespace
from unittest.mock import AsyncMock, patch

from fastapi import FastAPI
from fastapi.testclient import TestClient
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from truckmates_ai.orchestrator.orchestrator import NOT_AUTHENTICATED
from truckmates_ai.orchestrator.types import ActionResult, AIRequest, AIResponse

CHAT_URL = "/api/v1/truckmates-ai/chat"


def _make_test_app(result: AIResponse):
    """Minimal app with the chat router mounted and a fake orchestrator on app.state."""
    from truckmates_ai.api.routers import chat

    app = FastAPI()
    app.state.limiter = chat.limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    app.include_router(chat.router, prefix="/api/v1")

    fake_engine = SimpleNamespace(
        check_availability=AsyncMock(return_value=True),
        list_models=AsyncMock(return_value=["llama3.1:8b", "mistral:7b"]),
        client=SimpleNamespace(provider="ollama"),
        config=SimpleNamespace(model="llama3.1:8b"),
    )
    orchestrator = SimpleNamespace(
        process_request=AsyncMock(return_value=result),
        engine=fake_engine,
    )
    app.state.orchestrator = orchestrator
    return app, orchestrator


def _sse_payloads(body: str):
    return [
        json.loads(line[len("data: "):])
        for line in body.split("\n\n")
        if line.startswith("data: ")
    ]


class TestChatEndpoint(unittest.TestCase):
    def test_success_shape(self) -> None:
        app, orch = _make_test_app(
            AIResponse(
                response="Diesel is $3.89/gal in Chicago.",
                confidence=0.8,
                internet_data={"fuel_prices": {"location": "Chicago, IL"}},
            )
        )
        client = TestClient(app)

        resp = client.post(
            CHAT_URL,
            json={
                "message": "diesel in Chicago, IL?",
                "conversationHistory": [{"role": "user", "content": "hi"}],
            },
            headers={"Authorization": "Bearer tok-1"},
        )

        self.assertEqual(resp.status_code, 200)
        self.assertEqual(
            resp.json(),
            {
                "response": "Diesel is $3.89/gal in Chicago.",
                "internetData": {"fuel_prices": {"location": "Chicago, IL"}},
                "confidence": 0.8,
            },
        )
        request: AIRequest = orch.process_request.call_args.args[0]
        self.assertEqual(request.message, "diesel in Chicago, IL?")
        self.assertEqual(request.conversation_history, [{"role": "user", "content": "hi"}])
        self.assertEqual(orch.process_request.call_args.kwargs["caller_token"], "Bearer tok-1")

    def test_actions_are_serialized(self) -> None:
        app, _ = _make_test_app(
            AIResponse(
                response="Done.",
                confidence=0.7,
                actions=[ActionResult(function="get_load", result={"id": "4521"})],
            )
        )

        resp = TestClient(app).post(CHAT_URL, json={"message": "load 4521"})

        self.assertEqual(resp.json()["actions"], [{"function": "get_load", "result": {"id": "4521"}}])

    def test_missing_message_is_400(self) -> None:
        app, orch = _make_test_app(AIResponse(response="x", confidence=0.7))
        client = TestClient(app)

        self.assertEqual(client.post(CHAT_URL, json={}).status_code, 400)
        self.assertEqual(client.post(CHAT_URL, json={"message": "  "}).status_code, 400)
        orch.process_request.assert_not_awaited()

    def test_not_authenticated_is_401(self) -> None:
        app, _ = _make_test_app(AIResponse.failure(NOT_AUTHENTICATED))

        resp = TestClient(app).post(CHAT_URL, json={"message": "hi"})

        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.json()["detail"], NOT_AUTHENTICATED)

    def test_other_error_is_500(self) -> None:
        app, _ = _make_test_app(AIResponse.failure("AI processing failed"))

        resp = TestClient(app).post(CHAT_URL, json={"message": "hi"})

        self.assertEqual(resp.status_code, 500)
        self.assertEqual(resp.json()["detail"], "AI processing failed")

    def test_missing_orchestrator_is_503(self) -> None:
        app, _ = _make_test_app(AIResponse(response="x", confidence=0.7))
        app.state.orchestrator = None

        resp = TestClient(app).post(CHAT_URL, json={"message": "hi"})

        self.assertEqual(resp.status_code, 503)


class TestChatStreaming(unittest.TestCase):
    def setUp(self) -> None:
        from truckmates_ai.api.routers import chat

        patcher = patch.object(chat, "STREAM_WORD_DELAY_SECONDS", 0)
        patcher.start()
        self.addCleanup(patcher.stop)

    def test_streams_words_actions_and_done(self) -> None:
        app, _ = _make_test_app(
            AIResponse(
                response="Load is delivered",
                confidence=0.7,
                actions=[ActionResult(function="get_load", result={"id": "4521"})],
            )
        )

        resp = TestClient(app).post(CHAT_URL, json={"message": "load 4521", "stream": True})

        self.assertEqual(resp.status_code, 200)
        self.assertTrue(resp.headers["content-type"].startswith("text/event-stream"))
        self.assertEqual(
            _sse_payloads(resp.text),
            [
                {"content": "Load "},
                {"content": "is "},
                {"content": "delivered"},
                {"actions": [{"function": "get_load", "result": {"id": "4521"}}]},
                {"done": True},
            ],
        )

    def test_streamed_error_is_single_frame(self) -> None:
        app, _ = _make_test_app(AIResponse.failure(NOT_AUTHENTICATED))

        resp = TestClient(app).post(CHAT_URL, json={"message": "hi", "stream": True})

        self.assertEqual(_sse_payloads(resp.text), [{"error": NOT_AUTHENTICATED}])


class TestApplication(unittest.TestCase):
    def test_health(self) -> None:
        from truckmates_ai.api.main import app

        self.assertEqual(TestClient(app).get("/health").json(), {"status": "ok"})

    def test_escaped_package_error_keeps_status_and_code(self) -> None:
        from truckmates_ai.api.main import app
        from truckmates_ai.core.exceptions import ConfigurationError

        orchestrator = SimpleNamespace(
            process_request=AsyncMock(side_effect=ConfigurationError("OLLAMA_BASE_URL is invalid"))
        )
        app.state.orchestrator = orchestrator
        self.addCleanup(setattr, app.state, "orchestrator", None)

        resp = TestClient(app).post(CHAT_URL, json={"message": "hi"})

        self.assertEqual(resp.status_code, 500)
        self.assertEqual(
            resp.json(), {"detail": "OLLAMA_BASE_URL is invalid", "code": "CONFIGURATION_ERROR"}
        )


class TestStatusEndpoint(unittest.TestCase):
    def test_status(self) -> None:
        app, _ = _make_test_app(AIResponse(response="x", confidence=0.7))

        resp = TestClient(app).get("/api/v1/truckmates-ai/status")

        self.assertEqual(
            resp.json(),
            {
                "available": True,
                "provider": "ollama",
                "model": "llama3.1:8b",
                "models": ["llama3.1:8b", "mistral:7b"],
            },
        )


if __name__ == "__main__":
    unittest.main()

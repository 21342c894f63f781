"""TruckMates AI FastAPI application entry point.

Start with:
    uvicorn truckmates_ai.api.main:app --reload --host 0.0.0.0 --port 8000

The orchestrator is built from env at startup unless one was already placed on
``app.state.orchestrator`` (tests, embedding applications):
  LLM_PROVIDER / OLLAMA_BASE_URL / OLLAMA_MODEL   inference backend (default local Ollama)
  TAVILY_API_KEY or SERPER_API_KEY               web search; enables the real-time functions
  OPENWEATHER_API_KEY                            weather lookups
  TRUCKMATES_API_TOKENS                          "token=user_id:company_id,..." caller map
"""
from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from truckmates_ai.core.exceptions import TruckMatesError
from truckmates_ai.core.logger import configure

logger = logging.getLogger(__name__)


def _build_orchestrator_from_env():
    from truckmates_ai.clients.realtime.web import WebRealtimeDataProvider
    from truckmates_ai.config import load_inference_config, load_realtime_config
    from truckmates_ai.engine.llm_engine import LLMEngine
    from truckmates_ai.orchestrator.auth import StaticTokenAuthResolver
    from truckmates_ai.orchestrator.orchestrator import Orchestrator
    from truckmates_ai.orchestrator.types import OrchestratorConfig
    from truckmates_ai.tools.registry_builder import build_function_registry

    inference = load_inference_config()
    engine = LLMEngine(inference)
    logger.info("API: using %s LLM (%s)", inference.provider, inference.model)

    realtime_cfg = load_realtime_config()
    realtime_provider = WebRealtimeDataProvider(realtime_cfg)
    if not realtime_cfg.search_enabled:
        logger.info("API: no search API key, real-time functions not registered")
    registry = build_function_registry(
        realtime_provider if realtime_cfg.search_enabled else None
    )

    return Orchestrator(
        engine,
        auth_resolver=StaticTokenAuthResolver.from_env(),
        realtime_provider=realtime_provider,
        function_registry=registry,
        config=OrchestratorConfig.from_env(),
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    # ── Startup ──────────────────────────────────────────────────
    configure()
    if getattr(app.state, "orchestrator", None) is None:
        app.state.orchestrator = _build_orchestrator_from_env()
    logger.info("API: orchestrator ready")

    yield

    # ── Shutdown ─────────────────────────────────────────────────
    logger.info("API: shutting down")


app = FastAPI(
    title="TruckMates AI API",
    version="0.1.0",
    description="AI assistant for trucking operations: chat and model status.",
    lifespan=lifespan,
)

from truckmates_ai.api.routers import chat  # noqa: E402

# Rate limiter: the chat route's limit is read from CHAT_RATE_LIMIT (default 30/minute)
app.state.limiter = chat.limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


@app.exception_handler(TruckMatesError)
async def truckmates_error_handler(request: Request, exc: TruckMatesError):
    """Errors escaping a route (misconfiguration, dependency failures) keep their status and code."""
    logger.warning("API: %s %s failed", request.method, request.url.path, extra={"error": exc.to_dict()})
    return JSONResponse(
        status_code=exc.http_status,
        content={"detail": exc.message, "code": exc.code},
    )


# CORS: allow the web app dev server and any configured origin
_allowed_origins = os.environ.get(
    "CORS_ORIGINS", "http://localhost:3000,http://127.0.0.1:3000"
).split(",")

app.add_middleware(
    CORSMiddleware,
    allow_origins=_allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(chat.router, prefix="/api/v1")


@app.get("/health", tags=["health"])
async def health():
    return {"status": "ok"}

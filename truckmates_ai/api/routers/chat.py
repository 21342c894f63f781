"""Chat router: one AI turn per request, JSON or server-sent events.

Endpoint annotations must stay evaluated (no postponed annotations) since
the rate-limit decorator wraps the endpoint functions.
"""
import asyncio
import json
import logging
import os
from typing import Any, AsyncIterator, Dict, Optional

from fastapi import APIRouter, Depends, Header, HTTPException, Request, status
from fastapi.responses import StreamingResponse
from slowapi import Limiter
from slowapi.util import get_remote_address

from truckmates_ai.api.dependencies import get_orchestrator
from truckmates_ai.api.schemas.chat import ActionSchema, ChatRequest, ChatResponse, StatusResponse
from truckmates_ai.orchestrator.orchestrator import NOT_AUTHENTICATED, Orchestrator
from truckmates_ai.orchestrator.types import AIRequest, AIResponse

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/truckmates-ai", tags=["truckmates-ai"])
limiter = Limiter(key_func=get_remote_address)

_CHAT_RATE_LIMIT = os.environ.get("CHAT_RATE_LIMIT", "30/minute")
STREAM_WORD_DELAY_SECONDS = 0.02


def _sse(payload: Dict[str, Any]) -> str:
    return f"data: {json.dumps(payload)}\n\n"


async def _stream_frames(result: AIResponse) -> AsyncIterator[str]:
    """Replay a finished answer word by word, then actions, then a done marker."""
    if result.error:
        yield _sse({"error": result.error})
        return

    words = result.response.split(" ")
    for i, word in enumerate(words):
        yield _sse({"content": word + (" " if i < len(words) - 1 else "")})
        if STREAM_WORD_DELAY_SECONDS:
            await asyncio.sleep(STREAM_WORD_DELAY_SECONDS)

    if result.actions:
        yield _sse({"actions": [a.to_dict() for a in result.actions]})
    yield _sse({"done": True})


@router.post("/chat", response_model=ChatResponse, response_model_exclude_none=True)
@limiter.limit(_CHAT_RATE_LIMIT)
async def chat(
    request: Request,
    body: ChatRequest,
    authorization: Optional[str] = Header(default=None),
    orch: Orchestrator = Depends(get_orchestrator),
):
    if not body.message or not body.message.strip():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Message is required")

    ai_request = AIRequest(
        message=body.message,
        conversation_history=(
            [turn.model_dump() for turn in body.conversation_history]
            if body.conversation_history
            else None
        ),
    )
    result = await orch.process_request(ai_request, caller_token=authorization)

    if body.stream:
        return StreamingResponse(
            _stream_frames(result),
            media_type="text/event-stream",
            headers={"Cache-Control": "no-cache", "Connection": "keep-alive"},
        )

    if result.error:
        code = (
            status.HTTP_401_UNAUTHORIZED
            if result.error == NOT_AUTHENTICATED
            else status.HTTP_500_INTERNAL_SERVER_ERROR
        )
        logger.info("chat: turn failed (%d): %s", code, result.error)
        raise HTTPException(status_code=code, detail=result.error)

    return ChatResponse(
        response=result.response,
        actions=[ActionSchema(**a.to_dict()) for a in result.actions] if result.actions else None,
        internet_data=result.internet_data,
        confidence=result.confidence,
    )


@router.get("/status", response_model=StatusResponse)
async def model_status(orch: Orchestrator = Depends(get_orchestrator)):
    """Inference backend reachability and the models it serves."""
    engine = orch.engine
    available = await engine.check_availability()
    models = await engine.list_models() if available else []
    return StatusResponse(
        available=available,
        provider=engine.client.provider,
        model=engine.config.model,
        models=models,
    )

"""Pydantic v2 schemas for the TruckMates AI chat API (camelCase on the wire)."""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ConversationTurnSchema(BaseModel):
    role: str = Field(..., max_length=32)
    content: str = Field(default="", max_length=8000)


class ChatRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    # Optional here so the router can answer 400 "Message is required" itself
    message: Optional[str] = Field(default=None, max_length=8000)
    conversation_history: Optional[List[ConversationTurnSchema]] = Field(
        default=None, alias="conversationHistory"
    )
    stream: bool = False


class ActionSchema(BaseModel):
    function: str
    result: Any = None
    error: Optional[str] = None


class ChatResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    response: str
    actions: Optional[List[ActionSchema]] = None
    internet_data: Optional[Dict[str, Any]] = Field(default=None, alias="internetData")
    confidence: float


class StatusResponse(BaseModel):
    available: bool
    provider: str
    model: str
    models: List[str] = []

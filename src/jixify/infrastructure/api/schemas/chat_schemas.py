"""Pydantic schemas for the chat endpoint."""

from pydantic import BaseModel, Field


class ChatRequest(BaseModel):
    """Request body for a chat completion."""

    message: str | None = Field(None, description="User message")


class ChatResponse(BaseModel):
    """Completion reply."""

    reply: str = Field(..., description="Model reply")

"""API Schemas for request/response validation."""

from jixify.infrastructure.api.schemas.auth_schemas import (
    ErrorResponse,
    LoginRequest,
    MessageResponse,
    RegisterRequest,
    ResendVerificationRequest,
    TokenResponse,
)
from jixify.infrastructure.api.schemas.chat_schemas import ChatRequest, ChatResponse

__all__ = [
    "ChatRequest",
    "ChatResponse",
    "ErrorResponse",
    "LoginRequest",
    "MessageResponse",
    "RegisterRequest",
    "ResendVerificationRequest",
    "TokenResponse",
]

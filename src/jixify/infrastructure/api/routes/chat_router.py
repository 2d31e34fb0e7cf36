"""Chat proxy routes, available to authenticated sessions only."""

from typing import Annotated

from fastapi import APIRouter, Depends

from jixify.core.logging import get_logger
from jixify.domain.exceptions import ValidationError
from jixify.infrastructure.api.dependencies import (
    AuthenticatedSession,
    get_completion_provider,
)
from jixify.infrastructure.api.schemas import ChatRequest, ChatResponse
from jixify.infrastructure.services.completion import CompletionProvider

logger = get_logger(__name__)

router = APIRouter()


@router.post(
    "/chat",
    response_model=ChatResponse,
    responses={
        400: {"description": "Message is required"},
        401: {"description": "No session token presented"},
        403: {"description": "Invalid or expired session token"},
    },
)
async def chat(
    request: ChatRequest,
    session: AuthenticatedSession,
    provider: Annotated[CompletionProvider, Depends(get_completion_provider)],
) -> ChatResponse:
    """Forward a message to the completion model and return its reply."""
    if not request.message:
        raise ValidationError("Message is required")

    reply = await provider.complete(request.message)
    logger.info("Chat completed", account_id=session.account_id)
    return ChatResponse(reply=reply)

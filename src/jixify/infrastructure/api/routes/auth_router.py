"""Authentication API routes.

Provides endpoints for registration, email verification and login.
"""

from fastapi import APIRouter, status
from fastapi.responses import HTMLResponse, PlainTextResponse

from jixify.domain.exceptions import JixifyError
from jixify.infrastructure.api.dependencies import LifecycleService
from jixify.infrastructure.api.errors import status_code_for
from jixify.infrastructure.api.schemas import (
    ErrorResponse,
    LoginRequest,
    MessageResponse,
    RegisterRequest,
    ResendVerificationRequest,
    TokenResponse,
)

router = APIRouter()

VERIFIED_PAGE = """<html><body style="font-family:Arial;text-align:center;padding:40px;">
  <h1>&#9989; Email Verified</h1>
  <p>You can now login at your frontend.</p>
</body></html>"""


@router.post(
    "/register",
    status_code=status.HTTP_201_CREATED,
    response_model=MessageResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Missing fields, or email/username already taken"},
        500: {"model": ErrorResponse, "description": "Verification email could not be sent"},
    },
)
async def register(
    request: RegisterRequest,
    lifecycle: LifecycleService,
) -> MessageResponse:
    """Register a new account and email it a verification link.

    The account cannot log in until the link has been followed.
    """
    await lifecycle.register(request.username, request.email, request.password)
    return MessageResponse(message="Registered. Check your email to verify.")


@router.get(
    "/verify-email",
    response_class=HTMLResponse,
    response_model=None,
    responses={
        400: {"description": "Token missing, invalid or expired"},
        404: {"description": "No account for the token's email"},
    },
)
async def verify_email(
    lifecycle: LifecycleService,
    token: str | None = None,
) -> HTMLResponse | PlainTextResponse:
    """Verify an email address from the link sent at registration.

    Answers with a small HTML page for browsers; errors are plain text.
    """
    try:
        await lifecycle.verify_email(token)
    except JixifyError as e:
        return PlainTextResponse(e.message, status_code=status_code_for(e))
    return HTMLResponse(VERIFIED_PAGE)


@router.post(
    "/resend-verification",
    response_model=MessageResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Email missing or already verified"},
        404: {"model": ErrorResponse, "description": "Email not found"},
    },
)
async def resend_verification(
    request: ResendVerificationRequest,
    lifecycle: LifecycleService,
) -> MessageResponse:
    """Send a fresh verification link to an unverified account."""
    await lifecycle.resend_verification(request.email)
    return MessageResponse(message="Verification email sent.")


@router.post(
    "/login",
    response_model=TokenResponse,
    responses={
        401: {"model": ErrorResponse, "description": "Invalid credentials"},
        403: {"model": ErrorResponse, "description": "Email not verified"},
    },
)
async def login(
    request: LoginRequest,
    lifecycle: LifecycleService,
) -> TokenResponse:
    """Exchange email and password for a session token."""
    token = await lifecycle.login(request.email, request.password)
    return TokenResponse(token=token)

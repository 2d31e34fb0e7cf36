"""Pydantic schemas for authentication endpoints.

Required fields are declared optional here and enforced by the lifecycle
service, so a missing field yields the service's own validation message.
Emails are plain strings: addresses are stored exactly as supplied.
"""

from pydantic import BaseModel, Field


class RegisterRequest(BaseModel):
    """Request body for account registration."""

    username: str | None = Field(None, max_length=255, description="Optional unique username")
    email: str | None = Field(None, max_length=255, description="User's email address")
    password: str | None = Field(None, description="User's password")


class LoginRequest(BaseModel):
    """Request body for login."""

    email: str | None = Field(None, description="User's email address")
    password: str | None = Field(None, description="User's password")


class ResendVerificationRequest(BaseModel):
    """Request body for re-sending a verification link."""

    email: str | None = Field(None, description="Email address to verify")


class MessageResponse(BaseModel):
    """Plain confirmation message."""

    message: str = Field(..., description="Human-readable message")


class TokenResponse(BaseModel):
    """Response for successful login."""

    token: str = Field(..., description="Session token (JWT)")


class ErrorResponse(BaseModel):
    """Response for failed requests."""

    error: str = Field(..., description="Human-readable error message")

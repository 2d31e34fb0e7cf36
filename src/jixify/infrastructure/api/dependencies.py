"""FastAPI dependencies wiring the lifecycle service and request authentication.

Each collaborator has its own dependency so tests can override any of them
through ``app.dependency_overrides``.
"""

from typing import Annotated

from fastapi import Cookie, Depends, Header, Request
from sqlalchemy.ext.asyncio import AsyncSession

from jixify.core.config import Settings
from jixify.domain.entities import SessionClaims
from jixify.domain.ports import AccountStore, CredentialHasher, Notifier, TokenIssuer
from jixify.domain.services import AccountLifecycleService
from jixify.infrastructure.auth import Argon2CredentialHasher, JWTService
from jixify.infrastructure.persistence.database import get_db_session
from jixify.infrastructure.persistence.repositories import AccountRepository
from jixify.infrastructure.services.completion import (
    CompletionProvider,
    OpenAICompletionProvider,
)
from jixify.infrastructure.services.email_service import EmailService


def get_app_settings(request: Request) -> Settings:
    """Settings the application was created with."""
    return request.app.state.settings


AppSettings = Annotated[Settings, Depends(get_app_settings)]


def get_token_service(settings: AppSettings) -> TokenIssuer:
    """Token service signing with the configured secret."""
    return JWTService.from_settings(settings)


def get_credential_hasher(request: Request, settings: AppSettings) -> CredentialHasher:
    """Process-wide Argon2 hasher, created on first use."""
    hasher = getattr(request.app.state, "credential_hasher", None)
    if hasher is None:
        hasher = Argon2CredentialHasher(settings)
        request.app.state.credential_hasher = hasher
    return hasher


def get_email_service(settings: AppSettings) -> Notifier:
    """Notifier backed by the configured email provider."""
    return EmailService.from_settings(settings)


def get_account_store(
    session: Annotated[AsyncSession, Depends(get_db_session)],
) -> AccountStore:
    """Account store bound to the request's database session."""
    return AccountRepository(session)


def get_lifecycle_service(
    settings: AppSettings,
    store: Annotated[AccountStore, Depends(get_account_store)],
    tokens: Annotated[TokenIssuer, Depends(get_token_service)],
    notifier: Annotated[Notifier, Depends(get_email_service)],
    hasher: Annotated[CredentialHasher, Depends(get_credential_hasher)],
) -> AccountLifecycleService:
    return AccountLifecycleService(
        store=store,
        tokens=tokens,
        notifier=notifier,
        hasher=hasher,
        settings=settings,
    )


LifecycleService = Annotated[AccountLifecycleService, Depends(get_lifecycle_service)]


def get_completion_provider(settings: AppSettings) -> CompletionProvider:
    """Completion provider for the chat proxy."""
    return OpenAICompletionProvider.from_settings(settings)


def extract_bearer_token(authorization: str | None) -> str | None:
    """Return the token from an ``Authorization: Bearer <token>`` header."""
    if not authorization:
        return None
    parts = authorization.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        return None
    return parts[1]


def get_session_claims(
    request: Request,
    lifecycle: LifecycleService,
    authorization: Annotated[str | None, Header()] = None,
    token: Annotated[str | None, Cookie()] = None,
) -> SessionClaims:
    """Authenticate the request from its bearer token or ``token`` cookie.

    The decoded claims are also stored on ``request.state.session``.

    Raises:
        MissingCredentialsError: If no token was presented (401).
        SessionTokenError: If the token is invalid or expired (403).
    """
    claims = lifecycle.authenticate(extract_bearer_token(authorization) or token)
    request.state.session = claims
    return claims


AuthenticatedSession = Annotated[SessionClaims, Depends(get_session_claims)]

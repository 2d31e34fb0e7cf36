"""JWT token service.

Provides stateless JWT creation and validation for email verification and
session authentication. Tokens are HS256-signed; there is no token store, so
a token stays usable until it expires.
"""

from collections.abc import Callable
from datetime import datetime, timedelta, timezone
from typing import Any

import jwt

from jixify.core.config import Settings
from jixify.domain.ports import TokenIssuer


class JWTError(Exception):
    """Base exception for JWT-related errors."""

    pass


class TokenExpiredError(JWTError):
    """Raised when a token has expired."""

    pass


class InvalidTokenError(JWTError):
    """Raised when a token is invalid."""

    pass


class InvalidSignatureError(InvalidTokenError):
    """Raised when a token's signature does not match."""

    pass


class MalformedTokenError(InvalidTokenError):
    """Raised when a token cannot be parsed."""

    pass


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class JWTService(TokenIssuer):
    """Service for minting and validating JWT tokens.

    Supports verification tokens (claims ``{email}``, long-lived) and session
    tokens (claims ``{account_id, email}``, short-lived).
    """

    ALGORITHM = "HS256"
    ISSUER = "jixify"
    VERIFICATION = "verification"
    SESSION = "session"
    REGISTERED_CLAIMS = frozenset({"iss", "iat", "exp", "type"})

    def __init__(
        self,
        secret_key: str,
        verification_ttl: timedelta = timedelta(days=1),
        session_ttl: timedelta = timedelta(hours=1),
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        """Initialize the JWT service.

        Args:
            secret_key: Secret key for signing tokens.
            verification_ttl: Lifetime of email verification tokens.
            session_ttl: Lifetime of session tokens.
            clock: Returns the current UTC time. Defaults to the system clock.
        """
        if not secret_key:
            raise ValueError("A signing secret is required")
        self._secret_key = secret_key
        self.verification_ttl = verification_ttl
        self.session_ttl = session_ttl
        self._clock = clock or _utcnow

    @classmethod
    def from_settings(cls, settings: Settings) -> "JWTService":
        """Build a service from application settings."""
        return cls(
            secret_key=settings.secret_key,
            verification_ttl=timedelta(seconds=settings.verification_token_ttl_seconds),
            session_ttl=timedelta(seconds=settings.session_token_ttl_seconds),
        )

    def mint(
        self,
        claims: dict[str, Any],
        ttl: timedelta,
        token_type: str | None = None,
    ) -> str:
        """Sign ``claims`` into a token that expires ``ttl`` from now.

        ``iat`` and ``exp`` are written as epoch seconds with millisecond
        precision.

        Args:
            claims: Application claims to embed.
            ttl: Token lifetime.
            token_type: Optional ``type`` claim used to tell token kinds apart.

        Returns:
            Encoded JWT.
        """
        now = self._clock()
        payload = dict(claims)
        payload.update(
            {
                "iss": self.ISSUER,
                "iat": round(now.timestamp(), 3),
                "exp": round((now + ttl).timestamp(), 3),
            }
        )
        if token_type is not None:
            payload["type"] = token_type
        return jwt.encode(payload, self._secret_key, algorithm=self.ALGORITHM)

    def decode_token(self, token: str) -> dict[str, Any]:
        """Decode and validate a JWT token, returning the full payload.

        Raises:
            InvalidSignatureError: If the signature does not match.
            MalformedTokenError: If the token cannot be parsed.
            TokenExpiredError: If the current time is past ``exp``.
        """
        try:
            payload = jwt.decode(
                token,
                self._secret_key,
                algorithms=[self.ALGORITHM],
                issuer=self.ISSUER,
                # Expiry is checked below with millisecond precision
                options={
                    "verify_exp": False,
                    "verify_iat": False,
                    "require": ["exp", "iat", "iss"],
                },
            )
        except jwt.InvalidSignatureError as e:
            raise InvalidSignatureError("Invalid token signature") from e
        except jwt.InvalidTokenError as e:
            raise MalformedTokenError("Malformed token") from e

        expires_at = payload["exp"]
        if isinstance(expires_at, bool) or not isinstance(expires_at, (int, float)):
            raise MalformedTokenError("Malformed token: exp is not a timestamp")
        if self._clock().timestamp() > expires_at:
            raise TokenExpiredError("Token has expired")
        return payload

    def validate(self, token: str) -> dict[str, Any]:
        """Validate a token and return its embedded claims unchanged.

        Raises:
            InvalidSignatureError: If the signature does not match.
            MalformedTokenError: If the token cannot be parsed.
            TokenExpiredError: If the token has expired.
        """
        payload = self.decode_token(token)
        return {k: v for k, v in payload.items() if k not in self.REGISTERED_CLAIMS}

    def _validate_typed(self, token: str, token_type: str, required: tuple[str, ...]) -> dict[str, Any]:
        payload = self.decode_token(token)
        if payload.get("type") != token_type:
            raise InvalidTokenError(f"Not a {token_type} token")
        missing = [claim for claim in required if claim not in payload]
        if missing:
            raise MalformedTokenError(f"Missing claim: {missing[0]}")
        return {k: v for k, v in payload.items() if k not in self.REGISTERED_CLAIMS}

    def create_verification_token(self, email: str) -> str:
        """Create an email verification token carrying ``{email}``."""
        return self.mint({"email": email}, self.verification_ttl, token_type=self.VERIFICATION)

    def create_session_token(self, account_id: str, email: str) -> str:
        """Create a session token carrying ``{account_id, email}``."""
        return self.mint(
            {"account_id": account_id, "email": email},
            self.session_ttl,
            token_type=self.SESSION,
        )

    def validate_verification_token(self, token: str) -> dict[str, Any]:
        """Validate that a token is a verification token and return its claims."""
        return self._validate_typed(token, self.VERIFICATION, ("email",))

    def validate_session_token(self, token: str) -> dict[str, Any]:
        """Validate that a token is a session token and return its claims."""
        return self._validate_typed(token, self.SESSION, ("account_id", "email"))

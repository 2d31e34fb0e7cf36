"""Authentication infrastructure components.

This module provides password hashing, JWT token services, and
other authentication-related utilities.
"""

from jixify.infrastructure.auth.jwt_service import (
    InvalidSignatureError,
    InvalidTokenError,
    JWTError,
    JWTService,
    MalformedTokenError,
    TokenExpiredError,
)
from jixify.infrastructure.auth.password_hasher import (
    Argon2CredentialHasher,
    verify_password,
)

__all__ = [
    "Argon2CredentialHasher",
    "InvalidSignatureError",
    "InvalidTokenError",
    "JWTError",
    "JWTService",
    "MalformedTokenError",
    "TokenExpiredError",
    "verify_password",
]

"""Password hashing utility using Argon2.

Provides secure password hashing and verification using the Argon2id algorithm,
which is the winner of the Password Hashing Competition and recommended by OWASP.
"""

import asyncio

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError

from jixify.core.config import Settings
from jixify.domain.ports import CredentialHasher

# Verification reads the parameters from the digest itself
_hasher = PasswordHasher()

# Verified against when an email is unknown so that login timing does not
# reveal whether the account exists.
DUMMY_PASSWORD = "dummy_password_for_timing_safety"


def verify_password(password: str, hashed: str, hasher: PasswordHasher | None = None) -> bool:
    """Verify a password against a hash.

    Uses constant-time comparison to prevent timing attacks. A digest that
    cannot be parsed counts as a mismatch.

    Args:
        password: The plaintext password to verify.
        hashed: The hashed password to verify against.
        hasher: Optional hasher; defaults to the module-level one.

    Returns:
        True if the password matches, False otherwise.
    """
    try:
        (hasher or _hasher).verify(hashed, password)
        return True
    except (VerificationError, InvalidHashError):
        return False


class Argon2CredentialHasher(CredentialHasher):
    """Argon2id hasher that runs its CPU-bound work on a worker thread."""

    def __init__(self, settings: Settings) -> None:
        self._hasher = PasswordHasher(
            time_cost=settings.argon2_time_cost,
            memory_cost=settings.argon2_memory_cost,
            parallelism=settings.argon2_parallelism,
        )
        self._dummy_hash = self._hasher.hash(DUMMY_PASSWORD)

    async def hash(self, plaintext: str) -> str:
        return await asyncio.to_thread(self._hasher.hash, plaintext)

    async def verify(self, plaintext: str, digest: str) -> bool:
        return await asyncio.to_thread(verify_password, plaintext, digest, self._hasher)

    async def verify_dummy(self, plaintext: str) -> None:
        await self.verify(plaintext, self._dummy_hash)

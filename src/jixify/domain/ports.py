"""Capability interfaces the account lifecycle depends on.

Concrete implementations live in the infrastructure layer; tests substitute
fakes or mocks for any of them.
"""

from abc import ABC, abstractmethod
from typing import Any

from jixify.domain.entities import Account


class CredentialHasher(ABC):
    """One-way password hashing."""

    @abstractmethod
    async def hash(self, plaintext: str) -> str:
        """Return a salted digest of ``plaintext``."""

    @abstractmethod
    async def verify(self, plaintext: str, digest: str) -> bool:
        """Return True if ``plaintext`` matches ``digest``. Never raises on mismatch."""

    @abstractmethod
    async def verify_dummy(self, plaintext: str) -> None:
        """Spend the same work as ``verify`` against a fixed digest."""


class TokenIssuer(ABC):
    """Mints and validates signed, expiring tokens."""

    @abstractmethod
    def create_verification_token(self, email: str) -> str:
        """Mint a token proving control of ``email``."""

    @abstractmethod
    def create_session_token(self, account_id: str, email: str) -> str:
        """Mint a session token for a verified account."""

    @abstractmethod
    def validate_verification_token(self, token: str) -> dict[str, Any]:
        """Return the claims of a verification token or raise ``JWTError``."""

    @abstractmethod
    def validate_session_token(self, token: str) -> dict[str, Any]:
        """Return the claims of a session token or raise ``JWTError``."""


class AccountStore(ABC):
    """Durable record of accounts."""

    @abstractmethod
    async def create(
        self, username: str | None, email: str, password_hash: str
    ) -> Account:
        """Persist a new unverified account.

        Raises:
            DuplicateEmailError: If the email is taken.
            DuplicateUsernameError: If the username is taken.
            StorageError: On any other persistence failure.
        """

    @abstractmethod
    async def find_by_email(self, email: str) -> Account | None:
        """Look up an account by its exact email."""

    @abstractmethod
    async def mark_verified(self, email: str) -> int:
        """Set ``verified`` for the account with ``email``.

        Returns:
            Number of matched accounts (0 or 1). Repeating the call on a
            verified account still reports 1.
        """


class Notifier(ABC):
    """Delivers verification links."""

    @abstractmethod
    async def send_verification_email(
        self, to_address: str, link: str, username: str | None = None
    ) -> None:
        """Make a single delivery attempt.

        Raises:
            DeliveryError: If the message could not be handed to the transport.
        """

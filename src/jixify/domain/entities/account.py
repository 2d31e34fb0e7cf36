"""Account entity.

Accounts are uniquely identified by email and, when present, by username.
An account starts unverified and becomes verified exactly once.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Account:
    """Account entity representing a registered user.

    Attributes:
        id: Unique identifier (UUID string), assigned by the store.
        email: Email address, unique across accounts, stored as supplied.
        password_hash: Argon2 digest of the password (never plaintext).
        username: Optional display name, unique across accounts when set.
        verified: Whether the email address has been confirmed.
        created_at: Timestamp when the account was created.
    """

    id: str
    email: str
    password_hash: str
    username: str | None = None
    verified: bool = False
    created_at: datetime = field(default_factory=_utcnow)

    def __post_init__(self) -> None:
        """Validate account data after initialization."""
        if not self.id:
            raise ValueError("Account ID is required")
        if not self.email:
            raise ValueError("Email is required")
        if not self.password_hash:
            raise ValueError("Password hash is required")

    def __repr__(self) -> str:
        return f"<Account(id={self.id}, email={self.email}, verified={self.verified})>"

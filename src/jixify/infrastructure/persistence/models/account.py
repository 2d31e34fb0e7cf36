"""SQLAlchemy model for the accounts table.

Accounts are uniquely identified by email; usernames are optional but
unique when present.
"""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, String, UniqueConstraint, false, func
from sqlalchemy.orm import Mapped, mapped_column

from jixify.domain.entities import Account
from jixify.infrastructure.persistence.database import Base


class AccountModel(Base):
    """SQLAlchemy model for the accounts table.

    Attributes:
        id: Primary key (UUID string).
        username: Optional display name (unique when set).
        email: Email address (unique, stored as supplied).
        password_hash: Argon2 digest.
        verified: Whether the email address has been confirmed.
        created_at: Timestamp when the account was created.
    """

    __tablename__ = "accounts"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        comment="Account ID (UUID)",
    )
    username: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
        comment="Optional unique username",
    )
    email: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Account email address",
    )
    password_hash: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Hashed password (argon2)",
    )
    verified: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        server_default=false(),
        comment="Whether the email address has been verified",
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    __table_args__ = (
        UniqueConstraint("email", name="uq_accounts_email"),
        UniqueConstraint("username", name="uq_accounts_username"),
    )

    def to_entity(self) -> Account:
        """Convert to the domain entity."""
        return Account(
            id=self.id,
            username=self.username,
            email=self.email,
            password_hash=self.password_hash,
            verified=self.verified,
            created_at=self.created_at,
        )

    def __repr__(self) -> str:
        return f"<Account(id={self.id}, email={self.email}, verified={self.verified})>"

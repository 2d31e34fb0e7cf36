"""Account repository for database operations.

Each operation runs in its own transaction. Uniqueness of email and username
is enforced by database constraints, which also settle concurrent
registrations for the same address.
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from jixify.core.logging import get_logger
from jixify.domain.entities import Account
from jixify.domain.exceptions import (
    DuplicateEmailError,
    DuplicateUsernameError,
    StorageError,
)
from jixify.domain.ports import AccountStore
from jixify.infrastructure.persistence.models import AccountModel

logger = get_logger(__name__)


def _conflict_from(error: IntegrityError) -> Exception:
    """Map a unique-constraint violation to the field that caused it."""
    detail = str(error.orig).lower()
    if "uq_accounts_username" in detail or "accounts.username" in detail:
        return DuplicateUsernameError()
    if "uq_accounts_email" in detail or "accounts.email" in detail:
        return DuplicateEmailError()
    return StorageError()


class AccountRepository(AccountStore):
    """Repository for account database operations."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize the repository.

        Args:
            session: SQLAlchemy async session.
        """
        self.session = session

    async def create(
        self, username: str | None, email: str, password_hash: str
    ) -> Account:
        """Create a new, unverified account.

        Args:
            username: Optional unique username.
            email: Unique email address, stored as supplied.
            password_hash: Argon2 digest of the password.

        Returns:
            The created account.

        Raises:
            DuplicateEmailError: If the email is already registered.
            DuplicateUsernameError: If the username is already taken.
            StorageError: On any other database failure.
        """
        model = AccountModel(
            id=str(uuid.uuid4()),
            username=username,
            email=email,
            password_hash=password_hash,
            verified=False,
            created_at=datetime.now(timezone.utc),
        )
        account = model.to_entity()
        self.session.add(model)
        try:
            await self.session.commit()
        except IntegrityError as e:
            await self.session.rollback()
            error = _conflict_from(e)
            if isinstance(error, StorageError):
                logger.error("Account insert failed", error=str(e.orig))
            raise error from e
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error("Account insert failed", error=str(e))
            raise StorageError() from e
        return account

    async def find_by_email(self, email: str) -> Account | None:
        """Get an account by its exact email.

        Returns:
            The account if found, None otherwise.
        """
        try:
            result = await self.session.execute(
                select(AccountModel).where(AccountModel.email == email)
            )
        except SQLAlchemyError as e:
            logger.error("Account lookup failed", error=str(e))
            raise StorageError() from e
        model = result.scalar_one_or_none()
        return model.to_entity() if model else None

    async def mark_verified(self, email: str) -> int:
        """Mark the account with ``email`` as verified.

        The flag is only ever set to true, so repeating the call is harmless.

        Returns:
            Number of accounts matched (0 or 1).
        """
        try:
            result = await self.session.execute(
                update(AccountModel)
                .where(AccountModel.email == email)
                .values(verified=True)
            )
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error("Account verification update failed", error=str(e))
            raise StorageError() from e
        return result.rowcount

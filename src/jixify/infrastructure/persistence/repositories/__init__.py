"""Persistence repositories for database operations."""

from jixify.infrastructure.persistence.repositories.account_repository import (
    AccountRepository,
)

__all__ = ["AccountRepository"]

"""SQLAlchemy models for Jixify.

All models inherit from the Base class defined in database.py and are
created on application startup in development mode.
"""

from jixify.infrastructure.persistence.models.account import AccountModel

__all__ = ["AccountModel"]

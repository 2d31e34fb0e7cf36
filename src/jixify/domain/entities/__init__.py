"""Domain entities for Jixify."""

from jixify.domain.entities.account import Account
from jixify.domain.entities.session_claims import SessionClaims

__all__ = ["Account", "SessionClaims"]

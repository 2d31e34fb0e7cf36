"""Claims carried by a validated session token."""

from dataclasses import dataclass


@dataclass(frozen=True)
class SessionClaims:
    """Identity attached to an authenticated request."""

    account_id: str
    email: str

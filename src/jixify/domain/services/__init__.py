"""Domain services for Jixify."""

from jixify.domain.services.account_lifecycle_service import AccountLifecycleService

__all__ = ["AccountLifecycleService"]

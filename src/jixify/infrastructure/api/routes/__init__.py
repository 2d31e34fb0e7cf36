"""API Routes for Jixify."""

from .auth_router import router as auth_router
from .chat_router import router as chat_router

__all__ = [
    "auth_router",
    "chat_router",
]

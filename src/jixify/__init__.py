"""Jixify - account registration with email verification, and a chat proxy.

Accounts register with a password, confirm their email through a signed link,
log in for a session token, and use that token to reach the chat endpoint.
"""

__version__ = "0.1.0"

__all__ = ["__version__"]

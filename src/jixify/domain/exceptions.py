"""Domain error taxonomy for the account lifecycle.

Each error carries the caller-facing message. The API layer maps error
classes to HTTP status codes; nothing here knows about HTTP.
"""


class JixifyError(Exception):
    """Base class for all domain errors."""

    default_message = "Request failed"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(JixifyError):
    """Missing or malformed input. User-correctable."""

    default_message = "Invalid request"


class ConflictError(JixifyError):
    """The request conflicts with existing state."""

    default_message = "Conflict"


class DuplicateEmailError(ConflictError):
    """An account with this email already exists."""

    default_message = "User or email already exists"


class DuplicateUsernameError(ConflictError):
    """An account with this username already exists."""

    default_message = "User or email already exists"


class AlreadyVerifiedError(ConflictError):
    """The account's email is already verified."""

    default_message = "Email already verified"


class AuthenticationError(JixifyError):
    """Unknown email or wrong password."""

    default_message = "Invalid credentials"


class MissingCredentialsError(AuthenticationError):
    """No bearer token was presented."""

    default_message = "Access denied"


class AuthorizationError(JixifyError):
    """Authenticated, but not allowed (e.g. unverified account)."""

    default_message = "Forbidden"


class TokenError(JixifyError):
    """A presented token is expired, tampered with or unparseable."""

    default_message = "Invalid token"


class VerificationFailedError(TokenError):
    """An email verification token was rejected."""

    default_message = "Invalid or expired token"


class SessionTokenError(TokenError):
    """A session token was rejected."""

    default_message = "Invalid token"


class AccountNotFoundError(JixifyError):
    """No account matches the given email."""

    default_message = "Email not found"


class DeliveryError(JixifyError):
    """The verification email could not be delivered."""

    default_message = "Failed to send verification email"


class StorageError(JixifyError):
    """The account store failed."""

    default_message = "Database error"


class CompletionError(JixifyError):
    """The completion provider failed."""

    default_message = "AI processing error"

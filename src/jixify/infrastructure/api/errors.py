"""Translation of domain errors into HTTP status codes."""

from fastapi import status

from jixify.domain.exceptions import (
    AccountNotFoundError,
    AuthenticationError,
    AuthorizationError,
    CompletionError,
    ConflictError,
    DeliveryError,
    JixifyError,
    MissingCredentialsError,
    SessionTokenError,
    StorageError,
    ValidationError,
    VerificationFailedError,
)

# Most specific classes first
ERROR_STATUS_CODES: list[tuple[type[JixifyError], int]] = [
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (VerificationFailedError, status.HTTP_400_BAD_REQUEST),
    (SessionTokenError, status.HTTP_403_FORBIDDEN),
    (MissingCredentialsError, status.HTTP_401_UNAUTHORIZED),
    (AuthenticationError, status.HTTP_401_UNAUTHORIZED),
    (AuthorizationError, status.HTTP_403_FORBIDDEN),
    (ConflictError, status.HTTP_400_BAD_REQUEST),
    (AccountNotFoundError, status.HTTP_404_NOT_FOUND),
    (DeliveryError, status.HTTP_500_INTERNAL_SERVER_ERROR),
    (StorageError, status.HTTP_500_INTERNAL_SERVER_ERROR),
    (CompletionError, status.HTTP_500_INTERNAL_SERVER_ERROR),
]


def status_code_for(error: JixifyError) -> int:
    """Return the HTTP status code for a domain error."""
    for error_class, status_code in ERROR_STATUS_CODES:
        if isinstance(error, error_class):
            return status_code
    return status.HTTP_500_INTERNAL_SERVER_ERROR

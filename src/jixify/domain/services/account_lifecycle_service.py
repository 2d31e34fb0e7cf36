"""Account lifecycle: registration, email verification, login and
request authentication.

An account is created ``Unverified`` and moves to ``Verified`` once, when a
valid verification token for its email is presented. Verification tokens are
stateless and may be replayed until they expire; marking an account verified
is idempotent, so replays are harmless.

Delivery policy: if the verification email cannot be sent, the account stays
registered and unverified and the caller receives ``DeliveryError``. A new
link can be requested with ``resend_verification``.
"""

from urllib.parse import urlencode

from jixify.core.config import Settings
from jixify.core.logging import get_logger
from jixify.domain.entities import Account, SessionClaims
from jixify.domain.exceptions import (
    AccountNotFoundError,
    AlreadyVerifiedError,
    AuthenticationError,
    AuthorizationError,
    MissingCredentialsError,
    SessionTokenError,
    ValidationError,
    VerificationFailedError,
)
from jixify.domain.ports import AccountStore, CredentialHasher, Notifier, TokenIssuer
from jixify.infrastructure.auth.jwt_service import JWTError, TokenExpiredError

logger = get_logger(__name__)


class AccountLifecycleService:
    """Orchestrates the account state machine over its collaborators."""

    def __init__(
        self,
        store: AccountStore,
        tokens: TokenIssuer,
        notifier: Notifier,
        hasher: CredentialHasher,
        settings: Settings,
    ) -> None:
        """Initialize the lifecycle service.

        Args:
            store: Account persistence.
            tokens: Token minting and validation.
            notifier: Verification email delivery.
            hasher: Password hashing.
            settings: Application settings (used to build verification links).
        """
        self.store = store
        self.tokens = tokens
        self.notifier = notifier
        self.hasher = hasher
        self.settings = settings

    def build_verification_link(self, token: str) -> str:
        """Build the link a user follows to verify their email."""
        query = urlencode({"token": token})
        return f"{self.settings.verification_base_url}/verify-email?{query}"

    async def register(
        self, username: str | None, email: str | None, password: str | None
    ) -> Account:
        """Register a new unverified account and send its verification link.

        Flow:
        1. Require email and password
        2. Hash password (off the event loop)
        3. Create account; the store enforces uniqueness
        4. Mint a verification token for the email
        5. Deliver the verification link

        Returns:
            The created account.

        Raises:
            ValidationError: If email or password is missing.
            DuplicateEmailError: If the email is already registered.
            DuplicateUsernameError: If the username is already taken.
            StorageError: If the store fails.
            DeliveryError: If the email could not be sent. The account
                remains registered.
        """
        if not email or not password:
            logger.info("Registration failed: missing fields")
            raise ValidationError("Email and password required")

        password_hash = await self.hasher.hash(password)
        account = await self.store.create(username or None, email, password_hash)
        logger.info("Account registered", account_id=account.id, email=email)

        await self._send_verification(account)
        return account

    async def resend_verification(self, email: str | None) -> None:
        """Send a fresh verification link to an unverified account.

        Raises:
            ValidationError: If email is missing.
            AccountNotFoundError: If no account has this email.
            AlreadyVerifiedError: If the account is already verified.
            DeliveryError: If the email could not be sent.
        """
        if not email:
            raise ValidationError("Email required")

        account = await self.store.find_by_email(email)
        if account is None:
            logger.info("Resend verification failed: account not found", email=email)
            raise AccountNotFoundError()
        if account.verified:
            logger.info("Resend verification skipped: already verified", account_id=account.id)
            raise AlreadyVerifiedError()

        await self._send_verification(account)

    async def _send_verification(self, account: Account) -> None:
        token = self.tokens.create_verification_token(account.email)
        link = self.build_verification_link(token)
        await self.notifier.send_verification_email(account.email, link, account.username)
        logger.info("Verification link sent", account_id=account.id)

    async def verify_email(self, token: str | None) -> str:
        """Verify the email address named by a verification token.

        Safe to call repeatedly with the same token.

        Returns:
            The verified email address.

        Raises:
            ValidationError: If the token is missing.
            VerificationFailedError: If the token is expired, tampered with
                or malformed.
            AccountNotFoundError: If no account has the token's email.
            StorageError: If the store fails.
        """
        if not token:
            raise ValidationError("Token missing")

        try:
            claims = self.tokens.validate_verification_token(token)
        except TokenExpiredError as e:
            logger.info("Email verification failed: token expired")
            raise VerificationFailedError() from e
        except JWTError as e:
            logger.info("Email verification failed: invalid token", reason=type(e).__name__)
            raise VerificationFailedError() from e

        email = claims["email"]
        matched = await self.store.mark_verified(email)
        if matched == 0:
            logger.info("Email verification failed: account not found", email=email)
            raise AccountNotFoundError()

        logger.info("Email verified", email=email)
        return email

    async def login(self, email: str | None, password: str | None) -> str:
        """Authenticate with email and password and issue a session token.

        Returns:
            Encoded session token carrying ``{account_id, email}``.

        Raises:
            ValidationError: If email or password is missing.
            AuthenticationError: If the email is unknown or the password wrong.
            AuthorizationError: If the account's email is not verified.
            StorageError: If the store fails.
        """
        if not email or not password:
            raise ValidationError("Email and password required")

        account = await self.store.find_by_email(email)
        if account is None:
            await self.hasher.verify_dummy(password)
            logger.info("Login failed: unknown email")
            raise AuthenticationError()

        if not account.verified:
            logger.info("Login rejected: email not verified", account_id=account.id)
            raise AuthorizationError("Email not verified")

        if not await self.hasher.verify(password, account.password_hash):
            logger.info("Login failed: wrong password", account_id=account.id)
            raise AuthenticationError()

        logger.info("Login succeeded", account_id=account.id)
        return self.tokens.create_session_token(account.id, account.email)

    def authenticate(self, token: str | None) -> SessionClaims:
        """Validate a bearer session token.

        Returns:
            The claims of the token.

        Raises:
            MissingCredentialsError: If no token was presented.
            SessionTokenError: If the token is expired, tampered with,
                malformed or not a session token.
        """
        if not token:
            raise MissingCredentialsError()

        try:
            claims = self.tokens.validate_session_token(token)
        except JWTError as e:
            logger.info("Authentication failed", reason=type(e).__name__)
            raise SessionTokenError() from e

        return SessionClaims(account_id=claims["account_id"], email=claims["email"])

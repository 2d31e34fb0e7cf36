"""Unit tests for AccountLifecycleService with mocked collaborators."""

from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock
from urllib.parse import parse_qs, urlparse

import pytest

from jixify.domain.entities import Account, SessionClaims
from jixify.domain.exceptions import (
    AccountNotFoundError,
    AlreadyVerifiedError,
    AuthenticationError,
    AuthorizationError,
    DeliveryError,
    DuplicateEmailError,
    MissingCredentialsError,
    SessionTokenError,
    ValidationError,
    VerificationFailedError,
)
from jixify.domain.services import AccountLifecycleService
from jixify.infrastructure.auth import JWTService


def _account(email="a@x.com", verified=False, password_hash="digest:secret", username=None):
    return Account(
        id="acc-1",
        email=email,
        password_hash=password_hash,
        username=username,
        verified=verified,
    )


@pytest.fixture
def mock_store():
    store = AsyncMock()
    store.create.side_effect = lambda username, email, password_hash: _account(
        email=email, password_hash=password_hash, username=username
    )
    store.find_by_email.return_value = None
    store.mark_verified.return_value = 1
    return store


@pytest.fixture
def mock_hasher():
    hasher = AsyncMock()
    hasher.hash.side_effect = lambda plaintext: f"digest:{plaintext}"
    hasher.verify.side_effect = lambda plaintext, digest: digest == f"digest:{plaintext}"
    hasher.verify_dummy.return_value = None
    return hasher


@pytest.fixture
def lifecycle(settings, jwt_service, mock_store, mock_notifier, mock_hasher):
    return AccountLifecycleService(
        store=mock_store,
        tokens=jwt_service,
        notifier=mock_notifier,
        hasher=mock_hasher,
        settings=settings,
    )


def _token_from_link(link: str) -> str:
    return parse_qs(urlparse(link).query)["token"][0]


class TestRegister:

    @pytest.mark.asyncio
    async def test_register_creates_unverified_account_and_sends_one_link(
        self, lifecycle, mock_store, mock_notifier, jwt_service
    ):
        account = await lifecycle.register("alice", "a@x.com", "secret")

        assert account.verified is False
        mock_store.create.assert_awaited_once_with("alice", "a@x.com", "digest:secret")
        mock_notifier.send_verification_email.assert_awaited_once()

        to_address, link, username = mock_notifier.send_verification_email.call_args.args
        assert to_address == "a@x.com"
        assert username == "alice"
        assert link.startswith("http://test/verify-email?token=")
        claims = jwt_service.validate_verification_token(_token_from_link(link))
        assert claims == {"email": "a@x.com"}

    @pytest.mark.asyncio
    async def test_register_never_stores_plaintext(self, lifecycle, mock_store):
        await lifecycle.register(None, "a@x.com", "secret")

        stored_hash = mock_store.create.call_args.args[2]
        assert stored_hash != "secret"

    @pytest.mark.asyncio
    async def test_empty_username_is_stored_as_none(self, lifecycle, mock_store):
        await lifecycle.register("", "a@x.com", "secret")

        assert mock_store.create.call_args.args[0] is None

    @pytest.mark.asyncio
    @pytest.mark.parametrize("email,password", [(None, "secret"), ("a@x.com", None), ("", "")])
    async def test_missing_fields(self, lifecycle, mock_store, mock_notifier, email, password):
        with pytest.raises(ValidationError) as exc_info:
            await lifecycle.register("alice", email, password)

        assert exc_info.value.message == "Email and password required"
        mock_store.create.assert_not_awaited()
        mock_notifier.send_verification_email.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_duplicate_email_sends_nothing(self, lifecycle, mock_store, mock_notifier):
        mock_store.create.side_effect = DuplicateEmailError()

        with pytest.raises(DuplicateEmailError):
            await lifecycle.register("alice", "a@x.com", "secret")

        mock_notifier.send_verification_email.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_delivery_failure_keeps_account(self, lifecycle, mock_store, mock_notifier):
        mock_notifier.send_verification_email.side_effect = DeliveryError()

        with pytest.raises(DeliveryError):
            await lifecycle.register("alice", "a@x.com", "secret")

        mock_store.create.assert_awaited_once()
        mock_store.mark_verified.assert_not_awaited()


class TestResendVerification:

    @pytest.mark.asyncio
    async def test_resend_sends_fresh_link(self, lifecycle, mock_store, mock_notifier, jwt_service):
        mock_store.find_by_email.return_value = _account(username="alice")

        await lifecycle.resend_verification("a@x.com")

        to_address, link, username = mock_notifier.send_verification_email.call_args.args
        assert to_address == "a@x.com"
        assert username == "alice"
        assert jwt_service.validate_verification_token(_token_from_link(link)) == {"email": "a@x.com"}

    @pytest.mark.asyncio
    async def test_resend_unknown_email(self, lifecycle, mock_notifier):
        with pytest.raises(AccountNotFoundError):
            await lifecycle.resend_verification("nobody@x.com")

        mock_notifier.send_verification_email.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_resend_already_verified(self, lifecycle, mock_store, mock_notifier):
        mock_store.find_by_email.return_value = _account(verified=True)

        with pytest.raises(AlreadyVerifiedError):
            await lifecycle.resend_verification("a@x.com")

        mock_notifier.send_verification_email.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_resend_requires_email(self, lifecycle):
        with pytest.raises(ValidationError):
            await lifecycle.resend_verification("")


class TestVerifyEmail:

    @pytest.mark.asyncio
    async def test_verify_marks_account(self, lifecycle, mock_store, jwt_service):
        token = jwt_service.create_verification_token("a@x.com")

        email = await lifecycle.verify_email(token)

        assert email == "a@x.com"
        mock_store.mark_verified.assert_awaited_once_with("a@x.com")

    @pytest.mark.asyncio
    async def test_verify_is_replayable(self, lifecycle, mock_store, jwt_service):
        token = jwt_service.create_verification_token("a@x.com")

        await lifecycle.verify_email(token)
        await lifecycle.verify_email(token)

        assert mock_store.mark_verified.await_count == 2

    @pytest.mark.asyncio
    async def test_verify_missing_token(self, lifecycle):
        with pytest.raises(ValidationError) as exc_info:
            await lifecycle.verify_email(None)

        assert exc_info.value.message == "Token missing"

    @pytest.mark.asyncio
    async def test_verify_garbage_token(self, lifecycle, mock_store):
        with pytest.raises(VerificationFailedError) as exc_info:
            await lifecycle.verify_email("garbage")

        assert exc_info.value.message == "Invalid or expired token"
        mock_store.mark_verified.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_verify_expired_token(self, settings, mock_store, mock_notifier, mock_hasher):
        issued = datetime(2026, 1, 1, tzinfo=timezone.utc)
        now = {"value": issued}
        tokens = JWTService(
            secret_key=settings.secret_key,
            verification_ttl=timedelta(days=1),
            clock=lambda: now["value"],
        )
        lifecycle = AccountLifecycleService(mock_store, tokens, mock_notifier, mock_hasher, settings)
        token = tokens.create_verification_token("a@x.com")

        now["value"] = issued + timedelta(days=1, milliseconds=1)

        with pytest.raises(VerificationFailedError):
            await lifecycle.verify_email(token)
        mock_store.mark_verified.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_session_token_cannot_verify(self, lifecycle, jwt_service):
        token = jwt_service.create_session_token("acc-1", "a@x.com")

        with pytest.raises(VerificationFailedError):
            await lifecycle.verify_email(token)

    @pytest.mark.asyncio
    async def test_verify_unknown_email(self, lifecycle, mock_store, jwt_service):
        mock_store.mark_verified.return_value = 0
        token = jwt_service.create_verification_token("gone@x.com")

        with pytest.raises(AccountNotFoundError) as exc_info:
            await lifecycle.verify_email(token)

        assert exc_info.value.message == "Email not found"


class TestLogin:

    @pytest.mark.asyncio
    async def test_login_issues_session_token(self, lifecycle, mock_store, jwt_service):
        mock_store.find_by_email.return_value = _account(verified=True)

        token = await lifecycle.login("a@x.com", "secret")

        assert jwt_service.validate_session_token(token) == {
            "account_id": "acc-1",
            "email": "a@x.com",
        }

    @pytest.mark.asyncio
    async def test_login_unverified_with_correct_password(self, lifecycle, mock_store):
        mock_store.find_by_email.return_value = _account(verified=False)

        with pytest.raises(AuthorizationError) as exc_info:
            await lifecycle.login("a@x.com", "secret")

        assert exc_info.value.message == "Email not verified"

    @pytest.mark.asyncio
    async def test_wrong_password_and_unknown_email_look_the_same(
        self, lifecycle, mock_store, mock_hasher
    ):
        mock_store.find_by_email.return_value = _account(verified=True)
        with pytest.raises(AuthenticationError) as wrong_password:
            await lifecycle.login("a@x.com", "wrong")

        mock_store.find_by_email.return_value = None
        with pytest.raises(AuthenticationError) as unknown_email:
            await lifecycle.login("nobody@x.com", "secret")

        assert wrong_password.value.message == unknown_email.value.message == "Invalid credentials"
        mock_hasher.verify_dummy.assert_awaited_once_with("secret")

    @pytest.mark.asyncio
    async def test_login_missing_fields(self, lifecycle, mock_store):
        with pytest.raises(ValidationError):
            await lifecycle.login("a@x.com", "")

        mock_store.find_by_email.assert_not_awaited()


class TestAuthenticate:

    def test_authenticate_valid_session(self, lifecycle, jwt_service):
        token = jwt_service.create_session_token("acc-1", "a@x.com")

        assert lifecycle.authenticate(token) == SessionClaims(account_id="acc-1", email="a@x.com")

    @pytest.mark.parametrize("token", [None, ""])
    def test_authenticate_missing_token(self, lifecycle, token):
        with pytest.raises(MissingCredentialsError):
            lifecycle.authenticate(token)

    def test_authenticate_invalid_token(self, lifecycle):
        with pytest.raises(SessionTokenError) as exc_info:
            lifecycle.authenticate("garbage")

        assert exc_info.value.message == "Invalid token"

    def test_verification_token_is_not_a_session(self, lifecycle, jwt_service):
        token = jwt_service.create_verification_token("a@x.com")

        with pytest.raises(SessionTokenError):
            lifecycle.authenticate(token)


@pytest.mark.asyncio
async def test_register_verify_login_scenario(lifecycle, mock_store, mock_notifier, jwt_service):
    """a@x.com registers, verifies through the mailed link, then logs in."""
    accounts = {}

    async def create(username, email, password_hash):
        accounts[email] = _account(email=email, password_hash=password_hash, username=username)
        return accounts[email]

    async def find_by_email(email):
        return accounts.get(email)

    async def mark_verified(email):
        if email not in accounts:
            return 0
        accounts[email].verified = True
        return 1

    mock_store.create.side_effect = create
    mock_store.find_by_email.side_effect = find_by_email
    mock_store.mark_verified.side_effect = mark_verified

    account = await lifecycle.register(None, "a@x.com", "secret")
    assert account.verified is False
    mock_notifier.send_verification_email.assert_awaited_once()
    link = mock_notifier.send_verification_email.call_args.args[1]
    token = _token_from_link(link)
    assert jwt_service.validate_verification_token(token) == {"email": "a@x.com"}

    await lifecycle.verify_email(token)
    assert accounts["a@x.com"].verified is True

    session_token = await lifecycle.login("a@x.com", "secret")
    assert jwt_service.validate_session_token(session_token) == {
        "account_id": account.id,
        "email": "a@x.com",
    }

    with pytest.raises(AuthenticationError):
        await lifecycle.login("a@x.com", "wrong")

"""Integration tests for the registration, verification, login and chat API."""

from urllib.parse import parse_qs, urlparse

import pytest

from jixify.domain.exceptions import CompletionError, DeliveryError
from jixify.infrastructure.persistence.repositories import AccountRepository


def _sent_token(mock_notifier) -> str:
    link = mock_notifier.send_verification_email.call_args.args[1]
    return parse_qs(urlparse(link).query)["token"][0]


async def _register_and_verify(client, mock_notifier, email="a@x.com", password="secret"):
    response = await client.post("/register", json={"email": email, "password": password})
    assert response.status_code == 201
    response = await client.get("/verify-email", params={"token": _sent_token(mock_notifier)})
    assert response.status_code == 200


async def _login(client, email="a@x.com", password="secret") -> str:
    response = await client.post("/login", json={"email": email, "password": password})
    assert response.status_code == 200
    return response.json()["token"]


@pytest.mark.asyncio
async def test_root_and_health(client):
    response = await client.get("/")
    assert response.status_code == 200
    assert response.json() == {"status": "ok", "api": "jixify backend"}

    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


@pytest.mark.asyncio
async def test_correlation_id_is_echoed(client):
    response = await client.get("/", headers={"X-Correlation-ID": "cid_test"})

    assert response.headers["X-Correlation-ID"] == "cid_test"


@pytest.mark.asyncio
async def test_full_account_flow(client, db_session, mock_notifier, jwt_service):
    # 1. Register
    response = await client.post(
        "/register",
        json={"username": "alice", "email": "a@x.com", "password": "secret"},
    )
    assert response.status_code == 201
    assert response.json() == {"message": "Registered. Check your email to verify."}

    repo = AccountRepository(db_session)
    account = await repo.find_by_email("a@x.com")
    assert account is not None
    assert account.verified is False
    assert account.password_hash != "secret"

    mock_notifier.send_verification_email.assert_awaited_once()
    token = _sent_token(mock_notifier)
    assert jwt_service.validate_verification_token(token) == {"email": "a@x.com"}

    # 2. Login is refused until verified
    response = await client.post("/login", json={"email": "a@x.com", "password": "secret"})
    assert response.status_code == 403
    assert response.json() == {"error": "Email not verified"}

    # 3. Verify, twice
    for _ in range(2):
        response = await client.get("/verify-email", params={"token": token})
        assert response.status_code == 200
        assert "text/html" in response.headers["content-type"]
        assert "Email Verified" in response.text

    assert (await repo.find_by_email("a@x.com")).verified is True

    # 4. Login
    session_token = await _login(client)
    assert jwt_service.validate_session_token(session_token) == {
        "account_id": account.id,
        "email": "a@x.com",
    }

    # 5. Chat
    response = await client.post(
        "/chat",
        json={"message": "Hello"},
        headers={"Authorization": f"Bearer {session_token}"},
    )
    assert response.status_code == 200
    assert response.json() == {"reply": "Hello from the model"}


@pytest.mark.asyncio
async def test_register_duplicate_email(client, db_session):
    first = await client.post("/register", json={"email": "a@x.com", "password": "secret"})
    assert first.status_code == 201

    second = await client.post("/register", json={"email": "a@x.com", "password": "other"})

    assert second.status_code == 400
    assert second.json() == {"error": "User or email already exists"}


@pytest.mark.asyncio
async def test_register_duplicate_username(client):
    await client.post("/register", json={"username": "alice", "email": "a@x.com", "password": "secret"})

    response = await client.post(
        "/register",
        json={"username": "alice", "email": "b@x.com", "password": "secret"},
    )

    assert response.status_code == 400
    assert response.json() == {"error": "User or email already exists"}


@pytest.mark.asyncio
async def test_register_missing_fields(client, mock_notifier):
    response = await client.post("/register", json={"email": "a@x.com"})

    assert response.status_code == 400
    assert response.json() == {"error": "Email and password required"}
    mock_notifier.send_verification_email.assert_not_awaited()


@pytest.mark.asyncio
async def test_malformed_body_is_bad_request(client):
    response = await client.post(
        "/register",
        content="not json",
        headers={"Content-Type": "application/json"},
    )

    assert response.status_code == 400
    assert "error" in response.json()


@pytest.mark.asyncio
async def test_delivery_failure_keeps_account_and_resend_recovers(client, db_session, mock_notifier):
    mock_notifier.send_verification_email.side_effect = DeliveryError()

    response = await client.post("/register", json={"email": "a@x.com", "password": "secret"})

    assert response.status_code == 500
    assert response.json() == {"error": "Failed to send verification email"}
    assert await AccountRepository(db_session).find_by_email("a@x.com") is not None

    mock_notifier.send_verification_email.side_effect = None
    response = await client.post("/resend-verification", json={"email": "a@x.com"})
    assert response.status_code == 200

    response = await client.get("/verify-email", params={"token": _sent_token(mock_notifier)})
    assert response.status_code == 200


@pytest.mark.asyncio
async def test_resend_verification_errors(client, mock_notifier):
    response = await client.post("/resend-verification", json={"email": "nobody@x.com"})
    assert response.status_code == 404
    assert response.json() == {"error": "Email not found"}

    response = await client.post("/resend-verification", json={})
    assert response.status_code == 400

    await _register_and_verify(client, mock_notifier)
    response = await client.post("/resend-verification", json={"email": "a@x.com"})
    assert response.status_code == 400
    assert response.json() == {"error": "Email already verified"}


@pytest.mark.asyncio
async def test_verify_email_errors(client, jwt_service):
    response = await client.get("/verify-email")
    assert response.status_code == 400
    assert response.text == "Token missing"

    response = await client.get("/verify-email", params={"token": "garbage"})
    assert response.status_code == 400
    assert response.text == "Invalid or expired token"

    token = jwt_service.create_verification_token("gone@x.com")
    response = await client.get("/verify-email", params={"token": token})
    assert response.status_code == 404
    assert response.text == "Email not found"


@pytest.mark.asyncio
async def test_login_failures_share_a_message(client, mock_notifier):
    await _register_and_verify(client, mock_notifier)

    wrong_password = await client.post("/login", json={"email": "a@x.com", "password": "wrong"})
    unknown_email = await client.post("/login", json={"email": "b@x.com", "password": "secret"})

    assert wrong_password.status_code == unknown_email.status_code == 401
    assert wrong_password.json() == unknown_email.json() == {"error": "Invalid credentials"}
    assert "token" not in wrong_password.json()


@pytest.mark.asyncio
async def test_chat_requires_token(client):
    response = await client.post("/chat", json={"message": "Hello"})

    assert response.status_code == 401
    assert response.json() == {"error": "Access denied"}


@pytest.mark.asyncio
async def test_chat_rejects_invalid_token(client, jwt_service):
    for token in ["garbage", jwt_service.create_verification_token("a@x.com")]:
        response = await client.post(
            "/chat",
            json={"message": "Hello"},
            headers={"Authorization": f"Bearer {token}"},
        )

        assert response.status_code == 403
        assert response.json() == {"error": "Invalid token"}


@pytest.mark.asyncio
async def test_chat_accepts_token_cookie(client, mock_notifier, mock_completion_provider):
    await _register_and_verify(client, mock_notifier)
    client.cookies.set("token", await _login(client))

    response = await client.post("/chat", json={"message": "Hello"})

    assert response.status_code == 200
    mock_completion_provider.complete.assert_awaited_once_with("Hello")


@pytest.mark.asyncio
async def test_chat_message_required(client, mock_notifier, mock_completion_provider):
    await _register_and_verify(client, mock_notifier)
    headers = {"Authorization": f"Bearer {await _login(client)}"}

    response = await client.post("/chat", json={}, headers=headers)

    assert response.status_code == 400
    assert response.json() == {"error": "Message is required"}
    mock_completion_provider.complete.assert_not_awaited()


@pytest.mark.asyncio
async def test_chat_upstream_failure(client, mock_notifier, mock_completion_provider):
    await _register_and_verify(client, mock_notifier)
    headers = {"Authorization": f"Bearer {await _login(client)}"}
    mock_completion_provider.complete.side_effect = CompletionError()

    response = await client.post("/chat", json={"message": "Hello"}, headers=headers)

    assert response.status_code == 500
    assert response.json() == {"error": "AI processing error"}

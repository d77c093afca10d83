"""Integration tests for the authentication routes."""

import uuid
from datetime import datetime, timedelta, timezone
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from keychain.core.config import Settings, get_settings
from keychain.domain.services import UUIDIdentity
from keychain.infrastructure.api.app import create_app
from keychain.infrastructure.auth import ClaimsCodec, TokenService
from keychain.infrastructure.persistence.database import get_db_session

AUTH = "/api/v1/auth"
EMAIL = "alice@example.com"
PASSWORD = "longenough1"


async def _register(client: AsyncClient, email: str = EMAIL, password: str = PASSWORD):
    return await client.post(
        f"{AUTH}/register",
        json={"email": email, "password": password, "name": "Alice"},
    )


async def _login(client: AsyncClient, email: str = EMAIL, password: str = PASSWORD):
    return await client.post(f"{AUTH}/login", json={"email": email, "password": password})


async def _token(client: AsyncClient) -> str:
    await _register(client)
    return (await _login(client)).json()["token"]


def _bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def _signed_token(subject: str, issued_at: datetime) -> str:
    """Sign a one-hour token with the server key as if issued at ``issued_at``."""
    settings = get_settings()
    claims = ClaimsCodec(UUIDIdentity(as_string=True)).build(
        subject, issued_at=issued_at, ttl=timedelta(hours=1)
    )
    service = TokenService(settings.secret_key, settings.jwt_algorithm, clock=lambda: issued_at)
    return service.issue(claims)


def _assert_error_body(res, kind: str, message: str) -> None:
    assert res.status_code == 401
    assert res.headers["www-authenticate"] == "Bearer"
    assert res.json() == {
        "error": "Authentication failed",
        "kind": kind,
        "message": message,
        "details": [],
    }


class TestRegister:
    """Tests for POST /register."""

    @pytest.mark.asyncio
    async def test_register_returns_public_user(self, client):
        res = await _register(client)

        assert res.status_code == 201
        data = res.json()
        assert data["email"] == EMAIL
        assert data["name"] == "Alice"
        assert "id" in data
        assert "password" not in data
        assert "password_hash" not in data
        assert "token" not in data

    @pytest.mark.asyncio
    async def test_weak_password(self, client):
        res = await _register(client, password="12345678")

        assert res.status_code == 400
        data = res.json()
        assert data["kind"] == "weak_credential"
        assert data["details"][0]["code"] == "password_too_short"

    @pytest.mark.asyncio
    async def test_duplicate_email(self, client):
        await _register(client)

        res = await _register(client, password="another-password")

        assert res.status_code == 409
        assert res.json()["kind"] == "duplicate_identifier"

    @pytest.mark.asyncio
    async def test_invalid_email_is_schema_error(self, client):
        res = await _register(client, email="not-an-email")

        assert res.status_code == 422


class TestLogin:
    """Tests for POST /login."""

    @pytest.mark.asyncio
    async def test_login_returns_token_and_user(self, client):
        await _register(client)

        res = await _login(client)

        assert res.status_code == 200
        data = res.json()
        assert data["token"].count(".") == 2
        assert data["token_type"] == "bearer"
        assert 0 < data["expires_in"] <= 3600
        assert data["user"]["email"] == EMAIL

    @pytest.mark.asyncio
    async def test_failures_are_indistinguishable_by_default(self, client):
        await _register(client)

        wrong_password = await _login(client, password="wrong-password")
        unknown_user = await _login(client, email="nobody@example.com")

        assert wrong_password.status_code == unknown_user.status_code == 401
        assert wrong_password.json() == unknown_user.json()
        assert wrong_password.json()["message"] == "Invalid credentials"

    @pytest.mark.asyncio
    async def test_mixed_case_email_logs_in_as_registered(self, client):
        registered = await _register(client, email="Alice.Smith@Example.COM")

        res = await _login(client, email="Alice.Smith@Example.COM")

        assert registered.status_code == 201
        assert res.status_code == 200
        assert res.json()["user"]["email"] == registered.json()["email"]


class TestAuthenticatedRoutes:
    """Tests for routes that require a bearer token."""

    @pytest.mark.asyncio
    async def test_me(self, client):
        token = await _token(client)

        res = await client.get(f"{AUTH}/me", headers=_bearer(token))

        assert res.status_code == 200
        assert res.json()["email"] == EMAIL

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "headers,kind,message",
        [
            ({}, "missing_token", "Missing Authorization header"),
            (
                {"Authorization": "Basic dXNlcjpwYXNz"},
                "invalid_authorization_header",
                "Could not validate credentials",
            ),
            (
                {"Authorization": "Bearer"},
                "invalid_authorization_header",
                "Could not validate credentials",
            ),
            ({"Authorization": "Bearer not.a.token"}, "invalid_signature", "Invalid token"),
        ],
    )
    async def test_me_requires_valid_bearer_token(self, client, headers, kind, message):
        res = await client.get(f"{AUTH}/me", headers=headers)

        _assert_error_body(res, kind, message)

    @pytest.mark.asyncio
    async def test_tampered_token_rejected(self, client):
        token = await _token(client)
        header, payload, signature = token.split(".")
        tampered = ".".join([header, payload, signature[::-1]])

        res = await client.get(f"{AUTH}/me", headers=_bearer(tampered))

        _assert_error_body(res, "invalid_signature", "Invalid token")

    @pytest.mark.asyncio
    async def test_expired_token_rejected(self, client):
        user_id = (await _register(client)).json()["id"]
        issued_at = datetime.now(timezone.utc) - timedelta(hours=2)

        res = await client.get(f"{AUTH}/me", headers=_bearer(_signed_token(user_id, issued_at)))

        _assert_error_body(res, "token_expired", "Token has expired")

    @pytest.mark.asyncio
    async def test_token_for_missing_user_rejected(self, client):
        token = _signed_token(str(uuid.uuid4()), datetime.now(timezone.utc))

        res = await client.get(f"{AUTH}/me", headers=_bearer(token))

        _assert_error_body(res, "user_not_found", "Could not validate credentials")

    @pytest.mark.asyncio
    async def test_regenerate_token(self, client):
        token = await _token(client)

        res = await client.post(f"{AUTH}/token", headers=_bearer(token))

        assert res.status_code == 200
        new_token = res.json()["token"]
        me = await client.get(f"{AUTH}/me", headers=_bearer(new_token))
        assert me.status_code == 200

    @pytest.mark.asyncio
    async def test_logout_leaves_token_usable(self, client):
        token = await _token(client)

        res = await client.post(f"{AUTH}/logout", headers=_bearer(token))

        assert res.status_code == 200
        assert res.json()["success"] is True
        assert (await client.get(f"{AUTH}/me", headers=_bearer(token))).status_code == 200

    @pytest.mark.asyncio
    async def test_update_profile(self, client):
        token = await _token(client)

        res = await client.patch(
            f"{AUTH}/me",
            headers=_bearer(token),
            json={"name": "Alicia", "password": "brand-new-secret"},
        )

        assert res.status_code == 200
        assert res.json()["name"] == "Alicia"
        assert (await _login(client)).status_code == 401
        assert (await _login(client, password="brand-new-secret")).status_code == 200

    @pytest.mark.asyncio
    async def test_update_omitted_fields_unchanged(self, client):
        token = await _token(client)

        res = await client.patch(
            f"{AUTH}/me",
            headers=_bearer(token),
            json={"email": "alicia@example.com"},
        )

        assert res.status_code == 200
        assert res.json()["email"] == "alicia@example.com"
        assert res.json()["name"] == "Alice"

    @pytest.mark.asyncio
    async def test_update_to_taken_email(self, client):
        await _register(client, email="bob@example.com")
        token = await _token(client)

        res = await client.patch(
            f"{AUTH}/me",
            headers=_bearer(token),
            json={"email": "bob@example.com"},
        )

        assert res.status_code == 409

    @pytest.mark.asyncio
    async def test_update_weak_password(self, client):
        token = await _token(client)

        res = await client.patch(f"{AUTH}/me", headers=_bearer(token), json={"password": "short"})

        assert res.status_code == 400


@pytest_asyncio.fixture
async def revealing_client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Client for an app that reveals why a login failed."""
    app = create_app(Settings(_env_file=None, reveal_login_failure_reason=True))
    app.dependency_overrides[get_db_session] = lambda: db_session

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


class TestRevealLoginFailureReason:
    """Tests for the opt-in detailed login failure policy."""

    @pytest.mark.asyncio
    async def test_unknown_user_and_wrong_password_differ(self, revealing_client):
        await _register(revealing_client)

        wrong_password = await _login(revealing_client, password="wrong-password")
        unknown_user = await _login(revealing_client, email="nobody@example.com")

        assert wrong_password.status_code == 401
        assert wrong_password.json()["kind"] == "incorrect_password"
        assert unknown_user.status_code == 404
        assert unknown_user.json()["kind"] == "user_not_found"

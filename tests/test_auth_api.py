"""
Tests for the /auth endpoints.

Tests cover:
- Login success, last_login update and failure modes
- Refresh token exchange
- "Who am I"
- Forgot/reset password flow and its enumeration resistance
- Bearer token gate failures
"""

from datetime import timedelta

import pytest
from sqlalchemy import select

from cms.database import utcnow
from cms.models import User
from cms.permissions import RoleSlug
from cms.security import create_refresh_token, verify_password
from tests.conftest import TEST_PASSWORD

API = "/api/v1/auth"


async def _reload(session_factory, user_id):
    async with session_factory() as session:
        return await session.get(User, user_id)


class TestLogin:
    @pytest.mark.asyncio
    async def test_login_success(self, client, editor, session_factory):
        resp = await client.post(f"{API}/login", json={"email": "editor@example.com", "password": TEST_PASSWORD})

        assert resp.status_code == 200
        body = resp.json()
        assert body["success"] is True
        assert body["data"]["accessToken"]
        assert body["data"]["refreshToken"]
        assert body["data"]["user"] == {
            "id": editor.id,
            "email": "editor@example.com",
            "fullName": "Eddie Editor",
            "role": RoleSlug.EDITOR.value,
        }
        assert (await _reload(session_factory, editor.id)).last_login is not None

    @pytest.mark.asyncio
    async def test_login_is_case_insensitive_on_email(self, client, editor):
        resp = await client.post(f"{API}/login", json={"email": "Editor@Example.com", "password": TEST_PASSWORD})
        assert resp.status_code == 200

    @pytest.mark.asyncio
    async def test_wrong_password(self, client, editor):
        resp = await client.post(f"{API}/login", json={"email": "editor@example.com", "password": "nope"})
        assert resp.status_code == 401
        assert resp.json() == {
            "success": False,
            "error": {"code": "UNAUTHORIZED", "message": "Invalid email or password"},
        }

    @pytest.mark.asyncio
    async def test_unknown_email(self, client, roles):
        resp = await client.post(f"{API}/login", json={"email": "ghost@example.com", "password": "x"})
        assert resp.status_code == 401

    @pytest.mark.asyncio
    async def test_deactivated_user_rejected(self, client, make_user, session_factory):
        user = await make_user(RoleSlug.EDITOR.value, email="off@example.com", is_active=False)

        resp = await client.post(f"{API}/login", json={"email": "off@example.com", "password": TEST_PASSWORD})

        assert resp.status_code == 401
        assert (await _reload(session_factory, user.id)).last_login is None

    @pytest.mark.asyncio
    async def test_soft_deleted_user_not_found(self, client, make_user, session_factory):
        user = await make_user(RoleSlug.EDITOR.value, email="gone@example.com")
        async with session_factory() as session:
            row = await session.get(User, user.id)
            row.deleted_at = utcnow()
            await session.commit()

        resp = await client.post(f"{API}/login", json={"email": "gone@example.com", "password": TEST_PASSWORD})
        assert resp.status_code == 401

    @pytest.mark.asyncio
    async def test_missing_fields_is_validation_error(self, client):
        resp = await client.post(f"{API}/login", json={"email": "not-an-email"})
        assert resp.status_code == 422
        fields = {d["field"] for d in resp.json()["error"]["details"]}
        assert {"email", "password"} <= fields


class TestRefresh:
    @pytest.mark.asyncio
    async def test_refresh_issues_access_token(self, client, editor):
        resp = await client.post(f"{API}/refresh", json={"refreshToken": create_refresh_token(editor.id)})
        assert resp.status_code == 200
        assert resp.json()["data"]["accessToken"]

    @pytest.mark.asyncio
    async def test_garbage_refresh_token(self, client, roles):
        resp = await client.post(f"{API}/refresh", json={"refreshToken": "garbage"})
        assert resp.status_code == 401
        assert resp.json()["error"]["message"] == "Invalid refresh token"

    @pytest.mark.asyncio
    async def test_refresh_for_deactivated_user(self, client, make_user):
        user = await make_user(RoleSlug.VIEWER.value, is_active=False)
        resp = await client.post(f"{API}/refresh", json={"refreshToken": create_refresh_token(user.id)})
        assert resp.status_code == 401


class TestMe:
    @pytest.mark.asyncio
    async def test_me_returns_profile_with_role(self, client, viewer, viewer_headers):
        resp = await client.get(f"{API}/me", headers=viewer_headers)
        assert resp.status_code == 200
        data = resp.json()["data"]
        assert data["email"] == "viewer@example.com"
        assert data["role"]["slug"] == RoleSlug.VIEWER.value
        assert "passwordHash" not in data

    @pytest.mark.asyncio
    async def test_me_without_token(self, client):
        resp = await client.get(f"{API}/me")
        assert resp.status_code == 401
        assert resp.json()["error"]["message"] == "No authentication token provided"

    @pytest.mark.asyncio
    async def test_me_with_invalid_token(self, client):
        resp = await client.get(f"{API}/me", headers={"Authorization": "Bearer not.a.jwt"})
        assert resp.status_code == 401

    @pytest.mark.asyncio
    async def test_role_change_applies_to_existing_token(self, client, editor, editor_headers, roles, session_factory):
        async with session_factory() as session:
            row = await session.get(User, editor.id)
            row.role_id = roles[RoleSlug.VIEWER.value]
            await session.commit()

        resp = await client.post("/api/v1/tags", json={"name": "Python"}, headers=editor_headers)
        assert resp.status_code == 403


class TestPasswordReset:
    @pytest.mark.asyncio
    async def test_forgot_password_same_response_for_unknown_email(self, client, editor, smtp_send):
        known = await client.post(f"{API}/forgot-password", json={"email": "editor@example.com"})
        unknown = await client.post(f"{API}/forgot-password", json={"email": "nobody@example.com"})

        assert known.status_code == unknown.status_code == 200
        assert known.json() == unknown.json()
        assert smtp_send.await_count == 1
        message = smtp_send.await_args.args[0]
        assert message["To"] == "editor@example.com"

    @pytest.mark.asyncio
    async def test_forgot_password_stores_token_with_expiry(self, client, editor, session_factory):
        await client.post(f"{API}/forgot-password", json={"email": "editor@example.com"})

        user = await _reload(session_factory, editor.id)
        assert len(user.password_reset_token) == 64
        delta = user.password_reset_expires - utcnow()
        assert timedelta(minutes=55) < delta <= timedelta(minutes=60)

    @pytest.mark.asyncio
    async def test_reset_with_valid_token(self, client, editor, session_factory):
        await client.post(f"{API}/forgot-password", json={"email": "editor@example.com"})
        token = (await _reload(session_factory, editor.id)).password_reset_token

        resp = await client.post(f"{API}/reset-password", json={"token": token, "newPassword": "N3w!Password"})

        assert resp.status_code == 200
        user = await _reload(session_factory, editor.id)
        assert verify_password("N3w!Password", user.password_hash)
        assert user.password_reset_token is None
        assert user.password_reset_expires is None

        reused = await client.post(f"{API}/reset-password", json={"token": token, "newPassword": "An0ther!Pass"})
        assert reused.status_code == 400

    @pytest.mark.asyncio
    async def test_reset_with_unknown_token(self, client, roles):
        resp = await client.post(f"{API}/reset-password", json={"token": "abc", "newPassword": "N3w!Password"})
        assert resp.status_code == 400
        assert resp.json()["error"]["code"] == "BAD_REQUEST"

    @pytest.mark.asyncio
    async def test_reset_with_expired_token(self, client, editor, session_factory):
        async with session_factory() as session:
            user = await session.get(User, editor.id)
            user.password_reset_token = "e" * 64
            user.password_reset_expires = utcnow() - timedelta(minutes=1)
            await session.commit()

        resp = await client.post(f"{API}/reset-password", json={"token": "e" * 64, "newPassword": "N3w!Password"})
        assert resp.status_code == 400

    @pytest.mark.asyncio
    async def test_reset_rejects_weak_password(self, client, roles):
        resp = await client.post(f"{API}/reset-password", json={"token": "abc", "newPassword": "weakpassword"})
        assert resp.status_code == 422
        messages = [d["message"] for d in resp.json()["error"]["details"]]
        assert any("uppercase" in m for m in messages)


class TestLogout:
    @pytest.mark.asyncio
    async def test_logout_requires_auth(self, client):
        assert (await client.post(f"{API}/logout")).status_code == 401

    @pytest.mark.asyncio
    async def test_logout(self, client, editor_headers):
        resp = await client.post(f"{API}/logout", headers=editor_headers)
        assert resp.status_code == 200
        assert resp.json() == {"success": True, "message": "Logged out successfully"}

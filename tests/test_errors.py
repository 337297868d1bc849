"""
Tests for the error envelope produced by the exception handlers.
"""

import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from jose import ExpiredSignatureError, JWTError
from sqlalchemy.exc import IntegrityError

from cms.config import get_settings
from cms.errors import Conflict, NotFound, register_exception_handlers


def build_app():
    app = FastAPI()
    register_exception_handlers(app)

    @app.get("/conflict")
    async def conflict():
        raise Conflict("Slug taken", details={"field": "slug"})

    @app.get("/not-found")
    async def not_found():
        raise NotFound()

    @app.get("/unique")
    async def unique():
        raise IntegrityError("INSERT", {}, Exception("UNIQUE constraint failed: tags.slug"))

    @app.get("/foreign-key")
    async def foreign_key():
        raise IntegrityError("INSERT", {}, Exception("FOREIGN KEY constraint failed"))

    @app.get("/expired")
    async def expired():
        raise ExpiredSignatureError("Signature has expired")

    @app.get("/bad-token")
    async def bad_token():
        raise JWTError("garbage")

    @app.get("/boom")
    async def boom():
        raise RuntimeError("kaboom")

    return app


@pytest_asyncio.fixture
async def probe():
    transport = ASGITransport(app=build_app(), raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


class TestApiErrors:
    @pytest.mark.asyncio
    async def test_api_error_envelope(self, probe):
        resp = await probe.get("/conflict")
        assert resp.status_code == 409
        assert resp.json() == {
            "success": False,
            "error": {"code": "CONFLICT", "message": "Slug taken", "details": {"field": "slug"}},
        }

    @pytest.mark.asyncio
    async def test_default_message(self, probe):
        resp = await probe.get("/not-found")
        assert resp.json()["error"] == {"code": "NOT_FOUND", "message": "Resource not found"}


class TestTranslatedErrors:
    @pytest.mark.asyncio
    async def test_unique_violation(self, probe):
        resp = await probe.get("/unique")
        assert resp.status_code == 409
        assert resp.json()["error"]["code"] == "DUPLICATE_ENTRY"

    @pytest.mark.asyncio
    async def test_foreign_key_violation(self, probe):
        resp = await probe.get("/foreign-key")
        assert resp.status_code == 400
        assert resp.json()["error"]["code"] == "INVALID_REFERENCE"

    @pytest.mark.asyncio
    async def test_jwt_errors(self, probe):
        expired = await probe.get("/expired")
        invalid = await probe.get("/bad-token")
        assert (expired.status_code, expired.json()["error"]["code"]) == (401, "TOKEN_EXPIRED")
        assert (invalid.status_code, invalid.json()["error"]["code"]) == (401, "INVALID_TOKEN")


class TestUnhandledErrors:
    @pytest.mark.asyncio
    async def test_development_includes_stack(self, probe):
        resp = await probe.get("/boom")

        error = resp.json()["error"]
        assert resp.status_code == 500
        assert error["message"] == "kaboom"
        assert any("RuntimeError" in line for line in error["details"]["stack"])

    @pytest.mark.asyncio
    async def test_production_hides_details(self, probe, monkeypatch):
        monkeypatch.setattr(get_settings(), "environment", "production")

        resp = await probe.get("/boom")

        assert resp.json() == {
            "success": False,
            "error": {"code": "INTERNAL_ERROR", "message": "An unexpected error occurred"},
        }


class TestAppLevelErrors:
    @pytest.mark.asyncio
    async def test_unknown_route(self, client):
        resp = await client.get("/api/v1/nothing-here")
        assert resp.status_code == 404
        assert resp.json()["error"]["message"] == "Route GET /api/v1/nothing-here not found"

    @pytest.mark.asyncio
    async def test_method_not_allowed(self, client):
        resp = await client.patch("/api/v1/tags")
        assert resp.status_code == 405
        assert resp.json()["error"]["code"] == "METHOD_NOT_ALLOWED"

    @pytest.mark.asyncio
    async def test_validation_details(self, client, editor_headers):
        resp = await client.post("/api/v1/posts", json={"content": "no title"}, headers=editor_headers)

        assert resp.status_code == 422
        assert resp.json()["error"]["code"] == "VALIDATION_ERROR"
        assert resp.json()["error"]["details"][0]["field"] == "title"

    @pytest.mark.asyncio
    async def test_bad_bearer_token(self, client):
        resp = await client.post(
            "/api/v1/tags", json={"name": "x"}, headers={"Authorization": "Bearer not.a.token"}
        )
        assert resp.status_code == 401
        assert resp.json()["error"]["message"] == "Invalid authentication token"

    @pytest.mark.asyncio
    async def test_health(self, client):
        resp = await client.get("/health")
        assert resp.json() == {"status": "healthy", "environment": "test"}

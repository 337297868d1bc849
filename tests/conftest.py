"""
Shared fixtures: an isolated in-memory database per test, an HTTP client
bound to the ASGI app, and ready-made users for each role.
"""

import os
import tempfile

# Settings are read at import time, so the environment must be in place first
os.environ["ENVIRONMENT"] = "test"
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["SCHEDULER_ENABLED"] = "false"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["UPLOAD_DIR"] = tempfile.mkdtemp(prefix="cms-uploads-")

from unittest.mock import AsyncMock, patch

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

import cms.models  # noqa: F401
from cms.database import Base, _enable_sqlite_foreign_keys, get_db
from cms.main import app
from cms.models import User
from cms.permissions import RoleSlug
from cms.security import create_access_token, hash_password
from cms.seed import seed_roles

TEST_PASSWORD = "Passw0rd!"


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    event.listen(engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def roles(session_factory):
    async with session_factory() as session:
        seeded = await seed_roles(session)
        await session.commit()
        return {slug: role.id for slug, role in seeded.items()}


@pytest.fixture(autouse=True)
def smtp_send():
    """No test talks to a real SMTP server."""
    with patch("cms.services.email.aiosmtplib.send", new_callable=AsyncMock) as send:
        yield send


@pytest_asyncio.fixture
async def client(session_factory):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(session_factory, roles):
    """Factory creating a user with the given role slug."""

    async def _make(role=RoleSlug.EDITOR.value, email=None, is_active=True, full_name=None):
        async with session_factory() as session:
            user = User(
                email=email or f"{role}-{len(_make.created)}@example.com",
                password_hash=hash_password(TEST_PASSWORD),
                full_name=full_name or f"{role.title()} User",
                role_id=roles[role],
                is_active=is_active,
            )
            session.add(user)
            await session.commit()
            await session.refresh(user)
        _make.created.append(user)
        return user

    _make.created = []
    return _make


def headers_for(user: User, role: str) -> dict:
    token = create_access_token(user.id, user.email, role)
    return {"Authorization": f"Bearer {token}"}


@pytest_asyncio.fixture
async def admin(make_user):
    return await make_user(RoleSlug.SUPER_ADMIN.value, email="admin@example.com", full_name="Ada Admin")


@pytest_asyncio.fixture
async def editor(make_user):
    return await make_user(RoleSlug.EDITOR.value, email="editor@example.com", full_name="Eddie Editor")


@pytest_asyncio.fixture
async def viewer(make_user):
    return await make_user(RoleSlug.VIEWER.value, email="viewer@example.com", full_name="Vera Viewer")


@pytest.fixture
def admin_headers(admin):
    return headers_for(admin, RoleSlug.SUPER_ADMIN.value)


@pytest.fixture
def editor_headers(editor):
    return headers_for(editor, RoleSlug.EDITOR.value)


@pytest.fixture
def viewer_headers(viewer):
    return headers_for(viewer, RoleSlug.VIEWER.value)

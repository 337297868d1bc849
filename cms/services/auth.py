"""
Authentication Service

Login, token refresh, "who am I" and the password reset flow.

Token Lifecycle:
    login → access token (jwt_expires_minutes) + refresh token (refresh_token_expires_days)
    refresh → new access token for the same, still active, user

Reset Flow:
    request_password_reset → token stored with expiry, email queued by the caller
    reset_password → token consumed, password rehashed
"""

import logging
from datetime import timedelta
from typing import Optional, Tuple

from jose import JWTError
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from cms.config import get_settings
from cms.database import utcnow
from cms.errors import BadRequest, NotFound, Unauthorized
from cms.models import User
from cms.permissions import RoleSlug
from cms.schemas import AuthUser, LoginData
from cms.security import (
    create_access_token,
    create_refresh_token,
    decode_refresh_token,
    generate_reset_token,
    hash_password,
    verify_password,
)

logger = logging.getLogger(__name__)

RESET_REQUESTED_MESSAGE = "If an account exists with this email, a password reset link has been sent"


def _role_slug(user: User) -> str:
    return user.role.slug if user.role else RoleSlug.VIEWER.value


async def _find_active_by_email(db: AsyncSession, email: str) -> Optional[User]:
    result = await db.execute(
        select(User).where(User.email == email.lower(), User.deleted_at.is_(None))
    )
    return result.scalar_one_or_none()


async def login(db: AsyncSession, email: str, password: str) -> LoginData:
    user = await _find_active_by_email(db, email)
    # Same message for every failure so callers cannot probe accounts
    if not user or not verify_password(password, user.password_hash):
        logger.info(f"Failed login attempt for {email}")
        raise Unauthorized("Invalid email or password")
    if not user.is_active:
        logger.info(f"Login rejected for deactivated user {user.id}")
        raise Unauthorized("Account is deactivated")

    user.last_login = utcnow()
    await db.commit()

    role = _role_slug(user)
    logger.info(f"User {user.id} logged in")
    return LoginData(
        user=AuthUser(id=user.id, email=user.email, full_name=user.full_name, role=role),
        access_token=create_access_token(user.id, user.email, role),
        refresh_token=create_refresh_token(user.id),
    )


async def refresh(db: AsyncSession, refresh_token: str) -> str:
    """Exchange a refresh token for a new access token."""
    try:
        claims = decode_refresh_token(refresh_token)
    except JWTError:
        raise Unauthorized("Invalid refresh token")

    result = await db.execute(
        select(User).where(User.id == claims["userId"], User.deleted_at.is_(None))
    )
    user = result.scalar_one_or_none()
    if not user or not user.is_active:
        raise Unauthorized("Invalid refresh token")

    return create_access_token(user.id, user.email, _role_slug(user))


async def get_current_user(db: AsyncSession, user_id: int) -> User:
    result = await db.execute(
        select(User).where(User.id == user_id, User.deleted_at.is_(None))
    )
    user = result.scalar_one_or_none()
    if not user:
        raise NotFound("User not found")
    return user


async def request_password_reset(db: AsyncSession, email: str) -> Optional[Tuple[User, str]]:
    """
    Store a reset token for ``email`` when such a user exists.

    Returns:
        (user, token) for the caller to email, or None for unknown addresses.
        Callers respond with RESET_REQUESTED_MESSAGE either way.
    """
    user = await _find_active_by_email(db, email)
    if not user:
        return None

    settings = get_settings()
    token = generate_reset_token()
    user.password_reset_token = token
    user.password_reset_expires = utcnow() + timedelta(minutes=settings.password_reset_expires_minutes)
    await db.commit()

    logger.info(f"Password reset requested for user {user.id}")
    return user, token


async def reset_password(db: AsyncSession, token: str, new_password: str) -> None:
    result = await db.execute(
        select(User).where(
            User.password_reset_token == token,
            User.password_reset_expires > utcnow(),
            User.deleted_at.is_(None),
        )
    )
    user = result.scalar_one_or_none()
    if not user:
        raise BadRequest("Invalid or expired reset token")

    user.password_hash = hash_password(new_password)
    user.password_reset_token = None
    user.password_reset_expires = None
    await db.commit()
    logger.info(f"Password reset completed for user {user.id}")


async def logout(user_id: int) -> None:
    # Tokens are stateless; the client discards them
    logger.info(f"User {user_id} logged out")

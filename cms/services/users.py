"""
User administration (super-admin only at the route layer).
"""

import logging
from typing import Optional, Sequence, Tuple

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from cms.database import utcnow
from cms.errors import BadRequest, Conflict, NotFound
from cms.models import Role, User
from cms.schemas import Pagination, UserCreate, UserUpdate
from cms.security import hash_password
from cms.services.base import flush_or_conflict, not_deleted, paginate

logger = logging.getLogger(__name__)

EMAIL_TAKEN = "User with this email already exists"


async def list_users(
    db: AsyncSession,
    page: int,
    limit: int,
    search: Optional[str] = None,
    role_id: Optional[int] = None,
    is_active: Optional[bool] = None,
) -> Tuple[Sequence[User], Pagination]:
    query = not_deleted(select(User), User)
    if search:
        pattern = f"%{search}%"
        query = query.where(or_(User.full_name.ilike(pattern), User.email.ilike(pattern)))
    if role_id is not None:
        query = query.where(User.role_id == role_id)
    if is_active is not None:
        query = query.where(User.is_active.is_(is_active))
    query = query.order_by(User.created_at.desc(), User.id.desc())
    return await paginate(db, query, page, limit)


async def get_user(db: AsyncSession, user_id: int) -> User:
    result = await db.execute(
        not_deleted(select(User), User)
        .where(User.id == user_id)
        .execution_options(populate_existing=True)
    )
    user = result.scalar_one_or_none()
    if not user:
        raise NotFound("User not found")
    return user


async def _ensure_email_free(db: AsyncSession, email: str, exclude_id: Optional[int] = None) -> None:
    # Soft-deleted accounts still hold their address in the unique index
    query = select(User.id).where(User.email == email)
    if exclude_id is not None:
        query = query.where(User.id != exclude_id)
    result = await db.execute(query)
    if result.first() is not None:
        raise Conflict(EMAIL_TAKEN)


async def _ensure_role(db: AsyncSession, role_id: int) -> Role:
    role = await db.get(Role, role_id)
    if not role:
        raise BadRequest("Role not found")
    return role


async def create_user(db: AsyncSession, data: UserCreate) -> User:
    email = data.email.lower()
    await _ensure_email_free(db, email)
    await _ensure_role(db, data.role_id)

    user = User(
        email=email,
        password_hash=hash_password(data.password),
        full_name=data.full_name,
        role_id=data.role_id,
        is_active=True,
    )
    db.add(user)
    await flush_or_conflict(db, EMAIL_TAKEN)
    await db.commit()

    logger.info(f"User {user.id} created")
    return await get_user(db, user.id)


async def update_user(db: AsyncSession, user_id: int, data: UserUpdate) -> User:
    user = await get_user(db, user_id)
    changes = data.model_dump(exclude_unset=True)

    if changes.get("email"):
        changes["email"] = changes["email"].lower()
        if changes["email"] != user.email:
            await _ensure_email_free(db, changes["email"], exclude_id=user.id)
    if changes.get("role_id") is not None:
        await _ensure_role(db, changes["role_id"])

    for field, value in changes.items():
        setattr(user, field, value)

    await flush_or_conflict(db, EMAIL_TAKEN)
    await db.commit()
    return await get_user(db, user.id)


async def delete_user(db: AsyncSession, user_id: int, acting_user_id: int) -> None:
    if user_id == acting_user_id:
        raise BadRequest("You cannot delete your own account")
    user = await get_user(db, user_id)
    user.deleted_at = utcnow()
    await db.commit()
    logger.info(f"User {user_id} deleted by user {acting_user_id}")


async def list_roles(db: AsyncSession) -> Sequence[Role]:
    result = await db.execute(select(Role).order_by(Role.id))
    return result.scalars().all()

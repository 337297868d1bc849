"""
Authentication and authorization dependencies.

Route handlers compose these gates with ``Depends``:

    get_current_principal     bearer token -> active user, else 401
    get_optional_principal    same, but yields None instead of failing
    require_roles(...)        role slug allow-list, else 403
    require_permission(m, a)  role permission map lookup, else 403
    require_owner_or_admin(r) resource owner or super-admin, else 403
"""

import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import ExpiredSignatureError, JWTError
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from cms.database import get_db
from cms.errors import Forbidden, NotFound, Unauthorized
from cms.models import Role, User
from cms.permissions import Action, InvalidPermissionMap, Module, PermissionMap, RoleSlug
from cms.security import decode_access_token

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class Principal:
    user_id: int
    email: str
    role: str
    role_id: int

    @property
    def is_super_admin(self) -> bool:
        return self.role == RoleSlug.SUPER_ADMIN.value


async def _resolve_principal(db: AsyncSession, token: str) -> Principal:
    try:
        claims = decode_access_token(token)
    except ExpiredSignatureError:
        raise Unauthorized("Authentication token has expired")
    except JWTError:
        raise Unauthorized("Invalid authentication token")

    result = await db.execute(
        select(User).where(User.id == claims["userId"], User.deleted_at.is_(None))
    )
    user = result.scalar_one_or_none()
    if not user:
        raise Unauthorized("User not found")
    if not user.is_active:
        raise Unauthorized("User account is deactivated")

    # Role comes from the database so role changes apply to live tokens
    return Principal(
        user_id=user.id,
        email=user.email,
        role=user.role.slug if user.role else RoleSlug.VIEWER.value,
        role_id=user.role_id,
    )


async def get_current_principal(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db),
) -> Principal:
    if not credentials or credentials.scheme.lower() != "bearer":
        raise Unauthorized("No authentication token provided")
    principal = await _resolve_principal(db, credentials.credentials)
    request.state.principal = principal
    return principal


async def get_optional_principal(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db),
) -> Optional[Principal]:
    if not credentials:
        return None
    try:
        return await _resolve_principal(db, credentials.credentials)
    except Unauthorized:
        return None


def require_roles(*allowed_roles: str) -> Callable[..., Awaitable[Principal]]:
    async def checker(principal: Principal = Depends(get_current_principal)) -> Principal:
        if principal.role not in allowed_roles:
            raise Forbidden("You do not have permission to perform this action")
        return principal

    return checker


def require_permission(module: Module, action: Action) -> Callable[..., Awaitable[Principal]]:
    async def checker(
        principal: Principal = Depends(get_current_principal),
        db: AsyncSession = Depends(get_db),
    ) -> Principal:
        role = await db.get(Role, principal.role_id)
        if not role:
            raise Forbidden("Invalid role")
        try:
            permissions = PermissionMap.load(role.permissions)
        except InvalidPermissionMap as e:
            logger.error(f"Role {role.slug} has an invalid permission map: {e}")
            raise Forbidden("Invalid role permissions")
        if not permissions.allows(module, action):
            raise Forbidden(f"You do not have permission to {action.value} {module.value}")
        return principal

    return checker


OwnerResolver = Callable[[Request, AsyncSession], Awaitable[Optional[int]]]


def require_owner_or_admin(resolver: OwnerResolver) -> Callable[..., Awaitable[Principal]]:
    """Allow super-admins and the user returned by ``resolver``.

    ``resolver`` receives the request and session and returns the owning
    user id, or None when the resource does not exist.
    """

    async def checker(
        request: Request,
        principal: Principal = Depends(get_current_principal),
        db: AsyncSession = Depends(get_db),
    ) -> Principal:
        if principal.is_super_admin:
            return principal
        owner_id = await resolver(request, db)
        if owner_id is None:
            raise NotFound("Resource not found")
        if owner_id != principal.user_id:
            raise Forbidden("You can only access your own resources")
        return principal

    return checker

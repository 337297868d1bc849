from typing import List, Optional

from fastapi import APIRouter, BackgroundTasks, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from cms.api.common import PageParams, pagination
from cms.database import get_db
from cms.dependencies import Principal, get_current_principal, require_roles
from cms.errors import ValidationFailed
from cms.permissions import RoleSlug
from cms.schemas import (
    DataResponse,
    ListResponse,
    MessageResponse,
    RoleResponse,
    UserCreate,
    UserResponse,
    UserUpdate,
)
from cms.security import password_strength_errors
from cms.services import users
from cms.services.email import send_welcome_email

router = APIRouter()

super_admin_only = require_roles(RoleSlug.SUPER_ADMIN.value)


@router.get("/roles", response_model=DataResponse[List[RoleResponse]])
async def list_roles(
    _: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db),
):
    roles = await users.list_roles(db)
    return DataResponse(data=[RoleResponse.model_validate(r) for r in roles])


@router.get("", response_model=ListResponse[UserResponse])
async def list_users(
    search: Optional[str] = Query(None),
    role_id: Optional[int] = Query(None, alias="roleId"),
    is_active: Optional[bool] = Query(None, alias="isActive"),
    params: PageParams = Depends(pagination),
    _: Principal = Depends(super_admin_only),
    db: AsyncSession = Depends(get_db),
):
    rows, page = await users.list_users(
        db, params.page, params.limit, search=search, role_id=role_id, is_active=is_active
    )
    return ListResponse(data=[UserResponse.model_validate(u) for u in rows], pagination=page)


@router.get("/{user_id}", response_model=DataResponse[UserResponse])
async def get_user(
    user_id: int,
    _: Principal = Depends(super_admin_only),
    db: AsyncSession = Depends(get_db),
):
    user = await users.get_user(db, user_id)
    return DataResponse(data=UserResponse.model_validate(user))


@router.post("", response_model=DataResponse[UserResponse], status_code=201)
async def create_user(
    data: UserCreate,
    background_tasks: BackgroundTasks,
    _: Principal = Depends(super_admin_only),
    db: AsyncSession = Depends(get_db),
):
    problems = password_strength_errors(data.password)
    if problems:
        raise ValidationFailed(
            "Password does not meet requirements",
            [{"field": "password", "message": message} for message in problems],
        )
    user = await users.create_user(db, data)
    background_tasks.add_task(send_welcome_email, user.email, user.full_name)
    return DataResponse(data=UserResponse.model_validate(user))


@router.patch("/{user_id}", response_model=DataResponse[UserResponse])
async def update_user(
    user_id: int,
    data: UserUpdate,
    _: Principal = Depends(super_admin_only),
    db: AsyncSession = Depends(get_db),
):
    user = await users.update_user(db, user_id, data)
    return DataResponse(data=UserResponse.model_validate(user))


@router.delete("/{user_id}", response_model=MessageResponse)
async def delete_user(
    user_id: int,
    principal: Principal = Depends(super_admin_only),
    db: AsyncSession = Depends(get_db),
):
    await users.delete_user(db, user_id, principal.user_id)
    return MessageResponse(message="User deleted successfully")

from datetime import datetime
from typing import Optional

from pydantic import EmailStr, Field

from cms.schemas.common import CamelModel, NonEmptyStr


class RoleSummary(CamelModel):
    id: int
    name: str
    slug: str


class RoleResponse(RoleSummary):
    description: Optional[str] = None


class UserResponse(CamelModel):
    id: int
    email: str
    full_name: str
    role: Optional[RoleSummary] = None
    is_active: bool
    last_login: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime


class UserCreate(CamelModel):
    email: EmailStr
    password: str = Field(..., min_length=8)
    full_name: NonEmptyStr
    role_id: int


class UserUpdate(CamelModel):
    email: Optional[EmailStr] = None
    full_name: Optional[NonEmptyStr] = None
    role_id: Optional[int] = None
    is_active: Optional[bool] = None

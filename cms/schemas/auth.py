from pydantic import EmailStr, Field

from cms.schemas.common import CamelModel, NonEmptyStr


class LoginRequest(CamelModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class AuthUser(CamelModel):
    id: int
    email: str
    full_name: str
    role: str


class LoginData(CamelModel):
    user: AuthUser
    access_token: str
    refresh_token: str


class RefreshRequest(CamelModel):
    refresh_token: NonEmptyStr


class AccessTokenData(CamelModel):
    access_token: str


class ForgotPasswordRequest(CamelModel):
    email: EmailStr


class ResetPasswordRequest(CamelModel):
    token: NonEmptyStr
    new_password: str = Field(..., min_length=8)

from fastapi import APIRouter, BackgroundTasks, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from cms.database import get_db
from cms.dependencies import Principal, get_current_principal
from cms.errors import Unauthorized, ValidationFailed
from cms.middleware.metrics import record_login
from cms.middleware.rate_limit import login_rate_limit, password_reset_rate_limit, release_rate_limit
from cms.schemas import (
    AccessTokenData,
    DataResponse,
    ForgotPasswordRequest,
    LoginData,
    LoginRequest,
    MessageResponse,
    RefreshRequest,
    ResetPasswordRequest,
    UserResponse,
)
from cms.security import password_strength_errors
from cms.services import auth as auth_service
from cms.services.email import send_password_reset_email

router = APIRouter()


@router.post("/login", response_model=DataResponse[LoginData], dependencies=[Depends(login_rate_limit)])
async def login(
    request: LoginRequest,
    http_request: Request,
    db: AsyncSession = Depends(get_db),
):
    try:
        data = await auth_service.login(db, request.email, request.password)
    except Unauthorized:
        record_login(False)
        raise
    record_login(True)
    await release_rate_limit(http_request, "login")
    return DataResponse(data=data)


@router.post("/refresh", response_model=DataResponse[AccessTokenData])
async def refresh(request: RefreshRequest, db: AsyncSession = Depends(get_db)):
    token = await auth_service.refresh(db, request.refresh_token)
    return DataResponse(data=AccessTokenData(access_token=token))


@router.get("/me", response_model=DataResponse[UserResponse])
async def me(
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db),
):
    user = await auth_service.get_current_user(db, principal.user_id)
    return DataResponse(data=UserResponse.model_validate(user))


@router.post(
    "/forgot-password",
    response_model=MessageResponse,
    dependencies=[Depends(password_reset_rate_limit)],
)
async def forgot_password(
    request: ForgotPasswordRequest,
    background_tasks: BackgroundTasks,
    db: AsyncSession = Depends(get_db),
):
    pending = await auth_service.request_password_reset(db, request.email)
    if pending:
        user, token = pending
        background_tasks.add_task(send_password_reset_email, user.email, user.full_name, token)
    return MessageResponse(message=auth_service.RESET_REQUESTED_MESSAGE)


@router.post("/reset-password", response_model=MessageResponse)
async def reset_password(request: ResetPasswordRequest, db: AsyncSession = Depends(get_db)):
    problems = password_strength_errors(request.new_password)
    if problems:
        raise ValidationFailed(
            "Password does not meet requirements",
            [{"field": "newPassword", "message": message} for message in problems],
        )
    await auth_service.reset_password(db, request.token, request.new_password)
    return MessageResponse(message="Password has been reset successfully")


@router.post("/logout", response_model=MessageResponse)
async def logout(principal: Principal = Depends(get_current_principal)):
    await auth_service.logout(principal.user_id)
    return MessageResponse(message="Logged out successfully")

from datetime import datetime, timezone
from http import HTTPStatus

from fastapi import APIRouter, Depends

from island_api.api.dependencies import get_auth_service
from island_api.schemas.base import ApiResponse
from island_api.schemas.user import RegisterRequest, ResetPasswordRequest
from island_api.services.auth_service import AuthService

router = APIRouter()


@router.post("/register", response_model=ApiResponse, status_code=HTTPStatus.CREATED)
async def register(
    user_data: RegisterRequest,
    auth_service: AuthService = Depends(get_auth_service),
):
    """User registration"""
    result = await auth_service.register(user_data)
    return ApiResponse(
        success=True,
        message="注册成功",
        timestamp=datetime.now(timezone.utc),
        data=result.model_dump()
    )


@router.post("/reset-password", response_model=ApiResponse)
async def reset_password(
    request: ResetPasswordRequest,
    auth_service: AuthService = Depends(get_auth_service),
):
    """Reset password"""
    await auth_service.reset_password(request)
    return ApiResponse(
        success=True,
        message="密码重置成功",
        timestamp=datetime.now(timezone.utc),
    )

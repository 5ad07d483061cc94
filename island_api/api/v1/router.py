from fastapi import APIRouter, Request

from island_api.api.v1.endpoints import auth, verification
from island_api.schemas.base import ApiResponse

api_router = APIRouter()

# 认证相关路由
api_router.include_router(
    auth.router, prefix="/auth", tags=["auth"])

# 邮箱验证码路由
api_router.include_router(
    verification.router, prefix="/verification", tags=["verification"])


@api_router.get("/health", response_model=ApiResponse, tags=["health"])
async def health(request: Request):
    """健康检查"""
    redis_client = getattr(request.app.state, "redis", None)
    redis_ok = redis_client is not None and await redis_client.ping()
    return ApiResponse(
        success=redis_ok,
        message="ok" if redis_ok else "redis unavailable",
        data={"redis": redis_ok},
    )

import time
import uuid
from contextlib import asynccontextmanager
from typing import Dict, List

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from island_api.api.v1.router import api_router
from island_api.config import settings
from island_api.core.database import init_database
from island_api.core.exceptions import AppException
from island_api.core.redis import RedisClient
from island_api.utils.logger import api_logger, app_logger


def _field_errors(exc: RequestValidationError) -> Dict[str, List[str]]:
    """把校验错误按字段名分组"""
    errors: Dict[str, List[str]] = {}
    for error in exc.errors():
        loc = [str(part) for part in error.get("loc", ()) if part != "body"]
        field = ".".join(loc) or "body"
        errors.setdefault(field, []).append(error.get("msg", "invalid"))
    return errors


@asynccontextmanager
async def lifespan(app: FastAPI):
    """应用启动和关闭时执行"""
    app_logger.info("🚀 Application starting up...")

    try:
        init_database()
        app_logger.info("✅ Database initialized successfully")
    except Exception as e:
        app_logger.error(f"❌ Database initialization failed: {e}")

    redis_client = RedisClient(settings.redis_url)
    app.state.redis = redis_client
    try:
        await redis_client.connect()
        app_logger.info("✅ Redis connection successful")
    except Exception as e:
        app_logger.error(f"❌ Redis connection failed: {e}")

    app_logger.info(
        f"✅ Application started successfully on {settings.app_name} v{settings.app_version}")

    yield

    app_logger.info("🛑 Application shutting down...")
    await redis_client.close()
    app_logger.info("✅ Application shut down complete")


def create_app() -> FastAPI:
    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="AI尤里岛 - 账户注册与邮箱验证码接口文档",
        openapi_url="/api/openapi.json",
        docs_url="/api/docs",
        redoc_url="/api/redoc",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # 请求ID中间件
    @app.middleware("http")
    async def add_request_id(request: Request, call_next):
        request_id = str(uuid.uuid4())
        request.state.request_id = request_id

        start_time = time.time()
        response = await call_next(request)
        process_time = time.time() - start_time

        response.headers["X-Request-ID"] = request_id
        response.headers["X-Process-Time"] = str(process_time)
        return response

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=400,
            content={
                "success": False,
                "message": "请求数据无效",
                "errors": _field_errors(exc),
            }
        )

    @app.exception_handler(AppException)
    async def app_exception_handler(request: Request, exc: AppException):
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "success": False,
                "message": exc.message,
                "code": exc.code,
                "timestamp": time.time()
            }
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        api_logger.exception(f"Unhandled error on {request.url.path}: {exc}")
        return JSONResponse(
            status_code=500,
            content={
                "success": False,
                "message": "服务器内部错误",
                "code": "INTERNAL_ERROR",
                "timestamp": time.time()
            }
        )

    app.include_router(api_router, prefix="/api")

    return app


app = create_app()

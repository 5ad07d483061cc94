from fastapi import Depends, Request
from sqlalchemy.orm import Session

from island_api.config import settings
from island_api.core.database import get_db
from island_api.services.auth_service import AuthService
from island_api.services.email_service import EmailService
from island_api.services.verification_service import VerificationCodeService


def get_redis(request: Request):
    """获取应用启动时建立的Redis连接"""
    return request.app.state.redis.client


def get_email_service() -> EmailService:
    return EmailService.from_settings(settings)


def get_verification_service(
    redis=Depends(get_redis),
    mailer: EmailService = Depends(get_email_service),
) -> VerificationCodeService:
    return VerificationCodeService(
        redis,
        mailer,
        code_ttl_seconds=settings.verification_code_ttl_seconds,
        resend_cooldown_seconds=settings.verification_resend_cooldown_seconds,
    )


def get_auth_service(
    db: Session = Depends(get_db),
    verification_service: VerificationCodeService = Depends(
        get_verification_service),
) -> AuthService:
    return AuthService(db, verification_service)

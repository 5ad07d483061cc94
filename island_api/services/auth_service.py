from datetime import datetime, timezone

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from island_api.core.exceptions import (InfrastructureError, NotFoundError,
                                        ValidationError)
from island_api.core.security import get_password_hash
from island_api.models.user import User
from island_api.schemas.user import (RegisterRequest, RegisterResult,
                                     ResetPasswordRequest, UserRole,
                                     UserStatus)
from island_api.schemas.verification import (VerificationError,
                                             VerificationPurpose)
from island_api.services.verification_service import VerificationCodeService
from island_api.utils.logger import api_logger


class AuthService:
    def __init__(self, db: Session, verification_service: VerificationCodeService):
        self.db = db
        self.verification_service = verification_service

    async def register(self, user_data: RegisterRequest) -> RegisterResult:
        """用户注册"""
        existing_user = self.db.query(User).filter(
            User.email == user_data.email).first()
        if existing_user:
            raise ValidationError("该邮箱已被注册")

        await self._consume_code(
            user_data.email, user_data.code, VerificationPurpose.registration)

        # 验证码已证明邮箱归属，直接标记为已验证并激活
        db_user = User(
            email=user_data.email,
            name=user_data.email.split("@")[0],
            email_verified=datetime.now(timezone.utc),
            role=UserRole.user,
            status=UserStatus.active,
            hashed_password=get_password_hash(user_data.password),
        )
        self.db.add(db_user)
        try:
            self.db.commit()
        except IntegrityError:
            # 并发注册时由唯一索引兜底
            self.db.rollback()
            api_logger.warning(f"注册冲突，邮箱已被占用: {user_data.email}")
            raise ValidationError("该邮箱已被注册")
        self.db.refresh(db_user)

        api_logger.info(f"新用户注册: {db_user.email} ({db_user.id})")
        return RegisterResult(user_id=str(db_user.id))

    async def reset_password(self, request: ResetPasswordRequest) -> None:
        """重置密码"""
        user = self.db.query(User).filter(User.email == request.email).first()
        if not user:
            raise NotFoundError("用户不存在")

        await self._consume_code(
            request.email, request.code, VerificationPurpose.password_reset)

        setattr(user, "hashed_password", get_password_hash(request.new_password))
        self.db.commit()
        api_logger.info(f"用户已重置密码: {user.email}")

    async def _consume_code(self, email: str, code: str, purpose: VerificationPurpose):
        result = await self.verification_service.verify(email, code, purpose)
        if result.success:
            return
        if result.error == VerificationError.infrastructure_error:
            raise InfrastructureError(result.message)
        raise ValidationError(result.message)

from enum import Enum
from typing import Optional

from pydantic import BaseModel, EmailStr, Field


class VerificationPurpose(str, Enum):
    registration = "registration"
    password_reset = "password-reset"


class VerificationError(str, Enum):
    """验证码操作的失败类型"""
    throttled = "throttled"
    delivery_failed = "delivery_failed"
    not_found_or_expired = "not_found_or_expired"
    mismatch = "mismatch"
    infrastructure_error = "infrastructure_error"


class SendCodeRequest(BaseModel):
    email: EmailStr = Field(..., description="邮箱地址")
    type: VerificationPurpose = Field(..., description="验证类型")


class VerifyCodeRequest(BaseModel):
    email: EmailStr = Field(..., description="邮箱地址")
    code: str = Field(..., min_length=6, max_length=6, description="6位数字验证码")
    type: VerificationPurpose = Field(..., description="验证类型")


class VerificationResult(BaseModel):
    success: bool = Field(..., description="操作是否成功")
    message: str = Field(..., description="面向用户的提示信息")
    error: Optional[VerificationError] = Field(None, description="失败类型")

    @classmethod
    def ok(cls, message: str) -> "VerificationResult":
        return cls(success=True, message=message)

    @classmethod
    def fail(cls, error: VerificationError, message: str) -> "VerificationResult":
        return cls(success=False, message=message, error=error)


class VerificationResponse(BaseModel):
    success: bool = Field(..., description="请求是否成功")
    message: str = Field(..., description="响应消息")

from enum import Enum

from pydantic import BaseModel, EmailStr, Field, field_validator


class UserRole(str, Enum):
    user = "user"
    editor = "editor"
    admin = "admin"


class UserStatus(str, Enum):
    active = "active"
    pending = "pending"
    inactive = "inactive"


class RegisterRequest(BaseModel):
    email: EmailStr = Field(..., description="邮箱地址")
    password: str = Field(..., min_length=8, max_length=100,
                          description="密码（8-100个字符）")
    code: str = Field(..., min_length=6, max_length=6, description="邮箱验证码")

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, value):
        return value.strip().lower() if isinstance(value, str) else value


class ResetPasswordRequest(BaseModel):
    email: EmailStr = Field(..., description="邮箱地址")
    code: str = Field(..., min_length=6, max_length=6, description="邮箱验证码")
    new_password: str = Field(..., min_length=8, max_length=100,
                              alias="newPassword", description="新密码")

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, value):
        return value.strip().lower() if isinstance(value, str) else value

    class Config:
        populate_by_name = True


class RegisterResult(BaseModel):
    user_id: str = Field(..., description="新用户ID")

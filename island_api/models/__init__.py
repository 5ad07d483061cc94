# 导入所有模型以确保它们被注册到SQLAlchemy中
from island_api.models.user import User

__all__ = [
    "User",
]

from datetime import datetime, timezone
from typing import Any, Optional

from pydantic import BaseModel, Field


class ApiResponse(BaseModel):
    success: bool = Field(default=True, description="请求是否成功")
    message: str = Field(..., description="响应消息")
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc), description="响应时间戳")
    data: Optional[Any] = Field(None, description="响应数据")


from pydantic_settings import BaseSettings
from typing import List, Optional


class Settings(BaseSettings):
    # Database
    database_url: str = "sqlite:///./island.db"

    # Redis
    redis_url: str = "redis://localhost:6379/0"

    # Mail relay
    mail_service_url: str = "http://localhost:8025"
    mail_api_key: str = ""
    mail_from: str = "noreply@ai-island.local"
    # 开发环境下只在日志中输出验证码，不真正发送邮件
    skip_email_sending: bool = False

    # Verification code
    verification_code_ttl_seconds: int = 600
    verification_resend_cooldown_seconds: int = 60

    # Application
    app_name: str = "AI尤里岛 API"
    app_version: str = "1.0.0"
    site_name: str = "AI尤里岛"
    debug: bool = True
    cors_origins: List[str] = [
        "http://localhost:3000", "http://localhost:5173"]

    # Logging
    log_level: str = "INFO"
    log_file: Optional[str] = None

    class Config:
        env_file = ".env"


settings = Settings()

"""基于Redis的邮箱验证码服务"""
import secrets
from typing import Any, Callable, Dict, Optional, Protocol

from redis.exceptions import RedisError

from island_api.schemas.verification import (VerificationError,
                                             VerificationPurpose,
                                             VerificationResult)
from island_api.utils.email_templates import render_verification_email
from island_api.utils.logger import verification_logger

KEY_PREFIX = "verification"

MSG_SENT = "验证码已发送到您的邮箱"
MSG_THROTTLED = "验证码已发送，请稍后再试"
MSG_DELIVERY_FAILED = "验证码发送失败，请稍后再试"
MSG_NOT_FOUND = "验证码已过期或不存在"
MSG_MISMATCH = "验证码错误"
MSG_VERIFIED = "验证成功"
MSG_SERVER_ERROR = "服务器错误，请稍后再试"

STORE_ERRORS = (RedisError, OSError)


class Mailer(Protocol):
    async def send_mail(self, to: str, subject: str, html: str) -> bool:
        ...


def generate_code() -> str:
    """生成 100000-999999 之间均匀分布的6位数字验证码"""
    return str(100000 + secrets.randbelow(900000))


def normalize_email(email: str) -> str:
    return email.strip().lower()


def build_key(email: str, purpose: VerificationPurpose) -> str:
    """获取验证码Redis键：verification:{purpose}:{email}"""
    return f"{KEY_PREFIX}:{VerificationPurpose(purpose).value}:{normalize_email(email)}"


class VerificationCodeService:
    """邮箱验证码服务

    每个 (email, purpose) 同一时间最多只有一个有效验证码，保存在Redis中并依赖
    键的 TTL 自动过期。重新发送会覆盖旧验证码；验证成功后立即删除。
    重发间隔由剩余 TTL 推算：剩余时间大于 `code_ttl_seconds - resend_cooldown_seconds`
    说明距离上次发送不足冷却时间。
    """

    def __init__(
        self,
        redis,
        mailer: Mailer,
        code_ttl_seconds: int = 600,
        resend_cooldown_seconds: int = 60,
        code_generator: Optional[Callable[[], str]] = None,
    ):
        if resend_cooldown_seconds > code_ttl_seconds:
            raise ValueError("resend cooldown cannot exceed code ttl")
        self.redis = redis
        self.mailer = mailer
        self.code_ttl_seconds = code_ttl_seconds
        self.resend_cooldown_seconds = resend_cooldown_seconds
        self._generate_code = code_generator or generate_code

    @property
    def throttle_threshold(self) -> int:
        return self.code_ttl_seconds - self.resend_cooldown_seconds

    async def issue(self, email: str, purpose: VerificationPurpose) -> VerificationResult:
        """生成并发送验证码"""
        purpose = VerificationPurpose(purpose)
        email = normalize_email(email)
        key = build_key(email, purpose)

        try:
            ttl = await self.redis.ttl(key)
            if ttl is not None and int(ttl) > self.throttle_threshold:
                verification_logger.info(
                    f"验证码请求过于频繁: {key} (剩余 {ttl}s)")
                return VerificationResult.fail(VerificationError.throttled, MSG_THROTTLED)

            code = self._generate_code()
            await self.redis.set(key, code, ex=self.code_ttl_seconds)
        except STORE_ERRORS as e:
            verification_logger.error(f"发送验证码失败，Redis不可用: {key} | {e}")
            return VerificationResult.fail(VerificationError.infrastructure_error, MSG_SERVER_ERROR)

        subject, html = render_verification_email(
            code, purpose, ttl_minutes=max(1, self.code_ttl_seconds // 60))
        try:
            sent = await self.mailer.send_mail(email, subject, html)
        except Exception as e:
            verification_logger.exception(f"邮件发送异常: {email} | {e}")
            sent = False

        if not sent:
            await self._rollback(key)
            return VerificationResult.fail(VerificationError.delivery_failed, MSG_DELIVERY_FAILED)

        verification_logger.info(f"验证码已发送: {key}")
        return VerificationResult.ok(MSG_SENT)

    async def verify(self, email: str, code: str, purpose: VerificationPurpose) -> VerificationResult:
        """校验验证码，成功后删除（一次性使用）"""
        key = build_key(email, purpose)

        try:
            stored_code = await self.redis.get(key)
            if stored_code is None:
                return VerificationResult.fail(VerificationError.not_found_or_expired, MSG_NOT_FOUND)

            if isinstance(stored_code, bytes):
                stored_code = stored_code.decode()
            if stored_code != code:
                verification_logger.info(f"验证码错误: {key}")
                return VerificationResult.fail(VerificationError.mismatch, MSG_MISMATCH)

            await self.redis.delete(key)
        except STORE_ERRORS as e:
            verification_logger.error(f"验证验证码失败，Redis不可用: {key} | {e}")
            return VerificationResult.fail(VerificationError.infrastructure_error, MSG_SERVER_ERROR)

        verification_logger.info(f"验证码验证成功: {key}")
        return VerificationResult.ok(MSG_VERIFIED)

    async def status(self, email: str, purpose: VerificationPurpose) -> Optional[Dict[str, Any]]:
        """获取验证码状态（调试用，不返回验证码本身）"""
        key = build_key(email, purpose)
        try:
            ttl = await self.redis.ttl(key)
        except STORE_ERRORS as e:
            verification_logger.error(f"查询验证码状态失败，Redis不可用: {key} | {e}")
            return None
        if ttl is None or int(ttl) < 0:
            return None
        return {
            "key": key,
            "email": normalize_email(email),
            "purpose": VerificationPurpose(purpose).value,
            "ttl": int(ttl),
            "can_resend": int(ttl) <= self.throttle_threshold,
        }

    async def _rollback(self, key: str):
        # 删除失败时交给 TTL 自然过期
        try:
            await self.redis.delete(key)
            verification_logger.warning(f"邮件发送失败，已撤销验证码: {key}")
        except STORE_ERRORS as e:
            verification_logger.error(f"撤销验证码失败，等待自然过期: {key} | {e}")

"""Redis验证码管理工具"""
import asyncio
import sys
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence, Tuple

from redis.exceptions import RedisError

from island_api.config import settings
from island_api.core.redis import RedisClient
from island_api.schemas.verification import VerificationPurpose
from island_api.services.email_service import EmailService
from island_api.services.verification_service import (KEY_PREFIX,
                                                      VerificationCodeService)
from island_api.utils.logger import get_logger

logger = get_logger("tools")

PATTERN = f"{KEY_PREFIX}:*"
PURPOSES = {purpose.value for purpose in VerificationPurpose}


def parse_key(key: str) -> Optional[Tuple[str, str]]:
    """解析 verification:{purpose}:{email}，格式不符返回 None"""
    parts = key.split(":", 2)
    if len(parts) != 3 or parts[1] not in PURPOSES or not parts[2]:
        return None
    return parts[1], parts[2]


class RedisVerificationManager:
    """Redis验证码管理器"""

    def __init__(self, redis, service: Optional[VerificationCodeService] = None):
        self.redis = redis
        self.service = service or VerificationCodeService(
            redis,
            EmailService.from_settings(settings),
            code_ttl_seconds=settings.verification_code_ttl_seconds,
            resend_cooldown_seconds=settings.verification_resend_cooldown_seconds,
        )

    async def _keys(self) -> Dict[str, Tuple[str, str]]:
        keys = {}
        async for key in self.redis.scan_iter(match=PATTERN):
            key = str(key)
            parsed = parse_key(key)
            if parsed is None:
                logger.warning(f"跳过格式不符的键: {key}")
                continue
            keys[key] = parsed
        return keys

    async def list_all_verification_codes(self) -> List[Dict[str, Any]]:
        """列出所有验证码（不包含验证码本身）"""
        codes = []
        for key, (purpose, email) in (await self._keys()).items():
            ttl = await self.redis.ttl(key)
            if ttl is None or int(ttl) == -2:
                continue
            codes.append({
                "key": key,
                "email": email,
                "purpose": purpose,
                "ttl": max(int(ttl), 0),
            })
        return sorted(codes, key=lambda item: item["key"])

    async def cleanup_all_verification_data(self) -> Dict[str, int]:
        """清理所有验证码数据"""
        keys = list(await self._keys())
        deleted_count = int(await self.redis.delete(*keys)) if keys else 0
        logger.info(f"已删除 {deleted_count} 个验证码键")
        return {"deleted_count": deleted_count}

    async def get_stats(self) -> Dict[str, Any]:
        """获取验证码统计信息"""
        keys = await self._keys()
        by_purpose = {purpose: 0 for purpose in sorted(PURPOSES)}
        for purpose, _ in keys.values():
            by_purpose[purpose] += 1

        return {
            "total_codes": len(keys),
            **{f"{purpose}_codes": count for purpose, count in by_purpose.items()},
            "timestamp": datetime.now(timezone.utc).isoformat()
        }

    async def get_status(self, email: str, purpose: str) -> Optional[Dict[str, Any]]:
        """查询单个邮箱的验证码状态"""
        return await self.service.status(email, VerificationPurpose(purpose))


USAGE = """用法:
  python -m island_api.tools.redis_verification_manager stats - 显示统计信息
  python -m island_api.tools.redis_verification_manager list-codes - 列出所有验证码
  python -m island_api.tools.redis_verification_manager status <email> <purpose> - 查询验证码状态
  python -m island_api.tools.redis_verification_manager cleanup - 清理所有验证码数据"""


async def run(command: str, manager: RedisVerificationManager, args: Sequence[str] = ()) -> int:
    if command == "stats":
        stats = await manager.get_stats()
        print("Redis验证码统计信息:")
        for key, value in stats.items():
            print(f"  {key}: {value}")

    elif command == "list-codes":
        codes = await manager.list_all_verification_codes()
        print(f"找到 {len(codes)} 个验证码:")
        for code in codes:
            print(
                f"  邮箱: {code['email']}, 用途: {code['purpose']}, TTL: {code['ttl']}s")

    elif command == "status":
        if len(args) != 2 or args[1] not in PURPOSES:
            print(f"用途必须是: {', '.join(sorted(PURPOSES))}")
            print(USAGE)
            return 1
        status = await manager.get_status(args[0], args[1])
        if status is None:
            print("没有有效的验证码")
        else:
            print(
                f"  邮箱: {status['email']}, 用途: {status['purpose']}, TTL: {status['ttl']}s, "
                f"可重新发送: {'是' if status['can_resend'] else '否'}")

    elif command == "cleanup":
        result = await manager.cleanup_all_verification_data()
        print(f"清理完成，删除了 {result['deleted_count']} 个键")

    else:
        print(f"未知命令: {command}")
        print(USAGE)
        return 1

    return 0


async def main(argv: List[str]) -> int:
    if len(argv) < 2:
        print(USAGE)
        return 1

    client = RedisClient(settings.redis_url)
    try:
        redis = await client.connect()
        return await run(argv[1], RedisVerificationManager(redis), argv[2:])
    except (RedisError, OSError) as e:
        logger.error(f"Redis操作失败: {e}")
        return 2
    finally:
        await client.close()


if __name__ == "__main__":
    sys.exit(asyncio.run(main(sys.argv)))

"""Redis连接管理"""
from typing import Optional

import redis.asyncio as redis
from redis.exceptions import RedisError


class RedisClient:
    """Redis客户端句柄

    由应用启动时显式创建并连接，关闭时释放连接池；
    需要访问Redis的组件通过依赖注入拿到 `client`。
    """

    def __init__(
        self,
        url: str,
        socket_connect_timeout: float = 5,
        socket_timeout: float = 5,
    ):
        self.url = url
        self.socket_connect_timeout = socket_connect_timeout
        self.socket_timeout = socket_timeout
        self._client: Optional[redis.Redis] = None

    async def connect(self) -> redis.Redis:
        """创建连接池并测试连接"""
        if self._client is None:
            self._client = redis.from_url(
                self.url,
                decode_responses=True,
                socket_connect_timeout=self.socket_connect_timeout,
                socket_timeout=self.socket_timeout,
                retry_on_timeout=True
            )
        await self._client.ping()
        return self._client

    @property
    def client(self) -> redis.Redis:
        """获取已连接的Redis实例"""
        if self._client is None:
            raise RuntimeError("Redis client is not connected")
        return self._client

    async def ping(self) -> bool:
        if self._client is None:
            return False
        try:
            return bool(await self._client.ping())
        except (RedisError, OSError):
            return False

    async def close(self):
        """关闭Redis连接"""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

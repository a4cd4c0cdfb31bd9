"""Redis-backed TTL cache."""

from collections.abc import Iterable
from typing import Any

from lifestack.core.infrastructure.health import CacheHealthResult
from lifestack.core.infrastructure.redis.client import RedisClient


class RedisTTLCache:
    """TTLCache port implemented on top of RedisClient (JSON values)."""

    def __init__(self, client: RedisClient):
        self._client = client

    async def get(self, key: str) -> Any | None:
        return await self._client.get_json(key)

    async def set(self, key: str, value: Any, ttl_seconds: int) -> None:
        await self._client.set_json(key, value, ex=ttl_seconds)

    async def delete(self, keys: Iterable[str]) -> int:
        return await self._client.delete(*keys)

    async def keys(self, prefix: str = "") -> list[str]:
        return await self._client.scan_keys(f"{prefix}*")

    async def health_check(self) -> CacheHealthResult:
        return await self._client.health_check()

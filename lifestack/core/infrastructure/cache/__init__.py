"""TTL 缓存后端。"""

from functools import lru_cache

from lifestack.core.config import settings
from lifestack.core.infrastructure.cache.memory import MemoryTTLCache
from lifestack.core.infrastructure.cache.redis_cache import RedisTTLCache
from lifestack.core.infrastructure.redis import redis_client


@lru_cache(maxsize=1)
def get_cache() -> MemoryTTLCache | RedisTTLCache:
    """根据 CACHE_BACKEND 返回进程级缓存实例。"""
    if settings.CACHE_BACKEND == "redis":
        return RedisTTLCache(redis_client)
    return MemoryTTLCache(max_entries=settings.MEMORY_CACHE_MAX_ENTRIES)


__all__ = [
    "MemoryTTLCache",
    "RedisTTLCache",
    "get_cache",
]

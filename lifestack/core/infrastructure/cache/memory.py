"""进程内 TTL 缓存。

基于 cachetools.TLRUCache，每个条目携带自己的过期时间。
仅适用于单进程部署；多进程/多实例部署请使用 Redis 后端。
"""

import copy
import time
from collections.abc import Callable, Iterable
from typing import Any, NamedTuple

from cachetools import TLRUCache

from lifestack.core.infrastructure.health import CacheHealthResult, HealthStatus


class _Entry(NamedTuple):
    value: Any
    ttl_seconds: int


def _time_to_use(_key: str, entry: _Entry, now: float) -> float:
    return now + entry.ttl_seconds


class MemoryTTLCache:
    """In-process TTL cache implementing the TTLCache port."""

    def __init__(
        self,
        max_entries: int = 1024,
        timer: Callable[[], float] = time.monotonic,
    ):
        self._cache: TLRUCache[str, _Entry] = TLRUCache(
            maxsize=max_entries,
            ttu=_time_to_use,
            timer=timer,
        )

    async def get(self, key: str) -> Any | None:
        entry = self._cache.get(key)
        if entry is None:
            return None
        # 返回副本，调用方修改不影响缓存内容
        return copy.deepcopy(entry.value)

    async def set(self, key: str, value: Any, ttl_seconds: int) -> None:
        self._cache[key] = _Entry(copy.deepcopy(value), ttl_seconds)

    async def delete(self, keys: Iterable[str]) -> int:
        removed = 0
        for key in keys:
            if self._cache.pop(key, None) is not None:
                removed += 1
        return removed

    async def keys(self, prefix: str = "") -> list[str]:
        self._cache.expire()
        return [key for key in self._cache.keys() if key.startswith(prefix)]

    async def health_check(self) -> CacheHealthResult:
        self._cache.expire()
        return CacheHealthResult(
            status=HealthStatus.SKIPPED,
            backend="memory",
            connected=True,
            entries=len(self._cache),
        )

"""TTL 缓存后端单元测试。"""

from unittest.mock import AsyncMock

import pytest

from lifestack.core.infrastructure.cache import MemoryTTLCache, RedisTTLCache
from lifestack.core.infrastructure.health import CacheHealthResult, HealthStatus
from tests.conftest import FakeTimer

pytestmark = pytest.mark.anyio


class TestMemoryTTLCache:
    async def test_get_missing(self, memory_cache: MemoryTTLCache) -> None:
        assert await memory_cache.get("art:pool:tv") is None

    async def test_entries_expire_individually(
        self, memory_cache: MemoryTTLCache, fake_timer: FakeTimer
    ) -> None:
        await memory_cache.set("short", {"v": 1}, 10)
        await memory_cache.set("long", {"v": 2}, 100)

        fake_timer.advance(11)

        assert await memory_cache.get("short") is None
        assert await memory_cache.get("long") == {"v": 2}
        assert await memory_cache.keys() == ["long"]

    async def test_values_are_copied(self, memory_cache: MemoryTTLCache) -> None:
        value = [{"id": "1"}]
        await memory_cache.set("art:pool:tv", value, 60)

        value.append({"id": "2"})
        fetched = await memory_cache.get("art:pool:tv")
        fetched.append({"id": "3"})

        assert await memory_cache.get("art:pool:tv") == [{"id": "1"}]

    async def test_set_replaces_whole_value(self, memory_cache: MemoryTTLCache) -> None:
        await memory_cache.set("k", [1, 2, 3], 60)
        await memory_cache.set("k", [4], 60)

        assert await memory_cache.get("k") == [4]

    async def test_keys_by_prefix(self, memory_cache: MemoryTTLCache) -> None:
        await memory_cache.set("art:pool:tv", [], 60)
        await memory_cache.set("art:rotation:tv:1", {}, 60)
        await memory_cache.set("weather:now", {}, 60)

        assert sorted(await memory_cache.keys("art:")) == [
            "art:pool:tv",
            "art:rotation:tv:1",
        ]

    async def test_delete_counts_existing_keys(
        self, memory_cache: MemoryTTLCache
    ) -> None:
        await memory_cache.set("a", 1, 60)
        await memory_cache.set("b", 2, 60)

        assert await memory_cache.delete(["a", "b", "missing"]) == 2
        assert await memory_cache.keys() == []

    async def test_max_entries_bound(self, fake_timer: FakeTimer) -> None:
        cache = MemoryTTLCache(max_entries=2, timer=fake_timer)
        for key in ("a", "b", "c"):
            await cache.set(key, key, 60)

        assert len(await cache.keys()) == 2

    async def test_health_check(self, memory_cache: MemoryTTLCache) -> None:
        await memory_cache.set("a", 1, 60)

        health = await memory_cache.health_check()

        assert health.status == HealthStatus.SKIPPED
        assert health.backend == "memory"
        assert health.entries == 1


class TestRedisTTLCache:
    async def test_get_reads_json(self, mock_redis_client) -> None:
        mock_redis_client.get_json.return_value = {"imageUrl": "x"}

        assert await RedisTTLCache(mock_redis_client).get("art:rotation:tv:1") == {
            "imageUrl": "x"
        }
        mock_redis_client.get_json.assert_awaited_once_with("art:rotation:tv:1")

    async def test_set_uses_ttl_seconds(self, mock_redis_client) -> None:
        await RedisTTLCache(mock_redis_client).set("art:pool:tv", [{"id": "1"}], 3600)

        mock_redis_client.set_json.assert_awaited_once_with(
            "art:pool:tv", [{"id": "1"}], ex=3600
        )

    async def test_delete_passes_all_keys(self, mock_redis_client) -> None:
        mock_redis_client.delete.return_value = 2

        cleared = await RedisTTLCache(mock_redis_client).delete(["a", "b"])

        assert cleared == 2
        mock_redis_client.delete.assert_awaited_once_with("a", "b")

    async def test_keys_scans_prefix(self, mock_redis_client) -> None:
        mock_redis_client.scan_keys.return_value = ["art:pool:tv"]

        keys = await RedisTTLCache(mock_redis_client).keys("art:")

        assert keys == ["art:pool:tv"]
        mock_redis_client.scan_keys.assert_awaited_once_with("art:*")

    async def test_health_check_delegates(self, mock_redis_client) -> None:
        result = CacheHealthResult(
            status=HealthStatus.OK, backend="redis", connected=True, version="7.2"
        )
        mock_redis_client.health_check = AsyncMock(return_value=result)

        assert await RedisTTLCache(mock_redis_client).health_check() == result

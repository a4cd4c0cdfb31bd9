"""作品轮换服务单元测试。

测试覆盖：
- 时间槽确定性与缓存命中
- 作品池缓存复用与重建
- 未知方向回退到默认轮换间隔
- 三面板并发获取与单面板降级
- 强制刷新 / 清空缓存 / 缓存统计
"""

from unittest.mock import AsyncMock, MagicMock

import pytest
from structlog.testing import capture_logs

from lifestack.core.infrastructure.cache import MemoryTTLCache
from lifestack.core.infrastructure.redis.keys import RedisKeys
from lifestack.modules.art.application.pool_builder import ArtworkPoolBuilder
from lifestack.modules.art.application.rotation_service import ArtRotationService
from lifestack.modules.art.domain.entities import ArtFilters, DisplayOrientation
from lifestack.modules.art.domain.exceptions import (
    ArtworkPoolExhaustedError,
    NoArtSourcesEnabledError,
)
from tests.conftest import FakeTimer, make_artwork

pytestmark = pytest.mark.anyio

INTERVALS = {"portrait": 300, "landscape": 420, "tv": 360}

A = make_artwork("A")
B = make_artwork("B")
C = make_artwork("C")


class Clock:
    def __init__(self, now_ms: int):
        self.now_ms = now_ms

    def __call__(self) -> int:
        return self.now_ms


@pytest.fixture
def clock() -> Clock:
    return Clock(3_000_000)


@pytest.fixture
def pool_builder() -> MagicMock:
    builder = MagicMock(spec=ArtworkPoolBuilder)
    builder.build_pool = AsyncMock(return_value=[A, B, C])
    return builder


@pytest.fixture
def service(memory_cache: MemoryTTLCache, pool_builder, clock) -> ArtRotationService:
    return ArtRotationService(
        memory_cache,
        pool_builder,
        pool_size=12,
        pool_ttl_seconds=3600,
        rotation_intervals=INTERVALS,
        default_orientation="landscape",
        clock=clock,
    )


async def _seed_pool(cache: MemoryTTLCache, orientation: str, pool, signature: str = ""):
    await cache.set(
        RedisKeys.art_pool(orientation, signature),
        [artwork.to_cache() for artwork in pool],
        3600,
    )


class TestGetArtwork:
    async def test_slot_selects_pool_member(
        self, service, memory_cache, pool_builder, clock
    ) -> None:
        await _seed_pool(memory_cache, "portrait", [A, B, C])

        # 3_000_000 ms / 300 s -> slot 10 -> B
        assert await service.get_artwork("portrait") == B

        clock.now_ms = 3_300_000  # slot 11 -> C
        assert await service.get_artwork("portrait") == C

        pool_builder.build_pool.assert_not_awaited()

    async def test_same_slot_is_deterministic(self, service, memory_cache, clock) -> None:
        await _seed_pool(memory_cache, "portrait", [A, B, C])

        first = await service.get_artwork("portrait")
        clock.now_ms = 3_299_999
        second = await service.get_artwork("portrait")

        assert first == second == B

    async def test_rotation_hit_skips_pool(self, service, memory_cache) -> None:
        await memory_cache.set(RedisKeys.art_rotation("tv", "", 3_000_000 // 360_000), C.to_cache(), 360)
        # 池中不含 C，证明结果来自轮换缓存
        await _seed_pool(memory_cache, "tv", [A])

        assert await service.get_artwork(DisplayOrientation.TV) == C

    async def test_pick_is_cached_for_interval(self, service, memory_cache) -> None:
        await _seed_pool(memory_cache, "portrait", [A, B, C])

        await service.get_artwork("portrait")

        cached = await memory_cache.get(RedisKeys.art_rotation("portrait", "", 10))
        assert cached == B.to_cache()

    async def test_rotation_entry_expires_after_interval(
        self, service, memory_cache, fake_timer: FakeTimer
    ) -> None:
        await _seed_pool(memory_cache, "portrait", [A, B, C])
        await service.get_artwork("portrait")

        fake_timer.advance(301)

        assert await memory_cache.get(RedisKeys.art_rotation("portrait", "", 10)) is None

    async def test_missing_pool_is_built_and_stored(
        self, service, memory_cache, pool_builder
    ) -> None:
        filters = ArtFilters(styles=("Cubism",))

        artwork = await service.get_artwork("tv", filters)

        # slot = 3_000_000 // 360_000 = 8 -> 8 % 3 = 2 -> C
        assert artwork == C
        pool_builder.build_pool.assert_awaited_once_with(12, "landscape", filters)
        stored = await memory_cache.get(RedisKeys.art_pool("tv", "Cubism"))
        assert stored == [A.to_cache(), B.to_cache(), C.to_cache()]

    async def test_pool_reused_across_slots(self, service, pool_builder, clock) -> None:
        await service.get_artwork("portrait")
        clock.now_ms += 300_000
        await service.get_artwork("portrait")

        pool_builder.build_pool.assert_awaited_once()

    async def test_pool_rebuilt_after_ttl(
        self, service, pool_builder, clock, fake_timer: FakeTimer
    ) -> None:
        await service.get_artwork("portrait")
        fake_timer.advance(3601)
        clock.now_ms += 3_601_000
        await service.get_artwork("portrait")

        assert pool_builder.build_pool.await_count == 2

    async def test_filters_partition_cache(self, service, pool_builder) -> None:
        await service.get_artwork("portrait")
        await service.get_artwork("portrait", ArtFilters(styles=("Cubism",)))

        assert pool_builder.build_pool.await_count == 2

    async def test_tv_and_landscape_have_separate_pools(self, service, pool_builder) -> None:
        await service.get_artwork("landscape")
        await service.get_artwork("tv")

        assert pool_builder.build_pool.await_count == 2
        orientations = [call.args[1] for call in pool_builder.build_pool.await_args_list]
        assert orientations == ["landscape", "landscape"]

    async def test_unknown_orientation_uses_default_interval(
        self, service, memory_cache
    ) -> None:
        await _seed_pool(memory_cache, "square", [A, B, C])

        await service.get_artwork("square")

        # landscape 间隔 420 s: 3_000_000 // 420_000 = 7
        assert service.interval_for("square") == 420
        assert await memory_cache.get(RedisKeys.art_rotation("square", "", 7)) is not None

    async def test_pool_exhaustion_propagates(self, service, pool_builder) -> None:
        pool_builder.build_pool.side_effect = ArtworkPoolExhaustedError("portrait")

        with pytest.raises(ArtworkPoolExhaustedError):
            await service.get_artwork("portrait")


class TestCurrentArtworks:
    async def test_all_panels(self, service, memory_cache) -> None:
        await _seed_pool(memory_cache, "portrait", [A, B, C])
        await _seed_pool(memory_cache, "landscape", [A, B, C])
        await _seed_pool(memory_cache, "tv", [A, B, C])

        result = await service.get_current_artworks()

        assert set(result) == {"portrait", "landscape", "tv"}
        assert result["portrait"] == B  # slot 10
        assert result["landscape"] == B  # slot 7
        assert result["tv"] == C  # slot 8

    async def test_failed_panel_degrades_to_none(self, service, pool_builder) -> None:
        async def build(pool_size, orientation, filters):
            if orientation == "portrait":
                raise ArtworkPoolExhaustedError(orientation)
            return [A, B, C]

        pool_builder.build_pool.side_effect = build

        result = await service.get_current_artworks()

        assert result["portrait"] is None
        assert result["landscape"] is not None
        assert result["tv"] is not None

    async def test_configuration_error_degrades_every_panel(
        self, service, pool_builder
    ) -> None:
        pool_builder.build_pool.side_effect = NoArtSourcesEnabledError()

        result = await service.get_current_artworks()

        assert result == {"portrait": None, "landscape": None, "tv": None}

    async def test_unexpected_error_degrades_panel(self, service, pool_builder) -> None:
        async def build(pool_size, orientation, filters):
            if orientation == "tv":
                raise RuntimeError("boom")
            return [A, B, C]

        pool_builder.build_pool.side_effect = build

        with capture_logs() as logs:
            result = await service.get_current_artworks()

        assert result["tv"] is None
        assert result["portrait"] is not None
        degraded = [log for log in logs if log["event"] == "feature_degraded"]
        assert [log["feature"] for log in degraded] == ["art_tv"]

    async def test_cache_outage_degrades_every_panel(self, pool_builder, clock) -> None:
        cache = MagicMock()
        cache.get = AsyncMock(side_effect=ConnectionError("Connection refused"))
        service = ArtRotationService(
            cache,
            pool_builder,
            pool_size=12,
            pool_ttl_seconds=3600,
            rotation_intervals=INTERVALS,
            clock=clock,
        )

        result = await service.get_current_artworks()

        assert result == {"portrait": None, "landscape": None, "tv": None}
        pool_builder.build_pool.assert_not_awaited()


class TestRefreshPools:
    async def test_rebuilds_even_when_cached(
        self, service, memory_cache, pool_builder
    ) -> None:
        await _seed_pool(memory_cache, "portrait", [A])

        sizes = await service.refresh_pools()

        assert sizes == {"portrait": 3, "landscape": 3, "tv": 3}
        assert pool_builder.build_pool.await_count == 3
        assert len(await memory_cache.get(RedisKeys.art_pool("portrait"))) == 3

    async def test_failed_rebuild_reports_zero(self, service, pool_builder) -> None:
        async def build(pool_size, orientation, filters):
            if orientation == "portrait":
                raise ArtworkPoolExhaustedError(orientation)
            return [A]

        pool_builder.build_pool.side_effect = build

        assert await service.refresh_pools() == {"portrait": 0, "landscape": 1, "tv": 1}

    async def test_failed_store_reports_zero(self, pool_builder, clock) -> None:
        cache = MagicMock()
        cache.set = AsyncMock(side_effect=ConnectionError("Connection refused"))
        service = ArtRotationService(
            cache,
            pool_builder,
            pool_size=12,
            pool_ttl_seconds=3600,
            rotation_intervals=INTERVALS,
            clock=clock,
        )

        assert await service.refresh_pools() == {"portrait": 0, "landscape": 0, "tv": 0}

    async def test_rotation_picks_survive_refresh(self, service, memory_cache) -> None:
        await service.get_artwork("portrait")

        await service.refresh_pools()

        assert await memory_cache.get(RedisKeys.art_rotation("portrait", "", 10)) is not None


class TestCacheMaintenance:
    async def test_clear_removes_only_art_keys(self, service, memory_cache) -> None:
        await service.get_artwork("portrait")
        await memory_cache.set("weather:current", {"temp": 20}, 60)

        cleared = await service.clear_cache()

        assert cleared == 2  # pool + rotation
        assert await memory_cache.keys() == ["weather:current"]

    async def test_clear_empty_cache(self, service) -> None:
        assert await service.clear_cache() == 0

    async def test_stats(self, service) -> None:
        await service.get_artwork("portrait")
        await service.get_artwork("tv")

        stats = await service.cache_stats()

        assert stats.total_keys == 4
        assert stats.pool_keys == 2
        assert stats.rotation_keys == 2
        assert stats.config.pool_size == 12
        assert stats.config.pool_ttl_seconds == 3600
        assert stats.config.rotation_intervals == INTERVALS

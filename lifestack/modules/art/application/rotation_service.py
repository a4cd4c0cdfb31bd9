"""Artwork rotation service.

每个显示面板按固定时间槽轮换作品：

    slot = now_ms // (interval_seconds * 1000)
    artwork = pool[slot % len(pool)]

同一时间槽内结果稳定；选中结果和作品池都写入缓存。
"""

import asyncio
import time
from collections.abc import Callable, Mapping

from loguru import logger

from lifestack.core.domain.ports.cache import TTLCache
from lifestack.core.infrastructure.logging import BusinessEvents
from lifestack.core.infrastructure.redis.keys import RedisKeys
from lifestack.modules.art.application.models import ArtCacheStats, ArtPoolConfig
from lifestack.modules.art.application.pool_builder import ArtworkPoolBuilder
from lifestack.modules.art.domain.entities import (
    ArtFilters,
    Artwork,
    ArtworkOrientation,
    DisplayOrientation,
)
from lifestack.modules.art.domain.exceptions import ArtServiceError
from lifestack.modules.art.domain.selection import pick_for_slot, rotation_slot

Clock = Callable[[], int]


def _epoch_ms() -> int:
    return int(time.time() * 1000)


class ArtRotationService:
    """Serve one artwork per display orientation per rotation slot."""

    def __init__(
        self,
        cache: TTLCache,
        pool_builder: ArtworkPoolBuilder,
        pool_size: int,
        pool_ttl_seconds: int,
        rotation_intervals: Mapping[str, int],
        default_orientation: str = DisplayOrientation.LANDSCAPE.value,
        clock: Clock = _epoch_ms,
    ):
        self.cache = cache
        self.pool_builder = pool_builder
        self.pool_size = pool_size
        self.pool_ttl_seconds = pool_ttl_seconds
        self.rotation_intervals = dict(rotation_intervals)
        self.default_orientation = default_orientation
        self._clock = clock

    def interval_for(self, orientation: str) -> int:
        """Rotation interval in seconds; unknown names use the default orientation's."""
        interval = self.rotation_intervals.get(orientation)
        if interval is None:
            interval = self.rotation_intervals[self.default_orientation]
        return interval

    @staticmethod
    def _artwork_orientation(orientation: str) -> ArtworkOrientation | None:
        try:
            return DisplayOrientation(orientation).artwork_orientation
        except ValueError:
            return None

    async def _load_pool(
        self, orientation: str, filters: ArtFilters
    ) -> list[Artwork] | None:
        cached = await self.cache.get(RedisKeys.art_pool(orientation, filters.signature))
        if not cached:
            return None
        return [Artwork.from_cache(item) for item in cached]

    async def _build_and_store_pool(
        self, orientation: str, filters: ArtFilters
    ) -> list[Artwork]:
        logger.info(f"Building new {orientation} artwork pool...")
        pool = await self.pool_builder.build_pool(
            self.pool_size,
            self._artwork_orientation(orientation),
            filters,
        )
        await self.cache.set(
            RedisKeys.art_pool(orientation, filters.signature),
            [artwork.to_cache() for artwork in pool],
            self.pool_ttl_seconds,
        )
        return pool

    async def get_artwork(
        self,
        orientation: DisplayOrientation | str,
        filters: ArtFilters | None = None,
    ) -> Artwork:
        """Return the artwork for the current rotation slot.

        Raises:
            ArtworkPoolExhaustedError: the pool could not be built.
            NoArtSourcesEnabledError: no source is enabled.
        """
        name = str(orientation)
        filters = filters or ArtFilters()
        interval = self.interval_for(name)
        slot = rotation_slot(self._clock(), interval)
        rotation_key = RedisKeys.art_rotation(name, filters.signature, slot)

        cached = await self.cache.get(rotation_key)
        if cached:
            BusinessEvents.art_rotation_served(
                orientation=name, slot=slot, cache_hit=True
            )
            return Artwork.from_cache(cached)

        pool = await self._load_pool(name, filters)
        if not pool:
            pool = await self._build_and_store_pool(name, filters)
        artwork = pick_for_slot(pool, slot)
        await self.cache.set(rotation_key, artwork.to_cache(), interval)

        pool_index = slot % len(pool)
        logger.debug(
            f"Selected {name} artwork {pool_index + 1}/{len(pool)}: {artwork.title}"
        )
        BusinessEvents.art_rotation_served(
            orientation=name, slot=slot, cache_hit=False, pool_index=pool_index
        )
        return artwork

    async def get_current_artworks(
        self, filters: ArtFilters | None = None
    ) -> dict[str, Artwork | None]:
        """Fetch all three panels concurrently.

        A panel whose artwork cannot be produced, for whatever reason, maps
        to None so the other panels are still served.
        """
        filters = filters or ArtFilters()

        async def _one(orientation: DisplayOrientation) -> Artwork | None:
            try:
                return await self.get_artwork(orientation, filters)
            except ArtServiceError as exc:
                logger.warning(f"No {orientation} artwork available: {exc.message}")
                BusinessEvents.feature_degraded(
                    feature=f"art_{orientation.value}", reason=exc.message
                )
                return None
            except Exception as exc:
                logger.exception(f"Unexpected error serving {orientation} artwork: {exc}")
                BusinessEvents.feature_degraded(
                    feature=f"art_{orientation.value}", reason=str(exc)
                )
                return None

        orientations = list(DisplayOrientation)
        results = await asyncio.gather(*(_one(o) for o in orientations))
        return {o.value: artwork for o, artwork in zip(orientations, results)}

    async def refresh_pools(self, filters: ArtFilters | None = None) -> dict[str, int]:
        """Rebuild every pool, ignoring cached pools.

        Returns the new pool size per orientation, 0 where the rebuild failed.
        Rotation picks already cached stay until they expire.
        """
        filters = filters or ArtFilters()

        async def _one(orientation: DisplayOrientation) -> int:
            try:
                pool = await self._build_and_store_pool(orientation.value, filters)
            except ArtServiceError as exc:
                logger.warning(f"Failed to refresh {orientation} pool: {exc.message}")
                BusinessEvents.feature_degraded(
                    feature=f"art_pool_{orientation.value}", reason=exc.message
                )
                return 0
            except Exception as exc:
                logger.exception(f"Unexpected error refreshing {orientation} pool: {exc}")
                BusinessEvents.feature_degraded(
                    feature=f"art_pool_{orientation.value}", reason=str(exc)
                )
                return 0
            return len(pool)

        orientations = list(DisplayOrientation)
        sizes = await asyncio.gather(*(_one(o) for o in orientations))
        result = {o.value: size for o, size in zip(orientations, sizes)}
        logger.info(f"Artwork pools refreshed: {result}")
        return result

    async def clear_cache(self) -> int:
        """Delete every art cache entry; returns the number removed."""
        keys = await self.cache.keys(RedisKeys.ART_PREFIX)
        cleared = await self.cache.delete(keys) if keys else 0
        logger.info(f"Cleared {cleared} art cache keys")
        BusinessEvents.art_cache_cleared(keys_cleared=cleared)
        return cleared

    async def cache_stats(self) -> ArtCacheStats:
        keys = await self.cache.keys(RedisKeys.ART_PREFIX)
        return ArtCacheStats(
            total_keys=len(keys),
            pool_keys=sum(
                1 for key in keys if key.startswith(f"{RedisKeys.ART_POOL_PREFIX}:")
            ),
            rotation_keys=sum(
                1 for key in keys if key.startswith(f"{RedisKeys.ART_ROTATION_PREFIX}:")
            ),
            config=ArtPoolConfig(
                pool_size=self.pool_size,
                pool_ttl_seconds=self.pool_ttl_seconds,
                rotation_intervals=self.rotation_intervals,
            ),
        )

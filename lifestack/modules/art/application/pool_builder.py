"""Artwork pool builder.

Assembles a deduplicated batch of artworks by repeatedly asking a weighted
random source for one artwork, within a bounded attempt budget.
"""

import asyncio
import random
import time
from collections.abc import Awaitable, Callable, Mapping

from loguru import logger

from lifestack.core.infrastructure.logging import BusinessEvents
from lifestack.modules.art.domain.entities import (
    ArtFilters,
    Artwork,
    ArtworkOrientation,
)
from lifestack.modules.art.domain.exceptions import (
    ArtSourceError,
    ArtworkPoolExhaustedError,
)
from lifestack.modules.art.domain.selection import WeightedSourceSelector
from lifestack.modules.art.domain.source import ArtSource

ATTEMPTS_PER_SLOT = 4

SleepFunc = Callable[[float], Awaitable[None]]


class ArtworkPoolBuilder:
    """Build artwork pools from weighted museum sources.

    职责：
    - 按权重选择源
    - 调用源获取单个作品，源级错误计为一次浪费的尝试
    - 按 (source, id) 去重
    - 尝试之间按 retry_delay_ms 限速
    """

    def __init__(
        self,
        sources: Mapping[str, ArtSource],
        weights: Mapping[str, int],
        retry_delay_ms: int = 500,
        rng: random.Random | None = None,
        sleep: SleepFunc = asyncio.sleep,
    ):
        self.sources = sources
        # 只保留有适配器的源，保持配置顺序
        self.weights = {key: weight for key, weight in weights.items() if key in sources}
        self.retry_delay_ms = retry_delay_ms
        self.rng = rng or random.Random()
        self._sleep = sleep

    async def build_pool(
        self,
        pool_size: int,
        orientation: ArtworkOrientation | None = None,
        filters: ArtFilters | None = None,
    ) -> list[Artwork]:
        """Fetch up to ``pool_size`` distinct artworks.

        Raises:
            NoArtSourcesEnabledError: no source has a positive weight.
            ArtworkPoolExhaustedError: every attempt failed.
        """
        filters = filters or ArtFilters()
        selector = WeightedSourceSelector(self.weights, rng=self.rng)
        label = orientation or "any"

        start_time = time.time()
        max_attempts = pool_size * ATTEMPTS_PER_SLOT
        pool: list[Artwork] = []
        seen: set[tuple[str, str]] = set()
        attempts = 0

        while attempts < max_attempts and len(pool) < pool_size:
            attempts += 1
            source_key = selector.pick()
            try:
                artwork = await self.sources[source_key].fetch_artwork(
                    orientation, filters
                )
            except ArtSourceError as exc:
                logger.warning(
                    f"Failed to fetch {label} artwork from {source_key} "
                    f"(attempt {attempts}): {exc.message}"
                )
                BusinessEvents.art_source_fetch_failed(
                    source=source_key,
                    orientation=orientation,
                    error=exc.message,
                    attempt=attempts,
                )
            except Exception as exc:
                logger.exception(
                    f"Unexpected error fetching {label} artwork from {source_key} "
                    f"(attempt {attempts}): {exc}"
                )
                BusinessEvents.art_source_fetch_failed(
                    source=source_key,
                    orientation=orientation,
                    error=f"Error: {exc}",
                    attempt=attempts,
                )
            else:
                if artwork.image_url and artwork.dedupe_key not in seen:
                    seen.add(artwork.dedupe_key)
                    pool.append(artwork)
                    logger.info(
                        f"Added {label} artwork from {source_key}: {artwork.title} "
                        f"({len(pool)}/{pool_size})"
                    )
                else:
                    logger.debug(
                        f"Skipped duplicate artwork {artwork.dedupe_key} from {source_key}"
                    )

            if attempts < max_attempts and len(pool) < pool_size:
                await self._sleep(self.retry_delay_ms / 1000)

        if not pool:
            raise ArtworkPoolExhaustedError(orientation)

        duration_ms = int((time.time() - start_time) * 1000)
        logger.info(f"Created {label} artwork pool with {len(pool)} artworks")
        BusinessEvents.art_pool_built(
            orientation=orientation,
            pool_size=len(pool),
            attempts=attempts,
            duration_ms=duration_ms,
        )
        return pool

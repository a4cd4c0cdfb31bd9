"""Art module application dependencies.

Provides services without importing infrastructure; the cache and the source
adapters are bound in `main.py`.
"""

import random
from collections.abc import Mapping
from typing import NoReturn

from fastapi import Depends

from lifestack.core.config import settings
from lifestack.core.domain.ports.cache import TTLCache
from lifestack.modules.art.application.pool_builder import ArtworkPoolBuilder
from lifestack.modules.art.application.rotation_service import ArtRotationService
from lifestack.modules.art.domain.source import ArtSource


def _missing_dependency(name: str) -> NoReturn:
    raise RuntimeError(f"Missing dependency override for {name}")


async def get_art_cache() -> TTLCache:
    _missing_dependency("TTLCache")


async def get_art_sources() -> Mapping[str, ArtSource]:
    _missing_dependency("ArtSources")


async def get_art_rng() -> random.Random:
    return random.Random()


async def get_pool_builder(
    sources: Mapping[str, ArtSource] = Depends(get_art_sources),
    rng: random.Random = Depends(get_art_rng),
) -> ArtworkPoolBuilder:
    return ArtworkPoolBuilder(
        sources,
        settings.art_source_weights,
        retry_delay_ms=settings.ART_RETRY_DELAY_MS,
        rng=rng,
    )


async def get_art_rotation_service(
    cache: TTLCache = Depends(get_art_cache),
    pool_builder: ArtworkPoolBuilder = Depends(get_pool_builder),
) -> ArtRotationService:
    return ArtRotationService(
        cache,
        pool_builder,
        pool_size=settings.ART_POOL_SIZE,
        pool_ttl_seconds=settings.ART_POOL_TTL_SECONDS,
        rotation_intervals=settings.ART_ROTATION_INTERVALS,
        default_orientation=settings.ART_DEFAULT_ORIENTATION,
    )

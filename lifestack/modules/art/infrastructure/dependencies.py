"""Art module dependencies."""

import random
from functools import lru_cache

from lifestack.core.config import settings
from lifestack.core.infrastructure.cache import get_cache
from lifestack.modules.art.domain.content_filter import ReligiousContentFilter
from lifestack.modules.art.infrastructure.sources import ArtSourceFactory
from lifestack.modules.art.infrastructure.sources.base import HttpArtSource

_rng = random.Random()


def get_content_filter() -> ReligiousContentFilter:
    return ReligiousContentFilter(settings.ART_RELIGIOUS_KEYWORDS)


@lru_cache(maxsize=1)
def _enabled_sources() -> dict[str, HttpArtSource]:
    return ArtSourceFactory.create_enabled(
        settings.ART_SOURCES,
        get_content_filter(),
        rng=_rng,
    )


async def get_art_cache():
    return get_cache()


async def get_art_sources() -> dict[str, HttpArtSource]:
    return _enabled_sources()


async def get_art_rng() -> random.Random:
    return _rng

"""作品源工厂。

根据配置创建已启用的博物馆源实例。
"""

import random
from collections.abc import Mapping

import httpx
from loguru import logger

from lifestack.core.config import ArtSourceConfig
from lifestack.modules.art.domain.content_filter import ReligiousContentFilter
from lifestack.modules.art.infrastructure.sources.artic import ArticArtSource
from lifestack.modules.art.infrastructure.sources.base import HttpArtSource
from lifestack.modules.art.infrastructure.sources.cleveland import ClevelandArtSource
from lifestack.modules.art.infrastructure.sources.met import MetArtSource

SOURCE_CLASSES: dict[str, type[HttpArtSource]] = {
    ArticArtSource.key: ArticArtSource,
    MetArtSource.key: MetArtSource,
    ClevelandArtSource.key: ClevelandArtSource,
}


class ArtSourceFactory:
    """作品源工厂类。"""

    @staticmethod
    def create(
        key: str,
        config: ArtSourceConfig,
        content_filter: ReligiousContentFilter,
        rng: random.Random | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> HttpArtSource:
        """根据源 key 创建作品源。

        Raises:
            ValueError: 不支持的源
        """
        source_class = SOURCE_CLASSES.get(key)
        if source_class is None:
            raise ValueError(f"Unknown art source: {key}")
        return source_class(
            config=config,
            content_filter=content_filter,
            rng=rng,
            transport=transport,
        )

    @classmethod
    def create_enabled(
        cls,
        configs: Mapping[str, ArtSourceConfig],
        content_filter: ReligiousContentFilter,
        rng: random.Random | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> dict[str, HttpArtSource]:
        """创建所有已启用的源，保持配置顺序；未知的源记录告警后忽略。"""
        sources: dict[str, HttpArtSource] = {}
        for key, config in configs.items():
            if not config.enabled:
                continue
            if key not in SOURCE_CLASSES:
                logger.warning(f"Ignoring unknown art source in config: {key}")
                continue
            sources[key] = cls.create(
                key,
                config,
                content_filter,
                rng=rng,
                transport=transport,
            )
        return sources

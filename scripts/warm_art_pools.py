#!/usr/bin/env python
"""预热作品池。

为 portrait / landscape / tv 构建作品池并写入 Redis，避免服务启动后首个请求等待抓取。
进程内缓存（CACHE_BACKEND=memory）无法跨进程共享，此时只构建并打印结果。

用法:
    uv run python scripts/warm_art_pools.py [--styles Cubism,Surrealism] [--clear]
"""

import argparse
import asyncio
import sys
from pathlib import Path


def _ensure_project_root_on_path() -> None:
    """确保项目根目录在 Python 路径中，便于直接运行脚本。"""
    project_root = Path(__file__).parent.parent
    project_root_str = str(project_root)
    if project_root_str not in sys.path:
        sys.path.insert(0, project_root_str)


_ensure_project_root_on_path()


async def warm_pools(styles: str | None = None, clear: bool = False) -> dict[str, int]:
    """构建并缓存所有方向的作品池。

    Returns:
        各方向的作品池大小
    """
    from loguru import logger

    from lifestack.core.config import settings
    from lifestack.core.infrastructure.cache import MemoryTTLCache, RedisTTLCache
    from lifestack.core.infrastructure.logging import setup_logging
    from lifestack.core.infrastructure.redis import get_async_redis_client
    from lifestack.modules.art.application.pool_builder import ArtworkPoolBuilder
    from lifestack.modules.art.application.rotation_service import ArtRotationService
    from lifestack.modules.art.domain.entities import ArtFilters
    from lifestack.modules.art.infrastructure.dependencies import (
        get_art_rng,
        get_art_sources,
    )

    setup_logging()

    async def _run(cache) -> dict[str, int]:
        service = ArtRotationService(
            cache,
            ArtworkPoolBuilder(
                await get_art_sources(),
                settings.art_source_weights,
                retry_delay_ms=settings.ART_RETRY_DELAY_MS,
                rng=await get_art_rng(),
            ),
            pool_size=settings.ART_POOL_SIZE,
            pool_ttl_seconds=settings.ART_POOL_TTL_SECONDS,
            rotation_intervals=settings.ART_ROTATION_INTERVALS,
            default_orientation=settings.ART_DEFAULT_ORIENTATION,
        )
        if clear:
            cleared = await service.clear_cache()
            logger.info(f"Cleared {cleared} art cache keys before warming")
        return await service.refresh_pools(ArtFilters.from_query(styles))

    if settings.CACHE_BACKEND == "redis":
        async with get_async_redis_client() as redis_client:
            pools = await _run(RedisTTLCache(redis_client))
    else:
        logger.warning("CACHE_BACKEND=memory: pools are built but not shared with the server")
        pools = await _run(MemoryTTLCache(max_entries=settings.MEMORY_CACHE_MAX_ENTRIES))

    for orientation, size in pools.items():
        logger.info(f"  {orientation}: {size} artworks")
    return pools


def main():
    parser = argparse.ArgumentParser(description="预热作品池")
    parser.add_argument(
        "--styles",
        type=str,
        default=None,
        help="逗号分隔的风格过滤（默认不过滤）",
    )
    parser.add_argument(
        "--clear",
        action="store_true",
        help="预热前清空 art: 前缀的缓存",
    )

    args = parser.parse_args()

    pools = asyncio.run(warm_pools(args.styles, args.clear))
    if not any(pools.values()):
        sys.exit(1)


if __name__ == "__main__":
    main()

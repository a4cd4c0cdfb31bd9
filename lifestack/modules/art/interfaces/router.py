"""Art API routes."""

from collections.abc import Mapping
from datetime import UTC, datetime

from fastapi import APIRouter, Depends, Query
from loguru import logger

from lifestack.core.config import settings
from lifestack.core.interfaces.http.response import ApiResponse
from lifestack.modules.art.application.dependencies import (
    get_art_rotation_service,
    get_art_sources,
)
from lifestack.modules.art.application.rotation_service import ArtRotationService
from lifestack.modules.art.domain.entities import (
    ArtFilters,
    Artwork,
    DisplayOrientation,
)
from lifestack.modules.art.domain.exceptions import (
    ArtServiceError,
    InvalidOrientationError,
)
from lifestack.modules.art.domain.source import ArtSource
from lifestack.modules.art.interfaces.schemas import (
    FALLBACK_WARNING,
    ArtHealthResponse,
    CacheClearResponse,
    CacheConfigData,
    CacheStatsData,
    CacheStatsResponse,
    CurrentArtworksData,
    KeysByType,
    PoolConfigData,
    PoolSizes,
    RefreshPoolsResponse,
)

router = APIRouter(prefix="/art", tags=["art"])

STYLES_QUERY = Query(None, description="逗号分隔的风格过滤，如 Cubism,Surrealism")


@router.get(
    "/current",
    response_model=ApiResponse[CurrentArtworksData],
    summary="获取三块面板的当前作品",
)
async def get_current_artwork(
    styles: str | None = STYLES_QUERY,
    service: ArtRotationService = Depends(get_art_rotation_service),
) -> ApiResponse[CurrentArtworksData]:
    """Current artwork for the portrait, landscape and TV panels."""
    artworks = await service.get_current_artworks(ArtFilters.from_query(styles))
    data = CurrentArtworksData(
        artwork_center=artworks[DisplayOrientation.PORTRAIT],
        artwork_right=artworks[DisplayOrientation.LANDSCAPE],
        artwork_tv=artworks[DisplayOrientation.TV],
    )
    warning = FALLBACK_WARNING if None in artworks.values() else None
    return ApiResponse.ok(data=data, warning=warning)


@router.get(
    "/orientation/{orientation}",
    response_model=ApiResponse[Artwork],
    summary="获取指定方向的当前作品",
)
async def get_artwork_by_orientation(
    orientation: str,
    styles: str | None = STYLES_QUERY,
    service: ArtRotationService = Depends(get_art_rotation_service),
) -> ApiResponse[Artwork]:
    """Current artwork for one panel; 400 for an unknown orientation."""
    try:
        display = DisplayOrientation(orientation)
    except ValueError as exc:
        raise InvalidOrientationError(orientation) from exc

    try:
        artwork = await service.get_artwork(display, ArtFilters.from_query(styles))
    except ArtServiceError as exc:
        logger.error(f"Failed to get {display} artwork: {exc.message}")
        return ApiResponse.ok(data=None, warning=FALLBACK_WARNING)
    except Exception as exc:
        logger.exception(f"Unexpected error getting {display} artwork: {exc}")
        return ApiResponse.ok(data=None, warning=FALLBACK_WARNING)
    return ApiResponse.ok(data=artwork)


@router.post(
    "/refresh",
    response_model=RefreshPoolsResponse,
    summary="强制重建作品池",
)
async def refresh_pools(
    styles: str | None = STYLES_QUERY,
    service: ArtRotationService = Depends(get_art_rotation_service),
) -> RefreshPoolsResponse:
    logger.info("Refreshing artwork pools")
    pools = await service.refresh_pools(ArtFilters.from_query(styles))
    failed = [name for name, size in pools.items() if size == 0]
    return RefreshPoolsResponse(
        message="Artwork pools refreshed successfully",
        pools=PoolSizes(**pools),
        warning=f"Failed to rebuild pools: {', '.join(failed)}" if failed else None,
    )


@router.post(
    "/cache/clear",
    response_model=CacheClearResponse,
    summary="清空作品缓存",
)
async def clear_cache(
    service: ArtRotationService = Depends(get_art_rotation_service),
) -> CacheClearResponse:
    """Delete every pool and rotation entry."""
    cleared = await service.clear_cache()
    return CacheClearResponse(
        message="Art cache cleared successfully",
        keys_cleared=cleared,
    )


@router.get(
    "/cache/stats",
    response_model=CacheStatsResponse,
    summary="作品缓存统计",
)
async def get_cache_stats(
    service: ArtRotationService = Depends(get_art_rotation_service),
) -> CacheStatsResponse:
    stats = await service.cache_stats()
    return CacheStatsResponse(
        stats=CacheStatsData(
            total_keys=stats.total_keys,
            config=CacheConfigData(
                pool_size=stats.config.pool_size,
                pool_ttl=f"{stats.config.pool_ttl_seconds} seconds",
                rotation_intervals=stats.config.rotation_intervals,
            ),
            keys_by_type=KeysByType(
                pools=stats.pool_keys,
                rotations=stats.rotation_keys,
            ),
        )
    )


@router.get(
    "/health",
    response_model=ArtHealthResponse,
    summary="作品服务健康检查",
)
async def art_health(
    sources: Mapping[str, ArtSource] = Depends(get_art_sources),
) -> ArtHealthResponse:
    return ArtHealthResponse(
        timestamp=datetime.now(UTC),
        sources={key: source.name for key, source in sources.items()},
        pool_config=PoolConfigData(
            size=settings.ART_POOL_SIZE,
            ttl_seconds=settings.ART_POOL_TTL_SECONDS,
        ),
        rotation_intervals=settings.ART_ROTATION_INTERVALS,
    )

"""Art API schemas.

响应字段为 camelCase，与仪表盘前端保持一致。
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from lifestack.modules.art.domain.entities import Artwork

FALLBACK_WARNING = "Using fallback (generative art) due to API error"


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CurrentArtworksData(CamelModel):
    """三块面板的当前作品；无法获取的面板为 null。"""

    artwork_center: Artwork | None = Field(None, description="竖屏（中间面板）")
    artwork_right: Artwork | None = Field(None, description="横屏（右侧面板）")
    artwork_tv: Artwork | None = Field(None, alias="artworkTV", description="电视")


class PoolSizes(CamelModel):
    portrait: int = 0
    landscape: int = 0
    tv: int = 0


class RefreshPoolsResponse(CamelModel):
    success: bool = True
    message: str
    pools: PoolSizes
    warning: str | None = None


class CacheClearResponse(CamelModel):
    success: bool = True
    message: str
    keys_cleared: int


class CacheConfigData(CamelModel):
    pool_size: int
    pool_ttl: str
    rotation_intervals: dict[str, int]


class KeysByType(CamelModel):
    pools: int = 0
    rotations: int = 0


class CacheStatsData(CamelModel):
    total_keys: int
    config: CacheConfigData
    keys_by_type: KeysByType


class CacheStatsResponse(CamelModel):
    success: bool = True
    stats: CacheStatsData


class PoolConfigData(CamelModel):
    size: int
    ttl_seconds: int


class ArtHealthResponse(CamelModel):
    success: bool = True
    service: str = "art"
    status: str = "ok"
    timestamp: datetime
    sources: dict[str, str] = Field(
        default_factory=dict, description="已启用源：key -> 博物馆名"
    )
    pool_config: PoolConfigData
    rotation_intervals: dict[str, int]

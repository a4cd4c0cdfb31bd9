"""Art application data models."""

from pydantic import BaseModel, Field


class ArtPoolConfig(BaseModel):
    """Effective pool and rotation configuration."""

    pool_size: int
    pool_ttl_seconds: int
    rotation_intervals: dict[str, int] = Field(default_factory=dict)


class ArtCacheStats(BaseModel):
    """Art cache statistics."""

    total_keys: int = 0
    pool_keys: int = 0
    rotation_keys: int = 0
    config: ArtPoolConfig

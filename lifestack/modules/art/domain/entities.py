"""Art domain entities."""

import math
from dataclasses import dataclass
from enum import StrEnum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

ArtworkOrientation = Literal["portrait", "landscape"]

UNTITLED = "Untitled"
UNKNOWN_ARTIST = "Unknown Artist"
UNKNOWN_DATE = "Unknown Date"
UNKNOWN_STYLE = "Unknown Style"


class DisplayOrientation(StrEnum):
    """显示面板方向。

    面板名用于缓存分区；TV 是横屏，向源请求横向作品。
    """

    PORTRAIT = "portrait"
    LANDSCAPE = "landscape"
    TV = "tv"

    @property
    def artwork_orientation(self) -> ArtworkOrientation:
        if self is DisplayOrientation.PORTRAIT:
            return "portrait"
        return "landscape"


def derive_orientation(width: Any, height: Any) -> ArtworkOrientation | None:
    """Derive orientation from pixel dimensions.

    Returns None when either dimension is missing, zero, non-numeric or
    non-finite, and for square images.
    """
    try:
        w = float(width)
        h = float(height)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(w) or not math.isfinite(h) or w == 0 or h == 0:
        return None
    if h > w:
        return "portrait"
    if w > h:
        return "landscape"
    return None


class Artwork(BaseModel):
    """Normalized artwork, immutable once produced by a source adapter."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    image_url: str = Field(..., min_length=1, description="图片 URL")
    title: str = Field(default=UNTITLED, description="作品标题")
    artist: str = Field(default=UNKNOWN_ARTIST, description="艺术家")
    date: str = Field(default=UNKNOWN_DATE, description="创作年代")
    style: str = Field(default=UNKNOWN_STYLE, description="风格/分类")
    id: str = Field(..., description="源内作品 ID")
    source: str = Field(..., description="来源博物馆")
    orientation: ArtworkOrientation | None = Field(default=None, description="方向")

    @property
    def dedupe_key(self) -> tuple[str, str]:
        return (self.source, self.id)

    def to_cache(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)

    @classmethod
    def from_cache(cls, payload: dict[str, Any]) -> "Artwork":
        return cls.model_validate(payload)


@dataclass(frozen=True)
class ArtFilters:
    """Style filters attached to an artwork request."""

    styles: tuple[str, ...] | None = None

    @classmethod
    def from_query(cls, styles: str | None) -> "ArtFilters":
        """Parse a comma-separated ``styles`` query value."""
        if not styles:
            return cls()
        parsed = tuple(part.strip() for part in styles.split(",") if part.strip())
        return cls(styles=parsed or None)

    @property
    def signature(self) -> str:
        """Stable cache-key fragment; empty when no styles are set."""
        if not self.styles:
            return ""
        return "-".join(self.styles)

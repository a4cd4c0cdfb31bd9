"""Art Institute of Chicago source."""

from typing import Any

from loguru import logger

from lifestack.modules.art.domain.entities import (
    UNKNOWN_ARTIST,
    UNKNOWN_DATE,
    UNKNOWN_STYLE,
    UNTITLED,
    ArtFilters,
    Artwork,
    ArtworkOrientation,
    derive_orientation,
)
from lifestack.modules.art.infrastructure.sources.base import HttpArtSource

ARTIC_API_BASE = "https://api.artic.edu/api/v1"
ARTIC_IIIF_BASE = "https://www.artic.edu/iiif/2"
ARTIC_SEARCH_FIELDS = "id,title,artist_display,date_display,image_id,thumbnail"
ARTIC_SEARCH_LIMIT = 100
DEFAULT_STYLES = ("Abstract", "Modern")


class ArticArtSource(HttpArtSource):
    """Search ARTIC by style and pick one public-domain image."""

    key = "artic"
    name = "Art Institute of Chicago"
    base_url = ARTIC_API_BASE

    async def fetch_artwork(
        self,
        orientation: ArtworkOrientation | None,
        filters: ArtFilters,
    ) -> Artwork:
        styles = filters.styles or tuple(self.config.styles) or DEFAULT_STYLES
        style = self._random_item(styles)
        logger.debug(f"Fetching from ARTIC with style: {style}")

        async with self._client() as client:
            payload = await self._get_json(
                client,
                "/artworks/search",
                params={
                    "q": f"{style} painting",
                    "fields": ARTIC_SEARCH_FIELDS,
                    "limit": ARTIC_SEARCH_LIMIT,
                },
            )

        data = payload.get("data") if isinstance(payload, dict) else None
        candidates = [
            item
            for item in data or []
            if isinstance(item, dict)
            and item.get("image_id")
            and item.get("id") is not None
        ]
        self._require(candidates, "no identifiable artworks with images returned")

        matching = [
            item
            for item in candidates
            if self._orientation_matches(
                self._thumbnail_orientation(item), orientation, allow_unknown=False
            )
        ]
        # 没有符合方向的作品时退回全部候选
        return self._pick_non_religious(
            matching or candidates,
            lambda item: self.normalize(item, style),
        )

    @staticmethod
    def _thumbnail_orientation(item: dict[str, Any]) -> ArtworkOrientation | None:
        thumbnail = item.get("thumbnail")
        if not isinstance(thumbnail, dict):
            return None
        return derive_orientation(thumbnail.get("width"), thumbnail.get("height"))

    def normalize(self, item: dict[str, Any], style: str | None) -> Artwork:
        return Artwork(
            image_url=f"{ARTIC_IIIF_BASE}/{item['image_id']}/full/843,/0/default.jpg",
            title=self._text(item.get("title"), UNTITLED),
            artist=self._text(item.get("artist_display"), UNKNOWN_ARTIST),
            date=self._text(item.get("date_display"), UNKNOWN_DATE),
            id=str(item.get("id")),
            style=style or UNKNOWN_STYLE,
            orientation=self._thumbnail_orientation(item),
            source=self.name,
        )

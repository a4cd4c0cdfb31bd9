"""Cleveland Museum of Art source."""

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

CLEVELAND_API_BASE = "https://openaccess-api.clevelandart.org/api"
CLEVELAND_SEARCH_LIMIT = 50
IMAGE_VARIANTS = ("web", "print", "digital", "tiny")


class ClevelandArtSource(HttpArtSource):
    """Open Access API; artworks without dimensions are kept for any orientation."""

    key = "cleveland"
    name = "Cleveland Museum of Art"
    base_url = CLEVELAND_API_BASE

    async def fetch_artwork(
        self,
        orientation: ArtworkOrientation | None,
        filters: ArtFilters,
    ) -> Artwork:
        params: dict[str, Any] = {"has_image": 1, "limit": CLEVELAND_SEARCH_LIMIT}
        if self.config.type:
            params["type"] = self.config.type
        if filters.styles:
            params["q"] = self._random_item(filters.styles)

        logger.debug("Fetching from Cleveland")

        async with self._client() as client:
            payload = await self._get_json(client, "/artworks", params=params)

        data = payload.get("data") if isinstance(payload, dict) else None
        candidates = [
            item
            for item in data or []
            if isinstance(item, dict)
            and item.get("images")
            and item.get("id") is not None
        ]
        self._require(candidates, "no identifiable artworks with images returned")

        matching = [
            item
            for item in candidates
            if self._orientation_matches(
                self._image_orientation(item), orientation, allow_unknown=True
            )
        ]
        return self._pick_non_religious(matching or candidates, self.normalize)

    @staticmethod
    def _variant(item: dict[str, Any], name: str) -> dict[str, Any]:
        images = item.get("images")
        if not isinstance(images, dict):
            return {}
        variant = images.get(name)
        return variant if isinstance(variant, dict) else {}

    @classmethod
    def _image_url(cls, item: dict[str, Any]) -> str | None:
        for name in IMAGE_VARIANTS:
            url = cls._variant(item, name).get("url")
            if url:
                return url
        return None

    @classmethod
    def _image_orientation(cls, item: dict[str, Any]) -> ArtworkOrientation | None:
        web = cls._variant(item, "web")
        printed = cls._variant(item, "print")
        width = web.get("width") or printed.get("width")
        height = web.get("height") or printed.get("height")
        return derive_orientation(width, height)

    @staticmethod
    def _artist(item: dict[str, Any]) -> str:
        creators = item.get("creators")
        names = [
            creator.get("description") or creator.get("role") or creator.get("name")
            for creator in (creators if isinstance(creators, list) else [])
            if isinstance(creator, dict)
        ]
        joined = ", ".join(name for name in names if name)
        return joined or item.get("creator") or UNKNOWN_ARTIST

    def normalize(self, item: dict[str, Any]) -> Artwork:
        return Artwork(
            image_url=self._image_url(item) or "",
            title=self._text(item.get("title"), UNTITLED),
            artist=self._artist(item),
            date=self._text(
                item.get("creation_date") or item.get("creation_date_earliest"),
                UNKNOWN_DATE,
            ),
            id=str(item.get("id")),
            style=self._text(item.get("department") or item.get("type"), UNKNOWN_STYLE),
            orientation=self._image_orientation(item),
            source=self.name,
        )

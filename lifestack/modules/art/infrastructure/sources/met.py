"""Metropolitan Museum of Art source."""

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
from lifestack.modules.art.domain.exceptions import (
    ArtSourceUnavailableError,
    NoMatchingArtworkError,
)
from lifestack.modules.art.infrastructure.sources.base import HttpArtSource

MET_API_BASE = "https://collectionapi.metmuseum.org/public/collection/v1"
MET_DEFAULT_SEARCH_TERM = "painting"
MET_MAX_OBJECT_LOOKUPS = 20


class MetArtSource(HttpArtSource):
    """Search the Met collection, then probe random objects until one fits.

    The search endpoint only returns object IDs, so each candidate costs an
    extra request; at most ``MET_MAX_OBJECT_LOOKUPS`` are tried per call.
    """

    key = "met"
    name = "Metropolitan Museum of Art"
    base_url = MET_API_BASE

    async def fetch_artwork(
        self,
        orientation: ArtworkOrientation | None,
        filters: ArtFilters,
    ) -> Artwork:
        search_term = (
            self._random_item(filters.styles)
            if filters.styles
            else MET_DEFAULT_SEARCH_TERM
        )
        params: dict[str, Any] = {
            "q": search_term,
            "hasImages": self.config.has_images,
        }
        if self.config.departments:
            params["departmentId"] = self._random_item(self.config.departments)

        logger.debug(f"Fetching from Met with search: {search_term}")

        async with self._client() as client:
            search = await self._get_json(client, "/search", params=params)
            object_ids = search.get("objectIDs") if isinstance(search, dict) else None
            ids = self._require(object_ids or [], "no objects returned for query")

            for _ in range(min(MET_MAX_OBJECT_LOOKUPS, len(ids))):
                object_id = self._random_item(ids)
                try:
                    obj = await self._get_json(client, f"/objects/{object_id}")
                except ArtSourceUnavailableError as exc:
                    logger.debug(f"Met object {object_id} lookup failed: {exc}")
                    continue

                if not isinstance(obj, dict) or obj.get("objectID") is None:
                    continue
                if not (obj.get("primaryImage") or obj.get("primaryImageSmall")):
                    continue

                try:
                    artwork = self.normalize(obj)
                except ValueError as exc:
                    logger.debug(f"Met object {object_id} is malformed: {exc}")
                    continue
                if (
                    orientation
                    and artwork.orientation
                    and artwork.orientation != orientation
                ):
                    continue
                if self.content_filter.is_religious_artwork(artwork):
                    continue
                return artwork

        raise NoMatchingArtworkError(
            self.name, "unable to find non-religious image matching orientation"
        )

    @staticmethod
    def _dimensions(obj: dict[str, Any]) -> tuple[Any, Any]:
        measurements = obj.get("measurements")
        if not isinstance(measurements, list) or not measurements:
            return None, None
        first = measurements[0]
        if not isinstance(first, dict):
            return None, None
        element = first.get("elementMeasurements")
        if not isinstance(element, dict):
            return None, None
        return element.get("Width"), element.get("Height")

    def normalize(self, obj: dict[str, Any]) -> Artwork:
        width, height = self._dimensions(obj)
        return Artwork(
            image_url=obj.get("primaryImageSmall") or obj.get("primaryImage"),
            title=self._text(obj.get("title"), UNTITLED),
            artist=self._text(obj.get("artistDisplayName"), UNKNOWN_ARTIST),
            date=self._text(
                obj.get("objectDate") or obj.get("objectBeginDate"), UNKNOWN_DATE
            ),
            id=str(obj.get("objectID")),
            style=self._text(
                obj.get("classification") or obj.get("department"), UNKNOWN_STYLE
            ),
            orientation=derive_orientation(width, height),
            source=self.name,
        )

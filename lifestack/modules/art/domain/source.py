"""Art source adapter port."""

from abc import ABC, abstractmethod

from lifestack.modules.art.domain.entities import (
    ArtFilters,
    Artwork,
    ArtworkOrientation,
)


class ArtSource(ABC):
    """One museum integration that yields a single normalized artwork per call.

    Implementations raise an ``ArtSourceError`` subclass when the request
    cannot be satisfied; they never return religious content.
    """

    #: config key, e.g. ``"artic"``
    key: str
    #: provenance tag written to ``Artwork.source``
    name: str

    @abstractmethod
    async def fetch_artwork(
        self,
        orientation: ArtworkOrientation | None,
        filters: ArtFilters,
    ) -> Artwork: ...

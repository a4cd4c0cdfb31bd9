"""Religious-content filter applied by every source adapter."""

from collections.abc import Iterable

from lifestack.modules.art.domain.entities import Artwork


class ReligiousContentFilter:
    """Case-insensitive substring denylist over title, artist and style."""

    def __init__(self, keywords: Iterable[str]):
        self.keywords = tuple(k.lower() for k in keywords if k)

    def contains_religious_content(self, text: str | None) -> bool:
        if not text:
            return False
        lowered = text.lower()
        return any(keyword in lowered for keyword in self.keywords)

    def is_religious_artwork(self, artwork: Artwork) -> bool:
        return (
            self.contains_religious_content(artwork.title)
            or self.contains_religious_content(artwork.artist)
            or self.contains_religious_content(artwork.style)
        )

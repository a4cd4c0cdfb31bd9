"""博物馆作品源模块。"""

from lifestack.modules.art.infrastructure.sources.artic import ArticArtSource
from lifestack.modules.art.infrastructure.sources.base import HttpArtSource
from lifestack.modules.art.infrastructure.sources.cleveland import ClevelandArtSource
from lifestack.modules.art.infrastructure.sources.factory import ArtSourceFactory
from lifestack.modules.art.infrastructure.sources.met import MetArtSource

__all__ = [
    "ArtSourceFactory",
    "ArticArtSource",
    "ClevelandArtSource",
    "HttpArtSource",
    "MetArtSource",
]

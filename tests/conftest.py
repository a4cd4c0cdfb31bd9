"""
pytest 配置和共享 fixtures。

测试分层：
- unit/: 单元测试（不依赖外部服务；HTTP 通过 httpx.MockTransport 模拟）

使用方法：
    # 运行所有测试
    uv run pytest

    # 只运行单元测试
    uv run pytest tests/unit/
"""

import random
from collections.abc import AsyncGenerator, Callable, Iterable
from unittest.mock import AsyncMock, MagicMock

import pytest
from httpx import ASGITransport, AsyncClient

from lifestack.core.infrastructure.cache import MemoryTTLCache
from lifestack.modules.art.application.pool_builder import ArtworkPoolBuilder
from lifestack.modules.art.domain.content_filter import ReligiousContentFilter
from lifestack.modules.art.domain.entities import (
    ArtFilters,
    Artwork,
    ArtworkOrientation,
)
from lifestack.modules.art.domain.exceptions import NoMatchingArtworkError
from lifestack.modules.art.domain.source import ArtSource


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


# ============================================
# 时间 / 随机数 Fixtures
# ============================================


class FakeTimer:
    """可手动推进的单调时钟（秒）。"""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def fake_timer() -> FakeTimer:
    return FakeTimer()


@pytest.fixture
def rng() -> random.Random:
    return random.Random(42)


async def no_sleep(_seconds: float) -> None:
    return None


# ============================================
# 作品 Fixtures
# ============================================


def make_artwork(
    id: str,
    source: str = "Test Museum",
    orientation: ArtworkOrientation | None = "landscape",
    title: str | None = None,
) -> Artwork:
    return Artwork(
        image_url=f"https://images.example.com/{source}/{id}.jpg",
        title=title or f"Artwork {id}",
        artist="Test Artist",
        date="1900",
        style="Modern",
        id=id,
        source=source,
        orientation=orientation,
    )


class FakeArtSource(ArtSource):
    """按顺序返回预设结果的作品源；结果为异常时抛出。"""

    def __init__(
        self,
        key: str,
        results: Iterable[Artwork | Exception] | None = None,
        factory: Callable[[ArtworkOrientation | None], Artwork] | None = None,
    ):
        self.key = key
        self.name = key
        self._results = list(results or [])
        self._factory = factory
        self.calls: list[tuple[ArtworkOrientation | None, ArtFilters]] = []

    async def fetch_artwork(
        self,
        orientation: ArtworkOrientation | None,
        filters: ArtFilters,
    ) -> Artwork:
        self.calls.append((orientation, filters))
        if self._results:
            result = self._results.pop(0)
        elif self._factory is not None:
            result = self._factory(orientation)
        else:
            result = NoMatchingArtworkError(self.name, "nothing left")
        if isinstance(result, Exception):
            raise result
        return result


def counting_source(
    key: str, results: Iterable[Artwork | Exception] | None = None
) -> FakeArtSource:
    """先返回预设结果，之后每次调用返回一个新 ID 的作品。"""
    counter = iter(range(1_000_000))

    def factory(orientation: ArtworkOrientation | None) -> Artwork:
        return make_artwork(
            f"{key}-{next(counter)}", source=key, orientation=orientation
        )

    return FakeArtSource(key, results=results, factory=factory)


@pytest.fixture
def content_filter() -> ReligiousContentFilter:
    from lifestack.core.config import DEFAULT_RELIGIOUS_KEYWORDS

    return ReligiousContentFilter(DEFAULT_RELIGIOUS_KEYWORDS)


# ============================================
# 缓存 Fixtures
# ============================================


@pytest.fixture
def memory_cache(fake_timer: FakeTimer) -> MemoryTTLCache:
    return MemoryTTLCache(max_entries=128, timer=fake_timer)


@pytest.fixture
def mock_redis_client() -> MagicMock:
    """Mock Redis 客户端。"""
    from lifestack.core.infrastructure.redis.client import RedisClient

    client = MagicMock(spec=RedisClient)
    client.ping = AsyncMock(return_value=True)
    client.get_json = AsyncMock(return_value=None)
    client.set_json = AsyncMock(return_value=True)
    client.delete = AsyncMock(return_value=1)
    client.scan_keys = AsyncMock(return_value=[])
    return client


# ============================================
# HTTP Client Fixtures
# ============================================


@pytest.fixture
def art_sources() -> dict[str, FakeArtSource]:
    return {
        "artic": counting_source("artic"),
        "met": counting_source("met"),
        "cleveland": counting_source("cleveland"),
    }


@pytest.fixture
async def async_client(
    memory_cache: MemoryTTLCache,
    art_sources: dict[str, FakeArtSource],
) -> AsyncGenerator[AsyncClient, None]:
    """异步 HTTP 客户端（用于 API 测试）。"""
    from lifestack.core.config import settings
    from lifestack.modules.art.application import dependencies as art_app_deps
    from main import app

    def pool_builder() -> ArtworkPoolBuilder:
        return ArtworkPoolBuilder(
            art_sources,
            settings.art_source_weights,
            retry_delay_ms=0,
            rng=random.Random(7),
            sleep=no_sleep,
        )

    # 覆盖依赖
    saved = dict(app.dependency_overrides)
    app.dependency_overrides[art_app_deps.get_art_cache] = lambda: memory_cache
    app.dependency_overrides[art_app_deps.get_art_sources] = lambda: art_sources
    app.dependency_overrides[art_app_deps.get_pool_builder] = pool_builder

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client

    # 恢复依赖覆盖
    app.dependency_overrides.clear()
    app.dependency_overrides.update(saved)

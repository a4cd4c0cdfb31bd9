"""HTTP 作品源基类。

提供统一的请求、错误包装与候选过滤逻辑，具体博物馆源（ARTIC/Met/Cleveland）继承此基类。
"""

import random
from collections.abc import Callable, Sequence
from typing import Any, TypeVar

import httpx
from loguru import logger

from lifestack.core.config import ArtSourceConfig, settings
from lifestack.modules.art.domain.content_filter import ReligiousContentFilter
from lifestack.modules.art.domain.entities import Artwork, ArtworkOrientation
from lifestack.modules.art.domain.exceptions import (
    ArtSourceUnavailableError,
    NoMatchingArtworkError,
    ReligiousContentFilteredError,
)
from lifestack.modules.art.domain.source import ArtSource

T = TypeVar("T")


class HttpArtSource(ArtSource):
    """Art source backed by a JSON HTTP API."""

    base_url: str

    def __init__(
        self,
        config: ArtSourceConfig,
        content_filter: ReligiousContentFilter,
        rng: random.Random | None = None,
        timeout_sec: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """初始化作品源。

        Args:
            config: 源配置（风格、部门、类型等）
            content_filter: 宗教内容过滤器
            rng: 随机数源，测试时可注入固定种子
            timeout_sec: 单次请求超时，默认 ART_FETCH_TIMEOUT_SEC
            transport: 可选的 httpx transport（测试用）
        """
        self.config = config
        self.content_filter = content_filter
        self.rng = rng or random.Random()
        self.timeout_sec = timeout_sec or settings.ART_FETCH_TIMEOUT_SEC
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout_sec,
            headers={
                "User-Agent": settings.FETCHER_USER_AGENT,
                "Accept": "application/json",
            },
            transport=self._transport,
        )

    async def _get_json(
        self,
        client: httpx.AsyncClient,
        path: str,
        params: dict[str, Any] | None = None,
    ) -> Any:
        """GET ``path`` and decode JSON, mapping transport failures to source errors."""
        try:
            response = await client.get(path, params=params)
            response.raise_for_status()
            return response.json()
        except httpx.TimeoutException as exc:
            raise ArtSourceUnavailableError(self.name, f"timeout: {exc}") from exc
        except httpx.HTTPStatusError as exc:
            raise ArtSourceUnavailableError(
                self.name, f"HTTP {exc.response.status_code}"
            ) from exc
        except (httpx.HTTPError, ValueError) as exc:
            raise ArtSourceUnavailableError(self.name, f"error: {exc}") from exc

    def _random_item(self, items: Sequence[T]) -> T:
        return items[self.rng.randrange(len(items))]

    def _pick_non_religious(
        self,
        candidates: Sequence[dict[str, Any]],
        normalize: Callable[[dict[str, Any]], Artwork],
    ) -> Artwork:
        """Normalize candidates, drop religious ones and pick one at random."""
        survivors: list[Artwork] = []
        religious = 0
        for candidate in candidates:
            try:
                artwork = normalize(candidate)
            except ValueError as exc:
                # 缺少图片 URL 等无法构成 Artwork 的条目
                logger.debug(f"{self.name}: skipping malformed candidate: {exc}")
                continue
            if self.content_filter.is_religious_artwork(artwork):
                religious += 1
                continue
            survivors.append(artwork)

        if not survivors:
            if religious:
                raise ReligiousContentFilteredError(
                    self.name, "all artworks filtered out as religious content"
                )
            raise NoMatchingArtworkError(self.name, "no usable artwork in results")
        return self._random_item(survivors)

    @staticmethod
    def _orientation_matches(
        candidate: ArtworkOrientation | None,
        wanted: ArtworkOrientation | None,
        *,
        allow_unknown: bool,
    ) -> bool:
        if wanted is None:
            return True
        if candidate is None:
            return allow_unknown
        return candidate == wanted

    def _require(self, items: Sequence[T], message: str) -> Sequence[T]:
        if not items:
            raise NoMatchingArtworkError(self.name, message)
        return items

    @staticmethod
    def _text(value: Any, default: str) -> str:
        if value is None:
            return default
        text = str(value).strip()
        return text or default

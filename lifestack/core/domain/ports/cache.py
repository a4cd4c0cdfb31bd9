"""TTL cache port."""

from collections.abc import Iterable
from typing import Any, Protocol


class TTLCache(Protocol):
    """Key/value store with per-entry expiry.

    Values are JSON-compatible. Every write replaces the whole value.
    """

    async def get(self, key: str) -> Any | None: ...

    async def set(self, key: str, value: Any, ttl_seconds: int) -> None: ...

    async def delete(self, keys: Iterable[str]) -> int: ...

    async def keys(self, prefix: str = "") -> list[str]: ...

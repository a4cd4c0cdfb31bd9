"""Source selection and rotation slot arithmetic."""

import random
from collections.abc import Mapping, Sequence
from typing import TypeVar

from lifestack.modules.art.domain.exceptions import NoArtSourcesEnabledError

T = TypeVar("T")


class WeightedSourceSelector:
    """Pick a source key with probability proportional to its weight.

    Sources are walked in insertion order; a draw landing exactly on a
    cumulative boundary goes to the earlier source.
    """

    def __init__(self, weights: Mapping[str, int], rng: random.Random | None = None):
        for key, weight in weights.items():
            if weight < 0:
                raise ValueError(f"Weight for source {key!r} must not be negative")

        self._entries = [(key, weight) for key, weight in weights.items() if weight > 0]
        if not self._entries:
            raise NoArtSourcesEnabledError()

        self._total = sum(weight for _, weight in self._entries)
        self._rng = rng or random.Random()

    @property
    def keys(self) -> list[str]:
        return [key for key, _ in self._entries]

    def pick(self) -> str:
        roll = self._rng.random() * self._total
        cursor = 0
        for key, weight in self._entries:
            cursor += weight
            if roll <= cursor:
                return key
        # 浮点误差兜底
        return self._entries[-1][0]


def rotation_slot(now_ms: int, interval_seconds: int) -> int:
    """Index of the fixed-width time bucket containing ``now_ms``."""
    if interval_seconds <= 0:
        raise ValueError("Rotation interval must be positive")
    return now_ms // (interval_seconds * 1000)


def pick_for_slot(pool: Sequence[T], slot: int) -> T:
    """Pool member served during ``slot``."""
    if not pool:
        raise IndexError("Cannot pick from an empty pool")
    return pool[slot % len(pool)]

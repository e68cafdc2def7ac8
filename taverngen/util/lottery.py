"""Weighted choice tables with seeded replay.

A ``Lottery`` is built once from ``(weight, item)`` pairs and can then be
drawn from with an explicit 32-bit seed. The draw is a pure function of the
seed, so a caller that records the seed can replay the exact decision without
reproducing the random stream position that produced it.
"""

from __future__ import annotations

from bisect import bisect_right
from collections.abc import Iterable
from itertools import accumulate

from typing import Generic, TypeVar

from taverngen.types import LotterySeed
from taverngen.util.rng import RandomSource

# Resolution of a seeded draw. Only the low 16 bits of the seed are used.
_SEED_RESOLUTION = 1 << 16


class EmptyLotteryError(Exception):
    """Raised when a lottery is built without any positively weighted item.

    Callers that can legitimately end up with no candidates are expected to
    check before building the lottery; reaching this is a logic error.
    """

    pass


T = TypeVar("T")


class Lottery(Generic[T]):
    """Weighted random-choice table over a fixed set of items."""

    def __init__(self, entries: Iterable[tuple[float, T]]) -> None:
        kept = [(weight, item) for weight, item in entries if weight > 0.0]
        if not kept:
            raise EmptyLotteryError("Lottery needs at least one positive weight")
        self._items: list[T] = [item for _, item in kept]
        self._weights: list[float] = [weight for weight, _ in kept]
        self._cumulative: list[float] = list(accumulate(self._weights))
        self.total: float = self._cumulative[-1]

    def choose_seeded(self, seed: int) -> T:
        """Pick an item as a pure function of ``seed``."""
        x = (seed % _SEED_RESOLUTION) / _SEED_RESOLUTION * self.total
        idx = bisect_right(self._cumulative, x)
        return self._items[min(idx, len(self._items) - 1)]

    def choose(self, source: RandomSource) -> T:
        """Draw a fresh seed from ``source`` and pick with it."""
        return self.choose_seeded(draw_seed(source))

    def items(self) -> list[tuple[float, T]]:
        return list(zip(self._weights, self._items, strict=True))

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, item: object) -> bool:
        return item in self._items


def draw_seed(source: RandomSource) -> LotterySeed:
    """Draw a 32-bit lottery seed from a random stream."""
    return LotterySeed(source.getrandbits(32))

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Optional, Protocol, Sequence, TypeVar

from .errors import ConfigurationError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class RandomSource(Protocol):
    """Minimum integer-drawing interface the layout engine needs from a host RNG.

    ``random.Random`` satisfies it. ``randrange`` is only ever called with a
    non-empty span; empty spans are resolved by ``draw_range`` without a draw.
    """

    def randrange(self, lo: int, hi: int) -> int:
        ...

    def choice(self, seq: Sequence[T]) -> T:
        ...



def draw_range(rng: RandomSource, lo: int, hi: int) -> int:
    """Draw from ``[lo, hi)``; an empty span (hi <= lo) yields ``lo`` and consumes nothing."""
    if hi <= lo:
        return lo
    return rng.randrange(lo, hi)


@dataclass
class SeededRandom:
    """
    A thin wrapper around random.Random to:
    - keep every draw on one sequential stream so a seed reproduces a layout
    - support optional deterministic seeding for tests
    - give integer ranges an exclusive upper bound that tolerates empty spans
    """

    seed: Optional[int] = None

    def __post_init__(self) -> None:
        self._rng = random.Random(self.seed)
        if self.seed is not None:
            logger.debug("Initialized SeededRandom with deterministic seed=%s", self.seed)
        else:
            logger.debug("Initialized SeededRandom with non-deterministic seed")

    def randrange(self, lo: int, hi: int) -> int:
        """Return an integer N such that lo <= N < hi.

        An empty span (hi <= lo) returns ``lo`` instead of raising, so narrow
        rooms still yield a usable coordinate.
        """
        if hi <= lo:
            return lo
        return self._rng.randrange(lo, hi)

    def choice(self, seq: Sequence[T]) -> T:
        if not seq:
            raise IndexError("Cannot choose from an empty sequence")
        return seq[self._rng.randrange(len(seq))]


@dataclass(frozen=True)
class IntRange:
    """Integer range sampled with an exclusive maximum: ``[min, max)``."""

    min: int
    max: int

    def __post_init__(self) -> None:
        if self.min > self.max:
            raise ConfigurationError(f"IntRange min {self.min} is greater than max {self.max}")

    def sample(self, rng: RandomSource) -> int:
        return draw_range(rng, self.min, self.max)

    def __contains__(self, value: int) -> bool:
        if self.max == self.min:
            return value == self.min
        return self.min <= value < self.max


__all__ = ["RandomSource", "SeededRandom", "IntRange", "draw_range"]

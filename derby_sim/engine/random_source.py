"""
Seedable random stream for roller derby simulation.

Every draw the simulation makes goes through one RandomSource so a fixed
seed replays an identical bout.
"""

import uuid
from typing import Optional, Sequence, TypeVar

import numpy as np

T = TypeVar("T")


class RandomSource:
    """
    Single-owner random stream over a numpy Generator.

    The order of calls is part of the simulation's semantics: the same seed
    and the same sequence of calls always yield the same values. The
    instance is isolated and never touches numpy's global state.
    """

    def __init__(self, seed: Optional[int] = None):
        """
        Initialize the stream.

        Args:
            seed: Random seed for reproducibility (fresh entropy if None)
        """
        self.seed = seed
        self._rng = np.random.default_rng(seed)

    def uniform(self, low: float, high: float) -> float:
        """Draw a real in [low, high)."""
        return float(self._rng.uniform(low, high))

    def integer(self, low: int, high: int) -> int:
        """Draw an integer in [low, high)."""
        return int(self._rng.integers(low, high))

    def integer_inclusive(self, low: int, high: int) -> int:
        """Draw an integer in [low, high]."""
        return int(self._rng.integers(low, high, endpoint=True))

    def chance(self, probability: float) -> bool:
        """Draw a boolean that is True with the given probability."""
        if probability <= 0.0:
            return False
        if probability >= 1.0:
            return True
        return bool(self._rng.random() < probability)

    def choice(self, options: Sequence[T]) -> T:
        """Pick one element uniformly."""
        return options[self.integer(0, len(options))]

    def uuid(self) -> uuid.UUID:
        """Draw a version 4 UUID from the stream."""
        return uuid.UUID(bytes=self._rng.bytes(16), version=4)


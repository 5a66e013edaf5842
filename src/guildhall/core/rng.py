"""Seeded randomness shared by every roll in a guild run."""
from __future__ import annotations

from random import Random
from typing import Sequence, TypeVar

T = TypeVar("T")


class RNG:
    """One ``random.Random`` per game so a seed replays the whole run.

    Resolvers only ever call ``random``/``roll`` for chance checks, which
    keeps scripted draws in tests easy to line up.
    """

    def __init__(self, seed: int) -> None:
        self.seed = seed
        self._random = Random(seed)

    def randint(self, low: int, high: int) -> int:
        return self._random.randint(low, high)

    def random(self) -> float:
        return self._random.random()

    def roll(self, chance: float) -> bool:
        """True when a uniform draw lands at or below ``chance``."""
        return self.random() <= chance

    def choice(self, options: Sequence[T]) -> T:
        if not options:
            raise ValueError("Cannot pick from an empty sequence.")
        return options[self._random.randrange(len(options))]

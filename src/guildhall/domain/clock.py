"""Guild calendar driven by tick time."""
from __future__ import annotations

from dataclasses import dataclass
from typing import List

DAY_LENGTH_SECONDS = 360.0


@dataclass(slots=True)
class GuildClock:
    day: int = 1
    elapsed: float = 0.0
    day_length: float = DAY_LENGTH_SECONDS

    def advance(self, dt: float) -> List[int]:
        """Move time forward and return every day number that began."""
        if dt <= 0:
            return []
        self.elapsed += dt
        started: List[int] = []
        while self.elapsed >= self.day_length:
            self.elapsed -= self.day_length
            self.day += 1
            started.append(self.day)
        return started

"""Quest template definition structures."""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class QuestTemplateDef:
    """Blueprint a quest instance is stamped from.

    ``floor_count`` of zero marks an ordinary quest; anything above makes the
    quest a dungeon whose floors from ``death_floor`` onward can kill.
    Timer fields left as ``None`` fall back to the rank defaults.
    """

    id: str
    name: str
    rank: str
    required_stat: str
    combat: bool
    reward: int
    xp_reward: int
    max_heroes: int | None = None
    floor_count: int = 0
    death_floor: int = 1
    travel_time: float | None = None
    execute_time: float | None = None
    return_time: float | None = None

    @property
    def is_dungeon(self) -> bool:
        return self.floor_count > 0

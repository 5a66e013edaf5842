"""Per-rank tuning loaded from ranks.json."""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class RankDef:
    rank: str
    power: int
    travel_time: float
    execute_time: float
    return_time: float
    max_heroes: int
    expected_stat: int
    base_success: float
    death_chance: float
    can_kill: bool
    floor_death_chance: float
    base_rest_time: float
    stat_min: int
    stat_max: int

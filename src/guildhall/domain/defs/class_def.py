"""Hero class definition structures."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Tuple

PASSIVE_EFFECTS = (
    "success_bonus",
    "xp_bonus",
    "gold_bonus",
    "death_reduction",
    "quest_time_reduction",
    "travel_time_reduction",
    "execute_time_reduction",
    "recovery_reduction",
)


@dataclass(slots=True, frozen=True)
class PassiveDef:
    """A single passive a hero of the class may roll at hire time."""

    id: str
    name: str
    effect: str
    value: float


@dataclass(slots=True)
class HeroClassDef:
    """Defines the primary stat, protector flag and passives of a class."""

    id: str
    name: str
    primary_stat: str
    protector: bool = False
    stat_bonus: Dict[str, int] = field(default_factory=dict)
    passives: Tuple[PassiveDef, ...] = ()

"""Hero runtime model."""
from __future__ import annotations

from dataclasses import dataclass, field

from guildhall.core.types import HeroStatus, InjuryTier
from guildhall.domain.defs import PassiveDef

from .equipment import HeroEquipment
from .stats import HeroStats


@dataclass(slots=True)
class Hero:
    """A guild member.

    ``primary_stat`` and ``protector`` are copied from the class definition at
    hire time so resolution never needs a repository lookup.
    """

    id: str
    name: str
    class_id: str
    rank: str
    power: int
    primary_stat: str
    stats: HeroStats
    protector: bool = False
    level: int = 1
    xp: int = 0
    status: HeroStatus = "idle"
    current_quest_id: str | None = None
    party_id: str | None = None
    injury: InjuryTier | None = None
    rest_progress: float = 0.0
    rest_time: float = 0.0
    equipment: HeroEquipment = field(default_factory=HeroEquipment)
    passive: PassiveDef | None = None
    death_note: str | None = None

    @property
    def is_idle(self) -> bool:
        return self.status == "idle"

    @property
    def is_resting(self) -> bool:
        return self.status == "resting"

"""Party bond records."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Tuple

PARTY_SIZE = 4


@dataclass(slots=True)
class Party:
    """A group of four heroes whose joint successes are being counted.

    While ``is_formed`` is False the record is a proto-party; promotion flips
    the flag once every member's ``quests_together`` reaches the threshold.
    Only formed parties count ``total_quests_completed`` and trait progress.
    """

    id: str
    name: str
    member_ids: List[str]
    quests_together: Dict[str, int] = field(default_factory=dict)
    is_formed: bool = False
    formed_day: int | None = None
    total_quests_completed: int = 0
    trait_progress: Dict[str, int] = field(default_factory=dict)
    # trait id -> day it was earned
    earned_traits: Dict[str, int] = field(default_factory=dict)

    @property
    def key(self) -> Tuple[str, ...]:
        return tuple(sorted(self.member_ids))

    @property
    def has_vacancy(self) -> bool:
        return len(self.member_ids) < PARTY_SIZE

    def counter(self, hero_id: str) -> int:
        return self.quests_together.get(hero_id, 0)

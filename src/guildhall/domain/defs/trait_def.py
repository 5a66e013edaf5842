"""Party trait definition structures."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

# Requirements counted once per qualifying settled quest.
COUNTED_REQUIREMENTS = (
    "survive_failures",
    "no_deaths",
    "perfect_quests",
    "clutch_victories",
    "complete_dungeons",
    "complete_s_rank",
    "near_death_survival",
)
# Requirements that accumulate an amount instead of a count.
CUMULATIVE_REQUIREMENTS = ("total_gold_earned",)
REQUIREMENT_TYPES = COUNTED_REQUIREMENTS + CUMULATIVE_REQUIREMENTS


@dataclass(slots=True, frozen=True)
class TraitRequirement:
    type: str
    target: int
    min_rank: str | None = None


@dataclass(slots=True, frozen=True)
class TraitBonus:
    """Bonuses a formed party carries once it has earned the trait.

    With ``quest_ranks`` set, ``success_bonus`` only applies to quests of
    those ranks.
    """

    success_bonus: float = 0.0
    dungeon_success_bonus: float = 0.0
    gold_bonus: float = 0.0
    fatigue_reduction: float = 0.0
    survival_bonus: float = 0.0
    quest_ranks: Tuple[str, ...] = ()


@dataclass(slots=True, frozen=True)
class TraitDef:
    id: str
    name: str
    description: str
    requirement: TraitRequirement
    bonus: TraitBonus

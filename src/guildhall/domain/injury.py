"""Injury tiers, rest multipliers and post-quest injury assignment."""
from __future__ import annotations

from typing import Dict, Tuple

from guildhall.core.types import InjuryTier, rank_index

INJURY_TIERS: Tuple[InjuryTier, ...] = ("fatigued", "injured", "wounded")

REST_MULTIPLIERS: Dict[str, float] = {
    "fatigued": 1.0,
    "injured": 2.0,
    "wounded": 3.0,
}

# Applied to stats when an injured hero is sent out again before fully healing.
STAT_PENALTIES: Dict[str, float] = {
    "fatigued": 0.90,
    "injured": 0.75,
    "wounded": 0.50,
}

# Ranks at or above this index are "high rank" for injury purposes (A, S).
HIGH_RANK_INDEX = rank_index("A")


def tier_index(tier: InjuryTier | None) -> int:
    return -1 if tier is None else INJURY_TIERS.index(tier)


def worse_of(current: InjuryTier | None, new: InjuryTier | None) -> InjuryTier | None:
    """Return the more severe tier; a new injury never downgrades an old one."""
    return new if tier_index(new) > tier_index(current) else current


def heal_one_tier(tier: InjuryTier | None) -> InjuryTier | None:
    if tier is None or tier == "fatigued":
        return None
    return INJURY_TIERS[INJURY_TIERS.index(tier) - 1]


def determine_injury(rank: str, success: bool, has_protector: bool) -> InjuryTier | None:
    """Pick the injury a surviving hero carries home.

    Successes always fatigue. Low-rank failures injure. High-rank failures
    wound only when a protector kept the party alive; otherwise the death
    rolls already covered the risk and survivors are left as they were.
    """
    if success:
        return "fatigued"
    if rank_index(rank) < HIGH_RANK_INDEX:
        return "injured"
    if has_protector:
        return "wounded"
    return None


def rest_duration(base_rest_time: float, tier: InjuryTier | None, recovery_reduction: float = 0.0) -> float:
    if tier is None:
        return 0.0
    return max(0.0, base_rest_time * REST_MULTIPLIERS[tier] * (1.0 - recovery_reduction))


def stat_penalty(tier: InjuryTier | None) -> float:
    return 1.0 if tier is None else STAT_PENALTIES[tier]

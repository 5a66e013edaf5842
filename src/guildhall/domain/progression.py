"""Hero XP and level progression."""
from __future__ import annotations

from typing import List

from guildhall.core.rng import RNG
from guildhall.core.types import STAT_NAMES, rank_index
from guildhall.domain.entities import Hero

RANK_XP_BONUS = 0.4
STAT_CAP = 30


def xp_to_next_level(level: int) -> int:
    return 100 * level


def rank_xp_multiplier(quest_rank: str, hero_rank: str) -> float:
    """Bonus for punching above a hero's own rank, +40% per rank of difference."""
    difference = rank_index(quest_rank) - rank_index(hero_rank)
    return 1.0 + RANK_XP_BONUS * max(0, difference)


def add_xp(hero: Hero, amount: int, rng: RNG) -> List[str]:
    """Grant XP and return the stat raised for each level gained."""
    raised: List[str] = []
    if amount <= 0:
        return raised
    hero.xp += amount
    while hero.xp >= xp_to_next_level(hero.level):
        hero.xp -= xp_to_next_level(hero.level)
        hero.level += 1
        stat = rng.choice(STAT_NAMES)
        hero.stats.raise_stat(stat, cap=STAT_CAP)
        raised.append(stat)
    return raised

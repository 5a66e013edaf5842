"""Aggregation of hero passives into party-wide modifiers."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from guildhall.domain.entities import Hero


@dataclass(slots=True)
class PartyEffects:
    success_bonus: float = 0.0
    xp_bonus: float = 0.0
    gold_bonus: float = 0.0
    death_reduction: float = 0.0
    quest_time_reduction: float = 0.0
    travel_time_reduction: float = 0.0
    execute_time_reduction: float = 0.0
    recovery_reduction: float = 0.0


def aggregate_effects(heroes: Iterable[Hero]) -> PartyEffects:
    """Sum every member's passive; reductions are capped below 1."""
    effects = PartyEffects()
    for hero in heroes:
        passive = hero.passive
        if passive is None:
            continue
        current = getattr(effects, passive.effect)
        setattr(effects, passive.effect, current + passive.value)
    for name in (
        "death_reduction",
        "quest_time_reduction",
        "travel_time_reduction",
        "execute_time_reduction",
        "recovery_reduction",
    ):
        setattr(effects, name, min(0.9, getattr(effects, name)))
    return effects

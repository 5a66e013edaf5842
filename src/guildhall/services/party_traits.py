"""Traits formed parties earn by repeating feats, and the bonuses they grant.

Every settled quest of a formed party is reported as a ``TraitEvent``. Each
unearned trait whose requirement the event satisfies gains one point of
progress (or the gold earned, for cumulative traits); reaching the target
earns the trait for good. A party holds at most ``MAX_TRAITS_PER_PARTY``.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List

from guildhall.core.types import rank_index
from guildhall.data.repositories import TraitsRepository
from guildhall.domain.defs import TraitDef
from guildhall.domain.party import Party
from guildhall.domain.state import GameState

logger = logging.getLogger(__name__)

MAX_TRAITS_PER_PARTY = 5
NEAR_DEATH_CHANCE = 0.30
MAX_TRAIT_REDUCTION = 0.9


@dataclass(slots=True)
class TraitEvent:
    """A settled quest as the trait rules see it."""

    quest_rank: str
    success: bool
    is_dungeon: bool = False
    any_death: bool = False
    no_injuries: bool = False
    used_reroll: bool = False
    gold_earned: int = 0
    success_chance: float | None = None


@dataclass(slots=True)
class TraitBonuses:
    success_bonus: float = 0.0
    dungeon_success_bonus: float = 0.0
    gold_bonus: float = 0.0
    fatigue_reduction: float = 0.0
    survival_bonus: float = 0.0
    rank_bonuses: Dict[str, float] = field(default_factory=dict)

    def success_bonus_for(self, rank: str, is_dungeon: bool) -> float:
        bonus = self.success_bonus + self.rank_bonuses.get(rank, 0.0)
        if is_dungeon:
            bonus += self.dungeon_success_bonus
        return bonus


def requirement_met(trait: TraitDef, event: TraitEvent) -> bool:
    """Whether ``event`` counts toward a counted (non-cumulative) requirement."""
    req = trait.requirement
    if req.type == "survive_failures":
        if event.success or event.any_death:
            return False
        return req.min_rank is None or rank_index(event.quest_rank) >= rank_index(req.min_rank)
    if not event.success:
        return False
    if req.type == "no_deaths":
        return not event.any_death
    if req.type == "perfect_quests":
        return event.no_injuries
    if req.type == "clutch_victories":
        return event.used_reroll
    if req.type == "complete_dungeons":
        return event.is_dungeon
    if req.type == "complete_s_rank":
        return event.quest_rank == "S"
    if req.type == "near_death_survival":
        return event.success_chance is not None and event.success_chance < NEAR_DEATH_CHANCE
    return False


class PartyTraitTracker:
    def __init__(self, *, traits_repo: TraitsRepository) -> None:
        self._traits_repo = traits_repo

    def record(self, state: GameState, party: Party, event: TraitEvent) -> List[TraitDef]:
        """Advance every unearned trait and return the ones earned by this event."""
        if not party.is_formed or len(party.earned_traits) >= MAX_TRAITS_PER_PARTY:
            return []
        earned: List[TraitDef] = []
        for trait in self._traits_repo.all():
            if trait.id in party.earned_traits:
                continue
            if trait.requirement.type == "total_gold_earned":
                if event.gold_earned <= 0:
                    continue
                gained = event.gold_earned
            elif requirement_met(trait, event):
                gained = 1
            else:
                continue
            progress = party.trait_progress.get(trait.id, 0) + gained
            party.trait_progress[trait.id] = progress
            if progress >= trait.requirement.target:
                earned.append(trait)

        for trait in earned:
            if len(party.earned_traits) >= MAX_TRAITS_PER_PARTY:
                break
            party.earned_traits[trait.id] = state.clock.day
            logger.info("Party '%s' earned trait %s", party.name, trait.name)
        return [trait for trait in earned if trait.id in party.earned_traits]

    def bonuses(self, party: Party) -> TraitBonuses:
        totals = TraitBonuses()
        for trait_id in party.earned_traits:
            bonus = self._traits_repo.get(trait_id).bonus
            if bonus.quest_ranks:
                for rank in bonus.quest_ranks:
                    totals.rank_bonuses[rank] = totals.rank_bonuses.get(rank, 0.0) + bonus.success_bonus
            else:
                totals.success_bonus += bonus.success_bonus
            totals.dungeon_success_bonus += bonus.dungeon_success_bonus
            totals.gold_bonus += bonus.gold_bonus
            totals.fatigue_reduction += bonus.fatigue_reduction
            totals.survival_bonus += bonus.survival_bonus
        totals.fatigue_reduction = min(MAX_TRAIT_REDUCTION, totals.fatigue_reduction)
        totals.survival_bonus = min(MAX_TRAIT_REDUCTION, totals.survival_bonus)
        return totals

    def progress(self, party: Party, trait_id: str) -> tuple[int, int]:
        """(current, target) for one trait."""
        trait = self._traits_repo.get(trait_id)
        return party.trait_progress.get(trait_id, 0), trait.requirement.target

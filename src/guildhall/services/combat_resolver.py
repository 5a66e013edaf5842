"""Single-draw resolution of ordinary (non-dungeon) quests."""
from __future__ import annotations

import logging
import math
from typing import List, Sequence

from guildhall.core.rng import RNG
from guildhall.data.repositories import RanksRepository
from guildhall.domain.entities import Hero
from guildhall.domain.injury import stat_penalty
from guildhall.domain.passives import PartyEffects, aggregate_effects
from guildhall.domain.quest import Quest, QuestResult
from guildhall.services.party_traits import TraitBonuses

logger = logging.getLogger(__name__)

PROTECTOR_DEATH_FACTOR = 0.30
FAILURE_GOLD_SHARE = 0.2
FAILURE_XP_SHARE = 0.3
MIN_SUCCESS_CHANCE = 0.15
MAX_SUCCESS_CHANCE = 0.98


def has_protector(heroes: Sequence[Hero]) -> bool:
    return any(hero.protector for hero in heroes)


def party_power(heroes: Sequence[Hero]) -> int:
    return sum(hero.power for hero in heroes)


def average_stat(heroes: Sequence[Hero], stat: str) -> float:
    """Average of a stat across the party, after injury penalties."""
    if not heroes:
        return 0.0
    total = sum(math.floor(hero.stats.get(stat) * stat_penalty(hero.injury)) for hero in heroes)
    return total / len(heroes)


class CombatResolver:
    """Decides success, rewards and casualties for a whole quest in one draw."""

    def __init__(self, *, ranks_repo: RanksRepository, rng: RNG) -> None:
        self._ranks_repo = ranks_repo
        self._rng = rng

    def success_chance(
        self,
        quest: Quest,
        heroes: Sequence[Hero],
        luck_bonus: int = 0,
        effects: PartyEffects | None = None,
        trait_bonus: float = 0.0,
    ) -> float:
        if not heroes:
            return 0.0
        effects = effects or aggregate_effects(heroes)
        rank_def = self._ranks_repo.get(quest.rank)
        power_ratio = party_power(heroes) / max(1, quest.required_power)
        base_chance = min(0.60 + (power_ratio - 1.0) * 0.35, MAX_SUCCESS_CHANCE)
        primary_bonus = (average_stat(heroes, quest.required_stat) - rank_def.expected_stat) * 0.02
        luck_term = (average_stat(heroes, "luck") + luck_bonus - 5) * 0.01
        chance = base_chance + primary_bonus + luck_term + effects.success_bonus + trait_bonus
        return max(MIN_SUCCESS_CHANCE, min(MAX_SUCCESS_CHANCE, chance))

    def resolve(
        self,
        quest: Quest,
        heroes: Sequence[Hero],
        party_luck_bonus: int = 0,
        can_reroll: bool = False,
        death_factor: float = 1.0,
        traits: TraitBonuses | None = None,
    ) -> QuestResult:
        """Resolve a standard quest.

        A re-rollable party that fails gets exactly one more draw at the same
        odds; whatever the second draw says stands. Death rolls happen once,
        against the final outcome. Earned party traits add to the odds and
        soften the death rolls.
        """
        effects = aggregate_effects(heroes)
        traits = traits or TraitBonuses()
        chance = self.success_chance(
            quest, heroes, party_luck_bonus, effects, traits.success_bonus_for(quest.rank, quest.is_dungeon)
        )
        success = self._rng.roll(chance)
        rerolled = False
        log: List[str] = [f"{quest.name}: {chance:.0%} chance of success."]
        if not success and can_reroll:
            rerolled = True
            log.append("The party regroups and tries again.")
            success = self._rng.roll(chance)
        logger.debug("Quest %s resolved success=%s chance=%.3f rerolled=%s", quest.id, success, chance, rerolled)

        if success:
            log.append("The party prevails.")
            return QuestResult(
                success=True,
                gold_reward=quest.reward,
                xp_reward=quest.xp_reward,
                message="Quest completed successfully!",
                combat_log=log,
                rerolled=rerolled,
                success_chance=chance,
            )

        deaths, injuries = self._roll_casualties(quest, heroes, death_factor, effects, traits.survival_bonus)
        message = "Quest failed, but heroes gained experience."
        if deaths:
            log.append(f"{len(deaths)} hero(es) fell.")
        elif quest.combat and has_protector(heroes):
            message += " Divine protection kept the party alive."
        return QuestResult(
            success=False,
            gold_reward=math.floor(quest.reward * FAILURE_GOLD_SHARE),
            xp_reward=math.floor(quest.xp_reward * FAILURE_XP_SHARE),
            message=message,
            combat_log=log,
            deaths=deaths,
            injuries=injuries,
            rerolled=rerolled,
            success_chance=chance,
        )

    def _roll_casualties(
        self,
        quest: Quest,
        heroes: Sequence[Hero],
        death_factor: float,
        effects: PartyEffects,
        survival_bonus: float = 0.0,
    ) -> tuple[List[str], List[str]]:
        if not quest.combat:
            return [], []
        rank_def = self._ranks_repo.get(quest.rank)
        if not rank_def.can_kill:
            return [], [hero.id for hero in heroes]
        reduction = min(0.9, effects.death_reduction + survival_bonus)
        chance = rank_def.death_chance * death_factor * (1.0 - reduction)
        if has_protector(heroes):
            chance *= PROTECTOR_DEATH_FACTOR
        deaths: List[str] = []
        injuries: List[str] = []
        for hero in heroes:
            if self._rng.roll(chance):
                deaths.append(hero.id)
            else:
                injuries.append(hero.id)
        return deaths, injuries

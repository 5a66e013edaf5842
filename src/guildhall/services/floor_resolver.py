"""Per-floor resolution for dungeon quests and the end-of-run tally."""
from __future__ import annotations

import logging
import math
from typing import List, Sequence

from guildhall.core.rng import RNG
from guildhall.data.repositories import RanksRepository
from guildhall.domain.entities import Hero
from guildhall.domain.quest import DungeonRun, FloorResult, Quest, QuestResult
from guildhall.services.combat_resolver import PROTECTOR_DEATH_FACTOR, average_stat, has_protector
from guildhall.services.party_traits import TraitBonuses

logger = logging.getLogger(__name__)

FATIGUE_PER_FLOOR = 0.05
DUNGEON_CLEAR_MULTIPLIER = 1.25
PARTIAL_CLEAR_PENALTY = 0.5
MIN_FLOOR_CHANCE = 0.05
MAX_FLOOR_CHANCE = 0.98


class FloorResolver:
    def __init__(self, *, ranks_repo: RanksRepository, rng: RNG) -> None:
        self._ranks_repo = ranks_repo
        self._rng = rng

    def floor_success_chance(
        self,
        quest: Quest,
        heroes: Sequence[Hero],
        floor_number: int,
        luck_bonus: int = 0,
        traits: TraitBonuses | None = None,
    ) -> float:
        """Rank base odds worn down by fatigue per floor; traits can ease the fatigue."""
        traits = traits or TraitBonuses()
        rank_def = self._ranks_repo.get(quest.rank)
        fatigue = FATIGUE_PER_FLOOR * (1.0 - traits.fatigue_reduction)
        chance = rank_def.base_success - floor_number * fatigue
        chance += traits.success_bonus_for(quest.rank, True)
        if heroes:
            chance += (average_stat(heroes, "luck") - 5) * 0.01
        chance += luck_bonus * 0.01
        return max(MIN_FLOOR_CHANCE, min(MAX_FLOOR_CHANCE, chance))

    def resolve_floor(
        self,
        quest: Quest,
        heroes: Sequence[Hero],
        floor_number: int,
        luck_bonus: int = 0,
        death_factor: float = 1.0,
        death_reduction: float = 0.0,
        traits: TraitBonuses | None = None,
    ) -> FloorResult:
        """Roll one floor; on a failed deadly floor every hero rolls for death."""
        traits = traits or TraitBonuses()
        chance = self.floor_success_chance(quest, heroes, floor_number, luck_bonus, traits)
        success = self._rng.roll(chance)
        if success:
            share = max(1, quest.floor_count)
            result = FloorResult(
                floor_number=floor_number,
                success=True,
                gold=quest.reward // share,
                xp=quest.xp_reward // share,
            )
            logger.debug("Quest %s floor %d cleared (chance %.3f)", quest.id, floor_number, chance)
            return result

        deaths: List[str] = []
        injuries: List[str] = []
        if quest.combat and floor_number >= quest.death_floor:
            rank_def = self._ranks_repo.get(quest.rank)
            reduction = min(0.9, death_reduction + traits.survival_bonus)
            death_chance = rank_def.floor_death_chance * death_factor * (1.0 - reduction)
            if has_protector(heroes):
                death_chance *= PROTECTOR_DEATH_FACTOR
            for hero in heroes:
                if self._rng.roll(death_chance):
                    deaths.append(hero.id)
                else:
                    injuries.append(hero.id)
        else:
            injuries = [hero.id for hero in heroes]
        wiped = bool(heroes) and len(deaths) == len(heroes)
        logger.debug(
            "Quest %s floor %d failed (chance %.3f): %d deaths, wiped=%s",
            quest.id,
            floor_number,
            chance,
            len(deaths),
            wiped,
        )
        return FloorResult(
            floor_number=floor_number,
            success=False,
            deaths=deaths,
            injuries=injuries,
            party_wiped=wiped,
        )

    def compile_dungeon_result(self, quest: Quest, run: DungeonRun) -> QuestResult:
        cleared = run.floors_succeeded
        full_clear = (
            not run.has_retreated
            and len(run.floor_results) == quest.floor_count
            and cleared == quest.floor_count
        )
        if full_clear:
            gold = math.floor(quest.reward * DUNGEON_CLEAR_MULTIPLIER)
            xp = math.floor(quest.xp_reward * DUNGEON_CLEAR_MULTIPLIER)
            message = f"Dungeon cleared! All {quest.floor_count} floors conquered."
        else:
            floors = max(1, quest.floor_count)
            gold = math.floor(quest.reward * cleared * PARTIAL_CLEAR_PENALTY / floors)
            xp = math.floor(quest.xp_reward * cleared * PARTIAL_CLEAR_PENALTY / floors)
            if run.party_wiped:
                message = f"The party was wiped out on floor {run.current_floor}."
            elif run.has_retreated:
                message = f"The party retreated after {run.current_floor} floor(s)."
            else:
                message = f"Dungeon failed: {cleared} of {quest.floor_count} floors cleared."

        injuries: List[str] = []
        for floor in run.floor_results:
            for hero_id in floor.injuries:
                if hero_id not in injuries and hero_id not in run.fallen_ids:
                    injuries.append(hero_id)
        log = [
            f"Floor {floor.floor_number}: {'cleared' if floor.success else 'failed'}"
            for floor in run.floor_results
        ]
        return QuestResult(
            success=full_clear,
            gold_reward=gold,
            xp_reward=xp,
            message=message,
            combat_log=log,
            deaths=list(run.fallen_ids),
            injuries=injuries,
            floors_cleared=cleared,
        )

"""Player commands for the quest lifecycle and read-only previews."""
from __future__ import annotations

import logging
from typing import Dict, List, Sequence, Tuple

from guildhall.core.types import STAT_NAMES
from guildhall.domain.entities import Hero
from guildhall.domain.quest import AwaitingReturn, DungeonRun, Executing, Quest, QuestResult, Returning, Traveling
from guildhall.domain.registry import ROSTER
from guildhall.domain.state import GameState
from guildhall.services.combat_resolver import CombatResolver, party_power
from guildhall.services.errors import ValidationError
from guildhall.services.floor_resolver import FloorResolver
from guildhall.services.outcome_service import ClaimResult, OutcomeService
from guildhall.services.party_bond_tracker import PartyBondTracker
from guildhall.services.phase_machine import PhaseDurations, PhaseStateMachine

logger = logging.getLogger(__name__)


class QuestService:
    """Assign, execute, claim, return and retreat.

    Commands issued in the wrong phase do nothing and return ``None`` or
    ``(False, reason)``; callers are expected to check ``quest.phase`` first.
    """

    def __init__(
        self,
        *,
        combat_resolver: CombatResolver,
        floor_resolver: FloorResolver,
        bond_tracker: PartyBondTracker,
        phase_machine: PhaseStateMachine,
        outcome_service: OutcomeService,
    ) -> None:
        self._combat_resolver = combat_resolver
        self._floor_resolver = floor_resolver
        self._bond_tracker = bond_tracker
        self._phase_machine = phase_machine
        self._outcome_service = outcome_service

    def assign_party(self, state: GameState, quest: Quest, heroes: Sequence[Hero]) -> Tuple[bool, str]:
        try:
            self._validate_assignment(state, quest, heroes)
        except ValidationError as exc:
            return False, str(exc)

        state.registry.dispatch([hero.id for hero in heroes], quest.id)
        quest.hero_ids = [hero.id for hero in heroes]
        if quest in state.available_quests:
            state.available_quests.remove(quest)
        state.active_quests.append(quest)
        self._bond_tracker.get_or_create_proto_party(state, heroes)
        durations = self._phase_machine.durations(quest, heroes)
        self._phase_machine.transition(state, quest, Traveling(duration=durations.travel))
        logger.info("Dispatched %d hero(es) on %s", len(heroes), quest.name)
        return True, f"{len(heroes)} hero(es) set out for {quest.name}."

    def execute_quest(self, state: GameState, quest: Quest) -> Tuple[QuestResult | None, List[Hero]] | None:
        """Start the execute phase.

        Ordinary quests are resolved here and the result is returned with the
        heroes. Dungeons return ``None`` in place of the result since their
        floors are resolved as time passes.
        """
        if quest.phase != "awaiting_execute":
            return None
        heroes = state.registry.quest_members(quest.id)
        duration = self._phase_machine.durations(quest, heroes).execute
        if quest.is_dungeon:
            quest.dungeon_run = DungeonRun()
            self._phase_machine.transition(state, quest, Executing(duration=duration))
            return None, heroes
        result = self._combat_resolver.resolve(
            quest,
            heroes,
            party_luck_bonus=self._bond_tracker.luck_bonus(state, heroes),
            can_reroll=self._bond_tracker.can_reroll(state, heroes),
            death_factor=self._bond_tracker.death_factor(state, heroes),
            traits=self._bond_tracker.trait_bonuses(state, heroes),
        )
        self._phase_machine.transition(state, quest, Executing(duration=duration, result=result))
        return result, heroes

    def claim_rewards(self, state: GameState, quest: Quest) -> ClaimResult | None:
        if quest.phase != "awaiting_claim" or quest.result is None:
            return None
        result = quest.result
        claim = self._outcome_service.apply_result(state, quest, result)
        claim.events.append(self._phase_machine.transition(state, quest, AwaitingReturn(result)))
        return claim

    def start_return(self, state: GameState, quest: Quest) -> QuestResult | None:
        if quest.phase != "awaiting_return" or quest.result is None:
            return None
        result = quest.result
        heroes = state.registry.quest_members(quest.id)
        duration = self._phase_machine.durations(quest, heroes).return_time
        self._phase_machine.transition(state, quest, Returning(duration=duration, result=result))
        return result

    def retreat_from_dungeon(self, state: GameState, quest: Quest) -> Tuple[bool, str]:
        if not quest.is_dungeon:
            return False, f"{quest.name} is not a dungeon."
        if quest.phase != "execute" or quest.dungeon_run is None:
            return False, f"{quest.name} is not underway."
        quest.dungeon_run.has_retreated = True
        self._phase_machine.short_circuit(state, quest)
        logger.info("Party retreated from %s after floor %d", quest.name, quest.dungeon_run.current_floor)
        return True, f"The party retreats from {quest.name}."

    def success_chance(self, state: GameState, quest: Quest, heroes: Sequence[Hero]) -> float:
        """Estimated odds for these heroes; first-floor odds for dungeons."""
        luck_bonus = self._bond_tracker.luck_bonus(state, heroes)
        traits = self._bond_tracker.trait_bonuses(state, heroes)
        if quest.is_dungeon:
            return self._floor_resolver.floor_success_chance(quest, heroes, 1, luck_bonus, traits)
        trait_bonus = traits.success_bonus_for(quest.rank, False)
        return self._combat_resolver.success_chance(quest, heroes, luck_bonus, trait_bonus=trait_bonus)

    def party_power(self, heroes: Sequence[Hero]) -> int:
        return party_power(heroes)

    def party_stat_totals(self, heroes: Sequence[Hero]) -> Dict[str, int]:
        return {stat: sum(hero.stats.get(stat) for hero in heroes) for stat in STAT_NAMES}

    def preview_durations(self, quest: Quest, heroes: Sequence[Hero]) -> PhaseDurations:
        return self._phase_machine.durations(quest, heroes)

    def _validate_assignment(self, state: GameState, quest: Quest, heroes: Sequence[Hero]) -> None:
        if quest.phase != "available" or quest in state.active_quests:
            raise ValidationError(f"{quest.name} is not available.")
        if not heroes:
            raise ValidationError("Select at least one hero.")
        if len(heroes) > quest.max_heroes:
            raise ValidationError(f"{quest.name} allows at most {quest.max_heroes} hero(es).")
        if len({hero.id for hero in heroes}) != len(heroes):
            raise ValidationError("A hero can only be selected once.")
        for hero in heroes:
            if state.registry.find(hero.id) is not hero or state.registry.location_of(hero.id) != ROSTER:
                raise ValidationError(f"{hero.name} is not in the roster.")
            if not hero.is_idle:
                raise ValidationError(f"{hero.name} is {hero.status.replace('_', ' ')}.")
        power = party_power(heroes)
        if power < quest.required_power:
            raise ValidationError(
                f"Party power ({power}) is less than required ({quest.required_power})."
            )

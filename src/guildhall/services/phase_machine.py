"""Quest phase transitions and timed-phase progression.

Phases run ``available -> travel -> awaiting_execute -> execute ->
awaiting_claim -> awaiting_return -> return -> completed|failed``. The only
jump is from a dungeon's ``execute`` straight to ``return`` when the party is
wiped out or retreats; in that case the result is settled on the spot.

A hero who falls on a dungeon floor without a wipe is only recorded in the
run's ``fallen_ids``: they sit out the remaining floors but stay in the
quest's hero set until the result is settled by ``claim_rewards`` (or by a
later wipe or retreat), which is when they are buried. A run left waiting
in ``awaiting_claim`` therefore keeps its fallen on the quest.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, FrozenSet, List, Sequence

from guildhall.domain.entities import Hero
from guildhall.domain.passives import aggregate_effects
from guildhall.domain.quest import (
    PHASE_INDEX,
    AwaitingClaim,
    AwaitingExecute,
    Concluded,
    Quest,
    QuestState,
    Returning,
)
from guildhall.domain.state import GameState
from guildhall.services.equipment_service import travel_multiplier
from guildhall.services.errors import DataIntegrityError, InvalidTransitionError
from guildhall.services.events import (
    FloorResolvedEvent,
    OutcomeEvent,
    PartyWipedEvent,
    QuestConcludedEvent,
    QuestPhaseChangedEvent,
)
from guildhall.services.floor_resolver import FloorResolver
from guildhall.services.outcome_service import OutcomeService
from guildhall.services.party_bond_tracker import PartyBondTracker

logger = logging.getLogger(__name__)

# Float slack when comparing accumulated progress against a duration or floor boundary.
PROGRESS_EPSILON = 1e-9

ALLOWED_TRANSITIONS: Dict[str, FrozenSet[str]] = {
    "available": frozenset({"travel"}),
    "travel": frozenset({"awaiting_execute"}),
    "awaiting_execute": frozenset({"execute"}),
    "execute": frozenset({"awaiting_claim", "return"}),
    "awaiting_claim": frozenset({"awaiting_return"}),
    "awaiting_return": frozenset({"return"}),
    "return": frozenset({"completed", "failed"}),
    "completed": frozenset(),
    "failed": frozenset(),
}

HERO_STATUS_BY_PHASE = {
    "travel": "traveling",
    "awaiting_execute": "awaiting_execute",
    "execute": "questing",
    "awaiting_claim": "at_location",
    "awaiting_return": "awaiting_return",
    "return": "returning",
}


@dataclass(slots=True)
class PhaseDurations:
    travel: float
    execute: float
    return_time: float


class PhaseStateMachine:
    def __init__(
        self,
        *,
        floor_resolver: FloorResolver,
        bond_tracker: PartyBondTracker,
        outcome_service: OutcomeService,
    ) -> None:
        self._floor_resolver = floor_resolver
        self._bond_tracker = bond_tracker
        self._outcome_service = outcome_service

    def durations(self, quest: Quest, heroes: Sequence[Hero]) -> PhaseDurations:
        effects = aggregate_effects(heroes)
        quest_factor = 1.0 - effects.quest_time_reduction
        road_factor = travel_multiplier(heroes) * (1.0 - effects.travel_time_reduction) * quest_factor
        return PhaseDurations(
            travel=max(0.0, quest.travel_time * road_factor),
            execute=max(0.0, quest.execute_time * (1.0 - effects.execute_time_reduction) * quest_factor),
            return_time=max(0.0, quest.return_time * road_factor),
        )

    def transition(self, state: GameState, quest: Quest, new_state: QuestState) -> QuestPhaseChangedEvent:
        """Move a quest to ``new_state``, resetting progress and hero statuses."""
        old_phase = quest.phase
        new_phase = new_state.phase
        if new_phase not in ALLOWED_TRANSITIONS[old_phase] or PHASE_INDEX[new_phase] <= PHASE_INDEX[old_phase]:
            raise InvalidTransitionError(f"Quest '{quest.id}' cannot move from {old_phase} to {new_phase}.")
        quest.state = new_state
        quest.phase_progress = 0.0
        status = HERO_STATUS_BY_PHASE.get(new_phase)
        if status is not None:
            for hero in state.registry.quest_members(quest.id):
                hero.status = status
        logger.info("Quest %s: %s -> %s", quest.id, old_phase, new_phase)
        return QuestPhaseChangedEvent(quest_id=quest.id, from_phase=old_phase, to_phase=new_phase)

    def advance(self, state: GameState, quest: Quest) -> List[OutcomeEvent]:
        """Fire whatever transitions the quest's accumulated progress has earned."""
        self.verify_members(state, quest)
        phase = quest.phase
        if phase == "execute" and quest.is_dungeon:
            return self._advance_floors(state, quest)
        duration = quest.duration
        if duration is None or quest.phase_progress + PROGRESS_EPSILON < duration:
            return []
        if phase == "travel":
            return [self.transition(state, quest, AwaitingExecute())]
        if phase == "execute":
            result = quest.result
            if result is None:
                raise InvalidTransitionError(f"Quest '{quest.id}' finished executing without a result.")
            return [self.transition(state, quest, AwaitingClaim(result))]
        if phase == "return":
            return self.conclude(state, quest)
        return []

    def verify_members(self, state: GameState, quest: Quest) -> None:
        """Raise DataIntegrityError if any member id is unknown or placed on another quest."""
        for hero_id in quest.hero_ids:
            location = state.registry.location_of(hero_id)
            if location.kind == "quest" and location.quest_id != quest.id:
                raise DataIntegrityError(f"Hero '{hero_id}' is assigned to quest '{location.quest_id}'.")
            if location.kind == "roster":
                raise DataIntegrityError(f"Hero '{hero_id}' is back in the roster but listed on '{quest.id}'.")

    def short_circuit(self, state: GameState, quest: Quest) -> List[OutcomeEvent]:
        """End a dungeon run early, settle it, and send any survivors home."""
        run = quest.dungeon_run
        if run is None:
            raise InvalidTransitionError(f"Quest '{quest.id}' has no dungeon run to end.")
        result = self._floor_resolver.compile_dungeon_result(quest, run)
        claim = self._outcome_service.apply_result(state, quest, result)
        survivors = state.registry.quest_members(quest.id)
        duration = self.durations(quest, survivors).return_time
        events: List[OutcomeEvent] = list(claim.events)
        events.append(self.transition(state, quest, Returning(duration=duration, result=result)))
        return events

    def conclude(self, state: GameState, quest: Quest) -> List[OutcomeEvent]:
        result = quest.result
        if result is None:
            raise InvalidTransitionError(f"Quest '{quest.id}' cannot conclude without a result.")
        event = self.transition(state, quest, Concluded(result))
        survivors = self._outcome_service.send_home(state, quest)
        logger.info("Quest %s concluded (%s)", quest.id, quest.phase)
        return [
            event,
            QuestConcludedEvent(
                quest_id=quest.id,
                success=result.success,
                survivor_ids=[hero.id for hero in survivors],
            ),
        ]

    def _advance_floors(self, state: GameState, quest: Quest) -> List[OutcomeEvent]:
        run = quest.dungeon_run
        duration = quest.duration
        if run is None or duration is None:
            raise InvalidTransitionError(f"Quest '{quest.id}' is executing without a dungeon run.")
        per_floor = duration / quest.floor_count
        if per_floor <= 0:
            floors_due = quest.floor_count
        else:
            floors_due = min(quest.floor_count, int(quest.phase_progress / per_floor + PROGRESS_EPSILON))

        members = state.registry.quest_members(quest.id)
        luck_bonus = self._bond_tracker.luck_bonus(state, members)
        death_factor = self._bond_tracker.death_factor(state, members)
        traits = self._bond_tracker.trait_bonuses(state, members)
        alive = [hero for hero in members if hero.id not in run.fallen_ids]
        death_reduction = aggregate_effects(alive).death_reduction

        events: List[OutcomeEvent] = []
        while run.current_floor < floors_due:
            floor_number = run.current_floor + 1
            floor = self._floor_resolver.resolve_floor(
                quest, alive, floor_number, luck_bonus, death_factor, death_reduction, traits
            )
            run.floor_results.append(floor)
            run.current_floor = floor_number
            run.fallen_ids.extend(floor.deaths)
            alive = [hero for hero in alive if hero.id not in floor.deaths]
            events.append(
                FloorResolvedEvent(
                    quest_id=quest.id,
                    floor_number=floor_number,
                    success=floor.success,
                    deaths=list(floor.deaths),
                )
            )
            if floor.party_wiped:
                logger.info("Quest %s: party wiped on floor %d", quest.id, floor_number)
                events.append(PartyWipedEvent(quest_id=quest.id, floor_number=floor_number))
                events.extend(self.short_circuit(state, quest))
                return events

        if run.current_floor >= quest.floor_count:
            result = self._floor_resolver.compile_dungeon_result(quest, run)
            events.append(self.transition(state, quest, AwaitingClaim(result)))
        return events

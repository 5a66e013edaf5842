"""Tick-driven advancement of every active quest and every resting hero."""
from __future__ import annotations

import logging
from typing import List

from guildhall.domain.quest import Quest
from guildhall.domain.state import GameState
from guildhall.services.errors import DataIntegrityError, ValidationError
from guildhall.services.events import NewDayEvent, OutcomeEvent, QuestSkippedEvent
from guildhall.services.outcome_service import OutcomeService
from guildhall.services.phase_machine import PhaseStateMachine

logger = logging.getLogger(__name__)


class QuestScheduler:
    def __init__(self, *, phase_machine: PhaseStateMachine, outcome_service: OutcomeService) -> None:
        self._phase_machine = phase_machine
        self._outcome_service = outcome_service

    def tick(self, state: GameState, dt: float) -> List[OutcomeEvent]:
        """Advance the world by ``dt`` seconds and report what happened.

        Quests are processed in list order and concluded ones are removed only
        after the pass. Heroes already resting when the tick began then rest
        for ``dt``. A non-positive ``dt`` changes nothing.
        """
        if dt <= 0:
            return []
        events: List[OutcomeEvent] = [NewDayEvent(day=day) for day in state.clock.advance(dt)]
        resting = state.registry.resting_heroes()

        finished: List[Quest] = []
        for quest in list(state.active_quests):
            try:
                if quest.is_timed:
                    quest.phase_progress += dt
                    events.extend(self._phase_machine.advance(state, quest))
            except (DataIntegrityError, ValidationError) as exc:
                logger.warning("Skipping quest %s this tick: %s", quest.id, exc)
                events.append(QuestSkippedEvent(quest_id=quest.id, reason=str(exc)))
            if quest.is_terminal:
                finished.append(quest)

        for quest in finished:
            state.active_quests.remove(quest)

        events.extend(self._outcome_service.advance_rest(resting, dt))
        return events

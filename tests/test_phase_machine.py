import pytest

from guildhall.domain.defs import PassiveDef
from guildhall.domain.quest import AwaitingClaim, AwaitingExecute, Executing, QuestResult, Traveling
from guildhall.services.errors import InvalidTransitionError, ValidationError
from guildhall.services.phase_machine import ALLOWED_TRANSITIONS, PhaseStateMachine
from tests.helpers.builders import make_party, make_quest, make_world


def _machine(services) -> PhaseStateMachine:
    return services.phase_machine


def test_transitions_only_move_forward_one_step() -> None:
    heroes = make_party()
    quest = make_quest()
    state, services = make_world(heroes, [quest])
    machine = _machine(services)

    with pytest.raises(InvalidTransitionError):
        machine.transition(state, quest, Executing(duration=5.0))

    event = machine.transition(state, quest, Traveling(duration=5.0))
    assert (event.from_phase, event.to_phase) == ("available", "travel")

    with pytest.raises(ValidationError):
        machine.transition(state, quest, Traveling(duration=5.0))


def test_execute_may_jump_to_return_but_nothing_goes_back() -> None:
    assert "return" in ALLOWED_TRANSITIONS["execute"]
    for phase, targets in ALLOWED_TRANSITIONS.items():
        assert "available" not in targets
        assert phase not in targets


def test_transition_resets_progress_and_sets_hero_status() -> None:
    heroes = make_party()
    quest = make_quest()
    state, services = make_world(heroes, [quest])
    services.quest_service.assign_party(state, quest, heroes)
    quest.phase_progress = 7.5
    _machine(services).transition(state, quest, AwaitingExecute())

    assert quest.phase_progress == 0.0
    assert all(hero.status == "awaiting_execute" for hero in heroes)


def test_execute_without_cached_result_is_rejected() -> None:
    heroes = make_party()
    quest = make_quest(travel=0.0, execute=0.0)
    state, services = make_world(heroes, [quest])
    services.quest_service.assign_party(state, quest, heroes)
    services.scheduler.tick(state, 1.0)
    machine = _machine(services)
    machine.transition(state, quest, Executing(duration=0.0))

    with pytest.raises(InvalidTransitionError):
        machine.advance(state, quest)


def test_durations_stack_reductions_and_floor_at_zero() -> None:
    heroes = make_party()
    heroes[0].passive = PassiveDef(id="haste", name="Haste", effect="execute_time_reduction", value=0.5)
    heroes[1].passive = PassiveDef(id="shortcut", name="Shortcut", effect="quest_time_reduction", value=0.2)
    quest = make_quest(travel=10.0, execute=20.0, ret=5.0)
    state, services = make_world(heroes, [quest])

    durations = _machine(services).durations(quest, heroes)

    assert durations.travel == pytest.approx(8.0)
    assert durations.execute == pytest.approx(8.0)
    assert durations.return_time == pytest.approx(4.0)

    heroes[2].passive = PassiveDef(id="haste2", name="Haste", effect="execute_time_reduction", value=5.0)
    assert _machine(services).durations(quest, heroes).execute >= 0.0


def test_awaiting_claim_carries_result() -> None:
    result = QuestResult(success=True, gold_reward=1, xp_reward=1, message="ok")
    state = AwaitingClaim(result)

    assert state.phase == "awaiting_claim"
    assert state.result is result
    assert not hasattr(state, "duration")

from guildhall.domain.quest import PHASE_INDEX, Executing
from guildhall.services.events import (
    FloorResolvedEvent,
    HeroDiedEvent,
    NewDayEvent,
    PartyWipedEvent,
    QuestConcludedEvent,
    QuestPhaseChangedEvent,
    QuestSkippedEvent,
    RestCompletedEvent,
)
from tests.helpers.builders import ScriptedRNG, make_hero, make_party, make_quest, make_world


def _dispatch(state, services, quest, heroes):
    ok, message = services.quest_service.assign_party(state, quest, heroes)
    assert ok, message


def test_tick_with_zero_dt_changes_nothing() -> None:
    heroes = make_party()
    quest = make_quest()
    state, services = make_world(heroes, [quest])
    _dispatch(state, services, quest, heroes)
    services.scheduler.tick(state, 4.0)

    events = services.scheduler.tick(state, 0.0)

    assert events == []
    assert quest.phase == "travel"
    assert quest.phase_progress == 4.0


def test_negative_dt_is_ignored() -> None:
    heroes = make_party()
    quest = make_quest()
    state, services = make_world(heroes, [quest])
    _dispatch(state, services, quest, heroes)

    assert services.scheduler.tick(state, -5.0) == []
    assert quest.phase_progress == 0.0
    assert state.clock.elapsed == 0.0


def test_travel_of_ten_transitions_exactly_once() -> None:
    heroes = make_party()
    quest = make_quest(travel=10.0)
    state, services = make_world(heroes, [quest])
    _dispatch(state, services, quest, heroes)

    events = services.scheduler.tick(state, 10.0)
    changes = [event for event in events if isinstance(event, QuestPhaseChangedEvent)]

    assert [(e.from_phase, e.to_phase) for e in changes] == [("travel", "awaiting_execute")]
    assert quest.phase_progress == 0.0
    assert services.scheduler.tick(state, 0.0) == []
    assert quest.phase == "awaiting_execute"


def test_gated_phase_persists_across_ticks() -> None:
    heroes = make_party()
    quest = make_quest(travel=1.0)
    state, services = make_world(heroes, [quest])
    _dispatch(state, services, quest, heroes)
    services.scheduler.tick(state, 1.0)

    for _ in range(50):
        assert services.scheduler.tick(state, 5.0) == []

    assert quest.phase == "awaiting_execute"
    assert quest.phase_progress == 0.0


def test_dungeon_of_three_floors_resolves_each_floor() -> None:
    heroes = make_party()
    quest = make_quest(rank="B", travel=0.0, execute=30.0, floor_count=3)
    state, services = make_world(heroes, [quest])
    _dispatch(state, services, quest, heroes)
    services.scheduler.tick(state, 1.0)
    result, _ = services.quest_service.execute_quest(state, quest)
    assert result is None

    floors = []
    for _ in range(3):
        floors.extend(e for e in services.scheduler.tick(state, 10.0) if isinstance(e, FloorResolvedEvent))

    assert [event.floor_number for event in floors] == [1, 2, 3]
    assert quest.dungeon_run.current_floor == 3
    assert len(quest.dungeon_run.floor_results) == 3
    assert quest.phase == "awaiting_claim"
    assert quest.result.success is True


def test_large_tick_resolves_every_crossed_floor() -> None:
    heroes = make_party()
    quest = make_quest(rank="B", travel=0.0, execute=30.0, floor_count=3)
    state, services = make_world(heroes, [quest])
    _dispatch(state, services, quest, heroes)
    services.scheduler.tick(state, 1.0)
    services.quest_service.execute_quest(state, quest)

    services.scheduler.tick(state, 25.0)
    assert quest.dungeon_run.current_floor == 2
    assert quest.phase == "execute"

    services.scheduler.tick(state, 5.0)
    assert quest.dungeon_run.current_floor == 3
    assert quest.phase == "awaiting_claim"


def test_party_wipe_short_circuits_to_return_and_buries_heroes() -> None:
    rng = ScriptedRNG()
    heroes = [make_hero("h1", class_id="knight"), make_hero("h2", class_id="mage")]
    quest = make_quest(rank="A", travel=0.0, execute=20.0, ret=5.0, floor_count=2, required_power=1)
    state, services = make_world(heroes, [quest], rng=rng)
    _dispatch(state, services, quest, heroes)
    services.scheduler.tick(state, 1.0)
    services.quest_service.execute_quest(state, quest)

    rng.push(0.99, 0.0, 0.0)
    events = services.scheduler.tick(state, 10.0)

    assert any(isinstance(event, PartyWipedEvent) for event in events)
    assert quest.phase == "return"
    assert quest.dungeon_run.current_floor == 1
    assert [hero.id for hero in state.registry.graveyard()] == ["h1", "h2"]

    events = services.scheduler.tick(state, 5.0)
    concluded = [event for event in events if isinstance(event, QuestConcludedEvent)]
    assert len(concluded) == 1 and concluded[0].success is False
    assert quest not in state.active_quests
    assert state.registry.audit() == []


def test_location_invariant_holds_through_full_lifecycle() -> None:
    heroes = make_party()
    quest = make_quest()
    state, services = make_world(heroes, [quest])
    quest_service = services.quest_service

    _dispatch(state, services, quest, heroes)
    assert state.registry.audit() == []
    for step in range(12):
        if quest.phase == "awaiting_execute":
            quest_service.execute_quest(state, quest)
        elif quest.phase == "awaiting_claim":
            quest_service.claim_rewards(state, quest)
        elif quest.phase == "awaiting_return":
            quest_service.start_return(state, quest)
        services.scheduler.tick(state, 5.0)
        assert state.registry.audit() == []
        for hero in heroes:
            assert hero.id in state.registry

    assert quest not in state.active_quests
    assert {hero.id for hero in state.registry.roster()} == {hero.id for hero in heroes}


def test_phase_index_never_decreases() -> None:
    heroes = make_party()
    quest = make_quest(rank="B", travel=3.0, execute=9.0, ret=3.0, floor_count=3)
    state, services = make_world(heroes, [quest])
    quest_service = services.quest_service
    _dispatch(state, services, quest, heroes)

    seen = [quest.phase_index]
    for _ in range(20):
        if quest.phase == "awaiting_execute":
            quest_service.execute_quest(state, quest)
        elif quest.phase == "awaiting_claim":
            quest_service.claim_rewards(state, quest)
        elif quest.phase == "awaiting_return":
            quest_service.start_return(state, quest)
        services.scheduler.tick(state, 2.0)
        seen.append(quest.phase_index)

    assert seen == sorted(seen)
    assert seen[-1] == PHASE_INDEX["completed"]


def test_stale_hero_reference_skips_only_that_quest() -> None:
    first_party = make_party("a")
    second_party = make_party("b")
    broken = make_quest("quest_broken")
    healthy = make_quest("quest_healthy")
    state, services = make_world(first_party + second_party, [broken, healthy])
    _dispatch(state, services, broken, first_party)
    _dispatch(state, services, healthy, second_party)
    broken.hero_ids.append("ghost")

    events = services.scheduler.tick(state, 10.0)

    skipped = [event for event in events if isinstance(event, QuestSkippedEvent)]
    assert [event.quest_id for event in skipped] == ["quest_broken"]
    assert healthy.phase == "awaiting_execute"
    assert broken.phase == "travel"
    assert broken in state.active_quests


def test_executing_without_result_skips_only_that_quest() -> None:
    first_party = make_party("a")
    second_party = make_party("b")
    broken = make_quest("quest_broken")
    healthy = make_quest("quest_healthy")
    state, services = make_world(first_party + second_party, [broken, healthy])
    _dispatch(state, services, broken, first_party)
    _dispatch(state, services, healthy, second_party)
    broken.state = Executing(duration=0.0, result=None)

    events = services.scheduler.tick(state, 10.0)

    skipped = [event for event in events if isinstance(event, QuestSkippedEvent)]
    assert [event.quest_id for event in skipped] == ["quest_broken"]
    assert broken.phase == "execute"
    assert broken in state.active_quests
    assert healthy.phase == "awaiting_execute"


def test_dungeon_executing_without_run_skips_only_that_quest() -> None:
    first_party = make_party("a")
    second_party = make_party("b")
    broken = make_quest("quest_broken", rank="B", floor_count=3)
    healthy = make_quest("quest_healthy")
    state, services = make_world(first_party + second_party, [broken, healthy])
    _dispatch(state, services, broken, first_party)
    _dispatch(state, services, healthy, second_party)
    broken.state = Executing(duration=10.0)
    assert broken.dungeon_run is None

    events = services.scheduler.tick(state, 10.0)

    skipped = [event for event in events if isinstance(event, QuestSkippedEvent)]
    assert [event.quest_id for event in skipped] == ["quest_broken"]
    assert broken.phase == "execute"
    assert healthy.phase == "awaiting_execute"


def test_fractional_ticks_reach_travel_duration() -> None:
    heroes = make_party()
    quest = make_quest(travel=0.9)
    state, services = make_world(heroes, [quest])
    _dispatch(state, services, quest, heroes)

    for _ in range(8):
        services.scheduler.tick(state, 0.1)
    assert quest.phase == "travel"

    services.scheduler.tick(state, 0.1)
    assert quest.phase == "awaiting_execute"


def test_hero_fallen_on_a_floor_stays_on_quest_until_claim() -> None:
    rng = ScriptedRNG()
    heroes = [make_hero("h1", class_id="knight"), make_hero("h2", class_id="mage")]
    quest = make_quest(rank="A", travel=0.0, execute=20.0, ret=5.0, floor_count=2, required_power=1)
    state, services = make_world(heroes, [quest], rng=rng)
    _dispatch(state, services, quest, heroes)
    services.scheduler.tick(state, 1.0)
    services.quest_service.execute_quest(state, quest)

    # floor 1 fails: h1 dies, h2 lives; floor 2 fails: only h2 rolls and lives
    rng.push(0.99, 0.0, 0.99, 0.99, 0.99)
    services.scheduler.tick(state, 20.0)

    run = quest.dungeon_run
    assert run.fallen_ids == ["h1"]
    assert run.floor_results[1].deaths == []
    assert run.floor_results[1].injuries == ["h2"]
    assert quest.phase == "awaiting_claim"
    assert state.registry.location_of("h1").quest_id == quest.id
    assert state.registry.graveyard() == []

    claim = services.quest_service.claim_rewards(state, quest)

    assert claim.outcomes["h1"] == "died"
    assert [e.hero_id for e in claim.events if isinstance(e, HeroDiedEvent)] == ["h1"]
    assert [hero.id for hero in state.registry.graveyard()] == ["h1"]

    services.quest_service.start_return(state, quest)
    services.scheduler.tick(state, 5.0)

    assert quest.phase == "failed"
    assert [hero.id for hero in state.registry.graveyard()] == ["h1"]
    assert [hero.id for hero in state.registry.roster()] == ["h2"]
    assert state.registry.audit() == []


def test_events_follow_active_quest_order() -> None:
    first_party = make_party("a")
    second_party = make_party("b")
    first = make_quest("quest_first", travel=5.0)
    second = make_quest("quest_second", travel=5.0)
    state, services = make_world(first_party + second_party, [first, second])
    _dispatch(state, services, first, first_party)
    _dispatch(state, services, second, second_party)

    events = services.scheduler.tick(state, 5.0)

    assert [e.quest_id for e in events if isinstance(e, QuestPhaseChangedEvent)] == ["quest_first", "quest_second"]


def test_rest_completes_after_base_rest_time() -> None:
    heroes = make_party()
    quest = make_quest(travel=1.0, execute=1.0, ret=1.0)
    state, services = make_world(heroes, [quest])
    quest_service = services.quest_service
    _dispatch(state, services, quest, heroes)
    services.scheduler.tick(state, 1.0)
    quest_service.execute_quest(state, quest)
    services.scheduler.tick(state, 1.0)
    quest_service.claim_rewards(state, quest)
    quest_service.start_return(state, quest)
    services.scheduler.tick(state, 1.0)

    assert all(hero.status == "resting" and hero.injury == "fatigued" for hero in heroes)
    assert all(hero.rest_time == 15.0 for hero in heroes)

    assert services.scheduler.tick(state, 14.0) == []
    events = services.scheduler.tick(state, 1.0)

    assert sorted(e.hero_id for e in events if isinstance(e, RestCompletedEvent)) == ["h1", "h2", "h3", "h4"]
    assert all(hero.status == "idle" and hero.injury is None for hero in heroes)


def test_day_rollover_emits_new_day_event() -> None:
    state, services = make_world()

    events = services.scheduler.tick(state, 360.0)

    assert events == [NewDayEvent(day=2)]
    assert state.clock.day == 2

import pytest

from guildhall.domain.quest import Executing, QuestResult
from guildhall.domain.registry import ROSTER
from tests.helpers.builders import ScriptedRNG, make_hero, make_party, make_quest, make_world


def _assert_untouched(state, quest, heroes) -> None:
    assert quest.phase == "available"
    assert quest in state.available_quests
    assert quest not in state.active_quests
    for hero in heroes:
        assert state.registry.location_of(hero.id) == ROSTER
        assert hero.status == "idle"
        assert hero.current_quest_id is None


def test_assign_party_moves_heroes_and_starts_travel() -> None:
    heroes = make_party()
    quest = make_quest()
    state, services = make_world(heroes, [quest])

    ok, message = services.quest_service.assign_party(state, quest, heroes)

    assert ok is True
    assert "set out" in message
    assert quest.phase == "travel"
    assert quest.duration == 10.0
    assert quest in state.active_quests and quest not in state.available_quests
    assert state.registry.roster() == []
    assert [hero.id for hero in state.registry.quest_members(quest.id)] == ["h1", "h2", "h3", "h4"]
    assert all(hero.status == "traveling" for hero in heroes)
    assert len(state.proto_parties) == 1


@pytest.mark.parametrize(
    "pick, quest_kwargs, expected",
    [
        (lambda heroes: [], {}, "at least one hero"),
        (lambda heroes: heroes, {"max_heroes": 2}, "at most 2"),
        (lambda heroes: heroes[:1], {"required_power": 5}, "less than required"),
        (lambda heroes: [heroes[0], heroes[0]], {}, "only be selected once"),
    ],
)
def test_assign_party_rejections_mutate_nothing(pick, quest_kwargs, expected) -> None:
    heroes = make_party()
    quest = make_quest(**quest_kwargs)
    state, services = make_world(heroes, [quest])

    ok, message = services.quest_service.assign_party(state, quest, pick(heroes))

    assert ok is False
    assert expected in message
    _assert_untouched(state, quest, heroes)
    assert state.proto_parties == {}


def test_assign_party_rejects_resting_hero() -> None:
    heroes = make_party()
    heroes[2].status = "resting"
    quest = make_quest()
    state, services = make_world(heroes, [quest])

    ok, message = services.quest_service.assign_party(state, quest, heroes)

    assert ok is False
    assert "resting" in message
    assert quest.phase == "available"
    assert len(state.registry.roster()) == 4


def test_assign_party_rejects_hero_outside_registry() -> None:
    heroes = make_party()
    quest = make_quest()
    state, services = make_world(heroes[:3], [quest])

    ok, message = services.quest_service.assign_party(state, quest, heroes)

    assert ok is False
    assert "not in the roster" in message


def test_assign_party_rejects_quest_already_underway() -> None:
    first, second = make_party("a"), make_party("b")
    quest = make_quest()
    state, services = make_world(first + second, [quest])
    assert services.quest_service.assign_party(state, quest, first)[0] is True

    ok, message = services.quest_service.assign_party(state, quest, second)

    assert ok is False
    assert "not available" in message
    assert all(state.registry.location_of(hero.id) == ROSTER for hero in second)


def test_commands_in_wrong_phase_are_noops() -> None:
    heroes = make_party()
    quest = make_quest()
    state, services = make_world(heroes, [quest])
    quest_service = services.quest_service

    assert quest_service.execute_quest(state, quest) is None
    assert quest_service.claim_rewards(state, quest) is None
    assert quest_service.start_return(state, quest) is None
    assert quest_service.retreat_from_dungeon(state, quest)[0] is False

    quest_service.assign_party(state, quest, heroes)
    assert quest_service.execute_quest(state, quest) is None
    assert quest_service.start_return(state, quest) is None
    assert quest.phase == "travel"


def test_execute_standard_quest_resolves_immediately() -> None:
    heroes = make_party()
    quest = make_quest(travel=0.0, execute=6.0)
    state, services = make_world(heroes, [quest])
    services.quest_service.assign_party(state, quest, heroes)
    services.scheduler.tick(state, 1.0)

    outcome = services.quest_service.execute_quest(state, quest)

    assert outcome is not None
    result, party = outcome
    assert isinstance(result, QuestResult) and result.success is True
    assert [hero.id for hero in party] == ["h1", "h2", "h3", "h4"]
    assert isinstance(quest.state, Executing)
    assert quest.state.result is result
    assert all(hero.status == "questing" for hero in heroes)


def test_claim_then_return_hands_back_cached_result() -> None:
    heroes = make_party()
    quest = make_quest(travel=0.0, execute=0.0, reward=100, xp_reward=40)
    state, services = make_world(heroes, [quest])
    quest_service = services.quest_service
    quest_service.assign_party(state, quest, heroes)
    services.scheduler.tick(state, 1.0)
    result, _ = quest_service.execute_quest(state, quest)
    services.scheduler.tick(state, 1.0)
    assert quest.phase == "awaiting_claim"
    assert all(hero.status == "at_location" for hero in heroes)

    claim = quest_service.claim_rewards(state, quest)

    assert claim is not None
    assert claim.gold == 100 and state.gold == 100
    assert claim.xp_by_hero == {"h1": 10, "h2": 10, "h3": 10, "h4": 10}
    assert quest.phase == "awaiting_return"
    assert quest_service.claim_rewards(state, quest) is None
    assert state.gold == 100

    assert quest_service.start_return(state, quest) is result
    assert quest.phase == "return"
    assert all(hero.status == "returning" for hero in heroes)


def test_retreat_from_dungeon_pays_partial_rewards() -> None:
    heroes = make_party()
    quest = make_quest(rank="B", travel=0.0, execute=30.0, floor_count=3, reward=120, xp_reward=60)
    state, services = make_world(heroes, [quest])
    quest_service = services.quest_service
    quest_service.assign_party(state, quest, heroes)
    services.scheduler.tick(state, 1.0)
    quest_service.execute_quest(state, quest)
    services.scheduler.tick(state, 10.0)

    ok, _ = quest_service.retreat_from_dungeon(state, quest)

    assert ok is True
    assert quest.phase == "return"
    assert quest.dungeon_run.has_retreated is True
    assert quest.result.success is False
    assert quest.result.floors_cleared == 1
    assert state.gold == 20
    assert quest_service.retreat_from_dungeon(state, quest)[0] is False


def test_mounts_and_passives_shorten_travel() -> None:
    from guildhall.domain.defs import ItemDef, PassiveDef

    heroes = make_party()
    for hero in heroes:
        hero.equipment.mount = ItemDef(id="riding_horse", name="Riding Horse", slot="mount", travel_speed=0.2)
    heroes[0].passive = PassiveDef(id="pathfinder", name="Pathfinder", effect="travel_time_reduction", value=0.5)
    quest = make_quest(travel=10.0, execute=10.0, ret=10.0)
    state, services = make_world(heroes, [quest])

    durations = services.quest_service.preview_durations(quest, heroes)

    assert durations.travel == pytest.approx(4.0)
    assert durations.return_time == pytest.approx(4.0)
    assert durations.execute == pytest.approx(10.0)

    heroes[1].equipment.mount = None
    assert services.quest_service.preview_durations(quest, heroes).travel == pytest.approx(5.0)


def test_previews_report_power_and_stats() -> None:
    heroes = [make_hero("h1", stat=6), make_hero("h2", class_id="mage", stat=9)]
    quest = make_quest()
    state, services = make_world(heroes, [quest], rng=ScriptedRNG())

    assert services.quest_service.party_power(heroes) == 4
    assert services.quest_service.party_stat_totals(heroes)["str"] == 15
    chance = services.quest_service.success_chance(state, quest, heroes)
    assert 0.15 <= chance <= 0.98

import pytest

from guildhall.domain.errors import DataIntegrityError
from guildhall.domain.registry import GRAVEYARD, ROSTER, HeroLocation, HeroRegistry
from tests.helpers.builders import make_hero


def _registry(*hero_ids: str) -> HeroRegistry:
    registry = HeroRegistry()
    for hero_id in hero_ids:
        registry.add_to_roster(make_hero(hero_id))
    return registry


def test_add_and_get() -> None:
    registry = _registry("h1", "h2")

    assert registry.get("h1").id == "h1"
    assert registry.location_of("h2") == ROSTER
    assert [hero.id for hero in registry.roster()] == ["h1", "h2"]
    with pytest.raises(ValueError):
        registry.add_to_roster(make_hero("h1"))


def test_missing_hero_is_integrity_error() -> None:
    registry = _registry()

    with pytest.raises(DataIntegrityError):
        registry.get("ghost")
    with pytest.raises(LookupError):
        registry.location_of("ghost")
    assert registry.find("ghost") is None


def test_dispatch_and_release_move_the_same_objects() -> None:
    registry = _registry("h1", "h2", "h3")
    original = registry.get("h1")

    moved = registry.dispatch(["h1", "h2"], "quest_1")

    assert moved[0] is original
    assert registry.location_of("h1") == HeroLocation("quest", "quest_1")
    assert original.current_quest_id == "quest_1"
    assert [hero.id for hero in registry.roster()] == ["h3"]
    assert registry.audit() == []

    released = registry.release("quest_1")

    assert [hero.id for hero in released] == ["h1", "h2"]
    assert registry.location_of("h1") == ROSTER
    assert original.current_quest_id is None
    assert registry.quest_members("quest_1") == []


def test_dispatch_is_all_or_nothing() -> None:
    registry = _registry("h1", "h2")
    registry.dispatch(["h2"], "quest_1")

    with pytest.raises(ValueError):
        registry.dispatch(["h1", "h2"], "quest_2")
    with pytest.raises(DataIntegrityError):
        registry.dispatch(["h1", "ghost"], "quest_3")

    assert registry.location_of("h1") == ROSTER
    assert registry.quest_members("quest_2") == []
    assert registry.audit() == []


def test_bury_happens_exactly_once() -> None:
    registry = _registry("h1", "h2")
    registry.dispatch(["h1"], "quest_1")

    assert registry.bury("h1", note="Fell") is True
    assert registry.bury("h1") is False

    assert registry.location_of("h1") == GRAVEYARD
    assert [hero.id for hero in registry.graveyard()] == ["h1"]
    assert registry.quest_members("quest_1") == []
    assert registry.get("h1").death_note == "Fell"
    assert registry.audit() == []


def test_resting_and_idle_views() -> None:
    registry = _registry("h1", "h2")
    registry.get("h2").status = "resting"

    assert [hero.id for hero in registry.idle_heroes()] == ["h1"]
    assert [hero.id for hero in registry.resting_heroes()] == ["h2"]

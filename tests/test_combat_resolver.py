import pytest

from guildhall.data.repositories import RanksRepository
from guildhall.services.combat_resolver import CombatResolver
from tests.helpers.builders import ScriptedRNG, make_hero, make_party, make_quest


def _resolver(rng: ScriptedRNG) -> CombatResolver:
    return CombatResolver(ranks_repo=RanksRepository(), rng=rng)


def test_success_pays_full_rewards() -> None:
    rng = ScriptedRNG([0.0])
    quest = make_quest(reward=100, xp_reward=40)

    result = _resolver(rng).resolve(quest, make_party())

    assert result.success is True
    assert (result.gold_reward, result.xp_reward) == (100, 40)
    assert result.rerolled is False
    assert result.deaths == [] and result.injuries == []


def test_failure_pays_partial_rewards() -> None:
    rng = ScriptedRNG(default=0.99)
    quest = make_quest(combat=False, reward=100, xp_reward=40)

    result = _resolver(rng).resolve(quest, make_party())

    assert result.success is False
    assert (result.gold_reward, result.xp_reward) == (20, 12)


def test_reroll_happens_at_most_once() -> None:
    rng = ScriptedRNG(default=0.99)
    quest = make_quest(combat=False)

    result = _resolver(rng).resolve(quest, make_party(), can_reroll=True)

    assert result.success is False
    assert result.rerolled is True
    assert rng.calls == 2


def test_no_reroll_without_formed_party() -> None:
    rng = ScriptedRNG(default=0.99)
    quest = make_quest(combat=False)

    result = _resolver(rng).resolve(quest, make_party(), can_reroll=False)

    assert result.rerolled is False
    assert rng.calls == 1


def test_reroll_can_turn_failure_into_success() -> None:
    rng = ScriptedRNG([0.99, 0.0])
    quest = make_quest()

    result = _resolver(rng).resolve(quest, make_party(), can_reroll=True)

    assert result.success is True
    assert result.rerolled is True


def test_successful_first_draw_does_not_reroll() -> None:
    rng = ScriptedRNG([0.0])

    result = _resolver(rng).resolve(make_quest(), make_party(), can_reroll=True)

    assert result.rerolled is False
    assert rng.calls == 1


def test_low_rank_combat_failure_injures_without_death_rolls() -> None:
    rng = ScriptedRNG(default=0.99)
    heroes = make_party()

    result = _resolver(rng).resolve(make_quest(rank="B"), heroes)

    assert result.deaths == []
    assert result.injuries == [hero.id for hero in heroes]
    assert rng.calls == 1


def test_high_rank_failure_rolls_death_per_hero() -> None:
    rng = ScriptedRNG([0.99, 0.1, 0.9, 0.1, 0.9])
    heroes = make_party()

    result = _resolver(rng).resolve(make_quest(rank="A", required_power=1), heroes)

    assert result.deaths == ["h1", "h3"]
    assert result.injuries == ["h2", "h4"]


def test_protector_softens_death_rolls() -> None:
    rng = ScriptedRNG([0.99, 0.1, 0.1, 0.1, 0.1])
    heroes = make_party()
    heroes[3].protector = True

    result = _resolver(rng).resolve(make_quest(rank="A", required_power=1), heroes)

    assert result.deaths == []
    assert "protection" in result.message


def test_success_chance_follows_power_ratio_and_stats() -> None:
    resolver = _resolver(ScriptedRNG())
    quest = make_quest(rank="C", required_power=2)
    heroes = [make_hero("h1", power=2, stat=7, luck=5)]

    assert resolver.success_chance(quest, heroes) == pytest.approx(0.60)
    assert resolver.success_chance(quest, heroes, luck_bonus=3) == pytest.approx(0.63)

    heroes[0].stats.strength = 12
    assert resolver.success_chance(quest, heroes) == pytest.approx(0.70)


def test_success_chance_is_clamped() -> None:
    resolver = _resolver(ScriptedRNG())
    weak = [make_hero("h1", power=1, stat=1, luck=1)]
    strong = make_party()

    assert resolver.success_chance(make_quest(rank="S", required_power=5), weak) == pytest.approx(0.15)
    assert resolver.success_chance(make_quest(required_power=1), strong) == pytest.approx(0.98)
    assert resolver.success_chance(make_quest(), []) == 0.0

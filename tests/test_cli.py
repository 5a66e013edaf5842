from pathlib import Path

from guildhall.core.rng import RNG
from guildhall.main import main
from guildhall.presentation.cli.app import build_services, new_game, run_simulation


def test_main_runs_seeded_simulation(tmp_path: Path, capsys) -> None:
    exit_code = main(["--seed", "7", "--ticks", "50", "--config", str(tmp_path / "missing.json")])

    output = capsys.readouterr().out
    assert exit_code == 0
    assert "=== Guildhall (seed 7) ===" in output
    assert "travel -> awaiting_execute" in output
    assert "gold" in output.splitlines()[-1]


def test_simulation_keeps_every_hero_in_one_place() -> None:
    rng = RNG(11)
    services = build_services(rng)
    state = new_game(11, services, rng)
    hero_count = len(state.registry)

    run_simulation(state, services, ticks=200, tick_seconds=1.0)

    assert state.registry.audit() == []
    assert len(state.registry) == hero_count
    assert all(quest.phase not in ("completed", "failed") for quest in state.active_quests)


def test_simulation_is_deterministic_per_seed() -> None:
    def play(seed: int) -> list[str]:
        rng = RNG(seed)
        services = build_services(rng)
        state = new_game(seed, services, rng)
        return [repr(event) for event in run_simulation(state, services, ticks=80, tick_seconds=1.0)]

    assert play(5) == play(5)

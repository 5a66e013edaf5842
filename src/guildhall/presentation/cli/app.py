"""Headless, seeded runner that drives the quest lifecycle and prints events."""
from __future__ import annotations

import argparse
import logging
import secrets
from dataclasses import dataclass
from pathlib import Path
from typing import List, Sequence

from guildhall.core.rng import RNG
from guildhall.data.repositories import (
    ClassesRepository,
    ItemsRepository,
    QuestsRepository,
    RanksRepository,
    TraitsRepository,
)
from guildhall.domain.quest import Quest
from guildhall.domain.state import GameState
from guildhall.services import (
    CombatResolver,
    EquipmentService,
    FloorResolvedEvent,
    FloorResolver,
    HeroDiedEvent,
    HeroLeveledUpEvent,
    HeroRevivedEvent,
    NewDayEvent,
    OutcomeEvent,
    OutcomeService,
    PartyBondTracker,
    PartyFormedEvent,
    PartyTraitTracker,
    PartyWipedEvent,
    PhaseStateMachine,
    QuestConcludedEvent,
    QuestPhaseChangedEvent,
    QuestScheduler,
    QuestService,
    QuestSkippedEvent,
    RestCompletedEvent,
    TraitEarnedEvent,
)
from guildhall.services.factories import create_hero, generate_quest_pool

from .config import load_config

_MAX_RANDOM_SEED = 2**31 - 1
_STARTING_ROSTER = (
    ("knight", "C"),
    ("archer", "C"),
    ("mage", "C"),
    ("priest", "C"),
    ("rogue", "D"),
    ("ranger", "D"),
    ("cleric", "B"),
    ("knight", "B"),
)
_STARTING_ITEMS = {"knight": "riding_horse", "archer": "riding_horse", "mage": "donkey", "priest": "phoenix_feather"}
_QUEST_POOL_SIZE = 4


@dataclass(slots=True)
class GuildServices:
    """Everything wired together for one seeded run."""

    classes_repo: ClassesRepository
    ranks_repo: RanksRepository
    quests_repo: QuestsRepository
    items_repo: ItemsRepository
    traits_repo: TraitsRepository
    equipment_service: EquipmentService
    quest_service: QuestService
    scheduler: QuestScheduler
    bond_tracker: PartyBondTracker
    outcome_service: OutcomeService
    phase_machine: PhaseStateMachine


def build_services(rng: RNG, base_path: Path | str | None = None) -> GuildServices:
    ranks_repo = RanksRepository(base_path=base_path)
    classes_repo = ClassesRepository(base_path=base_path)
    quests_repo = QuestsRepository(ranks_repo=ranks_repo, base_path=base_path)
    items_repo = ItemsRepository(base_path=base_path)
    traits_repo = TraitsRepository(base_path=base_path)
    bond_tracker = PartyBondTracker(rng=rng, traits=PartyTraitTracker(traits_repo=traits_repo))
    combat_resolver = CombatResolver(ranks_repo=ranks_repo, rng=rng)
    floor_resolver = FloorResolver(ranks_repo=ranks_repo, rng=rng)
    outcome_service = OutcomeService(ranks_repo=ranks_repo, bond_tracker=bond_tracker, rng=rng)
    phase_machine = PhaseStateMachine(
        floor_resolver=floor_resolver,
        bond_tracker=bond_tracker,
        outcome_service=outcome_service,
    )
    return GuildServices(
        classes_repo=classes_repo,
        ranks_repo=ranks_repo,
        quests_repo=quests_repo,
        items_repo=items_repo,
        traits_repo=traits_repo,
        equipment_service=EquipmentService(items_repo=items_repo),
        quest_service=QuestService(
            combat_resolver=combat_resolver,
            floor_resolver=floor_resolver,
            bond_tracker=bond_tracker,
            phase_machine=phase_machine,
            outcome_service=outcome_service,
        ),
        scheduler=QuestScheduler(phase_machine=phase_machine, outcome_service=outcome_service),
        bond_tracker=bond_tracker,
        outcome_service=outcome_service,
        phase_machine=phase_machine,
    )


def new_game(seed: int, services: GuildServices, rng: RNG) -> GameState:
    state = GameState(seed=seed, rng=rng, gold=100)
    for class_id, rank in _STARTING_ROSTER:
        hero = create_hero(class_id, rank, services.classes_repo, services.ranks_repo, rng)
        item_id = _STARTING_ITEMS.get(class_id)
        if item_id is not None:
            services.equipment_service.equip(hero, item_id)
        state.registry.add_to_roster(hero)
    state.available_quests.extend(
        generate_quest_pool(_QUEST_POOL_SIZE, services.quests_repo, services.ranks_repo, rng, max_rank="B")
    )
    return state


def run_simulation(
    state: GameState,
    services: GuildServices,
    *,
    ticks: int,
    tick_seconds: float,
) -> List[OutcomeEvent]:
    """Play the guild on autopilot: dispatch, execute, claim and return as soon as allowed."""
    events: List[OutcomeEvent] = []
    for _ in range(ticks):
        _issue_commands(state, services)
        events.extend(services.scheduler.tick(state, tick_seconds))
        if len(state.available_quests) < _QUEST_POOL_SIZE // 2:
            state.available_quests.extend(
                generate_quest_pool(
                    _QUEST_POOL_SIZE, services.quests_repo, services.ranks_repo, state.rng, max_rank="B"
                )
            )
    return events


def _issue_commands(state: GameState, services: GuildServices) -> None:
    quest_service = services.quest_service
    for quest in list(state.active_quests):
        if quest.phase == "awaiting_execute":
            quest_service.execute_quest(state, quest)
        elif quest.phase == "awaiting_claim":
            quest_service.claim_rewards(state, quest)
        elif quest.phase == "awaiting_return":
            quest_service.start_return(state, quest)
    for quest in list(state.available_quests):
        _try_dispatch(state, services, quest)


def _try_dispatch(state: GameState, services: GuildServices, quest: Quest) -> None:
    idle = state.registry.idle_heroes()
    if not idle:
        return
    idle.sort(key=lambda hero: hero.stats.get(quest.required_stat), reverse=True)
    party = idle[: quest.max_heroes]
    ok, message = services.quest_service.assign_party(state, quest, party)
    if not ok:
        logging.getLogger(__name__).debug("Could not dispatch to %s: %s", quest.name, message)


def format_event(event: OutcomeEvent) -> str | None:
    if isinstance(event, QuestPhaseChangedEvent):
        return f"[quest {event.quest_id}] {event.from_phase} -> {event.to_phase}"
    if isinstance(event, FloorResolvedEvent):
        verdict = "cleared" if event.success else "failed"
        return f"[quest {event.quest_id}] floor {event.floor_number} {verdict}"
    if isinstance(event, PartyWipedEvent):
        return f"[quest {event.quest_id}] party wiped on floor {event.floor_number}"
    if isinstance(event, QuestConcludedEvent):
        return f"[quest {event.quest_id}] concluded: {'success' if event.success else 'failure'}"
    if isinstance(event, QuestSkippedEvent):
        return f"[quest {event.quest_id}] skipped: {event.reason}"
    if isinstance(event, HeroDiedEvent):
        return f"[hero {event.hero_id}] died"
    if isinstance(event, HeroRevivedEvent):
        return f"[hero {event.hero_id}] revived by {event.item_id}"
    if isinstance(event, HeroLeveledUpEvent):
        return f"[hero {event.hero_id}] reached level {event.level} (+1 {event.stat_raised})"
    if isinstance(event, RestCompletedEvent):
        return f"[hero {event.hero_id}] finished resting"
    if isinstance(event, PartyFormedEvent):
        return f"[party {event.party_id}] {event.party_name} formed"
    if isinstance(event, TraitEarnedEvent):
        return f"[party {event.party_id}] earned {event.trait_name}"
    if isinstance(event, NewDayEvent):
        return f"--- Day {event.day} ---"
    return None


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="guildhall", description="Run a seeded guild simulation.")
    parser.add_argument("--seed", type=int, default=None, help="RNG seed (random when omitted).")
    parser.add_argument("--ticks", type=int, default=None, help="Number of ticks to simulate.")
    parser.add_argument("--tick-seconds", type=float, default=None, help="Seconds of game time per tick.")
    parser.add_argument("--config", type=Path, default=None, help="Path to a JSON config file.")
    parser.add_argument("--log-level", default=None, help="Logging level (DEBUG, INFO, WARNING, ERROR).")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Parse arguments, run the simulation and print its events."""
    args = _build_parser().parse_args(argv)
    config = load_config(args.config)
    logging.basicConfig(
        level=(args.log_level or str(config["log_level"])).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    seed = args.seed if args.seed is not None else secrets.randbelow(_MAX_RANDOM_SEED)
    ticks = args.ticks if args.ticks is not None else int(config["ticks"])
    tick_seconds = args.tick_seconds if args.tick_seconds is not None else float(config["tick_seconds"])

    rng = RNG(seed)
    services = build_services(rng)
    state = new_game(seed, services, rng)
    print(f"=== Guildhall (seed {seed}) ===")
    for event in run_simulation(state, services, ticks=ticks, tick_seconds=tick_seconds):
        line = format_event(event)
        if line is not None:
            print(line)
    print(
        f"Day {state.clock.day}: {state.gold} gold, {len(state.registry.roster())} heroes, "
        f"{len(state.registry.graveyard())} fallen, {len(state.parties)} formed parties."
    )
    return 0

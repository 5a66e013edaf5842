"""Applies a quest result to the guild: gold, XP, casualties, injuries, bonds and rest."""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Dict, List, Literal

from guildhall.core.rng import RNG
from guildhall.data.repositories import RanksRepository
from guildhall.domain.entities import Hero
from guildhall.domain.injury import determine_injury, heal_one_tier, rest_duration, worse_of
from guildhall.domain.party import Party
from guildhall.domain.passives import aggregate_effects
from guildhall.domain.progression import add_xp, rank_xp_multiplier
from guildhall.domain.quest import Quest, QuestResult
from guildhall.domain.state import GameState
from guildhall.services.combat_resolver import has_protector
from guildhall.services.equipment_service import consume_revive_item
from guildhall.services.events import (
    GoldGainedEvent,
    HeroDiedEvent,
    HeroLeveledUpEvent,
    HeroRevivedEvent,
    OutcomeEvent,
    PartyFormedEvent,
    RestCompletedEvent,
    TraitEarnedEvent,
)
from guildhall.services.party_bond_tracker import PartyBondTracker
from guildhall.services.party_traits import TraitEvent

logger = logging.getLogger(__name__)

HeroOutcome = Literal["died", "revived", "injured", "unaffected"]


@dataclass(slots=True)
class ClaimResult:
    """What happened to the guild and each hero when a result was applied."""

    quest_id: str
    success: bool
    gold: int
    xp_by_hero: Dict[str, int] = field(default_factory=dict)
    outcomes: Dict[str, HeroOutcome] = field(default_factory=dict)
    formed_party: Party | None = None
    earned_traits: List[str] = field(default_factory=list)
    events: List[OutcomeEvent] = field(default_factory=list)


class OutcomeService:
    def __init__(
        self,
        *,
        ranks_repo: RanksRepository,
        bond_tracker: PartyBondTracker,
        rng: RNG,
    ) -> None:
        self._ranks_repo = ranks_repo
        self._bond_tracker = bond_tracker
        self._rng = rng

    def apply_result(self, state: GameState, quest: Quest, result: QuestResult) -> ClaimResult:
        """Settle a result exactly once; every hero ends with a single outcome."""
        heroes = state.registry.quest_members(quest.id)
        effects = aggregate_effects(heroes)
        protector = has_protector(heroes)
        # Resolved before casualties, which may leave the party short a member.
        party = self._bond_tracker.formed_party_for(state, heroes)
        traits = self._bond_tracker.trait_bonuses(state, heroes)
        claim = ClaimResult(quest_id=quest.id, success=result.success, gold=0)

        gold = math.floor(result.gold_reward * (1.0 + effects.gold_bonus + traits.gold_bonus))
        state.gold += gold
        claim.gold = gold
        claim.events.append(GoldGainedEvent(amount=gold, total_gold=state.gold))

        survivors: List[Hero] = []
        for hero in heroes:
            if hero.id not in result.deaths:
                survivors.append(hero)
                continue
            item = consume_revive_item(hero)
            if item is not None:
                hero.injury = "wounded"
                claim.outcomes[hero.id] = "revived"
                claim.events.append(HeroRevivedEvent(hero_id=hero.id, quest_id=quest.id, item_id=item.id))
                logger.info("%s was revived by %s on %s", hero.name, item.name, quest.name)
                survivors.append(hero)
                continue
            self._bond_tracker.remove_member(state, hero.id)
            state.registry.bury(hero.id, note=f"Fell during {quest.name} on day {state.clock.day}.")
            claim.outcomes[hero.id] = "died"
            claim.events.append(HeroDiedEvent(hero_id=hero.id, quest_id=quest.id))
            logger.info("%s died on %s", hero.name, quest.name)

        share = result.xp_reward / len(heroes) if heroes else 0.0
        for hero in survivors:
            multiplier = rank_xp_multiplier(quest.rank, hero.rank) if result.success else 1.0
            amount = math.floor(share * multiplier * (1.0 + effects.xp_bonus))
            claim.xp_by_hero[hero.id] = amount
            for stat in add_xp(hero, amount, self._rng):
                claim.events.append(HeroLeveledUpEvent(hero_id=hero.id, level=hero.level, stat_raised=stat))
            if claim.outcomes.get(hero.id) == "revived":
                continue
            tier = determine_injury(quest.rank, result.success, protector)
            if hero.id in result.injuries:
                tier = worse_of(tier, "injured")
            if tier is None:
                claim.outcomes[hero.id] = "unaffected"
            else:
                hero.injury = worse_of(hero.injury, tier)
                claim.outcomes[hero.id] = "injured"

        trait_event = TraitEvent(
            quest_rank=quest.rank,
            success=result.success,
            is_dungeon=quest.is_dungeon,
            any_death=bool(result.deaths),
            no_injuries=not result.deaths and not result.injuries,
            used_reroll=result.rerolled,
            gold_earned=gold,
            success_chance=result.success_chance,
        )
        for trait in self._bond_tracker.record_trait_event(state, party, trait_event):
            claim.earned_traits.append(trait.id)
            claim.events.append(TraitEarnedEvent(party_id=party.id, trait_id=trait.id, trait_name=trait.name))

        if result.success and len(survivors) == len(heroes):
            bonded, just_formed = self._bond_tracker.record_quest_success(state, survivors)
            if just_formed and bonded is not None:
                claim.formed_party = bonded
                claim.events.append(
                    PartyFormedEvent(party_id=bonded.id, party_name=bonded.name, member_ids=list(bonded.member_ids))
                )

        logger.info(
            "Settled %s: success=%s gold=%d casualties=%d",
            quest.name,
            result.success,
            gold,
            sum(1 for outcome in claim.outcomes.values() if outcome == "died"),
        )
        return claim

    def send_home(self, state: GameState, quest: Quest) -> List[Hero]:
        """Release a quest's survivors to the roster and start their rest."""
        heroes = state.registry.release(quest.id)
        recovery = aggregate_effects(heroes).recovery_reduction
        for hero in heroes:
            base_rest = self._ranks_repo.get(hero.rank).base_rest_time
            hero.rest_progress = 0.0
            hero.rest_time = rest_duration(base_rest, hero.injury, recovery)
            hero.status = "resting" if hero.rest_time > 0 else "idle"
        return heroes

    def advance_rest(self, heroes: List[Hero], dt: float) -> List[OutcomeEvent]:
        events: List[OutcomeEvent] = []
        for hero in heroes:
            if not hero.is_resting:
                continue
            hero.rest_progress += dt
            if hero.rest_progress < hero.rest_time:
                continue
            hero.injury = heal_one_tier(hero.injury)
            hero.status = "idle"
            hero.rest_progress = 0.0
            hero.rest_time = 0.0
            events.append(RestCompletedEvent(hero_id=hero.id, injury=hero.injury))
            logger.debug("%s finished resting", hero.name)
        return events

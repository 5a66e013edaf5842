"""Tracks groups of four heroes who keep succeeding together.

A group starts as a proto-party the first time the same four distinct-class
heroes set out together. Once every member has ``quests_to_form`` joint
successes the group is promoted to a formed party and its members are tagged
with the party id. Formed parties grant a luck bonus, a single re-roll on
failure and, with a protector aboard, softer death rolls. When a trait
tracker is attached, formed parties also earn traits from settled quests.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Sequence, Tuple

from guildhall.core.rng import RNG
from guildhall.domain.defs import TraitDef
from guildhall.domain.entities import Hero
from guildhall.domain.party import PARTY_SIZE, Party
from guildhall.domain.registry import GRAVEYARD
from guildhall.domain.state import GameState
from guildhall.services.errors import ValidationError
from guildhall.services.factories import make_instance_id
from guildhall.services.party_traits import PartyTraitTracker, TraitBonuses, TraitEvent

logger = logging.getLogger(__name__)

FORMED_PROTECTOR_DEATH_FACTOR = 0.5
MAX_PARTY_NAME_LENGTH = 32

_NAME_ADJECTIVES = (
    "Brave", "Iron", "Silver", "Crimson", "Golden", "Shadow", "Storm", "Wild",
    "Ember", "Frost", "Jade", "Howling", "Silent", "Thorned", "Gilded", "Ashen",
)
_NAME_NOUNS = (
    "Wolves", "Lions", "Ravens", "Blades", "Shields", "Hawks", "Serpents", "Stags",
    "Wardens", "Lanterns", "Fangs", "Banners", "Oaths", "Thorns", "Anvils", "Comets",
)


@dataclass(slots=True)
class BondConfig:
    required_members: int = PARTY_SIZE
    quests_to_form: int = 3
    luck_bonus: int = 3
    rerolls_per_quest: int = 1


def generate_party_name(rng: RNG) -> str:
    return f"The {rng.choice(_NAME_ADJECTIVES)} {rng.choice(_NAME_NOUNS)}"


class PartyBondTracker:
    def __init__(
        self,
        *,
        rng: RNG,
        config: BondConfig | None = None,
        traits: PartyTraitTracker | None = None,
    ) -> None:
        self._rng = rng
        self._config = config or BondConfig()
        self._traits = traits

    @property
    def config(self) -> BondConfig:
        return self._config

    def get_or_create_proto_party(self, state: GameState, heroes: Sequence[Hero]) -> Party | None:
        """Return the proto-party for exactly these heroes, creating it on first sight."""
        if not self._is_eligible_group(state, heroes):
            return None
        key = tuple(sorted(hero.id for hero in heroes))
        party = state.proto_parties.get(key)
        if party is None:
            party = Party(
                id=make_instance_id("party", self._rng),
                name=generate_party_name(self._rng),
                member_ids=[hero.id for hero in heroes],
                quests_together={hero.id: 0 for hero in heroes},
            )
            state.proto_parties[key] = party
            logger.debug("Tracking proto-party %s for %s", party.id, ", ".join(key))
        return party

    def record_quest_success(self, state: GameState, heroes: Sequence[Hero]) -> Tuple[Party | None, bool]:
        """Count a joint success; the second value is True only on the promoting call."""
        party = self._party_sharing_id(state, heroes)
        if party is None:
            party = self.get_or_create_proto_party(state, heroes)
        if party is None:
            return None, False

        for hero in heroes:
            party.quests_together[hero.id] = party.counter(hero.id) + 1

        if party.is_formed:
            party.total_quests_completed += 1
            return party, False
        if not self._all_qualified(party):
            return party, False

        party.is_formed = True
        party.formed_day = state.clock.day
        for hero in heroes:
            hero.party_id = party.id
        state.proto_parties.pop(party.key, None)
        state.parties[party.id] = party
        self._discard_stale_proto_parties(state, party.member_ids)
        logger.info("Party '%s' formed on day %d", party.name, state.clock.day)
        return party, True

    def formed_party_for(self, state: GameState, heroes: Sequence[Hero]) -> Party | None:
        """The formed party these exact heroes make up, if bonuses currently apply."""
        party = self._party_sharing_id(state, heroes)
        if party is None or not party.is_formed or party.has_vacancy:
            return None
        if not self._all_qualified(party):
            return None
        return party

    def record_trait_event(self, state: GameState, party: Party | None, event: TraitEvent) -> List[TraitDef]:
        """Count a settled quest toward a formed party's traits; returns newly earned ones."""
        if self._traits is None or party is None or party.id not in state.parties:
            return []
        return self._traits.record(state, party, event)

    def trait_bonuses(self, state: GameState, heroes: Sequence[Hero]) -> TraitBonuses:
        party = self.formed_party_for(state, heroes)
        if self._traits is None or party is None:
            return TraitBonuses()
        return self._traits.bonuses(party)

    def luck_bonus(self, state: GameState, heroes: Sequence[Hero]) -> int:
        return self._config.luck_bonus if self.formed_party_for(state, heroes) else 0

    def can_reroll(self, state: GameState, heroes: Sequence[Hero]) -> bool:
        return self._config.rerolls_per_quest > 0 and self.formed_party_for(state, heroes) is not None

    def death_factor(self, state: GameState, heroes: Sequence[Hero]) -> float:
        if self.formed_party_for(state, heroes) is None:
            return 1.0
        if any(hero.protector for hero in heroes):
            return FORMED_PROTECTOR_DEATH_FACTOR
        return 1.0

    def add_member(self, state: GameState, party: Party, hero: Hero) -> Tuple[bool, str]:
        try:
            self._validate_new_member(state, party, hero)
        except ValidationError as exc:
            return False, str(exc)
        party.member_ids.append(hero.id)
        party.quests_together[hero.id] = 0
        hero.party_id = party.id
        logger.info("%s joined party '%s'", hero.name, party.name)
        return True, f"{hero.name} joined {party.name}."

    def remove_member(self, state: GameState, hero_id: str) -> Party | None:
        """Vacate the hero's slot in any party and drop proto-parties they were in."""
        self._discard_stale_proto_parties(state, [hero_id])
        hero = state.registry.find(hero_id)
        for party in state.parties.values():
            if hero_id in party.member_ids:
                party.member_ids.remove(hero_id)
                party.quests_together.pop(hero_id, None)
                if hero is not None and hero.party_id == party.id:
                    hero.party_id = None
                logger.info("Slot vacated in party '%s' by %s", party.name, hero_id)
                return party
        return None

    def disband(self, state: GameState, party: Party) -> bool:
        if state.parties.pop(party.id, None) is None:
            return False
        for hero_id in party.member_ids:
            hero = state.registry.find(hero_id)
            if hero is not None and hero.party_id == party.id:
                hero.party_id = None
        logger.info("Party '%s' disbanded", party.name)
        return True

    def rename(self, party: Party, name: str) -> Tuple[bool, str]:
        cleaned = name.strip()
        if not cleaned:
            return False, "Party name cannot be empty."
        if len(cleaned) > MAX_PARTY_NAME_LENGTH:
            return False, f"Party name must be at most {MAX_PARTY_NAME_LENGTH} characters."
        party.name = cleaned
        return True, f"Party renamed to {cleaned}."

    def _is_eligible_group(self, state: GameState, heroes: Sequence[Hero]) -> bool:
        if len(heroes) != self._config.required_members:
            return False
        if len({hero.id for hero in heroes}) != len(heroes):
            return False
        if len({hero.class_id for hero in heroes}) != len(heroes):
            return False
        for hero in heroes:
            if hero.party_id is not None and hero.party_id in state.parties:
                return False
        return True

    def _party_sharing_id(self, state: GameState, heroes: Sequence[Hero]) -> Party | None:
        if not heroes:
            return None
        party_ids = {hero.party_id for hero in heroes}
        if len(party_ids) != 1:
            return None
        party_id = next(iter(party_ids))
        if party_id is None:
            return None
        party = state.parties.get(party_id)
        if party is None or sorted(party.member_ids) != sorted(hero.id for hero in heroes):
            return None
        return party

    def _all_qualified(self, party: Party) -> bool:
        return len(party.member_ids) == self._config.required_members and all(
            party.counter(hero_id) >= self._config.quests_to_form for hero_id in party.member_ids
        )

    def _validate_new_member(self, state: GameState, party: Party, hero: Hero) -> None:
        if party.id not in state.parties:
            raise ValidationError(f"{party.name} is not a formed party.")
        if not party.has_vacancy:
            raise ValidationError(f"{party.name} has no open slot.")
        if hero.id not in state.registry or state.registry.location_of(hero.id) == GRAVEYARD:
            raise ValidationError(f"{hero.name} cannot join a party.")
        if hero.party_id is not None:
            raise ValidationError(f"{hero.name} already belongs to a party.")
        member_classes = {state.registry.get(member_id).class_id for member_id in party.member_ids}
        if hero.class_id in member_classes:
            raise ValidationError(f"{party.name} already has a {hero.class_id}.")

    @staticmethod
    def _discard_stale_proto_parties(state: GameState, hero_ids: List[str]) -> None:
        stale = [key for key in state.proto_parties if any(hero_id in key for hero_id in hero_ids)]
        for key in stale:
            del state.proto_parties[key]

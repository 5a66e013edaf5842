"""Authoritative hero store.

Every hero id lives in exactly one place: the roster, one active quest's
member list, or the graveyard. All moves between those places go through
``dispatch``, ``release`` and ``bury`` so no caller ever holds a second copy.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Literal, Sequence

from guildhall.domain.entities import Hero
from guildhall.domain.errors import DataIntegrityError

LocationKind = Literal["roster", "quest", "graveyard"]


@dataclass(slots=True, frozen=True)
class HeroLocation:
    kind: LocationKind
    quest_id: str | None = None


ROSTER = HeroLocation("roster")
GRAVEYARD = HeroLocation("graveyard")


class HeroRegistry:
    def __init__(self) -> None:
        self._heroes: Dict[str, Hero] = {}
        self._locations: Dict[str, HeroLocation] = {}
        self._roster: List[str] = []
        self._quests: Dict[str, List[str]] = {}
        self._graveyard: List[str] = []

    def __contains__(self, hero_id: object) -> bool:
        return hero_id in self._heroes

    def __len__(self) -> int:
        return len(self._heroes)

    def add_to_roster(self, hero: Hero) -> Hero:
        if hero.id in self._heroes:
            raise ValueError(f"Hero '{hero.id}' is already registered.")
        self._heroes[hero.id] = hero
        self._locations[hero.id] = ROSTER
        self._roster.append(hero.id)
        return hero

    def get(self, hero_id: str) -> Hero:
        try:
            return self._heroes[hero_id]
        except KeyError as exc:
            raise DataIntegrityError(f"Hero '{hero_id}' is not in the registry.") from exc

    def find(self, hero_id: str) -> Hero | None:
        return self._heroes.get(hero_id)

    def get_many(self, hero_ids: Iterable[str]) -> List[Hero]:
        return [self.get(hero_id) for hero_id in hero_ids]

    def location_of(self, hero_id: str) -> HeroLocation:
        try:
            return self._locations[hero_id]
        except KeyError as exc:
            raise DataIntegrityError(f"Hero '{hero_id}' has no location.") from exc

    def roster(self) -> List[Hero]:
        return [self._heroes[hero_id] for hero_id in self._roster]

    def idle_heroes(self) -> List[Hero]:
        return [hero for hero in self.roster() if hero.is_idle]

    def resting_heroes(self) -> List[Hero]:
        return [hero for hero in self.roster() if hero.is_resting]

    def graveyard(self) -> List[Hero]:
        return [self._heroes[hero_id] for hero_id in self._graveyard]

    def quest_members(self, quest_id: str) -> List[Hero]:
        return [self._heroes[hero_id] for hero_id in self._quests.get(quest_id, [])]

    def dispatch(self, hero_ids: Sequence[str], quest_id: str) -> List[Hero]:
        """Move heroes from the roster to a quest, all or nothing."""
        if quest_id in self._quests:
            raise ValueError(f"Quest '{quest_id}' already has heroes dispatched.")
        heroes = self.get_many(hero_ids)
        for hero in heroes:
            if self._locations[hero.id] != ROSTER:
                raise ValueError(f"Hero '{hero.id}' is not in the roster.")
        if len(set(hero_ids)) != len(hero_ids):
            raise ValueError("A hero cannot be dispatched twice to the same quest.")
        for hero in heroes:
            self._roster.remove(hero.id)
            self._locations[hero.id] = HeroLocation("quest", quest_id)
            hero.current_quest_id = quest_id
        self._quests[quest_id] = list(hero_ids)
        return heroes

    def release(self, quest_id: str) -> List[Hero]:
        """Return every living member of a quest to the roster."""
        hero_ids = self._quests.pop(quest_id, [])
        heroes = []
        for hero_id in hero_ids:
            hero = self._heroes[hero_id]
            hero.current_quest_id = None
            self._locations[hero_id] = ROSTER
            self._roster.append(hero_id)
            heroes.append(hero)
        return heroes

    def bury(self, hero_id: str, note: str | None = None) -> bool:
        """Move a hero to the graveyard; returns False if already buried."""
        location = self.location_of(hero_id)
        if location == GRAVEYARD:
            return False
        if location.kind == "quest":
            self._quests[location.quest_id].remove(hero_id)
        else:
            self._roster.remove(hero_id)
        hero = self._heroes[hero_id]
        hero.current_quest_id = None
        hero.party_id = None
        hero.death_note = note
        self._locations[hero_id] = GRAVEYARD
        self._graveyard.append(hero_id)
        return True

    def audit(self) -> List[str]:
        """Return every violation of the single-location rule (empty when sound)."""
        problems: List[str] = []
        seen: Dict[str, str] = {}
        places = [("roster", self._roster), ("graveyard", self._graveyard)]
        places.extend((f"quest:{quest_id}", ids) for quest_id, ids in self._quests.items())
        for label, hero_ids in places:
            for hero_id in hero_ids:
                if hero_id in seen:
                    problems.append(f"Hero '{hero_id}' is in both {seen[hero_id]} and {label}.")
                seen[hero_id] = label
        for hero_id in self._heroes:
            if hero_id not in seen:
                problems.append(f"Hero '{hero_id}' is in no collection.")
        return problems

"""Outcome events emitted by the quest lifecycle."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List


@dataclass(slots=True)
class OutcomeEvent:
    """Base class for everything the lifecycle reports back to the driver."""


@dataclass(slots=True)
class QuestPhaseChangedEvent(OutcomeEvent):
    quest_id: str
    from_phase: str
    to_phase: str


@dataclass(slots=True)
class FloorResolvedEvent(OutcomeEvent):
    quest_id: str
    floor_number: int
    success: bool
    deaths: List[str] = field(default_factory=list)


@dataclass(slots=True)
class PartyWipedEvent(OutcomeEvent):
    quest_id: str
    floor_number: int


@dataclass(slots=True)
class QuestConcludedEvent(OutcomeEvent):
    quest_id: str
    success: bool
    survivor_ids: List[str] = field(default_factory=list)


@dataclass(slots=True)
class QuestSkippedEvent(OutcomeEvent):
    quest_id: str
    reason: str


@dataclass(slots=True)
class HeroDiedEvent(OutcomeEvent):
    hero_id: str
    quest_id: str


@dataclass(slots=True)
class HeroRevivedEvent(OutcomeEvent):
    hero_id: str
    quest_id: str
    item_id: str


@dataclass(slots=True)
class HeroLeveledUpEvent(OutcomeEvent):
    hero_id: str
    level: int
    stat_raised: str


@dataclass(slots=True)
class RestCompletedEvent(OutcomeEvent):
    hero_id: str
    injury: str | None


@dataclass(slots=True)
class PartyFormedEvent(OutcomeEvent):
    party_id: str
    party_name: str
    member_ids: List[str]


@dataclass(slots=True)
class GoldGainedEvent(OutcomeEvent):
    amount: int
    total_gold: int


@dataclass(slots=True)
class NewDayEvent(OutcomeEvent):
    day: int


@dataclass(slots=True)
class TraitEarnedEvent(OutcomeEvent):
    party_id: str
    trait_id: str
    trait_name: str

"""Service layer exports."""

from .errors import DataIntegrityError, FactoryError, InvalidTransitionError, ValidationError
from .events import (
    FloorResolvedEvent,
    GoldGainedEvent,
    HeroDiedEvent,
    HeroLeveledUpEvent,
    HeroRevivedEvent,
    NewDayEvent,
    OutcomeEvent,
    PartyFormedEvent,
    PartyWipedEvent,
    QuestConcludedEvent,
    QuestPhaseChangedEvent,
    QuestSkippedEvent,
    RestCompletedEvent,
    TraitEarnedEvent,
)
from .party_traits import PartyTraitTracker, TraitBonuses, TraitEvent
from .combat_resolver import CombatResolver
from .floor_resolver import FloorResolver
from .party_bond_tracker import BondConfig, PartyBondTracker
from .outcome_service import ClaimResult, OutcomeService
from .phase_machine import PhaseDurations, PhaseStateMachine
from .quest_service import QuestService
from .quest_scheduler import QuestScheduler
from .equipment_service import EquipmentService

__all__ = [
    "BondConfig",
    "ClaimResult",
    "CombatResolver",
    "DataIntegrityError",
    "EquipmentService",
    "FactoryError",
    "FloorResolvedEvent",
    "FloorResolver",
    "GoldGainedEvent",
    "HeroDiedEvent",
    "HeroLeveledUpEvent",
    "HeroRevivedEvent",
    "InvalidTransitionError",
    "NewDayEvent",
    "OutcomeEvent",
    "OutcomeService",
    "PartyBondTracker",
    "PartyFormedEvent",
    "PartyTraitTracker",
    "PartyWipedEvent",
    "PhaseDurations",
    "PhaseStateMachine",
    "QuestConcludedEvent",
    "QuestPhaseChangedEvent",
    "QuestScheduler",
    "QuestService",
    "QuestSkippedEvent",
    "RestCompletedEvent",
    "TraitBonuses",
    "TraitEarnedEvent",
    "TraitEvent",
    "ValidationError",
]

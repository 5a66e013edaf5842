"""Domain-level state tracking."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List

from guildhall.core.rng import RNG
from guildhall.domain.clock import GuildClock
from guildhall.domain.party import Party
from guildhall.domain.quest import Quest
from guildhall.domain.registry import HeroRegistry


@dataclass
class GameState:
    """Everything the quest lifecycle reads and mutates."""

    seed: int
    rng: RNG
    registry: HeroRegistry = field(default_factory=HeroRegistry)
    available_quests: List[Quest] = field(default_factory=list)
    active_quests: List[Quest] = field(default_factory=list)
    proto_parties: Dict[tuple, Party] = field(default_factory=dict)
    parties: Dict[str, Party] = field(default_factory=dict)
    gold: int = 0
    clock: GuildClock = field(default_factory=GuildClock)

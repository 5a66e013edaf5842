"""Quest runtime model and its phase states.

A quest's ``state`` is always exactly one of the phase records below. Each
record carries only what is meaningful in that phase: timed phases know their
duration, and every phase after execution carries the cached result.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import ClassVar, Dict, List, Union

from guildhall.core.types import QuestPhase


@dataclass(slots=True)
class FloorResult:
    """Outcome of one dungeon floor."""

    floor_number: int
    success: bool
    gold: int = 0
    xp: int = 0
    deaths: List[str] = field(default_factory=list)
    injuries: List[str] = field(default_factory=list)
    party_wiped: bool = False


@dataclass(slots=True)
class QuestResult:
    """Resolution of a whole quest, cached until rewards are applied."""

    success: bool
    gold_reward: int
    xp_reward: int
    message: str
    combat_log: List[str] = field(default_factory=list)
    deaths: List[str] = field(default_factory=list)
    injuries: List[str] = field(default_factory=list)
    rerolled: bool = False
    floors_cleared: int | None = None
    # odds of the deciding draw; None for dungeons
    success_chance: float | None = None


@dataclass(slots=True)
class DungeonRun:
    current_floor: int = 0
    floor_results: List[FloorResult] = field(default_factory=list)
    has_retreated: bool = False
    fallen_ids: List[str] = field(default_factory=list)

    @property
    def floors_succeeded(self) -> int:
        return sum(1 for floor in self.floor_results if floor.success)

    @property
    def party_wiped(self) -> bool:
        return any(floor.party_wiped for floor in self.floor_results)


@dataclass(slots=True, frozen=True)
class Available:
    phase: ClassVar[QuestPhase] = "available"


@dataclass(slots=True, frozen=True)
class Traveling:
    duration: float
    phase: ClassVar[QuestPhase] = "travel"


@dataclass(slots=True, frozen=True)
class AwaitingExecute:
    phase: ClassVar[QuestPhase] = "awaiting_execute"


@dataclass(slots=True, frozen=True)
class Executing:
    duration: float
    result: QuestResult | None = None
    phase: ClassVar[QuestPhase] = "execute"


@dataclass(slots=True, frozen=True)
class AwaitingClaim:
    result: QuestResult
    phase: ClassVar[QuestPhase] = "awaiting_claim"


@dataclass(slots=True, frozen=True)
class AwaitingReturn:
    result: QuestResult
    phase: ClassVar[QuestPhase] = "awaiting_return"


@dataclass(slots=True, frozen=True)
class Returning:
    duration: float
    result: QuestResult
    phase: ClassVar[QuestPhase] = "return"


@dataclass(slots=True, frozen=True)
class Concluded:
    result: QuestResult

    @property
    def phase(self) -> QuestPhase:
        return "completed" if self.result.success else "failed"


QuestState = Union[
    Available,
    Traveling,
    AwaitingExecute,
    Executing,
    AwaitingClaim,
    AwaitingReturn,
    Returning,
    Concluded,
]

PHASE_INDEX: Dict[str, int] = {
    "available": 0,
    "travel": 1,
    "awaiting_execute": 2,
    "execute": 3,
    "awaiting_claim": 4,
    "awaiting_return": 5,
    "return": 6,
    "completed": 7,
    "failed": 7,
}

TIMED_PHASES = frozenset({"travel", "execute", "return"})


@dataclass(slots=True)
class Quest:
    id: str
    name: str
    template_id: str
    rank: str
    combat: bool
    required_stat: str
    required_power: int
    max_heroes: int
    travel_time: float
    execute_time: float
    return_time: float
    reward: int
    xp_reward: int
    floor_count: int = 0
    death_floor: int = 1
    hero_ids: List[str] = field(default_factory=list)
    state: QuestState = field(default_factory=Available)
    phase_progress: float = 0.0
    dungeon_run: DungeonRun | None = None

    @property
    def phase(self) -> QuestPhase:
        return self.state.phase

    @property
    def phase_index(self) -> int:
        return PHASE_INDEX[self.state.phase]

    @property
    def is_dungeon(self) -> bool:
        return self.floor_count > 0

    @property
    def is_terminal(self) -> bool:
        return isinstance(self.state, Concluded)

    @property
    def is_timed(self) -> bool:
        return self.state.phase in TIMED_PHASES

    @property
    def duration(self) -> float | None:
        return getattr(self.state, "duration", None)

    @property
    def result(self) -> QuestResult | None:
        return getattr(self.state, "result", None)

"""Shared type aliases for the core and domain layers."""
from typing import Literal, Tuple

Rank = Literal["D", "C", "B", "A", "S"]
StatName = Literal["str", "dex", "int", "vit", "luck"]
InjuryTier = Literal["fatigued", "injured", "wounded"]
HeroStatus = Literal[
    "idle",
    "traveling",
    "at_location",
    "questing",
    "awaiting_execute",
    "awaiting_return",
    "returning",
    "resting",
]
QuestPhase = Literal[
    "available",
    "travel",
    "awaiting_execute",
    "execute",
    "awaiting_claim",
    "awaiting_return",
    "return",
    "completed",
    "failed",
]

RANK_ORDER: Tuple[Rank, ...] = ("D", "C", "B", "A", "S")
STAT_NAMES: Tuple[StatName, ...] = ("str", "dex", "int", "vit", "luck")


def rank_index(rank: str) -> int:
    """Return the position of ``rank`` in the D..S ladder."""
    try:
        return RANK_ORDER.index(rank)  # type: ignore[arg-type]
    except ValueError as exc:
        raise ValueError(f"Unknown rank '{rank}'.") from exc


__all__ = [
    "HeroStatus",
    "InjuryTier",
    "QuestPhase",
    "RANK_ORDER",
    "Rank",
    "STAT_NAMES",
    "StatName",
    "rank_index",
]

"""Equipment item definitions relevant to quests."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

ItemSlot = Literal["mount", "accessory"]


@dataclass(slots=True)
class ItemDef:
    """A mount (travel speed) or accessory (optionally a revive charm)."""

    id: str
    name: str
    slot: ItemSlot
    travel_speed: float = 0.0
    revive: bool = False

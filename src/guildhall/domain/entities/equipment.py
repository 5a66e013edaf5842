"""Equipment runtime models."""
from __future__ import annotations

from dataclasses import dataclass

from guildhall.domain.defs import ItemDef


@dataclass(slots=True)
class HeroEquipment:
    """Represents the mount and accessory a hero carries on quests."""

    mount: ItemDef | None = None
    accessory: ItemDef | None = None

    @property
    def travel_speed(self) -> float:
        return self.mount.travel_speed if self.mount is not None else 0.0

    @property
    def can_revive(self) -> bool:
        return self.accessory is not None and self.accessory.revive

"""Items repository for mounts and accessories."""
from __future__ import annotations

from typing import Dict

from guildhall.data.errors import DataValidationError
from guildhall.data.repositories.base import RepositoryBase
from guildhall.domain.defs import ItemDef


class ItemsRepository(RepositoryBase[ItemDef]):
    """Loads and validates equipment that affects quests."""

    def __init__(self, base_path=None) -> None:
        super().__init__("items.json", base_path)

    def _build(self, raw: dict[str, object]) -> Dict[str, ItemDef]:
        items: Dict[str, ItemDef] = {}
        for raw_id, payload in raw.items():
            item_data = self._require_mapping(payload, f"item '{raw_id}'")
            self._assert_exact_fields(
                item_data,
                {"name", "slot"},
                f"item '{raw_id}'",
                optional_fields={"travel_speed", "revive"},
            )
            slot = self._require_str(item_data["slot"], f"item '{raw_id}' slot")
            if slot not in ("mount", "accessory"):
                raise DataValidationError(f"item '{raw_id}' slot must be 'mount' or 'accessory'.")
            travel_speed = self._require_fraction(item_data.get("travel_speed", 0.0), f"item '{raw_id}' travel_speed")
            revive = self._require_bool(item_data.get("revive", False), f"item '{raw_id}' revive")
            if slot == "mount" and revive:
                raise DataValidationError(f"item '{raw_id}' is a mount and cannot revive.")
            if slot == "accessory" and travel_speed:
                raise DataValidationError(f"item '{raw_id}' is an accessory and cannot set travel_speed.")
            items[raw_id] = ItemDef(
                id=raw_id,
                name=self._require_str(item_data["name"], f"item '{raw_id}' name"),
                slot=slot,  # type: ignore[arg-type]
                travel_speed=travel_speed,
                revive=revive,
            )
        return items

"""Mount and accessory handling for quest heroes."""
from __future__ import annotations

import logging
from typing import Sequence

from guildhall.data.repositories import ItemsRepository
from guildhall.domain.defs import ItemDef
from guildhall.domain.entities import Hero
from guildhall.services.errors import ValidationError

logger = logging.getLogger(__name__)


class EquipmentService:
    """Equips items by id and answers party-level equipment questions."""

    def __init__(self, *, items_repo: ItemsRepository) -> None:
        self._items_repo = items_repo

    def equip(self, hero: Hero, item_id: str) -> ItemDef | None:
        """Equip ``item_id`` and return whatever it displaced."""
        if not self._items_repo.has(item_id):
            raise ValidationError(f"Unknown item '{item_id}'.")
        if not hero.is_idle:
            raise ValidationError(f"{hero.name} cannot change equipment while {hero.status}.")
        item = self._items_repo.get(item_id)
        if item.slot == "mount":
            previous, hero.equipment.mount = hero.equipment.mount, item
        else:
            previous, hero.equipment.accessory = hero.equipment.accessory, item
        logger.debug("Equipped %s on %s", item.id, hero.id)
        return previous

    def unequip(self, hero: Hero, slot: str) -> ItemDef | None:
        if slot == "mount":
            previous, hero.equipment.mount = hero.equipment.mount, None
        elif slot == "accessory":
            previous, hero.equipment.accessory = hero.equipment.accessory, None
        else:
            raise ValidationError(f"Unknown equipment slot '{slot}'.")
        return previous


def travel_multiplier(heroes: Sequence[Hero]) -> float:
    """Party moves at the pace of its slowest mount; one unmounted hero means 1.0."""
    if not heroes:
        return 1.0
    slowest = min(hero.equipment.travel_speed for hero in heroes)
    return max(0.0, 1.0 - slowest)


def consume_revive_item(hero: Hero) -> ItemDef | None:
    """Use up the hero's revive accessory, returning it, or None if they have none."""
    if not hero.equipment.can_revive:
        return None
    item, hero.equipment.accessory = hero.equipment.accessory, None
    return item

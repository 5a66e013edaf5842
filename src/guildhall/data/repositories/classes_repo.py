"""Hero classes repository."""
from __future__ import annotations

from typing import Dict, List

from guildhall.core.types import STAT_NAMES
from guildhall.data.errors import DataValidationError
from guildhall.data.repositories.base import RepositoryBase
from guildhall.domain.defs import HeroClassDef, PassiveDef
from guildhall.domain.defs.class_def import PASSIVE_EFFECTS


class ClassesRepository(RepositoryBase[HeroClassDef]):
    """Loads hero classes and validates their stats and passives."""

    def __init__(self, base_path=None) -> None:
        super().__init__("classes.json", base_path)

    def _build(self, raw: dict[str, object]) -> Dict[str, HeroClassDef]:
        classes: Dict[str, HeroClassDef] = {}
        for raw_id, payload in raw.items():
            class_data = self._require_mapping(payload, f"class '{raw_id}'")
            self._assert_exact_fields(
                class_data,
                {"name", "primary_stat"},
                f"class '{raw_id}'",
                optional_fields={"protector", "stat_bonus", "passives"},
            )
            primary_stat = self._require_str(class_data["primary_stat"], f"class '{raw_id}' primary_stat")
            if primary_stat not in STAT_NAMES:
                raise DataValidationError(f"class '{raw_id}' primary_stat '{primary_stat}' is not a stat.")
            classes[raw_id] = HeroClassDef(
                id=raw_id,
                name=self._require_str(class_data["name"], f"class '{raw_id}' name"),
                primary_stat=primary_stat,
                protector=self._require_bool(class_data.get("protector", False), f"class '{raw_id}' protector"),
                stat_bonus=self._parse_stat_bonus(class_data.get("stat_bonus", {}), raw_id),
                passives=tuple(self._parse_passives(class_data.get("passives", []), raw_id)),
            )
        return classes

    def _parse_stat_bonus(self, value: object, class_id: str) -> Dict[str, int]:
        mapping = self._require_mapping(value, f"class '{class_id}' stat_bonus")
        bonus: Dict[str, int] = {}
        for stat, amount in mapping.items():
            if stat not in STAT_NAMES:
                raise DataValidationError(f"class '{class_id}' stat_bonus has unknown stat '{stat}'.")
            bonus[stat] = self._require_int(amount, f"class '{class_id}' stat_bonus.{stat}")
        return bonus

    def _parse_passives(self, value: object, class_id: str) -> List[PassiveDef]:
        if not isinstance(value, list):
            raise DataValidationError(f"class '{class_id}' passives must be a list.")
        passives: List[PassiveDef] = []
        for index, entry in enumerate(value):
            context = f"class '{class_id}' passives[{index}]"
            passive_data = self._require_mapping(entry, context)
            self._assert_exact_fields(passive_data, {"id", "name", "effect", "value"}, context)
            effect = self._require_str(passive_data["effect"], f"{context} effect")
            if effect not in PASSIVE_EFFECTS:
                raise DataValidationError(f"{context} effect '{effect}' is not supported.")
            passives.append(
                PassiveDef(
                    id=self._require_str(passive_data["id"], f"{context} id"),
                    name=self._require_str(passive_data["name"], f"{context} name"),
                    effect=effect,
                    value=self._require_number(passive_data["value"], f"{context} value"),
                )
            )
        return passives

"""Party traits repository."""
from __future__ import annotations

from typing import Dict, Tuple

from guildhall.core.types import RANK_ORDER
from guildhall.data.errors import DataValidationError
from guildhall.data.repositories.base import RepositoryBase
from guildhall.domain.defs import TraitBonus, TraitDef, TraitRequirement
from guildhall.domain.defs.trait_def import CUMULATIVE_REQUIREMENTS, REQUIREMENT_TYPES

_BONUS_FRACTIONS = (
    "success_bonus",
    "dungeon_success_bonus",
    "gold_bonus",
    "fatigue_reduction",
    "survival_bonus",
)


class TraitsRepository(RepositoryBase[TraitDef]):
    """Loads the traits formed parties can earn and checks their rules."""

    def __init__(self, base_path=None) -> None:
        super().__init__("traits.json", base_path)

    def _build(self, raw: dict[str, object]) -> Dict[str, TraitDef]:
        traits: Dict[str, TraitDef] = {}
        for raw_id, payload in raw.items():
            context = f"trait '{raw_id}'"
            data = self._require_mapping(payload, context)
            self._assert_exact_fields(data, {"name", "description", "requirement", "bonus"}, context)
            traits[raw_id] = TraitDef(
                id=raw_id,
                name=self._require_str(data["name"], f"{context} name"),
                description=self._require_str(data["description"], f"{context} description"),
                requirement=self._parse_requirement(data["requirement"], context),
                bonus=self._parse_bonus(data["bonus"], context),
            )
        return traits

    def _parse_requirement(self, value: object, context: str) -> TraitRequirement:
        data = self._require_mapping(value, f"{context} requirement")
        req_type = self._require_str(data.get("type"), f"{context} requirement.type")
        if req_type not in REQUIREMENT_TYPES:
            raise DataValidationError(f"{context} requirement type '{req_type}' is not supported.")
        target_key = "amount" if req_type in CUMULATIVE_REQUIREMENTS else "count"
        self._assert_exact_fields(
            data, {"type", target_key}, f"{context} requirement", optional_fields={"min_rank"}
        )
        target = self._require_int(data[target_key], f"{context} requirement.{target_key}")
        if target < 1:
            raise DataValidationError(f"{context} requirement.{target_key} must be >= 1.")
        min_rank = data.get("min_rank")
        if min_rank is not None and min_rank not in RANK_ORDER:
            raise DataValidationError(f"{context} requirement.min_rank '{min_rank}' is not a rank.")
        return TraitRequirement(type=req_type, target=target, min_rank=min_rank)  # type: ignore[arg-type]

    def _parse_bonus(self, value: object, context: str) -> TraitBonus:
        data = self._require_mapping(value, f"{context} bonus")
        self._assert_exact_fields(
            data, set(), f"{context} bonus", optional_fields=set(_BONUS_FRACTIONS) | {"quest_ranks"}
        )
        fractions = {
            key: self._require_fraction(data[key], f"{context} bonus.{key}")
            for key in _BONUS_FRACTIONS
            if key in data
        }
        return TraitBonus(quest_ranks=self._parse_ranks(data.get("quest_ranks", []), context), **fractions)

    @staticmethod
    def _parse_ranks(value: object, context: str) -> Tuple[str, ...]:
        if not isinstance(value, list) or any(rank not in RANK_ORDER for rank in value):
            raise DataValidationError(f"{context} bonus.quest_ranks must be a list of ranks.")
        return tuple(value)

"""Rank tuning repository."""
from __future__ import annotations

from typing import Dict

from guildhall.core.types import RANK_ORDER
from guildhall.data.errors import DataValidationError
from guildhall.data.repositories.base import RepositoryBase
from guildhall.domain.defs import RankDef

_RANK_FIELDS = {
    "power",
    "timers",
    "max_heroes",
    "expected_stat",
    "base_success",
    "death_chance",
    "can_kill",
    "floor_death_chance",
    "base_rest_time",
    "stat_range",
}


class RanksRepository(RepositoryBase[RankDef]):
    """Loads per-rank timers, odds and rest times; every rank must be present."""

    def __init__(self, base_path=None) -> None:
        super().__init__("ranks.json", base_path)

    def _build(self, raw: dict[str, object]) -> Dict[str, RankDef]:
        missing = [rank for rank in RANK_ORDER if rank not in raw]
        if missing:
            raise DataValidationError(f"ranks.json is missing ranks: {missing}")
        ranks: Dict[str, RankDef] = {}
        for rank, payload in raw.items():
            if rank not in RANK_ORDER:
                raise DataValidationError(f"ranks.json has unknown rank '{rank}'.")
            data = self._require_mapping(payload, f"rank '{rank}'")
            self._assert_exact_fields(data, _RANK_FIELDS, f"rank '{rank}'")
            timers = self._require_mapping(data["timers"], f"rank '{rank}' timers")
            self._assert_exact_fields(timers, {"travel", "execute", "return"}, f"rank '{rank}' timers")
            stat_range = self._require_mapping(data["stat_range"], f"rank '{rank}' stat_range")
            self._assert_exact_fields(stat_range, {"min", "max"}, f"rank '{rank}' stat_range")
            stat_min = self._require_int(stat_range["min"], f"rank '{rank}' stat_range.min")
            stat_max = self._require_int(stat_range["max"], f"rank '{rank}' stat_range.max")
            if stat_min > stat_max:
                raise DataValidationError(f"rank '{rank}' stat_range min exceeds max.")
            ranks[rank] = RankDef(
                rank=rank,
                power=self._require_int(data["power"], f"rank '{rank}' power"),
                travel_time=self._require_duration(timers["travel"], f"rank '{rank}' timers.travel"),
                execute_time=self._require_duration(timers["execute"], f"rank '{rank}' timers.execute"),
                return_time=self._require_duration(timers["return"], f"rank '{rank}' timers.return"),
                max_heroes=self._require_int(data["max_heroes"], f"rank '{rank}' max_heroes"),
                expected_stat=self._require_int(data["expected_stat"], f"rank '{rank}' expected_stat"),
                base_success=self._require_fraction(data["base_success"], f"rank '{rank}' base_success"),
                death_chance=self._require_fraction(data["death_chance"], f"rank '{rank}' death_chance"),
                can_kill=self._require_bool(data["can_kill"], f"rank '{rank}' can_kill"),
                floor_death_chance=self._require_fraction(
                    data["floor_death_chance"], f"rank '{rank}' floor_death_chance"
                ),
                base_rest_time=self._require_duration(data["base_rest_time"], f"rank '{rank}' base_rest_time"),
                stat_min=stat_min,
                stat_max=stat_max,
            )
        return ranks

    def _require_duration(self, value: object, context: str) -> float:
        number = self._require_number(value, context)
        if number < 0:
            raise DataValidationError(f"{context} must be >= 0.")
        return number

"""Quest template repository with rank and stat validation."""
from __future__ import annotations

from typing import Dict

from guildhall.core.types import STAT_NAMES
from guildhall.data.errors import DataReferenceError, DataValidationError
from guildhall.data.repositories.base import RepositoryBase
from guildhall.data.repositories.ranks_repo import RanksRepository
from guildhall.domain.defs import QuestTemplateDef


class QuestsRepository(RepositoryBase[QuestTemplateDef]):
    """Loads quest templates and ensures referenced ranks exist."""

    def __init__(self, ranks_repo: RanksRepository | None = None, base_path=None) -> None:
        super().__init__("quests.json", base_path)
        self._ranks_repo = ranks_repo or RanksRepository(base_path=base_path)

    def by_rank(self, rank: str) -> list[QuestTemplateDef]:
        return [template for template in self.all() if template.rank == rank]

    def _build(self, raw: dict[str, object]) -> Dict[str, QuestTemplateDef]:
        known_ranks = {rank_def.rank for rank_def in self._ranks_repo.all()}
        templates: Dict[str, QuestTemplateDef] = {}
        for raw_id, payload in raw.items():
            context = f"quest '{raw_id}'"
            data = self._require_mapping(payload, context)
            self._assert_exact_fields(
                data,
                {"name", "rank", "required_stat", "combat", "reward", "xp_reward"},
                context,
                optional_fields={"max_heroes", "dungeon", "timers"},
            )
            rank = self._require_str(data["rank"], f"{context} rank")
            if rank not in known_ranks:
                raise DataReferenceError(f"{context} references missing rank '{rank}'.")
            required_stat = self._require_str(data["required_stat"], f"{context} required_stat")
            if required_stat not in STAT_NAMES:
                raise DataValidationError(f"{context} required_stat '{required_stat}' is not a stat.")
            max_heroes = data.get("max_heroes")
            if max_heroes is not None:
                max_heroes = self._require_int(max_heroes, f"{context} max_heroes")
                if max_heroes < 1:
                    raise DataValidationError(f"{context} max_heroes must be >= 1.")

            floor_count, death_floor = 0, 1
            if "dungeon" in data:
                dungeon = self._require_mapping(data["dungeon"], f"{context} dungeon")
                self._assert_exact_fields(dungeon, {"floor_count"}, f"{context} dungeon", optional_fields={"death_floor"})
                floor_count = self._require_int(dungeon["floor_count"], f"{context} dungeon.floor_count")
                if floor_count < 1:
                    raise DataValidationError(f"{context} dungeon.floor_count must be >= 1.")
                death_floor = self._require_int(dungeon.get("death_floor", 1), f"{context} dungeon.death_floor")

            timers: Dict[str, float] = {}
            if "timers" in data:
                timer_data = self._require_mapping(data["timers"], f"{context} timers")
                for key, value in timer_data.items():
                    if key not in ("travel", "execute", "return"):
                        raise DataValidationError(f"{context} timers has unknown phase '{key}'.")
                    seconds = self._require_number(value, f"{context} timers.{key}")
                    if seconds < 0:
                        raise DataValidationError(f"{context} timers.{key} must be >= 0.")
                    timers[key] = seconds

            templates[raw_id] = QuestTemplateDef(
                id=raw_id,
                name=self._require_str(data["name"], f"{context} name"),
                rank=rank,
                required_stat=required_stat,
                combat=self._require_bool(data["combat"], f"{context} combat"),
                reward=self._require_int(data["reward"], f"{context} reward"),
                xp_reward=self._require_int(data["xp_reward"], f"{context} xp_reward"),
                max_heroes=max_heroes,
                floor_count=floor_count,
                death_floor=death_floor,
                travel_time=timers.get("travel"),
                execute_time=timers.get("execute"),
                return_time=timers.get("return"),
            )
        return templates

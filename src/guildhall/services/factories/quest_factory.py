"""Factory for stamping quest instances out of templates."""
from __future__ import annotations

from typing import List

from guildhall.core.rng import RNG
from guildhall.core.types import rank_index
from guildhall.data.repositories import QuestsRepository, RanksRepository
from guildhall.domain.quest import Quest
from guildhall.services.errors import FactoryError

from .id_factory import make_instance_id


def create_quest(
    template_id: str,
    quests_repo: QuestsRepository,
    ranks_repo: RanksRepository,
    rng: RNG,
) -> Quest:
    """Create an available quest; unset timers and hero caps come from the rank."""
    try:
        template = quests_repo.get(template_id)
    except KeyError as exc:
        raise FactoryError(f"Quest template '{template_id}' not found.") from exc
    rank_def = ranks_repo.get(template.rank)
    return Quest(
        id=make_instance_id("quest", rng),
        name=template.name,
        template_id=template.id,
        rank=template.rank,
        combat=template.combat,
        required_stat=template.required_stat,
        required_power=rank_def.power,
        max_heroes=template.max_heroes or rank_def.max_heroes,
        travel_time=template.travel_time if template.travel_time is not None else rank_def.travel_time,
        execute_time=template.execute_time if template.execute_time is not None else rank_def.execute_time,
        return_time=template.return_time if template.return_time is not None else rank_def.return_time,
        reward=template.reward,
        xp_reward=template.xp_reward,
        floor_count=template.floor_count,
        death_floor=template.death_floor,
    )


def generate_quest_pool(
    count: int,
    quests_repo: QuestsRepository,
    ranks_repo: RanksRepository,
    rng: RNG,
    *,
    max_rank: str = "S",
) -> List[Quest]:
    """Draw ``count`` quests from templates at or below ``max_rank``."""
    ceiling = rank_index(max_rank)
    templates = [template for template in quests_repo.all() if rank_index(template.rank) <= ceiling]
    if not templates:
        raise FactoryError(f"No quest templates at or below rank {max_rank}.")
    return [create_quest(rng.choice(templates).id, quests_repo, ranks_repo, rng) for _ in range(count)]

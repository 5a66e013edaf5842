"""Factory for hiring heroes from class and rank definitions."""
from __future__ import annotations

from guildhall.core.rng import RNG
from guildhall.core.types import RANK_ORDER
from guildhall.data.repositories import ClassesRepository, RanksRepository
from guildhall.domain.entities import Hero, HeroStats
from guildhall.services.errors import FactoryError

from .id_factory import make_instance_id

_FIRST_NAMES = (
    "Aldric", "Brenna", "Cedric", "Dahlia", "Edmund", "Fiora", "Gareth", "Helena",
    "Ivor", "Jorah", "Kaela", "Lucan", "Mirela", "Noric", "Orla", "Piers",
    "Quinn", "Rowan", "Sable", "Tamsin", "Ulric", "Vera", "Wren", "Yorick",
)


def create_hero(
    class_id: str,
    rank: str,
    classes_repo: ClassesRepository,
    ranks_repo: RanksRepository,
    rng: RNG,
    *,
    name: str | None = None,
) -> Hero:
    """Roll a new hero's stats and passive for the given class and rank."""
    if rank not in RANK_ORDER:
        raise FactoryError(f"Rank '{rank}' is not a valid hero rank.")
    try:
        class_def = classes_repo.get(class_id)
    except KeyError as exc:
        raise FactoryError(f"Class '{class_id}' not found.") from exc
    rank_def = ranks_repo.get(rank)

    def roll(stat: str) -> int:
        return rng.randint(rank_def.stat_min, rank_def.stat_max) + class_def.stat_bonus.get(stat, 0)

    stats = HeroStats(
        strength=roll("str"),
        dexterity=roll("dex"),
        intelligence=roll("int"),
        vitality=roll("vit"),
        luck=roll("luck"),
    )
    passive = rng.choice(class_def.passives) if class_def.passives else None
    return Hero(
        id=make_instance_id("hero", rng),
        name=name or rng.choice(_FIRST_NAMES),
        class_id=class_id,
        rank=rank,
        power=rank_def.power,
        primary_stat=class_def.primary_stat,
        stats=stats,
        protector=class_def.protector,
        passive=passive,
    )

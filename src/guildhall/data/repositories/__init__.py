"""Repository exports."""

from .classes_repo import ClassesRepository
from .items_repo import ItemsRepository
from .quests_repo import QuestsRepository
from .ranks_repo import RanksRepository
from .traits_repo import TraitsRepository

__all__ = [
    "ClassesRepository",
    "ItemsRepository",
    "QuestsRepository",
    "RanksRepository",
    "TraitsRepository",
]

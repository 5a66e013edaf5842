"""Domain definition exports."""

from .class_def import HeroClassDef, PassiveDef
from .item_def import ItemDef
from .quest_def import QuestTemplateDef
from .rank_def import RankDef
from .trait_def import TraitBonus, TraitDef, TraitRequirement

__all__ = [
    "HeroClassDef",
    "ItemDef",
    "PassiveDef",
    "QuestTemplateDef",
    "RankDef",
    "TraitBonus",
    "TraitDef",
    "TraitRequirement",
]

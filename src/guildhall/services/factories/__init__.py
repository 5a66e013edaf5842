"""Factory helpers for runtime entities."""

from .hero_factory import create_hero
from .id_factory import make_instance_id
from .quest_factory import create_quest, generate_quest_pool

__all__ = [
    "create_hero",
    "create_quest",
    "generate_quest_pool",
    "make_instance_id",
]

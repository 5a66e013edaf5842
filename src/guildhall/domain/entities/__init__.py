"""Runtime entity exports."""

from .equipment import HeroEquipment
from .hero import Hero
from .stats import HeroStats

__all__ = [
    "Hero",
    "HeroEquipment",
    "HeroStats",
]

"""Deterministic identifiers for heroes, quests and parties."""
from __future__ import annotations

from guildhall.core.rng import RNG


def make_instance_id(prefix: str, rng: RNG) -> str:
    """Build ``<prefix>_<six digits>`` from the injected RNG so seeds replay exactly."""
    return f"{prefix}_{rng.randint(100000, 999999)}"

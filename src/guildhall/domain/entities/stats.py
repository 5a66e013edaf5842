"""Hero attribute block."""
from __future__ import annotations

from dataclasses import dataclass

_FIELD_BY_STAT = {
    "str": "strength",
    "dex": "dexterity",
    "int": "intelligence",
    "vit": "vitality",
    "luck": "luck",
}


@dataclass(slots=True)
class HeroStats:
    """The five quest-relevant attributes, addressable by short stat name."""

    strength: int
    dexterity: int
    intelligence: int
    vitality: int
    luck: int

    def get(self, stat: str) -> int:
        return getattr(self, _FIELD_BY_STAT[stat])

    def raise_stat(self, stat: str, amount: int = 1, cap: int | None = None) -> int:
        field_name = _FIELD_BY_STAT[stat]
        value = getattr(self, field_name) + amount
        if cap is not None:
            value = min(cap, value)
        setattr(self, field_name, value)
        return value

    def as_dict(self) -> dict[str, int]:
        return {stat: getattr(self, name) for stat, name in _FIELD_BY_STAT.items()}

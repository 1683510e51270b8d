from __future__ import annotations

from dataclasses import dataclass

from clickerrpg.cost_scaling import CostScaling


@dataclass(frozen=True)
class HelperTypeDef:
    """Static definition of a helper archetype."""

    id: str
    display_name: str = ""
    base_damage: float = 1.0
    base_cost: int = 10
    cost_scale: float = 1.0
    cost_linear_add: float = 0.0
    damage_scaling: float = 1.0
    glyph: str = ""
    description: str = ""

    def __post_init__(self) -> None:
        if not self.display_name:
            object.__setattr__(self, "display_name", self.id)

    @property
    def cost_scaling(self) -> CostScaling:
        return CostScaling.compound(self.cost_scale, self.cost_linear_add)

    @property
    def upgrade_kind(self) -> str:
        return f"helper:{self.id}"


@dataclass
class HelperState:
    """Mutable runtime state for one helper type."""

    level: int = 0
    cost: int = 0
    dps: float = 0.0

from __future__ import annotations

from dataclasses import dataclass

from clickerrpg.formulas import next_upgrade_cost


@dataclass(frozen=True)
class CostScaling:
    """Determines how an upgrade's cost grows after each purchase."""

    scale: float = 1.0
    linear_add: float = 0.0

    def next(self, current_cost: float) -> int:
        """Cost of the following purchase, given what this one cost."""
        return next_upgrade_cost(current_cost, self.scale, self.linear_add)

    def replay(self, base_cost: float, purchases: int) -> int:
        """Cost after *purchases* purchases starting from *base_cost*."""
        cost = int(base_cost)
        for _ in range(purchases):
            cost = self.next(cost)
        return cost

    @classmethod
    def fixed(cls) -> CostScaling:
        """Cost never changes."""
        return cls(1.0, 0.0)

    @classmethod
    def compound(cls, scale: float, linear_add: float = 0.0) -> CostScaling:
        """cost' = floor(cost * scale + linear_add)."""
        return cls(scale, linear_add)

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class EnemyTypeDef:
    """A regular enemy in the spawn rotation."""

    name: str
    glyph: str = ""


@dataclass(frozen=True)
class BossTypeDef:
    """A boss, spawned on every boss-interval level."""

    name: str
    glyph: str = ""


@dataclass(frozen=True)
class SpecialEnemyTypeDef:
    """A rare alternate spawn that grants a temporary buff when defeated."""

    id: str
    name: str = ""
    glyph: str = ""
    description: str = ""
    hp_multiplier: float = 1.0
    gold_multiplier: float = 1.0
    buff_type: str = ""
    buff_amount: float = 1.0
    buff_duration: float = 0.0
    chance: float = 0.0

    def __post_init__(self) -> None:
        if not self.name:
            object.__setattr__(self, "name", self.id)


@dataclass
class EnemyState:
    """The enemy currently on screen."""

    level: int = 0
    max_hp: float = 0
    current_hp: float = 0
    name: str = ""
    glyph: str = ""
    gold_reward: int = 0
    is_boss: bool = False
    special_type: str | None = None

    @property
    def is_special(self) -> bool:
        return self.special_type is not None

    @property
    def alive(self) -> bool:
        return self.current_hp > 0

    def apply_damage(self, amount: float) -> float:
        """Remove up to *amount* HP and return how much was actually removed."""
        if amount <= 0 or not self.alive:
            return 0.0
        dealt = min(amount, self.current_hp)
        self.current_hp -= dealt
        if self.current_hp <= 0:
            self.current_hp = 0
        return dealt

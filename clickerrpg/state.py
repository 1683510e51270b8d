from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable

from clickerrpg.definition import BUFF_KINDS
from clickerrpg.enemy import EnemyState
from clickerrpg.formulas import helper_type_dps, round_half_up
from clickerrpg.helper import HelperState

if TYPE_CHECKING:
    from clickerrpg.definition import GameDefinition


@dataclass
class BuffState:
    active: bool = False
    multiplier: float = 1.0
    end_time: float = 0.0


@dataclass
class SkillState:
    unlocked: bool = False
    active: bool = False
    active_end_time: float = 0.0
    cooldown_end_time: float = 0.0
    active_duration: float = 0.0
    cooldown_duration: float = 0.0
    multiplier: float = 1.0


_STATS: dict[str, Callable[[ProgressionState], float]] = {
    "gold": lambda s: s.gold,
    "click_damage": lambda s: s.click_damage,
    "effective_click_damage": lambda s: s.effective_click_damage(),
    "crit_chance": lambda s: s.crit_chance,
    "effective_crit_chance": lambda s: s.effective_crit_chance(),
    "dps": lambda s: s.dps,
    "enemy_level": lambda s: s.enemy.level,
    "total_clicks": lambda s: s.total_clicks,
    "total_crits": lambda s: s.total_crits,
    "enemies_defeated": lambda s: s.enemies_defeated,
    "stars": lambda s: s.stars,
    "total_prestiges": lambda s: s.total_prestiges,
}


class ProgressionState:
    """Mutable container holding all player, enemy and economy state."""

    def __init__(self, definition: GameDefinition) -> None:
        cfg = definition.config

        # Economy
        self.gold: int = 0
        self.click_upgrade_cost: int = cfg.click_upgrade_cost
        self.crit_upgrade_cost: int = cfg.crit_upgrade_cost
        self.click_damage_multiplier: float = 1.0
        self.gold_multiplier: float = 1.0
        self.crit_chance_bonus: float = 0.0
        self.helper_damage_multiplier: float = 1.0

        # Offense
        self.click_damage: int = cfg.base_click_damage
        self.crit_chance: float = 0.0
        self.crit_multiplier: float = cfg.crit_multiplier
        self.dps: float = 0.0
        self.helpers: dict[str, HelperState] = {
            h.id: HelperState(level=0, cost=h.base_cost) for h in definition.helper_types
        }

        # One-way unlock latches
        self.crit_unlocked: bool = False
        self.helpers_unlocked: bool = False
        self.skills_unlocked: bool = False
        self.prestige_unlocked: bool = False

        self.enemy = EnemyState()
        self.pending_spawn_at: float | None = None

        # Counters
        self.total_clicks: int = 0
        self.total_crits: int = 0
        self.enemies_defeated: int = 0

        # Prestige meta-state
        self.stars: float = 0
        self.total_prestiges: int = 0
        self.star_gold_multiplier: float = 0.0

        self.buffs: dict[str, BuffState] = {kind: BuffState() for kind in BUFF_KINDS}
        self.skills: dict[str, SkillState] = {
            s.id: SkillState(
                active_duration=s.active_duration,
                cooldown_duration=s.cooldown_duration,
                multiplier=s.multiplier,
            )
            for s in definition.skills
        }

        self.achievements: set[str] = set()
        self.achievement_progress: dict[str, int] = {}

    @classmethod
    def initial(cls, definition: GameDefinition) -> ProgressionState:
        return cls(definition)

    # ── Reads ────────────────────────────────────────────────────────

    def stat(self, name: str) -> float:
        fn = _STATS.get(name)
        if fn is None:
            raise KeyError(f"Unknown stat: {name!r}. Expected one of {sorted(_STATS)}")
        return fn(self)

    def helper_level(self, id: str) -> int:
        hs = self.helpers.get(id)
        return hs.level if hs else 0

    def has_achievement(self, id: str) -> bool:
        return id in self.achievements

    def effective_click_damage(self) -> int:
        return round_half_up(self.click_damage * self.click_damage_multiplier)

    def effective_crit_chance(self) -> float:
        """Purchased crit chance plus achievement bonus, before any buff."""
        return self.crit_chance + self.crit_chance_bonus

    def total_gold_multiplier(self) -> float:
        return self.gold_multiplier + self.star_gold_multiplier

    # ── Mutations ────────────────────────────────────────────────────

    def apply_purchase(self, cost: int) -> None:
        self.gold -= cost

    def apply_reward(self, gold: int) -> None:
        self.gold += gold

    def advance_enemy_level(self) -> int:
        self.enemy.level += 1
        return self.enemy.level

    def unlock(self, feature: str) -> None:
        if feature == "crit":
            self.crit_unlocked = True
        elif feature == "helpers":
            self.helpers_unlocked = True
        elif feature == "skills":
            self.skills_unlocked = True
            for skill in self.skills.values():
                skill.unlocked = True
        elif feature == "prestige":
            self.prestige_unlocked = True
        else:
            raise ValueError(f"Unknown feature: {feature!r}")

    def grant_crit_bonus(self, amount: float, cap: float) -> None:
        """Add achievement crit chance, never letting base + bonus pass *cap*."""
        self.crit_chance_bonus = max(0.0, min(self.crit_chance_bonus + amount, cap - self.crit_chance))

    def recompute_dps(self, definition: GameDefinition) -> float:
        """Refresh per-helper and aggregate DPS from levels and the helper multiplier."""
        total = 0.0
        for hdef in definition.helper_types:
            hs = self.helpers.setdefault(hdef.id, HelperState(cost=hdef.base_cost))
            if self.helpers_unlocked and hs.level > 0:
                hs.dps = helper_type_dps(
                    hs.level,
                    hdef.base_damage,
                    hdef.damage_scaling,
                    self.helper_damage_multiplier,
                )
            else:
                hs.dps = 0.0
            total += hs.dps
        self.dps = total
        return total

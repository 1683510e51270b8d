from __future__ import annotations

from dataclasses import dataclass, field

from clickerrpg import formulas
from clickerrpg.achievement import AchievementDef
from clickerrpg.cost_scaling import CostScaling
from clickerrpg.enemy import BossTypeDef, EnemyTypeDef, SpecialEnemyTypeDef
from clickerrpg.helper import HelperTypeDef

BUFF_KINDS = ("gold_boost", "damage_boost", "crit_boost")


@dataclass
class GameConfig:
    """Top-level balance and timing configuration."""

    name: str = "Untitled"

    # Enemies
    hp_base: float = formulas.HP_BASE
    hp_scale: float = formulas.HP_SCALE
    gold_base: float = formulas.GOLD_BASE
    gold_scale: float = formulas.GOLD_SCALE
    gold_linear_bonus: float = formulas.GOLD_LINEAR_BONUS
    boss_interval: int = formulas.BOSS_INTERVAL
    boss_hp_exponent: float = formulas.BOSS_HP_EXPONENT
    boss_base_hp_mult: float = formulas.BOSS_BASE_HP_MULT
    boss_gold_mult: float = formulas.BOSS_GOLD_MULT
    special_min_level: int = 10

    # Player
    base_click_damage: int = 1
    click_upgrade_cost: int = 8
    click_cost_scale: float = 1.12
    click_cost_linear_add: float = 1
    crit_upgrade_cost: int = 40
    crit_cost_scale: float = 1.35
    crit_cost_linear_add: float = 20
    crit_chance_max: float = 0.50
    crit_chance_step: float = 0.01
    crit_multiplier: float = 3.0
    crit_roll_ceiling: float = 1.0

    # Unlocks and prestige
    skills_unlock_level: int = 15
    levels_per_star: int = formulas.LEVELS_PER_STAR
    star_gold_rate: float = 0.02

    # Timing
    tick_interval_ms: int = 500
    spawn_delay: float = 0.5
    autosave_interval: float = 120.0

    @property
    def tick_seconds(self) -> float:
        return self.tick_interval_ms / 1000

    @property
    def click_cost_scaling(self) -> CostScaling:
        return CostScaling.compound(self.click_cost_scale, self.click_cost_linear_add)

    @property
    def crit_cost_scaling(self) -> CostScaling:
        return CostScaling.compound(self.crit_cost_scale, self.crit_cost_linear_add)


@dataclass(frozen=True)
class SkillDef:
    """A player-activated damage multiplier with its own cooldown."""

    id: str
    display_name: str = ""
    active_duration: float = 10.0
    cooldown_duration: float = 60.0
    multiplier: float = 2.0


@dataclass
class GameDefinition:
    """Complete static definition of the game: config plus every table."""

    config: GameConfig = field(default_factory=GameConfig)
    helper_types: list[HelperTypeDef] = field(default_factory=list)
    enemy_types: list[EnemyTypeDef] = field(default_factory=list)
    boss_types: list[BossTypeDef] = field(default_factory=list)
    special_enemy_types: list[SpecialEnemyTypeDef] = field(default_factory=list)
    skills: list[SkillDef] = field(default_factory=list)
    achievements: list[AchievementDef] = field(default_factory=list)
    legacy_helper_id: str = ""

    # Lookup dicts built in __post_init__
    _helpers_by_id: dict[str, HelperTypeDef] = field(
        default_factory=dict, init=False, repr=False
    )
    _specials_by_id: dict[str, SpecialEnemyTypeDef] = field(
        default_factory=dict, init=False, repr=False
    )
    _skills_by_id: dict[str, SkillDef] = field(
        default_factory=dict, init=False, repr=False
    )
    _achievements_by_id: dict[str, AchievementDef] = field(
        default_factory=dict, init=False, repr=False
    )

    def __post_init__(self) -> None:
        self._helpers_by_id = {h.id: h for h in self.helper_types}
        self._specials_by_id = {s.id: s for s in self.special_enemy_types}
        self._skills_by_id = {s.id: s for s in self.skills}
        self._achievements_by_id = {a.id: a for a in self.achievements}
        if not self.legacy_helper_id and self.helper_types:
            self.legacy_helper_id = self.helper_types[0].id

    def get_helper(self, id: str) -> HelperTypeDef | None:
        return self._helpers_by_id.get(id)

    def get_special(self, id: str) -> SpecialEnemyTypeDef | None:
        return self._specials_by_id.get(id)

    def get_skill(self, id: str) -> SkillDef | None:
        return self._skills_by_id.get(id)

    def get_achievement(self, id: str) -> AchievementDef | None:
        return self._achievements_by_id.get(id)

    def validate(self) -> list[str]:
        """Check for common definition errors. Returns list of error messages."""
        errors: list[str] = []

        for label, ids in (
            ("helper", [h.id for h in self.helper_types]),
            ("special enemy", [s.id for s in self.special_enemy_types]),
            ("skill", [s.id for s in self.skills]),
            ("achievement", [a.id for a in self.achievements]),
        ):
            seen: set[str] = set()
            for id in ids:
                if id in seen:
                    errors.append(f"Duplicate {label} ID: {id!r}")
                seen.add(id)

        if not self.enemy_types:
            errors.append("At least one enemy type is required")
        if not self.boss_types:
            errors.append("At least one boss type is required")

        for s in self.special_enemy_types:
            if s.buff_type not in BUFF_KINDS:
                errors.append(
                    f"Special enemy {s.id!r} grants unknown buff {s.buff_type!r}"
                )
            if not 0.0 <= s.chance <= 1.0:
                errors.append(f"Special enemy {s.id!r} has chance outside [0, 1]")

        for h in self.helper_types:
            if h.base_cost <= 0:
                errors.append(f"Helper {h.id!r} must have a positive base cost")

        if self.legacy_helper_id and self.legacy_helper_id not in self._helpers_by_id:
            errors.append(f"Legacy helper {self.legacy_helper_id!r} is not a helper type")

        cfg = self.config
        if cfg.hp_scale <= 1.0:
            errors.append("hp_scale must be greater than 1")
        if cfg.boss_interval <= 0:
            errors.append("boss_interval must be positive")
        if cfg.tick_interval_ms <= 0:
            errors.append("tick_interval_ms must be positive")
        if not 0.0 < cfg.crit_chance_max <= 1.0:
            errors.append("crit_chance_max must be in (0, 1]")

        return errors

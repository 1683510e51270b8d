"""Pure balance formulas for enemy scaling, upgrade costs and prestige.

Every function here is deterministic and stateless. Default arguments are the
live balance constants; ``GameConfig`` passes its own values explicitly.
"""

from __future__ import annotations

import math

HP_BASE = 10
HP_SCALE = 1.16
GOLD_BASE = 3
GOLD_SCALE = 1.10
GOLD_LINEAR_BONUS = 0.3
BOSS_INTERVAL = 5
BOSS_HP_EXPONENT = 1.1
BOSS_BASE_HP_MULT = 3.5
BOSS_GOLD_MULT = 4.5
LEVELS_PER_STAR = 25


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves going up (not banker's rounding)."""
    return math.floor(value + 0.5)


def enemy_max_hp(level: int, hp_base: float = HP_BASE, hp_scale: float = HP_SCALE) -> int:
    return math.floor(hp_base * hp_scale ** (level - 1))


def enemy_gold_reward(
    level: int,
    gold_base: float = GOLD_BASE,
    gold_scale: float = GOLD_SCALE,
    linear_bonus: float = GOLD_LINEAR_BONUS,
) -> int:
    """Base gold for a regular enemy. Always at least 1."""
    return math.floor((gold_base + level * linear_bonus) * gold_scale ** (level - 1)) + 1


def boss_hp_multiplier(
    level: int,
    boss_interval: int = BOSS_INTERVAL,
    exponent_mult: float = BOSS_HP_EXPONENT,
    base_mult: float = BOSS_BASE_HP_MULT,
) -> float:
    return base_mult * (level / boss_interval) ** exponent_mult


def boss_gold_multiplier(
    level: int,
    boss_interval: int = BOSS_INTERVAL,
    gold_mult: float = BOSS_GOLD_MULT,
) -> float:
    return gold_mult * (1 + level / (boss_interval * 5))


def is_boss_level(level: int, boss_interval: int = BOSS_INTERVAL) -> bool:
    return level > 0 and level % boss_interval == 0


def next_click_damage(current_damage: int) -> int:
    return current_damage + 1 + math.floor(current_damage * 0.05)


def next_upgrade_cost(current_cost: float, scale: float, linear_add: float) -> int:
    return math.floor(current_cost * scale + linear_add)


def helper_type_dps(
    level: int,
    base_damage: float,
    scaling_exponent: float,
    achievement_multiplier: float = 1.0,
) -> float:
    if level <= 0:
        return 0.0
    return base_damage * level ** scaling_exponent * achievement_multiplier


def stars_earned_at_prestige(enemy_level: int, levels_per_star: int = LEVELS_PER_STAR) -> float:
    """Stars for prestiging at *enemy_level*: whole stars plus tenths, at least 1."""
    full_stars = enemy_level // levels_per_star
    # integer arithmetic keeps the tenths exact
    tenths = (enemy_level % levels_per_star) * 10 // levels_per_star
    return max(1, full_stars + tenths / 10)


def star_gold_multiplier(stars: float, rate: float) -> float:
    return stars * rate

"""Combat: click attacks, automated helper ticks, defeat payout and spawning.

Enemy lifecycle: alive (HP > 0) → defeated (HP == 0) → next level spawned
once ``spawn_delay`` has passed. A defeated enemy stays on the field at zero
HP until ``spawn_due`` sees the deadline.
"""

from __future__ import annotations

import math
import random
from dataclasses import dataclass
from typing import TYPE_CHECKING

from clickerrpg import formulas
from clickerrpg._types import Failure
from clickerrpg.enemy import EnemyState, SpecialEnemyTypeDef
from clickerrpg.timers import (
    activate_buff,
    buff_multiplier,
    crit_buff_bonus,
    skill_damage_multiplier,
)

if TYPE_CHECKING:
    from clickerrpg.definition import GameDefinition
    from clickerrpg.state import ProgressionState


@dataclass(frozen=True)
class DamageResult:
    """What a single damage application did to the current enemy."""

    success: bool
    dealt: float = 0.0
    defeated: bool = False
    gold_gained: int = 0
    level: int = 0
    was_boss: bool = False
    special_type: str | None = None
    buff_granted: str | None = None
    skills_unlocked: bool = False
    failure: Failure | None = None

    @property
    def was_special(self) -> bool:
        return self.special_type is not None

    def context(self) -> dict[str, object]:
        """Trigger context for achievement evaluation."""
        return {
            "damage": self.dealt,
            "was_boss": self.was_boss,
            "was_special": self.was_special,
            "special_type": self.special_type,
            "level": self.level,
        }


@dataclass(frozen=True)
class AttackResult:
    """Outcome of a manual click attack."""

    success: bool
    damage: float = 0.0
    is_crit: bool = False
    hit: DamageResult | None = None
    failure: Failure | None = None


_NO_TARGET = DamageResult(success=False, failure=Failure.NO_ACTIVE_TARGET)


# ── Spawning ─────────────────────────────────────────────────────────


def roll_special(
    definition: GameDefinition, level: int, rng: random.Random
) -> SpecialEnemyTypeDef | None:
    """Pick the special enemy for a spawn at *level*, if any.

    Boss levels and levels below the configured minimum never roll. Each
    special type rolls independently in table order; the first hit wins.
    """
    cfg = definition.config
    if formulas.is_boss_level(level, cfg.boss_interval):
        return None
    if level < cfg.special_min_level:
        return None
    for special in definition.special_enemy_types:
        if rng.random() < special.chance:
            return special
    return None


def spawn_enemy(
    definition: GameDefinition,
    state: ProgressionState,
    rng: random.Random,
    level: int | None = None,
) -> EnemyState:
    """Replace the current enemy with a fresh one at *level* (default: next level)."""
    cfg = definition.config
    if level is None:
        level = state.advance_enemy_level()
    level = max(1, level)

    is_boss = formulas.is_boss_level(level, cfg.boss_interval)
    special = roll_special(definition, level, rng)

    max_hp = formulas.enemy_max_hp(level, cfg.hp_base, cfg.hp_scale)
    gold = formulas.enemy_gold_reward(level, cfg.gold_base, cfg.gold_scale, cfg.gold_linear_bonus)

    if special is not None:
        name, glyph = special.name, special.glyph
        max_hp = math.floor(max_hp * special.hp_multiplier)
        gold = math.floor(gold * special.gold_multiplier)
    elif is_boss:
        boss = definition.boss_types[(level // cfg.boss_interval - 1) % len(definition.boss_types)]
        name, glyph = boss.name, boss.glyph
        max_hp = math.floor(
            max_hp
            * formulas.boss_hp_multiplier(
                level, cfg.boss_interval, cfg.boss_hp_exponent, cfg.boss_base_hp_mult
            )
        )
        gold = math.floor(
            gold * formulas.boss_gold_multiplier(level, cfg.boss_interval, cfg.boss_gold_mult)
        )
    else:
        enemy = definition.enemy_types[(level - 1) % len(definition.enemy_types)]
        name, glyph = enemy.name, enemy.glyph

    state.enemy = EnemyState(
        level=level,
        max_hp=max(1, max_hp),
        current_hp=max(1, max_hp),
        name=name,
        glyph=glyph,
        gold_reward=gold,
        is_boss=is_boss,
        special_type=special.id if special is not None else None,
    )
    state.pending_spawn_at = None
    return state.enemy


def spawn_due(
    definition: GameDefinition,
    state: ProgressionState,
    rng: random.Random,
    now: float,
) -> EnemyState | None:
    """Spawn the next enemy if a defeat scheduled one and its delay has passed."""
    if state.pending_spawn_at is None or now < state.pending_spawn_at:
        return None
    return spawn_enemy(definition, state, rng)


def ensure_enemy(
    definition: GameDefinition,
    state: ProgressionState,
    rng: random.Random,
) -> EnemyState | None:
    """Make sure a restored state has something to fight.

    An enemy saved at zero HP was defeated, so play continues at the next
    level. A missing enemy respawns at the saved level (or level 1).
    """
    enemy = state.enemy
    if enemy.alive:
        return None
    if enemy.max_hp > 0 and enemy.level > 0:
        return spawn_enemy(definition, state, rng)
    return spawn_enemy(definition, state, rng, level=max(1, enemy.level))


# ── Damage ───────────────────────────────────────────────────────────


def apply_damage(
    definition: GameDefinition,
    state: ProgressionState,
    amount: float,
    now: float,
) -> DamageResult:
    """Deal *amount* damage to the current enemy and pay out on defeat."""
    enemy = state.enemy
    if not enemy.alive:
        return _NO_TARGET

    dealt = enemy.apply_damage(amount)
    if enemy.alive:
        return DamageResult(success=True, dealt=dealt, level=enemy.level)

    cfg = definition.config
    gold = formulas.round_half_up(
        enemy.gold_reward
        * state.total_gold_multiplier()
        * buff_multiplier(state, "gold_boost")
    )
    state.apply_reward(gold)
    state.enemies_defeated += 1

    buff_granted = None
    if enemy.special_type is not None:
        special = definition.get_special(enemy.special_type)
        if special is not None and activate_buff(
            state, special.buff_type, special.buff_amount, special.buff_duration, now
        ):
            buff_granted = special.buff_type

    skills_unlocked = False
    if enemy.level >= cfg.skills_unlock_level and not state.skills_unlocked:
        state.unlock("skills")
        skills_unlocked = True

    state.pending_spawn_at = now + cfg.spawn_delay

    return DamageResult(
        success=True,
        dealt=dealt,
        defeated=True,
        gold_gained=gold,
        level=enemy.level,
        was_boss=enemy.is_boss,
        special_type=enemy.special_type,
        buff_granted=buff_granted,
        skills_unlocked=skills_unlocked,
    )


def crit_chance_for_roll(definition: GameDefinition, state: ProgressionState) -> float:
    chance = state.effective_crit_chance() + crit_buff_bonus(state)
    return min(chance, definition.config.crit_roll_ceiling)


def attack(
    definition: GameDefinition,
    state: ProgressionState,
    rng: random.Random,
    now: float,
) -> AttackResult:
    """Resolve one manual click against the current enemy."""
    if not state.enemy.alive:
        return AttackResult(success=False, failure=Failure.NO_ACTIVE_TARGET)

    state.total_clicks += 1

    damage = (
        state.effective_click_damage()
        * buff_multiplier(state, "damage_boost")
        * skill_damage_multiplier(state)
    )

    is_crit = False
    if state.crit_unlocked:
        is_crit = rng.random() < crit_chance_for_roll(definition, state)
        if is_crit:
            state.total_crits += 1
            damage *= state.crit_multiplier

    hit = apply_damage(definition, state, damage, now)
    return AttackResult(success=True, damage=damage, is_crit=is_crit, hit=hit)


def automated_damage(definition: GameDefinition, state: ProgressionState) -> float:
    """Helper damage for one tick, with every active multiplier applied."""
    return (
        state.dps
        * buff_multiplier(state, "damage_boost")
        * skill_damage_multiplier(state)
        * definition.config.tick_seconds
    )


def apply_automated_tick(
    definition: GameDefinition,
    state: ProgressionState,
    now: float,
) -> DamageResult:
    """Apply one tick of helper damage. Fractional damage is applied as-is."""
    if not state.enemy.alive:
        return _NO_TARGET
    if state.dps <= 0:
        return DamageResult(success=False, level=state.enemy.level)
    return apply_damage(definition, state, automated_damage(definition, state), now)

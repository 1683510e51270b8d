"""Tests for combat module."""
import math
import random

import pytest

from clickerrpg import combat
from clickerrpg._types import Failure
from clickerrpg.content import define_game
from clickerrpg.enemy import EnemyState
from clickerrpg.formulas import enemy_gold_reward, enemy_max_hp
from clickerrpg.state import ProgressionState
from clickerrpg.timers import activate_buff, activate_skill


class FixedRandom(random.Random):
    """Random source that always rolls the same value."""

    def __init__(self, value: float = 0.99) -> None:
        super().__init__(0)
        self.value = value

    def random(self) -> float:
        return self.value


def _make_state(defn=None, level: int = 1, rng=None):
    defn = defn or define_game()
    state = ProgressionState.initial(defn)
    combat.spawn_enemy(defn, state, rng or FixedRandom(), level=level)
    return defn, state


# ── Spawning ─────────────────────────────────────────────────────────


def test_spawn_first_enemy():
    _, state = _make_state()
    enemy = state.enemy
    assert enemy.level == 1
    assert enemy.max_hp == 10
    assert enemy.current_hp == 10
    assert enemy.name == "Slime"
    assert enemy.gold_reward == 4
    assert not enemy.is_boss
    assert enemy.special_type is None


def test_spawn_regular_rotation():
    _, state = _make_state(level=9)
    assert state.enemy.name == "Imp"


def test_spawn_boss():
    _, state = _make_state(level=5)
    enemy = state.enemy
    assert enemy.is_boss
    assert enemy.name == "Giant Slime"
    assert enemy.max_hp == 63
    assert enemy.gold_reward == 37

    _, state = _make_state(level=10)
    assert state.enemy.name == "Goblin King"


def test_boss_levels_never_roll_specials():
    _, state = _make_state(level=10, rng=FixedRandom(0.0))
    assert state.enemy.is_boss
    assert state.enemy.special_type is None


def test_specials_need_minimum_level():
    _, state = _make_state(level=9, rng=FixedRandom(0.0))
    assert state.enemy.special_type is None


def test_spawn_treasure_goblin():
    _, state = _make_state(level=11, rng=FixedRandom(0.0))
    enemy = state.enemy
    assert enemy.special_type == "treasure_goblin"
    assert enemy.name == "Treasure Goblin"
    assert enemy.max_hp == math.floor(enemy_max_hp(11) * 0.7)
    assert enemy.gold_reward == math.floor(enemy_gold_reward(11) * 5.0)
    assert not enemy.is_boss


def test_spawn_defaults_to_next_level():
    defn, state = _make_state(level=3)
    combat.spawn_enemy(defn, state, FixedRandom())
    assert state.enemy.level == 4


# ── Damage ───────────────────────────────────────────────────────────


def test_overkill_pays_once_and_schedules_spawn():
    defn, state = _make_state()
    state.enemy = EnemyState(level=3, max_hp=100, current_hp=100, name="Bat", gold_reward=10)

    hit = combat.apply_damage(defn, state, 150, now=5.0)
    assert hit.defeated
    assert hit.dealt == 100
    assert hit.gold_gained == 10
    assert state.gold == 10
    assert state.enemy.current_hp == 0
    assert state.enemies_defeated == 1
    assert state.pending_spawn_at == pytest.approx(5.5)

    again = combat.apply_damage(defn, state, 50, now=5.1)
    assert not again.success
    assert again.failure is Failure.NO_ACTIVE_TARGET
    assert state.gold == 10

    assert combat.spawn_due(defn, state, FixedRandom(), now=5.4) is None
    spawned = combat.spawn_due(defn, state, FixedRandom(), now=5.5)
    assert spawned is not None
    assert spawned.level == 4
    assert state.pending_spawn_at is None


def test_gold_reward_uses_multipliers():
    defn, state = _make_state()
    state.enemy = EnemyState(level=2, max_hp=5, current_hp=5, gold_reward=10)
    state.gold_multiplier = 1.25
    state.star_gold_multiplier = 0.05
    activate_buff(state, "gold_boost", 1.5, 30, now=0.0)

    hit = combat.apply_damage(defn, state, 5, now=1.0)
    assert hit.gold_gained == 20  # 10 * 1.3 * 1.5 = 19.5 rounds up


def test_defeating_special_grants_buff():
    defn, state = _make_state(level=11, rng=FixedRandom(0.0))
    hit = combat.apply_damage(defn, state, 10_000, now=2.0)
    assert hit.buff_granted == "gold_boost"
    buff = state.buffs["gold_boost"]
    assert buff.active
    assert buff.multiplier == pytest.approx(1.5)
    assert buff.end_time == pytest.approx(32.0)


def test_skills_unlock_on_defeat_at_level_15():
    defn, state = _make_state(level=14)
    hit = combat.apply_damage(defn, state, 10_000, now=0.0)
    assert not hit.skills_unlocked
    assert not state.skills_unlocked

    combat.spawn_enemy(defn, state, FixedRandom(), level=15)
    hit = combat.apply_damage(defn, state, 10_000, now=1.0)
    assert hit.skills_unlocked
    assert state.skills["double_damage"].unlocked


def test_damage_context():
    defn, state = _make_state(level=5)
    hit = combat.apply_damage(defn, state, 10_000, now=0.0)
    ctx = hit.context()
    assert ctx["was_boss"] is True
    assert ctx["was_special"] is False
    assert ctx["level"] == 5


# ── Attacks ──────────────────────────────────────────────────────────


def test_attack_counts_click():
    defn, state = _make_state()
    result = combat.attack(defn, state, FixedRandom(), now=0.0)
    assert result.success
    assert result.damage == 1
    assert not result.is_crit
    assert state.total_clicks == 1
    assert state.enemy.current_hp == 9


def test_attack_without_target():
    defn, state = _make_state()
    state.enemy.current_hp = 0
    result = combat.attack(defn, state, FixedRandom(), now=0.0)
    assert not result.success
    assert result.failure is Failure.NO_ACTIVE_TARGET
    assert state.total_clicks == 0


def test_no_crits_before_unlock():
    defn, state = _make_state()
    state.crit_chance = 0.5
    result = combat.attack(defn, state, FixedRandom(0.0), now=0.0)
    assert not result.is_crit
    assert state.total_crits == 0


def test_crit_multiplies_damage():
    defn, state = _make_state()
    state.unlock("crit")
    state.crit_chance = 0.1
    result = combat.attack(defn, state, FixedRandom(0.05), now=0.0)
    assert result.is_crit
    assert result.damage == pytest.approx(3.0)
    assert state.total_crits == 1

    miss = combat.attack(defn, state, FixedRandom(0.2), now=0.0)
    assert not miss.is_crit


def test_crit_buff_adds_chance():
    defn, state = _make_state()
    state.unlock("crit")
    activate_buff(state, "crit_boost", 1.0, 10, now=0.0)
    assert combat.crit_chance_for_roll(defn, state) == pytest.approx(1.0)
    assert combat.attack(defn, state, FixedRandom(0.99), now=1.0).is_crit


def test_damage_buff_and_skill_stack():
    defn, state = _make_state(level=20)
    state.click_damage = 5
    activate_buff(state, "damage_boost", 2.0, 15, now=0.0)
    state.unlock("skills")
    activate_skill(state, "double_damage", now=0.0)

    result = combat.attack(defn, state, FixedRandom(), now=1.0)
    assert result.damage == pytest.approx(20.0)


# ── Automated damage ─────────────────────────────────────────────────


def test_automated_tick_without_helpers():
    defn, state = _make_state()
    hit = combat.apply_automated_tick(defn, state, now=0.0)
    assert not hit.success
    assert state.enemy.current_hp == 10


def test_automated_tick_applies_fractional_damage():
    defn, state = _make_state()
    state.unlock("helpers")
    state.helpers["warrior"].level = 1
    state.recompute_dps(defn)

    hit = combat.apply_automated_tick(defn, state, now=0.0)
    assert hit.success
    assert hit.dealt == pytest.approx(0.75)
    assert state.enemy.current_hp == pytest.approx(9.25)


def test_ensure_enemy_after_defeated_save():
    defn, state = _make_state(level=7)
    state.enemy.current_hp = 0
    spawned = combat.ensure_enemy(defn, state, FixedRandom())
    assert spawned is not None
    assert state.enemy.level == 8


def test_ensure_enemy_when_missing():
    defn = define_game()
    state = ProgressionState.initial(defn)
    combat.ensure_enemy(defn, state, FixedRandom())
    assert state.enemy.level == 1
    assert state.enemy.alive


def test_ensure_enemy_keeps_living_enemy():
    defn, state = _make_state(level=4)
    assert combat.ensure_enemy(defn, state, FixedRandom()) is None
    assert state.enemy.level == 4

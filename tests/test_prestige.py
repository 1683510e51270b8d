"""Tests for prestige module."""
import random

import pytest

from clickerrpg._types import Failure
from clickerrpg.combat import spawn_enemy
from clickerrpg.content import define_game
from clickerrpg.prestige import perform_prestige, stars_preview
from clickerrpg.state import ProgressionState


def _make_state(level: int = 30):
    defn = define_game()
    state = ProgressionState.initial(defn)
    spawn_enemy(defn, state, random.Random(1), level=level)
    return defn, state


def test_prestige_locked():
    defn, state = _make_state()
    same, result = perform_prestige(defn, state, random.Random(1))
    assert same is state
    assert not result.success
    assert result.failure is Failure.FEATURE_LOCKED


def test_preview():
    defn, state = _make_state(level=30)
    assert stars_preview(defn, state) == pytest.approx(1.2)


def test_prestige_resets_run_and_keeps_meta():
    defn, state = _make_state(level=30)
    state.unlock("prestige")
    state.unlock("helpers")
    state.gold = 9999
    state.click_damage = 40
    state.helpers["mage"].level = 7
    state.gold_multiplier = 1.5
    state.total_clicks = 500
    state.achievements = {"click10", "defeat5", "prestigeReady"}

    fresh, result = perform_prestige(defn, state, random.Random(1))

    assert result.success
    assert result.stars_earned == pytest.approx(1.2)
    assert fresh is not state
    assert fresh.stars == pytest.approx(1.2)
    assert fresh.total_prestiges == 1
    assert fresh.star_gold_multiplier == pytest.approx(0.024)
    assert fresh.prestige_unlocked
    assert fresh.achievements == {"prestigeReady"}
    assert result.kept_achievements == ["prestigeReady"]

    assert fresh.gold == 0
    assert fresh.click_damage == 1
    assert fresh.helpers["mage"].level == 0
    assert fresh.gold_multiplier == 1.0
    assert fresh.total_clicks == 0
    assert not fresh.helpers_unlocked
    assert fresh.enemy.level == 1
    assert fresh.enemy.alive

    # the old state is untouched
    assert state.gold == 9999
    assert state.enemy.level == 30


def test_stars_accumulate():
    defn, state = _make_state(level=30)
    state.unlock("prestige")
    state, _ = perform_prestige(defn, state, random.Random(1))
    spawn_enemy(defn, state, random.Random(1), level=25)
    state, result = perform_prestige(defn, state, random.Random(1))
    assert result.total_stars == pytest.approx(2.2)
    assert state.total_prestiges == 2
    assert state.star_gold_multiplier == pytest.approx(0.044)

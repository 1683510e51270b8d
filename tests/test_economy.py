"""Tests for economy module."""
import pytest

from clickerrpg import economy
from clickerrpg._types import Failure
from clickerrpg.content import define_game
from clickerrpg.state import ProgressionState


def _make_state(gold: int = 0):
    defn = define_game()
    state = ProgressionState.initial(defn)
    state.gold = gold
    return defn, state


def test_upgrade_kinds():
    defn, _ = _make_state()
    assert economy.upgrade_kinds(defn) == [
        "click_damage",
        "crit_chance",
        "helper:warrior",
        "helper:mage",
        "helper:rogue",
    ]


def test_buy_click_damage():
    defn, state = _make_state(gold=8)
    result = economy.purchase(defn, state, "click_damage")
    assert result.success
    assert result.cost == 8
    assert state.gold == 0
    assert state.click_damage == 2
    assert state.click_upgrade_cost == 9


def test_insufficient_funds_changes_nothing():
    defn, state = _make_state(gold=7)
    result = economy.purchase(defn, state, "click_damage")
    assert not result.success
    assert result.failure is Failure.INSUFFICIENT_FUNDS
    assert state.gold == 7
    assert state.click_damage == 1
    assert state.click_upgrade_cost == 8


def test_crit_locked():
    defn, state = _make_state(gold=1000)
    result = economy.purchase(defn, state, "crit_chance")
    assert result.failure is Failure.FEATURE_LOCKED
    assert state.gold == 1000


def test_buy_crit_chance():
    defn, state = _make_state(gold=40)
    state.unlock("crit")
    result = economy.purchase(defn, state, "crit_chance")
    assert result.success
    assert state.crit_chance == pytest.approx(0.01)
    assert state.crit_upgrade_cost == 74
    assert state.gold == 0


def test_crit_chance_never_passes_cap():
    defn, state = _make_state(gold=10**15)
    state.unlock("crit")
    state.crit_chance_bonus = 0.05

    result = None
    for _ in range(100):
        result = economy.purchase(defn, state, "crit_chance")
        if not result.success:
            break
    assert result.failure is Failure.AT_CAP
    assert state.effective_crit_chance() <= 0.5 + 1e-12

    gold = state.gold
    assert economy.purchase(defn, state, "crit_chance").failure is Failure.AT_CAP
    assert state.gold == gold


def test_helpers_locked():
    defn, state = _make_state(gold=1000)
    result = economy.purchase(defn, state, "helper:warrior")
    assert result.failure is Failure.FEATURE_LOCKED
    assert state.helpers["warrior"].level == 0


def test_hire_helper_updates_dps():
    defn, state = _make_state(gold=30)
    state.unlock("helpers")
    result = economy.purchase(defn, state, "helper:warrior")
    assert result.success
    assert state.helpers["warrior"].level == 1
    assert state.helpers["warrior"].cost == 43
    assert state.dps == pytest.approx(1.5)


def test_unknown_kind():
    defn, state = _make_state(gold=1000)
    assert economy.purchase(defn, state, "fireball").failure is Failure.UNKNOWN_KIND
    assert economy.purchase(defn, state, "helper:dragon").failure is Failure.UNKNOWN_KIND
    assert state.gold == 1000


def test_list_upgrades():
    defn, state = _make_state(gold=35)
    state.unlock("helpers")
    upgrades = {u.kind: u for u in economy.list_upgrades(defn, state)}

    assert upgrades["click_damage"].affordable
    assert upgrades["click_damage"].next_value == 2
    assert not upgrades["crit_chance"].available
    assert not upgrades["crit_chance"].affordable
    assert upgrades["helper:warrior"].affordable
    assert upgrades["helper:rogue"].affordable
    assert not upgrades["helper:mage"].affordable
    assert upgrades["helper:mage"].cost == 60

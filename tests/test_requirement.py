"""Tests for requirement module."""
import pytest

from clickerrpg._types import Trigger
from clickerrpg.content import define_game
from clickerrpg.requirement import Req
from clickerrpg.state import ProgressionState


def _make_state() -> ProgressionState:
    """Create a ProgressionState with known values."""
    state = ProgressionState.initial(define_game())
    state.gold = 500
    state.total_clicks = 12
    state.enemy.level = 7
    state.helpers["warrior"].level = 5
    state.helpers["mage"].level = 1
    return state


def test_stat():
    state = _make_state()
    assert Req.stat("gold", ">=", 500).evaluate(Trigger.CLICK, {}, state)
    assert not Req.stat("gold", ">", 500).evaluate(Trigger.CLICK, {}, state)
    assert Req.stat("enemy_level", "==", 7).evaluate(Trigger.SPAWN, {}, state)


def test_stat_unknown_name_raises():
    state = _make_state()
    with pytest.raises(KeyError):
        Req.stat("mana", ">=", 1).evaluate(Trigger.CLICK, {}, state)


def test_helper_level():
    state = _make_state()
    assert Req.helper_level("warrior", ">=", 5).evaluate(Trigger.UPGRADE, {}, state)
    assert not Req.helper_level("rogue", ">", 0).evaluate(Trigger.UPGRADE, {}, state)
    assert not Req.helper_level("dragon", ">", 0).evaluate(Trigger.UPGRADE, {}, state)


def test_trigger():
    state = _make_state()
    req = Req.trigger(Trigger.PRESTIGE)
    assert req.evaluate(Trigger.PRESTIGE, {}, state)
    assert not req.evaluate(Trigger.CLICK, {}, state)


def test_upgrade_needs_upgrade_trigger_and_kind():
    state = _make_state()
    req = Req.upgrade("click_damage")
    assert req.evaluate(Trigger.UPGRADE, {"kind": "click_damage"}, state)
    assert not req.evaluate(Trigger.UPGRADE, {"kind": "crit_chance"}, state)
    assert not req.evaluate(Trigger.CLICK, {"kind": "click_damage"}, state)


def test_helper_hired_only_on_first_level():
    state = _make_state()
    req = Req.helper_hired()
    assert req.evaluate(Trigger.UPGRADE, {"kind": "helper:mage", "helper_id": "mage"}, state)
    assert not req.evaluate(Trigger.UPGRADE, {"kind": "helper:warrior", "helper_id": "warrior"}, state)
    assert not req.evaluate(Trigger.UPGRADE, {"kind": "click_damage", "helper_id": None}, state)


def test_defeated_filters():
    state = _make_state()
    boss_ctx = {"was_boss": True, "was_special": False, "special_type": None}
    goblin_ctx = {"was_boss": False, "was_special": True, "special_type": "treasure_goblin"}

    assert Req.defeated().evaluate(Trigger.ENEMY_DEFEATED, boss_ctx, state)
    assert Req.defeated(boss=True).evaluate(Trigger.ENEMY_DEFEATED, boss_ctx, state)
    assert not Req.defeated(boss=True).evaluate(Trigger.ENEMY_DEFEATED, goblin_ctx, state)
    assert Req.defeated(special=True).evaluate(Trigger.ENEMY_DEFEATED, goblin_ctx, state)
    assert not Req.defeated(special_type="rare_fairy").evaluate(Trigger.ENEMY_DEFEATED, goblin_ctx, state)
    assert not Req.defeated(boss=True).evaluate(Trigger.DAMAGE, boss_ctx, state)


def test_counted_keeps_progress_in_state():
    state = _make_state()
    req = Req.counted(Req.defeated(special_type="treasure_goblin"), counter="goblins", goal=3)
    goblin = {"special_type": "treasure_goblin", "was_special": True}

    assert not req.evaluate(Trigger.ENEMY_DEFEATED, goblin, state)
    assert not req.evaluate(Trigger.CLICK, {}, state)
    assert not req.evaluate(Trigger.ENEMY_DEFEATED, {"special_type": None}, state)
    assert not req.evaluate(Trigger.ENEMY_DEFEATED, goblin, state)
    assert state.achievement_progress["goblins"] == 2
    assert req.evaluate(Trigger.ENEMY_DEFEATED, goblin, state)


def test_and_or():
    state = _make_state()
    rich = Req.stat("gold", ">=", 100)
    poor = Req.stat("gold", "<", 100)
    clicked = Req.stat("total_clicks", ">=", 10)

    assert (rich & clicked).evaluate(Trigger.CLICK, {}, state)
    assert not (poor & clicked).evaluate(Trigger.CLICK, {}, state)
    assert (poor | clicked).evaluate(Trigger.CLICK, {}, state)
    assert not (poor | Req.stat("total_clicks", ">", 100)).evaluate(Trigger.CLICK, {}, state)


def test_all_any():
    state = _make_state()
    assert Req.all(Req.stat("gold", ">", 0), Req.helper_level("mage", "==", 1)).evaluate(
        Trigger.CLICK, {}, state
    )
    assert Req.any(Req.stat("gold", ">", 10_000), Req.helper_level("mage", "==", 1)).evaluate(
        Trigger.CLICK, {}, state
    )
    assert Req.all().evaluate(Trigger.CLICK, {}, state)
    assert not Req.any().evaluate(Trigger.CLICK, {}, state)


def test_custom():
    state = _make_state()
    req = Req.custom(lambda trigger, ctx, s: ctx.get("damage", 0) > 50 and s.gold > 0)
    assert req.evaluate(Trigger.DAMAGE, {"damage": 60}, state)
    assert not req.evaluate(Trigger.DAMAGE, {"damage": 10}, state)

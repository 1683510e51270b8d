"""Tests for MCP server tool functions."""

import json

import pytest

from clickerrpg.content import define_game
from clickerrpg.persistence import MemoryStore

from clickerrpg.mcp.server import (
    _GameHolder,
    _make_holder,
    _tool_activate_skill,
    _tool_attack,
    _tool_cancel_prestige,
    _tool_confirm_prestige,
    _tool_get_game_info,
    _tool_get_game_state,
    _tool_get_upgrades,
    _tool_load,
    _tool_new_game,
    _tool_purchase,
    _tool_request_prestige,
    _tool_save,
    _tool_wait,
    create_server,
)


def _holder(store=None) -> _GameHolder:
    holder = _make_holder(define_game(), store)
    # Crit chance starts at zero, so only spawn rolls touch the rng
    holder.runtime.rng.seed(0)
    return holder


def _unlock_helpers(holder: _GameHolder, gold: int = 1000) -> None:
    state = holder.runtime.get_state()
    state.unlock("helpers")
    state.gold = gold


# ── get_game_info ────────────────────────────────────────────────────


class TestGetGameInfo:
    def test_returns_expected_structure(self):
        result = _tool_get_game_info(_holder())
        assert result["name"] == "Clicker RPG"
        assert [h["id"] for h in result["helpers"]] == ["warrior", "mage", "rogue"]
        assert result["upgrades"][:2] == ["click_damage", "crit_chance"]
        assert result["skills"][0]["id"] == "double_damage"
        assert len(result["special_enemies"]) == 3
        assert result["boss_interval"] == 5

    def test_prestige_achievements_flagged(self):
        result = _tool_get_game_info(_holder())
        flagged = {a["id"] for a in result["achievements"] if a["prestige"]}
        assert flagged == {"prestigeReady", "firstPrestige"}


# ── get_game_state ───────────────────────────────────────────────────


class TestGetGameState:
    def test_initial_values(self):
        result = _tool_get_game_state(_holder())
        assert result["gold"] == 0
        assert result["enemy"]["level"] == 1
        assert result["enemy"]["current_hp"] == 10
        assert result["enemy"]["alive"] is True
        assert result["click_damage"] == 1
        assert result["unlocked"] == {
            "crit": False,
            "helpers": False,
            "skills": False,
            "prestige": False,
        }
        assert result["buffs"] == {}
        assert "prestige_preview" not in result

    def test_prestige_preview_once_unlocked(self):
        holder = _holder()
        holder.runtime.get_state().unlock("prestige")
        result = _tool_get_game_state(holder)
        assert result["prestige_preview"] == 1
        assert result["prestige_pending"] is False


# ── attack ───────────────────────────────────────────────────────────


class TestAttack:
    def test_single_click(self):
        result = _tool_attack(_holder())
        assert result["clicks"] == 1
        assert result["damage_dealt"] == 1
        assert result["enemies_defeated"] == 0

    def test_kills_and_waits_for_respawn(self):
        holder = _holder()
        result = _tool_attack(holder, 25)
        assert result["clicks"] == 25
        assert result["enemies_defeated"] == 2
        assert result["gold_earned"] == 8
        assert result["level"] == 3
        assert result["waited"] == pytest.approx(1.0)
        assert any("unlocked" in e for e in result["events"])

    def test_count_bounds(self):
        holder = _holder()
        assert "error" in _tool_attack(holder, 0)
        assert "error" in _tool_attack(holder, 1001)


# ── purchase / upgrades ──────────────────────────────────────────────


class TestPurchase:
    def test_success(self):
        holder = _holder()
        holder.runtime.get_state().gold = 8
        result = _tool_purchase(holder, "click_damage")
        assert result["success"] is True
        assert result["new_value"] == 2
        assert result["gold"] == 0

    def test_cannot_afford(self):
        result = _tool_purchase(_holder(), "click_damage")
        assert result["success"] is False
        assert result["failure"] == "INSUFFICIENT_FUNDS"

    def test_locked_helper(self):
        result = _tool_purchase(_holder(), "helper:warrior")
        assert result["failure"] == "FEATURE_LOCKED"

    def test_unknown_kind(self):
        result = _tool_purchase(_holder(), "helper:dragon")
        assert result["failure"] == "UNKNOWN_KIND"

    def test_upgrades_listing(self):
        holder = _holder()
        _unlock_helpers(holder, gold=30)
        upgrades = {u["kind"]: u for u in _tool_get_upgrades(holder)["upgrades"]}
        assert upgrades["helper:warrior"]["affordable"] is True
        assert upgrades["helper:mage"]["affordable"] is False


# ── skills ───────────────────────────────────────────────────────────


class TestActivateSkill:
    def test_locked(self):
        result = _tool_activate_skill(_holder(), "double_damage")
        assert result["failure"] == "NOT_UNLOCKED"

    def test_activate_then_cooldown(self):
        holder = _holder()
        holder.runtime.get_state().unlock("skills")
        result = _tool_activate_skill(holder, "double_damage")
        assert result["success"] is True
        assert result["active_for"] == 10.0
        assert result["cooldown"] == 60.0
        again = _tool_activate_skill(holder, "double_damage")
        assert again["failure"] == "ON_COOLDOWN"


# ── wait ─────────────────────────────────────────────────────────────


class TestWait:
    def test_helpers_fight_while_waiting(self):
        holder = _holder()
        _unlock_helpers(holder)
        _tool_purchase(holder, "helper:warrior")
        gold = holder.runtime.get_state().gold

        result = _tool_wait(holder, 60)
        assert result["waited"] == 60
        assert result["levels_gained"] > 0
        assert result["gold"] > gold
        assert result["dps"] > 0

    def test_without_helpers_nothing_happens(self):
        result = _tool_wait(_holder(), 30)
        assert result["gold_earned"] == 0
        assert result["levels_gained"] == 0

    def test_bounds(self):
        holder = _holder()
        assert "error" in _tool_wait(holder, 0)
        assert "error" in _tool_wait(holder, -5)
        assert "error" in _tool_wait(holder, 86401)


# ── prestige ─────────────────────────────────────────────────────────


class TestPrestige:
    def test_locked(self):
        result = _tool_request_prestige(_holder())
        assert result["failure"] == "FEATURE_LOCKED"

    def test_confirm_without_request(self):
        holder = _holder()
        holder.runtime.get_state().unlock("prestige")
        assert _tool_confirm_prestige(holder)["failure"] == "NOT_REQUESTED"

    def test_request_cancel_confirm(self):
        holder = _holder()
        holder.runtime.get_state().unlock("prestige")

        preview = _tool_request_prestige(holder)
        assert preview["success"] is True
        assert preview["stars_earned"] == 1
        assert _tool_cancel_prestige(holder) == {"cancelled": True}
        assert _tool_cancel_prestige(holder) == {"cancelled": False}

        _tool_request_prestige(holder)
        result = _tool_confirm_prestige(holder)
        assert result["success"] is True
        assert result["total_prestiges"] == 1
        assert _tool_get_game_state(holder)["stars"] == 1


# ── save / load / new game ───────────────────────────────────────────


class TestPersistence:
    def test_save_without_store(self):
        result = _tool_save(_holder())
        assert result["failure"] == "STORAGE_ERROR"

    def test_load_missing_save(self):
        result = _tool_load(_holder(MemoryStore()))
        assert result["failure"] == "NO_SAVE"

    def test_save_then_load(self):
        store = MemoryStore()
        holder = _holder(store)
        holder.runtime.get_state().gold = 321
        assert _tool_save(holder)["success"] is True

        _tool_new_game(holder)
        assert _tool_get_game_state(holder)["gold"] == 0

        result = _tool_load(holder)
        assert result["success"] is True
        assert result["gold"] == 321

    def test_new_game_resets(self):
        holder = _holder()
        _tool_attack(holder, 5)
        result = _tool_new_game(holder)
        assert result["success"] is True
        state = _tool_get_game_state(holder)
        assert state["total_clicks"] == 0
        assert state["enemy"]["current_hp"] == 10


# ── server factory ───────────────────────────────────────────────────


class TestCreateServer:
    def test_creates_server(self):
        server = create_server(define_game())
        assert server is not None

    def test_resumes_existing_save(self):
        store = MemoryStore()
        holder = _holder(store)
        holder.runtime.get_state().gold = 99
        holder.runtime.save()

        assert create_server(define_game(), store) is not None
        assert store.read()["gold"] == 99

    def test_starts_fresh_on_unplayable_save(self):
        store = MemoryStore(json.dumps({"version": 2, "enemy": {"level": 10 ** 6}}))
        assert create_server(define_game(), store) is not None

"""MCP server wrapping GameRuntime for interactive play and playtesting."""

from __future__ import annotations

import time
from dataclasses import asdict, dataclass
from typing import Any

from mcp.server.fastmcp import FastMCP

from clickerrpg import timers
from clickerrpg.clock import ManualClock
from clickerrpg.definition import GameDefinition
from clickerrpg.persistence import SaveStore
from clickerrpg.prestige import PrestigeResult, stars_preview
from clickerrpg.runtime import GameRuntime

# Maximum seconds per wait() call (24 hours)
_MAX_WAIT = 86400
# Maximum clicks per attack() call
_MAX_CLICKS = 1000


@dataclass
class _GameHolder:
    """Holds the active game definition, runtime and the clock it runs on."""

    definition: GameDefinition
    runtime: GameRuntime
    clock: ManualClock


def _make_holder(definition: GameDefinition, store: SaveStore | None = None) -> _GameHolder:
    clock = ManualClock(start=time.time())
    runtime = GameRuntime(definition, clock=clock, store=store)
    return _GameHolder(definition=definition, runtime=runtime, clock=clock)


def _failure(result: Any) -> dict[str, Any]:
    return {
        "success": False,
        "failure": result.failure.name if result.failure else None,
        "reason": result.reason,
    }


def _events(holder: _GameHolder) -> list[str]:
    return [n.message for n in holder.runtime.drain_notifications()]


def _advance(holder: _GameHolder, seconds: float) -> None:
    """Move game time forward in automated-tick steps, ticking after each."""
    step = holder.definition.config.tick_seconds
    remaining = seconds
    while remaining > 1e-9:
        dt = min(step, remaining)
        holder.clock.advance(dt)
        holder.runtime.tick()
        remaining -= dt


def _prestige_dict(result: PrestigeResult) -> dict[str, Any]:
    return {
        "success": True,
        "stars_earned": result.stars_earned,
        "total_stars": result.total_stars,
        "total_prestiges": result.total_prestiges,
    }


# ── Tool logic functions (testable without MCP protocol) ────────────


def _tool_get_game_info(holder: _GameHolder) -> dict[str, Any]:
    defn = holder.definition
    cfg = defn.config
    return {
        "name": cfg.name,
        "helpers": [
            {
                "id": h.id,
                "upgrade_kind": h.upgrade_kind,
                "display_name": h.display_name,
                "description": h.description,
                "base_damage": h.base_damage,
                "base_cost": h.base_cost,
            }
            for h in defn.helper_types
        ],
        "upgrades": ["click_damage", "crit_chance"] + [h.upgrade_kind for h in defn.helper_types],
        "skills": [
            {
                "id": s.id,
                "display_name": s.display_name,
                "active_duration": s.active_duration,
                "cooldown_duration": s.cooldown_duration,
                "multiplier": s.multiplier,
            }
            for s in defn.skills
        ],
        "special_enemies": [
            {"id": s.id, "name": s.name, "description": s.description, "chance": s.chance}
            for s in defn.special_enemy_types
        ],
        "achievements": [
            {"id": a.id, "description": a.description, "prestige": a.prestige}
            for a in defn.achievements
        ],
        "boss_interval": cfg.boss_interval,
        "levels_per_star": cfg.levels_per_star,
        "tick_seconds": cfg.tick_seconds,
    }


def _tool_get_game_state(holder: _GameHolder) -> dict[str, Any]:
    state = holder.runtime.get_state()
    now = holder.clock.now()
    enemy = state.enemy

    result: dict[str, Any] = {
        "gold": state.gold,
        "enemy": {
            "level": enemy.level,
            "name": enemy.name,
            "current_hp": round(enemy.current_hp, 2),
            "max_hp": enemy.max_hp,
            "gold_reward": enemy.gold_reward,
            "is_boss": enemy.is_boss,
            "special_type": enemy.special_type,
            "alive": enemy.alive,
        },
        "click_damage": state.effective_click_damage(),
        "crit_chance": round(state.effective_crit_chance(), 4),
        "dps": round(state.dps, 2),
        "helpers": {
            hid: {"level": hs.level, "cost": hs.cost, "dps": round(hs.dps, 2)}
            for hid, hs in state.helpers.items()
        },
        "unlocked": {
            "crit": state.crit_unlocked,
            "helpers": state.helpers_unlocked,
            "skills": state.skills_unlocked,
            "prestige": state.prestige_unlocked,
        },
        "buffs": {
            kind: {
                "multiplier": buff.multiplier,
                "remaining": round(timers.buff_remaining(state, kind, now), 1),
            }
            for kind, buff in state.buffs.items()
            if buff.active
        },
        "skills": {
            sid: {
                "unlocked": skill.unlocked,
                "active": skill.active,
                "cooldown_remaining": round(timers.skill_cooldown_remaining(state, sid, now), 1),
            }
            for sid, skill in state.skills.items()
        },
        "stars": state.stars,
        "total_prestiges": state.total_prestiges,
        "achievements": sorted(state.achievements),
        "total_clicks": state.total_clicks,
        "total_crits": state.total_crits,
        "enemies_defeated": state.enemies_defeated,
    }
    if state.prestige_unlocked:
        result["prestige_preview"] = stars_preview(holder.definition, state)
        result["prestige_pending"] = holder.runtime.prestige_pending()
    return result


def _tool_get_upgrades(holder: _GameHolder) -> dict[str, Any]:
    return {"upgrades": [asdict(u) for u in holder.runtime.get_upgrades()]}


def _tool_attack(holder: _GameHolder, count: int = 1) -> dict[str, Any]:
    if count < 1:
        return {"error": "Count must be at least 1"}
    if count > _MAX_CLICKS:
        return {"error": f"Count cannot exceed {_MAX_CLICKS}"}

    clicks = crits = defeated = gold = 0
    damage = 0.0
    waited = 0.0
    for _ in range(count):
        state = holder.runtime.get_state()
        if not state.enemy.alive and state.pending_spawn_at is not None:
            # Wait out the spawn delay instead of clicking on nothing
            delay = max(0.0, state.pending_spawn_at - holder.clock.now())
            _advance(holder, delay)
            waited += delay
        result = holder.runtime.attack()
        if not result.success:
            break
        clicks += 1
        crits += result.is_crit
        if result.hit is not None:
            damage += result.hit.dealt
            if result.hit.defeated:
                defeated += 1
                gold += result.hit.gold_gained

    state = holder.runtime.get_state()
    return {
        "clicks": clicks,
        "crits": crits,
        "damage_dealt": round(damage, 2),
        "enemies_defeated": defeated,
        "gold_earned": gold,
        "gold": state.gold,
        "level": state.enemy.level,
        "waited": round(waited, 2),
        "events": _events(holder),
    }


def _tool_purchase(holder: _GameHolder, kind: str) -> dict[str, Any]:
    result = holder.runtime.purchase(kind)
    if not result.success:
        return _failure(result)
    return {
        "success": True,
        "kind": kind,
        "cost": result.cost,
        "new_value": result.new_value,
        "gold": holder.runtime.get_state().gold,
        "events": _events(holder),
    }


def _tool_activate_skill(holder: _GameHolder, skill_id: str) -> dict[str, Any]:
    result = holder.runtime.activate_skill(skill_id)
    if not result.success:
        return _failure(result)
    now = holder.clock.now()
    return {
        "success": True,
        "skill_id": skill_id,
        "active_for": round(result.active_until - now, 1),
        "cooldown": round(result.cooldown_until - now, 1),
        "events": _events(holder),
    }


def _tool_wait(holder: _GameHolder, seconds: float) -> dict[str, Any]:
    if seconds <= 0:
        return {"error": "Seconds must be positive"}
    if seconds > _MAX_WAIT:
        return {"error": f"Cannot wait more than {_MAX_WAIT} seconds (24h) per call"}

    state = holder.runtime.get_state()
    gold_before = state.gold
    level_before = state.enemy.level

    _advance(holder, seconds)

    state = holder.runtime.get_state()
    return {
        "waited": seconds,
        "gold": state.gold,
        "gold_earned": state.gold - gold_before,
        "level": state.enemy.level,
        "levels_gained": state.enemy.level - level_before,
        "dps": round(state.dps, 2),
        "events": _events(holder),
    }


def _tool_request_prestige(holder: _GameHolder) -> dict[str, Any]:
    result = holder.runtime.request_prestige()
    if not result.success:
        return _failure(result)
    return {
        "success": True,
        "stars_earned": result.stars_earned,
        "total_stars_after": result.total_stars,
        "message": "Call confirm_prestige to reset progress for these stars",
    }


def _tool_confirm_prestige(holder: _GameHolder) -> dict[str, Any]:
    result = holder.runtime.confirm_prestige()
    if not result.success:
        return _failure(result)
    data = _prestige_dict(result)
    data["events"] = _events(holder)
    return data


def _tool_cancel_prestige(holder: _GameHolder) -> dict[str, Any]:
    return {"cancelled": holder.runtime.cancel_prestige()}


def _tool_save(holder: _GameHolder) -> dict[str, Any]:
    result = holder.runtime.save()
    if not result.success:
        return _failure(result)
    return {"success": True, "saved_at": result.saved_at}


def _tool_load(holder: _GameHolder) -> dict[str, Any]:
    result = holder.runtime.load()
    if not result.success:
        return _failure(result)
    state = holder.runtime.get_state()
    return {
        "success": True,
        "level": state.enemy.level,
        "gold": state.gold,
        "events": _events(holder),
    }


def _tool_new_game(holder: _GameHolder) -> dict[str, Any]:
    holder.runtime.new_game()
    holder.runtime.drain_notifications()
    return {"success": True, "message": "Game reset to initial state"}


# ── Server factory ──────────────────────────────────────────────────


def create_server(definition: GameDefinition, store: SaveStore | None = None) -> FastMCP:
    """Create an MCP server wrapping a GameRuntime for the given definition."""
    holder = _make_holder(definition, store)
    if store is not None:
        # Resume an existing save; a missing one just means a fresh game
        holder.runtime.load()
        holder.runtime.drain_notifications()

    mcp = FastMCP(
        name=f"Clicker RPG: {definition.config.name}",
    )

    @mcp.tool()
    def get_game_info() -> dict[str, Any]:
        """Get static game overview: helpers, upgrades, skills, special enemies, achievements."""
        return _tool_get_game_info(holder)

    @mcp.tool()
    def get_game_state() -> dict[str, Any]:
        """Get current state: gold, enemy, damage, helpers, unlocks, buffs, skills, stars."""
        return _tool_get_game_state(holder)

    @mcp.tool()
    def get_upgrades() -> dict[str, Any]:
        """Get every upgrade with its cost and whether it can be bought now."""
        return _tool_get_upgrades(holder)

    @mcp.tool()
    def attack(count: int = 1) -> dict[str, Any]:
        """Click the current enemy N times (max 1000). Waits out respawn delays."""
        return _tool_attack(holder, count)

    @mcp.tool()
    def purchase(kind: str) -> dict[str, Any]:
        """Buy one level of click_damage, crit_chance or helper:<id>."""
        return _tool_purchase(holder, kind)

    @mcp.tool()
    def activate_skill(skill_id: str) -> dict[str, Any]:
        """Activate a skill, e.g. double_damage."""
        return _tool_activate_skill(holder, skill_id)

    @mcp.tool()
    def wait(seconds: float) -> dict[str, Any]:
        """Advance game time by the given seconds (max 86400) while helpers fight."""
        return _tool_wait(holder, seconds)

    @mcp.tool()
    def request_prestige() -> dict[str, Any]:
        """Preview the stars a prestige would earn. Must be confirmed."""
        return _tool_request_prestige(holder)

    @mcp.tool()
    def confirm_prestige() -> dict[str, Any]:
        """Reset progress for stars after request_prestige."""
        return _tool_confirm_prestige(holder)

    @mcp.tool()
    def cancel_prestige() -> dict[str, Any]:
        """Withdraw a pending prestige request."""
        return _tool_cancel_prestige(holder)

    @mcp.tool()
    def save() -> dict[str, Any]:
        """Save the game to the configured save file."""
        return _tool_save(holder)

    @mcp.tool()
    def load() -> dict[str, Any]:
        """Load the game from the configured save file."""
        return _tool_load(holder)

    @mcp.tool()
    def new_game() -> dict[str, Any]:
        """Reset the game to initial state."""
        return _tool_new_game(holder)

    return mcp

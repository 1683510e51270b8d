"""Save format, tolerant loading, legacy migration and storage backends.

The save is a JSON-compatible dict (``SAVE_VERSION`` 2). Loading never fails
on bad field values: anything that does not parse falls back to the fresh
default and is logged. Saves written by the original browser game (camelCase
keys, no ``version``) are converted before loading.
"""

from __future__ import annotations

import json
import logging
import math
import os
import random
import re
import tempfile
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING, Any, Callable, Mapping

from clickerrpg.achievement import apply_reward
from clickerrpg.combat import ensure_enemy
from clickerrpg.enemy import EnemyState
from clickerrpg.helper import HelperState
from clickerrpg.state import BuffState, ProgressionState

if TYPE_CHECKING:
    from clickerrpg.definition import GameDefinition

logger = logging.getLogger(__name__)

SAVE_VERSION = 2

_FEATURES = ("crit", "helpers", "skills", "prestige")


class PersistenceError(Exception):
    """Storage is unavailable or holds data that is not a save."""


# ── Field readers ────────────────────────────────────────────────────


def _as_int(value: Any) -> int:
    if isinstance(value, bool):
        raise TypeError("boolean is not an integer")
    if isinstance(value, float):
        if not math.isfinite(value):
            raise ValueError("non-finite number")
        return int(value)
    return int(value)


def _as_float(value: Any) -> float:
    if isinstance(value, bool):
        raise TypeError("boolean is not a number")
    result = float(value)
    if not math.isfinite(result):
        raise ValueError("non-finite number")
    return result


def _as_cost(value: Any) -> int:
    cost = _as_int(value)
    if cost < 1:
        raise ValueError(f"cost must be at least 1: {cost}")
    return cost


def _as_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    raise TypeError(f"not a boolean: {value!r}")


def _as_str(value: Any) -> str:
    if not isinstance(value, str):
        raise TypeError(f"not a string: {value!r}")
    return value


def _read(data: Any, key: str, cast: Callable[[Any], Any], default: Any) -> Any:
    if not isinstance(data, Mapping) or key not in data or data[key] is None:
        return default
    try:
        return cast(data[key])
    except (TypeError, ValueError, OverflowError):
        logger.warning("Ignoring invalid save field %r: %r", key, data[key])
        return default


def _section(data: Mapping[str, Any], key: str) -> Mapping[str, Any]:
    value = data.get(key)
    if isinstance(value, Mapping):
        return value
    if value is not None:
        logger.warning("Ignoring invalid save section %r", key)
    return {}


# ── Saving ───────────────────────────────────────────────────────────


def build_save_data(
    definition: GameDefinition,
    state: ProgressionState,
    saved_at: datetime | None = None,
) -> dict[str, Any]:
    """Snapshot everything that must survive a restart."""
    saved_at = saved_at or datetime.now(timezone.utc)
    enemy = state.enemy
    return {
        "version": SAVE_VERSION,
        "saved_at": saved_at.isoformat(),
        "gold": state.gold,
        "click_damage": state.click_damage,
        "click_upgrade_cost": state.click_upgrade_cost,
        "crit_chance": state.crit_chance,
        "crit_upgrade_cost": state.crit_upgrade_cost,
        "helpers": {
            hid: {"level": hs.level, "cost": hs.cost} for hid, hs in state.helpers.items()
        },
        "unlocks": {
            "crit": state.crit_unlocked,
            "helpers": state.helpers_unlocked,
            "skills": state.skills_unlocked,
            "prestige": state.prestige_unlocked,
        },
        "achievements": {
            a.id: True for a in definition.achievements if a.id in state.achievements
        },
        "achievement_progress": dict(state.achievement_progress),
        "bonuses": {
            "click_damage": state.click_damage_multiplier,
            "gold": state.gold_multiplier,
            "crit_chance": state.crit_chance_bonus,
            "helper_damage": state.helper_damage_multiplier,
        },
        "enemy": {
            "level": enemy.level,
            "max_hp": enemy.max_hp,
            "current_hp": enemy.current_hp,
            "name": enemy.name,
            "glyph": enemy.glyph,
            "gold_reward": enemy.gold_reward,
            "is_boss": enemy.is_boss,
            "special_type": enemy.special_type,
        },
        "counters": {
            "total_clicks": state.total_clicks,
            "total_crits": state.total_crits,
            "enemies_defeated": state.enemies_defeated,
        },
        "prestige": {
            "stars": state.stars,
            "total_prestiges": state.total_prestiges,
        },
        "buffs": {
            kind: {"active": b.active, "multiplier": b.multiplier, "end_time": b.end_time}
            for kind, b in state.buffs.items()
        },
        "skills": {
            sid: {
                "unlocked": s.unlocked,
                "active": s.active,
                "active_end_time": s.active_end_time,
                "cooldown_end_time": s.cooldown_end_time,
            }
            for sid, s in state.skills.items()
        },
    }


# ── Legacy saves ─────────────────────────────────────────────────────

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


def _snake(name: str) -> str:
    return _CAMEL_BOUNDARY.sub("_", name).lower()


def is_legacy_save(data: Mapping[str, Any]) -> bool:
    return "version" not in data and any(
        key in data for key in ("playerGold", "enemyLevel", "helperLevel", "helperLevels")
    )


def migrate_legacy_helpers(definition: GameDefinition, data: dict[str, Any]) -> None:
    """Fold a single ``helperLevel`` into per-type levels.

    Only applies when no per-type levels were saved (or all are zero). The
    whole level goes to the definition's legacy helper type and every cost is
    rebuilt by replaying that type's cost curve.
    """
    legacy_level = _read(data, "helperLevel", _as_int, 0)
    if legacy_level <= 0:
        return
    levels = data.get("helperLevels")
    if isinstance(levels, Mapping):
        total = sum(_read(levels, hid, _as_int, 0) for hid in levels)
        if total > 0:
            return

    logger.info(
        "Migrating legacy helper level %d to %r", legacy_level, definition.legacy_helper_id
    )
    new_levels = {h.id: 0 for h in definition.helper_types}
    new_levels[definition.legacy_helper_id] = legacy_level
    data["helperLevels"] = new_levels
    data["helperCosts"] = {
        h.id: h.cost_scaling.replay(h.base_cost, new_levels[h.id])
        for h in definition.helper_types
    }


def upgrade_legacy(definition: GameDefinition, legacy: Mapping[str, Any]) -> dict[str, Any]:
    """Convert a browser-era save into the current layout."""
    data = dict(legacy)
    migrate_legacy_helpers(definition, data)

    def _ms(value: Any) -> float:
        return _as_float(value) / 1000

    levels = _section(data, "helperLevels")
    costs = _section(data, "helperCosts")
    helpers = {
        hid: {"level": levels.get(hid), "cost": costs.get(hid)}
        for hid in set(levels) | set(costs)
    }

    buffs: dict[str, Any] = {}
    for kind, b in _section(data, "activeBuffs").items():
        if isinstance(b, Mapping):
            buffs[_snake(kind)] = {
                "active": b.get("active"),
                "multiplier": b.get("multiplier"),
                "end_time": _read(b, "endTime", _ms, None),
            }

    skills: dict[str, Any] = {}
    for sid, s in _section(data, "activeSkills").items():
        if isinstance(s, Mapping):
            skills[_snake(sid)] = {
                "unlocked": s.get("unlocked"),
                "active": s.get("active"),
                "active_end_time": _read(s, "activeEndTime", _ms, None),
                "cooldown_end_time": _read(s, "cooldownEndTime", _ms, None),
            }

    special = data.get("specialEnemyType")
    bonuses = {
        "click_damage": data.get("achievementClickDamageMultiplier"),
        "gold": data.get("achievementGoldMultiplier"),
        "crit_chance": data.get("achievementCritChanceBonus"),
        "helper_damage": data.get("achievementHelperDamageMultiplier"),
    }

    return {
        "version": SAVE_VERSION,
        "saved_at": data.get("lastSaved"),
        "gold": data.get("playerGold"),
        "click_damage": data.get("playerClickDamage"),
        "click_upgrade_cost": data.get("upgradeClickCost"),
        "crit_chance": data.get("critChance"),
        "crit_upgrade_cost": data.get("upgradeCritChanceCost"),
        "helpers": helpers,
        "unlocks": {
            "crit": data.get("critUnlocked"),
            "helpers": data.get("helpersUnlocked"),
            "skills": data.get("skillsUnlocked"),
            "prestige": data.get("prestigeUnlocked"),
        },
        "achievements": data.get("achievements"),
        "achievement_progress": {
            _snake(k): v for k, v in _section(data, "achievementProgress").items()
        },
        "bonuses": bonuses if any(v is not None for v in bonuses.values()) else None,
        "enemy": {
            "level": data.get("enemyLevel"),
            "max_hp": data.get("enemyMaxHP"),
            "current_hp": data.get("enemyCurrentHP"),
            "name": data.get("enemyName"),
            "glyph": data.get("enemyEmoji"),
            "gold_reward": data.get("enemyGoldReward"),
            "is_boss": data.get("isBoss"),
            "special_type": _snake(special) if isinstance(special, str) else None,
        },
        "counters": {
            "total_clicks": data.get("totalClicks"),
            "total_crits": data.get("totalCrits"),
            "enemies_defeated": data.get("enemiesDefeated"),
        },
        "prestige": {
            "stars": data.get("stars"),
            "total_prestiges": data.get("totalPrestiges"),
        },
        "buffs": buffs,
        "skills": skills,
    }


# ── Loading ──────────────────────────────────────────────────────────


def _achieved_ids(definition: GameDefinition, raw: Any) -> set[str]:
    """Accept ``{id: bool}``, ``[id, ...]`` or ``[bool, ...]`` in table order."""
    known = {a.id for a in definition.achievements}
    if isinstance(raw, Mapping):
        return {k for k, v in raw.items() if k in known and v is True}
    if isinstance(raw, list):
        if all(isinstance(v, bool) for v in raw):
            return {
                a.id for a, flag in zip(definition.achievements, raw) if flag
            }
        return {v for v in raw if isinstance(v, str) and v in known}
    if raw is not None:
        logger.warning("Ignoring invalid save section 'achievements'")
    return set()


def _restore_enemy(state: ProgressionState, raw: Mapping[str, Any]) -> None:
    level = max(0, _read(raw, "level", _as_int, 0))
    max_hp = max(0.0, _read(raw, "max_hp", _as_float, 0.0))
    current_hp = min(max_hp, max(0.0, _read(raw, "current_hp", _as_float, 0.0)))
    special = _read(raw, "special_type", _as_str, None)
    state.enemy = EnemyState(
        level=level,
        max_hp=max_hp,
        current_hp=current_hp,
        name=_read(raw, "name", _as_str, ""),
        glyph=_read(raw, "glyph", _as_str, ""),
        gold_reward=max(0, _read(raw, "gold_reward", _as_int, 0)),
        is_boss=_read(raw, "is_boss", _as_bool, False),
        special_type=special,
    )


def restore_state(definition: GameDefinition, data: Mapping[str, Any]) -> ProgressionState:
    """Build a ProgressionState from save data, defaulting whatever is missing.

    The returned state may have no living enemy (fresh or defeated at save
    time); ``combat.ensure_enemy`` takes care of that.
    """
    if not isinstance(data, Mapping):
        raise PersistenceError("Save data must be an object")
    if is_legacy_save(data):
        logger.info("Converting legacy save to version %d", SAVE_VERSION)
        data = upgrade_legacy(definition, data)

    state = ProgressionState.initial(definition)

    state.gold = _read(data, "gold", _as_int, state.gold)
    state.click_damage = max(1, _read(data, "click_damage", _as_int, state.click_damage))
    state.click_upgrade_cost = _read(data, "click_upgrade_cost", _as_cost, state.click_upgrade_cost)
    state.crit_chance = max(0.0, _read(data, "crit_chance", _as_float, state.crit_chance))
    state.crit_upgrade_cost = _read(data, "crit_upgrade_cost", _as_cost, state.crit_upgrade_cost)

    helpers = _section(data, "helpers")
    for hdef in definition.helper_types:
        raw = helpers.get(hdef.id)
        if not isinstance(raw, Mapping):
            continue
        level = max(0, _read(raw, "level", _as_int, 0))
        cost = _read(raw, "cost", _as_cost, None)
        if cost is None:
            cost = hdef.cost_scaling.replay(hdef.base_cost, level)
        state.helpers[hdef.id] = HelperState(level=level, cost=cost)

    unlocks = _section(data, "unlocks")
    for feature in _FEATURES:
        if _read(unlocks, feature, _as_bool, False):
            state.unlock(feature)

    state.achievements = _achieved_ids(definition, data.get("achievements"))
    state.achievement_progress = {
        str(k): _read({"v": v}, "v", _as_int, 0)
        for k, v in _section(data, "achievement_progress").items()
    }

    bonuses = data.get("bonuses")
    if isinstance(bonuses, Mapping):
        state.click_damage_multiplier = _read(bonuses, "click_damage", _as_float, 1.0)
        state.gold_multiplier = _read(bonuses, "gold", _as_float, 1.0)
        state.crit_chance_bonus = _read(bonuses, "crit_chance", _as_float, 0.0)
        state.helper_damage_multiplier = _read(bonuses, "helper_damage", _as_float, 1.0)
    else:
        _replay_rewards(definition, state)

    counters = _section(data, "counters")
    state.total_clicks = max(0, _read(counters, "total_clicks", _as_int, 0))
    state.total_crits = max(0, _read(counters, "total_crits", _as_int, 0))
    state.enemies_defeated = max(0, _read(counters, "enemies_defeated", _as_int, 0))

    prestige = _section(data, "prestige")
    state.stars = max(0.0, _read(prestige, "stars", _as_float, 0.0))
    state.total_prestiges = max(0, _read(prestige, "total_prestiges", _as_int, 0))
    state.star_gold_multiplier = state.stars * definition.config.star_gold_rate

    _restore_enemy(state, _section(data, "enemy"))

    for kind, raw in _section(data, "buffs").items():
        if kind not in state.buffs or not isinstance(raw, Mapping):
            continue
        if _read(raw, "active", _as_bool, False):
            state.buffs[kind] = BuffState(
                active=True,
                multiplier=_read(raw, "multiplier", _as_float, 1.0),
                end_time=_read(raw, "end_time", _as_float, 0.0),
            )

    for sid, raw in _section(data, "skills").items():
        skill = state.skills.get(sid)
        if skill is None or not isinstance(raw, Mapping):
            continue
        skill.unlocked = skill.unlocked or _read(raw, "unlocked", _as_bool, False)
        skill.active = _read(raw, "active", _as_bool, False)
        skill.active_end_time = _read(raw, "active_end_time", _as_float, 0.0)
        skill.cooldown_end_time = _read(raw, "cooldown_end_time", _as_float, 0.0)

    state.recompute_dps(definition)
    return state


def _replay_rewards(definition: GameDefinition, state: ProgressionState) -> None:
    """Rebuild achievement bonuses from achieved flags when none were saved."""
    for adef in definition.achievements:
        if adef.id not in state.achievements:
            continue
        for reward in adef.rewards:
            apply_reward(reward, state, definition.config.crit_chance_max)


def load_state(
    definition: GameDefinition,
    data: Mapping[str, Any],
    rng: random.Random,
) -> ProgressionState:
    """Restore a save and give it a living enemy.

    Values too large to play with (enemy levels past float range, helper
    levels whose cost curve overflows) make the whole save invalid.
    """
    try:
        state = restore_state(definition, data)
        ensure_enemy(definition, state, rng)
    except OverflowError as exc:
        raise PersistenceError(f"Save data is out of range: {exc}") from exc
    return state


# ── Stores ───────────────────────────────────────────────────────────


class SaveStore(ABC):
    """Where save data lives. Implementations raise PersistenceError."""

    @abstractmethod
    def read(self) -> dict[str, Any] | None:
        """Return the stored save, or None if nothing has been saved."""

    @abstractmethod
    def write(self, data: dict[str, Any]) -> None: ...


def _decode(text: str) -> dict[str, Any]:
    try:
        data = json.loads(text)
    except (ValueError, RecursionError) as exc:
        raise PersistenceError(f"Save data is not valid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise PersistenceError("Save data must be a JSON object")
    return data


class MemoryStore(SaveStore):
    """Keeps the save as a JSON string in memory."""

    def __init__(self, text: str | None = None) -> None:
        self.text = text

    def read(self) -> dict[str, Any] | None:
        if self.text is None:
            return None
        return _decode(self.text)

    def write(self, data: dict[str, Any]) -> None:
        try:
            self.text = json.dumps(data)
        except (TypeError, ValueError) as exc:
            raise PersistenceError(f"Save data is not serializable: {exc}") from exc


class JsonFileStore(SaveStore):
    """Save file on disk, replaced atomically on every write."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def read(self) -> dict[str, Any] | None:
        try:
            text = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as exc:
            raise PersistenceError(f"Cannot read {self.path}: {exc}") from exc
        return _decode(text)

    def write(self, data: dict[str, Any]) -> None:
        try:
            text = json.dumps(data, indent=2)
        except (TypeError, ValueError) as exc:
            raise PersistenceError(f"Save data is not serializable: {exc}") from exc

        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp = tempfile.mkstemp(dir=self.path.parent, prefix=self.path.name, suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(text)
                os.replace(tmp, self.path)
            except BaseException:
                os.unlink(tmp)
                raise
        except OSError as exc:
            raise PersistenceError(f"Cannot write {self.path}: {exc}") from exc

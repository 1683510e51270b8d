"""Time-windowed multipliers: buffs from special enemies and player skills.

All functions take ``now`` explicitly; callers read it from the session's
``Clock`` so expiry is deterministic under test.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from clickerrpg._types import Failure
from clickerrpg.state import BuffState

if TYPE_CHECKING:
    from clickerrpg.state import ProgressionState


@dataclass(frozen=True)
class SkillResult:
    """Outcome of a skill activation attempt."""

    success: bool
    skill_id: str = ""
    active_until: float = 0.0
    cooldown_until: float = 0.0
    failure: Failure | None = None
    reason: str = ""


# ── Buffs ────────────────────────────────────────────────────────────


def activate_buff(
    state: ProgressionState,
    kind: str,
    multiplier: float,
    duration: float,
    now: float,
) -> bool:
    """Start (or refresh) a buff. A new activation replaces the old one."""
    if kind not in state.buffs:
        return False
    state.buffs[kind] = BuffState(active=True, multiplier=multiplier, end_time=now + duration)
    return True


def expire_buffs(state: ProgressionState, now: float) -> list[str]:
    """Deactivate every buff whose window has passed. Returns the expired kinds."""
    expired: list[str] = []
    for kind, buff in state.buffs.items():
        if buff.active and now >= buff.end_time:
            state.buffs[kind] = BuffState()
            expired.append(kind)
    return expired


def buff_multiplier(state: ProgressionState, kind: str) -> float:
    buff = state.buffs.get(kind)
    if buff is None or not buff.active:
        return 1.0
    return buff.multiplier


def crit_buff_bonus(state: ProgressionState) -> float:
    buff = state.buffs.get("crit_boost")
    if buff is None or not buff.active:
        return 0.0
    return buff.multiplier


def buff_remaining(state: ProgressionState, kind: str, now: float) -> float:
    buff = state.buffs.get(kind)
    if buff is None or not buff.active:
        return 0.0
    return max(0.0, buff.end_time - now)


# ── Skills ───────────────────────────────────────────────────────────


def activate_skill(state: ProgressionState, skill_id: str, now: float) -> SkillResult:
    skill = state.skills.get(skill_id)
    if skill is None:
        return SkillResult(
            success=False,
            skill_id=skill_id,
            failure=Failure.UNKNOWN_KIND,
            reason=f"Unknown skill: {skill_id!r}",
        )
    if not skill.unlocked:
        return SkillResult(
            success=False,
            skill_id=skill_id,
            failure=Failure.NOT_UNLOCKED,
            reason="Skill has not been unlocked yet",
        )
    if now < skill.cooldown_end_time:
        return SkillResult(
            success=False,
            skill_id=skill_id,
            cooldown_until=skill.cooldown_end_time,
            failure=Failure.ON_COOLDOWN,
            reason=f"Skill on cooldown for {skill.cooldown_end_time - now:.1f} more seconds",
        )

    # Cooldown runs concurrently with the active window.
    skill.active = True
    skill.active_end_time = now + skill.active_duration
    skill.cooldown_end_time = now + skill.cooldown_duration
    return SkillResult(
        success=True,
        skill_id=skill_id,
        active_until=skill.active_end_time,
        cooldown_until=skill.cooldown_end_time,
    )


def expire_skills(state: ProgressionState, now: float) -> list[str]:
    """End every skill whose active window has passed. Returns their ids."""
    ended: list[str] = []
    for skill_id, skill in state.skills.items():
        if skill.active and now >= skill.active_end_time:
            skill.active = False
            ended.append(skill_id)
    return ended


def skill_damage_multiplier(state: ProgressionState) -> float:
    mult = 1.0
    for skill in state.skills.values():
        if skill.active:
            mult *= skill.multiplier
    return mult


def skill_ready(state: ProgressionState, skill_id: str, now: float) -> bool:
    skill = state.skills.get(skill_id)
    return skill is not None and skill.unlocked and now >= skill.cooldown_end_time


def skill_cooldown_remaining(state: ProgressionState, skill_id: str, now: float) -> float:
    skill = state.skills.get(skill_id)
    if skill is None:
        return 0.0
    return max(0.0, skill.cooldown_end_time - now)

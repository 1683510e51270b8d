from __future__ import annotations

import logging
import random
import threading
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum, auto
from typing import Any

from clickerrpg import combat, economy, timers
from clickerrpg._types import Context, Failure, Trigger
from clickerrpg.achievement import AchievementDef, evaluate_achievements
from clickerrpg.clock import Clock, SystemClock
from clickerrpg.combat import AttackResult, DamageResult
from clickerrpg.definition import GameDefinition
from clickerrpg.economy import PurchaseResult, UpgradeStatus
from clickerrpg.enemy import EnemyState
from clickerrpg.persistence import (
    PersistenceError,
    SaveStore,
    build_save_data,
    load_state,
)
from clickerrpg.prestige import PrestigeResult, perform_prestige, stars_preview
from clickerrpg.state import ProgressionState
from clickerrpg.timers import SkillResult

logger = logging.getLogger(__name__)

# Oldest notifications are dropped once this many are waiting to be drained
MAX_PENDING_NOTIFICATIONS = 256


class NotificationKind(Enum):
    ACHIEVEMENT = auto()
    FEATURE_UNLOCKED = auto()
    ENEMY_DEFEATED = auto()
    ENEMY_SPAWNED = auto()
    BUFF_STARTED = auto()
    BUFF_ENDED = auto()
    SKILL_ACTIVATED = auto()
    SKILL_ENDED = auto()
    PRESTIGE = auto()
    SAVED = auto()
    LOADED = auto()
    SAVE_FAILED = auto()
    LOAD_FAILED = auto()


@dataclass(frozen=True)
class Notification:
    """A one-time event for the presentation layer to show."""

    kind: NotificationKind
    message: str
    time: float = 0.0
    data: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class SaveResult:
    success: bool
    saved_at: str = ""
    failure: Failure | None = None
    reason: str = ""


@dataclass(frozen=True)
class LoadResult:
    success: bool
    failure: Failure | None = None
    reason: str = ""


@dataclass(frozen=True)
class TickResult:
    """Everything one periodic tick did."""

    spawned: EnemyState | None = None
    hit: DamageResult | None = None
    expired_buffs: list[str] = field(default_factory=list)
    ended_skills: list[str] = field(default_factory=list)
    autosaved: bool = False


_FEATURE_NAMES = {
    "crit": "Critical Hits",
    "helpers": "Helpers",
    "skills": "Skills",
    "prestige": "Prestige",
}


class GameRuntime:
    """Owns one player's session: state, clock, randomness and storage.

    Every public method holds the session lock for its whole duration, so a
    tick can never interleave with a player action.
    """

    def __init__(
        self,
        definition: GameDefinition,
        clock: Clock | None = None,
        rng: random.Random | None = None,
        seed: int | None = None,
        store: SaveStore | None = None,
        autosave_interval: float | None = None,
    ) -> None:
        errors = definition.validate()
        if errors:
            raise ValueError(
                "Invalid GameDefinition:\n" + "\n".join(f"  - {e}" for e in errors)
            )

        self.definition = definition
        self.clock = clock if clock is not None else SystemClock()
        self.rng = rng if rng is not None else random.Random(seed)
        self.store = store
        self.autosave_interval = (
            autosave_interval
            if autosave_interval is not None
            else definition.config.autosave_interval
        )

        self._lock = threading.RLock()
        self._notifications: deque[Notification] = deque(maxlen=MAX_PENDING_NOTIFICATIONS)
        self._prestige_requested = False
        self._last_save = self.clock.now()

        self.state = ProgressionState.initial(definition)
        combat.spawn_enemy(definition, self.state, self.rng, level=1)

    # ── Player actions ───────────────────────────────────────────────

    def attack(self) -> AttackResult:
        """One manual click against the current enemy."""
        with self._lock:
            now = self.clock.now()
            before = self._latches()
            result = combat.attack(self.definition, self.state, self.rng, now)
            if not result.success:
                return result

            self._evaluate(Trigger.CLICK, {"is_crit": result.is_crit})
            if result.hit is not None:
                self._after_hit(result.hit, now)
            self._notify_unlocks(before, now)
            return result

    def purchase(self, kind: str) -> PurchaseResult:
        """Buy one level of ``click_damage``, ``crit_chance`` or ``helper:<id>``."""
        with self._lock:
            now = self.clock.now()
            before = self._latches()
            result = economy.purchase(self.definition, self.state, kind)
            if result.success:
                self._evaluate(
                    Trigger.UPGRADE,
                    {"kind": kind, "helper_id": economy.helper_id_of(kind)},
                )
                self._notify_unlocks(before, now)
            return result

    def activate_skill(self, skill_id: str) -> SkillResult:
        with self._lock:
            now = self.clock.now()
            result = timers.activate_skill(self.state, skill_id, now)
            if result.success:
                skill = self.definition.get_skill(skill_id)
                name = skill.display_name if skill and skill.display_name else skill_id
                self._notify(
                    NotificationKind.SKILL_ACTIVATED,
                    f"{name} activated!",
                    now,
                    skill_id=skill_id,
                    active_until=result.active_until,
                )
                self._evaluate(Trigger.SKILL, {"skill_id": skill_id})
            return result

    def request_prestige(self) -> PrestigeResult:
        """Preview a prestige and arm ``confirm_prestige``."""
        with self._lock:
            if not self.state.prestige_unlocked:
                return PrestigeResult(
                    success=False,
                    failure=Failure.FEATURE_LOCKED,
                    reason="Prestige is not unlocked yet",
                )
            earned = stars_preview(self.definition, self.state)
            self._prestige_requested = True
            return PrestigeResult(
                success=True,
                stars_earned=earned,
                total_stars=self.state.stars + earned,
                total_prestiges=self.state.total_prestiges,
            )

    def confirm_prestige(self) -> PrestigeResult:
        with self._lock:
            if not self._prestige_requested:
                return PrestigeResult(
                    success=False,
                    failure=Failure.NOT_REQUESTED,
                    reason="Request a prestige before confirming it",
                )
            self._prestige_requested = False

            now = self.clock.now()
            new_state, result = perform_prestige(self.definition, self.state, self.rng)
            if not result.success:
                return result

            self.state = new_state
            logger.info(
                "Prestige #%d: earned %.1f stars (total %.1f)",
                result.total_prestiges,
                result.stars_earned,
                result.total_stars,
            )
            self._notify(
                NotificationKind.PRESTIGE,
                f"Prestige complete! Earned {result.stars_earned:g} stars",
                now,
                stars_earned=result.stars_earned,
                total_stars=result.total_stars,
            )
            self._evaluate(Trigger.PRESTIGE, {"total_prestiges": result.total_prestiges})
            if self.store is not None:
                self._save(now)
            return result

    def cancel_prestige(self) -> bool:
        """Disarm a pending prestige request. Returns whether one was pending."""
        with self._lock:
            pending = self._prestige_requested
            self._prestige_requested = False
            return pending

    def new_game(self) -> None:
        """Throw away the session and start again from level 1."""
        with self._lock:
            self.state = ProgressionState.initial(self.definition)
            self._prestige_requested = False
            combat.spawn_enemy(self.definition, self.state, self.rng, level=1)

    # ── Core loop ────────────────────────────────────────────────────

    def tick(self) -> TickResult:
        """Periodic update: timers, deferred spawn, helper damage, autosave."""
        with self._lock:
            now = self.clock.now()
            before = self._latches()

            expired = timers.expire_buffs(self.state, now)
            for kind in expired:
                self._notify(NotificationKind.BUFF_ENDED, f"{kind} ended", now, buff=kind)
            ended = timers.expire_skills(self.state, now)
            for skill_id in ended:
                self._notify(NotificationKind.SKILL_ENDED, f"{skill_id} ended", now, skill_id=skill_id)

            spawned = combat.spawn_due(self.definition, self.state, self.rng, now)
            if spawned is not None:
                self._on_spawn(spawned, now)

            hit = combat.apply_automated_tick(self.definition, self.state, now)
            if hit.success:
                self._after_hit(hit, now)

            autosaved = False
            if self.store is not None and now - self._last_save >= self.autosave_interval:
                autosaved = self._save(now).success

            self._notify_unlocks(before, now)
            return TickResult(
                spawned=spawned,
                hit=hit if hit.success else None,
                expired_buffs=expired,
                ended_skills=ended,
                autosaved=autosaved,
            )

    # ── Persistence ──────────────────────────────────────────────────

    def save(self) -> SaveResult:
        with self._lock:
            return self._save(self.clock.now())

    def load(self) -> LoadResult:
        """Replace the session with the stored save.

        On any failure the current session is left exactly as it was.
        """
        with self._lock:
            now = self.clock.now()
            if self.store is None:
                return LoadResult(success=False, failure=Failure.NO_SAVE, reason="No save store configured")
            try:
                data = self.store.read()
                if data is None:
                    return LoadResult(success=False, failure=Failure.NO_SAVE, reason="No save found")
                restored = load_state(self.definition, data, self.rng)
            except PersistenceError as exc:
                logger.exception("Loading save failed")
                self._notify(NotificationKind.LOAD_FAILED, f"Load failed: {exc}", now)
                return LoadResult(success=False, failure=Failure.STORAGE_ERROR, reason=str(exc))

            self.state = restored
            self._prestige_requested = False
            self._last_save = now
            logger.info("Loaded save at level %d", restored.enemy.level)
            self._notify(NotificationKind.LOADED, "Game loaded", now)
            self._evaluate(Trigger.LOAD)
            return LoadResult(success=True)

    def _save(self, now: float) -> SaveResult:
        if self.store is None:
            return SaveResult(success=False, failure=Failure.STORAGE_ERROR, reason="No save store configured")
        saved_at = datetime.now(timezone.utc)
        try:
            self.store.write(build_save_data(self.definition, self.state, saved_at))
        except PersistenceError as exc:
            logger.exception("Saving game failed")
            self._notify(NotificationKind.SAVE_FAILED, f"Save failed: {exc}", now)
            return SaveResult(success=False, failure=Failure.STORAGE_ERROR, reason=str(exc))
        self._last_save = now
        logger.info("Game saved at level %d", self.state.enemy.level)
        self._notify(NotificationKind.SAVED, "Game saved", now)
        return SaveResult(success=True, saved_at=saved_at.isoformat())

    # ── Queries ──────────────────────────────────────────────────────

    def get_state(self) -> ProgressionState:
        """Return live reference to the session state."""
        return self.state

    def get_upgrades(self) -> list[UpgradeStatus]:
        with self._lock:
            return economy.list_upgrades(self.definition, self.state)

    def prestige_pending(self) -> bool:
        return self._prestige_requested

    def drain_notifications(self) -> list[Notification]:
        """Return and clear the notifications emitted since the last drain.

        Only the newest ``MAX_PENDING_NOTIFICATIONS`` are kept between drains.
        """
        with self._lock:
            pending = list(self._notifications)
            self._notifications.clear()
            return pending

    # ── Private helpers ──────────────────────────────────────────────

    def _evaluate(self, trigger: Trigger, context: Context | None = None) -> list[AchievementDef]:
        unlocked = evaluate_achievements(self.definition, self.state, trigger, context)
        now = self.clock.now()
        for adef in unlocked:
            self._notify(
                NotificationKind.ACHIEVEMENT,
                f"Achievement unlocked: {adef.description}",
                now,
                achievement_id=adef.id,
            )
        return unlocked

    def _after_hit(self, hit: DamageResult, now: float) -> None:
        if not hit.defeated:
            self._evaluate(Trigger.DAMAGE, hit.context())
            return

        enemy = self.state.enemy
        self._notify(
            NotificationKind.ENEMY_DEFEATED,
            f"{enemy.name} defeated! +{hit.gold_gained} gold",
            now,
            level=hit.level,
            gold=hit.gold_gained,
        )
        if hit.buff_granted is not None:
            self._notify(
                NotificationKind.BUFF_STARTED,
                f"{hit.buff_granted} active",
                now,
                buff=hit.buff_granted,
            )
        self._evaluate(Trigger.ENEMY_DEFEATED, hit.context())

    def _on_spawn(self, enemy: EnemyState, now: float) -> None:
        self._notify(
            NotificationKind.ENEMY_SPAWNED,
            f"Level {enemy.level}: {enemy.name} appears",
            now,
            level=enemy.level,
            is_boss=enemy.is_boss,
            special_type=enemy.special_type,
        )
        self._evaluate(
            Trigger.SPAWN,
            {"level": enemy.level, "is_boss": enemy.is_boss, "special_type": enemy.special_type},
        )

    def _latches(self) -> dict[str, bool]:
        s = self.state
        return {
            "crit": s.crit_unlocked,
            "helpers": s.helpers_unlocked,
            "skills": s.skills_unlocked,
            "prestige": s.prestige_unlocked,
        }

    def _notify_unlocks(self, before: dict[str, bool], now: float) -> None:
        for feature, was in before.items():
            if not was and self._latches()[feature]:
                self._notify(
                    NotificationKind.FEATURE_UNLOCKED,
                    f"{_FEATURE_NAMES[feature]} unlocked!",
                    now,
                    feature=feature,
                )

    def _notify(self, kind: NotificationKind, message: str, now: float, **data: Any) -> None:
        self._notifications.append(Notification(kind, message, now, data))

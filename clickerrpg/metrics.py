from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from clickerrpg.state import ProgressionState


@dataclass
class StateSnapshot:
    time: float
    gold: int
    level: int
    dps: float
    click_damage: int
    crit_chance: float
    enemies_defeated: int
    stars: float


@dataclass
class PurchaseEvent:
    time: float
    kind: str
    cost: int
    gold_after: int
    level: int


@dataclass
class LevelEvent:
    time: float
    level: int


@dataclass
class AchievementEvent:
    time: float
    achievement_id: str


@dataclass
class PrestigeEvent:
    time: float
    stars_earned: float
    total_stars: float
    level_reached: int
    run_duration: float


@dataclass
class SkillEvent:
    time: float
    skill_id: str


class MetricsCollector:
    """Collects simulation metrics at configurable intervals."""

    def __init__(self, snapshot_interval: float = 1.0) -> None:
        self.snapshot_interval = snapshot_interval
        self._last_snapshot_time: float = -1.0
        self._highest_level = 0

        self.snapshots: list[StateSnapshot] = []
        self.purchases: list[PurchaseEvent] = []
        self.levels: list[LevelEvent] = []
        self.achievements: list[AchievementEvent] = []
        self.prestiges: list[PrestigeEvent] = []
        self.skills: list[SkillEvent] = []

    def record_tick(self, state: ProgressionState, time: float) -> None:
        """Record a snapshot if enough time has passed, and any new best level."""
        if state.enemy.level > self._highest_level:
            self._highest_level = state.enemy.level
            self.levels.append(LevelEvent(time=time, level=state.enemy.level))
        if time - self._last_snapshot_time >= self.snapshot_interval:
            self._take_snapshot(state, time)
            self._last_snapshot_time = time

    def record_purchase(
        self, state: ProgressionState, time: float, kind: str, cost: int
    ) -> None:
        self.purchases.append(
            PurchaseEvent(
                time=time,
                kind=kind,
                cost=cost,
                gold_after=state.gold,
                level=state.enemy.level,
            )
        )

    def record_achievement(self, time: float, achievement_id: str) -> None:
        self.achievements.append(AchievementEvent(time=time, achievement_id=achievement_id))

    def record_prestige(
        self,
        time: float,
        stars_earned: float,
        total_stars: float,
        level_reached: int,
        run_duration: float,
    ) -> None:
        self.prestiges.append(
            PrestigeEvent(
                time=time,
                stars_earned=stars_earned,
                total_stars=total_stars,
                level_reached=level_reached,
                run_duration=run_duration,
            )
        )
        # A new run climbs from level 1 again
        self._highest_level = 0

    def record_skill(self, time: float, skill_id: str) -> None:
        self.skills.append(SkillEvent(time=time, skill_id=skill_id))

    def _take_snapshot(self, state: ProgressionState, time: float) -> None:
        self.snapshots.append(
            StateSnapshot(
                time=time,
                gold=state.gold,
                level=state.enemy.level,
                dps=state.dps,
                click_damage=state.effective_click_damage(),
                crit_chance=state.effective_crit_chance(),
                enemies_defeated=state.enemies_defeated,
                stars=state.stars,
            )
        )

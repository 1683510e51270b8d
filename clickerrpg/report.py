from __future__ import annotations

from dataclasses import dataclass, field

from clickerrpg.metrics import (
    AchievementEvent,
    LevelEvent,
    MetricsCollector,
    PrestigeEvent,
    PurchaseEvent,
    SkillEvent,
    StateSnapshot,
)


@dataclass
class SimulationReport:
    """Container for simulation results and derived metrics."""

    strategy_description: str = ""
    terminal_description: str = ""
    outcome: str = ""
    total_time: float = 0.0
    final_level: int = 0
    final_gold: int = 0
    total_clicks: int = 0

    # Raw metrics
    snapshots: list[StateSnapshot] = field(default_factory=list)
    purchases: list[PurchaseEvent] = field(default_factory=list)
    levels: list[LevelEvent] = field(default_factory=list)
    achievements: list[AchievementEvent] = field(default_factory=list)
    prestiges: list[PrestigeEvent] = field(default_factory=list)
    skills: list[SkillEvent] = field(default_factory=list)

    # Derived metrics
    achievement_times: dict[str, float] = field(default_factory=dict)
    level_times: dict[int, float] = field(default_factory=dict)
    purchase_counts: dict[str, int] = field(default_factory=dict)
    purchase_gaps: list[float] = field(default_factory=list)
    max_purchase_gap: float = 0.0
    mean_purchase_gap: float = 0.0
    purchases_per_minute: float = 0.0

    def achievement_time(self, achievement_id: str) -> float | None:
        return self.achievement_times.get(achievement_id)

    def time_to_level(self, level: int) -> float | None:
        """First time any run reached *level*."""
        return self.level_times.get(level)

    def series(self, attr: str) -> list[tuple[float, float]]:
        """Return (time, value) series for one snapshot field, e.g. ``"gold"``."""
        return [(s.time, getattr(s, attr)) for s in self.snapshots]


def build_report(
    collector: MetricsCollector,
    strategy_description: str,
    terminal_description: str,
    outcome: str,
    total_time: float,
    final_level: int = 0,
    final_gold: int = 0,
    total_clicks: int = 0,
) -> SimulationReport:
    """Build a SimulationReport from collected metrics."""
    achievement_times = {a.achievement_id: a.time for a in collector.achievements}

    level_times: dict[int, float] = {}
    for ev in collector.levels:
        level_times.setdefault(ev.level, ev.time)

    purchase_counts: dict[str, int] = {}
    for p in collector.purchases:
        purchase_counts[p.kind] = purchase_counts.get(p.kind, 0) + 1

    purchase_gaps: list[float] = []
    purchase_times = sorted(p.time for p in collector.purchases)
    if purchase_times:
        purchase_gaps.append(purchase_times[0])  # gap from t=0 to first purchase
        for i in range(1, len(purchase_times)):
            purchase_gaps.append(purchase_times[i] - purchase_times[i - 1])

    max_gap = max(purchase_gaps) if purchase_gaps else 0.0
    mean_gap = (sum(purchase_gaps) / len(purchase_gaps)) if purchase_gaps else 0.0
    ppm = (len(collector.purchases) / total_time * 60.0) if total_time > 0 else 0.0

    return SimulationReport(
        strategy_description=strategy_description,
        terminal_description=terminal_description,
        outcome=outcome,
        total_time=total_time,
        final_level=final_level,
        final_gold=final_gold,
        total_clicks=total_clicks,
        snapshots=collector.snapshots,
        purchases=collector.purchases,
        levels=collector.levels,
        achievements=collector.achievements,
        prestiges=collector.prestiges,
        skills=collector.skills,
        achievement_times=achievement_times,
        level_times=level_times,
        purchase_counts=purchase_counts,
        purchase_gaps=purchase_gaps,
        max_purchase_gap=max_gap,
        mean_purchase_gap=mean_gap,
        purchases_per_minute=ppm,
    )

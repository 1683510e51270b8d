from __future__ import annotations

import logging

from clickerrpg import timers
from clickerrpg.clock import ManualClock
from clickerrpg.definition import GameDefinition
from clickerrpg.metrics import MetricsCollector
from clickerrpg.prestige import stars_preview
from clickerrpg.report import SimulationReport, build_report
from clickerrpg.runtime import GameRuntime, NotificationKind
from clickerrpg.strategy import Strategy
from clickerrpg.terminal import SimulationContext, TerminalCondition

logger = logging.getLogger(__name__)

MAX_TICKS = 10_000_000
MAX_PURCHASES_PER_TICK = 1_000


class Simulation:
    """Orchestrates a headless simulation of a game definition.

    Time advances one automated tick at a time on a ManualClock, so a run is
    fully reproducible from its seed.
    """

    def __init__(
        self,
        definition: GameDefinition,
        strategy: Strategy,
        terminal: TerminalCondition,
        seed: int | None = None,
        snapshot_interval: float = 1.0,
        max_ticks: int = MAX_TICKS,
    ) -> None:
        self.definition = definition
        self.strategy = strategy
        self.terminal = terminal
        self.max_ticks = max_ticks

        self.clock = ManualClock()
        self.runtime = GameRuntime(definition, clock=self.clock, seed=seed)
        self.collector = MetricsCollector(snapshot_interval=snapshot_interval)
        self.context = SimulationContext()
        self._run_started = 0.0

    def run(self) -> SimulationReport:
        dt = self.definition.config.tick_seconds
        tick_count = 0

        while not self.terminal.is_met(self.runtime.state, self.context):
            tick_count += 1
            if tick_count > self.max_ticks:
                break

            # 1. Advance time
            now = self.clock.advance(dt)
            self.context.elapsed = now
            self.runtime.tick()

            # 2. Clicks
            self._click(dt)

            # 3. Skills
            self._use_skills(now)

            # 4. Purchases
            self._buy(now)

            # 5. Prestige
            self._maybe_prestige(now)

            # 6. Achievements unlocked this tick
            for note in self.runtime.drain_notifications():
                if note.kind is NotificationKind.ACHIEVEMENT:
                    self.collector.record_achievement(now, note.data["achievement_id"])

            # 7. Record metrics
            self.collector.record_tick(self.runtime.state, now)

        met = self.terminal.is_met(self.runtime.state, self.context)
        outcome = "Terminal condition met" if met else "Max ticks reached"
        logger.debug("Simulation finished after %d ticks: %s", tick_count, outcome)
        return self._build_report(outcome)

    def _click(self, dt: float) -> None:
        clicks = self.strategy.get_clicks(self.runtime.state, dt)
        for _ in range(clicks):
            if not self.runtime.attack().success:
                break

    def _use_skills(self, now: float) -> None:
        state = self.runtime.state
        ready = [sid for sid in state.skills if timers.skill_ready(state, sid, now)]
        if not ready:
            return
        for skill_id in self.strategy.choose_skills(state, ready):
            if self.runtime.activate_skill(skill_id).success:
                self.collector.record_skill(now, skill_id)

    def _buy(self, now: float) -> None:
        bought = 0
        while bought < MAX_PURCHASES_PER_TICK:
            affordable = [u for u in self.runtime.get_upgrades() if u.affordable]
            to_buy = self.strategy.decide_purchases(self.runtime.state, affordable)
            progressed = False
            for kind in to_buy:
                result = self.runtime.purchase(kind)
                if result.success:
                    self.collector.record_purchase(self.runtime.state, now, kind, result.cost)
                    self.context.last_purchase_time = now
                    self.context.total_purchases += 1
                    bought += 1
                    progressed = True
                    # Costs changed; ask the strategy again
                    break
            if not progressed:
                return

    def _maybe_prestige(self, now: float) -> None:
        state = self.runtime.state
        if not state.prestige_unlocked:
            return
        if not self.strategy.should_prestige(state, stars_preview(self.definition, state)):
            return

        level = state.enemy.level
        if not self.runtime.request_prestige().success:
            return
        result = self.runtime.confirm_prestige()
        if result.success:
            self.collector.record_prestige(
                now,
                result.stars_earned,
                result.total_stars,
                level,
                now - self._run_started,
            )
            self._run_started = now

    def _build_report(self, outcome: str) -> SimulationReport:
        state = self.runtime.state
        return build_report(
            collector=self.collector,
            strategy_description=self.strategy.describe(),
            terminal_description=self.terminal.describe(),
            outcome=outcome,
            total_time=self.context.elapsed,
            final_level=state.enemy.level,
            final_gold=state.gold,
            total_clicks=state.total_clicks,
        )

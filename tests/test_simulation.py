"""Tests for simulation module."""
import pytest

from clickerrpg.content import define_game
from clickerrpg.economy import UpgradeStatus
from clickerrpg.requirement import Req
from clickerrpg.simulation import Simulation
from clickerrpg.state import ProgressionState
from clickerrpg.strategy import (
    ClickProfile,
    CustomStrategy,
    GreedyCheapest,
    PriorityList,
    helpers_first,
)
from clickerrpg.terminal import SimulationContext, Terminal


def _upgrade(kind: str, cost: int, value: float = 0) -> UpgradeStatus:
    return UpgradeStatus(
        kind=kind,
        display_name=kind,
        value=value,
        cost=cost,
        available=True,
        affordable=True,
        maxed=False,
        next_value=value + 1,
    )


def test_tick_mode_progresses():
    strategy = GreedyCheapest(click_profile=ClickProfile(cps=5.0))
    sim = Simulation(define_game(), strategy, Terminal.time(300), seed=42)
    report = sim.run()

    assert report.total_time >= 300.0
    assert report.outcome == "Terminal condition met"
    assert report.final_level > 5
    assert len(report.purchases) > 0
    assert "click10" in report.achievement_times
    assert "defeat5" in report.achievement_times
    assert 0 < report.total_clicks <= 1500


def test_same_seed_same_run():
    def run():
        strategy = GreedyCheapest(click_profile=ClickProfile(cps=4.0))
        return Simulation(define_game(), strategy, Terminal.time(200), seed=7).run()

    first, second = run(), run()
    assert first.final_level == second.final_level
    assert first.final_gold == second.final_gold
    assert first.achievement_times == second.achievement_times


def test_level_terminal():
    strategy = GreedyCheapest(click_profile=ClickProfile(cps=5.0))
    terminal = Terminal.any(Terminal.level(6), Terminal.time(3600))
    report = Simulation(define_game(), strategy, terminal, seed=1).run()

    assert report.final_level >= 6
    assert report.total_time < 3600
    assert report.time_to_level(6) is not None
    assert report.time_to_level(2) < report.time_to_level(6)


def test_no_clicks_no_progress():
    report = Simulation(define_game(), GreedyCheapest(), Terminal.time(60), seed=1).run()
    assert report.final_level == 1
    assert report.final_gold == 0
    assert report.purchases == []


def test_max_ticks():
    sim = Simulation(define_game(), GreedyCheapest(), Terminal.time(10_000), max_ticks=10)
    report = sim.run()
    assert report.outcome == "Max ticks reached"
    assert report.total_time == pytest.approx(5.0)


def test_prestige_during_simulation():
    strategy = GreedyCheapest(
        click_profile=ClickProfile(cps=10.0),
        prestige_at_level=26,
    )
    terminal = Terminal.any(Terminal.prestiges(1), Terminal.time(4 * 3600))
    report = Simulation(define_game(), strategy, terminal, seed=3).run()

    assert len(report.prestiges) == 1
    event = report.prestiges[0]
    assert event.level_reached >= 26
    assert event.stars_earned >= 1
    assert "firstPrestige" in report.achievement_times


def test_report_has_purchase_gaps():
    strategy = GreedyCheapest(click_profile=ClickProfile(cps=5.0))
    report = Simulation(define_game(), strategy, Terminal.time(120), seed=42).run()

    assert len(report.purchase_gaps) == len(report.purchases)
    assert report.max_purchase_gap >= report.mean_purchase_gap >= 0
    assert report.purchases_per_minute > 0
    assert sum(report.purchase_counts.values()) == len(report.purchases)
    assert report.series("gold")[0][0] == pytest.approx(0.5)


# ── Strategies ───────────────────────────────────────────────────────


def test_click_profile_carries_fractions():
    profile = ClickProfile(cps=3.0)
    state = ProgressionState.initial(define_game())
    clicks = [profile.get_clicks(state, 0.5) for _ in range(4)]
    assert clicks == [1, 2, 1, 2]


def test_click_profile_stops_when_requirement_met():
    profile = ClickProfile(cps=10.0, active_until=Req.stat("gold", ">=", 100))
    state = ProgressionState.initial(define_game())
    assert profile.get_clicks(state, 1.0) == 10
    state.gold = 100
    assert profile.get_clicks(state, 1.0) == 0


def test_greedy_orders_by_weighted_cost():
    state = ProgressionState.initial(define_game())
    affordable = [
        _upgrade("helper:warrior", 30),
        _upgrade("click_damage", 8),
        _upgrade("helper:rogue", 25),
    ]
    assert GreedyCheapest().decide_purchases(state, affordable) == [
        "click_damage",
        "helper:rogue",
        "helper:warrior",
    ]
    weighted = GreedyCheapest(cost_weights={"click_damage": 10.0})
    assert weighted.decide_purchases(state, affordable)[-1] == "click_damage"


def test_greedy_skills_and_prestige():
    state = ProgressionState.initial(define_game())
    strategy = GreedyCheapest(prestige_at_level=30)
    assert strategy.choose_skills(state, ["double_damage"]) == ["double_damage"]
    assert GreedyCheapest(use_skills=False).choose_skills(state, ["double_damage"]) == []

    state.enemy.level = 29
    assert not strategy.should_prestige(state, 1.1)
    state.enemy.level = 30
    assert strategy.should_prestige(state, 1.2)
    assert not GreedyCheapest().should_prestige(state, 1.2)


def test_priority_list_then_fallback():
    state = ProgressionState.initial(define_game())
    strategy = PriorityList(
        priorities=[("helper:mage", 2)],
        fallback=GreedyCheapest(),
    )
    affordable = [_upgrade("click_damage", 8), _upgrade("helper:mage", 60, value=1)]
    assert strategy.decide_purchases(state, affordable) == ["helper:mage"]

    affordable = [_upgrade("click_damage", 8), _upgrade("helper:mage", 80, value=2)]
    assert strategy.decide_purchases(state, affordable) == ["click_damage", "helper:mage"]
    assert "helper:magex2" in strategy.describe()


def test_helpers_first_prioritizes_every_helper():
    strategy = helpers_first(define_game(), helper_target=3)
    assert [kind for kind, _ in strategy.priorities] == [
        "helper:warrior",
        "helper:mage",
        "helper:rogue",
    ]


def test_custom_strategy():
    strategy = CustomStrategy(
        decide_fn=lambda s, affordable: [u.kind for u in affordable if u.kind == "click_damage"],
        clicks_fn=lambda s, dt: 3,
        name="ClickOnly",
    )
    report = Simulation(define_game(), strategy, Terminal.time(60), seed=2).run()
    assert set(report.purchase_counts) <= {"click_damage"}
    assert report.total_clicks > 0
    assert strategy.describe() == "ClickOnly"


# ── Terminal conditions ──────────────────────────────────────────────


def test_terminal_conditions():
    state = ProgressionState.initial(define_game())
    ctx = SimulationContext(elapsed=100.0, last_purchase_time=20.0)

    assert Terminal.time(100).is_met(state, ctx)
    assert not Terminal.time(101).is_met(state, ctx)
    assert Terminal.stall(80).is_met(state, ctx)
    assert not Terminal.stall(81).is_met(state, ctx)

    state.enemy.level = 12
    assert Terminal.level(12).is_met(state, ctx)
    assert Terminal.stat("enemy_level", ">", 10).is_met(state, ctx)
    assert not Terminal.prestiges(1).is_met(state, ctx)
    assert not Terminal.achievement("click10").is_met(state, ctx)

    both = Terminal.all(Terminal.level(12), Terminal.time(200))
    either = Terminal.any(Terminal.level(12), Terminal.time(200))
    assert not both.is_met(state, ctx)
    assert either.is_met(state, ctx)
    assert either.describe() == "level(12) OR time(200)"

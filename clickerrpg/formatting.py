from __future__ import annotations

import math
from typing import TYPE_CHECKING

from clickerrpg.formulas import round_half_up
from clickerrpg.report import SimulationReport

if TYPE_CHECKING:
    from clickerrpg.definition import GameDefinition
    from clickerrpg.state import ProgressionState

SUFFIXES = ["", "k", "M", "B", "T", "q", "Q", "s", "S"]


def format_number(num: float) -> str:
    """Short display form: 999, 1.5k, 12.3M, 123B; exponent past the last suffix."""
    if isinstance(num, bool) or not isinstance(num, (int, float)):
        return "0"
    if isinstance(num, float) and not math.isfinite(num):
        return "0"
    value = num if isinstance(num, int) else round_half_up(num)
    sign = "-" if value < 0 else ""
    value = abs(value)
    if value < 1000:
        return f"{sign}{value}"

    digits = str(value)
    tier = (len(digits) - 1) // 3
    while tier < len(SUFFIXES):
        scaled = value / 10 ** (tier * 3)
        places = 2 if scaled < 10 else 1 if scaled < 100 else 0
        text = f"{scaled:.{places}f}"
        # 999.95k rounds to "1000"; that belongs to the next suffix
        if float(text) < 1000:
            if "." in text:
                text = text.rstrip("0").rstrip(".")
            return sign + text + SUFFIXES[tier]
        tier += 1
    return f"{sign}{digits[0]}.{digits[1]}e+{len(digits) - 1:02d}"


def format_duration(seconds: float) -> str:
    seconds = max(0, int(seconds))
    hours, rem = divmod(seconds, 3600)
    minutes, secs = divmod(rem, 60)
    if hours:
        return f"{hours}h {minutes:02d}m {secs:02d}s"
    if minutes:
        return f"{minutes}m {secs:02d}s"
    return f"{secs}s"


def format_state_summary(definition: GameDefinition, state: ProgressionState) -> str:
    """Multi-line overview of a session, for save inspection."""
    enemy = state.enemy
    kind = " (boss)" if enemy.is_boss else f" ({enemy.special_type})" if enemy.special_type else ""
    unlocked = [
        name
        for name, flag in (
            ("crit", state.crit_unlocked),
            ("helpers", state.helpers_unlocked),
            ("skills", state.skills_unlocked),
            ("prestige", state.prestige_unlocked),
        )
        if flag
    ]

    lines = [
        f"Level {enemy.level}: {enemy.name}{kind} "
        f"{format_number(enemy.current_hp)}/{format_number(enemy.max_hp)} HP",
        f"Gold: {format_number(state.gold)}",
        f"Click damage: {state.effective_click_damage()} "
        f"(crit {state.effective_crit_chance() * 100:.1f}%)",
        f"DPS: {state.dps:.1f}",
        "Helpers: "
        + ", ".join(f"{h.display_name} {state.helper_level(h.id)}" for h in definition.helper_types),
        f"Unlocked: {', '.join(unlocked) or 'nothing yet'}",
        f"Stars: {state.stars:g} (+{state.star_gold_multiplier * 100:.0f}% gold), "
        f"prestiges: {state.total_prestiges}",
        f"Achievements: {len(state.achievements)}/{len(definition.achievements)}",
        f"Clicks: {state.total_clicks}, crits: {state.total_crits}, "
        f"defeated: {state.enemies_defeated}",
    ]
    return "\n".join(lines)


def format_text_report(report: SimulationReport) -> str:
    """Format a simulation report for console output."""
    lines: list[str] = []

    lines.append("=" * 30 + " Clicker RPG Simulation Report " + "=" * 30)
    lines.append(f"Strategy: {report.strategy_description}")
    lines.append(f"Terminal: {report.terminal_description}")
    lines.append(f"Result: {report.outcome} at {format_duration(report.total_time)}")
    lines.append(
        f"Final: level {report.final_level}, {format_number(report.final_gold)} gold, "
        f"{report.total_clicks} clicks"
    )
    lines.append("")

    # Level pacing
    marks = [lvl for lvl in sorted(report.level_times) if lvl % 5 == 0]
    if marks:
        lines.append("LEVELS:")
        for lvl in marks:
            lines.append(f"  Level {lvl:<4d} {format_duration(report.level_times[lvl])}")
        lines.append("")

    if report.achievements:
        lines.append("ACHIEVEMENTS:")
        for a in report.achievements:
            lines.append(f"  * {a.achievement_id:.<30s} {format_duration(a.time)}")
        lines.append("")

    lines.append("PURCHASES:")
    lines.append(f"  Total: {len(report.purchases)}")
    for kind, count in sorted(report.purchase_counts.items()):
        lines.append(f"    {kind}: {count}")
    lines.append(f"  Rate: {report.purchases_per_minute:.1f}/min")
    lines.append(f"  Max gap: {report.max_purchase_gap:.1f}s")
    lines.append(f"  Mean gap: {report.mean_purchase_gap:.1f}s")

    if report.prestiges:
        lines.append("")
        lines.append("PRESTIGES:")
        for p in report.prestiges:
            lines.append(
                f"  {format_duration(p.time)}: level {p.level_reached}, "
                f"+{p.stars_earned:g} stars (total {p.total_stars:g})"
            )

    return "\n".join(lines)

from __future__ import annotations

import csv
import json
from pathlib import Path

from clickerrpg.report import SimulationReport


def export_csv(report: SimulationReport, path: str | Path) -> None:
    """Export simulation data as CSV files.

    Creates three files:
      - {path}_snapshots.csv
      - {path}_purchases.csv
      - {path}_achievements.csv
    """
    base = str(path)

    with open(f"{base}_snapshots.csv", "w", newline="") as f:
        writer = csv.writer(f)
        writer.writerow(
            ["time", "gold", "level", "dps", "click_damage", "crit_chance", "enemies_defeated", "stars"]
        )
        for s in report.snapshots:
            writer.writerow([
                s.time,
                s.gold,
                s.level,
                s.dps,
                s.click_damage,
                s.crit_chance,
                s.enemies_defeated,
                s.stars,
            ])

    with open(f"{base}_purchases.csv", "w", newline="") as f:
        writer = csv.writer(f)
        writer.writerow(["time", "kind", "cost", "gold_after", "level"])
        for p in report.purchases:
            writer.writerow([p.time, p.kind, p.cost, p.gold_after, p.level])

    with open(f"{base}_achievements.csv", "w", newline="") as f:
        writer = csv.writer(f)
        writer.writerow(["time", "achievement_id"])
        for a in report.achievements:
            writer.writerow([a.time, a.achievement_id])


def export_json(report: SimulationReport, path: str | Path) -> None:
    """Export full simulation report as JSON."""
    data = {
        "strategy": report.strategy_description,
        "terminal": report.terminal_description,
        "outcome": report.outcome,
        "total_time": report.total_time,
        "final_level": report.final_level,
        "final_gold": report.final_gold,
        "total_clicks": report.total_clicks,
        "achievement_times": report.achievement_times,
        "level_times": {str(k): v for k, v in report.level_times.items()},
        "purchase_counts": report.purchase_counts,
        "purchases_per_minute": report.purchases_per_minute,
        "max_purchase_gap": report.max_purchase_gap,
        "mean_purchase_gap": report.mean_purchase_gap,
        "prestiges": [
            {
                "time": p.time,
                "stars_earned": p.stars_earned,
                "total_stars": p.total_stars,
                "level_reached": p.level_reached,
                "run_duration": p.run_duration,
            }
            for p in report.prestiges
        ],
        "purchases": [
            {"time": p.time, "kind": p.kind, "cost": p.cost}
            for p in report.purchases
        ],
    }
    with open(str(path), "w") as f:
        json.dump(data, f, indent=2)

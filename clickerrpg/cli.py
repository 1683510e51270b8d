from __future__ import annotations

import argparse
import importlib
import logging
import random
import sys

from clickerrpg.definition import GameDefinition
from clickerrpg.formatting import format_state_summary, format_text_report
from clickerrpg.persistence import JsonFileStore, PersistenceError, load_state
from clickerrpg.simulation import Simulation
from clickerrpg.strategy import ClickProfile, GreedyCheapest, Strategy, helpers_first
from clickerrpg.terminal import Terminal, TerminalCondition

DEFAULT_GAME = "clickerrpg.content"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="clickerrpg",
        description="Clicker RPG progression core and balance simulation CLI",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity (default: WARNING)",
    )
    sub = parser.add_subparsers(dest="command")

    sim = sub.add_parser("simulate", help="Run a balance simulation")
    sim.add_argument(
        "game_module",
        nargs="?",
        default=DEFAULT_GAME,
        help=f"Python module with define_game() (default: {DEFAULT_GAME})",
    )
    sim.add_argument(
        "--strategy",
        default="greedy_cheapest",
        choices=["greedy_cheapest", "helpers_first"],
        help="Strategy to use (default: greedy_cheapest)",
    )
    sim.add_argument("--cps", type=float, default=5.0, help="Clicks per second")
    sim.add_argument("--no-skills", action="store_true", help="Never activate skills")
    sim.add_argument(
        "--prestige-at", type=int, default=None, help="Prestige on reaching this level"
    )
    sim.add_argument("--seed", type=int, default=None, help="Random seed")
    sim.add_argument(
        "--terminal-time", type=float, default=3600, help="Max simulation time (s)"
    )
    sim.add_argument(
        "--terminal-level", type=int, default=None, help="Stop on reaching this level"
    )
    sim.add_argument("--export-csv", default=None, help="CSV export path prefix")
    sim.add_argument("--export-json", default=None, help="JSON export path")
    sim.add_argument("--plot", default=None, help="Plot output path (PNG)")
    sim.add_argument(
        "--monte-carlo",
        type=int,
        default=None,
        help="Number of Monte Carlo runs",
    )

    inspect = sub.add_parser("inspect-save", help="Summarize a save file")
    inspect.add_argument("path", help="Path to a JSON save file")
    inspect.add_argument(
        "--game",
        default=DEFAULT_GAME,
        help=f"Python module with define_game() (default: {DEFAULT_GAME})",
    )

    return parser


def load_game(module_path: str) -> GameDefinition:
    """Import module and call define_game()."""
    mod = importlib.import_module(module_path)
    if not hasattr(mod, "define_game"):
        print(f"Error: module {module_path!r} has no define_game() function", file=sys.stderr)
        sys.exit(1)
    return mod.define_game()


def build_strategy(
    name: str,
    cps: float,
    definition: GameDefinition,
    prestige_at: int | None = None,
    use_skills: bool = True,
) -> Strategy:
    click_profile = ClickProfile(cps=cps) if cps > 0 else None

    if name == "helpers_first":
        return helpers_first(definition, click_profile=click_profile, prestige_at_level=prestige_at)
    return GreedyCheapest(
        click_profile=click_profile,
        prestige_at_level=prestige_at,
        use_skills=use_skills,
    )


def build_terminal(seconds: float, level: int | None) -> TerminalCondition:
    terminal = Terminal.time(seconds)
    if level is not None:
        terminal = Terminal.any(Terminal.level(level), terminal)
    return terminal


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.command == "inspect-save":
        _inspect_save(args)
        return

    if args.command == "simulate":
        definition = load_game(args.game_module)
        terminal = build_terminal(args.terminal_time, args.terminal_level)

        if args.monte_carlo and args.monte_carlo > 1:
            _run_monte_carlo(definition, terminal, args)
            return

        strategy = build_strategy(
            args.strategy, args.cps, definition, args.prestige_at, not args.no_skills
        )
        sim = Simulation(
            definition=definition,
            strategy=strategy,
            terminal=terminal,
            seed=args.seed,
        )
        report = sim.run()
        print(format_text_report(report))

        if args.export_csv:
            from clickerrpg.export import export_csv
            export_csv(report, args.export_csv)
            print(f"\nCSV exported to {args.export_csv}_*.csv")

        if args.export_json:
            from clickerrpg.export import export_json
            export_json(report, args.export_json)
            print(f"\nJSON exported to {args.export_json}")

        if args.plot:
            from clickerrpg.visualization import plot_simulation
            plot_simulation(report, args.plot)
            print(f"\nPlot saved to {args.plot}")


def _inspect_save(args: argparse.Namespace) -> None:
    definition = load_game(args.game)
    try:
        data = JsonFileStore(args.path).read()
        if data is None:
            print(f"Error: no save at {args.path}", file=sys.stderr)
            sys.exit(1)
        state = load_state(definition, data, random.Random(0))
    except PersistenceError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)
    saved_at = data.get("saved_at") or data.get("lastSaved") or "unknown"
    version = data.get("version", "legacy")
    print(f"Save version {version}, saved at {saved_at}")
    print(format_state_summary(definition, state))


def _run_monte_carlo(
    definition: GameDefinition,
    terminal: TerminalCondition,
    args: argparse.Namespace,
) -> None:
    """Run multiple simulations and report aggregate results."""
    n = args.monte_carlo
    achievement_times: dict[str, list[float]] = {}
    total_times: list[float] = []
    final_levels: list[int] = []

    for i in range(n):
        # Strategies carry click state, so each run gets its own
        strategy = build_strategy(
            args.strategy, args.cps, definition, args.prestige_at, not args.no_skills
        )
        sim = Simulation(
            definition=definition,
            strategy=strategy,
            terminal=terminal,
            seed=(args.seed + i) if args.seed is not None else None,
        )
        report = sim.run()
        total_times.append(report.total_time)
        final_levels.append(report.final_level)
        for aid, t in report.achievement_times.items():
            achievement_times.setdefault(aid, []).append(t)

    print(f"Monte Carlo: {n} runs")
    print(f"Total time: mean={sum(total_times)/n:.1f}s, "
          f"min={min(total_times):.1f}s, max={max(total_times):.1f}s")
    print(f"Final level: mean={sum(final_levels)/n:.1f}, "
          f"min={min(final_levels)}, max={max(final_levels)}")
    if achievement_times:
        print("Achievement times (mean / min / max, runs):")
        for aid, times in sorted(achievement_times.items()):
            mean = sum(times) / len(times)
            print(f"  {aid}: {mean:.1f}s / {min(times):.1f}s / {max(times):.1f}s ({len(times)}/{n})")

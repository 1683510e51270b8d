"""Tests for the command-line interface."""
import json

import pytest

from clickerrpg.cli import build_parser, build_strategy, build_terminal, load_game, main
from clickerrpg.content import define_game
from clickerrpg.state import ProgressionState
from clickerrpg.strategy import GreedyCheapest, PriorityList
from clickerrpg.terminal import SimulationContext


def test_parser_defaults():
    args = build_parser().parse_args(["simulate"])
    assert args.game_module == "clickerrpg.content"
    assert args.strategy == "greedy_cheapest"
    assert args.cps == 5.0
    assert args.terminal_time == 3600


def test_load_game():
    assert load_game("clickerrpg.content").config.name == "Clicker RPG"


def test_load_game_without_define_game():
    with pytest.raises(SystemExit):
        load_game("clickerrpg.formulas")


def test_build_strategy():
    defn = define_game()
    greedy = build_strategy("greedy_cheapest", 5.0, defn, prestige_at=40, use_skills=False)
    assert isinstance(greedy, GreedyCheapest)
    assert greedy.prestige_at_level == 40
    assert not greedy.use_skills
    assert isinstance(build_strategy("helpers_first", 0, defn), PriorityList)


def test_build_terminal():
    state = ProgressionState.initial(define_game())
    state.enemy.level = 8
    terminal = build_terminal(100, 8)
    assert terminal.is_met(state, SimulationContext(elapsed=1.0))
    assert not build_terminal(100, None).is_met(state, SimulationContext(elapsed=1.0))


def test_simulate_command(tmp_path, capsys):
    out = tmp_path / "report.json"
    main([
        "simulate",
        "--seed", "1",
        "--terminal-time", "60",
        "--export-json", str(out),
    ])
    printed = capsys.readouterr().out
    assert "Clicker RPG Simulation Report" in printed
    assert json.loads(out.read_text())["total_time"] == pytest.approx(60.0)


def test_monte_carlo_command(capsys):
    main(["simulate", "--seed", "1", "--terminal-time", "30", "--monte-carlo", "3"])
    printed = capsys.readouterr().out
    assert "Monte Carlo: 3 runs" in printed


def test_inspect_save(tmp_path, capsys):
    path = tmp_path / "save.json"
    path.write_text(json.dumps({
        "playerGold": 1500,
        "enemyLevel": 12,
        "enemyMaxHP": 50,
        "enemyCurrentHP": 20,
        "enemyName": "Goblin",
        "helperLevel": 2,
        "helpersUnlocked": True,
    }))
    main(["inspect-save", str(path)])
    printed = capsys.readouterr().out
    assert "Save version legacy" in printed
    assert "Level 12: Goblin" in printed
    assert "Gold: 1.5k" in printed
    assert "Warrior 2" in printed


def test_inspect_missing_save(tmp_path):
    with pytest.raises(SystemExit):
        main(["inspect-save", str(tmp_path / "nothing.json")])


def test_inspect_undecodable_save(tmp_path, capsys):
    path = tmp_path / "save.json"
    path.write_bytes(b"\xff\xfe")
    with pytest.raises(SystemExit) as exc:
        main(["inspect-save", str(path)])
    assert exc.value.code == 1
    assert "Error:" in capsys.readouterr().err


def test_no_command_prints_help(capsys):
    with pytest.raises(SystemExit) as exc:
        main([])
    assert exc.value.code == 0
    assert "simulate" in capsys.readouterr().out

"""CLI entry point: python -m clickerrpg.mcp [game_module] [--save PATH]"""

from __future__ import annotations

import argparse
import logging
import sys


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="python -m clickerrpg.mcp",
        description="Serve a Clicker RPG session over MCP (stdio)",
    )
    parser.add_argument(
        "game_module",
        nargs="?",
        default="clickerrpg.content",
        help="Python module with define_game() (default: clickerrpg.content)",
    )
    parser.add_argument("--save", default=None, help="JSON save file to load from and save to")
    parser.add_argument("--log-level", default="INFO", help="Logging verbosity (default: INFO)")
    args = parser.parse_args(argv)

    # stdout carries the protocol
    logging.basicConfig(stream=sys.stderr, level=args.log_level.upper())

    # Redirect stdout to stderr during module loading in case define_game() prints
    real_stdout = sys.stdout
    sys.stdout = sys.stderr
    try:
        from clickerrpg.cli import load_game

        definition = load_game(args.game_module)
    finally:
        sys.stdout = real_stdout

    from clickerrpg.mcp.server import create_server
    from clickerrpg.persistence import JsonFileStore

    store = JsonFileStore(args.save) if args.save else None
    server = create_server(definition, store)
    server.run(transport="stdio")


if __name__ == "__main__":
    main()

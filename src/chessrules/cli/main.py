from __future__ import annotations

import argparse
import logging
import sys
import time
from typing import List, Optional

import uvicorn

from ..config import Settings
from ..engine.attacks import is_in_check
from ..engine.fen import decode
from ..engine.movegen import is_checkmate, is_stalemate
from ..engine.perft import divide, perft
from ..engine.position import STARTPOS_FEN, Position
from ..engine.render import render
from ..match.agents import RandomAgent
from ..match.runner import play_match


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="chessrules", description="Chess rules engine tools")
    parser.add_argument("--log-level", default=None, help="override CHESSRULES_LOG_LEVEL")
    sub = parser.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", help="run the HTTP/WebSocket transport")
    serve.add_argument("--host", default=None)
    serve.add_argument("--port", type=int, default=None)

    p = sub.add_parser("perft", help="count leaf nodes of the legal move tree")
    p.add_argument("--fen", default=STARTPOS_FEN, help="FEN string (default: startpos)")
    p.add_argument("--depth", type=int, default=3, help="perft depth (default: 3)")
    p.add_argument("--divide", action="store_true", help="print counts per root move")

    m = sub.add_parser("match", help="play random agents against each other")
    m.add_argument("--games", type=int, default=10)
    m.add_argument("--seed", type=int, default=None)
    m.add_argument("--max-plies", type=int, default=400)
    m.add_argument("--turn-timeout", type=float, default=None, help="seconds per move")
    m.add_argument("--fen", default=None, help="start position (default: startpos)")
    m.add_argument("--verbose", action="store_true", help="print each final board and result")

    s = sub.add_parser("show", help="draw a position")
    s.add_argument("--fen", default=STARTPOS_FEN, help="FEN string (default: startpos)")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    settings = Settings.from_env()
    if args.log_level:
        settings.log_level = args.log_level.upper()
    logging.basicConfig(level=settings.log_level)

    if args.command == "serve":
        if args.host:
            settings.host = args.host
        if args.port is not None:
            settings.port = args.port
        uvicorn.run(
            "chessrules.protocol.http.app:create_app",
            factory=True,
            host=settings.host,
            port=settings.port,
            log_level=settings.log_level.lower(),
        )
        return 0

    if args.command == "perft":
        position = decode(args.fen)
        start = time.perf_counter()
        if args.divide:
            counts = divide(position, args.depth)
            for mv in sorted(counts):
                print(f"{mv}: {counts[mv]}")
            nodes = sum(counts.values())
        else:
            nodes = perft(position, args.depth)
        dt = time.perf_counter() - start
        print(f"nodes={nodes} depth={args.depth} time_ms={int(dt * 1000)}")
        return 0

    if args.command == "show":
        position = decode(args.fen)
        print(render(position))
        print(f"side={str(position.side_to_move)} status={_status(position)}")
        return 0

    seed = args.seed
    white = RandomAgent(seed=seed, name="white")
    black = RandomAgent(seed=None if seed is None else seed + 1, name="black")
    result = play_match(
        white,
        black,
        args.games,
        start_fen=args.fen,
        max_plies=args.max_plies,
        turn_timeout=args.turn_timeout,
    )
    if args.verbose:
        for i, game in enumerate(result.games, start=1):
            print(render(decode(game.final_fen)))
            outcome = game.outcome
            print(
                f"Game {i} over: {outcome.result} ({outcome.termination.value}) "
                f"after {game.plies} plies"
            )
    print(f"Results after {args.games} games:")
    print(f"White wins: {result.white_wins}")
    print(f"Black wins: {result.black_wins}")
    print(f"Draws:      {result.draws}")
    return 0


def _status(position: Position) -> str:
    if is_checkmate(position):
        return "checkmate"
    if is_stalemate(position):
        return "stalemate"
    return "check" if is_in_check(position) else "-"


if __name__ == "__main__":
    sys.exit(main())

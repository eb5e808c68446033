#!/usr/bin/env python3
# ruff: noqa: E402
from __future__ import annotations

import argparse
import os
import sys
import time

# Allow running this script directly via `python scripts/perft.py`
# by adding `src/` to sys.path.
REPO_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
SRC_PATH = os.path.join(REPO_ROOT, "src")
if SRC_PATH not in sys.path:
    sys.path.insert(0, SRC_PATH)

from chessrules.engine.fen import decode
from chessrules.engine.perft import perft
from chessrules.engine.position import STARTPOS_FEN


# (name, fen, node counts for depth 1, 2, 3, ...)
REFERENCE_SUITE = [
    ("startpos", STARTPOS_FEN, (20, 400, 8902, 197281)),
    (
        "kiwipete",
        "r3k2r/p1ppqpb1/bn2pnp1/3PN3/1p2P3/2N2Q1p/PPPBBPPP/R3K2R w KQkq - 0 1",
        (48, 2039, 97862),
    ),
    ("position3", "8/2p5/3p4/KP5r/1R3p1k/8/4P1P1/8 w - - 0 1", (14, 191, 2812, 43238)),
    (
        "position4",
        "r3k2r/Pppp1ppp/1b3nbN/nP6/BBP1P3/q4N2/Pp1P2PP/R2Q1RK1 w kq - 0 1",
        (6, 264, 9467),
    ),
    (
        "position5",
        "rnbq1k1r/pp1Pbppp/2p5/8/2B5/8/PPP1NnPP/RNBQK2R w KQ - 1 8",
        (44, 1486, 62379),
    ),
]


def main() -> int:
    parser = argparse.ArgumentParser(description="Check perft counts against reference positions")
    parser.add_argument("--max-depth", type=int, default=2, help="deepest level to check (default: 2)")
    args = parser.parse_args()

    failures = 0
    for name, fen, expected in REFERENCE_SUITE:
        position = decode(fen)
        for depth, want in enumerate(expected[: args.max_depth], start=1):
            start = time.perf_counter()
            got = perft(position, depth)
            dt = time.perf_counter() - start
            status = "ok" if got == want else "MISMATCH"
            if got != want:
                failures += 1
            print(f"{name} depth={depth} nodes={got} expected={want} time_ms={int(dt*1000)} {status}")
    return 1 if failures else 0


if __name__ == "__main__":
    sys.exit(main())

#!/usr/bin/env python3
"""
Benchmark: measure nodes visited and time per AI move at a fixed depth.

Run before and after a change to the move generators, the rules engine or
the search to quantify the speedup. A lower node count at the same depth
means more effective pruning; a higher NPS means cheaper node generation
(in practice: cheaper board cloning and check detection).

Usage: python3 tools/bench.py [--depth N]
"""
import argparse
import os
import sys
import time

REPO = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if REPO not in sys.path:
    sys.path.insert(0, REPO)

import chess

from chesscore.board import Board, square_name
from chesscore.constants import DEFAULT_SEARCH_DEPTH
from chesscore.search import generate_ai_move

# Fixed positions spanning opening, middlegame, and endgame. Same positions
# for every comparison; none involves castling, en passant or promotion.
POSITIONS = [
    ("Start",        "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w - - 0 1"),
    ("After 1.e4",   "rnbqkbnr/pppppppp/8/8/4P3/8/PPPP1PPP/RNBQKBNR b - - 0 1"),
    ("Italian",      "r1bqkbnr/pppp1ppp/2n5/4p3/2B1P3/5N2/PPPP1PPP/RNBQK2R b - - 3 3"),
    ("Mid-open",     "r1bqkb1r/pppp1ppp/2n2n2/4p3/2B1P3/5N2/PPPP1PPP/RNBQK2R w - - 4 4"),
    ("Rook ending",  "8/5pk1/6p1/7p/7P/6P1/5PK1/8 w - - 0 1"),
    ("Mate in one",  "6k1/5ppp/8/8/8/8/8/R5K1 w - - 0 1"),
]


def run_position(label: str, fen: str, depth: int) -> dict:
    """Search one position and return its metrics.

    Args:
        label: Human-readable position name for display.
        fen: Position to search; its side-to-move field picks the side.
        depth: Search depth in plies.

    Returns:
        Dict with keys: label, move, score, nodes, nps, time_ms.
    """
    board = Board.from_fen(fen)
    turn = chess.Board(fen).turn

    start = time.monotonic()
    result = generate_ai_move(board, depth, turn == chess.WHITE)
    time_ms = max(1, int((time.monotonic() - start) * 1000))

    if result is None:
        return {"label": label, "move": "(none)", "score": 0.0, "nodes": 0, "nps": 0, "time_ms": time_ms}

    return {
        "label": label,
        "move": square_name(*result.source) + square_name(*result.move),
        "score": result.score,
        "nodes": result.nodes,
        "nps": result.nodes * 1000 // time_ms,
        "time_ms": time_ms,
    }


def main() -> None:
    """Run all benchmark positions and print a summary table."""
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[1])
    parser.add_argument("--depth", type=int, default=DEFAULT_SEARCH_DEPTH)
    args = parser.parse_args()

    print(f"Chess AI search benchmark — {sys.executable}")
    print(f"Depth: {args.depth}")
    print()
    print(
        f"{'Position':<14} {'Move':<7} {'Score':>9} "
        f"{'Nodes':>8} {'NPS':>8} {'Time(ms)':>9}"
    )
    print("-" * 60)

    results = []
    for label, fen in POSITIONS:
        r = run_position(label, fen, args.depth)
        results.append(r)
        print(
            f"{r['label']:<14} {r['move']:<7} {r['score']:>9.1f} "
            f"{r['nodes']:>8,} {r['nps']:>8,} {r['time_ms']:>9,}"
        )

    valid = [r for r in results if r["nodes"] > 0]
    if valid:
        avg_nodes = sum(r["nodes"] for r in valid) // len(valid)
        avg_time = sum(r["time_ms"] for r in valid) // len(valid)
        avg_nps = sum(r["nps"] for r in valid) // len(valid)
        print("-" * 60)
        print(
            f"{'AVERAGE':<14} {'':<7} {'':>9} "
            f"{avg_nodes:>8,} {avg_nps:>8,} {avg_time:>9,}"
        )


if __name__ == "__main__":
    main()

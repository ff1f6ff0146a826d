"""Command-line front end: read one puzzle line, run the randomized backtracking search, print the outcome."""

# solve_cli.py
# Usage:
#   echo "53..7....6..195....98....6.8...6...34..8.3..17...2...6.6....28....419..5....8..79" \
#       | python -m apps.cli.solve_cli --seed 123
#   python -m apps.cli.solve_cli --file puzzle.txt --config solver.yaml --animate 0.01
#
# Exit status: 0 solved, 1 no solution, 2 bad input or config.

from __future__ import annotations

import argparse
import logging
import random
import sys
import time
from pathlib import Path
from typing import Optional, Sequence

import yaml

from solver.config import load_settings
from solver.search import BacktrackSearch, NullProgress, TqdmProgress
from solver.sudoku_tools import PuzzleFormatError, find_conflicts, parse_puzzle, render_board

log = logging.getLogger("solve_cli")


def read_puzzle_line(args: argparse.Namespace) -> str:
    if args.puzzle is not None:
        return args.puzzle
    if args.file is not None:
        with open(args.file, "r", encoding="utf-8") as f:
            return f.readline()
    return sys.stdin.readline()


def make_animator(delay: float, color: bool):
    def on_step(board, stack):
        print(render_board(board, color=color))
        print(f"depth {len(stack)}", flush=True)
        time.sleep(delay)

    return on_step


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Solve a 9x9 Sudoku by randomized backtracking.")
    src = ap.add_mutually_exclusive_group()
    src.add_argument("--puzzle", type=str, default=None, help="81-character puzzle line (default: read stdin).")
    src.add_argument("--file", type=Path, default=None, help="Read the puzzle from the first line of this file.")
    ap.add_argument("--config", type=Path, default=None, help="YAML settings file.")
    ap.add_argument("--seed", type=int, default=None, help="Seed for the candidate shuffle.")
    ap.add_argument("--no-progress", action="store_true", help="Hide the depth progress bar.")
    ap.add_argument("--no-color", action="store_true", help="Render the board without color.")
    ap.add_argument("--no-initial", action="store_true", help="Do not print the puzzle before solving.")
    ap.add_argument("--animate", type=float, default=None, metavar="SECONDS",
                    help="Redraw the board after every iteration, sleeping this long between frames.")
    ap.add_argument("--verbose", action="store_true", help="Enable debug logging.")
    return ap


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )

    try:
        cfg = load_settings(
            args.config,
            seed=args.seed,
            progress=False if args.no_progress else None,
            color=False if args.no_color else None,
            show_initial=False if args.no_initial else None,
            animate_delay=args.animate,
        )
    except (OSError, ValueError, yaml.YAMLError) as e:
        print(f"[error] {e}", file=sys.stderr)
        return 2
    if args.config is not None:
        log.debug("[config] %s -> %s", args.config, dict(cfg))

    try:
        board = parse_puzzle(read_puzzle_line(args))
    except PuzzleFormatError as e:
        print(f"[error] {e}", file=sys.stderr)
        return 2
    except UnicodeDecodeError as e:
        print(f"[error] puzzle is not valid UTF-8 text: {e}", file=sys.stderr)
        return 2
    except OSError as e:
        print(f"[error] {args.file}: {e}", file=sys.stderr)
        return 2

    # escapes only go to a terminal
    color = cfg.color and sys.stdout.isatty()

    if cfg.show_initial:
        print(render_board(board, color=color))

    for issue in find_conflicts(board):
        log.info("givens repeat %d in %s at %s", issue["digit"], issue["unit"], issue["cells"])

    animating = cfg.animate_delay is not None
    progress = TqdmProgress() if cfg.progress and not animating else NullProgress()
    on_step = make_animator(cfg.animate_delay, color) if animating else None

    search = BacktrackSearch(board, rng=random.Random(cfg.seed), progress=progress, on_step=on_step)
    result = search.run()

    if result.solved:
        print(render_board(board, color=color))
        print(f"{result.iterations} iterations")
        return 0
    print("No solution")
    print(f"{result.iterations} iterations")
    print(f"Max depth: {result.max_depth}")
    return 1


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))

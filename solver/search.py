"""Randomized depth-first backtracking over the free cells of a board.

The search is an explicit state machine rather than a recursive function:
``stack[i]`` holds the index into free cell ``i``'s candidate permutation of
the digit currently placed there (-1 before the first try). The stack grows
by one level per committed placement and shrinks when a level runs out of
candidates, so its length is the current search depth.

Typical use::

    board = parse_puzzle(line)
    result = BacktrackSearch(board, rng=random.Random(7)).run()
    if result.solved:
        print(render_board(board))
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Callable, Optional, Protocol, Sequence

from tqdm import tqdm

from types_sudoku import CandidateTable, Position

from .solver_core import DIGITS, Board, empty_cells, is_valid

log = logging.getLogger(__name__)

LAST_CANDIDATE = len(DIGITS) - 1

StepHook = Callable[[Board, Sequence[int]], None]


class ProgressReporter(Protocol):
    def start(self, total: int) -> None: ...

    def update(self, position: int) -> None: ...

    def finish(self) -> None: ...


class NullProgress:
    """Progress sink that ignores everything."""

    def start(self, total: int) -> None:
        pass

    def update(self, position: int) -> None:
        pass

    def finish(self) -> None:
        pass


class TqdmProgress:
    """Shows the deepest level reached so far as a tqdm bar over the free cells."""

    def __init__(self, desc: str = "depth", **tqdm_kwargs):
        self.desc = desc
        self.tqdm_kwargs = tqdm_kwargs
        self.bar = None

    def start(self, total: int) -> None:
        kwargs = {"unit": "cell", "dynamic_ncols": True, **self.tqdm_kwargs}
        self.bar = tqdm(total=total, desc=self.desc, **kwargs)

    def update(self, position: int) -> None:
        # positions are absolute; tqdm counts increments
        if self.bar is not None and position > self.bar.n:
            self.bar.update(position - self.bar.n)

    def finish(self) -> None:
        if self.bar is not None:
            self.bar.close()


@dataclass
class SearchResult:
    solved: bool
    iterations: int
    max_depth: int
    free_cells: int

    @property
    def status(self) -> str:
        return "solved" if self.solved else "exhausted"


def build_candidate_table(count: int, rng: Optional[random.Random] = None) -> CandidateTable:
    """Return `count` independent uniformly random permutations of 1..9."""
    if count < 0:
        raise ValueError("count must be >= 0")
    rng = rng or random.Random()
    table = []
    for _ in range(count):
        perm = list(DIGITS)
        rng.shuffle(perm)
        table.append(tuple(perm))
    return tuple(table)


class BacktrackSearch:
    """Owns the search stack and drives every mutation of `board` until it is solved or exhausted.

    Givens are never touched. On success the board holds the solution; on
    exhaustion every free cell is blank again.
    """

    def __init__(
        self,
        board: Board,
        rng: Optional[random.Random] = None,
        progress: Optional[ProgressReporter] = None,
        on_step: Optional[StepHook] = None,
        free_cells: Optional[list[Position]] = None,
        candidates: Optional[CandidateTable] = None,
    ):
        self.board = board
        self.free_cells = list(free_cells) if free_cells is not None else empty_cells(board)
        if candidates is None:
            candidates = build_candidate_table(len(self.free_cells), rng)
        if len(candidates) != len(self.free_cells):
            raise ValueError(
                f"candidate table has {len(candidates)} rows for {len(self.free_cells)} free cells"
            )
        self.candidates = candidates
        self.progress = progress or NullProgress()
        self.on_step = on_step
        self.stack: list[int] = [-1]
        self.max_depth = 0
        self.iterations = 0

    def _finish(self, solved: bool) -> SearchResult:
        if solved:
            self.max_depth = len(self.free_cells)
            self.progress.update(self.max_depth)
        self.progress.finish()
        result = SearchResult(
            solved=solved,
            iterations=self.iterations,
            max_depth=self.max_depth,
            free_cells=len(self.free_cells),
        )
        log.debug(
            "search %s after %d iterations (max depth %d of %d)",
            result.status, result.iterations, result.max_depth, result.free_cells,
        )
        return result

    def run(self) -> SearchResult:
        total = len(self.free_cells)
        log.debug("searching %d free cells", total)
        self.progress.start(total)
        if total == 0:
            # nothing to place; the givens decide the outcome
            return self._finish(is_valid(self.board))

        stack = self.stack
        board = self.board
        while True:
            self.iterations += 1
            level = len(stack) - 1
            col, row = self.free_cells[level]
            idx = stack[level]

            if idx < LAST_CANDIDATE:
                idx += 1
                stack[level] = idx
                board.set(col, row, self.candidates[level][idx])
                if is_valid(board):
                    if len(stack) == total:
                        return self._finish(True)
                    if len(stack) > self.max_depth:
                        self.max_depth = len(stack)
                        self.progress.update(self.max_depth)
                    stack.append(-1)
                # an invalid digit stays put until the next candidate overwrites it
            else:
                board.set(col, row, None)
                if len(stack) > 1:
                    stack.pop()
                else:
                    return self._finish(False)

            if self.on_step is not None:
                self.on_step(board, stack)


def solve(
    board: Board,
    rng: Optional[random.Random] = None,
    progress: Optional[ProgressReporter] = None,
    on_step: Optional[StepHook] = None,
) -> SearchResult:
    """Run a fresh search on `board` in place."""
    return BacktrackSearch(board, rng=rng, progress=progress, on_step=on_step).run()

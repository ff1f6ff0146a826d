# tests/test_search.py
import io
import random

import pytest

from solver.search import BacktrackSearch, SearchResult, TqdmProgress, build_candidate_table, solve
from solver.solver_core import Board, empty_cells, is_valid
from solver.sudoku_tools import parse_puzzle, serialize_board


class RecordingProgress:
    def __init__(self):
        self.total = None
        self.positions = []
        self.finished = 0

    def start(self, total):
        self.total = total

    def update(self, position):
        self.positions.append(position)

    def finish(self):
        self.finished += 1


def dead_end_board():
    """Consistent givens where (2,2) has no digit left; (0,0) can take 8 or 9."""
    board = Board.empty()
    for (c, r), d in {
        (1, 0): 1, (2, 0): 2,
        (0, 1): 3, (1, 1): 4, (2, 1): 5,
        (0, 2): 6, (1, 2): 7,
        (5, 2): 8, (2, 5): 9,
    }.items():
        board.set(c, r, d)
    return board


def test_candidate_table_shape():
    table = build_candidate_table(5, random.Random(0))
    assert len(table) == 5
    for perm in table:
        assert sorted(perm) == list(range(1, 10))
    assert build_candidate_table(0, random.Random(0)) == ()
    with pytest.raises(ValueError):
        build_candidate_table(-1)


def test_candidate_table_is_seeded():
    assert build_candidate_table(10, random.Random(42)) == build_candidate_table(10, random.Random(42))


def test_solves_puzzle_and_keeps_givens(easy_line):
    board = parse_puzzle(easy_line)
    givens = board.copy()
    result = solve(board, rng=random.Random(3))
    assert result.solved and result.status == "solved"
    assert board.is_complete() and is_valid(board)
    for i, v in enumerate(givens.cells):
        if v is not None:
            assert board.cells[i] == v
    assert result.free_cells == 17
    assert result.max_depth == 17


def test_single_blank_is_filled_within_nine_iterations(solution_line):
    board = parse_puzzle("." + solution_line[1:])
    result = solve(board, rng=random.Random(9))
    assert result.solved
    assert result.free_cells == 1
    assert 1 <= result.iterations <= 9
    assert serialize_board(board) == solution_line


def test_single_blank_with_fixed_order(solution_line):
    board = parse_puzzle("." + solution_line[1:])
    result = BacktrackSearch(board, candidates=(tuple(range(1, 10)),)).run()
    # 1..4 are rejected, 5 fits
    assert result.solved
    assert result.iterations == 5


def test_already_solved_board(solution_line):
    board = parse_puzzle(solution_line)
    progress = RecordingProgress()
    result = solve(board, progress=progress)
    assert result == SearchResult(solved=True, iterations=0, max_depth=0, free_cells=0)
    assert progress.total == 0
    assert progress.finished == 1


def test_full_but_contradictory_board_is_not_solved(solution_line):
    line = solution_line[1] + solution_line[1:]
    result = solve(parse_puzzle(line))
    assert not result.solved
    assert result.iterations == 0


def test_conflicting_givens_exhaust_at_first_level():
    board = parse_puzzle("11" + "." * 79)
    before = board.copy()
    result = solve(board, rng=random.Random(1))
    assert result.status == "exhausted"
    # nine rejected candidates, then the root level gives up
    assert result.iterations == 10
    assert result.max_depth == 0
    assert board == before


def test_unsolvable_consistent_givens_restore_board():
    board = dead_end_board()
    before = board.copy()
    assert is_valid(board)
    progress = RecordingProgress()
    result = solve(board, rng=random.Random(5), progress=progress)
    assert not result.solved
    assert result.max_depth == 1
    # 9 tries at (0,0); each of the 2 fits costs 9 tries + 1 pop at (2,2); 1 final pass
    assert result.iterations == 30
    assert board == before
    assert progress.positions == [1]
    assert progress.finished == 1


def test_same_seed_same_trace(easy_line):
    runs = []
    for _ in range(2):
        board = parse_puzzle(easy_line)
        trace = []
        result = solve(board, rng=random.Random(11), on_step=lambda b, s: trace.append(tuple(s)))
        runs.append((result.iterations, trace))
    assert runs[0] == runs[1]


def test_progress_positions_are_increasing(easy_line):
    progress = RecordingProgress()
    result = solve(parse_puzzle(easy_line), rng=random.Random(2), progress=progress)
    assert result.solved
    assert progress.total == 17
    assert progress.positions == sorted(set(progress.positions))
    assert progress.positions[-1] == 17
    assert progress.finished == 1


def test_tqdm_bar_ends_at_free_cell_count(easy_line):
    out = io.StringIO()
    progress = TqdmProgress(file=out)
    result = solve(parse_puzzle(easy_line), rng=random.Random(2), progress=progress)
    assert result.solved
    assert progress.bar.total == result.free_cells
    assert progress.bar.n == result.free_cells
    assert "depth" in out.getvalue()


def test_tqdm_bar_stops_at_max_depth_when_exhausted():
    progress = TqdmProgress(file=io.StringIO(), unit="level", dynamic_ncols=False)
    result = solve(dead_end_board(), rng=random.Random(5), progress=progress)
    assert not result.solved
    assert progress.bar.n == result.max_depth == 1
    assert progress.bar.unit == "level"


def test_stack_stays_within_bounds(easy_line):
    board = parse_puzzle(easy_line)
    total = len(empty_cells(board))
    seen = []

    def check(b, stack):
        assert b is board
        assert 1 <= len(stack) <= total
        assert all(-1 <= i <= 8 for i in stack)
        seen.append(len(stack))

    solve(board, rng=random.Random(4), on_step=check)
    assert seen


def test_candidate_table_must_match_free_cells(solution_line):
    with pytest.raises(ValueError):
        BacktrackSearch(parse_puzzle("." + solution_line[1:]), candidates=())

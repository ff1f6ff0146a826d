"""Core Sudoku board model: cell storage, unit iterators, the constraint check and free-cell enumeration."""

# solver_core.py
# Board is a flat list of 81 optional digits addressed by (col, row), both 0-based.
# None = blank. Only the search engine mutates a board once search starts.

from __future__ import annotations

from typing import Iterator, Optional

from types_sudoku import Cell, Position

SIZE = 9
BOX = 3
DIGITS = tuple(range(1, 10))


def index_of(col: int, row: int) -> int:
    if not (0 <= col < SIZE and 0 <= row < SIZE):
        raise IndexError(f"cell ({col}, {row}) is outside the 9x9 board")
    return row * SIZE + col


def box_origin(b: int) -> Position:
    """Top-left (col, row) of box b, boxes numbered 0..8 in row-major order."""
    return (BOX * (b % BOX), BOX * (b // BOX))


def unit_cells_row(row: int) -> list[Position]:
    return [(c, row) for c in range(SIZE)]


def unit_cells_col(col: int) -> list[Position]:
    return [(col, r) for r in range(SIZE)]


def unit_cells_box(b: int) -> list[Position]:
    c0, r0 = box_origin(b)
    return [(c0 + dc, r0 + dr) for dr in range(BOX) for dc in range(BOX)]


def all_units() -> Iterator[tuple[str, list[Position]]]:
    """Yield (label, cells) for every row, then every column, then every box."""
    for r in range(SIZE):
        yield f"r{r + 1}", unit_cells_row(r)
    for c in range(SIZE):
        yield f"c{c + 1}", unit_cells_col(c)
    for b in range(SIZE):
        yield f"b{b + 1}", unit_cells_box(b)


def _check_value(value: Cell) -> None:
    # bool is an int subclass; True would otherwise pass as 1
    if value is not None and (isinstance(value, bool) or value not in DIGITS):
        raise ValueError(f"cell value must be None or 1..9, got {value!r}")


class Board:
    __slots__ = ("cells",)

    def __init__(self, cells: Optional[list[Cell]] = None):
        if cells is None:
            cells = [None] * (SIZE * SIZE)
        if len(cells) != SIZE * SIZE:
            raise ValueError(f"a board needs {SIZE * SIZE} cells, got {len(cells)}")
        for v in cells:
            _check_value(v)
        self.cells = list(cells)

    @classmethod
    def empty(cls) -> "Board":
        return cls()

    def copy(self) -> "Board":
        return Board(self.cells)

    def get(self, col: int, row: int) -> Cell:
        return self.cells[index_of(col, row)]

    def set(self, col: int, row: int, value: Cell) -> None:
        # no constraint check here; callers validate explicitly
        _check_value(value)
        self.cells[index_of(col, row)] = value

    def is_complete(self) -> bool:
        return all(v is not None for v in self.cells)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return self.cells == other.cells

    def __repr__(self) -> str:
        filled = sum(v is not None for v in self.cells)
        return f"Board(filled={filled})"


def _has_repeat(board: Board, cells: list[Position]) -> bool:
    seen = [False] * SIZE
    for c, r in cells:
        d = board.cells[r * SIZE + c]
        if d is None:
            continue
        if seen[d - 1]:
            return True
        seen[d - 1] = True
    return False


def is_valid(board: Board) -> bool:
    """True if no digit repeats within any row, column or 3x3 box.

    Rows are scanned first, then columns, then boxes; the scan stops at the
    first repeat. Blank cells never conflict, so an empty board is valid.
    """
    for r in range(SIZE):
        if _has_repeat(board, unit_cells_row(r)):
            return False
    for c in range(SIZE):
        if _has_repeat(board, unit_cells_col(c)):
            return False
    for b in range(SIZE):
        if _has_repeat(board, unit_cells_box(b)):
            return False
    return True


def empty_cells(board: Board) -> list[Position]:
    """Blank cells in search order: box by box (row-major), row-major inside each box."""
    out = []
    for b in range(SIZE):
        for c, r in unit_cells_box(b):
            if board.cells[r * SIZE + c] is None:
                out.append((c, r))
    return out

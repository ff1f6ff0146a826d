# types_sudoku.py
from __future__ import annotations

from typing import Optional, TypedDict

Cell = Optional[int]
"""A single board cell: None when blank, else a digit 1..9."""

Position = tuple[int, int]
"""Zero-based (column, row) address of a cell."""

CandidateTable = tuple[tuple[int, ...], ...]
"""One fixed permutation of the digits 1..9 per free cell, in search order."""


class Conflict(TypedDict):
    """A duplicated digit inside one unit, reported by find_conflicts."""

    unit: str  # 'r1'..'r9', 'c1'..'c9' or 'b1'..'b9'
    digit: int
    cells: list[Position]  # every cell in the unit holding that digit

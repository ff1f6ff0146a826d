"""Board I/O and diagnostics around the search: puzzle-line parsing, serialization, boxed rendering, and duplicate reporting."""

# sudoku_tools.py
from __future__ import annotations

from termcolor import colored

from types_sudoku import Conflict

from .solver_core import SIZE, Board, all_units

LINE_LENGTH = SIZE * SIZE

# rendered layout: 4 columns per cell, 2 rows per cell, plus the closing border
RENDER_WIDTH = 4 * SIZE + 1
RENDER_HEIGHT = 2 * SIZE + 1


class PuzzleFormatError(ValueError):
    """The puzzle line is not exactly 81 characters."""


def parse_puzzle(line: str) -> Board:
    """Parse an 81-character puzzle line.

    Character i is the cell at column i % 9, row i // 9. The digits 1-9 are
    givens; any other character ('0', '.', ...) is a blank. A single trailing
    newline is ignored.
    """
    if line.endswith("\n"):
        line = line[:-1]
        if line.endswith("\r"):
            line = line[:-1]
    if len(line) != LINE_LENGTH:
        raise PuzzleFormatError(f"puzzle line must be {LINE_LENGTH} characters, got {len(line)}")
    board = Board()
    for i, ch in enumerate(line):
        if ch in "123456789":
            board.set(i % SIZE, i // SIZE, int(ch))
    return board


def serialize_board(board: Board, blank: str = ".") -> str:
    return "".join(str(v) if v is not None else blank for v in board.cells)


def render_board(board: Board, color: bool = True) -> str:
    """Draw the board as a boxed ASCII grid.

    Box boundaries use the default terminal color; the thinner dividers between
    individual cells are dimmed when `color` is on.
    """

    def dim(s: str) -> str:
        return colored(s, "dark_grey", force_color=True) if color else s

    lines = []
    for y in range(RENDER_HEIGHT):
        is_row_div = y % 2 == 0
        is_main_row_div = y % 6 == 0
        parts = []
        for x in range(RENDER_WIDTH):
            is_col_div = x % 4 == 0
            is_main_col_div = x % 12 == 0
            if is_col_div and is_row_div:
                parts.append("+" if is_main_col_div or is_main_row_div else dim("+"))
            elif is_col_div:
                parts.append("|" if is_main_col_div else dim("|"))
            elif is_row_div:
                parts.append("-" if is_main_row_div else dim("-"))
            elif x >= 2 and (x - 2) % 4 == 0:
                v = board.get((x - 2) // 4, (y - 1) // 2)
                parts.append(str(v) if v is not None else " ")
            else:
                parts.append(" ")
        lines.append("".join(parts))
    return "\n".join(lines)


def find_conflicts(board: Board) -> list[Conflict]:
    """List every digit that appears more than once in a row, column or box."""
    issues: list[Conflict] = []
    for unit, cells in all_units():
        where: dict[int, list] = {}
        for c, r in cells:
            v = board.get(c, r)
            if v is not None:
                where.setdefault(v, []).append((c, r))
        for d in sorted(where):
            if len(where[d]) > 1:
                issues.append({"unit": unit, "digit": d, "cells": where[d]})
    return issues

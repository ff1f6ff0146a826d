# tests/conftest.py
import sys
from pathlib import Path

import pytest

# Add project root to sys.path so "solver", "apps" and "types_sudoku" import in tests
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

PUZZLE = "530070000600195000098000060800060003400803001700020006060000280000419005000080079"
SOLUTION = "534678912672195348198342567859761423426853791713924856961537284287419635345286179"


@pytest.fixture
def solution_line():
    return SOLUTION


@pytest.fixture
def easy_line():
    # the known solution with a scattering of blanks (a couple per box)
    blanks = {0, 4, 10, 13, 20, 25, 31, 35, 40, 44, 49, 54, 60, 66, 70, 76, 80}
    return "".join("." if i in blanks else ch for i, ch in enumerate(SOLUTION))

"""
Pytest configuration and shared fixtures.

Boards are drawn as rows of characters, one string per y, where:

    .  hidden safe cell
    *  hidden mine
    F  flagged mine
    f  flagged safe cell
    r  revealed safe cell
"""
import os

os.environ.setdefault("MPLBACKEND", "Agg")

from typing import Callable, List, Tuple

import pytest

from minesolver import Board, CellState


def build_board(rows: List[str]) -> Board:
    """Build a board with a fixed mine layout and visible state from ASCII rows."""
    height = len(rows)
    width = len(rows[0])
    assert all(len(row) == width for row in rows), "ragged board layout"

    mines: List[Tuple[int, int]] = [
        (x, y)
        for y, row in enumerate(rows)
        for x, ch in enumerate(row)
        if ch in "*F"
    ]
    board = Board(width, height, len(mines))
    board.place_mines_at(mines)

    for y, row in enumerate(rows):
        for x, ch in enumerate(row):
            if ch == "r":
                board.cells[x][y].state = CellState.REVEALED
            elif ch in "Ff":
                board.cells[x][y].state = CellState.FLAGGED
                board.flags_used += 1
    return board


@pytest.fixture
def board_from_rows() -> Callable[[List[str]], Board]:
    """Factory fixture turning ASCII rows into a board."""
    return build_board


# ============================================================================
# Board Fixtures
# ============================================================================

@pytest.fixture
def beginner_board() -> Board:
    """A fresh 9x9 board with 10 mines and a fixed seed."""
    return Board(9, 9, 10, seed=1234)


@pytest.fixture
def single_mine_board() -> Board:
    """
    5x5 board, one mine at (4, 1), nothing revealed yet.

    Revealing (0, 0) cascades over everything except (4, 0) and (4, 1);
    basic counting then flags (4, 1) and reveals (4, 0).
    """
    return build_board([
        ".....",
        "....*",
        ".....",
        ".....",
        ".....",
    ])


@pytest.fixture
def overlap_board() -> Board:
    """
    5x5 board with mines at (0, 0), (2, 0) and (3, 0); only row 0 is hidden.

    Row 1 reads 1 2 2 2 1, which neither basic counting nor the 1-2-1
    pattern can resolve; comparing (0, 1) with (1, 1) proves (2, 0) is a mine.
    """
    return build_board([
        "*.**.",
        "rrrrr",
        "rrrrr",
        "rrrrr",
        "rrrrr",
    ])


@pytest.fixture
def horizontal_121_board() -> Board:
    """5x5 board with mines at (0, 0) and (2, 0); row 1 starts 1 2 1."""
    return build_board([
        "*.*rr",
        "rrrrr",
        "rrrrr",
        "rrrrr",
        "rrrrr",
    ])

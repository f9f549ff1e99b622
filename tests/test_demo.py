"""Tests for the demo helpers that do not need a running Streamlit session."""

import pytest

pytest.importorskip("streamlit")

from app.demo import render_board_html, shown_board  # noqa: E402
from minesolver import CellState, Flag, MinesweeperSolver  # noqa: E402


def test_shown_board_without_result_is_the_board(single_mine_board):
    assert shown_board(single_mine_board, None, 0) is single_mine_board


def test_shown_board_at_step_zero_is_the_board(single_mine_board):
    result = MinesweeperSolver().solve(single_mine_board)
    assert shown_board(single_mine_board, result, 0) is single_mine_board


def test_hint_on_shown_board_follows_the_replay(single_mine_board):
    solver = MinesweeperSolver()
    result = solver.solve(single_mine_board)

    shown = shown_board(single_mine_board, result, 1)
    assert shown is not single_mine_board
    assert shown.cells[0][0].state == CellState.REVEALED
    assert single_mine_board.cells[0][0].state == CellState.HIDDEN

    assert solver.hint(single_mine_board) is None
    assert solver.hint(shown) == Flag(4, 1, "Must be mine around (3,2)")


def test_render_board_html_outlines_highlight(single_mine_board):
    html = render_board_html(single_mine_board, highlight_cell=(2, 2))
    assert html.count("<tr>") == 5
    assert html.count("2px solid #ff0000") == 1

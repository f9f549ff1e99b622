"""Tests for mine probability estimates and guessing."""

import numpy as np
import pytest

from minesolver import (
    Board,
    Reveal,
    mine_probabilities,
    mine_probability,
    probability_guess,
    probability_map,
)
from minesolver.probability import global_probability


@pytest.fixture
def flagged_corner_board(board_from_rows):
    """4x4 board, flagged mine at (0, 0), hidden mine at (3, 3), (1, 1) revealed."""
    return board_from_rows([
        "F...",
        ".r..",
        "....",
        "...*",
    ])


def test_global_probability_counts_unrevealed_cells(flagged_corner_board):
    assert global_probability(flagged_corner_board) == pytest.approx(2 / 15)


def test_cells_away_from_numbers_use_global_probability(flagged_corner_board):
    assert mine_probability(flagged_corner_board, 3, 0) == pytest.approx(2 / 15)


def test_satisfied_number_gives_zero_probability(flagged_corner_board):
    assert mine_probability(flagged_corner_board, 0, 1) == 0.0


def test_local_densities_are_averaged(overlap_board):
    assert mine_probability(overlap_board, 1, 0) == pytest.approx((0.5 + 2 / 3 + 2 / 3) / 3)
    assert mine_probability(overlap_board, 0, 0) == pytest.approx((0.5 + 2 / 3) / 2)
    assert mine_probability(overlap_board, 2, 0) == pytest.approx(2 / 3)


def test_probabilities_cover_hidden_cells_only(flagged_corner_board):
    coords = [xy for xy, _ in mine_probabilities(flagged_corner_board)]
    assert len(coords) == 14
    assert (0, 0) not in coords
    assert (1, 1) not in coords
    assert coords[0] == (0, 1)


def test_guess_picks_lowest_probability(flagged_corner_board):
    assert probability_guess(flagged_corner_board) == Reveal(0, 1, "Probability-based guess")


def test_guess_ties_go_to_first_cell_in_scan_order(overlap_board):
    assert probability_guess(overlap_board) == Reveal(0, 0, "Probability-based guess")


def test_guess_on_fresh_board_is_first_cell():
    assert probability_guess(Board(3, 3, 1)) == Reveal(0, 0, "Probability-based guess")


def test_no_guess_without_hidden_cells(board_from_rows):
    assert probability_guess(board_from_rows(["Fr"])) is None


def test_probability_map_layout(flagged_corner_board):
    grid = probability_map(flagged_corner_board)
    assert grid.shape == (4, 4)
    assert np.isnan(grid[0, 0])
    assert np.isnan(grid[1, 1])
    assert grid[1, 0] == 0.0
    assert grid[0, 3] == pytest.approx(2 / 15)
    assert np.count_nonzero(~np.isnan(grid)) == 14

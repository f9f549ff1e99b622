"""Tests for the deduction strategies and the strategy chain."""

import pytest

from minesolver import (
    DEDUCTION_STRATEGIES,
    Board,
    Flag,
    Reveal,
    basic_counting,
    constraint_overlap,
    deduce_next_move,
    pattern_121,
)


class TestBasicCounting:

    def test_satisfied_number_reveals_remaining_neighbor(self, board_from_rows):
        board = board_from_rows(["Fr."])
        assert basic_counting(board) == Reveal(2, 0, "All mines found around (1,0)")

    def test_hidden_neighbors_matching_number_are_flagged(self, board_from_rows):
        board = board_from_rows([
            "*r",
            "rr",
        ])
        assert basic_counting(board) == Flag(0, 0, "Must be mine around (0,1)")

    def test_first_numbered_cell_in_scan_order_wins(self, horizontal_121_board):
        assert basic_counting(horizontal_121_board) == Flag(
            2, 0, "Must be mine around (3,0)"
        )

    def test_nothing_to_do_on_hidden_board(self):
        assert basic_counting(Board(5, 5, 3, seed=0)) is None

    def test_ambiguous_numbers_give_no_move(self, overlap_board):
        assert basic_counting(overlap_board) is None


class TestPattern121:

    def test_horizontal_pattern_reveals_cell_above_centre(self, horizontal_121_board):
        assert pattern_121(horizontal_121_board) == Reveal(1, 0, "1-2-1 pattern: safe cell")

    def test_vertical_pattern_reveals_cell_left_of_centre(self, board_from_rows):
        board = board_from_rows([
            "*rrrr",
            ".rrrr",
            "*rrrr",
            "rrrrr",
            "rrrrr",
        ])
        assert pattern_121(board) == Reveal(0, 1, "1-2-1 pattern: safe cell")

    def test_horizontal_pattern_falls_back_to_cell_below(self, board_from_rows):
        board = board_from_rows([
            "rrrrr",
            "rrrrr",
            "*.*rr",
        ])
        assert pattern_121(board) == Reveal(1, 2, "1-2-1 pattern: safe cell")

    def test_vertical_pattern_falls_back_to_cell_right(self, board_from_rows):
        board = board_from_rows([
            "rr*",
            "rr.",
            "rr*",
            "rrr",
            "rrr",
        ])
        assert pattern_121(board) == Reveal(2, 1, "1-2-1 pattern: safe cell")

    def test_last_row_never_matches_horizontally(self, board_from_rows):
        board = board_from_rows([
            "*.*rr",
            "rrrrr",
        ])
        assert [board.cells[x][1].adjacent_mines for x in range(3)] == [1, 2, 1]
        assert pattern_121(board) is None

    def test_last_column_never_matches_vertically(self, board_from_rows):
        board = board_from_rows([
            "*r",
            ".r",
            "*r",
            "rr",
            "rr",
        ])
        assert [board.cells[1][y].adjacent_mines for y in range(3)] == [1, 2, 1]
        assert pattern_121(board) is None

    def test_pattern_with_no_hidden_candidate_is_skipped(self, board_from_rows):
        board = board_from_rows([
            "*r*rr",
            "rrrrr",
            "rrrrr",
        ])
        assert pattern_121(board) is None

    def test_no_pattern_on_overlap_board(self, overlap_board):
        assert pattern_121(overlap_board) is None


class TestConstraintOverlap:

    def test_pairwise_difference_flags_unique_cell(self, overlap_board):
        assert constraint_overlap(overlap_board) == Flag(
            2, 0, "Constraint analysis: must be mine"
        )

    def test_first_cells_unique_neighbors_can_be_flagged(self, board_from_rows):
        # (0,1) reads 2 and (2,1) reads 1; they share only (1,0), so the extra
        # mine must be (0,0), which only (0,1) touches.
        board = board_from_rows([
            "**.",
            "rrr",
        ])
        assert constraint_overlap(board) == Flag(0, 0, "Constraint analysis: must be mine")

    def test_flagged_neighbors_reduce_remaining_counts(self, board_from_rows):
        board = board_from_rows([
            "*.**.",
            "rrrrr",
            "rrrrr",
        ])
        board.toggle_flag(3, 0)
        move = constraint_overlap(board)
        assert isinstance(move, Flag)
        assert (move.x, move.y) in board.mine_positions()

    def test_nothing_without_numbers(self):
        assert constraint_overlap(Board(4, 4, 2)) is None


class TestStrategyChain:

    def test_strategies_run_in_priority_order(self):
        assert [name for name, _ in DEDUCTION_STRATEGIES] == [
            "Basic counting",
            "1-2-1 pattern",
            "Constraint overlap",
        ]

    def test_basic_counting_takes_precedence(self, horizontal_121_board):
        assert deduce_next_move(horizontal_121_board) == (
            "Basic counting",
            Flag(2, 0, "Must be mine around (3,0)"),
        )

    def test_falls_through_to_constraint_overlap(self, overlap_board):
        assert deduce_next_move(overlap_board) == (
            "Constraint overlap",
            Flag(2, 0, "Constraint analysis: must be mine"),
        )

    def test_custom_strategy_list(self, horizontal_121_board):
        name, move = deduce_next_move(
            horizontal_121_board, [("1-2-1 pattern", pattern_121)]
        )
        assert name == "1-2-1 pattern"
        assert move == Reveal(1, 0, "1-2-1 pattern: safe cell")

    def test_no_move_on_fresh_board(self, beginner_board):
        assert deduce_next_move(beginner_board) is None

    @pytest.mark.parametrize("strategy", [s for _, s in DEDUCTION_STRATEGIES])
    def test_strategies_do_not_mutate_board(self, overlap_board, strategy):
        before = overlap_board.to_dict()
        strategy(overlap_board)
        assert overlap_board.to_dict() == before


def test_deduced_moves_are_sound_on_fixed_layouts(overlap_board, horizontal_121_board):
    for board in (overlap_board, horizontal_121_board):
        mines = board.mine_positions()
        name, move = deduce_next_move(board)
        if isinstance(move, Flag):
            assert (move.x, move.y) in mines
        else:
            assert (move.x, move.y) not in mines

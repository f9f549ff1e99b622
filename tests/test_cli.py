"""Tests for the command line entry point."""

import pytest

from minesolver.__main__ import _board_size, build_parser, main


def test_solve_command_prints_move_log(capsys):
    code = main(["--seed", "5", "solve"])
    out = capsys.readouterr().out
    assert code in (0, 1)
    assert "1. reveal (4, 4)  First move - center click" in out
    assert " moves, " in out


def test_bench_command_prints_statistics(capsys):
    assert main(["--difficulty", "beginner", "--seed", "1", "bench", "--runs", "2"]) == 0
    out = capsys.readouterr().out
    assert "win_rate" in out
    assert "avg_guesses_total" in out


def test_difficulty_overrides_board_size():
    args = build_parser().parse_args(["--width", "5", "--difficulty", "expert", "solve"])
    assert _board_size(args) == (30, 16, 99)


def test_explicit_board_size():
    args = build_parser().parse_args(["--width", "5", "--height", "6", "--mines", "7", "solve"])
    assert _board_size(args) == (5, 6, 7)


def test_command_is_required():
    with pytest.raises(SystemExit):
        build_parser().parse_args([])


def test_unfinished_game_reports_its_real_status(capsys):
    code = main([
        "--width", "16", "--height", "16", "--mines", "40",
        "--seed", "3", "--max-moves", "1", "solve",
    ])
    out = capsys.readouterr().out
    assert code == 1
    assert "IN_PROGRESS (move_limit) in 1 moves" in out
    assert "LOST" not in out

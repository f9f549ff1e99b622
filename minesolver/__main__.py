"""Command line entry point: ``python -m minesolver {play,solve,bench}``."""

import argparse
import logging
from typing import List, Optional, Tuple

from .analysis import format_move_log, run_solver_many_tests
from .engine import DIFFICULTY_SETTINGS, Board, Difficulty, play_cli
from .solver import DEFAULT_MAX_MOVES, MinesweeperSolver, replay_moves


def _board_size(args: argparse.Namespace) -> Tuple[int, int, int]:
    if args.difficulty:
        return DIFFICULTY_SETTINGS[Difficulty[args.difficulty.upper()]]
    return args.width, args.height, args.mines


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="minesolver", description=__doc__)
    parser.add_argument("--width", type=int, default=9)
    parser.add_argument("--height", type=int, default=9)
    parser.add_argument("--mines", type=int, default=10)
    parser.add_argument(
        "--difficulty",
        choices=[d.name.lower() for d in Difficulty],
        help="Use a standard preset instead of --width/--height/--mines",
    )
    parser.add_argument(
        "--seed", type=int, default=-1,
        help="Mine placement seed; <0 uses OS entropy (random every run)",
    )
    parser.add_argument("--max-moves", type=int, default=DEFAULT_MAX_MOVES)
    parser.add_argument(
        "--log-level", default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
    )

    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("play", help="Play in the terminal with solver hints")
    sub.add_parser("solve", help="Solve one board and print the move log")
    bench = sub.add_parser("bench", help="Solve many boards and print statistics")
    bench.add_argument("--runs", type=int, default=100)
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    width, height, mines = _board_size(args)
    seed = None if args.seed < 0 else args.seed
    solver = MinesweeperSolver(max_moves=args.max_moves)

    if args.command == "play":
        play_cli(Board(width, height, mines, seed=seed), hint_provider=solver.hint)
        return 0

    if args.command == "solve":
        board = Board(width, height, mines, seed=seed)
        result = solver.solve(board)
        print(format_move_log(result.moves))
        print()
        print(replay_moves(board, result.moves).format_board(reveal_all=True))
        print(
            f"\n{result.status.name} ({result.stop_reason}) in "
            f"{result.move_count} moves, {result.solution_time.total_seconds():.3f}s"
        )
        if result.strategy:
            print(f"Strategies: {result.strategy}")
        return 0 if result.success else 1

    stats = run_solver_many_tests(width, height, mines, args.runs, seed=seed, solver=solver)
    for key, value in stats.items():
        print(f"{key:32s} {value:10.4f}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

"""
Quickstart for minesolver.

Walks through one solve, step-by-step hints, snapshots and a small benchmark.
Run with: python examples/quickstart.py
"""

from minesolver import (
    DIFFICULTY_SETTINGS,
    Board,
    Difficulty,
    MinesweeperSolver,
    replay_moves,
)
from minesolver.analysis import format_move_log, run_solver_many_tests


def section(title: str) -> None:
    print()
    print(title)
    print("-" * len(title))


def main():
    solver = MinesweeperSolver()

    section("Solve an intermediate board (seed 7)")
    board = Board.for_difficulty(Difficulty.INTERMEDIATE, seed=7)
    result = solver.solve(board)
    print(f"{'won' if result.success else 'not solved'} ({result.stop_reason}), "
          f"{result.move_count} moves, {result.guess_count} guesses")
    for name, count in sorted(result.strategy_counts.items()):
        print(f"  {name:28s} {count}")

    # solve() works on a clone, so the original board is still untouched
    print("\nFirst ten moves:")
    print(format_move_log(result.moves[:10]))
    print("\nFinal position:")
    print(replay_moves(board, result.moves).format_board(reveal_all=True))

    section("Ask for hints one at a time")
    board = Board(9, 9, 10, seed=3)
    board.reveal(4, 4)
    for _ in range(5):
        move = solver.hint(board)
        if move is None:
            print("no certain move left; the solver would guess next")
            break
        print(move)
        move.apply(board)

    section("Save and restore a snapshot")
    snapshot = board.to_dict()
    restored = Board.from_dict(snapshot)
    print(f"restored {restored.width}x{restored.height}, "
          f"{restored.revealed_count} cells revealed, {restored.flags_used} flags")

    section("Win rate by difficulty (20 games each)")
    for difficulty in Difficulty:
        w, h, m = DIFFICULTY_SETTINGS[difficulty]
        stats = run_solver_many_tests(w, h, m, runs=20, seed=0)
        print(f"{difficulty.name.lower():13s} {stats['win_rate']:6.1%} won, "
              f"{stats['avg_guesses_total']:.1f} guesses/game, "
              f"{stats['guess_failure_rate']:.1%} of guesses fatal")


if __name__ == "__main__":
    main()

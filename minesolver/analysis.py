"""Analysis and benchmarking tools for the Minesweeper solver."""

from typing import Any, Dict, List, Optional, Sequence

import matplotlib.pyplot as plt
import numpy as np

from .engine import DIFFICULTY_SETTINGS, Board, Difficulty
from .moves import PROBABILITY_STRATEGY, Flag, Move, SolveResult
from .probability import probability_map
from .solver import MinesweeperSolver, replay_moves


def format_move_log(moves: Sequence[Move]) -> str:
    """
    Format a move log as numbered lines.

    Args:
        moves: Moves in the order they were applied.

    Returns:
        One line per move, e.g. ``"  3. flag   (4, 1)  Must be mine around (3,2)"``.
    """
    lines: List[str] = []
    width = len(str(len(moves)))
    for i, move in enumerate(moves, start=1):
        kind = type(move).__name__.lower()
        lines.append(f"{i:>{width}}. {kind:<6} ({move.x}, {move.y})  {move.reason}")
    return "\n".join(lines)


def run_solver_single_test(
    width: int,
    height: int,
    mines_count: int,
    *,
    seed: Optional[int] = None,
    show_boards: bool = False,
    solver: Optional[MinesweeperSolver] = None,
) -> Dict[str, Any]:
    """
    Run one end-to-end game on a fresh board.

    Args:
        width: Board width.
        height: Board height.
        mines_count: Total number of mines on the board.
        seed: Mine placement seed, for reproducible runs.
        show_boards: If True, print the final board and the move log.
        solver: Solver to use; a default one is created when omitted.

    Returns:
        Metrics for the game: status, success, move/guess/flag counts,
        solve time in seconds and the move log.
    """
    board = Board(width, height, mines_count, seed=seed)
    solver = solver if solver is not None else MinesweeperSolver()

    result = solver.solve(board)

    if show_boards:
        final = replay_moves(board, result.moves)
        print("Final board (mines visible):")
        print(final.format_board(reveal_all=True))
        print()
        print(format_move_log(result.moves))
        print()
        print(f"Finished with status {result.status.name} ({result.stop_reason}).")

    return _result_metrics(result)


def _result_metrics(result: SolveResult) -> Dict[str, Any]:
    return {
        "status": int(result.status),
        "success": result.success,
        "stop_reason": result.stop_reason,
        "moves_count": result.move_count,
        "guesses_count": result.guess_count,
        "flags_count": sum(1 for m in result.moves if isinstance(m, Flag)),
        "lost_on_guess": (
            result.stop_reason == "lost"
            and result.move_strategies[-1:] == [PROBABILITY_STRATEGY]
        ),
        "solution_seconds": result.solution_time.total_seconds(),
        "strategy_counts": dict(result.strategy_counts),
        "moves_sequence": list(result.moves),
    }


def run_solver_many_tests(
    width: int,
    height: int,
    mines_count: int,
    runs: int,
    *,
    seed: Optional[int] = None,
    solver: Optional[MinesweeperSolver] = None,
) -> Dict[str, float]:
    """
    Run many independent games and return aggregated statistics.

    Args:
        width: Board width.
        height: Board height.
        mines_count: Total number of mines on the board.
        runs: Number of independent games to run.
        seed: Base seed; game ``i`` uses ``seed + i``. None for random boards.
        solver: Solver to use for every game.

    Returns:
        ``win_rate``, mean/median/std of moves, mean guesses, guess failure
        rate, mean solve time and mean moves per strategy
        (``avg_<strategy>_moves``).

    Raises:
        ValueError: If ``runs`` is not positive.
    """
    if runs <= 0:
        raise ValueError("runs must be positive.")

    solver = solver if solver is not None else MinesweeperSolver()

    wins = np.zeros(runs, dtype=bool)
    moves = np.zeros(runs, dtype=float)
    guesses = np.zeros(runs, dtype=float)
    failed = np.zeros(runs, dtype=bool)
    seconds = np.zeros(runs, dtype=float)
    strategy_totals: Dict[str, float] = {}

    for i in range(runs):
        metrics = run_solver_single_test(
            width,
            height,
            mines_count,
            seed=None if seed is None else seed + i,
            solver=solver,
        )
        wins[i] = metrics["success"]
        moves[i] = metrics["moves_count"]
        guesses[i] = metrics["guesses_count"]
        failed[i] = metrics["lost_on_guess"]
        seconds[i] = metrics["solution_seconds"]
        for name, count in metrics["strategy_counts"].items():
            strategy_totals[name] = strategy_totals.get(name, 0.0) + count

    total_guesses = float(guesses.sum())
    failed_guesses = float(np.count_nonzero(failed))

    out: Dict[str, float] = {
        "win_rate": float(wins.mean()),
        "avg_moves_count": float(moves.mean()),
        "median_moves_count": float(np.median(moves)),
        "std_moves_count": float(moves.std()),
        "avg_guesses_total": total_guesses / runs,
        "avg_guesses_failed": failed_guesses / runs,
        "guess_failure_rate": (
            failed_guesses / total_guesses if total_guesses > 0 else 0.0
        ),
        "avg_solution_seconds": float(seconds.mean()),
    }
    for name, total in strategy_totals.items():
        key = "avg_" + name.lower().replace(" ", "_").replace("-", "_") + "_moves"
        out[key] = total / runs

    return out


def run_solver_difficulty_analysis(
    runs: int,
    *,
    seed: Optional[int] = None,
    show: bool = True,
) -> Dict[str, Dict[str, float]]:
    """
    Run aggregated solver tests on the standard difficulty presets and plot summaries.

    Args:
        runs: Number of independent games per difficulty.
        seed: Base seed passed to ``run_solver_many_tests``.
        show: If True, display the figures with ``plt.show()``.

    Returns:
        Mapping from lower-case difficulty name to its statistics dict.

    Standard difficulty levels:
        - Beginner: 9x9, 10 mines
        - Intermediate: 16x16, 40 mines
        - Expert: 30x16, 99 mines
    """
    results: Dict[str, Dict[str, float]] = {}
    for difficulty in Difficulty:
        w, h, m = DIFFICULTY_SETTINGS[difficulty]
        results[difficulty.name.lower()] = run_solver_many_tests(
            w, h, m, runs, seed=seed
        )

    level_names = list(results.keys())
    x = np.arange(len(level_names))

    # 1) Win rate by level
    plt.figure()  # type: ignore[misc]
    plt.bar(x, [results[n]["win_rate"] for n in level_names])  # type: ignore[misc]
    plt.xticks(x, level_names)  # type: ignore[misc]
    plt.ylabel("Win rate")  # type: ignore[misc]
    plt.ylim(0.0, 1.0)  # type: ignore[misc]
    plt.title("Win rate by difficulty level")  # type: ignore[misc]
    plt.tight_layout()

    # 2) Deductions vs guesses per game
    guesses = [results[n]["avg_guesses_total"] for n in level_names]
    deduced = [
        results[n]["avg_moves_count"] - results[n]["avg_guesses_total"]
        for n in level_names
    ]

    bar_w = 0.35
    plt.figure()  # type: ignore[misc]
    plt.bar(x - bar_w / 2, deduced, width=bar_w, label="deduced")  # type: ignore[misc]
    plt.bar(x + bar_w / 2, guesses, width=bar_w, label="guessed")  # type: ignore[misc]
    plt.xticks(x, level_names)  # type: ignore[misc]
    plt.ylabel("Average moves per game")  # type: ignore[misc]
    plt.title("Deduced vs guessed moves (per game)")  # type: ignore[misc]
    plt.legend()  # type: ignore[misc]
    plt.tight_layout()

    if show:
        plt.show()  # type: ignore[misc]

    return results


def plot_probability_map(board: Board, ax: Optional[Any] = None) -> Any:
    """
    Draw the estimated mine probability of every hidden cell as a heat map.

    Args:
        board: Board to analyse.
        ax: Matplotlib axes to draw on; the current axes when omitted.

    Returns:
        The matplotlib image created by ``imshow``.
    """
    if ax is None:
        ax = plt.gca()
    grid = np.ma.masked_invalid(probability_map(board))
    image = ax.imshow(grid, cmap="Reds", vmin=0.0, vmax=1.0)
    ax.set_xticks(np.arange(board.width))
    ax.set_yticks(np.arange(board.height))
    ax.set_title("Estimated mine probability")
    return image

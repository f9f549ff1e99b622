"""Full-game solve loop: deductions first, probability-based guessing as a fallback."""

import logging
import time
from collections import Counter
from datetime import timedelta
from typing import Callable, Iterable, List, Optional, Sequence, Tuple

from .engine import Board, GameStatus
from .moves import PROBABILITY_STRATEGY, Move, Reveal, SolveResult
from .probability import probability_guess
from .strategies import DEDUCTION_STRATEGIES, Strategy, deduce_next_move

logger = logging.getLogger(__name__)

DEFAULT_MAX_MOVES = 1000

FIRST_MOVE = "First move"


class MinesweeperSolver:
    """
    Drives a whole game on a private copy of the caller's board.

    Each step asks the deduction strategies for a certain move, falls back to
    the probability estimator, applies the move and checks the board status.
    The caller's board is never mutated.
    """

    def __init__(
        self,
        strategies: Sequence[Tuple[str, Strategy]] = DEDUCTION_STRATEGIES,
        max_moves: int = DEFAULT_MAX_MOVES,
        use_probability: bool = True,
    ) -> None:
        """
        Args:
            strategies: Ordered ``(name, strategy)`` pairs to try on each step.
            max_moves: Hard ceiling on the number of moves a solve may apply.
            use_probability: If False, a solve stops as soon as deduction stalls.

        Raises:
            ValueError: If ``max_moves`` is not positive.
        """
        if max_moves < 1:
            raise ValueError("max_moves must be at least 1.")
        self.strategies: List[Tuple[str, Strategy]] = list(strategies)
        self.max_moves: int = max_moves
        self.use_probability: bool = use_probability

    def hint(self, board: Board) -> Optional[Move]:
        """Return one certain move for the board, or None. Guesses are never hinted."""
        found = deduce_next_move(board, self.strategies)
        return None if found is None else found[1]

    def next_move(self, board: Board) -> Optional[Tuple[str, Move]]:
        """
        Return ``(strategy_name, move)`` for the next step without applying it.

        Deduction strategies are tried first; the probability estimator is
        used only when all of them come up empty.
        """
        found = deduce_next_move(board, self.strategies)
        if found is not None:
            return found
        if not self.use_probability:
            return None
        guess = probability_guess(board)
        if guess is None:
            return None
        return PROBABILITY_STRATEGY, guess

    def solve(
        self,
        board: Board,
        deadline: Optional[float] = None,
        should_cancel: Optional[Callable[[], bool]] = None,
    ) -> SolveResult:
        """
        Play the board to the end on a clone and report the moves taken.

        Args:
            board: Board to solve; it is cloned and left untouched.
            deadline: Absolute ``time.monotonic()`` value after which no new
                move is requested.
            should_cancel: Polled between moves; returning True stops the solve.

        Returns:
            The ordered move log, outcome and strategy summary.
        """
        started = time.perf_counter()
        working = board.clone()

        moves: List[Move] = []
        strategies: List[str] = []
        move_strategies: List[str] = []
        counts: Counter = Counter()
        stop_reason = ""

        if working.first_move and working.status == GameStatus.IN_PROGRESS:
            first = Reveal(
                working.width // 2, working.height // 2, "First move - center click"
            )
            first.apply(working)
            moves.append(first)
            move_strategies.append(FIRST_MOVE)
            counts[FIRST_MOVE] += 1

        while working.status == GameStatus.IN_PROGRESS:
            if should_cancel is not None and should_cancel():
                stop_reason = "cancelled"
                break
            if len(moves) >= self.max_moves:
                stop_reason = "move_limit"
                logger.warning("Solve stopped after %d moves", len(moves))
                break
            if deadline is not None and time.monotonic() >= deadline:
                stop_reason = "deadline"
                logger.warning("Solve deadline passed after %d moves", len(moves))
                break

            found = self.next_move(working)
            if found is None:
                stop_reason = "stalemate"
                break

            name, move = found
            if name == PROBABILITY_STRATEGY and name not in strategies:
                strategies.append(name)
            counts[name] += 1

            move.apply(working)
            moves.append(move)
            move_strategies.append(name)
            logger.debug("Move %d: %s", len(moves), move)

        if working.status == GameStatus.WON:
            stop_reason = "won"
        elif working.status == GameStatus.LOST:
            stop_reason = "lost"

        result = SolveResult(
            success=working.status == GameStatus.WON,
            moves=moves,
            strategies=strategies,
            solution_time=timedelta(seconds=time.perf_counter() - started),
            status=working.status,
            stop_reason=stop_reason,
            strategy_counts=dict(counts),
            move_strategies=move_strategies,
        )
        logger.info(
            "Solve finished: %s after %d moves (%s)",
            stop_reason, len(moves), result.strategy or "deduction only",
        )
        return result


def replay_moves(board: Board, moves: Iterable[Move]) -> Board:
    """Apply a move log to a clone of ``board`` and return the clone."""
    working = board.clone()
    for move in moves:
        move.apply(working)
    return working

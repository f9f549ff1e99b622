"""Mine probability estimates used when no certain deduction exists."""

import logging
from typing import List, Optional, Tuple

import numpy as np

from .engine import Board, CellState
from .moves import Reveal

logger = logging.getLogger(__name__)

# Used when every numbered neighbor of a hidden cell has no hidden neighbors.
FALLBACK_PROBABILITY = 0.5


def global_probability(board: Board) -> float:
    """Mines spread uniformly over every cell that is not revealed."""
    unrevealed = board.width * board.height - board.revealed_count
    if unrevealed <= 0:
        return 0.0
    return board.mine_count / unrevealed


def mine_probability(
    board: Board, x: int, y: int, global_p: Optional[float] = None
) -> float:
    """
    Estimate the mine probability of the hidden cell at (x, y).

    Cells with no revealed numbered neighbor get the global probability.
    Otherwise each numbered neighbor contributes its local density
    ``(count - flagged) / hidden`` and the densities are averaged.
    """
    numbered = [
        n for n in board.neighbors(x, y)
        if n.state == CellState.REVEALED and n.adjacent_mines > 0
    ]
    if not numbered:
        return global_probability(board) if global_p is None else global_p

    densities: List[float] = []
    for n in numbered:
        around = board.neighbors(n.x, n.y)
        hidden = sum(1 for c in around if c.state == CellState.HIDDEN)
        if hidden == 0:
            continue
        flagged = sum(1 for c in around if c.state == CellState.FLAGGED)
        densities.append((n.adjacent_mines - flagged) / hidden)

    if not densities:
        return FALLBACK_PROBABILITY
    return sum(densities) / len(densities)


def mine_probabilities(board: Board) -> List[Tuple[Tuple[int, int], float]]:
    """Return ``((x, y), probability)`` for every hidden cell, x outer and y inner."""
    global_p = global_probability(board)
    return [
        ((c.x, c.y), mine_probability(board, c.x, c.y, global_p))
        for c in board.iter_cells()
        if c.state == CellState.HIDDEN
    ]


def probability_map(board: Board) -> np.ndarray:
    """
    Probability grid shaped ``(height, width)`` for plotting.

    Hidden cells hold their estimate; every other cell is NaN.
    """
    grid = np.full((board.height, board.width), np.nan, dtype=float)
    for (x, y), p in mine_probabilities(board):
        grid[y, x] = p
    return grid


def probability_guess(board: Board) -> Optional[Reveal]:
    """
    Reveal the hidden cell with the lowest estimated mine probability.

    Ties go to the first cell in scan order. Returns None when nothing is
    hidden.
    """
    best: Optional[Tuple[Tuple[int, int], float]] = None
    for coord, p in mine_probabilities(board):
        if best is None or p < best[1]:
            best = (coord, p)

    if best is None:
        return None

    (x, y), p = best
    logger.debug("Guessing (%d, %d) with estimated mine probability %.3f", x, y, p)
    return Reveal(x, y, "Probability-based guess")

"""
Minesweeper Solver

A deduction-first Minesweeper solver using layered inference strategies:
- Basic counting: flags around a number account for it, or hidden cells must all be mines
- 1-2-1 pattern: aligned revealed cells reading 1-2-1
- Constraint overlap: pairwise comparison of neighboring numbers
- Probability-based guessing: local density estimates when no certain move exists
"""

from .engine import (
    DIFFICULTY_SETTINGS,
    Board,
    Cell,
    CellState,
    Difficulty,
    GameStatus,
    play_cli,
)
from .moves import PROBABILITY_STRATEGY, Flag, Move, Reveal, SolveResult
from .probability import (
    mine_probabilities,
    mine_probability,
    probability_guess,
    probability_map,
)
from .solver import DEFAULT_MAX_MOVES, MinesweeperSolver, replay_moves
from .strategies import (
    DEDUCTION_STRATEGIES,
    basic_counting,
    constraint_overlap,
    deduce_next_move,
    pattern_121,
)

__version__ = "1.0.0"

__all__ = [
    # Board model
    "Board",
    "Cell",
    "CellState",
    "GameStatus",
    "Difficulty",
    "DIFFICULTY_SETTINGS",
    # Moves and results
    "Reveal",
    "Flag",
    "Move",
    "SolveResult",
    "PROBABILITY_STRATEGY",
    # Deduction
    "DEDUCTION_STRATEGIES",
    "basic_counting",
    "pattern_121",
    "constraint_overlap",
    "deduce_next_move",
    # Probability
    "mine_probability",
    "mine_probabilities",
    "probability_map",
    "probability_guess",
    # Solver
    "MinesweeperSolver",
    "DEFAULT_MAX_MOVES",
    "replay_moves",
    # CLI
    "play_cli",
]

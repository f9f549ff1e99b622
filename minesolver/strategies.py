"""Deterministic deduction strategies.

Each strategy is a plain function ``Board -> Optional[Move]`` that returns at
most one certain move. ``DEDUCTION_STRATEGIES`` lists them in priority order;
``deduce_next_move`` tries them in sequence and stops at the first hit.
"""

import logging
from typing import Callable, List, Optional, Sequence, Tuple

from .engine import Board, Cell, CellState
from .moves import Flag, Move, Reveal

logger = logging.getLogger(__name__)

Strategy = Callable[[Board], Optional[Move]]


def _numbered_cells(board: Board) -> List[Cell]:
    """Revealed cells with a positive adjacent-mine count, x outer and y inner."""
    return [
        c for c in board.iter_cells()
        if c.state == CellState.REVEALED and c.adjacent_mines > 0
    ]


def _split_neighbors(board: Board, cell: Cell) -> Tuple[List[Cell], int]:
    """Return (hidden neighbors in scan order, flagged neighbor count)."""
    hidden: List[Cell] = []
    flagged = 0
    for n in board.neighbors(cell.x, cell.y):
        if n.state == CellState.HIDDEN:
            hidden.append(n)
        elif n.state == CellState.FLAGGED:
            flagged += 1
    return hidden, flagged


# -----------------------------------------------------------------------------
# Basic counting
# -----------------------------------------------------------------------------

def basic_counting(board: Board) -> Optional[Move]:
    """
    Single-cell counting around each numbered cell.

    If a cell's flags already account for its count, its hidden neighbors are
    safe; if hidden plus flagged neighbors equal its count, they are mines.
    The safe check wins when both apply to the same cell.
    """
    for cell in _numbered_cells(board):
        hidden, flagged = _split_neighbors(board, cell)
        if not hidden:
            continue

        if flagged == cell.adjacent_mines:
            target = hidden[0]
            return Reveal(
                target.x, target.y, f"All mines found around ({cell.x},{cell.y})"
            )

        if len(hidden) + flagged == cell.adjacent_mines:
            target = hidden[0]
            return Flag(
                target.x, target.y, f"Must be mine around ({cell.x},{cell.y})"
            )

    return None


# -----------------------------------------------------------------------------
# 1-2-1 pattern
# -----------------------------------------------------------------------------

_PATTERN_121 = (1, 2, 1)
_PATTERN_REASON = "1-2-1 pattern: safe cell"


def _is_121(cells: Sequence[Cell]) -> bool:
    return all(c.state == CellState.REVEALED for c in cells) and tuple(
        c.adjacent_mines for c in cells
    ) == _PATTERN_121


def _first_hidden(board: Board, candidates: Sequence[Tuple[int, int]]) -> Optional[Move]:
    for x, y in candidates:
        c = board.cell(x, y)
        if c is not None and c.state == CellState.HIDDEN:
            return Reveal(x, y, _PATTERN_REASON)
    return None


def pattern_121(board: Board) -> Optional[Move]:
    """
    Look for three aligned revealed cells reading 1-2-1.

    A horizontal match offers the cells above then below the centre; a
    vertical match offers the cells left then right of the centre. All
    horizontal positions are scanned before any vertical one. The last row
    (for horizontal matches) and last column (for vertical ones) never match.
    """
    cells = board.cells

    for x in range(1, board.width - 1):
        for y in range(board.height - 1):
            if not _is_121((cells[x - 1][y], cells[x][y], cells[x + 1][y])):
                continue
            move = _first_hidden(board, ((x, y - 1), (x, y + 1)))
            if move is not None:
                return move

    for x in range(board.width - 1):
        for y in range(1, board.height - 1):
            if not _is_121((cells[x][y - 1], cells[x][y], cells[x][y + 1])):
                continue
            move = _first_hidden(board, ((x - 1, y), (x + 1, y)))
            if move is not None:
                return move

    return None


# -----------------------------------------------------------------------------
# Pairwise constraint overlap
# -----------------------------------------------------------------------------

_OVERLAP_REASON = "Constraint analysis: must be mine"


def _overlap_move(board: Board, cell1: Cell, cell2: Cell) -> Optional[Move]:
    coords1 = board.neighbor_coords(cell1.x, cell1.y)
    coords2 = board.neighbor_coords(cell2.x, cell2.y)
    set1, set2 = set(coords1), set(coords2)

    def hidden(coords: Sequence[Tuple[int, int]]) -> List[Tuple[int, int]]:
        return [
            (x, y) for x, y in coords
            if board.cells[x][y].state == CellState.HIDDEN
        ]

    if not hidden([xy for xy in coords1 if xy in set2]):
        return None

    unique1 = hidden([xy for xy in coords1 if xy not in set2])
    unique2 = hidden([xy for xy in coords2 if xy not in set1])

    _, flags1 = _split_neighbors(board, cell1)
    _, flags2 = _split_neighbors(board, cell2)
    remaining1 = cell1.adjacent_mines - flags1
    remaining2 = cell2.adjacent_mines - flags2

    if unique1 and remaining1 - remaining2 == len(unique1):
        x, y = unique1[0]
        return Flag(x, y, _OVERLAP_REASON)

    if unique2 and remaining2 - remaining1 == len(unique2):
        x, y = unique2[0]
        return Flag(x, y, _OVERLAP_REASON)

    return None


def constraint_overlap(board: Board) -> Optional[Move]:
    """
    Compare every ordered pair of numbered cells that share hidden neighbors.

    When the difference between the two cells' remaining mine counts equals
    the number of hidden cells only the first one touches, all of those cells
    are mines; the first of them is flagged. Only pairs are considered, never
    larger groups of constraints.
    """
    numbered = _numbered_cells(board)
    for cell1 in numbered:
        for cell2 in numbered:
            if cell1 is cell2:
                continue
            move = _overlap_move(board, cell1, cell2)
            if move is not None:
                return move
    return None


# -----------------------------------------------------------------------------
# Strategy chain
# -----------------------------------------------------------------------------

DEDUCTION_STRATEGIES: List[Tuple[str, Strategy]] = [
    ("Basic counting", basic_counting),
    ("1-2-1 pattern", pattern_121),
    ("Constraint overlap", constraint_overlap),
]


def deduce_next_move(
    board: Board,
    strategies: Sequence[Tuple[str, Strategy]] = DEDUCTION_STRATEGIES,
) -> Optional[Tuple[str, Move]]:
    """
    Try each strategy in order and return the first certain move.

    Returns:
        ``(strategy_name, move)`` or None when no strategy finds anything.
    """
    for name, strategy in strategies:
        move = strategy(board)
        if move is not None:
            logger.debug("%s -> %s", name, move)
            return name, move
    return None

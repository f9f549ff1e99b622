"""Minesweeper board model with lazy first-click-safe mine placement."""

import enum
import logging
import random
import re
from collections import deque
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import (
    Any,
    Callable,
    Deque,
    Dict,
    Iterable,
    Iterator,
    List,
    Optional,
    Set,
    Tuple,
)

from .utils import get_neighborhoods

logger = logging.getLogger(__name__)


class CellState(enum.IntEnum):
    """Visible state of a cell. Ordinals are shared with persisted snapshots."""
    HIDDEN = 0
    REVEALED = 1
    FLAGGED = 2


class GameStatus(enum.IntEnum):
    """Board status. Ordinals are shared with persisted snapshots."""
    IN_PROGRESS = 0
    WON = 1
    LOST = 2


class Difficulty(enum.IntEnum):
    """Standard board presets."""
    BEGINNER = 0
    INTERMEDIATE = 1
    EXPERT = 2


DIFFICULTY_SETTINGS: Dict[Difficulty, Tuple[int, int, int]] = {
    Difficulty.BEGINNER: (9, 9, 10),
    Difficulty.INTERMEDIATE: (16, 16, 40),
    Difficulty.EXPERT: (30, 16, 99),
}


@dataclass
class Cell:
    """A single board cell. ``adjacent_mines`` is meaningful only for safe cells."""
    x: int
    y: int
    is_mine: bool = False
    state: CellState = CellState.HIDDEN
    adjacent_mines: int = 0

    @property
    def is_hidden(self) -> bool:
        return self.state == CellState.HIDDEN

    @property
    def is_revealed(self) -> bool:
        return self.state == CellState.REVEALED

    @property
    def is_flagged(self) -> bool:
        return self.state == CellState.FLAGGED

    def copy(self) -> "Cell":
        return Cell(self.x, self.y, self.is_mine, self.state, self.adjacent_mines)

    def display_value(self) -> str:
        """Single-character view of the cell as a player would see it."""
        if self.state == CellState.FLAGGED:
            return "F"
        if self.state == CellState.HIDDEN:
            return "."
        if self.is_mine:
            return "M"
        return str(self.adjacent_mines) if self.adjacent_mines > 0 else " "


# C# style timestamps carry 7 fractional digits; datetime accepts at most 6.
_FRACTION_RE = re.compile(r"(\.\d{6})\d+")


def _parse_timestamp(value: Any) -> Optional[datetime]:
    if value is None or isinstance(value, datetime):
        return value
    if not isinstance(value, str):
        raise ValueError(f"Unsupported timestamp value: {value!r}")
    text = _FRACTION_RE.sub(r"\1", value.strip())
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return datetime.fromisoformat(text)


def _format_timestamp(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value is not None else None


class Board:
    """
    Minesweeper board: cell grid, mine layout, reveal/flag state and status.

    Cells are addressed as ``cells[x][y]`` with x in [0, width) and
    y in [0, height). Out-of-bounds coordinates and illegal state changes are
    silent no-ops so callers can probe speculative coordinates freely.
    """

    def __init__(
        self,
        width: int,
        height: int,
        mine_count: int,
        seed: Optional[int] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        """
        Create an empty board; mines are placed on the first reveal.

        Args:
            width: Board width (number of columns), must be > 0.
            height: Board height (number of rows), must be > 0.
            mine_count: Total number of mines, 0 <= mine_count < width * height.
            seed: Seed for the mine placement RNG. Ignored when ``rng`` is given.
            rng: Explicit random generator to use for mine placement.

        Raises:
            ValueError: If dimensions or mine count are invalid.
        """
        if width <= 0 or height <= 0:
            raise ValueError("Width and height must be positive.")
        if mine_count < 0:
            raise ValueError("mine_count must be non-negative.")
        if mine_count >= width * height:
            raise ValueError(
                "mine_count must leave at least one safe cell for the first move."
            )

        self.width: int = width
        self.height: int = height
        self.mine_count: int = mine_count

        self.cells: List[List[Cell]] = [
            [Cell(x, y) for y in range(height)] for x in range(width)
        ]
        self.status: GameStatus = GameStatus.IN_PROGRESS
        self.flags_used: int = 0
        self.first_move: bool = True
        self.start_time: datetime = datetime.now()
        self.end_time: Optional[datetime] = None

        self._rng: random.Random = rng if rng is not None else random.Random(seed)
        self._neighborhoods: Dict[
            Tuple[int, int], Tuple[Tuple[int, int], ...]
        ] = get_neighborhoods(width, height)

    @classmethod
    def for_difficulty(
        cls, difficulty: Difficulty, seed: Optional[int] = None
    ) -> "Board":
        """Create a board sized for one of the standard presets."""
        width, height, mines = DIFFICULTY_SETTINGS[Difficulty(difficulty)]
        return cls(width, height, mines, seed=seed)

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def cell(self, x: int, y: int) -> Optional[Cell]:
        """Return the cell at (x, y), or None when out of bounds."""
        if not self.in_bounds(x, y):
            return None
        return self.cells[x][y]

    def neighbor_coords(self, x: int, y: int) -> Tuple[Tuple[int, int], ...]:
        """Return precomputed neighbor coordinates for a cell."""
        return self._neighborhoods.get((x, y), ())

    def neighbors(self, x: int, y: int) -> List[Cell]:
        """Return the neighboring cells of (x, y) in column-major order."""
        return [self.cells[nx][ny] for nx, ny in self.neighbor_coords(x, y)]

    def iter_cells(self) -> Iterator[Cell]:
        """Iterate over all cells, x outer and y inner."""
        for column in self.cells:
            yield from column

    @property
    def revealed_count(self) -> int:
        return sum(1 for c in self.iter_cells() if c.state == CellState.REVEALED)

    @property
    def is_over(self) -> bool:
        return self.status != GameStatus.IN_PROGRESS

    def remaining_flags(self) -> int:
        return self.mine_count - self.flags_used

    def elapsed_time(self) -> timedelta:
        end = self.end_time
        if end is None:
            end = datetime.now(tz=self.start_time.tzinfo)
        return end - self.start_time

    def mine_positions(self) -> Set[Tuple[int, int]]:
        return {(c.x, c.y) for c in self.iter_cells() if c.is_mine}

    # -------------------------------------------------------------------------
    # Mine placement
    # -------------------------------------------------------------------------

    def place_mines(self, first_x: int, first_y: int) -> None:
        """
        Place mines uniformly at random, never on (first_x, first_y).

        Uses rejection sampling: a random coordinate is drawn until it is
        neither the first click nor an existing mine.

        Raises:
            ValueError: If mines were already placed.
        """
        if not self.first_move:
            raise ValueError("Mines have already been placed on this board.")

        placed = 0
        while placed < self.mine_count:
            x = self._rng.randrange(self.width)
            y = self._rng.randrange(self.height)
            if (x, y) == (first_x, first_y) or self.cells[x][y].is_mine:
                continue
            self.cells[x][y].is_mine = True
            placed += 1

        self._compute_adjacent_mines()
        self.first_move = False
        logger.debug(
            "Placed %d mines on %dx%d board avoiding (%d, %d)",
            self.mine_count, self.width, self.height, first_x, first_y,
        )

    def place_mines_at(self, positions: Iterable[Tuple[int, int]]) -> None:
        """
        Place mines at exactly the given coordinates (fixed layouts, snapshots).

        Raises:
            ValueError: If mines were already placed, a position is out of
                bounds or repeated, or the count differs from ``mine_count``.
        """
        if not self.first_move:
            raise ValueError("Mines have already been placed on this board.")

        mines: Set[Tuple[int, int]] = set()
        for x, y in positions:
            if not self.in_bounds(x, y):
                raise ValueError(f"Mine position ({x}, {y}) is outside the board.")
            if (x, y) in mines:
                raise ValueError(f"Mine position ({x}, {y}) is repeated.")
            mines.add((x, y))

        if len(mines) != self.mine_count:
            raise ValueError(
                f"Expected {self.mine_count} mine positions, got {len(mines)}."
            )

        for x, y in mines:
            self.cells[x][y].is_mine = True
        self._compute_adjacent_mines()
        self.first_move = False

    def _compute_adjacent_mines(self) -> None:
        """Populate every non-mine cell with its adjacent mine count."""
        for c in self.iter_cells():
            if c.is_mine:
                continue
            c.adjacent_mines = sum(
                1 for nx, ny in self.neighbor_coords(c.x, c.y)
                if self.cells[nx][ny].is_mine
            )

    # -------------------------------------------------------------------------
    # Moves
    # -------------------------------------------------------------------------

    def reveal(self, x: int, y: int) -> List[Tuple[int, int]]:
        """
        Reveal a cell, cascading through zero-count regions.

        No-op when the coordinate is invalid, the cell is not hidden or the
        game is already over. The first reveal places the mines.

        Args:
            x: X-coordinate (column) of the cell to reveal.
            y: Y-coordinate (row) of the cell to reveal.

        Returns:
            Coordinates revealed by this call, in reveal order. On a mine hit
            only the hit cell is listed even though all mines become visible.
        """
        if not self.in_bounds(x, y) or self.status != GameStatus.IN_PROGRESS:
            return []
        if self.cells[x][y].state != CellState.HIDDEN:
            return []

        if self.first_move:
            self.place_mines(x, y)

        target = self.cells[x][y]
        if target.is_mine:
            target.state = CellState.REVEALED
            self.status = GameStatus.LOST
            self.end_time = datetime.now(tz=self.start_time.tzinfo)
            self._reveal_all_mines()
            logger.debug("Mine hit at (%d, %d)", x, y)
            return [(x, y)]

        revealed = self._flood_fill(x, y)
        self._check_win_condition()
        return revealed

    def _flood_fill(self, x: int, y: int) -> List[Tuple[int, int]]:
        """Reveal (x, y) and the connected zero region plus its numbered border."""
        frontier: Deque[Tuple[int, int]] = deque([(x, y)])
        visited: Set[Tuple[int, int]] = {(x, y)}
        revealed: List[Tuple[int, int]] = []

        while frontier:
            cx, cy = frontier.popleft()
            current = self.cells[cx][cy]
            current.state = CellState.REVEALED
            revealed.append((cx, cy))

            if current.adjacent_mines != 0:
                continue

            for nx, ny in self.neighbor_coords(cx, cy):
                if (nx, ny) in visited:
                    continue
                if self.cells[nx][ny].state != CellState.HIDDEN:
                    continue
                visited.add((nx, ny))
                frontier.append((nx, ny))

        return revealed

    def _reveal_all_mines(self) -> None:
        for c in self.iter_cells():
            if c.is_mine:
                c.state = CellState.REVEALED

    def _check_win_condition(self) -> None:
        safe_revealed = sum(
            1 for c in self.iter_cells()
            if c.state == CellState.REVEALED and not c.is_mine
        )
        if safe_revealed == self.width * self.height - self.mine_count:
            self.status = GameStatus.WON
            self.end_time = datetime.now(tz=self.start_time.tzinfo)

    def toggle_flag(self, x: int, y: int) -> None:
        """
        Toggle a flag on a hidden cell.

        No-op when the coordinate is invalid or the cell is revealed. A new
        flag is only placed while flags remain.
        """
        if not self.in_bounds(x, y):
            return

        c = self.cells[x][y]
        if c.state == CellState.HIDDEN:
            if self.flags_used < self.mine_count:
                c.state = CellState.FLAGGED
                self.flags_used += 1
        elif c.state == CellState.FLAGGED:
            c.state = CellState.HIDDEN
            self.flags_used -= 1

    # -------------------------------------------------------------------------
    # Copying and snapshots
    # -------------------------------------------------------------------------

    def clone(self) -> "Board":
        """
        Return a fully independent copy of this board.

        The RNG state is copied too, so revealing the same cell first on two
        clones of a fresh board produces the same mine layout.
        """
        copy = Board.__new__(Board)
        copy.width = self.width
        copy.height = self.height
        copy.mine_count = self.mine_count
        copy.cells = [[c.copy() for c in column] for column in self.cells]
        copy.status = self.status
        copy.flags_used = self.flags_used
        copy.first_move = self.first_move
        copy.start_time = self.start_time
        copy.end_time = self.end_time
        copy._rng = random.Random()
        copy._rng.setstate(self._rng.getstate())
        copy._neighborhoods = self._neighborhoods
        return copy

    def to_dict(self) -> Dict[str, Any]:
        """Serialize the board in the persisted snapshot field shape."""
        return {
            "Width": self.width,
            "Height": self.height,
            "MineCount": self.mine_count,
            "Cells": [
                [
                    {
                        "X": c.x,
                        "Y": c.y,
                        "IsMine": c.is_mine,
                        "State": int(c.state),
                        "AdjacentMines": c.adjacent_mines,
                    }
                    for c in column
                ]
                for column in self.cells
            ],
            "Status": int(self.status),
            "StartTime": _format_timestamp(self.start_time),
            "EndTime": _format_timestamp(self.end_time),
            "FlagsUsed": self.flags_used,
            "FirstMove": self.first_move,
        }

    @classmethod
    def from_dict(
        cls, data: Dict[str, Any], seed: Optional[int] = None
    ) -> "Board":
        """
        Build a board from a persisted snapshot (see ``to_dict``).

        Raises:
            ValueError: If required fields are missing, the cell grid does not
                match the dimensions, or enum ordinals are unknown.
        """
        try:
            board = cls(
                int(data["Width"]), int(data["Height"]), int(data["MineCount"]),
                seed=seed,
            )
            columns = data["Cells"]
        except KeyError as exc:
            raise ValueError(f"Snapshot is missing field {exc.args[0]!r}.") from exc

        if len(columns) != board.width or any(
            len(column) != board.height for column in columns
        ):
            raise ValueError(
                f"Snapshot cell grid does not match {board.width}x{board.height}."
            )

        for x, column in enumerate(columns):
            for y, raw in enumerate(column):
                c = board.cells[x][y]
                c.is_mine = bool(raw.get("IsMine", False))
                c.state = CellState(int(raw.get("State", CellState.HIDDEN)))
                c.adjacent_mines = int(raw.get("AdjacentMines", 0))

        board.status = GameStatus(int(data.get("Status", GameStatus.IN_PROGRESS)))
        board.flags_used = int(data.get("FlagsUsed", 0))
        board.first_move = bool(data.get("FirstMove", True))
        start_time = _parse_timestamp(data.get("StartTime"))
        if start_time is not None:
            board.start_time = start_time
        board.end_time = _parse_timestamp(data.get("EndTime"))

        if not 0 <= board.flags_used <= board.mine_count:
            raise ValueError("FlagsUsed must be between 0 and MineCount.")
        return board

    # -------------------------------------------------------------------------
    # Display methods
    # -------------------------------------------------------------------------

    _ANSI_RESET = "\033[0m"
    _ANSI_COORD = "\033[96m"
    _ANSI_MINE = "\033[91m"

    def _c(self, s: str) -> str:
        """Wrap string in coordinate color."""
        return f"{self._ANSI_COORD}{s}{self._ANSI_RESET}"

    def _m(self, s: str) -> str:
        """Wrap string in mine color (red)."""
        return f"{self._ANSI_MINE}{s}{self._ANSI_RESET}"

    def format_board(self, reveal_all: bool = False, color: bool = True) -> str:
        """
        Render the board as a multi-line string for terminal display.

        Args:
            reveal_all: If True, show mines and all underlying counts.
            color: If False, omit ANSI escape codes.

        Returns:
            A formatted multi-line string with coordinate labels and the grid.
        """
        w, h = self.width, self.height
        c = self._c if color else str
        m = self._m if color else str

        def cell_str(x: int, y: int) -> str:
            cell = self.cells[x][y]
            if reveal_all and cell.state != CellState.FLAGGED:
                if cell.is_mine:
                    return m("M")
                return str(cell.adjacent_mines) if cell.adjacent_mines else " "
            v = cell.display_value()
            return m(v) if v == "M" else v

        header_cells = " ".join(f"{x:2d}" for x in range(w))
        out = [c("   ") + c(header_cells)]
        out.append(c("   " + "-" * (3 * w - 1)))

        for y in range(h):
            row_cells = " ".join(f" {cell_str(x, y)}" for x in range(w))
            out.append(c(f"{y:2d} ") + c("|") + row_cells)

        return "\n".join(out)

    def print_board(self) -> None:
        """Print the current visible board state to stdout."""
        print(self.format_board(reveal_all=False))


def play_cli(
    board: Board,
    hint_provider: Optional[Callable[[Board], Any]] = None,
) -> None:
    """
    Run a simple terminal UI for playing Minesweeper.

    Commands: ``x y`` reveals, ``f x y`` toggles a flag, ``h`` asks
    ``hint_provider`` for a suggested move, ``q`` quits.

    Args:
        board: Board to play on.
        hint_provider: Optional callable returning a move (or None) for a board.
    """
    print("Minesweeper CLI (x y = reveal, f x y = flag, h = hint, q = quit).")
    print("Coordinates are 0-based.\n")
    print(board.format_board())

    while True:
        s = input(f"\nMove [{board.remaining_flags()} flags left]: ").strip()
        if s.lower() in {"q", "quit", "exit"}:
            print("Quit.")
            return

        if s.lower() in {"h", "hint"}:
            if hint_provider is None:
                print("No hint provider configured.")
                continue
            move = hint_provider(board)
            print("No hint available." if move is None else f"Hint: {move}")
            continue

        parts = s.replace(",", " ").split()
        flag = bool(parts) and parts[0].lower() == "f"
        if flag:
            parts = parts[1:]
        if len(parts) != 2:
            print("Invalid input. Example: 3 5 or f 3 5")
            continue

        try:
            x = int(parts[0])
            y = int(parts[1])
        except ValueError:
            print("Invalid input. Coordinates must be integers.")
            continue

        if flag:
            board.toggle_flag(x, y)
        else:
            board.reveal(x, y)
        print()
        print(board.format_board())

        if board.status == GameStatus.LOST:
            print("\nYou hit a mine. You lost.")
            print("\nFull board:")
            print(board.format_board(reveal_all=True))
            return

        if board.status == GameStatus.WON:
            print(f"\nYou revealed all safe cells in {board.elapsed_time()}. You won!")
            return

"""Solver moves and solve results."""

from dataclasses import dataclass, field
from datetime import timedelta
from typing import Any, ClassVar, Dict, List, Union

from .engine import Board, GameStatus


@dataclass(frozen=True)
class Reveal:
    """Reveal the cell at (x, y)."""
    x: int
    y: int
    reason: str = ""

    type_code: ClassVar[int] = 0

    def apply(self, board: Board) -> None:
        board.reveal(self.x, self.y)

    def to_dict(self) -> Dict[str, Any]:
        return {"X": self.x, "Y": self.y, "Type": self.type_code, "Reason": self.reason}

    def __str__(self) -> str:
        return f"reveal ({self.x}, {self.y}): {self.reason}"


@dataclass(frozen=True)
class Flag:
    """Toggle a flag on the cell at (x, y)."""
    x: int
    y: int
    reason: str = ""

    type_code: ClassVar[int] = 1

    def apply(self, board: Board) -> None:
        board.toggle_flag(self.x, self.y)

    def to_dict(self) -> Dict[str, Any]:
        return {"X": self.x, "Y": self.y, "Type": self.type_code, "Reason": self.reason}

    def __str__(self) -> str:
        return f"flag ({self.x}, {self.y}): {self.reason}"


Move = Union[Reveal, Flag]

PROBABILITY_STRATEGY = "Probability-based guessing"


@dataclass
class SolveResult:
    """Outcome of a full solve on a private copy of the caller's board."""
    success: bool
    moves: List[Move] = field(default_factory=list)
    strategies: List[str] = field(default_factory=list)
    solution_time: timedelta = timedelta(0)
    status: GameStatus = GameStatus.IN_PROGRESS
    stop_reason: str = ""
    strategy_counts: Dict[str, int] = field(default_factory=dict)
    move_strategies: List[str] = field(default_factory=list)

    @property
    def strategy(self) -> str:
        """Comma-joined names of the named strategies that were used."""
        return ", ".join(self.strategies)

    @property
    def move_count(self) -> int:
        return len(self.moves)

    @property
    def guess_count(self) -> int:
        return self.strategy_counts.get(PROBABILITY_STRATEGY, 0)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "Success": self.success,
            "Moves": [m.to_dict() for m in self.moves],
            "Strategy": self.strategy,
            "SolutionTime": self.solution_time.total_seconds(),
        }

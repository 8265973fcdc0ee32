"""
Solution Module - Result of a search run.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from .board import BoardState
from .move import Move


class SearchOutcome(Enum):
    """
    How a search run ended.

    Only SOLVED means a path was found. Every other outcome is treated as
    unsolvable by callers; BUDGET_EXCEEDED and CANCELLED do not prove that
    no solution exists.
    """
    SOLVED = "solved"
    EXHAUSTED = "exhausted"
    BUDGET_EXCEEDED = "budget_exceeded"
    UNREACHABLE = "unreachable"
    CANCELLED = "cancelled"


@dataclass
class SolutionMetrics:
    """
    Performance metrics for solution computation.

    Attributes:
        computation_time_ms: Time taken in milliseconds
        states_explored: Number of board states expanded
        pruned_branches: Successors dropped as visited or unreachable
        strategy_name: Name of strategy that computed this solution
    """
    computation_time_ms: float = 0.0
    states_explored: int = 0
    pruned_branches: int = 0
    strategy_name: str = ""


@dataclass
class Solution:
    """
    Result of a strategy computation.

    Attributes:
        outcome: How the search ended
        moves: Path from the root to a completed board (empty unless solved)
        metrics: Performance statistics
        board_states: Board after each move (first is the root)
    """
    outcome: SearchOutcome
    moves: List[Move] = field(default_factory=list)
    metrics: SolutionMetrics = field(default_factory=SolutionMetrics)
    board_states: List[BoardState] = field(default_factory=list)

    @property
    def is_solvable(self) -> bool:
        return self.outcome is SearchOutcome.SOLVED

    @property
    def was_cancelled(self) -> bool:
        return self.outcome is SearchOutcome.CANCELLED

    @property
    def move_count(self) -> int:
        """Number of moves in solution."""
        return len(self.moves)

    @property
    def first_move(self) -> Optional[Move]:
        return self.moves[0] if self.moves else None

    @property
    def final_board(self) -> Optional[BoardState]:
        return self.board_states[-1] if self.board_states else None

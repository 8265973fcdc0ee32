"""
Base Strategy Module - Abstract base class for search strategies.
"""

import time
from abc import ABC, abstractmethod
from typing import List, Optional

from .board import BoardState
from .context import SolutionContext
from .enumerator import MoveEnumerator
from .heuristic import Heuristic
from .move import Move
from .solution import SearchOutcome, Solution, SolutionMetrics


class SolverStrategy(ABC):
    """
    Abstract base class for all search strategies.

    Subclasses must implement the solve() method and define
    name and description class attributes.

    Attributes:
        name: Short identifier for the strategy
        description: Human-readable description
        timeout_sec: Default timeout for this strategy
    """
    name: str = "base"
    description: str = "Base strategy"
    timeout_sec: float = 60.0

    def __init__(self, heuristic: Optional[Heuristic] = None,
                 enumerator: Optional[MoveEnumerator] = None):
        """
        Initialize strategy.

        Args:
            heuristic: Board scorer (default weights if omitted)
            enumerator: Move generator
        """
        self.heuristic = heuristic or Heuristic()
        self.enumerator = enumerator or MoveEnumerator()

    @abstractmethod
    def solve(self, context: SolutionContext) -> Solution:
        """
        Search for a move sequence that completes the context's board.

        Must stop within the context's budget and periodically check
        context.is_cancelled().

        Args:
            context: Solution context with board, budget, cancellation

        Returns:
            Solution with outcome, moves and metrics
        """
        pass

    def find_all_valid_moves(self, board: BoardState) -> List[Move]:
        """Every legal pour on the board, partial pours included."""
        return self.enumerator.legal_moves(board)

    def find_search_moves(self, board: BoardState) -> List[Move]:
        """Pruned candidate moves explored during search."""
        return self.enumerator.search_moves(board)

    def _check_cancelled(self, context: SolutionContext) -> bool:
        """
        Convenience method to check cancellation.

        Args:
            context: Solution context

        Returns:
            True if strategy should stop
        """
        return context.is_cancelled()

    def _build_solution(
        self,
        outcome: SearchOutcome,
        root: BoardState,
        path: List[Move],
        states_explored: int,
        pruned_branches: int,
        start_time: float
    ) -> Solution:
        """Build Solution object from computation results."""
        elapsed_ms = (time.perf_counter() - start_time) * 1000

        board_states = [root]
        if outcome is SearchOutcome.SOLVED:
            board = root
            for move in path:
                board = board.apply_move(move)
                board_states.append(board)
        else:
            path = []

        return Solution(
            outcome=outcome,
            moves=list(path),
            board_states=board_states,
            metrics=SolutionMetrics(
                computation_time_ms=elapsed_ms,
                states_explored=states_explored,
                pruned_branches=pruned_branches,
                strategy_name=self.name
            )
        )

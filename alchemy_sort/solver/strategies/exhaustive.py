"""
Exhaustive Strategy - Breadth-first search over every legal pour.

No pruning and no heuristic: every move BoardState.can_pour accepts is
explored, partial pours included. Slow, but finds the shortest path within
the budget. Used to cross-check the pruned A* search on small boards.
"""

import logging
import time
from collections import deque
from typing import Deque, Set, Tuple

from ..base import SolverStrategy
from ..board import BoardState
from ..context import SolutionContext
from ..factory import register_strategy
from ..move import Move
from ..solution import SearchOutcome, Solution

logger = logging.getLogger(__name__)


@register_strategy
class ExhaustiveStrategy(SolverStrategy):
    """Unpruned breadth-first search bounded by the same budget as A*."""
    name = "exhaustive"
    description = "Exhaustive (slow) - Breadth-first over all legal pours"

    CHECK_INTERVAL = 256

    def solve(self, context: SolutionContext) -> Solution:
        start_time = time.perf_counter()
        budget = context.budget
        root = context.board

        queue: Deque[Tuple[BoardState, Tuple[Move, ...]]] = deque([(root, ())])
        visited: Set[BoardState] = {root}
        states_explored = 0
        pruned = 0

        while queue:
            if (states_explored % self.CHECK_INTERVAL == 0
                    and self._check_cancelled(context)):
                return self._build_solution(
                    SearchOutcome.CANCELLED, root, [],
                    states_explored, pruned, start_time
                )

            board, path = queue.popleft()
            if board.is_complete():
                return self._build_solution(
                    SearchOutcome.SOLVED, root, list(path),
                    states_explored, pruned, start_time
                )
            if len(path) >= budget.max_depth:
                continue
            if states_explored >= budget.max_states:
                return self._build_solution(
                    SearchOutcome.BUDGET_EXCEEDED, root, [],
                    states_explored, pruned, start_time
                )
            states_explored += 1

            for move in self.find_all_valid_moves(board):
                child = board.apply_move(move)
                if child in visited:
                    pruned += 1
                    continue
                visited.add(child)
                queue.append((child, path + (move,)))

        logger.debug(f"[Exhaustive] Exhausted after {states_explored} states")
        return self._build_solution(
            SearchOutcome.EXHAUSTED, root, [], states_explored, pruned, start_time
        )

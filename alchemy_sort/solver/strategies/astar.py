"""
A* Strategy - Best-first search over board states.

Expands the open node with the lowest path length + heuristic score, using
the pruned move set and a structural visited set. The search is bounded by
the context's state budget and depth cap, so it may give up on solvable
boards; it never reports a path that does not complete the board.
"""

import heapq
import itertools
import logging
import time
from dataclasses import dataclass, field
from typing import List, Set, Tuple

from ..base import SolverStrategy
from ..board import BoardState
from ..context import SolutionContext
from ..factory import register_strategy
from ..heuristic import UNREACHABLE
from ..move import Move
from ..solution import SearchOutcome, Solution

logger = logging.getLogger(__name__)


@dataclass(order=True)
class SearchNode:
    """
    Entry in the A* open set.

    Ordered by priority, then by insertion sequence so ties pop FIFO.

    Attributes:
        priority: Path length + heuristic estimate
        sequence: Insertion counter (tie breaker)
        board: Board state reached
        path: Moves taken from the root
    """
    priority: float
    sequence: int
    board: BoardState = field(compare=False)
    path: Tuple[Move, ...] = field(compare=False, default=())

    @property
    def depth(self) -> int:
        """Current depth in search tree."""
        return len(self.path)


@register_strategy
class AStarStrategy(SolverStrategy):
    """
    Heuristic best-first search.

    Algorithm:
        1. Score the root; report UNREACHABLE if the heuristic rules it out
        2. Pop the lowest-priority node; stop if its board is complete
        3. Skip nodes at the depth cap
        4. Expand with the pruned move set, dropping visited and
           unreachable successors
        5. Give up once max_states nodes have been expanded
    """
    name = "astar"
    description = "A* (default) - Heuristic best-first search with pruning"

    # Cancellation and progress are checked every N expansions
    CHECK_INTERVAL = 256

    def solve(self, context: SolutionContext) -> Solution:
        """
        Search for a path that completes the board.

        Args:
            context: Solution context with board, budget and cancellation

        Returns:
            Solution with outcome, path and metrics
        """
        start_time = time.perf_counter()
        budget = context.budget
        root = context.board

        root_score = self.heuristic(root)
        if root_score == UNREACHABLE:
            logger.debug("[AStar] Root board is unreachable")
            return self._build_solution(
                SearchOutcome.UNREACHABLE, root, [], 0, 0, start_time
            )

        counter = itertools.count()
        open_set: List[SearchNode] = [
            SearchNode(priority=root_score, sequence=next(counter), board=root)
        ]
        visited: Set[BoardState] = {root}
        states_explored = 0
        pruned = 0

        while open_set:
            if states_explored % self.CHECK_INTERVAL == 0:
                if self._check_cancelled(context):
                    logger.debug(f"[AStar] Cancelled after {states_explored} states")
                    return self._build_solution(
                        SearchOutcome.CANCELLED, root, [],
                        states_explored, pruned, start_time
                    )
                context.report_progress(
                    min(0.99, states_explored / budget.max_states),
                    f"{states_explored} states, {len(open_set)} open"
                )

            node = heapq.heappop(open_set)

            if node.board.is_complete():
                logger.debug(
                    f"[AStar] Solved in {node.depth} moves, "
                    f"{states_explored} states explored"
                )
                return self._build_solution(
                    SearchOutcome.SOLVED, root, list(node.path),
                    states_explored, pruned, start_time
                )

            if node.depth >= budget.max_depth:
                continue

            if states_explored >= budget.max_states:
                logger.debug(
                    f"[AStar] State budget of {budget.max_states} exceeded"
                )
                return self._build_solution(
                    SearchOutcome.BUDGET_EXCEEDED, root, [],
                    states_explored, pruned, start_time
                )
            states_explored += 1

            for move in self.find_search_moves(node.board):
                child = node.board.apply_move(move)
                if child in visited:
                    pruned += 1
                    continue
                visited.add(child)

                score = self.heuristic(child)
                if score == UNREACHABLE:
                    pruned += 1
                    continue

                path = node.path + (move,)
                heapq.heappush(open_set, SearchNode(
                    priority=len(path) + score,
                    sequence=next(counter),
                    board=child,
                    path=path,
                ))

        logger.debug(f"[AStar] Open set exhausted after {states_explored} states")
        return self._build_solution(
            SearchOutcome.EXHAUSTED, root, [], states_explored, pruned, start_time
        )

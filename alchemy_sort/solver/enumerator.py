"""
Move Enumerator Module - Legal and search-pruned move generation.

Two move sets are produced from a board:

    legal_moves():  every pour a player may make (BoardState.can_pour)
    search_moves(): the pruned subset explored by search strategies

Pruning rules for search_moves():
    - never pour out of a completed container
    - never pour a container's entire contents into an empty container
      (the result is the same board with two containers swapped)
    - pour into the first empty container only; empties are interchangeable
    - pour onto a matching color only when the whole run fits
"""

from typing import List, Optional

from .board import BoardState
from .move import Move


class MoveEnumerator:
    """Generates candidate moves for a board state."""

    def legal_moves(self, board: BoardState) -> List[Move]:
        """
        Find every legal pour, including partial ones.

        Args:
            board: Current board state

        Returns:
            List of legal Move objects
        """
        count = len(board)
        return [
            Move(source, target)
            for source in range(count)
            for target in range(count)
            if board.can_pour(source, target)
        ]

    def search_moves(self, board: BoardState) -> List[Move]:
        """
        Find the pruned move set used by search.

        Args:
            board: Current board state

        Returns:
            List of Move objects, pours onto matching colors first
        """
        containers = board.containers
        joins: List[Move] = []
        to_empty: List[Move] = []

        for source, src in enumerate(containers):
            if src.is_empty or src.is_complete:
                continue
            run = src.run_length()
            color = src.top_color
            empty_target: Optional[int] = None

            for target, dst in enumerate(containers):
                if target == source or dst.kind != src.kind:
                    continue
                if dst.is_empty:
                    if empty_target is None:
                        empty_target = target
                    continue
                if dst.top_color == color and run <= dst.free_space:
                    joins.append(Move(source, target))

            if empty_target is not None and run < len(src):
                to_empty.append(Move(source, empty_target))

        return joins + to_empty

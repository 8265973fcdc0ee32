"""
Heuristic Module - Estimates how far a board is from sorted.

Lower scores are closer to solved. A board proven unsolvable by local
reasoning scores UNREACHABLE and is dropped from the search.
"""

import math
from collections import Counter
from dataclasses import dataclass, fields
from typing import Any, Dict, Mapping, Union

from .board import BoardState, Container
from .unit import Color

UNREACHABLE = math.inf

Score = Union[int, float]


@dataclass(frozen=True)
class HeuristicWeights:
    """
    Tunable penalty weights.

    The ordering mixed_container > buried_match > exposed_match must hold so
    that mixed containers cost more than pure incomplete ones and buried
    matches cost more than reachable ones.

    Attributes:
        mixed_container: Flat penalty for a container holding 2+ colors
        misplaced_unit: Per unit not matching the container's majority color
        large_majority: Extra penalty when the majority color forms a contiguous
            run one unit short of capacity
        exposed_match: Pure container whose color sits on top elsewhere
        buried_match: Pure container whose color is only buried elsewhere
        no_completion: Last move did not complete a container
        broken_run: Last move split a same-color run
    """
    mixed_container: int = 10
    misplaced_unit: int = 3
    large_majority: int = 4
    exposed_match: int = 1
    buried_match: int = 3
    no_completion: int = 1
    broken_run: int = 2

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "HeuristicWeights":
        """Build weights from a settings mapping, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        return cls(**{k: int(v) for k, v in data.items() if k in known})

    def to_dict(self) -> Dict[str, int]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


class Heuristic:
    """Scores board states for best-first search."""

    def __init__(self, weights: HeuristicWeights = HeuristicWeights()):
        self.weights = weights

    def __call__(self, board: BoardState) -> Score:
        return self.score(board)

    def score(self, board: BoardState) -> Score:
        """
        Estimate remaining difficulty.

        Args:
            board: Board state to score

        Returns:
            Non-negative integer, or UNREACHABLE
        """
        w = self.weights
        containers = board.containers
        total = 0

        for index, container in enumerate(containers):
            if container.is_empty:
                continue
            counts = Counter(container.colors())

            if len(counts) > 1:
                color, majority = counts.most_common(1)[0]
                total += w.mixed_container
                total += w.misplaced_unit * (len(container) - majority)
                if _longest_run(container, color) >= container.capacity - 1:
                    total += w.large_majority
                continue

            if container.is_full:
                continue

            penalty = self._match_penalty(index, container, board)
            if penalty == UNREACHABLE:
                return UNREACHABLE
            total += penalty

        total += self._last_move_penalty(board)
        return total

    def _match_penalty(self, index: int, container: Container,
                       board: BoardState) -> Score:
        """Penalty for a pure, incomplete container by where its color sits."""
        color = container.top_color
        buried = False
        for other_index, other in enumerate(board.containers):
            if other_index == index or other.is_empty:
                continue
            if other.top_color == color:
                return self.weights.exposed_match
            if color in other.colors():
                buried = True
        if buried:
            return self.weights.buried_match
        # Nothing left to add and nowhere to go
        return UNREACHABLE

    def _last_move_penalty(self, board: BoardState) -> int:
        move = board.last_move
        if move is None:
            return 0
        w = self.weights
        source = board.containers[move.source]
        target = board.containers[move.target]
        penalty = 0
        if not target.is_complete:
            penalty += w.no_completion
        if not source.is_empty and source.top_color == target.top_color:
            penalty += w.broken_run
        return penalty


def _longest_run(container: Container, color: Color) -> int:
    """Longest contiguous stretch of `color` in a container."""
    best = current = 0
    for unit_color in container.colors():
        current = current + 1 if unit_color == color else 0
        best = max(best, current)
    return best

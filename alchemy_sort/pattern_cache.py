"""
Pattern Cache Module - Validated layouts reused to seed harder levels.

The cache is an explicit object owned by the caller and handed to the
LevelGenerator, so tests can inject an empty or pre-seeded cache. It can be
persisted to JSON to carry patterns across sessions.
"""

import json
import logging
from collections import deque
from pathlib import Path
from typing import Deque, Dict, List, Optional, Union

import numpy as np

from .solver import BoardState, Color
from .solver.board import BoardKey
from .tiers import Difficulty

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


class PatternCache:
    """
    Bounded per-tier store of validated initial layouts.

    Layouts are kept as color tuples (BoardState.key), never as live boards,
    so cached patterns cannot be mutated by a game session.
    """

    DEFAULT_MAX_PER_TIER = 20

    def __init__(self, max_per_tier: int = DEFAULT_MAX_PER_TIER):
        self.max_per_tier = max_per_tier
        self._patterns: Dict[Difficulty, Deque[BoardKey]] = {}

    def store(self, tier: Difficulty, board: BoardState) -> None:
        """
        Add a validated layout; the oldest is dropped when the tier is full.

        Args:
            tier: Tier the layout was generated for
            board: Validated initial board
        """
        bucket = self._patterns.setdefault(tier, deque(maxlen=self.max_per_tier))
        key = board.key
        if key in bucket:
            return
        bucket.append(key)
        logger.debug(f"Cached {tier.value} pattern ({len(bucket)} stored)")

    def patterns(self, tier: Difficulty) -> List[BoardKey]:
        """Stored layouts for a tier, oldest first."""
        return list(self._patterns.get(tier, ()))

    def pick(self, tier: Difficulty, rng: np.random.Generator) -> Optional[BoardKey]:
        """
        Choose a stored layout at random.

        Returns:
            Color layout, or None if the tier has no patterns
        """
        bucket = self._patterns.get(tier)
        if not bucket:
            return None
        return bucket[int(rng.integers(len(bucket)))]

    def clear(self) -> None:
        self._patterns.clear()

    def __len__(self) -> int:
        return sum(len(bucket) for bucket in self._patterns.values())

    def to_dict(self) -> Dict[str, List[List[List[str]]]]:
        return {
            tier.value: [
                [[color.value for color in row] for row in key]
                for key in bucket
            ]
            for tier, bucket in self._patterns.items()
        }

    @classmethod
    def from_dict(cls, data: Dict[str, List[List[List[str]]]],
                  max_per_tier: int = DEFAULT_MAX_PER_TIER) -> "PatternCache":
        """
        Rebuild a cache from its JSON form.

        Raises:
            ValueError: On unknown tier or color names
        """
        cache = cls(max_per_tier)
        for tier_name, layouts in data.items():
            tier = Difficulty.from_name(tier_name)
            for layout in layouts:
                rows = [[Color(name) for name in row] for row in layout]
                cache.store(tier, BoardState.from_colors(rows))
        return cache

    @classmethod
    def load(cls, path: PathLike,
             max_per_tier: int = DEFAULT_MAX_PER_TIER) -> "PatternCache":
        """
        Load a cache from a JSON file.

        Returns:
            Loaded cache. Returns an empty cache if file missing or invalid.
        """
        cache_file = Path(path)
        if not cache_file.exists():
            logger.debug(f"Pattern cache {cache_file} not found, starting empty")
            return cls(max_per_tier)

        try:
            with open(cache_file, 'r', encoding='utf-8') as f:
                data = json.load(f)
            cache = cls.from_dict(data, max_per_tier)
            logger.info(f"Loaded {len(cache)} cached patterns from {cache_file}")
            return cache
        except (json.JSONDecodeError, ValueError, TypeError, AttributeError, IOError) as e:
            logger.warning(f"Failed to load pattern cache: {e}, starting empty")
            return cls(max_per_tier)

    def save(self, path: PathLike) -> None:
        """Write the cache to a JSON file."""
        try:
            with open(Path(path), 'w', encoding='utf-8') as f:
                json.dump(self.to_dict(), f, indent=2)
            logger.debug(f"Saved {len(self)} cached patterns to {path}")
        except IOError as e:
            logger.error(f"Failed to save pattern cache: {e}")

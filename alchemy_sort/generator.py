"""
Level Generator Module - Random initial layouts validated by search.

Generation loop:
    1. Build a candidate layout (random, or seeded from a cached pattern)
    2. Validate it with the configured search strategy
    3. Accept on SOLVED (caching it if the tier is cached), else retry
    4. After max_attempts, return the last candidate unvalidated

The fallback in step 4 means a caller always gets a level.
"""

import logging
import threading
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Union

import numpy as np

from .pattern_cache import PatternCache
from .solver import (
    BoardState,
    Color,
    DEFAULT_CAPACITY,
    Heuristic,
    SearchBudget,
    Solution,
    SolutionContext,
    SolverStrategy,
    create_strategy,
    get_default_strategy_name,
)
from .settings import DEFAULT_SETTINGS, heuristic_weights, search_budgets
from .tiers import DEFAULT_BUDGETS, TUTORIAL_COLORS, Difficulty

logger = logging.getLogger(__name__)

ColorRows = List[List[Color]]


@dataclass
class GeneratedLevel:
    """
    Result of one generate() call.

    Attributes:
        difficulty: Tier the level was built for
        board: Initial board
        validated: True if the search found a solution
        attempts: Candidates built, including the accepted one
        solution: Search result for the returned board
        seeded: True if the board was built from a cached pattern
    """
    difficulty: Difficulty
    board: BoardState
    validated: bool
    attempts: int
    solution: Optional[Solution] = None
    seeded: bool = False


class LevelGenerator:
    """
    Builds solvable initial layouts per difficulty tier.

    Args:
        cache: Pattern cache shared across generators (a new empty one if omitted)
        budgets: Search budget per tier (defaults from tiers.DEFAULT_BUDGETS)
        strategy: Strategy instance or registered name used for validation
        heuristic: Heuristic handed to a strategy created by name
        max_attempts: Candidates tried before falling back
        seed: Seed for the random generator
        cache_tiers: Tiers whose validated layouts are stored in the cache
        seed_tiers: Maps a tier to the cached tier its layouts are seeded from
        seed_swaps: Random unit swaps applied to a seeded layout
        capacity: Units per container
        validation_timeout: Wall-clock limit for one validation
    """

    DEFAULT_MAX_ATTEMPTS = 50

    def __init__(
        self,
        cache: Optional[PatternCache] = None,
        budgets: Optional[Mapping[Difficulty, SearchBudget]] = None,
        strategy: Union[SolverStrategy, str, None] = None,
        heuristic: Optional[Heuristic] = None,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        seed: Optional[int] = None,
        cache_tiers: Iterable[Difficulty] = (Difficulty.MEDIUM,),
        seed_tiers: Optional[Mapping[Difficulty, Difficulty]] = None,
        seed_swaps: int = 4,
        capacity: int = DEFAULT_CAPACITY,
        validation_timeout: Optional[float] = None,
    ):
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.cache = cache if cache is not None else PatternCache()
        self.budgets: Dict[Difficulty, SearchBudget] = dict(DEFAULT_BUDGETS)
        if budgets:
            self.budgets.update(budgets)
        if strategy is None:
            strategy = get_default_strategy_name()
        if isinstance(strategy, str):
            strategy = create_strategy(strategy, heuristic=heuristic)
        self.strategy: SolverStrategy = strategy
        self.max_attempts = max_attempts
        self.rng = np.random.default_rng(seed)
        self.cache_tiers = frozenset(cache_tiers)
        self.seed_tiers: Dict[Difficulty, Difficulty] = (
            dict(seed_tiers) if seed_tiers is not None
            else {Difficulty.HARD: Difficulty.MEDIUM}
        )
        self.seed_swaps = seed_swaps
        self.capacity = capacity
        self.validation_timeout = (
            validation_timeout if validation_timeout is not None
            else self.strategy.timeout_sec
        )

    @classmethod
    def from_settings(cls, settings: Mapping[str, Any],
                      cache: Optional[PatternCache] = None,
                      seed: Optional[int] = None) -> "LevelGenerator":
        """
        Build a generator from a settings dict (see settings.DEFAULT_SETTINGS).

        Args:
            settings: Settings dictionary; missing keys use defaults
            cache: Pattern cache to share (a new empty one if omitted)
            seed: Seed for the random generator

        Returns:
            Configured LevelGenerator
        """
        merged = dict(DEFAULT_SETTINGS)
        merged.update(settings)
        heuristic = Heuristic(heuristic_weights(merged))
        return cls(
            cache=cache,
            budgets=search_budgets(merged),
            strategy=create_strategy(merged["strategy_name"], heuristic=heuristic),
            max_attempts=int(merged["max_attempts"]),
            seed=seed,
            cache_tiers=[Difficulty.from_name(name) for name in merged["cache_tiers"]],
            seed_swaps=int(merged["seed_swaps"]),
        )

    def generate(self, difficulty: Difficulty,
                 cancel_flag: Optional[threading.Event] = None) -> GeneratedLevel:
        """
        Generate an initial board for a tier.

        Args:
            difficulty: Tier to generate
            cancel_flag: Set to abandon generation early

        Returns:
            GeneratedLevel; validated is False only for the fallback layout
        """
        cancel_flag = cancel_flag or threading.Event()
        board: Optional[BoardState] = None
        solution: Optional[Solution] = None
        seeded = False
        attempts = 0

        for attempts in range(1, self.max_attempts + 1):
            if cancel_flag.is_set():
                logger.info(f"Generation of {difficulty.value} level cancelled")
                attempts -= 1
                break

            board = self.seeded_layout(difficulty)
            seeded = board is not None
            if board is None:
                board = self.random_layout(difficulty)

            solution = self.validate(board, difficulty, cancel_flag)
            if solution.is_solvable:
                logger.info(
                    f"Generated {difficulty.value} level in {attempts} attempt(s), "
                    f"{solution.move_count}-move solution, "
                    f"{solution.metrics.states_explored} states explored"
                    + (" (seeded)" if seeded else "")
                )
                if difficulty in self.cache_tiers:
                    self.cache.store(difficulty, board)
                return GeneratedLevel(difficulty, board, True, attempts, solution, seeded)

            logger.debug(
                f"Attempt {attempts} rejected: {solution.outcome.value} after "
                f"{solution.metrics.states_explored} states"
            )

        if board is None:
            board = self.random_layout(difficulty)
            solution = None
            seeded = False
        logger.warning(
            f"No validated {difficulty.value} level after {attempts} attempt(s), "
            f"using last candidate"
        )
        return GeneratedLevel(difficulty, board, False, attempts, solution, seeded)

    def validate(self, board: BoardState, difficulty: Difficulty,
                 cancel_flag: Optional[threading.Event] = None) -> Solution:
        """
        Run the validation search on a candidate board.

        Returns:
            Solution; only SOLVED counts as valid
        """
        context = SolutionContext(
            board=board,
            budget=self.budgets[difficulty],
            timeout_sec=self.validation_timeout,
        )
        if cancel_flag is not None:
            context.cancel_flag = cancel_flag
        return self.strategy.solve(context)

    def pick_colors(self, difficulty: Difficulty) -> List[Color]:
        """Colors for a new level: fixed for tutorial, random otherwise."""
        count = difficulty.config.color_count
        if difficulty is Difficulty.TUTORIAL:
            return list(TUTORIAL_COLORS[:count])
        palette = list(Color)
        chosen = self.rng.choice(len(palette), size=count, replace=False)
        return [palette[int(i)] for i in chosen]

    def random_layout(self, difficulty: Difficulty) -> BoardState:
        """
        Build a fresh random layout for a tier.

        Filled containers come first, empty containers last.
        """
        config = difficulty.config
        colors = self.pick_colors(difficulty)
        rows = self.distribute(colors, config.filled_count)
        rows.extend([] for _ in range(config.empty_count))
        return BoardState.from_colors(rows, capacity=self.capacity)

    def seeded_layout(self, difficulty: Difficulty) -> Optional[BoardState]:
        """
        Build a layout from a cached pattern of an easier tier.

        The pattern's containers are kept, containers for the extra colors
        are filled fresh, then the non-empty containers are permuted and a
        few units are swapped between them.

        Returns:
            Seeded board, or None if no usable pattern is cached
        """
        source_tier = self.seed_tiers.get(difficulty)
        if source_tier is None:
            return None
        pattern = self.cache.pick(source_tier, self.rng)
        if pattern is None:
            return None

        config = difficulty.config
        rows: ColorRows = [list(row) for row in pattern if row]
        used = {color for row in rows for color in row}
        extra = config.color_count - len(used)
        if extra < 0 or len(rows) + extra != config.filled_count:
            logger.debug(
                f"Cached {source_tier.value} pattern does not fit {difficulty.value}"
            )
            return None
        if any(len(row) != self.capacity for row in rows):
            return None

        spare = [color for color in Color if color not in used]
        if extra > len(spare):
            return None
        chosen = self.rng.choice(len(spare), size=extra, replace=False) if extra else []
        rows.extend(self.distribute([spare[int(i)] for i in chosen], extra))

        order = self.rng.permutation(len(rows))
        rows = [rows[int(i)] for i in order]
        self._swap_units(rows, self.seed_swaps)

        rows.extend([] for _ in range(config.empty_count))
        return BoardState.from_colors(rows, capacity=self.capacity)

    def distribute(self, colors: Sequence[Color], container_count: int) -> ColorRows:
        """
        Fill containers one at a time from a shuffled pool of units.

        Each color contributes `capacity` units. A unit is never placed
        where it would make three same-colored units on top of the
        container being filled, unless no other unit remains.

        Args:
            colors: Colors in play
            container_count: Containers to fill

        Returns:
            One list of colors per container, bottom-to-top
        """
        pool = [color for color in colors for _ in range(self.capacity)]
        rows: ColorRows = []
        for _ in range(container_count):
            row: List[Color] = []
            while len(row) < self.capacity and pool:
                candidates = [
                    i for i, color in enumerate(pool)
                    if not (len(row) >= 2 and row[-1] == color and row[-2] == color)
                ]
                if not candidates:
                    candidates = list(range(len(pool)))
                pick = candidates[int(self.rng.integers(len(candidates)))]
                row.append(pool.pop(pick))
            rows.append(row)
        return rows

    def _swap_units(self, rows: ColorRows, swaps: int) -> None:
        if len(rows) < 2:
            return
        for _ in range(swaps):
            a, b = (int(i) for i in self.rng.choice(len(rows), size=2, replace=False))
            i = int(self.rng.integers(len(rows[a])))
            j = int(self.rng.integers(len(rows[b])))
            rows[a][i], rows[b][j] = rows[b][j], rows[a][i]

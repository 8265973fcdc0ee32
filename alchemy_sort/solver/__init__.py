"""
Solver Package - Rules engine and state-space search for the pour sort puzzle.

This package provides the board model, move legality, the heuristic and a
pluggable strategy framework used to validate generated levels and to
produce hints.

Public API:
    - Color, UnitKind, Unit: Colored tokens
    - Container, BoardState: Board model and pour semantics
    - Move: Pour from one container to another
    - MoveEnumerator: Legal and pruned move generation
    - Heuristic, HeuristicWeights, UNREACHABLE: Board scoring
    - SearchBudget, SolutionContext: Search caps and cancellation
    - Solution, SolutionMetrics, SearchOutcome: Search results
    - SolverStrategy: Abstract base for strategies
    - create_strategy(): Build a registered strategy by name
    - get_strategy_names(): List available strategies

Usage:
    from alchemy_sort.solver import BoardState, Color, SolutionContext, create_strategy

    R, G, B = Color.RED, Color.GREEN, Color.BLUE
    board = BoardState.from_colors([[R, G, B, R], [G, B, R, G], [B, R, G, B], []])

    strategy = create_strategy("astar")
    solution = strategy.solve(SolutionContext(board=board))

    if solution.is_solvable:
        for move in solution.moves:
            print(f"Pour {move.source} -> {move.target}")
"""

# Core data structures
from .unit import Color, Unit, UnitKind
from .board import BoardState, Container, ContractViolation, DEFAULT_CAPACITY
from .move import Move
from .enumerator import MoveEnumerator
from .heuristic import Heuristic, HeuristicWeights, UNREACHABLE
from .solution import Solution, SolutionMetrics, SearchOutcome
from .context import SearchBudget, SolutionContext

# Strategy framework
from .base import SolverStrategy
from .factory import (
    create_strategy,
    get_strategy_names,
    get_default_strategy_name,
    register_strategy,
)

# Import strategies to register them
from . import strategies

__all__ = [
    # Data structures
    "Color",
    "Unit",
    "UnitKind",
    "BoardState",
    "Container",
    "ContractViolation",
    "DEFAULT_CAPACITY",
    "Move",
    "MoveEnumerator",
    "Heuristic",
    "HeuristicWeights",
    "UNREACHABLE",
    "Solution",
    "SolutionMetrics",
    "SearchOutcome",
    "SearchBudget",
    "SolutionContext",
    # Strategy framework
    "SolverStrategy",
    "create_strategy",
    "get_strategy_names",
    "get_default_strategy_name",
    "register_strategy",
]

"""
Strategies Package - Concrete strategy implementations.

Import this module to register all built-in strategies.
"""

from .astar import AStarStrategy, SearchNode
from .exhaustive import ExhaustiveStrategy

__all__ = [
    "AStarStrategy",
    "ExhaustiveStrategy",
    "SearchNode",
]

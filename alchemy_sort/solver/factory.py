"""
Strategy Registry - Search strategies looked up by name.

Settings and the CLI name a strategy ("astar", "exhaustive"); the generator
and game sessions build it here with their own heuristic.
"""

from typing import Dict, List, Optional, Type

from .base import SolverStrategy
from .enumerator import MoveEnumerator
from .heuristic import Heuristic


_STRATEGIES: Dict[str, Type[SolverStrategy]] = {}

DEFAULT_STRATEGY = "astar"


def register_strategy(cls: Type[SolverStrategy]) -> Type[SolverStrategy]:
    """
    Class decorator adding a strategy to the registry under cls.name.

    Raises:
        ValueError: If another class already uses the name
    """
    existing = _STRATEGIES.get(cls.name)
    if existing is not None and existing is not cls:
        raise ValueError(
            f"Strategy name {cls.name!r} already registered by {existing.__name__}"
        )
    _STRATEGIES[cls.name] = cls
    return cls


def create_strategy(name: str,
                    heuristic: Optional[Heuristic] = None,
                    enumerator: Optional[MoveEnumerator] = None) -> SolverStrategy:
    """
    Build a registered strategy.

    Args:
        name: Registered strategy name
        heuristic: Board scorer (strategy default if omitted)
        enumerator: Move generator (strategy default if omitted)

    Returns:
        Strategy instance

    Raises:
        ValueError: If no strategy has that name
    """
    if name not in _STRATEGIES:
        available = ", ".join(_STRATEGIES)
        raise ValueError(f"Unknown strategy: {name}. Available: {available}")
    return _STRATEGIES[name](heuristic=heuristic, enumerator=enumerator)


def get_strategy_names() -> List[str]:
    return list(_STRATEGIES)


def get_default_strategy_name() -> str:
    """A* when registered, otherwise the first registered strategy."""
    if DEFAULT_STRATEGY in _STRATEGIES or not _STRATEGIES:
        return DEFAULT_STRATEGY
    return next(iter(_STRATEGIES))

"""
Tiers Module - Difficulty tier layouts and their search budgets.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Mapping, Optional

from .solver import Color, SearchBudget


@dataclass(frozen=True)
class TierConfig:
    """
    Board layout for one difficulty tier.

    Every color contributes exactly one container's worth of units, so
    color_count always equals filled_count.

    Attributes:
        container_count: Total containers on the board
        filled_count: Containers filled at the start
        color_count: Distinct colors in play
    """
    container_count: int
    filled_count: int
    color_count: int

    def __post_init__(self):
        if self.container_count - self.filled_count < 1:
            raise ValueError("A tier needs at least one empty container")
        if self.color_count != self.filled_count:
            raise ValueError(
                f"{self.color_count} colors cannot exactly fill "
                f"{self.filled_count} containers"
            )
        if self.color_count > len(Color):
            raise ValueError(f"Palette only has {len(Color)} colors")

    @property
    def empty_count(self) -> int:
        return self.container_count - self.filled_count


class Difficulty(Enum):
    """Named difficulty tiers, easiest first."""
    TUTORIAL = "tutorial"
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"

    @property
    def config(self) -> TierConfig:
        return TIER_CONFIGS[self]

    @property
    def default_budget(self) -> SearchBudget:
        return DEFAULT_BUDGETS[self]

    @classmethod
    def from_name(cls, name: str) -> "Difficulty":
        """
        Look up a tier by name (case-insensitive).

        Raises:
            ValueError: If the name matches no tier
        """
        try:
            return cls(name.strip().lower())
        except ValueError:
            available = ", ".join(d.value for d in cls)
            raise ValueError(f"Unknown difficulty: {name}. Available: {available}") from None


TIER_CONFIGS: Dict[Difficulty, TierConfig] = {
    Difficulty.TUTORIAL: TierConfig(container_count=4, filled_count=3, color_count=3),
    Difficulty.EASY: TierConfig(container_count=8, filled_count=6, color_count=6),
    Difficulty.MEDIUM: TierConfig(container_count=12, filled_count=10, color_count=10),
    Difficulty.HARD: TierConfig(container_count=15, filled_count=13, color_count=13),
}

DEFAULT_BUDGETS: Dict[Difficulty, SearchBudget] = {
    Difficulty.TUTORIAL: SearchBudget(max_states=2_000, max_depth=20),
    Difficulty.EASY: SearchBudget(max_states=20_000, max_depth=40),
    Difficulty.MEDIUM: SearchBudget(max_states=100_000, max_depth=70),
    Difficulty.HARD: SearchBudget(max_states=500_000, max_depth=100),
}

# Tutorial levels always use the same three colors
TUTORIAL_COLORS = (Color.RED, Color.GREEN, Color.BLUE)


def resolve_budgets(overrides: Optional[Mapping[str, Mapping[str, int]]] = None
                    ) -> Dict[Difficulty, SearchBudget]:
    """
    Merge per-tier budget overrides over the defaults.

    Args:
        overrides: {"tier name": {"max_states": n, "max_depth": d}}

    Returns:
        Budget for every tier
    """
    budgets = dict(DEFAULT_BUDGETS)
    for name, values in (overrides or {}).items():
        tier = Difficulty.from_name(name)
        base = budgets[tier]
        budgets[tier] = SearchBudget(
            max_states=int(values.get("max_states", base.max_states)),
            max_depth=int(values.get("max_depth", base.max_depth)),
        )
    return budgets

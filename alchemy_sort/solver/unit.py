"""
Unit Module - Colored tokens that fill containers.
"""

from dataclasses import dataclass
from enum import Enum


class Color(Enum):
    """Palette of unit colors, in the order levels draw from it."""
    RED = "red"
    BLUE = "blue"
    GREEN = "green"
    YELLOW = "yellow"
    PURPLE = "purple"
    ORANGE = "orange"
    CYAN = "cyan"
    TEAL = "teal"
    GRAY = "gray"
    BROWN = "brown"
    MINT = "mint"
    INDIGO = "indigo"
    PINK = "pink"

    @property
    def short(self) -> str:
        """Two-letter label for text rendering."""
        return self.value[:2].upper()


class UnitKind(Enum):
    """Physical kind of a unit; a container only accepts its own kind."""
    LIQUID = "liquid"
    SOLID = "solid"
    GAS = "gas"


@dataclass(frozen=True)
class Unit:
    """
    Immutable colored token occupying one slot in a container.

    Attributes:
        color: Palette color
        kind: Unit kind (always liquid in current levels)
    """
    color: Color
    kind: UnitKind = UnitKind.LIQUID

"""
Board State Module - Containers and board snapshots for the pour sort puzzle.

Units are stored bottom-to-top, so the last element of a container is its
top unit. Equality and hashing of a BoardState are structural: two boards are
equal when every container holds the same ordered colors at the same index.
"""

from collections import Counter
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence, Tuple

from .move import Move
from .unit import Color, Unit, UnitKind

DEFAULT_CAPACITY = 4

# Structural identity of a board: ordered colors per container
BoardKey = Tuple[Tuple[Color, ...], ...]


class ContractViolation(AssertionError):
    """Raised when a container operation would break a board invariant."""


class Container:
    """
    Capacity-bounded stack of units of a single accepted kind.

    Attributes:
        capacity: Maximum number of units
        kind: Accepted unit kind
        units: Units ordered bottom-to-top
    """

    __slots__ = ("capacity", "kind", "units")

    def __init__(self, capacity: int = DEFAULT_CAPACITY,
                 kind: UnitKind = UnitKind.LIQUID,
                 units: Optional[Iterable[Unit]] = None):
        if capacity < 1:
            raise ContractViolation(f"Container capacity must be positive, got {capacity}")
        self.capacity = capacity
        self.kind = kind
        self.units: List[Unit] = []
        if units is not None:
            self.push_run(list(units))

    @property
    def top(self) -> Optional[Unit]:
        """Top unit, or None if empty."""
        return self.units[-1] if self.units else None

    @property
    def top_color(self) -> Optional[Color]:
        return self.units[-1].color if self.units else None

    @property
    def is_empty(self) -> bool:
        return not self.units

    @property
    def is_full(self) -> bool:
        return len(self.units) >= self.capacity

    @property
    def free_space(self) -> int:
        return self.capacity - len(self.units)

    @property
    def is_complete(self) -> bool:
        """True if full and every unit shares one color."""
        return self.is_full and self.is_monochrome

    @property
    def is_monochrome(self) -> bool:
        """True if non-empty and every unit shares one color."""
        if not self.units:
            return False
        first = self.units[0].color
        return all(unit.color == first for unit in self.units)

    def run_length(self) -> int:
        """
        Count consecutive units at the top sharing the top unit's color.

        Returns:
            Run length (0 for an empty container)
        """
        if not self.units:
            return 0
        color = self.units[-1].color
        count = 0
        for unit in reversed(self.units):
            if unit.color != color:
                break
            count += 1
        return count

    def push(self, unit: Unit) -> None:
        """Append one unit to the top."""
        if self.is_full:
            raise ContractViolation("Push onto a full container")
        if unit.kind != self.kind:
            raise ContractViolation(
                f"Container accepts {self.kind.value}, got {unit.kind.value}"
            )
        self.units.append(unit)

    def push_run(self, units: Sequence[Unit]) -> None:
        """Append units in order (first element lands lowest)."""
        if len(units) > self.free_space:
            raise ContractViolation(
                f"Push of {len(units)} units into {self.free_space} free slots"
            )
        for unit in units:
            self.push(unit)

    def pop_run(self, count: int) -> List[Unit]:
        """
        Remove the top `count` units.

        Args:
            count: Number of units to remove (1..unit count)

        Returns:
            Removed units, bottom-to-top order preserved
        """
        if count < 1 or count > len(self.units):
            raise ContractViolation(
                f"Pop of {count} units from container holding {len(self.units)}"
            )
        removed = self.units[-count:]
        del self.units[-count:]
        return removed

    def colors(self) -> Tuple[Color, ...]:
        """Ordered colors, bottom-to-top."""
        return tuple(unit.color for unit in self.units)

    def copy(self) -> "Container":
        clone = Container.__new__(Container)
        clone.capacity = self.capacity
        clone.kind = self.kind
        clone.units = list(self.units)
        return clone

    def __len__(self) -> int:
        return len(self.units)

    def __repr__(self) -> str:
        labels = ",".join(unit.color.short for unit in self.units)
        return f"Container([{labels}]/{self.capacity})"


@dataclass(eq=False)
class BoardState:
    """
    Snapshot of every container at one point in time.

    Container identity is positional. Search code treats boards as values and
    only uses pour(), which returns a new board. The live game session owns one
    board and mutates it through apply_pour().

    Attributes:
        containers: Ordered containers
        move_count: Number of pours applied since the initial layout
        last_move: Most recent pour, if any
    """
    containers: List[Container]
    move_count: int = 0
    last_move: Optional[Move] = None
    _key: Optional[BoardKey] = field(default=None, repr=False)

    @classmethod
    def from_colors(cls, rows: Sequence[Sequence[Color]],
                    capacity: int = DEFAULT_CAPACITY,
                    kind: UnitKind = UnitKind.LIQUID) -> "BoardState":
        """
        Create a board from per-container color lists.

        Args:
            rows: One sequence of colors per container, bottom-to-top
            capacity: Capacity shared by every container
            kind: Unit kind for every unit and container

        Returns:
            BoardState instance
        """
        containers = [
            Container(capacity, kind, (Unit(color, kind) for color in row))
            for row in rows
        ]
        return cls(containers=containers)

    @property
    def key(self) -> BoardKey:
        """Structural identity used for equality and hashing."""
        if self._key is None:
            self._key = tuple(container.colors() for container in self.containers)
        return self._key

    def to_colors(self) -> BoardKey:
        return self.key

    def copy(self) -> "BoardState":
        return BoardState(
            containers=[container.copy() for container in self.containers],
            move_count=self.move_count,
            last_move=self.last_move,
        )

    def _valid_index(self, index: int) -> bool:
        return 0 <= index < len(self.containers)

    def can_pour(self, source: int, target: int) -> bool:
        """
        Check whether a player may pour from source into target.

        A pour that only partially fits is legal; it moves what fits.

        Returns:
            True if the pour would move at least one unit
        """
        if source == target:
            return False
        if not self._valid_index(source) or not self._valid_index(target):
            return False
        src = self.containers[source]
        dst = self.containers[target]
        if src.is_empty or dst.is_full:
            return False
        if src.top.kind != dst.kind:
            return False
        return dst.is_empty or dst.top_color == src.top_color

    def run_length(self, index: int) -> int:
        return self.containers[index].run_length()

    def pour_count(self, source: int, target: int) -> int:
        """
        Number of units a pour would move.

        Returns:
            min(source run, target free space), or 0 if the pour is illegal
        """
        if not self.can_pour(source, target):
            return 0
        return min(self.containers[source].run_length(),
                   self.containers[target].free_space)

    def apply_pour(self, source: int, target: int) -> int:
        """
        Pour in place.

        Args:
            source: Source container index
            target: Target container index

        Returns:
            Number of units moved (0 if the pour was illegal; board unchanged)
        """
        count = self.pour_count(source, target)
        if count == 0:
            return 0
        units = self.containers[source].pop_run(count)
        self.containers[target].push_run(units)
        self.move_count += 1
        self.last_move = Move(source, target)
        self._key = None
        return count

    def pour(self, source: int, target: int) -> "BoardState":
        """
        Apply a pour to create a new board state.

        Only the two touched containers are copied; the original board is
        unchanged.

        Returns:
            New BoardState, or this board itself if the pour is illegal
        """
        count = self.pour_count(source, target)
        if count == 0:
            return self
        containers = list(self.containers)
        src = containers[source] = containers[source].copy()
        dst = containers[target] = containers[target].copy()
        dst.push_run(src.pop_run(count))
        return BoardState(
            containers=containers,
            move_count=self.move_count + 1,
            last_move=Move(source, target),
        )

    def apply_move(self, move: Move) -> "BoardState":
        return self.pour(move.source, move.target)

    def is_complete(self) -> bool:
        """True if every container is empty or full and monochrome."""
        return all(c.is_empty or c.is_complete for c in self.containers)

    def completed_count(self) -> int:
        return sum(1 for c in self.containers if c.is_complete)

    def unit_count(self) -> int:
        return sum(len(c) for c in self.containers)

    def color_counts(self) -> Counter:
        """Multiset of unit colors across all containers."""
        counts: Counter = Counter()
        for container in self.containers:
            counts.update(container.colors())
        return counts

    def describe(self) -> str:
        """Multi-line text rendering, one container per line."""
        lines = []
        for i, container in enumerate(self.containers):
            labels = " ".join(unit.color.short for unit in container.units)
            pad = " .." * container.free_space
            lines.append(f"{i:2d}: [{labels}{pad}]")
        return "\n".join(lines)

    def __len__(self) -> int:
        return len(self.containers)

    def __hash__(self):
        """Enable using BoardState as dict key or in sets."""
        return hash(self.key)

    def __eq__(self, other):
        """Structural equality; move_count and last_move are ignored."""
        if not isinstance(other, BoardState):
            return False
        return self.key == other.key

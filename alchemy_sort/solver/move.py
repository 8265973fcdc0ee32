"""
Move Module - A pour from one container to another.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class Move:
    """
    Pour from the source container to the target container.

    Containers are referenced by position, so a move stays valid across
    board copies.

    Attributes:
        source: Index of the container poured from
        target: Index of the container poured into
    """
    source: int
    target: int

    def __str__(self) -> str:
        return f"{self.source} -> {self.target}"

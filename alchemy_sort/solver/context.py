"""
Solution Context Module - Shared context for strategy execution.
"""

import threading
import time
from dataclasses import dataclass, field
from typing import Callable, Optional

from .board import BoardState


@dataclass(frozen=True)
class SearchBudget:
    """
    Hard caps bounding one search run.

    Attributes:
        max_states: Maximum number of states expanded before giving up
        max_depth: Paths of this length are not expanded further
    """
    max_states: int = 2_000
    max_depth: int = 20


@dataclass
class SolutionContext:
    """
    Shared context passed to strategies containing board state, search
    budget, cancellation, and progress reporting.

    Attributes:
        board: Board state to solve (never mutated by strategies)
        budget: State-count and depth caps
        cancel_flag: Threading event for cancellation
        timeout_sec: Maximum computation time in seconds
        start_time: When computation started
        progress_callback: Optional callback for progress updates
    """
    board: BoardState
    budget: SearchBudget = field(default_factory=SearchBudget)
    cancel_flag: threading.Event = field(default_factory=threading.Event)
    timeout_sec: float = 60.0
    start_time: float = field(default_factory=time.time)
    progress_callback: Optional[Callable[[float, str], None]] = None

    def is_cancelled(self) -> bool:
        """
        Check if cancellation requested or timeout exceeded.

        Returns:
            True if strategy should stop execution
        """
        if self.cancel_flag.is_set():
            return True
        if time.time() - self.start_time > self.timeout_sec:
            return True
        return False

    def cancel(self) -> None:
        """Request the running strategy to stop."""
        self.cancel_flag.set()

    def report_progress(self, percent: float, message: str = "") -> None:
        """
        Report progress to the caller.

        Args:
            percent: Progress from 0.0 to 1.0
            message: Optional status message
        """
        if self.progress_callback:
            self.progress_callback(percent, message)

    def elapsed_time(self) -> float:
        return time.time() - self.start_time

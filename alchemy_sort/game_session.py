"""
Game Session Module - Live game state machine for one level.

The session owns the live board, the undo history, score and selection,
and reports every change through Qt signals so a presentation layer can
redraw and animate.

State Flow:
    PLAYING --(pour completes every container)--> LEVEL_COMPLETE
       ^                                               |
       |_______________ undo() / reset() ______________|

Each mutating call commits board, score and completion state before any
signal is emitted.
"""

import logging
from dataclasses import dataclass
from enum import Enum, auto
from typing import Any, Dict, List, Optional

from PyQt5.QtCore import QObject, pyqtSignal

from .generator import GeneratedLevel, LevelGenerator
from .solver import (
    BoardState,
    Move,
    SearchBudget,
    SolutionContext,
    SolverStrategy,
    create_strategy,
    get_default_strategy_name,
)
from .solver.board import BoardKey
from .tiers import Difficulty

logger = logging.getLogger(__name__)


__all__ = [
    "SessionState",
    "GameSession",
    "new_session",
]


class SessionState(Enum):
    """
    Session states.

    States:
        PLAYING: Accepting taps and pours
        LEVEL_COMPLETE: Every container is empty or complete
    """
    PLAYING = auto()
    LEVEL_COMPLETE = auto()


@dataclass(frozen=True)
class HistoryEntry:
    """Full snapshot taken before a pour, restored verbatim by undo."""
    board: BoardState
    score: int


class GameSession(QObject):
    """
    Player-facing game state for one level.

    Signals:
        state_changed(): Anything visible changed
        pour_occurred(int, int, int): (source, target, units moved)
        level_completed(): The level was just completed
        score_changed(int): New score
        moves_changed(int): New move count

    Example:
        session = new_session(Difficulty.TUTORIAL)
        session.pour_occurred.connect(view.animate_pour)
        session.tap(0)
        session.tap(3)
    """

    state_changed = pyqtSignal()
    pour_occurred = pyqtSignal(int, int, int)
    level_completed = pyqtSignal()
    score_changed = pyqtSignal(int)
    moves_changed = pyqtSignal(int)

    # Scoring constants
    COMPLETE_CONTAINER_POINTS = 1000
    MOVE_PENALTY = 10

    def __init__(self, initial: BoardState,
                 difficulty: Difficulty = Difficulty.TUTORIAL,
                 validated: bool = True,
                 hint_strategy: Optional[SolverStrategy] = None,
                 hint_budget: Optional[SearchBudget] = None,
                 parent: Optional[QObject] = None):
        """
        Initialize a session.

        Args:
            initial: Initial layout (copied; the caller's board is untouched)
            difficulty: Tier the layout belongs to
            validated: Whether the layout passed solver validation
            hint_strategy: Strategy used by hint() (default strategy if omitted)
            hint_budget: Search budget for hint() (tier default if omitted)
            parent: Optional Qt parent
        """
        super().__init__(parent)
        self._initial = initial.copy()
        self._initial.move_count = 0
        self._initial.last_move = None
        self._difficulty = difficulty
        self._validated = validated
        self._hint_strategy = hint_strategy or create_strategy(get_default_strategy_name())
        self._hint_budget = hint_budget or difficulty.default_budget

        self._board = self._initial.copy()
        self._history: List[HistoryEntry] = []
        self._selected: Optional[int] = None
        self._state = SessionState.PLAYING
        self._score = 0
        self._update_score()
        self._update_completion()

    @classmethod
    def from_level(cls, level: GeneratedLevel, **kwargs: Any) -> "GameSession":
        return cls(level.board, difficulty=level.difficulty,
                   validated=level.validated, **kwargs)

    @property
    def difficulty(self) -> Difficulty:
        return self._difficulty

    @property
    def validated(self) -> bool:
        """True if the initial layout passed solver validation."""
        return self._validated

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def containers(self) -> BoardKey:
        """Ordered colors per container, bottom-to-top."""
        return self._board.to_colors()

    @property
    def board(self) -> BoardState:
        """Copy of the live board."""
        return self._board.copy()

    @property
    def initial_board(self) -> BoardState:
        return self._initial.copy()

    @property
    def score(self) -> int:
        return self._score

    @property
    def moves(self) -> int:
        return self._board.move_count

    @property
    def selected_index(self) -> Optional[int]:
        return self._selected

    @property
    def is_complete(self) -> bool:
        return self._state is SessionState.LEVEL_COMPLETE

    @property
    def can_undo(self) -> bool:
        return bool(self._history)

    def snapshot(self) -> Dict[str, Any]:
        """Query surface in one dict (for views and logging)."""
        return {
            "containers": self.containers,
            "score": self._score,
            "moves": self.moves,
            "selected": self._selected,
            "complete": self.is_complete,
            "can_undo": self.can_undo,
        }

    def tap(self, index: int) -> None:
        """Alias of select_or_pour()."""
        self.select_or_pour(index)

    def select_or_pour(self, index: int) -> None:
        """
        Handle a tap on a container.

        With nothing selected, a non-empty container becomes selected. With a
        container selected, tapping another one pours into it; the selection
        is cleared either way. Taps out of range or after completion are
        ignored.

        Args:
            index: Tapped container index
        """
        if self.is_complete or not 0 <= index < len(self._board):
            return

        if self._selected is None:
            if self._board.containers[index].is_empty:
                return
            self._selected = index
            self.state_changed.emit()
            return

        source = self._selected
        self._selected = None
        if source != index and self.pour(source, index):
            return
        self.state_changed.emit()

    def pour(self, source: int, target: int) -> int:
        """
        Pour from source into target.

        Illegal pours are ignored and leave the session unchanged.

        Returns:
            Number of units moved (0 if ignored)
        """
        if self.is_complete or not self._board.can_pour(source, target):
            return 0

        self._history.append(HistoryEntry(self._board.copy(), self._score))
        count = self._board.apply_pour(source, target)
        self._selected = None
        self._update_score()
        completed = self._update_completion()

        logger.debug(
            f"Pour {source} -> {target}: {count} unit(s), "
            f"moves={self.moves}, score={self._score}"
        )

        self.pour_occurred.emit(source, target, count)
        self.moves_changed.emit(self.moves)
        self.score_changed.emit(self._score)
        if completed:
            logger.info(f"Level complete in {self.moves} moves, score {self._score}")
            self.level_completed.emit()
        self.state_changed.emit()
        return count

    def undo(self) -> bool:
        """
        Restore the snapshot taken before the most recent pour.

        Returns:
            False if there was nothing to undo
        """
        if not self._history:
            return False
        entry = self._history.pop()
        self._board = entry.board
        self._score = entry.score
        self._selected = None
        self._state = SessionState.PLAYING
        self._emit_all()
        return True

    def reset(self) -> None:
        """Restore the initial layout and clear history, score and selection."""
        self._board = self._initial.copy()
        self._history.clear()
        self._selected = None
        self._state = SessionState.PLAYING
        self._update_score()
        self._update_completion()
        self._emit_all()

    def hint(self) -> Optional[Move]:
        """
        Suggest the next pour by searching from the current board.

        Returns:
            First move of a discovered solution, or None
        """
        if self.is_complete:
            return None
        context = SolutionContext(
            board=self._board.copy(),
            budget=self._hint_budget,
            timeout_sec=self._hint_strategy.timeout_sec,
        )
        solution = self._hint_strategy.solve(context)
        if not solution.is_solvable:
            logger.info(f"No hint found: {solution.outcome.value}")
            return None
        return solution.first_move

    def _update_score(self) -> None:
        completed = self._board.completed_count()
        self._score = max(
            0,
            self.COMPLETE_CONTAINER_POINTS * completed - self.MOVE_PENALTY * self.moves
        )

    def _update_completion(self) -> bool:
        """Enter LEVEL_COMPLETE if the board is solved; True on transition."""
        if self._state is SessionState.PLAYING and self._board.is_complete():
            self._state = SessionState.LEVEL_COMPLETE
            return True
        return False

    def _emit_all(self) -> None:
        self.moves_changed.emit(self.moves)
        self.score_changed.emit(self._score)
        self.state_changed.emit()


def new_session(difficulty: Difficulty,
                generator: Optional[LevelGenerator] = None,
                settings: Optional[Dict[str, Any]] = None) -> GameSession:
    """
    Generate a level and open a session on it.

    Args:
        difficulty: Tier to play
        generator: Level generator (built from settings if omitted)
        settings: Settings dict used when building a generator

    Returns:
        Ready GameSession (its layout may be unvalidated after fallback)
    """
    if generator is None:
        generator = LevelGenerator.from_settings(settings or {})
    level = generator.generate(difficulty)
    return GameSession.from_level(
        level,
        hint_strategy=generator.strategy,
        hint_budget=generator.budgets[difficulty],
    )


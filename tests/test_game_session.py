"""
Tests for the GameSession state machine: taps, pours, undo, reset, scoring
and change signals.
"""

import sys
from pathlib import Path

import pytest

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from alchemy_sort.game_session import GameSession, SessionState, new_session
from alchemy_sort.generator import LevelGenerator
from alchemy_sort.solver import BoardState, Color, SearchBudget
from alchemy_sort.tiers import Difficulty

R, G = Color.RED, Color.GREEN

# Solved by pours 0->2, 1->0, 2->1
LAYOUT = [[R, R, R, G], [G, G, G, R], []]


class SignalRecorder:
    """Collects every signal a session emits, in order."""

    def __init__(self, session: GameSession):
        self.events = []
        session.state_changed.connect(lambda: self.events.append(("state",)))
        session.pour_occurred.connect(lambda s, t, n: self.events.append(("pour", s, t, n)))
        session.level_completed.connect(lambda: self.events.append(("complete",)))
        session.score_changed.connect(lambda v: self.events.append(("score", v)))
        session.moves_changed.connect(lambda v: self.events.append(("moves", v)))

    def named(self, name):
        return [e for e in self.events if e[0] == name]


@pytest.fixture
def session():
    return GameSession(BoardState.from_colors(LAYOUT))


def test_initial_state(session):
    assert session.state is SessionState.PLAYING
    assert session.containers == ((R, R, R, G), (G, G, G, R), ())
    assert session.score == 0
    assert session.moves == 0
    assert session.selected_index is None
    assert not session.is_complete
    assert not session.can_undo


def test_tap_selects_then_pours(session):
    recorder = SignalRecorder(session)

    session.tap(0)
    assert session.selected_index == 0
    assert session.moves == 0

    session.tap(2)
    assert session.selected_index is None
    assert session.moves == 1
    assert session.containers == ((R, R, R), (G, G, G, R), (G,))
    assert recorder.named("pour") == [("pour", 0, 2, 1)]
    assert recorder.named("moves") == [("moves", 1)]


def test_tap_empty_container_selects_nothing(session):
    session.tap(2)
    assert session.selected_index is None


def test_tap_same_container_clears_selection(session):
    session.tap(0)
    session.tap(0)
    assert session.selected_index is None
    assert session.moves == 0


def test_illegal_tap_pour_clears_selection_only(session):
    session.tap(0)
    session.tap(1)  # G onto R, and container 1 is full
    assert session.selected_index is None
    assert session.moves == 0
    assert not session.can_undo


def test_out_of_range_taps_are_ignored(session):
    session.tap(17)
    session.tap(-1)
    assert session.selected_index is None
    session.tap(0)
    session.tap(9)
    assert session.selected_index == 0
    assert session.moves == 0


@pytest.mark.parametrize("source,target", [(0, 0), (0, 1), (2, 0), (0, 5), (-1, 2)])
def test_illegal_pour_is_silently_ignored(session, source, target):
    recorder = SignalRecorder(session)
    before = session.containers

    assert session.pour(source, target) == 0
    assert session.containers == before
    assert session.moves == 0
    assert not session.can_undo
    assert recorder.events == []


def test_full_playthrough_scores_and_completes(session):
    recorder = SignalRecorder(session)

    session.pour(0, 2)
    assert session.score == 0  # 0 complete, 1 move: clamped at 0

    session.pour(1, 0)
    assert session.containers[0] == (R, R, R, R)
    assert session.score == 1000 - 20

    session.pour(2, 1)
    assert session.is_complete
    assert session.state is SessionState.LEVEL_COMPLETE
    assert session.score == 2000 - 30
    assert len(recorder.named("complete")) == 1

    # Completed sessions ignore further input
    session.tap(0)
    assert session.selected_index is None
    assert session.pour(0, 2) == 0
    assert session.moves == 3


def test_completed_session_refuses_legal_pours_until_undo(session):
    session.pour(0, 2)
    session.pour(1, 0)
    session.pour(2, 1)
    assert session.is_complete

    board = session.board
    assert board.can_pour(0, 2)
    recorder = SignalRecorder(session)
    assert session.pour(0, 2) == 0
    assert recorder.events == []
    assert session.score == 1970

    session.undo()
    assert session.pour(2, 1) == 1
    assert session.is_complete


def test_signals_follow_committed_state(session):
    seen = []
    session.pour_occurred.connect(
        lambda s, t, n: seen.append((session.moves, session.score, session.is_complete))
    )
    session.pour(0, 2)
    session.pour(1, 0)
    session.pour(2, 1)
    assert seen == [(1, 0, False), (2, 980, False), (3, 1970, True)]


def test_undo_restores_each_snapshot(session):
    initial = session.containers
    session.pour(0, 2)
    session.pour(1, 0)
    session.pour(2, 1)
    assert session.is_complete

    assert session.undo()
    assert session.state is SessionState.PLAYING
    assert session.moves == 2
    assert session.score == 980

    assert session.undo()
    assert session.undo()
    assert session.containers == initial
    assert session.moves == 0
    assert session.score == 0
    assert not session.can_undo
    assert not session.undo()


def test_undo_clears_selection(session):
    session.pour(0, 2)
    session.tap(1)
    assert session.selected_index == 1
    session.undo()
    assert session.selected_index is None


def test_undo_emits_changes(session):
    session.pour(0, 2)
    recorder = SignalRecorder(session)
    session.undo()
    assert ("moves", 0) in recorder.events
    assert ("score", 0) in recorder.events
    assert recorder.named("state")


def test_reset_restores_initial_layout(session):
    session.pour(0, 2)
    session.pour(1, 0)
    session.tap(0)

    session.reset()
    assert session.containers == ((R, R, R, G), (G, G, G, R), ())
    assert session.moves == 0
    assert session.score == 0
    assert session.selected_index is None
    assert not session.can_undo
    assert session.state is SessionState.PLAYING


def test_session_board_is_isolated_from_caller():
    board = BoardState.from_colors(LAYOUT)
    session = GameSession(board)
    session.pour(0, 2)
    assert board.to_colors() == ((R, R, R, G), (G, G, G, R), ())

    copy = session.board
    copy.apply_pour(1, 0)
    assert session.containers == ((R, R, R), (G, G, G, R), (G,))


def test_hint_leads_to_completion(session):
    for _ in range(10):
        if session.is_complete:
            break
        move = session.hint()
        assert move is not None
        assert session.pour(move.source, move.target) > 0
    assert session.is_complete
    assert session.hint() is None


def test_hint_does_not_mutate_session(session):
    before = session.containers
    session.hint()
    assert session.containers == before
    assert session.moves == 0


def test_new_session_uses_generator():
    generator = LevelGenerator(seed=21, budgets={Difficulty.TUTORIAL: SearchBudget(2_000, 20)})
    session = new_session(Difficulty.TUTORIAL, generator=generator)

    assert session.difficulty is Difficulty.TUTORIAL
    assert len(session.containers) == 4
    assert session.moves == 0
    assert session.state is SessionState.PLAYING


if __name__ == "__main__":
    sys.exit(pytest.main([__file__, "-v"]))

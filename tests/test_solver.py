"""
Test script for solver validation

Covers:
1. A* search on boards with known solutions
2. Outcomes when the budget, depth cap or cancellation stop the search
3. Cross-check of the pruned A* search against unpruned exhaustive search
4. Strategy registry

Usage:
    pytest tests/test_solver.py
"""

import sys
from pathlib import Path

import pytest

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from alchemy_sort.solver import (
    BoardState,
    Color,
    Heuristic,
    HeuristicWeights,
    Move,
    MoveEnumerator,
    SearchBudget,
    SearchOutcome,
    SolutionContext,
    SolverStrategy,
    create_strategy,
    get_default_strategy_name,
    get_strategy_names,
    register_strategy,
)
from alchemy_sort.generator import LevelGenerator
from alchemy_sort.tiers import Difficulty

R, G, B, Y = Color.RED, Color.GREEN, Color.BLUE, Color.YELLOW

# Solvable in 11 pours without any pruned move
THREE_COLORS_TWO_EMPTY = [[R, G, B, R], [G, B, R, G], [B, R, G, B], [], []]

# Tutorial arrangement: three colors, a single empty container
THREE_COLORS_ONE_EMPTY = [[R, G, B, R], [G, B, R, G], [B, R, G, B], []]

KNOWN_SOLVABLE = [
    [[R, R, R, G], [G, G, G, R], []],
    [[R, G, R, G], [G, R, G, R], [], []],
    THREE_COLORS_TWO_EMPTY,
]

LARGE_BUDGET = SearchBudget(max_states=200_000, max_depth=60)


def solve(rows, strategy="astar", budget=LARGE_BUDGET):
    board = BoardState.from_colors(rows)
    context = SolutionContext(board=board, budget=budget)
    return board, create_strategy(strategy).solve(context)


def replay(board, moves):
    for move in moves:
        assert board.can_pour(move.source, move.target), f"illegal move {move}"
        board = board.apply_move(move)
    return board


@pytest.mark.parametrize("rows", KNOWN_SOLVABLE)
def test_astar_solves_known_boards(rows):
    board, solution = solve(rows, budget=SearchBudget(2_000, 20))

    assert solution.outcome is SearchOutcome.SOLVED
    assert solution.is_solvable
    assert 0 < solution.move_count <= 20
    assert replay(board, solution.moves).is_complete()
    assert solution.final_board.is_complete()
    assert len(solution.board_states) == solution.move_count + 1
    assert solution.metrics.strategy_name == "astar"
    assert solution.metrics.states_explored > 0


def test_solver_does_not_mutate_root():
    board = BoardState.from_colors(THREE_COLORS_TWO_EMPTY)
    before = board.to_colors()
    create_strategy("astar").solve(SolutionContext(board=board))
    assert board.to_colors() == before
    assert board.move_count == 0


def test_complete_root_needs_no_moves():
    _, solution = solve([[R] * 4, [G] * 4, []])
    assert solution.is_solvable
    assert solution.moves == []


def test_unreachable_root_is_reported_immediately():
    _, solution = solve([[R, R], [G, G, G, G], []])
    assert solution.outcome is SearchOutcome.UNREACHABLE
    assert not solution.is_solvable
    assert solution.metrics.states_explored == 0


def test_dead_end_exhausts_open_set():
    board = BoardState.from_colors([[R, G], [G, R]], capacity=2)
    solution = create_strategy("astar").solve(SolutionContext(board=board))
    assert solution.outcome is SearchOutcome.EXHAUSTED
    assert solution.moves == []


def test_state_budget_gives_up():
    _, solution = solve(THREE_COLORS_TWO_EMPTY, budget=SearchBudget(max_states=1, max_depth=20))
    assert solution.outcome is SearchOutcome.BUDGET_EXCEEDED
    assert not solution.is_solvable
    assert solution.moves == []


def test_depth_cap_bounds_search():
    _, solution = solve(THREE_COLORS_TWO_EMPTY, budget=SearchBudget(max_states=2_000, max_depth=2))
    assert not solution.is_solvable
    assert solution.outcome is SearchOutcome.EXHAUSTED


def test_cancelled_search_reports_cancelled():
    board = BoardState.from_colors(THREE_COLORS_TWO_EMPTY)
    context = SolutionContext(board=board)
    context.cancel()
    solution = create_strategy("astar").solve(context)
    assert solution.was_cancelled
    assert not solution.is_solvable


def test_progress_callback_is_called():
    updates = []
    board = BoardState.from_colors(THREE_COLORS_TWO_EMPTY)
    context = SolutionContext(
        board=board, progress_callback=lambda pct, msg: updates.append(pct)
    )
    create_strategy("astar").solve(context)
    assert updates
    assert all(0.0 <= pct < 1.0 for pct in updates)


@pytest.mark.parametrize("rows", KNOWN_SOLVABLE)
def test_pruned_search_agrees_with_exhaustive(rows):
    """The pruned A* must not miss solutions the unpruned search finds."""
    _, astar = solve(rows)
    _, exhaustive = solve(rows, strategy="exhaustive")

    assert exhaustive.is_solvable
    assert astar.is_solvable
    # Breadth-first finds a shortest path
    assert exhaustive.move_count <= astar.move_count


CROSS_CHECK_BUDGET = SearchBudget(max_states=300_000, max_depth=80)


def assert_pruning_misses_nothing(board):
    """Unpruned solvable implies pruned solvable; False if the check was skipped."""
    exhaustive = create_strategy("exhaustive").solve(
        SolutionContext(board=board, budget=CROSS_CHECK_BUDGET)
    )
    if exhaustive.outcome in (SearchOutcome.BUDGET_EXCEEDED, SearchOutcome.CANCELLED):
        return False
    astar = create_strategy("astar").solve(
        SolutionContext(board=board, budget=CROSS_CHECK_BUDGET)
    )
    if exhaustive.is_solvable:
        assert astar.is_solvable, f"pruned search missed a solution:\n{board.describe()}"
        assert replay(board, astar.moves).is_complete()
    else:
        assert not astar.is_solvable
    return True


def random_walk_board(generator, colors, empty_count, steps):
    """Mid-game board reached by random legal pours from a fresh layout."""
    rows = generator.distribute(colors, len(colors))
    rows.extend([] for _ in range(empty_count))
    board = BoardState.from_colors(rows)
    moves = MoveEnumerator()
    for _ in range(steps):
        legal = moves.legal_moves(board)
        if not legal:
            break
        board = board.apply_move(legal[int(generator.rng.integers(len(legal)))])
    return board


def test_pruned_search_misses_nothing_on_tutorial_layouts():
    generator = LevelGenerator(seed=11)
    checked = 0
    for _ in range(40):
        board = generator.random_layout(Difficulty.TUTORIAL)
        checked += assert_pruning_misses_nothing(board)
    assert checked > 0


@pytest.mark.parametrize("colors,empty_count", [
    ([R, G, B], 1),
    ([R, G, B], 2),
    ([R, G, B, Y], 1),
    ([R, G, B, Y], 2),
])
def test_pruned_search_misses_nothing_mid_game(colors, empty_count):
    generator = LevelGenerator(seed=len(colors) * 10 + empty_count)
    checked = 0
    for _ in range(8):
        steps = int(generator.rng.integers(1, 12))
        board = random_walk_board(generator, colors, empty_count, steps)
        checked += assert_pruning_misses_nothing(board)
    assert checked > 0


def test_tutorial_scenario_is_solved_within_depth_cap():
    budget = Difficulty.TUTORIAL.default_budget
    board, solution = solve(THREE_COLORS_ONE_EMPTY, budget=budget)

    assert solution.outcome is SearchOutcome.SOLVED
    assert solution.move_count <= budget.max_depth
    assert replay(board, solution.moves).is_complete()
    assert LevelGenerator(seed=0).validate(board, Difficulty.TUTORIAL).is_solvable


def test_tutorial_scenario_hand_solution():
    """Starting 0->3 the board sorts in ten pours."""
    board = BoardState.from_colors(THREE_COLORS_ONE_EMPTY)
    pours = [(0, 3), (2, 0), (1, 2), (1, 3), (0, 1),
             (2, 0), (2, 3), (1, 2), (0, 1), (0, 3)]
    final = replay(board, [Move(s, t) for s, t in pours])
    assert final.is_complete()
    assert final.completed_count() == 3

    _, shortest = solve(THREE_COLORS_ONE_EMPTY, strategy="exhaustive")
    assert shortest.is_solvable
    assert shortest.move_count <= len(pours)


def test_strategy_registry():
    names = get_strategy_names()
    assert "astar" in names
    assert "exhaustive" in names
    assert get_default_strategy_name() == "astar"

    with pytest.raises(ValueError, match="Available"):
        create_strategy("no-such-strategy")


def test_strategy_uses_supplied_heuristic():
    heuristic = Heuristic(HeuristicWeights(mixed_container=50))
    assert create_strategy("astar", heuristic=heuristic).heuristic is heuristic


def test_duplicate_strategy_name_is_rejected():
    class Impostor(SolverStrategy):
        name = "astar"

        def solve(self, context):
            raise NotImplementedError

    with pytest.raises(ValueError, match="already registered"):
        register_strategy(Impostor)
    assert create_strategy("astar").__class__.__name__ == "AStarStrategy"


if __name__ == "__main__":
    sys.exit(pytest.main([__file__, "-v"]))

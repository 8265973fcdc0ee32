"""
Alchemy Sort - Entry Point

Generates a level for a difficulty tier, optionally prints a solver path,
and can run a text-mode game loop on top of GameSession.

Example:
    python main.py --difficulty easy --seed 7 --solve
    python main.py --play
"""

import sys
import logging
import argparse
from typing import List, Optional

from alchemy_sort.game_session import GameSession
from alchemy_sort.generator import GeneratedLevel, LevelGenerator
from alchemy_sort.pattern_cache import PatternCache
from alchemy_sort.settings import load_settings
from alchemy_sort.solver import get_strategy_names
from alchemy_sort.tiers import Difficulty


logger = logging.getLogger(__name__)

PLAY_HELP = "Commands: '<from> <to>' pour, 'u' undo, 'r' reset, 'h' hint, 'q' quit"


def configure_logging(debug: bool) -> None:
    """Log to both console and file."""
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
        handlers=[
            logging.StreamHandler(),  # Console output
            logging.FileHandler("alchemy_sort.log", mode='w', encoding='utf-8')  # File output
        ]
    )


def print_level(level: GeneratedLevel) -> None:
    status = "validated" if level.validated else "UNVALIDATED"
    print(f"{level.difficulty.value} level ({status}, {level.attempts} attempt(s))")
    print(level.board.describe())


def print_solution(level: GeneratedLevel) -> None:
    solution = level.solution
    if solution is None or not solution.is_solvable:
        print("No solution found within the search budget")
        return
    metrics = solution.metrics
    print(f"Solution: {solution.move_count} moves "
          f"({metrics.states_explored} states, {metrics.computation_time_ms:.1f}ms)")
    for i, move in enumerate(solution.moves, start=1):
        print(f"  {i:3d}. {move}")


def play(session: GameSession) -> None:
    """
    Text-mode game loop.

    Args:
        session: Session to play
    """
    session.pour_occurred.connect(
        lambda s, t, n: print(f"Poured {n} unit(s) from {s} to {t}")
    )
    session.level_completed.connect(lambda: print("Level complete!"))

    print(PLAY_HELP)
    while True:
        print()
        print(session.board.describe())
        print(f"Moves: {session.moves}  Score: {session.score}")
        if session.is_complete:
            return
        try:
            line = input("> ").strip().lower()
        except EOFError:
            return

        if line == "q":
            return
        if line == "u":
            if not session.undo():
                print("Nothing to undo")
        elif line == "r":
            session.reset()
        elif line == "h":
            move = session.hint()
            print(f"Hint: {move}" if move else "No hint available")
        else:
            parts = line.split()
            if len(parts) != 2 or not all(p.isdigit() for p in parts):
                print(PLAY_HELP)
                continue
            if not session.pour(int(parts[0]), int(parts[1])):
                print("Cannot pour there")


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Alchemy Sort level generator")
    parser.add_argument(
        "--difficulty",
        choices=[d.value for d in Difficulty],
        default=None,
        help="Difficulty tier (default: from settings)"
    )
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument(
        "--strategy",
        choices=get_strategy_names(),
        default=None,
        help="Validation strategy (default: from settings)"
    )
    parser.add_argument("--solve", action="store_true", help="Print the solver path")
    parser.add_argument("--play", action="store_true", help="Play the level in the terminal")
    parser.add_argument("--config", default=None, help="Settings file (default: config.json)")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    args = parser.parse_args(argv)

    settings = load_settings(args.config)
    if args.strategy:
        settings["strategy_name"] = args.strategy
    configure_logging(args.debug or settings.get("debug_enabled", False))

    difficulty = Difficulty.from_name(args.difficulty or settings["default_difficulty"])
    cache_path = settings.get("pattern_cache_path")
    cache = PatternCache.load(cache_path) if cache_path else PatternCache()

    generator = LevelGenerator.from_settings(settings, cache=cache, seed=args.seed)
    logger.info(
        f"Generating {difficulty.value} level with {generator.strategy.description}"
    )
    level = generator.generate(difficulty)

    if cache_path:
        cache.save(cache_path)

    print_level(level)
    if args.solve:
        print_solution(level)
    if args.play:
        session = GameSession.from_level(
            level,
            hint_strategy=generator.strategy,
            hint_budget=generator.budgets[difficulty],
        )
        play(session)

    return 0


if __name__ == "__main__":
    sys.exit(main())

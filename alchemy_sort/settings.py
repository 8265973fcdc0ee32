"""
Settings Module for Alchemy Sort

Provides persistent storage for engine configuration using JSON.
Settings are stored in config.json in the working directory.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

from .solver import HeuristicWeights, SearchBudget
from .tiers import Difficulty, resolve_budgets

logger = logging.getLogger(__name__)

# Settings file location (working directory)
SETTINGS_FILE = Path("config.json")

# Default settings
DEFAULT_SETTINGS: Dict[str, Any] = {
    "debug_enabled": False,
    "strategy_name": "astar",
    "default_difficulty": "tutorial",
    "max_attempts": 50,
    "pattern_cache_path": "patterns.json",
    "cache_tiers": ["medium"],
    "seed_swaps": 4,
    "heuristic": HeuristicWeights().to_dict(),
    "budgets": {},
}

PathLike = Union[str, Path]


def load_settings(path: Optional[PathLike] = None) -> Dict[str, Any]:
    """
    Load settings from a JSON file.

    Args:
        path: Settings file (defaults to config.json)

    Returns:
        Settings dictionary. Returns defaults if file missing or invalid.
    """
    settings_file = Path(path) if path is not None else SETTINGS_FILE
    if not settings_file.exists():
        logger.debug("Settings file not found, using defaults")
        return _defaults()

    try:
        with open(settings_file, 'r', encoding='utf-8') as f:
            settings = json.load(f)
        if not isinstance(settings, dict):
            raise ValueError("top-level JSON value is not an object")

        # Merge with defaults to handle missing keys
        result = _defaults()
        result.update(settings)
        logger.debug(f"Settings loaded: {result}")
        return result

    except (json.JSONDecodeError, ValueError, IOError) as e:
        logger.warning(f"Failed to load settings: {e}, using defaults")
        return _defaults()


def save_settings(settings: Dict[str, Any], path: Optional[PathLike] = None) -> None:
    """
    Save settings to a JSON file.

    Args:
        settings: Settings dictionary to save
        path: Settings file (defaults to config.json)
    """
    settings_file = Path(path) if path is not None else SETTINGS_FILE
    try:
        with open(settings_file, 'w', encoding='utf-8') as f:
            json.dump(settings, f, indent=2)
        logger.debug(f"Settings saved: {settings}")
    except IOError as e:
        logger.error(f"Failed to save settings: {e}")


def heuristic_weights(settings: Dict[str, Any]) -> HeuristicWeights:
    """Heuristic weights from settings, defaults for missing keys."""
    return HeuristicWeights.from_dict(settings.get("heuristic") or {})


def search_budgets(settings: Dict[str, Any]) -> Dict[Difficulty, SearchBudget]:
    """Per-tier search budgets from settings, defaults for missing tiers."""
    return resolve_budgets(settings.get("budgets") or {})


def _defaults() -> Dict[str, Any]:
    return json.loads(json.dumps(DEFAULT_SETTINGS))

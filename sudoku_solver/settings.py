"""
Settings Module for Sudoku Search

Provides persistent storage for user preferences using JSON, and the
immutable SearchConfig that one run is built from. Settings are stored
in config.json in the working directory.
"""

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, Optional

from .solver import get_default_strategy_name, get_strategy_names

logger = logging.getLogger(__name__)

# Settings file location (working directory)
SETTINGS_FILE = Path("config.json")

# Default settings
DEFAULT_SETTINGS: Dict[str, Any] = {
    "strategy_name": get_default_strategy_name(),
    "duplicate_check": False,
    "prune_dead_ends": False,
}

Prompt = Callable[[str], str]


@dataclass(frozen=True)
class SearchConfig:
    """
    Options for one search run, fixed before the search starts.

    Attributes:
        strategy: Registered strategy name ("depth", "breadth", "best")
        duplicate_suppression: Skip states equal to expanded ones
        input_source: Puzzle file to load
        output_sink: File to save the solution to (None = don't save)
        prune_dead_ends: Drop children that cannot be completed
        image_sink: PNG file to render the solution to (None = don't render)
        interactive: True if any option came from a prompt
    """
    strategy: str
    duplicate_suppression: bool
    input_source: Path
    output_sink: Optional[Path] = None
    prune_dead_ends: bool = False
    image_sink: Optional[Path] = None
    interactive: bool = False


def load_settings(path: Path = SETTINGS_FILE) -> Dict[str, Any]:
    """
    Load settings from a JSON file.

    Args:
        path: Settings file

    Returns:
        Settings dictionary. Returns defaults if file missing or invalid.
    """
    if not path.exists():
        logger.debug("Settings file not found, using defaults")
        return DEFAULT_SETTINGS.copy()

    try:
        with open(path, 'r', encoding='utf-8') as f:
            settings = json.load(f)

        # Merge with defaults to handle missing keys
        result = DEFAULT_SETTINGS.copy()
        result.update(settings)
        logger.debug(f"Settings loaded: {result}")
        return result

    except (json.JSONDecodeError, OSError) as e:
        logger.warning(f"Failed to load settings: {e}, using defaults")
        return DEFAULT_SETTINGS.copy()


def save_settings(settings: Dict[str, Any], path: Path = SETTINGS_FILE) -> None:
    """
    Save settings to a JSON file.

    Args:
        settings: Settings dictionary to save
        path: Settings file
    """
    try:
        with open(path, 'w', encoding='utf-8') as f:
            json.dump(settings, f, indent=2)
        logger.debug(f"Settings saved: {settings}")
    except OSError as e:
        logger.error(f"Failed to save settings: {e}")


def parse_bool_option(value: str) -> bool:
    """Parse the "true"/"false" command-line values."""
    if value == "true":
        return True
    if value == "false":
        return False
    raise ValueError(f"Invalid boolean option: {value}")


def resolve_config(
    loadfile: Optional[str],
    strategy: Optional[str],
    repeatcheck: Optional[bool],
    settings: Dict[str, Any],
    prompt: Optional[Prompt] = None,
    savefile: Optional[str] = None,
    prune_dead_ends: Optional[bool] = None,
    image: Optional[str] = None,
) -> SearchConfig:
    """
    Combine command-line values, prompts and saved settings.

    A missing value is asked for through prompt when one is given,
    otherwise taken from settings. The puzzle file has no saved default.

    Args:
        loadfile: Puzzle file from the command line
        strategy: Strategy name from the command line
        repeatcheck: Duplicate suppression from the command line
        settings: Loaded settings dictionary
        prompt: Callable asking the user for a value (e.g. input)
        savefile: Solution output file from the command line
        prune_dead_ends: Dead-end pruning from the command line
        image: Solution image file from the command line

    Returns:
        Resolved SearchConfig

    Raises:
        ValueError: If no puzzle file is available or a prompted
            strategy is unknown
    """
    interactive = False

    if not loadfile and prompt is not None:
        interactive = True
        loadfile = prompt("Enter the puzzle load file name: ").strip()
    if not loadfile:
        raise ValueError("No puzzle load file given")

    if strategy is None:
        if prompt is not None:
            interactive = True
            strategy = prompt("Enter search strategy (depth, breadth, best): ").strip()
            if strategy not in get_strategy_names():
                raise ValueError("Invalid search strategy")
        else:
            strategy = settings["strategy_name"]
            if strategy not in get_strategy_names():
                logger.warning(f"Saved strategy '{strategy}' not found, using default")
                strategy = get_default_strategy_name()

    if repeatcheck is None:
        if prompt is not None:
            interactive = True
            answer = prompt("Prevent repeating states (y|n)?: ").strip()
            repeatcheck = answer[:1] in ("y", "Y")
        else:
            repeatcheck = bool(settings["duplicate_check"])

    if prune_dead_ends is None:
        prune_dead_ends = bool(settings["prune_dead_ends"])

    config = SearchConfig(
        strategy=strategy,
        duplicate_suppression=repeatcheck,
        input_source=Path(loadfile),
        output_sink=Path(savefile) if savefile else None,
        prune_dead_ends=prune_dead_ends,
        image_sink=Path(image) if image else None,
        interactive=interactive,
    )
    logger.debug(f"Resolved configuration: {config}")
    return config

"""
Sudoku Search - Entry Point

Loads a puzzle file, solves it with the chosen search strategy and
prints the result. Options missing from the command line are asked for
interactively unless --no-prompt is given, in which case the saved
settings in config.json apply.

Example:
    python main.py
    python main.py --loadfile puzzle.txt --strategy best --repeatcheck true
    python main.py --loadfile puzzle.txt --no-prompt --image solution.png
"""

import sys
import logging
import argparse
from typing import Callable, List, Optional

from sudoku_solver.puzzle_io import PuzzleFormatError, load_puzzle, save_puzzle
from sudoku_solver.render import print_grid, render_grid_image
from sudoku_solver.settings import (
    load_settings,
    parse_bool_option,
    resolve_config,
    save_settings,
)
from sudoku_solver.solver import (
    InvalidPuzzleError,
    SearchContext,
    create_strategy,
    get_strategy_info,
    get_strategy_names,
    validate_initial_grid,
)


logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def setup_logging(level: str = "WARNING", log_file: Optional[str] = None):
    """Configure logging - output to console and optionally a file."""
    handlers: List[logging.Handler] = [logging.StreamHandler()]  # Console output
    if log_file:
        handlers.append(logging.FileHandler(log_file, mode='w', encoding='utf-8'))

    logging.basicConfig(
        level=getattr(logging, level),
        format=LOG_FORMAT,
        datefmt="%H:%M:%S",
        handlers=handlers,
    )


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Sudoku Search - constraint propagation with graph search"
    )
    parser.add_argument("--loadfile", help="Puzzle file to solve")
    parser.add_argument("--savefile", help="File to save the solution to")
    parser.add_argument(
        "--strategy",
        choices=get_strategy_names(),
        help="Search strategy (default: saved setting, or depth)"
    )
    parser.add_argument(
        "--repeatcheck",
        type=parse_bool_option,
        metavar="{true,false}",
        help="Prevent expanding repeated states"
    )
    parser.add_argument(
        "--prune-dead-ends",
        action="store_true",
        default=None,
        help="Drop states that can no longer be completed"
    )
    parser.add_argument("--image", help="Render the solution to a PNG file")
    parser.add_argument(
        "--no-prompt",
        action="store_true",
        help="Never ask interactively; use saved settings for missing options"
    )
    parser.add_argument(
        "--save-settings",
        action="store_true",
        help="Remember strategy and checks in config.json"
    )
    parser.add_argument(
        "--list-strategies",
        action="store_true",
        help="List available strategies and exit"
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: WARNING)"
    )
    parser.add_argument("--log-file", help="Also write the log to this file")
    return parser.parse_args(argv)


def ask_yes_no(prompt: Callable[[str], str], question: str) -> bool:
    """Ask a y|n question; anything starting with y or Y is yes."""
    return prompt(question).strip()[:1] in ("y", "Y")


def main(argv: Optional[List[str]] = None, prompt: Callable[[str], str] = input) -> int:
    """
    Run the solver from the command line.

    Args:
        argv: Arguments (defaults to sys.argv[1:])
        prompt: Used for interactive questions

    Returns:
        Exit code: 0 when the run completed, 1 on bad input
    """
    args = parse_args(argv)
    setup_logging(args.log_level, args.log_file)

    if args.list_strategies:
        for info in get_strategy_info():
            print(f"{info['name']}: {info['description']}")
        return 0

    settings = load_settings()
    ask = None if args.no_prompt else prompt

    try:
        config = resolve_config(
            args.loadfile,
            args.strategy,
            args.repeatcheck,
            settings,
            prompt=ask,
            savefile=args.savefile,
            prune_dead_ends=args.prune_dead_ends,
            image=args.image,
        )
    except ValueError as e:
        print(e)
        return 1

    if args.save_settings:
        settings["strategy_name"] = config.strategy
        settings["duplicate_check"] = config.duplicate_suppression
        settings["prune_dead_ends"] = config.prune_dead_ends
        save_settings(settings)

    try:
        puzzle = load_puzzle(config.input_source)
    except PuzzleFormatError as e:
        logger.error(str(e))
        print(e)
        return 1

    print_grid(puzzle, label="Initial puzzle:")

    try:
        validate_initial_grid(puzzle)
    except InvalidPuzzleError as e:
        print(e)
        return 1

    context = SearchContext(
        grid=puzzle.clone(),
        duplicate_suppression=config.duplicate_suppression,
        prune_dead_ends=config.prune_dead_ends,
    )
    solution = create_strategy(config.strategy).solve(context)

    if solution.is_solved:
        print("Found solution!")
        print_grid(solution.grid)
    else:
        print("No solution!")
    print(f"{solution.expansions} states expanded")

    if not solution.is_solved:
        return 0

    savefile = config.output_sink
    if savefile is None and config.interactive:
        if ask_yes_no(prompt, "Save solution to file (y|n)?: "):
            savefile = prompt("Enter file name: ").strip() or None

    if savefile is not None:
        try:
            save_puzzle(solution.grid, savefile)
        except OSError as e:
            logger.error(f"Failed to save solution: {e}")
            print(f"cannot open file {savefile}")
            return 1

    if config.image_sink is not None:
        render_grid_image(solution.grid, config.image_sink, givens=puzzle)
        logger.info(f"Solution image saved: {config.image_sink}")

    return 0


if __name__ == "__main__":
    sys.exit(main())

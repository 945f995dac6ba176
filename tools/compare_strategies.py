#!/usr/bin/env python3
"""
Strategy comparison tool.

Solves one puzzle with every registered strategy, with duplicate
suppression off and on, and prints a table of the search effort.

Usage:
    python compare_strategies.py puzzle.txt [--prune-dead-ends]

Examples:
    python tools/compare_strategies.py puzzles/sample.txt
"""

import sys
import argparse
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from sudoku_solver.puzzle_io import PuzzleFormatError, load_puzzle
from sudoku_solver.solver import (
    InvalidPuzzleError,
    SearchContext,
    create_strategy,
    get_strategy_names,
)


def compare(puzzle_path: str, prune_dead_ends: bool = False) -> list:
    """
    Run every strategy on the puzzle.

    Returns list of (strategy, suppression, Solution) tuples.
    """
    puzzle = load_puzzle(puzzle_path)
    results = []

    for name in get_strategy_names():
        for suppression in (False, True):
            context = SearchContext(
                grid=puzzle.clone(),
                duplicate_suppression=suppression,
                prune_dead_ends=prune_dead_ends,
            )
            solution = create_strategy(name).solve(context)
            results.append((name, suppression, solution))

    return results


def main():
    parser = argparse.ArgumentParser(description="Compare search strategies on one puzzle")
    parser.add_argument("puzzle", help="Puzzle file")
    parser.add_argument("--prune-dead-ends", action="store_true", help="Drop unsolvable states")
    args = parser.parse_args()

    try:
        results = compare(args.puzzle, args.prune_dead_ends)
    except (PuzzleFormatError, InvalidPuzzleError) as e:
        print(f"ERROR: {e}")
        return 1

    print(f"{'strategy':<10}{'repeats':<10}{'solved':<8}{'expanded':>10}{'generated':>11}{'time ms':>10}")
    print("-" * 59)
    for name, suppression, solution in results:
        m = solution.metrics
        print(
            f"{name:<10}{'off' if not suppression else 'on':<10}"
            f"{'yes' if solution.is_solved else 'no':<8}"
            f"{m.expansions:>10}{m.states_generated:>11}{m.computation_time_ms:>10.1f}"
        )

    return 0


if __name__ == "__main__":
    sys.exit(main())

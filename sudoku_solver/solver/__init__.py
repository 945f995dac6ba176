"""
Solver Package - Constraint propagation plus pluggable graph search.

Public API:
    - Grid: 9x9 puzzle state
    - InvalidPuzzleError: Raised for grids breaking the Sudoku rules
    - propagate(): Fill forced cells in place
    - candidate_map(), refine_candidates(), is_dead_end(): Propagation helpers
    - SearchContext: Root grid and search options
    - Solution / SolutionMetrics: Search outcome and statistics
    - SearchStrategy: Abstract base for frontier strategies
    - SearchController: The expansion loop
    - create_strategy(): Factory function
    - get_strategy_names() / get_strategy_info(): Registry queries

Usage:
    from sudoku_solver.solver import Grid, SearchContext, create_strategy

    grid = Grid.from_string(puzzle_text)
    context = SearchContext(grid=grid, duplicate_suppression=True)

    strategy = create_strategy("best")
    solution = strategy.solve(context)

    if solution.is_solved:
        print(solution.grid)
    print(f"{solution.expansions} states expanded")
"""

# Core data structures
from .grid import Grid, InvalidPuzzleError, validate_initial_grid
from .propagation import candidate_map, refine_candidates, propagate, is_dead_end
from .solution import Solution, SolutionMetrics
from .context import SearchContext

# Strategy framework
from .base import SearchStrategy
from .search import SearchController
from .factory import (
    create_strategy,
    get_strategy_names,
    get_strategy_info,
    get_default_strategy_name,
    register_strategy,
)

# Import strategies to register them
from . import strategies

__all__ = [
    # Data structures
    "Grid",
    "InvalidPuzzleError",
    "validate_initial_grid",
    "Solution",
    "SolutionMetrics",
    "SearchContext",
    # Propagation
    "candidate_map",
    "refine_candidates",
    "propagate",
    "is_dead_end",
    # Strategy framework
    "SearchStrategy",
    "SearchController",
    "create_strategy",
    "get_strategy_names",
    "get_strategy_info",
    "get_default_strategy_name",
    "register_strategy",
]

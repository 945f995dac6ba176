"""
Test script for solver validation

Covers:
1. Grid creation, access, equality and validity
2. Candidate computation and propagation
3. Strategy frontier ordering and the registry
4. Full searches on puzzles with known expansion counts

Usage:
    python tests/test_solver.py
"""

import sys
from collections import deque
from pathlib import Path

import numpy as np
import pytest

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from sudoku_solver.solver import (
    Grid,
    InvalidPuzzleError,
    SearchContext,
    SearchController,
    candidate_map,
    create_strategy,
    get_default_strategy_name,
    get_strategy_info,
    get_strategy_names,
    is_dead_end,
    propagate,
    refine_candidates,
    validate_initial_grid,
)
from sudoku_solver.solver.strategies import BreadthFirstStrategy


SAMPLE_PUZZLE = (
    "690304015"
    "000901000"
    "174582936"
    "006807300"
    "050409080"
    "007605200"
    "439756128"
    "000103000"
    "560208093"
)

SAMPLE_SOLUTION = (
    "692374815"
    "385961472"
    "174582936"
    "946827351"
    "253419687"
    "817635249"
    "439756128"
    "728193564"
    "561248793"
)

STRATEGIES = ["depth", "breadth", "best"]


def pattern_grid() -> Grid:
    """A complete valid grid: value(r, c) = (3r + r//3 + c) % 9 + 1."""
    return Grid.from_2d_list(
        [[(3 * r + r // 3 + c) % 9 + 1 for c in range(9)] for r in range(9)]
    )


def expansion_limit(limit: int):
    """Progress callback failing the run once it passes limit expansions."""
    def check(expansions, frontier_size):
        if expansions > limit:
            raise RuntimeError(f"search passed {limit} expansions")
    return check


def solve(grid: Grid, strategy: str, **options):
    context = SearchContext(
        grid=grid,
        progress_callback=expansion_limit(options.pop("limit", 5000)),
        progress_interval=1,
        **options,
    )
    return create_strategy(strategy).solve(context)


def assert_solution_of(solution_grid: Grid, puzzle: Grid):
    assert solution_grid.is_complete()
    assert solution_grid.is_structurally_valid()
    for x, y in [(x, y) for y in range(9) for x in range(9)]:
        if puzzle.get(x, y):
            assert solution_grid.get(x, y) == puzzle.get(x, y)


# ============================================================
# Grid
# ============================================================

def test_grid_creation():
    """Grid from string, 2D list and default constructor."""
    grid = Grid.from_string(SAMPLE_PUZZLE)
    assert grid.get(0, 0) == 6
    assert grid.get(1, 0) == 9
    assert grid.get(0, 2) == 1       # x is the column, y the row
    assert grid.get(2, 0) == 0
    assert grid.filled_count() == 46

    rows = [[None] * 9 for _ in range(9)]
    rows[4][7] = 3
    grid = Grid.from_2d_list(rows)
    assert grid.get(7, 4) == 3
    assert grid.filled_count() == 1

    empty = Grid()
    assert empty.filled_count() == 0
    assert not empty.is_complete()
    assert len(empty.empty_cells()) == 81


def test_grid_rejects_bad_shape():
    with pytest.raises(ValueError):
        Grid(cells=np.zeros((9, 8), dtype=np.int8))
    with pytest.raises(ValueError):
        Grid.from_string("123")


def test_grid_set_and_counts():
    grid = Grid()
    grid.set(4, 2, 7)
    assert grid.get(4, 2) == 7
    assert grid.count_in_row(2, 7) == 1
    assert grid.count_in_column(4, 7) == 1
    assert grid.count_in_box(3, 0, 7) == 1
    assert grid.count_in_box(0, 0, 7) == 0

    grid.set(4, 2, 0)
    assert grid.filled_count() == 0


def test_can_place():
    grid = Grid.from_string(SAMPLE_PUZZLE)
    # (2, 0) is empty; row 0 already has 6 9 3 4 1 5
    assert not grid.can_place(2, 0, 9)
    # 4 sits in column 2 at row 2
    assert not grid.can_place(2, 0, 4)
    assert grid.can_place(2, 0, 2)
    # Occupied cell
    assert not grid.can_place(0, 0, 6)


def test_empty_cells_row_major():
    grid = pattern_grid()
    grid.set(5, 1, 0)
    grid.set(2, 1, 0)
    grid.set(8, 0, 0)
    assert grid.empty_cells() == [(8, 0), (2, 1), (5, 1)]


def test_equality_and_clone():
    """Equality compares cells only; clones are independent."""
    grid = Grid.from_string(SAMPLE_PUZZLE)
    grid.score = 12.0
    copy = grid.clone()

    assert copy == grid
    assert copy.equals(grid)
    assert copy.score == 0.0
    assert copy.key() == grid.key()

    copy.set(2, 0, 2)
    assert copy != grid
    assert grid.get(2, 0) == 0
    assert copy.diff(grid) == [(2, 0)]

    with pytest.raises(TypeError):
        grid.diff("not a grid")


def test_structural_validity():
    assert Grid().is_structurally_valid()
    assert pattern_grid().is_structurally_valid()
    assert Grid.from_string(SAMPLE_PUZZLE).is_structurally_valid()

    row_repeat = Grid()
    row_repeat.set(0, 0, 5)
    row_repeat.set(8, 0, 5)
    assert not row_repeat.is_structurally_valid()

    column_repeat = Grid()
    column_repeat.set(3, 1, 2)
    column_repeat.set(3, 7, 2)
    assert not column_repeat.is_structurally_valid()

    box_repeat = Grid()
    box_repeat.set(6, 6, 9)
    box_repeat.set(8, 8, 9)
    assert not box_repeat.is_structurally_valid()

    with pytest.raises(InvalidPuzzleError):
        validate_initial_grid(box_repeat)


def test_grid_str():
    grid = Grid.from_string(SAMPLE_PUZZLE)
    lines = str(grid).splitlines()
    assert len(lines) == 9
    assert lines[0] == "69.3.4.15"


# ============================================================
# Propagation
# ============================================================

def test_candidate_map_empty_grid():
    maybe = candidate_map(Grid())
    assert maybe.shape == (9, 9, 10)
    assert not maybe[:, :, 0].any()
    assert maybe[:, :, 1:].all()


def test_candidate_map_matches_can_place():
    grid = Grid.from_string(SAMPLE_PUZZLE)
    maybe = candidate_map(grid)

    for y in range(9):
        for x in range(9):
            value = grid.get(x, y)
            if value:
                # A filled cell's only candidate is its value
                assert list(np.flatnonzero(maybe[y, x])) == [value]
            else:
                for digit in range(1, 10):
                    assert bool(maybe[y, x, digit]) == grid.can_place(x, y, digit)


def test_refine_candidates_cross_box():
    """A box that can only take 1 in column 0 removes 1 from column 0 elsewhere in the stack."""
    grid = Grid()
    # Fill columns 1 and 2 of the middle-left box
    for (x, y), digit in zip(
        [(1, 3), (2, 3), (1, 4), (2, 4), (1, 5), (2, 5)], range(2, 8)
    ):
        grid.set(x, y, digit)

    maybe = candidate_map(grid)
    refined = refine_candidates(grid, maybe)

    assert maybe[0, 0, 1]
    assert not refined[0, 0, 1]          # (0, 0)
    assert not refined[8, 0, 1]          # (0, 8)
    assert refined[0, 1, 1]              # (1, 0) keeps 1
    assert refined[3, 0, 1]              # the box's own column 0 keeps 1
    # Refinement never adds candidates
    assert not (refined & ~maybe).any()


def cross_box_allows(maybe, x, y, digit):
    """False if another box of the stack or band can only hold digit on this column or row."""
    bx, by = x // 3 * 3, y // 3 * 3
    for oy in range(0, 9, 3):
        if oy != by and not np.delete(maybe[oy:oy + 3, bx:bx + 3, digit], x - bx, axis=1).any():
            return False
    for ox in range(0, 9, 3):
        if ox != bx and not np.delete(maybe[by:by + 3, ox:ox + 3, digit], y - by, axis=0).any():
            return False
    return True


def refine_cell_by_cell(grid, maybe):
    maybe = maybe.copy()
    for x in range(9):
        for y in range(9):
            if grid.get(x, y):
                continue
            for digit in range(1, 10):
                if maybe[y, x, digit] and not cross_box_allows(maybe, x, y, digit):
                    maybe[y, x, digit] = False
    return maybe


CHAINED_PUZZLE = (
    "000705000"
    "005003048"
    "090200705"
    "000050032"
    "100902000"
    "900400100"
    "800000300"
    "000020801"
    "024001000"
)


def test_refine_candidates_sees_earlier_removals():
    """Column by column, each test reading the map as left by the tests before it."""
    for puzzle in (CHAINED_PUZZLE, SAMPLE_PUZZLE, "0" * 81):
        grid = Grid.from_string(puzzle)
        maybe = candidate_map(grid)
        assert np.array_equal(refine_candidates(grid, maybe), refine_cell_by_cell(grid, maybe))


def test_propagate_chained_cross_box_eliminations():
    grid = Grid.from_string(CHAINED_PUZZLE)
    assert grid.filled_count() == 27

    assert propagate(grid) == 27
    assert grid.filled_count() == 54
    assert grid.get(4, 2) == 4
    assert grid.get(5, 2) == 8
    assert grid.is_structurally_valid()


def test_propagate_fills_single_hole():
    solved = pattern_grid()
    grid = solved.clone()
    grid.set(4, 4, 0)

    assert propagate(grid) == 1
    assert grid == solved


def test_propagate_properties():
    """Idempotent, keeps givens, stays valid."""
    puzzle = Grid.from_string(SAMPLE_PUZZLE)
    grid = puzzle.clone()

    placed = propagate(grid)
    assert placed == grid.filled_count() - puzzle.filled_count()
    assert grid.is_structurally_valid()
    givens_kept = all(
        grid.get(x, y) == puzzle.get(x, y)
        for y in range(9) for x in range(9) if puzzle.get(x, y)
    )
    assert givens_kept

    before = grid.clone()
    assert propagate(grid) == 0
    assert grid == before


def test_propagate_leaves_ambiguous_grid():
    """Swapping all 1s and 2s gives a second solution, so nothing is forced."""
    grid = pattern_grid()
    for y in range(9):
        for x in range(9):
            if grid.get(x, y) in (1, 2):
                grid.set(x, y, 0)

    assert propagate(grid) == 0
    assert grid.filled_count() == 63


def test_propagate_tolerates_contradiction():
    grid = Grid()
    for x in range(8):
        grid.set(x, 0, x + 1)
    grid.set(8, 4, 9)               # (8, 0) has no candidate left

    propagate(grid)
    assert grid.get(8, 0) == 0
    assert grid.is_structurally_valid()


def test_is_dead_end():
    assert not is_dead_end(Grid())
    assert not is_dead_end(Grid.from_string(SAMPLE_PUZZLE))

    # Empty cell with no candidate
    no_candidate = Grid()
    for x in range(8):
        no_candidate.set(x, 0, x + 1)
    no_candidate.set(8, 4, 9)
    assert is_dead_end(no_candidate)

    # Both open cells of row 0 can only take 9
    no_matching = Grid()
    for x in range(7):
        no_matching.set(x, 0, x + 1)
    no_matching.set(7, 3, 8)
    no_matching.set(8, 6, 8)
    assert no_matching.is_structurally_valid()
    assert is_dead_end(no_matching)


# ============================================================
# Strategies
# ============================================================

def frontier_after_pushes(name, scores):
    strategy = create_strategy(name)
    arena = [Grid(score=s) for s in scores]
    frontier = strategy.new_frontier()
    for handle in range(len(arena)):
        strategy.push(frontier, handle, arena)
    return list(frontier)


def test_depth_first_ordering():
    assert frontier_after_pushes("depth", [1, 2, 3]) == [2, 1, 0]


def test_breadth_first_ordering():
    assert frontier_after_pushes("breadth", [1, 2, 3]) == [0, 1, 2]


def test_best_first_ordering():
    """Descending score; equal scores newest first."""
    order = frontier_after_pushes("best", [5.0, 9.0, 5.0, 7.0, 9.0])
    assert order == [4, 1, 3, 2, 0]


def test_frontier_containers():
    assert isinstance(create_strategy("depth").new_frontier(), deque)
    assert isinstance(create_strategy("breadth").new_frontier(), deque)
    assert create_strategy("best").new_frontier() == []


def test_pop_takes_front():
    for name in STRATEGIES:
        strategy = create_strategy(name)
        frontier = strategy.new_frontier()
        frontier.extend([3, 1, 2])
        assert strategy.pop(frontier) == 3
        assert list(frontier) == [1, 2]


def test_strategy_registry():
    assert get_strategy_names() == STRATEGIES
    assert get_default_strategy_name() == "depth"

    info = get_strategy_info()
    assert [i["name"] for i in info] == STRATEGIES
    assert all(i["description"] for i in info)

    with pytest.raises(ValueError, match="Unknown strategy"):
        create_strategy("sideways")


# ============================================================
# Search
# ============================================================

def test_solved_by_propagation():
    """One missing cell: propagation finishes it, no expansion happens."""
    puzzle = pattern_grid()
    puzzle.set(7, 2, 0)

    for name in STRATEGIES:
        solution = solve(puzzle.clone(), name)
        assert solution.is_solved
        assert solution.grid == pattern_grid()
        assert solution.expansions == 0
        assert solution.metrics.strategy_name == name


def test_invalid_puzzle_rejected():
    puzzle = Grid()
    puzzle.set(0, 0, 5)
    puzzle.set(4, 0, 5)

    for name in STRATEGIES:
        with pytest.raises(InvalidPuzzleError, match="Invalid initial state"):
            solve(puzzle.clone(), name)


def test_first_child_completes():
    """With 1s and 2s removed, setting (0, 0) to 1 forces everything else."""
    puzzle = pattern_grid()
    for y in range(9):
        for x in range(9):
            if puzzle.get(x, y) in (1, 2):
                puzzle.set(x, y, 0)

    for name in STRATEGIES:
        for suppression in (False, True):
            solution = solve(puzzle.clone(), name, duplicate_suppression=suppression)
            assert solution.is_solved
            assert solution.expansions == 1
            assert solution.grid == pattern_grid()


def two_empty_rows() -> Grid:
    """Rows 0 and 1 empty: three independent column cycles, 8 completions."""
    puzzle = pattern_grid()
    for y in (0, 1):
        for x in range(9):
            puzzle.set(x, y, 0)
    return puzzle


class RecordingStrategy(BreadthFirstStrategy):
    """Breadth-first, keeping every pushed child."""

    def __init__(self):
        self.pushed = []

    def push(self, frontier, handle, arena):
        self.pushed.append(arena[handle])
        super().push(frontier, handle, arena)


def test_expand_pushes_scored_children():
    """Children in cell then digit order, score = filled * 10 + (9 - parent choices)."""
    parent = two_empty_rows()
    parent.set(0, 8, 0)             # only 9 fits, the other cells keep 2 choices
    strategy = RecordingStrategy()
    controller = SearchController(strategy, SearchContext(grid=parent))

    assert controller._expand(parent) is None

    expected = []
    for x, y in parent.empty_cells():
        digits = [d for d in range(1, 10) if parent.can_place(x, y, d)]
        for digit in digits:
            child = parent.clone()
            child.set(x, y, digit)
            propagate(child)
            expected.append((child, len(digits)))

    assert len(expected) == 37
    assert {choices for _, choices in expected} == {1, 2}
    assert len(strategy.pushed) == len(expected)
    assert parent.filled_count() == 62

    for pushed, (child, choices) in zip(strategy.pushed, expected):
        assert pushed == child
        assert pushed.is_structurally_valid()
        assert pushed.filled_count() > parent.filled_count()
        assert pushed.score == pushed.filled_count() * 10 + (9 - choices)

    # (0, 8) = 9 alone settles nothing else
    assert strategy.pushed[-1].filled_count() == 63
    assert strategy.pushed[-1].score == 63 * 10 + 8
    assert list(controller.frontier) == list(range(len(expected)))


def test_two_empty_rows_depth_and_best():
    puzzle = two_empty_rows()
    for name in ("depth", "best"):
        solution = solve(puzzle.clone(), name)
        assert solution.is_solved
        assert_solution_of(solution.grid, puzzle)
        assert solution.expansions == 3


def test_two_empty_rows_breadth():
    puzzle = two_empty_rows()

    plain = solve(puzzle.clone(), "breadth")
    assert plain.is_solved
    assert_solution_of(plain.grid, puzzle)
    assert plain.expansions == 38
    assert plain.metrics.duplicates_discarded == 0

    suppressed = solve(puzzle.clone(), "breadth", duplicate_suppression=True)
    assert suppressed.is_solved
    assert_solution_of(suppressed.grid, puzzle)
    assert suppressed.expansions == 8
    assert suppressed.metrics.duplicates_discarded > 0


def test_suppression_never_expands_equal_states():
    """The expanded set gains one entry per expansion only with suppression on."""
    suppressed = SearchController(create_strategy("breadth"), SearchContext(
        grid=two_empty_rows(), duplicate_suppression=True,
    ))
    solution = suppressed.run()
    assert len(suppressed.expanded) == solution.expansions

    plain = SearchController(create_strategy("breadth"), SearchContext(grid=two_empty_rows()))
    solution = plain.run()
    assert len(plain.expanded) < solution.expansions


def test_sample_puzzle_all_strategies():
    puzzle = Grid.from_string(SAMPLE_PUZZLE)
    expected = Grid.from_string(SAMPLE_SOLUTION)

    for name in STRATEGIES:
        for suppression in (False, True):
            solution = solve(puzzle.clone(), name, duplicate_suppression=suppression)
            assert solution.is_solved
            assert solution.grid == expected
            assert solution.metrics.computation_time_ms >= 0


def test_empty_grid_depth_first():
    """Depth-first completes an empty grid with prune_dead_ends=True.

    Unpruned depth-first on an empty grid descends into very large dead
    subtrees, so this run is not the plain depth-first configuration.
    """
    solution = solve(Grid(), "depth", prune_dead_ends=True, limit=2000)
    assert solution.is_solved
    assert solution.expansions > 0
    assert solution.grid.is_structurally_valid()
    assert solution.grid.is_complete()


def test_exhausted_frontier():
    """Every child of a root with an unfillable cell is pruned: no solution."""
    puzzle = Grid()
    for x in range(8):
        puzzle.set(x, 0, x + 1)
    puzzle.set(8, 4, 9)

    for name in ("depth", "breadth"):
        solution = solve(puzzle.clone(), name, prune_dead_ends=True)
        assert not solution.is_solved
        assert solution.grid is None
        assert solution.expansions == 1
        assert solution.metrics.states_generated > 0
        assert solution.metrics.dead_ends_pruned == solution.metrics.states_generated


class StopSearch(Exception):
    pass


def test_progress_callback_can_stop_search():
    calls = []

    def stop(expansions, frontier_size):
        calls.append((expansions, frontier_size))
        raise StopSearch

    context = SearchContext(
        grid=two_empty_rows(),
        progress_callback=stop,
        progress_interval=1,
    )
    with pytest.raises(StopSearch):
        create_strategy("breadth").solve(context)
    assert calls == [(1, 36)]


if __name__ == "__main__":
    sys.exit(pytest.main([__file__, "-v"]))

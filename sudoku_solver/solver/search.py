"""
Search Controller Module - Frontier-driven expansion loop.

The controller owns every state of a run in an arena list. The frontier
and the expanded set refer to states by arena index ("handle"), so a
state is never held by two containers. A child found to be a duplicate
or a dead end never enters the arena.
"""

import logging
import time
from typing import TYPE_CHECKING, Dict, List, MutableSequence, Optional

import numpy as np

from .context import SearchContext
from .grid import SIZE, Grid, validate_initial_grid
from .propagation import candidate_map, is_dead_end, propagate
from .solution import Solution, SolutionMetrics

if TYPE_CHECKING:
    from .base import SearchStrategy

logger = logging.getLogger(__name__)


class SearchController:
    """
    Runs one search from a root grid to a solution or an empty frontier.

    Algorithm:
        1. Validate and propagate the root; done if it is complete
        2. Pop a state from the front of the frontier
        3. Record it as expanded and enumerate children: every empty cell
           in row-major order, every legal digit ascending
        4. Propagate each child; stop at the first complete one
        5. Score, filter and push the rest per the strategy
        6. Repeat from 2 until the frontier is empty

    Attributes:
        strategy: Frontier ordering policy
        context: Root grid and options
        arena: Every state kept by the run, indexed by handle
        frontier: Handles awaiting expansion
        expanded: Grid key -> handle for every expanded state
        metrics: Counters for the run
    """

    def __init__(self, strategy: "SearchStrategy", context: SearchContext):
        self.strategy = strategy
        self.context = context
        self.arena: List[Optional[Grid]] = []
        self.frontier: MutableSequence[int] = strategy.new_frontier()
        self.expanded: Dict[bytes, int] = {}
        self.metrics = SolutionMetrics(strategy_name=strategy.name)

    def run(self) -> Solution:
        """
        Search for a complete grid.

        Returns:
            Solution; grid is None if the frontier was exhausted

        Raises:
            InvalidPuzzleError: If the root grid is not structurally valid
        """
        start_time = time.perf_counter()
        root = self.context.grid
        validate_initial_grid(root)

        logger.info(
            f"[Search] Starting {self.strategy.name} search, "
            f"{root.filled_count()} cells given, "
            f"duplicate suppression {'on' if self.context.duplicate_suppression else 'off'}"
        )

        propagate(root)
        if root.is_complete():
            logger.info("[Search] Root solved by propagation")
            return self._finish(root, start_time)

        self.frontier.append(self._adopt(root))

        while self.frontier:
            handle = self.strategy.pop(self.frontier)
            state = self.arena[handle]
            key = state.key()

            if self.context.duplicate_suppression and key in self.expanded:
                self.arena[handle] = None
                self.metrics.duplicates_discarded += 1
                continue

            self.metrics.expansions += 1
            self.expanded[key] = handle

            solved = self._expand(state)
            if solved is not None:
                return self._finish(solved, start_time)

            self.context.report_progress(self.metrics.expansions, len(self.frontier))
            logger.debug(
                f"[Search] Expanded {self.metrics.expansions}: "
                f"{state.filled_count()} filled, frontier {len(self.frontier)}"
            )

        return self._finish(None, start_time)

    def _expand(self, parent: Grid) -> Optional[Grid]:
        """
        Generate, propagate and queue all children of parent.

        Args:
            parent: State being expanded (not modified)

        Returns:
            The first complete child, or None
        """
        maybe = candidate_map(parent)

        for x, y in parent.empty_cells():
            digits = np.flatnonzero(maybe[y, x])
            # Fewer choices in the parent cell earn a higher score
            choices = len(digits)

            for digit in digits:
                child = parent.clone()
                child.set(x, y, int(digit))
                propagate(child)
                self.metrics.states_generated += 1

                if child.is_complete():
                    return child

                child.score = float(child.filled_count() * 10 + (SIZE - choices))

                if self.context.duplicate_suppression and child.key() in self.expanded:
                    self.metrics.duplicates_discarded += 1
                    continue
                if self.context.prune_dead_ends and is_dead_end(child):
                    self.metrics.dead_ends_pruned += 1
                    continue

                self.strategy.push(self.frontier, self._adopt(child), self.arena)

        return None

    def _adopt(self, grid: Grid) -> int:
        """Take ownership of grid and return its handle."""
        self.arena.append(grid)
        return len(self.arena) - 1

    def _finish(self, grid: Optional[Grid], start_time: float) -> Solution:
        """Build Solution object from the run's results."""
        self.metrics.computation_time_ms = (time.perf_counter() - start_time) * 1000

        if grid is not None:
            logger.info(
                f"[Search] Solution found: {self.metrics.expansions} expanded, "
                f"{self.metrics.states_generated} generated, "
                f"{self.metrics.computation_time_ms:.1f}ms"
            )
        else:
            logger.info(
                f"[Search] Frontier exhausted: {self.metrics.expansions} expanded, "
                f"{self.metrics.states_generated} generated"
            )

        return Solution(grid=grid, metrics=self.metrics)

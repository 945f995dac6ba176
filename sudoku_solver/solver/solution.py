"""
Solution Module - Outcome of a search run.
"""

from dataclasses import dataclass, field
from typing import Optional

from .grid import Grid


@dataclass
class SolutionMetrics:
    """
    Performance metrics for a search run.

    Attributes:
        computation_time_ms: Time taken in milliseconds
        expansions: States popped from the frontier and expanded
        states_generated: Child states created and propagated
        duplicates_discarded: States dropped as equal to an expanded state
        dead_ends_pruned: Children dropped by dead-end detection
        strategy_name: Name of strategy that ran the search
    """
    computation_time_ms: float = 0.0
    expansions: int = 0
    states_generated: int = 0
    duplicates_discarded: int = 0
    dead_ends_pruned: int = 0
    strategy_name: str = ""


@dataclass
class Solution:
    """
    Result of a search.

    An exhausted frontier is a normal outcome: grid is None and
    is_solved is False, but the expansion count is still reported.

    Attributes:
        grid: Completed grid, or None if no solution was reached
        metrics: Performance statistics
    """
    grid: Optional[Grid] = None
    metrics: SolutionMetrics = field(default_factory=SolutionMetrics)

    @property
    def is_solved(self) -> bool:
        """True if a complete grid was found."""
        return self.grid is not None

    @property
    def expansions(self) -> int:
        """Number of expanded states."""
        return self.metrics.expansions

"""
Search Context Module - Inputs and options shared with a search run.
"""

from dataclasses import dataclass
from typing import Callable, Optional

from .grid import Grid


@dataclass
class SearchContext:
    """
    Context passed to a strategy's solve() call.

    The search has no timeout of its own. A caller that wants to bound a
    run inspects the expansion count through progress_callback and raises
    from it; the exception propagates out of solve().

    Attributes:
        grid: Root grid (owned by the search once solve() starts)
        duplicate_suppression: Skip states equal to already expanded ones
        prune_dead_ends: Drop children that provably have no completion
        progress_callback: Optional callback(expansions, frontier_size)
        progress_interval: Expansions between progress callbacks
    """
    grid: Grid
    duplicate_suppression: bool = False
    prune_dead_ends: bool = False
    progress_callback: Optional[Callable[[int, int], None]] = None
    progress_interval: int = 100

    def report_progress(self, expansions: int, frontier_size: int) -> None:
        """
        Report progress every progress_interval expansions.

        Args:
            expansions: States expanded so far
            frontier_size: States waiting on the frontier
        """
        if self.progress_callback and expansions % self.progress_interval == 0:
            self.progress_callback(expansions, frontier_size)

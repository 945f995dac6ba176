"""
Best-First Strategy - Frontier kept sorted by descending child score.

Child score is filled_count * 10 + (9 - choices), where choices is the
number of legal digits the parent offered for the cell that was set.
Fuller states come first; among equally full states, the one made in a
more constrained cell wins.
"""

import bisect
from typing import List, MutableSequence

from ..base import SearchStrategy
from ..factory import register_strategy
from ..grid import Grid


@register_strategy
class BestFirstStrategy(SearchStrategy):
    """
    Inserts each child before the first state whose score is not higher.

    The front of the frontier is always a maximum-score state. Among
    equal scores the most recently inserted state is popped first.
    The frontier is a list so the binary search indexes in constant time.
    """
    name = "best"
    description = "Best-first - highest scoring state is expanded first"

    def new_frontier(self) -> List[int]:
        return []

    def push(self, frontier: MutableSequence[int], handle: int, arena: List[Grid]) -> None:
        score = arena[handle].score
        # Frontier is ascending in -score
        index = bisect.bisect_left(frontier, -score, key=lambda h: -arena[h].score)
        frontier.insert(index, handle)

    def pop(self, frontier: MutableSequence[int]) -> int:
        return frontier.pop(0)

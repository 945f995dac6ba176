"""
Breadth-First Strategy - Queue discipline, states expanded in creation order.
"""

from typing import List, MutableSequence

from ..base import SearchStrategy
from ..factory import register_strategy
from ..grid import Grid


@register_strategy
class BreadthFirstStrategy(SearchStrategy):
    """Pushes children at the back of the frontier."""
    name = "breadth"
    description = "Breadth-first - states are expanded in the order they were created"

    def push(self, frontier: MutableSequence[int], handle: int, arena: List[Grid]) -> None:
        frontier.append(handle)

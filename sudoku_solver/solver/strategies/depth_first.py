"""
Depth-First Strategy - Stack discipline, newest children expanded first.
"""

from typing import List, MutableSequence

from ..base import SearchStrategy
from ..factory import register_strategy
from ..grid import Grid


@register_strategy
class DepthFirstStrategy(SearchStrategy):
    """
    Pushes children at the front of the frontier.

    The last child generated by an expansion is the next state popped,
    so the search dives before it looks at older siblings.
    """
    name = "depth"
    description = "Depth-first - newest children are expanded first"

    def push(self, frontier: MutableSequence[int], handle: int, arena: List[Grid]) -> None:
        frontier.appendleft(handle)

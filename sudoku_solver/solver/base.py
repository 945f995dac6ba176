"""
Base Strategy Module - Abstract base class for frontier ordering strategies.
"""

from abc import ABC, abstractmethod
from collections import deque
from typing import List, MutableSequence

from .context import SearchContext
from .grid import Grid
from .solution import Solution


class SearchStrategy(ABC):
    """
    Abstract base class for all search strategies.

    A strategy decides where new children go on the frontier. Every
    strategy pops from the front, so the insertion position alone sets
    the exploration order. Subclasses implement push() and define name
    and description class attributes.

    Attributes:
        name: Short identifier used on the command line and in settings
        description: Human-readable description
    """
    name: str = "base"
    description: str = "Base strategy"

    def new_frontier(self) -> MutableSequence[int]:
        """Empty frontier container; a deque unless the strategy needs indexing."""
        return deque()

    @abstractmethod
    def push(self, frontier: MutableSequence[int], handle: int, arena: List[Grid]) -> None:
        """
        Insert a new state into the frontier.

        Args:
            frontier: Handles of states awaiting expansion
            handle: Arena index of the new state
            arena: All states owned by the search, indexed by handle
        """
        pass

    def pop(self, frontier: MutableSequence[int]) -> int:
        """
        Take the next state to expand from the front of the frontier.

        Args:
            frontier: Non-empty frontier

        Returns:
            Arena handle of the state
        """
        return frontier.popleft()

    def solve(self, context: SearchContext) -> Solution:
        """
        Run a complete search with this strategy.

        Args:
            context: Root grid and search options

        Returns:
            Solution with the completed grid (if any) and metrics

        Raises:
            InvalidPuzzleError: If the root grid breaks the Sudoku rules
        """
        from .search import SearchController

        return SearchController(self, context).run()

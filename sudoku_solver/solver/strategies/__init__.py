"""
Strategies Package - Built-in frontier ordering strategies.

Import this module to register all built-in strategies.
"""

from .depth_first import DepthFirstStrategy
from .breadth_first import BreadthFirstStrategy
from .best_first import BestFirstStrategy

__all__ = [
    "DepthFirstStrategy",
    "BreadthFirstStrategy",
    "BestFirstStrategy",
]

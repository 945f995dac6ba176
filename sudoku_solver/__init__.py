"""
Sudoku Search - Solve 9x9 Sudoku puzzles with propagation and graph search.
"""

__version__ = "0.1.0"

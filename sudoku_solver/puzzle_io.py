"""
Puzzle I/O Module - Load puzzles from and save solutions to text files.

File format: 9 lines, one row per line. The first 9 characters of each
line are the cells; any character other than 1-9 is an empty cell.
Example:

    690304015
    000901000
    174582936
    ...

Solutions are written in the same layout with empty cells as spaces.
"""

import logging
from pathlib import Path
from typing import Iterable, Union

import numpy as np

from .solver.grid import SIZE, Grid

logger = logging.getLogger(__name__)


class PuzzleFormatError(ValueError):
    """Raised when a puzzle file cannot be read or has too few rows."""


def parse_puzzle(lines: Iterable[str]) -> Grid:
    """
    Build a Grid from puzzle text lines.

    Short lines are padded with empty cells; characters past the ninth
    are ignored, as are lines after the ninth.

    Args:
        lines: Text lines of the puzzle

    Returns:
        Grid with 0 for every empty cell

    Raises:
        PuzzleFormatError: If fewer than 9 lines are available
    """
    rows = []
    for line in lines:
        if len(rows) == SIZE:
            break
        line = line.rstrip("\r\n")
        rows.append([int(ch) if "1" <= ch <= "9" else 0 for ch in line[:SIZE].ljust(SIZE)])

    if len(rows) < SIZE:
        raise PuzzleFormatError(f"Expected {SIZE} rows, found {len(rows)}")
    return Grid(cells=np.array(rows, dtype=np.int8))


def load_puzzle(path: Union[str, Path]) -> Grid:
    """
    Load a puzzle file.

    Args:
        path: Puzzle file path

    Returns:
        Grid read from the file

    Raises:
        PuzzleFormatError: If the file cannot be opened or is too short
    """
    path = Path(path)
    try:
        with open(path, 'r', encoding='utf-8') as f:
            grid = parse_puzzle(f)
    except OSError as e:
        raise PuzzleFormatError(f"cannot open file {path}: {e}") from e
    except PuzzleFormatError as e:
        raise PuzzleFormatError(f"Error loading file {path}: {e}") from e

    logger.debug(f"Loaded puzzle from {path}: {grid.filled_count()} cells given")
    return grid


def format_puzzle(grid: Grid) -> str:
    """
    Render a grid in the save file layout.

    Returns:
        9 newline-terminated lines, empty cells as spaces
    """
    return "".join(
        "".join(str(v) if v else " " for v in row) + "\n" for row in grid.to_list()
    )


def save_puzzle(grid: Grid, path: Union[str, Path]) -> None:
    """
    Write a grid to a file in the save layout.

    Args:
        grid: Grid to write
        path: Output file path

    Raises:
        OSError: If the file cannot be written
    """
    path = Path(path)
    with open(path, 'w', encoding='utf-8') as f:
        f.write(format_puzzle(grid))
    logger.info(f"Saved grid to {path}")

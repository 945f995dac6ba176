"""
Grid Module - Mutable 9x9 Sudoku state used by the search engine.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

import numpy as np


SIZE = 9
BOX = 3
CELL_COUNT = SIZE * SIZE


class InvalidPuzzleError(ValueError):
    """Raised when an initial grid breaks the row/column/box rules."""


def box_center(x: int, y: int) -> Tuple[int, int]:
    """Center cell of the box containing (x, y)."""
    return (x // BOX) * BOX + 1, (y // BOX) * BOX + 1


@dataclass(eq=False)
class Grid:
    """
    Sudoku grid state.

    Cells are stored in a 9x9 numpy array indexed [y, x]; 0 means empty.
    Coordinates passed to the public methods are (x, y), i.e. column
    first, matching the puzzle file layout.

    Attributes:
        cells: 9x9 int8 array of digits 0-9
        score: Heuristic value assigned when the state is created as a
               child during search (0.0 for the root)
    """
    cells: np.ndarray = field(default_factory=lambda: np.zeros((SIZE, SIZE), dtype=np.int8))
    score: float = 0.0

    def __post_init__(self):
        cells = np.asarray(self.cells, dtype=np.int8)
        if cells.shape != (SIZE, SIZE):
            raise ValueError(f"Grid must be {SIZE}x{SIZE}, got shape {cells.shape}")
        self.cells = cells.copy()

    @classmethod
    def from_2d_list(cls, rows: Sequence[Sequence[Optional[int]]]) -> 'Grid':
        """
        Create Grid from a row-major 2D list.

        None entries are treated as empty cells.

        Args:
            rows: 9 rows of 9 values each

        Returns:
            Grid instance
        """
        values = [[0 if v is None else v for v in row] for row in rows]
        return cls(cells=np.array(values, dtype=np.int8))

    @classmethod
    def from_string(cls, text: str) -> 'Grid':
        """
        Create Grid from an 81-character string read row by row.

        Any character other than 1-9 is an empty cell.
        """
        text = "".join(text.split())
        if len(text) != CELL_COUNT:
            raise ValueError(f"Expected {CELL_COUNT} cells, got {len(text)}")
        values = [int(ch) if "1" <= ch <= "9" else 0 for ch in text]
        return cls(cells=np.array(values, dtype=np.int8).reshape(SIZE, SIZE))

    def get(self, x: int, y: int) -> int:
        """Digit at (x, y), 0 for an empty cell."""
        return int(self.cells[y, x])

    def set(self, x: int, y: int, digit: int) -> None:
        """Write digit at (x, y); 0 clears the cell."""
        self.cells[y, x] = digit

    def filled_count(self) -> int:
        """Number of non-empty cells (0-81)."""
        return int(np.count_nonzero(self.cells))

    def is_complete(self) -> bool:
        return self.filled_count() == CELL_COUNT

    def empty_cells(self) -> List[Tuple[int, int]]:
        """
        Empty cell positions in row-major order.

        Returns:
            List of (x, y) tuples, y outer and x inner
        """
        ys, xs = np.nonzero(self.cells == 0)
        return [(int(x), int(y)) for y, x in zip(ys, xs)]

    def count_in_row(self, y: int, digit: int) -> int:
        return int(np.count_nonzero(self.cells[y, :] == digit))

    def count_in_column(self, x: int, digit: int) -> int:
        return int(np.count_nonzero(self.cells[:, x] == digit))

    def count_in_box(self, x: int, y: int, digit: int) -> int:
        """Occurrences of digit in the 3x3 box containing (x, y)."""
        cx, cy = box_center(x, y)
        block = self.cells[cy - 1:cy + 2, cx - 1:cx + 2]
        return int(np.count_nonzero(block == digit))

    def can_place(self, x: int, y: int, digit: int) -> bool:
        """
        Check whether digit may be written at (x, y).

        Args:
            x: Column index
            y: Row index
            digit: Digit 1-9

        Returns:
            True if the cell is empty and digit is absent from its
            row, column and box
        """
        if self.cells[y, x] != 0:
            return False
        if self.count_in_row(y, digit) > 0:
            return False
        if self.count_in_column(x, digit) > 0:
            return False
        return self.count_in_box(x, y, digit) == 0

    def is_structurally_valid(self) -> bool:
        """
        Check value ranges and the at-most-once rule for every unit.

        Returns:
            True if every cell is 0-9 and no digit repeats within a
            row, column or box
        """
        if self.cells.min() < 0 or self.cells.max() > SIZE:
            return False
        for i in range(SIZE):
            if _has_repeat(self.cells[i, :]) or _has_repeat(self.cells[:, i]):
                return False
        for by in range(0, SIZE, BOX):
            for bx in range(0, SIZE, BOX):
                if _has_repeat(self.cells[by:by + BOX, bx:bx + BOX].ravel()):
                    return False
        return True

    def equals(self, other: 'Grid') -> bool:
        """Cell-by-cell equality; score is ignored."""
        return bool(np.array_equal(self.cells, other.cells))

    def clone(self) -> 'Grid':
        """Deep copy with score reset to 0."""
        return Grid(cells=self.cells)

    def key(self) -> bytes:
        """Hashable snapshot of the cells for duplicate lookups."""
        return self.cells.tobytes()

    def diff(self, other: 'Grid') -> List[Tuple[int, int]]:
        """
        Find cells that differ between this grid and another.

        Args:
            other: Grid to compare against

        Returns:
            List of (x, y) positions where the digits differ
        """
        if not isinstance(other, Grid):
            raise TypeError("Can only diff against another Grid")
        ys, xs = np.nonzero(self.cells != other.cells)
        return [(int(x), int(y)) for y, x in zip(ys, xs)]

    def to_list(self) -> List[List[int]]:
        """Row-major 2D list copy of the cells."""
        return self.cells.astype(int).tolist()

    def __eq__(self, other):
        if not isinstance(other, Grid):
            return NotImplemented
        return self.equals(other)

    __hash__ = None

    def __str__(self) -> str:
        return "\n".join(
            "".join(str(v) if v else "." for v in row) for row in self.to_list()
        )


def _has_repeat(unit: np.ndarray) -> bool:
    counts = np.bincount(unit.astype(np.int64), minlength=SIZE + 1)
    return bool((counts[1:] > 1).any())


def validate_initial_grid(grid: Grid) -> None:
    """
    Reject an initial grid that already breaks the Sudoku rules.

    Raises:
        InvalidPuzzleError: If the grid is not structurally valid
    """
    if not grid.is_structurally_valid():
        raise InvalidPuzzleError("Invalid initial state")

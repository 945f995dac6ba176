"""
Propagation Module - Fixed-point deduction of forced cell values.

Each pass rebuilds a candidate map for the grid, prunes it with the
cross-box rule and writes every cell that is left with a single
candidate. Passes repeat until nothing changes.

The candidate map is a (9, 9, 10) boolean array indexed [y, x, digit];
index 0 of the digit axis is always False. It is created fresh for each
pass and never shared between calls.
"""

from typing import List, Optional, Tuple

import numpy as np

from .grid import BOX, CELL_COUNT, SIZE, Grid


_DIGIT_AXIS = np.arange(SIZE + 1)
_BOX_OF = np.arange(SIZE) // BOX      # box row/column of a row/column index
_INNER = np.arange(SIZE) % BOX        # offset inside the box
_DIGIT_BITS = np.arange(SIZE, dtype=np.int64)
# Position of cell [y, x] in the refinement visit order (x outer, y inner)
_VISIT_ORDER = (np.arange(SIZE)[None, :] * SIZE + np.arange(SIZE)[:, None])[:, :, None]

# Rows, columns and boxes as lists of (y, x)
UNITS: List[List[Tuple[int, int]]] = (
    [[(y, x) for x in range(SIZE)] for y in range(SIZE)]
    + [[(y, x) for y in range(SIZE)] for x in range(SIZE)]
    + [
        [(by + iy, bx + ix) for iy in range(BOX) for ix in range(BOX)]
        for by in range(0, SIZE, BOX)
        for bx in range(0, SIZE, BOX)
    ]
)


def candidate_map(grid: Grid) -> np.ndarray:
    """
    Compute basic candidates for every cell.

    A filled cell's only candidate is its own value. An empty cell's
    candidates are the digits absent from its row, column and box,
    i.e. exactly the digits for which grid.can_place() holds.

    Args:
        grid: Grid to analyse

    Returns:
        Boolean array of shape (9, 9, 10) indexed [y, x, digit]
    """
    cells = grid.cells
    present = cells[:, :, None] == _DIGIT_AXIS
    in_row = present.any(axis=1)
    in_col = present.any(axis=0)
    in_box = present.reshape(BOX, BOX, BOX, BOX, SIZE + 1).any(axis=(1, 3))
    blocked = in_row[:, None, :] | in_col[None, :, :] | in_box[_BOX_OF][:, _BOX_OF]

    empty = (cells == 0)[:, :, None]
    maybe = np.where(empty, ~blocked, present)
    maybe[:, :, 0] = False
    return maybe


def _cross_box_failures(maybe: np.ndarray) -> np.ndarray:
    """
    Cross-box test result for every cell and digit against one map.

    Returns:
        Boolean (9, 9, 10) array, True where some other box of the cell's
        column stack or row band can only hold the digit on the cell's line
    """
    # Axes: (box row, row in box, box col, col in box, digit)
    blocks = maybe.reshape(BOX, BOX, BOX, BOX, SIZE + 1)

    # Column stack: does box (by, bx) offer d outside its inner column ix?
    col_has = blocks.any(axis=1)
    col_blocked = (col_has.sum(axis=2, keepdims=True) - col_has) == 0
    stack_fail = (col_blocked.sum(axis=0)[None] - col_blocked) > 0

    # Row band: does box (by, bx) offer d outside its inner row iy?
    row_has = blocks.any(axis=3)
    row_blocked = (row_has.sum(axis=1, keepdims=True) - row_has) == 0
    band_fail = (row_blocked.sum(axis=2)[:, :, None] - row_blocked) > 0

    rows = _BOX_OF[:, None]
    cols = _BOX_OF[None, :]
    return (
        stack_fail[rows, cols, _INNER[None, :]]
        | band_fail[rows, _INNER[:, None], cols]
    )


def refine_candidates(grid: Grid, maybe: np.ndarray) -> np.ndarray:
    """
    Apply cross-box elimination to a candidate map.

    For an empty cell (x, y) and candidate d, every other box in the
    same column stack must offer d somewhere outside column x, and every
    other box in the same row band must offer d somewhere outside row y.
    If one of those boxes can only hold d on the cell's own line, d is
    removed from (x, y).

    Cells are tested in column order (x outer, y inner) and each test
    sees the removals made before it. A test only reads its own digit,
    so all digits advance together: each round removes the first failing
    candidate of every digit at or after that digit's position.

    Args:
        grid: Grid the map was computed for
        maybe: Candidate map from candidate_map()

    Returns:
        New candidate map with eliminated candidates cleared
    """
    maybe = maybe.copy()
    empty = (grid.cells == 0)[:, :, None]
    start = np.zeros(SIZE + 1, dtype=np.int64)

    while True:
        failing = _cross_box_failures(maybe) & maybe & empty & (_VISIT_ORDER >= start)
        order = np.where(failing, _VISIT_ORDER, CELL_COUNT).reshape(CELL_COUNT, SIZE + 1)
        first = order.min(axis=0)
        digits = np.flatnonzero(first < CELL_COUNT)
        if digits.size == 0:
            return maybe

        xs, ys = np.divmod(first[digits], SIZE)
        maybe[ys, xs, digits] = False
        start[digits] = first[digits] + 1


def propagate(grid: Grid) -> int:
    """
    Fill forced cells in place until a full pass changes nothing.

    Cells left with one candidate after refinement are written in
    column order (x outer, y inner). A placement that an earlier write
    in the same pass made illegal is skipped; the next pass recomputes.
    A cell with no candidates is left empty without complaint.

    Args:
        grid: Grid to update in place

    Returns:
        Number of cells written
    """
    total = 0
    while True:
        maybe = refine_candidates(grid, candidate_map(grid))
        singles = (grid.cells == 0) & (maybe.sum(axis=2) == 1)

        placed = 0
        for x, y in zip(*np.nonzero(singles.T)):
            x, y = int(x), int(y)
            digit = int(maybe[y, x].argmax())
            if grid.can_place(x, y, digit):
                grid.set(x, y, digit)
                placed += 1

        if placed == 0:
            return total
        total += placed


def is_dead_end(grid: Grid, maybe: Optional[np.ndarray] = None) -> bool:
    """
    Detect states that can never be completed.

    A state is dead if an empty cell has no legal digit, or if some
    row, column or box cannot give each of its empty cells a different
    missing digit (no perfect matching between cells and digits).

    Args:
        grid: Grid to check
        maybe: Candidate map for grid (computed when omitted)

    Returns:
        True if the state has no completion
    """
    if maybe is None:
        maybe = candidate_map(grid)
    empty = grid.cells == 0
    if (empty & ~maybe.any(axis=2)).any():
        return True

    bits = (maybe[:, :, 1:].astype(np.int64) << _DIGIT_BITS).sum(axis=2)
    for unit in UNITS:
        masks = [int(bits[y, x]) for y, x in unit if empty[y, x]]
        if masks and not _has_matching(masks):
            return True
    return False


def _has_matching(masks: List[int]) -> bool:
    """Kuhn's augmenting paths over digit bitmasks."""
    owner = {}

    def assign(cell: int, seen: set) -> bool:
        mask = masks[cell]
        digit = 0
        while mask:
            if mask & 1 and digit not in seen:
                seen.add(digit)
                if digit not in owner or assign(owner[digit], seen):
                    owner[digit] = cell
                    return True
            mask >>= 1
            digit += 1
        return False

    return all(assign(cell, set()) for cell in range(len(masks)))

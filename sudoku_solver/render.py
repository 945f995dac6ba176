"""
Render Module - Console and image output for grids.
"""

import sys
from pathlib import Path
from typing import Optional, TextIO, Union

from PIL import Image, ImageDraw, ImageFont

from .solver.grid import BOX, SIZE, Grid


# Image layout
CELL_PX = 48
MARGIN_PX = 12
THIN_LINE = 1
THICK_LINE = 3

GIVEN_COLOR = "black"
DEDUCED_COLOR = "#1565C0"
LINE_COLOR = "black"
BACKGROUND = "white"


def format_grid(grid: Grid) -> str:
    """
    Boxed text rendering, one cell per column between bars.

    Returns:
        19 lines: separators around every row of |d| cells
    """
    separator = "-" * (2 * SIZE + 1)
    lines = [separator]
    for row in grid.to_list():
        lines.append("|" + "".join(f"{v if v else ' '}|" for v in row))
        lines.append(separator)
    return "\n".join(lines)


def print_grid(grid: Grid, *, label: Optional[str] = None, stream: Optional[TextIO] = None) -> None:
    """Print a grid in the boxed layout, optionally under a label."""
    stream = stream or sys.stdout
    if label:
        print(label, file=stream)
    print(format_grid(grid), file=stream)


def _load_font(size: int):
    try:
        return ImageFont.truetype("DejaVuSans.ttf", size)
    except OSError:
        return ImageFont.load_default()


def render_grid_image(grid: Grid, path: Union[str, Path], givens: Optional[Grid] = None) -> Image.Image:
    """
    Draw a grid to a PNG file.

    Digits present in givens are drawn in GIVEN_COLOR, all others in
    DEDUCED_COLOR, so a solved grid shows what the search filled in.

    Args:
        grid: Grid to draw
        path: Output PNG path
        givens: Initial puzzle (all digits treated as given if None)

    Returns:
        The rendered image
    """
    side = 2 * MARGIN_PX + SIZE * CELL_PX
    image = Image.new("RGB", (side, side), BACKGROUND)
    draw = ImageDraw.Draw(image)
    font = _load_font(CELL_PX * 2 // 3)

    for i in range(SIZE + 1):
        offset = MARGIN_PX + i * CELL_PX
        width = THICK_LINE if i % BOX == 0 else THIN_LINE
        draw.line([(MARGIN_PX, offset), (side - MARGIN_PX, offset)], fill=LINE_COLOR, width=width)
        draw.line([(offset, MARGIN_PX), (offset, side - MARGIN_PX)], fill=LINE_COLOR, width=width)

    for y in range(SIZE):
        for x in range(SIZE):
            digit = grid.get(x, y)
            if digit == 0:
                continue
            given = givens is None or givens.get(x, y) == digit
            left, top, right, bottom = draw.textbbox((0, 0), str(digit), font=font)
            tx = MARGIN_PX + x * CELL_PX + (CELL_PX - (right - left)) // 2 - left
            ty = MARGIN_PX + y * CELL_PX + (CELL_PX - (bottom - top)) // 2 - top
            draw.text(
                (tx, ty),
                str(digit),
                fill=GIVEN_COLOR if given else DEDUCED_COLOR,
                font=font,
            )

    image.save(str(path), "PNG")
    return image

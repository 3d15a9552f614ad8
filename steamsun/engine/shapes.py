"""Pure transforms on part occupancy matrices.

Shapes are tuples of tuples of bools, so every transform returns a new
shape and equality is cell-by-cell.
"""

from __future__ import annotations

from .types import Shape


def shape_from_matrix(rows) -> Shape:
    """Convert a 0/1 (or bool) matrix to a ``Shape``.

    Raises ValueError if rows have different lengths.
    """
    shape = tuple(tuple(bool(c) for c in row) for row in rows)
    if shape and any(len(row) != len(shape[0]) for row in shape):
        raise ValueError(
            f"shape rows must have equal length, got "
            f"{[len(row) for row in shape]}"
        )
    return shape


def shape_size(shape: Shape) -> tuple[int, int]:
    """Return (columns, rows)."""
    if not shape:
        return 0, 0
    return len(shape[0]), len(shape)


def occupied_cells(shape: Shape) -> list[tuple[int, int]]:
    """Local (dx, dy) of every occupied cell, row-major."""
    return [
        (dx, dy)
        for dy, row in enumerate(shape)
        for dx, cell in enumerate(row)
        if cell
    ]


def rotate_clockwise_90(shape: Shape) -> Shape:
    """Rotate 90 degrees clockwise: input (x, y) -> output (rows-1-y, x)."""
    if not shape:
        return ()
    num_rows = len(shape)
    num_cols = len(shape[0])
    return tuple(
        tuple(shape[num_rows - 1 - x][y] for x in range(num_rows))
        for y in range(num_cols)
    )


def mirror_horizontal(shape: Shape) -> Shape:
    """Reverse column order of every row."""
    return tuple(tuple(reversed(row)) for row in shape)


def shape_to_text(shape: Shape) -> str:
    """ASCII art, handy in assertion messages and debug logs."""
    return "\n".join("".join("#" if c else "." for c in row) for row in shape)

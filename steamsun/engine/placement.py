"""Placement feasibility for a candidate shape on the occupancy map.

The answer is all-or-nothing: a placement is legal only when no footprint
cell conflicts. Every conflicting cell is reported so the UI can highlight
all of them, not just the first.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from .grid import EMPTY
from .shapes import occupied_cells
from .types import GridPosition, Shape


@dataclass(frozen=True)
class PlacementResult:
    feasible: bool
    conflict_cells: tuple[GridPosition, ...] = ()


def footprint(shape: Shape, anchor: GridPosition) -> list[GridPosition]:
    """Absolute cells covered by ``shape`` anchored at ``anchor``."""
    return [
        GridPosition(anchor.x + dx, anchor.y + dy)
        for dx, dy in occupied_cells(shape)
    ]


def evaluate(
    shape: Shape,
    anchor: GridPosition,
    occupancy: np.ndarray,
    width: int,
    height: int,
    self_id: int | None = None,
) -> PlacementResult:
    """Check every footprint cell for bounds and foreign occupancy.

    ``self_id`` lets a re-dragged part pass through its own old footprint.
    The drag controller already excludes it from ``occupancy``; the check is
    repeated here so the validator holds for any occupancy map.
    """
    conflicts: list[GridPosition] = []
    for cell in footprint(shape, anchor):
        if not (0 <= cell.x < width and 0 <= cell.y < height):
            conflicts.append(cell)
            continue
        owner = int(occupancy[cell.y, cell.x])
        if owner != EMPTY and owner != self_id:
            conflicts.append(cell)
    return PlacementResult(
        feasible=not conflicts, conflict_cells=tuple(conflicts)
    )

"""Occupancy map derived from the placed parts.

The map is never stored: callers recompute it whenever the placed
collection or the excluded part changes. Grids are tens of cells, so a
full rebuild is cheap.
"""

from __future__ import annotations

import logging

import numpy as np

from .shapes import occupied_cells
from .types import GridPosition, PlacedEntity

logger = logging.getLogger(__name__)

EMPTY = 0  # part ids start at 1


def compute_occupancy(
    placed: list[PlacedEntity],
    width: int,
    height: int,
    exclude_id: int | None = None,
) -> np.ndarray:
    """Build a (height, width) array of owning part ids, EMPTY elsewhere.

    ``exclude_id`` leaves one part out (the part currently being moved).
    Out-of-bounds cells of a part are ignored.
    """
    grid = np.full((height, width), EMPTY, dtype=np.int64)
    for entity in placed:
        if entity.id == exclude_id:
            continue
        for dx, dy in occupied_cells(entity.shape):
            x = entity.position.x + dx
            y = entity.position.y + dy
            if 0 <= x < width and 0 <= y < height:
                if grid[y, x] != EMPTY and grid[y, x] != entity.id:
                    # Placement is gated by evaluate(); this is an engine bug.
                    logger.warning(
                        "cell (%d, %d) claimed by parts %d and %d",
                        x,
                        y,
                        grid[y, x],
                        entity.id,
                    )
                grid[y, x] = entity.id
    return grid


def in_bounds(occupancy: np.ndarray, cell: GridPosition) -> bool:
    height, width = occupancy.shape
    return 0 <= cell.x < width and 0 <= cell.y < height


def owner_at(occupancy: np.ndarray, cell: GridPosition) -> int | None:
    """Id of the part covering ``cell``, or None if empty or outside."""
    if not in_bounds(occupancy, cell):
        return None
    owner = int(occupancy[cell.y, cell.x])
    return None if owner == EMPTY else owner

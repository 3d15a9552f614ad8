"""Per-frame render surface computed from the drag controller.

The engine does not draw. ``build_scene`` collects everything a renderer
needs for one frame: the state of every grid cell, pixel placement and
texture matrix of every placed part, the airborne preview, and the stat
totals.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

import numpy as np

from .drag import DragController
from .grid import EMPTY
from .placement import footprint
from .stats import aggregate
from .texture import binding_transform
from .types import Catalog, Shape, StatTotals


class CellState(Enum):
    EMPTY = "empty"
    OCCUPIED = "occupied"
    PREVIEW = "preview"  # footprint of a feasible preview
    CONFLICT = "conflict"


@dataclass
class Sprite:
    catalog_id: str
    shape: Shape
    left: float
    top: float
    matrix: np.ndarray  # texture pixels -> sprite-local pixels
    texture: str | None = None
    entity_id: int | None = None
    floating: bool = False


@dataclass
class Scene:
    cells: list[list[CellState]]
    sprites: list[Sprite] = field(default_factory=list)
    preview: Sprite | None = None
    totals: StatTotals = field(default_factory=StatTotals)
    cell_size: float = 0.0


def _cell_states(controller: DragController) -> list[list[CellState]]:
    occupancy = controller.occupancy()
    cells = [
        [
            CellState.EMPTY if occupancy[y, x] == EMPTY else CellState.OCCUPIED
            for x in range(controller.grid_width)
        ]
        for y in range(controller.grid_height)
    ]
    session = controller.session
    if session is None or session.preview_anchor is None:
        return cells
    if session.feasible:
        marked = footprint(session.live_shape, session.preview_anchor)
        state = CellState.PREVIEW
    else:
        marked = list(session.conflict_cells)
        state = CellState.CONFLICT
    for cell in marked:
        if (
            0 <= cell.x < controller.grid_width
            and 0 <= cell.y < controller.grid_height
        ):
            cells[cell.y][cell.x] = state
    return cells


def build_scene(controller: DragController, catalog: Catalog) -> Scene:
    cell = controller.cell_size
    textures = {item.id: item.texture for item in catalog.items}

    sprites = []
    for entity in controller.placed:
        if entity.id == controller.dragged_entity_id:
            continue
        sprites.append(
            Sprite(
                catalog_id=entity.catalog_id,
                shape=entity.shape,
                left=entity.position.x * cell,
                top=entity.position.y * cell,
                matrix=binding_transform(
                    entity.texture, cell, entity.rotation_deg, entity.mirrored
                ),
                texture=textures.get(entity.catalog_id),
                entity_id=entity.id,
            )
        )

    preview = None
    session = controller.session
    if session is not None:
        snapped = session.in_grid and session.preview_anchor is not None
        if snapped:
            left = session.preview_anchor.x * cell
            top = session.preview_anchor.y * cell
        else:
            left = session.pointer.x - session.pointer_offset.x
            top = session.pointer.y - session.pointer_offset.y
        preview = Sprite(
            catalog_id=session.catalog_id,
            shape=session.live_shape,
            left=left,
            top=top,
            matrix=binding_transform(
                session.texture,
                cell,
                session.live_rotation,
                session.live_mirror,
            ),
            texture=textures.get(session.catalog_id),
            entity_id=session.source_entity_id,
            floating=not snapped,
        )

    return Scene(
        cells=_cell_states(controller),
        sprites=sprites,
        preview=preview,
        totals=aggregate(controller.placed, catalog),
        cell_size=cell,
    )

"""Drag interaction state machine for placing parts on the core grid.

``DragController`` owns the two pieces of mutable state in the builder: the
placed-part collection and the (at most one) active ``DragSession``. The
host forwards discrete input events to it:

  * ``pick_from_palette`` / ``pick_from_grid``: pointer-down. Idle ->
    Dragging when the pointer lands on something pickable.
  * ``move``: pointer-move. Re-derives the preview anchor from the
    absolute pointer position and revalidates it.
  * ``rotate`` / ``mirror`` / ``handle_key``: commands while airborne.
    No-ops when idle.
  * ``release``: pointer-up. Commits when the preview is feasible,
    otherwise discards. Dragging -> Idle either way.

Pointer coordinates are pixels relative to the grid's top-left corner.
The placed collection is never touched during a drag, so discarding a
session needs no rollback: the moved part simply reappears where it was.

Listener subscriptions follow the session: ``bind_drag_events`` is called
when a session starts and the unbind callable it returns is called on
every path back to Idle.
"""

from __future__ import annotations

import logging
import math
from enum import Enum
from typing import Callable

import numpy as np

from .grid import compute_occupancy, owner_at
from .placement import evaluate
from .shapes import (
    mirror_horizontal,
    rotate_clockwise_90,
    shape_size,
    shape_to_text,
)
from .types import (
    CatalogItem,
    DragSession,
    GridPosition,
    PixelPoint,
    PlacedEntity,
    TextureBinding,
)

logger = logging.getLogger(__name__)

BindDragEvents = Callable[[], Callable[[], None]]

ROTATE_KEYS = ("r",)
MIRROR_KEYS = ("f",)


class DragState(Enum):
    IDLE = "idle"
    DRAGGING = "dragging"


def _round_half_up(value: float) -> int:
    """Round to nearest, ties toward +inf (not banker's rounding)."""
    return math.floor(value + 0.5)


class DragController:
    def __init__(
        self,
        grid_width: int,
        grid_height: int,
        cell_size: float,
        bind_drag_events: BindDragEvents | None = None,
    ):
        self.grid_width = grid_width
        self.grid_height = grid_height
        self.cell_size = cell_size
        self.placed: list[PlacedEntity] = []
        self.session: DragSession | None = None
        self._bind_drag_events = bind_drag_events
        self._unbind: Callable[[], None] | None = None
        self._next_id = 1
        # Occupancy without the moved part; valid for the whole session
        # because the collection cannot change while dragging.
        self._session_occupancy: np.ndarray | None = None

    # -- queries --

    @property
    def state(self) -> DragState:
        return DragState.IDLE if self.session is None else DragState.DRAGGING

    @property
    def dragged_entity_id(self) -> int | None:
        if self.session is None:
            return None
        return self.session.source_entity_id

    def occupancy(self) -> np.ndarray:
        """Occupancy map as currently displayed (moved part excluded)."""
        if self._session_occupancy is not None:
            return self._session_occupancy
        return compute_occupancy(
            self.placed, self.grid_width, self.grid_height
        )

    def entity(self, entity_id: int) -> PlacedEntity | None:
        for e in self.placed:
            if e.id == entity_id:
                return e
        return None

    def pointer_to_cell(self, pointer: PixelPoint) -> GridPosition:
        return GridPosition(
            math.floor(pointer.x / self.cell_size),
            math.floor(pointer.y / self.cell_size),
        )

    def pointer_in_grid(self, pointer: PixelPoint) -> bool:
        """Strictly inside the grid rectangle."""
        return (
            0 < pointer.x < self.grid_width * self.cell_size
            and 0 < pointer.y < self.grid_height * self.cell_size
        )

    # -- pick-up --

    def pick_from_palette(
        self,
        item: CatalogItem,
        pointer: PixelPoint,
        grab_offset: PixelPoint,
    ) -> bool:
        """Start dragging a new part. ``grab_offset`` is the pointer
        position inside the palette thumbnail."""
        if self.session is not None:
            return False
        if not any(any(row) for row in item.shape):
            logger.debug("palette item '%s' has an empty shape", item.id)
            return False
        base_w, base_h = shape_size(item.shape)
        binding = TextureBinding(
            pixels_per_cell=item.pixels_per_cell,
            anchor=item.anchor,
            base_width=base_w,
            base_height=base_h,
        )
        session = DragSession(
            source_entity_id=None,
            catalog_id=item.id,
            live_shape=item.shape,
            texture=binding,
            pointer_offset=grab_offset,
            pointer=pointer,
        )
        self._start(session)
        logger.debug("picked '%s' from palette", item.id)
        return True

    def pick_from_grid(self, pointer: PixelPoint) -> bool:
        """Start re-dragging the placed part under the pointer, if any."""
        if self.session is not None:
            return False
        occupancy = compute_occupancy(
            self.placed, self.grid_width, self.grid_height
        )
        owner = owner_at(occupancy, self.pointer_to_cell(pointer))
        if owner is None:
            return False
        entity = self.entity(owner)
        if entity is None:
            return False
        session = DragSession(
            source_entity_id=entity.id,
            catalog_id=entity.catalog_id,
            live_shape=entity.shape,
            texture=entity.texture,
            pointer_offset=PixelPoint(
                pointer.x - entity.position.x * self.cell_size,
                pointer.y - entity.position.y * self.cell_size,
            ),
            pointer=pointer,
            live_rotation=entity.rotation_deg,
            live_mirror=entity.mirrored,
        )
        self._start(session)
        logger.debug(
            "picked part %d ('%s') from grid at (%d, %d)",
            entity.id,
            entity.catalog_id,
            entity.position.x,
            entity.position.y,
        )
        return True

    def _start(self, session: DragSession) -> None:
        self.session = session
        self._session_occupancy = compute_occupancy(
            self.placed,
            self.grid_width,
            self.grid_height,
            exclude_id=session.source_entity_id,
        )
        if self._bind_drag_events is not None:
            self._unbind = self._bind_drag_events()
        self._track(session.pointer)

    # -- airborne --

    def move(self, pointer: PixelPoint) -> None:
        if self.session is None:
            return
        self._track(pointer)

    def _track(self, pointer: PixelPoint) -> None:
        session = self.session
        assert session is not None
        session.pointer = pointer
        session.preview_anchor = GridPosition(
            _round_half_up(
                (pointer.x - session.pointer_offset.x) / self.cell_size
            ),
            _round_half_up(
                (pointer.y - session.pointer_offset.y) / self.cell_size
            ),
        )
        session.in_grid = self.pointer_in_grid(pointer)
        self._revalidate()

    def _revalidate(self) -> None:
        session = self.session
        assert session is not None
        if session.preview_anchor is None or self._session_occupancy is None:
            session.feasible = False
            session.conflict_cells = ()
            return
        result = evaluate(
            session.live_shape,
            session.preview_anchor,
            self._session_occupancy,
            self.grid_width,
            self.grid_height,
            self_id=session.source_entity_id,
        )
        session.feasible = result.feasible
        session.conflict_cells = result.conflict_cells

    def rotate(self) -> None:
        """Rotate the airborne part a quarter turn.

        The occupancy matrix always turns clockwise. The texture angle
        turns the other way while mirrored so the part on screen keeps
        turning in the direction the user expects.
        """
        session = self.session
        if session is None:
            return
        session.live_shape = rotate_clockwise_90(session.live_shape)
        step = -90 if session.live_mirror else 90
        session.live_rotation = (session.live_rotation + step) % 360
        logger.debug(
            "rotated '%s' to %d deg:\n%s",
            session.catalog_id,
            session.live_rotation,
            shape_to_text(session.live_shape),
        )
        self._revalidate()

    def mirror(self) -> None:
        session = self.session
        if session is None:
            return
        session.live_shape = mirror_horizontal(session.live_shape)
        session.live_mirror = not session.live_mirror
        logger.debug(
            "mirrored '%s' (mirrored=%s):\n%s",
            session.catalog_id,
            session.live_mirror,
            shape_to_text(session.live_shape),
        )
        self._revalidate()

    def handle_key(self, key: str) -> bool:
        """Dispatch a rotate/mirror key. Returns True if it was consumed."""
        if self.session is None:
            return False
        k = key.lower()
        if k in ROTATE_KEYS:
            self.rotate()
            return True
        if k in MIRROR_KEYS:
            self.mirror()
            return True
        return False

    # -- release --

    def release(self) -> PlacedEntity | None:
        """End the gesture: commit if feasible, discard otherwise.

        Returns the created or updated part, or None on discard.
        """
        session = self.session
        if session is None:
            return None
        try:
            anchor = session.preview_anchor
            if (
                session.feasible
                and anchor is not None
                and 0 <= anchor.x < self.grid_width
                and 0 <= anchor.y < self.grid_height
            ):
                return self._commit(session, anchor)
            logger.debug(
                "discarded drag of '%s' (conflicts: %d)",
                session.catalog_id,
                len(session.conflict_cells),
            )
            return None
        finally:
            self._end_session()

    def _commit(
        self, session: DragSession, anchor: GridPosition
    ) -> PlacedEntity:
        if session.is_fresh:
            entity = PlacedEntity(
                id=self._next_id,
                catalog_id=session.catalog_id,
                shape=session.live_shape,
                position=anchor,
                texture=session.texture,
                rotation_deg=session.live_rotation,
                mirrored=session.live_mirror,
            )
            self._next_id += 1
            self.placed.append(entity)
            logger.debug(
                "placed part %d ('%s') at (%d, %d)",
                entity.id,
                entity.catalog_id,
                anchor.x,
                anchor.y,
            )
            return entity

        existing = self.entity(session.source_entity_id)
        assert existing is not None, "re-dragged part vanished mid-session"
        existing.shape = session.live_shape
        existing.position = anchor
        existing.rotation_deg = session.live_rotation
        existing.mirrored = session.live_mirror
        logger.debug(
            "moved part %d to (%d, %d), rotation %d, mirrored %s",
            existing.id,
            anchor.x,
            anchor.y,
            existing.rotation_deg,
            existing.mirrored,
        )
        return existing

    def _end_session(self) -> None:
        self.session = None
        self._session_occupancy = None
        unbind, self._unbind = self._unbind, None
        if unbind is not None:
            unbind()

    # -- collection --

    def clear(self) -> None:
        """Remove every placed part. Ids keep counting."""
        if self.session is not None:
            self._end_session()
        count = len(self.placed)
        self.placed = []
        logger.info("cleared %d placed parts", count)

    def set_cell_size(self, cell_size: float) -> None:
        """Update pixels per cell (window resize).

        An active session keeps its pointer and grab offset at the same
        place relative to the grid and the part, so both are rescaled.
        """
        if cell_size <= 0:
            raise ValueError(f"cell_size must be positive, got {cell_size}")
        factor = cell_size / self.cell_size
        self.cell_size = cell_size
        session = self.session
        if session is None:
            return
        session.pointer_offset = PixelPoint(
            session.pointer_offset.x * factor,
            session.pointer_offset.y * factor,
        )
        self._track(
            PixelPoint(session.pointer.x * factor, session.pointer.y * factor)
        )

"""Tests for the per-frame scene built from the drag controller."""

import numpy as np

from steamsun.engine.drag import DragController
from steamsun.engine.scene import CellState, build_scene
from steamsun.engine.texture import binding_transform
from steamsun.engine.types import (
    Catalog,
    CatalogItem,
    GridPosition,
    PixelPoint,
    StatTotals,
)

CELL = 10.0
CATALOG = Catalog.from_dict(
    [
        {
            "id": "boiler_l",
            "shape": [[1, 0], [1, 0], [1, 1]],
            "texture": "boiler.png",
            "power": 12,
            "price": 150,
        },
        {"id": "piston", "shape": [[1, 1]], "power": 8, "price": 90},
    ]
)
L_ITEM = CATALOG.get("boiler_l")
DOMINO_ITEM = CATALOG.get("piston")


def _pt(x, y):
    return PixelPoint(float(x), float(y))


def _place(controller, item, x, y):
    controller.pick_from_palette(
        item, _pt(x * CELL + 5, y * CELL + 5), _pt(5, 5)
    )
    return controller.release()


def _states(scene, state):
    return {
        GridPosition(x, y)
        for y, row in enumerate(scene.cells)
        for x, s in enumerate(row)
        if s == state
    }


def test_idle_scene():
    c = DragController(4, 4, CELL)
    entity = _place(c, L_ITEM, 1, 0)
    scene = build_scene(c, CATALOG)

    assert scene.preview is None
    assert scene.cell_size == CELL
    assert _states(scene, CellState.OCCUPIED) == {
        GridPosition(1, 0),
        GridPosition(1, 1),
        GridPosition(1, 2),
        GridPosition(2, 2),
    }
    [sprite] = scene.sprites
    assert sprite.entity_id == entity.id
    assert (sprite.left, sprite.top) == (10.0, 0.0)
    assert sprite.texture == "boiler.png"
    np.testing.assert_allclose(
        sprite.matrix, binding_transform(entity.texture, CELL, 0, False)
    )
    assert scene.totals == StatTotals(power=12, price=150)


def test_feasible_preview_marks_footprint():
    c = DragController(4, 4, CELL)
    c.pick_from_palette(DOMINO_ITEM, _pt(15, 25), _pt(5, 5))
    scene = build_scene(c, CATALOG)
    assert _states(scene, CellState.PREVIEW) == {
        GridPosition(1, 2),
        GridPosition(2, 2),
    }
    assert not scene.preview.floating
    assert (scene.preview.left, scene.preview.top) == (10.0, 20.0)
    # Not yet committed.
    assert scene.totals == StatTotals()


def test_conflict_marks_only_in_bounds_conflicts():
    c = DragController(4, 4, CELL)
    _place(c, L_ITEM, 0, 0)
    # Domino at (3, 2) overflows to x=4; at (0, 2) it hits the L.
    c.pick_from_palette(DOMINO_ITEM, _pt(35, 25), _pt(5, 5))
    scene = build_scene(c, CATALOG)
    assert _states(scene, CellState.CONFLICT) == set()
    assert _states(scene, CellState.PREVIEW) == set()

    c.move(_pt(5, 25))
    scene = build_scene(c, CATALOG)
    assert _states(scene, CellState.CONFLICT) == {
        GridPosition(0, 2),
        GridPosition(1, 2),
    }


def test_redragged_part_is_lifted():
    c = DragController(4, 4, CELL)
    entity = _place(c, L_ITEM, 0, 0)
    c.pick_from_grid(_pt(5, 5))
    c.rotate()
    scene = build_scene(c, CATALOG)

    assert scene.sprites == []
    assert scene.preview.entity_id == entity.id
    np.testing.assert_allclose(
        scene.preview.matrix,
        binding_transform(entity.texture, CELL, 90, False),
    )
    # Lifted part no longer occupies; totals still count it.
    assert _states(scene, CellState.OCCUPIED) == set()
    assert scene.totals.power == 12


def test_preview_floats_outside_grid():
    c = DragController(4, 4, CELL)
    c.pick_from_palette(L_ITEM, _pt(-30, 57), _pt(4, 6))
    scene = build_scene(c, CATALOG)
    assert scene.preview.floating
    assert (scene.preview.left, scene.preview.top) == (-34.0, 51.0)


def test_stale_catalog_id_has_no_texture():
    c = DragController(4, 4, CELL)
    _place(c, CatalogItem(id="ghost", shape=((True,),)), 3, 3)
    scene = build_scene(c, CATALOG)
    assert scene.sprites[0].texture is None
    assert scene.totals == StatTotals()

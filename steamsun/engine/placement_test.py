"""Tests for placement feasibility."""

from steamsun.engine.grid import compute_occupancy
from steamsun.engine.placement import evaluate, footprint
from steamsun.engine.shapes import shape_from_matrix
from steamsun.engine.types import (
    GridPosition,
    PixelPoint,
    PlacedEntity,
    TextureBinding,
)

L_PIECE = shape_from_matrix([[1, 0], [1, 0], [1, 1]])
DOMINO = shape_from_matrix([[1, 1]])


def _placed_l(eid=1, x=0, y=0):
    return PlacedEntity(
        id=eid,
        catalog_id="boiler_l",
        shape=L_PIECE,
        position=GridPosition(x, y),
        texture=TextureBinding(60.0, PixelPoint(), 2, 3),
    )


def test_footprint_is_offset_by_anchor():
    assert footprint(DOMINO, GridPosition(2, 5)) == [
        GridPosition(2, 5),
        GridPosition(3, 5),
    ]


class TestEvaluate:
    def test_empty_grid_feasible(self):
        occ = compute_occupancy([], 6, 6)
        result = evaluate(L_PIECE, GridPosition(0, 0), occ, 6, 6)
        assert result.feasible
        assert result.conflict_cells == ()

    def test_overlap_reports_conflict(self):
        occ = compute_occupancy([_placed_l()], 6, 6)
        result = evaluate(DOMINO, GridPosition(0, 0), occ, 6, 6)
        assert not result.feasible
        assert set(result.conflict_cells) == {GridPosition(0, 0)}

    def test_every_conflict_reported(self):
        occ = compute_occupancy([_placed_l()], 6, 6)
        # Row 2 of the L is two filled cells; a domino over it hits both.
        result = evaluate(DOMINO, GridPosition(0, 2), occ, 6, 6)
        assert set(result.conflict_cells) == {
            GridPosition(0, 2),
            GridPosition(1, 2),
        }

    def test_out_of_bounds_cells_conflict(self):
        occ = compute_occupancy([], 6, 6)
        result = evaluate(L_PIECE, GridPosition(5, 4), occ, 6, 6)
        assert not result.feasible
        assert set(result.conflict_cells) == {
            GridPosition(5, 6),
            GridPosition(6, 6),
        }

    def test_negative_anchor_conflicts(self):
        occ = compute_occupancy([], 6, 6)
        result = evaluate(DOMINO, GridPosition(-1, 0), occ, 6, 6)
        assert result.conflict_cells == (GridPosition(-1, 0),)

    def test_empty_cells_of_shape_do_not_conflict(self):
        occ = compute_occupancy([_placed_l()], 6, 6)
        # The L's hole at (1, 0) is free.
        single = shape_from_matrix([[1]])
        assert evaluate(single, GridPosition(1, 0), occ, 6, 6).feasible

    def test_self_id_passes_own_cells(self):
        occ = compute_occupancy([_placed_l()], 6, 6)
        result = evaluate(L_PIECE, GridPosition(0, 0), occ, 6, 6, self_id=1)
        assert result.feasible

    def test_empty_shape_is_trivially_feasible(self):
        occ = compute_occupancy([], 2, 2)
        assert evaluate((), GridPosition(9, 9), occ, 2, 2).feasible

"""Tests for shape rotation/mirroring and shape helpers."""

import pytest

from steamsun.engine.shapes import (
    mirror_horizontal,
    occupied_cells,
    rotate_clockwise_90,
    shape_from_matrix,
    shape_size,
    shape_to_text,
)

L_PIECE = shape_from_matrix([[1, 0], [1, 0], [1, 1]])
S_PIECE = shape_from_matrix([[0, 1, 1], [1, 1, 0]])
BAR = shape_from_matrix([[1, 1, 1, 1]])
SAMPLE_SHAPES = [L_PIECE, S_PIECE, BAR, shape_from_matrix([[1]])]


class TestShapeFromMatrix:
    def test_ints_become_bools(self):
        assert shape_from_matrix([[1, 0]]) == ((True, False),)

    def test_is_immutable_tuple(self):
        assert isinstance(L_PIECE, tuple)
        assert all(isinstance(row, tuple) for row in L_PIECE)

    def test_ragged_rows_rejected(self):
        with pytest.raises(ValueError, match="equal length"):
            shape_from_matrix([[1, 1], [1]])

    def test_empty(self):
        assert shape_from_matrix([]) == ()


class TestShapeSize:
    def test_l_piece(self):
        assert shape_size(L_PIECE) == (2, 3)

    def test_empty(self):
        assert shape_size(()) == (0, 0)


class TestOccupiedCells:
    def test_row_major_order(self):
        assert occupied_cells(L_PIECE) == [(0, 0), (0, 1), (0, 2), (1, 2)]

    def test_empty(self):
        assert occupied_cells(()) == []


class TestRotateClockwise90:
    def test_l_piece(self):
        # #.      ###
        # #.  ->  #..
        # ##
        assert rotate_clockwise_90(L_PIECE) == shape_from_matrix(
            [[1, 1, 1], [1, 0, 0]]
        )

    def test_dimensions_swap(self):
        cols, rows = shape_size(L_PIECE)
        assert shape_size(rotate_clockwise_90(L_PIECE)) == (rows, cols)

    def test_cell_mapping(self):
        """Input (x, y) lands at output (rows - 1 - y, x)."""
        rows = len(S_PIECE)
        out = rotate_clockwise_90(S_PIECE)
        for y, row in enumerate(S_PIECE):
            for x, cell in enumerate(row):
                assert out[x][rows - 1 - y] == cell

    @pytest.mark.parametrize("shape", SAMPLE_SHAPES)
    def test_four_turns_is_identity(self, shape):
        result = shape
        for _ in range(4):
            result = rotate_clockwise_90(result)
        assert result == shape

    def test_bar_becomes_column(self):
        assert rotate_clockwise_90(BAR) == ((True,),) * 4

    def test_empty(self):
        assert rotate_clockwise_90(()) == ()


class TestMirrorHorizontal:
    def test_l_piece(self):
        assert mirror_horizontal(L_PIECE) == shape_from_matrix(
            [[0, 1], [0, 1], [1, 1]]
        )

    @pytest.mark.parametrize("shape", SAMPLE_SHAPES)
    def test_twice_is_identity(self, shape):
        assert mirror_horizontal(mirror_horizontal(shape)) == shape

    def test_row_order_unchanged(self):
        mirrored = mirror_horizontal(S_PIECE)
        assert len(mirrored) == len(S_PIECE)
        assert mirrored == shape_from_matrix([[1, 1, 0], [0, 1, 1]])

    def test_empty(self):
        assert mirror_horizontal(()) == ()


def test_shape_to_text():
    assert shape_to_text(L_PIECE) == "#.\n#.\n##"

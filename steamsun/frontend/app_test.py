"""Unit tests for the pure helpers in frontend/app.py."""

import pytest

pytest.importorskip("tkinter")

from .app import (  # noqa: E402
    BOARD_MARGIN,
    MIN_CELL_SIZE,
    _parse_args,
    board_pointer,
    cell_size_for,
    format_item_stats,
)
from ..engine.types import (  # noqa: E402
    CatalogItem,
    PixelPoint,
    StatTotals,
)


class TestCellSizeFor:
    def test_half_window_over_columns(self):
        assert cell_size_for(1400, 7) == pytest.approx(100.0)

    def test_clamped_to_minimum(self):
        assert cell_size_for(200, 20) == MIN_CELL_SIZE

    def test_degenerate_grid(self):
        assert cell_size_for(800, 0) == MIN_CELL_SIZE


def test_format_item_stats():
    item = CatalogItem(
        id="gauge",
        shape=((True,),),
        stats=StatTotals(power=0, control=3, malfunction_risk=0.5, price=8),
    )
    assert format_item_stats(item) == "P: 0 • C: 3 • MR: 0.5 • $8"


def test_board_pointer_subtracts_margin():
    p = board_pointer(500, 300, 100, 50)
    assert p == PixelPoint(400 - BOARD_MARGIN, 250 - BOARD_MARGIN)


class TestParseArgs:
    def test_defaults(self):
        args = _parse_args([])
        assert args.catalog is None
        assert args.grids is None
        assert args.grid == "Small core"
        assert args.log_level == "INFO"

    def test_rejects_unknown_level(self):
        with pytest.raises(SystemExit):
            _parse_args(["--log-level", "LOUD"])

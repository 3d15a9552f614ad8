"""Tests for stat aggregation over placed parts."""

import random

from steamsun.engine.shapes import shape_from_matrix
from steamsun.engine.stats import aggregate, format_totals
from steamsun.engine.types import (
    Catalog,
    CatalogItem,
    GridPosition,
    PixelPoint,
    PlacedEntity,
    StatTotals,
    TextureBinding,
)

CATALOG = Catalog(
    items=[
        CatalogItem(
            id="boiler",
            shape=shape_from_matrix([[1, 1]]),
            stats=StatTotals(power=5, control=0, malfunction_risk=2, price=30),
        ),
        CatalogItem(
            id="gauge",
            shape=shape_from_matrix([[1]]),
            stats=StatTotals(power=0, control=3, malfunction_risk=0, price=8),
        ),
    ]
)


def _placed(eid, catalog_id):
    return PlacedEntity(
        id=eid,
        catalog_id=catalog_id,
        shape=shape_from_matrix([[1]]),
        position=GridPosition(eid, 0),
        texture=TextureBinding(60.0, PixelPoint(), 1, 1),
    )


def test_empty_is_zero():
    assert aggregate([], CATALOG) == StatTotals()


def test_sums_every_attribute():
    placed = [_placed(1, "boiler"), _placed(2, "gauge"), _placed(3, "boiler")]
    assert aggregate(placed, CATALOG) == StatTotals(
        power=10, control=3, malfunction_risk=4, price=68
    )


def test_order_independent():
    placed = [_placed(i, "boiler" if i % 3 else "gauge") for i in range(1, 9)]
    expected = aggregate(placed, CATALOG)
    rng = random.Random(7)
    for _ in range(5):
        shuffled = placed[:]
        rng.shuffle(shuffled)
        assert aggregate(shuffled, CATALOG) == expected


def test_unknown_catalog_id_contributes_nothing():
    placed = [_placed(1, "gauge"), _placed(2, "removed_part")]
    assert aggregate(placed, CATALOG) == StatTotals(control=3, price=8)


def test_format_totals():
    totals = StatTotals(power=10, control=3.5, malfunction_risk=0, price=68)
    assert format_totals(totals) == (
        "Power: 10 • Control: 3.5 • Malfunction risk: 0 • Price: 68"
    )

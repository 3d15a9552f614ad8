"""Totals of catalog attributes over the placed parts."""

from __future__ import annotations

import logging

from .types import Catalog, PlacedEntity, StatTotals

logger = logging.getLogger(__name__)


def aggregate(placed: list[PlacedEntity], catalog: Catalog) -> StatTotals:
    """Sum power/control/malfunction risk/price of every placed part.

    Parts whose catalog id no longer resolves contribute nothing.
    """
    by_id = {item.id: item for item in catalog.items}
    totals = StatTotals()
    for entity in placed:
        item = by_id.get(entity.catalog_id)
        if item is None:
            logger.debug(
                "part %d references unknown catalog id '%s'",
                entity.id,
                entity.catalog_id,
            )
            continue
        totals = totals + item.stats
    return totals


def _fmt(value: float) -> str:
    return f"{value:g}"


def format_totals(totals: StatTotals) -> str:
    """One-line summary: power, control, malfunction risk, price."""
    return (
        f"Power: {_fmt(totals.power)} • Control: {_fmt(totals.control)} • "
        f"Malfunction risk: {_fmt(totals.malfunction_risk)} • "
        f"Price: {_fmt(totals.price)}"
    )

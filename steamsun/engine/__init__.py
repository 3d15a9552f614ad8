"""Headless placement engine for the core builder."""

from .drag import DragController, DragState
from .placement import PlacementResult, evaluate
from .scene import CellState, Scene, Sprite, build_scene
from .stats import aggregate, format_totals
from .types import (
    Catalog,
    CatalogItem,
    GridConfig,
    GridPosition,
    PixelPoint,
    PlacedEntity,
    StatTotals,
    TextureBinding,
)

__all__ = [
    "Catalog",
    "CatalogItem",
    "CellState",
    "DragController",
    "DragState",
    "GridConfig",
    "GridPosition",
    "PixelPoint",
    "PlacedEntity",
    "PlacementResult",
    "Scene",
    "Sprite",
    "StatTotals",
    "TextureBinding",
    "aggregate",
    "build_scene",
    "evaluate",
    "format_totals",
]

"""Load part catalogs and grid presets from JSON files.

Catalog defaults (texture pixels-per-cell, texture anchor) are resolved
once here, via ``types.py``, so the rest of the engine always sees fully
populated parts. Texture references are resolved relative to the catalog
file.

Used by:
  - ``frontend/catalogs.py``: loads the built-in catalog and grid presets.
  - ``frontend/app.py``: loads a user catalog passed with ``--catalog``.
"""

from __future__ import annotations

import json
import logging
from dataclasses import replace
from pathlib import Path

from .types import Catalog, CatalogItem, GridConfig

logger = logging.getLogger(__name__)

# steamsun/catalogs/ is two levels up from steamsun/engine/catalog_io.py
_CATALOGS_DIR = Path(__file__).parent.parent / "catalogs"


def builtin_catalog_path(name: str) -> Path:
    """Return the path to a built-in JSON file.

    Args:
        name: File name without extension (e.g. "core_parts").

    Returns:
        Path to ``steamsun/catalogs/builtin/{name}.json``.
    """
    return _CATALOGS_DIR / "builtin" / f"{name}.json"


def _resolve_texture(texture: str | None, base_dir: Path) -> str | None:
    if not texture:
        return None
    p = Path(texture)
    if p.is_absolute():
        return texture
    return str(base_dir / p)


def load_catalog(path: Path) -> Catalog:
    """Load a JSON part catalog.

    Raises ValueError for malformed entries (missing id, ragged shape,
    duplicate id, non-positive pixels-per-cell).
    """
    path = Path(path)
    with open(path) as f:
        data = json.load(f)
    catalog = Catalog.from_dict(data)
    catalog.items = [
        _with_resolved_texture(item, path.parent) for item in catalog.items
    ]
    if catalog.name is None:
        catalog.name = path.stem
    logger.info("loaded %d parts from %s", len(catalog.items), path)
    return catalog


def _with_resolved_texture(item: CatalogItem, base_dir: Path) -> CatalogItem:
    return replace(item, texture=_resolve_texture(item.texture, base_dir))


def load_grid_presets(path: Path) -> list[GridConfig]:
    """Load grid presets (``{"grids": [{name, width, height, texture}]}``)."""
    path = Path(path)
    with open(path) as f:
        data = json.load(f)
    grids = [GridConfig.from_dict(g) for g in data.get("grids", [])]
    return [
        replace(g, texture=_resolve_texture(g.texture, path.parent))
        for g in grids
    ]


def palette_items(
    catalog: Catalog, selected_ids: list[str] | None = None
) -> list[CatalogItem]:
    """Parts offered in the palette, in catalog order.

    Parts with an empty shape are never offered. When ``selected_ids`` is
    given, only those parts are kept.
    """
    wanted = set(selected_ids) if selected_ids is not None else None
    return [
        item
        for item in catalog.items
        if any(any(row) for row in item.shape)
        and (wanted is None or item.id in wanted)
    ]

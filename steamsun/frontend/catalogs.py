"""Built-in part catalog and core grid presets.

Pure data module with no UI dependencies (no tkinter), so headless code
and tests can import it as well as the GUI.

Loads data from JSON files under ``steamsun/catalogs/builtin/``:

  - ``core_parts.json``: the default part catalog (shapes, texture
    bindings, power/control/malfunction risk/price).
  - ``grids.json``: core grid presets (7x7, 15x10, 20x10).

Provides:
  - PART_CATALOGS: dict mapping catalog name -> ``Catalog``.
  - GRID_PRESETS: dict mapping preset name -> ``GridConfig``, in file order.
  - DEFAULT_GRID: name of the preset selected on start-up.
"""

from steamsun.engine.catalog_io import (
    builtin_catalog_path,
    load_catalog,
    load_grid_presets,
)

_CORE_PARTS = load_catalog(builtin_catalog_path("core_parts"))

PART_CATALOGS = {
    _CORE_PARTS.name or "Core parts": _CORE_PARTS,
}

GRID_PRESETS = {
    g.name or f"{g.width}x{g.height}": g
    for g in load_grid_presets(builtin_catalog_path("grids"))
}

DEFAULT_GRID = "Small core"

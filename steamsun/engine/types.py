"""Data types for the core builder: catalog parts, grid presets, placed parts.

Catalog-facing types parse the JSON catalog schema via ``from_dict``
(camelCase texture keys, as written by the catalog authors). Engine-facing
types (``PlacedEntity``, ``DragSession``) are plain dataclasses owned by
``drag.py``.
"""

from __future__ import annotations

from dataclasses import dataclass, field

# Rectangular boolean occupancy matrix, row-major. Immutable.
Shape = tuple[tuple[bool, ...], ...]

ROTATIONS = (0, 90, 180, 270)
DEFAULT_PIXELS_PER_CELL = 60.0


@dataclass(frozen=True)
class GridPosition:
    x: int
    y: int

    def to_dict(self) -> dict:
        return {"x": self.x, "y": self.y}


@dataclass(frozen=True)
class PixelPoint:
    x: float = 0.0
    y: float = 0.0

    @staticmethod
    def from_dict(d: dict | None) -> PixelPoint:
        if not d:
            return PixelPoint()
        return PixelPoint(x=float(d.get("x", 0.0)), y=float(d.get("y", 0.0)))

    def to_dict(self) -> dict:
        return {"x": self.x, "y": self.y}


@dataclass(frozen=True)
class TextureBinding:
    """How a part's texture is pinned to its footprint.

    ``base_width``/``base_height`` are the shape's column/row count when the
    part was first picked from the palette. They never follow later
    rotations: the bitmap's native orientation does not change, so the
    width/height swap is derived from the rotation angle instead.
    """

    pixels_per_cell: float
    anchor: PixelPoint
    base_width: int
    base_height: int

    def to_dict(self) -> dict:
        return {
            "pixels_per_cell": self.pixels_per_cell,
            "anchor": self.anchor.to_dict(),
            "base_width": self.base_width,
            "base_height": self.base_height,
        }


@dataclass
class StatTotals:
    power: float = 0.0
    control: float = 0.0
    malfunction_risk: float = 0.0
    price: float = 0.0

    def __add__(self, other: StatTotals) -> StatTotals:
        return StatTotals(
            power=self.power + other.power,
            control=self.control + other.control,
            malfunction_risk=self.malfunction_risk + other.malfunction_risk,
            price=self.price + other.price,
        )

    def to_dict(self) -> dict:
        return {
            "power": self.power,
            "control": self.control,
            "malfunction_risk": self.malfunction_risk,
            "price": self.price,
        }


def _number(
    entry_id: str, d: dict, key: str, default: float = 0.0
) -> float:
    """Read a numeric catalog field; absent means ``default``."""
    if key not in d:
        return default
    value = d[key]
    # bool is an int subclass, and JSON strings are never coerced
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(
            f"Catalog entry '{entry_id}': {key} must be a number, "
            f"got {value!r}"
        )
    return float(value)


@dataclass
class CatalogItem:
    id: str
    shape: Shape
    name: str | None = None
    texture: str | None = None
    pixels_per_cell: float = DEFAULT_PIXELS_PER_CELL
    anchor: PixelPoint = field(default_factory=PixelPoint)
    stats: StatTotals = field(default_factory=StatTotals)

    @staticmethod
    def from_dict(d: dict) -> CatalogItem:
        # Local import: shapes.py imports Shape from this module.
        from .shapes import shape_from_matrix

        if "id" not in d:
            raise ValueError(f"Catalog entry is missing 'id': {d!r}")
        try:
            shape = shape_from_matrix(d.get("shape", []))
        except ValueError as e:
            raise ValueError(f"Catalog entry '{d['id']}': {e}") from e
        entry_id = str(d["id"])
        ppc = _number(
            entry_id, d, "texturePixelsPerCell", DEFAULT_PIXELS_PER_CELL
        )
        if ppc <= 0:
            raise ValueError(
                f"Catalog entry '{entry_id}': texturePixelsPerCell must be "
                f"positive, got {ppc:g}"
            )
        anchor = d.get("textureAnchor")
        if anchor is not None and not isinstance(anchor, dict):
            raise ValueError(
                f"Catalog entry '{entry_id}': textureAnchor must be an "
                f"object with x and y, got {anchor!r}"
            )
        try:
            anchor_point = PixelPoint.from_dict(anchor)
        except (TypeError, ValueError) as e:
            raise ValueError(
                f"Catalog entry '{entry_id}': bad textureAnchor: {e}"
            ) from e
        return CatalogItem(
            id=entry_id,
            shape=shape,
            name=d.get("name") or d.get("name_ru"),
            texture=d.get("texture"),
            pixels_per_cell=ppc,
            anchor=anchor_point,
            stats=StatTotals(
                power=_number(entry_id, d, "power"),
                control=_number(entry_id, d, "control"),
                malfunction_risk=_number(entry_id, d, "malfunction_risk"),
                price=_number(entry_id, d, "price"),
            ),
        )

    @property
    def display_name(self) -> str:
        return self.name or self.id


@dataclass
class Catalog:
    items: list[CatalogItem] = field(default_factory=list)
    name: str | None = None

    @staticmethod
    def from_dict(d: dict | list) -> Catalog:
        # Bare list: legacy blocks.json layout with no catalog name.
        if isinstance(d, list):
            entries, name = d, None
        else:
            entries, name = d.get("parts", []), d.get("name")
        items = [CatalogItem.from_dict(e) for e in entries]
        seen: set[str] = set()
        for item in items:
            if item.id in seen:
                raise ValueError(f"Duplicate catalog id: '{item.id}'")
            seen.add(item.id)
        return Catalog(items=items, name=name)

    def get(self, catalog_id: str) -> CatalogItem | None:
        for item in self.items:
            if item.id == catalog_id:
                return item
        return None


@dataclass(frozen=True)
class GridConfig:
    width: int
    height: int
    name: str | None = None
    texture: str | None = None

    @staticmethod
    def from_dict(d: dict) -> GridConfig:
        width = int(d["width"])
        height = int(d["height"])
        if width <= 0 or height <= 0:
            raise ValueError(
                f"Grid '{d.get('name')}' must have positive size, "
                f"got {width}x{height}"
            )
        return GridConfig(
            width=width,
            height=height,
            name=d.get("name"),
            texture=d.get("texture"),
        )


@dataclass
class PlacedEntity:
    id: int
    catalog_id: str
    shape: Shape
    position: GridPosition
    texture: TextureBinding
    rotation_deg: int = 0
    mirrored: bool = False

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "catalog_id": self.catalog_id,
            "shape": [[int(c) for c in row] for row in self.shape],
            "position": self.position.to_dict(),
            "rotation_deg": self.rotation_deg,
            "mirrored": self.mirrored,
            "texture": self.texture.to_dict(),
        }


@dataclass
class DragSession:
    """State of one pick-up-to-release gesture."""

    source_entity_id: int | None  # None for a fresh palette pick
    catalog_id: str
    live_shape: Shape
    texture: TextureBinding
    pointer_offset: PixelPoint
    pointer: PixelPoint
    live_rotation: int = 0
    live_mirror: bool = False
    preview_anchor: GridPosition | None = None
    feasible: bool = False
    conflict_cells: tuple[GridPosition, ...] = ()
    in_grid: bool = False

    @property
    def is_fresh(self) -> bool:
        return self.source_entity_id is None

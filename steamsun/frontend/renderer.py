"""Pillow rendering of a builder scene.

``BoardRenderer`` turns a ``Scene`` (see ``engine/scene.py``) into an RGBA
image: background, grid lines, placed part textures (or flat fills when a
part has no texture), cell highlights for the airborne part, and the
airborne part itself. Textures are drawn with ``Image.transform`` using the
inverse of the engine's texture matrix.

Kept free of tkinter so it can be tested headless; ``app.py`` wraps the
result in an ``ImageTk.PhotoImage``.
"""

from __future__ import annotations

import logging

from PIL import Image, ImageDraw

from ..engine.scene import CellState, Scene, Sprite
from ..engine.shapes import occupied_cells, shape_size
from ..engine.texture import binding_transform, pil_affine_data, translate
from ..engine.types import CatalogItem, GridConfig, TextureBinding

logger = logging.getLogger(__name__)

# -- Visual constants --

GRID_BG = (38, 36, 32, 255)
GRID_LINE = (24, 26, 21, 255)
GRID_BORDER = (75, 85, 99, 255)
PART_FILL = (66, 153, 225, 200)
PART_OUTLINE = (59, 130, 246, 255)
PREVIEW_FILL = (34, 197, 94, 26)
PREVIEW_OUTLINE = (74, 222, 128, 180)
CONFLICT_FILL = (239, 68, 68, 26)
CONFLICT_OUTLINE = (248, 113, 113, 180)
PREVIEW_OPACITY = 0.9


class TextureLibrary:
    """Lazy cache of texture images keyed by their file reference.

    Missing or unreadable files are logged once and then treated as "no
    texture", so the part is drawn as a flat fill instead.
    """

    def __init__(self, images: dict[str, Image.Image] | None = None):
        self._images: dict[str, Image.Image] = {
            ref: img.convert("RGBA") for ref, img in (images or {}).items()
        }
        self._missing: set[str] = set()

    def get(self, ref: str | None) -> Image.Image | None:
        if not ref or ref in self._missing:
            return None
        img = self._images.get(ref)
        if img is not None:
            return img
        try:
            with Image.open(ref) as f:
                img = f.convert("RGBA")
        except OSError as e:
            logger.warning("cannot load texture %s: %s", ref, e)
            self._missing.add(ref)
            return None
        self._images[ref] = img
        return img


def _with_opacity(img: Image.Image, opacity: float) -> Image.Image:
    alpha = img.getchannel("A").point(lambda a: int(a * opacity))
    out = img.copy()
    out.putalpha(alpha)
    return out


class BoardRenderer:
    """Renders a scene for one grid at a fixed cell size."""

    def __init__(
        self,
        grid: GridConfig,
        cell_size: float,
        textures: TextureLibrary | None = None,
    ):
        self.grid = grid
        self.cell_size = cell_size
        self.textures = textures or TextureLibrary()

    @property
    def size(self) -> tuple[int, int]:
        return (
            max(1, round(self.grid.width * self.cell_size)),
            max(1, round(self.grid.height * self.cell_size)),
        )

    def _cell_box(self, x, y, left=0.0, top=0.0):
        c = self.cell_size
        x0 = left + x * c
        y0 = top + y * c
        return [x0, y0, x0 + c - 1, y0 + c - 1]

    def render(self, scene: Scene) -> Image.Image:
        w, h = self.size
        img = Image.new("RGBA", (w, h), GRID_BG)

        # 1. Background texture, stretched over the whole grid
        bg = self.textures.get(self.grid.texture)
        if bg is not None:
            img.alpha_composite(bg.resize((w, h), Image.Resampling.BILINEAR))

        # 2. Grid lines
        draw = ImageDraw.Draw(img)
        for ix in range(1, self.grid.width):
            px = round(ix * self.cell_size)
            draw.line([(px, 0), (px, h - 1)], fill=GRID_LINE)
        for iy in range(1, self.grid.height):
            py = round(iy * self.cell_size)
            draw.line([(0, py), (w - 1, py)], fill=GRID_LINE)

        # 3. Placed parts
        for sprite in scene.sprites:
            self._draw_sprite(img, sprite)

        # 4. Preview / conflict highlights
        overlay = Image.new("RGBA", (w, h), (0, 0, 0, 0))
        odraw = ImageDraw.Draw(overlay)
        for y, row in enumerate(scene.cells):
            for x, state in enumerate(row):
                if state == CellState.PREVIEW:
                    odraw.rectangle(
                        self._cell_box(x, y),
                        fill=PREVIEW_FILL,
                        outline=PREVIEW_OUTLINE,
                        width=2,
                    )
                elif state == CellState.CONFLICT:
                    odraw.rectangle(
                        self._cell_box(x, y),
                        fill=CONFLICT_FILL,
                        outline=CONFLICT_OUTLINE,
                        width=2,
                    )
        img.alpha_composite(overlay)

        # 5. Airborne part on top
        if scene.preview is not None:
            self._draw_sprite(img, scene.preview, opacity=PREVIEW_OPACITY)

        # 6. Border
        ImageDraw.Draw(img).rectangle(
            [0, 0, w - 1, h - 1], outline=GRID_BORDER, width=2
        )
        return img

    def _draw_sprite(
        self, img: Image.Image, sprite: Sprite, opacity: float = 1.0
    ) -> None:
        tex = self.textures.get(sprite.texture)
        if tex is None:
            self._draw_cells(img, sprite, opacity)
            return
        full = translate(sprite.left, sprite.top) @ sprite.matrix
        layer = tex.transform(
            img.size,
            Image.Transform.AFFINE,
            pil_affine_data(full),
            resample=Image.Resampling.BILINEAR,
        )
        if opacity < 1.0:
            layer = _with_opacity(layer, opacity)
        img.alpha_composite(layer)

    def _draw_cells(
        self, img: Image.Image, sprite: Sprite, opacity: float
    ) -> None:
        overlay = Image.new("RGBA", img.size, (0, 0, 0, 0))
        draw = ImageDraw.Draw(overlay)
        fill = PART_FILL[:3] + (int(PART_FILL[3] * opacity),)
        for dx, dy in occupied_cells(sprite.shape):
            draw.rectangle(
                self._cell_box(dx, dy, sprite.left, sprite.top),
                fill=fill,
                outline=PART_OUTLINE,
            )
        img.alpha_composite(overlay)


def render_part_thumbnail(
    item: CatalogItem,
    cell_size: float,
    textures: TextureLibrary | None = None,
) -> Image.Image:
    """Palette thumbnail of a catalog part at rotation 0, unmirrored."""
    cols, rows = shape_size(item.shape)
    grid = GridConfig(width=max(cols, 1), height=max(rows, 1))
    renderer = BoardRenderer(grid, cell_size, textures)
    binding = TextureBinding(
        pixels_per_cell=item.pixels_per_cell,
        anchor=item.anchor,
        base_width=cols,
        base_height=rows,
    )
    sprite = Sprite(
        catalog_id=item.id,
        shape=item.shape,
        left=0.0,
        top=0.0,
        matrix=binding_transform(binding, cell_size, 0, False),
        texture=item.texture,
    )
    cells = [[CellState.EMPTY] * grid.width for _ in range(grid.height)]
    return renderer.render(Scene(cells=cells, sprites=[sprite]))

"""Tkinter GUI for the Steam Sun core builder.

Wires the headless engine (``engine/``) to a desktop window. The major
classes are:

  * ``SelectScreen``: pick which catalog parts will be available and which
    core grid preset to build on.
  * ``BuildScreen``: the board canvas, the part palette, the stat totals
    and the Clear/Back buttons. Mouse and key events are forwarded to a
    ``DragController``; after every event the scene is rebuilt and drawn by
    ``BoardRenderer``.
  * ``App``: the top-level window that switches between the two screens.

Drag listeners are bound with ``bind_all`` when a drag starts and unbound
by the controller when it returns to idle, so motion/release/R/F only
reach the engine while a part is airborne.
"""

from __future__ import annotations

import argparse
import logging
import tkinter as tk
from pathlib import Path
from tkinter import ttk

from PIL import ImageTk

from ..engine.catalog_io import load_catalog, load_grid_presets, palette_items
from ..engine.drag import DragController
from ..engine.scene import build_scene
from ..engine.stats import format_totals
from ..engine.types import Catalog, CatalogItem, GridConfig, PixelPoint
from ..logging_config import setup_logging
from .catalogs import DEFAULT_GRID, GRID_PRESETS, PART_CATALOGS
from .renderer import BoardRenderer, TextureLibrary, render_part_thumbnail

logger = logging.getLogger(__name__)

# -- Visual constants --

CANVAS_BG = "#111827"
GHOST_OUTLINE = "#4ade80"
PALETTE_CELL = 40
BOARD_MARGIN = 16
MIN_CELL_SIZE = 12

_DRAG_SEQUENCES = (
    "<B1-Motion>",
    "<ButtonRelease-1>",
    "<KeyPress-r>",
    "<KeyPress-R>",
    "<KeyPress-f>",
    "<KeyPress-F>",
)


# ---------------------------------------------------------------------------
# Pure helpers
# ---------------------------------------------------------------------------


def cell_size_for(window_width, grid_width):
    """Board cell size: half the window width shared across the columns."""
    if grid_width <= 0:
        return MIN_CELL_SIZE
    return max(MIN_CELL_SIZE, window_width / grid_width / 2)


def format_item_stats(item: CatalogItem) -> str:
    s = item.stats
    return (
        f"P: {s.power:g} • C: {s.control:g} • "
        f"MR: {s.malfunction_risk:g} • ${s.price:g}"
    )


def board_pointer(x_root, y_root, board_root_x, board_root_y):
    """Screen coordinates -> pixels relative to the grid's top-left."""
    return PixelPoint(
        x_root - board_root_x - BOARD_MARGIN,
        y_root - board_root_y - BOARD_MARGIN,
    )


# ---------------------------------------------------------------------------
# Select screen
# ---------------------------------------------------------------------------


class SelectScreen(ttk.Frame):
    def __init__(self, parent, catalog, grid_names, grid_name, on_confirm):
        super().__init__(parent, padding=10)
        self.catalog = catalog
        self._on_confirm = on_confirm
        self._vars: dict[str, tk.BooleanVar] = {}
        self.grid_var = tk.StringVar(value=grid_name)
        self._build(grid_names)

    def _build(self, grid_names):
        ttk.Label(
            self, text="Choose core parts", font=("TkDefaultFont", 14, "bold")
        ).grid(row=0, column=0, columnspan=2, sticky="w", pady=(0, 8))

        for i, item in enumerate(palette_items(self.catalog)):
            var = tk.BooleanVar(value=False)
            var.trace_add("write", self._update_confirm_state)
            self._vars[item.id] = var
            ttk.Checkbutton(
                self, text=item.display_name, variable=var
            ).grid(row=i + 1, column=0, sticky="w")
            ttk.Label(self, text=format_item_stats(item)).grid(
                row=i + 1, column=1, sticky="w", padx=(12, 0)
            )

        row = len(self._vars) + 1
        ttk.Label(self, text="Core grid:").grid(
            row=row, column=0, sticky="w", pady=(12, 0)
        )
        ttk.Combobox(
            self,
            textvariable=self.grid_var,
            values=list(grid_names),
            state="readonly",
            width=20,
        ).grid(row=row, column=1, sticky="w", pady=(12, 0))

        self.confirm_btn = ttk.Button(
            self, text="Build", command=self._confirm, state="disabled"
        )
        self.confirm_btn.grid(
            row=row + 1, column=0, columnspan=2, sticky="we", pady=(12, 0)
        )

    @property
    def selected_ids(self) -> list[str]:
        return [pid for pid, var in self._vars.items() if var.get()]

    def _update_confirm_state(self, *_args):
        state = "normal" if self.selected_ids else "disabled"
        self.confirm_btn.config(state=state)

    def _confirm(self):
        if self.selected_ids:
            self._on_confirm(self.selected_ids, self.grid_var.get())


# ---------------------------------------------------------------------------
# Build screen
# ---------------------------------------------------------------------------


class BuildScreen(ttk.Frame):
    def __init__(
        self,
        parent,
        catalog: Catalog,
        items: list[CatalogItem],
        grid: GridConfig,
        textures: TextureLibrary,
        on_back,
    ):
        super().__init__(parent, padding=10)
        self.catalog = catalog
        self.items = items
        self.grid_config = grid
        self.textures = textures
        self._on_back = on_back

        cell = cell_size_for(parent.winfo_width(), grid.width)
        self.controller = DragController(
            grid.width,
            grid.height,
            cell,
            bind_drag_events=self._bind_drag_events,
        )
        self.renderer = BoardRenderer(grid, cell, textures)
        self._board_photo = None  # prevent GC
        self._thumbnails = []  # prevent GC of PhotoImage refs

        self._build()
        self.canvas.bind("<ButtonPress-1>", self._on_board_press)
        self.canvas.bind("<Configure>", self._on_configure)
        self._render()

    def _build(self):
        left = ttk.Frame(self)
        left.pack(side=tk.LEFT, fill=tk.BOTH, expand=True)

        title = f"Core grid {self.grid_config.width}x{self.grid_config.height}"
        ttk.Label(left, text=title, font=("TkDefaultFont", 13, "bold")).pack(
            side=tk.TOP, anchor="w"
        )
        self.canvas = tk.Canvas(left, bg=CANVAS_BG, highlightthickness=0)
        self.canvas.pack(side=tk.TOP, fill=tk.BOTH, expand=True, pady=4)

        self.stats_label = ttk.Label(left, text="")
        self.stats_label.pack(side=tk.TOP, anchor="w")

        buttons = ttk.Frame(left)
        buttons.pack(side=tk.TOP, fill=tk.X, pady=(6, 0))
        ttk.Button(buttons, text="← Back", command=self._back).pack(
            side=tk.LEFT
        )
        ttk.Button(buttons, text="Clear grid", command=self._on_clear).pack(
            side=tk.RIGHT
        )

        palette = ttk.Frame(self, padding=(10, 0))
        palette.pack(side=tk.RIGHT, fill=tk.Y)
        ttk.Label(
            palette, text="Core parts", font=("TkDefaultFont", 13, "bold")
        ).pack(side=tk.TOP)
        ttk.Label(palette, text="Drag a part onto the grid").pack(side=tk.TOP)
        ttk.Label(palette, text="R: rotate   F: mirror").pack(
            side=tk.TOP, pady=(0, 8)
        )
        for item in self.items:
            img = render_part_thumbnail(item, PALETTE_CELL, self.textures)
            photo = ImageTk.PhotoImage(img)
            self._thumbnails.append(photo)
            label = tk.Label(
                palette, image=photo, bg=CANVAS_BG, cursor="fleur"
            )
            label.pack(side=tk.TOP, pady=6)
            label.bind(
                "<ButtonPress-1>",
                lambda e, it=item: self._on_palette_press(it, e),
            )

    # -- event plumbing --

    def _pointer(self, event) -> PixelPoint:
        return board_pointer(
            event.x_root,
            event.y_root,
            self.canvas.winfo_rootx(),
            self.canvas.winfo_rooty(),
        )

    def _bind_drag_events(self):
        """Bind global drag listeners; returns the matching unbind."""
        self.canvas.focus_set()
        self.bind_all("<B1-Motion>", self._on_drag_motion)
        self.bind_all("<ButtonRelease-1>", self._on_drag_release)
        for seq in _DRAG_SEQUENCES[2:]:
            self.bind_all(seq, self._on_drag_key)

        def unbind():
            for seq in _DRAG_SEQUENCES:
                self.unbind_all(seq)

        return unbind

    def _on_palette_press(self, item, event):
        grab = PixelPoint(event.x, event.y)
        if self.controller.pick_from_palette(item, self._pointer(event), grab):
            self._render()

    def _on_board_press(self, event):
        if self.controller.pick_from_grid(self._pointer(event)):
            self._render()

    def _on_drag_motion(self, event):
        self.controller.move(self._pointer(event))
        self._render()

    def _on_drag_key(self, event):
        if self.controller.handle_key(event.keysym):
            self._render()

    def _on_drag_release(self, _event):
        self.controller.release()
        self._render()

    def _on_clear(self):
        self.controller.clear()
        self._render()

    def _back(self):
        self.controller.clear()
        self._on_back()

    def _on_configure(self, _event):
        """Recompute the cell size from the window width and re-render."""
        cell = cell_size_for(
            self.winfo_toplevel().winfo_width(), self.grid_config.width
        )
        if abs(cell - self.controller.cell_size) < 0.5:
            return
        self.controller.set_cell_size(cell)
        self.renderer = BoardRenderer(self.grid_config, cell, self.textures)
        self._render()

    # -- drawing --

    def _render(self):
        scene = build_scene(self.controller, self.catalog)
        img = self.renderer.render(scene)
        self._board_photo = ImageTk.PhotoImage(img)
        self.canvas.delete("all")
        self.canvas.create_image(
            BOARD_MARGIN, BOARD_MARGIN, image=self._board_photo, anchor="nw"
        )
        # Floating ghost outline so the part stays visible off the board.
        preview = scene.preview
        if preview is not None and preview.floating:
            c = scene.cell_size
            for dy, row in enumerate(preview.shape):
                for dx, filled in enumerate(row):
                    if not filled:
                        continue
                    x0 = BOARD_MARGIN + preview.left + dx * c
                    y0 = BOARD_MARGIN + preview.top + dy * c
                    self.canvas.create_rectangle(
                        x0, y0, x0 + c, y0 + c, outline=GHOST_OUTLINE, width=2
                    )
        self.stats_label.config(text=format_totals(scene.totals))


# ---------------------------------------------------------------------------
# Main application
# ---------------------------------------------------------------------------


class App:
    def __init__(
        self,
        catalog: Catalog,
        grids: dict[str, GridConfig],
        grid_name: str,
    ):
        self.root = tk.Tk()
        self.root.title("Steam Sun: core builder")
        self.root.geometry("1280x720")
        self.root.resizable(True, True)

        style = ttk.Style()
        style.theme_use("clam")

        self.catalog = catalog
        self.grids = grids
        self.grid_name = grid_name if grid_name in grids else next(iter(grids))
        self.textures = TextureLibrary()
        self._screen = None

        self.root.after(50, self._show_select)

    def _swap(self, screen):
        if self._screen is not None:
            self._screen.destroy()
        self._screen = screen
        screen.pack(fill=tk.BOTH, expand=True)

    def _show_select(self):
        self._swap(
            SelectScreen(
                self.root,
                self.catalog,
                list(self.grids),
                self.grid_name,
                on_confirm=self._show_build,
            )
        )

    def _show_build(self, selected_ids, grid_name):
        self.grid_name = grid_name
        grid = self.grids[grid_name]
        logger.info(
            "building on %s (%dx%d) with %d parts",
            grid_name,
            grid.width,
            grid.height,
            len(selected_ids),
        )
        self._swap(
            BuildScreen(
                self.root,
                self.catalog,
                palette_items(self.catalog, selected_ids),
                grid,
                self.textures,
                on_back=self._show_select,
            )
        )

    def run(self):
        self.root.mainloop()


def _parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Steam Sun core builder")
    parser.add_argument(
        "--catalog",
        type=Path,
        help="Part catalog JSON (default: built-in core parts)",
    )
    parser.add_argument(
        "--grids",
        type=Path,
        help="Grid presets JSON (default: built-in presets)",
    )
    parser.add_argument(
        "--grid", default=DEFAULT_GRID, help="Grid preset selected on start"
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
    )
    parser.add_argument("--log-file", help="Also write logs to this file")
    return parser.parse_args(argv)


def main(argv=None):
    args = _parse_args(argv)
    setup_logging(getattr(logging, args.log_level), args.log_file)

    if args.catalog:
        catalog = load_catalog(args.catalog)
    else:
        catalog = next(iter(PART_CATALOGS.values()))
    if args.grids:
        grids = {
            g.name or f"{g.width}x{g.height}": g
            for g in load_grid_presets(args.grids)
        }
    else:
        grids = GRID_PRESETS
    if not grids:
        raise SystemExit("No grid presets available")

    App(catalog, grids, args.grid).run()


if __name__ == "__main__":
    main()

"""Tkinter window with one canvas per wall and draggable openings."""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional, Sequence

from core.calculator import calculate_tiles
from core.config import load_materials
from core.drag import DragController
from core.models import TileParams, TileResult, Wall
from core.openings import OpeningRegistry
from core.preview import PreviewController, PreviewRenderer
from core.scheduling import FrameScheduler

logger = logging.getLogger(__name__)


class TkFrameClock:
    """Next-frame scheduling on top of a widget's idle queue."""

    def __init__(self, widget):
        self.widget = widget

    def request_frame(self, callback: Callable[[], None]) -> Any:
        return self.widget.after_idle(callback)

    def cancel_frame(self, handle: Any) -> None:
        self.widget.after_cancel(handle)


def status_text(result: TileResult) -> str:
    return (
        f"Tiles: {result.final_count}  (base {result.base_count}, +{result.waste_tiles} waste)   "
        f"Boxes: {result.box_count}   Net: {result.net_area:.2f} m2"
    )


class PreviewWindow:
    def __init__(
        self,
        root,
        walls: Sequence[Wall],
        registry: OpeningRegistry,
        params: TileParams,
        pattern: Optional[str] = None,
    ):
        import tkinter as tk

        self._tk = tk
        self.root = root
        self.walls = list(walls)
        self.registry = registry
        self.params = params
        self.pattern = pattern
        self.settings = load_materials().preview

        self.row = tk.Frame(root)
        self.row.pack(fill="both", expand=True)
        self.status = tk.Label(root, anchor="w")
        self.status.pack(fill="x")

        self.renderer = PreviewRenderer(registry, self._make_canvas, dispose_surface=lambda c: c.destroy())
        self.renderer.set_tile(params)
        self.controller = PreviewController(self.renderer, lambda: self.walls, FrameScheduler(TkFrameClock(root)))
        self.drag = DragController(
            registry, self.renderer, lambda: self.walls, self.controller.request_render, self.refresh_estimate
        )

        root.bind("<Configure>", lambda _e: self.controller.request_render())

    def _make_canvas(self, wall_index: int):
        canvas = self._tk.Canvas(
            self.row,
            width=self.settings.fallback_width_px,
            height=self.settings.panel_height_px,
            highlightthickness=0,
        )
        canvas.pack(side="left", fill="both", expand=True)
        canvas.bind("<ButtonPress-1>", lambda e: self.drag.press(wall_index, e.x, e.y))
        canvas.bind("<B1-Motion>", lambda e: self.drag.move(e.x, e.y))
        canvas.bind("<ButtonRelease-1>", lambda _e: self.drag.release())
        return canvas

    def refresh_estimate(self) -> TileResult:
        result = calculate_tiles(
            self.walls, self.registry.openings_for_estimate(self.walls), self.params, self.pattern
        )
        self.status.config(text=status_text(result))
        return result

    def show(self) -> None:
        self.controller.request_render()
        self.refresh_estimate()


def run_preview(
    walls: Sequence[Wall],
    registry: OpeningRegistry,
    params: TileParams,
    pattern: Optional[str] = None,
) -> None:
    import tkinter as tk

    root = tk.Tk()
    root.title("Wall preview")
    window = PreviewWindow(root, walls, registry, params, pattern)
    window.show()
    logger.info("Preview opened with %d walls", len(window.walls))
    root.mainloop()

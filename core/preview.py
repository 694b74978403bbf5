# core/preview.py
# Scaled wall previews. Surfaces follow the tkinter Canvas API
# (winfo_width / winfo_height / create_* / delete), so a real tk.Canvas,
# the RecordingSurface below or a test double can all be drawn on.

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any, Callable, Optional, Sequence

from .config import PreviewSettings, load_materials
from .geometry import Mapping, forward
from .models import Opening, TileParams, Wall, WallpaperParams
from .openings import OpeningRegistry, clamp_to_wall
from .rules import ceil_count, effective_strip_height, strips_per_roll
from .scheduling import FrameScheduler

logger = logging.getLogger(__name__)

COLORS = {
    "bg": "#0f1117",
    "tile_a": "#242d40",
    "tile_b": "#1e2535",
    "grout": "#0f1117",
    "opening": "#0d1219",
    "blue": "#3b82f6",
    "amber": "#f59e0b",
    "rose": "#f43f5e",
    "text": "#64748b",
    "label": "#94a3b8",
    "strip_a": "#1c2535",
    "strip_b": "#242d40",
}

FONT = ("JetBrains Mono", 11)
TITLE_FONT = ("JetBrains Mono", 13, "bold")

OPENING_LABELS = {"door": "DOOR", "window": "WIN", "mirror": "MIR"}


class RecordingSurface:
    """Headless canvas: remembers every item instead of painting it."""

    def __init__(self, width: float = 0, height: float = 0):
        self.width = width
        self.height = height
        self.items: list[dict[str, Any]] = []

    def winfo_width(self) -> float:
        return self.width

    def winfo_height(self) -> float:
        return self.height

    def _add(self, kind: str, coords: Sequence[float], options: dict[str, Any]) -> int:
        self.items.append({"kind": kind, "coords": [float(c) for c in coords], "options": options})
        return len(self.items)

    def create_rectangle(self, *coords: float, **options: Any) -> int:
        return self._add("rectangle", coords, options)

    def create_line(self, *coords: float, **options: Any) -> int:
        return self._add("line", coords, options)

    def create_text(self, *coords: float, **options: Any) -> int:
        return self._add("text", coords, options)

    def delete(self, tag: str) -> None:
        if tag == "all":
            self.items.clear()
        else:
            self.items = [i for i in self.items if tag not in i["options"].get("tags", ())]

    def with_tag(self, tag: str) -> list[dict[str, Any]]:
        return [i for i in self.items if tag in i["options"].get("tags", ())]


def measure(surface: Any, fallback_w: float, fallback_h: float) -> tuple[float, float, bool]:
    """Resolved pixel size of a surface.

    tkinter reports 1x1 until the widget is laid out. In that case the
    fallback size is used and the third value is True; callers must treat
    such a draw as provisional.
    """
    width = surface.winfo_width()
    height = surface.winfo_height()
    used_fallback = False
    if width <= 1:
        width = fallback_w
        used_fallback = True
    if height <= 1:
        height = fallback_h
        used_fallback = True
    return width, height, used_fallback


@dataclass
class WallPanel:
    wall_index: int
    wall: Wall
    surface: Any

    # set by the last draw; hit-tests must use exactly this
    mapping: Optional[Mapping] = None
    used_fallback: bool = False


class PreviewRenderer:
    """One panel per measurable wall, drawn in two phases: layout() then draw()."""

    def __init__(
        self,
        registry: OpeningRegistry,
        surface_factory: Callable[[int], Any],
        dispose_surface: Optional[Callable[[Any], None]] = None,
        settings: Optional[PreviewSettings] = None,
    ):
        materials = load_materials()
        self.registry = registry
        self.settings = settings or materials.preview
        self._surface_factory = surface_factory
        self._dispose_surface = dispose_surface
        self._panels: dict[int, WallPanel] = {}

        self.tile_length_m = materials.tile.tile_length_cm / 100
        self.tile_width_m = materials.tile.tile_width_cm / 100
        self.grout_m = materials.tile.grout_mm / 1000

    def set_tile(self, params: TileParams) -> None:
        """Empty tile fields fall back to the configured defaults (preview only)."""
        defaults = load_materials().tile
        self.tile_length_m = (params.tile_length_cm or defaults.tile_length_cm) / 100
        self.tile_width_m = (params.tile_width_cm or defaults.tile_width_cm) / 100
        self.grout_m = (params.grout_mm or defaults.grout_mm) / 1000

    @property
    def panels(self) -> list[WallPanel]:
        return [self._panels[i] for i in sorted(self._panels)]

    def panel_for(self, wall_index: int) -> Optional[WallPanel]:
        return self._panels.get(wall_index)

    # ---------- PHASE 1 ----------

    def layout(self, walls: Sequence[Wall]) -> list[WallPanel]:
        """Create / reuse / drop panels so there is one per measurable wall."""
        wanted = {i: w for i, w in enumerate(walls) if w.is_measurable}

        for index in [i for i in self._panels if i not in wanted]:
            panel = self._panels.pop(index)
            if self._dispose_surface is not None:
                self._dispose_surface(panel.surface)

        for index, wall in wanted.items():
            panel = self._panels.get(index)
            if panel is None:
                self._panels[index] = WallPanel(index, wall, self._surface_factory(index))
            else:
                panel.wall = wall

        return self.panels

    # ---------- PHASE 2 ----------

    def draw(self) -> None:
        for panel in self.panels:
            self.draw_panel(panel)

    def draw_panel(self, panel: WallPanel) -> Optional[Mapping]:
        s = self.settings
        width, height, used_fallback = measure(panel.surface, s.fallback_width_px, s.fallback_height_px)
        if used_fallback:
            logger.warning(
                "Wall %d surface not laid out yet, drawing at fallback %gx%g px",
                panel.wall_index + 1, width, height,
            )

        mapping = forward(
            panel.wall.width_m, panel.wall.height_m, width, height, s.padding_px, s.label_reserve_px
        )
        panel.mapping = mapping
        panel.used_fallback = used_fallback

        surface = panel.surface
        surface.delete("all")
        surface.create_rectangle(0, 0, width, height, fill=COLORS["bg"], outline="", tags=("bg",))

        title = f"Wall {panel.wall_index + 1}"
        if mapping is None:
            surface.create_text(width / 2, height / 2 - 10, text=title, fill=COLORS["text"], font=FONT, tags=("label",))
            surface.create_text(
                width / 2, height / 2 + 10, text="(enter dimensions)", fill=COLORS["text"], font=FONT, tags=("label",)
            )
            return None

        wall = panel.wall
        x0, y0, x1, y1 = mapping.rect_to_px(0, 0, wall.width_m, wall.height_m)

        self._draw_tiles(surface, mapping, x0, y0, x1, y1)
        surface.create_rectangle(x0, y0, x1, y1, outline=COLORS["blue"], width=2, tags=("wall",))

        surface.create_text(
            (x0 + x1) / 2, y1 + 20, text=f"{wall.width_m:.2f} m", fill=COLORS["text"], font=FONT, tags=("label",)
        )
        surface.create_text(
            x0 - 20, (y0 + y1) / 2, text=f"{wall.height_m:.2f} m", angle=90,
            fill=COLORS["text"], font=FONT, tags=("label",),
        )

        for opening in self.registry.for_wall(panel.wall_index):
            # reassigned or shrunk-wall openings get pulled back inside here
            opening.x_m, opening.y_m = clamp_to_wall(
                opening.x_m, opening.y_m, opening.width_m, opening.height_m, wall
            )
            self._draw_opening(surface, mapping, opening)

        surface.create_text(
            width / 2, s.label_reserve_px - 10,
            text=f"{title} ({wall.width_m:.2f} x {wall.height_m:.2f} m)",
            fill=COLORS["label"], font=TITLE_FONT, tags=("label", "title"),
        )
        return mapping

    def _draw_tiles(self, surface: Any, mapping: Mapping, x0: float, y0: float, x1: float, y1: float) -> None:
        tpx = self.tile_length_m * mapping.scale
        tpy = self.tile_width_m * mapping.scale
        gpx = max(0.5, self.grout_m * mapping.scale)
        step_x = tpx + gpx
        step_y = tpy + gpx

        cols = math.ceil((x1 - x0) / step_x) if tpx > 0 else 0
        rows = math.ceil((y1 - y0) / step_y) if tpy > 0 else 0
        if cols * rows == 0 or cols * rows > self.settings.max_tile_items:
            # too fine to draw tile by tile
            surface.create_rectangle(x0, y0, x1, y1, fill=COLORS["tile_a"], outline="", tags=("tile",))
            return

        # tiles are clipped to the wall rectangle by hand; tk has no clip paths
        for row in range(rows):
            ty = y0 + row * step_y
            for col in range(cols):
                tx = x0 + col * step_x
                surface.create_rectangle(
                    tx, ty, min(tx + tpx, x1), min(ty + tpy, y1),
                    fill=COLORS["tile_a"] if (row + col) % 2 == 0 else COLORS["tile_b"],
                    outline="", tags=("tile",),
                )

        for row in range(rows + 1):
            gy = y0 + row * step_y
            if gy <= y1:
                surface.create_line(x0, gy, x1, gy, fill=COLORS["grout"], width=gpx, tags=("grout",))
        for col in range(cols + 1):
            gx = x0 + col * step_x
            if gx <= x1:
                surface.create_line(gx, y0, gx, y1, fill=COLORS["grout"], width=gpx, tags=("grout",))

    def _draw_opening(self, surface: Any, mapping: Mapping, opening: Opening) -> None:
        ox0, oy0, ox1, oy1 = mapping.rect_to_px(opening.x_m, opening.y_m, opening.width_m, opening.height_m)
        tags = ("opening", f"opening-{opening.id}")
        surface.create_rectangle(ox0, oy0, ox1, oy1, fill=COLORS["opening"], outline=COLORS["amber"], width=1.5, tags=tags)
        size = max(6, int(min(12, (ox1 - ox0) * 0.3)))
        surface.create_text(
            (ox0 + ox1) / 2, (oy0 + oy1) / 2, text=OPENING_LABELS.get(opening.kind, "?"),
            fill=COLORS["amber"], font=(FONT[0], size), tags=tags,
        )

    # ---------- HIT-TEST ----------

    def hit_test(self, wall_index: int, px_x: float, px_y: float) -> Optional[Opening]:
        """Topmost opening under the pointer, using the panel's last draw mapping."""
        panel = self._panels.get(wall_index)
        if panel is None or panel.mapping is None:
            return None
        for opening in reversed(self.registry.for_wall(wall_index)):
            if panel.mapping.contains(px_x, px_y, opening.x_m, opening.y_m, opening.width_m, opening.height_m):
                return opening
        return None


class PreviewController:
    """Layout now, draw on the next frame; bursts of requests draw once."""

    def __init__(self, renderer: PreviewRenderer, walls: Callable[[], Sequence[Wall]], scheduler: FrameScheduler):
        self.renderer = renderer
        self._walls = walls
        self.scheduler = scheduler

    def request_render(self) -> None:
        self.renderer.layout(self._walls())
        self.scheduler.request(self.renderer.draw)


class WallpaperPreview:
    """Single-wall wallpaper preview: strips shaded per roll, roll markers on top."""

    def __init__(self, settings: Optional[PreviewSettings] = None):
        self.settings = settings or load_materials().preview
        self.mapping: Optional[Mapping] = None

    def draw(self, surface: Any, params: WallpaperParams) -> Optional[Mapping]:
        s = self.settings
        width = surface.winfo_width()
        if width <= 1:
            width = s.wallpaper_fallback_width_px
            logger.warning("Wallpaper surface not laid out yet, using fallback width %g px", width)
        height = surface.winfo_height()
        if height <= 1:
            height = round(width * s.wallpaper_aspect)

        surface.delete("all")
        surface.create_rectangle(0, 0, width, height, fill=COLORS["bg"], outline="", tags=("bg",))

        defaults = load_materials().wallpaper
        wall_w = params.wall_width_m
        wall_h = params.wall_height_m or defaults.wall_height_m
        roll_w = params.roll_width_m or defaults.roll_width_m
        roll_l = params.roll_length_m or defaults.roll_length_m

        self.mapping = forward(wall_w, wall_h, width, height, s.wallpaper_padding_px, 0)
        if self.mapping is None:
            return None

        m = self.mapping
        x0, y0, x1, y1 = m.rect_to_px(0, 0, wall_w, wall_h)
        total_strips = max(1, ceil_count(wall_w / roll_w))
        per_roll = strips_per_roll(roll_l, effective_strip_height(wall_h, params.pattern_repeat_cm))
        strip_px = (x1 - x0) / total_strips

        step = max(1.0, params.pattern_repeat_cm / 100 * m.scale)
        rapport_rows = math.ceil((y1 - y0) / step) if params.pattern_repeat_cm > 0 else 0
        detailed = total_strips * (2 + rapport_rows) <= s.max_tile_items

        if not detailed:
            # too many strips to draw one by one
            surface.create_rectangle(x0, y0, x1, y1, fill=COLORS["strip_a"], outline="", tags=("strip",))

        for i in range(total_strips if detailed else 0):
            sx = x0 + i * strip_px
            roll_idx = i // per_roll if per_roll > 0 else 0
            surface.create_rectangle(
                sx, y0, min(sx + strip_px, x1), y1,
                fill=COLORS["strip_a"] if roll_idx % 2 == 0 else COLORS["strip_b"],
                outline="", tags=("strip",),
            )
            surface.create_line(sx, y0, sx, y1, fill=COLORS["bg"], width=1.2, tags=("strip",))

            if rapport_rows:
                ry = y0
                while ry < y1:
                    surface.create_line(
                        sx + 2, ry, sx + strip_px - 2, ry, fill=COLORS["rose"], width=0.8,
                        dash=(3, 5), tags=("rapport",),
                    )
                    ry += step

            if strip_px > 14:
                surface.create_text(
                    sx + strip_px / 2, (y0 + y1) / 2, text=str(i + 1),
                    fill=COLORS["text"], font=(FONT[0], 9), tags=("label",),
                )

        surface.create_rectangle(x0, y0, x1, y1, outline=COLORS["rose"], width=1.5, tags=("wall",))
        surface.create_text(
            width / 2, y1 + 16, text=f"{wall_w:.2f} m ({total_strips} strips)",
            fill=COLORS["text"], font=FONT, tags=("label",),
        )
        surface.create_text(
            x0 - 18, (y0 + y1) / 2, text=f"{wall_h:.2f} m", angle=90,
            fill=COLORS["text"], font=FONT, tags=("label",),
        )

        if per_roll > 0 and detailed:
            for roll_no, i in enumerate(range(per_roll, total_strips, per_roll), start=2):
                rx = x0 + i * strip_px
                surface.create_line(rx, y0 - 4, rx, y1, fill=COLORS["amber"], dash=(5, 4), tags=("roll",))
                surface.create_text(rx, y0 - 7, text=f"R{roll_no}", fill=COLORS["amber"], font=FONT, tags=("roll",))

        surface.create_text(
            x1 - 5, y0 + 12, text=f"{wall_w * wall_h:.2f} m2", anchor="e",
            fill=COLORS["rose"], font=FONT, tags=("label", "area"),
        )
        return m

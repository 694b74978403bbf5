# core/geometry.py
# Meters <-> canvas pixels. The renderer and the drag hit-test must both go
# through the same Mapping, otherwise openings land in the wrong place.

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Mapping:
    """Uniform scale plus the pixel origin of the wall's top-left corner."""

    scale: float
    origin_x: float
    origin_y: float

    # inputs kept so a hit-test can check it matches the draw
    canvas_width: float
    canvas_height: float
    padding: float
    label_reserve: float

    def to_px(self, x_m: float, y_m: float) -> tuple[float, float]:
        return self.origin_x + x_m * self.scale, self.origin_y + y_m * self.scale

    def to_meters(self, px_x: float, px_y: float) -> tuple[float, float]:
        return (px_x - self.origin_x) / self.scale, (px_y - self.origin_y) / self.scale

    def rect_to_px(self, x_m: float, y_m: float, w_m: float, h_m: float) -> tuple[float, float, float, float]:
        """(x0, y0, x1, y1) in pixels."""
        x0, y0 = self.to_px(x_m, y_m)
        return x0, y0, x0 + w_m * self.scale, y0 + h_m * self.scale

    def contains(self, px_x: float, px_y: float, x_m: float, y_m: float, w_m: float, h_m: float) -> bool:
        """True when the pixel point falls on the metric rectangle (edges included)."""
        x0, y0, x1, y1 = self.rect_to_px(x_m, y_m, w_m, h_m)
        return x0 <= px_x <= x1 and y0 <= px_y <= y1


def forward(
    wall_width_m: float,
    wall_height_m: float,
    canvas_width_px: float,
    canvas_height_px: float,
    padding_px: float = 0.0,
    label_reserve_px: float = 0.0,
) -> Optional[Mapping]:
    """Fit a wall into a canvas, keeping its aspect ratio.

    The scale is the tighter of the two axis constraints. The drawn
    rectangle is centered horizontally; vertically ``label_reserve_px`` is
    kept free at the top and the rectangle is centered in the rest.

    Returns None when nothing can be drawn (non-positive wall or canvas, or
    padding eating the whole canvas).
    """
    if wall_width_m <= 0 or wall_height_m <= 0:
        return None
    if canvas_width_px <= 0 or canvas_height_px <= 0:
        return None

    avail_w = canvas_width_px - 2 * padding_px
    avail_h = canvas_height_px - 2 * padding_px - label_reserve_px
    if avail_w <= 0 or avail_h <= 0:
        return None

    scale = min(avail_w / wall_width_m, avail_h / wall_height_m)
    draw_w = wall_width_m * scale
    draw_h = wall_height_m * scale

    return Mapping(
        scale=scale,
        origin_x=(canvas_width_px - draw_w) / 2,
        origin_y=label_reserve_px + (canvas_height_px - label_reserve_px - draw_h) / 2,
        canvas_width=canvas_width_px,
        canvas_height=canvas_height_px,
        padding=padding_px,
        label_reserve=label_reserve_px,
    )


def inverse(px_x: float, px_y: float, mapping: Mapping) -> tuple[float, float]:
    return mapping.to_meters(px_x, px_y)

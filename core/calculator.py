from __future__ import annotations

import logging
from typing import Iterable, Optional

from .models import Opening, TileParams, TileResult, Wall, WallpaperParams, WallpaperResult
from .rules import (
    ceil_count,
    effective_strip_height,
    resolve_waste,
    strips_per_roll,
    wall_tile_count,
    with_waste,
)

logger = logging.getLogger(__name__)


def gross_area(walls: Iterable[Wall]) -> float:
    return sum(w.area for w in walls if w.is_measurable)


def total_deduction(openings: Iterable[Opening]) -> float:
    return sum(o.area for o in openings)


def calculate_tiles(
    walls: Iterable[Wall],
    openings: Iterable[Opening],
    params: TileParams,
    pattern: Optional[str] = None,
) -> TileResult:
    notes: list[str] = []

    walls = [w for w in walls if w.is_measurable]
    openings = list(openings)

    tile_l = params.tile_length_m
    tile_w = params.tile_width_m
    tile_area = tile_l * tile_w if tile_l > 0 and tile_w > 0 else 0.0
    waste = resolve_waste(params.waste_percent, pattern)

    if not walls:
        notes.append("No walls entered.")
    if tile_area == 0:
        notes.append("Tile size missing.")

    gross = 0.0
    base = 0.0
    for wall in walls:
        gross += wall.area
        base += wall_tile_count(wall.width_m, wall.height_m, tile_l, tile_w)

    deduction = total_deduction(openings)
    net = max(0.0, gross - deduction)

    # Openings come off the count by area, not by which tiles they cover
    if gross > 0 and deduction > 0 and tile_area > 0:
        base = max(0.0, base - deduction / tile_area)

    base_count = ceil_count(base)
    final_count = ceil_count(with_waste(base, waste))
    purchase_area = final_count * tile_area
    box_count = ceil_count(purchase_area / params.sqm_per_box) if params.sqm_per_box > 0 else 0

    if params.waste_percent is None and pattern is None:
        notes.append("Waste not set, using 0%.")

    logger.debug(
        "tiles: %d walls, gross=%.3f deduction=%.3f base=%.3f final=%d",
        len(walls), gross, deduction, base, final_count,
    )

    return TileResult(
        gross_area=gross,
        total_deduction=deduction,
        net_area=net,
        raw_base_count=base,
        base_count=base_count,
        final_count=final_count,
        waste_tiles=final_count - base_count,
        tile_area=tile_area,
        purchase_area=purchase_area,
        box_count=box_count,
        waste_percent=waste,
        notes=notes,
    )


def calculate_quick(
    area_m2: float,
    openings: Iterable[Opening],
    params: TileParams,
    pattern: Optional[str] = None,
) -> TileResult:
    """Quick mode: the whole area as one virtual wall, area x 1 m."""
    if area_m2 <= 0:
        return TileResult(notes=["No area entered."])
    return calculate_tiles([Wall(width_m=area_m2, height_m=1)], openings, params, pattern)


def calculate_wallpaper(params: WallpaperParams) -> WallpaperResult:
    wall_area = params.wall_width_m * params.wall_height_m

    total_strips = (
        ceil_count(params.wall_width_m / params.roll_width_m)
        if params.roll_width_m > 0 and params.wall_width_m > 0
        else 0
    )
    strip_height = effective_strip_height(params.wall_height_m, params.pattern_repeat_cm)
    per_roll = strips_per_roll(params.roll_length_m, strip_height)
    total_rolls = ceil_count(total_strips / per_roll) if per_roll > 0 else 0

    purchased = total_rolls * params.roll_width_m * params.roll_length_m
    waste_pct = (purchased - wall_area) / purchased * 100 if purchased > 0 else 0.0

    logger.debug(
        "wallpaper: strips=%d per_roll=%d rolls=%d", total_strips, per_roll, total_rolls,
    )

    return WallpaperResult(
        wall_area=wall_area,
        total_strips=total_strips,
        strips_per_roll=per_roll,
        total_rolls=total_rolls,
        effective_strip_height=strip_height,
        total_purchased_area=purchased,
        waste_percent=waste_pct,
        total_price=total_rolls * params.roll_price,
    )

# core/rules.py
# Counting rules shared by the tile and wallpaper estimators.

from __future__ import annotations

import math

from .config import LayoutPattern, load_materials

# float noise allowed when deciding "divides evenly" / rounding up
EPSILON = 1e-9

# flat reserve per strip when the wallpaper pattern has to be matched
PATTERN_REPEAT_RESERVE_M = 0.80


def ceil_count(value: float) -> int:
    """ceil() that ignores float noise: 93.0000000001 -> 93, not 94."""
    return math.ceil(value - EPSILON)


def half_up_count(count: float) -> float:
    """Tiles along one axis.

    Exact fit keeps the count; a remainder over half a tile takes a whole
    extra tile; a remainder of half a tile or less takes only half a tile.
    """
    frac = count % 1
    if frac < EPSILON or frac > 1 - EPSILON:
        return float(round(count))
    if frac > 0.5:
        return float(math.ceil(count))
    return math.floor(count) + 0.5


def wall_tile_count(width_m: float, height_m: float, tile_length_m: float, tile_width_m: float) -> float:
    """Tile length runs along the wall width, tile width along the height."""
    if width_m <= 0 or height_m <= 0 or tile_length_m <= 0 or tile_width_m <= 0:
        return 0.0
    return half_up_count(width_m / tile_length_m) * half_up_count(height_m / tile_width_m)


def with_waste(count: float, waste_pct: float) -> float:
    """Quantity incl. waste = count * (1 + waste%)."""
    return count * (1 + waste_pct / 100.0)


def layout_pattern(key: str | None) -> LayoutPattern:
    """Unknown or empty keys behave like the custom (0 %) pattern."""
    patterns = load_materials().patterns
    if key and key in patterns:
        return patterns[key]
    return patterns.get("custom") or LayoutPattern(label="Custom", waste_percent=0)


def resolve_waste(waste_pct: float | None, pattern: str | None = None) -> float:
    """An explicit waste value (0 included) always beats the pattern default."""
    if waste_pct is not None:
        return waste_pct
    if pattern:
        return layout_pattern(pattern).waste_percent
    return 0.0


# ---------- WALLPAPER ----------

def effective_strip_height(wall_height_m: float, pattern_repeat_cm: float) -> float:
    if wall_height_m <= 0:
        return 0.0
    reserve = PATTERN_REPEAT_RESERVE_M if pattern_repeat_cm > 0 else 0.0
    return wall_height_m + reserve


def strips_per_roll(roll_length_m: float, strip_height_m: float) -> int:
    """Always floor: a partial strip cannot go on the wall."""
    if strip_height_m <= 0 or roll_length_m <= 0:
        return 0
    return math.floor(roll_length_m / strip_height_m + EPSILON)


def perimeter_width(room_length_m: float, room_width_m: float) -> float:
    """Total wall run of a rectangular room."""
    return 2 * (room_length_m + room_width_m)

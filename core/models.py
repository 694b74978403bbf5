from __future__ import annotations

import math
from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

OpeningKind = Literal["door", "window", "mirror"]
Material = Literal["tiles", "wallpaper"]


def to_number(value: Any) -> float:
    """Defensive float parse: anything unusable becomes 0."""
    if value is None:
        return 0.0
    if isinstance(value, str):
        value = value.strip().replace(",", ".")
        if value == "":
            return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(number) or math.isinf(number):
        return 0.0
    return number


def to_index(value: Any) -> int:
    """Wall index as entered; unusable values become -1, which matches no wall."""
    if isinstance(value, str):
        value = value.strip().replace(",", ".")
    try:
        number = float(value)
    except (TypeError, ValueError):
        return -1
    if math.isnan(number) or math.isinf(number):
        return -1
    return int(number)


# ---------- GEOMETRY INPUT ----------

class Wall(BaseModel):
    width_m: float = 0.0
    height_m: float = 0.0

    @field_validator("width_m", "height_m", mode="before")
    @classmethod
    def _parse(cls, v: Any) -> float:
        return to_number(v)

    @property
    def area(self) -> float:
        return self.width_m * self.height_m

    @property
    def is_measurable(self) -> bool:
        return self.width_m > 0 and self.height_m > 0


class Opening(BaseModel):
    # assignments go through the validators too, so registry edits stay clamped
    model_config = ConfigDict(validate_assignment=True)

    id: int = 0
    kind: OpeningKind = "door"
    width_m: float = 0.0
    height_m: float = 0.0
    wall_index: int = 0
    x_m: float = 0.0
    y_m: float = 0.0

    @field_validator("width_m", "height_m", "x_m", "y_m", mode="before")
    @classmethod
    def _non_negative(cls, v: Any) -> float:
        return max(0.0, to_number(v))

    @field_validator("wall_index", mode="before")
    @classmethod
    def _index(cls, v: Any) -> int:
        return to_index(v)

    @property
    def area(self) -> float:
        return self.width_m * self.height_m


# ---------- MATERIAL PARAMS ----------

class TileParams(BaseModel):
    tile_length_cm: float = 0.0
    tile_width_cm: float = 0.0
    grout_mm: float = 0.0

    # None = not entered; 0 = explicitly no waste. Both mean 0 for the math,
    # but a pattern default may only replace None.
    waste_percent: Optional[float] = None

    sqm_per_box: float = 0.0

    @field_validator("tile_length_cm", "tile_width_cm", "grout_mm", "sqm_per_box", mode="before")
    @classmethod
    def _parse(cls, v: Any) -> float:
        return to_number(v)

    @field_validator("waste_percent", mode="before")
    @classmethod
    def _parse_waste(cls, v: Any) -> Optional[float]:
        if v is None or (isinstance(v, str) and v.strip() == ""):
            return None
        return min(100.0, max(0.0, to_number(v)))

    @property
    def tile_length_m(self) -> float:
        return self.tile_length_cm / 100.0

    @property
    def tile_width_m(self) -> float:
        return self.tile_width_cm / 100.0

    @property
    def grout_m(self) -> float:
        return self.grout_mm / 1000.0


class WallpaperParams(BaseModel):
    wall_width_m: float = 0.0
    wall_height_m: float = 0.0
    roll_width_m: float = 0.0
    roll_length_m: float = 0.0
    pattern_repeat_cm: float = 0.0
    roll_price: float = 0.0

    @field_validator("*", mode="before")
    @classmethod
    def _parse(cls, v: Any) -> float:
        return to_number(v)


# ---------- RESULTS ----------

class TileResult(BaseModel):
    gross_area: float = 0.0
    total_deduction: float = 0.0
    net_area: float = 0.0

    raw_base_count: float = 0.0
    base_count: int = 0
    final_count: int = 0
    waste_tiles: int = 0

    tile_area: float = 0.0
    purchase_area: float = 0.0
    box_count: int = 0

    waste_percent: float = 0.0
    notes: list[str] = []


class WallpaperResult(BaseModel):
    wall_area: float = 0.0
    total_strips: int = 0
    strips_per_roll: int = 0
    total_rolls: int = 0
    effective_strip_height: float = 0.0
    total_purchased_area: float = 0.0
    waste_percent: float = 0.0
    total_price: float = 0.0


# ---------- API REQUESTS ----------

class TileRequest(BaseModel):
    walls: list[Wall] = Field(default_factory=list)
    openings: list[Opening] = Field(default_factory=list)
    params: TileParams = Field(default_factory=TileParams)

    # layout pattern key (standard / brick / diagonal / custom)
    pattern: Optional[str] = None

    # quick mode: one virtual wall of this area instead of the wall list
    direct_area_m2: Optional[float] = None


class WallpaperRequest(BaseModel):
    params: WallpaperParams = Field(default_factory=WallpaperParams)

    perimeter_mode: bool = False
    room_length_m: float = 0.0
    room_width_m: float = 0.0

    @field_validator("room_length_m", "room_width_m", mode="before")
    @classmethod
    def _parse(cls, v: Any) -> float:
        return to_number(v)


class PreviewRequest(BaseModel):
    walls: list[Wall] = Field(default_factory=list)
    openings: list[Opening] = Field(default_factory=list)
    params: TileParams = Field(default_factory=TileParams)

    canvas_width_px: float = Field(default=400, ge=0)
    canvas_height_px: float = Field(default=280, ge=0)


class PreviewItem(BaseModel):
    kind: str
    coords: list[float]
    options: dict[str, Any] = {}


class PanelPreview(BaseModel):
    wall_index: int
    drawable: bool
    scale: float = 0.0
    origin_x: float = 0.0
    origin_y: float = 0.0
    used_fallback: bool = False
    items: list[PreviewItem] = []


class PreviewResult(BaseModel):
    panels: list[PanelPreview] = []

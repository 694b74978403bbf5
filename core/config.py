# core/config.py
# Material defaults live in data/materials.json; runtime knobs come from env / .env.

from __future__ import annotations

import json
import logging
import os
from functools import lru_cache
from pathlib import Path
from typing import Literal, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field

load_dotenv()

logger = logging.getLogger(__name__)

BASE_DIR = Path(__file__).resolve().parents[1]

MATERIALS_FILE = Path(os.getenv("MATERIALS_FILE", str(BASE_DIR / "data" / "materials.json")))

# Server
HOST = os.getenv("HOST", "127.0.0.1")
PORT = int(os.getenv("PORT", "8000"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

HISTORY_DIR = BASE_DIR / "data" / "history"


class TileDefaults(BaseModel):
    tile_length_cm: float = 60
    tile_width_cm: float = 30
    grout_mm: float = 3
    sqm_per_box: float = 1.44


class WallpaperDefaults(BaseModel):
    wall_width_m: float = 4.0
    wall_height_m: float = 2.7
    roll_width_m: float = 0.53
    roll_length_m: float = 10.05
    pattern_repeat_cm: float = 0
    roll_price: float = 0


class LayoutPattern(BaseModel):
    label: str
    waste_percent: float = Field(ge=0, le=100)


class OpeningDefaults(BaseModel):
    width_m: float = Field(gt=0)
    height_m: float = Field(gt=0)
    # floor = flush to the bottom edge, center = centered on both axes
    placement: Literal["floor", "center"] = "center"


class PreviewSettings(BaseModel):
    padding_px: float = 40
    label_reserve_px: float = 30
    panel_height_px: float = 280
    fallback_width_px: float = 400
    fallback_height_px: float = 280
    wallpaper_padding_px: float = 42
    wallpaper_aspect: float = 0.55
    wallpaper_fallback_width_px: float = 360
    max_tile_items: int = 4000


def _default_patterns() -> dict[str, LayoutPattern]:
    return {
        "standard": LayoutPattern(label="Standard", waste_percent=5),
        "brick": LayoutPattern(label="Brick bond", waste_percent=10),
        "diagonal": LayoutPattern(label="Diagonal", waste_percent=15),
        "custom": LayoutPattern(label="Custom", waste_percent=0),
    }


def _default_openings() -> dict[str, OpeningDefaults]:
    return {
        "door": OpeningDefaults(width_m=0.90, height_m=2.10, placement="floor"),
        "window": OpeningDefaults(width_m=1.20, height_m=1.40),
        "mirror": OpeningDefaults(width_m=0.80, height_m=1.00),
    }


class MaterialsConfig(BaseModel):
    tile: TileDefaults = Field(default_factory=TileDefaults)
    wallpaper: WallpaperDefaults = Field(default_factory=WallpaperDefaults)
    patterns: dict[str, LayoutPattern] = Field(default_factory=_default_patterns)
    openings: dict[str, OpeningDefaults] = Field(default_factory=_default_openings)
    preview: PreviewSettings = Field(default_factory=PreviewSettings)


def read_materials(path: Path) -> MaterialsConfig:
    """Reads a materials JSON file; a missing file gives the built-in defaults."""
    if not path.exists():
        logger.warning("Materials file %s not found, using built-in defaults", path)
        return MaterialsConfig()

    raw = json.loads(path.read_text(encoding="utf-8"))
    return MaterialsConfig.model_validate(raw)


@lru_cache(maxsize=None)
def load_materials(path: Optional[str] = None) -> MaterialsConfig:
    """Cached config for the running process."""
    return read_materials(Path(path) if path else MATERIALS_FILE)


def configure_logging(level: Optional[str] = None) -> None:
    logging.basicConfig(
        level=level or LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

# cli/app.py
# CLI = temporary UI. Core stays untouched if this gets replaced by Web/desktop.

from __future__ import annotations

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Optional, cast

from core.calculator import calculate_quick, calculate_tiles, calculate_wallpaper
from core.config import HISTORY_DIR, configure_logging, load_materials
from core.models import Material, OpeningKind, TileParams, TileResult, Wall, WallpaperParams, WallpaperResult
from core.openings import OpeningRegistry
from core.rules import perimeter_width

logger = logging.getLogger(__name__)

OPENING_KINDS = ("door", "window", "mirror")


# ---------- INPUT HELPERS ----------

def ask_float(prompt: str, *, min_value: float | None = None) -> float:
    """Keeps asking until a number comes back."""
    while True:
        raw = input(prompt).strip().replace(",", ".")
        try:
            value = float(raw)
        except ValueError:
            print("❌ Enter a number (example: 2.75)")
            continue
        if min_value is not None and value < min_value:
            print(f"❌ Value must be >= {min_value}")
            continue
        return value


def ask_float_default(prompt: str, default: float, *, min_value: float | None = None) -> float:
    """Enter -> default."""
    while True:
        raw = input(f"{prompt} [{default}]: ").strip()
        if raw == "":
            value = float(default)
        else:
            raw = raw.replace(",", ".")
            try:
                value = float(raw)
            except ValueError:
                print("❌ Enter a number or press Enter")
                continue

        if min_value is not None and value < min_value:
            print(f"❌ Value must be >= {min_value}")
            continue
        return value


def ask_int(prompt: str, *, min_value: int = 0, max_value: int | None = None) -> int:
    while True:
        raw = input(prompt).strip()
        try:
            value = int(raw)
        except ValueError:
            print("❌ Enter a whole number")
            continue
        if max_value is None and value < min_value:
            print(f"❌ Value must be >= {min_value}")
            continue
        if max_value is not None and not min_value <= value <= max_value:
            print(f"❌ Value must be between {min_value} and {max_value}")
            continue
        return value


def ask_choice(prompt: str, choices: tuple[str, ...] | list[str], default: str) -> str:
    while True:
        raw = input(f"{prompt} ({'/'.join(choices)}) [{default}]: ").strip().lower()
        if raw == "":
            return default
        if raw in choices:
            return raw
        print("❌ Unknown option")


def ask_yes_no(prompt: str) -> bool:
    while True:
        raw = input(prompt + " (y/n): ").strip().lower()
        if raw in ("y", "yes"):
            return True
        if raw in ("n", "no"):
            return False
        print("❌ Enter y or n")


def money(x: float) -> str:
    return f"{x:,.2f}"


# ---------- HISTORY (JSON) ----------

def save_estimate_json(payload: dict, history_dir: Path = HISTORY_DIR) -> Path:
    """Writes one estimate into data/history/ and returns the file path."""
    history_dir.mkdir(parents=True, exist_ok=True)

    ts = payload["meta"]["created_at"].replace(":", "").replace("-", "")
    material = payload["meta"]["material"]
    label = payload["meta"]["label"].strip().lower().replace(" ", "_") or "job"

    path = history_dir / f"{ts}_{material}_{label}.json"
    path.write_text(json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8")
    return path


def history_payload(material: Material, label: str, inputs: dict, output: dict) -> dict:
    return {
        "meta": {
            "created_at": datetime.now().isoformat(timespec="seconds"),
            "material": material,
            "label": label,
        },
        "input": inputs,
        "output": output,
    }


# ---------- REPORTS ----------

def tile_report(result: TileResult) -> list[str]:
    lines = [
        f"Gross area:            {result.gross_area:,.2f} m2",
        f"Openings:              -{result.total_deduction:,.2f} m2",
        f"Net area:              {result.net_area:,.2f} m2",
        f"Base tiles:            {result.base_count}",
        f"Waste:                 {result.waste_percent:g}% (+{result.waste_tiles} tiles)",
        f"TILES TO BUY:          {result.final_count}",
        f"Purchase area:         {result.purchase_area:,.2f} m2",
        f"Boxes:                 {result.box_count}",
    ]
    lines += [f" - {n}" for n in result.notes]
    return lines


def wallpaper_report(result: WallpaperResult) -> list[str]:
    return [
        f"Wall area:             {result.wall_area:,.2f} m2",
        f"Strip height:          {result.effective_strip_height:,.2f} m",
        f"Strips:                {result.total_strips}",
        f"Strips per roll:       {result.strips_per_roll}",
        f"ROLLS TO BUY:          {result.total_rolls}",
        f"Purchased area:        {result.total_purchased_area:,.2f} m2 (waste {result.waste_percent:.1f}%)",
        f"Price:                 {money(result.total_price)}",
        "Check the batch number on every roll!",
    ]


# ---------- TILES ----------

def ask_walls() -> list[Wall]:
    count = ask_int("How many walls? ", min_value=1)
    walls = []
    for n in range(1, count + 1):
        w = ask_float(f"Wall {n} width (m): ", min_value=0)
        h = ask_float(f"Wall {n} height (m): ", min_value=0)
        walls.append(Wall(width_m=w, height_m=h))
    return walls


def ask_openings(walls: list[Wall]) -> OpeningRegistry:
    registry = OpeningRegistry()
    while ask_yes_no("Add a door / window / mirror?"):
        kind = cast(OpeningKind, ask_choice("Kind", OPENING_KINDS, "door"))
        wall_no = ask_int(f"On wall # (1-{len(walls)}): ", min_value=1, max_value=len(walls))
        opening = registry.add(kind, wall_no - 1, walls)
        width = ask_float_default("Width (m)", opening.width_m, min_value=0)
        height = ask_float_default("Height (m)", opening.height_m, min_value=0)
        registry.update_field(opening.id, "width_m", width)
        registry.update_field(opening.id, "height_m", height)
    return registry


def ask_tile_params() -> tuple[TileParams, Optional[str]]:
    cfg = load_materials()
    d = cfg.tile

    length = ask_float_default("Tile length (cm)", d.tile_length_cm, min_value=0)
    width = ask_float_default("Tile width (cm)", d.tile_width_cm, min_value=0)
    grout = ask_float_default("Grout joint (mm)", d.grout_mm, min_value=0)
    per_box = ask_float_default("m2 per box", d.sqm_per_box, min_value=0)

    print("\nLayout patterns:")
    for k, p in cfg.patterns.items():
        print(f" - {k}: {p.label} ({p.waste_percent:g}%)")
    pattern = ask_choice("Pattern", list(cfg.patterns), "custom")
    waste = ask_float_default("Waste %", cfg.patterns[pattern].waste_percent, min_value=0)

    params = TileParams(
        tile_length_cm=length,
        tile_width_cm=width,
        grout_mm=grout,
        waste_percent=waste,
        sqm_per_box=per_box,
    )
    return params, pattern


def run_tiles() -> dict:
    quick = ask_yes_no("Quick mode (enter total area instead of walls)?")

    walls: list[Wall] = []
    registry = OpeningRegistry()
    direct_area = None
    if quick:
        direct_area = ask_float("Total area (m2): ", min_value=0)
    else:
        walls = ask_walls()
        registry = ask_openings(walls)

    params, pattern = ask_tile_params()

    if quick:
        result = calculate_quick(direct_area, registry.openings, params, pattern)
    else:
        result = calculate_tiles(walls, registry.openings_for_estimate(walls), params, pattern)

    print("\n--- Tiles ---")
    for line in tile_report(result):
        print(line)
    print("-------------\n")

    if not quick and ask_yes_no("Open the wall preview window?"):
        from ui.desktop import run_preview

        run_preview(walls, registry, params, pattern)
        # openings may have been dragged around
        result = calculate_tiles(walls, registry.openings_for_estimate(walls), params, pattern)

    return {
        "input": {
            "walls": [w.model_dump() for w in walls],
            "direct_area_m2": direct_area,
            "openings": [o.model_dump() for o in registry.openings],
            "params": params.model_dump(),
            "pattern": pattern,
        },
        "output": result.model_dump(),
    }


# ---------- WALLPAPER ----------

def run_wallpaper() -> dict:
    d = load_materials().wallpaper

    if ask_yes_no("Perimeter mode (whole room)?"):
        room_l = ask_float("Room length (m): ", min_value=0)
        room_w = ask_float("Room width (m): ", min_value=0)
        wall_width = perimeter_width(room_l, room_w)
        print(f"Total wall run: {wall_width:.2f} m")
    else:
        wall_width = ask_float_default("Wall width (m)", d.wall_width_m, min_value=0)

    params = WallpaperParams(
        wall_width_m=wall_width,
        wall_height_m=ask_float_default("Wall height (m)", d.wall_height_m, min_value=0),
        roll_width_m=ask_float_default("Roll width (m)", d.roll_width_m, min_value=0),
        roll_length_m=ask_float_default("Roll length (m)", d.roll_length_m, min_value=0),
        pattern_repeat_cm=ask_float_default("Pattern repeat (cm, 0 = none)", d.pattern_repeat_cm, min_value=0),
        roll_price=ask_float_default("Price per roll", d.roll_price, min_value=0),
    )
    result = calculate_wallpaper(params)

    print("\n--- Wallpaper ---")
    for line in wallpaper_report(result):
        print(line)
    print("-----------------\n")

    return {"input": params.model_dump(), "output": result.model_dump()}


# ---------- MAIN CLI FLOW ----------

def run_cli() -> None:
    configure_logging()
    print("\n=== Tile & Wallpaper Estimator (CLI) ===\n")

    label = input("Job label (optional): ").strip()
    material = cast(Material, ask_choice("Material", ("tiles", "wallpaper"), "tiles"))

    record = run_tiles() if material == "tiles" else run_wallpaper()

    if ask_yes_no("Save estimate to history (JSON)?"):
        path = save_estimate_json(history_payload(material, label, record["input"], record["output"]))
        print(f"✅ Saved JSON: {path}\n")

import json
import logging

import pytest
from pydantic import ValidationError

from core.config import MATERIALS_FILE, load_materials, read_materials


def test_missing_file_gives_defaults(tmp_path, caplog):
    with caplog.at_level(logging.WARNING, logger="core.config"):
        cfg = read_materials(tmp_path / "nope.json")
    assert "not found" in caplog.text
    assert cfg.tile.tile_length_cm == 60
    assert cfg.patterns["brick"].waste_percent == 10
    assert cfg.openings["door"].placement == "floor"
    assert cfg.preview.max_tile_items == 4000


def test_partial_file_keeps_other_defaults(tmp_path):
    path = tmp_path / "materials.json"
    path.write_text(json.dumps({"tile": {"tile_length_cm": 20, "tile_width_cm": 20}}), encoding="utf-8")
    cfg = read_materials(path)
    assert cfg.tile.tile_length_cm == 20
    assert cfg.tile.grout_mm == 3
    assert cfg.wallpaper.roll_width_m == 0.53


def test_bad_pattern_rejected(tmp_path):
    path = tmp_path / "materials.json"
    path.write_text(json.dumps({"patterns": {"odd": {"label": "Odd", "waste_percent": 150}}}), encoding="utf-8")
    with pytest.raises(ValidationError):
        read_materials(path)


def test_shipped_file_matches_builtin_defaults():
    shipped = load_materials(str(MATERIALS_FILE))
    assert set(shipped.patterns) == {"standard", "brick", "diagonal", "custom"}
    assert shipped.openings["window"].width_m == 1.2
    assert shipped.wallpaper.roll_length_m == 10.05

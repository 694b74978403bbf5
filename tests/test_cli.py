import json

import pytest

from cli import app as cli


def feed(monkeypatch, answers):
    it = iter(answers)
    monkeypatch.setattr("builtins.input", lambda _prompt="": next(it))


def test_ask_float_retries_and_accepts_comma(monkeypatch, capsys):
    feed(monkeypatch, ["abc", "-1", "2,75"])
    assert cli.ask_float("x: ", min_value=0) == 2.75
    out = capsys.readouterr().out
    assert "Enter a number" in out
    assert ">= 0" in out


def test_ask_float_default_on_enter(monkeypatch):
    feed(monkeypatch, [""])
    assert cli.ask_float_default("Tile length (cm)", 60) == 60.0


def test_tiles_flow(monkeypatch, capsys):
    feed(
        monkeypatch,
        [
            "bathroom", "tiles",
            "n",                      # quick mode
            "2", "3", "2.5", "3", "2.5",
            "n",                      # openings
            "", "", "", "",           # tile size, grout, m2 per box
            "",                       # pattern -> custom
            "10",                     # waste
            "n",                      # preview window
            "n",                      # save
        ],
    )
    cli.run_cli()
    out = capsys.readouterr().out
    assert "TILES TO BUY:          94" in out


def test_tiles_flow_with_door(monkeypatch):
    feed(
        monkeypatch,
        [
            "n", "2", "3", "2.5", "3", "2.5",
            "y", "door", "1", "", "",  # door on wall 1 with default size
            "n",
            "", "", "", "", "", "10",
            "n",
        ],
    )
    record = cli.run_tiles()
    assert record["output"]["final_count"] == 82
    assert record["input"]["openings"][0]["wall_index"] == 0


def test_quick_mode_flow(monkeypatch):
    feed(monkeypatch, ["y", "10", "", "", "", "", "", "0"])
    record = cli.run_tiles()
    assert record["output"]["final_count"] == 60
    assert record["input"]["walls"] == []


def test_wallpaper_flow(monkeypatch, capsys):
    feed(
        monkeypatch,
        ["", "wallpaper", "n", "4", "2.7", "", "", "", "12.5", "n"],
    )
    cli.run_cli()
    out = capsys.readouterr().out
    assert "ROLLS TO BUY:          3" in out
    assert "37.50" in out


def test_wallpaper_perimeter_flow(monkeypatch):
    feed(monkeypatch, ["y", "4", "3", "", "", "", "", ""])
    record = cli.run_wallpaper()
    assert record["input"]["wall_width_m"] == pytest.approx(14)
    assert record["output"]["total_rolls"] == 9


def test_save_estimate_json(tmp_path):
    payload = cli.history_payload("tiles", "Guest Bath", {"walls": []}, {"final_count": 94})
    path = cli.save_estimate_json(payload, history_dir=tmp_path / "history")

    assert path.parent == tmp_path / "history"
    assert path.name.endswith("_tiles_guest_bath.json")
    assert json.loads(path.read_text(encoding="utf-8"))["output"]["final_count"] == 94


def test_empty_label_becomes_job(tmp_path):
    payload = cli.history_payload("wallpaper", "  ", {}, {})
    assert cli.save_estimate_json(payload, history_dir=tmp_path).name.endswith("_wallpaper_job.json")


def test_ask_int_without_upper_bound(monkeypatch, capsys):
    feed(monkeypatch, ["0", "3"])
    assert cli.ask_int("How many walls? ", min_value=1) == 3
    out = capsys.readouterr().out
    assert "Value must be >= 1" in out
    assert "None" not in out

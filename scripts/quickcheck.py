"""Quick runtime checks for the estimator.
Run: python scripts/quickcheck.py
Exits with code 0 on success, non-zero on failure.
"""
from core.calculator import calculate_quick, calculate_tiles, calculate_wallpaper
from core.models import TileParams, Wall, WallpaperParams
from core.openings import OpeningRegistry


def approx(a, b, tol=1e-6):
    return abs(a - b) <= tol


def check_tiles():
    walls = [Wall(width_m=3.0, height_m=2.5), Wall(width_m=3.0, height_m=2.5)]
    params = TileParams(tile_length_cm=60, tile_width_cm=30, waste_percent=10, sqm_per_box=1.44)

    res = calculate_tiles(walls, [], params)
    assert approx(res.raw_base_count, 85.0)
    assert res.final_count == 94
    assert approx(res.gross_area, 15.0)

    # a door on wall 1 plus a window left behind on a wall that no longer exists
    registry = OpeningRegistry()
    registry.add("door", 0, walls)
    registry.add("window", 4, walls)
    res = calculate_tiles(walls, registry.openings_for_estimate(walls), params)
    assert approx(res.total_deduction, 0.9 * 2.1)
    assert approx(res.raw_base_count, 74.5)
    assert res.final_count == 82

    res = calculate_quick(10, [], params.model_copy(update={"waste_percent": 0}))
    assert res.final_count == 60


def check_wallpaper():
    wp = calculate_wallpaper(
        WallpaperParams(
            wall_width_m=4.0,
            wall_height_m=2.7,
            roll_width_m=0.53,
            roll_length_m=10.05,
            pattern_repeat_cm=0,
        )
    )
    assert wp.total_strips == 8
    assert wp.strips_per_roll == 3
    assert wp.total_rolls == 3


def main():
    check_tiles()
    check_wallpaper()
    print("Quickcheck OK")


if __name__ == '__main__':
    main()

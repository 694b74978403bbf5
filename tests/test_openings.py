import pytest

from core.models import Opening, Wall
from core.openings import OpeningRegistry

WALLS = [Wall(width_m=3.0, height_m=2.5), Wall(width_m=4.0, height_m=2.7)]


def test_ids_are_unique_and_ascending():
    reg = OpeningRegistry()
    ids = [reg.add("door", 0, WALLS).id for _ in range(3)]
    reg.remove(ids[1])
    ids.append(reg.add("window", 1, WALLS).id)
    assert ids == [1, 2, 3, 4]


def test_door_sits_on_the_floor_centered():
    reg = OpeningRegistry()
    door = reg.add("door", 0, WALLS)
    assert (door.width_m, door.height_m) == (0.9, 2.1)
    assert door.x_m == pytest.approx((3.0 - 0.9) / 2)
    assert door.y_m == pytest.approx(2.5 - 2.1)


def test_window_and_mirror_are_centered():
    reg = OpeningRegistry()
    window = reg.add("window", 1, WALLS)
    mirror = reg.add("mirror", 0, WALLS)
    assert window.x_m == pytest.approx((4.0 - 1.2) / 2)
    assert window.y_m == pytest.approx((2.7 - 1.4) / 2)
    assert mirror.x_m == pytest.approx((3.0 - 0.8) / 2)
    assert mirror.y_m == pytest.approx((2.5 - 1.0) / 2)


def test_missing_wall_uses_placeholder_for_placement():
    reg = OpeningRegistry()
    door = reg.add("door", 7, WALLS)
    assert door.wall_index == 7
    assert door.x_m == pytest.approx((5 - 0.9) / 2)
    assert door.y_m == pytest.approx(3 - 2.1)


def test_unknown_kind_rejected():
    with pytest.raises(ValueError):
        OpeningRegistry().add("garage", 0, WALLS)


def test_remove_only_touches_target():
    reg = OpeningRegistry()
    a = reg.add("door", 0, WALLS)
    b = reg.add("window", 0, WALLS)
    c = reg.add("mirror", 1, WALLS)
    assert reg.remove(b.id)
    assert not reg.remove(99)
    assert [o.id for o in reg] == [a.id, c.id]


def test_update_field_clamps_to_zero_only():
    reg = OpeningRegistry()
    o = reg.add("window", 0, WALLS)
    reg.update_field(o.id, "width_m", -2)
    assert o.width_m == 0
    reg.update_field(o.id, "height_m", "25")
    assert o.height_m == 25
    reg.update_field(o.id, "width_m", "junk")
    assert o.width_m == 0


def test_update_field_unknown_id_or_field():
    reg = OpeningRegistry()
    assert reg.update_field(42, "width_m", 1) is None
    o = reg.add("door", 0, WALLS)
    with pytest.raises(ValueError):
        reg.update_field(o.id, "kind", "window")


def test_update_position_clamps_into_wall():
    reg = OpeningRegistry()
    o = reg.add("door", 0, WALLS)

    reg.update_position(o.id, 10, 10, WALLS)
    assert o.x_m == pytest.approx(3.0 - 0.9)
    assert o.y_m == pytest.approx(2.5 - 2.1)

    reg.update_position(o.id, -1, -1, WALLS)
    assert (o.x_m, o.y_m) == (0, 0)

    reg.update_position(o.id, 1.2, 0.1, WALLS)
    assert o.x_m == pytest.approx(1.2)
    assert o.y_m == pytest.approx(0.1)


def test_oversize_opening_pins_to_origin():
    reg = OpeningRegistry()
    o = reg.add("window", 0, WALLS)
    reg.update_field(o.id, "width_m", 5)
    reg.update_position(o.id, 2, 0.5, WALLS)
    assert o.x_m == 0
    assert o.y_m == pytest.approx(0.5)


def test_update_wall_keeps_position():
    reg = OpeningRegistry()
    o = reg.add("door", 1, WALLS)
    x, y = o.x_m, o.y_m
    reg.update_wall(o.id, 0)
    assert o.wall_index == 0
    assert (o.x_m, o.y_m) == (x, y)

    reg.update_field(o.id, "wall_index", "1")
    assert o.wall_index == 1
    assert (o.x_m, o.y_m) == (x, y)


def test_change_kind_resets_size():
    reg = OpeningRegistry()
    o = reg.add("door", 0, WALLS)
    reg.update_field(o.id, "width_m", 2)
    reg.change_kind(o.id, "mirror")
    assert o.kind == "mirror"
    assert (o.width_m, o.height_m) == (0.8, 1.0)


def test_orphans_excluded_from_estimate_feed():
    reg = OpeningRegistry()
    kept = reg.add("door", 0, WALLS)
    reg.add("window", 1, WALLS)
    remaining = WALLS[:1]

    assert [o.id for o in reg.openings_for_estimate(remaining)] == [kept.id]
    assert reg.total_deduction(remaining) == pytest.approx(0.9 * 2.1)
    assert reg.total_deduction() == pytest.approx(0.9 * 2.1 + 1.2 * 1.4)

    zero_wall = [Wall(width_m=0, height_m=2.5)]
    assert reg.openings_for_estimate(zero_wall) == []


def test_orphan_can_still_be_moved():
    reg = OpeningRegistry()
    o = reg.add("window", 1, WALLS)
    reg.update_position(o.id, -3, 1.5, WALLS[:1])
    assert (o.x_m, o.y_m) == (0, 1.5)


def test_from_openings_assigns_missing_ids():
    reg = OpeningRegistry.from_openings([Opening(id=5, kind="door"), Opening(kind="window"), Opening(kind="mirror")])
    assert [o.id for o in reg] == [5, 6, 7]
    assert reg.add("door", 0, WALLS).id == 8


def test_reset():
    reg = OpeningRegistry()
    reg.add("door", 0, WALLS)
    reg.reset()
    assert len(reg) == 0
    assert reg.add("door", 0, WALLS).id == 1


def test_from_openings_reassigns_duplicate_ids():
    reg = OpeningRegistry.from_openings(
        [Opening(id=3, kind="door"), Opening(id=3, kind="window"), Opening(id=1, kind="mirror")]
    )
    assert [o.id for o in reg] == [3, 4, 1]
    assert reg.remove(4)
    assert [o.kind for o in reg] == ["door", "mirror"]

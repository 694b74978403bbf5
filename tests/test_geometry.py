import pytest

from core.geometry import forward, inverse


def test_scale_is_the_tighter_axis():
    m = forward(3.0, 2.5, 400, 280, 40, 30)
    # width allows 320/3 = 106.7 px/m, height only 170/2.5 = 68 px/m
    assert m.scale == pytest.approx(68)
    assert m.scale == pytest.approx(min((400 - 80) / 3.0, (280 - 80 - 30) / 2.5))


def test_origin_centers_and_reserves_label_space():
    m = forward(3.0, 2.5, 400, 280, 40, 30)
    assert m.origin_x == pytest.approx((400 - 3.0 * 68) / 2)
    assert m.origin_y == pytest.approx(30 + (280 - 30 - 2.5 * 68) / 2)


def test_wide_wall_is_width_bound():
    m = forward(12.0, 2.5, 400, 280, 40, 30)
    assert m.scale == pytest.approx(320 / 12.0)
    x0, y0, x1, y1 = m.rect_to_px(0, 0, 12.0, 2.5)
    assert x0 == pytest.approx(40)
    assert x1 == pytest.approx(360)
    assert y0 >= 30 and y1 <= 280 - 40


def test_drawn_rectangle_never_overflows():
    for w, h in [(0.3, 5.0), (5.0, 0.3), (1, 1), (20, 3), (2.2, 2.2)]:
        for cw, ch in [(400, 280), (1200, 280), (300, 600)]:
            m = forward(w, h, cw, ch, 40, 30)
            x0, y0, x1, y1 = m.rect_to_px(0, 0, w, h)
            assert x0 >= 40 - 1e-9 and x1 <= cw - 40 + 1e-9
            assert y0 >= 30 + 40 - 1e-9
            assert y1 <= ch - 40 + 1e-9


@pytest.mark.parametrize(
    "args",
    [
        (0, 2.5, 400, 280, 40, 30),
        (3.0, -1, 400, 280, 40, 30),
        (3.0, 2.5, 0, 280, 40, 30),
        (3.0, 2.5, 400, -5, 40, 30),
        (3.0, 2.5, 60, 280, 40, 30),
        (3.0, 2.5, 400, 100, 40, 30),
    ],
)
def test_not_drawable(args):
    assert forward(*args) is None


def test_inverse_recovers_meters():
    m = forward(4.2, 2.65, 517, 280, 40, 30)
    for x_m, y_m in [(0, 0), (4.2, 2.65), (1.234, 0.5), (3.9, 2.1)]:
        px, py = m.to_px(x_m, y_m)
        back = inverse(px, py, m)
        assert back[0] == pytest.approx(x_m, abs=1e-9)
        assert back[1] == pytest.approx(y_m, abs=1e-9)


def test_contains_includes_edges():
    m = forward(3.0, 2.5, 400, 280, 40, 30)
    x0, y0, x1, y1 = m.rect_to_px(1, 1, 0.5, 0.5)
    assert m.contains(x0, y0, 1, 1, 0.5, 0.5)
    assert m.contains(x1, y1, 1, 1, 0.5, 0.5)
    assert not m.contains(x1 + 0.1, y0, 1, 1, 0.5, 0.5)

import math

import pytest

from konstruo import curvemath as cm
from konstruo.bezier import CubicBezier, CubicBezierSpline
from konstruo.constants import MITER_LIMIT
from konstruo.flatten import flatten
from konstruo.stroke import Cap, Join, StrokeStyle, arc_cubics, miter_point, stroke
from konstruo.vectors import dist


def _line(a, b):
    return cm.to_bezier(cm.line_cubic(a, b))


LINE = CubicBezierSpline([_line((0.0, 0.0), (10.0, 0.0))])

#: turns left at (10, 0)
ELBOW = CubicBezierSpline([_line((0.0, 0.0), (10.0, 0.0)), _line((10.0, 0.0), (10.0, 10.0))])

S_CURVE = CubicBezierSpline([CubicBezier((0, 0), (3, 0), (3, 3), (6, 3))])


def _vertices(spline):
    return [curve.start for curve in spline]


def _has_vertex(spline, point, tol=1e-6):
    return any(dist(v, point) <= tol for v in _vertices(spline))


def _samples(spline, count=20):
    return [curve.point_at(i / count) for curve in spline for i in range(count + 1)]


def test_default_style():
    style = StrokeStyle()
    assert style.join is Join.MITER
    assert style.miter_limit == MITER_LIMIT == 100.0
    assert style.start_cap is Cap.BUTT
    assert style.end_cap is Cap.BUTT


def test_straight_butt_stroke_is_a_rectangle():
    outline = stroke(LINE, 2.0)
    assert len(outline) == 4
    assert outline.get_start() == outline.get_end()
    for corner in [(0, 1, 0), (10, 1, 0), (10, -1, 0), (0, -1, 0)]:
        assert _has_vertex(outline, corner)
    for p in _samples(outline):
        assert -1e-9 <= p[0] <= 10.0 + 1e-9
        assert abs(p[1]) <= 1.0 + 1e-9


def test_square_caps_extend_past_the_ends():
    outline = stroke(LINE, 2.0, style=StrokeStyle(start_cap=Cap.SQUARE, end_cap=Cap.SQUARE))
    assert outline.get_start() == outline.get_end()
    assert _has_vertex(outline, (11, 1, 0))
    assert _has_vertex(outline, (11, -1, 0))
    assert _has_vertex(outline, (-1, -1, 0))
    assert _has_vertex(outline, (-1, 1, 0))


def test_round_caps_are_semicircles():
    outline = stroke(LINE, 2.0, style=StrokeStyle(start_cap=Cap.ROUND, end_cap=Cap.ROUND))
    assert outline.get_start() == outline.get_end()
    xs = [p[0] for p in _samples(outline)]
    assert max(xs) == pytest.approx(11.0, abs=1e-3)
    assert min(xs) == pytest.approx(-1.0, abs=1e-3)
    for p in _samples(outline):
        if p[0] > 10.0:
            assert dist(p, (10, 0, 0)) == pytest.approx(1.0, abs=1e-3)


def test_miter_join_on_the_outside_of_a_turn():
    outline = stroke(ELBOW, 2.0)
    assert outline.get_start() == outline.get_end()
    assert _has_vertex(outline, (11, -1, 0))
    # the inside of the turn is bridged directly
    assert _has_vertex(outline, (9, 0, 0))


def test_bevel_join_cuts_the_corner():
    outline = stroke(ELBOW, 2.0, style=StrokeStyle(join=Join.BEVEL))
    assert outline.get_start() == outline.get_end()
    assert not _has_vertex(outline, (11, -1, 0))
    assert _has_vertex(outline, (11, 0, 0))
    assert _has_vertex(outline, (10, -1, 0))


def test_miter_limit_falls_back_to_bevel():
    outline = stroke(ELBOW, 2.0, style=StrokeStyle(miter_limit=1.2))
    assert not _has_vertex(outline, (11, -1, 0))


def test_round_join_follows_the_corner():
    outline = stroke(ELBOW, 2.0, style=StrokeStyle(join=Join.ROUND))
    assert outline.get_start() == outline.get_end()
    corner = [p for p in _samples(outline) if p[0] > 10.0 + 1e-6 and p[1] < -1e-6]
    assert corner
    for p in corner:
        assert dist(p, (10, 0, 0)) == pytest.approx(1.0, abs=1e-3)


def test_curved_stroke_is_closed_and_hugs_the_path():
    outline = stroke(S_CURVE, 0.5, 0.001)
    assert outline.get_start() == outline.get_end()
    assert outline.is_connected(1e-5)
    path = flatten(S_CURVE, 1e-4)
    for p in _samples(outline):
        distance = min(cm.distance_to_segment((p[0], p[1]), (a[0], a[1]), (b[0], b[1]))
                       for a, b in zip(path, path[1:]))
        assert distance <= 0.25 + 0.005


def test_degenerate_strokes_are_empty():
    assert len(stroke(LINE, 0.0)) == 0
    assert len(stroke(CubicBezierSpline(), 1.0)) == 0
    dot = CubicBezierSpline([CubicBezier((1, 1), (1, 1), (1, 1), (1, 1))])
    assert len(stroke(dot, 1.0)) == 0


def test_negative_width_is_rejected():
    with pytest.raises(ValueError):
        stroke(LINE, -1.0)


def test_miter_point():
    corner = miter_point((11.0, 0.0), (0.0, -1.0), (10.0, -1.0), (-1.0, 0.0))
    assert corner == pytest.approx((11.0, -1.0))
    assert miter_point((0.0, 1.0), (1.0, 0.0), (2.0, 1.0), (1.0, 0.0)) is None


def test_miter_limit_is_a_multiple_of_the_stroke_width():
    # a right angle miter is sqrt(2) stroke widths long
    args = ((11.0, 0.0), (0.0, -1.0), (10.0, -1.0), (-1.0, 0.0))
    assert miter_point(*args, miter_limit=1.5) == pytest.approx((11.0, -1.0))
    assert miter_point(*args, miter_limit=1.4) is None


def test_arc_cubics_split_into_quarters():
    arcs = arc_cubics((0.0, 0.0), 2.0, 0.0, math.pi)
    assert len(arcs) == 2
    assert arcs[0].p0 == pytest.approx((2.0, 0.0))
    assert arcs[-1].p3 == pytest.approx((-2.0, 0.0))
    for arc in arcs:
        mid = cm.point_at(arc, 0.5)
        assert math.hypot(*mid) == pytest.approx(2.0, abs=1e-3)


def test_stroke_method_delegates():
    assert LINE.stroke(2.0, 0.01) == stroke(LINE, 2.0, 0.01)

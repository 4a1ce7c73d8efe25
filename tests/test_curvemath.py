import math

import pytest

from konstruo import curvemath as cm
from konstruo.bezier import CubicBezier, CubicBezierSpline


def _close2(a, b, tol=1e-9):
    assert math.hypot(a[0] - b[0], a[1] - b[1]) <= tol


CURVE = cm.Cubic2((0.0, 0.0), (0.0, 1.0), (1.0, 2.0), (2.0, 2.0))


def test_planar_round_trip():
    bezier = CubicBezier((0, 0), (1, 1), (2, 1), (3, 0))
    cubic = cm.from_bezier(bezier)
    assert cubic.p1 == (1.0, 1.0)
    assert cm.to_bezier(cubic) == bezier


def test_out_of_plane_coordinates_are_dropped_with_a_warning(caplog):
    with caplog.at_level('WARNING', logger='konstruo'):
        point = cm.to_point2((1.0, 2.0, 0.5))
    assert point == (1.0, 2.0)
    assert 'Ignoring z value' in caplog.text


def test_small_z_is_dropped_silently(caplog):
    with caplog.at_level('WARNING', logger='konstruo'):
        assert cm.to_point2((1.0, 2.0, 0.00001)) == (1.0, 2.0)
    assert caplog.text == ''


def test_spline_conversion_lifts_to_z_zero():
    spline = CubicBezierSpline([CubicBezier((0, 0, 0), (1, 0, 0), (2, 0, 0), (3, 0, 0))])
    assert cm.to_spline(cm.from_spline(spline)) == spline


def test_evaluation_matches_bezier():
    bezier = cm.to_bezier(CURVE)
    for t in (0.0, 0.3, 0.5, 1.0):
        p = bezier.point_at(t)
        _close2(cm.point_at(CURVE, t), p)
        d = bezier.derivative_at(t)
        _close2(cm.deriv_at(CURVE, t), d)


def test_second_derivative_by_differences():
    h = 1e-5
    for t in (0.2, 0.7):
        d_plus = cm.deriv_at(CURVE, t + h)
        d_minus = cm.deriv_at(CURVE, t - h)
        expected = ((d_plus[0] - d_minus[0]) / (2 * h), (d_plus[1] - d_minus[1]) / (2 * h))
        _close2(cm.deriv2_at(CURVE, t), expected, tol=1e-4)


def test_tangent_of_collapsed_handles():
    cubic = cm.Cubic2((0.0, 0.0), (0.0, 0.0), (0.0, 5.0), (0.0, 5.0))
    _close2(cm.tangent_at(cubic, 0.0), (0.0, 1.0))
    _close2(cm.tangent_at(cubic, 1.0), (0.0, 1.0))
    point = cm.Cubic2((1.0, 1.0), (1.0, 1.0), (1.0, 1.0), (1.0, 1.0))
    assert cm.tangent_at(point, 0.5) == (0.0, 0.0)
    assert cm.is_degenerate(point)
    assert not cm.is_degenerate(cubic)


def test_split_at_a_parameter():
    left, right = cm.split(CURVE, 0.4)
    _close2(left.p3, cm.point_at(CURVE, 0.4))
    _close2(right.p0, left.p3)
    _close2(cm.point_at(left, 0.5), cm.point_at(CURVE, 0.2))
    _close2(cm.point_at(right, 0.5), cm.point_at(CURVE, 0.7))


def test_line_cubic_has_uniform_speed():
    line = cm.line_cubic((0.0, 0.0), (3.0, 0.0))
    _close2(cm.point_at(line, 0.25), (0.75, 0.0))
    assert cm.chord_deviation(line) == pytest.approx(0.0, abs=1e-12)


def test_chord_deviation_bounds_the_curve():
    deviation = cm.chord_deviation(CURVE)
    for i in range(101):
        p = cm.point_at(CURVE, i / 100.0)
        assert cm.distance_to_segment(p, CURVE.p0, CURVE.p3) <= deviation + 1e-12


def test_distance_to_segment():
    assert cm.distance_to_segment((1.0, 1.0), (0.0, 0.0), (2.0, 0.0)) == 1.0
    assert cm.distance_to_segment((3.0, 0.0), (0.0, 0.0), (2.0, 0.0)) == 1.0
    assert cm.distance_to_segment((0.0, 2.0), (0.0, 0.0), (0.0, 0.0)) == 2.0

"""Planar curve math behind the spline operations.

Splines are stored with 3D control points, but flattening, offsetting
and stroking are planar problems.  This module is the bridge: control
points are projected onto the XY plane, the algorithms run on
:class:`Cubic2` values, and results are lifted back with ``z = 0``.

The projection is lossy on purpose.  A control point with a noticeable
``z`` component is logged and its in-plane part is used anyway; the
conversion never fails.
"""

from __future__ import annotations

from math import hypot
from typing import Iterable, List, NamedTuple, Sequence, Tuple

from konstruo.bezier import CubicBezier, CubicBezierSpline
from konstruo.constants import EPSILON, PLANAR_EPSILON
from konstruo.logging_config import get_logger
from konstruo.vectors import Vec3

logger = get_logger(__name__)

Point2 = Tuple[float, float]


class Cubic2(NamedTuple):
    """A cubic Bézier in the XY working plane."""

    p0: Point2
    p1: Point2
    p2: Point2
    p3: Point2


## conversion
## ----------

def to_point2(vector: Sequence[float]) -> Point2:
    """Drop the z component of ``vector``, warning if it is not near zero."""

    if len(vector) > 2 and abs(vector[2]) > PLANAR_EPSILON:
        logger.warning('curve math only supports 2D coordinates. Ignoring z value: %s',
                       vector[2])
    return (float(vector[0]), float(vector[1]))


def to_vec3(point: Point2) -> Vec3:
    """Lift a planar point into 3D on the ``z = 0`` plane."""

    return (float(point[0]), float(point[1]), 0.0)


def from_bezier(bezier: CubicBezier) -> Cubic2:
    return Cubic2(*(to_point2(p) for p in bezier.get_controls()))


def to_bezier(cubic: Cubic2) -> CubicBezier:
    return CubicBezier(*(to_vec3(p) for p in cubic))


def from_spline(spline: CubicBezierSpline) -> List[Cubic2]:
    return [from_bezier(curve) for curve in spline.curves]


def to_spline(cubics: Iterable[Cubic2]) -> CubicBezierSpline:
    return CubicBezierSpline([to_bezier(c) for c in cubics])


def line_cubic(a: Point2, b: Point2) -> Cubic2:
    """Express the straight segment ``a``-``b`` as a cubic, with the
    handles at the thirds so the parameterization stays uniform.
    """
    return Cubic2(a, lerp2(a, b, 1.0 / 3.0), lerp2(a, b, 2.0 / 3.0), b)


## planar vectors
## --------------

def add2(a: Point2, b: Point2) -> Point2:
    return (a[0] + b[0], a[1] + b[1])


def sub2(a: Point2, b: Point2) -> Point2:
    return (a[0] - b[0], a[1] - b[1])


def scale2(a: Point2, s: float) -> Point2:
    return (a[0] * s, a[1] * s)


def dot2(a: Point2, b: Point2) -> float:
    return a[0] * b[0] + a[1] * b[1]


def cross2(a: Point2, b: Point2) -> float:
    """z component of the 3D cross product"""
    return a[0] * b[1] - a[1] * b[0]


def norm2(a: Point2) -> float:
    return hypot(a[0], a[1])


def unit2(a: Point2) -> Point2:
    n = hypot(a[0], a[1])
    if n < EPSILON * EPSILON:
        return (0.0, 0.0)
    return (a[0] / n, a[1] / n)


def lerp2(a: Point2, b: Point2, t: float) -> Point2:
    return (a[0] + (b[0] - a[0]) * t, a[1] + (b[1] - a[1]) * t)


def left_normal2(tangent: Point2) -> Point2:
    """unit normal pointing left of travel"""
    return unit2((-tangent[1], tangent[0]))


## cubic evaluation
## ----------------

def point_at(c: Cubic2, t: float) -> Point2:
    mt = 1.0 - t
    b0 = mt * mt * mt
    b1 = 3.0 * mt * mt * t
    b2 = 3.0 * mt * t * t
    b3 = t * t * t
    return (b0 * c.p0[0] + b1 * c.p1[0] + b2 * c.p2[0] + b3 * c.p3[0],
            b0 * c.p0[1] + b1 * c.p1[1] + b2 * c.p2[1] + b3 * c.p3[1])


def deriv_at(c: Cubic2, t: float) -> Point2:
    mt = 1.0 - t
    d0 = sub2(c.p1, c.p0)
    d1 = sub2(c.p2, c.p1)
    d2 = sub2(c.p3, c.p2)
    a = 3.0 * mt * mt
    b = 6.0 * mt * t
    e = 3.0 * t * t
    return (a * d0[0] + b * d1[0] + e * d2[0],
            a * d0[1] + b * d1[1] + e * d2[1])


def deriv2_at(c: Cubic2, t: float) -> Point2:
    mt = 1.0 - t
    a = add2(sub2(c.p2, scale2(c.p1, 2.0)), c.p0)
    b = add2(sub2(c.p3, scale2(c.p2, 2.0)), c.p1)
    return (6.0 * (mt * a[0] + t * b[0]), 6.0 * (mt * a[1] + t * b[1]))


def tangent_at(c: Cubic2, t: float) -> Point2:
    """Unit tangent at ``t``.

    Where the derivative vanishes (a handle coincident with its anchor)
    the direction is taken from the control polygon instead, and a fully
    collapsed cubic yields ``(0, 0)``.
    """
    d = deriv_at(c, t)
    if norm2(d) > EPSILON:
        return unit2(d)
    if t < 0.5:
        candidates = (c.p1, c.p2, c.p3)
        origin = c.p0
        for p in candidates:
            if norm2(sub2(p, origin)) > EPSILON:
                return unit2(sub2(p, origin))
    else:
        candidates = (c.p2, c.p1, c.p0)
        origin = c.p3
        for p in candidates:
            if norm2(sub2(origin, p)) > EPSILON:
                return unit2(sub2(origin, p))
    return (0.0, 0.0)


def split(c: Cubic2, t: float) -> Tuple[Cubic2, Cubic2]:
    """Split at ``t`` with de Casteljau's algorithm."""

    q0 = lerp2(c.p0, c.p1, t)
    q1 = lerp2(c.p1, c.p2, t)
    q2 = lerp2(c.p2, c.p3, t)
    r0 = lerp2(q0, q1, t)
    r1 = lerp2(q1, q2, t)
    s = lerp2(r0, r1, t)
    return Cubic2(c.p0, q0, r0, s), Cubic2(s, r1, q2, c.p3)


def is_degenerate(c: Cubic2, tol: float = EPSILON) -> bool:
    """True if every control point coincides with the start."""

    return all(norm2(sub2(p, c.p0)) < tol for p in (c.p1, c.p2, c.p3))


def chord_deviation(c: Cubic2) -> float:
    """Largest distance of the inner control points from the chord.

    The curve lies inside the convex hull of its control points, so no
    point of it is further from the chord segment than this.
    """
    return max(distance_to_segment(c.p1, c.p0, c.p3),
               distance_to_segment(c.p2, c.p0, c.p3))


def distance_to_segment(p: Point2, a: Point2, b: Point2) -> float:
    ab = sub2(b, a)
    denom = dot2(ab, ab)
    if denom < EPSILON * EPSILON:
        return norm2(sub2(p, a))
    t = max(0.0, min(1.0, dot2(sub2(p, a), ab) / denom))
    return norm2(sub2(p, add2(a, scale2(ab, t))))


__all__ = [
    'Point2',
    'Cubic2',
    'to_point2',
    'to_vec3',
    'from_bezier',
    'to_bezier',
    'from_spline',
    'to_spline',
    'line_cubic',
    'point_at',
    'deriv_at',
    'deriv2_at',
    'tangent_at',
    'split',
    'is_degenerate',
    'chord_deviation',
    'distance_to_segment',
]

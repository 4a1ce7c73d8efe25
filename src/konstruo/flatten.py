"""Flatten splines into polylines.

Each segment is subdivided at its midpoint with de Casteljau's
algorithm until the inner control points of every piece lie within
``tolerance`` of the piece's chord.  Since a cubic stays inside the
convex hull of its control points, the resulting polyline never strays
further than ``tolerance`` from the curve.

Segments are flattened independently and concatenated in order, so a
connected spline yields a duplicated vertex at every joint.
"""

from __future__ import annotations

from typing import List

from konstruo import curvemath as cm
from konstruo.bezier import CubicBezierSpline
from konstruo.constants import FLATTEN_TOLERANCE, MAX_SUBDIVISION_DEPTH
from konstruo.logging_config import get_logger
from konstruo.vectors import Vec3

logger = get_logger(__name__)


def flatten(spline: CubicBezierSpline, tolerance: float = FLATTEN_TOLERANCE,
            max_depth: int = MAX_SUBDIVISION_DEPTH) -> List[Vec3]:
    """Approximate ``spline`` with a polyline within ``tolerance``.

    A tolerance of zero or less cannot be met by any finite polyline;
    subdivision then stops at ``max_depth`` instead.
    """
    if tolerance <= 0.0:
        logger.debug('non-positive flatten tolerance %s, subdividing to depth %d',
                     tolerance, max_depth)
    points: List[Vec3] = []
    for cubic in cm.from_spline(spline):
        points.extend(cm.to_vec3(p) for p in flatten_cubic(cubic, tolerance, max_depth))
    return points


def flatten_cubic(cubic: cm.Cubic2, tolerance: float,
                  max_depth: int = MAX_SUBDIVISION_DEPTH) -> List[cm.Point2]:
    """Flatten one planar cubic, endpoints included."""

    out = [cubic.p0]
    # depth-first, left half first, so points come out in curve order
    stack = [(cubic, 0)]
    while stack:
        piece, depth = stack.pop()
        if depth >= max_depth or cm.chord_deviation(piece) <= tolerance:
            out.append(piece.p3)
            continue
        left, right = cm.split(piece, 0.5)
        stack.append((right, depth + 1))
        stack.append((left, depth + 1))
    return out


__all__ = [
    'flatten',
    'flatten_cubic',
]

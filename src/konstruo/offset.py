"""Parallel (offset) curves of splines.

The offset of a cubic Bézier at a fixed distance is not itself a cubic,
so it is approximated.  For each source segment the true offset curve
``c(t) + d * n(t)`` is sampled, where ``n`` is the unit normal pointing
left of travel, and a cubic is fitted to the samples with its end
tangents parallel to the source tangents.  The handle lengths come from
a least-squares fit (Schneider's method) refined by Newton
reparameterization.  If the fit deviates from the samples by more than
the accuracy bound, the source parameter interval is halved and each
half is fitted on its own.

A positive distance offsets to the left of the direction of travel, a
negative distance to the right.

Where the curvature radius of the source is smaller than the offset
distance the true offset has cusps and loops.  These are not treated
specially: the fitted output follows the sampled curve and may cross
itself, since a distance offset is not well defined there.
"""

from __future__ import annotations

from math import isfinite
from typing import List, Sequence, Tuple

from konstruo import curvemath as cm
from konstruo.bezier import CubicBezierSpline
from konstruo.constants import EPSILON, OFFSET_ACCURACY
from konstruo.logging_config import get_logger

logger = get_logger(__name__)

## offset curve samples per fitted piece
SAMPLES = 16

## interval halvings per source segment
MAX_OFFSET_DEPTH = 10

## Newton reparameterization passes per fit
_REPARAMETERIZE_ITERATIONS = 4


def offset(spline: CubicBezierSpline, distance: float,
           accuracy: float = OFFSET_ACCURACY) -> CubicBezierSpline:
    """Spline parallel to ``spline`` at signed ``distance``.

    Each source segment becomes one or more fitted segments, kept in
    order.  Zero-length segments have no direction to offset along and
    are dropped.
    """
    cubics: List[cm.Cubic2] = []
    for cubic in cm.from_spline(spline):
        cubics.extend(offset_cubic(cubic, distance, accuracy))
    return cm.to_spline(cubics)


def offset_cubic(cubic: cm.Cubic2, distance: float, accuracy: float = OFFSET_ACCURACY,
                 max_depth: int = MAX_OFFSET_DEPTH) -> List[cm.Cubic2]:
    """Fit cubics to the offset of a single planar cubic."""

    if cm.is_degenerate(cubic):
        logger.debug('skipping zero-length segment at %s', cubic.p0)
        return []
    if abs(distance) < EPSILON:
        return [cubic]
    result: List[cm.Cubic2] = []
    _fit_interval(cubic, 0.0, 1.0, distance, accuracy, 0, max_depth, result)
    return result


def offset_point(cubic: cm.Cubic2, t: float, distance: float) -> cm.Point2:
    """Point of the true offset curve at source parameter ``t``."""

    normal = cm.left_normal2(cm.tangent_at(cubic, t))
    return cm.add2(cm.point_at(cubic, t), cm.scale2(normal, distance))


def _fit_interval(cubic: cm.Cubic2, t0: float, t1: float, distance: float,
                  accuracy: float, depth: int, max_depth: int,
                  result: List[cm.Cubic2]) -> None:
    params = [t0 + (t1 - t0) * i / SAMPLES for i in range(SAMPLES + 1)]
    points = [offset_point(cubic, t, distance) for t in params]
    start_tangent = cm.tangent_at(cubic, t0)
    end_tangent = cm.scale2(cm.tangent_at(cubic, t1), -1.0)

    fitted, error = fit_cubic(points, start_tangent, end_tangent)
    if error <= accuracy or depth >= max_depth:
        if error > accuracy:
            logger.debug('offset fit error %.6f exceeds %.6f at depth cap', error, accuracy)
        result.append(fitted)
        return
    middle = (t0 + t1) / 2.0
    _fit_interval(cubic, t0, middle, distance, accuracy, depth + 1, max_depth, result)
    _fit_interval(cubic, middle, t1, distance, accuracy, depth + 1, max_depth, result)


## cubic fitting
## -------------

def fit_cubic(points: Sequence[cm.Point2], start_tangent: cm.Point2,
              end_tangent: cm.Point2) -> Tuple[cm.Cubic2, float]:
    """Fit one cubic through the first and last of ``points``.

    ``start_tangent`` points into the curve from the first point and
    ``end_tangent`` points back into the curve from the last point.
    Returns the cubic and its largest distance from the samples.
    """
    params = chord_length_parameterize(points)
    best = _fit_handles(points, params, start_tangent, end_tangent)
    best_error = max_error(points, best, params)
    for _ in range(_REPARAMETERIZE_ITERATIONS):
        if best_error <= EPSILON:
            break
        params = reparameterize(points, best, params)
        candidate = _fit_handles(points, params, start_tangent, end_tangent)
        error = max_error(points, candidate, params)
        if error >= best_error:
            break
        best, best_error = candidate, error
    return best, best_error


def chord_length_parameterize(points: Sequence[cm.Point2]) -> List[float]:
    u = [0.0]
    total = 0.0
    for a, b in zip(points, points[1:]):
        total += cm.norm2(cm.sub2(b, a))
        u.append(total)
    if total < EPSILON:
        return [i / max(1, len(points) - 1) for i in range(len(points))]
    return [value / total for value in u]


def reparameterize(points: Sequence[cm.Point2], cubic: cm.Cubic2,
                   params: Sequence[float]) -> List[float]:
    """One Newton-Raphson step towards the closest parameter of each sample."""

    out = []
    last = len(params) - 1
    for i, (u, p) in enumerate(zip(params, points)):
        if i == 0 or i == last:
            out.append(u)
            continue
        diff = cm.sub2(cm.point_at(cubic, u), p)
        d1 = cm.deriv_at(cubic, u)
        d2 = cm.deriv2_at(cubic, u)
        denominator = cm.dot2(d1, d1) + cm.dot2(diff, d2)
        if abs(denominator) < EPSILON * EPSILON:
            out.append(u)
        else:
            out.append(min(1.0, max(0.0, u - cm.dot2(diff, d1) / denominator)))
    return out


def max_error(points: Sequence[cm.Point2], cubic: cm.Cubic2,
              params: Sequence[float]) -> float:
    return max(cm.norm2(cm.sub2(cm.point_at(cubic, u), p))
               for u, p in zip(params, points))


def _fit_handles(points: Sequence[cm.Point2], params: Sequence[float],
                 start_tangent: cm.Point2, end_tangent: cm.Point2) -> cm.Cubic2:
    """Least-squares handle lengths along fixed end tangents."""

    p0 = points[0]
    p3 = points[-1]
    c00 = c01 = c11 = x0 = x1 = 0.0
    for u, p in zip(params, points):
        mu = 1.0 - u
        a0 = cm.scale2(start_tangent, 3.0 * mu * mu * u)
        a1 = cm.scale2(end_tangent, 3.0 * mu * u * u)
        base = cm.add2(cm.scale2(p0, mu * mu * mu + 3.0 * mu * mu * u),
                       cm.scale2(p3, u * u * u + 3.0 * mu * u * u))
        rest = cm.sub2(p, base)
        c00 += cm.dot2(a0, a0)
        c01 += cm.dot2(a0, a1)
        c11 += cm.dot2(a1, a1)
        x0 += cm.dot2(a0, rest)
        x1 += cm.dot2(a1, rest)

    chord = cm.norm2(cm.sub2(p3, p0))
    fallback = chord / 3.0
    det = c00 * c11 - c01 * c01
    if abs(det) < EPSILON * EPSILON:
        alpha_start = alpha_end = fallback
    else:
        alpha_start = (x0 * c11 - x1 * c01) / det
        alpha_end = (c00 * x1 - c01 * x0) / det
    limit = 1e3 * max(chord, EPSILON)
    # negative or runaway handles would fold the curve back on itself
    if not isfinite(alpha_start) or alpha_start <= EPSILON * chord or alpha_start > limit:
        alpha_start = fallback
    if not isfinite(alpha_end) or alpha_end <= EPSILON * chord or alpha_end > limit:
        alpha_end = fallback
    return cm.Cubic2(p0,
                     cm.add2(p0, cm.scale2(start_tangent, alpha_start)),
                     cm.add2(p3, cm.scale2(end_tangent, alpha_end)),
                     p3)


__all__ = [
    'offset',
    'offset_cubic',
    'offset_point',
    'fit_cubic',
    'chord_length_parameterize',
    'reparameterize',
    'max_error',
]

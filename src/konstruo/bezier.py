## cubic Bézier curves and splines for the konstruo geometry core
## Copyright (c) 2025 konstruo contributors

# Permission is hereby granted, free of charge, to any person
# obtaining a copy of this software and associated documentation files
# (the "Software"), to deal in the Software without restriction,
# including without limitation the rights to use, copy, modify, merge,
# publish, distribute, sublicense, and/or sell copies of the Software,
# and to permit persons to whom the Software is furnished to do so,
# subject to the following conditions:
#
# The above copyright notice and this permission notice shall be
# included in all copies or substantial portions of the Software.
#
# THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND,
# EXPRESS OR IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF
# MERCHANTABILITY, FITNESS FOR A PARTICULAR PURPOSE AND
# NONINFRINGEMENT. IN NO EVENT SHALL THE AUTHORS OR COPYRIGHT HOLDERS
# BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER LIABILITY, WHETHER IN AN
# ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM, OUT OF OR IN
# CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE
# SOFTWARE.

"""cubic Bézier curves and splines for **konstruo**

====================
OVERVIEW
====================

A :class:`CubicBezier` is one curve segment defined by four control
points, ``start``, ``start_handle``, ``end_handle`` and ``end``.  A
:class:`CubicBezierSpline` is an ordered sequence of such segments
forming a road, path or plot edge.

Both are immutable values.  Nothing is validated on construction:
coincident control points, zero-length segments and disconnected
splines are all legal, and every operation degrades gracefully on
them.  Keeping consecutive segments connected (the ``end`` of segment
*i* equal to the ``start`` of segment *i+1*) is the caller's job; use
:meth:`CubicBezierSpline.is_connected` to check it.

parameterization
================

Segments are parameterized over ``0 <= t <= 1``.  A spline of ``n``
segments is parameterized over ``0 <= u <= 1`` as well, with each
segment taking an equal ``1/n`` share of the interval regardless of its
length.  Use :meth:`CubicBezierSpline.param_at_length` to convert
distances along the spline into parameters.

control addressing
==================

Each control point has a :class:`ControlType` role.  Across a spline
the controls can also be addressed by a flattened index, where
``index // 4`` selects the segment and ``index % 4`` the role.

arc length
==========

Lengths are computed by adaptive Gauss-Legendre quadrature of the
speed ``|B'(t)|`` using :mod:`mpmath`, refining the subintervals until
the estimated error is within the requested accuracy.  The inverse
(parameter at a given length) is solved by bracketed root finding.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from math import floor, sqrt
from typing import Iterator, List, Optional, Sequence, Tuple

import mpmath as mpm

from konstruo.constants import (
    CONNECTION_TOLERANCE,
    EPSILON,
    INTERSECTION_TOLERANCE,
    LENGTH_ACCURACY,
)
from konstruo.logging_config import get_logger
from konstruo.vectors import (
    Vec3,
    add,
    cross,
    dist,
    lerp,
    mag,
    scale,
    sub,
    unit,
    vclose,
    vec3,
)

logger = get_logger(__name__)

## cap on quadrature refinement: 2**10 subintervals per segment
_MAX_QUADRATURE_REFINEMENTS = 10


class ControlType(Enum):
    """Role of a control point within a segment."""

    START = 0
    START_HANDLE = 1
    END_HANDLE = 2
    END = 3

    @classmethod
    def by_index(cls, index: int) -> 'ControlType':
        """Role of the control at a flattened ``index``."""
        return cls(index % 4)


@dataclass(frozen=True)
class CubicBezier:
    """A single cubic Bézier curve of four control points."""

    start: Vec3
    start_handle: Vec3
    end_handle: Vec3
    end: Vec3

    def __post_init__(self):
        for name in ('start', 'start_handle', 'end_handle', 'end'):
            object.__setattr__(self, name, vec3(getattr(self, name)))

    ## controls
    ## --------

    def get_control(self, control_type: ControlType) -> Vec3:
        if control_type is ControlType.START:
            return self.start
        if control_type is ControlType.START_HANDLE:
            return self.start_handle
        if control_type is ControlType.END_HANDLE:
            return self.end_handle
        if control_type is ControlType.END:
            return self.end
        raise ValueError('bad control type: {}'.format(control_type))

    def get_controls(self) -> Tuple[Vec3, Vec3, Vec3, Vec3]:
        return (self.start, self.start_handle, self.end_handle, self.end)

    def with_control(self, control_type: ControlType, point: Sequence[float]) -> 'CubicBezier':
        controls = list(self.get_controls())
        controls[control_type.value] = vec3(point)
        return CubicBezier(*controls)

    ## evaluation
    ## ----------

    def point_at(self, t: float) -> Vec3:
        """Point on the curve at parameter ``t``."""
        mt = 1.0 - t
        b0 = mt * mt * mt
        b1 = 3.0 * mt * mt * t
        b2 = 3.0 * mt * t * t
        b3 = t * t * t
        p0, p1, p2, p3 = self.get_controls()
        return tuple(b0 * p0[i] + b1 * p1[i] + b2 * p2[i] + b3 * p3[i] for i in range(3))

    def derivative_at(self, t: float) -> Vec3:
        mt = 1.0 - t
        p0, p1, p2, p3 = self.get_controls()
        a = 3.0 * mt * mt
        b = 6.0 * mt * t
        c = 3.0 * t * t
        return tuple(a * (p1[i] - p0[i]) + b * (p2[i] - p1[i]) + c * (p3[i] - p2[i])
                     for i in range(3))

    def second_derivative_at(self, t: float) -> Vec3:
        mt = 1.0 - t
        p0, p1, p2, p3 = self.get_controls()
        return tuple(6.0 * (mt * (p2[i] - 2.0 * p1[i] + p0[i]) + t * (p3[i] - 2.0 * p2[i] + p1[i]))
                     for i in range(3))

    def tangent_at(self, t: float) -> Vec3:
        """Unit tangent at ``t``.

        If the derivative vanishes because a handle sits on its anchor,
        the direction of the chord is used instead.  A fully degenerate
        curve has a zero tangent.
        """
        d = self.derivative_at(t)
        if mag(d) > EPSILON:
            return unit(d)
        return unit(sub(self.end, self.start))

    def curvature_at(self, t: float) -> float:
        """Signed curvature at ``t`` in the XY plane (positive turning left)."""
        d1 = self.derivative_at(t)
        d2 = self.second_derivative_at(t)
        speed = mag(d1)
        if speed < EPSILON:
            return 0.0
        return cross(d1, d2)[2] / (speed * speed * speed)

    ## length
    ## ------

    def length(self, accuracy: float = LENGTH_ACCURACY) -> float:
        """Arc length of the curve, accurate to ``accuracy``."""
        return self._arclen(1.0, accuracy)

    def param_at_length(self, length: float, accuracy: float = LENGTH_ACCURACY) -> float:
        """Parameter at arc ``length`` from the start, clamped to ``[0, 1]``."""
        if length <= 0.0:
            return 0.0
        total = self.length(accuracy)
        if length >= total:
            return 1.0
        f = lambda t: self._arclen(float(t), accuracy) - length
        guess = length / total
        lo = max(0.0, guess - 0.25)
        hi = min(1.0, guess + 0.25)
        if f(lo) > 0.0:
            lo = 0.0
        if f(hi) < 0.0:
            hi = 1.0
        root = mpm.findroot(f, (mpm.mpf(lo), mpm.mpf(hi)), solver='anderson',
                            tol=(accuracy * 1e-3) ** 2, verify=False)
        return min(1.0, max(0.0, float(root)))

    def _arclen(self, t: float, accuracy: float) -> float:
        if t <= 0.0:
            return 0.0
        p0, p1, p2, p3 = self.get_controls()
        if dist(p0, p1) + dist(p1, p2) + dist(p2, p3) < EPSILON:
            return 0.0

        def speed(u):
            d = self.derivative_at(float(u))
            return mpm.mpf(sqrt(d[0] * d[0] + d[1] * d[1] + d[2] * d[2]))

        points = [mpm.mpf(0), mpm.mpf(t)]
        value, error = mpm.quad(speed, points, method='gauss-legendre', error=True)
        for _ in range(_MAX_QUADRATURE_REFINEMENTS):
            if error <= accuracy:
                break
            refined = [points[0]]
            for a, b in zip(points, points[1:]):
                refined.append((a + b) / 2)
                refined.append(b)
            points = refined
            value, error = mpm.quad(speed, points, method='gauss-legendre', error=True)
        return float(value)

    def param_nearest_to(self, point: Sequence[float], accuracy: float = LENGTH_ACCURACY) -> float:
        """Parameter of the point on the curve closest to ``point``.

        A coarse scan picks the best sample, then a golden-section search
        narrows the bracket around it until it is smaller than
        ``accuracy`` relative to the size of the control polygon.
        """
        target = vec3(point)
        samples = 32
        best = min(range(samples + 1), key=lambda i: dist(self.point_at(i / samples), target))
        lo = max(0.0, (best - 1) / samples)
        hi = min(1.0, (best + 1) / samples)
        span = max(EPSILON, sum(dist(a, b) for a, b in zip(self.get_controls(),
                                                            self.get_controls()[1:])))
        ratio = (sqrt(5.0) - 1.0) / 2.0
        while (hi - lo) * span > accuracy and hi - lo > 1e-12:
            m1 = hi - ratio * (hi - lo)
            m2 = lo + ratio * (hi - lo)
            if dist(self.point_at(m1), target) <= dist(self.point_at(m2), target):
                hi = m2
            else:
                lo = m1
        return (lo + hi) / 2.0

    ## derived curves
    ## --------------

    def reversed(self) -> 'CubicBezier':
        """The same curve traversed from end to start."""
        return CubicBezier(self.end, self.end_handle, self.start_handle, self.start)

    def split(self, t: float) -> Tuple['CubicBezier', 'CubicBezier']:
        """Split at ``t`` with de Casteljau's algorithm."""
        start_handle_0 = lerp(self.start, self.start_handle, t)
        between_handles = lerp(self.start_handle, self.end_handle, t)
        end_handle_1 = lerp(self.end_handle, self.end, t)
        end_handle_0 = lerp(start_handle_0, between_handles, t)
        start_handle_1 = lerp(between_handles, end_handle_1, t)
        point_at_param = lerp(end_handle_0, start_handle_1, t)
        return (CubicBezier(self.start, start_handle_0, end_handle_0, point_at_param),
                CubicBezier(point_at_param, start_handle_1, end_handle_1, self.end))


@dataclass(frozen=True)
class CubicBezierSpline:
    """An ordered sequence of :class:`CubicBezier` segments."""

    curves: Tuple[CubicBezier, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, 'curves', tuple(self.curves))

    def __len__(self) -> int:
        return len(self.curves)

    def __iter__(self) -> Iterator[CubicBezier]:
        return iter(self.curves)

    @classmethod
    def by_origins_and_handles(cls, origins: Sequence[Sequence[float]],
                               handles: Sequence[Sequence[float]]) -> 'CubicBezierSpline':
        """Build a smooth spline through ``origins``.

        ``handles[i]`` is the outgoing handle of ``origins[i]``; the
        incoming handle of each following origin mirrors its outgoing
        handle.  The last handle may be omitted, in which case the final
        segment reuses its start handle.
        """
        origins = [vec3(p) for p in origins]
        handles = [vec3(p) for p in handles]
        if len(origins) < 2 or (len(origins) != len(handles)
                                and len(origins) != len(handles) + 1):
            raise ValueError('invalid counts of origins and handles: {}, {}'.format(
                len(origins), len(handles)))
        curves = []
        for i in range(len(origins) - 1):
            start = origins[i]
            start_handle = handles[i]
            end = origins[i + 1]
            if i + 1 < len(handles):
                end_handle = add(end, sub(end, handles[i + 1]))
            else:
                end_handle = start_handle
            curves.append(CubicBezier(start, start_handle, end_handle, end))
        return cls(curves)

    ## controls
    ## --------

    def get_control(self, control_type: ControlType, curve: int) -> Optional[Vec3]:
        """Control of segment ``curve``, or ``None`` if out of range."""
        if curve < 0 or curve >= len(self.curves):
            return None
        return self.curves[curve].get_control(control_type)

    def get_control_by_index(self, index: int) -> Vec3:
        """Control at a flattened ``index`` across all segments."""
        if index < 0 or index >= 4 * len(self.curves):
            raise ValueError('control index out of range: {}'.format(index))
        return self.curves[index // 4].get_control(ControlType.by_index(index))

    def get_controls(self) -> List[Vec3]:
        return [p for curve in self.curves for p in curve.get_controls()]

    def get_start(self) -> Vec3:
        if not self.curves:
            raise ValueError('spline has no curves')
        return self.curves[0].start

    def get_end(self) -> Vec3:
        if not self.curves:
            raise ValueError('spline has no curves')
        return self.curves[-1].end

    def is_connected(self, tolerance: float = CONNECTION_TOLERANCE) -> bool:
        """True if each segment starts where the previous one ends."""
        return all(vclose(a.end, b.start, tolerance)
                   for a, b in zip(self.curves, self.curves[1:]))

    def with_control(self, control_type: ControlType, curve: int,
                     point: Sequence[float]) -> 'CubicBezierSpline':
        """Return a copy with one control moved.

        Moving an anchor drags its handle along, and the matching anchor
        of the neighbouring segment.  Moving a handle rotates the opposing
        handle of the neighbouring segment to keep the joint smooth,
        preserving that handle's distance from the anchor.
        """
        if curve < 0 or curve >= len(self.curves):
            logger.error('Failed to update control point. Curve index is out of range: %s',
                         curve)
            return self
        point = vec3(point)
        curves = list(self.curves)
        current = curves[curve]
        is_first = curve == 0
        is_last = curve == len(curves) - 1
        if control_type is ControlType.START:
            translation = sub(point, current.start)
            curves[curve] = CubicBezier(point, add(current.start_handle, translation),
                                        current.end_handle, current.end)
            if not is_first:
                prev = curves[curve - 1]
                curves[curve - 1] = CubicBezier(prev.start, prev.start_handle,
                                                add(prev.end_handle, translation), point)
        elif control_type is ControlType.START_HANDLE:
            curves[curve] = current.with_control(ControlType.START_HANDLE, point)
            if not is_first:
                anchor = current.start
                prev = curves[curve - 1]
                distance = dist(prev.end_handle, anchor)
                direction = unit(sub(anchor, point))
                curves[curve - 1] = prev.with_control(ControlType.END_HANDLE,
                                                      add(anchor, scale(direction, distance)))
        elif control_type is ControlType.END_HANDLE:
            curves[curve] = current.with_control(ControlType.END_HANDLE, point)
            if not is_last:
                anchor = current.end
                nxt = curves[curve + 1]
                distance = dist(nxt.start_handle, anchor)
                direction = unit(sub(anchor, point))
                curves[curve + 1] = nxt.with_control(ControlType.START_HANDLE,
                                                     add(anchor, scale(direction, distance)))
        elif control_type is ControlType.END:
            translation = sub(point, current.end)
            curves[curve] = CubicBezier(current.start, current.start_handle,
                                        add(current.end_handle, translation), point)
            if not is_last:
                nxt = curves[curve + 1]
                curves[curve + 1] = CubicBezier(point, add(nxt.start_handle, translation),
                                                nxt.end_handle, nxt.end)
        else:
            raise ValueError('bad control type: {}'.format(control_type))
        return CubicBezierSpline(curves)

    ## parameterization
    ## ----------------

    def _curve_at_param(self, param: float) -> Tuple[int, float]:
        if not self.curves:
            raise ValueError('spline has no curves')
        count = len(self.curves)
        scaled = min(1.0, max(0.0, param)) * count
        index = min(int(floor(scaled)), count - 1)
        return index, scaled - index

    def point_at(self, param: float) -> Vec3:
        index, t = self._curve_at_param(param)
        return self.curves[index].point_at(t)

    def tangent_at(self, param: float) -> Vec3:
        index, t = self._curve_at_param(param)
        return self.curves[index].tangent_at(t)

    def curvature_at(self, param: float) -> float:
        index, t = self._curve_at_param(param)
        return self.curves[index].curvature_at(t)

    def length(self, accuracy: float = LENGTH_ACCURACY) -> float:
        """Total arc length, the sum of the segment lengths."""
        return sum(curve.length(accuracy) for curve in self.curves)

    def param_at_length(self, length: float,
                        accuracy: float = LENGTH_ACCURACY) -> Optional[float]:
        """Spline parameter at arc ``length`` from the start.

        Returns ``None`` if ``length`` exceeds the length of the spline.
        """
        if not self.curves:
            return None
        count = len(self.curves)
        preceding = 0.0
        for index, curve in enumerate(self.curves):
            curve_length = curve.length(accuracy)
            if preceding + curve_length >= length:
                t = curve.param_at_length(length - preceding, accuracy)
                return (t + index) / count
            preceding += curve_length
        return None

    def param_nearest_to(self, point: Sequence[float],
                         accuracy: float = LENGTH_ACCURACY) -> float:
        """Spline parameter of the closest point on any segment."""
        if not self.curves:
            raise ValueError('spline has no curves')
        target = vec3(point)
        best = None
        for index, curve in enumerate(self.curves):
            t = curve.param_nearest_to(target, accuracy)
            d = dist(curve.point_at(t), target)
            if best is None or d < best[0]:
                best = (d, index, t)
        _, index, t = best
        return (t + index) / len(self.curves)

    ## derived splines
    ## ---------------

    def reversed(self) -> 'CubicBezierSpline':
        return CubicBezierSpline([curve.reversed() for curve in reversed(self.curves)])

    def split(self, param: float) -> Tuple['CubicBezierSpline', 'CubicBezierSpline']:
        """Split at a spline parameter with de Casteljau's algorithm."""
        index, t = self._curve_at_param(param)
        left, right = self.curves[index].split(t)
        return (CubicBezierSpline(self.curves[:index] + (left,)),
                CubicBezierSpline((right,) + self.curves[index + 1:]))

    def flatten(self, tolerance: float) -> List[Vec3]:
        from konstruo.flatten import flatten
        return flatten(self, tolerance)

    def offset(self, distance: float, accuracy: float) -> 'CubicBezierSpline':
        from konstruo.offset import offset
        return offset(self, distance, accuracy)

    def stroke(self, width: float, tolerance: float) -> 'CubicBezierSpline':
        from konstruo.stroke import stroke
        return stroke(self, width, tolerance)

    def intersections(self, other: 'CubicBezierSpline',
                      tolerance: float = INTERSECTION_TOLERANCE) -> List[Vec3]:
        """Points where this spline crosses ``other``.

        Both splines are flattened first, so the points are accurate to
        ``tolerance``.
        """
        from konstruo.flatten import flatten
        from konstruo.polyline import Polyline
        return Polyline(flatten(self, tolerance)).intersections(
            Polyline(flatten(other, tolerance)))


__all__ = [
    'ControlType',
    'CubicBezier',
    'CubicBezierSpline',
]

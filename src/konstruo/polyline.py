"""Polylines: the flattened form of splines.

A :class:`Polyline` is an immutable sequence of 3D vertices.  It is
what :func:`konstruo.flatten.flatten` produces, and what distances
along a spline are measured on when a layout is projected onto a path.

Lengths are accumulated with :mod:`numpy`; everything else works on
plain tuples.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple

import numpy as np

from konstruo.constants import EPSILON
from konstruo.logging_config import get_logger
from konstruo.vectors import Vec3, dist, lerp, sub, unit, vec3

logger = get_logger(__name__)


@dataclass(frozen=True)
class Polyline:
    """An ordered sequence of vertices."""

    vertices: Tuple[Vec3, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, 'vertices', tuple(vec3(v) for v in self.vertices))

    def __len__(self) -> int:
        return len(self.vertices)

    def __iter__(self):
        return iter(self.vertices)

    def lines(self) -> List[Tuple[Vec3, Vec3]]:
        """Consecutive vertex pairs."""
        return list(zip(self.vertices, self.vertices[1:]))

    def cumulative_lengths(self) -> np.ndarray:
        """Distance from the first vertex to each vertex, along the line."""
        if not self.vertices:
            return np.zeros(0)
        points = np.asarray(self.vertices, dtype=float)
        steps = np.linalg.norm(np.diff(points, axis=0), axis=1)
        return np.concatenate(([0.0], np.cumsum(steps)))

    def length(self) -> float:
        if len(self.vertices) < 2:
            return 0.0
        return float(self.cumulative_lengths()[-1])

    def frame_at_length(self, length: float) -> Tuple[Vec3, Vec3, float]:
        """Point and unit tangent at ``length`` along the line.

        ``length`` is clamped to the line; the third value is how far the
        request lay outside it (zero when in range).  Between vertices the
        point is interpolated linearly and the tangent is that of the
        edge.  Zero-length edges are skipped when choosing the tangent.
        """
        if not self.vertices:
            raise ValueError('polyline has no vertices')
        if len(self.vertices) == 1:
            return self.vertices[0], (0.0, 0.0, 0.0), abs(length)

        cumulative = self.cumulative_lengths()
        total = float(cumulative[-1])
        overshoot = 0.0
        if length < 0.0:
            overshoot = -length
            length = 0.0
        elif length > total:
            overshoot = length - total
            length = total

        index = int(np.searchsorted(cumulative, length, side='right')) - 1
        index = min(max(index, 0), len(self.vertices) - 2)
        a = self.vertices[index]
        b = self.vertices[index + 1]
        before = float(cumulative[index])
        edge = float(cumulative[index + 1]) - before
        point = lerp(a, b, (float(length) - before) / edge) if edge > EPSILON else a
        return point, self._tangent_near(index), overshoot

    def _tangent_near(self, index: int) -> Vec3:
        # nearest edge with a direction, searching forward then back
        count = len(self.vertices) - 1
        order = list(range(index, count)) + list(range(index - 1, -1, -1))
        for i in order:
            a, b = self.vertices[i], self.vertices[i + 1]
            if dist(a, b) > EPSILON:
                return unit(sub(b, a))
        return (0.0, 0.0, 0.0)

    def intersections(self, other: 'Polyline') -> List[Vec3]:
        """Crossings with ``other`` in the XY plane.

        Points come back in order along this line, with ``z`` taken from
        this line.  Parallel overlapping edges contribute nothing.
        """
        found = []
        for a0, a1 in self.lines():
            hits = []
            for b0, b1 in other.lines():
                t = _segment_intersection(a0, a1, b0, b1)
                if t is not None:
                    hits.append(t)
            for t in sorted(hits):
                point = lerp(a0, a1, t)
                if not found or dist(found[-1], point) > EPSILON:
                    found.append(point)
        return found

    def equalize(self, other: 'Polyline') -> Tuple['Polyline', 'Polyline']:
        """Return both lines with equal vertex counts.

        The line with fewer vertices gains midpoints, each inserted into
        its longest edge at the time.
        """
        difference = len(self) - len(other)
        if difference < 0:
            return self._with_added_vertices(-difference), other
        if difference > 0:
            return self, other._with_added_vertices(difference)
        return self, other

    def _with_added_vertices(self, count: int) -> 'Polyline':
        vertices = list(self.vertices)
        if len(vertices) < 2:
            raise ValueError('cannot split edges of a polyline with {} vertices'.format(
                len(vertices)))
        for _ in range(count):
            lengths = [dist(a, b) for a, b in zip(vertices, vertices[1:])]
            longest = lengths.index(max(lengths))
            vertices.insert(longest + 1, lerp(vertices[longest], vertices[longest + 1], 0.5))
        return Polyline(vertices)


def _segment_intersection(a0: Sequence[float], a1: Sequence[float],
                          b0: Sequence[float], b1: Sequence[float]) -> Optional[float]:
    """Parameter along ``a0-a1`` where it crosses ``b0-b1``, if it does."""

    rx, ry = a1[0] - a0[0], a1[1] - a0[1]
    sx, sy = b1[0] - b0[0], b1[1] - b0[1]
    denominator = rx * sy - ry * sx
    if abs(denominator) < EPSILON * EPSILON:
        return None
    qx, qy = b0[0] - a0[0], b0[1] - a0[1]
    t = (qx * sy - qy * sx) / denominator
    u = (qx * ry - qy * rx) / denominator
    if -EPSILON <= t <= 1.0 + EPSILON and -EPSILON <= u <= 1.0 + EPSILON:
        return min(1.0, max(0.0, t))
    return None


def triangle_strip(left: Iterable[Sequence[float]],
                   right: Iterable[Sequence[float]]) -> List[Vec3]:
    """Vertices of a triangle strip spanning two roughly parallel lines.

    The lines are equalized first, then their vertices are interleaved
    ``left[0], right[0], left[1], right[1], ...``.
    """
    left_line, right_line = Polyline(tuple(left)).equalize(Polyline(tuple(right)))
    strip = []
    for a, b in zip(left_line.vertices, right_line.vertices):
        strip.append(a)
        strip.append(b)
    return strip


__all__ = [
    'Polyline',
    'triangle_strip',
]

"""Stroke outlines of splines.

A stroke is the closed outline of a path drawn with a given width.  It
is assembled from four parts, traversed counter-clockwise for a path
running left to right:

1. the left offset of the path at ``+width / 2``, with a join between
   consecutive segments,
2. the end cap,
3. the right offset at ``-width / 2``, traversed backwards with its
   own joins,
4. the start cap, which closes the outline.

The right side is built as the left side of the reversed path, so both
sides share the same join logic.  Straight pieces of the outline
(bevels, miters, butt and square caps) are expressed as cubics with
their handles at the thirds.

Only the outer side of a turn gets a join.  On the inner side the two
offsets overlap and are simply connected with a straight line.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from math import atan2, ceil, cos, pi, sin, sqrt, tan
from typing import List, Sequence

from konstruo import curvemath as cm
from konstruo.bezier import CubicBezierSpline
from konstruo.constants import EPSILON, FLATTEN_TOLERANCE, MITER_LIMIT
from konstruo.logging_config import get_logger
from konstruo.offset import offset_cubic

logger = get_logger(__name__)


class Join(Enum):
    """Shape of the outer corner between consecutive segments."""

    MITER = 'miter'
    BEVEL = 'bevel'
    ROUND = 'round'


class Cap(Enum):
    """Shape of the open ends of a stroke."""

    BUTT = 'butt'
    SQUARE = 'square'
    ROUND = 'round'


@dataclass(frozen=True)
class StrokeStyle:
    """Join and cap settings for :func:`stroke`.

    A miter longer than ``miter_limit`` times the stroke width is
    replaced by a bevel.
    """

    join: Join = Join.MITER
    miter_limit: float = MITER_LIMIT
    start_cap: Cap = Cap.BUTT
    end_cap: Cap = Cap.BUTT


def stroke(spline: CubicBezierSpline, width: float, tolerance: float = FLATTEN_TOLERANCE,
           style: StrokeStyle = StrokeStyle()) -> CubicBezierSpline:
    """Closed outline of ``spline`` drawn ``width`` wide.

    The offsets are fitted to within ``tolerance``.  A zero width or a
    path without length yields an empty spline.
    """
    if width < 0.0:
        raise ValueError('stroke width must not be negative: {}'.format(width))
    cubics = [c for c in cm.from_spline(spline) if not cm.is_degenerate(c)]
    if width < EPSILON or not cubics:
        logger.debug('nothing to stroke: width %s, %d usable segments', width, len(cubics))
        return CubicBezierSpline()

    half = width / 2.0
    backwards = [cm.Cubic2(c.p3, c.p2, c.p1, c.p0) for c in reversed(cubics)]
    outline = _Outline()
    _add_side(outline, cubics, half, style, tolerance)
    _add_cap(outline, cubics[-1].p3, cm.tangent_at(cubics[-1], 1.0), half, style.end_cap)
    _add_side(outline, backwards, half, style, tolerance)
    _add_cap(outline, backwards[-1].p3, cm.tangent_at(backwards[-1], 1.0), half,
             style.start_cap)
    outline.close()
    return cm.to_spline(outline.cubics)


class _Outline:
    """Accumulates outline pieces, bridging gaps with straight lines."""

    def __init__(self):
        self.cubics: List[cm.Cubic2] = []

    @property
    def current(self):
        return self.cubics[-1].p3 if self.cubics else None

    def line_to(self, point: cm.Point2) -> None:
        current = self.current
        if current is None or cm.norm2(cm.sub2(point, current)) < EPSILON:
            return
        self.cubics.append(cm.line_cubic(current, point))

    def extend(self, cubics: Sequence[cm.Cubic2]) -> None:
        for c in cubics:
            self.line_to(c.p0)
            self.cubics.append(c)

    def close(self) -> None:
        if not self.cubics:
            return
        first = self.cubics[0].p0
        if cm.norm2(cm.sub2(first, self.current)) >= EPSILON:
            self.cubics.append(cm.line_cubic(self.current, first))
        else:
            last = self.cubics[-1]
            self.cubics[-1] = cm.Cubic2(last.p0, last.p1, last.p2, first)


def _add_side(outline: _Outline, cubics: Sequence[cm.Cubic2], half: float,
              style: StrokeStyle, accuracy: float) -> None:
    """Left offset of ``cubics`` with joins at the segment boundaries."""

    previous = None
    for c in cubics:
        pieces = offset_cubic(c, half, accuracy)
        if previous is not None and pieces:
            _add_join(outline, previous, c, pieces[0].p0, half, style)
        outline.extend(pieces)
        previous = c


def _add_join(outline: _Outline, previous: cm.Cubic2, following: cm.Cubic2,
              next_start: cm.Point2, half: float, style: StrokeStyle) -> None:
    prev_tangent = cm.tangent_at(previous, 1.0)
    next_tangent = cm.tangent_at(following, 0.0)
    turn = cm.cross2(prev_tangent, next_tangent)
    alignment = cm.dot2(prev_tangent, next_tangent)
    u_turn = abs(turn) < 1e-6 and alignment < 0.0
    # a right turn opens a gap on the left side
    if not (turn < -1e-6 or u_turn):
        outline.line_to(next_start)
        return

    prev_end = outline.current
    if style.join is Join.BEVEL or prev_end is None:
        outline.line_to(next_start)
    elif style.join is Join.ROUND:
        vertex = previous.p3
        a0 = atan2(prev_end[1] - vertex[1], prev_end[0] - vertex[0])
        a1 = atan2(next_start[1] - vertex[1], next_start[0] - vertex[0])
        sweep = _normalize_angle(a1 - a0)
        # outer joins on the left always turn clockwise
        if sweep > 0.0:
            sweep -= 2.0 * pi
        outline.extend(arc_cubics(vertex, half, a0, sweep))
        outline.line_to(next_start)
    else:
        miter = miter_point(prev_end, prev_tangent, next_start, next_tangent,
                            style.miter_limit)
        if miter is not None:
            outline.line_to(miter)
        outline.line_to(next_start)


def miter_point(prev_end: cm.Point2, prev_tangent: cm.Point2, next_start: cm.Point2,
                next_tangent: cm.Point2, miter_limit: float = MITER_LIMIT):
    """Corner where the two offset edges meet, or ``None`` when the miter
    would exceed ``miter_limit`` and a bevel should be drawn instead.
    """
    denominator = cm.cross2(prev_tangent, next_tangent)
    if abs(denominator) < 1e-12:
        return None
    alignment = max(-1.0, min(1.0, cm.dot2(prev_tangent, next_tangent)))
    cos_half = sqrt(max(0.0, (1.0 + alignment) / 2.0))
    if cos_half < 1e-12 or 1.0 / cos_half > miter_limit:
        return None
    t = cm.cross2(cm.sub2(next_start, prev_end), next_tangent) / denominator
    return cm.add2(prev_end, cm.scale2(prev_tangent, t))


def _add_cap(outline: _Outline, point: cm.Point2, tangent: cm.Point2, half: float,
             cap: Cap) -> None:
    """Connect the left edge to the right edge around the end ``point``,
    where ``tangent`` is the direction of travel arriving there.
    """
    normal = cm.left_normal2(tangent)
    left = cm.add2(point, cm.scale2(normal, half))
    right = cm.sub2(point, cm.scale2(normal, half))
    outline.line_to(left)
    if cap is Cap.SQUARE:
        extension = cm.scale2(tangent, half)
        outline.line_to(cm.add2(left, extension))
        outline.line_to(cm.add2(right, extension))
    elif cap is Cap.ROUND:
        start = atan2(normal[1], normal[0])
        outline.extend(arc_cubics(point, half, start, -pi / 2.0))
        outline.extend(arc_cubics(point, half, start - pi / 2.0, -pi / 2.0))
    outline.line_to(right)


## arcs
## ----

def arc_cubics(center: cm.Point2, radius: float, start_angle: float,
               sweep: float) -> List[cm.Cubic2]:
    """Approximate a circular arc with cubics of at most 90 degrees each."""

    count = max(1, int(ceil(abs(sweep) / (pi / 2.0) - 1e-9)))
    step = sweep / count
    alpha = 4.0 * tan(step / 4.0) / 3.0
    out = []
    for i in range(count):
        a0 = start_angle + i * step
        a1 = a0 + step
        c0, s0 = cos(a0), sin(a0)
        c1, s1 = cos(a1), sin(a1)
        out.append(cm.Cubic2(
            (center[0] + radius * c0, center[1] + radius * s0),
            (center[0] + radius * (c0 - alpha * s0), center[1] + radius * (s0 + alpha * c0)),
            (center[0] + radius * (c1 + alpha * s1), center[1] + radius * (s1 - alpha * c1)),
            (center[0] + radius * c1, center[1] + radius * s1)))
    return out


def _normalize_angle(angle: float) -> float:
    """Wrap ``angle`` into ``(-pi, pi]``."""
    while angle > pi + 1e-10:
        angle -= 2.0 * pi
    while angle <= -pi + 1e-10:
        angle += 2.0 * pi
    return angle


__all__ = [
    'Join',
    'Cap',
    'StrokeStyle',
    'stroke',
    'miter_point',
    'arc_cubics',
]

"""Flex distribution of sized items.

====================
OVERVIEW
====================

:func:`distribute` places a set of boxes (:class:`Distributable`)
along a main axis, much like a CSS flexbox lays out its children.  The
result is a :class:`Container` holding every item's final size and its
translation relative to the container's center.

Three axes are involved.  The *main* axis is the direction items are
laid out along, the *cross* axis is the direction wrapped lines stack
along, and the *normal* axis is ``main x cross``.  Axes need not be
aligned with the world axes; extents along them are the projections of
each box and its margins onto the axis.

margins
=======

Each item carries a :class:`Margin` with one distance per face.  At the
container edges margins apply in full.  Between neighbours they
collapse: the space between two adjacent items is the larger of the
two facing margins (or the configured gap, if larger), never the sum.

surplus space
=============

When the container is given a fixed main size (``FlexConfig.bounds``)
that exceeds its content, the surplus is shared equally by the items
marked ``flexible``.  Without flexible items the surplus is placed
according to ``justify_content``.

On the cross axis the same happens between wrapped lines: when a fixed
cross size leaves room beyond the lines, ``align_content`` decides
where it goes.

ordering
========

Items are sorted by ``order`` with a stable sort, so ties keep their
input sequence.  Items without an explicit order go last.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Sequence, Tuple

import numpy as np

from konstruo.constants import EPSILON
from konstruo.logging_config import get_logger
from konstruo.vectors import X, Y, ZERO, Vec3, vec3

logger = get_logger(__name__)

## order of items with no explicit position: after everything else
ORDER_LAST = sys.maxsize


class AlignItems(Enum):
    """Placement of an item across its line."""

    START = 'start'
    CENTER = 'center'
    END = 'end'
    STRETCH = 'stretch'


class JustifyContent(Enum):
    """Placement of surplus main axis space when no item is flexible."""

    START = 'start'
    CENTER = 'center'
    END = 'end'
    SPACE_BETWEEN = 'space-between'
    SPACE_AROUND = 'space-around'
    SPACE_EVENLY = 'space-evenly'


class AlignContent(Enum):
    """Placement of wrapped lines when the cross axis has room to spare."""

    START = 'start'
    CENTER = 'center'
    END = 'end'
    STRETCH = 'stretch'
    SPACE_BETWEEN = 'space-between'
    SPACE_AROUND = 'space-around'
    SPACE_EVENLY = 'space-evenly'


class FlexWrap(Enum):
    NO_WRAP = 'nowrap'
    WRAP = 'wrap'


@dataclass(frozen=True)
class Margin:
    """Distances kept clear on each face of a box."""

    x_pos: float = 0.0
    x_neg: float = 0.0
    y_pos: float = 0.0
    y_neg: float = 0.0
    z_pos: float = 0.0
    z_neg: float = 0.0

    @classmethod
    def splat(cls, value: float) -> 'Margin':
        """The same margin on every face."""
        return cls(value, value, value, value, value, value)

    def positive(self) -> np.ndarray:
        return np.array([self.x_pos, self.y_pos, self.z_pos], dtype=float)

    def negative(self) -> np.ndarray:
        return np.array([self.x_neg, self.y_neg, self.z_neg], dtype=float)

    def leading(self, axis: Sequence[float]) -> float:
        """Margin on the faces a box presents towards ``-axis``."""
        a = np.asarray(axis, dtype=float)
        return float(np.sum(np.abs(a) * np.where(a > 0.0, self.negative(), self.positive())))

    def trailing(self, axis: Sequence[float]) -> float:
        """Margin on the faces a box presents towards ``+axis``."""
        a = np.asarray(axis, dtype=float)
        return float(np.sum(np.abs(a) * np.where(a > 0.0, self.positive(), self.negative())))


Margin.ZERO = Margin()


@dataclass(frozen=True)
class Distributable:
    """An item to be placed: a box with margins and a sort order."""

    size: Vec3
    margin: Margin = Margin.ZERO
    order: int = ORDER_LAST
    flexible: bool = False

    def __post_init__(self):
        object.__setattr__(self, 'size', vec3(self.size))


@dataclass(frozen=True)
class Distributed:
    """A placed item.

    ``size`` is the size after stretching and flexing, ``translation``
    the offset of the item's center from the container's center, and
    ``rotation`` the heading about +Z in radians.
    """

    size: Vec3
    translation: Vec3
    source: Distributable
    rotation: float = 0.0


@dataclass(frozen=True)
class Container:
    """The outcome of a layout pass."""

    size: Vec3
    items: Tuple[Distributed, ...] = ()
    main_axis: Vec3 = X
    cross_axis: Vec3 = Y
    warnings: Tuple[str, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, 'items', tuple(self.items))
        object.__setattr__(self, 'warnings', tuple(self.warnings))


@dataclass(frozen=True)
class FlexConfig:
    """How :func:`distribute` lays items out.

    ``bounds`` fixes the container size; a zero component leaves that
    axis sized to its content.  ``gap`` is the minimum spacing between
    neighbours, per axis.
    """

    main_axis: Vec3 = X
    cross_axis: Vec3 = Y
    align_items_cross: AlignItems = AlignItems.START
    align_items_normal: AlignItems = AlignItems.START
    justify_content: JustifyContent = JustifyContent.START
    align_content: AlignContent = AlignContent.START
    wrap: FlexWrap = FlexWrap.NO_WRAP
    gap: Vec3 = ZERO
    bounds: Optional[Vec3] = None
    translate_to_ground: bool = False

    def __post_init__(self):
        main = _unit_axis(self.main_axis, 'main')
        cross = _unit_axis(self.cross_axis, 'cross')
        if np.linalg.norm(np.cross(main, cross)) < EPSILON:
            raise ValueError('main and cross axes must not be parallel: {}, {}'.format(
                self.main_axis, self.cross_axis))
        object.__setattr__(self, 'main_axis', _to_vec3(main))
        object.__setattr__(self, 'cross_axis', _to_vec3(cross))
        object.__setattr__(self, 'gap', vec3(self.gap))
        if self.bounds is not None:
            object.__setattr__(self, 'bounds', vec3(self.bounds))

    @property
    def normal_axis(self) -> Vec3:
        return _to_vec3(_unit_axis(np.cross(self.main_axis, self.cross_axis), 'normal'))


def _unit_axis(axis: Sequence[float], name: str) -> np.ndarray:
    a = np.asarray(vec3(tuple(axis)), dtype=float)
    n = np.linalg.norm(a)
    if n < EPSILON:
        raise ValueError('{} axis has no length: {}'.format(name, tuple(axis)))
    return a / n


def _to_vec3(a) -> Vec3:
    return (float(a[0]), float(a[1]), float(a[2]))


def extent(size: Sequence[float], axis: Sequence[float]) -> float:
    """Extent of a box of ``size`` along ``axis``."""
    return float(np.dot(np.abs(np.asarray(axis, dtype=float)), np.asarray(size, dtype=float)))


## layout
## ------

class _Slot:
    """Working state of one item during a layout pass."""

    def __init__(self, source: Distributable):
        self.source = source
        self.size = np.asarray(source.size, dtype=float)
        self.position = np.zeros(3)

    def extent(self, axis: np.ndarray) -> float:
        return extent(self.size, axis)

    def grow(self, axis: np.ndarray, amount: float) -> None:
        self.size = self.size + np.abs(axis) * amount


def distribute(items: Sequence[Distributable], config: FlexConfig = FlexConfig()) -> Container:
    """Lay ``items`` out according to ``config``.

    The input is not modified and the same input always gives the same
    container.
    """
    main = np.asarray(config.main_axis, dtype=float)
    cross = np.asarray(config.cross_axis, dtype=float)
    normal = np.asarray(config.normal_axis, dtype=float)
    gap = np.asarray(config.gap, dtype=float)
    bounds = np.asarray(config.bounds if config.bounds is not None else ZERO, dtype=float)

    slots = [_Slot(item) for item in sorted(items, key=lambda item: item.order)]
    main_gap = extent(gap, main)
    cross_gap = extent(gap, cross)
    main_bound = extent(bounds, main)
    cross_bound = extent(bounds, cross)
    normal_bound = extent(bounds, normal)

    wrapping = config.wrap is FlexWrap.WRAP and main_bound > EPSILON
    lines = _break_lines(slots, main, main_gap, main_bound if wrapping else None)

    if main_bound > EPSILON:
        main_size = main_bound
    else:
        main_size = max([_line_length(line, main, main_gap) for line in lines], default=0.0)
    for line in lines:
        _place_main(line, main, main_gap, main_size, config.justify_content)

    line_extents = [max(_outer_extent(slot, cross) for slot in line) for line in lines]
    if cross_bound > EPSILON:
        cross_size = cross_bound
        if len(lines) == 1:
            line_extents = [cross_size]
    else:
        cross_size = sum(line_extents) + cross_gap * max(0, len(lines) - 1)
    line_starts, line_extents = _place_lines(line_extents, cross_gap, cross_size,
                                             config.align_content)
    for line, line_start, line_extent in zip(lines, line_starts, line_extents):
        for slot in line:
            _align(slot, cross, 1, line_start, line_extent, cross_size,
                   config.align_items_cross)

    if normal_bound > EPSILON:
        normal_size = normal_bound
    else:
        normal_size = max([_outer_extent(slot, normal) for slot in slots], default=0.0)
    for slot in slots:
        _align(slot, normal, 2, 0.0, normal_size, normal_size, config.align_items_normal)

    size = np.abs(main) * main_size + np.abs(cross) * cross_size + np.abs(normal) * normal_size
    distributed = []
    for slot in slots:
        translation = main * slot.position[0] + cross * slot.position[1] + normal * slot.position[2]
        distributed.append(Distributed(size=_to_vec3(slot.size),
                                       translation=_to_vec3(translation),
                                       source=slot.source))
    logger.debug('distributed %d items in %d lines, container size %s',
                 len(distributed), len(lines), _to_vec3(size))

    container = Container(size=_to_vec3(size), items=distributed,
                          main_axis=config.main_axis, cross_axis=config.cross_axis)
    if config.translate_to_ground:
        from konstruo.projection import ground
        container = ground(container)
    return container


def _outer_extent(slot: _Slot, axis: np.ndarray) -> float:
    margin = slot.source.margin
    return margin.leading(axis) + slot.extent(axis) + margin.trailing(axis)


def _spacing(before: _Slot, after: _Slot, axis: np.ndarray, gap: float) -> float:
    """Collapsed space between two neighbours."""
    return max(before.source.margin.trailing(axis), after.source.margin.leading(axis), gap)


def _line_length(line: List[_Slot], axis: np.ndarray, gap: float) -> float:
    if not line:
        return 0.0
    total = line[0].source.margin.leading(axis) + line[-1].source.margin.trailing(axis)
    total += sum(slot.extent(axis) for slot in line)
    total += sum(_spacing(a, b, axis, gap) for a, b in zip(line, line[1:]))
    return total


def _break_lines(slots: List[_Slot], axis: np.ndarray, gap: float,
                 limit: Optional[float]) -> List[List[_Slot]]:
    """Split ``slots`` into lines no longer than ``limit``.

    An item that does not fit even on its own still gets a line.
    """
    if not slots:
        return []
    if limit is None:
        return [list(slots)]
    lines: List[List[_Slot]] = [[]]
    for slot in slots:
        candidate = lines[-1] + [slot]
        if lines[-1] and _line_length(candidate, axis, gap) > limit + EPSILON:
            lines.append([slot])
        else:
            lines[-1] = candidate
    return lines


def _place_main(line: List[_Slot], axis: np.ndarray, gap: float, size: float,
                justify: JustifyContent) -> None:
    surplus = size - _line_length(line, axis, gap)
    flexible = [slot for slot in line if slot.source.flexible]
    start = 0.0
    extra = 0.0
    if surplus > EPSILON and flexible:
        share = surplus / len(flexible)
        for slot in flexible:
            slot.grow(axis, share)
    elif surplus > EPSILON:
        count = len(line)
        if justify is JustifyContent.CENTER:
            start = surplus / 2.0
        elif justify is JustifyContent.END:
            start = surplus
        elif justify is JustifyContent.SPACE_BETWEEN and count > 1:
            extra = surplus / (count - 1)
        elif justify is JustifyContent.SPACE_AROUND:
            extra = surplus / count
            start = extra / 2.0
        elif justify is JustifyContent.SPACE_EVENLY:
            extra = surplus / (count + 1)
            start = extra

    cursor = start + line[0].source.margin.leading(axis)
    for i, slot in enumerate(line):
        length = slot.extent(axis)
        slot.position[0] = cursor + length / 2.0 - size / 2.0
        cursor += length
        if i + 1 < len(line):
            cursor += _spacing(slot, line[i + 1], axis, gap) + extra


def _place_lines(extents: List[float], gap: float, size: float,
                 align: AlignContent) -> Tuple[List[float], List[float]]:
    """Start and extent of each line across the container.

    Room left over by several lines is shared according to ``align``;
    a single line, or lines that already fill the container, stack from
    the start edge.
    """
    count = len(extents)
    surplus = size - sum(extents) - gap * max(0, count - 1)
    start = 0.0
    extra = 0.0
    if count > 1 and surplus > EPSILON:
        if align is AlignContent.CENTER:
            start = surplus / 2.0
        elif align is AlignContent.END:
            start = surplus
        elif align is AlignContent.STRETCH:
            extents = [e + surplus / count for e in extents]
        elif align is AlignContent.SPACE_BETWEEN:
            extra = surplus / (count - 1)
        elif align is AlignContent.SPACE_AROUND:
            extra = surplus / count
            start = extra / 2.0
        elif align is AlignContent.SPACE_EVENLY:
            extra = surplus / (count + 1)
            start = extra

    starts = []
    cursor = start
    for e in extents:
        starts.append(cursor)
        cursor += e + gap + extra
    return starts, list(extents)


def _align(slot: _Slot, axis: np.ndarray, index: int, line_start: float,
           line_extent: float, container_extent: float, align: AlignItems) -> None:
    """Place ``slot`` across ``axis`` within one line, writing the
    result into component ``index`` of its position.
    """
    margin = slot.source.margin
    lead = margin.leading(axis)
    trail = margin.trailing(axis)
    length = slot.extent(axis)
    if align is AlignItems.STRETCH:
        stretched = max(0.0, line_extent - lead - trail)
        slot.grow(axis, stretched - length)
        length = stretched
        center = line_start + lead + length / 2.0
    elif align is AlignItems.END:
        center = line_start + line_extent - trail - length / 2.0
    elif align is AlignItems.CENTER:
        center = line_start + lead + (line_extent - lead - trail) / 2.0
    else:
        center = line_start + lead + length / 2.0
    slot.position[index] = center - container_extent / 2.0


__all__ = [
    'ORDER_LAST',
    'AlignItems',
    'JustifyContent',
    'AlignContent',
    'FlexWrap',
    'Margin',
    'Distributable',
    'Distributed',
    'Container',
    'FlexConfig',
    'extent',
    'distribute',
]

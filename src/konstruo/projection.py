"""Placing distributed layouts on the ground and along paths.

A :class:`~konstruo.distribution.Container` is laid out on straight
axes around its own center.  The functions here move it into the
scene: :func:`ground` lifts it so it stands on ``z = 0``, and
:func:`project_onto_path` bends its main axis along a spline, as when
buildings are placed along a road.
"""

from __future__ import annotations

from dataclasses import replace
from math import atan2

from konstruo.bezier import CubicBezierSpline
from konstruo.constants import FLATTEN_TOLERANCE
from konstruo.distribution import Container, extent
from konstruo.flatten import flatten
from konstruo.logging_config import get_logger
from konstruo.polyline import Polyline
from konstruo.vectors import Z, add, dot, left_normal, scale

logger = get_logger(__name__)


def ground(container: Container) -> Container:
    """Shift every item up by half the container height, so that the
    container's lowest face rests at ``z = 0``.
    """
    lift = container.size[2] / 2.0
    items = [replace(item, translation=add(item.translation, scale(Z, lift)))
             for item in container.items]
    return replace(container, items=tuple(items))


def project_onto_path(container: Container, spline: CubicBezierSpline, offset: float = 0.0,
                      tolerance: float = FLATTEN_TOLERANCE) -> Container:
    """Reinterpret the main axis of ``container`` as distance along ``spline``.

    An item's position along the main axis, measured from the leading
    edge of the container, becomes an arc length on the spline
    flattened to ``tolerance``.  Its offset across the main axis, plus
    ``offset``, is applied along the path's left normal, and its height
    is kept.  Translations in the result are in the coordinates of the
    spline rather than relative to the container, and each item's
    ``rotation`` is the heading of the path at its position.

    Arc lengths past either end of the path are clamped to that end.
    Overshooting by more than ``tolerance`` is reported in the
    container's ``warnings``.
    """
    polyline = Polyline(flatten(spline, tolerance))
    if len(polyline) == 0:
        message = 'cannot project {} items onto an empty path'.format(len(container.items))
        logger.warning(message)
        return replace(container, warnings=container.warnings + (message,))

    main = container.main_axis
    side = left_normal(main)
    leading_edge = extent(container.size, main) / 2.0
    warnings = []
    items = []
    for index, item in enumerate(container.items):
        distance = dot(item.translation, main) + leading_edge
        point, tangent, overshoot = polyline.frame_at_length(distance)
        if overshoot > tolerance:
            message = ('item {} lies {:.6f} beyond the path of length {:.6f}; '
                       'clamped to the end'.format(index, overshoot, polyline.length()))
            logger.warning(message)
            warnings.append(message)
        elif overshoot > 0.0:
            logger.debug('item %d clamped to the path end, overshoot %.3g', index, overshoot)
        lateral = dot(item.translation, side) + offset
        position = add(point, scale(left_normal(tangent), lateral))
        position = (position[0], position[1], position[2] + item.translation[2])
        items.append(replace(item, translation=position,
                             rotation=atan2(tangent[1], tangent[0])))
    return replace(container, items=tuple(items),
                   warnings=container.warnings + tuple(warnings))


__all__ = [
    'ground',
    'project_onto_path',
]

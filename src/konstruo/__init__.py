# -*- coding: utf-8 -*-
"""konstruo: Bézier spline geometry and flex distribution layout.

The public entry points are re-exported here::

    from konstruo import flatten, offset, stroke, distribute, project_onto_path
"""
from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("konstruo")
except PackageNotFoundError:  # pragma: no cover - handled when package not installed
    __version__ = "unknown"

from konstruo.bezier import ControlType, CubicBezier, CubicBezierSpline
from konstruo.distribution import (
    AlignContent,
    AlignItems,
    Container,
    Distributable,
    Distributed,
    FlexConfig,
    FlexWrap,
    JustifyContent,
    Margin,
    distribute,
)
from konstruo.flatten import flatten
from konstruo.offset import offset
from konstruo.polyline import Polyline
from konstruo.projection import ground, project_onto_path
from konstruo.stroke import Cap, Join, StrokeStyle, stroke

__all__ = [
    'ControlType',
    'CubicBezier',
    'CubicBezierSpline',
    'Polyline',
    'AlignContent',
    'AlignItems',
    'JustifyContent',
    'FlexWrap',
    'Margin',
    'Distributable',
    'Distributed',
    'Container',
    'FlexConfig',
    'Join',
    'Cap',
    'StrokeStyle',
    'flatten',
    'offset',
    'stroke',
    'distribute',
    'project_onto_path',
    'ground',
]

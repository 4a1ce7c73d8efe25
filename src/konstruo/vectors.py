## three-vector operations for the konstruo geometry core
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

"""three-vector operations for the konstruo geometry core

Vectors and points are plain ``(x, y, z)`` tuples of floats.  There is
no homogeneous ``w`` coordinate: the core never applies projective
transforms, and the host owns placement in the scene.

All functions are pure and return new tuples.
"""

from __future__ import annotations

from math import sqrt
from typing import Sequence, Tuple

import numpy as np

from konstruo.constants import EPSILON

Vec3 = Tuple[float, float, float]

ZERO: Vec3 = (0.0, 0.0, 0.0)
X: Vec3 = (1.0, 0.0, 0.0)
Y: Vec3 = (0.0, 1.0, 0.0)
Z: Vec3 = (0.0, 0.0, 1.0)


def vec3(x=0.0, y=0.0, z=0.0) -> Vec3:
    """Make a vector from up to three numbers, or from any sequence
    of two or three numbers (including numpy arrays).  Missing
    components are zero.
    """
    if isinstance(x, (tuple, list, np.ndarray)):
        if len(x) < 2 or len(x) > 3:
            raise ValueError('bad sequence passed to vec3: {}'.format(x))
        return (float(x[0]), float(x[1]), float(x[2]) if len(x) == 3 else 0.0)
    return (float(x), float(y), float(z))


def add(a: Sequence[float], b: Sequence[float]) -> Vec3:
    """ 3 vector, ``a + b``"""
    return (a[0] + b[0], a[1] + b[1], a[2] + b[2])


def sub(a: Sequence[float], b: Sequence[float]) -> Vec3:
    """ 3 vector, ``a - b``"""
    return (a[0] - b[0], a[1] - b[1], a[2] - b[2])


def scale(a: Sequence[float], s: float) -> Vec3:
    """ 3 vector, ``a * s``"""
    return (a[0] * s, a[1] * s, a[2] * s)


def dot(a: Sequence[float], b: Sequence[float]) -> float:
    return a[0] * b[0] + a[1] * b[1] + a[2] * b[2]


def cross(a: Sequence[float], b: Sequence[float]) -> Vec3:
    return (a[1] * b[2] - a[2] * b[1],
            a[2] * b[0] - a[0] * b[2],
            a[0] * b[1] - a[1] * b[0])


def mag(a: Sequence[float]) -> float:
    """ magnitude of a 3 vector"""
    return sqrt(a[0] * a[0] + a[1] * a[1] + a[2] * a[2])


def dist(a: Sequence[float], b: Sequence[float]) -> float:
    """ distance between two points"""
    return mag(sub(a, b))


def unit(a: Sequence[float]) -> Vec3:
    """Return ``a`` scaled to length one.  A zero-length vector is
    returned unchanged, since there is no direction to preserve.
    """
    m = mag(a)
    if m < EPSILON:
        return (float(a[0]), float(a[1]), float(a[2]))
    return (a[0] / m, a[1] / m, a[2] / m)


def lerp(a: Sequence[float], b: Sequence[float], t: float) -> Vec3:
    """linear interpolation, ``t=0`` yields ``a`` and ``t=1`` yields ``b``"""
    return (a[0] + (b[0] - a[0]) * t,
            a[1] + (b[1] - a[1]) * t,
            a[2] + (b[2] - a[2]) * t)


def vclose(a: Sequence[float], b: Sequence[float], tol: float = EPSILON) -> bool:
    """ are two points the same within ``tol``"""
    return dist(a, b) <= tol


def left_normal(tangent: Sequence[float]) -> Vec3:
    """Unit normal in the XY plane, pointing left of travel along
    ``tangent``.  Zero when the tangent has no XY component.
    """
    return unit((-tangent[1], tangent[0], 0.0))


__all__ = [
    'Vec3',
    'ZERO',
    'X',
    'Y',
    'Z',
    'vec3',
    'add',
    'sub',
    'scale',
    'dot',
    'cross',
    'mag',
    'dist',
    'unit',
    'lerp',
    'vclose',
    'left_normal',
]

"""Tolerances and limits shared across the konstruo geometry core.

Lengths are in metres.  The defaults are architectural tolerances:
10 mm is close enough for a road edge or a plot boundary, 1 mm for a
measured length.  Every operation takes its tolerance as an explicit
argument, so these are only defaults.  Redefine them at your peril.
"""

#: threshold for treating scalars and vector lengths as zero
EPSILON = 0.000005

#: largest out-of-plane coordinate accepted silently by the planar layer
PLANAR_EPSILON = 0.0001

#: maximum distance from a flattened polyline to its curve
FLATTEN_TOLERANCE = 0.010

#: maximum deviation of a fitted offset curve from the true offset
OFFSET_ACCURACY = 1.0

#: accuracy of arc length computations
LENGTH_ACCURACY = 0.001

#: flattening tolerance used when intersecting splines
INTERSECTION_TOLERANCE = 0.010

#: distance under which consecutive spline segments count as connected
CONNECTION_TOLERANCE = 0.010

#: recursion cap for every adaptive subdivision; 2**16 pieces per segment
MAX_SUBDIVISION_DEPTH = 16

#: miter joins whose length exceeds this multiple of the stroke width become bevels
MITER_LIMIT = 100.0


__all__ = [
    'EPSILON',
    'PLANAR_EPSILON',
    'FLATTEN_TOLERANCE',
    'OFFSET_ACCURACY',
    'LENGTH_ACCURACY',
    'INTERSECTION_TOLERANCE',
    'CONNECTION_TOLERANCE',
    'MAX_SUBDIVISION_DEPTH',
    'MITER_LIMIT',
]

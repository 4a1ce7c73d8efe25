import math

import numpy as np
import pytest

from konstruo.vectors import (
    X,
    Y,
    Z,
    add,
    cross,
    dist,
    dot,
    left_normal,
    lerp,
    mag,
    scale,
    sub,
    unit,
    vclose,
    vec3,
)


def test_vec3_from_numbers_and_sequences():
    assert vec3(1, 2) == (1.0, 2.0, 0.0)
    assert vec3([1, 2]) == (1.0, 2.0, 0.0)
    assert vec3((1, 2, 3)) == (1.0, 2.0, 3.0)


def test_vec3_from_numpy_arrays():
    v = vec3(np.array([1.5, 2.0]))
    assert v == (1.5, 2.0, 0.0)
    assert all(type(c) is float for c in v)
    assert vec3(np.arange(3)) == (0.0, 1.0, 2.0)


@pytest.mark.parametrize("bad", [[1], (1, 2, 3, 4)])
def test_vec3_rejects_bad_sequences(bad):
    with pytest.raises(ValueError):
        vec3(bad)


def test_basic_arithmetic():
    a = (1.0, 2.0, 3.0)
    b = (4.0, 5.0, 6.0)
    assert add(a, b) == (5.0, 7.0, 9.0)
    assert sub(b, a) == (3.0, 3.0, 3.0)
    assert scale(a, 2.0) == (2.0, 4.0, 6.0)
    assert dot(a, b) == 32.0
    assert cross(X, Y) == Z


def test_lengths_and_distances():
    assert mag((3.0, 4.0, 0.0)) == 5.0
    assert dist((0, 0, 0), (0, 0, 2)) == 2.0


def test_unit_leaves_zero_vector_alone():
    assert unit((0.0, 0.0, 0.0)) == (0.0, 0.0, 0.0)
    assert vclose(unit((0.0, 3.0, 4.0)), (0.0, 0.6, 0.8))


def test_vclose_includes_the_tolerance():
    assert vclose((0.0, 0.0, 0.0), (0.5, 0.0, 0.0), 0.5)
    assert not vclose((0.0, 0.0, 0.0), (0.5, 0.0, 0.0), 0.25)


def test_lerp_endpoints_and_midpoint():
    a = (0.0, 0.0, 0.0)
    b = (2.0, 4.0, 6.0)
    assert lerp(a, b, 0.0) == a
    assert lerp(a, b, 1.0) == b
    assert lerp(a, b, 0.5) == (1.0, 2.0, 3.0)


def test_left_normal_points_left_of_travel():
    assert vclose(left_normal(X), Y)
    assert vclose(left_normal(Y), (-1.0, 0.0, 0.0))
    diagonal = left_normal((1.0, 1.0, 0.0))
    assert diagonal[0] == pytest.approx(-math.sqrt(0.5))
    assert diagonal[1] == pytest.approx(math.sqrt(0.5))
    assert left_normal(Z) == (0.0, 0.0, 0.0)

import math

import pytest

from snakecore.extra_math import Frustum, Plane


def test_default_plane():
    plane = Plane()
    assert plane.normal == (0.0, 1.0, 0.0)
    assert plane.distance == 0.0


def test_normal_is_normalized():
    plane = Plane.from_normal_and_point((0.0, 0.0, 4.0), (1.0, 2.0, 3.0))
    assert plane.normal == (0.0, 0.0, 1.0)
    assert math.isclose(math.hypot(*plane.normal), 1.0)


def test_defining_point_lies_on_plane():
    point = (1.5, -2.0, 7.0)
    plane = Plane.from_normal_and_point((1.0, 2.0, 2.0), point)
    assert math.isclose(plane.signed_distance(point), 0.0, abs_tol=1e-12)


def test_signed_distance_along_normal():
    point = (1.5, -2.0, 7.0)
    plane = Plane.from_normal_and_point((1.0, 2.0, 2.0), point)
    offset = 2.5
    moved = tuple(p + offset * n for p, n in zip(point, plane.normal))
    back = tuple(p - offset * n for p, n in zip(point, plane.normal))
    assert math.isclose(plane.signed_distance(moved), offset)
    assert math.isclose(plane.signed_distance(back), -offset)


def test_zero_normal_rejected():
    with pytest.raises(ValueError):
        Plane.from_normal_and_point((0.0, 0.0, 0.0), (1.0, 1.0, 1.0))


def test_frustum_planes_are_independent():
    frustum = Frustum()
    frustum.top_plane.distance = 5.0
    assert frustum.bottom_plane.distance == 0.0
    assert frustum.near_plane == Plane()
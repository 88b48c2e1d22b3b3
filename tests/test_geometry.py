import math

import pytest

from modelviewport.model.geometry import BoundingVolume, Vec3


def test_vec3_arithmetic():
    a = Vec3(1.0, 2.0, 3.0)
    b = Vec3(0.5, -1.0, 2.0)
    assert a + b == Vec3(1.5, 1.0, 5.0)
    assert a - b == Vec3(0.5, 3.0, 1.0)
    assert a * 2 == Vec3(2.0, 4.0, 6.0)
    assert 2 * a == a * 2
    assert -a == Vec3(-1.0, -2.0, -3.0)
    assert a / 2 == Vec3(0.5, 1.0, 1.5)
    assert tuple(a) == (1.0, 2.0, 3.0)


def test_vec3_magnitude_and_normalize():
    v = Vec3(3.0, 4.0, 0.0)
    assert v.magnitude == 5.0
    assert v.normalize().is_close(Vec3(0.6, 0.8, 0.0))
    assert Vec3.zero().normalize() == Vec3.zero()
    assert v.max_component() == 4.0


def test_vec3_magnitude_of_huge_components():
    assert Vec3(1e200, 0.0, 0.0).magnitude == 1e200
    assert Vec3(1e200, 1e200, 0.0).magnitude == pytest.approx(math.sqrt(2) * 1e200)


def test_vec3_division_by_zero():
    with pytest.raises(ZeroDivisionError):
        Vec3(1.0, 1.0, 1.0) / 0.0


def test_vec3_finite():
    assert Vec3(1.0, 2.0, 3.0).is_finite()
    assert not Vec3(math.nan, 0.0, 0.0).is_finite()
    assert not Vec3(0.0, math.inf, 0.0).is_finite()


def test_volume_center_size_radius():
    vol = BoundingVolume(Vec3(0.0, 0.0, 0.0), Vec3(2.0, 4.0, 4.0))
    assert vol.center == Vec3(1.0, 2.0, 2.0)
    assert vol.size == Vec3(2.0, 4.0, 4.0)
    assert vol.radius == pytest.approx(3.0)


def test_volume_from_bounds_uses_vtk_order():
    vol = BoundingVolume.from_bounds((0, 1, 2, 3, 4, 5))
    assert vol.min == Vec3(0.0, 2.0, 4.0)
    assert vol.max == Vec3(1.0, 3.0, 5.0)
    assert vol.to_bounds() == (0.0, 1.0, 2.0, 3.0, 4.0, 5.0)


def test_volume_from_bounds_requires_six_values():
    with pytest.raises(ValueError):
        BoundingVolume.from_bounds((0, 1, 2))


def test_volume_from_points():
    vol = BoundingVolume.from_points([[1, 5, -1], [-2, 0, 3], [0, 1, 0]])
    assert vol.min == Vec3(-2.0, 0.0, -1.0)
    assert vol.max == Vec3(1.0, 5.0, 3.0)

    with pytest.raises(ValueError):
        BoundingVolume.from_points([])


def test_volume_inverted_and_degenerate():
    assert BoundingVolume.from_bounds((1, -1, 1, -1, 1, -1)).is_inverted()
    point = BoundingVolume(Vec3(1.0, 1.0, 1.0), Vec3(1.0, 1.0, 1.0))
    assert point.is_degenerate()
    assert not point.is_inverted()


def test_volume_scaled_and_translated():
    vol = BoundingVolume(Vec3(-1.0, 0.0, 2.0), Vec3(1.0, 2.0, 4.0))
    assert vol.translated(Vec3(1.0, 1.0, 1.0)) == BoundingVolume(Vec3(0.0, 1.0, 3.0), Vec3(2.0, 3.0, 5.0))
    assert vol.scaled(2.0) == BoundingVolume(Vec3(-2.0, 0.0, 4.0), Vec3(2.0, 4.0, 8.0))
    # A negative factor keeps min <= max
    assert not vol.scaled(-1.0).is_inverted()


def test_volume_union_and_corners():
    a = BoundingVolume(Vec3(0.0, 0.0, 0.0), Vec3(1.0, 1.0, 1.0))
    b = BoundingVolume(Vec3(-3.0, 0.5, 0.0), Vec3(0.0, 4.0, 0.5))
    assert a.union(b) == BoundingVolume(Vec3(-3.0, 0.0, 0.0), Vec3(1.0, 4.0, 1.0))
    assert b.corners_distance() == pytest.approx(math.sqrt(16.25))

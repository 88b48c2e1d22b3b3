import math

import pytest

from modelviewport import config
from modelviewport.controller.camera import CameraFitter
from modelviewport.errors import InvalidGeometryError
from modelviewport.model.geometry import BoundingVolume, Vec3


def box(lo, hi) -> BoundingVolume:
    return BoundingVolume(Vec3(*lo), Vec3(*hi))


@pytest.fixture
def fitter() -> CameraFitter:
    return CameraFitter()


def test_recentered_survey_model(fitter):
    params = fitter.fit(box((-5, -25, -5), (5, 25, 5)))

    assert params.target == Vec3.zero()
    assert params.distance == pytest.approx(100.0)
    assert params.near == pytest.approx(0.1)
    assert params.far == pytest.approx(10_000.0)
    assert params.max_distance == pytest.approx(1_000.0)
    assert params.view_angle == config.DEFAULT_FOV


def test_position_lies_on_isometric_direction(fitter):
    params = fitter.fit(box((0, 0, 0), (2, 2, 2)))
    offset = params.position - params.target

    assert offset.magnitude == pytest.approx(params.distance)
    assert offset.normalize().is_close(Vec3(1.0, 0.8, 1.0).normalize())
    assert params.view_up == Vec3(0.0, 1.0, 0.0)


def test_single_point_uses_floors(fitter):
    params = fitter.fit(box((3, 3, 3), (3, 3, 3)))

    assert params.distance == config.MIN_DISTANCE
    assert params.far == config.FAR_FLOOR
    assert params.near < params.far
    assert params.target == Vec3(3.0, 3.0, 3.0)


def test_large_model_extends_far_plane(fitter):
    params = fitter.fit(box((0, 0, 0), (3_000, 4_000, 0)))

    assert params.far == pytest.approx(5_000 * 20)
    assert params.distance == pytest.approx(8_000)


@pytest.mark.parametrize("lo, hi", [
    ((0, 0, 0), (1, 1, 1)),
    ((-1e-6, 0, 0), (1e-6, 0, 0)),
    ((0, 0, 0), (1e5, 10, 10)),
])
def test_frustum_is_always_valid(fitter, lo, hi):
    params = fitter.fit(box(lo, hi))
    assert params.distance > 0
    assert 0 < params.near < params.far


def test_far_plane_falls_back_above_near():
    fitter = CameraFitter(near=5.0, far_floor=1.0)
    params = fitter.fit(box((0, 0, 0), (0, 0, 0)))
    assert params.far == pytest.approx(6.0)


def test_invalid_inputs(fitter):
    with pytest.raises(InvalidGeometryError):
        fitter.fit(box((math.nan, 0, 0), (1, 1, 1)))
    with pytest.raises(InvalidGeometryError):
        fitter.fit(box((1, 1, 1), (0, 0, 0)))
    with pytest.raises(ValueError):
        fitter.fit(box((0, 0, 0), (1, 1, 1)), fov_degrees=0.0)
    with pytest.raises(ValueError):
        fitter.fit(box((0, 0, 0), (1, 1, 1)), fov_degrees=180.0)
    with pytest.raises(ValueError):
        CameraFitter(near=0.0)


def test_fit_all_frames_union(fitter):
    params = fitter.fit_all([
        box((0, 0, 0), (1, 1, 1)),
        box((9, 0, 0), (10, 1, 1)),
        box((1, -1, 1), (-1, 1, -1)),  # inverted, ignored
    ])
    assert params.target == Vec3(5.0, 0.5, 0.5)
    assert params.distance == pytest.approx(20.0)


def test_fit_all_without_models_returns_home(fitter):
    params = fitter.fit_all([])
    assert params == fitter.home()
    assert params.target == Vec3.zero()
    assert params.distance == config.DEFAULT_CAMERA_DISTANCE
    assert params.near < params.far


def test_overflowing_far_plane_is_invalid_geometry(fitter):
    with pytest.raises(InvalidGeometryError):
        fitter.fit(box((0, 0, 0), (1e307, 1e307, 1e307)))

import math

import pytest

from modelviewport.controller.bounds import BoundsAnalyzer, check_volume
from modelviewport.errors import InvalidGeometryError
from modelviewport.model.geometry import BoundingVolume, Vec3

from conftest import MM_MAX, MM_MIN, UTM_MAX, UTM_MIN


def box_around(center_x: float, half: float = 0.5) -> BoundingVolume:
    return BoundingVolume(Vec3(center_x - half, -half, -half), Vec3(center_x + half, half, half))


def box(lo, hi) -> BoundingVolume:
    return BoundingVolume(Vec3(*lo), Vec3(*hi))


@pytest.fixture
def analyzer() -> BoundsAnalyzer:
    return BoundsAnalyzer()


def test_origin_threshold_is_strict(analyzer):
    assert not analyzer.analyze(box_around(4_999.0)).far_from_origin
    assert not analyzer.analyze(box_around(5_000.0)).far_from_origin
    assert analyzer.analyze(box_around(5_001.0)).far_from_origin


def test_scale_threshold_is_strict(analyzer):
    assert not analyzer.analyze(box((0, 0, 0), (999, 0, 0))).millimeter_scale
    assert not analyzer.analyze(box((0, 0, 0), (10_000, 0, 0))).millimeter_scale
    assert analyzer.analyze(box((-5_000.5, 0, 0), (5_000.5, 0, 0))).millimeter_scale


def test_survey_coordinates_are_far_but_not_millimeters(analyzer):
    report = analyzer.analyze(box(UTM_MIN, UTM_MAX))
    assert report.far_from_origin
    assert not report.millimeter_scale
    assert report.has_anomalies
    assert report.center_distance == pytest.approx(Vec3(600_005, 25, 600_005).magnitude)


def test_millimeter_model_is_not_reported_far(analyzer):
    # |center| is about 7,365 mm, i.e. 7.4 m once converted
    report = analyzer.analyze(box(MM_MIN, MM_MAX))
    assert report.millimeter_scale
    assert not report.far_from_origin


def test_millimeter_model_at_survey_coordinates_is_both(analyzer):
    report = analyzer.analyze(box((600_000_000, 0, 600_000_000), (600_010_000, 50_000, 600_010_000)))
    assert report.millimeter_scale
    assert report.far_from_origin


def test_small_model_at_origin_has_no_anomalies(analyzer):
    report = analyzer.analyze(box((-1, 0, -1), (1, 3, 1)))
    assert not report.has_anomalies


def test_degenerate_volume_is_accepted(analyzer):
    report = analyzer.analyze(box((2, 2, 2), (2, 2, 2)))
    assert not report.has_anomalies
    assert report.size_length == 0.0


def test_huge_finite_center_is_far_from_origin(analyzer):
    report = analyzer.analyze(box((1e200, 0, 0), (1e200, 1, 1)))
    assert report.far_from_origin
    assert not report.millimeter_scale
    assert report.center_distance == pytest.approx(1e200)


@pytest.mark.parametrize("volume", [
    box((math.nan, 0, 0), (1, 1, 1)),
    box((0, 0, 0), (math.inf, 1, 1)),
    box((1, -1, 1), (-1, 1, -1)),
    box((-1e308, 0, 0), (1e308, 1, 1)),
])
def test_unusable_volumes_are_rejected(analyzer, volume):
    with pytest.raises(InvalidGeometryError):
        analyzer.analyze(volume)
    with pytest.raises(ValueError):
        check_volume(volume)


def test_custom_thresholds():
    analyzer = BoundsAnalyzer(origin_threshold=10.0, scale_threshold=100.0)
    report = analyzer.analyze(box((20, 0, 0), (21, 1, 1)))
    assert report.far_from_origin
    assert not report.millimeter_scale


def test_describe(analyzer):
    info = BoundsAnalyzer.describe(box((0, 0, 0), (2, 4, 6)))
    assert info["center"] == (1.0, 2.0, 3.0)
    assert info["size"] == (2.0, 4.0, 6.0)

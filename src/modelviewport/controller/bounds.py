"""
Bounds Analysis
===============
Classifies the coordinate and scale anomalies of a bounding volume.

Why is this file needed?
------------------------
Building models exported from survey software keep their real-world (UTM/EPSG)
coordinates, and many CAD exports are denominated in millimeters. Either one
leaves the model far outside the camera's default view. This module only
detects the condition; NormalizationTransformer corrects it.
"""
from __future__ import annotations

import logging
from typing import Any

from modelviewport import config
from modelviewport.errors import InvalidGeometryError
from modelviewport.model.geometry import BoundingVolume
from modelviewport.model.outcome import AnomalyReport

logger = logging.getLogger(__name__)


def check_volume(volume: BoundingVolume) -> None:
    """
    Raise if a volume cannot be analyzed, normalized or framed.

    Raises:
        InvalidGeometryError: Non-finite or inverted bounds, or bounds whose
            size or center overflow the float range.
    """
    if not volume.is_finite():
        raise InvalidGeometryError(f"Bounding volume contains non-finite values: {volume.to_bounds()}")
    if volume.is_inverted():
        raise InvalidGeometryError(f"Bounding volume is inverted (min > max): {volume.to_bounds()}")
    if not (volume.size.is_finite() and volume.center.is_finite()):
        raise InvalidGeometryError(f"Bounding volume extent overflows: {volume.to_bounds()}")


class BoundsAnalyzer:
    def __init__(
        self,
        origin_threshold: float = config.ORIGIN_THRESHOLD,
        scale_threshold: float = config.SCALE_THRESHOLD,
        millimeter_factor: float = config.MILLIMETER_SCALE_FACTOR,
    ) -> None:
        self.origin_threshold = origin_threshold
        self.scale_threshold = scale_threshold
        self.millimeter_factor = millimeter_factor

    def analyze(self, volume: BoundingVolume) -> AnomalyReport:
        """
        Pure classification of a volume, no side effects.

        Contract: millimeter_scale is |size| > scale_threshold. far_from_origin
        is |center| > origin_threshold measured in working units, i.e. for a
        millimeter-scale volume the test is |center| * millimeter_factor >
        origin_threshold. A model that is merely large is therefore not also
        reported as displaced.

        Args:
            volume: World-space bounds of the model.

        Returns:
            AnomalyReport with the far-from-origin and millimeter-scale flags.

        Raises:
            InvalidGeometryError: If the volume is non-finite or inverted.
        """
        check_volume(volume)

        size_length = volume.size.magnitude
        millimeter_scale = size_length > self.scale_threshold

        center_distance = volume.center.magnitude
        working_distance = center_distance * self.millimeter_factor if millimeter_scale else center_distance
        far_from_origin = working_distance > self.origin_threshold

        report = AnomalyReport(
            far_from_origin=far_from_origin,
            millimeter_scale=millimeter_scale,
            center_distance=center_distance,
            size_length=size_length,
        )
        if report.has_anomalies:
            logger.warning(
                f"Model bounds anomalies: far_from_origin={far_from_origin} "
                f"(|center|={center_distance:.3f}), millimeter_scale={millimeter_scale} "
                f"(|size|={size_length:.3f})"
            )
        return report

    @staticmethod
    def describe(volume: BoundingVolume) -> dict[str, Any]:
        """Plain dict of min/max/size/center for logs and diagnostics."""
        return {
            "min": volume.min.to_tuple(),
            "max": volume.max.to_tuple(),
            "size": volume.size.to_tuple(),
            "center": volume.center.to_tuple(),
        }

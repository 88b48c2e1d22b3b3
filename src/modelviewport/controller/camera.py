"""
Camera Fitting
==============
Computes deterministic camera parameters that guarantee a model is visible.

Why is this file needed?
------------------------
Models arrive at any scale. A fixed camera either clips them (far plane too
close) or shows them as a speck. The fitter derives distance and clipping
planes from the bounds, with floors so degenerate models still get a valid
frustum. The result is a pure description; moving a real camera is the camera
collaborator's job.
"""
from __future__ import annotations

import logging
import math
from typing import Iterable, Sequence

from modelviewport import config
from modelviewport.controller.bounds import check_volume
from modelviewport.errors import InvalidGeometryError
from modelviewport.model.geometry import BoundingVolume, Vec3
from modelviewport.model.outcome import CameraParameters

logger = logging.getLogger(__name__)


class CameraFitter:
    def __init__(
        self,
        distance_factor: float = config.DISTANCE_FACTOR,
        min_distance: float = config.MIN_DISTANCE,
        near: float = config.NEAR_PLANE,
        far_floor: float = config.FAR_FLOOR,
        far_margin: float = config.FAR_MARGIN,
        max_distance_factor: float = config.MAX_DISTANCE_FACTOR,
        direction: Sequence[float] = config.ISOMETRIC_DIRECTION,
        view_up: Sequence[float] = config.VIEW_UP,
    ) -> None:
        if near <= 0.0:
            raise ValueError(f"Near plane must be positive, got {near}.")
        self.distance_factor = distance_factor
        self.min_distance = min_distance
        self.near = near
        self.far_floor = far_floor
        self.far_margin = far_margin
        self.max_distance_factor = max_distance_factor
        self.direction = Vec3.from_iterable(direction).normalize()
        self.view_up = Vec3.from_iterable(view_up)

    def fit(self, volume: BoundingVolume, fov_degrees: float = config.DEFAULT_FOV) -> CameraParameters:
        """
        Frame `volume` for a perspective camera.

        Args:
            volume: Bounds after normalization.
            fov_degrees: Vertical view angle of the camera, in (0, 180).

        Returns:
            CameraParameters with near < far and distance > 0.

        Raises:
            InvalidGeometryError: If the volume is non-finite or inverted, or
                the fitted distance or far plane overflows.
            ValueError: If the view angle is out of range.
        """
        check_volume(volume)
        if not 0.0 < fov_degrees < 180.0:
            raise ValueError(f"View angle must be in (0, 180) degrees, got {fov_degrees}.")

        size = volume.size
        target = volume.center

        distance = size.max_component() * self.distance_factor
        if distance <= 0.0:
            # Single point or zero-extent model
            distance = self.min_distance

        near = self.near
        far = max(self.far_floor, size.magnitude * self.far_margin)
        if far <= near:
            far = near + 1.0
        position = target + self.direction * distance
        if not (math.isfinite(distance) and math.isfinite(far) and position.is_finite()):
            raise InvalidGeometryError(
                f"Camera parameters overflow for bounds {volume.to_bounds()} (distance={distance}, far={far})"
            )

        params = CameraParameters(
            target=target,
            distance=distance,
            near=near,
            far=far,
            position=position,
            view_up=self.view_up,
            view_angle=fov_degrees,
            max_distance=distance * self.max_distance_factor,
        )
        logger.debug(f"Camera fitted: target={target.to_tuple()}, distance={distance:g}, near={near:g}, far={far:g}")
        return params

    def fit_all(self, volumes: Iterable[BoundingVolume], fov_degrees: float = config.DEFAULT_FOV) -> CameraParameters:
        """
        Frame the union of several volumes ("frame all").

        Unusable volumes are skipped. With nothing left, the home view around
        the origin is returned.
        """
        combined: BoundingVolume | None = None
        for volume in volumes:
            if not volume.is_finite() or volume.is_inverted():
                logger.debug(f"Skipping unusable volume in frame-all: {volume.to_bounds()}")
                continue
            combined = volume if combined is None else combined.union(volume)

        if combined is None:
            return self.home(fov_degrees)
        return self.fit(combined, fov_degrees)

    def home(self, fov_degrees: float = config.DEFAULT_FOV) -> CameraParameters:
        """Default view of the origin, used when there is nothing to frame."""
        distance = config.DEFAULT_CAMERA_DISTANCE
        return CameraParameters(
            target=Vec3.zero(),
            distance=distance,
            near=self.near,
            far=max(self.far_floor, self.near + 1.0),
            position=self.direction * distance,
            view_up=self.view_up,
            view_angle=fov_degrees,
            max_distance=distance * self.max_distance_factor,
        )

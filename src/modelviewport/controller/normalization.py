"""
Model Normalization
Applies the corrective translation/scale that brings a model into the working volume.
"""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from modelviewport import config
from modelviewport.controller.bounds import check_volume
from modelviewport.model.geometry import BoundingVolume, Vec3
from modelviewport.model.outcome import AnomalyReport

if TYPE_CHECKING:
    from modelviewport.controller.collaborators import ModelHandle, SceneAdapter

logger = logging.getLogger(__name__)


class NormalizationTransformer:
    def __init__(self, scene: SceneAdapter, millimeter_factor: float = config.MILLIMETER_SCALE_FACTOR) -> None:
        self.scene = scene
        self.millimeter_factor = millimeter_factor

    def normalize(
        self,
        handle: ModelHandle,
        volume: BoundingVolume,
        report: AnomalyReport,
    ) -> tuple[Vec3, float]:
        """
        Correct the model transform in place according to `report`.

        The translation is taken from the original volume. The scale is applied
        after it, about the origin: world' = f * (world - c). Both are composed
        with the handle's current transform; vertex data is never touched.
        The caller must recompute the bounds before framing.

        Args:
            handle: Model handle owned by the scene collaborator.
            volume: World-space bounds the report was computed from.
            report: Output of BoundsAnalyzer.analyze(volume).

        Returns:
            (applied translation, applied scale factor). (0, 0, 0) and 1.0
            when nothing was corrected.
        """
        check_volume(volume)

        translation = -volume.center if report.far_from_origin else Vec3.zero()
        factor = self.millimeter_factor if report.millimeter_scale else 1.0

        if not report.has_anomalies:
            return translation, factor

        current_translation, current_scale = self.scene.transform_of(handle)
        new_translation = (current_translation + translation) * factor
        new_scale = current_scale * factor
        self.scene.set_transform(handle, new_translation, new_scale)

        if report.far_from_origin:
            logger.info(f"Model recentered to origin (offset {translation.to_tuple()})")
        if report.millimeter_scale:
            logger.info(f"Model rescaled from mm to m (factor {factor})")

        return translation, factor

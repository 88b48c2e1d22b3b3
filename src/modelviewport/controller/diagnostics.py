"""
Viewer Diagnostics
Read-only checks of the parser runtime and a model's bounds, for the diagnostics panel.
"""
from __future__ import annotations

from dataclasses import dataclass, field
import logging
from typing import Optional, TYPE_CHECKING

from modelviewport import config
from modelviewport.controller.bounds import BoundsAnalyzer
from modelviewport.errors import InvalidGeometryError, UnsupportedFormatError
from modelviewport.model.formats import detect_format
from modelviewport.model.geometry import BoundingVolume
from modelviewport.model.outcome import AnomalyReport

if TYPE_CHECKING:
    from modelviewport.controller.collaborators import ModelParser, SceneAdapter

logger = logging.getLogger(__name__)


@dataclass
class DiagnosticReport:
    ref: str
    format: Optional[str] = None
    parser_ready: bool = False
    model_loaded: bool = False
    mesh_exists: bool = False
    volume: Optional[BoundingVolume] = None
    anomalies: Optional[AnomalyReport] = None
    metadata: dict = field(default_factory=dict)
    warnings: list[str] = field(default_factory=list)
    error_message: Optional[str] = None

    @property
    def healthy(self) -> bool:
        return self.parser_ready and self.mesh_exists and not self.warnings and self.error_message is None

    def lines(self) -> list[str]:
        def yes_no(flag: bool) -> str:
            return "Yes" if flag else "No"

        lines = [
            f"Model: {self.ref}",
            f"Format: {self.format or 'unknown'}",
            f"Parser runtime: {'Available' if self.parser_ready else 'Missing'}",
            f"Model loaded: {yes_no(self.model_loaded)}",
            f"Mesh exists: {yes_no(self.mesh_exists)}",
        ]
        if self.volume is not None:
            v = self.volume
            lines.append(f"Bounds min: {v.min.to_tuple()}  max: {v.max.to_tuple()}")
            lines.append(f"Size: {v.size.to_tuple()}  center: {v.center.to_tuple()}")
        lines.extend(f"Warning: {w}" for w in self.warnings)
        if self.error_message:
            lines.append(f"Error: {self.error_message}")
        return lines


async def run_diagnostics(
    ref: str,
    parser: ModelParser,
    scene: SceneAdapter,
    analyzer: Optional[BoundsAnalyzer] = None,
    corner_warning_distance: float = config.CORNER_WARNING_DISTANCE,
) -> DiagnosticReport:
    """
    Inspect the parser runtime and one load of `ref` without correcting anything.

    Errors are captured into the report rather than raised.
    """
    analyzer = analyzer or BoundsAnalyzer()
    report = DiagnosticReport(ref=ref)

    try:
        report.format = str(detect_format(ref))
    except UnsupportedFormatError as e:
        report.warnings.append(str(e))

    try:
        parser.configure()
        report.parser_ready = parser.is_ready()
    except Exception as e:
        report.error_message = f"Parser configuration failed: {e}"
        logger.error(report.error_message)
        return report

    try:
        result = await parser.load_model(ref)
    except Exception as e:
        report.error_message = f"Error loading model: {e}"
        logger.error(report.error_message)
        return report

    report.model_loaded = True
    report.metadata = dict(result.metadata)
    if result.mesh is None or not scene.has_geometry(result.mesh):
        report.error_message = "Model loaded but mesh is missing"
        logger.error(f"{ref}: {report.error_message}")
        return report

    report.mesh_exists = True
    volume = scene.bounding_volume_of(result.mesh)
    report.volume = volume
    logger.debug(f"Diagnostics bounds for {ref}: {BoundsAnalyzer.describe(volume)}")

    try:
        report.anomalies = analyzer.analyze(volume)
    except InvalidGeometryError as e:
        report.warnings.append(str(e))
        return report

    if report.anomalies.far_from_origin:
        report.warnings.append("Model center is far from the origin (survey/UTM coordinates)")
    if volume.corners_distance() > corner_warning_distance:
        report.warnings.append(f"Bounding box corners lie beyond {corner_warning_distance:g} units")
    if report.anomalies.millimeter_scale:
        report.warnings.append("Model appears to be in millimeters")
    return report

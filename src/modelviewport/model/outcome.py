"""
Load Outcomes
=============
Value objects produced by one model load attempt.

Classes:
    AnomalyReport: Coordinate/scale classification of a bounding volume.
    CameraParameters: Pure description of a framed camera.
    ParseResult: What the parser collaborator hands back.
    LoadOutcome: Base of the tagged outcome variants
        (Success, LoadedNoMesh, ParserError, InvalidGeometry, Discarded).
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, Optional

from modelviewport.model.geometry import BoundingVolume, Vec3


@dataclass(frozen=True)
class AnomalyReport:
    far_from_origin: bool = False
    millimeter_scale: bool = False
    # Measured values, informational only
    center_distance: float = 0.0
    size_length: float = 0.0

    @property
    def has_anomalies(self) -> bool:
        return self.far_from_origin or self.millimeter_scale


@dataclass(frozen=True)
class CameraParameters:
    target: Vec3
    distance: float
    near: float
    far: float
    position: Vec3 = field(default_factory=Vec3.zero)
    view_up: Vec3 = Vec3(0.0, 1.0, 0.0)
    view_angle: float = 30.0
    max_distance: float = 0.0


@dataclass
class ParseResult:
    """Mesh handle (None when the parser produced no renderable geometry) plus metadata."""
    mesh: Optional[Any] = None
    metadata: dict[str, Any] = field(default_factory=dict)


class OutcomeKind(StrEnum):
    SUCCESS = "success"
    LOADED_NO_MESH = "loaded_no_mesh"
    PARSER_ERROR = "parser_error"
    INVALID_GEOMETRY = "invalid_geometry"
    DISCARDED = "discarded"


@dataclass(frozen=True)
class LoadOutcome:
    ref: str

    KIND = None

    @property
    def kind(self) -> OutcomeKind:
        return self.KIND

    @property
    def ok(self) -> bool:
        return self.KIND == OutcomeKind.SUCCESS

    def describe(self) -> str:
        return f"{self.kind}: {self.ref}"


@dataclass(frozen=True)
class Success(LoadOutcome):
    handle: Any = None
    camera: Optional[CameraParameters] = None
    anomalies: AnomalyReport = field(default_factory=AnomalyReport)
    translation: Vec3 = field(default_factory=Vec3.zero)
    scale: float = 1.0
    volume: Optional[BoundingVolume] = None

    KIND = OutcomeKind.SUCCESS

    def describe(self) -> str:
        fixes = []
        if self.anomalies.far_from_origin:
            fixes.append("recentered")
        if self.anomalies.millimeter_scale:
            fixes.append("rescaled mm->m")
        suffix = f" ({', '.join(fixes)})" if fixes else ""
        return f"Loaded {self.ref}{suffix}"


@dataclass(frozen=True)
class LoadedNoMesh(LoadOutcome):
    metadata: dict[str, Any] = field(default_factory=dict)

    KIND = OutcomeKind.LOADED_NO_MESH

    def describe(self) -> str:
        return f"Model {self.ref} loaded but mesh is missing"


@dataclass(frozen=True)
class ParserError(LoadOutcome):
    message: str = ""

    KIND = OutcomeKind.PARSER_ERROR

    def describe(self) -> str:
        return f"Error loading model {self.ref}: {self.message}"


@dataclass(frozen=True)
class InvalidGeometry(LoadOutcome):
    reason: str = ""

    KIND = OutcomeKind.INVALID_GEOMETRY

    def describe(self) -> str:
        return f"Model {self.ref} has invalid geometry: {self.reason}"


@dataclass(frozen=True)
class Discarded(LoadOutcome):
    """Result that arrived after its viewing session was abandoned."""
    session_id: str = ""

    KIND = OutcomeKind.DISCARDED

    def describe(self) -> str:
        return f"Result for {self.ref} discarded (session {self.session_id} abandoned)"

"""
Collaborator protocols consumed by the viewport core.

The parser, scene and camera are owned by the host application. The core only
talks to them through these interfaces, which keeps it independent of a
specific renderer.
"""
from __future__ import annotations

from typing import Any, Optional, Protocol, runtime_checkable, TYPE_CHECKING

if TYPE_CHECKING:
    from modelviewport.model.geometry import BoundingVolume, Vec3
    from modelviewport.model.outcome import CameraParameters, ParseResult

ModelHandle = Any


@runtime_checkable
class ModelParser(Protocol):
    def configure(self) -> None:
        """One-time (idempotent) runtime path setup required before loading."""
        ...

    def is_ready(self) -> bool: ...

    async def load_model(self, ref: str) -> ParseResult:
        """Parse `ref` into a handle + metadata. Raises on failure."""
        ...


@runtime_checkable
class SceneAdapter(Protocol):
    def bounding_volume_of(self, handle: ModelHandle) -> BoundingVolume: ...

    def transform_of(self, handle: ModelHandle) -> tuple[Vec3, float]:
        """Current (translation, uniform scale) of the handle."""
        ...

    def set_transform(self, handle: ModelHandle, translation: Vec3, scale: float) -> None:
        """Absolute transform: world = scale * local + translation."""
        ...

    def set_visible(self, handle: ModelHandle, visible: bool) -> None: ...

    def is_visible(self, handle: ModelHandle) -> bool: ...

    def has_geometry(self, handle: ModelHandle) -> bool: ...

    def descendants_of(self, handle: ModelHandle) -> list[ModelHandle]: ...

    def opacity_of(self, handle: ModelHandle) -> float: ...

    def reset_opacity(self, handle: ModelHandle) -> None: ...

    def find_by_identity(self, identity: str) -> Optional[ModelHandle]: ...

    def add_fallback_markers(self) -> list[ModelHandle]: ...


@runtime_checkable
class CameraAdapter(Protocol):
    def apply(self, params: CameraParameters) -> None: ...

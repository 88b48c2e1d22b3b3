"""In-memory collaborators for exercising the viewport core without a renderer."""
from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Any, Callable, Optional, Union

import pytest

from modelviewport.controller.registry import HandleRegistry
from modelviewport.errors import ParserConfigurationError
from modelviewport.model.geometry import BoundingVolume, Vec3
from modelviewport.model.outcome import CameraParameters, ParseResult


@dataclass(eq=False)
class FakeHandle:
    name: str
    local: BoundingVolume
    translation: Vec3 = field(default_factory=Vec3.zero)
    scale: float = 1.0
    visible: bool = True
    opacity: float = 1.0
    empty: bool = False
    children: list[FakeHandle] = field(default_factory=list)


def make_handle(name: str, lo: tuple, hi: tuple, **kwargs) -> FakeHandle:
    return FakeHandle(name=name, local=BoundingVolume(Vec3(*lo), Vec3(*hi)), **kwargs)


class FakeScene:
    def __init__(self) -> None:
        self.registry = HandleRegistry()
        self.set_transform_calls: list[tuple[FakeHandle, Vec3, float]] = []
        self.markers: list[FakeHandle] = []
        self.marker_calls = 0

    def add(self, ref: str, handle: FakeHandle) -> FakeHandle:
        self.registry.register(ref, handle)
        return handle

    def bounding_volume_of(self, handle: FakeHandle) -> BoundingVolume:
        if handle.scale == 1.0 and handle.translation == Vec3.zero():
            return handle.local
        return handle.local.scaled(handle.scale).translated(handle.translation)

    def transform_of(self, handle: FakeHandle) -> tuple[Vec3, float]:
        return handle.translation, handle.scale

    def set_transform(self, handle: FakeHandle, translation: Vec3, scale: float) -> None:
        self.set_transform_calls.append((handle, translation, scale))
        handle.translation = translation
        handle.scale = scale

    def set_visible(self, handle: FakeHandle, visible: bool) -> None:
        handle.visible = visible

    def is_visible(self, handle: FakeHandle) -> bool:
        return handle.visible

    def has_geometry(self, handle: FakeHandle) -> bool:
        return not handle.empty

    def descendants_of(self, handle: FakeHandle) -> list[FakeHandle]:
        found = []
        for child in handle.children:
            found.append(child)
            found.extend(self.descendants_of(child))
        return found

    def opacity_of(self, handle: FakeHandle) -> float:
        return handle.opacity

    def reset_opacity(self, handle: FakeHandle) -> None:
        handle.opacity = 1.0

    def find_by_identity(self, identity: str) -> Optional[FakeHandle]:
        return self.registry.lookup(identity)

    def add_fallback_markers(self) -> list[FakeHandle]:
        self.marker_calls += 1
        if not self.markers:
            self.markers = [
                make_handle("origin", (-0.2, -0.2, -0.2), (0.2, 0.2, 0.2)),
                make_handle("grid", (-25, 0, -25), (25, 0, 25)),
            ]
        return list(self.markers)


Response = Union[ParseResult, FakeHandle, BaseException, Callable[[str], Any], None]


class FakeParser:
    """
    Parser double driven by a list of responses, one per load call (the last
    one repeats).

    A FakeHandle response is registered in the scene and returned as the mesh.
    None means "metadata only". An exception instance is raised.
    """
    def __init__(self, scene: FakeScene, responses: Optional[list[Response]] = None,
                 requires_configure: bool = False) -> None:
        self.scene = scene
        self.responses: list[Response] = list(responses or [None])
        self.requires_configure = requires_configure
        self.configured = not requires_configure
        self.configure_error: Optional[BaseException] = None
        self.gate: Optional[asyncio.Event] = None
        self.calls = 0
        self.configure_calls = 0

    def configure(self) -> None:
        self.configure_calls += 1
        if self.configure_error is not None:
            raise self.configure_error
        self.configured = True

    def is_ready(self) -> bool:
        return self.configured

    async def load_model(self, ref: str) -> ParseResult:
        index = min(self.calls, len(self.responses) - 1)
        self.calls += 1
        if self.gate is not None:
            await self.gate.wait()
        if self.requires_configure and not self.configured:
            raise ParserConfigurationError("parser runtime path is not set")

        response = self.responses[index]
        if callable(response) and not isinstance(response, FakeHandle):
            response = response(ref)
        if isinstance(response, BaseException):
            raise response
        if isinstance(response, ParseResult):
            return response
        if isinstance(response, FakeHandle):
            self.scene.add(ref, response)
            return ParseResult(mesh=response, metadata={"ref": ref})
        return ParseResult(mesh=None, metadata={"ref": ref, "elements": 42})


class FakeCamera:
    def __init__(self) -> None:
        self.applied: list[CameraParameters] = []

    def apply(self, params: CameraParameters) -> None:
        self.applied.append(params)


UTM_MIN = (600_000.0, 0.0, 600_000.0)
UTM_MAX = (600_010.0, 50.0, 600_010.0)
MM_MIN = (0.0, 0.0, 0.0)
MM_MAX = (12_000.0, 3_000.0, 8_000.0)


@pytest.fixture
def scene() -> FakeScene:
    return FakeScene()


@pytest.fixture
def camera() -> FakeCamera:
    return FakeCamera()


@pytest.fixture
def utm_handle() -> FakeHandle:
    return make_handle("site", UTM_MIN, UTM_MAX)


@pytest.fixture
def mm_handle() -> FakeHandle:
    return make_handle("hall", MM_MIN, MM_MAX)

"""
PyVista Scene & Camera Adapters
===============================
Implements the scene and camera collaborators on PyVista actors.

Why is this file needed?
------------------------
1. Transform: The correction is applied through the actor's position and
   scale (world = scale * local + position); point data is never modified.
2. Identity: Every model actor is registered under its request identifier in a
   HandleRegistry, so the recovery controller can adopt geometry the parser
   attached but did not hand back.
3. Headless: Without a plotter the adapter still builds real actors (mapper +
   actor, no render window), which is what the CLI and tests use.
"""
from __future__ import annotations

import logging
from typing import Optional

import pyvista as pv
from vtkmodules.vtkRenderingCore import vtkAssembly, vtkProp3D

from modelviewport.controller.registry import HandleRegistry
from modelviewport.model.geometry import BoundingVolume, Vec3
from modelviewport.model.outcome import CameraParameters
from modelviewport.view.widgets.markers import MARKER_COLORS, build_fallback_markers

logger = logging.getLogger(__name__)


class PyVistaScene:
    def __init__(self, plotter: Optional[pv.Plotter] = None, registry: Optional[HandleRegistry] = None) -> None:
        self.plotter = plotter
        self.registry = registry if registry is not None else HandleRegistry()
        self._markers: dict[str, pv.Actor] = {}

    # ------------------------------------------------------------------------------
    # Scene content
    # ------------------------------------------------------------------------------

    def add(self, ref: str, dataset: pv.DataSet) -> pv.Actor:
        """Add a model dataset under its request identifier, replacing a previous one."""
        previous = self.registry.lookup(ref)
        if previous is not None:
            self._remove_actor(previous)

        style: dict = {}
        if "rgb" in dataset.point_data:
            style.update(scalars="rgb", rgb=True)
        if isinstance(dataset, pv.PolyData) and dataset.n_cells and dataset.n_verts == dataset.n_cells:
            # Point cloud
            style.update(style="points", point_size=3)

        actor = self._add_actor(ref, dataset, **style)
        self.registry.register(ref, actor)
        logger.debug(f"Added {ref} to scene ({dataset.n_points} points)")
        return actor

    def remove(self, ref: str) -> None:
        actor = self.registry.discard(ref)
        if actor is not None:
            self._remove_actor(actor)

    def model_handles(self) -> list[pv.Actor]:
        return [a for ref in self.registry.identities() if (a := self.registry.lookup(ref)) is not None]

    def clear_markers(self) -> None:
        for actor in self._markers.values():
            self._remove_actor(actor)
        self._markers.clear()

    @property
    def markers(self) -> dict[str, pv.Actor]:
        return dict(self._markers)

    def render(self) -> None:
        if self.plotter is not None:
            self.plotter.render()

    # ------------------------------------------------------------------------------
    # Scene collaborator API
    # ------------------------------------------------------------------------------

    def bounding_volume_of(self, handle: vtkProp3D) -> BoundingVolume:
        bounds = handle.GetBounds()
        if bounds is None:
            # VTK's "uninitialized" bounds, reported as an inverted volume
            bounds = (1.0, -1.0, 1.0, -1.0, 1.0, -1.0)
        return BoundingVolume.from_bounds(bounds)

    def transform_of(self, handle: vtkProp3D) -> tuple[Vec3, float]:
        return Vec3.from_iterable(handle.GetPosition()), float(handle.GetScale()[0])

    def set_transform(self, handle: vtkProp3D, translation: Vec3, scale: float) -> None:
        handle.SetPosition(*translation.to_tuple())
        handle.SetScale(scale, scale, scale)

    def set_visible(self, handle: vtkProp3D, visible: bool) -> None:
        handle.SetVisibility(bool(visible))

    def is_visible(self, handle: vtkProp3D) -> bool:
        return bool(handle.GetVisibility())

    def has_geometry(self, handle: vtkProp3D) -> bool:
        if isinstance(handle, vtkAssembly):
            return any(self.has_geometry(part) for part in self.descendants_of(handle))
        mapper = handle.GetMapper() if hasattr(handle, "GetMapper") else None
        if mapper is None:
            return False
        data = mapper.GetInput()
        return data is not None and data.GetNumberOfPoints() > 0

    def descendants_of(self, handle: vtkProp3D) -> list[vtkProp3D]:
        if not isinstance(handle, vtkAssembly):
            return []
        parts = handle.GetParts()
        parts.InitTraversal()
        found: list[vtkProp3D] = []
        for _ in range(parts.GetNumberOfItems()):
            part = parts.GetNextProp3D()
            found.append(part)
            found.extend(self.descendants_of(part))
        return found

    def opacity_of(self, handle: vtkProp3D) -> float:
        if hasattr(handle, "GetProperty"):
            return float(handle.GetProperty().GetOpacity())
        return 1.0

    def reset_opacity(self, handle: vtkProp3D) -> None:
        if hasattr(handle, "GetProperty"):
            handle.GetProperty().SetOpacity(1.0)

    def find_by_identity(self, identity: str) -> Optional[vtkProp3D]:
        return self.registry.lookup(identity)

    def add_fallback_markers(self) -> list[pv.Actor]:
        for name, mesh in build_fallback_markers().items():
            if name in self._markers:
                continue
            self._markers[name] = self._add_actor(name, mesh, color=MARKER_COLORS[name])
        logger.warning(f"Fallback markers shown: {', '.join(self._markers)}")
        return list(self._markers.values())

    # ------------------------------------------------------------------------------
    # Internal methods
    # ------------------------------------------------------------------------------

    def _add_actor(self, name: str, dataset: pv.DataSet, **kwargs) -> pv.Actor:
        if self.plotter is not None:
            return self.plotter.add_mesh(dataset, name=name, reset_camera=False, **kwargs)

        actor = pv.Actor(mapper=pv.DataSetMapper(dataset))
        color = kwargs.get("color")
        if color is not None:
            actor.prop.color = color
        return actor

    def _remove_actor(self, actor: pv.Actor) -> None:
        if self.plotter is not None:
            self.plotter.remove_actor(actor, reset_camera=False)


class PyVistaCamera:
    """Writes CameraParameters to a plotter's camera (or a detached camera when headless)."""
    def __init__(self, plotter: Optional[pv.Plotter] = None) -> None:
        self.plotter = plotter
        self.camera: pv.Camera = plotter.camera if plotter is not None else pv.Camera()
        self.last_params: Optional[CameraParameters] = None

    def apply(self, params: CameraParameters) -> None:
        cam = self.camera
        cam.focal_point = params.target.to_tuple()
        cam.position = params.position.to_tuple()
        cam.up = params.view_up.to_tuple()
        cam.view_angle = params.view_angle
        cam.clipping_range = (params.near, params.far)
        self.last_params = params
        if self.plotter is not None:
            self.plotter.render()

"""
Viewer Assembly
===============
Constructs the collaborators and the viewport core for one viewing session.

Why is this file needed?
------------------------
It is the "Dependency Injection" root shared by the CLI and the Qt window:
1. Instantiates the scene and camera adapters (with or without a plotter).
2. Instantiates the parser router over the scene, behind the read-ahead
   wrapper the Qt window feeds from its worker thread.
3. Wires the load session and the recovery controller to them.
"""
from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Optional

import pyvista as pv

from modelviewport import config
from modelviewport.controller.diagnostics import DiagnosticReport, run_diagnostics
from modelviewport.controller.recovery import RecoveryController
from modelviewport.controller.session import ModelLoadSession
from modelviewport.errors import ParserConfigurationError
from modelviewport.model.outcome import CameraParameters
from modelviewport.model.recovery_log import RecoveryResult
from modelviewport.parsers.prefetch import PrefetchingParser
from modelviewport.parsers.router import ParserRouter
from modelviewport.view.widgets.scene_adapter import PyVistaCamera, PyVistaScene

logger = logging.getLogger(__name__)


@dataclass
class Viewer:
    scene: PyVistaScene
    camera: PyVistaCamera
    parser: PrefetchingParser
    session: ModelLoadSession
    recovery: RecoveryController

    async def open(self, ref: str) -> RecoveryResult:
        self.scene.clear_markers()
        return await self.recovery.open(ref)

    async def retry(self, ref: str) -> RecoveryResult:
        """Manual re-entry of the recovery sequence (fresh log)."""
        self.scene.clear_markers()
        return await self.recovery.recover(ref)

    async def diagnose(self, ref: str) -> DiagnosticReport:
        return await run_diagnostics(ref, self.parser, self.scene, analyzer=self.session.analyzer)

    def frame_all(self) -> CameraParameters:
        """Fit the camera to every model in the scene, or the home view when there is none."""
        volumes = [self.scene.bounding_volume_of(h) for h in self.scene.model_handles()]
        params = self.session.fitter.fit_all(volumes, self.session.fov_degrees)
        self.camera.apply(params)
        return params

    def close(self) -> None:
        self.session.abandon()
        self.parser.cleanup()


def build_viewer(
    plotter: Optional[pv.Plotter] = None,
    fov_degrees: float = config.DEFAULT_FOV,
    cache_dir: str = config.PARSER_CACHE_PATH,
) -> Viewer:
    scene = PyVistaScene(plotter)
    camera = PyVistaCamera(plotter)
    parser = PrefetchingParser(ParserRouter(scene, cache_dir=cache_dir))
    try:
        parser.configure()
    except ParserConfigurationError as e:
        # Recovery reconfigures the parser on the first failed load
        logger.error(f"Parser configuration failed: {e}")
    session = ModelLoadSession(parser, scene, camera=camera, fov_degrees=fov_degrees)
    recovery = RecoveryController(session)
    logger.debug(f"Viewer assembled ({'interactive' if plotter is not None else 'headless'}, fov={fov_degrees:g})")
    return Viewer(scene=scene, camera=camera, parser=parser, session=session, recovery=recovery)

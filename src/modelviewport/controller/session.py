"""
Model Load Session
==================
Orchestrates one load attempt: parser -> bounds analysis -> normalization ->
camera framing.

Why is this file needed?
------------------------
1. Outcome: It turns everything the parser can do (mesh, metadata only, an
   exception, garbage bounds) into one LoadOutcome value.
2. In-flight control: At most one parser request per model reference is
   outstanding; concurrent callers share it.
3. Stale results: A result that arrives after the viewing session was
   abandoned is discarded instead of being applied to a scene that may no
   longer exist.

Note: All scene and camera mutation happens on the event loop thread. The
parser await is the only suspension point.
"""
from __future__ import annotations

import asyncio
from enum import StrEnum
import logging
from typing import Optional, TYPE_CHECKING
import uuid

from modelviewport import config
from modelviewport.controller.bounds import BoundsAnalyzer
from modelviewport.controller.camera import CameraFitter
from modelviewport.controller.normalization import NormalizationTransformer
from modelviewport.errors import InvalidGeometryError
from modelviewport.logging_config import model_context
from modelviewport.model.outcome import (
    Discarded, InvalidGeometry, LoadedNoMesh, LoadOutcome, ParserError, Success
)

if TYPE_CHECKING:
    from modelviewport.controller.collaborators import CameraAdapter, ModelHandle, ModelParser, SceneAdapter

logger = logging.getLogger(__name__)


class LoadState(StrEnum):
    IDLE = "idle"
    REQUESTING = "requesting"
    SUCCEEDED = "succeeded"
    LOADED_NO_MESH = "loaded_no_mesh"
    FAILED = "failed"
    DISCARDED = "discarded"


_STATE_BY_OUTCOME: dict[type[LoadOutcome], LoadState] = {
    Success: LoadState.SUCCEEDED,
    LoadedNoMesh: LoadState.LOADED_NO_MESH,
    ParserError: LoadState.FAILED,
    InvalidGeometry: LoadState.FAILED,
    Discarded: LoadState.DISCARDED,
}


class ModelLoadSession:
    def __init__(
        self,
        parser: ModelParser,
        scene: SceneAdapter,
        camera: Optional[CameraAdapter] = None,
        analyzer: Optional[BoundsAnalyzer] = None,
        transformer: Optional[NormalizationTransformer] = None,
        fitter: Optional[CameraFitter] = None,
        fov_degrees: float = config.DEFAULT_FOV,
    ) -> None:
        self.parser = parser
        self.scene = scene
        self.camera = camera
        self.analyzer = analyzer or BoundsAnalyzer()
        self.transformer = transformer or NormalizationTransformer(scene)
        self.fitter = fitter or CameraFitter()
        self.fov_degrees = fov_degrees

        self.session_id: str = uuid.uuid4().hex
        self._in_flight: dict[str, asyncio.Task[LoadOutcome]] = {}
        self._states: dict[str, LoadState] = {}

    # ------------------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------------------

    def state_of(self, ref: str) -> LoadState:
        return self._states.get(ref, LoadState.IDLE)

    def is_loading(self, ref: str) -> bool:
        return ref in self._in_flight

    def is_current(self, session_id: str) -> bool:
        """False once the session `session_id` was abandoned."""
        return session_id == self.session_id

    async def load(self, ref: str) -> LoadOutcome:
        """
        Load `ref` once through the parser and frame it.

        A second call for the same reference while the first is outstanding
        awaits the same request instead of invoking the parser again.
        """
        task = self._in_flight.get(ref)
        if task is not None:
            logger.debug(f"Joining in-flight load of {ref}")
            return await task

        with model_context(ref):
            # The task copies the current context, so its records carry `ref`
            task = asyncio.ensure_future(self._load(ref, self.session_id))
        self._in_flight[ref] = task
        task.add_done_callback(lambda t, r=ref: self._forget(r, t))
        return await task

    def frame(self, ref: str, handle: ModelHandle) -> LoadOutcome:
        """
        Normalize and frame an already available handle.

        Returns:
            Success, or InvalidGeometry when the bounds cannot be trusted.
        """
        volume = self.scene.bounding_volume_of(handle)
        try:
            report = self.analyzer.analyze(volume)
            translation, scale = self.transformer.normalize(handle, volume, report)
            fixed = self.scene.bounding_volume_of(handle) if report.has_anomalies else volume
            params = self.fitter.fit(fixed, self.fov_degrees)
        except InvalidGeometryError as e:
            logger.error(f"Rejecting geometry of {ref}: {e}")
            outcome = InvalidGeometry(ref=ref, reason=str(e))
            self._states[ref] = LoadState.FAILED
            return outcome

        if self.camera is not None:
            self.camera.apply(params)

        logger.info(
            f"Model {ref} framed: size={fixed.size.to_tuple()}, "
            f"camera distance={params.distance:g}, near={params.near:g}, far={params.far:g}"
        )
        self._states[ref] = LoadState.SUCCEEDED
        return Success(
            ref=ref,
            handle=handle,
            camera=params,
            anomalies=report,
            translation=translation,
            scale=scale,
            volume=fixed,
        )

    def abandon(self) -> None:
        """
        Abandon the viewing session. Results of requests still in flight are
        discarded on arrival.
        """
        logger.info(f"Session {self.session_id} abandoned ({len(self._in_flight)} load(s) in flight)")
        self.session_id = uuid.uuid4().hex
        self._in_flight.clear()

    # ------------------------------------------------------------------------------
    # Internal methods
    # ------------------------------------------------------------------------------

    async def _load(self, ref: str, session_id: str) -> LoadOutcome:
        self._states[ref] = LoadState.REQUESTING
        logger.info(f"Loading model {ref}")

        try:
            result = await self.parser.load_model(ref)
        except Exception as e:
            if not self.is_current(session_id):
                return self._discard(ref, session_id)
            logger.error(f"Error loading model {ref}: {e}")
            return self._finish(ParserError(ref=ref, message=str(e)))

        if not self.is_current(session_id):
            return self._discard(ref, session_id)

        if result.mesh is None or not self.scene.has_geometry(result.mesh):
            logger.warning(f"Model {ref} loaded but mesh is not available")
            return self._finish(LoadedNoMesh(ref=ref, metadata=dict(result.metadata)))

        return self.frame(ref, result.mesh)

    def _discard(self, ref: str, session_id: str) -> LoadOutcome:
        logger.warning(f"Discarding stale result for {ref} (session {session_id} abandoned)")
        return self._finish(Discarded(ref=ref, session_id=session_id))

    def _finish(self, outcome: LoadOutcome) -> LoadOutcome:
        self._states[outcome.ref] = _STATE_BY_OUTCOME[type(outcome)]
        return outcome

    def _forget(self, ref: str, task: asyncio.Task) -> None:
        if self._in_flight.get(ref) is task:
            del self._in_flight[ref]

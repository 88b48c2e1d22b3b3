"""
Recovery Controller
===================
A bounded state machine that tries to turn "metadata present but mesh absent"
(or a parser failure) into visible geometry.

Why is this file needed?
------------------------
The parser collaborator sometimes reports a model without returning its mesh,
because its runtime path was not set up, because the geometry was attached to
the scene but not handed back, or because it arrived hidden / fully
transparent. This module runs a fixed, ordered list of corrective actions,
stops at the first one that yields a framed model, and otherwise ends in a
clearly reported degraded state. It never loops.
"""
from __future__ import annotations

import asyncio
from dataclasses import dataclass
import logging
from typing import Awaitable, Callable, Optional, TYPE_CHECKING

from modelviewport.logging_config import model_context
from modelviewport.model.outcome import (
    Discarded, InvalidGeometry, LoadedNoMesh, LoadOutcome, ParserError, Success
)
from modelviewport.model.recovery_log import (
    RECOVERY_SEQUENCE, RecoveryAction, RecoveryLog, RecoveryResult, RecoveryStatus
)

if TYPE_CHECKING:
    from modelviewport.controller.collaborators import ModelHandle, ModelParser, SceneAdapter
    from modelviewport.controller.session import ModelLoadSession

logger = logging.getLogger(__name__)


@dataclass
class _RecoveryState:
    """Mutable working state of one recovery session."""
    ref: str
    log: RecoveryLog
    outcome: LoadOutcome
    adopted: Optional[ModelHandle] = None
    degraded: bool = False


class RecoveryController:
    def __init__(self, session: ModelLoadSession, parser: Optional[ModelParser] = None,
                 scene: Optional[SceneAdapter] = None) -> None:
        self.session = session
        self.parser = parser or session.parser
        self.scene = scene or session.scene
        self._active: dict[str, asyncio.Task[RecoveryResult]] = {}
        self._steps: dict[RecoveryAction, Callable[[_RecoveryState], Awaitable[None]]] = {
            RecoveryAction.RECONFIGURE_PARSER: self._reconfigure_parser,
            RecoveryAction.RELOAD: self._reload,
            RecoveryAction.ADOPT_ORPHAN: self._adopt_orphan,
            RecoveryAction.FORCE_VISIBLE: self._force_visible,
            RecoveryAction.FALLBACK_MARKERS: self._insert_fallback_markers,
        }

    # ------------------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------------------

    async def open(self, ref: str) -> RecoveryResult:
        """Load `ref` and recover when the load produced no geometry or failed."""
        outcome = await self.session.load(ref)
        if isinstance(outcome, (LoadedNoMesh, ParserError)):
            return await self.recover(ref, outcome)
        return self._terminal(ref, outcome, RecoveryLog(ref))

    async def recover(self, ref: str, initial: Optional[LoadOutcome] = None) -> RecoveryResult:
        """
        Run the recovery sequence for `ref`.

        Safe to call again after it finished (e.g. a manual retry); each call
        gets a fresh log. A call made while a recovery for the same reference
        is running joins it.

        Args:
            ref: Model reference (URL, path or opaque id).
            initial: The outcome that triggered recovery, if any.
        """
        task = self._active.get(ref)
        if task is not None:
            logger.debug(f"Joining running recovery of {ref}")
            return await task

        with model_context(ref):
            task = asyncio.ensure_future(self._run(ref, initial))
        self._active[ref] = task
        task.add_done_callback(lambda t, r=ref: self._forget(r, t))
        return await task

    def is_recovering(self, ref: str) -> bool:
        return ref in self._active

    # ------------------------------------------------------------------------------
    # Sequence
    # ------------------------------------------------------------------------------

    async def _run(self, ref: str, initial: Optional[LoadOutcome]) -> RecoveryResult:
        log = RecoveryLog(ref)
        if initial is not None and not isinstance(initial, (LoadedNoMesh, ParserError)):
            # Success needs nothing; invalid geometry and stale results are not retried
            return self._terminal(ref, initial, log)

        state = _RecoveryState(
            ref=ref,
            log=log,
            outcome=initial or LoadedNoMesh(ref=ref),
        )
        logger.info(f"Starting recovery of {ref} after: {state.outcome.describe()}")

        for action in RECOVERY_SEQUENCE:
            await self._steps[action](state)
            if isinstance(state.outcome, (Success, InvalidGeometry, Discarded)):
                return self._terminal(ref, state.outcome, log)

        logger.error(f"Recovery of {ref} exhausted after {len(log)} actions")
        return RecoveryResult(
            outcome=state.outcome,
            log=log,
            status=RecoveryStatus.EXHAUSTED,
            degraded=state.degraded,
        )

    @staticmethod
    def _terminal(ref: str, outcome: LoadOutcome, log: RecoveryLog) -> RecoveryResult:
        if isinstance(outcome, Success):
            status = RecoveryStatus.RECOVERED
        elif isinstance(outcome, InvalidGeometry):
            status = RecoveryStatus.REJECTED
        elif isinstance(outcome, Discarded):
            status = RecoveryStatus.ABANDONED
        else:
            status = RecoveryStatus.EXHAUSTED
        if log.attempts:
            logger.info(f"Recovery of {ref} finished: {status}")
        return RecoveryResult(outcome=outcome, log=log, status=status)

    # ------------------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------------------

    async def _reconfigure_parser(self, state: _RecoveryState) -> None:
        if state.log.attempted(RecoveryAction.RECONFIGURE_PARSER):
            return
        try:
            self.parser.configure()
        except Exception as e:
            logger.error(f"Parser reconfiguration failed: {e}")
            state.log.record(RecoveryAction.RECONFIGURE_PARSER, False, f"configure failed: {e}")
            return

        ready = self.parser.is_ready()
        note = "parser path re-configured" if ready else "parser runtime still not accessible"
        state.log.record(RecoveryAction.RECONFIGURE_PARSER, ready, note)

    async def _reload(self, state: _RecoveryState) -> None:
        outcome = await self.session.load(state.ref)
        state.outcome = outcome
        state.log.record(RecoveryAction.RELOAD, isinstance(outcome, Success), outcome.describe())

    async def _adopt_orphan(self, state: _RecoveryState) -> None:
        handle = self.scene.find_by_identity(state.ref)
        if handle is None:
            state.log.record(RecoveryAction.ADOPT_ORPHAN, False, "no geometry registered for this model")
            return
        if not self.scene.has_geometry(handle):
            state.log.record(RecoveryAction.ADOPT_ORPHAN, False, "registered geometry is empty")
            return

        state.adopted = handle
        problem = self._presentation_problem(handle)
        if problem is not None:
            # FORCE_VISIBLE repairs and frames it
            state.log.record(RecoveryAction.ADOPT_ORPHAN, False, f"adopted registered geometry, but it is {problem}")
            return

        state.outcome = self.session.frame(state.ref, handle)
        state.log.record(RecoveryAction.ADOPT_ORPHAN, isinstance(state.outcome, Success),
                         f"adopted registered geometry; {state.outcome.describe()}")

    async def _force_visible(self, state: _RecoveryState) -> None:
        handle = state.adopted
        if handle is None:
            state.log.record(RecoveryAction.FORCE_VISIBLE, False, "no adopted geometry to repair")
            return

        nodes = self._nodes_of(handle)
        for node in nodes:
            self.scene.set_visible(node, True)
            self.scene.reset_opacity(node)

        state.outcome = self.session.frame(state.ref, handle)
        state.log.record(RecoveryAction.FORCE_VISIBLE, isinstance(state.outcome, Success),
                         f"visibility and opacity reset on {len(nodes)} object(s); {state.outcome.describe()}")

    async def _insert_fallback_markers(self, state: _RecoveryState) -> None:
        markers = self.scene.add_fallback_markers()
        state.degraded = True
        state.log.record(
            RecoveryAction.FALLBACK_MARKERS,
            bool(markers),
            f"degraded: {len(markers)} fallback marker(s) shown, model geometry could not be produced",
        )

    def _nodes_of(self, handle: ModelHandle) -> list[ModelHandle]:
        return [handle, *self.scene.descendants_of(handle)]

    def _presentation_problem(self, handle: ModelHandle) -> Optional[str]:
        """Why the handle would not show up on screen, or None when it would."""
        nodes = self._nodes_of(handle)
        hidden = sum(1 for node in nodes if not self.scene.is_visible(node))
        transparent = sum(1 for node in nodes if self.scene.opacity_of(node) <= 0.0)
        if hidden and transparent:
            return f"hidden ({hidden} object(s)) and transparent ({transparent} object(s))"
        if hidden:
            return f"hidden ({hidden} object(s))"
        if transparent:
            return f"transparent ({transparent} object(s))"
        return None

    def _forget(self, ref: str, task: asyncio.Task) -> None:
        if self._active.get(ref) is task:
            del self._active[ref]

"""
Recovery Log
============
Records what a recovery session tried and how it ended.

Classes:
    RecoveryAction: The fixed, ordered corrective actions.
    RecoveryAttempt: One action with its boolean result and a readable note.
    RecoveryLog: Attempts accumulated during one recovery session.
    RecoveryResult: Final outcome + log returned to the caller.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
import logging
from typing import Iterator

from modelviewport.model.outcome import LoadOutcome

logger = logging.getLogger(__name__)


class RecoveryAction(StrEnum):
    RECONFIGURE_PARSER = "reconfigure_parser"
    RELOAD = "reload"
    ADOPT_ORPHAN = "adopt_orphan"
    FORCE_VISIBLE = "force_visible"
    FALLBACK_MARKERS = "fallback_markers"


# Order matters: later actions depend on what earlier ones produced.
RECOVERY_SEQUENCE: tuple[RecoveryAction, ...] = (
    RecoveryAction.RECONFIGURE_PARSER,
    RecoveryAction.RELOAD,
    RecoveryAction.ADOPT_ORPHAN,
    RecoveryAction.FORCE_VISIBLE,
    RecoveryAction.FALLBACK_MARKERS,
)

ACTION_LABELS: dict[RecoveryAction, str] = {
    RecoveryAction.RECONFIGURE_PARSER: "Reconfigure parser path",
    RecoveryAction.RELOAD: "Re-request load",
    RecoveryAction.ADOPT_ORPHAN: "Adopt registered geometry",
    RecoveryAction.FORCE_VISIBLE: "Force visibility / reset opacity",
    RecoveryAction.FALLBACK_MARKERS: "Insert fallback markers",
}


class RecoveryStatus(StrEnum):
    RECOVERED = "recovered"
    EXHAUSTED = "exhausted"
    REJECTED = "rejected"  # invalid geometry, retrying would not help
    ABANDONED = "abandoned"  # viewing session went away mid-recovery


@dataclass(frozen=True)
class RecoveryAttempt:
    action: RecoveryAction
    result: bool
    note: str = ""

    def line(self) -> str:
        mark = "OK" if self.result else "FAILED"
        return f"[{mark}] {ACTION_LABELS[self.action]}: {self.note}"


@dataclass
class RecoveryLog:
    ref: str
    attempts: list[RecoveryAttempt] = field(default_factory=list)

    def record(self, action: RecoveryAction, result: bool, note: str = "") -> RecoveryAttempt:
        attempt = RecoveryAttempt(action=action, result=result, note=note)
        self.attempts.append(attempt)
        logger.info(f"Recovery [{self.ref}] {attempt.line()}")
        return attempt

    def attempted(self, action: RecoveryAction) -> bool:
        return any(a.action == action for a in self.attempts)

    def actions(self) -> list[RecoveryAction]:
        return [a.action for a in self.attempts]

    def lines(self) -> list[str]:
        return [a.line() for a in self.attempts]

    def __len__(self) -> int:
        return len(self.attempts)

    def __iter__(self) -> Iterator[RecoveryAttempt]:
        return iter(self.attempts)


@dataclass
class RecoveryResult:
    outcome: LoadOutcome
    log: RecoveryLog
    status: RecoveryStatus
    degraded: bool = False

    @property
    def recovered(self) -> bool:
        return self.status == RecoveryStatus.RECOVERED

    @property
    def reload_required(self) -> bool:
        """Give-up signal for the host: nothing in the sequence produced geometry."""
        return self.status == RecoveryStatus.EXHAUSTED

    def summary(self) -> list[str]:
        """Readable lines for a diagnostics panel."""
        lines = [f"Recovery {self.status} for {self.log.ref}"]
        lines.extend(self.log.lines())
        if self.degraded:
            lines.append("Geometry could not be produced; showing fallback markers only.")
        lines.append(self.outcome.describe())
        return lines

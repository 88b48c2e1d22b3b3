"""
Background Workers (Threading)
==============================
QThread subclasses for the slow half of a model load.

Why is this file needed?
------------------------
1. Responsiveness: Downloading and parsing a model on the main thread freezes
   the window. The worker runs the parser's blocking `read_dataset()` instead.
2. Signals: The dataset (or the exception) goes back to the GUI thread through
   Qt signals. Scene registration, normalization and camera framing happen
   there, because VTK actors must only be touched by the thread that renders
   them.
3. Staleness: Every request carries the load session id it was started under,
   so the window can drop results that arrive after the session was abandoned.

Classes:
    ParseWorker: Fetches and reads one model reference.
"""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from PySide6.QtCore import QThread, Signal

from modelviewport.logging_config import model_context

if TYPE_CHECKING:
    from modelviewport.parsers.router import ParserRouter

logger = logging.getLogger(__name__)


class ParseWorker(QThread):
    # Signals to hand the result to the GUI thread
    parsed = Signal(str, str, object, object)  # (ref, session_id, dataset or None, metadata)
    error_occurred = Signal(str, str, object)  # (ref, session_id, exception)

    def __init__(self, router: ParserRouter, ref: str, session_id: str):
        super().__init__()
        self.router = router
        self.ref = ref
        self.session_id = session_id

    def run(self):
        with model_context(self.ref):
            try:
                logger.info(f"Reading {self.ref} in background thread...")
                dataset, metadata = self.router.read_dataset(self.ref)
            except Exception as e:
                logger.error(f"Error in ParseWorker: {e}")
                self.error_occurred.emit(self.ref, self.session_id, e)
                return
            self.parsed.emit(self.ref, self.session_id, dataset, metadata)

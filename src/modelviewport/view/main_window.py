"""
Viewer Window
=============
The primary GUI container: toolbar, 3D viewport and a log console.

Why is this file needed?
------------------------
1. Layout: It hosts the PyVista interactor next to a console that records every
   load outcome and recovery attempt, so an empty viewport is never unexplained.
2. Routing: It connects the Open / Retry / Frame all / Diagnostics actions to
   the viewer core.
3. Threading: Each action first reads the model on a ParseWorker thread. The
   result comes back through a signal and is offered to the read-ahead parser,
   then the load, recovery or diagnostics pass runs on the GUI thread. Opening
   another model while a read is outstanding abandons the load session, so the
   late result is dropped. A RELOAD step inside a recovery run reads again on
   the GUI thread.
"""
from __future__ import annotations

import asyncio
from datetime import datetime
import logging
import os
from typing import Callable, Optional

from PySide6.QtCore import Qt
from PySide6.QtGui import QAction, QCloseEvent
from PySide6.QtWidgets import (
    QMainWindow, QSplitter, QPlainTextEdit, QToolBar, QStatusBar, QFileDialog,
    QInputDialog, QMessageBox, QLineEdit
)
from pyvistaqt import QtInteractor

from modelviewport import config
from modelviewport.controller.workers import ParseWorker
from modelviewport.model.recovery_log import RecoveryResult, RecoveryStatus
from modelviewport.viewer import Viewer, build_viewer

logger = logging.getLogger(__name__)

VISIBLE_APP_NAME = "Model Viewport"

MODEL_FILE_FILTER = (
    "Models (*.ifc *.glb *.gltf *.obj *.stl *.ply *.vtk *.vtp *.vtu *.las *.laz *.xyz *.pts *.csv *.npy);;"
    "All files (*)"
)


class Console(QPlainTextEdit):
    def __init__(self, parent=None):
        super().__init__(parent)
        self.setReadOnly(True)

    def _log(self, level: str, msg: str) -> None:
        self.appendPlainText(f"{datetime.now().strftime('%d.%m.%Y %H:%M:%S')} [{level}] {msg}")

    def info(self, msg: str) -> None:
        self._log("info", msg)

    def warn(self, msg: str) -> None:
        self._log("warn", msg)

    def error(self, msg: str) -> None:
        self._log("error", msg)


class ViewerWindow(QMainWindow):
    def __init__(self, fov_degrees: float = config.DEFAULT_FOV) -> None:
        super().__init__()
        self.resize(1400, 900)
        self.current_ref: Optional[str] = None
        self._workers: list[ParseWorker] = []
        self._request_ref: Optional[str] = None
        self._then: Callable[[str], None] = self._finish_open

        # --- CENTRAL: viewport above, console below ---
        splitter = QSplitter(Qt.Orientation.Vertical, self)
        self.plotter: QtInteractor = QtInteractor(splitter)
        self.plotter.set_background("white")
        self.console = Console(splitter)
        splitter.addWidget(self.plotter)
        splitter.addWidget(self.console)
        splitter.setSizes([720, 180])
        self.setCentralWidget(splitter)

        self.setStatusBar(QStatusBar(self))

        self.viewer: Viewer = build_viewer(self.plotter, fov_degrees=fov_degrees)

        self._create_actions()
        self._create_toolbar()
        self.update_window_title()
        self.viewer.frame_all()

    def _create_actions(self) -> None:
        self.act_open = QAction("Open...", self)
        self.act_open.setShortcut("Ctrl+O")
        self.act_open.triggered.connect(self.on_open_file)

        self.act_open_url = QAction("Open URL...", self)
        self.act_open_url.triggered.connect(self.on_open_url)

        self.act_retry = QAction("Retry", self)
        self.act_retry.setShortcut("Ctrl+R")
        self.act_retry.triggered.connect(self.on_retry)
        self.act_retry.setEnabled(False)  # Disabled until a model was requested

        self.act_frame_all = QAction("Frame all", self)
        self.act_frame_all.setShortcut("F")
        self.act_frame_all.triggered.connect(self.on_frame_all)

        self.act_diagnostics = QAction("Diagnostics", self)
        self.act_diagnostics.triggered.connect(self.on_diagnostics)
        self.act_diagnostics.setEnabled(False)

    def _create_toolbar(self) -> None:
        toolbar = QToolBar("Viewer", self)
        toolbar.setMovable(False)
        for act in (self.act_open, self.act_open_url, self.act_retry, self.act_frame_all, self.act_diagnostics):
            toolbar.addAction(act)
        self.addToolBar(toolbar)

    # --- HELPER METHODS ---
    def update_window_title(self) -> None:
        if self.current_ref:
            self.setWindowTitle(f"{VISIBLE_APP_NAME} - [{os.path.basename(self.current_ref)}]")
        else:
            self.setWindowTitle(VISIBLE_APP_NAME)

    def open_model(self, ref: str) -> None:
        if self._busy():
            # A newer request supersedes the outstanding one
            self.console.warn(f"Abandoning outstanding load of {self._request_ref}")
            self.viewer.session.abandon()
            self.viewer.parser.drop_pending()

        self.current_ref = ref
        self.update_window_title()
        self.console.info(f"Loading {ref}")
        self.statusBar().showMessage(f"Loading {ref}...")
        self._request(ref, self._finish_open)

    def _busy(self) -> bool:
        return any(w.isRunning() for w in self._workers)

    def _request(self, ref: str, then: Callable[[str], None]) -> None:
        """Read `ref` on a worker thread, then run `then(ref)` on the GUI thread."""
        self._workers = [w for w in self._workers if w.isRunning()]
        worker = ParseWorker(self.viewer.parser.router, ref, self.viewer.session.session_id)
        worker.parsed.connect(self.on_parsed)
        worker.error_occurred.connect(self.on_parse_failed)
        self._workers.append(worker)
        self._request_ref = ref
        self._then = then
        self._set_loading(True)
        worker.start()

    def _set_loading(self, loading: bool) -> None:
        self.act_retry.setEnabled(not loading and self.current_ref is not None)
        self.act_diagnostics.setEnabled(not loading and self.current_ref is not None)

    def _accept(self, ref: str, session_id: str) -> bool:
        if not self.viewer.session.is_current(session_id):
            logger.warning(f"Discarding stale result for {ref} (session {session_id} abandoned)")
            self.console.warn(f"Discarded late result for {ref}")
            return False
        return True

    def _finish_open(self, ref: str) -> None:
        self._report(asyncio.run(self.viewer.open(ref)))

    def _finish_retry(self, ref: str) -> None:
        self._report(asyncio.run(self.viewer.retry(ref)))

    def _finish_diagnostics(self, ref: str) -> None:
        report = asyncio.run(self.viewer.diagnose(ref))
        for line in report.lines():
            self.console.info(line)
        if report.healthy:
            QMessageBox.information(self, "Diagnostics", "\n".join(report.lines()))
        else:
            QMessageBox.warning(self, "Diagnostics", "\n".join(report.lines()))

    def _report(self, result: RecoveryResult) -> None:
        if result.status is RecoveryStatus.RECOVERED:
            for line in result.summary():
                self.console.info(line)
            self.statusBar().showMessage(result.outcome.describe(), 5000)
            return

        for line in result.summary():
            self.console.warn(line)
        self.statusBar().showMessage(f"{result.status}: {result.outcome.describe()}")
        if result.reload_required:
            self.console.error("Model could not be displayed. Use Retry, or restart the viewer.")

    # --- SLOTS ---
    def on_parsed(self, ref: str, session_id: str, dataset: object, metadata: object) -> None:
        """THREAD SAFE: Runs on the GUI thread when a worker finished reading."""
        if not self._accept(ref, session_id):
            return
        self._set_loading(False)
        self.viewer.parser.offer(ref, dataset, metadata)
        self._then(ref)

    def on_parse_failed(self, ref: str, session_id: str, error: object) -> None:
        if not self._accept(ref, session_id):
            return
        self._set_loading(False)
        self.viewer.parser.offer_error(ref, error)
        self._then(ref)

    def on_open_file(self) -> None:
        path, _ = QFileDialog.getOpenFileName(self, "Open model", "", MODEL_FILE_FILTER)
        if path:
            self.open_model(path)

    def on_open_url(self) -> None:
        url, ok = QInputDialog.getText(self, "Open URL", "Model URL:", QLineEdit.EchoMode.Normal, "https://")
        if ok and url.strip():
            self.open_model(url.strip())

    def on_retry(self) -> None:
        if not self.current_ref:
            return
        self.console.info(f"Retrying {self.current_ref}")
        self._request(self.current_ref, self._finish_retry)

    def on_frame_all(self) -> None:
        params = self.viewer.frame_all()
        self.console.info(f"Framed all: target={params.target.to_tuple()}, distance={params.distance:g}")

    def on_diagnostics(self) -> None:
        if not self.current_ref:
            return
        self._request(self.current_ref, self._finish_diagnostics)

    def closeEvent(self, event: QCloseEvent) -> None:
        self.viewer.session.abandon()
        for worker in self._workers:
            worker.wait()
        self.viewer.close()
        self.plotter.close()
        super().closeEvent(event)

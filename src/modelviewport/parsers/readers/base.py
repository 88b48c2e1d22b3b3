"""
Parser Base
===========
Shared plumbing for the parser collaborators.

Why is this file needed?
------------------------
1. Runtime path: Every parser needs a one-time `configure()` that prepares its
   cache directory before the first load, like the viewer's WASM path setup.
2. Fetching: Remote references are downloaded with `requests`, local ones are
   checked for existence. Blocking work runs off the event loop thread.
3. Registration: Produced geometry is added to the scene under the model's
   request identifier, so recovery can find it even when it is not returned.
"""
from __future__ import annotations

import asyncio
import logging
import os
from typing import Any, Optional, TYPE_CHECKING
import uuid

import requests

from modelviewport import config
from modelviewport.errors import ParserConfigurationError
from modelviewport.model.formats import ModelFormat, detect_format, is_remote, suffix_of
from modelviewport.model.outcome import ParseResult

if TYPE_CHECKING:
    import pyvista as pv
    from modelviewport.view.widgets.scene_adapter import PyVistaScene

logger = logging.getLogger(__name__)


class BaseParser:
    FORMATS: tuple[ModelFormat, ...] = ()

    def __init__(
        self,
        scene: PyVistaScene,
        cache_dir: str = config.PARSER_CACHE_PATH,
        timeout: float = config.HTTP_TIMEOUT,
    ) -> None:
        self.scene = scene
        self.cache_dir = cache_dir
        self.timeout = timeout
        self._configured = False
        self._downloads: list[str] = []

    # ------------------------------------------------------------------------------
    # Collaborator API
    # ------------------------------------------------------------------------------

    def configure(self) -> None:
        """Prepare the cache directory. Idempotent."""
        try:
            os.makedirs(self.cache_dir, exist_ok=True)
        except OSError as e:
            raise ParserConfigurationError(f"Cannot create parser cache at '{self.cache_dir}': {e}") from e
        if not self._configured:
            logger.info(f"{type(self).__name__} configured (cache: {self.cache_dir})")
        self._configured = True

    def is_ready(self) -> bool:
        return (
            self._configured
            and os.path.isdir(self.cache_dir)
            and os.access(self.cache_dir, os.W_OK)
        )

    def read_dataset(self, ref: str) -> tuple[Optional[pv.DataSet], dict[str, Any]]:
        """
        Blocking half of a load: fetch `ref` and read it.

        Safe to call from a worker thread; the scene is not touched.

        Raises:
            ParserConfigurationError: If configure() was never called.
        """
        if not self._configured:
            raise ParserConfigurationError(
                f"{type(self).__name__} used before configure(); parser runtime path is not set"
            )

        path = self._resolve(ref)
        dataset, metadata = self.read(path)

        fmt = detect_format(ref)
        metadata.update({"ref": ref, "path": path, "format": str(fmt), "kind": str(fmt.kind)})
        return dataset, metadata

    def register(self, ref: str, dataset: Optional[pv.DataSet], metadata: dict[str, Any]) -> ParseResult:
        """Scene half of a load. Runs on the thread that owns the scene."""
        if dataset is None or dataset.n_points == 0:
            metadata["n_points"] = 0
            logger.warning(f"{ref} parsed without renderable geometry")
            return ParseResult(mesh=None, metadata=metadata)

        metadata["n_points"] = int(dataset.n_points)
        metadata["n_cells"] = int(dataset.n_cells)
        handle = self.scene.add(ref, dataset)
        logger.debug(f"Parsed {ref}: {metadata['n_points']} points, {metadata['n_cells']} cells")
        return ParseResult(mesh=handle, metadata=metadata)

    async def load_model(self, ref: str) -> ParseResult:
        dataset, metadata = await asyncio.to_thread(self.read_dataset, ref)
        return self.register(ref, dataset, metadata)

    def read(self, path: str) -> tuple[Optional[pv.DataSet], dict[str, Any]]:
        """Read a local file. Runs in a worker thread; must not touch the scene."""
        raise NotImplementedError

    def cleanup_downloads(self) -> None:
        """Deletes all files downloaded during the session."""
        logger.info(f"Cleaning up {len(self._downloads)} downloaded model files.")
        for temp_path in self._downloads:
            try:
                if os.path.exists(temp_path):
                    os.remove(temp_path)
                    logger.debug(f"Deleted downloaded file: {temp_path}")
            except OSError as e:
                logger.warning(f"Could not delete downloaded file '{temp_path}': {e}")
        self._downloads.clear()

    # ------------------------------------------------------------------------------
    # Internal methods
    # ------------------------------------------------------------------------------

    def _resolve(self, ref: str) -> str:
        if is_remote(ref):
            return self._download(ref)
        if not os.path.isfile(ref):
            raise FileNotFoundError(f"Model file not found: {ref}")
        return ref

    def _download(self, url: str) -> str:
        logger.info(f"Downloading model from {url}")
        response = requests.get(url, timeout=self.timeout)
        response.raise_for_status()

        target = os.path.join(self.cache_dir, f"{uuid.uuid4().hex}.{suffix_of(url)}")
        with open(target, "wb") as f:
            f.write(response.content)
        self._downloads.append(target)
        logger.debug(f"Downloaded {len(response.content)} bytes to {target}")
        return target

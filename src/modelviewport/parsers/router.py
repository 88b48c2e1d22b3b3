"""
Parser Router
=============
The ModelParser the viewport talks to.

Why is this file needed?
------------------------
1. Dispatch: It picks the registered reader for a reference's format, so the
   load session only ever sees a single parser collaborator.
2. Shared configuration: `configure()` prepares every reader at once and
   `is_ready()` reports whether all of them are usable.
3. Gaps: A format that is recognized but has no registered reader fails with
   a clear UnsupportedFormatError, which the load session reports as a parser
   error.
"""
from __future__ import annotations

import logging
from typing import Any, Optional, TYPE_CHECKING

from modelviewport import config
from modelviewport.errors import UnsupportedFormatError
from modelviewport.model.formats import detect_format
from modelviewport.model.outcome import ParseResult
from modelviewport.parsers.readers.base import BaseParser
from modelviewport.parsers.readers.registry import parser_class_for, registered_classes

if TYPE_CHECKING:
    import pyvista as pv
    from modelviewport.view.widgets.scene_adapter import PyVistaScene

logger = logging.getLogger(__name__)


class ParserRouter:
    def __init__(
        self,
        scene: PyVistaScene,
        cache_dir: str = config.PARSER_CACHE_PATH,
        timeout: float = config.HTTP_TIMEOUT,
    ) -> None:
        self.scene = scene
        self._readers: dict[type[BaseParser], BaseParser] = {
            cls: cls(scene, cache_dir=cache_dir, timeout=timeout) for cls in registered_classes()
        }

    def configure(self) -> None:
        for reader in self._readers.values():
            reader.configure()

    def is_ready(self) -> bool:
        return bool(self._readers) and all(r.is_ready() for r in self._readers.values())

    def reader_for(self, ref: str) -> BaseParser:
        fmt = detect_format(ref)
        try:
            cls = parser_class_for(fmt)
        except KeyError:
            raise UnsupportedFormatError(
                f"Format '{fmt}' is recognized but no reader is installed for it"
            ) from None
        return self._readers[cls]

    def read_dataset(self, ref: str) -> tuple[Optional[pv.DataSet], dict[str, Any]]:
        """Blocking fetch + read, for callers that run it on their own worker thread."""
        reader = self.reader_for(ref)
        logger.debug(f"Reading {ref} with {type(reader).__name__}")
        return reader.read_dataset(ref)

    def register(self, ref: str, dataset: Optional[pv.DataSet], metadata: dict[str, Any]) -> ParseResult:
        return self.reader_for(ref).register(ref, dataset, metadata)

    async def load_model(self, ref: str) -> ParseResult:
        reader = self.reader_for(ref)
        logger.debug(f"Routing {ref} to {type(reader).__name__}")
        return await reader.load_model(ref)

    def cleanup(self) -> None:
        for reader in self._readers.values():
            reader.cleanup_downloads()

"""
Read-ahead Parser
=================
The parser collaborator used by the viewer: a ParserRouter whose slow half can
be run ahead of time.

Why is this file needed?
------------------------
The Qt window must not block while a model downloads or parses. A worker
thread calls the router's blocking `read_dataset()` and hands the result back
to the GUI thread, which offers it here. The next `load_model()` for that
reference then only registers the dataset in the scene, so normalization and
framing run on the GUI thread without waiting on I/O. Without an offered
result the router is used directly, as in headless mode.
"""
from __future__ import annotations

import logging
from typing import Any, Optional, TYPE_CHECKING, Union

from modelviewport.errors import ParserConfigurationError
from modelviewport.model.outcome import ParseResult

if TYPE_CHECKING:
    import pyvista as pv
    from modelviewport.parsers.router import ParserRouter

logger = logging.getLogger(__name__)

_Pending = Union[tuple[Optional["pv.DataSet"], dict[str, Any]], BaseException]


class PrefetchingParser:
    def __init__(self, router: ParserRouter) -> None:
        self.router = router
        self._pending: dict[str, _Pending] = {}

    # ------------------------------------------------------------------------------
    # Read-ahead
    # ------------------------------------------------------------------------------

    def offer(self, ref: str, dataset: Optional[pv.DataSet], metadata: dict[str, Any]) -> None:
        """Result of `router.read_dataset(ref)` computed on another thread."""
        self._pending[ref] = (dataset, metadata)

    def offer_error(self, ref: str, error: BaseException) -> None:
        """Exception raised by `router.read_dataset(ref)` on another thread."""
        self._pending[ref] = error

    def has_pending(self, ref: str) -> bool:
        return ref in self._pending

    def drop_pending(self) -> None:
        if self._pending:
            logger.debug(f"Dropping {len(self._pending)} unused read-ahead result(s)")
        self._pending.clear()

    # ------------------------------------------------------------------------------
    # Collaborator API
    # ------------------------------------------------------------------------------

    def configure(self) -> None:
        self.router.configure()

    def is_ready(self) -> bool:
        return self.router.is_ready()

    async def load_model(self, ref: str) -> ParseResult:
        pending = self._pending.pop(ref, None)
        if pending is None:
            return await self.router.load_model(ref)

        if isinstance(pending, BaseException):
            if isinstance(pending, ParserConfigurationError) and self.router.is_ready():
                logger.info(f"Parser was configured after the read-ahead of {ref} failed; reading again")
                return await self.router.load_model(ref)
            raise pending

        dataset, metadata = pending
        return self.router.register(ref, dataset, metadata)

    def cleanup(self) -> None:
        self.drop_pending()
        self.router.cleanup()

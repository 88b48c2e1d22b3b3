from __future__ import annotations

import logging
from typing import Any, Optional

logger = logging.getLogger(__name__)


class HandleRegistry:
    """
    Maps a model request identifier to the handle the parser produced for it.

    Parsers register handles at creation time, so recovery can look geometry
    up by identity instead of traversing the scene graph.
    """
    def __init__(self) -> None:
        self._handles: dict[str, Any] = {}

    def register(self, identity: str, handle: Any) -> None:
        if not identity:
            raise ValueError("Handle identity must be a non-empty string")
        if identity in self._handles and self._handles[identity] is not handle:
            logger.debug(f"Replacing registered handle for '{identity}'")
        self._handles[identity] = handle

    def lookup(self, identity: str) -> Optional[Any]:
        return self._handles.get(identity)

    def discard(self, identity: str) -> Optional[Any]:
        return self._handles.pop(identity, None)

    def identities(self) -> list[str]:
        return list(self._handles.keys())

    def clear(self) -> None:
        self._handles.clear()

    def __contains__(self, identity: object) -> bool:
        return identity in self._handles

    def __len__(self) -> int:
        return len(self._handles)

from __future__ import annotations

import logging
from typing import Any, Optional

import meshio
import pyvista as pv

from modelviewport.model.formats import ModelFormat
from modelviewport.parsers.readers.base import BaseParser
from modelviewport.parsers.readers.registry import register_parser

logger = logging.getLogger(__name__)


@register_parser
class MeshParser(BaseParser):
    """Surface and volume meshes read through VTK, with meshio as fallback."""
    FORMATS = (
        ModelFormat.GLB,
        ModelFormat.GLTF,
        ModelFormat.OBJ,
        ModelFormat.STL,
        ModelFormat.PLY,
        ModelFormat.VTK,
        ModelFormat.VTP,
        ModelFormat.VTU,
    )

    def read(self, path: str) -> tuple[Optional[pv.DataSet], dict[str, Any]]:
        metadata: dict[str, Any] = {"reader": "pyvista"}
        try:
            data = pv.read(path)
        except (ValueError, OSError) as e:
            logger.warning(f"VTK reader failed for {path} ({e}), trying meshio")
            mesh = meshio.read(path)
            data = pv.from_meshio(mesh)
            metadata["reader"] = "meshio"

        if isinstance(data, pv.MultiBlock):
            metadata["n_blocks"] = data.n_blocks
            if data.n_blocks == 0:
                return None, metadata
            # glTF scenes come back as (nested) blocks
            data = data.extract_geometry()

        return data, metadata

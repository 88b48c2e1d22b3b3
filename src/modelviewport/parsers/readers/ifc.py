"""
IFC reader.

Triangulates every product with a representation through `ifcopenshell.geom`
and merges the shapes into one PolyData. Shapes are placed in world
coordinates, so a georeferenced model keeps its survey offset and is left for
the bounds analysis to recenter. A file whose products yield no triangles is
returned as metadata only.
"""
from __future__ import annotations

import logging
from typing import Any, Optional

import ifcopenshell
import ifcopenshell.geom
import numpy as np
import pyvista as pv

from modelviewport.model.formats import ModelFormat
from modelviewport.parsers.readers.base import BaseParser
from modelviewport.parsers.readers.registry import register_parser

logger = logging.getLogger(__name__)


@register_parser
class IfcParser(BaseParser):
    FORMATS = (ModelFormat.IFC,)

    def read(self, path: str) -> tuple[Optional[pv.DataSet], dict[str, Any]]:
        model = ifcopenshell.open(path)
        products = [p for p in model.by_type("IfcProduct") if getattr(p, "Representation", None)]

        settings = ifcopenshell.geom.settings()
        settings.set(settings.USE_WORLD_COORDS, True)

        vertex_blocks: list[np.ndarray] = []
        face_blocks: list[np.ndarray] = []
        element_ids: list[np.ndarray] = []
        skipped: list[str] = []
        offset = 0
        for product in products:
            try:
                shape = ifcopenshell.geom.create_shape(settings, product)
            except RuntimeError as e:
                logger.warning(f"{path}: no geometry for {product.is_a()} #{product.id()}: {e}")
                skipped.append(product.GlobalId)
                continue

            verts = np.asarray(shape.geometry.verts, dtype=np.float64).reshape(-1, 3)
            faces = np.asarray(shape.geometry.faces, dtype=np.int64).reshape(-1, 3)
            if not len(verts) or not len(faces):
                continue
            vertex_blocks.append(verts)
            face_blocks.append(faces + offset)
            element_ids.append(np.full(len(faces), product.id(), dtype=np.int64))
            offset += len(verts)

        metadata: dict[str, Any] = {
            "reader": "ifcopenshell",
            "schema": model.schema,
            "elements": len(products),
            "triangulated_elements": len(vertex_blocks),
            "skipped_elements": skipped,
        }
        if not vertex_blocks:
            logger.warning(f"{path}: {len(products)} product(s) but no triangulated geometry")
            return None, metadata

        triangles = np.vstack(face_blocks)
        cells = np.hstack([np.full((len(triangles), 1), 3, dtype=np.int64), triangles]).ravel()
        mesh = pv.PolyData(np.vstack(vertex_blocks), cells)
        mesh.cell_data["element_id"] = np.concatenate(element_ids)
        logger.debug(f"IFC {path}: {len(vertex_blocks)} element(s), {mesh.n_cells} triangles")
        return mesh, metadata

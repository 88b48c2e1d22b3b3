"""
LAS / LAZ point cloud reader (`laspy`, LAZ through the lazrs backend).

Coordinates are the scaled x/y/z values, so survey offsets stay in place for
the bounds analysis. 16-bit LAS colors are reduced to an 8-bit "rgb" array;
intensity is kept as a point array.
"""
from __future__ import annotations

import logging
from typing import Any, Optional

import laspy
import numpy as np
import pyvista as pv

from modelviewport.model.formats import ModelFormat
from modelviewport.parsers.readers.base import BaseParser
from modelviewport.parsers.readers.registry import register_parser

logger = logging.getLogger(__name__)


@register_parser
class LasParser(BaseParser):
    FORMATS = (ModelFormat.LAS, ModelFormat.LAZ)

    def read(self, path: str) -> tuple[Optional[pv.DataSet], dict[str, Any]]:
        las = laspy.read(path)
        dims = {d.name.lower() for d in las.point_format.dimensions}
        metadata: dict[str, Any] = {
            "reader": "laspy",
            "version": str(las.header.version),
            "point_format": int(las.point_format.id),
            "point_count": int(las.header.point_count),
        }
        if las.header.point_count == 0:
            return None, metadata

        cloud = pv.PolyData(np.asarray(las.xyz, dtype=np.float64))

        if {"red", "green", "blue"}.issubset(dims):
            rgb = np.column_stack([np.asarray(las.red), np.asarray(las.green), np.asarray(las.blue)])
            if rgb.max() > 255:
                rgb = (rgb / 256.0).round()
            cloud["rgb"] = np.clip(rgb, 0, 255).astype(np.uint8)
            metadata["has_colors"] = True
        if "intensity" in dims:
            cloud["intensity"] = np.asarray(las.intensity).astype(np.uint16, copy=False)

        logger.debug(f"LAS {path}: {cloud.n_points} points (format {metadata['point_format']})")
        return cloud, metadata

"""
Point cloud reader for plain-text (XYZ / PTS / CSV) and NumPy (.npy) scans.

Rows are `x y z [r g b ...]`. Leading header lines (a column caption or the
PTS point count) are skipped. Colors are kept as an "rgb" point array.
"""
from __future__ import annotations

import logging
from typing import Any, Optional

import numpy as np
import pyvista as pv

from modelviewport.model.formats import ModelFormat, suffix_of
from modelviewport.parsers.readers.base import BaseParser
from modelviewport.parsers.readers.registry import register_parser

logger = logging.getLogger(__name__)

_HEADER_SCAN_LINES = 10


@register_parser
class PointCloudParser(BaseParser):
    FORMATS = (ModelFormat.XYZ, ModelFormat.PTS, ModelFormat.CSV, ModelFormat.NPY)

    def read(self, path: str) -> tuple[Optional[pv.DataSet], dict[str, Any]]:
        if suffix_of(path) == ModelFormat.NPY:
            data = np.load(path, allow_pickle=False)
        else:
            delimiter = "," if suffix_of(path) == ModelFormat.CSV else None
            skip = _count_header_lines(path, delimiter)
            data = np.loadtxt(path, delimiter=delimiter, skiprows=skip, ndmin=2)

        data = np.asarray(data, dtype=float)
        if data.ndim == 1 and data.size % 3 == 0:
            data = data.reshape(-1, 3)

        metadata: dict[str, Any] = {"reader": "numpy", "n_columns": int(data.shape[-1]) if data.ndim else 0}
        if data.size == 0:
            return None, metadata
        if data.ndim != 2 or data.shape[1] < 3:
            raise ValueError(f"Point cloud '{path}' needs at least 3 columns (x, y, z), got {data.shape}")

        cloud = pv.PolyData(np.ascontiguousarray(data[:, :3]))
        if data.shape[1] >= 6:
            rgb = data[:, 3:6]
            if np.nanmax(rgb) <= 1.0:
                rgb = rgb * 255.0
            cloud["rgb"] = np.clip(rgb, 0, 255).astype(np.uint8)
            metadata["has_colors"] = True
        logger.debug(f"Point cloud {path}: {cloud.n_points} points")
        return cloud, metadata


def _count_header_lines(path: str, delimiter: Optional[str]) -> int:
    """Number of leading lines that are not `x y z ...` rows."""
    count = 0
    with open(path, "r", encoding="utf-8", errors="replace") as f:
        for _ in range(_HEADER_SCAN_LINES):
            line = f.readline()
            if not line:
                break
            fields = [p for p in line.strip().split(delimiter) if p.strip()]
            try:
                values = [float(p) for p in fields]
            except ValueError:
                count += 1
                continue
            if len(values) >= 3:
                break
            count += 1
    return count

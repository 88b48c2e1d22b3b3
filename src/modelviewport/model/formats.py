"""
Model Formats
Detects the format of a model reference (path or URL) from its suffix.
"""
from __future__ import annotations

from enum import StrEnum
import os
from urllib.parse import urlparse

from modelviewport.errors import UnsupportedFormatError


class ModelKind(StrEnum):
    BUILDING_MODEL = "building_model"
    POINT_CLOUD = "point_cloud"


class ModelFormat(StrEnum):
    IFC = "ifc"
    GLB = "glb"
    GLTF = "gltf"
    OBJ = "obj"
    STL = "stl"
    PLY = "ply"
    VTK = "vtk"
    VTP = "vtp"
    VTU = "vtu"
    LAS = "las"
    LAZ = "laz"
    XYZ = "xyz"
    PTS = "pts"
    CSV = "csv"
    NPY = "npy"

    @property
    def kind(self) -> ModelKind:
        if self in _POINT_CLOUD_FORMATS:
            return ModelKind.POINT_CLOUD
        return ModelKind.BUILDING_MODEL


_POINT_CLOUD_FORMATS = frozenset({
    ModelFormat.LAS, ModelFormat.LAZ, ModelFormat.XYZ,
    ModelFormat.PTS, ModelFormat.CSV, ModelFormat.NPY,
})


def is_remote(ref: str) -> bool:
    return urlparse(ref).scheme in ("http", "https")


def suffix_of(ref: str) -> str:
    """Lower-case suffix without the dot; query strings of URLs are ignored."""
    path = urlparse(ref).path if is_remote(ref) else ref
    return os.path.splitext(path)[1].lower().lstrip(".")


def detect_format(ref: str) -> ModelFormat:
    """
    Resolve the model format of a path or URL.

    Raises:
        UnsupportedFormatError: If the suffix is missing or unknown.
    """
    ext = suffix_of(ref)
    if not ext:
        raise UnsupportedFormatError(f"Cannot determine model format of '{ref}' (no file extension).")
    try:
        return ModelFormat(ext)
    except ValueError:
        raise UnsupportedFormatError(f"Unsupported model format '.{ext}' for '{ref}'.") from None

"""
Fallback Markers
Geometry shown when a model cannot be displayed: origin sphere, axes and a ground grid.
"""
import numpy as np
import pyvista as pv

from modelviewport import config

# Marker names double as scene identities
ORIGIN_MARKER = "__debug_origin__"
AXES_MARKER = "__debug_axes__"
GRID_MARKER = "__debug_grid__"

MARKER_COLORS: dict[str, str] = {
    ORIGIN_MARKER: "red",
    AXES_MARKER: "#404040",
    GRID_MARKER: "#B0B0B0",
}


def build_origin_marker(radius: float = config.MARKER_RADIUS) -> pv.PolyData:
    return pv.Sphere(radius=radius, center=(0.0, 0.0, 0.0))


def build_axes(length: float = config.AXES_LENGTH) -> pv.PolyData:
    """Three line segments from the origin along +X, +Y and +Z, with an 'axis' cell array (0, 1, 2)."""
    points = np.array([
        (0.0, 0.0, 0.0), (length, 0.0, 0.0),
        (0.0, 0.0, 0.0), (0.0, length, 0.0),
        (0.0, 0.0, 0.0), (0.0, 0.0, length),
    ])
    lines = np.array([2, 0, 1, 2, 2, 3, 2, 4, 5])
    axes = pv.PolyData(points, lines=lines)
    axes.cell_data["axis"] = np.arange(3)
    return axes


def build_ground_grid(size: float = config.GRID_SIZE, divisions: int = config.GRID_DIVISIONS) -> pv.PolyData:
    """
    Create a square line grid on the ground (XZ) plane, centered on the origin.

    Args:
        size: Edge length of the grid.
        divisions: Number of cells along each edge.

    Returns:
        A PyVista PolyData with (divisions + 1) * 2 line cells.
    """
    if divisions <= 0 or size <= 0:
        return pv.PolyData()

    half = size / 2.0
    ticks = np.linspace(-half, half, divisions + 1)

    n_lines = len(ticks) * 2
    points = np.empty((n_lines * 2, 3), dtype=float)
    cells = np.empty(n_lines * 3, dtype=int)

    pid, cid = 0, 0
    for x in ticks:
        points[pid] = (x, 0.0, -half)
        points[pid + 1] = (x, 0.0, half)
        cells[cid:cid + 3] = (2, pid, pid + 1)
        pid += 2
        cid += 3
    for z in ticks:
        points[pid] = (-half, 0.0, z)
        points[pid + 1] = (half, 0.0, z)
        cells[cid:cid + 3] = (2, pid, pid + 1)
        pid += 2
        cid += 3

    return pv.PolyData(points, lines=cells)


def build_fallback_markers() -> dict[str, pv.PolyData]:
    return {
        ORIGIN_MARKER: build_origin_marker(),
        AXES_MARKER: build_axes(),
        GRID_MARKER: build_ground_grid(),
    }

"""
Configuration & Constants
=========================
This module is the single registry for viewport constants.

Why is this file needed?
------------------------
1. Consistency: The thresholds that decide when a model is "far from origin"
   or "in millimeters", and the factors used to frame the camera, live here
   and nowhere else. Components take them as keyword defaults.
2. Deployment: It resolves the parser cache directory under the system temp
   folder, so a frozen or read-only install still has a writable location.

Exports:
    ORIGIN_THRESHOLD, SCALE_THRESHOLD, MILLIMETER_SCALE_FACTOR: anomaly detection.
    DISTANCE_FACTOR, NEAR_PLANE, FAR_FLOOR, FAR_MARGIN, ...: camera framing.
    PARSER_CACHE_PATH, HTTP_TIMEOUT: parser collaborator settings.
"""
import os
import tempfile

# --- Anomaly detection (working units, normally meters) ---
# Survey coordinate systems (UTM/EPSG) put features tens of thousands of units
# away from the origin; authored scene content rarely exceeds a few hundred.
ORIGIN_THRESHOLD: float = 5_000.0
SCALE_THRESHOLD: float = 10_000.0
MILLIMETER_SCALE_FACTOR: float = 0.001

# --- Camera framing ---
DISTANCE_FACTOR: float = 2.0
MIN_DISTANCE: float = 1.0
NEAR_PLANE: float = 0.1
FAR_FLOOR: float = 10_000.0
FAR_MARGIN: float = 20.0
MAX_DISTANCE_FACTOR: float = 10.0
DEFAULT_FOV: float = 30.0  # PyVista's default view angle
DEFAULT_CAMERA_DISTANCE: float = 10.0
ISOMETRIC_DIRECTION: tuple[float, float, float] = (1.0, 0.8, 1.0)
VIEW_UP: tuple[float, float, float] = (0.0, 1.0, 0.0)

# --- Diagnostics ---
CORNER_WARNING_DISTANCE: float = 10_000.0

# --- Fallback markers ---
MARKER_RADIUS: float = 0.2
AXES_LENGTH: float = 10.0
GRID_SIZE: float = 50.0
GRID_DIVISIONS: int = 50

# --- Parser collaborator ---
HTTP_TIMEOUT: float = 30.0
PARSER_CACHE_PATH: str = os.path.join(tempfile.gettempdir(), "modelviewport-cache")

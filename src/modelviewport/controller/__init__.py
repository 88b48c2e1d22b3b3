"""
Viewport Core
=============
Normalization, framing and recovery of freshly parsed models.

Why is this package needed?
---------------------------
1. Analysis: It classifies untrusted bounds (survey coordinates, millimeters).
2. Correction: It fixes the model transform and frames the camera.
3. Recovery: It drives a bounded repair sequence when the parser produces
   metadata without geometry.

Note: This package should be pure Python/NumPy and should NOT import PySide6.
Rendering is reached only through the collaborator protocols.
"""

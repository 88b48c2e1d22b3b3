"""
Geometric Primitives for bounds analysis and camera framing.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Iterable, Sequence, TYPE_CHECKING
import math

import numpy as np

if TYPE_CHECKING:
    import numpy.typing as npt


@dataclass(frozen=True)
class Vec3:
    """
    A vector in 3D space, used for positions, sizes and offsets.
    """
    x: float
    y: float
    z: float

    @classmethod
    def zero(cls) -> Vec3:
        return cls(0.0, 0.0, 0.0)

    @classmethod
    def from_iterable(cls, values: Iterable[float]) -> Vec3:
        x, y, z = (float(v) for v in values)
        return cls(x, y, z)

    def __add__(self, other: Vec3) -> Vec3:
        return Vec3(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: Vec3) -> Vec3:
        return Vec3(self.x - other.x, self.y - other.y, self.z - other.z)

    def __mul__(self, scalar: float) -> Vec3:
        return Vec3(self.x * scalar, self.y * scalar, self.z * scalar)

    __rmul__ = __mul__

    def __truediv__(self, scalar: float) -> Vec3:
        if scalar == 0.0: raise ZeroDivisionError
        return Vec3(self.x / scalar, self.y / scalar, self.z / scalar)

    def __neg__(self) -> Vec3:
        return Vec3(-self.x, -self.y, -self.z)

    def __iter__(self):
        return iter((self.x, self.y, self.z))

    @property
    def magnitude(self) -> float:
        return math.hypot(self.x, self.y, self.z)

    def normalize(self) -> Vec3:
        mag = self.magnitude
        if mag == 0.0: return Vec3.zero()
        return self / mag

    def max_component(self) -> float:
        return max(self.x, self.y, self.z)

    def is_finite(self) -> bool:
        return math.isfinite(self.x) and math.isfinite(self.y) and math.isfinite(self.z)

    def is_close(self, other: Vec3, tol: float = 1e-9) -> bool:
        return (self - other).magnitude <= tol

    def to_tuple(self) -> tuple[float, float, float]:
        return (self.x, self.y, self.z)

    def to_array(self) -> npt.NDArray[np.float64]:
        return np.array([self.x, self.y, self.z], dtype=np.float64)


@dataclass(frozen=True)
class BoundingVolume:
    """
    Axis-aligned box enclosing a model, described by its minimum and maximum corners.

    The radius is half the Euclidean norm of the size. It is a scale metric
    for the anomaly thresholds, not a true bounding sphere.
    """
    min: Vec3
    max: Vec3

    @classmethod
    def from_bounds(cls, bounds: Sequence[float]) -> BoundingVolume:
        """
        Build from a VTK/PyVista bounds tuple.

        Args:
            bounds: (x_min, x_max, y_min, y_max, z_min, z_max)

        Raises:
            ValueError: If the tuple does not have six entries.
        """
        values = [float(b) for b in bounds]
        if len(values) != 6:
            raise ValueError(f"Expected 6 bound values, got {len(values)}.")
        x_min, x_max, y_min, y_max, z_min, z_max = values
        return cls(Vec3(x_min, y_min, z_min), Vec3(x_max, y_max, z_max))

    @classmethod
    def from_points(cls, points: npt.ArrayLike) -> BoundingVolume:
        """Bounding volume of an (N, 3) array of points."""
        arr = np.asarray(points, dtype=np.float64).reshape(-1, 3)
        if arr.shape[0] == 0:
            raise ValueError("Cannot compute bounds of an empty point set.")
        return cls(Vec3.from_iterable(arr.min(axis=0)), Vec3.from_iterable(arr.max(axis=0)))

    @property
    def center(self) -> Vec3:
        return (self.min + self.max) * 0.5

    @property
    def size(self) -> Vec3:
        return self.max - self.min

    @property
    def radius(self) -> float:
        return self.size.magnitude / 2.0

    def is_finite(self) -> bool:
        return self.min.is_finite() and self.max.is_finite()

    def is_inverted(self) -> bool:
        """True when any min component exceeds its max (e.g. VTK's empty bounds)."""
        return self.min.x > self.max.x or self.min.y > self.max.y or self.min.z > self.max.z

    def is_degenerate(self) -> bool:
        """A single point: min == max."""
        return self.min == self.max

    def translated(self, offset: Vec3) -> BoundingVolume:
        return BoundingVolume(self.min + offset, self.max + offset)

    def scaled(self, factor: float) -> BoundingVolume:
        """Uniform scale about the origin."""
        a, b = self.min * factor, self.max * factor
        return BoundingVolume(
            Vec3(min(a.x, b.x), min(a.y, b.y), min(a.z, b.z)),
            Vec3(max(a.x, b.x), max(a.y, b.y), max(a.z, b.z)),
        )

    def union(self, other: BoundingVolume) -> BoundingVolume:
        return BoundingVolume(
            Vec3(min(self.min.x, other.min.x), min(self.min.y, other.min.y), min(self.min.z, other.min.z)),
            Vec3(max(self.max.x, other.max.x), max(self.max.y, other.max.y), max(self.max.z, other.max.z)),
        )

    def corners_distance(self) -> float:
        """Largest distance of the min/max corners from the origin."""
        return max(self.min.magnitude, self.max.magnitude)

    def to_bounds(self) -> tuple[float, float, float, float, float, float]:
        return (self.min.x, self.max.x, self.min.y, self.max.y, self.min.z, self.max.z)

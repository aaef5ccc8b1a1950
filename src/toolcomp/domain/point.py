"""Core geometric types for path representation.

This module defines the fundamental geometric types used by the offset
pipeline:
- Vec2: An immutable 2D vector with the arithmetic the pipeline needs
- Point: A path vertex with XY and an optional Z
- ToolPosition: Snapshot of the tool position taken when a run starts
"""

import math
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class Vec2:
    """A 2D vector.

    Attributes:
        x: X component
        y: Y component
    """

    x: float
    y: float

    def __add__(self, other: "Vec2") -> "Vec2":
        return Vec2(self.x + other.x, self.y + other.y)

    def __sub__(self, other: "Vec2") -> "Vec2":
        return Vec2(self.x - other.x, self.y - other.y)

    def __mul__(self, k: float) -> "Vec2":
        return Vec2(self.x * k, self.y * k)

    __rmul__ = __mul__

    def __neg__(self) -> "Vec2":
        return Vec2(-self.x, -self.y)

    def dot(self, other: "Vec2") -> float:
        """Dot product."""
        return self.x * other.x + self.y * other.y

    def cross(self, other: "Vec2") -> float:
        """Z component of the 3D cross product (positive for a left turn)."""
        return self.x * other.y - self.y * other.x

    def length(self) -> float:
        """Euclidean length."""
        return math.hypot(self.x, self.y)

    def rotate_cw(self) -> "Vec2":
        """Rotate 90 degrees clockwise (points to the right of travel)."""
        return Vec2(self.y, -self.x)

    def to_tuple(self) -> tuple[float, float]:
        """Convert to simple (x, y) tuple."""
        return (self.x, self.y)


@dataclass(frozen=True, slots=True)
class Point:
    """A path vertex in millimetres.

    Immutable and hashable. Z is None when the vertex leaves the Z axis
    unspecified (only possible when the tool Z itself is unknown).

    Attributes:
        x: X coordinate
        y: Y coordinate
        z: Z coordinate or None
    """

    x: float
    y: float
    z: float | None = None

    @property
    def xy(self) -> Vec2:
        """XY projection as a vector."""
        return Vec2(self.x, self.y)

    def with_xy(self, v: Vec2) -> "Point":
        """Return a copy moved to ``v`` keeping Z."""
        return Point(v.x, v.y, self.z)

    def xy_equal(self, other: "Point", tolerance: float = 0.0) -> bool:
        """True if both points share X and Y (Z may differ)."""
        return abs(self.x - other.x) <= tolerance and abs(self.y - other.y) <= tolerance

    def z_equal(self, other: "Point", tolerance: float = 0.0) -> bool:
        """True if both Z values are unspecified or within tolerance."""
        if self.z is None or other.z is None:
            return self.z is None and other.z is None
        return abs(self.z - other.z) <= tolerance

    def to_tuple(self) -> tuple[float, float, float | None]:
        """Convert to simple (x, y, z) tuple."""
        return (self.x, self.y, self.z)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary.

        Returns:
            Dictionary with x, y and z fields
        """
        return {"x": self.x, "y": self.y, "z": self.z}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Point":
        """Deserialize from dictionary.

        Args:
            data: Dictionary with x, y and optional z fields

        Returns:
            Point instance
        """
        return cls(x=data["x"], y=data["y"], z=data.get("z"))


@dataclass(frozen=True, slots=True)
class ToolPosition:
    """Where the tool was before the compensation routine ran.

    Captured once when a run starts and passed down explicitly. Any axis may
    be unknown.
    """

    x: float | None = None
    y: float | None = None
    z: float | None = None

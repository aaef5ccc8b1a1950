"""Geometric operations for offset path calculations.

This module provides the small set of vector utilities the offset pipeline
is built from:
- Segment direction and side normal computation
- Half-angle of a corner from its two normals
- Line intersection and projection parameters
- Arc centre reconstruction for G-code output

All functions are pure and stateless. Vectors are ``Vec2`` values.
"""

import math

from toolcomp.domain import Vec2
from toolcomp.exceptions import DegenerateVectorError


def normalize(v: Vec2) -> Vec2:
    """Scale a vector to unit length.

    Args:
        v: Vector to normalize

    Returns:
        Unit vector pointing the same way as ``v``

    Raises:
        DegenerateVectorError: If ``v`` has zero length
    """
    length = v.length()
    if length == 0.0:
        raise DegenerateVectorError("Cannot normalize a zero-length vector")
    return Vec2(v.x / length, v.y / length)


def segment_direction(start: Vec2, end: Vec2) -> Vec2:
    """Unit direction of travel from ``start`` to ``end``.

    Examples:
        >>> segment_direction(Vec2(0.0, 0.0), Vec2(2.0, 0.0))
        Vec2(x=1.0, y=0.0)
    """
    return normalize(end - start)


def side_normal(direction: Vec2, side: float) -> Vec2:
    """Offset-side normal of a direction.

    The direction is rotated 90 degrees clockwise, which points to the right
    of travel, and scaled by the side multiplier (+1 right, -1 left).

    Examples:
        >>> side_normal(Vec2(1.0, 0.0), 1.0)
        Vec2(x=0.0, y=-1.0)
        >>> side_normal(Vec2(1.0, 0.0), -1.0)
        Vec2(x=-0.0, y=1.0)
    """
    return direction.rotate_cw() * side


def half_angle(normal_in: Vec2, normal_out: Vec2) -> tuple[float, float]:
    """Sine and cosine of half the turn between two normals.

    The half angle is measured between the bisector of the two normals and
    either normal. ``sin/cos`` is the distance, per unit of offset width,
    from the foot of a normal to the point where the two offset lines meet.

    Args:
        normal_in: Normal of the incoming segment
        normal_out: Normal of the outgoing segment

    Returns:
        Tuple of (sin_half, cos_half), both non-negative

    Raises:
        DegenerateVectorError: If the normals are opposite (a reversal)
    """
    bisector = normalize(normal_in + normal_out)
    cos_half = bisector.dot(normal_out)
    sin_half = abs(bisector.cross(normal_out))
    return sin_half, cos_half


def line_intersection(
    origin_a: Vec2,
    direction_a: Vec2,
    origin_b: Vec2,
    direction_b: Vec2,
    tolerance: float = 1e-12,
) -> float | None:
    """Intersect two infinite lines.

    Args:
        origin_a: A point on line A
        direction_a: Unit direction of line A
        origin_b: A point on line B
        direction_b: Direction of line B
        tolerance: Cross products at or below this count as parallel

    Returns:
        Parameter ``t`` so that ``origin_a + direction_a * t`` lies on line B,
        or None if the lines are parallel
    """
    denom = direction_a.cross(direction_b)
    if abs(denom) <= tolerance:
        return None
    return (origin_b - origin_a).cross(direction_b) / denom


def projection_parameter(point: Vec2, origin: Vec2, direction: Vec2) -> float:
    """Parameter of the orthogonal projection of ``point`` onto a line."""
    return (point - origin).dot(direction)


def arc_center(start: Vec2, end: Vec2, radius: float, clockwise: bool) -> Vec2:
    """Centre of the shorter arc of ``radius`` from ``start`` to ``end``.

    When the chord is a full diameter the midpoint is returned. Chords longer
    than the diameter (from rounding) are treated as a diameter.

    Args:
        start: Arc start point
        end: Arc end point
        radius: Arc radius
        clockwise: Direction of travel along the arc

    Returns:
        The arc centre
    """
    chord = end - start
    half = chord.length() / 2.0
    mid = start + chord * 0.5
    if half == 0.0:
        return mid
    rise = math.sqrt(max(radius * radius - half * half, 0.0))
    # The centre of a short clockwise arc lies to the right of the chord
    offset = normalize(chord).rotate_cw() * rise
    return mid + offset if clockwise else mid - offset

"""Segment frames: per-segment direction and offset-side normal.

The path, its directions and its normals are kept together in one mutable
object so that every edit to the path is followed by recomputing the frames
that touch the edited vertex. Segment ``k`` runs from ``points[k]`` to
``points[k + 1]``, wrapping to ``points[0]`` when the path is closed.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum, auto

import structlog

from toolcomp.core.advisories import Advisories
from toolcomp.core.geometry import half_angle, segment_direction, side_normal
from toolcomp.domain import Point, Vec2, WarningKind

logger = structlog.get_logger(__name__)

_UNSET = Vec2(0.0, 0.0)


class CornerKind(Enum):
    """Classification of the turn at a vertex."""

    COLINEAR = auto()
    REVERSAL = auto()
    CONCAVE = auto()
    CONVEX = auto()


@dataclass(frozen=True, slots=True)
class Corner:
    """Turn at a vertex between its incoming and outgoing segment.

    Attributes:
        kind: Classification relative to the offset side
        cross: Cross product of incoming and outgoing direction
        dot: Dot product of incoming and outgoing direction
    """

    kind: CornerKind
    cross: float
    dot: float


class SegmentFrames:
    """A path together with the direction and normal of each segment.

    Example:
        frames = SegmentFrames(points, side=1.0, closed=True, advisories=Advisories())
        frames.build()
        corner = frames.classify(1)
    """

    def __init__(
        self,
        points: Iterable[Point],
        side: float,
        closed: bool,
        advisories: Advisories,
        tolerance: float = 1e-9,
    ) -> None:
        """Initialize the frames.

        Args:
            points: Normalized path vertices
            side: Side multiplier, +1.0 right or -1.0 left
            closed: Whether the last point connects back to the first
            advisories: Collector for duplicate point advisories
            tolerance: Absolute tolerance for equality and zero tests
        """
        self.points: list[Point] = list(points)
        self.side = side
        self.closed = closed
        self.tolerance = tolerance
        self.directions: list[Vec2] = []
        self.normals: list[Vec2] = []
        self._advisories = advisories

    def __len__(self) -> int:
        return len(self.points)

    @property
    def segment_count(self) -> int:
        """Number of segments in the current path."""
        n = len(self.points)
        if n < 2:
            return 0
        return n if self.closed else n - 1

    def next_index(self, i: int) -> int:
        """Index of the vertex following ``i``."""
        return (i + 1) % len(self.points)

    def incoming(self, j: int) -> int:
        """Index of the segment ending at vertex ``j``."""
        return (j - 1) % len(self.points) if self.closed else j - 1

    def length(self, k: int) -> float:
        """Length of segment ``k``."""
        return (self.points[self.next_index(k)].xy - self.points[k].xy).length()

    def build(self) -> int:
        """Compute frames for every segment.

        Coincident neighbours are collapsed on the way. A pair equal in all
        three coordinates is merged silently; a pair that only shares XY is
        merged with a duplicate advisory.

        Returns:
            The number of points left in the path
        """
        self.directions = [_UNSET] * self.segment_count
        self.normals = [_UNSET] * self.segment_count
        k = 0
        while k < self.segment_count:
            self.refresh(k)
            k += 1
        logger.debug(
            "Frames built",
            points=len(self.points),
            segments=self.segment_count,
            closed=self.closed,
        )
        return len(self.points)

    def refresh(self, k: int) -> None:
        """Recompute the frame of segment ``k`` after a local edit.

        Collapses the segment first while its end points coincide.
        """
        while self.segment_count:
            m = self.segment_count
            if self.closed:
                k %= m
            elif k < 0 or k >= m:
                return
            end = self.next_index(k)
            a, b = self.points[k], self.points[end]
            if not a.xy_equal(b, self.tolerance):
                direction = segment_direction(a.xy, b.xy)
                self.directions[k] = direction
                self.normals[k] = side_normal(direction, self.side)
                return
            if not a.z_equal(b, self.tolerance):
                self._advisories.warn(
                    WarningKind.DUPLICATE_XY_DIFFERENT_Z,
                    f"Points {k} and {end} share X/Y ({a.x:g}, {a.y:g}) "
                    f"but differ in Z; the later one was dropped",
                )
            if end == 0:
                # Keep the path start, drop the closing duplicate
                self.delete(k)
                k -= 1
            else:
                self.delete(end)

    def refresh_around(self, j: int) -> None:
        """Recompute both segments touching vertex ``j``."""
        if not self.points:
            return
        j = j % len(self.points) if self.closed else min(j, len(self.points) - 1)
        for k in (j - 1, j):
            if self.segment_count == 0:
                return
            if not self.closed and not 0 <= k < self.segment_count:
                continue
            self.refresh(k)

    def delete(self, j: int) -> None:
        """Remove vertex ``j`` and the frame of the segment that goes with it.

        The frame of the segment now spanning the gap is not recomputed;
        call ``refresh_around`` afterwards.
        """
        n = len(self.points)
        self.points.pop(j)
        seg = j if self.closed or j < n - 1 else j - 1
        if 0 <= seg < len(self.directions):
            self.directions.pop(seg)
            self.normals.pop(seg)
        del self.directions[self.segment_count :]
        del self.normals[self.segment_count :]

    def move(self, j: int, point: Point) -> None:
        """Replace vertex ``j``.

        Like ``delete``, frames are left stale until ``refresh_around``.
        """
        self.points[j] = point

    def has_corner(self, j: int) -> bool:
        """True if vertex ``j`` has both an incoming and an outgoing segment."""
        if self.segment_count < 2:
            return False
        if self.closed:
            return True
        return 0 < j < len(self.points) - 1

    def classify(self, j: int) -> Corner:
        """Classify the turn at vertex ``j``.

        Args:
            j: Vertex index with both an incoming and an outgoing segment

        Returns:
            Corner describing the turn
        """
        d_in = self.directions[self.incoming(j)]
        d_out = self.directions[j % len(self.points)]
        cross = d_in.cross(d_out)
        dot = d_in.dot(d_out)
        if abs(cross) <= self.tolerance:
            kind = CornerKind.COLINEAR if dot >= 0.0 else CornerKind.REVERSAL
        elif cross * self.side < 0.0:
            kind = CornerKind.CONCAVE
        else:
            kind = CornerKind.CONVEX
        return Corner(kind, cross, dot)

    def bisector_run(self, j: int, width: float) -> float:
        """Distance along either segment from vertex ``j`` to its bisector point.

        Zero unless ``j`` is a concave corner.
        """
        if not self.has_corner(j):
            return 0.0
        if self.classify(j).kind is not CornerKind.CONCAVE:
            return 0.0
        sin_half, cos_half = half_angle(
            self.normals[self.incoming(j)], self.normals[j % len(self.points)]
        )
        return width * sin_half / cos_half

"""Emission of the offset toolpath for a reduced path.

Walks the vertices once and turns each transition into commands:

- colinear vertex: nothing (the vertex is dropped) unless it ends the path
- reversal: move to the incoming offset, then a half circle around the tip
- concave corner: one move to where the two offset lines meet
- convex corner: move to the incoming offset, then an arc around the vertex

Arcs around a vertex run counter-clockwise when the tool is on the right of
travel and clockwise when it is on the left. Entry and exit arcs curve the
other way since they bend toward and away from the path.
"""

import structlog

from toolcomp.core.advisories import Advisories
from toolcomp.core.frames import CornerKind, SegmentFrames
from toolcomp.core.geometry import half_angle
from toolcomp.domain import (
    ArcCCW,
    ArcCCWRelative,
    ArcCW,
    ArcCWRelative,
    Command,
    Move,
    MoveRelative,
    Point,
    RapidMove,
    TraceFlags,
    Vec2,
    WarningKind,
)

logger = structlog.get_logger(__name__)


class OffsetTracer:
    """Produces the command stream for one reduced path.

    Example:
        tracer = OffsetTracer(frames, width=3.0, flags=TraceFlags.CLOSED | TraceFlags.RIGHT)
        commands = tracer.trace(start_z=5.0, advisories=advisories)
    """

    def __init__(self, frames: SegmentFrames, width: float, flags: TraceFlags) -> None:
        """Initialize the tracer.

        Args:
            frames: Reduced segment frames, edited in place while tracing
            width: Offset distance in millimetres
            flags: Validated flag set
        """
        self._frames = frames
        self._width = width
        self._flags = flags
        self._commands: list[Command] = []

    @property
    def _right(self) -> bool:
        return self._frames.side > 0.0

    def trace(self, start_z: float | None, advisories: Advisories) -> list[Command]:
        """Emit entry, offset geometry, exit and Z restore.

        Args:
            start_z: Tool Z before the run, used by the OLDZ policy
            advisories: Collector for the entry/exit collision advisory

        Returns:
            Commands in toolpath order
        """
        self._commands = []
        frames = self._frames
        if frames.closed:
            self._check_wraparound(advisories)

        self._entry()
        i = 1
        while True:
            n = len(frames)
            last = n if frames.closed else n - 1
            if i > last:
                break
            if self._vertex(i, final=i == last):
                i += 1

        self._exit()
        if TraceFlags.OLDZ in self._flags and start_z is not None:
            self._commands.append(RapidMove(z=start_z))

        logger.debug(
            "Path traced",
            vertices=len(frames),
            commands=len(self._commands),
            closed=frames.closed,
        )
        return self._commands

    def _check_wraparound(self, advisories: Advisories) -> None:
        """Warn when the closing corner is concave and shallow.

        The entry point then sits inside the corner formed by the last and
        first segment, so the start of the cut overlaps its end.
        """
        corner = self._frames.classify(0)
        if corner.kind is CornerKind.CONCAVE and corner.dot > 0.0:
            advisories.warn(
                WarningKind.ENTRY_EXIT_COLLISION,
                "Closed path starts in an inside corner; entry and exit moves may collide",
            )

    def _offset(self, point: Point, normal: Vec2) -> Point:
        return point.with_xy(point.xy + normal * self._width)

    def _entry(self) -> None:
        frames = self._frames
        start = frames.points[0]
        normal, direction = frames.normals[0], frames.directions[0]
        target = self._offset(start, normal)
        keep_z = TraceFlags.KEEPZ in self._flags

        if TraceFlags.ARCIN in self._flags:
            approach = start.xy + (normal * 2.0 - direction) * self._width
            self._commands.append(RapidMove(approach.x, approach.y))
            if not keep_z and start.z is not None:
                self._commands.append(Move(z=start.z))
            arc = ArcCW if self._right else ArcCCW
            self._commands.append(arc(target.x, target.y, target.z, self._width))
        else:
            self._commands.append(RapidMove(target.x, target.y))
            if not keep_z and start.z is not None:
                self._commands.append(Move(z=start.z))

    def _vertex(self, i: int, final: bool) -> bool:
        """Emit the transition at vertex ``i``.

        Returns:
            False if the vertex was dropped and the same index must be
            visited again, True otherwise
        """
        frames = self._frames
        n = len(frames)
        j = i % n
        point = frames.points[j]
        k_in = frames.incoming(j)

        if not frames.closed and final:
            self._move_to(self._offset(point, frames.normals[k_in]))
            return True

        corner = frames.classify(j)
        normal_in, normal_out = frames.normals[k_in], frames.normals[j]

        if corner.kind is CornerKind.COLINEAR:
            if not final and self._z_unchanged(j):
                frames.delete(j)
                frames.refresh_around(j)
                return False
            self._move_to(self._offset(point, normal_in))
        elif corner.kind is CornerKind.REVERSAL:
            self._move_to(self._offset(point, normal_in))
            turn = normal_out * (2.0 * self._width)
            arc = ArcCCWRelative if self._right else ArcCWRelative
            self._commands.append(arc(turn.x, turn.y, self._width))
        elif corner.kind is CornerKind.CONCAVE:
            sin_half, cos_half = half_angle(normal_in, normal_out)
            meet = point.xy + (normal_out + frames.directions[j] * (sin_half / cos_half)) * self._width
            self._move_to(point.with_xy(meet))
        else:
            self._move_to(self._offset(point, normal_in))
            target = self._offset(point, normal_out)
            arc = ArcCCW if self._right else ArcCW
            self._commands.append(arc(target.x, target.y, target.z, self._width))
        return True

    def _z_unchanged(self, j: int) -> bool:
        """True if vertex ``j`` has the same Z as both neighbours."""
        frames = self._frames
        point = frames.points[j]
        before = frames.points[frames.incoming(j)]
        after = frames.points[frames.next_index(j)]
        tol = frames.tolerance
        return point.z_equal(before, tol) and point.z_equal(after, tol)

    def _move_to(self, point: Point) -> None:
        self._commands.append(Move(point.x, point.y, point.z))

    def _exit(self) -> None:
        """Leave the path from the end of the last offset segment.

        The straight exit moves a further ``width`` along the normal, away
        from the original path, so the tool never cuts back into the part.
        The arc exit turns away along a quarter circle of radius ``width``.
        Closed paths leave from segment 0, where the cut began.
        """
        frames = self._frames
        k = 0 if frames.closed else frames.segment_count - 1
        normal, direction = frames.normals[k], frames.directions[k]
        if TraceFlags.ARCOUT in self._flags:
            away = (normal + direction) * self._width
            arc = ArcCWRelative if self._right else ArcCCWRelative
            self._commands.append(arc(away.x, away.y, self._width))
        else:
            away = normal * self._width
            self._commands.append(MoveRelative(away.x, away.y))

"""Removal of corners the tool cannot reach.

A single left-to-right pass over the path that rewrites it until every
remaining concave corner has room for the tool's bisector move, and every
reversal that points away from the tool side is gone.

Whether vertex ``v`` fits depends on segments ``v - 2`` to ``v + 1``: its
own two segments and the corners at both neighbours. An edit changes at
most the two segments around the edited vertex, so after an edit at ``i``
the cursor steps back to ``i - 3`` and removals cascade upstream as well
as downstream. A closed path is done once every vertex has been checked
since the last edit.
"""

from dataclasses import dataclass
from enum import Enum, auto

import structlog

from toolcomp.core.advisories import Advisories
from toolcomp.core.frames import CornerKind, SegmentFrames
from toolcomp.core.geometry import line_intersection, projection_parameter
from toolcomp.domain import WarningKind

logger = structlog.get_logger(__name__)

# Earliest vertex, relative to an edit, whose room can change
_LOOKBACK = 3


class Edit(Enum):
    """What the reducer did at a vertex."""

    NONE = auto()
    REVERSAL_REMOVED = auto()
    CORNER_DELETED = auto()
    EXIT_FOLDED = auto()
    ENTRY_FOLDED = auto()


@dataclass
class ReductionResult:
    """Summary of a reduction pass.

    Attributes:
        corners_removed: Unreachable concave corners corrected
        reversals_removed: Wrong-side reversals deleted
    """

    corners_removed: int = 0
    reversals_removed: int = 0

    @property
    def changed(self) -> bool:
        """True if the pass edited the path."""
        return bool(self.corners_removed or self.reversals_removed)


def reduce_concave_corners(
    frames: SegmentFrames, width: float, advisories: Advisories
) -> ReductionResult:
    """Rewrite ``frames`` in place so that every corner is machinable.

    Args:
        frames: Built segment frames of the path
        width: Offset distance in millimetres
        advisories: Collector for the removal advisory

    Returns:
        Counts of the edits made
    """
    result = ReductionResult()
    start = 0 if frames.closed else 1
    i = start
    checked = 0
    while frames.segment_count >= 2:
        n = len(frames)
        if frames.closed:
            if checked >= n:
                break
        elif i >= n - 1:
            break
        edit = reduce_vertex(frames, i % n, width)
        if edit is Edit.NONE:
            i += 1
            checked += 1
            continue
        if edit is Edit.REVERSAL_REMOVED:
            result.reversals_removed += 1
        else:
            result.corners_removed += 1
        logger.debug("Vertex reduced", vertex=i % n, edit=edit.name, points=len(frames))
        checked = 0
        i = max(i - _LOOKBACK, start)

    if result.corners_removed:
        advisories.warn(
            WarningKind.UNREACHABLE_CORNER_REMOVED,
            f"Removed {result.corners_removed} unreachable inside corner(s); "
            f"the tool does not fit at width {width:g}",
        )
    return result


def reduce_vertex(frames: SegmentFrames, j: int, width: float) -> Edit:
    """Check vertex ``j`` and edit the path if it cannot be machined."""
    corner = frames.classify(j)
    if corner.kind is CornerKind.REVERSAL:
        if not _wrong_side_reversal(frames, j):
            return Edit.NONE
        frames.delete(j)
        frames.refresh_around(j)
        return Edit.REVERSAL_REMOVED

    if corner.kind is not CornerKind.CONCAVE:
        return Edit.NONE

    tol = frames.tolerance
    k_in = frames.incoming(j)
    k_out = j % len(frames)
    run = frames.bisector_run(j, width)
    room_in = frames.length(k_in) - frames.bisector_run(k_in, width)
    room_out = frames.length(k_out) - frames.bisector_run(frames.next_index(j), width)
    if run <= room_in + tol and run <= room_out + tol:
        return Edit.NONE

    if abs(room_in - room_out) <= tol:
        frames.delete(j)
        frames.refresh_around(j)
        return Edit.CORNER_DELETED
    if room_in > room_out:
        _fold_exit(frames, j)
        return Edit.EXIT_FOLDED
    _fold_entry(frames, j)
    return Edit.ENTRY_FOLDED


def _wrong_side_reversal(frames: SegmentFrames, j: int) -> bool:
    """True if the turn leading into the reversal at ``j`` bends away from the tool."""
    before = frames.incoming(j)
    if not frames.has_corner(before):
        return False
    return frames.classify(before).cross * frames.side > frames.tolerance


def _fold_exit(frames: SegmentFrames, j: int) -> None:
    """Drop a too-short outgoing segment.

    The exit point slides back onto the incoming segment to where the line
    of the segment after it crosses, which is where the tool following the
    incoming offset would be stopped. Then the corner vertex goes.
    """
    nxt = frames.next_index(j)
    k_in = frames.incoming(j)
    origin = frames.points[k_in].xy
    direction = frames.directions[k_in]
    exit_point = frames.points[nxt]

    t = None
    if frames.closed or nxt < len(frames) - 1:
        t = line_intersection(
            origin, direction, exit_point.xy, frames.directions[nxt], frames.tolerance
        )
    if t is None:
        t = projection_parameter(exit_point.xy, origin, direction)
    t = min(max(t, 0.0), frames.length(k_in))

    frames.move(nxt, exit_point.with_xy(origin + direction * t))
    frames.delete(j)
    frames.refresh_around(j)


def _fold_entry(frames: SegmentFrames, j: int) -> None:
    """Drop a too-short incoming segment.

    Mirror of ``_fold_exit``: the entry point slides forward onto the
    outgoing segment and the corner vertex goes.
    """
    prv = frames.incoming(j)
    k_out = j % len(frames)
    origin = frames.points[k_out].xy
    direction = frames.directions[k_out]
    entry_point = frames.points[prv]

    t = None
    if frames.closed or prv > 0:
        t = line_intersection(
            origin,
            direction,
            entry_point.xy,
            frames.directions[frames.incoming(prv)],
            frames.tolerance,
        )
    if t is None:
        t = projection_parameter(entry_point.xy, origin, direction)
    t = min(max(t, 0.0), frames.length(k_out))

    frames.move(prv, entry_point.with_xy(origin + direction * t))
    frames.delete(j)
    frames.refresh_around(prv if prv < j else prv - 1)

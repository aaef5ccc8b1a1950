"""Orchestration of the tool compensation pipeline.

This module chains the pipeline stages and separates the pure computation
from delivery:

- Compensator.compute: arguments in, ordered command list out, no I/O
- Compensator.run: compute, then forward the commands to a sink
- tracepath_comp: one-call convenience wrapper around ``run``
"""

import time
from dataclasses import dataclass, field
from typing import Any

import structlog

from toolcomp.config import ToolcompSettings, get_default_settings
from toolcomp.core.advisories import Advisories
from toolcomp.core.frames import SegmentFrames
from toolcomp.core.normalizer import normalize_path
from toolcomp.core.reducer import ReductionResult, reduce_concave_corners
from toolcomp.core.tracer import OffsetTracer
from toolcomp.domain import (
    ARC_TYPES,
    MOVE_TYPES,
    Command,
    Comment,
    Point,
    ToolPosition,
    Warning,
    WarningKind,
)
from toolcomp.exceptions import InvalidArgumentError
from toolcomp.io.sink import EmissionSink, forward

logger = structlog.get_logger(__name__)


@dataclass
class CompensationResult:
    """Outcome of one compensation run.

    Attributes:
        commands: Emission commands in toolpath order
        points: Path vertices left after reduction
        reduction: Edits made by the concave-corner pass
        advisories: Kinds of all advisories raised, including suppressed ones
        duration_ms: Wall time of the computation
    """

    commands: list[Command]
    points: list[Point] = field(default_factory=list)
    reduction: ReductionResult = field(default_factory=ReductionResult)
    advisories: list[WarningKind] = field(default_factory=list)
    duration_ms: float = 0.0

    @property
    def move_count(self) -> int:
        """Number of straight moves."""
        return sum(isinstance(c, MOVE_TYPES) for c in self.commands)

    @property
    def arc_count(self) -> int:
        """Number of arcs."""
        return sum(isinstance(c, ARC_TYPES) for c in self.commands)

    @property
    def warnings(self) -> list[Warning]:
        """Emitted advisories."""
        return [c for c in self.commands if isinstance(c, Warning)]


class Compensator:
    """Computes tool-compensated offset paths.

    Example:
        compensator = Compensator(ToolcompSettings())
        result = compensator.compute(
            [(0, 0), (10, 0), (10, 10), (0, 10)],
            width=2.0,
            flags=TraceFlags.CLOSED | TraceFlags.RIGHT,
        )
    """

    def __init__(self, settings: ToolcompSettings | None = None) -> None:
        """Initialize the compensator.

        Args:
            settings: Application settings, defaults if None
        """
        self._settings = settings or get_default_settings()

    def compute(
        self,
        path: Any,
        width: Any,
        flags: Any = 0,
        position: ToolPosition | None = None,
    ) -> CompensationResult:
        """Compute the command stream for one path.

        Args:
            path: Sequence of point-likes
            width: Offset distance (number or distance Quantity)
            flags: Integer flag set (see TraceFlags)
            position: Tool position when the run starts

        Returns:
            CompensationResult with the ordered commands

        Raises:
            InvalidArgumentError: If any argument is invalid
        """
        start_time = time.time()
        position = position or ToolPosition()
        tolerance = self._settings.geometry.tolerance

        normalized, advisories = normalize_path(
            path,
            width,
            flags,
            position,
            default_unit=self._settings.default_unit,
            tolerance=tolerance,
        )
        frames = SegmentFrames(
            normalized.points,
            side=normalized.side.multiplier,
            closed=normalized.closed,
            advisories=advisories,
            tolerance=tolerance,
        )
        frames.build()

        reduction = ReductionResult()
        if len(frames) >= 2:
            reduction = reduce_concave_corners(frames, normalized.width, advisories)

        geometry: list[Command] = []
        if len(frames) < 2:
            advisories.warn(
                WarningKind.PATH_COLLAPSED,
                "Nothing left to trace after removing coincident points and unreachable corners",
            )
        else:
            tracer = OffsetTracer(frames, normalized.width, normalized.flags)
            geometry = tracer.trace(position.z, advisories)

        commands: list[Command] = []
        comments = self._settings.output.emit_comments and bool(geometry)
        if comments:
            commands.append(
                Comment(
                    f"tool compensation: width {normalized.width:g}mm, "
                    f"{normalized.side.name.lower()} side, "
                    f"{'closed' if normalized.closed else 'open'} path"
                )
            )
        commands.extend(advisories.warnings)
        commands.extend(geometry)
        if comments:
            commands.append(Comment("end of tool compensation"))

        result = CompensationResult(
            commands=commands,
            points=list(frames.points),
            reduction=reduction,
            advisories=advisories.raised,
            duration_ms=(time.time() - start_time) * 1000,
        )
        logger.info(
            "Path compensated",
            points=len(result.points),
            moves=result.move_count,
            arcs=result.arc_count,
            corners_removed=reduction.corners_removed,
            reversals_removed=reduction.reversals_removed,
            advisories=len(result.advisories),
            duration_ms=round(result.duration_ms, 2),
        )
        return result

    def run(
        self,
        path: Any,
        width: Any,
        flags: Any,
        sink: EmissionSink,
        position: ToolPosition | None = None,
    ) -> CompensationResult:
        """Compute the toolpath and forward it to ``sink``.

        An invalid argument is reported once on the sink's error channel and
        re-raised; nothing else is sent in that case.

        Raises:
            InvalidArgumentError: If any argument is invalid
        """
        try:
            result = self.compute(path, width, flags, position)
        except InvalidArgumentError as e:
            logger.error("Invalid argument", kind=e.kind.value, error=e.message)
            sink.error(str(e))
            raise
        forward(result.commands, sink)
        return result


def tracepath_comp(
    path: Any,
    width: Any,
    flags: Any,
    sink: EmissionSink,
    position: ToolPosition | None = None,
    settings: ToolcompSettings | None = None,
) -> CompensationResult:
    """Trace ``path`` at ``width`` with tool compensation and emit to ``sink``.

    Args:
        path: Sequence of at least two point-likes; Z optional per point
        width: Positive offset distance
        flags: TraceFlags bit-set
        sink: Receiver of the command stream
        position: Tool position before the call (used for Z fill and restore)
        settings: Application settings, defaults if None

    Returns:
        CompensationResult of the run
    """
    return Compensator(settings).run(path, width, flags, sink, position)

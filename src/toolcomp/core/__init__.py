"""Core processing algorithms for toolcomp.

This module contains the offset pipeline:

- Geometry helpers (directions, normals, half angles, intersections)
- Path normalization (validation, coordinate fill, auto-closure)
- Segment frames (per-segment direction and normal, point collapsing)
- Concave-corner reduction (unreachable inside corners, wrong-side reversals)
- Offset tracing (entry, corner moves and arcs, exit, Z restore)

All stages are synchronous and free of I/O. The compensator chains them and
returns an ordered command list; forwarding to a sink is a separate step.

Key functions:
- normalize_path: Validate arguments and resolve coordinates
- reduce_concave_corners: Make every inside corner machinable
- tracepath_comp: Compute and emit a compensated toolpath

Key classes:
- SegmentFrames: Mutable path with its directions and normals
- OffsetTracer: Emits commands for a reduced path
- Compensator: Runs the whole pipeline
"""

from toolcomp.core.advisories import Advisories
from toolcomp.core.compensator import CompensationResult, Compensator, tracepath_comp
from toolcomp.core.frames import Corner, CornerKind, SegmentFrames
from toolcomp.core.geometry import (
    arc_center,
    half_angle,
    line_intersection,
    normalize,
    projection_parameter,
    segment_direction,
    side_normal,
)
from toolcomp.core.normalizer import (
    NormalizedPath,
    normalize_path,
    validate_flags,
    validate_width,
)
from toolcomp.core.reducer import ReductionResult, reduce_concave_corners
from toolcomp.core.tracer import OffsetTracer

__all__ = [
    # Pipeline classes
    "Advisories",
    "CompensationResult",
    "Compensator",
    "Corner",
    "CornerKind",
    "NormalizedPath",
    "OffsetTracer",
    "ReductionResult",
    "SegmentFrames",
    # Geometry functions
    "arc_center",
    "half_angle",
    "line_intersection",
    "normalize",
    "normalize_path",
    "projection_parameter",
    "reduce_concave_corners",
    "segment_direction",
    "side_normal",
    "tracepath_comp",
    "validate_flags",
    "validate_width",
]

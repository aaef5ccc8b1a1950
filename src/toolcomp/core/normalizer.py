"""Input validation and normalization of a path before offsetting.

Turns the loosely typed call arguments (a sequence of point-likes, a width
that may carry a unit, an integer flag set) into a ``NormalizedPath`` with
concrete millimetre coordinates, a side multiplier and a topology. All
validation happens here so that a bad call fails before anything is emitted.
"""

import math
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

import structlog

from toolcomp.core.advisories import Advisories
from toolcomp.domain import (
    KNOWN_FLAGS,
    Point,
    Quantity,
    Side,
    ToolPosition,
    TraceFlags,
    Unit,
    WarningKind,
    to_mm,
)
from toolcomp.exceptions import ArgumentErrorKind, InvalidArgumentError

logger = structlog.get_logger(__name__)


@dataclass
class NormalizedPath:
    """A validated path ready for frame building.

    Attributes:
        points: Vertices with resolved X/Y and filled Z
        width: Offset distance in millimetres
        flags: Validated flag set (unknown bits removed)
        side: Offset side
        closed: Whether the path is treated as closed
    """

    points: list[Point]
    width: float
    flags: TraceFlags
    side: Side
    closed: bool

    @property
    def quiet(self) -> bool:
        """True if advisories are suppressed."""
        return bool(self.flags & TraceFlags.QUIET)


def validate_flags(flags: Any) -> TraceFlags:
    """Check the flag argument and convert it to ``TraceFlags``.

    Args:
        flags: An integer bit-set, a ``TraceFlags`` value or None for no flags

    Returns:
        The flag set with unknown bits removed

    Raises:
        InvalidArgumentError: If flags is not a plain integer or selects both sides
    """
    if flags is None:
        return TraceFlags.NONE
    if isinstance(flags, bool):
        raise InvalidArgumentError(
            ArgumentErrorKind.NON_SCALAR_FLAGS,
            f"flags must be an integer bit-set, got {flags!r}",
        )
    if isinstance(flags, Quantity):
        if flags.unit is not Unit.NONE:
            raise InvalidArgumentError(
                ArgumentErrorKind.NON_SCALAR_FLAGS,
                f"flags must be unitless, got a value in {flags.unit.value}",
            )
        flags = flags.value
    if isinstance(flags, float):
        raise InvalidArgumentError(
            ArgumentErrorKind.NON_INTEGER_FLAGS,
            f"flags must be an integer, got {flags!r}",
        )
    if not isinstance(flags, int):
        raise InvalidArgumentError(
            ArgumentErrorKind.NON_SCALAR_FLAGS,
            f"flags must be a scalar integer, got {type(flags).__name__}",
        )

    value = int(flags)
    unknown = value & ~int(KNOWN_FLAGS)
    if unknown:
        logger.debug("Ignoring unknown flag bits", bits=hex(unknown))
    result = TraceFlags(value & int(KNOWN_FLAGS))

    if TraceFlags.LEFT in result and TraceFlags.RIGHT in result:
        raise InvalidArgumentError(
            ArgumentErrorKind.CONFLICTING_SIDE_FLAGS,
            "flags select both the left and the right side",
        )
    return result


def validate_width(width: Any, default_unit: Unit = Unit.MM) -> float:
    """Check the width argument and convert it to millimetres.

    Args:
        width: A number (read in ``default_unit``) or a distance ``Quantity``
        default_unit: Unit assumed for plain numbers

    Returns:
        Width in millimetres

    Raises:
        InvalidArgumentError: If width is not a positive distance
    """
    if isinstance(width, Quantity):
        if not width.is_distance:
            raise InvalidArgumentError(
                ArgumentErrorKind.NON_DISTANCE_WIDTH,
                f"width must be a distance, got a value in {width.unit.value}",
            )
        value = width.to_mm(default_unit)
    elif isinstance(width, (int, float)) and not isinstance(width, bool):
        value = to_mm(float(width), default_unit)
    else:
        raise InvalidArgumentError(
            ArgumentErrorKind.NON_SCALAR_WIDTH,
            f"width must be a scalar distance, got {type(width).__name__}",
        )

    if math.isinf(value):
        raise InvalidArgumentError(ArgumentErrorKind.NON_SCALAR_WIDTH, "width must be finite")
    if not value > 0.0:
        raise InvalidArgumentError(
            ArgumentErrorKind.NON_POSITIVE_WIDTH,
            f"width must be larger than zero, got {value!r}",
        )
    return value


def check_path_shape(path: Any) -> None:
    """Reject anything that is not a sequence of at least two elements."""
    if isinstance(path, (str, bytes, Mapping)) or not isinstance(path, Sequence):
        raise InvalidArgumentError(
            ArgumentErrorKind.NOT_A_PATH,
            f"path must be a sequence of points, got {type(path).__name__}",
        )
    if len(path) < 2:
        raise InvalidArgumentError(
            ArgumentErrorKind.TOO_FEW_POINTS,
            f"path must have at least two points, got {len(path)}",
        )


def _coordinate(value: Any, index: int, default_unit: Unit) -> float | None:
    """Convert one coordinate of an input point to millimetres."""
    if value is None:
        return None
    if isinstance(value, Quantity):
        if not value.is_distance:
            raise InvalidArgumentError(
                ArgumentErrorKind.NOT_A_PATH,
                f"point {index} has a coordinate in {value.unit.value}",
            )
        return value.to_mm(default_unit)
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        if not math.isfinite(value):
            raise InvalidArgumentError(
                ArgumentErrorKind.NOT_A_PATH,
                f"point {index} has a non-finite coordinate",
            )
        return to_mm(float(value), default_unit)
    raise InvalidArgumentError(
        ArgumentErrorKind.NOT_A_PATH,
        f"point {index} has a non-numeric coordinate {value!r}",
    )


def _split_point(
    item: Any, index: int, default_unit: Unit
) -> tuple[float | None, float | None, float | None]:
    """Split a point-like into optional millimetre coordinates."""
    if isinstance(item, Point):
        return item.x, item.y, item.z
    if isinstance(item, Mapping):
        raw = (item.get("x"), item.get("y"), item.get("z"))
    elif isinstance(item, Sequence) and not isinstance(item, (str, bytes)):
        if not 1 <= len(item) <= 3:
            raise InvalidArgumentError(
                ArgumentErrorKind.NOT_A_PATH,
                f"point {index} must have 1 to 3 coordinates, got {len(item)}",
            )
        raw = tuple(item) + (None,) * (3 - len(item))
    else:
        raise InvalidArgumentError(
            ArgumentErrorKind.NOT_A_PATH,
            f"element {index} is not a point: {item!r}",
        )
    x, y, z = (_coordinate(v, index, default_unit) for v in raw)
    return x, y, z


def resolve_points(
    path: Any,
    flags: TraceFlags,
    position: ToolPosition,
    default_unit: Unit = Unit.MM,
) -> list[Point]:
    """Validate the path argument and fill in unspecified coordinates.

    X and Y that are left out repeat the previous point's value, starting
    from the tool position. Z follows the same rule unless KEEPZ is set, in
    which case every point takes the current tool Z.

    Raises:
        InvalidArgumentError: If path is not a sequence of at least two points,
            or an X/Y coordinate cannot be resolved
    """
    check_path_shape(path)

    keep_z = TraceFlags.KEEPZ in flags
    last_x, last_y, last_z = position.x, position.y, position.z
    points: list[Point] = []
    for index, item in enumerate(path):
        x, y, z = _split_point(item, index, default_unit)
        x = last_x if x is None else x
        y = last_y if y is None else y
        if x is None or y is None:
            raise InvalidArgumentError(
                ArgumentErrorKind.UNRESOLVED_COORDINATE,
                f"point {index} leaves X or Y unspecified and no earlier value is known",
            )
        if keep_z:
            z = position.z
        elif z is None:
            z = last_z
        points.append(Point(x, y, z))
        last_x, last_y, last_z = x, y, z
    return points


def normalize_path(
    path: Any,
    width: Any,
    flags: Any,
    position: ToolPosition,
    advisories: Advisories | None = None,
    default_unit: Unit = Unit.MM,
    tolerance: float = 1e-9,
) -> tuple[NormalizedPath, Advisories]:
    """Validate all arguments and build a ``NormalizedPath``.

    Args:
        path: Sequence of point-likes (``Point``, tuples/lists, or mappings)
        width: Offset distance
        flags: Integer flag set
        position: Tool position when the run started
        advisories: Collector for advisories, created from the QUIET flag if None
        default_unit: Unit assumed for unitless numbers
        tolerance: Tolerance for the manual-closure test

    Returns:
        Tuple of (normalized path, advisories collector)

    Raises:
        InvalidArgumentError: On any invalid argument
    """
    check_path_shape(path)
    width_mm = validate_width(width, default_unit)
    trace_flags = validate_flags(flags)
    points = resolve_points(path, trace_flags, position, default_unit)

    if advisories is None:
        advisories = Advisories(quiet=TraceFlags.QUIET in trace_flags)

    if TraceFlags.LEFT in trace_flags:
        side = Side.LEFT
    elif TraceFlags.RIGHT in trace_flags:
        side = Side.RIGHT
    else:
        side = Side.RIGHT
        advisories.warn(
            WarningKind.DEFAULT_SIDE_ASSUMED,
            "Neither left nor right side selected, assuming right",
        )

    closed = TraceFlags.CLOSED in trace_flags
    first, last = points[0], points[-1]
    if len(points) > 2 and last.xy_equal(first, tolerance) and not last.z_equal(first, tolerance):
        points.pop()
        closed = True
        trace_flags |= TraceFlags.CLOSED
        advisories.warn(
            WarningKind.AUTO_CLOSED_PATH_Z_MISMATCH,
            "Last point repeats the first in X/Y but not in Z; "
            "dropped it and treated the path as closed",
        )

    logger.debug(
        "Path normalized",
        points=len(points),
        width=width_mm,
        side=side.name,
        closed=closed,
        flags=int(trace_flags),
    )
    return (
        NormalizedPath(points=points, width=width_mm, flags=trace_flags, side=side, closed=closed),
        advisories,
    )

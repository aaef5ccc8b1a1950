"""Emission commands produced by the offset pipeline.

The pipeline is a pure function returning an ordered list of these
commands. Each command knows which sink operation it maps to, so forwarding
a list to a sink is a plain loop. Order is the whole contract: a consumer
rebuilds a connected toolpath purely from the sequence.

All coordinates are millimetres. ``None`` means "axis not specified".
"""

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from toolcomp.io.sink import EmissionSink


class WarningKind(str, Enum):
    """Non-fatal advisories raised while computing a toolpath."""

    DEFAULT_SIDE_ASSUMED = "default-side-assumed"
    DUPLICATE_XY_DIFFERENT_Z = "duplicate-xy-different-z"
    AUTO_CLOSED_PATH_Z_MISMATCH = "auto-closed-path-z-mismatch"
    UNREACHABLE_CORNER_REMOVED = "unreachable-corner-removed"
    ENTRY_EXIT_COLLISION = "entry-exit-collision"
    PATH_COLLAPSED = "path-collapsed"


@dataclass(frozen=True, slots=True)
class RapidMove:
    """Non-cutting positioning move."""

    x: float | None = None
    y: float | None = None
    z: float | None = None

    def send(self, sink: "EmissionSink") -> None:
        sink.rapid_move(self.x, self.y, self.z)

    def to_dict(self) -> dict[str, Any]:
        return {"op": "rapid", "x": self.x, "y": self.y, "z": self.z}


@dataclass(frozen=True, slots=True)
class Move:
    """Cutting move to an absolute point."""

    x: float | None = None
    y: float | None = None
    z: float | None = None

    def send(self, sink: "EmissionSink") -> None:
        sink.move(self.x, self.y, self.z)

    def to_dict(self) -> dict[str, Any]:
        return {"op": "move", "x": self.x, "y": self.y, "z": self.z}


@dataclass(frozen=True, slots=True)
class MoveRelative:
    """Cutting move by a relative XY vector."""

    dx: float
    dy: float

    def send(self, sink: "EmissionSink") -> None:
        sink.move_relative(self.dx, self.dy)

    def to_dict(self) -> dict[str, Any]:
        return {"op": "move_relative", "dx": self.dx, "dy": self.dy}


@dataclass(frozen=True, slots=True)
class ArcCW:
    """Clockwise arc to an absolute target."""

    x: float
    y: float
    z: float | None
    radius: float

    clockwise = True

    def send(self, sink: "EmissionSink") -> None:
        sink.arc_cw(self.x, self.y, self.z, self.radius)

    def to_dict(self) -> dict[str, Any]:
        return {"op": "arc_cw", "x": self.x, "y": self.y, "z": self.z, "radius": self.radius}


@dataclass(frozen=True, slots=True)
class ArcCCW:
    """Counter-clockwise arc to an absolute target."""

    x: float
    y: float
    z: float | None
    radius: float

    clockwise = False

    def send(self, sink: "EmissionSink") -> None:
        sink.arc_ccw(self.x, self.y, self.z, self.radius)

    def to_dict(self) -> dict[str, Any]:
        return {"op": "arc_ccw", "x": self.x, "y": self.y, "z": self.z, "radius": self.radius}


@dataclass(frozen=True, slots=True)
class ArcCWRelative:
    """Clockwise arc to a target given relative to the current position."""

    dx: float
    dy: float
    radius: float

    clockwise = True

    def send(self, sink: "EmissionSink") -> None:
        sink.arc_cw_relative(self.dx, self.dy, self.radius)

    def to_dict(self) -> dict[str, Any]:
        return {"op": "arc_cw_relative", "dx": self.dx, "dy": self.dy, "radius": self.radius}


@dataclass(frozen=True, slots=True)
class ArcCCWRelative:
    """Counter-clockwise arc to a target given relative to the current position."""

    dx: float
    dy: float
    radius: float

    clockwise = False

    def send(self, sink: "EmissionSink") -> None:
        sink.arc_ccw_relative(self.dx, self.dy, self.radius)

    def to_dict(self) -> dict[str, Any]:
        return {"op": "arc_ccw_relative", "dx": self.dx, "dy": self.dy, "radius": self.radius}


@dataclass(frozen=True, slots=True)
class Comment:
    """Informational marker with no machine effect."""

    text: str

    def send(self, sink: "EmissionSink") -> None:
        sink.comment(self.text)

    def to_dict(self) -> dict[str, Any]:
        return {"op": "comment", "text": self.text}


@dataclass(frozen=True, slots=True)
class Warning:  # noqa: A001
    """Non-fatal advisory."""

    kind: WarningKind
    text: str

    def send(self, sink: "EmissionSink") -> None:
        sink.warning(self.text)

    def to_dict(self) -> dict[str, Any]:
        return {"op": "warning", "kind": self.kind.value, "text": self.text}


Command = (
    RapidMove
    | Move
    | MoveRelative
    | ArcCW
    | ArcCCW
    | ArcCWRelative
    | ArcCCWRelative
    | Comment
    | Warning
)

ARC_TYPES = (ArcCW, ArcCCW, ArcCWRelative, ArcCCWRelative)
MOVE_TYPES = (RapidMove, Move, MoveRelative)

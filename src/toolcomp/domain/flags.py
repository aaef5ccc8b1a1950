"""Option flags for the compensation routine."""

from enum import Enum, IntFlag


class TraceFlags(IntFlag):
    """Bit-set selecting topology, Z policy, side, entry/exit and warnings.

    The bit values match the constants of the macro library the routine is
    called from, so integer flags written there can be passed unchanged.
    """

    NONE = 0
    CLOSED = 0x01
    KEEPZ = 0x02
    OLDZ = 0x04
    QUIET = 0x08
    LEFT = 0x10
    RIGHT = 0x20
    ARCIN = 0x40
    ARCOUT = 0x80


KNOWN_FLAGS = (
    TraceFlags.CLOSED
    | TraceFlags.KEEPZ
    | TraceFlags.OLDZ
    | TraceFlags.QUIET
    | TraceFlags.LEFT
    | TraceFlags.RIGHT
    | TraceFlags.ARCIN
    | TraceFlags.ARCOUT
)


class Side(Enum):
    """Side of the path the tool runs on, relative to travel direction."""

    LEFT = -1.0
    RIGHT = 1.0

    @property
    def multiplier(self) -> float:
        """Signed multiplier applied to right-hand normals."""
        return self.value

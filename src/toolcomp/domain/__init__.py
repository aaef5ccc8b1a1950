"""Domain models for toolcomp.

This module contains the core domain models shared by the offset pipeline,
the sinks and the CLI. All value types are frozen dataclasses so they can be
compared, hashed and serialized freely.

Key classes:
- Vec2: 2D vector arithmetic
- Point: A path vertex with optional Z
- ToolPosition: Tool position captured when a run starts
- TraceFlags / Side: Routine options
- Quantity / Unit: Unit-tagged scalars at the boundaries
- RapidMove, Move, MoveRelative, ArcCW, ArcCCW, ArcCWRelative,
  ArcCCWRelative, Comment, Warning: Emission commands
"""

from toolcomp.domain.commands import (
    ARC_TYPES,
    MOVE_TYPES,
    ArcCCW,
    ArcCCWRelative,
    ArcCW,
    ArcCWRelative,
    Command,
    Comment,
    Move,
    MoveRelative,
    RapidMove,
    Warning,
    WarningKind,
)
from toolcomp.domain.flags import KNOWN_FLAGS, Side, TraceFlags
from toolcomp.domain.point import Point, ToolPosition, Vec2
from toolcomp.domain.units import MM_PER_INCH, Quantity, Unit, from_mm, to_mm

__all__: list[str] = [
    # Enums
    "Side",
    "TraceFlags",
    "Unit",
    "WarningKind",
    # Core types
    "Vec2",
    "Point",
    "ToolPosition",
    "Quantity",
    # Commands
    "Command",
    "RapidMove",
    "Move",
    "MoveRelative",
    "ArcCW",
    "ArcCCW",
    "ArcCWRelative",
    "ArcCCWRelative",
    "Comment",
    "Warning",
    "ARC_TYPES",
    "MOVE_TYPES",
    # Constants and helpers
    "KNOWN_FLAGS",
    "MM_PER_INCH",
    "from_mm",
    "to_mm",
]

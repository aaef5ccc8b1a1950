"""Emission sinks: where the command stream goes.

A sink receives the toolpath one call at a time, in toolpath order. The
pipeline itself never talks to a sink; ``forward`` sends a finished command
list to one.
"""

from collections.abc import Iterable
from typing import Any, Protocol

from toolcomp.domain import Command


class EmissionSink(Protocol):
    """Operations a consumer of the compensated toolpath must support.

    Coordinates are millimetres. ``None`` leaves an axis unspecified.
    """

    def rapid_move(self, x: float | None, y: float | None, z: float | None) -> None: ...

    def move(self, x: float | None, y: float | None, z: float | None) -> None: ...

    def move_relative(self, dx: float, dy: float) -> None: ...

    def arc_cw(self, x: float, y: float, z: float | None, radius: float) -> None: ...

    def arc_ccw(self, x: float, y: float, z: float | None, radius: float) -> None: ...

    def arc_cw_relative(self, dx: float, dy: float, radius: float) -> None: ...

    def arc_ccw_relative(self, dx: float, dy: float, radius: float) -> None: ...

    def comment(self, *text: str) -> None: ...

    def warning(self, *text: str) -> None: ...

    def error(self, *text: str) -> None: ...


def forward(commands: Iterable[Command], sink: EmissionSink) -> int:
    """Send commands to a sink in order.

    Returns:
        Number of commands sent
    """
    count = 0
    for command in commands:
        command.send(sink)
        count += 1
    return count


class RecordingSink:
    """Sink that records every call as ``(operation, args)``.

    Example:
        sink = RecordingSink()
        forward(commands, sink)
        assert sink.calls[0][0] == "rapid_move"
    """

    def __init__(self) -> None:
        self.calls: list[tuple[str, tuple[Any, ...]]] = []

    def _record(self, operation: str, *args: Any) -> None:
        self.calls.append((operation, args))

    def rapid_move(self, x: float | None, y: float | None, z: float | None) -> None:
        self._record("rapid_move", x, y, z)

    def move(self, x: float | None, y: float | None, z: float | None) -> None:
        self._record("move", x, y, z)

    def move_relative(self, dx: float, dy: float) -> None:
        self._record("move_relative", dx, dy)

    def arc_cw(self, x: float, y: float, z: float | None, radius: float) -> None:
        self._record("arc_cw", x, y, z, radius)

    def arc_ccw(self, x: float, y: float, z: float | None, radius: float) -> None:
        self._record("arc_ccw", x, y, z, radius)

    def arc_cw_relative(self, dx: float, dy: float, radius: float) -> None:
        self._record("arc_cw_relative", dx, dy, radius)

    def arc_ccw_relative(self, dx: float, dy: float, radius: float) -> None:
        self._record("arc_ccw_relative", dx, dy, radius)

    def comment(self, *text: str) -> None:
        self._record("comment", *text)

    def warning(self, *text: str) -> None:
        self._record("warning", *text)

    def error(self, *text: str) -> None:
        self._record("error", *text)

    def operations(self) -> list[str]:
        """Names of the recorded calls, in order."""
        return [operation for operation, _ in self.calls]

"""G-code writer for compensated toolpaths.

This module provides the GcodeWriter sink, which renders the command stream
as RS274 text, and helpers for naming and writing output files.
"""

import json
from pathlib import Path

import structlog

from toolcomp.config import ArcFormat, OutputConfig
from toolcomp.core.geometry import arc_center
from toolcomp.domain import Command, ToolPosition, Unit, Vec2, from_mm
from toolcomp.exceptions import OutputWriteError

logger = structlog.get_logger(__name__)


def _sanitize(text: str) -> str:
    """Comments cannot nest parentheses."""
    return text.replace("(", "<").replace(")", ">")


class GcodeWriter:
    """Sink that renders the toolpath as G-code.

    The writer tracks the absolute tool position so that absolute arcs can
    carry I/J centre offsets. Relative moves and arcs are written in G91
    incremental mode, which needs no position.

    Example:
        writer = GcodeWriter(OutputConfig(), ToolPosition(0.0, 0.0, 5.0))
        forward(commands, writer)
        writer.save(Path("part.ngc"))
    """

    def __init__(
        self,
        config: OutputConfig | None = None,
        position: ToolPosition | None = None,
        preamble: bool = True,
    ) -> None:
        """Initialize the writer.

        Args:
            config: Output settings (units, decimals, arc format)
            position: Tool position before the first command, if known
            preamble: Write unit and distance mode words first
        """
        self._config = config or OutputConfig()
        self._unit: Unit = self._config.units.to_unit()
        position = position or ToolPosition()
        self._x, self._y, self._z = position.x, position.y, position.z
        self._lines: list[str] = []
        if preamble:
            self._lines.append("G21" if self._unit is Unit.MM else "G20")
            self._lines.append("G90")

    @property
    def lines(self) -> list[str]:
        """Rendered lines so far."""
        return list(self._lines)

    @property
    def position(self) -> ToolPosition:
        """Tracked absolute position in millimetres."""
        return ToolPosition(self._x, self._y, self._z)

    def text(self) -> str:
        """The whole program as one string."""
        return "\n".join(self._lines) + "\n"

    def _fmt(self, value: float) -> str:
        formatted = f"{from_mm(value, self._unit):.{self._config.decimals}f}"
        if float(formatted) == 0.0:
            formatted = formatted.lstrip("-")
        return formatted

    def _axes(self, **axes: float | None) -> str:
        return "".join(
            f" {name.upper()}{self._fmt(value)}" for name, value in axes.items() if value is not None
        )

    def _linear(self, code: str, x: float | None, y: float | None, z: float | None) -> None:
        self._lines.append(code + self._axes(x=x, y=y, z=z))
        self._x = self._x if x is None else x
        self._y = self._y if y is None else y
        self._z = self._z if z is None else z

    def rapid_move(self, x: float | None, y: float | None, z: float | None) -> None:
        self._linear("G0", x, y, z)

    def move(self, x: float | None, y: float | None, z: float | None) -> None:
        self._linear("G1", x, y, z)

    def move_relative(self, dx: float, dy: float) -> None:
        self._lines.append("G91 G1" + self._axes(x=dx, y=dy))
        self._lines.append("G90")
        self._shift(dx, dy)

    def _shift(self, dx: float, dy: float) -> None:
        if self._x is not None and self._y is not None:
            self._x += dx
            self._y += dy

    def _arc(self, clockwise: bool, x: float, y: float, z: float | None, radius: float) -> None:
        code = "G2" if clockwise else "G3"
        use_ij = (
            self._config.arc_format is ArcFormat.IJ
            and self._x is not None
            and self._y is not None
        )
        if use_ij:
            start = Vec2(self._x, self._y)
            center = arc_center(start, Vec2(x, y), radius, clockwise) - start
            words = self._axes(x=x, y=y, z=z, i=center.x, j=center.y)
        else:
            words = self._axes(x=x, y=y, z=z, r=radius)
        self._lines.append(code + words)
        self._x, self._y = x, y
        self._z = self._z if z is None else z

    def _arc_relative(self, clockwise: bool, dx: float, dy: float, radius: float) -> None:
        code = "G2" if clockwise else "G3"
        if self._config.arc_format is ArcFormat.IJ:
            center = arc_center(Vec2(0.0, 0.0), Vec2(dx, dy), radius, clockwise)
            words = self._axes(x=dx, y=dy, i=center.x, j=center.y)
        else:
            words = self._axes(x=dx, y=dy, r=radius)
        self._lines.append(f"G91 {code}{words}")
        self._lines.append("G90")
        self._shift(dx, dy)

    def arc_cw(self, x: float, y: float, z: float | None, radius: float) -> None:
        self._arc(True, x, y, z, radius)

    def arc_ccw(self, x: float, y: float, z: float | None, radius: float) -> None:
        self._arc(False, x, y, z, radius)

    def arc_cw_relative(self, dx: float, dy: float, radius: float) -> None:
        self._arc_relative(True, dx, dy, radius)

    def arc_ccw_relative(self, dx: float, dy: float, radius: float) -> None:
        self._arc_relative(False, dx, dy, radius)

    def comment(self, *text: str) -> None:
        self._lines.append(f"({_sanitize(' '.join(text))})")

    def warning(self, *text: str) -> None:
        message = " ".join(text)
        logger.warning("Toolpath warning", text=message)
        self._lines.append(f"(WARNING: {_sanitize(message)})")

    def error(self, *text: str) -> None:
        message = " ".join(text)
        logger.error("Toolpath error", text=message)
        self._lines.append(f"(ERROR: {_sanitize(message)})")

    def save(self, output_path: Path) -> None:
        """Write the program to a file.

        Raises:
            OutputWriteError: If the file cannot be written
        """
        write_text(output_path, self.text())

    @staticmethod
    def get_output_path(input_path: Path, suffix: str = ".ngc") -> Path:
        """Generate the default output path for an input path file.

        Converts: outline.json -> outline-comp.ngc
        """
        return input_path.parent / f"{input_path.stem}-comp{suffix}"


def commands_to_json(commands: list[Command]) -> str:
    """Serialize a command stream to JSON."""
    return json.dumps([command.to_dict() for command in commands], indent=2)


def write_text(output_path: Path, text: str) -> None:
    """Write text output, wrapping OS errors.

    Raises:
        OutputWriteError: If the file cannot be written
    """
    try:
        output_path.write_text(text, encoding="utf-8")
    except OSError as e:
        raise OutputWriteError(str(output_path), str(e)) from e
    logger.debug("Output written", path=str(output_path), size=len(text))

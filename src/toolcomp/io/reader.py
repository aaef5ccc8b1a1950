"""Path reader for loading polylines from files.

This module provides the PathReader class for loading a path from JSON or
plain text and converting its coordinates to millimetres. Coordinates left
unspecified stay ``None``; the normalizer fills them in later.
"""

import json
import re
from pathlib import Path
from typing import Any

from toolcomp.domain import Unit, to_mm
from toolcomp.exceptions import PathLoadError

RawPoint = tuple[float | None, float | None, float | None]

_UNSPECIFIED = {"-", "_", "none", "null"}
_SEPARATOR = re.compile(r"[\s,;]+")
_UNIT_NAMES = {
    "mm": Unit.MM,
    "millimeter": Unit.MM,
    "millimetre": Unit.MM,
    "in": Unit.INCH,
    "inch": Unit.INCH,
}


def parse_unit(name: str) -> Unit:
    """Map a unit name used in files and on the command line to ``Unit``.

    Raises:
        ValueError: If the name is not a known distance unit
    """
    try:
        return _UNIT_NAMES[name.strip().lower()]
    except KeyError:
        raise ValueError(f"Unknown distance unit '{name}' (use mm or inch)") from None


class PathReader:
    """Loads a path from a JSON or text file.

    JSON files hold either a list of points or an object with ``points`` and
    optional ``units`` and ``closed`` keys. A point is a list ``[x, y]`` or
    ``[x, y, z]`` (``null`` for unspecified) or an object with x/y/z keys.

    Text files hold one point per line, ``x y [z]``, separated by whitespace
    or commas. ``-`` marks an unspecified coordinate and ``#`` starts a
    comment.

    Example:
        reader = PathReader(Path("outline.json"))
        reader.load()
        points = reader.points
    """

    def __init__(self, path_file: Path, units: Unit = Unit.MM) -> None:
        """Initialize the path reader.

        Args:
            path_file: Path to the JSON or text file
            units: Unit of the file's coordinates unless the file names one
        """
        self._path_file = path_file
        self._units = units
        self._points: list[RawPoint] | None = None
        self._closed: bool | None = None

    def load(self) -> None:
        """Load and parse the file.

        Raises:
            PathLoadError: If the file is missing or malformed
        """
        if not self._path_file.exists():
            raise PathLoadError(str(self._path_file), "file not found")
        try:
            content = self._path_file.read_text(encoding="utf-8")
        except OSError as e:
            raise PathLoadError(str(self._path_file), str(e)) from e

        try:
            if self._path_file.suffix.lower() == ".json":
                raw = self._parse_json(content)
            else:
                raw = self._parse_text(content)
        except (ValueError, TypeError, KeyError) as e:
            raise PathLoadError(str(self._path_file), str(e)) from e

        self._points = [
            tuple(None if v is None else to_mm(v, self._units) for v in point)  # type: ignore[misc]
            for point in raw
        ]

    @property
    def points(self) -> list[RawPoint]:
        """Loaded points in millimetres.

        Raises:
            RuntimeError: If the file has not been loaded yet
        """
        if self._points is None:
            raise RuntimeError("Path not loaded. Call load() first.")
        return list(self._points)

    @property
    def units(self) -> Unit:
        """Unit the file's coordinates were read in."""
        return self._units

    @property
    def closed(self) -> bool | None:
        """Topology named by the file, or None if it does not say."""
        return self._closed

    def _parse_json(self, content: str) -> list[tuple[float | None, ...]]:
        data = json.loads(content)
        if isinstance(data, dict):
            if "units" in data:
                self._units = parse_unit(str(data["units"]))
            if "closed" in data:
                self._closed = bool(data["closed"])
            data = data["points"]
        if not isinstance(data, list):
            raise ValueError("expected a list of points")
        return [self._json_point(item, index) for index, item in enumerate(data)]

    @staticmethod
    def _json_point(item: Any, index: int) -> tuple[float | None, ...]:
        if isinstance(item, dict):
            values = [item.get("x"), item.get("y"), item.get("z")]
        elif isinstance(item, list) and 1 <= len(item) <= 3:
            values = item + [None] * (3 - len(item))
        else:
            raise ValueError(f"point {index} is not a list of 1-3 numbers or an object")
        for value in values:
            if value is not None and (
                isinstance(value, bool) or not isinstance(value, (int, float))
            ):
                raise ValueError(f"point {index} has a non-numeric coordinate {value!r}")
        return tuple(None if v is None else float(v) for v in values)

    @staticmethod
    def _parse_text(content: str) -> list[tuple[float | None, ...]]:
        points = []
        for line_no, line in enumerate(content.splitlines(), start=1):
            line = line.split("#", 1)[0].strip()
            if not line:
                continue
            fields = [f for f in _SEPARATOR.split(line) if f]
            if not 1 <= len(fields) <= 3:
                raise ValueError(f"line {line_no}: expected 'x y [z]'")
            values: list[float | None] = []
            for field in fields:
                if field.lower() in _UNSPECIFIED:
                    values.append(None)
                else:
                    try:
                        values.append(float(field))
                    except ValueError:
                        raise ValueError(f"line {line_no}: bad number '{field}'") from None
            values += [None] * (3 - len(values))
            points.append(tuple(values))
        return points

    def __enter__(self) -> "PathReader":
        """Context manager entry."""
        self.load()
        return self

    def __exit__(self, _exc_type: object, _exc_val: object, _exc_tb: object) -> None:
        """Context manager exit."""

"""Exception hierarchy for Toolcomp."""

from enum import Enum


class ToolcompError(Exception):
    """Base exception for all Toolcomp errors."""

    pass


class ArgumentErrorKind(str, Enum):
    """Reason an argument to the compensation routine was rejected."""

    NOT_A_PATH = "not-a-path"
    TOO_FEW_POINTS = "too-few-points"
    UNRESOLVED_COORDINATE = "unresolved-coordinate"
    NON_SCALAR_WIDTH = "non-scalar-width"
    NON_DISTANCE_WIDTH = "non-distance-width"
    NON_POSITIVE_WIDTH = "non-positive-width"
    NON_SCALAR_FLAGS = "non-scalar-flags"
    NON_INTEGER_FLAGS = "non-integer-flags"
    CONFLICTING_SIDE_FLAGS = "conflicting-side-flags"


class InvalidArgumentError(ToolcompError):
    """Argument validation failed before any geometry was produced."""

    def __init__(self, kind: ArgumentErrorKind, message: str) -> None:
        self.kind = kind
        self.message = message
        super().__init__(f"Invalid argument ({kind.value}): {message}")


class GeometryError(ToolcompError):
    """Errors in geometric calculations."""

    pass


class DegenerateVectorError(GeometryError):
    """A zero-length vector was used where a direction is required."""

    def __init__(self, message: str) -> None:
        super().__init__(message)


class FileError(ToolcompError):
    """Errors related to reading paths or writing output."""

    pass


class PathLoadError(FileError):
    """Error loading a path file."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to load path '{path}': {reason}")


class OutputWriteError(FileError):
    """Error writing a toolpath file."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to write output '{path}': {reason}")

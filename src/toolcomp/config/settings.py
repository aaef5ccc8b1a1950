"""Configuration settings for Toolcomp."""

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field

from toolcomp.domain.units import Unit


class OutputUnit(str, Enum):
    """Unit written to G-code output."""

    MM = "mm"
    INCH = "inch"

    def to_unit(self) -> Unit:
        """Map to the internal unit enum."""
        return Unit.MM if self is OutputUnit.MM else Unit.INCH


class ArcFormat(str, Enum):
    """How circular moves are written."""

    IJ = "ij"
    R = "r"


class GeometryConfig(BaseModel):
    """Configuration for geometry comparisons.

    All values are in millimetres. The tolerance is used for XY equality of
    points, for deciding that a cross product is zero, and for breaking ties
    between segment lengths.
    """

    tolerance: float = Field(
        default=1e-9,
        gt=0.0,
        le=1e-3,
        description="Absolute tolerance for equality and zero tests (mm)",
    )


class OutputConfig(BaseModel):
    """Configuration for toolpath output."""

    units: OutputUnit = Field(
        default=OutputUnit.MM,
        description="Unit written to the G-code output",
    )
    decimals: int = Field(
        default=4,
        ge=1,
        le=8,
        description="Number of decimals for coordinates",
    )
    arc_format: ArcFormat = Field(
        default=ArcFormat.IJ,
        description="Write arcs with I/J centre offsets or an R radius word",
    )
    emit_comments: bool = Field(
        default=True,
        description="Bracket the compensated path with informational comments",
    )


class LoggingConfig(BaseModel):
    """Logging configuration."""

    log_file: Path | None = Field(
        default=None,
        description="Path to log file",
    )
    log_level: str = Field(
        default="WARNING",
        description="Console log level",
    )
    file_log_level: str = Field(
        default="DEBUG",
        description="File log level (more verbose)",
    )


class ToolcompSettings(BaseModel):
    """Main application settings."""

    default_unit: Unit = Field(
        default=Unit.MM,
        description="Unit assumed for unitless widths and coordinates",
    )
    geometry: GeometryConfig = Field(default_factory=GeometryConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def get_default_settings() -> ToolcompSettings:
    """Get default application settings."""
    return ToolcompSettings()

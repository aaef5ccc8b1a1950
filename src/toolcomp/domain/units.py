"""Unit-tagged scalars used at the input and output boundaries.

Inside the pipeline every distance is a plain float in millimetres. A
``Quantity`` only exists where a value enters from a caller that may attach
a unit to it (the offset width, file coordinates) or leaves toward an output
that is written in inches.
"""

from dataclasses import dataclass
from enum import Enum

MM_PER_INCH = 25.4


class Unit(str, Enum):
    """Measurement unit of a scalar."""

    NONE = "none"
    MM = "mm"
    INCH = "inch"
    DEG = "deg"
    RAD = "rad"

    @property
    def is_distance(self) -> bool:
        """True for units that measure a length."""
        return self in (Unit.MM, Unit.INCH)

    @property
    def is_angle(self) -> bool:
        """True for units that measure an angle."""
        return self in (Unit.DEG, Unit.RAD)


def to_mm(value: float, unit: Unit) -> float:
    """Convert a length to millimetres.

    Args:
        value: Length in ``unit``
        unit: Distance unit of the value

    Returns:
        The length in millimetres

    Raises:
        ValueError: If ``unit`` is not a distance unit
    """
    if unit is Unit.MM:
        return value
    if unit is Unit.INCH:
        return value * MM_PER_INCH
    raise ValueError(f"Cannot convert {unit.value} to millimetres")


def from_mm(value: float, unit: Unit) -> float:
    """Convert a length in millimetres to ``unit``."""
    if unit is Unit.MM:
        return value
    if unit is Unit.INCH:
        return value / MM_PER_INCH
    raise ValueError(f"Cannot convert millimetres to {unit.value}")


@dataclass(frozen=True, slots=True)
class Quantity:
    """A scalar value tagged with a unit.

    Attributes:
        value: Numeric magnitude
        unit: Unit of the magnitude
    """

    value: float
    unit: Unit = Unit.NONE

    @property
    def is_distance(self) -> bool:
        """True if the quantity is a length or unitless."""
        return self.unit is Unit.NONE or self.unit.is_distance

    def to_mm(self, default_unit: Unit = Unit.MM) -> float:
        """Convert to millimetres, reading unitless values in ``default_unit``."""
        unit = default_unit if self.unit is Unit.NONE else self.unit
        return to_mm(self.value, unit)

    @classmethod
    def mm(cls, value: float) -> "Quantity":
        """Create a millimetre quantity."""
        return cls(value, Unit.MM)

    @classmethod
    def inch(cls, value: float) -> "Quantity":
        """Create an inch quantity."""
        return cls(value, Unit.INCH)

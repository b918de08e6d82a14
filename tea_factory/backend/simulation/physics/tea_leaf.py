"""
Tea Leaf State

Physical state of one batch of leaves.

Ranges:
    moisture      [0.0, 1.0]   (water fraction)
    temperature_c unbounded    (°C)
    aroma         [0, 100]
    color         [0, 100]

Every stage law calls normalize() after mutating the leaf.
Temperature is never clamped.
"""

from dataclasses import dataclass, replace

DEFAULT_MOISTURE = 0.75
DEFAULT_TEMPERATURE_C = 25.0
DEFAULT_AROMA = 10.0
DEFAULT_COLOR = 10.0


def clamp(value: float, min_value: float, max_value: float) -> float:
    """Clamp value into [min_value, max_value]."""
    return max(min_value, min(value, max_value))


@dataclass
class TeaLeaf:
    """Mutable value object owned by exactly one batch."""

    moisture: float = DEFAULT_MOISTURE
    temperature_c: float = DEFAULT_TEMPERATURE_C
    aroma: float = DEFAULT_AROMA
    color: float = DEFAULT_COLOR

    def normalize(self) -> "TeaLeaf":
        """Clamp moisture/aroma/color into their domains (in place)."""
        self.moisture = clamp(self.moisture, 0.0, 1.0)
        self.aroma = clamp(self.aroma, 0.0, 100.0)
        self.color = clamp(self.color, 0.0, 100.0)
        return self

    def copy(self) -> "TeaLeaf":
        return replace(self)

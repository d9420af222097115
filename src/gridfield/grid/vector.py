"""Immutable 2D vector (u, v) with meteorological direction helpers.

Directions follow the compass convention: 0 degrees is north (+v) and
90 degrees is east (+u). ``direction_to`` is where the flow is heading,
``direction_from`` is where it comes from (the usual wind convention).
"""
import math
from typing import NamedTuple

from gridfield.angle_utils import bearing_deg, opposite_bearing


class Vector(NamedTuple):
    u: float
    v: float

    def magnitude(self) -> float:
        return math.sqrt(self.u * self.u + self.v * self.v)

    def direction_to(self) -> float:
        """Angle in degrees [0, 360) the vector points towards."""
        return bearing_deg(self.u, self.v)

    def direction_from(self) -> float:
        """Angle in degrees [0, 360) the vector comes from."""
        return opposite_bearing(self.direction_to())

    def __repr__(self) -> str:
        return f"Vector(u={self.u!r}, v={self.v!r})"

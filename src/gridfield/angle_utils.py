"""Small utilities for longitude wrapping and meteorological bearings.

Keep these pure-Python and dependency-light so the hot query paths of the
grids can call them per point without array overhead.
"""
import math

from gridfield.config import FULL_CIRCLE_DEG


def wrap_deg(x: float) -> float:
    """Wrap degrees to [-180, 180)."""
    return (x + 180.0) % FULL_CIRCLE_DEG - 180.0


def wrap_360(x: float) -> float:
    """Wrap degrees to [0, 360)."""
    a = x % FULL_CIRCLE_DEG
    # -1e-17 % 360 rounds to 360.0
    return 0.0 if a >= FULL_CIRCLE_DEG else a


def longitude_in_frame(lon: float, west: float) -> float:
    """Re-express ``lon`` inside the 360-degree frame [west, west + 360)."""
    return west + wrap_360(lon - west)


def bearing_deg(dx: float, dy: float) -> float:
    """Bearing of (dx, dy) with 0 = north (+y) and 90 = east (+x), in [0, 360)."""
    return wrap_360(math.degrees(math.atan2(dx, dy)))


def opposite_bearing(bearing: float) -> float:
    """Bearing pointing the other way, in [0, 360)."""
    return (bearing + 180.0) % FULL_CIRCLE_DEG

"""Simple regular cell of a raster: center, value and footprint size."""
import math
from typing import Generic, NamedTuple, Optional, TypeVar, Union

from gridfield.grid.params import CellSize
from gridfield.grid.vector import Vector

T = TypeVar('T', float, Vector)


class LonLat(NamedTuple):
    lon: float
    lat: float


class Bounds(NamedTuple):
    """Lon/lat bounding box ``(west, south, east, north)``."""
    west: float
    south: float
    east: float
    north: float

    @property
    def south_west(self) -> LonLat:
        return LonLat(self.west, self.south)

    @property
    def north_east(self) -> LonLat:
        return LonLat(self.east, self.north)

    def contains(self, lon: float, lat: float) -> bool:
        return self.west <= lon <= self.east and self.south <= lat <= self.north


class Cell(Generic[T]):
    """A sampled point of a grid.

    ``value`` is None when the cell has no data.
    """

    __slots__ = ('center', 'value', 'size')

    def __init__(self, center: LonLat, value: Optional[T], size: CellSize):
        self.center = LonLat(*center)
        self.value = value
        self.size = CellSize.of(size)

    def get_bounds(self) -> Bounds:
        half_x, half_y = self.size.x / 2.0, self.size.y / 2.0
        lon, lat = self.center
        return Bounds(lon - half_x, lat - half_y, lon + half_x, lat + half_y)

    def equals(self, other: 'Cell') -> bool:
        return (
            self.center == other.center
            and self.size == other.size
            and _equal_values(self.value, other.value)
        )

    def __eq__(self, other):
        if not isinstance(other, Cell):
            return NotImplemented
        return self.equals(other)

    __hash__ = None

    def __repr__(self) -> str:
        return f"Cell(center={tuple(self.center)!r}, value={self.value!r}, size={self.size!r})"


def _equal_values(a: Union[float, Vector, None], b: Union[float, Vector, None]) -> bool:
    if a is None or b is None:
        return a is None and b is None
    if isinstance(a, Vector) or isinstance(b, Vector):
        return isinstance(a, Vector) and isinstance(b, Vector) and a.u == b.u and a.v == b.v
    if math.isnan(a) and math.isnan(b):
        return True
    return a == b

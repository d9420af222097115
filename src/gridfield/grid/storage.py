"""
storage.py

Cell-value storage shared by Cartesian and polar grids. A grid delegates
everything that depends on the value type (packing a flat array into rows,
reading one cell, bilinear interpolation, range computation) to one of two
storages, tagged by ``FieldKind``:

- `ScalarStorage` : one float64 array ``zs[row, col]``
- `VectorStorage` : two float64 arrays ``us[row, col]``, ``vs[row, col]``

Missing cells are NaN inside the arrays and ``None`` once read out. Arrays
are made read-only on construction; grids replace a whole storage instead of
mutating one.
"""
import logging
import math
from enum import Enum
from typing import Any, Callable, Iterator, Optional, Tuple, Union

import numpy as np

from gridfield.grid.vector import Vector

logger = logging.getLogger(__name__)

Range = Tuple[float, float]


class FieldKind(Enum):
    SCALAR = 'scalar'
    VECTOR = 'vector'


class ScalarKind(Enum):
    """Scalar quantities that can be derived from a vector field."""
    MAGNITUDE = 'magnitude'
    DIRECTION_TO = 'directionTo'
    DIRECTION_FROM = 'directionFrom'

    @classmethod
    def parse(cls, kind: Union['ScalarKind', str]) -> 'ScalarKind':
        if isinstance(kind, cls):
            return kind
        key = str(kind)
        for member in cls:
            if key in (member.value, member.name, member.name.lower()):
                return member
        raise ValueError(f"unknown scalar field kind {kind!r}; expected one of {[m.value for m in cls]}")


def to_missing_array(values: Any, n_rows: int, n_cols: int, nodata: Optional[float] = None,
                     reverse_x: bool = False, reverse_y: bool = False) -> np.ndarray:
    """Pack a flat x-ascending / y-descending sequence into a (n_rows, n_cols) array.

    ``None`` entries and entries equal to ``nodata`` become NaN. ``reverse_y``
    reads the rows south to north, ``reverse_x`` reads each row east to west.
    """
    arr = np.array(values, dtype=np.float64).reshape(-1)
    if arr.size != n_rows * n_cols:
        raise ValueError(f"expected {n_rows * n_cols} values for a {n_rows} x {n_cols} grid, got {arr.size}")
    if nodata is not None:
        arr[arr == nodata] = np.nan
    grid = arr.reshape(n_rows, n_cols)
    if reverse_y:
        grid = grid[::-1, :]
    if reverse_x:
        grid = grid[:, ::-1]
    return _frozen(grid)


def _frozen(a: np.ndarray) -> np.ndarray:
    out = np.ascontiguousarray(a, dtype=np.float64)
    if out is a:
        out = out.copy()
    out.flags.writeable = False
    return out


def _read_only(a: np.ndarray) -> np.ndarray:
    if a.dtype == np.float64 and not a.flags.writeable:
        return a
    return _frozen(a)


def bilinear(x: float, y: float, g00: float, g10: float, g01: float, g11: float) -> float:
    """Bilinear weights for offsets ``x``, ``y`` in [0, 1) within a cell."""
    rx = 1.0 - x
    ry = 1.0 - y
    return g00 * rx * ry + g10 * x * ry + g01 * rx * y + g11 * x * y


class ScalarStorage:
    kind = FieldKind.SCALAR

    __slots__ = ('zs',)

    def __init__(self, zs: np.ndarray):
        if zs.ndim != 2:
            raise ValueError(f"scalar storage needs a 2D array, got shape {zs.shape}")
        self.zs = _read_only(zs)

    @classmethod
    def from_flat(cls, values: Any, n_rows: int, n_cols: int, nodata: Optional[float] = None,
                  reverse_x: bool = False, reverse_y: bool = False) -> 'ScalarStorage':
        return cls(to_missing_array(values, n_rows, n_cols, nodata, reverse_x, reverse_y))

    @property
    def shape(self) -> Tuple[int, int]:
        return self.zs.shape

    def value_at(self, i: int, j: int) -> Optional[float]:
        z = self.zs[j, i]  # <-- row j, column i
        if math.isnan(z):
            return None
        return float(z)

    def corners(self, fi: int, ci: int, fj: int, cj: int) -> Optional[Tuple[float, float, float, float]]:
        """The four values around a point, or None when any of them is missing."""
        zs = self.zs
        g00 = zs[fj, fi]
        g10 = zs[fj, ci]
        g01 = zs[cj, fi]
        g11 = zs[cj, ci]
        if math.isnan(g00) or math.isnan(g10) or math.isnan(g01) or math.isnan(g11):
            return None
        return float(g00), float(g10), float(g01), float(g11)

    @staticmethod
    def interpolate(x: float, y: float, g00: float, g10: float, g01: float, g11: float) -> float:
        return bilinear(x, y, g00, g10, g01, g11)

    def values(self) -> Iterator[float]:
        """Present values, x-ascending & y-descending."""
        for z in self.zs.ravel().tolist():
            if not math.isnan(z):
                yield z

    def calculate_range(self, in_filter: Optional[Callable[[float], bool]] = None) -> Optional[Range]:
        if in_filter is None:
            data = self.zs[np.isfinite(self.zs)]
        else:
            data = np.fromiter((z for z in self.values() if in_filter(z)), dtype=np.float64)
        if data.size == 0:
            return None
        return float(data.min()), float(data.max())

    def flat(self) -> np.ndarray:
        return self.zs.ravel()


class VectorStorage:
    kind = FieldKind.VECTOR

    __slots__ = ('us', 'vs')

    def __init__(self, us: np.ndarray, vs: np.ndarray):
        if us.shape != vs.shape or us.ndim != 2:
            raise ValueError(f"u and v must be 2D arrays of the same shape, got {us.shape} and {vs.shape}")
        # a cell is missing if either component is missing
        missing = np.isnan(us) | np.isnan(vs)
        if missing.any():
            us = np.where(missing, np.nan, us)
            vs = np.where(missing, np.nan, vs)
        self.us = _read_only(us)
        self.vs = _read_only(vs)

    @classmethod
    def from_flat(cls, us: Any, vs: Any, n_rows: int, n_cols: int, nodata: Optional[float] = None,
                  reverse_x: bool = False, reverse_y: bool = False) -> 'VectorStorage':
        return cls(
            to_missing_array(us, n_rows, n_cols, nodata, reverse_x, reverse_y),
            to_missing_array(vs, n_rows, n_cols, nodata, reverse_x, reverse_y),
        )

    @property
    def shape(self) -> Tuple[int, int]:
        return self.us.shape

    def value_at(self, i: int, j: int) -> Optional[Vector]:
        u = self.us[j, i]
        if math.isnan(u):
            return None
        return Vector(float(u), float(self.vs[j, i]))

    def corners(self, fi: int, ci: int, fj: int, cj: int) -> Optional[Tuple[Vector, Vector, Vector, Vector]]:
        g00 = self.value_at(fi, fj)
        g10 = self.value_at(ci, fj)
        g01 = self.value_at(fi, cj)
        g11 = self.value_at(ci, cj)
        if g00 is None or g10 is None or g01 is None or g11 is None:
            return None
        return g00, g10, g01, g11

    @staticmethod
    def interpolate(x: float, y: float, g00: Vector, g10: Vector, g01: Vector, g11: Vector) -> Vector:
        # u and v are interpolated independently
        u = bilinear(x, y, g00.u, g10.u, g01.u, g11.u)
        v = bilinear(x, y, g00.v, g10.v, g01.v, g11.v)
        return Vector(u, v)

    def values(self) -> Iterator[Vector]:
        for u, v in zip(self.us.ravel().tolist(), self.vs.ravel().tolist()):
            if not math.isnan(u):
                yield Vector(u, v)

    def magnitudes(self) -> np.ndarray:
        return np.sqrt(self.us * self.us + self.vs * self.vs)

    def calculate_range(self, in_filter: Optional[Callable[[Vector], bool]] = None) -> Optional[Range]:
        """[min, max] of the vector magnitudes."""
        if in_filter is None:
            mags = self.magnitudes()
            data = mags[np.isfinite(mags)]
        else:
            data = np.fromiter((vec.magnitude() for vec in self.values() if in_filter(vec)), dtype=np.float64)
        if data.size == 0:
            return None
        return float(data.min()), float(data.max())

    def derive(self, kind: Union[ScalarKind, str]) -> ScalarStorage:
        """Scalar storage computed cell by cell; missing cells stay missing."""
        kind = ScalarKind.parse(kind)
        if kind is ScalarKind.MAGNITUDE:
            zs = self.magnitudes()
        else:
            to = np.degrees(np.arctan2(self.us, self.vs))
            to = np.where(to < 0.0, to + 360.0, to)
            if kind is ScalarKind.DIRECTION_TO:
                zs = np.where(to >= 360.0, 0.0, to)
            else:
                zs = np.mod(to + 180.0, 360.0)
        logger.debug('derived %s field from %d x %d vectors', kind.value, *self.shape)
        return ScalarStorage(_frozen(zs))


FieldStorage = Union[ScalarStorage, VectorStorage]

"""
base.py

Query engine for rasters of values (scalars or vectors).

`IndexedGrid` holds the value storage and everything that works on grid
indexes only: clamping, nearest and bilinear lookups, filtering, range,
cell enumeration and random seeding. Subclasses supply the index <-> lon/lat
geometry:

- `Grid` : regular lon/lat (or projected) raster, row 0 north, column 0 west
- `gridfield.grid.polar.PolarGrid` : range/bearing raster around a center

Grid state (storage, filter, range) lives in one immutable `FieldState`.
`set_filter` and `update_data` build a new state under a lock and swap it in;
queries read ``self._state`` once, so they never see a half-applied update.

Bilinear scheme (after cambecc/earth, product.js)::

         1      2           After converting lon/lat to fractional indexes
        fi  i   ci          i and j, the four points G enclosing (i, j) sit at
         | =1.4 |           the floor/ceiling of i and j: for i = 1.4 and
      ---G--|---G--- fj 8   j = 8.3 they are (1, 8), (2, 8), (1, 9), (2, 9).
    j ___|_ .   |
  =8.3   |      |           On a cyclic axis the ceiling index wraps to 0, so
      ---G------G--- cj 9   the first column doubles as the last one.
"""
import logging
import math
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass, replace
from typing import Any, Callable, List, Optional, Tuple

import numpy as np

from gridfield.angle_utils import longitude_in_frame
from gridfield.config import FULL_CIRCLE_DEG
from gridfield.geometry import transform_from_params
from gridfield.grid.cell import Bounds, Cell, LonLat
from gridfield.grid.params import CellSize, GridParams
from gridfield.grid.storage import FieldKind, FieldStorage, Range
from gridfield.projection import Projection

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FieldState:
    storage: FieldStorage
    in_filter: Optional[Callable[[Any], bool]]
    range: Optional[Range]
    version: int = 0


@dataclass
class Position:
    x: float
    y: float


def _clamp(k, n: int, period=None):
    """Bring index ``k`` inside [0, n).

    On a cyclic axis ``k`` is taken modulo ``period`` (the number of cells in
    a full turn, which may be less than ``n`` when the seam column is
    duplicated); anything still past the last cell maps back to cell 0.
    Non-cyclic axes saturate.
    """
    if period is not None:
        k = k % period
        return 0 if k > n - 1 else k
    if k < 0:
        return 0
    if k > n - 1:
        return n - 1
    return k


def _next_index(k: int, n: int, period=None) -> int:
    """Index of the cell after ``k``: wraps to 0 on cyclic axes, saturates otherwise."""
    if k + 1 > n - 1:
        return 0 if period is not None else n - 1
    return k + 1


class IndexedGrid(ABC):
    # cells per full turn along columns / rows, None when the axis does not wrap
    _column_period = None
    _row_period = None

    def __init__(self, storage: FieldStorage, seed: Optional[int] = None):
        self._lock = threading.RLock()
        self._rng = np.random.default_rng(seed)
        self._state = FieldState(storage, None, storage.calculate_range(None), 0)

    # ── geometry supplied by subclasses ──────────────────────────────────────
    @property
    @abstractmethod
    def cell_size(self) -> CellSize:
        ...

    @abstractmethod
    def contains(self, lon: float, lat: float) -> bool:
        """Whether the point falls inside the grid."""

    @abstractmethod
    def decimal_indexes(self, lon: float, lat: float) -> Optional[Tuple[float, float]]:
        """Fractional (column, row) indexes of a point, cell centers at integers.

        None when the grid does not contain the point.
        """

    @abstractmethod
    def lon_lat_at_indexes(self, i: float, j: float) -> Tuple[float, float]:
        """Lon/lat of the center of cell (i, j); fractional indexes are accepted."""

    @abstractmethod
    def extent(self) -> List[float]:
        ...

    @abstractmethod
    def get_bounds(self) -> Bounds:
        ...

    @abstractmethod
    def _cell_indexes(self, lon: float, lat: float) -> Optional[Tuple[int, int]]:
        """Integer (column, row) of the cell containing the point, or None."""

    # ── state ─────────────────────────────────────────────────────────────────
    @property
    def storage(self) -> FieldStorage:
        return self._state.storage

    @property
    def kind(self) -> FieldKind:
        return self._state.storage.kind

    @property
    def range(self) -> Optional[Range]:
        """(min, max) of the accepted values; magnitudes for vector fields."""
        return self._state.range

    @property
    def version(self) -> int:
        return self._state.version

    @property
    def n_rows(self) -> int:
        return self._state.storage.shape[0]

    @property
    def n_cols(self) -> int:
        return self._state.storage.shape[1]

    # aliases
    @property
    def height(self) -> int:
        return self.n_rows

    @property
    def width(self) -> int:
        return self.n_cols

    def num_cells(self) -> int:
        return self.n_rows * self.n_cols

    def set_filter(self, in_filter: Optional[Callable[[Any], bool]]) -> None:
        """Install (or clear, with None) a predicate on cell values.

        Data is kept; rejected values are excluded from ``range`` and from
        ``value_at`` / ``has_value_at``.
        """
        with self._lock:
            state = self._state
            self._state = FieldState(
                state.storage, in_filter, state.storage.calculate_range(in_filter), state.version + 1)

    def _replace_storage(self, storage: FieldStorage) -> None:
        with self._lock:
            state = self._state
            if storage.shape != state.storage.shape:
                raise ValueError(f"new data has shape {storage.shape}, grid is {state.storage.shape}")
            self._state = replace(
                state, storage=storage, range=storage.calculate_range(state.in_filter), version=state.version + 1)
        logger.debug('%s data updated (version %d)', type(self).__name__, self._state.version)

    # ── index queries ─────────────────────────────────────────────────────────
    def _clamp_column_index(self, i):
        return _clamp(i, self.n_cols, self._column_period)

    def _clamp_row_index(self, j):
        return _clamp(j, self.n_rows, self._row_period)

    def value_at_indexes(self, i: int, j: int):
        """Raw value of cell (column i, row j), None when missing."""
        if not (0 <= i < self.n_cols and 0 <= j < self.n_rows):
            raise IndexError(f"cell ({i}, {j}) outside a {self.n_cols} x {self.n_rows} grid")
        return self._state.storage.value_at(int(i), int(j))

    def interpolated_value_at_indexes(self, i: float, j: float):
        """Bilinear value at fractional indexes, None if any of the 4 neighbours is missing."""
        return self._interpolate(self._state.storage, i, j)

    def _interpolate(self, storage: FieldStorage, i: float, j: float):
        if not (math.isfinite(i) and math.isfinite(j)):
            return None
        i = self._clamp_column_index(i)
        j = self._clamp_row_index(j)
        fi = int(math.floor(i))
        ci = _next_index(fi, self.n_cols, self._column_period)
        fj = int(math.floor(j))
        cj = _next_index(fj, self.n_rows, self._row_period)
        corners = storage.corners(fi, ci, fj, cj)
        if corners is None:
            return None
        g00, g10, g01, g11 = corners
        return storage.interpolate(i - fi, j - fj, g00, g10, g01, g11)

    # ── point queries ─────────────────────────────────────────────────────────
    def value_at(self, lon: float, lat: float):
        """Value of the cell containing the point, None outside or when filtered out."""
        state = self._state
        indexes = self._cell_indexes(lon, lat)
        if indexes is None:
            return None
        value = state.storage.value_at(*indexes)
        if value is None:
            return None
        if state.in_filter is not None and not state.in_filter(value):
            return None
        return value

    def interpolated_value_at(self, lon: float, lat: float):
        """Bilinear value at a point, None outside or next to missing cells."""
        state = self._state
        indexes = self.decimal_indexes(lon, lat)
        if indexes is None:
            return None
        return self._interpolate(state.storage, *indexes)

    def has_value_at(self, lon: float, lat: float) -> bool:
        return self.value_at(lon, lat) is not None

    def not_contains(self, lon: float, lat: float) -> bool:
        return not self.contains(lon, lat)

    def get_cells(self, stride: int = 1) -> List[Cell]:
        """Every ``stride``-th cell, x-ascending & y-descending."""
        if stride < 1:
            raise ValueError(f"stride must be >= 1, got {stride}")
        storage = self._state.storage
        size = self.cell_size
        cells = []
        for j in range(0, self.n_rows, stride):
            for i in range(0, self.n_cols, stride):
                center = LonLat(*self.lon_lat_at_indexes(i, j))
                cells.append(Cell(center, storage.value_at(i, j), size))
        return cells

    def random_position(self, o: Any = None) -> Position:
        """Uniformly random lon/lat inside the grid, also written to ``o.x``/``o.y``."""
        i = self._rng.random() * self.n_cols - 0.5
        j = self._rng.random() * self.n_rows - 0.5
        lon, lat = self.lon_lat_at_indexes(i, j)
        if o is not None:
            o.x = lon
            o.y = lat
        return Position(lon, lat)


class Grid(IndexedGrid):
    """Values on a regular 2D raster (lon/lat or projected).

    Longitude handling for geographic grids: a query longitude is first
    re-expressed in the grid frame [xll, xll + 360), so -170 and 190 reach
    the same cell. A grid spanning 360 degrees or more is continuous: its
    column index wraps and every longitude is inside.
    """

    def __init__(self, params: GridParams, storage: FieldStorage, seed: Optional[int] = None):
        if storage.shape != (params.n_rows, params.n_cols):
            raise ValueError(f"storage shape {storage.shape} does not match {params.n_rows} x {params.n_cols}")
        self.params = params
        self.projection = Projection(params.projection)
        self._geographic = self.projection.is_geographic
        self.is_continuous = self._geographic and params.xur_corner - params.xll_corner >= FULL_CIRCLE_DEG
        self.longitude_needs_to_be_wrapped = self._geographic and params.xur_corner > 180.0
        self._column_period = FULL_CIRCLE_DEG / params.cell_size.x if self.is_continuous else None
        super().__init__(storage, seed)

    @property
    def cell_size(self) -> CellSize:
        return self.params.cell_size

    @property
    def transform(self):
        """Affine from (col, row) pixel corners to native coordinates."""
        return transform_from_params(self.params)

    # corners in lon/lat (params hold the native ones)
    @property
    def xll_corner(self) -> float:
        return self.projection.to_lon_lat(self.params.xll_corner, self.params.yll_corner)[0]

    @property
    def yll_corner(self) -> float:
        return self.projection.to_lon_lat(self.params.xll_corner, self.params.yll_corner)[1]

    @property
    def xur_corner(self) -> float:
        return self.projection.to_lon_lat(self.params.xur_corner, self.params.yur_corner)[0]

    @property
    def yur_corner(self) -> float:
        return self.projection.to_lon_lat(self.params.xur_corner, self.params.yur_corner)[1]

    def _native(self, lon: float, lat: float) -> Optional[Tuple[float, float]]:
        if self._geographic:
            x, y = longitude_in_frame(lon, self.params.xll_corner), lat
        else:
            x, y = self.projection.from_lon_lat(lon, lat)
        if not (math.isfinite(x) and math.isfinite(y)):
            return None
        return x, y

    def _native_contains(self, x: float, y: float) -> bool:
        p = self.params
        if not p.yll_corner <= y <= p.yur_corner:
            return False
        if self._geographic:
            # x already lies in [xll, xll + 360)
            return self.is_continuous or x <= p.xur_corner
        return p.xll_corner <= x <= p.xur_corner

    def contains(self, lon: float, lat: float) -> bool:
        native = self._native(lon, lat)
        return native is not None and self._native_contains(*native)

    def _cell_indexes(self, lon: float, lat: float) -> Optional[Tuple[int, int]]:
        native = self._native(lon, lat)
        if native is None or not self._native_contains(*native):
            return None
        x, y = native
        p = self.params
        i = int(math.floor((x - p.xll_corner) / p.cell_size.x))
        j = int(math.floor((p.yur_corner - y) / p.cell_size.y))
        return int(self._clamp_column_index(i)), int(self._clamp_row_index(j))

    def decimal_indexes(self, lon: float, lat: float) -> Optional[Tuple[float, float]]:
        native = self._native(lon, lat)
        if native is None or not self._native_contains(*native):
            return None
        x, y = native
        p = self.params
        i = (x - p.xll_corner) / p.cell_size.x - 0.5
        j = (p.yur_corner - y) / p.cell_size.y - 0.5
        return i, j

    def lon_lat_at_indexes(self, i: float, j: float) -> Tuple[float, float]:
        p = self.params
        x = p.xll_corner + (i + 0.5) * p.cell_size.x
        y = p.yur_corner - (j + 0.5) * p.cell_size.y
        if not self._geographic:
            return self.projection.to_lon_lat(x, y)
        if self.longitude_needs_to_be_wrapped and x > 180.0:
            x -= FULL_CIRCLE_DEG
        return x, y

    def _wrapped_longitudes(self) -> Tuple[float, float]:
        xmin, xmax = self.params.xll_corner, self.params.xur_corner
        if self.longitude_needs_to_be_wrapped:
            if self.is_continuous:
                return -180.0, 180.0
            if xmin >= 180.0:
                # whole grid east of the antimeridian, [0, 360] --> [-180, 180]
                return xmin - FULL_CIRCLE_DEG, xmax - FULL_CIRCLE_DEG
        return xmin, xmax

    def extent(self) -> List[float]:
        """[xmin, ymin, xmax, ymax] in lon/lat."""
        p = self.params
        if self._geographic:
            xmin, xmax = self._wrapped_longitudes()
            return [xmin, p.yll_corner, xmax, p.yur_corner]
        corners = [
            self.projection.to_lon_lat(x, y)
            for x in (p.xll_corner, p.xur_corner)
            for y in (p.yll_corner, p.yur_corner)
        ]
        lons = [c[0] for c in corners]
        lats = [c[1] for c in corners]
        return [min(lons), min(lats), max(lons), max(lats)]

    def get_bounds(self) -> Bounds:
        return Bounds(*self.extent())

    def __repr__(self) -> str:
        p = self.params
        return (f"{type(self).__name__}({p.n_cols} x {p.n_rows}, "
                f"ll=({p.xll_corner}, {p.yll_corner}), cell={p.cell_size.x}x{p.cell_size.y})")

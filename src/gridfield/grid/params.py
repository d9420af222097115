"""
params.py

Immutable grid metadata. ``GridParams`` describes a regular Cartesian raster
(lower-left corner, cell size, counts); ``PolarGridParams`` describes a
range/bearing raster around a center point.

Public classes:
- `CellSize(x, y)` : footprint of one cell, ``CellSize.of(1.0)`` for square cells
- `GridParams` : Cartesian raster geometry
- `PolarGridParams` : polar raster geometry
"""
from dataclasses import dataclass, replace
from typing import Any, Mapping, Optional, Tuple

from gridfield.config import FULL_CIRCLE_DEG


@dataclass(frozen=True)
class CellSize:
    x: float
    y: float

    @classmethod
    def of(cls, size: Any) -> 'CellSize':
        """Coerce a number, (x, y) pair, {'x', 'y'} mapping or CellSize."""
        if isinstance(size, CellSize):
            return size
        if isinstance(size, Mapping):
            return cls(float(size['x']), float(size['y']))
        if isinstance(size, (tuple, list)):
            x, y = size
            return cls(float(x), float(y))
        return cls(float(size), float(size))

    def is_square(self) -> bool:
        return self.x == self.y


@dataclass(frozen=True)
class GridParams:
    """Geometry of a regular raster.

    Row 0 is the northern-most row and column 0 the western-most column, so
    flat value arrays are read x-ascending, y-descending (ASCII-grid order).
    Corners are in the units of ``projection`` (lon/lat degrees when it is
    None or geographic).
    """
    cell_size: CellSize
    n_cols: int
    n_rows: int
    xll_corner: float
    yll_corner: float
    projection: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, 'cell_size', CellSize.of(self.cell_size))
        object.__setattr__(self, 'n_cols', int(self.n_cols))
        object.__setattr__(self, 'n_rows', int(self.n_rows))
        object.__setattr__(self, 'xll_corner', float(self.xll_corner))
        object.__setattr__(self, 'yll_corner', float(self.yll_corner))
        if self.cell_size.x <= 0 or self.cell_size.y <= 0:
            raise ValueError(f"cell size must be positive, got {self.cell_size}")
        if self.n_cols < 1 or self.n_rows < 1:
            raise ValueError(f"grid needs at least one row and column, got {self.n_rows} x {self.n_cols}")

    @property
    def xur_corner(self) -> float:
        return self.xll_corner + self.n_cols * self.cell_size.x

    @property
    def yur_corner(self) -> float:
        return self.yll_corner + self.n_rows * self.cell_size.y

    @property
    def n_cells(self) -> int:
        return self.n_cols * self.n_rows

    @property
    def shape(self) -> Tuple[int, int]:
        """(rows, columns) of the value storage."""
        return self.n_rows, self.n_cols

    def replace(self, **changes) -> 'GridParams':
        return replace(self, **changes)


@dataclass(frozen=True)
class PolarGridParams:
    """Geometry of a range/bearing raster.

    ``x0``/``y0`` is the center in lon/lat. ``r0`` and ``dr`` are in the
    linear units of ``projection``; ``lambda0`` and ``dlambda`` are compass
    bearings in degrees (0 = north, 90 = east).
    """
    x0: float
    y0: float
    r0: float
    dr: float
    n_r_bins: int
    lambda0: float
    dlambda: float
    n_angles: int
    projection: Optional[str] = None
    cell_size: Optional[CellSize] = None

    def __post_init__(self):
        object.__setattr__(self, 'n_r_bins', int(self.n_r_bins))
        object.__setattr__(self, 'n_angles', int(self.n_angles))
        if self.dr <= 0 or self.dlambda <= 0:
            raise ValueError(f"radial and angular steps must be positive, got dr={self.dr} dlambda={self.dlambda}")
        if self.r0 < 0:
            raise ValueError(f"inner radius must not be negative, got {self.r0}")
        if self.n_r_bins < 1 or self.n_angles < 1:
            raise ValueError(f"polar grid needs at least one bin, got {self.n_angles} x {self.n_r_bins}")
        size = self.cell_size if self.cell_size is not None else (self.dr, self.dlambda)
        object.__setattr__(self, 'cell_size', CellSize.of(size))

    @property
    def r_length(self) -> float:
        """Outer radius of the grid."""
        return self.r0 + self.dr * self.n_r_bins

    @property
    def angular_span(self) -> float:
        return self.n_angles * self.dlambda

    @property
    def is_full_circle(self) -> bool:
        return self.angular_span >= FULL_CIRCLE_DEG

    @property
    def n_cells(self) -> int:
        return self.n_r_bins * self.n_angles

    @property
    def shape(self) -> Tuple[int, int]:
        """Rows are bearing bins, columns radial bins."""
        return self.n_angles, self.n_r_bins

    def replace(self, **changes) -> 'PolarGridParams':
        return replace(self, **changes)

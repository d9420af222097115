"""Gridded geophysical fields (scalar and vector) with lon/lat point queries."""
from gridfield.grid import (
    Bounds,
    Cell,
    CellSize,
    GridParams,
    PolarGridParams,
    ScalarGrid,
    ScalarKind,
    ScalarPolarGrid,
    Vector,
    VectorialGrid,
    VectorialPolarGrid,
)

__version__ = '0.1.0'

__all__ = [
    'Bounds',
    'Cell',
    'CellSize',
    'GridParams',
    'PolarGridParams',
    'ScalarGrid',
    'ScalarKind',
    'ScalarPolarGrid',
    'Vector',
    'VectorialGrid',
    'VectorialPolarGrid',
]

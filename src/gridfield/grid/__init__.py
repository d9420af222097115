from gridfield.grid.base import Grid, IndexedGrid, Position
from gridfield.grid.cell import Bounds, Cell, LonLat
from gridfield.grid.params import CellSize, GridParams, PolarGridParams
from gridfield.grid.polar import PolarGrid, ScalarPolarGrid, VectorialPolarGrid
from gridfield.grid.scalar import ScalarGrid
from gridfield.grid.storage import FieldKind, ScalarKind, ScalarStorage, VectorStorage
from gridfield.grid.vector import Vector
from gridfield.grid.vectorial import VectorialGrid

__all__ = [
    'Bounds',
    'Cell',
    'CellSize',
    'FieldKind',
    'Grid',
    'GridParams',
    'IndexedGrid',
    'LonLat',
    'PolarGrid',
    'PolarGridParams',
    'Position',
    'ScalarGrid',
    'ScalarKind',
    'ScalarPolarGrid',
    'ScalarStorage',
    'Vector',
    'VectorStorage',
    'VectorialGrid',
    'VectorialPolarGrid',
]

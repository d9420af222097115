"""File readers producing grids. The grid engine never imports this package."""
from gridfield.io.ascii_grid import ASCIIGridError, parse_ascii_grid, read_ascii_grid, read_vectorial_ascii_grids
from gridfield.io.geotiff import (
    UnsupportedRasterError,
    read_geotiff,
    read_multiband_geotiff,
    read_vectorial_geotiffs,
)

__all__ = [
    'ASCIIGridError',
    'UnsupportedRasterError',
    'parse_ascii_grid',
    'read_ascii_grid',
    'read_geotiff',
    'read_multiband_geotiff',
    'read_vectorial_ascii_grids',
    'read_vectorial_geotiffs',
]

"""
geometry.py

Small geometry helpers: conversions between grid metadata, affine
transforms and pixel (row, col) indices. Affine transforms follow the
rasterio convention (origin at the upper-left pixel corner, negative y
scale) so they can be exchanged with GeoTIFF readers directly.

Public functions:
- `transform_from_params(params)` -> Affine
- `params_from_transform(transform, width, height, projection=None)` -> GridParams
- `pixel_to_geo(transform, rows, cols)` -> (xs, ys) of pixel centers
- `geo_to_pixel(transform, X, Y)` -> (rows, cols) of containing pixels

"""
from typing import Optional, Tuple

import numpy as np
from affine import Affine


def transform_from_params(params) -> Affine:
    """Affine mapping (col, row) pixel corners to native coordinates."""
    cs = params.cell_size
    return Affine(cs.x, 0.0, params.xll_corner, 0.0, -cs.y, params.yur_corner)


def params_from_transform(transform: Affine, width: int, height: int, projection: Optional[str] = None):
    """Grid metadata for a north-up raster described by ``transform``.

    Rotated or sheared transforms are rejected; a positive y scale (south-up
    raster) is accepted and the lower-left corner computed accordingly.
    """
    from gridfield.grid.params import CellSize, GridParams

    if transform.b != 0.0 or transform.d != 0.0:
        raise ValueError(f"rotated rasters are not supported: {transform!r}")
    cell = CellSize(abs(transform.a), abs(transform.e))
    xll = transform.c if transform.a > 0 else transform.c + width * transform.a
    if transform.e < 0:
        yll = transform.f + height * transform.e
    else:
        yll = transform.f
    return GridParams(cell, width, height, xll, yll, projection)


def pixel_to_geo(transform: Affine, rows, cols) -> Tuple[np.ndarray, np.ndarray]:
    """Convert raster pixel indices to the coordinates of the pixel centers.

    Parameters:
    - transform: affine.Affine
    - rows, cols: scalars or array-like of same shape

    Returns: (xs, ys) numpy arrays of the same shape as input (floats for
    scalar input).
    """
    rows_a = np.asarray(rows, dtype=float)
    cols_a = np.asarray(cols, dtype=float)
    # Affine expects (x=col, y=row)
    xs, ys = transform * (cols_a + 0.5, rows_a + 0.5)
    if rows_a.shape == () and cols_a.shape == ():
        return float(xs), float(ys)
    return np.asarray(xs, dtype=float), np.asarray(ys, dtype=float)


def geo_to_pixel(transform: Affine, X, Y) -> Tuple[np.ndarray, np.ndarray]:
    """Convert coordinates to the (rows, cols) of the pixels containing them."""
    inv = ~transform
    X_a = np.asarray(X, dtype=float)
    Y_a = np.asarray(Y, dtype=float)
    c, r = inv * (X_a, Y_a)
    rows = np.floor(r).astype(int)
    cols = np.floor(c).astype(int)
    if X_a.shape == () and Y_a.shape == ():
        return int(rows), int(cols)
    return rows, cols

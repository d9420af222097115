"""
geotiff.py

GeoTIFF readers built on rasterio. A band becomes a `ScalarGrid`, a pair of
bands (two files or one multiband file) a `VectorialGrid`.

The raster CRS is kept as the grid ``projection`` so point queries in
lon/lat are transformed by pyproj; plain EPSG:4326 rasters are treated as
native lon/lat grids. Only north-up rasters with square pixels are
supported.
"""
import logging
import math
import os
from typing import Optional, Sequence, Tuple, Union

import numpy as np
import rasterio

from gridfield.config import PIXEL_SCALE_RTOL
from gridfield.geometry import params_from_transform
from gridfield.grid.params import GridParams
from gridfield.grid.scalar import ScalarGrid
from gridfield.grid.vectorial import VectorialGrid

logger = logging.getLogger(__name__)

PathLike = Union[str, os.PathLike]


class UnsupportedRasterError(ValueError):
    """Raised for rasters the grids cannot represent (rotated, non-square pixels)."""


def _projection_of(crs) -> Optional[str]:
    if crs is None:
        return None
    if crs.to_epsg() == 4326:
        return None
    return crs.to_wkt()


def _params_of(src) -> Tuple[GridParams, bool]:
    """Grid geometry of an open dataset, and whether its rows run south to north."""
    t = src.transform
    if not math.isclose(abs(t.a), abs(t.e), rel_tol=PIXEL_SCALE_RTOL):
        raise UnsupportedRasterError(f"{src.name}: pixels are not square ({abs(t.a)} x {abs(t.e)})")
    try:
        params = params_from_transform(t, src.width, src.height, _projection_of(src.crs))
    except ValueError as exc:
        raise UnsupportedRasterError(f"{src.name}: {exc}") from None
    return params, t.e > 0


def _read_band(src, band: int) -> np.ndarray:
    if not 1 <= band <= src.count:
        raise ValueError(f"{src.name}: band {band} out of range, raster has {src.count} band(s)")
    return src.read(band).astype(np.float64)


def read_geotiff(path: PathLike, band: int = 1) -> ScalarGrid:
    """Scalar grid from one band of a GeoTIFF; NODATA cells become missing."""
    with rasterio.open(path) as src:
        params, south_up = _params_of(src)
        values = _read_band(src, band)
        nodata = src.nodata
    logger.info('loaded %s band %d (%d x %d)', path, band, params.n_cols, params.n_rows)
    return ScalarGrid(params, values, reverse_y=south_up, nodata=nodata)


def read_vectorial_geotiffs(u_path: PathLike, v_path: PathLike, band: int = 1) -> VectorialGrid:
    """Vector grid from two single-component GeoTIFFs."""
    u = read_geotiff(u_path, band)
    v = read_geotiff(v_path, band)
    return VectorialGrid.from_grids(u, v)


def read_multiband_geotiff(path: PathLike, bands: Sequence[int] = (1, 2)) -> VectorialGrid:
    """Vector grid from the u and v bands of one GeoTIFF."""
    u_band, v_band = bands
    with rasterio.open(path) as src:
        params, south_up = _params_of(src)
        us = _read_band(src, u_band)
        vs = _read_band(src, v_band)
        nodata = src.nodata
    logger.info('loaded %s bands %d/%d (%d x %d)', path, u_band, v_band, params.n_cols, params.n_rows)
    return VectorialGrid(params, us, vs, reverse_y=south_up, nodata=nodata)

"""
polar.py

Range/bearing rasters (radar-like sweeps) around a center point.

Storage rows are bearing bins (row 0 starts at ``lambda0``) and columns are
radial bins (column 0 starts at ``r0``). Point queries project lon/lat into
a metric CRS, then use the distance and compass bearing from the center as
indexes. Index clamping is the mirror image of the Cartesian grid: the
bearing index wraps when the sweep covers the full circle, the radial index
always saturates.

Meridian convergence: in a projected CRS grid north differs from true
north away from the central meridian. The offset is measured at the center
through the projection itself, so any metric CRS works (UTM, Lambert, ...).
With the default azimuthal equidistant projection the offset is zero.
"""
import logging
import math
from typing import List, Optional, Tuple

from gridfield.angle_utils import bearing_deg, wrap_360, wrap_deg
from gridfield.config import FULL_CIRCLE_DEG, NORTH_OFFSET_PROBE_DEG
from gridfield.grid.base import IndexedGrid
from gridfield.grid.cell import Bounds
from gridfield.grid.params import CellSize, PolarGridParams
from gridfield.grid.scalar import ScalarValues
from gridfield.grid.storage import FieldStorage
from gridfield.grid.vectorial import VectorValues
from gridfield.projection import Projection, azimuthal_equidistant

logger = logging.getLogger(__name__)


class PolarGrid(IndexedGrid):

    def __init__(self, params: PolarGridParams, storage: FieldStorage, seed: Optional[int] = None):
        if storage.shape != params.shape:
            raise ValueError(f"storage shape {storage.shape} does not match {params.n_angles} x {params.n_r_bins}")
        self.params = params
        if params.projection is None:
            self.projection = Projection(azimuthal_equidistant(params.x0, params.y0))
        else:
            self.projection = Projection(params.projection)
            if self.projection.is_geographic:
                raise ValueError(f"polar grids need a projected (metric) CRS, got {params.projection!r}")
        self.center = self.projection.from_lon_lat(params.x0, params.y0)
        self.north_offset = self._measure_north_offset()
        self.is_continuous = params.is_full_circle
        self._row_period = FULL_CIRCLE_DEG / params.dlambda if self.is_continuous else None
        super().__init__(storage, seed)
        logger.debug('polar grid at (%s, %s): grid north offset %.6f deg', params.x0, params.y0, self.north_offset)

    def _measure_north_offset(self) -> float:
        """Grid bearing of true north at the center, in [-180, 180)."""
        x0, y0 = self.params.x0, self.params.y0
        cx, cy = self.center
        if y0 + NORTH_OFFSET_PROBE_DEG <= 90.0:
            px, py = self.projection.from_lon_lat(x0, y0 + NORTH_OFFSET_PROBE_DEG)
            return wrap_deg(bearing_deg(px - cx, py - cy))
        px, py = self.projection.from_lon_lat(x0, y0 - NORTH_OFFSET_PROBE_DEG)
        return wrap_deg(bearing_deg(cx - px, cy - py))

    @property
    def cell_size(self) -> CellSize:
        return self.params.cell_size

    @property
    def center_lon_lat(self) -> Tuple[float, float]:
        return self.params.x0, self.params.y0

    def _polar(self, lon: float, lat: float) -> Optional[Tuple[float, float]]:
        """(distance, bearing) of a point seen from the center."""
        x, y = self.projection.from_lon_lat(lon, lat)
        if not (math.isfinite(x) and math.isfinite(y)):
            return None
        dx, dy = x - self.center[0], y - self.center[1]
        return math.hypot(dx, dy), wrap_360(bearing_deg(dx, dy) - self.north_offset)

    def distance_from_center(self, lon: float, lat: float) -> Optional[float]:
        polar = self._polar(lon, lat)
        return None if polar is None else polar[0]

    def bearing_from_center(self, lon: float, lat: float) -> Optional[float]:
        """Compass bearing (true north) from the center to the point."""
        polar = self._polar(lon, lat)
        return None if polar is None else polar[1]

    def _polar_contains(self, distance: float, bearing: float) -> bool:
        p = self.params
        if not p.r0 <= distance <= p.r_length:
            return False
        return self.is_continuous or wrap_360(bearing - p.lambda0) <= p.angular_span

    def contains(self, lon: float, lat: float) -> bool:
        polar = self._polar(lon, lat)
        return polar is not None and self._polar_contains(*polar)

    def _cell_indexes(self, lon: float, lat: float) -> Optional[Tuple[int, int]]:
        polar = self._polar(lon, lat)
        if polar is None or not self._polar_contains(*polar):
            return None
        distance, bearing = polar
        p = self.params
        i = int(math.floor((distance - p.r0) / p.dr))
        j = int(math.floor(wrap_360(bearing - p.lambda0) / p.dlambda))
        return int(self._clamp_column_index(i)), int(self._clamp_row_index(j))

    def decimal_indexes(self, lon: float, lat: float) -> Optional[Tuple[float, float]]:
        polar = self._polar(lon, lat)
        if polar is None or not self._polar_contains(*polar):
            return None
        distance, bearing = polar
        p = self.params
        i = (distance - p.r0) / p.dr - 0.5
        j = wrap_360(bearing - p.lambda0) / p.dlambda - 0.5
        return i, j

    def lon_lat_at_indexes(self, i: float, j: float) -> Tuple[float, float]:
        """Lon/lat of the center of radial bin ``i``, bearing bin ``j``."""
        p = self.params
        r = p.r0 + (i + 0.5) * p.dr
        azimuth = math.radians(p.lambda0 + (j + 0.5) * p.dlambda + self.north_offset)
        x = self.center[0] + r * math.sin(azimuth)
        y = self.center[1] + r * math.cos(azimuth)
        return self.projection.to_lon_lat(x, y)

    def extent(self) -> List[float]:
        """[xmin, ymin, xmax, ymax] in projected coordinates."""
        r = self.params.r_length
        cx, cy = self.center
        return [cx - r, cy - r, cx + r, cy + r]

    def ll_extent(self) -> List[float]:
        """[lonmin, latmin, lonmax, latmax] of the projected extent."""
        xmin, ymin, xmax, ymax = self.extent()
        corners = [self.projection.to_lon_lat(x, y) for x in (xmin, xmax) for y in (ymin, ymax)]
        lons = [c[0] for c in corners]
        lats = [c[1] for c in corners]
        return [min(lons), min(lats), max(lons), max(lats)]

    def get_bounds(self) -> Bounds:
        return Bounds(*self.ll_extent())

    def __repr__(self) -> str:
        p = self.params
        return (f"{type(self).__name__}(center=({p.x0}, {p.y0}), {p.n_angles} bearings x "
                f"{p.n_r_bins} ranges, r0={p.r0}, dr={p.dr})")


class ScalarPolarGrid(ScalarValues, PolarGrid):
    """Scalar field on a range/bearing raster."""


class VectorialPolarGrid(VectorValues, PolarGrid):
    """Vector field on a range/bearing raster."""

    scalar_class = ScalarPolarGrid

"""
projection.py

Thin pyproj wrapper converting between a grid's native CRS and geographic
lon/lat. Geographic grids skip pyproj entirely so that point queries on
plain lon/lat rasters stay cheap.

Public:
- `Projection(crs)` : ``to_lon_lat(x, y)`` and ``from_lon_lat(lon, lat)``
- `azimuthal_equidistant(lon0, lat0)` : CRS string centred on a point
"""
import logging
from typing import Optional, Tuple

from pyproj import CRS, Transformer

from gridfield.config import GEOGRAPHIC_CRS

logger = logging.getLogger(__name__)


def azimuthal_equidistant(lon0: float, lat0: float) -> str:
    return f"+proj=aeqd +lat_0={lat0} +lon_0={lon0} +x_0=0 +y_0=0 +datum=WGS84 +units=m +no_defs"


class Projection:
    """Forward (native -> lon/lat) and inverse (lon/lat -> native) transforms."""

    def __init__(self, crs: Optional[str] = None):
        self.crs = CRS.from_user_input(crs if crs is not None else GEOGRAPHIC_CRS)
        self.is_geographic = bool(self.crs.is_geographic)
        if self.is_geographic:
            self._to_ll = None
            self._from_ll = None
        else:
            geographic = CRS.from_user_input(GEOGRAPHIC_CRS)
            self._to_ll = Transformer.from_crs(self.crs, geographic, always_xy=True)
            self._from_ll = Transformer.from_crs(geographic, self.crs, always_xy=True)
            logger.debug('projection %s: transformers ready', self.crs.to_string())

    def to_lon_lat(self, x: float, y: float) -> Tuple[float, float]:
        if self._to_ll is None:
            return x, y
        lon, lat = self._to_ll.transform(x, y)
        return float(lon), float(lat)

    def from_lon_lat(self, lon: float, lat: float) -> Tuple[float, float]:
        if self._from_ll is None:
            return lon, lat
        x, y = self._from_ll.transform(lon, lat)
        return float(x), float(y)

    def __repr__(self) -> str:
        return f"Projection({self.crs.to_string()!r})"

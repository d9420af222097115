# -*- coding: utf-8 -*-

"""
gridfield/config.py

Central place for the constants shared by the grid engine, the projection
layer and the file readers. Keeping them here means the Cartesian grid, the
polar grid and the I/O collaborators agree on the same conventions.

Contents:
---------
1. GEOGRAPHIC_CRS:
   - CRS used for every lon/lat query. Grids without a ``projection`` are
     assumed to be defined directly in this CRS.

2. ASCII_GRID_HEADER:
   - Keywords expected, in order, on the first six lines of an ESRI
     ASCII-grid file.

3. PIXEL_SCALE_RTOL:
   - Relative tolerance when checking that GeoTIFF pixels are square.
     Differences below it are floating point noise from the writer.

4. NORTH_OFFSET_PROBE_DEG:
   - Latitude step used to measure where true north points in a projected
     CRS (meridian convergence) at the center of a polar grid.

5. DEFAULT_FILTER_FIELD:
   - Record key used by ``ScalarGrid.from_records`` when none is given.

Usage:
------
    from gridfield.config import GEOGRAPHIC_CRS, ASCII_GRID_HEADER
"""

# ───────────────────────────────────────────────────────────────────────────────
# 1) Coordinate reference systems
# ───────────────────────────────────────────────────────────────────────────────
GEOGRAPHIC_CRS = "EPSG:4326"

# Longitudes are cyclic with this period (degrees)
FULL_CIRCLE_DEG = 360.0

# ───────────────────────────────────────────────────────────────────────────────
# 2) ASCII-grid header (order matters)
# ───────────────────────────────────────────────────────────────────────────────
ASCII_GRID_HEADER = (
    'NCOLS',
    'NROWS',
    'XLLCORNER',
    'YLLCORNER',
    'CELLSIZE',
    'NODATA_VALUE',
)

# ───────────────────────────────────────────────────────────────────────────────
# 3) GeoTIFF checks
# ───────────────────────────────────────────────────────────────────────────────
PIXEL_SCALE_RTOL = 1e-9

# ───────────────────────────────────────────────────────────────────────────────
# 4) Polar grids
# ───────────────────────────────────────────────────────────────────────────────
NORTH_OFFSET_PROBE_DEG = 1e-4

# ───────────────────────────────────────────────────────────────────────────────
# 5) Record-based construction
# ───────────────────────────────────────────────────────────────────────────────
DEFAULT_FILTER_FIELD = 'c'

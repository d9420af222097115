"""
Inspect and probe gridded field files from the command line.

usage:
    gridfield info sst.asc
    gridfield probe currents.tif -70.5 41.2 --interpolate
    gridfield probe u.tif -70.5 41.2 --v-file v.tif
"""

import argparse
import logging
import sys
from pathlib import Path

from gridfield.io import read_ascii_grid, read_geotiff, read_vectorial_ascii_grids, read_vectorial_geotiffs

logger = logging.getLogger(__name__)

ASCII_SUFFIXES = ('.asc', '.txt')
GEOTIFF_SUFFIXES = ('.tif', '.tiff')


def load_grid(path, v_path=None):
    """Scalar grid for one file, vector grid when a v-component file is given."""
    suffix = Path(path).suffix.lower()
    if suffix in ASCII_SUFFIXES:
        return read_ascii_grid(path) if v_path is None else read_vectorial_ascii_grids(path, v_path)
    if suffix in GEOTIFF_SUFFIXES:
        return read_geotiff(path) if v_path is None else read_vectorial_geotiffs(path, v_path)
    raise ValueError(f"unsupported file type '{suffix}' (expected one of {ASCII_SUFFIXES + GEOTIFF_SUFFIXES})")


def _info(grid) -> str:
    west, south, east, north = grid.extent()
    lines = [
        repr(grid),
        f"extent   : [{west}, {south}, {east}, {north}]",
        f"cells    : {grid.num_cells()} ({grid.n_cols} cols x {grid.n_rows} rows)",
        f"range    : {grid.range}",
        f"continuous: {grid.is_continuous}",
    ]
    return '\n'.join(lines)


def _probe(grid, lon: float, lat: float, interpolate: bool) -> str:
    if not grid.contains(lon, lat):
        return f"({lon}, {lat}) is outside the grid"
    value = grid.interpolated_value_at(lon, lat) if interpolate else grid.value_at(lon, lat)
    if value is None:
        return f"({lon}, {lat}): no value"
    return f"({lon}, {lat}): {value}"


def main(argv=None):
    parser = argparse.ArgumentParser(prog='gridfield', description='Inspect gridded field files')
    parser.add_argument('--verbose', dest='verbose', action='store_true', help='Enable verbose logging')
    sub = parser.add_subparsers(dest='command', required=True)

    info = sub.add_parser('info', help='Print grid geometry and value range')
    info.add_argument('file', help='ASCII grid (.asc) or GeoTIFF (.tif)')
    info.add_argument('--v-file', dest='v_file', default=None, help='v-component file for vector fields')

    probe = sub.add_parser('probe', help='Print the value at a lon/lat point')
    probe.add_argument('file', help='ASCII grid (.asc) or GeoTIFF (.tif)')
    probe.add_argument('lon', type=float)
    probe.add_argument('lat', type=float)
    probe.add_argument('--v-file', dest='v_file', default=None, help='v-component file for vector fields')
    probe.add_argument('--interpolate', action='store_true', help='Bilinear value instead of the cell value')

    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    )

    try:
        grid = load_grid(args.file, args.v_file)
    except (OSError, ValueError) as exc:
        logger.error('cannot load %s: %s', args.file, exc)
        return 1

    if args.command == 'info':
        print(_info(grid))
    else:
        print(_probe(grid, args.lon, args.lat, args.interpolate))
    return 0


if __name__ == '__main__':
    sys.exit(main())

import sys
from pathlib import Path

# make `gridfield` importable from a plain checkout (src layout)
SRC = Path(__file__).parent / 'src'
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))


def pytest_collection_modifyitems(config, items):
    """Deselect GeoTIFF tests when rasterio has no GDAL driver for GTiff.

    Wheels always ship it, but conda or system GDAL builds can be trimmed.
    Everything else is left untouched.
    """
    import rasterio

    with rasterio.Env() as env:
        has_gtiff = 'GTiff' in env.drivers()
    if has_gtiff:
        return

    removed = [item for item in items if 'geotiff' in Path(str(item.fspath)).name]
    if removed:
        config.hook.pytest_deselected(items=removed)
        items[:] = [item for item in items if item not in removed]
        tr = config.pluginmanager.get_plugin('terminalreporter')
        if tr:
            tr.write_sep('-', f'Deselected {len(removed)} GeoTIFF tests (no GTiff driver)')

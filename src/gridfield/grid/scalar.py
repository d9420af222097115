"""Scalar fields: one number per cell (temperature, depth, ...)."""
import logging
from typing import Any, Iterable, Mapping, Optional

import numpy as np

from gridfield.config import DEFAULT_FILTER_FIELD
from gridfield.grid.base import Grid
from gridfield.grid.storage import ScalarStorage

logger = logging.getLogger(__name__)


def _values_from_records(records: Iterable[Mapping[str, Any]], field: str) -> list:
    return [rec.get(field) for rec in records]


class ScalarValues:
    """Scalar construction and update, shared by Cartesian and polar grids.

    ``zs`` is read x-ascending & y-descending (same as ASCIIGrid);
    ``reverse_x`` / ``reverse_y`` re-index sources stored the other way round
    and are kept for later ``update_data`` calls.
    """

    def __init__(self, params, zs: Any = None, *, reverse_x: bool = False, reverse_y: bool = False,
                 nodata: Optional[float] = None, seed: Optional[int] = None):
        self.reverse_x = bool(reverse_x)
        self.reverse_y = bool(reverse_y)
        n_rows, n_cols = params.shape
        if zs is None:
            zs = np.full(n_rows * n_cols, np.nan)
        storage = ScalarStorage.from_flat(zs, n_rows, n_cols, nodata, self.reverse_x, self.reverse_y)
        super().__init__(params, storage, seed=seed)
        logger.debug('%s created (%d x %d)', type(self).__name__, n_cols, n_rows)

    @classmethod
    def from_array(cls, params, values: Any, **kwargs):
        return cls(params, values, **kwargs)

    @classmethod
    def from_records(cls, params, records: Iterable[Mapping[str, Any]], field: str = DEFAULT_FILTER_FIELD, **kwargs):
        """Grid from a sequence of mappings, taking ``field`` from each one."""
        return cls(params, _values_from_records(records, field), **kwargs)

    # alias
    from_data = from_records

    @property
    def zs(self) -> np.ndarray:
        """Values as stored (row 0 north), flattened, NaN where missing."""
        return self.storage.flat()

    def update_data(self, values: Any, nodata: Optional[float] = None) -> None:
        """Replace every value, keeping geometry, orientation flags and filter."""
        storage = ScalarStorage.from_flat(values, self.n_rows, self.n_cols, nodata, self.reverse_x, self.reverse_y)
        self._replace_storage(storage)

    def update_records(self, records: Iterable[Mapping[str, Any]], field: str = DEFAULT_FILTER_FIELD) -> None:
        self.update_data(_values_from_records(records, field))


class ScalarGrid(ScalarValues, Grid):
    """Scalar field on a regular lon/lat raster."""

"""
vectorial.py

Vector fields: a (u, v) pair per cell, e.g. wind or current components.

A cell is missing when either component is missing. The grid ``range`` is
computed over vector magnitudes. Scalar fields (magnitude, direction) are
derived on demand with ``get_scalar_field`` and share the grid geometry.
"""
import logging
from typing import Any, Optional, Union

import numpy as np

from gridfield.grid.base import Grid
from gridfield.grid.scalar import ScalarGrid
from gridfield.grid.storage import ScalarKind, VectorStorage

logger = logging.getLogger(__name__)


class VectorValues:
    """Vector construction, update and scalar derivation, shared by Cartesian and polar grids."""

    # grid class wrapping fields derived by get_scalar_field
    scalar_class = None

    def __init__(self, params, us: Any = None, vs: Any = None, *, reverse_x: bool = False,
                 reverse_y: bool = False, nodata: Optional[float] = None, seed: Optional[int] = None):
        self.reverse_x = bool(reverse_x)
        self.reverse_y = bool(reverse_y)
        n_rows, n_cols = params.shape
        if us is None or vs is None:
            us = vs = np.full(n_rows * n_cols, np.nan)
        storage = VectorStorage.from_flat(us, vs, n_rows, n_cols, nodata, self.reverse_x, self.reverse_y)
        super().__init__(params, storage, seed=seed)
        logger.debug('%s created (%d x %d)', type(self).__name__, n_cols, n_rows)

    @classmethod
    def from_grids(cls, u, v, params=None):
        """Vector field from two scalar grids holding the u and v components.

        No validation at all (nor interpolation) is applied, so u and v must
        be compatible from the source: same cell size, extent and counts.
        """
        if params is None:
            params = u.params
            if u.params != v.params:
                logger.warning('u and v grids differ in geometry (%r vs %r); using u', u.params, v.params)
        return cls(params, u.zs, v.zs)

    @property
    def us(self) -> np.ndarray:
        return self.storage.us.ravel()

    @property
    def vs(self) -> np.ndarray:
        return self.storage.vs.ravel()

    def update_data(self, us: Any, vs: Any, nodata: Optional[float] = None) -> None:
        storage = VectorStorage.from_flat(us, vs, self.n_rows, self.n_cols, nodata, self.reverse_x, self.reverse_y)
        self._replace_storage(storage)

    def get_scalar_field(self, kind: Union[ScalarKind, str]):
        """Derived field: 'magnitude', 'directionTo' or 'directionFrom'."""
        derived = self.storage.derive(kind)
        return self.scalar_class(self.params, derived.flat())


class VectorialGrid(VectorValues, Grid):
    """Vector field on a regular lon/lat raster."""

    scalar_class = ScalarGrid

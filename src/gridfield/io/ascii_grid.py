"""ESRI ASCII-grid reader.

Format: six header lines (``NCOLS``, ``NROWS``, ``XLLCORNER``, ``YLLCORNER``,
``CELLSIZE``, ``NODATA_VALUE``, in that order) followed by ``NCOLS * NROWS``
whitespace separated values, x-ascending & y-descending. That is the order
the grids store, so no re-indexing is needed.
"""
import logging
import os
from pathlib import Path
from typing import Tuple, Union

import numpy as np

from gridfield.config import ASCII_GRID_HEADER
from gridfield.grid.params import CellSize, GridParams
from gridfield.grid.scalar import ScalarGrid
from gridfield.grid.vectorial import VectorialGrid

logger = logging.getLogger(__name__)

PathOrText = Union[str, os.PathLike]


class ASCIIGridError(ValueError):
    """Raised when a text is not a well-formed ASCII grid."""


def _header_value(line: str, keyword: str, line_no: int) -> float:
    parts = line.split()
    if len(parts) != 2 or parts[0].upper() != keyword:
        raise ASCIIGridError(f"Not valid ASCIIGrid: expected '{keyword}' at line '{line.strip()}' [line {line_no}]")
    try:
        return float(parts[1])
    except ValueError:
        raise ASCIIGridError(f"Not valid ASCIIGrid: bad {keyword} value '{parts[1]}' [line {line_no}]") from None


def parse_ascii_grid(text: str, scale_factor: float = 1.0) -> Tuple[GridParams, np.ndarray]:
    """Parse the contents of an ASCII grid.

    Returns the grid geometry and the flat float64 values with NODATA
    already replaced by NaN. Values are multiplied by ``scale_factor``.
    """
    lines = text.splitlines()
    n_header = len(ASCII_GRID_HEADER)
    if len(lines) < n_header:
        raise ASCIIGridError(f"Not valid ASCIIGrid: header needs {n_header} lines, got {len(lines)}")
    ncols, nrows, xll, yll, cellsize, nodata = (
        _header_value(line, keyword, k + 1)
        for k, (line, keyword) in enumerate(zip(lines, ASCII_GRID_HEADER))
    )
    try:
        params = GridParams(CellSize.of(cellsize), int(ncols), int(nrows), xll, yll)
    except ValueError as exc:
        raise ASCIIGridError(f"Not valid ASCIIGrid: {exc}") from None

    tokens = ' '.join(lines[n_header:]).split()
    if len(tokens) != params.n_cells:
        raise ASCIIGridError(
            f"Not valid ASCIIGrid: expected {params.n_cells} values ({params.n_cols} x {params.n_rows}), "
            f"got {len(tokens)}")
    try:
        values = np.array(tokens, dtype=np.float64)
    except ValueError as exc:
        raise ASCIIGridError(f"Not valid ASCIIGrid: {exc}") from None
    values[values == nodata] = np.nan
    if scale_factor != 1.0:
        values *= scale_factor
    return params, values


def _read_text(source: PathOrText) -> str:
    """File contents for a path, the string itself for inline grid text."""
    if isinstance(source, str) and '\n' in source:
        return source
    return Path(source).read_text()


def read_ascii_grid(source: PathOrText, scale_factor: float = 1.0) -> ScalarGrid:
    params, values = parse_ascii_grid(_read_text(source), scale_factor)
    grid = ScalarGrid(params, values)
    if not (isinstance(source, str) and '\n' in source):
        logger.info('loaded ASCII grid %s (%d x %d)', source, params.n_cols, params.n_rows)
    return grid


def read_vectorial_ascii_grids(u_source: PathOrText, v_source: PathOrText,
                               scale_factor: float = 1.0) -> VectorialGrid:
    """Vector field from two ASCII grids holding the u and v components."""
    u = read_ascii_grid(u_source, scale_factor)
    v = read_ascii_grid(v_source, scale_factor)
    return VectorialGrid.from_grids(u, v)

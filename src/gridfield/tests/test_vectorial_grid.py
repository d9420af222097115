import logging
import math

import pytest

from gridfield.grid.params import CellSize, GridParams
from gridfield.grid.scalar import ScalarGrid
from gridfield.grid.storage import FieldKind, ScalarKind
from gridfield.grid.vector import Vector
from gridfield.grid.vectorial import VectorialGrid
from gridfield.tests.fixtures.sample_grids import make_vector_grid


def test_vector_values_and_missing():
    grid = make_vector_grid()
    assert grid.kind is FieldKind.VECTOR
    assert grid.value_at(0.5, 1.5) == Vector(3.0, 4.0)
    assert grid.value_at(1.5, 1.5) == Vector(0.0, 2.0)
    assert grid.value_at(0.5, 0.5) is None
    assert not grid.has_value_at(0.5, 0.5)


def test_range_is_over_magnitudes():
    grid = make_vector_grid()
    low, high = grid.range
    assert low == pytest.approx(math.sqrt(2.0))
    assert high == pytest.approx(5.0)


def test_components_interpolate_independently():
    grid = make_vector_grid()
    mid = grid.interpolated_value_at_indexes(1.0, 0.5)
    assert mid.u == pytest.approx(0.5)
    assert mid.v == pytest.approx(0.5)
    assert grid.interpolated_value_at_indexes(0.0, 0.0) is None
    # the missing south-west cell poisons the grid center
    assert grid.interpolated_value_at(1.0, 1.0) is None


def test_magnitude_field():
    grid = make_vector_grid()
    mags = grid.get_scalar_field('magnitude')
    assert isinstance(mags, ScalarGrid)
    assert mags.params == grid.params
    for cell, vcell in zip(mags.get_cells(), grid.get_cells()):
        if vcell.value is None:
            assert cell.value is None
        else:
            assert cell.value == pytest.approx(vcell.value.magnitude())


def test_magnitude_of_grid_built_from_components():
    params = GridParams(CellSize.of(1.0), 3, 2, 0.0, 0.0)
    u = ScalarGrid(params, [3.0, -1.0, 0.5, None, 6.0, -2.0])
    v = ScalarGrid(params, [4.0, 1.0, -0.5, 1.0, 8.0, 0.0])
    mags = VectorialGrid.from_grids(u, v).get_scalar_field(ScalarKind.MAGNITUDE)
    for lon in (0.5, 1.5, 2.5):
        for lat in (0.5, 1.5):
            u_val, v_val = u.value_at(lon, lat), v.value_at(lon, lat)
            if u_val is None:
                assert mags.value_at(lon, lat) is None
            else:
                assert mags.value_at(lon, lat) == pytest.approx(math.sqrt(u_val ** 2 + v_val ** 2))
    assert mags.value_at(1.5, 1.5) == pytest.approx(math.sqrt(2.0))
    assert mags.value_at(1.5, 0.5) == pytest.approx(10.0)


def test_direction_fields():
    grid = make_vector_grid()
    to = grid.get_scalar_field(ScalarKind.DIRECTION_TO)
    frm = grid.get_scalar_field('directionFrom')
    assert to.value_at(1.5, 1.5) == pytest.approx(0.0)
    assert frm.value_at(1.5, 1.5) == pytest.approx(180.0)
    assert to.value_at(1.5, 0.5) == pytest.approx(135.0)
    assert frm.value_at(1.5, 0.5) == pytest.approx(315.0)
    assert to.value_at(0.5, 0.5) is None


def test_unknown_scalar_kind():
    grid = make_vector_grid()
    with pytest.raises(ValueError):
        grid.get_scalar_field('vorticity')


def test_vector_filter():
    grid = make_vector_grid()
    grid.set_filter(lambda vec: vec.magnitude() > 3.0)
    assert grid.range == (5.0, 5.0)
    assert grid.value_at(1.5, 1.5) is None
    assert grid.value_at(0.5, 1.5) == Vector(3.0, 4.0)


def test_update_data():
    grid = make_vector_grid()
    grid.update_data([1.0, 1.0, 1.0, 1.0], [0.0, 0.0, 0.0, -9.0], nodata=-9.0)
    assert grid.value_at(0.5, 0.5) == Vector(1.0, 0.0)
    assert grid.value_at(1.5, 0.5) is None
    assert grid.range == (1.0, 1.0)
    with pytest.raises(ValueError):
        grid.update_data([1.0], [1.0])


def test_from_grids():
    params = GridParams(CellSize.of(1.0), 2, 1, 0.0, 0.0)
    u = ScalarGrid(params, [1.0, None])
    v = ScalarGrid(params, [2.0, 3.0])
    grid = VectorialGrid.from_grids(u, v)
    assert grid.params == params
    assert grid.value_at(0.5, 0.5) == Vector(1.0, 2.0)
    assert grid.value_at(1.5, 0.5) is None
    assert grid.us[0] == 1.0
    assert grid.vs[0] == 2.0
    assert math.isnan(grid.us[1]) and math.isnan(grid.vs[1])


def test_from_grids_warns_on_geometry_mismatch(caplog):
    u = ScalarGrid(GridParams(CellSize.of(1.0), 2, 1, 0.0, 0.0), [1.0, 2.0])
    v = ScalarGrid(GridParams(CellSize.of(1.0), 2, 1, 5.0, 0.0), [3.0, 4.0])
    with caplog.at_level(logging.WARNING, logger='gridfield.grid.vectorial'):
        grid = VectorialGrid.from_grids(u, v)
    assert 'differ in geometry' in caplog.text
    # u geometry wins, no reconciliation
    assert grid.params == u.params
    assert grid.value_at(0.5, 0.5) == Vector(1.0, 3.0)

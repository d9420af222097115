import pytest

from gridfield.grid.base import Position
from gridfield.grid.cell import Bounds
from gridfield.grid.params import CellSize, GridParams
from gridfield.grid.scalar import ScalarGrid
from gridfield.tests.fixtures.sample_grids import make_square_grid


def test_value_at_cell_containing_point():
    grid = make_square_grid()
    assert grid.value_at(0.5, 1.5) == 10.0
    assert grid.value_at(1.5, 1.5) == 20.0
    assert grid.value_at(0.5, 0.5) == 30.0
    assert grid.value_at(1.5, 0.5) == 40.0


def test_interpolated_value_at_grid_center():
    grid = make_square_grid()
    assert grid.interpolated_value_at(1.0, 1.0) == pytest.approx(25.0)


def test_interpolated_value_at_cell_center_is_cell_value():
    grid = make_square_grid()
    assert grid.interpolated_value_at(0.5, 1.5) == pytest.approx(10.0)
    assert grid.interpolated_value_at(1.5, 0.5) == pytest.approx(40.0)


def test_integer_indexes_interpolate_to_raw_values():
    grid = make_square_grid()
    for i in range(grid.n_cols):
        for j in range(grid.n_rows):
            assert grid.interpolated_value_at_indexes(i, j) == grid.value_at_indexes(i, j)


def test_interpolated_value_at_indexes_fractional_and_saturated():
    grid = make_square_grid()
    assert grid.interpolated_value_at_indexes(0.5, 0.0) == pytest.approx(15.0)
    assert grid.interpolated_value_at_indexes(0.0, 0.5) == pytest.approx(20.0)
    # non-cyclic axes saturate at the edge
    assert grid.interpolated_value_at_indexes(-3.0, 0.0) == pytest.approx(10.0)
    assert grid.interpolated_value_at_indexes(7.0, 7.0) == pytest.approx(40.0)
    assert grid.interpolated_value_at_indexes(float('nan'), 0.0) is None


def test_outside_points_have_no_value():
    grid = make_square_grid()
    assert not grid.contains(3.0, 1.0)
    assert grid.not_contains(1.0, 2.5)
    assert grid.value_at(3.0, 1.0) is None
    assert grid.interpolated_value_at(1.0, -0.1) is None
    assert not grid.has_value_at(-0.1, 1.0)


def test_edges_are_inside():
    grid = make_square_grid()
    assert grid.contains(0.0, 0.0)
    assert grid.contains(2.0, 2.0)
    assert grid.value_at(2.0, 2.0) == 20.0


def test_value_at_indexes_out_of_range():
    grid = make_square_grid()
    with pytest.raises(IndexError):
        grid.value_at_indexes(2, 0)
    with pytest.raises(IndexError):
        grid.value_at_indexes(0, -1)


def test_missing_values_propagate():
    params = GridParams(CellSize.of(1.0), 2, 2, 0.0, 0.0)
    grid = ScalarGrid(params, [10.0, None, 30.0, 40.0])
    assert grid.value_at(1.5, 1.5) is None
    assert not grid.has_value_at(1.5, 1.5)
    assert grid.interpolated_value_at(1.0, 1.0) is None
    # a cell center whose neighbours are all present still interpolates
    assert grid.interpolated_value_at(0.5, 0.5) == pytest.approx(30.0)
    assert grid.range == (10.0, 40.0)


def test_empty_grid():
    params = GridParams(CellSize.of(1.0), 3, 2, 0.0, 0.0)
    grid = ScalarGrid(params)
    assert grid.range is None
    assert grid.value_at(0.5, 0.5) is None
    assert len(grid.get_cells()) == 6


def test_reverse_y_reads_rows_south_first():
    params = GridParams(CellSize.of(1.0), 2, 2, 0.0, 0.0)
    grid = ScalarGrid(params, [30.0, 40.0, 10.0, 20.0], reverse_y=True)
    assert grid.value_at(0.5, 1.5) == 10.0
    grid.update_data([3.0, 4.0, 1.0, 2.0])
    assert grid.value_at(0.5, 1.5) == 1.0


def test_reverse_x_reads_columns_east_first():
    params = GridParams(CellSize.of(1.0), 2, 2, 0.0, 0.0)
    grid = ScalarGrid(params, [20.0, 10.0, 40.0, 30.0], reverse_x=True)
    assert grid.value_at(0.5, 1.5) == 10.0


def test_filter_changes_range_and_queries():
    grid = make_square_grid()
    version = grid.version
    grid.set_filter(lambda z: z > 15.0)
    assert grid.range == (20.0, 40.0)
    assert grid.value_at(0.5, 1.5) is None
    assert grid.value_at(1.5, 1.5) == 20.0
    assert grid.version == version + 1
    grid.set_filter(None)
    assert grid.range == (10.0, 40.0)
    assert grid.value_at(0.5, 1.5) == 10.0


def test_filter_rejecting_everything():
    grid = make_square_grid()
    grid.set_filter(lambda z: False)
    assert grid.range is None
    assert not grid.has_value_at(0.5, 0.5)


def test_filter_never_sees_missing_values():
    params = GridParams(CellSize.of(1.0), 2, 2, 0.0, 0.0)
    grid = ScalarGrid(params, [None, 2.0, None, 4.0])
    seen = []

    def accept(z):
        seen.append(z)
        return True

    grid.set_filter(accept)
    grid.value_at(0.5, 1.5)
    grid.value_at(1.5, 1.5)
    assert None not in seen
    assert grid.range == (2.0, 4.0)


def test_update_data_keeps_filter():
    grid = make_square_grid()
    grid.set_filter(lambda z: z >= 2.0)
    grid.update_data([1.0, 2.0, 3.0, 4.0])
    assert grid.range == (2.0, 4.0)
    assert grid.value_at(0.5, 1.5) is None
    assert grid.value_at(1.5, 0.5) == 4.0


def test_update_data_nodata_and_length_check():
    grid = make_square_grid()
    grid.update_data([1.0, -1.0, 3.0, 4.0], nodata=-1.0)
    assert grid.value_at(1.5, 1.5) is None
    with pytest.raises(ValueError):
        grid.update_data([1.0, 2.0])
    # failed update leaves the grid untouched
    assert grid.value_at(0.5, 1.5) == 1.0


def test_construction_length_check():
    params = GridParams(CellSize.of(1.0), 2, 2, 0.0, 0.0)
    with pytest.raises(ValueError):
        ScalarGrid(params, [1.0, 2.0, 3.0])


def test_from_records():
    params = GridParams(CellSize.of(1.0), 2, 1, 0.0, 0.0)
    grid = ScalarGrid.from_records(params, [{'c': 1.5}, {'c': None}])
    assert grid.value_at(0.5, 0.5) == 1.5
    assert grid.value_at(1.5, 0.5) is None
    grid.update_records([{'t': 7.0}, {'t': 8.0}], field='t')
    assert grid.zs.tolist() == [7.0, 8.0]
    assert ScalarGrid.from_data(params, [{'c': 1.0}, {'c': 2.0}]).range == (1.0, 2.0)


def test_extent_and_bounds():
    grid = make_square_grid()
    assert grid.extent() == [0.0, 0.0, 2.0, 2.0]
    assert grid.get_bounds() == Bounds(0.0, 0.0, 2.0, 2.0)
    assert grid.num_cells() == 4
    assert (grid.width, grid.height) == (2, 2)


def test_lon_lat_at_indexes_is_cell_center():
    grid = make_square_grid()
    assert grid.lon_lat_at_indexes(0, 0) == (0.5, 1.5)
    assert grid.lon_lat_at_indexes(1, 1) == (1.5, 0.5)
    assert grid.decimal_indexes(0.5, 1.5) == (0.0, 0.0)


def test_get_cells_order_and_stride():
    grid = make_square_grid()
    cells = grid.get_cells()
    assert [c.value for c in cells] == [10.0, 20.0, 30.0, 40.0]
    assert cells[0].center == (0.5, 1.5)
    assert cells[0].size == CellSize(1.0, 1.0)
    assert cells[0].get_bounds() == Bounds(0.0, 1.0, 1.0, 2.0)
    assert [c.value for c in grid.get_cells(2)] == [10.0]
    with pytest.raises(ValueError):
        grid.get_cells(0)


def test_random_position_inside_and_seeded():
    params = GridParams(CellSize.of(1.0), 2, 2, 0.0, 0.0)
    a = ScalarGrid(params, [1.0, 2.0, 3.0, 4.0], seed=42)
    b = ScalarGrid(params, [1.0, 2.0, 3.0, 4.0], seed=42)
    for _ in range(50):
        pa = a.random_position()
        pb = b.random_position()
        assert pa == pb
        assert a.contains(pa.x, pa.y)


def test_random_position_writes_target():
    grid = make_square_grid()
    target = Position(0.0, 0.0)
    pos = grid.random_position(target)
    assert (target.x, target.y) == (pos.x, pos.y)


def test_transform_matches_params():
    grid = make_square_grid()
    t = grid.transform
    assert (t.a, t.e, t.c, t.f) == (1.0, -1.0, 0.0, 2.0)

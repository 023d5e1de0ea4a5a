"""
Unit tests for regularity queries, bounding volumes and global operations.
"""
import logging

import numpy as np
import pytest

from emgrid.model.errors import InvalidGridError
from emgrid.model.geometry_primitives import Box
from emgrid.model.grid import Grid


@pytest.fixture
def offset_grid():
    """x = [0, 1, 2] from index 1, y = [10, 12, 14, 16] from index 2."""
    return Grid.from_steps([[1.0, 1.0], [2.0, 2.0, 2.0]], offset=[1, 2], origin=[0.0, 10.0])


def test_regularity():
    irregular = Grid.from_steps([[1.0, 1.0, 1.0, 2.0]])
    regular = Grid.from_steps([[1.0, 1.0, 1.0, 1.0]])

    assert not irregular.is_regular(0)
    assert not irregular.is_regular()
    assert regular.is_regular(0)
    assert regular.is_regular()


def test_regularity_within_tolerance():
    """Step variations below the tolerance do not break regularity."""
    grid = Grid.from_steps([[1.0, 1.005, 0.995]])

    assert grid.is_regular()


def test_cartesian(grid_2d, irregular_grid):
    assert grid_2d.is_cartesian()
    assert not irregular_grid.is_cartesian()

    # Regular on every axis but with different steps
    stretched = Grid.from_step(Box([0.0, 0.0], [4.0, 4.0]), [1.0, 2.0])
    assert stretched.is_regular()
    assert not stretched.is_cartesian()


def test_is_cell(grid_2d):
    assert grid_2d.is_cell([1.0, 2.0])
    assert grid_2d.is_cell([1.004, 2.0])
    assert not grid_2d.is_cell([1.5, 2.0])
    assert grid_2d.are_cells([[0.0, 0.0], [4.0, 4.0], [2.0, 3.0]])
    assert not grid_2d.are_cells([[0.0, 0.0], [2.5, 3.0]])


def test_minimum_space_step():
    grid = Grid.from_steps([[0.5, 0.25, 1.0], [1.0]])

    assert grid.get_minimum_space_step() == 0.25


def test_scaling_factor(grid_1d):
    before = grid_1d.copy()
    grid_1d.apply_scaling_factor(1.0)
    assert grid_1d == before

    grid_1d.apply_scaling_factor(1e-3)
    assert np.allclose(grid_1d.get_pos(0), np.arange(11) * 1e-3)
    assert grid_1d.get_offset().tolist() == [0]


def test_scaling_factor_must_be_positive(grid_1d):
    with pytest.raises(InvalidGridError):
        grid_1d.apply_scaling_factor(0.0)
    with pytest.raises(InvalidGridError):
        grid_1d.apply_scaling_factor(-2.0)


def test_full_domain_boxes(offset_grid):
    cell_box = offset_grid.get_full_domain_bounding_cell_box()

    assert cell_box == Box([1, 2], [3, 5])
    assert offset_grid.get_full_domain_bounding_box() == Box([0.0, 10.0], [2.0, 16.0])


def test_vertex_access_uses_global_indices(offset_grid):
    assert np.allclose(offset_grid.get_vertex([2, 3]), [1.0, 12.0])
    assert offset_grid.get_pos_at(1, 2) == 10.0
    assert offset_grid.get_pos_at(0, 3) == 2.0

    with pytest.raises(IndexError):
        offset_grid.get_pos_at(1, 6)
    with pytest.raises(IndexError):
        offset_grid.get_vertex([0, 2])


def test_step_at_uses_local_index(offset_grid):
    assert offset_grid.get_step_at(1, 0) == 2.0

    with pytest.raises(IndexError):
        offset_grid.get_step_at(0, 2)


def test_all_positions_order(grid_2d):
    points = grid_2d.get_all_positions()

    assert points.shape == (25, 2)
    assert np.allclose(points[0], [0.0, 0.0])
    assert np.allclose(points[1], [0.0, 1.0])
    assert np.allclose(points[-1], [4.0, 4.0])


def test_log_info(caplog, offset_grid):
    with caplog.at_level(logging.INFO, logger="emgrid"):
        offset_grid.log_info()

    assert "-- Cartesian Grid<2> --" in caplog.text
    assert "Offset: [1, 2]" in caplog.text
    assert "Dims: [2, 3]" in caplog.text
    assert "Min val: [0.0, 10.0]" in caplog.text
    assert "Max val: [2.0, 16.0]" in caplog.text


def test_copy_is_independent(grid_1d):
    clone = grid_1d.copy()
    clone.apply_scaling_factor(2.0)

    assert clone != grid_1d
    assert grid_1d.get_pos(0)[-1] == 10.0
    assert clone.get_pos(0)[-1] == 20.0

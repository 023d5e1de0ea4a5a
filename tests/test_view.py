"""
Unit tests for plotting and PyVista conversion.
"""
import matplotlib.pyplot as plt
import numpy as np

from emgrid.model.geometry_primitives import Axis, Box
from emgrid.view.plotting import plot_grid
from emgrid.view.vtk_utils import VtkUtils


def test_plot_grid_2d(grid_2d):
    fig, ax = plot_grid(grid_2d, show=False)

    # One collection of vertical and one of horizontal lines
    assert len(ax.collections) == 2
    assert ax.get_xlabel() == "x"
    assert ax.get_ylabel() == "y"
    plt.close(fig)


def test_plot_grid_plane(grid_3d):
    fig, ax = plot_grid(grid_3d, plane=(Axis.Y, Axis.Z), show=False)

    assert ax.get_xlabel() == "y"
    assert ax.get_ylabel() == "z"
    plt.close(fig)


def test_plot_grid_1d_into_existing_axes(grid_1d):
    fig, ax = plt.subplots()

    returned_fig, returned_ax = plot_grid(grid_1d, ax=ax, show=False)

    assert returned_ax is ax
    assert returned_fig is fig
    assert len(ax.collections) == 1
    plt.close(fig)


def test_rectilinear_grid_3d(grid_3d):
    mesh = VtkUtils.to_rectilinear_grid(grid_3d)

    assert tuple(mesh.dimensions) == (11, 11, 11)
    assert mesh.n_cells == 1000


def test_rectilinear_grid_2d(grid_2d):
    mesh = VtkUtils.to_rectilinear_grid(grid_2d)

    assert tuple(mesh.dimensions) == (5, 5, 1)
    assert np.allclose(mesh.z, [0.0])


def test_cell_centers_to_polydata(grid_2d):
    cloud = VtkUtils.cell_centers_to_polydata(grid_2d, Box([1.0, 1.0], [3.0, 2.0]))

    assert cloud.n_points == 2
    assert np.allclose(cloud.points, [[1.5, 1.5, 0.0], [2.5, 1.5, 0.0]])


def test_cell_centers_to_polydata_empty(grid_2d):
    cloud = VtkUtils.cell_centers_to_polydata(grid_2d, Box([1.2, 1.0], [1.8, 3.0]))

    assert cloud.n_points == 0

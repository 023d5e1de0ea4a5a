"""
Grid Plotting
Draws the grid lines of one axis-aligned plane with matplotlib.
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Optional

import matplotlib.pyplot as plt

from emgrid.model.geometry_primitives import Axis

if TYPE_CHECKING:
    from matplotlib.axes import Axes
    from matplotlib.figure import Figure

    from emgrid.model.grid import Grid


def plot_grid(
    grid: Grid,
    plane: tuple[Axis, Axis] = (Axis.X, Axis.Y),
    ax: Optional[Axes] = None,
    show: bool = True,
) -> tuple[Figure, Axes]:
    """
    Plot the grid lines of two axes.

    A 1D grid is drawn as vertical lines along the x axis.

    Args:
        grid: Grid to draw.
        plane: Horizontal and vertical axis of the plot.
        ax: Existing axes to draw into. A new figure is created when omitted.
        show: Call ``plt.show()`` after drawing.

    Returns:
        The matplotlib figure and axes.
    """
    if ax is None:
        fig, ax = plt.subplots(figsize=(7, 5), constrained_layout=True)
    else:
        fig = ax.figure

    h_axis = plane[0]
    xs = grid.get_pos(h_axis)
    if grid.dimension > 1:
        v_axis = plane[1]
        ys = grid.get_pos(v_axis)
        ax.vlines(xs, ys[0], ys[-1], colors='black', lw=0.5)
        ax.hlines(ys, xs[0], xs[-1], colors='black', lw=0.5)
        ax.set_ylabel(Axis(v_axis).name.lower())
        ax.set_aspect('equal')
    else:
        ax.vlines(xs, 0.0, 1.0, colors='black', lw=0.5)
        ax.set_yticks([])
    ax.set_xlabel(Axis(h_axis).name.lower())

    cells = grid.get_num_cells().tolist()
    ax.set_title(f"Grid {cells} cells, min step {grid.get_minimum_space_step():.3g}")

    if show:
        plt.show()
    return fig, ax

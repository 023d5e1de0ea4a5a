"""
VTK Utilities
Conversion of grids to PyVista datasets for inspection and export.
"""
import logging

import numpy as np
import pyvista as pv

from emgrid.model.geometry_primitives import Box
from emgrid.model.grid import Grid

logger = logging.getLogger(__name__)


class VtkUtils:
    @staticmethod
    def to_rectilinear_grid(grid: Grid) -> pv.RectilinearGrid:
        """
        Converts the grid to a PyVista RectilinearGrid.

        Axes missing in 1D and 2D grids get a single zero coordinate.
        """
        coords = [grid.get_pos(d) for d in range(grid.dimension)]
        while len(coords) < 3:
            coords.append(np.zeros(1))
        # Zero-thickness axes hold a duplicated coordinate that VTK rejects
        coords = [np.unique(c) for c in coords]

        res = pv.RectilinearGrid(*coords)
        logger.debug(f"Converted grid to RectilinearGrid with {res.n_cells} cells.")
        return res

    @staticmethod
    def cell_centers_to_polydata(grid: Grid, box: Box) -> pv.PolyData:
        """
        Point cloud of the centres of the cells inside a box.

        Args:
            grid: Source grid.
            box: Region to sample.

        Returns:
            PolyData with one vertex per cell centre (z = 0 for 2D grids).
        """
        centers = grid.get_center_of_cells_inside(box)
        if centers.shape[0] == 0:
            return pv.PolyData()
        points = np.zeros((centers.shape[0], 3), dtype=np.float64)
        points[:, :grid.dimension] = centers
        return pv.PolyData(points)

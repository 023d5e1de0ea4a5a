"""
emgrid
======
Non-uniform Cartesian grid engine of an electromagnetic solver front end.

The grid discretizes a bounding volume into axis-aligned cells with
independent, possibly irregular spacing per axis, locates points on it under
a relative tolerance, and pads its bounds with smoothly varying cells.
"""
from emgrid.model.errors import GridError, InvalidGridError, NonConvergenceError
from emgrid.model.fractional import FractionalCell
from emgrid.model.geometry_primitives import Axis, Bound, Box
from emgrid.model.grid import CellPair, CellPairs, Grid

__version__ = "0.1.0"

__all__ = [
    "Axis",
    "Bound",
    "Box",
    "CellPair",
    "CellPairs",
    "FractionalCell",
    "Grid",
    "GridError",
    "InvalidGridError",
    "NonConvergenceError",
]

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    import numpy.typing as npt

    from emgrid.model.grid import Grid


@dataclass(eq=False)
class FractionalCell:
    """
    Fractional address of a point: integer cell plus the position inside it.

    Attributes:
        cell: Global cell indices, one per axis.
        fraction: Normalized position inside each cell, in [0, 1) for inner points.
    """
    cell: npt.NDArray[np.int64]
    fraction: npt.NDArray[np.float64]

    def __post_init__(self) -> None:
        self.cell = np.asarray(self.cell, dtype=np.int64)
        self.fraction = np.asarray(self.fraction, dtype=np.float64)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FractionalCell):
            return NotImplemented
        return bool(np.array_equal(self.cell, other.cell) and np.array_equal(self.fraction, other.fraction))

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(cell={self.cell.tolist()}, fraction={self.fraction.tolist()})"

    def is_vertex(self) -> bool:
        """True when the address falls exactly on a grid vertex."""
        return bool(np.all(self.fraction == 0.0))

    def to_position(self, grid: Grid) -> npt.NDArray[np.float64]:
        """
        Convert the address back to real coordinates on the given grid.

        Args:
            grid: Grid the address refers to.

        Returns:
            Real coordinates, one per axis.
        """
        res = np.empty(grid.dimension, dtype=np.float64)
        offset = grid.get_offset()
        for d in range(grid.dimension):
            local = int(self.cell[d] - offset[d])
            pos = grid.get_pos(d)
            if local >= len(pos) - 1:
                # Address of the last vertex has no cell to the right
                res[d] = pos[-1]
            else:
                res[d] = pos[local] + self.fraction[d] * (pos[local + 1] - pos[local])
        return res

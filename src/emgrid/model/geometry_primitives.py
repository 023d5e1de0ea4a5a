"""
Geometric Primitives for the Cartesian grid.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    import numpy.typing as npt


class Axis(IntEnum):
    X = 0
    Y = 1
    Z = 2


class Bound(IntEnum):
    LOWER = 0
    UPPER = 1


@dataclass(eq=False)
class Box:
    """
    An axis-aligned box given by its minimum and maximum corners.

    Works for real coordinates and for integer cell indices alike; the dtype
    of the corners is kept (integers stay integers).
    """
    min: npt.NDArray
    max: npt.NDArray

    def __post_init__(self) -> None:
        self.min = np.atleast_1d(np.asarray(self.min))
        self.max = np.atleast_1d(np.asarray(self.max))
        if self.min.ndim != 1 or self.min.shape != self.max.shape:
            raise ValueError(f"Box corners must be vectors of equal length, got {self.min.shape} and {self.max.shape}.")
        if np.any(self.min > self.max):
            raise ValueError(f"Box minimum {self.min} exceeds maximum {self.max}.")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Box):
            return NotImplemented
        return bool(np.array_equal(self.min, other.min) and np.array_equal(self.max, other.max))

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(min={self.min.tolist()}, max={self.max.tolist()})"

    @property
    def dimension(self) -> int:
        return int(self.min.shape[0])

    @property
    def length(self) -> npt.NDArray:
        """Extent of the box along each axis."""
        return self.max - self.min

    @property
    def center(self) -> npt.NDArray[np.float64]:
        return 0.5 * (self.min + self.max)

    def is_integer(self) -> bool:
        return bool(np.issubdtype(self.min.dtype, np.integer))

    def contains(self, point: npt.ArrayLike) -> bool:
        """Closed containment test of a point."""
        p = np.asarray(point)
        return bool(np.all(p >= self.min) and np.all(p <= self.max))

    def intersects(self, other: Box) -> bool:
        return bool(np.all(self.min <= other.max) and np.all(other.min <= self.max))

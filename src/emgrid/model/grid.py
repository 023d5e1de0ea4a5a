"""
Non-uniform Cartesian Grid
==========================
The lattice of axis-aligned cells a field solver is discretized on.

Why is this file needed?
------------------------
1. Construction: It builds per-axis vertex positions from a bounding box and
   a step, a cell count, or explicit step sequences.
2. Lookup: It maps real coordinates to (cell, fraction) pairs in the global
   index space, and cells back to coordinates, under a relative tolerance.
3. Padding: It extends axis bounds outward with smoothly varying cells.

Positions are the single source of truth; steps are always recomputed from
them. Query methods never mutate state, so a finished grid can be shared
between threads. Only ``set_pos``, ``set_additional_steps`` (through
``enlarge``/``enlarge_bound``) and ``apply_scaling_factor`` modify a grid.

Classes:
    CellPair: Lookup result along one axis.
    CellPairs: Lookup result for a point.
    Grid: The grid itself.
"""
from __future__ import annotations

import copy
import logging
from typing import TYPE_CHECKING, NamedTuple, Optional, Sequence

import numpy as np

from emgrid.config import APPROX_SNAP_TOLERANCE, DEFAULT_TOLERANCE
from emgrid.math_utils import (
    safe_ratio,
    tolerant_equal,
    tolerant_greater,
    tolerant_less,
    tolerant_not_equal,
)
from emgrid.model.errors import InvalidGridError
from emgrid.model.fractional import FractionalCell
from emgrid.model.geometry_primitives import Bound, Box
from emgrid.model.padding import geometric_padding_steps, uniform_padding_steps

if TYPE_CHECKING:
    import numpy.typing as npt

logger = logging.getLogger(__name__)


class CellPair(NamedTuple):
    """Cell index (global) and fractional offset of a coordinate on one axis."""
    cell: int
    distance: float
    out_of_range: bool = False


class CellPairs(NamedTuple):
    """Per-axis cell indices and fractional offsets of a point."""
    cells: npt.NDArray[np.int64]
    distances: npt.NDArray[np.float64]
    out_of_range: bool = False


class Grid:
    """
    Rectilinear grid with independent, possibly irregular spacing per axis.
    """
    def __init__(
        self,
        positions: Sequence[npt.ArrayLike],
        offset: Optional[npt.ArrayLike] = None,
        tolerance: float = DEFAULT_TOLERANCE,
    ) -> None:
        """
        Initialize the grid from explicit vertex positions.

        Args:
            positions: One sequence of vertex coordinates per axis (1 to 3 axes).
            offset: Global index of the first vertex of each axis. Zero by default.
            tolerance: Relative tolerance of every position comparison.

        Raises:
            InvalidGridError: If the positions cannot form a grid.
        """
        if not 1 <= len(positions) <= 3:
            raise InvalidGridError(f"Grid dimension must be 1, 2 or 3, got {len(positions)}.")
        if tolerance <= 0.0:
            raise InvalidGridError(f"Grid tolerance must be positive, got {tolerance}.")
        self._dimension = len(positions)
        self._tolerance = float(tolerance)
        self._pos: list[npt.NDArray[np.float64]] = []
        self._offset = np.zeros(self._dimension, dtype=np.int64)
        self.set_pos(positions, offset)

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------
    @classmethod
    def from_step(cls, box: Box, step: npt.ArrayLike, tolerance: float = DEFAULT_TOLERANCE) -> Grid:
        """
        Build a grid covering a box with a target step size per axis.

        The cell count is ``ceil(length / step)``. A zero step or a zero
        length collapses the axis to a single zero-thickness cell, so the
        grid never reaches past the box.

        Args:
            box: Bounding box of the domain.
            step: Desired step length per axis.
            tolerance: Relative tolerance of the grid.

        Returns:
            The new grid, with zero offset.
        """
        step = np.broadcast_to(np.asarray(step, dtype=np.float64), box.min.shape)
        origin = box.min.astype(np.float64)
        length = box.length.astype(np.float64)

        positions = []
        for d in range(box.dimension):
            if step[d] == 0.0 or length[d] == 0.0:
                positions.append(np.array([origin[d], origin[d]]))
                continue
            n_cells = max(int(np.ceil(length[d] / step[d])), 1)
            if tolerant_greater(length[d], n_cells * step[d], step[d], tolerance):
                n_cells += 1
            positions.append(origin[d] + np.arange(n_cells + 1) * step[d])

        logger.debug(f"Grid from step {step.tolist()}: {[len(p) - 1 for p in positions]} cells.")
        return cls(positions, tolerance=tolerance)

    @classmethod
    def from_num_cells(cls, box: Box, num_cells: npt.ArrayLike, tolerance: float = DEFAULT_TOLERANCE) -> Grid:
        """
        Build a grid dividing a box uniformly into a fixed number of cells per axis.

        Raises:
            InvalidGridError: If any cell count is below one.
        """
        num_cells = np.broadcast_to(np.asarray(num_cells, dtype=np.int64), box.min.shape)
        if np.any(num_cells < 1):
            raise InvalidGridError(f"Cell counts must be at least 1, got {num_cells.tolist()}.")
        origin = box.min.astype(np.float64)
        step = box.length.astype(np.float64) / num_cells

        positions = [origin[d] + np.arange(num_cells[d] + 1) * step[d] for d in range(box.dimension)]
        return cls(positions, tolerance=tolerance)

    @classmethod
    def from_steps(
        cls,
        steps: Sequence[npt.ArrayLike],
        offset: Optional[npt.ArrayLike] = None,
        origin: Optional[npt.ArrayLike] = None,
        tolerance: float = DEFAULT_TOLERANCE,
    ) -> Grid:
        """
        Build a non-uniform grid from explicit step sequences.

        Args:
            steps: Step lengths per axis.
            offset: Global index of the first vertex per axis.
            origin: Coordinate of the first vertex per axis. Zero by default.
            tolerance: Relative tolerance of the grid.

        Returns:
            Grid whose positions are the running sums of the steps from ``origin``.
        """
        if origin is None:
            origin = np.zeros(len(steps))
        origin = np.broadcast_to(np.asarray(origin, dtype=np.float64), (len(steps),))

        positions = []
        for d, axis_steps in enumerate(steps):
            axis_steps = np.asarray(axis_steps, dtype=np.float64).ravel()
            positions.append(origin[d] + np.concatenate(([0.0], np.cumsum(axis_steps))))
        return cls(positions, offset=offset, tolerance=tolerance)

    def set_pos(self, positions: Sequence[npt.ArrayLike], offset: Optional[npt.ArrayLike] = None) -> None:
        """
        Replace the positions of every axis, and optionally the offset.

        A single position on an axis is duplicated, giving a zero-thickness axis.

        Raises:
            InvalidGridError: If an axis is empty, decreasing or not finite, or
                the number of axes does not match the grid dimension. Nothing is
                modified in that case.
        """
        if len(positions) != self._dimension:
            raise InvalidGridError(f"Expected positions for {self._dimension} axes, got {len(positions)}.")

        new_pos = []
        for d, axis_pos in enumerate(positions):
            arr = np.array(axis_pos, dtype=np.float64).ravel()
            if arr.size == 0:
                raise InvalidGridError(f"Grid positions must contain at least one value (axis {d}).")
            if not np.all(np.isfinite(arr)):
                raise InvalidGridError(f"Grid positions must be finite (axis {d}).")
            if np.any(np.diff(arr) < 0.0):
                raise InvalidGridError(f"Grid positions must be increasing (axis {d}).")
            if arr.size == 1:
                arr = np.repeat(arr, 2)
            new_pos.append(arr)

        new_offset = self._offset if offset is None else self._as_index_vector(offset)

        self._pos = new_pos
        self._offset = new_offset.copy()

    def set_additional_steps(self, axis: int, bound: Bound, steps: npt.ArrayLike) -> None:
        """
        Add cells beyond one bound of an axis.

        Args:
            axis: Axis to extend.
            bound: Bound.UPPER appends, Bound.LOWER prepends.
            steps: Widths of the new cells, first one adjacent to the current bound.
        """
        steps = np.abs(np.asarray(steps, dtype=np.float64).ravel())
        if steps.size == 0:
            return
        pos = self._pos[axis]
        if Bound(bound) == Bound.UPPER:
            self._pos[axis] = np.concatenate((pos, pos[-1] + np.cumsum(steps)))
        else:
            self._pos[axis] = np.concatenate(((pos[0] - np.cumsum(steps))[::-1], pos))

    def copy(self) -> Grid:
        return copy.deepcopy(self)

    def _as_index_vector(self, value: npt.ArrayLike) -> npt.NDArray[np.int64]:
        arr = np.asarray(value, dtype=np.int64).ravel()
        if arr.size == 1:
            arr = np.repeat(arr, self._dimension)
        if arr.size != self._dimension:
            raise InvalidGridError(f"Offset must have {self._dimension} components, got {arr.size}.")
        return arr

    # ------------------------------------------------------------------
    # Basic accessors
    # ------------------------------------------------------------------
    def __repr__(self) -> str:
        return (f"{self.__class__.__name__}(dimension={self._dimension}, "
                f"cells={self.get_num_cells().tolist()}, offset={self._offset.tolist()})")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Grid):
            return NotImplemented
        return (self._dimension == other._dimension
                and np.array_equal(self._offset, other._offset)
                and all(np.array_equal(a, b) for a, b in zip(self._pos, other._pos)))

    @property
    def dimension(self) -> int:
        return self._dimension

    @property
    def tolerance(self) -> float:
        return self._tolerance

    def get_num_cells(self) -> npt.NDArray[np.int64]:
        return np.array([len(p) - 1 for p in self._pos], dtype=np.int64)

    def get_offset(self) -> npt.NDArray[np.int64]:
        return self._offset.copy()

    def get_origin(self) -> npt.NDArray[np.float64]:
        return np.array([p[0] for p in self._pos], dtype=np.float64)

    def has_zero_size(self) -> bool:
        """True when every axis consists of a single cell."""
        return bool(np.all(self.get_num_cells() == 1))

    def get_pos(self, axis: int) -> npt.NDArray[np.float64]:
        """Vertex coordinates of one axis (a copy)."""
        return self._pos[axis].copy()

    def get_pos_at(self, axis: int, index: int) -> float:
        """Coordinate of the vertex with the given global index."""
        return float(self._pos[axis][self._local_index(axis, index)])

    def get_vertex(self, ijk: npt.ArrayLike) -> npt.NDArray[np.float64]:
        """Real coordinates of the vertex with the given global indices."""
        ijk = np.asarray(ijk, dtype=np.int64)
        return np.array([self._pos[d][self._local_index(d, ijk[d])] for d in range(self._dimension)])

    def get_all_positions(self) -> npt.NDArray[np.float64]:
        """
        Every grid vertex as an (N, D) array, last axis varying fastest.
        """
        mesh = np.meshgrid(*self._pos, indexing="ij")
        return np.stack([m.ravel() for m in mesh], axis=-1)

    def get_step(self, axis: int) -> npt.NDArray[np.float64]:
        return np.diff(self._pos[axis])

    def get_step_at(self, axis: int, n: int) -> float:
        """Width of the cell with local index ``n``."""
        pos = self._pos[axis]
        if not 0 <= n < len(pos) - 1:
            raise IndexError(f"Cell {n} out of range on axis {axis} ({len(pos) - 1} cells).")
        return float(pos[n + 1] - pos[n])

    def get_minimum_space_step(self) -> float:
        """Smallest step over all axes, the stability bound of explicit solvers."""
        return float(min(np.min(self.get_step(d)) for d in range(self._dimension)))

    def _local_index(self, axis: int, index: int) -> int:
        local = int(index) - int(self._offset[axis])
        if not 0 <= local < len(self._pos[axis]):
            raise IndexError(f"Vertex {index} out of range on axis {axis} "
                             f"(valid: {self._offset[axis]}..{self._offset[axis] + len(self._pos[axis]) - 1}).")
        return local

    # ------------------------------------------------------------------
    # Bounding volumes
    # ------------------------------------------------------------------
    def get_full_domain_bounding_box(self) -> Box:
        return self.get_bounding_box(self.get_full_domain_bounding_cell_box())

    def get_full_domain_bounding_cell_box(self) -> Box:
        return Box(self._offset.copy(), self._offset + self.get_num_cells())

    def get_bounding_box(self, cell_box: Box) -> Box:
        """Real box spanned by an integer (global index) box."""
        return Box(self.get_vertex(cell_box.min), self.get_vertex(cell_box.max))

    def get_cell_box_containing(self, point: npt.ArrayLike) -> Box:
        """
        Integer box of the single cell containing a point.

        A point on the upper face of an axis belongs to the last cell.
        """
        lower = self.get_cells(point, approx=False)
        lower = np.minimum(lower, self._offset + self.get_num_cells() - 1)
        return Box(lower, lower + 1)

    def get_box_containing(self, point: npt.ArrayLike) -> Box:
        return self.get_bounding_box(self.get_cell_box_containing(point))

    def get_cell_box(self, box: Box, approx: bool = True) -> Box:
        """
        Nearest integer box bounding a real box.

        Args:
            box: Real box.
            approx: Also snap corners just below a vertex (see ``get_cell_pair``).

        Returns:
            Integer box (global indices) of the cells the corners fall into.
        """
        return Box(self.get_cells(box.min, approx=approx), self.get_cells(box.max, approx=approx))

    # ------------------------------------------------------------------
    # Point <-> cell lookup
    # ------------------------------------------------------------------
    def get_cell_pair(self, axis: int, x: float, approx: bool = True, tol: Optional[float] = None) -> CellPair:
        """
        Locate a coordinate along one axis.

        Args:
            axis: Axis index.
            x: Coordinate to locate.
            approx: Move a fraction within ``APPROX_SNAP_TOLERANCE`` of 1.0
                onto the next vertex. Fractions within ``tol`` of a vertex are
                snapped regardless.
            tol: Relative tolerance, the grid tolerance by default.

        Returns:
            CellPair with the global cell index and the fractional offset in the
            cell. Points outside the axis are clamped to the first or last cell,
            with a fraction outside [0, 1) and ``out_of_range`` set.
        """
        tol = self._tolerance if tol is None else tol
        pos = self._pos[axis]
        offset = int(self._offset[axis])
        first_step = pos[1] - pos[0]
        last_step = pos[-1] - pos[-2]

        if tolerant_less(x, pos[0], first_step, tol):
            return CellPair(offset, safe_ratio(x - pos[0], first_step), True)

        # pos[i - 1] < x <= pos[i]
        i = int(np.searchsorted(pos, x, side="left"))

        if i > 0 and tolerant_equal(x, pos[i - 1], self._left_step(pos, i - 1), tol):
            return CellPair(i - 1 + offset, 0.0, False)

        if i < len(pos):
            step = self._left_step(pos, i)
            if tolerant_equal(x, pos[i], step, tol):
                return CellPair(i + offset, 0.0, False)
            cell = i - 1 + offset
            dist = safe_ratio(x - pos[i - 1], step)
            if approx and tolerant_equal(dist, 1.0, 1.0, APPROX_SNAP_TOLERANCE):
                cell += 1
                dist = 0.0
            return CellPair(cell, dist, False)

        return CellPair(len(pos) - 2 + offset, safe_ratio(x - pos[-1], last_step), True)

    @staticmethod
    def _left_step(pos: npt.NDArray[np.float64], i: int) -> float:
        """Step of the cell ending at vertex ``i`` (the first cell for ``i == 0``)."""
        if i == 0:
            return float(pos[1] - pos[0])
        return float(pos[i] - pos[i - 1])

    def get_cell_pairs(self, point: npt.ArrayLike, approx: bool = True, tol: Optional[float] = None) -> CellPairs:
        """Locate a point on every axis; ``out_of_range`` is set if any axis is outside."""
        point = np.asarray(point, dtype=np.float64)
        cells = np.empty(self._dimension, dtype=np.int64)
        distances = np.empty(self._dimension, dtype=np.float64)
        out_of_range = False
        for d in range(self._dimension):
            cells[d], distances[d], err = self.get_cell_pair(d, point[d], approx, tol)
            out_of_range = out_of_range or err
        return CellPairs(cells, distances, out_of_range)

    def get_cell(self, axis: int, x: float, approx: bool = True, tol: Optional[float] = None) -> int:
        return self.get_cell_pair(axis, x, approx, tol).cell

    def get_cells(self, point: npt.ArrayLike, approx: bool = True, tol: Optional[float] = None) -> npt.NDArray[np.int64]:
        return self.get_cell_pairs(point, approx, tol).cells

    def get_fractional(self, point: npt.ArrayLike) -> tuple[FractionalCell, bool]:
        """
        Fractional address of a point, used to interpolate fields at arbitrary locations.

        Args:
            point: Real coordinates.

        Returns:
            The address and whether the point lies inside the domain. When it
            does not, the address is only filled up to the first outside axis.
        """
        point = np.asarray(point, dtype=np.float64)
        cell = self._offset.copy()
        fraction = np.zeros(self._dimension, dtype=np.float64)
        for d in range(self._dimension):
            pos = self._pos[d]
            x = point[d]
            if x <= pos[0]:
                if not tolerant_equal(x, pos[0], self._left_step(pos, 0), self._tolerance):
                    return FractionalCell(cell, fraction), False
                cell[d] = self._offset[d]
            elif x >= pos[-1]:
                if not tolerant_equal(x, pos[-1], self._left_step(pos, len(pos) - 1), self._tolerance):
                    return FractionalCell(cell, fraction), False
                cell[d] = self._offset[d] + len(pos) - 1
            else:
                local = int(np.searchsorted(pos, x, side="right")) - 1
                cell[d] = self._offset[d] + local
                fraction[d] = (x - pos[local]) / (pos[local + 1] - pos[local])
        return FractionalCell(cell, fraction), True

    def get_pos_in_range(self, axis: int, lower: float, upper: float) -> npt.NDArray[np.float64]:
        """Vertices of an axis within ``[lower, upper]``, bounds inclusive under tolerance."""
        pos = self._pos[axis]
        steps = np.diff(pos)
        scale = np.append(steps, steps[-1])
        tol = self._tolerance
        mask = ((np.abs(pos - lower) <= tol * np.abs(scale))
                | ((pos >= lower) & (pos <= upper))
                | (np.abs(pos - upper) <= tol * np.abs(scale)))
        return pos[mask]

    def get_center_of_cells_inside(self, box: Box) -> npt.NDArray[np.float64]:
        """
        Centres of the cells lying inside a box, as an (N, D) array.

        Used to enumerate output sampling points.
        """
        centers = []
        for d in range(self._dimension):
            pos = self.get_pos_in_range(d, float(box.min[d]), float(box.max[d]))
            centers.append(0.5 * (pos[:-1] + pos[1:]))
        if any(c.size == 0 for c in centers):
            return np.empty((0, self._dimension), dtype=np.float64)
        mesh = np.meshgrid(*centers, indexing="ij")
        return np.stack([m.ravel() for m in mesh], axis=-1)

    def is_into(self, axis: int, x: float) -> bool:
        pos = self._pos[axis]
        return bool(pos[0] <= x <= pos[-1])

    def is_into_point(self, point: npt.ArrayLike) -> bool:
        return all(self.is_into(d, point[d]) for d in range(self._dimension))

    # ------------------------------------------------------------------
    # Regularity and shape queries
    # ------------------------------------------------------------------
    def is_regular(self, axis: Optional[int] = None) -> bool:
        """
        Whether steps are constant, on one axis or (``axis=None``) on all of them.
        """
        if axis is None:
            return all(self.is_regular(d) for d in range(self._dimension))
        step = self.get_step(axis)
        return not any(tolerant_not_equal(s, step[0], step[0], self._tolerance) for s in step[1:])

    def is_cartesian(self) -> bool:
        """Whether every step of every axis equals the first step of axis 0."""
        canon = self.get_step(0)[0]
        for d in range(self._dimension):
            if any(tolerant_not_equal(s, canon, canon, self._tolerance) for s in self.get_step(d)):
                return False
        return True

    def is_cell(self, point: npt.ArrayLike, tol: Optional[float] = None) -> bool:
        """Whether a point lies on a grid vertex, within the vertex tolerance."""
        return bool(np.all(self.get_cell_pairs(point, approx=False, tol=tol).distances == 0.0))

    def are_cells(self, points: Sequence[npt.ArrayLike], tol: Optional[float] = None) -> bool:
        return all(self.is_cell(p, tol) for p in points)

    # ------------------------------------------------------------------
    # Global operations
    # ------------------------------------------------------------------
    def apply_scaling_factor(self, factor: float) -> None:
        """
        Multiply every position by a factor (unit conversion). Offsets are kept.

        Raises:
            InvalidGridError: If the factor is not positive.
        """
        if factor <= 0.0:
            raise InvalidGridError(f"Scaling factor must be positive, got {factor}.")
        self._pos = [p * factor for p in self._pos]

    def enlarge(
        self,
        padding: tuple[npt.ArrayLike, npt.ArrayLike],
        sizes: tuple[npt.ArrayLike, npt.ArrayLike],
    ) -> None:
        """
        Pad the lower and upper bound of every axis.

        Args:
            padding: (lower, upper) padding distances, one value per axis each.
            sizes: (lower, upper) outermost cell sizes, one value per axis each.
        """
        shape = (self._dimension,)
        pads = [np.broadcast_to(np.asarray(padding[b], dtype=np.float64), shape) for b in Bound]
        cell_sizes = [np.broadcast_to(np.asarray(sizes[b], dtype=np.float64), shape) for b in Bound]
        for d in range(self._dimension):
            for b in Bound:
                self.enlarge_bound(d, b, float(pads[b][d]), float(cell_sizes[b][d]))

    def enlarge_bound(self, axis: int, bound: Bound, pad: float, size: float) -> bool:
        """
        Extend one bound of an axis by a padding distance.

        The existing boundary cell grows (or shrinks) geometrically to ``size``;
        when it already has that size, equal cells are added instead.

        Args:
            axis: Axis to pad.
            bound: Bound to extend.
            pad: Distance to add.
            size: Size of the outermost cell. Zero reuses the boundary step.

        Raises:
            NonConvergenceError: If the progression ratio cannot be found.

        Returns:
            True if cells were added.
        """
        bound = Bound(bound)
        if pad == 0.0:
            return False
        if abs(size) > abs(pad):
            logger.warning(f"Padding size {size} is larger than padding {pad}. "
                           f"Ignoring padding on axis {axis}, bound {bound.name}.")
            return False

        n_cells = len(self._pos[axis]) - 1
        boundary_step = self.get_step_at(axis, 0 if bound == Bound.LOWER else n_cells - 1)
        size = abs(size) if size != 0.0 else boundary_step
        if size == 0.0:
            logger.warning(f"Zero-thickness axis {axis} cannot be padded without a cell size.")
            return False

        if boundary_step == 0.0 or tolerant_equal(boundary_step, size, size, self._tolerance):
            new_steps = uniform_padding_steps(pad, size)
        else:
            new_steps = geometric_padding_steps(boundary_step, pad, size)

        logger.debug(f"Padding axis {axis} {bound.name} by {pad} with {new_steps.size} cells.")
        self.set_additional_steps(axis, bound, new_steps)
        return True

    def log_info(self) -> None:
        """Log a summary of the grid at INFO level."""
        bound = self.get_full_domain_bounding_box()
        logger.info(f"-- Cartesian Grid<{self._dimension}> --")
        logger.info(f"Offset: {self._offset.tolist()}")
        logger.info(f"Dims: {self.get_num_cells().tolist()}")
        logger.info(f"Min val: {bound.min.tolist()}")
        logger.info(f"Max val: {bound.max.tolist()}")

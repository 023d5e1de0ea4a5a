"""
Boundary Padding Synthesis
==========================
Computes the widths of the cells added when an axis bound is pushed outward.

Why is this file needed?
------------------------
1. Smoothness: Absorbing boundary regions are thickened without a sharp jump
   in cell size, which would degrade the accuracy of the field solver.
2. Root solve: The ratio of the geometric progression is the root of a
   transcendental equation, solved here with a bounded Newton iteration.

Functions:
    uniform_padding_steps: Equal cells of a given width.
    geometric_padding_steps: Progression from the boundary step to a target size.
    solve_progression_ratio: Newton solve of the progression ratio.
"""
from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING

import numpy as np

from emgrid.config import (
    NEWTON_MAX_ITERATIONS,
    NEWTON_RESIDUAL_TOLERANCE,
    PADDING_CEIL_TOLERANCE,
)
from emgrid.math_utils import tolerant_ceil, tolerant_equal
from emgrid.model.errors import NonConvergenceError

if TYPE_CHECKING:
    import numpy.typing as npt

logger = logging.getLogger(__name__)


def uniform_padding_steps(pad: float, size: float) -> npt.NDArray[np.float64]:
    """
    Equal-width cells covering a padding distance.

    Args:
        pad: Padding distance.
        size: Width of every added cell.

    Returns:
        Array of ``ceil(pad / size)`` widths equal to ``size``.
    """
    pad, size = abs(pad), abs(size)
    n_cells = max(tolerant_ceil(pad / size, PADDING_CEIL_TOLERANCE), 1)
    return np.full(n_cells, size, dtype=np.float64)


def _progression_residual(ratio: float, first: float, n_terms: int, target_sum: float) -> tuple[float, float]:
    """Residual and derivative of ``first * (1 - r^n) / (1 - r) - target_sum``.

    Evaluated as the explicit series so that ``r == 1`` is not singular.
    """
    k = np.arange(n_terms, dtype=np.float64)
    f = first * np.sum(ratio ** k) - target_sum
    df = first * np.sum(k[1:] * ratio ** (k[1:] - 1.0))
    return float(f), float(df)


def solve_progression_ratio(
    first: float,
    n_terms: int,
    target_sum: float,
    initial_ratio: float,
    max_iterations: int = NEWTON_MAX_ITERATIONS,
    residual_tol: float = NEWTON_RESIDUAL_TOLERANCE,
) -> float:
    """
    Find the ratio ``r`` of a geometric series with a prescribed sum.

    Solves ``f(r) = first * (1 - r^n) / (1 - r) - target_sum = 0`` by Newton
    iteration ``r <- r - f(r) / f'(r)``. The series is convex and increasing
    in ``r > 0``, so the iterates stay positive.

    Args:
        first: First term of the series.
        n_terms: Number of terms ``n``.
        target_sum: Required sum of the ``n`` terms.
        initial_ratio: Starting guess.
        max_iterations: Iteration cap.
        residual_tol: Convergence threshold relative to ``target_sum``.

    Raises:
        NonConvergenceError: If the cap is reached or the derivative vanishes.

    Returns:
        The converged ratio.
    """
    ratio = initial_ratio
    for iteration in range(max_iterations):
        f, df = _progression_residual(ratio, first, n_terms, target_sum)
        if tolerant_equal(f, 0.0, target_sum, residual_tol):
            logger.debug(f"Progression ratio {ratio:.12g} converged after {iteration} iterations.")
            return ratio
        if df == 0.0:
            raise NonConvergenceError(
                f"Zero derivative at ratio {ratio} while solving padding progression "
                f"(first={first}, n={n_terms}, sum={target_sum})."
            )
        ratio = ratio - f / df

    raise NonConvergenceError(
        f"Padding progression ratio did not converge in {max_iterations} iterations "
        f"(first={first}, n={n_terms}, sum={target_sum}, last ratio={ratio})."
    )


def geometric_padding_steps(
    boundary_step: float,
    pad: float,
    size: float,
    max_iterations: int = NEWTON_MAX_ITERATIONS,
) -> npt.NDArray[np.float64]:
    """
    Cell widths growing (or shrinking) geometrically from the boundary step to ``size``.

    The series ``t0, t0 r, ..., t0 r^(n-1)`` starts with the existing boundary
    cell ``t0`` and is followed by a final cell of exactly ``size``; the added
    widths ``t0 r .. t0 r^(n-1), size`` sum to ``pad``.

    The progression total is ``pad + t0``, not ``pad + t0 + size``: the
    outermost ``size`` cell is counted inside ``pad``, so the series target
    is ``pad + t0 - size`` and the axis grows by exactly ``pad``. With the
    larger total the extension would overshoot by ``size``.

    Args:
        boundary_step: Width ``t0`` of the existing boundary cell.
        pad: Padding distance to cover.
        size: Width of the outermost cell.
        max_iterations: Newton iteration cap.

    Raises:
        NonConvergenceError: If the ratio solve fails.

    Returns:
        The added widths ordered from the existing boundary outward.
    """
    t0, pad, size = abs(boundary_step), abs(pad), abs(size)
    total = pad + t0
    progression_sum = total - size

    r0 = (total - t0) / progression_sum
    n_terms = tolerant_ceil(math.log(size / t0) / math.log(r0), PADDING_CEIL_TOLERANCE)

    while n_terms > 1:
        ratio = solve_progression_ratio(t0, n_terms, progression_sum, r0, max_iterations)
        steps = t0 * ratio ** np.arange(1, n_terms, dtype=np.float64)
        overshoot = steps[-1] < size if size < t0 else steps[-1] > size
        if overshoot and n_terms > 2:
            # Too many cells for a monotone transition, retry with one less
            n_terms -= 1
            continue
        logger.debug(f"Geometric padding: ratio={ratio:.6g}, cells={n_terms}.")
        return np.append(steps, size)

    return np.array([size], dtype=np.float64)

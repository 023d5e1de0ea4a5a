"""
Tolerant Comparisons
====================
Floating point equality and ordering relative to a reference scale.

Every boundary decision of the grid goes through these helpers so that all
query paths agree on what "on a vertex" or "below the grid" means. Two
values are equal when ``|lhs - rhs| <= tol * |scale|``; the scale is usually
the local step size, because spacing can vary by orders of magnitude across
a domain.
"""
from __future__ import annotations

import math

from emgrid.config import DEFAULT_TOLERANCE


def tolerant_equal(lhs: float, rhs: float, scale: float = 1.0, tol: float = DEFAULT_TOLERANCE) -> bool:
    """
    Check whether two values are equal within a relative tolerance.

    Args:
        lhs: First value.
        rhs: Second value.
        scale: Reference magnitude the tolerance is relative to.
        tol: Relative tolerance.

    Returns:
        True if ``|lhs - rhs| <= tol * |scale|``.
    """
    return abs(lhs - rhs) <= tol * abs(scale)


def tolerant_not_equal(lhs: float, rhs: float, scale: float = 1.0, tol: float = DEFAULT_TOLERANCE) -> bool:
    return not tolerant_equal(lhs, rhs, scale, tol)


def tolerant_less(lhs: float, rhs: float, scale: float = 1.0, tol: float = DEFAULT_TOLERANCE) -> bool:
    """True if ``lhs`` is below ``rhs`` by more than the tolerance."""
    return lhs < rhs and not tolerant_equal(lhs, rhs, scale, tol)


def tolerant_greater(lhs: float, rhs: float, scale: float = 1.0, tol: float = DEFAULT_TOLERANCE) -> bool:
    """True if ``lhs`` is above ``rhs`` by more than the tolerance."""
    return lhs > rhs and not tolerant_equal(lhs, rhs, scale, tol)


def tolerant_less_equal(lhs: float, rhs: float, scale: float = 1.0, tol: float = DEFAULT_TOLERANCE) -> bool:
    return not tolerant_greater(lhs, rhs, scale, tol)


def tolerant_greater_equal(lhs: float, rhs: float, scale: float = 1.0, tol: float = DEFAULT_TOLERANCE) -> bool:
    return not tolerant_less(lhs, rhs, scale, tol)


def tolerant_ceil(value: float, tol: float) -> int:
    """
    Ceiling that ignores an excess over an integer smaller than ``tol``.

    Args:
        value: Number to round up.
        tol: Absolute slack; ``4.005`` with ``tol=0.01`` gives ``4``.

    Returns:
        The rounded integer.
    """
    nearest = round(value)
    if abs(value - nearest) <= tol:
        return int(nearest)
    return math.ceil(value)


def safe_ratio(numerator: float, denominator: float) -> float:
    """Division returning 0.0 for a zero denominator (zero-thickness axes)."""
    if denominator == 0.0:
        return 0.0
    return numerator / denominator

"""
Grid Errors
===========
Exceptions raised while building or mutating a grid.

Query-time boundary problems are never raised; lookups report them through
an ``out_of_range`` flag instead.
"""


class GridError(Exception):
    """Base class for all grid engine errors."""


class InvalidGridError(GridError, ValueError):
    """Raised when positions, steps or cell counts cannot form a valid grid."""


class NonConvergenceError(GridError, RuntimeError):
    """Raised when the padding ratio solve does not converge."""

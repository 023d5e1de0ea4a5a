"""
Configuration & Global Constants
================================
This module serves as the central registry for the numerical constants of
the grid engine.

Why is this file needed?
------------------------
1. Abstraction: It prevents magic numbers (tolerances, iteration caps)
   from being scattered throughout the code.
2. Defaults: Grids take their tolerance as an explicit constructor argument;
   the value below is only the default used when none is given.

Exports:
    DEFAULT_TOLERANCE (float): Relative tolerance for position comparisons.
    APPROX_SNAP_TOLERANCE (float): Slack below 1.0 of an in-cell fraction
        moved onto the next vertex by approximate lookups.
    PADDING_CEIL_TOLERANCE (float): Absolute slack when counting padding cells.
    NEWTON_MAX_ITERATIONS (int): Iteration cap of the padding ratio solve.
    NEWTON_RESIDUAL_TOLERANCE (float): Relative residual accepted as converged.
"""

# Relative to the local step size, so it works for any unit system.
DEFAULT_TOLERANCE: float = 1e-2

# Coarser than DEFAULT_TOLERANCE; fractions within the vertex tolerance are
# already reported as vertices.
APPROX_SNAP_TOLERANCE: float = 5e-2

PADDING_CEIL_TOLERANCE: float = 0.01

NEWTON_MAX_ITERATIONS: int = 100
NEWTON_RESIDUAL_TOLERANCE: float = 1e-10

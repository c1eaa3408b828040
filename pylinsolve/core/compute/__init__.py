"""
Shared compute infrastructure for pylinsolve.

This module provides timing utilities, numerical constants and the linear
algebra kernels shared by all decompositions.

IMPORTANT: This is NOT where the decompositions live. Those go in
pylinsolve.decomposition. This module contains shared NUMERIC infrastructure.

Submodules:
    timing: Execution timing utilities
    tolerances: Numerical constants and tolerance tiers
    linalg: In-place row/column kernels
"""

from pylinsolve.core.compute.timing import Timer
from pylinsolve.core.compute.tolerances import (
    DOUBLE_EPSILON,
    LU_PIVOT_SENTINEL,
    SVD_MAX_ITERATIONS,
    ToleranceTier,
    select_tolerance,
)

__all__ = [
    # Timing
    "Timer",
    # Constants
    "DOUBLE_EPSILON",
    "LU_PIVOT_SENTINEL",
    "SVD_MAX_ITERATIONS",
    "ToleranceTier",
    "select_tolerance",
]

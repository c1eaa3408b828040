"""
Numerical constants and tolerance tiers.

Single home for the magic numbers the solvers depend on:
- DOUBLE_EPSILON: spacing of doubles near 1.0, used for the SVD
  convergence test and default singular value threshold
- LU_PIVOT_SENTINEL: value substituted for an exactly-zero LU pivot
- SVD_MAX_ITERATIONS: QR sweep cap per singular value

The tolerance tiers describe how closely a computed solution is expected to
match the true one. They are used by the test suite.
"""

from dataclasses import dataclass

import numpy as np


# Smallest double e such that 1.0 + e != 1.0
DOUBLE_EPSILON = float(np.finfo(np.float64).eps)

# Replaces an exactly-zero LU pivot. Its reciprocal (1e40) is used as the
# multiplier for the rows below.
LU_PIVOT_SENTINEL = 1e-40

# Implicit-shift QR sweeps allowed per singular value before giving up
SVD_MAX_ITERATIONS = 30


@dataclass(frozen=True)
class ToleranceTier:
    """Tolerance specification for numerical comparison."""
    rtol: float
    atol: float
    name: str
    description: str


# Small, well-conditioned systems solved by elimination or QR
WELL_CONDITIONED = ToleranceTier(
    rtol=1e-10,
    atol=1e-12,
    name='well_conditioned',
    description='double precision, cond < 1e4',
)

# Ill-conditioned systems (cond > 1e4): error grows with the condition number
ILL_CONDITIONED = ToleranceTier(
    rtol=1e-4,
    atol=1e-6,
    name='ill_conditioned',
    description='double precision, cond > 1e4',
)

# SVD accumulates slightly more rounding than elimination
SVD = ToleranceTier(
    rtol=1e-9,
    atol=1e-11,
    name='svd',
    description='singular value decomposition, cond < 1e4',
)

# Condition number above which a system is treated as ill-conditioned
ILL_CONDITION_THRESHOLD = 1e4


def select_tolerance(
    method: str,
    is_ill_conditioned: bool = False,
) -> ToleranceTier:
    """Select appropriate tolerance tier for a given solver method."""
    if is_ill_conditioned:
        return ILL_CONDITIONED
    if method == 'svd':
        return SVD
    return WELL_CONDITIONED

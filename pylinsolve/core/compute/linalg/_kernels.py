"""
Row/column kernels shared by the decompositions.

All functions operate in place on raw float64 ndarrays (the backing storage
of a Matrix), never on Matrix objects, so the decompositions can work on
their private buffers without bounds-checking overhead.
"""

from __future__ import annotations

import numpy as np
from numpy.typing import NDArray


def with_sign(value: float, sign: float) -> float:
    """
    Return a value with the magnitude of `value` and the sign of `sign`.

    A zero `sign` (including -0.0) counts as positive, unlike np.copysign.
    """
    magnitude = abs(value)
    return -magnitude if sign < 0 else magnitude


def backsubstitute(ut: NDArray[np.float64], values: NDArray[np.float64]) -> None:
    """
    Solve U·x = values in place for upper-triangular U.

    Only the upper triangle (diagonal included) of `ut` is read, so packed
    storage such as an LU matrix can be passed directly.

    Args:
        ut: Square matrix whose upper triangle holds U (n x n)
        values: Right-hand side, (n,) or (n, k); overwritten with x
    """
    n = ut.shape[0]
    for i in range(n - 1, -1, -1):
        total = values[i] - ut[i, i + 1:] @ values[i + 1:]
        values[i] = total / ut[i, i]


def pre_jacobi_rotation(
    matrix: NDArray[np.float64],
    i: int,
    cos: float,
    sin: float,
    start: int = 0,
) -> None:
    """
    Rotate rows i and i+1 of a matrix (left multiplication by a Jacobi
    rotation), touching columns start.. only.
    """
    a = matrix[i, start:].copy()
    b = matrix[i + 1, start:]
    matrix[i, start:] = cos * a - sin * b
    matrix[i + 1, start:] = sin * a + cos * b


def post_jacobi_rotation(
    matrix: NDArray[np.float64],
    column1: int,
    column2: int,
    cos: float,
    sin: float,
) -> None:
    """
    Rotate two columns of a matrix (right multiplication by a Jacobi
    rotation).
    """
    a = matrix[:, column1].copy()
    b = matrix[:, column2].copy()
    matrix[:, column1] = cos * a - sin * b
    matrix[:, column2] = cos * b + sin * a

"""
pytest configuration and shared fixtures.
"""

import pytest
import numpy as np


@pytest.fixture
def rng():
    """Seeded random number generator for reproducible tests."""
    return np.random.default_rng(42)


@pytest.fixture
def worked_example():
    """
    2x + 3y + 4z = 20
    3x + 4y + 5z = 26
     x - 2y + 2z = 3
    with solution (1, 2, 3).
    """
    A = np.array([[2.0, 3.0, 4.0], [3.0, 4.0, 5.0], [1.0, -2.0, 2.0]])
    b = np.array([20.0, 26.0, 3.0])
    x = np.array([1.0, 2.0, 3.0])
    return A, b, x


@pytest.fixture
def four_by_four():
    """A 4x4 system whose solution is (-1, 2, -3, 4)."""
    A = np.array([
        [1.0, -2.0, 3.0, -5.0],
        [1.0, 2.0, 3.0, 5.0],
        [5.0, -3.0, 2.0, -1.0],
        [5.0, 3.0, 2.0, 1.0],
    ])
    x = np.array([-1.0, 2.0, -3.0, 4.0])
    b = A @ x
    return A, b, x


@pytest.fixture
def degenerate():
    """
    Rank-2 3x3 system (row 3 = 4·row 1 - row 2) with a consistent right-hand
    side. The null space is spanned by (1, -2, 1), which is orthogonal to
    (1, 2, 3), so (1, 2, 3) is the minimum-norm solution.
    """
    A = np.array([[1.0, 1.0, 1.0], [1.0, 2.0, 3.0], [3.0, 2.0, 1.0]])
    b = np.array([6.0, 14.0, 10.0])
    return A, b


@pytest.fixture
def well_conditioned(rng):
    """Random diagonally dominant 6x6 matrix, safely non-singular."""
    n = 6
    A = rng.standard_normal((n, n)) + n * np.eye(n)
    return A


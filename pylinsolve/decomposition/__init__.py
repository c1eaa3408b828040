"""
Matrix decompositions for solving systems of linear equations.

Four interchangeable solvers, all satisfying the LinearEquationSolver
protocol:

    GaussJordan: Full-pivoting elimination; yields the inverse for free
    LUDecomposition: Scaled partial pivoting; determinant, refinement
    QRDecomposition: Householder reflections; O(n²) rank-one updates
    SVDecomposition: Rank-revealing; least-squares and null spaces

Usage:
    from pylinsolve.decomposition import LUDecomposition

    lu = LUDecomposition(A)
    x = lu.solve(b)
"""

from pylinsolve.decomposition._common import DecompositionState
from pylinsolve.decomposition.gauss_jordan import GaussJordan
from pylinsolve.decomposition.lu import LUDecomposition
from pylinsolve.decomposition.qr import QRDecomposition
from pylinsolve.decomposition.svd import SVDecomposition

__all__ = [
    "DecompositionState",
    "GaussJordan",
    "LUDecomposition",
    "QRDecomposition",
    "SVDecomposition",
]

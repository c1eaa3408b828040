"""
pylinsolve: dense linear algebra solvers for Python.

Four interchangeable ways to solve A·x = b over real matrices, each with
its own trade-offs:

    GaussJordan: full pivoting, produces the inverse as a by-product
    LUDecomposition: fast, many right-hand sides, determinant, refinement
    QRDecomposition: cheap rank-one updates of the decomposed matrix
    SVDecomposition: any shape or rank; rank, range, null space,
        pseudoinverse and least-squares solutions

Submodules:
    core: Matrix/Vector storage, exceptions, validation, kernels
    decomposition: The four solvers
    systems: solve(A, b) from plain arrays with automatic method selection
"""

__version__ = "0.1.0"

from pylinsolve.core import (
    Matrix,
    Vector,
    LinearEquationSolver,
    PyLinSolveError,
    ValidationError,
    DimensionError,
    NumericalError,
    SingularMatrixError,
    ConvergenceError,
    NotInitializedError,
)
from pylinsolve.decomposition import (
    DecompositionState,
    GaussJordan,
    LUDecomposition,
    QRDecomposition,
    SVDecomposition,
)
from pylinsolve.systems import solve, SystemSolution

__all__ = [
    "__version__",
    # Storage
    "Matrix",
    "Vector",
    # Solvers
    "LinearEquationSolver",
    "DecompositionState",
    "GaussJordan",
    "LUDecomposition",
    "QRDecomposition",
    "SVDecomposition",
    # High-level API
    "solve",
    "SystemSolution",
    # Exceptions
    "PyLinSolveError",
    "ValidationError",
    "DimensionError",
    "NumericalError",
    "SingularMatrixError",
    "ConvergenceError",
    "NotInitializedError",
]
